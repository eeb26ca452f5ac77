"""
End-to-end tests through the public API (``desa_profile.load`` /
``desa_profile.open``), with retrieval replaced by a fake fetcher or a
monkeypatched ``requests.get``.
"""

from __future__ import annotations

import pytest
import requests

import desa_profile
from desa_profile import fetch as fetch_mod
from desa_profile.config import SheetsConfig, SourceConfig, default_config, save_config
from desa_profile.exceptions import AggregateFetchError
from desa_profile.export import export_profiles

pytestmark = pytest.mark.integration

KUNTANG_CSV = "\n".join([
    "Deskripsi,,,Profil,,,Sekolah,Alamat",
    "Desa Kuntang,,,Luas,120 ha,,,",
    *[""] * 11,
    ",,,,,,,,,Konflik lahan,,",
])


def _fake_fetch(csv_by_name):
    def fetch_text(source: SourceConfig) -> str:
        return csv_by_name[source.name]
    return fetch_text


class TestLoad:

    def test_default_config_with_fake_fetch(self, sample_csv):
        texts = {"Kampangar": sample_csv, "Kuntang": KUNTANG_CSV, "Pulo Dua": ""}
        registry = desa_profile.load(fetch_text=_fake_fetch(texts))

        assert registry.names == ["Kampangar", "Kuntang", "Pulo Dua"]

        kampangar = registry.select(0)
        assert kampangar.school.name == "SDN 1 Kampangar"

        kuntang = registry.select(1)
        assert kuntang.description == "Desa Kuntang"
        assert kuntang.school.name == ""
        assert kuntang.category("Soshum").issues == ("Konflik lahan",)
        assert kuntang.category("Saintek").is_empty

        pulo_dua = registry.select(2)
        assert pulo_dua.description == ""
        assert len(pulo_dua.categories) == 4

        assert registry.select(3) is None

    def test_reloading_gives_equal_profiles(self, sample_csv):
        cfg = SheetsConfig(sources=[SourceConfig(name="Kampangar")])
        first = desa_profile.load(cfg, fetch_text=lambda s: sample_csv)
        second = desa_profile.load(cfg, fetch_text=lambda s: sample_csv)
        assert first.select(0) == second.select(0)

    def test_decode_text_matches_load(self, sample_csv):
        cfg = SheetsConfig(sources=[SourceConfig(name="Kampangar")])
        registry = desa_profile.load(cfg, fetch_text=lambda s: sample_csv)
        assert desa_profile.decode_text(sample_csv) == registry.select(0)

    def test_http_failure_fails_whole_load(self, monkeypatch, sample_csv):
        def fake_get(url, timeout):
            res = requests.Response()
            res.headers["Content-Type"] = "text/csv; charset=utf-8"
            if url.endswith("gid=1348203775"):
                res.status_code, res.reason, res._content = 500, "Internal Server Error", b""
            else:
                res.status_code, res.reason, res._content = 200, "OK", sample_csv.encode("utf-8")
            return res

        monkeypatch.setattr(fetch_mod.requests, "get", fake_get)
        with pytest.raises(AggregateFetchError, match="Kuntang: 500 Internal Server Error"):
            desa_profile.load(default_config())


class TestOpen:

    def test_open_yaml_then_export(self, tmp_path, sample_csv):
        cfg = SheetsConfig(
            sources=[SourceConfig(name="Kampangar", gid="0"), SourceConfig(name="Kuntang", gid="1")],
            fetch_policy="partial",
        )
        cfg_path = tmp_path / "sheets.yaml"
        save_config(cfg, cfg_path)

        def fetch_text(source):
            if source.name == "Kuntang":
                raise RuntimeError("offline")
            return sample_csv

        registry = desa_profile.open(cfg_path, fetch_text=fetch_text)
        assert registry.select(0) is not None
        assert registry.select(1) is None

        written = export_profiles(registry, tmp_path / "out", output_format="csv")
        assert len(written) == 2
