"""
Shared test fixtures for desa-profile tests.

``SAMPLE_SHEET_LINES`` is a synthetic village sheet that follows the
built-in ``village_profile`` layout.  Each list element is one grid
row; the comments give its 0-based row index.
"""

from __future__ import annotations

import pytest

SAMPLE_SHEET_LINES = [
    # 0: headers
    "Deskripsi Singkat Desa,,,Profil Desa,,,List Sekolah,Alamat,,,,",
    # 1: description, first profile item, school
    '"Desa Kampangar terletak di pesisir, Kabupaten Situbondo.",,,Luas Wilayah,245 ha,,'
    "SDN 1 Kampangar,Jl. Raya Kampangar No. 1,,,,",
    # 2
    ',,,Jumlah Penduduk,"3.120 jiwa",,,,,,,',
    # 3: blank title, body present -> item skipped
    ",,,   ,ada isi tanpa judul,,,,,,,",
    # 4
    ",,,Mata Pencaharian,Petani dan nelayan,,,,,,,",
    # 5: body with an embedded newline
    ',,,Batas Wilayah,"Utara: Selat Madura\nSelatan: Desa Kilensari",,,,,,,',
    # 6: title without body
    ",,,Kepala Desa,,,,,,,,",
    # 7, 8
    ",,,,,,,,,,,",
    ",,,,,,,,,,,",
    # 9: blank physical line, still counts as a row
    "",
    # 10, 11
    ",,,,,,,,,,,",
    ",,,,,,,,,,,",
    # 12: category headers
    "SAINTEK,,,AGRO,,,KESRA,,,SOSHUM,,",
    # 13
    "Sampah plastik, Bank sampah,Pelatihan daur ulang,Irigasi rusak,Lahan sawah luas,"
    "Perbaikan irigasi,Stunting,Posyandu aktif,Kelas gizi,Pernikahan dini,Karang taruna,Sosialisasi",
    # 14: only the Saintek potentials column
    ",Panel surya,,,,,,,,,,",
    # 15
    "  ,,Aplikasi desa,Hama tikus,,,,,,,,Pelatihan UMKM",
]

# Google Sheets exports use CRLF line endings
SAMPLE_SHEET_CSV = "\r\n".join(SAMPLE_SHEET_LINES) + "\r\n"


@pytest.fixture
def sample_csv() -> str:
    return SAMPLE_SHEET_CSV


@pytest.fixture
def sample_grid():
    from desa_profile.tokenizer import tokenize
    return tokenize(SAMPLE_SHEET_CSV)


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs the full pipeline)",
    )
