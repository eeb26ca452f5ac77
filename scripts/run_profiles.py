"""
Demo script: load every village sheet via the public API and export it.

Usage:
    uv run python scripts/run_profiles.py                    # default sheets
    uv run python scripts/run_profiles.py sheets.yaml        # custom config
    uv run python scripts/run_profiles.py --partial          # keep sources that loaded

Writes profiles.<fmt> plus one grid_<index>_<source>.<fmt> per village under the
config's output directory, and logs a short summary of each profile.
"""

from __future__ import annotations

import logging
import sys

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("run_profiles")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    import desa_profile
    from desa_profile.config import default_config, load_config
    from desa_profile.exceptions import AggregateFetchError
    from desa_profile.export import export_profiles

    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    config = load_config(args[0]) if args else default_config()
    if "--partial" in sys.argv:
        config = config.model_copy(update={"fetch_policy": "partial"})

    try:
        registry = desa_profile.load(config)
    except AggregateFetchError as exc:
        log.error("Gagal memuat data: %s", exc)
        sys.exit(1)

    for index, name in enumerate(registry.names):
        profile = registry.select(index)
        if profile is None:
            log.warning("%-12s  (not loaded)", name)
            continue
        log.info("=" * 70)
        log.info("%s", name)
        log.info("  profile items : %d", len(profile.profile_items))
        log.info("  school        : %s", profile.school.name or "-")
        for cat in profile.categories:
            log.info(
                "  %-12s  issues=%d potentials=%d projects=%d",
                cat.name, len(cat.issues), len(cat.potentials), len(cat.projects),
            )

    written = export_profiles(
        registry,
        config.output.output_dir,
        output_format=config.output.output_format,
    )
    log.info("Wrote %d file(s) to %s", len(written), config.output.output_dir)


if __name__ == "__main__":
    main()
