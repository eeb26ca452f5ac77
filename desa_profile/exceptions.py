"""
Custom exception hierarchy for desa-profile.

The core (tokenizer, decoder, registry selection) is total over its
input and never raises these.  They belong to the surrounding layers:
configuration loading, layout loading, retrieval, registration and
export.
"""


class DesaProfileError(Exception):
    """Base exception for all desa-profile errors."""


class ConfigValidationError(DesaProfileError):
    """Raised when a sheets config file is empty.

    Schema problems (an empty source list, duplicate source names, an
    unknown fetch policy) surface as ``pydantic.ValidationError`` from
    ``SheetsConfig`` instead.
    """


class LayoutError(DesaProfileError):
    """Raised when a layout YAML file is missing or malformed."""


class FetchError(DesaProfileError):
    """Raised when the CSV text for a single source cannot be retrieved."""

    def __init__(self, source_name: str, message: str) -> None:
        super().__init__(message)
        self.source_name = source_name


class AggregateFetchError(DesaProfileError):
    """Raised under the all-or-nothing policy when any source fails.

    Carries every per-source failure so callers can report all of them
    at once rather than only the first one.
    """

    def __init__(self, errors: list[FetchError]) -> None:
        names = ", ".join(e.source_name for e in errors)
        details = "; ".join(str(e) for e in errors)
        super().__init__(
            f"{len(errors)} source(s) failed to load ({names}): {details}"
        )
        self.errors = errors


class RegistryError(DesaProfileError):
    """Raised on an invalid registry write (unknown or already-set source)."""


class ExportError(DesaProfileError):
    """Raised when the exporter fails to write output files."""
