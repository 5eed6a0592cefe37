"""Domain exceptions for the band dynamics engine and its service layer."""


class BandDynamicsError(Exception):
    """Base class for all band dynamics errors."""


class UnknownPresetError(BandDynamicsError, KeyError):
    """A preset key was not found in the drama preset catalog.

    Indicates a mismatch between the catalog and whoever produced the key,
    so it is raised rather than skipped.
    """

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown drama preset: {self.key!r}"


class CatalogError(BandDynamicsError, ValueError):
    """The preset catalog data file is missing or malformed."""


class BandNotFoundError(BandDynamicsError, LookupError):
    def __init__(self, band_id: int):
        super().__init__(f"Band {band_id} not found")
        self.band_id = band_id


class ConcurrentUpdateError(BandDynamicsError):
    """The band row changed between read and write (stale version)."""

    def __init__(self, band_id: int):
        super().__init__(f"Band {band_id} was modified concurrently; re-read and retry")
        self.band_id = band_id
