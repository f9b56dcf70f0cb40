"""
Exception hierarchy for the prescriber map pipeline.

Fatal errors (configuration, contact listing) abort a sync run. Per-record
failures are caught inside the pipeline and never surface here.
"""


class PrescriberMapError(Exception):
    """Base class for all pipeline and lookup errors."""


class ConfigurationError(PrescriberMapError):
    """Required settings (e.g. CRM credentials) are missing."""


class CRMError(PrescriberMapError):
    """The CRM returned a non-success status or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DatasetLoadError(PrescriberMapError):
    """The published prescriber dataset could not be read or validated."""


class InvalidZipError(PrescriberMapError):
    """Search input is not a 5-digit zip code."""


class ZipNotFoundError(PrescriberMapError):
    """The geocoder could not resolve a zip code to a location."""
