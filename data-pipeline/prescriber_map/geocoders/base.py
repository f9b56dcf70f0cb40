"""
Base geocoder interface.

Every backend resolves a free-text address to coordinates and reports which
service produced them. Failures never raise: any non-success status, empty
result set, undecodable body or transport error yields None so the caller can
decide on a fallback.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import requests

from ..constants import DEFAULT_HTTP_TIMEOUT
from ..utils.logger import PipelineLogger


@dataclass(frozen=True)
class GeoResult:
    """Resolved coordinates."""

    lat: float
    lng: float
    source: str


class BaseGeocoder(ABC):
    """
    Base class for geocoding backends.

    Subclasses must implement:
    - source_name: value written to a record's geoSource
    - geocode(address) -> GeoResult | None
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        logger: Optional[PipelineLogger] = None,
        timeout: int = DEFAULT_HTTP_TIMEOUT,
    ):
        self.session = session or requests.Session()
        self.logger = logger
        self.timeout = timeout

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Canonical source name ('nominatim' or 'google')."""
        ...

    @abstractmethod
    def geocode(self, address: str) -> Optional[GeoResult]:
        """
        Resolve an address to coordinates.

        Args:
            address: Free-text address

        Returns:
            GeoResult, or None when the address could not be resolved
        """
        ...

    def _get_json(self, url: str, params: dict[str, Any], headers: Optional[dict] = None) -> Optional[Any]:
        """GET and decode JSON; None on any transport, status or decode failure."""
        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            self._debug(f"{self.source_name} request failed: {e}")
            return None

        if response.status_code != 200:
            self._debug(f"{self.source_name} returned HTTP {response.status_code}")
            return None

        try:
            return response.json()
        except ValueError as e:
            self._debug(f"{self.source_name} returned invalid JSON: {e}")
            return None

    def _debug(self, message: str):
        if self.logger:
            self.logger.debug(message)
