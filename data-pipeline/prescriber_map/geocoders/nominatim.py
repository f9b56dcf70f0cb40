"""
Nominatim (OpenStreetMap) geocoder.

Free and keyless, but the usage policy caps clients at one request per second
and requires an identifying User-Agent. All requests go through the injected
RateLimiter, so consecutive calls are serialized at least
NOMINATIM_MIN_INTERVAL_SEC apart.
"""

from typing import Any, Optional

import requests

from ..constants import (
    DEFAULT_HTTP_TIMEOUT,
    GEO_SOURCE_NOMINATIM,
    NOMINATIM_MIN_INTERVAL_SEC,
    USER_AGENT,
)
from ..utils.logger import PipelineLogger
from ..utils.rate_limiter import RateLimiter
from .base import BaseGeocoder, GeoResult


class NominatimGeocoder(BaseGeocoder):
    """Geocode US addresses and zip codes through nominatim.openstreetmap.org."""

    SEARCH_URL = "https://nominatim.openstreetmap.org/search"

    def __init__(
        self,
        rate_limiter: Optional[RateLimiter] = None,
        session: Optional[requests.Session] = None,
        logger: Optional[PipelineLogger] = None,
        timeout: int = DEFAULT_HTTP_TIMEOUT,
    ):
        super().__init__(session=session, logger=logger, timeout=timeout)
        self.rate_limiter = rate_limiter or RateLimiter(NOMINATIM_MIN_INTERVAL_SEC)
        self.headers = {"User-Agent": USER_AGENT}

    @property
    def source_name(self) -> str:
        return GEO_SOURCE_NOMINATIM

    def geocode(self, address: str) -> Optional[GeoResult]:
        return self._search(
            {
                "q": address,
                "format": "json",
                "limit": "1",
                "countrycodes": "us",
            }
        )

    def geocode_zip(self, zip_code: str) -> Optional[GeoResult]:
        """Resolve a US postal code (structured postalcode query)."""
        return self._search(
            {
                "postalcode": zip_code,
                "country": "US",
                "format": "json",
                "limit": "1",
            }
        )

    def _search(self, params: dict[str, Any]) -> Optional[GeoResult]:
        self.rate_limiter.wait()
        results = self._get_json(self.SEARCH_URL, params, headers=self.headers)
        if not isinstance(results, list) or not results:
            return None

        first = results[0]
        try:
            return GeoResult(lat=float(first["lat"]), lng=float(first["lon"]), source=self.source_name)
        except (KeyError, TypeError, ValueError):
            self._debug(f"Nominatim result missing coordinates: {first!r}")
            return None
