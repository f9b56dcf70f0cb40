"""
Google Geocoding API backend (paid, requires an API key).
"""

from typing import Optional

import requests

from ..constants import DEFAULT_HTTP_TIMEOUT, GEO_SOURCE_GOOGLE
from ..utils.logger import PipelineLogger
from .base import BaseGeocoder, GeoResult


class GoogleGeocoder(BaseGeocoder):
    """
    Geocode addresses with maps.googleapis.com.

    A response only counts as a match when the body reports status "OK" and
    carries at least one result; ZERO_RESULTS, OVER_QUERY_LIMIT etc. yield None.
    """

    GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

    def __init__(
        self,
        api_key: str,
        session: Optional[requests.Session] = None,
        logger: Optional[PipelineLogger] = None,
        timeout: int = DEFAULT_HTTP_TIMEOUT,
    ):
        super().__init__(session=session, logger=logger, timeout=timeout)
        self.api_key = api_key

    @property
    def source_name(self) -> str:
        return GEO_SOURCE_GOOGLE

    def geocode(self, address: str) -> Optional[GeoResult]:
        data = self._get_json(self.GEOCODE_URL, {"address": address, "key": self.api_key})
        if not isinstance(data, dict):
            return None

        results = data.get("results") or []
        if data.get("status") != "OK" or not results:
            self._debug(f"Google geocode status {data.get('status')!r} for address")
            return None

        try:
            location = results[0]["geometry"]["location"]
            return GeoResult(lat=float(location["lat"]), lng=float(location["lng"]), source=self.source_name)
        except (KeyError, TypeError, ValueError):
            self._debug("Google geocode result missing geometry.location")
            return None
