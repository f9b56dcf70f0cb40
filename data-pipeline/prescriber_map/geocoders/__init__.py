"""
Geocoding backends and the backend selection policy.
"""

from typing import Optional

import requests

from ..config import Settings
from ..utils.logger import PipelineLogger
from ..utils.rate_limiter import RateLimiter
from .base import BaseGeocoder, GeoResult
from .google import GoogleGeocoder
from .nominatim import NominatimGeocoder


def build_geocoder(
    settings: Settings,
    rate_limiter: Optional[RateLimiter] = None,
    session: Optional[requests.Session] = None,
    logger: Optional[PipelineLogger] = None,
) -> BaseGeocoder:
    """
    Pick the geocoding backend for a run.

    Google is used only when GEOCODER=google AND a Google key is configured;
    every other combination falls back to the free Nominatim service.
    """
    if settings.use_google_geocoder:
        return GoogleGeocoder(api_key=settings.google_api_key, session=session, logger=logger)
    return NominatimGeocoder(rate_limiter=rate_limiter, session=session, logger=logger)


__all__ = [
    "BaseGeocoder",
    "GeoResult",
    "GoogleGeocoder",
    "NominatimGeocoder",
    "build_geocoder",
]
