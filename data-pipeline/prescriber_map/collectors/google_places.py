"""
Google Places text-search enrichment.

Looks a prescriber up by name + specialty hint + city/state and attaches the
first matching place as the prescriber's health system. There is no ranking
or disambiguation: the first result wins.
"""

from dataclasses import dataclass
from typing import Optional

import requests

from ..constants import DEFAULT_HTTP_TIMEOUT, ENRICHMENT_DOMAIN_HINT
from ..utils.logger import PipelineLogger


@dataclass(frozen=True)
class EnrichmentResult:
    """Outcome of a Places lookup."""

    health_system: Optional[str]
    verified: bool
    google_address: Optional[str] = None
    place_rating: Optional[float] = None

    @classmethod
    def no_match(cls) -> "EnrichmentResult":
        return cls(health_system=None, verified=False)


def build_places_query(name: str, city: Optional[str], state: Optional[str]) -> str:
    """Free-text query: '<name> ophthalmologist <city> <state>', trimmed."""
    return f"{name} {ENRICHMENT_DOMAIN_HINT} {city or ''} {state or ''}".strip()


class PlacesEnricher:
    """Enrich prescriber records with Google Places text search."""

    TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"

    def __init__(
        self,
        api_key: Optional[str],
        session: Optional[requests.Session] = None,
        logger: Optional[PipelineLogger] = None,
        timeout: int = DEFAULT_HTTP_TIMEOUT,
    ):
        self.api_key = api_key
        self.session = session or requests.Session()
        self.logger = logger
        self.timeout = timeout

    def enrich(self, name: str, city: Optional[str] = None, state: Optional[str] = None) -> EnrichmentResult:
        """
        Look up a prescriber and return the first place found.

        Never raises: a missing key, non-200 status, empty result set or
        transport error all yield EnrichmentResult.no_match().
        """
        if not self.api_key:
            return EnrichmentResult.no_match()

        params = {
            "query": build_places_query(name, city, state),
            "key": self.api_key,
            "type": "doctor",
        }

        try:
            response = self.session.get(self.TEXT_SEARCH_URL, params=params, timeout=self.timeout)
            if response.status_code != 200:
                return EnrichmentResult.no_match()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            if self.logger:
                self.logger.warning(f"  Google Places error for {name}: {e}")
            return EnrichmentResult.no_match()

        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            return EnrichmentResult.no_match()

        place = results[0]
        rating = place.get("rating")
        return EnrichmentResult(
            health_system=place.get("name") or None,
            google_address=place.get("formatted_address") or None,
            verified=True,
            place_rating=float(rating) if rating else None,
        )
