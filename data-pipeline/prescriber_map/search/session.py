"""
Interactive lookup session: SearchState plus the zip geocoder.

The session owns the only side effect in the lookup flow (resolving a zip to
coordinates); everything else delegates to the pure reducers in ``state``.
"""

from typing import List, Optional, Sequence

from ..constants import DEFAULT_RADIUS_MILES, RADIUS_OPTIONS
from ..errors import InvalidZipError, ZipNotFoundError
from ..geocoders.nominatim import NominatimGeocoder
from ..models import Prescriber
from ..utils.logger import PipelineLogger
from . import state as reducers
from .filters import available_states, is_valid_zip, name_search
from .presentation import ListView, Marker, list_cards, marker_points, patient_marker, result_count_text


class SearchSession:
    """Holds the current SearchState and applies user actions to it."""

    def __init__(
        self,
        records: Sequence[Prescriber],
        geocoder: Optional[NominatimGeocoder] = None,
        logger: Optional[PipelineLogger] = None,
    ):
        self.state = reducers.initial_state(records)
        self.geocoder = geocoder or NominatimGeocoder(logger=logger)
        self.logger = logger

    @property
    def states(self) -> List[str]:
        return available_states(self.state.records)

    def filter_state(self, state_code: Optional[str]) -> reducers.SearchState:
        self.state = reducers.apply_state_filter(self.state, state_code)
        return self.state

    def search_zip(self, zip_code: str, radius_miles: int = DEFAULT_RADIUS_MILES) -> reducers.SearchState:
        """
        Geocode a patient zip and show prescribers within the radius.

        Raises:
            InvalidZipError: zip is not exactly five digits
            ZipNotFoundError: the geocoder could not resolve the zip
            ValueError: radius is not one of RADIUS_OPTIONS

        On any error the current state is left untouched.
        """
        zip_code = (zip_code or "").strip()
        if not is_valid_zip(zip_code):
            raise InvalidZipError("Please enter a valid 5-digit zip code.")
        if radius_miles not in RADIUS_OPTIONS:
            raise ValueError(f"Radius must be one of {RADIUS_OPTIONS}, got {radius_miles}")

        self.state, token = reducers.begin_search(self.state)
        geo = self.geocoder.geocode_zip(zip_code)
        if geo is None:
            raise ZipNotFoundError(f"Could not find location for zip code: {zip_code}")

        self.state = reducers.apply_radius_search(self.state, zip_code, geo.lat, geo.lng, radius_miles, token=token)
        return self.state

    def suggest(self, query: str) -> List[Prescriber]:
        return name_search(self.state.records, query)

    def select(self, record_id: str) -> reducers.SearchState:
        self.state = reducers.select_record(self.state, record_id)
        return self.state

    def clear(self) -> reducers.SearchState:
        self.state = reducers.clear_filters(self.state)
        return self.state

    def markers(self) -> List[Marker]:
        """Prescriber markers, plus the patient marker while a zip search is active."""
        markers = marker_points(self.state.results)
        search = self.state.search
        if search is not None:
            markers.append(patient_marker(search.zip_code, search.lat, search.lng))
        return markers

    def list_view(self) -> ListView:
        return list_cards(self.state.results, filtered=self.state.filtered)

    def result_count(self) -> str:
        search = self.state.search
        return result_count_text(
            len(self.state.results),
            state_code=self.state.state_filter,
            radius_miles=search.radius_miles if search else None,
            zip_code=search.zip_code if search else None,
        )
