"""
Explicit lookup state and pure reducers.

Every user action maps (SearchState, action args) -> new SearchState; nothing
here touches the network or renders anything, so the filter-combination rules
can be tested directly.

Filter rules:
- state filter: replaces the view, clears any zip search
- radius search: runs over the state-filtered subset when a state is selected
- select record: clears zip and state filters, centers on that record
- clear: full list, default map view

Every action that changes filters bumps ``search_token``. A radius search
result is applied only if it carries the latest token, so a slow zip geocode
that resolves after a newer action is discarded (last initiated wins).
"""

import math
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from ..constants import DEFAULT_MAP_CENTER, DEFAULT_MAP_ZOOM, SELECTED_RECORD_ZOOM
from ..models import Prescriber
from ..utils.state_utils import normalize_state
from .filters import ResultRow, filter_by_state, radius_search

Bounds = tuple[tuple[float, float], tuple[float, float]]

# Approximate miles per degree of latitude, used only for map framing
_MILES_PER_DEGREE = 69.0


@dataclass(frozen=True)
class MapView:
    """What the map should show: a center/zoom, or bounds to fit."""

    center: tuple[float, float] = DEFAULT_MAP_CENTER
    zoom: Optional[int] = DEFAULT_MAP_ZOOM
    bounds: Optional[Bounds] = None
    circle_radius_miles: Optional[int] = None

    @classmethod
    def default(cls) -> "MapView":
        return cls()

    @classmethod
    def point(cls, lat: float, lng: float) -> "MapView":
        return cls(center=(lat, lng), zoom=SELECTED_RECORD_ZOOM)

    @classmethod
    def fit_records(cls, records: Sequence[Prescriber]) -> Optional["MapView"]:
        """Bounds around every record with coordinates; None when there are none."""
        points = [(r.lat, r.lng) for r in records if r.has_coordinates]
        if not points:
            return None
        lats = [p[0] for p in points]
        lngs = [p[1] for p in points]
        bounds = ((min(lats), min(lngs)), (max(lats), max(lngs)))
        center = ((bounds[0][0] + bounds[1][0]) / 2, (bounds[0][1] + bounds[1][1]) / 2)
        return cls(center=center, zoom=None, bounds=bounds)

    @classmethod
    def circle(cls, lat: float, lng: float, radius_miles: int) -> "MapView":
        dlat = radius_miles / _MILES_PER_DEGREE
        dlng = radius_miles / (_MILES_PER_DEGREE * max(math.cos(math.radians(lat)), 0.01))
        return cls(
            center=(lat, lng),
            zoom=None,
            bounds=((lat - dlat, lng - dlng), (lat + dlat, lng + dlng)),
            circle_radius_miles=radius_miles,
        )


@dataclass(frozen=True)
class RadiusSearch:
    """An active zip/radius search."""

    zip_code: str
    lat: float
    lng: float
    radius_miles: int


@dataclass(frozen=True)
class SearchState:
    """Complete lookup state."""

    records: tuple[Prescriber, ...] = ()
    state_filter: Optional[str] = None
    search: Optional[RadiusSearch] = None
    selected_id: Optional[str] = None
    results: tuple[ResultRow, ...] = ()
    filtered: bool = False
    view: MapView = MapView()
    search_token: int = 0


def _all_rows(records: Sequence[Prescriber]) -> tuple[ResultRow, ...]:
    return tuple(ResultRow(record=r) for r in records)


def initial_state(records: Sequence[Prescriber]) -> SearchState:
    """Unfiltered state over the loaded dataset."""
    records = tuple(records)
    return SearchState(records=records, results=_all_rows(records))


def clear_filters(state: SearchState) -> SearchState:
    """Reset to the full list and the default map view."""
    return SearchState(
        records=state.records,
        results=_all_rows(state.records),
        search_token=state.search_token + 1,
    )


def apply_state_filter(state: SearchState, state_code: Optional[str]) -> SearchState:
    """
    Select a state (or None for all states). Clears any active zip search.

    Unrecognized state values select nothing, matching records whose state
    does not normalize.
    """
    if not state_code:
        return clear_filters(state)

    code = normalize_state(state_code) or state_code.strip().upper()
    matches = filter_by_state(state.records, code)
    view = MapView.fit_records(matches) or state.view
    return SearchState(
        records=state.records,
        state_filter=code,
        results=_all_rows(matches),
        filtered=True,
        view=view,
        search_token=state.search_token + 1,
    )


def begin_search(state: SearchState) -> tuple[SearchState, int]:
    """Mark a new search as in flight; returns the token its result must carry."""
    token = state.search_token + 1
    return replace(state, search_token=token), token


def apply_radius_search(
    state: SearchState,
    zip_code: str,
    lat: float,
    lng: float,
    radius_miles: int,
    token: Optional[int] = None,
) -> SearchState:
    """
    Apply a resolved zip search.

    When ``token`` is given and is not the latest, the result is stale and the
    state is returned unchanged.
    """
    if token is not None and token != state.search_token:
        return state

    base = filter_by_state(state.records, state.state_filter)
    rows = radius_search(base, lat, lng, radius_miles)
    return replace(
        state,
        search=RadiusSearch(zip_code=zip_code, lat=lat, lng=lng, radius_miles=radius_miles),
        selected_id=None,
        results=tuple(rows),
        filtered=True,
        view=MapView.circle(lat, lng, radius_miles),
    )


def select_record(state: SearchState, record_id: str) -> SearchState:
    """
    Focus one record (e.g. picked from name search).

    Clears zip and state filters. Unknown ids leave the state unchanged.
    """
    record = next((r for r in state.records if r.id == record_id), None)
    if record is None:
        return state

    view = MapView.point(record.lat, record.lng) if record.has_coordinates else MapView.default()
    return SearchState(
        records=state.records,
        selected_id=record.id,
        results=(ResultRow(record=record),),
        filtered=True,
        view=view,
        search_token=state.search_token + 1,
    )
