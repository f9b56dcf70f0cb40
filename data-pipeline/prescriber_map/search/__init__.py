"""
Lookup engine over the published dataset: distance, filters, state and view models.
"""

from .filters import (
    ResultRow,
    available_states,
    filter_by_state,
    is_valid_zip,
    name_search,
    radius_search,
)
from .geo import haversine_miles
from .loader import LOAD_ERROR_BANNER, info_banner, load_dataset
from .session import SearchSession
from .state import (
    MapView,
    RadiusSearch,
    SearchState,
    apply_radius_search,
    apply_state_filter,
    begin_search,
    clear_filters,
    initial_state,
    select_record,
)

__all__ = [
    "LOAD_ERROR_BANNER",
    "MapView",
    "RadiusSearch",
    "ResultRow",
    "SearchSession",
    "SearchState",
    "apply_radius_search",
    "apply_state_filter",
    "available_states",
    "begin_search",
    "clear_filters",
    "filter_by_state",
    "haversine_miles",
    "info_banner",
    "initial_state",
    "is_valid_zip",
    "load_dataset",
    "name_search",
    "radius_search",
    "select_record",
]
