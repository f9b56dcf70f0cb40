"""
Pure filter functions over prescriber records.

Only two filters combine: a radius search runs over the state-filtered subset
when a state filter is active. Everything else replaces the current view.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from ..constants import NAME_SEARCH_MAX_RESULTS, NAME_SEARCH_MIN_LENGTH, RADIUS_OPTIONS
from ..models import Prescriber
from ..utils.state_utils import normalize_state
from .geo import haversine_miles

ZIP_PATTERN = re.compile(r"^[0-9]{5}$")


@dataclass(frozen=True)
class ResultRow:
    """A record as displayed, with its distance from the search point (if any)."""

    record: Prescriber
    distance: Optional[float] = None


def is_valid_zip(text: Optional[str]) -> bool:
    """Exactly five digits after trimming."""
    return bool(text) and ZIP_PATTERN.match(text.strip()) is not None


def record_state(record: Prescriber) -> Optional[str]:
    return normalize_state(record.address.state)


def available_states(records: Iterable[Prescriber]) -> List[str]:
    """Sorted unique state codes present in the dataset (for the state selector)."""
    return sorted({code for code in (record_state(r) for r in records) if code})


def filter_by_state(records: Sequence[Prescriber], state_code: Optional[str]) -> List[Prescriber]:
    """
    Keep records whose normalized state equals ``state_code``.

    A None/empty code means "no filter". Records whose state does not
    normalize never match a state filter.
    """
    if not state_code:
        return list(records)
    target = normalize_state(state_code)
    if target is None:
        return []
    return [r for r in records if record_state(r) == target]


def radius_search(
    records: Sequence[Prescriber],
    lat: float,
    lng: float,
    radius_miles: int,
) -> List[ResultRow]:
    """
    Records with coordinates within ``radius_miles`` of (lat, lng), nearest first.

    Raises:
        ValueError: If radius_miles is not one of RADIUS_OPTIONS
    """
    if radius_miles not in RADIUS_OPTIONS:
        raise ValueError(f"Radius must be one of {RADIUS_OPTIONS}, got {radius_miles}")

    rows = []
    for record in records:
        if not record.has_coordinates:
            continue
        distance = haversine_miles(lat, lng, record.lat, record.lng)
        if distance <= radius_miles:
            rows.append(ResultRow(record=record, distance=distance))

    rows.sort(key=lambda row: row.distance)
    return rows


def name_search(
    records: Sequence[Prescriber],
    query: Optional[str],
    min_length: int = NAME_SEARCH_MIN_LENGTH,
    max_results: int = NAME_SEARCH_MAX_RESULTS,
) -> List[Prescriber]:
    """Case-insensitive substring match on name, capped; short queries match nothing."""
    needle = (query or "").strip().casefold()
    if len(needle) < min_length:
        return []

    matches = []
    for record in records:
        if needle in record.name.casefold():
            matches.append(record)
            if len(matches) >= max_results:
                break
    return matches
