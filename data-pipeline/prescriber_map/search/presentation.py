"""
View models for the map front end: markers, list cards and popups.

All user-controlled text is HTML-escaped before it is placed in markup.
"""

from dataclasses import dataclass
from html import escape
from typing import List, Optional, Sequence

from ..constants import INTERNAL_EMAIL_DOMAIN, LIST_DISPLAY_LIMIT
from ..models import Prescriber
from .filters import ResultRow

LIST_LIMIT_NOTE = f"Showing first {LIST_DISPLAY_LIMIT}. Search by zip to see all nearby."


def _esc(value: Optional[str]) -> str:
    return escape(value) if value else ""


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


@dataclass(frozen=True)
class Marker:
    lat: float
    lng: float
    popup_html: str
    label: Optional[str] = None


@dataclass(frozen=True)
class ListCard:
    record_id: str
    title: str
    specialty: Optional[str]
    subtitle: str
    distance_text: Optional[str]
    lat: Optional[float]
    lng: Optional[float]


@dataclass(frozen=True)
class ListView:
    cards: List[ListCard]
    count_text: str
    note: Optional[str] = None


def popup_html(record: Prescriber, distance: Optional[float] = None) -> str:
    """Popup markup for a single prescriber marker."""
    lines = ['<div class="prescriber-popup">', f"<h3>{_esc(record.name)}</h3>"]

    if record.health_system:
        lines.append(f'<div class="health-system">{_esc(record.health_system)}</div>')
    if record.organization:
        lines.append(f'<div class="org">{_esc(record.organization)}</div>')
    if record.specialty:
        lines.append(f'<span class="badge badge-specialty">{_esc(record.specialty)}</span>')
    if record.address.full:
        lines.append(f'<p class="detail">{_esc(record.address.full)}</p>')
    if record.phone:
        phone = _esc(record.phone)
        lines.append(f'<p class="detail">Phone: <a href="tel:{phone}">{phone}</a></p>')
    if record.email and INTERNAL_EMAIL_DOMAIN not in record.email.lower():
        email = _esc(record.email)
        lines.append(f'<p class="detail">Email: <a href="mailto:{email}">{email}</a></p>')
    if record.npi:
        lines.append(f'<p class="detail">NPI: {_esc(record.npi)}</p>')
    if distance is not None:
        lines.append(f'<div class="distance">{distance:.1f} miles away</div>')

    if record.verified:
        lines.append('<span class="badge badge-verified">Verified</span>')
    elif record.address.full:
        lines.append('<span class="badge badge-unverified">Unverified address</span>')

    lines.append("</div>")
    return "".join(lines)


def patient_marker(zip_code: str, lat: float, lng: float) -> Marker:
    """Labelled marker at the searched zip's location."""
    zip_text = _esc(zip_code)
    return Marker(
        lat=lat,
        lng=lng,
        popup_html=f"<b>Patient Location</b><br>Zip: {zip_text}",
        label=f"Patient: {zip_text}",
    )


def marker_points(rows: Sequence[ResultRow]) -> List[Marker]:
    """One marker per row that has coordinates."""
    return [
        Marker(lat=row.record.lat, lng=row.record.lng, popup_html=popup_html(row.record, row.distance))
        for row in rows
        if row.record.has_coordinates
    ]


def _card(row: ResultRow) -> ListCard:
    record = row.record
    subtitle = record.organization or ""
    if record.address.city:
        subtitle += f" - {record.address.city}, {record.address.state or ''}"
    return ListCard(
        record_id=record.id,
        title=record.name,
        specialty=record.specialty,
        subtitle=subtitle,
        distance_text=f"{row.distance:.1f} mi" if row.distance is not None else None,
        lat=record.lat,
        lng=record.lng,
    )


def list_cards(rows: Sequence[ResultRow], filtered: bool = False) -> ListView:
    """
    Sidebar list. Unfiltered views show at most LIST_DISPLAY_LIMIT cards;
    filtered views (state, radius, selection) are never truncated.
    """
    mapped = sum(1 for row in rows if row.record.has_coordinates)
    shown = rows if filtered else rows[:LIST_DISPLAY_LIMIT]
    note = LIST_LIMIT_NOTE if not filtered and len(rows) > LIST_DISPLAY_LIMIT else None
    return ListView(
        cards=[_card(row) for row in shown],
        count_text=f"({len(rows)} total, {mapped} mapped)",
        note=note,
    )


def result_count_text(
    count: int,
    state_code: Optional[str] = None,
    radius_miles: Optional[int] = None,
    zip_code: Optional[str] = None,
) -> str:
    """Summary line above the results; empty when nothing is filtered."""
    noun = f"prescriber{_plural(count)}"
    if radius_miles is not None and zip_code:
        return f"{count} {noun} within {radius_miles} mi of {zip_code}"
    if state_code:
        return f"{count} {noun} in {state_code}"
    return ""
