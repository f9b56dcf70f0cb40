"""
Record builder: raw CRM contact + mapped custom fields -> Prescriber.

Field precedence:
- name:         doctorFirstName/doctorLastName > contact firstName/lastName > "(unknown)"
- email:        doctorEmail > contact email
- organization: contact orgname > practiceName
- specialty:    specialty > prescriberType

Geocoding runs only when a full address exists; if the full address fails and a
zip is known, "<zip>, USA" is tried once more. Enrichment (optional) can never
fail the record.
"""

from typing import Any, Dict, Optional

from .collectors.google_places import EnrichmentResult, PlacesEnricher
from .constants import UNKNOWN_NAME
from .geocoders.base import BaseGeocoder, GeoResult
from .models import Address, Prescriber
from .utils.logger import PipelineLogger


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def join_parts(parts: list, sep: str = ", ") -> str:
    """Join the non-blank parts, trimmed, in order."""
    return sep.join(p for p in (_clean(part) for part in parts) if p)


def build_full_address(fields: Dict[str, str]) -> str:
    """Comma-joined [address1, address2, city, state, zip]; '' when all are blank."""
    return join_parts(
        [
            fields.get("address1"),
            fields.get("address2"),
            fields.get("city"),
            fields.get("state"),
            fields.get("zip"),
        ]
    )


def resolve_name(contact: Dict[str, Any], fields: Dict[str, str]) -> str:
    first = _clean(fields.get("doctorFirstName")) or _clean(contact.get("firstName"))
    last = _clean(fields.get("doctorLastName")) or _clean(contact.get("lastName"))
    return join_parts([first, last], sep=" ") or UNKNOWN_NAME


class RecordBuilder:
    """Build normalized prescriber records, geocoding and enriching as configured."""

    def __init__(
        self,
        geocoder: BaseGeocoder,
        enricher: Optional[PlacesEnricher] = None,
        logger: Optional[PipelineLogger] = None,
    ):
        """
        Args:
            geocoder: Backend used for full-address and zip fallback lookups
            enricher: Places enricher; enrichment is skipped when None
            logger: Logger instance
        """
        self.geocoder = geocoder
        self.enricher = enricher
        self.logger = logger

    def geocode_with_fallback(self, full_address: str, zip_code: Optional[str]) -> Optional[GeoResult]:
        if not full_address:
            return None
        geo = self.geocoder.geocode(full_address)
        if geo is None and zip_code:
            geo = self.geocoder.geocode(f"{zip_code}, USA")
        return geo

    def _enrich(self, contact_id: str, name: str, city: Optional[str], state: Optional[str]) -> EnrichmentResult:
        try:
            return self.enricher.enrich(name, city, state)
        except Exception as e:
            # Enrichment never fails the record
            if self.logger:
                self.logger.log_record_degraded(contact_id, "enrichment", str(e))
            return EnrichmentResult.no_match()

    def build(self, contact: Dict[str, Any], fields: Dict[str, str]) -> Prescriber:
        contact_id = str(contact.get("id"))
        name = resolve_name(contact, fields)
        full_address = build_full_address(fields)
        zip_code = _clean(fields.get("zip"))

        geo = self.geocode_with_fallback(full_address, zip_code)
        if full_address and geo is None and self.logger:
            self.logger.log_record_degraded(contact_id, "geocode", "address and zip fallback unresolved")

        city = _clean(fields.get("city"))
        state = _clean(fields.get("state"))

        prescriber = Prescriber(
            id=contact_id,
            name=name,
            email=_clean(fields.get("doctorEmail")) or _clean(contact.get("email")),
            phone=_clean(contact.get("phone")),
            organization=_clean(contact.get("orgname")) or _clean(fields.get("practiceName")),
            specialty=_clean(fields.get("specialty")) or _clean(fields.get("prescriberType")),
            practice_type=_clean(fields.get("practiceType")),
            npi=_clean(fields.get("npi")),
            address=Address(
                street=join_parts([fields.get("address1"), fields.get("address2")]) or None,
                city=city,
                state=state,
                zip=zip_code,
                full=full_address or None,
            ),
            lat=geo.lat if geo else None,
            lng=geo.lng if geo else None,
            geo_source=geo.source if geo else None,
        )

        if self.enricher is not None:
            enrichment = self._enrich(contact_id, name, city, state)
            prescriber.health_system = enrichment.health_system
            prescriber.verified = enrichment.verified
            if enrichment.google_address:
                prescriber.google_address = enrichment.google_address

        return prescriber
