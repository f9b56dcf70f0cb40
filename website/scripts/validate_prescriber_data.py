#!/usr/bin/env python3
"""Validate a published prescribers.json for integrity and consistency.

Reads website/data/prescribers.json (or the path given) and checks the
document-level counters, record shape, coordinate invariants, ordering and
that the public copy matches the archive copy. Outputs a severity-grouped
report; exits 1 when any CRITICAL violation is found.

Usage:
    python website/scripts/validate_prescriber_data.py
    python website/scripts/validate_prescriber_data.py path/to/prescribers.json
"""

import json
import re
import sys
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "data-pipeline"))

from prescriber_map.constants import GEO_SOURCES  # noqa: E402
from prescriber_map.models import name_sort_key  # noqa: E402
from prescriber_map.utils.state_utils import normalize_state  # noqa: E402

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

REQUIRED_TOP_LEVEL = {"generated", "total", "geocoded", "noAddress", "prescribers"}
REQUIRED_RECORD = {"id", "name", "address", "lat", "lng", "geoSource", "healthSystem", "verified"}
ADDRESS_PARTS = ("street", "city", "state", "zip", "full")

ZIP_PATTERN = re.compile(r"^[0-9]{5}(-[0-9]{4})?$")
NPI_PATTERN = re.compile(r"^[0-9]{10}$")


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Violation:
    record_id: str
    category: str
    severity: str  # CRITICAL, WARNING, INFO
    message: str


@dataclass
class ValidationContext:
    violations: list = field(default_factory=list)

    def add(self, record_id: str, category: str, severity: str, message: str):
        self.violations.append(Violation(record_id, category, severity, message))

    def critical(self, record_id: str, category: str, message: str):
        self.add(record_id, category, "CRITICAL", message)

    def warning(self, record_id: str, category: str, message: str):
        self.add(record_id, category, "WARNING", message)

    def info(self, record_id: str, category: str, message: str):
        self.add(record_id, category, "INFO", message)

    @property
    def has_critical(self) -> bool:
        return any(v.severity == "CRITICAL" for v in self.violations)


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------

def check_document(doc: dict, ctx: ValidationContext):
    """Top-level shape and counters (CRITICAL)."""
    for field_name in REQUIRED_TOP_LEVEL:
        if field_name not in doc:
            ctx.critical("document", "Schema", f"missing field '{field_name}'")

    records = doc.get("prescribers")
    if not isinstance(records, list):
        ctx.critical("document", "Schema", "'prescribers' is not a list")
        return

    if doc.get("total") != len(records):
        ctx.critical("document", "Counters", f"total={doc.get('total')} but {len(records)} records")

    geocoded = sum(1 for r in records if r.get("lat") is not None and r.get("lng") is not None)
    if doc.get("geocoded") != geocoded:
        ctx.critical("document", "Counters", f"geocoded={doc.get('geocoded')} but {geocoded} records have coordinates")

    no_address = sum(
        1
        for r in records
        if r.get("lat") is None and not (r.get("address") or {}).get("full")
    )
    if doc.get("noAddress") != no_address:
        ctx.critical("document", "Counters", f"noAddress={doc.get('noAddress')} but {no_address} records lack an address")

    names = [r.get("name") or "" for r in records]
    if names != sorted(names, key=name_sort_key):
        ctx.critical("document", "Ordering", "prescribers are not sorted by name")

    seen = set()
    for r in records:
        rid = str(r.get("id"))
        if rid in seen:
            ctx.critical(rid, "Identity", "duplicate id")
        seen.add(rid)


def check_record_shape(rid: str, record: dict, ctx: ValidationContext):
    """Required keys and address sub-record (CRITICAL)."""
    for field_name in REQUIRED_RECORD:
        if field_name not in record:
            ctx.critical(rid, "Schema", f"missing field '{field_name}'")

    address = record.get("address")
    if not isinstance(address, dict):
        ctx.critical(rid, "Schema", "address is not an object")
        return
    for part in ADDRESS_PARTS:
        if part not in address:
            ctx.critical(rid, "Schema", f"missing address.{part}")


def check_coordinates(rid: str, record: dict, ctx: ValidationContext):
    """lat/lng both-or-neither, geoSource consistency, plausible range."""
    lat, lng, source = record.get("lat"), record.get("lng"), record.get("geoSource")
    if (lat is None) != (lng is None):
        ctx.critical(rid, "Coordinates", "only one of lat/lng is set")
        return

    if lat is None:
        if source is not None:
            ctx.critical(rid, "Coordinates", f"geoSource '{source}' without coordinates")
        return

    if source not in GEO_SOURCES:
        ctx.critical(rid, "Coordinates", f"unknown geoSource '{source}'")
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        ctx.critical(rid, "Coordinates", f"out of range ({lat}, {lng})")
    elif not (17 <= lat <= 72 and -180 <= lng <= -64):
        ctx.warning(rid, "Coordinates", f"outside the US ({lat:.4f}, {lng:.4f})")


def check_address_fields(rid: str, record: dict, ctx: ValidationContext):
    """Field formats that the lookup relies on (WARNING/INFO)."""
    address = record.get("address") or {}
    state = address.get("state")
    if state and normalize_state(state) is None:
        ctx.warning(rid, "State", f"'{state}' is not a US state; hidden from state filters")

    zip_code = address.get("zip")
    if zip_code and not ZIP_PATTERN.match(zip_code):
        ctx.warning(rid, "Zip", f"malformed zip '{zip_code}'")

    npi = record.get("npi")
    if npi and not NPI_PATTERN.match(str(npi)):
        ctx.info(rid, "NPI", f"NPI '{npi}' is not 10 digits")

    if address.get("full") and record.get("lat") is None:
        ctx.info(rid, "Geocode", "address present but not geocoded")


def check_enrichment(rid: str, record: dict, ctx: ValidationContext):
    if record.get("verified") and not record.get("healthSystem"):
        ctx.critical(rid, "Enrichment", "verified without a healthSystem")
    if not record.get("verified") and record.get("healthSystem"):
        ctx.warning(rid, "Enrichment", "healthSystem set on an unverified record")


def validate_document(doc: dict) -> ValidationContext:
    """Run every check over a loaded document."""
    ctx = ValidationContext()
    if not isinstance(doc, dict):
        ctx.critical("document", "Schema", "top level is not an object")
        return ctx

    check_document(doc, ctx)
    for record in doc.get("prescribers") or []:
        if not isinstance(record, dict):
            ctx.critical("document", "Schema", "record is not an object")
            continue
        rid = str(record.get("id"))
        check_record_shape(rid, record, ctx)
        check_coordinates(rid, record, ctx)
        check_address_fields(rid, record, ctx)
        check_enrichment(rid, record, ctx)
    return ctx


def print_report(ctx: ValidationContext, total_records: int):
    severity_order = ["CRITICAL", "WARNING", "INFO"]
    grouped = defaultdict(list)
    for v in ctx.violations:
        grouped[v.severity].append(v)

    for severity in severity_order:
        violations = grouped.get(severity, [])
        header = {
            "CRITICAL": "=== CRITICAL VIOLATIONS ===",
            "WARNING": "=== WARNINGS ===",
            "INFO": "=== INFO ===",
        }[severity]
        print(header)
        if not violations:
            print("  (none)")
        else:
            for v in sorted(violations, key=lambda x: (x.record_id, x.category)):
                print(f"  [{v.record_id}] {v.category}: {v.message}")
        print()

    print("=== SUMMARY ===")
    print(f"Total prescribers checked: {total_records}")
    for severity in severity_order:
        violations = grouped.get(severity, [])
        record_ids = {v.record_id for v in violations}
        count_word = "violations" if severity != "INFO" else "items"
        print(f"{severity}: {len(violations)} {count_word} across {len(record_ids)} records")


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    website_dir = Path(__file__).resolve().parent.parent
    data_path = Path(argv[0]) if argv else website_dir / "data" / "prescribers.json"
    public_path = website_dir / "public" / "prescribers.json"

    if not data_path.is_file():
        print(f"ERROR: dataset not found: {data_path}", file=sys.stderr)
        return 2

    raw = data_path.read_bytes()
    try:
        doc = json.loads(raw)
    except json.JSONDecodeError as e:
        print(f"ERROR: invalid JSON in {data_path}: {e}", file=sys.stderr)
        return 2

    ctx = validate_document(doc)

    # Only compare against the public copy when validating the default archive copy
    if not argv and public_path.is_file() and public_path.read_bytes() != raw:
        ctx.critical("document", "PublicSync", f"{public_path} differs from {data_path}")

    print_report(ctx, len(doc.get("prescribers") or []) if isinstance(doc, dict) else 0)
    return 1 if ctx.has_critical else 0


if __name__ == "__main__":
    sys.exit(main())
