"""Shared fixtures for data-pipeline tests.

Network calls never leave the process: collectors and geocoders take an
injectable session, and tests hand them a FakeSession that replays canned
responses.
"""

import sys
from pathlib import Path

import pytest

# Add data-pipeline to path so tests can import prescriber_map
sys.path.insert(0, str(Path(__file__).parent.parent))


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, payload=None, status_code=200, text=None, invalid_json=False):
        self._payload = payload
        self.status_code = status_code
        self.text = text if text is not None else str(payload)
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """
    Replays queued responses in order and records every call.

    Queue items are FakeResponse objects or exceptions (raised from get()).
    Once the queue is exhausted the last item repeats.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.headers = {}
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item


class StubGeocoder:
    """Geocoder double keyed by exact address / zip text."""

    source_name = "nominatim"

    def __init__(self, addresses=None, zips=None):
        self.addresses = addresses or {}
        self.zips = zips or {}
        self.queries = []
        self.zip_queries = []

    def geocode(self, address):
        from prescriber_map.geocoders.base import GeoResult

        self.queries.append(address)
        coords = self.addresses.get(address)
        return GeoResult(lat=coords[0], lng=coords[1], source=self.source_name) if coords else None

    def geocode_zip(self, zip_code):
        from prescriber_map.geocoders.base import GeoResult

        self.zip_queries.append(zip_code)
        coords = self.zips.get(zip_code)
        return GeoResult(lat=coords[0], lng=coords[1], source=self.source_name) if coords else None


@pytest.fixture
def fake_session():
    """Factory: fake_session(FakeResponse(...), ...) -> FakeSession."""
    return FakeSession


@pytest.fixture
def response():
    """Factory for FakeResponse objects."""
    return FakeResponse


@pytest.fixture
def stub_geocoder():
    return StubGeocoder


@pytest.fixture
def sample_contact():
    """Raw ActiveCampaign contact as returned by /contacts."""
    return {
        "id": "1201",
        "firstName": "Jane",
        "lastName": "Contact",
        "email": "jane.contact@example.com",
        "phone": "415-555-0100",
        "orgname": "Mission Eye Associates",
    }


@pytest.fixture
def sample_fields():
    """Mapped custom fields for sample_contact."""
    return {
        "address1": "2100 Webster St",
        "address2": "Suite 214",
        "city": "San Francisco",
        "state": "CA",
        "zip": "94115",
        "specialty": "Retina",
        "doctorFirstName": "Maria",
        "doctorLastName": "Alvarez",
        "doctorEmail": "malvarez@example.org",
        "npi": "1234567893",
        "practiceType": "Private",
    }


@pytest.fixture
def make_record():
    """Build a Prescriber with sensible defaults, override any field."""
    from prescriber_map.models import Address, Prescriber

    def _make(record_id="1", name="Test Prescriber", lat=None, lng=None, state=None, **overrides):
        address = overrides.pop("address", None) or Address(
            city=overrides.pop("city", None),
            state=state,
            zip=overrides.pop("zip", None),
            full=overrides.pop("full", None),
        )
        return Prescriber(
            id=record_id,
            name=name,
            address=address,
            lat=lat,
            lng=lng,
            geo_source="nominatim" if lat is not None else None,
            **overrides,
        )

    return _make


@pytest.fixture
def bay_area_records(make_record):
    """Small dataset around San Francisco plus a couple of outliers."""
    return [
        make_record("1", "Smith, A", 37.7749, -122.4194, "CA", city="San Francisco", full="1 Market St, San Francisco, CA"),
        make_record("2", "Adams, B", 37.8044, -122.2712, "California", city="Oakland", full="1 Broadway, Oakland, CA"),
        make_record("3", "Nguyen, C", 37.3382, -121.8863, "ca", city="San Jose", full="1 First St, San Jose, CA"),
        make_record("4", "Ortiz, D", 34.0522, -118.2437, "CA", city="Los Angeles", full="1 Main St, Los Angeles, CA"),
        make_record("5", "Baker, E", 40.7128, -74.0060, "NY", city="New York", full="1 Park Ave, New York, NY"),
        make_record("6", "Leblanc, F", 43.6532, -79.3832, "Ontario", city="Toronto", full="1 King St, Toronto, ON"),
        make_record("7", "Unmapped, G", state="CA", city="Fresno", full="1 Fulton St, Fresno, CA"),
        make_record("8", "Noaddr, H"),
    ]
