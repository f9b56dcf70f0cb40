"""Tests for the fetch_prescribers and find_prescribers entry points."""

import json

import fetch_prescribers
import find_prescribers
import pytest
from prescriber_map.collectors.google_places import EnrichmentResult
from prescriber_map.errors import CRMError
from prescriber_map.exporter import write_dataset
from prescriber_map.models import Address, Prescriber, PrescriberDataset

CRM_ENV = ("ACTIVECAMPAIGN_URL", "ACTIVECAMPAIGN_API_KEY", "GOOGLE_PLACES_API_KEY", "GEOCODER")


class FakeCollector:
    def __init__(self, base_url, api_key, logger=None, **kwargs):
        self.base_url = base_url

    def fetch_all_contacts(self):
        return [{"id": "1", "firstName": "Ann", "lastName": "Lee"}]

    def fetch_field_values(self, contact_id):
        return {"address1": "1 Main St", "city": "Reno", "state": "NV", "zip": "89501"}


class UnreachableCollector(FakeCollector):
    def fetch_all_contacts(self):
        raise CRMError("ActiveCampaign API 401: invalid token", status_code=401)


class FixedEnricher:
    def __init__(self, api_key, logger=None, **kwargs):
        self.api_key = api_key

    def enrich(self, name, city=None, state=None):
        return EnrichmentResult(health_system="Renown Health", verified=True, google_address="1155 Mill St, Reno, NV")


@pytest.fixture
def crm_env(monkeypatch, tmp_path):
    for key in CRM_ENV:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("PRESCRIBER_MAP_DATA_PATH", str(tmp_path / "data" / "prescribers.json"))
    monkeypatch.setenv("PRESCRIBER_MAP_PUBLIC_PATH", str(tmp_path / "public" / "prescribers.json"))
    monkeypatch.setattr(fetch_prescribers, "load_environment", lambda: None)
    return tmp_path


@pytest.fixture
def offline_pipeline(monkeypatch, stub_geocoder, crm_env):
    monkeypatch.setenv("ACTIVECAMPAIGN_URL", "acct.api-us1.com")
    monkeypatch.setenv("ACTIVECAMPAIGN_API_KEY", "tok")
    monkeypatch.setattr(fetch_prescribers, "ActiveCampaignCollector", FakeCollector)
    geocoder = stub_geocoder(addresses={"1 Main St, Reno, NV, 89501": (39.52, -119.81)})
    monkeypatch.setattr(fetch_prescribers, "build_geocoder", lambda settings, logger=None: geocoder)
    return crm_env


class TestFetch:
    def test_missing_credentials(self, crm_env, capsys):
        assert fetch_prescribers.main([]) == 1
        assert "Missing ACTIVECAMPAIGN_URL" in capsys.readouterr().out
        assert not (crm_env / "data").exists()

    def test_dry_run_writes_nothing(self, offline_pipeline, capsys):
        assert fetch_prescribers.main(["--dry-run"]) == 0
        out = capsys.readouterr().out
        assert "[DRY RUN]" in out
        assert "Total: 1, Geocoded: 1, No address: 0" in out
        assert not (offline_pipeline / "data").exists()
        assert not (offline_pipeline / "public").exists()

    def test_full_run_writes_both_copies(self, offline_pipeline):
        assert fetch_prescribers.main([]) == 0
        data = (offline_pipeline / "data" / "prescribers.json").read_bytes()
        public = (offline_pipeline / "public" / "prescribers.json").read_bytes()
        assert data == public
        doc = json.loads(data)
        assert doc["prescribers"][0]["name"] == "Ann Lee"
        assert doc["geocoded"] == 1
        assert doc["prescribers"][0]["verified"] is False
        assert doc["prescribers"][0]["healthSystem"] is None

    def test_fatal_listing_error_exits_1(self, offline_pipeline, monkeypatch, capsys):
        monkeypatch.setattr(fetch_prescribers, "ActiveCampaignCollector", UnreachableCollector)

        assert fetch_prescribers.main([]) == 1
        out = capsys.readouterr().out
        assert "Fatal: contact sync aborted" in out
        assert out.count("Failed contact listing") == 1
        assert not (offline_pipeline / "data" / "prescribers.json").exists()
        assert not (offline_pipeline / "public" / "prescribers.json").exists()

    def test_enrich_flag_applies_places_match(self, offline_pipeline, monkeypatch):
        monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "places-key")
        monkeypatch.setattr(fetch_prescribers, "PlacesEnricher", FixedEnricher)

        assert fetch_prescribers.main(["--enrich"]) == 0
        record = json.loads((offline_pipeline / "public" / "prescribers.json").read_text())["prescribers"][0]
        assert record["healthSystem"] == "Renown Health"
        assert record["verified"] is True
        assert record["googleAddress"] == "1155 Mill St, Reno, NV"


@pytest.fixture
def dataset_file(tmp_path):
    records = [
        Prescriber(id="1", name="Ann Lee", lat=39.52, lng=-119.81, geo_source="nominatim",
                   address=Address(city="Reno", state="NV", zip="89501", full="1 Main St, Reno, NV, 89501")),
        Prescriber(id="2", name="Bo Smith", lat=40.71, lng=-74.0, geo_source="nominatim",
                   address=Address(city="New York", state="New York", full="1 Park Ave, New York, NY")),
    ]
    path = tmp_path / "prescribers.json"
    write_dataset(PrescriberDataset.from_records(records), [path])
    return path


class TestFind:
    def test_list_states(self, dataset_file, capsys):
        assert find_prescribers.main(["--data", str(dataset_file), "--list-states"]) == 0
        assert "NV, NY" in capsys.readouterr().out

    def test_state_filter(self, dataset_file, capsys):
        assert find_prescribers.main(["--data", str(dataset_file), "--state", "nevada"]) == 0
        out = capsys.readouterr().out
        assert "Ann Lee" in out
        assert "Bo Smith" not in out

    def test_name_lookup(self, dataset_file, capsys):
        assert find_prescribers.main(["--data", str(dataset_file), "--name", "smith"]) == 0
        assert "Bo Smith" in capsys.readouterr().out

    def test_invalid_zip(self, dataset_file, capsys):
        assert find_prescribers.main(["--data", str(dataset_file), "--zip", "12ab5"]) == 1
        assert "valid 5-digit zip" in capsys.readouterr().out

    def test_missing_dataset(self, tmp_path, capsys):
        assert find_prescribers.main(["--data", str(tmp_path / "missing.json")]) == 1
        assert "Error loading data" in capsys.readouterr().out
