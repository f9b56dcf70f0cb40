"""Tests for Google Places enrichment."""

import requests
from prescriber_map.collectors.google_places import EnrichmentResult, PlacesEnricher, build_places_query


def test_query_includes_domain_hint():
    assert build_places_query("Maria Alvarez", "San Francisco", "CA") == "Maria Alvarez ophthalmologist San Francisco CA"


def test_query_trims_missing_location():
    assert build_places_query("Maria Alvarez", None, None) == "Maria Alvarez ophthalmologist"


def test_no_key_skips_request(fake_session, response):
    session = fake_session(response({}))
    result = PlacesEnricher(None, session=session).enrich("Maria Alvarez", "San Francisco", "CA")
    assert result == EnrichmentResult.no_match()
    assert session.calls == []


def test_first_result_wins(fake_session, response):
    payload = {
        "results": [
            {"name": "UCSF Ophthalmology", "formatted_address": "490 Illinois St, San Francisco, CA", "rating": 4.6},
            {"name": "Other Clinic", "formatted_address": "elsewhere"},
        ]
    }
    session = fake_session(response(payload))
    result = PlacesEnricher("key", session=session).enrich("Maria Alvarez", "San Francisco", "CA")

    assert result.health_system == "UCSF Ophthalmology"
    assert result.google_address == "490 Illinois St, San Francisco, CA"
    assert result.verified is True
    assert result.place_rating == 4.6
    params = session.calls[0]["params"]
    assert params["type"] == "doctor"
    assert params["query"] == "Maria Alvarez ophthalmologist San Francisco CA"


def test_no_results(fake_session, response):
    session = fake_session(response({"results": [], "status": "ZERO_RESULTS"}))
    result = PlacesEnricher("key", session=session).enrich("Nobody")
    assert result.verified is False
    assert result.health_system is None


def test_http_error(fake_session, response):
    session = fake_session(response(None, status_code=403))
    assert PlacesEnricher("key", session=session).enrich("x") == EnrichmentResult.no_match()


def test_transport_error_is_swallowed(fake_session):
    session = fake_session(requests.ConnectionError("down"))
    assert PlacesEnricher("key", session=session).enrich("x") == EnrichmentResult.no_match()
