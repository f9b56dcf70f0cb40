"""Tests for the ActiveCampaign collector."""

import pytest
import requests
from prescriber_map.collectors.activecampaign import ActiveCampaignCollector, map_field_values
from prescriber_map.errors import CRMError


def _page(contacts, total):
    return {"contacts": contacts, "meta": {"total": str(total)}}


def _contacts(start, count):
    return [{"id": str(i)} for i in range(start, start + count)]


class TestClientSetup:
    def test_host_gets_https_and_api_root(self, fake_session, response):
        collector = ActiveCampaignCollector("myaccount.api-us1.com", "tok", session=fake_session(response({})))
        assert collector.api_root == "https://myaccount.api-us1.com/api/3"

    def test_full_url_kept(self, fake_session, response):
        collector = ActiveCampaignCollector("https://acct.example.com/", "tok", session=fake_session(response({})))
        assert collector.api_root == "https://acct.example.com/api/3"

    def test_api_token_header(self, fake_session, response):
        session = fake_session(response({}))
        ActiveCampaignCollector("acct", "secret", session=session)
        assert session.headers["Api-Token"] == "secret"


class TestPagination:
    def test_pages_until_total(self, fake_session, response):
        session = fake_session(
            response(_page(_contacts(0, 100), 150)),
            response(_page(_contacts(100, 50), 150)),
        )
        collector = ActiveCampaignCollector("acct", "tok", session=session)

        contacts = collector.fetch_all_contacts()

        assert len(contacts) == 150
        assert [c["params"]["offset"] for c in session.calls] == [0, 100]
        assert all(c["params"]["tagid"] == "45" for c in session.calls)
        assert all(c["params"]["limit"] == 100 for c in session.calls)

    def test_stops_on_empty_page_when_total_overstated(self, fake_session, response):
        session = fake_session(
            response(_page(_contacts(0, 100), 500)),
            response(_page([], 500)),
        )
        collector = ActiveCampaignCollector("acct", "tok", session=session)

        assert len(collector.fetch_all_contacts()) == 100
        assert len(session.calls) == 2

    def test_no_contacts(self, fake_session, response):
        session = fake_session(response(_page([], 0)))
        assert ActiveCampaignCollector("acct", "tok", session=session).fetch_all_contacts() == []
        assert len(session.calls) == 1

    def test_listing_failure_raises(self, fake_session, response):
        session = fake_session(response(None, status_code=401, text="Unauthorized"))
        collector = ActiveCampaignCollector("acct", "tok", session=session)

        with pytest.raises(CRMError) as exc_info:
            collector.fetch_all_contacts()
        assert exc_info.value.status_code == 401
        assert "Unauthorized" in str(exc_info.value)

    def test_transport_failure_raises(self, fake_session):
        collector = ActiveCampaignCollector("acct", "tok", session=fake_session(requests.ConnectionError("down")))
        with pytest.raises(CRMError):
            collector.fetch_all_contacts()


class TestFieldValues:
    def test_fetch_maps_known_fields(self, fake_session, response):
        payload = {
            "fieldValues": [
                {"field": "4", "value": " 2100 Webster St "},
                {"field": "8", "value": "94115"},
                {"field": "23", "value": "Maria"},
                {"field": "999", "value": "ignored"},
            ]
        }
        session = fake_session(response(payload))
        collector = ActiveCampaignCollector("acct", "tok", session=session)

        fields = collector.fetch_field_values("1201")

        assert fields == {"address1": "2100 Webster St", "zip": "94115", "doctorFirstName": "Maria"}
        assert session.calls[0]["url"].endswith("/api/3/contacts/1201/fieldValues")

    def test_blank_and_null_values_dropped(self):
        fields = map_field_values(
            [
                {"field": "5", "value": "   "},
                {"field": "6", "value": None},
                {"field": 7, "value": "CA"},
            ]
        )
        assert fields == {"state": "CA"}

    def test_field_failure_raises(self, fake_session, response):
        session = fake_session(response(None, status_code=404, text="Not Found"))
        collector = ActiveCampaignCollector("acct", "tok", session=session)
        with pytest.raises(CRMError):
            collector.fetch_field_values("1")
