"""Shared test fixtures: canned BMLT and Nominatim responses, patched HTTP."""

import json
from unittest.mock import MagicMock, patch

import pytest

ROOT = "https://bmlt.example.org/main_server"


def make_response(payload=None, status=200, text=None, reason="OK"):
    """Build a stand-in for requests.Response."""
    resp = MagicMock()
    resp.status_code = status
    resp.reason = reason
    if text is None:
        text = json.dumps(payload) if payload is not None else ""
    resp.text = text
    if payload is not None:
        resp.json.return_value = payload
    else:
        resp.json.side_effect = ValueError("Expecting value")
    return resp


MEETING_ROWS = [
    {
        "id_bigint": "101",
        "meeting_name": "Sunrise Serenity",
        "weekday_tinyint": "2",
        "start_time": "07:00:00",
        "duration_time": "01:00:00",
        "latitude": "40.7590",
        "longitude": "-73.9845",
        "location_text": "Community Church",
        "location_street": "1 Main St",
        "location_municipality": "New York",
        "location_province": "NY",
        "venue_type": "1",
        "formats": "BM,O",
        "format_shared_id_list": "3, 17",
        "distance_in_miles": "0.4",
        "distance_in_km": "0.64",
    },
    {
        "id_bigint": "102",
        "meeting_name": "Online Evening Group",
        "weekday_tinyint": "6",
        "start_time": "19:30:00",
        "venue_type": "2",
        "virtual_meeting_link": "https://meet.example.org/xyz",
        "formats": "",
        "format_shared_id_list": "",
        "latitude": "",
        "longitude": "",
    },
]

SEARCH_RESULT = {
    "lat": "40.7580",
    "lon": "-73.9855",
    "display_name": "Times Square, Manhattan, New York, USA",
    "address": {"city": "New York"},
}


@pytest.fixture()
def mock_get():
    """Patch the transport; every Session.get in the test returns this mock."""
    with patch("requests.Session.get") as mocked:
        yield mocked


@pytest.fixture()
def client():
    """A client with geocoding disabled."""
    from bmlt_query import BmltClient

    c = BmltClient(ROOT, enable_geocoding=False)
    yield c
    c.close()


@pytest.fixture()
def geo_client():
    """A client with the default (lazily created) geocoder."""
    from bmlt_query import BmltClient

    c = BmltClient(ROOT)
    yield c
    c.close()
