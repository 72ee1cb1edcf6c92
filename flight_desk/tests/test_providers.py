import datetime as dt
from unittest.mock import Mock, patch

import pytest
import requests

from flight_desk.config import Settings
from flight_desk.exceptions import ProviderError
from flight_desk.models import SearchRequest
from flight_desk.providers import (
    RemoteFlightProvider,
    SimulatedFlightProvider,
    build_provider,
    extract_offer_list,
)


def make_request(**overrides):
    fields = dict(origin="JFK", destination="LAX", date=dt.date(2025, 1, 15))
    fields.update(overrides)
    return SearchRequest(**fields)


def make_itinerary(offer_id, price, carrier="Delta", legs=True):
    return {
        "id": offer_id,
        "price": {"formatted": f"${price}", "raw": price, "currency": "USD"},
        "legs": [
            {
                "origin": {"city": "New York", "displayCode": "JFK"},
                "destination": {"city": "Los Angeles", "displayCode": "LAX"},
                "durationInMinutes": 390,
                "carriers": {"marketing": [{"name": carrier}]},
                "departure": "2025-01-15T07:00:00",
                "arrival": "2025-01-15T13:30:00",
                "stopCount": 0,
            }
        ]
        if legs
        else [],
    }


def mock_response(payload, status_code=200):
    resp = Mock(status_code=status_code, text="error body")
    resp.json.return_value = payload
    return resp


@pytest.mark.parametrize(
    "envelope",
    [
        lambda items: {"status": True, "data": {"itineraries": items}},
        lambda items: {"itineraries": items},
        lambda items: {"data": {"flights": items}},
        lambda items: {"data": items},
        lambda items: {"results": items},
    ],
)
@patch("requests.get")
def test_remote_accepts_envelope_shapes(mock_get, envelope):
    items = [make_itinerary("a1", 320), make_itinerary("a2", 210)]
    mock_get.return_value = mock_response(envelope(items))

    provider = RemoteFlightProvider("https://flights.example.com/search", "key")
    offers = provider.fetch(make_request())

    assert [o.id for o in offers] == ["a1", "a2"]
    leg = offers[0].legs[0]
    assert leg.origin_code == "JFK"
    assert leg.destination_city == "Los Angeles"
    assert leg.carrier == "Delta"
    assert leg.duration_minutes == 390
    assert offers[1].price_raw == 210


@patch("requests.get")
def test_remote_sends_params_and_credentials(mock_get):
    mock_get.return_value = mock_response({"itineraries": []})

    provider = RemoteFlightProvider(
        "https://flights.example.com/search/",
        "secret",
        "flights.example.com",
        timeout_s=12,
        country_code="GB",
    )
    assert provider.fetch(make_request(currency="EUR")) == []

    args, kwargs = mock_get.call_args
    assert args[0] == "https://flights.example.com/search"
    assert kwargs["params"]["originSkyId"] == "JFK"
    assert kwargs["params"]["destinationSkyId"] == "LAX"
    assert kwargs["params"]["date"] == "2025-01-15"
    assert kwargs["params"]["adults"] == 1
    assert kwargs["params"]["currency"] == "EUR"
    assert kwargs["params"]["cabinClass"] == "economy"
    assert kwargs["params"]["countryCode"] == "GB"
    assert kwargs["headers"]["X-RapidAPI-Key"] == "secret"
    assert kwargs["headers"]["X-RapidAPI-Host"] == "flights.example.com"
    assert kwargs["timeout"] == 12


@patch("requests.get")
def test_remote_skips_offers_without_usable_legs(mock_get):
    broken = make_itinerary("bad-time", 100)
    broken["legs"][0]["arrival"] = "2025-01-15T05:00:00"
    endless = make_itinerary("endless", 120)
    endless["legs"][0]["durationInMinutes"] = float("inf")
    mock_get.return_value = mock_response(
        {
            "itineraries": [
                make_itinerary("no-legs", 100, legs=False),
                broken,
                endless,
                make_itinerary("ok", 150),
                "garbage",
            ]
        }
    )

    offers = RemoteFlightProvider("https://x").fetch(make_request())
    assert [o.id for o in offers] == ["ok"]


@patch("requests.get")
def test_remote_missing_carrier_stays_empty(mock_get):
    item = make_itinerary("a1", 100)
    item["legs"][0]["carriers"] = {"marketing": []}
    mock_get.return_value = mock_response({"itineraries": [item]})

    offers = RemoteFlightProvider("https://x").fetch(make_request())
    assert offers[0].legs[0].carrier is None


@patch("requests.get")
def test_remote_http_error(mock_get):
    mock_get.return_value = mock_response({}, status_code=503)
    with pytest.raises(ProviderError):
        RemoteFlightProvider("https://x").fetch(make_request())


@patch("requests.get")
def test_remote_transport_error(mock_get):
    mock_get.side_effect = requests.ConnectionError("down")
    with pytest.raises(ProviderError):
        RemoteFlightProvider("https://x").fetch(make_request())


@patch("requests.get")
def test_remote_unparseable_payload(mock_get):
    resp = Mock(status_code=200)
    resp.json.side_effect = ValueError("not json")
    mock_get.return_value = resp
    with pytest.raises(ProviderError):
        RemoteFlightProvider("https://x").fetch(make_request())


def test_extract_offer_list_unknown_shape():
    assert extract_offer_list({"data": {"something": [1]}}) == []
    assert extract_offer_list(["not", "a", "dict"]) == []
    assert extract_offer_list({"data": {"itineraries": []}, "results": [{"id": 1}]}) == [
        {"id": 1}
    ]


def test_simulated_offers():
    provider = SimulatedFlightProvider(today=dt.date(2025, 1, 1))
    offers = provider.fetch(make_request())

    assert [o.id for o in offers] == ["1", "2"]
    assert offers[0].price_raw == 240.0
    assert offers[0].price_formatted == "$240.00"
    assert offers[1].price_raw == 312.0
    for offer in offers:
        assert offer.price_raw > 0
        assert offer.legs
        leg = offer.legs[0]
        assert leg.arrival >= leg.departure
    assert offers[0].legs[0].stop_count == 0
    assert offers[1].legs[0].stop_count == 1
    assert offers[1].legs[0].carrier == "Simulated Airlines with Stop"


def test_simulated_price_is_positive_for_same_initial():
    provider = SimulatedFlightProvider(today=dt.date(2025, 1, 1))
    request = make_request(origin="LHR", destination="LAX", date=dt.date(2024, 12, 1))
    assert provider.price_for(request) == 100.0


def test_build_provider_selection():
    assert isinstance(build_provider(Settings(flight_api_url="")), SimulatedFlightProvider)
    remote = build_provider(Settings(flight_api_url="https://x", flight_api_key="k"))
    assert isinstance(remote, RemoteFlightProvider)
    assert remote.api_key == "k"
    demo = build_provider(Settings(flight_api_url="https://x", simulate=True))
    assert isinstance(demo, SimulatedFlightProvider)
