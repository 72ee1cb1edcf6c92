from flight_desk.models import BookingStatus
from flight_desk.trips import get_trip, popular_trips


def test_popular_trips_sorted_and_limited():
    trips = popular_trips()
    assert len(trips) == 7
    scores = [t.popularity for t in trips]
    assert scores == sorted(scores, reverse=True)
    assert trips[0].flight_number == "DL 2456"


def test_popular_trips_custom_limit():
    assert len(popular_trips(20)) == 10
    assert popular_trips(0) == []


def test_get_trip():
    trip = get_trip("9")
    assert trip.status is BookingStatus.COMPLETED
    assert trip.return_date == "Jan 15, 2025"
    assert get_trip("404") is None
