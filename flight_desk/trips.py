from __future__ import annotations

from typing import Optional

from .models import BookingStatus, PopularTrip

_UPCOMING = BookingStatus.UPCOMING

_CATALOGUE: tuple[PopularTrip, ...] = (
    PopularTrip("1", "New York (JFK)", "Los Angeles (LAX)", "Mar 15, 2025", "$299", "Delta Airlines", "DL 2456", _UPCOMING, "DL7X9K", 95, "Mar 22, 2025", "A12", "Terminal 4", "14A"),
    PopularTrip("2", "London (LHR)", "Paris (CDG)", "Apr 10, 2025", "$189", "British Airways", "BA 308", _UPCOMING, "BA9M3K", 92, "Apr 14, 2025", "B15", "Terminal 5", "12F"),
    PopularTrip("3", "Tokyo (NRT)", "Seoul (ICN)", "May 5, 2025", "$245", "Japan Airlines", "JL 958", _UPCOMING, "JL4K8P", 89, seat="18A"),
    PopularTrip("4", "Dubai (DXB)", "Mumbai (BOM)", "Apr 20, 2025", "$320", "Emirates", "EK 508", _UPCOMING, "EK7L2M", 87, "Apr 28, 2025", "C8", "Terminal 3", "22C"),
    PopularTrip("5", "Sydney (SYD)", "Melbourne (MEL)", "Mar 25, 2025", "$149", "Qantas", "QF 401", _UPCOMING, "QF5N9R", 85, "Mar 30, 2025", "D12", "Terminal 1", "8B"),
    PopularTrip("6", "Barcelona (BCN)", "Rome (FCO)", "Jun 12, 2025", "$175", "Vueling", "VY 6134", _UPCOMING, "VY3P7Q", 83, "Jun 18, 2025", seat="15E"),
    PopularTrip("7", "Singapore (SIN)", "Bangkok (BKK)", "May 15, 2025", "$128", "Singapore Airlines", "SQ 711", _UPCOMING, "SQ8R4T", 81, gate="A7", terminal="Terminal 2", seat="11D"),
    PopularTrip("8", "Chicago (ORD)", "Miami (MIA)", "Apr 20, 2025", "$249", "American Airlines", "AA 1234", _UPCOMING, "AA8M2P", 78, seat="22F"),
    PopularTrip("9", "San Francisco (SFO)", "Seattle (SEA)", "Jan 10, 2025", "$189", "Alaska Airlines", "AS 567", BookingStatus.COMPLETED, "AS3K7L", 75, "Jan 15, 2025"),
    PopularTrip("10", "Boston (BOS)", "Denver (DEN)", "Feb 28, 2025", "$199", "United Airlines", "UA 892", _UPCOMING, "UA5N8Q", 72, gate="B7", terminal="Terminal 1", seat="18C"),
)


def popular_trips(limit: int = 7) -> list[PopularTrip]:
    """Return the demo trips, most popular first."""
    ranked = sorted(_CATALOGUE, key=lambda t: t.popularity, reverse=True)
    return ranked[: max(limit, 0)]


def get_trip(trip_id: str) -> Optional[PopularTrip]:
    return next((t for t in _CATALOGUE if t.id == trip_id), None)


__all__ = ["popular_trips", "get_trip"]
