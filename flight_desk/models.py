"""Data models used throughout the project."""

from __future__ import annotations

from dataclasses import dataclass
import datetime as dt
from enum import Enum
from typing import Any, Optional


class BookingStatus(str, Enum):
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(slots=True, frozen=True)
class SearchRequest:
    origin: str
    destination: str
    date: Optional[dt.date]
    adults: int = 1
    currency: str = "USD"
    cabin_class: str = "economy"


@dataclass(slots=True, frozen=True)
class Leg:
    origin_code: str
    origin_city: str
    destination_code: str
    destination_city: str
    departure: dt.datetime
    arrival: dt.datetime
    duration_minutes: int
    carrier: Optional[str]
    stop_count: int = 0


@dataclass(slots=True, frozen=True)
class FlightOffer:
    id: str
    price_formatted: str
    price_raw: float
    currency: str
    legs: tuple[Leg, ...] = ()

    @property
    def first_leg(self) -> Optional[Leg]:
        return self.legs[0] if self.legs else None


@dataclass(slots=True, frozen=True)
class AirportInfo:
    iata_code: str
    name: str
    city: str
    country_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def display_name(self) -> str:
        return f"{self.city} ({self.iata_code})"


@dataclass(slots=True, frozen=True)
class SearchEntry:
    id: str
    origin: str
    destination: str
    date: str
    created_at: int
    result_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "origin": self.origin,
            "destination": self.destination,
            "date": self.date,
            "timestamp": self.created_at,
            "resultsCount": self.result_count,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "SearchEntry":
        return cls(
            id=str(raw["id"]),
            origin=str(raw["origin"]),
            destination=str(raw["destination"]),
            date=str(raw["date"]),
            created_at=int(raw["timestamp"]),
            result_count=int(raw["resultsCount"]),
        )


@dataclass(slots=True, frozen=True)
class BookingEntry:
    id: str
    flight_number: str
    airline: str
    origin: str
    destination: str
    date: str
    price: str
    status: BookingStatus
    created_at: int
    departure_time: str
    arrival_time: str
    duration: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "flightNumber": self.flight_number,
            "airline": self.airline,
            "from": self.origin,
            "to": self.destination,
            "date": self.date,
            "price": self.price,
            "status": self.status.value,
            "bookingDate": self.created_at,
            "departureTime": self.departure_time,
            "arrivalTime": self.arrival_time,
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "BookingEntry":
        return cls(
            id=str(raw["id"]),
            flight_number=str(raw["flightNumber"]),
            airline=str(raw["airline"]),
            origin=str(raw["from"]),
            destination=str(raw["to"]),
            date=str(raw["date"]),
            price=str(raw["price"]),
            status=BookingStatus(raw["status"]),
            created_at=int(raw["bookingDate"]),
            departure_time=str(raw["departureTime"]),
            arrival_time=str(raw["arrivalTime"]),
            duration=str(raw["duration"]),
        )


@dataclass(slots=True, frozen=True)
class PopularTrip:
    id: str
    origin: str
    destination: str
    date: str
    price: str
    airline: str
    flight_number: str
    status: BookingStatus
    booking_reference: str
    popularity: int
    return_date: Optional[str] = None
    gate: Optional[str] = None
    terminal: Optional[str] = None
    seat: Optional[str] = None
