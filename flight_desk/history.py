from __future__ import annotations

import datetime as dt
import json
import logging
import threading
import time
from typing import Callable, Type, TypeVar, Union

from .exceptions import IncompleteOfferError, PersistenceError
from .models import (
    BookingEntry,
    BookingStatus,
    FlightOffer,
    PopularTrip,
    SearchEntry,
    SearchRequest,
)
from .store import KeyValueStore

logger = logging.getLogger(__name__)

SEARCHES_KEY = "recentSearches"
BOOKINGS_KEY = "bookingHistory"

Entry = TypeVar("Entry", SearchEntry, BookingEntry)


# ────────────────────────────────────────────────────────────────
# Display helpers
# ────────────────────────────────────────────────────────────────


def flight_number(offer_id: str) -> str:
    return f"FL{offer_id.zfill(4)}"


def format_duration(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60}m"


def format_time(moment: dt.datetime) -> str:
    return moment.strftime("%I:%M %p")


def format_date(moment: dt.datetime) -> str:
    return moment.strftime("%b %d, %Y")


class HistoryLog:
    """Recent searches and bookings, persisted through a key-value store.

    Searches are capped at ``search_limit`` entries, bookings are not. Both
    lists are kept most-recent-first. Writes are serialised with a lock so
    two overlapping read-modify-write cycles cannot clobber each other.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        search_limit: int = 5,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.search_limit = search_limit
        self.clock = clock
        self.searches: list[SearchEntry] = []
        self.bookings: list[BookingEntry] = []
        self._lock = threading.Lock()
        self._last_id = 0

    # ──────────────────────────────────────────────────────────

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def _next_id(self) -> str:
        candidate = int(self.clock() * 1_000_000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    def _read(self, key: str, cls: Type[Entry]) -> list[Entry]:
        raw = self.store.get(key)
        if raw is None:
            return []
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise PersistenceError(f"{key} is not a list")
            return [cls.from_dict(item) for item in items]
        except (
            ValueError,
            KeyError,
            TypeError,
            OverflowError,
            RecursionError,
            PersistenceError,
        ) as exc:
            logger.warning("Discarding unreadable %s: %s", key, exc)
            return []

    def _write(self, key: str, entries: list[Union[SearchEntry, BookingEntry]]) -> None:
        self.store.set(key, json.dumps([e.to_dict() for e in entries]))

    def load(self) -> None:
        """Re-read both lists from the store."""
        with self._lock:
            self.searches = self._read(SEARCHES_KEY, SearchEntry)
            self.bookings = self._read(BOOKINGS_KEY, BookingEntry)
        logger.info(
            "Loaded %d searches and %d bookings",
            len(self.searches),
            len(self.bookings),
        )

    # ──────────────────────────────────────────────────────────

    def record_search(self, request: SearchRequest, result_count: int) -> SearchEntry:
        entry = SearchEntry(
            id=self._next_id(),
            origin=request.origin,
            destination=request.destination,
            date=request.date.isoformat() if request.date else "",
            created_at=self._now_ms(),
            result_count=result_count,
        )
        with self._lock:
            updated = [entry, *self.searches][: self.search_limit]
            self._write(SEARCHES_KEY, updated)
            self.searches = updated
        logger.info(
            "Recorded search %s ➔ %s (%d results)",
            entry.origin,
            entry.destination,
            result_count,
        )
        return entry

    def record_booking(self, offer: FlightOffer) -> BookingEntry:
        leg = offer.first_leg
        if leg is None:
            raise IncompleteOfferError(f"offer {offer.id!r} has no legs")

        entry = BookingEntry(
            id=self._next_id(),
            flight_number=flight_number(offer.id),
            airline=leg.carrier or "Unknown Airline",
            origin=f"{leg.origin_city} ({leg.origin_code})",
            destination=f"{leg.destination_city} ({leg.destination_code})",
            date=format_date(leg.departure),
            price=offer.price_formatted,
            status=BookingStatus.UPCOMING,
            created_at=self._now_ms(),
            departure_time=format_time(leg.departure),
            arrival_time=format_time(leg.arrival),
            duration=format_duration(leg.duration_minutes),
        )
        self._prepend_booking(entry)
        return entry

    def record_trip_booking(self, trip: PopularTrip) -> BookingEntry:
        """Book a catalogue trip; times are placeholders the catalogue lacks."""
        entry = BookingEntry(
            id=self._next_id(),
            flight_number=trip.flight_number,
            airline=trip.airline,
            origin=trip.origin,
            destination=trip.destination,
            date=trip.date,
            price=trip.price,
            status=BookingStatus.UPCOMING,
            created_at=self._now_ms(),
            departure_time="08:00",
            arrival_time="12:00",
            duration="4h 0m",
        )
        self._prepend_booking(entry)
        return entry

    def _prepend_booking(self, entry: BookingEntry) -> None:
        with self._lock:
            # Re-read so bookings made by another instance are kept.
            current = self._read(BOOKINGS_KEY, BookingEntry)
            updated = [entry, *current]
            self._write(BOOKINGS_KEY, updated)
            self.bookings = updated
        logger.info("Recorded booking %s %s", entry.flight_number, entry.airline)

    def clear_search_history(self) -> None:
        with self._lock:
            self.store.remove(SEARCHES_KEY)
            self.searches = []
        logger.info("Cleared search history")


__all__ = [
    "HistoryLog",
    "SEARCHES_KEY",
    "BOOKINGS_KEY",
    "flight_number",
    "format_duration",
    "format_time",
    "format_date",
]
