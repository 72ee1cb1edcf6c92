from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Iterable, Optional, Protocol, Sequence

import requests

from .config import Settings
from .exceptions import ProviderError
from .models import FlightOffer, Leg, SearchRequest

logger = logging.getLogger(__name__)


# Paths probed in order; the first one holding a non-empty list wins.
OFFER_PATHS: tuple[tuple[str, ...], ...] = (
    ("data", "itineraries"),
    ("itineraries",),
    ("data", "flights"),
    ("flights",),
    ("data",),
    ("results",),
)


class FlightProvider(Protocol):
    def fetch(self, request: SearchRequest) -> list[FlightOffer]: ...


def extract_offer_list(
    payload: Any, paths: Iterable[Sequence[str]] = OFFER_PATHS
) -> list[dict]:
    """Return the first non-empty list found under one of *paths*."""
    if not isinstance(payload, dict):
        return []
    for path in paths:
        node: Any = payload
        for part in path:
            if not isinstance(node, dict):
                node = None
                break
            node = node.get(part)
        if isinstance(node, list) and node:
            return node
    return []


class RemoteFlightProvider:
    """Client for a RapidAPI-style flight search endpoint."""

    def __init__(
        self,
        url: str,
        api_key: str = "",
        host: str = "",
        *,
        timeout_s: float = 15,
        country_code: str = "US",
    ) -> None:
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.host = host
        self.timeout_s = timeout_s
        self.country_code = country_code

    # ──────────────────────────────────────────────────────────

    def fetch(self, request: SearchRequest) -> list[FlightOffer]:
        params = {
            "originSkyId": request.origin,
            "destinationSkyId": request.destination,
            "date": request.date.isoformat() if request.date else "",
            "adults": request.adults,
            "currency": request.currency,
            "cabinClass": request.cabin_class,
            "countryCode": self.country_code,
        }
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["X-RapidAPI-Key"] = self.api_key
        if self.host:
            headers["X-RapidAPI-Host"] = self.host

        logger.info(
            "Fetching offers %s ➔ %s on %s",
            request.origin,
            request.destination,
            params["date"],
        )
        try:
            resp = requests.get(
                self.url, params=params, headers=headers, timeout=self.timeout_s
            )
        except requests.RequestException as exc:
            raise ProviderError(f"transport error: {exc}") from exc

        if resp.status_code != 200:
            raise ProviderError(f"HTTP {resp.status_code} – {resp.text[:120]}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise ProviderError("unparseable payload") from exc

        raw_items = extract_offer_list(data)
        offers = [self._to_offer(item, request.currency) for item in raw_items]
        return [off for off in offers if off]

    def _to_offer(self, item: Any, currency: str) -> Optional[FlightOffer]:
        """Map a raw itinerary record onto a FlightOffer."""
        if not isinstance(item, dict):
            return None
        try:
            legs = tuple(
                leg for leg in (_to_leg(raw) for raw in item.get("legs") or []) if leg
            )
            if not legs:
                logger.debug("Skipping offer %s without legs", item.get("id"))
                return None
            price = item.get("price") or {}
            if not isinstance(price, dict):
                price = {"raw": price}
            raw_amount = float(price.get("raw") or price.get("amount") or 0)
            return FlightOffer(
                id=str(item.get("id") or ""),
                price_formatted=str(price.get("formatted") or f"${raw_amount:.2f}"),
                price_raw=raw_amount,
                currency=str(price.get("currency") or currency),
                legs=legs,
            )
        except (TypeError, ValueError, OverflowError) as exc:
            logger.debug("Skipping malformed offer %s: %s", item.get("id"), exc)
            return None


def _place(raw: Any) -> tuple[str, str]:
    if not isinstance(raw, dict):
        return "", ""
    code = str(raw.get("iataCode") or raw.get("displayCode") or raw.get("id") or "")
    city = str(raw.get("city") or raw.get("name") or code)
    return code.upper(), city


def _to_leg(raw: Any) -> Optional[Leg]:
    if not isinstance(raw, dict):
        return None
    try:
        departure = dt.datetime.fromisoformat(str(raw["departure"]))
        arrival = dt.datetime.fromisoformat(str(raw["arrival"]))
    except (KeyError, ValueError):
        return None
    if arrival < departure:
        return None

    origin_code, origin_city = _place(raw.get("origin"))
    dest_code, dest_city = _place(raw.get("destination"))
    carriers = raw.get("carriers")
    marketing = carriers.get("marketing") if isinstance(carriers, dict) else None
    carrier = None
    if isinstance(marketing, list) and marketing and isinstance(marketing[0], dict):
        carrier = marketing[0].get("name") or None

    duration = raw.get("durationInMinutes")
    if duration is None:
        duration = int((arrival - departure).total_seconds() // 60)

    return Leg(
        origin_code=origin_code,
        origin_city=origin_city,
        destination_code=dest_code,
        destination_city=dest_city,
        departure=departure,
        arrival=arrival,
        duration_minutes=int(duration),
        carrier=carrier,
        stop_count=int(raw.get("stopCount") or 0),
    )


class SimulatedFlightProvider:
    """Fabricates demo offers from the request alone, without any network."""

    BASE_PRICE = 1000.0

    def __init__(self, today: Optional[dt.date] = None) -> None:
        self.today = today

    def price_for(self, request: SearchRequest) -> float:
        today = self.today or dt.date.today()
        date_multiplier = 1.2 if request.date and request.date > today else 1.0
        route_multiplier = max(
            abs(ord(request.origin[0]) - ord(request.destination[0])) / 10, 0.1
        )
        return round(self.BASE_PRICE * date_multiplier * route_multiplier, 2)

    def fetch(self, request: SearchRequest) -> list[FlightOffer]:
        price = self.price_for(request)
        day = request.date or self.today or dt.date.today()
        logger.info(
            "Simulating offers %s ➔ %s on %s",
            request.origin,
            request.destination,
            day,
        )
        templates = (
            ("1", 1.0, dt.time(8, 0), 120, "Simulated Airlines", 0),
            ("2", 1.3, dt.time(12, 0), 180, "Simulated Airlines with Stop", 1),
        )
        offers = []
        for offer_id, factor, start, minutes, carrier, stops in templates:
            amount = round(price * factor, 2)
            departure = dt.datetime.combine(day, start)
            leg = Leg(
                origin_code=request.origin,
                origin_city=request.origin,
                destination_code=request.destination,
                destination_city=request.destination,
                departure=departure,
                arrival=departure + dt.timedelta(minutes=minutes),
                duration_minutes=minutes,
                carrier=carrier,
                stop_count=stops,
            )
            offers.append(
                FlightOffer(
                    id=offer_id,
                    price_formatted=f"${amount:.2f}",
                    price_raw=amount,
                    currency=request.currency,
                    legs=(leg,),
                )
            )
        return offers


def build_provider(settings: Settings) -> FlightProvider:
    """Pick the flight provider once, at startup."""
    if settings.remote_flights_enabled:
        logger.info("Using remote flight provider at %s", settings.flight_api_url)
        return RemoteFlightProvider(
            settings.flight_api_url,
            settings.flight_api_key,
            settings.flight_api_host,
            timeout_s=settings.http_timeout_s,
            country_code=settings.country_code,
        )
    logger.info("Using simulated flight provider")
    return SimulatedFlightProvider()


__all__ = [
    "FlightProvider",
    "RemoteFlightProvider",
    "SimulatedFlightProvider",
    "OFFER_PATHS",
    "extract_offer_list",
    "build_provider",
]
