"""Airport code resolution: built-in allow-list, session cache, remote lookup."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from .exceptions import ProviderError, ValidationError
from .models import AirportInfo

logger = logging.getLogger(__name__)


# Well-known airports resolved without any remote call.
POPULAR_AIRPORTS: dict[str, AirportInfo] = {
    "JFK": AirportInfo("JFK", "John F. Kennedy International Airport", "New York", "US", 40.639751, -73.778925),
    "LAX": AirportInfo("LAX", "Los Angeles International Airport", "Los Angeles", "US", 33.942791, -118.410042),
    "LHR": AirportInfo("LHR", "Heathrow Airport", "London", "GB"),
    "CDG": AirportInfo("CDG", "Charles de Gaulle Airport", "Paris", "FR"),
    "DXB": AirportInfo("DXB", "Dubai International Airport", "Dubai", "AE"),
    "SIN": AirportInfo("SIN", "Changi Airport", "Singapore", "SG"),
}


def _float_or_none(value: Any) -> Optional[float]:
    try:
        return float(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


class AirportDirectory:
    """Client for an AviationStack-style airports endpoint."""

    def __init__(self, url: str, access_key: str, *, timeout_s: float = 15) -> None:
        self.url = url
        self.access_key = access_key
        self.timeout_s = timeout_s

    def _get(self, **params: str) -> list[AirportInfo]:
        params["access_key"] = self.access_key
        try:
            resp = requests.get(self.url, params=params, timeout=self.timeout_s)
        except requests.RequestException as exc:
            raise ProviderError(f"transport error: {exc}") from exc
        if resp.status_code != 200:
            raise ProviderError(f"HTTP {resp.status_code} – {resp.text[:120]}")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise ProviderError("unparseable payload") from exc

        records = payload.get("data") if isinstance(payload, dict) else None
        if records is None:
            return []
        if not isinstance(records, list):
            raise ProviderError("unexpected payload")
        airports = [self._to_airport(r) for r in records]
        return [a for a in airports if a]

    @staticmethod
    def _to_airport(raw: Any) -> Optional[AirportInfo]:
        if not isinstance(raw, dict):
            return None
        code = str(raw.get("iata_code") or "").strip().upper()
        if not code:
            return None
        return AirportInfo(
            iata_code=code,
            name=str(raw.get("airport_name") or code),
            city=str(raw.get("city") or raw.get("municipality_name") or code),
            country_code=raw.get("country_code") or None,
            latitude=_float_or_none(raw.get("latitude")),
            longitude=_float_or_none(raw.get("longitude")),
        )

    def lookup(self, code: str) -> Optional[AirportInfo]:
        airports = self._get(iata_code=code)
        for airport in airports:
            if airport.iata_code == code:
                return airport
        return airports[0] if airports else None

    def search(self, query: str) -> list[AirportInfo]:
        return self._get(search=query)


class AirportResolver:
    """Turn airport codes into friendly names for input fields.

    One instance is created at startup and shared; its cache lives as long
    as the instance. Negative lookups are never cached.
    """

    def __init__(
        self,
        directory: Optional[AirportDirectory] = None,
        allow_list: Optional[dict[str, AirportInfo]] = None,
    ) -> None:
        self.directory = directory
        self.allow_list = POPULAR_AIRPORTS if allow_list is None else allow_list
        self._cache: dict[str, AirportInfo] = {}
        self._search_cache: dict[str, AirportInfo] = {}

    def resolve(self, code: Optional[str]) -> Optional[AirportInfo]:
        code = (code or "").strip()
        if len(code) < 2:
            return None
        code = code.upper()

        known = self.allow_list.get(code)
        if known:
            return known

        cached = self._cache.get(code)
        if cached:
            return cached

        if self.directory is None:
            return None

        try:
            found = self.directory.lookup(code)
        except ProviderError as exc:
            logger.debug("Airport lookup failed for %s: %s", code, exc)
            return None
        if not found:
            return None

        self._cache[code] = found
        return found

    def display_name(self, code: Optional[str]) -> str:
        info = self.resolve(code)
        return info.display_name if info else ""

    def search_airports(self, query: Optional[str]) -> list[AirportInfo]:
        """Free-text airport search with a local fallback."""
        query = (query or "").strip()
        if len(query) < 2:
            raise ValidationError(
                "short query",
                "Please enter at least 2 characters to search for airports.",
            )

        key = query.lower()
        cached = self._search_cache.get(key)
        if cached:
            return [cached]

        results: list[AirportInfo] = []
        if self.directory is not None:
            try:
                results = self.directory.search(query)
            except ProviderError as exc:
                logger.warning("Airport search failed, trying fallback: %s", exc)

        if not results:
            results = [
                a
                for a in self.allow_list.values()
                if key in a.iata_code.lower()
                or key in a.name.lower()
                or key in a.city.lower()
            ]

        if results:
            self._search_cache[key] = results[0]
        return results


__all__ = ["AirportDirectory", "AirportResolver", "POPULAR_AIRPORTS"]
