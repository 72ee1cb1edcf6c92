from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .airports import AirportDirectory, AirportResolver
from .config import Settings, get_settings
from .history import HistoryLog
from .providers import build_provider
from .search_client import FlightSearchClient
from .store import SqliteKeyValueStore


@dataclass(slots=True)
class FlightDesk:
    """The components shared by every command, built once at startup."""

    settings: Settings
    resolver: AirportResolver
    search_client: FlightSearchClient
    history: HistoryLog


def build_app(settings: Optional[Settings] = None) -> FlightDesk:
    settings = settings or get_settings()

    directory = None
    if settings.airport_api_key:
        directory = AirportDirectory(
            settings.airport_api_url,
            settings.airport_api_key,
            timeout_s=settings.http_timeout_s,
        )

    client = FlightSearchClient(
        build_provider(settings),
        adults=settings.adults,
        currency=settings.currency,
        cabin_class=settings.cabin_class,
    )
    history = HistoryLog(
        SqliteKeyValueStore(settings.db_path),
        search_limit=settings.search_history_limit,
    )
    history.load()
    return FlightDesk(
        settings=settings,
        resolver=AirportResolver(directory),
        search_client=client,
        history=history,
    )


__all__ = ["FlightDesk", "build_app"]
