from __future__ import annotations

import datetime as dt
import itertools
import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

import requests

from .exceptions import ProviderError, ValidationError
from .models import FlightOffer, SearchRequest
from .providers import FlightProvider

logger = logging.getLogger(__name__)

_CODE_RE = re.compile(r"^[A-Z]{3}$")


@dataclass(slots=True, frozen=True)
class SearchResult:
    generation: int
    request: SearchRequest
    offers: list[FlightOffer]


def normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def build_request(
    origin: Optional[str],
    destination: Optional[str],
    date: Union[dt.date, str, None],
    *,
    adults: int = 1,
    currency: str = "USD",
    cabin_class: str = "economy",
) -> SearchRequest:
    """Validate raw input and return a normalised :class:`SearchRequest`.

    Every check runs before any network call. Codes are trimmed and
    upper-cased; *date* may be a :class:`datetime.date` or an ISO string.
    """
    origin = normalize_code(origin)
    destination = normalize_code(destination)

    if not origin or not destination:
        raise ValidationError(
            "missing endpoints",
            "Please enter both origin and destination airports.",
        )
    if origin == destination:
        raise ValidationError(
            "same endpoint", "Origin and destination cannot be the same."
        )
    if not _CODE_RE.match(origin) or not _CODE_RE.match(destination):
        raise ValidationError("invalid code", "Airport codes must be 3 letters.")

    if date is None or (isinstance(date, str) and not date.strip()):
        raise ValidationError("missing date", "Please select a departure date.")
    if isinstance(date, str):
        try:
            date = dt.date.fromisoformat(date.strip()[:10])
        except ValueError as exc:
            raise ValidationError(
                "invalid date", "Dates must look like YYYY-MM-DD."
            ) from exc
    elif isinstance(date, dt.datetime):
        date = date.date()

    return SearchRequest(
        origin=origin,
        destination=destination,
        date=date,
        adults=adults,
        currency=currency,
        cabin_class=cabin_class,
    )


class FlightSearchClient:
    """Validates search input and delegates to the configured provider.

    Each call to :meth:`search` takes a new generation number. A caller that
    fires overlapping searches should drop any result for which
    :meth:`is_current` is ``False``.
    """

    def __init__(
        self,
        provider: FlightProvider,
        *,
        adults: int = 1,
        currency: str = "USD",
        cabin_class: str = "economy",
    ) -> None:
        self.provider = provider
        self.adults = adults
        self.currency = currency
        self.cabin_class = cabin_class
        self._generations = itertools.count(1)
        self._latest = 0

    def search(
        self,
        origin: Optional[str],
        destination: Optional[str],
        date: Union[dt.date, str, None],
    ) -> SearchResult:
        request = build_request(
            origin,
            destination,
            date,
            adults=self.adults,
            currency=self.currency,
            cabin_class=self.cabin_class,
        )
        generation = next(self._generations)
        self._latest = generation

        logger.info(
            "Searching %s ➔ %s on %s (generation %s)",
            request.origin,
            request.destination,
            request.date,
            generation,
        )
        try:
            offers = list(self.provider.fetch(request))
        except ProviderError as exc:
            logger.warning(
                "Provider failed for %s->%s: %s",
                request.origin,
                request.destination,
                exc,
            )
            raise
        except (
            requests.RequestException,
            ValueError,
            KeyError,
            TypeError,
            OverflowError,
        ) as exc:
            logger.warning(
                "Provider failed for %s->%s: %s",
                request.origin,
                request.destination,
                exc,
            )
            raise ProviderError(str(exc)) from exc

        logger.info("Found %d offers", len(offers))
        return SearchResult(generation=generation, request=request, offers=offers)

    def search_offers(
        self,
        origin: Optional[str],
        destination: Optional[str],
        date: Union[dt.date, str, None],
    ) -> list[FlightOffer]:
        return self.search(origin, destination, date).offers

    def is_current(self, result: SearchResult) -> bool:
        return result.generation == self._latest


__all__ = ["FlightSearchClient", "SearchResult", "build_request", "normalize_code"]
