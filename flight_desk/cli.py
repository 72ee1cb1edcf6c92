from __future__ import annotations

import datetime as dt
import logging
import sys
from typing import NoReturn, Optional

import click

from .app import FlightDesk, build_app
from .exceptions import FlightDeskError
from .models import FlightOffer
from .trips import get_trip, popular_trips

logger = logging.getLogger(__name__)

SIGN_IN_REQUIRED = "You must be signed in to book flights."


def _fail(exc: FlightDeskError) -> NoReturn:
    logger.debug("Command failed: %s", exc)
    click.echo(exc.user_message, err=True)
    sys.exit(1)


def _default_date() -> str:
    return (dt.date.today() + dt.timedelta(days=1)).isoformat()


def _describe(offer: FlightOffer) -> str:
    leg = offer.first_leg
    if leg is None:
        return f"[{offer.id}] {offer.price_formatted}"
    stops = "nonstop" if leg.stop_count == 0 else f"{leg.stop_count} stop(s)"
    return (
        f"[{offer.id}] {leg.origin_code} {leg.departure:%H:%M} ➔ "
        f"{leg.destination_code} {leg.arrival:%H:%M}  "
        f"{leg.carrier or 'Unknown Airline'}  {stops}  {offer.price_formatted}"
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Search flights, keep a history of searches and book demo trips."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if ctx.obj is None:
        ctx.obj = build_app()


@cli.command()
@click.argument("origin")
@click.argument("destination")
@click.option("--date", default=None, help="Departure date (YYYY-MM-DD), default tomorrow")
@click.pass_obj
def search(desk: FlightDesk, origin: str, destination: str, date: Optional[str]) -> None:
    """Search flights and remember the search."""
    try:
        result = desk.search_client.search(origin, destination, date or _default_date())
    except FlightDeskError as exc:
        _fail(exc)

    desk.history.record_search(result.request, len(result.offers))

    for code in (result.request.origin, result.request.destination):
        name = desk.resolver.display_name(code)
        if name:
            click.echo(name)
    if not result.offers:
        click.echo("No flights found. Try another date or route.")
        return
    for offer in result.offers:
        click.echo(_describe(offer))


@cli.command()
@click.argument("code")
@click.pass_obj
def airport(desk: FlightDesk, code: str) -> None:
    """Show the friendly name of an airport code."""
    click.echo(desk.resolver.display_name(code) or "Unknown airport")


@cli.command()
@click.argument("query")
@click.pass_obj
def airports(desk: FlightDesk, query: str) -> None:
    """Search airports by code, name or city."""
    try:
        found = desk.resolver.search_airports(query)
    except FlightDeskError as exc:
        _fail(exc)
    if not found:
        click.echo("No airports found")
    for info in found:
        click.echo(f"{info.iata_code}  {info.name}  {info.city}")


@cli.command()
@click.argument("origin")
@click.argument("destination")
@click.argument("offer_id")
@click.option("--date", default=None, help="Departure date (YYYY-MM-DD), default tomorrow")
@click.option("--signed-in", is_flag=True, help="The traveller is signed in")
@click.pass_obj
def book(
    desk: FlightDesk,
    origin: str,
    destination: str,
    offer_id: str,
    date: Optional[str],
    signed_in: bool,
) -> None:
    """Book one offer from a fresh search."""
    if not signed_in:
        click.echo(SIGN_IN_REQUIRED, err=True)
        sys.exit(1)
    try:
        offers = desk.search_client.search_offers(
            origin, destination, date or _default_date()
        )
        offer = next((o for o in offers if o.id == offer_id), None)
        if offer is None:
            click.echo(f"No offer with id {offer_id}", err=True)
            sys.exit(1)
        booking = desk.history.record_booking(offer)
    except FlightDeskError as exc:
        _fail(exc)
    click.echo(
        f"Booking confirmed! Your flight {booking.flight_number} from "
        f"{booking.origin} to {booking.destination} on {booking.date} "
        "has been booked."
    )


@cli.command("book-trip")
@click.argument("trip_id")
@click.option("--signed-in", is_flag=True, help="The traveller is signed in")
@click.pass_obj
def book_trip(desk: FlightDesk, trip_id: str, signed_in: bool) -> None:
    """Book one of the popular trips."""
    if not signed_in:
        click.echo(SIGN_IN_REQUIRED, err=True)
        sys.exit(1)
    trip = get_trip(trip_id)
    if trip is None:
        click.echo(f"No trip with id {trip_id}", err=True)
        sys.exit(1)
    booking = desk.history.record_trip_booking(trip)
    click.echo(
        f"Booking confirmed! Your flight {booking.flight_number} from "
        f"{booking.origin} to {booking.destination} on {booking.date} "
        "has been booked."
    )


@cli.command()
@click.option("--bookings", is_flag=True, help="Show bookings instead of searches")
@click.pass_obj
def history(desk: FlightDesk, bookings: bool) -> None:
    """List recent searches or bookings."""
    desk.history.load()
    if bookings:
        if not desk.history.bookings:
            click.echo("No bookings yet")
        for b in desk.history.bookings:
            click.echo(
                f"{b.flight_number}  {b.airline}  {b.origin} ➔ {b.destination}  "
                f"{b.date} {b.departure_time}-{b.arrival_time} ({b.duration})  "
                f"{b.price}  {b.status.value}"
            )
        return

    if not desk.history.searches:
        click.echo("No recent searches")
    for s in desk.history.searches:
        click.echo(f"{s.origin} ➔ {s.destination}  {s.date}  {s.result_count} results")


@cli.command("clear-history")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def clear_history(desk: FlightDesk, yes: bool) -> None:
    """Clear all recent searches."""
    if not yes and not click.confirm(
        "Are you sure you want to clear all search history?"
    ):
        click.echo("Cancelled")
        return
    desk.history.clear_search_history()
    click.echo("Search history cleared")


@cli.command()
@click.option("--limit", type=int, default=7, show_default=True)
def trips(limit: int) -> None:
    """Show the most popular trips."""
    for t in popular_trips(limit):
        back = f" – {t.return_date}" if t.return_date else ""
        click.echo(
            f"[{t.id}] {t.origin} ➔ {t.destination}  {t.date}{back}  "
            f"{t.airline} {t.flight_number}  {t.price}"
        )


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
