"""tariff-calc CLI - cheapest way to pay for time at the venue."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape

from . import settings
from .catalog import (
    ALL_BRANCHES,
    CatalogError,
    default_branch,
    get_branch_by_id,
    load_catalog,
)
from .daytype import effective_is_weekend, spans_both_weekday_and_weekend
from .formatter import (
    console,
    print_branches,
    print_header,
    print_no_quote,
    print_quote,
    print_quote_json,
    print_tariff_board,
)
from .models import Branch, Zone
from .optimizer import optimize

app = typer.Typer(
    name="tariff-calc",
    help="🎮 Find the cheapest tariff combination for your gaming session",
    rich_markup_mode="rich",
)

settings_app = typer.Typer(help="Saved branch/zone selection")
app.add_typer(settings_app, name="settings")

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

MAX_REQUEST_MINUTES = 3600
MAX_HOURS = MAX_REQUEST_MINUTES // 60
MAX_MINUTES_ALONE = 1000
DAY_TYPES = ("auto", "weekday", "weekend")


def requested_minutes(hours: int, minutes: int) -> int:
    """Total requested minutes from the hours/minutes inputs.

    Minutes may go up to 1000 on their own, but only up to 59 next to a
    non-zero hour count. The total is capped at ``MAX_REQUEST_MINUTES``.
    """
    if not 0 <= hours <= MAX_HOURS:
        raise ValueError(f"Hours must be between 0 and {MAX_HOURS}")
    max_minutes = 59 if hours >= 1 else MAX_MINUTES_ALONE
    if not 0 <= minutes <= max_minutes:
        raise ValueError(f"Minutes must be between 0 and {max_minutes}")
    total = hours * 60 + minutes
    if total > MAX_REQUEST_MINUTES:
        raise ValueError(
            f"Maximum time for a quote is {MAX_HOURS} hours ({MAX_REQUEST_MINUTES} minutes)"
        )
    return total


def _fail(message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(1)


def _effective_time(at: Optional[str]) -> datetime:
    """The one timestamp every calculation in this run uses."""
    if not at:
        return datetime.now()
    try:
        return datetime.fromisoformat(at)
    except ValueError:
        _fail(f"Invalid time: {at}. Use YYYY-MM-DD HH:MM (e.g. 2025-06-06 23:30)")


def _forced_day_type(day_type: str) -> Optional[bool]:
    if day_type not in DAY_TYPES:
        _fail(f"Invalid day type. Choose: {', '.join(DAY_TYPES)}")
    if day_type == "auto":
        return None
    return day_type == "weekend"


def _load_branches(catalog: Optional[Path]) -> tuple[Branch, ...]:
    if catalog is None:
        return ALL_BRANCHES
    try:
        return load_catalog(catalog)
    except (CatalogError, OSError) as e:
        _fail(f"Could not load catalog: {e}")


def _resolve(catalog_branches, branch_id: Optional[str], zone_id: Optional[str]) -> tuple[Branch, Optional[Zone]]:
    """Pick the branch and zone from options, then saved settings, then defaults."""
    saved_branch, saved_zone = settings.load_selection()

    if branch_id:
        branch = get_branch_by_id(branch_id, catalog_branches)
        if branch is None:
            _fail(f"Unknown branch: {branch_id}. Run `tariff-calc branches` to list them.")
    else:
        branch = get_branch_by_id(saved_branch, catalog_branches) if saved_branch else None
        if branch is None:
            if saved_branch:
                logger.info(f"Saved branch {saved_branch} not in catalog, using default")
            try:
                branch = default_branch(catalog_branches)
            except CatalogError as e:
                _fail(str(e))

    if not branch.zones:
        return branch, None

    if zone_id:
        zone = next((z for z in branch.zones if z.id == zone_id), None)
        if zone is None:
            zones = ", ".join(z.id for z in branch.zones)
            _fail(f"Unknown zone: {zone_id}. {branch.name} has: {zones}")
        return branch, zone

    if branch.id == saved_branch and saved_zone:
        zone = next((z for z in branch.zones if z.id == saved_zone), None)
        if zone is not None:
            return branch, zone
    return branch, branch.zones[0]


@app.command()
def quote(
    hours: Annotated[int, typer.Argument(help="Hours to play")] = 0,
    minutes: Annotated[int, typer.Argument(help="Extra minutes (up to 1000 when hours is 0)")] = 0,
    branch_id: Annotated[Optional[str], typer.Option("--branch", "-b", help="Branch id")] = None,
    zone_id: Annotated[Optional[str], typer.Option("--zone", "-z", help="Zone id (normal, vip, ...)")] = None,
    at: Annotated[Optional[str], typer.Option("--at", help="Pretend it is this time (YYYY-MM-DD HH:MM)")] = None,
    day_type: Annotated[str, typer.Option("--day-type", help="Day type: auto, weekday, weekend")] = "auto",
    catalog: Annotated[Optional[Path], typer.Option("--catalog", help="JSON catalog file")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose logging")] = False,
):
    """
    💰 Quote the cheapest combination of tariffs for a session.

    Examples:

      tariff-calc quote 3 10

      tariff-calc quote 0 45 --zone vip

      tariff-calc quote 5 --branch kirenskogo --at "2025-06-05 22:30"
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    moment = _effective_time(at)
    is_weekend = effective_is_weekend(moment, _forced_day_type(day_type))
    catalog_branches = _load_branches(catalog)
    branch, zone = _resolve(catalog_branches, branch_id, zone_id)

    try:
        total = requested_minutes(hours, minutes)
    except ValueError as e:
        _fail(str(e))

    unpriceable = not branch.is_active or zone is None or total == 0
    if as_json and unpriceable:
        print_quote_json(None)
        return

    if not branch.is_active or zone is None:
        console.print(
            f"[yellow]The calculator for {branch.name} is still under development.[/yellow]"
        )
        return

    if total == 0:
        print_no_quote("Enter a duration to price, e.g. `tariff-calc quote 3 10`")
        return

    logger.debug(
        f"Quoting {total} min in {branch.id}/{zone.id} at {moment:%Y-%m-%d %H:%M}, "
        f"weekend={is_weekend}"
    )
    combination = optimize(total, moment.hour, is_weekend, moment, zone.plans)

    if as_json:
        print_quote_json(combination)
        return

    print_header(branch, zone, moment, is_weekend)
    if combination is None:
        print_no_quote(
            f"No tariff of {zone.name} can be bought at {moment:%H:%M}."
        )
        return
    print_quote(combination)


@app.command()
def tariffs(
    branch_id: Annotated[Optional[str], typer.Option("--branch", "-b", help="Branch id")] = None,
    zone_id: Annotated[Optional[str], typer.Option("--zone", "-z", help="Zone id")] = None,
    at: Annotated[Optional[str], typer.Option("--at", help="Pretend it is this time (YYYY-MM-DD HH:MM)")] = None,
    day_type: Annotated[str, typer.Option("--day-type", help="Day type: auto, weekday, weekend")] = "auto",
    minutes: Annotated[int, typer.Option("--minutes", "-m", help="Planned session length, highlights both prices if it crosses into the weekend")] = 0,
    catalog: Annotated[Optional[Path], typer.Option("--catalog", help="JSON catalog file")] = None,
):
    """
    📋 Show the tariff board of a zone.

    Examples:

      tariff-calc tariffs --zone vip

      tariff-calc tariffs --at "2025-06-05 23:00" --minutes 180
    """
    moment = _effective_time(at)
    is_weekend = effective_is_weekend(moment, _forced_day_type(day_type))
    catalog_branches = _load_branches(catalog)
    branch, zone = _resolve(catalog_branches, branch_id, zone_id)

    print_header(branch, zone, moment, is_weekend)
    if zone is None:
        console.print("[dim]No zones configured for this branch yet.[/dim]")
        return

    span = spans_both_weekday_and_weekend(moment, minutes) if branch.is_active else None
    print_tariff_board(zone, moment.hour, is_weekend, span)
    if zone.description:
        console.print(f"[dim]{zone.description}[/dim]")


@app.command()
def branches(
    catalog: Annotated[Optional[Path], typer.Option("--catalog", help="JSON catalog file")] = None,
):
    """🏢 List branches and their zones."""
    saved_branch, _ = settings.load_selection()
    print_branches(_load_branches(catalog), selected_id=saved_branch)


@app.command()
def use(
    branch_id: Annotated[str, typer.Argument(help="Branch id to remember")],
    zone_id: Annotated[Optional[str], typer.Argument(help="Zone id to remember")] = None,
    catalog: Annotated[Optional[Path], typer.Option("--catalog", help="JSON catalog file")] = None,
):
    """
    📌 Remember a branch (and zone) for later commands.

    Example:

      tariff-calc use muzhestva vip
    """
    catalog_branches = _load_branches(catalog)
    branch = get_branch_by_id(branch_id, catalog_branches)
    if branch is None:
        _fail(f"Unknown branch: {branch_id}")
    if zone_id and not any(z.id == zone_id for z in branch.zones):
        _fail(f"Unknown zone: {zone_id}")

    settings.save_selection(branch.id, zone_id)
    label = f"{branch.name} / {zone_id}" if zone_id else branch.name
    console.print(f"[green]Using {label}.[/green]")


@settings_app.command("show")
def settings_show():
    """Show the saved branch and zone."""
    saved_branch, saved_zone = settings.load_selection()
    if not saved_branch:
        console.print("[dim]Nothing saved. Use `tariff-calc use BRANCH ZONE`.[/dim]")
        return
    console.print(f"Branch: [blue]{saved_branch}[/blue]")
    console.print(f"Zone: [blue]{saved_zone or 'first zone'}[/blue]")
    console.print(f"Settings file: [dim]{settings.SETTINGS_DB}[/dim]")


@settings_app.command("clear")
def settings_clear():
    """Forget the saved branch and zone."""
    settings.clear_all()
    console.print("[green]Settings cleared.[/green]")


def main():
    app()


if __name__ == "__main__":
    main()
