"""Output formatting for quotes and tariff boards."""

import json
from datetime import datetime
from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import Branch, Combination, SpanInfo, Zone, format_minutes
from .pricing import is_plan_available

console = Console()

CURRENCY = "₽"


def format_price(amount: int) -> str:
    return f"{amount:,}{CURRENCY}"


def day_type_label(is_weekend: bool) -> str:
    return "Weekend" if is_weekend else "Weekday"


def print_header(branch: Branch, zone: Optional[Zone], moment: datetime, is_weekend: bool) -> None:
    """Print the branch/zone line with the effective time and day-type."""
    day_style = "magenta" if is_weekend else "cyan"
    zone_part = f"  |  {zone.name}" if zone else ""
    console.print(
        f"\n[bold blue]{branch.name}{zone_part}[/bold blue]  "
        f"[dim]{moment:%A %d %B, %H:%M}[/dim]  "
        f"[{day_style}]{day_type_label(is_weekend)}[/{day_style}]"
    )


def print_quote(combination: Combination) -> None:
    """Print the optimal combination as a table of segments."""
    console.print(
        f"[bold]Best price:[/bold] [bold green]{format_price(combination.total_price)}[/bold green]"
        f"  [dim]for {format_minutes(combination.requested_minutes)}[/dim]"
    )

    table = Table(box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Tariff")
    table.add_column("Covers", justify="right")
    table.add_column("Price", justify="right", style="bold")

    for segment in combination.segments:
        table.add_row(
            segment.describe(),
            format_minutes(segment.minutes),
            format_price(segment.price),
        )

    console.print(table)

    if combination.wasted_minutes > 0:
        console.print(
            f"[yellow]Includes {format_minutes(combination.wasted_minutes)} "
            f"beyond the requested time[/yellow]"
        )


def print_no_quote(reason: str) -> None:
    console.print(f"[dim]{reason}[/dim]")


def combination_to_dict(combination: Combination) -> dict:
    return {
        "total_price": combination.total_price,
        "total_minutes": combination.total_minutes,
        "requested_minutes": combination.requested_minutes,
        "wasted_minutes": combination.wasted_minutes,
        "segments": [
            {
                "plan_id": s.plan.id,
                "plan_name": s.plan.name,
                "quantity": s.quantity,
                "minutes": s.minutes,
                "price": s.price,
                "label": s.label,
            }
            for s in combination.segments
        ],
    }


def print_quote_json(combination: Optional[Combination]) -> None:
    """Print the combination (or null) as JSON on stdout."""
    data = combination_to_dict(combination) if combination else None
    print(json.dumps(data, indent=2, ensure_ascii=False))


def print_tariff_board(
    zone: Zone,
    current_hour: int,
    is_weekend: bool,
    span: Optional[SpanInfo] = None,
) -> None:
    """Print every tariff of a zone with both prices.

    The price column that does not apply right now is dimmed, unless the
    requested span covers both day-types.
    """
    table = Table(
        title=f"{zone.name} tariffs",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Tariff", no_wrap=True)
    table.add_column("Duration", justify="right")
    table.add_column("Weekday", justify="right")
    table.add_column("Weekend", justify="right")
    table.add_column("Hours", justify="center")
    table.add_column("Status")

    both = span is not None and span.spans
    weekday_style = "bold" if both or not is_weekend else "dim"
    weekend_style = "bold" if both or is_weekend else "dim"

    for plan in zone.plans:
        if plan.per_minute:
            duration = "per minute"
        else:
            duration = format_minutes(plan.duration_minutes)

        if plan.display_only:
            status = Text("app only", style="blue")
        elif is_plan_available(plan, current_hour):
            status = Text("available", style="green")
        else:
            status = Text("not now", style="red")

        table.add_row(
            plan.name,
            duration,
            Text(format_price(plan.price_weekday), style=weekday_style),
            Text(format_price(plan.price_weekend), style=weekend_style),
            plan.hours_display(),
            status,
        )

    console.print(table)
    if both:
        console.print("[dim]The requested time covers both weekday and weekend hours.[/dim]")


def print_branches(branches, selected_id: Optional[str] = None) -> None:
    """Print the branch list with each branch's zones."""
    table = Table(
        title="Branches",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Address")
    table.add_column("Zones")
    table.add_column("Status")

    for branch in branches:
        marker = " *" if branch.id == selected_id else ""
        zones = ", ".join(z.id for z in branch.zones) or "–"
        status = "[green]open[/green]" if branch.is_active else "[dim]coming soon[/dim]"
        table.add_row(
            branch.id,
            f"{branch.name}{marker}",
            branch.address or "–",
            zones,
            status,
        )

    console.print(table)
