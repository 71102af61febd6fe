"""
Command-line interface for the Life Calendar.

Usage:
    life-calendar show --birth-date 1990-05-15 --sex female
    life-calendar stats --birth-date 1990-05-15 --sex male
    life-calendar render --birth-date 1990-05-15 --output calendar.png
    life-calendar profile set --birth-date 1990-05-15 --sex female
    life-calendar profile show

When --birth-date / --sex are omitted, the stored profile is used.
"""

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import NoReturn, Optional, Tuple

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .core.config import get_settings
from .core.database import close_database, get_db_session, init_database
from .domain.errors import DomainError, InvalidBirthDate, InvalidSexCategory
from .infrastructure.repositories import SqlAlchemyProfileRepository
from .models.user_profile import UserProfile
from .services.life_calendar_service import LifeCalendarService, LifeCalendarView
from .services.life_weeks_domain import format_life_week, parse_birth_date
from .services.life_weeks_grid import WeekCell
from .services.life_weeks_image import save_life_calendar
from .services.mortality_table import load_mortality_table
from .utils.logging import setup_logging
from .version import __version__

logger = logging.getLogger(__name__)

console = Console()
app = typer.Typer(help="Your life in weeks, with mortality statistics")
profile_app = typer.Typer(help="Store the birth date and sex used by default")
app.add_typer(profile_app, name="profile")

# Exit codes
EXIT_INVALID_INPUT = 2
EXIT_CONFIG_ERROR = 3

BirthDateOption = typer.Option(
    None, "--birth-date", "-b", help="Birth date (YYYY-MM-DD); stored profile if omitted"
)
SexOption = typer.Option(
    None, "--sex", "-s", help="male, female or empty; stored profile if omitted"
)
ProfileIdOption = typer.Option(None, "--profile", "-p", help="Profile ID")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"life-calendar {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Configure logging from settings before any command runs."""
    settings = get_settings()
    setup_logging(settings.log_level, log_to_file=settings.log_to_file)


# ---------------------------------------------------------------------------
# Profile storage
# ---------------------------------------------------------------------------


async def _load_profile(profile_id: str) -> Optional[UserProfile]:
    await init_database()
    try:
        async with get_db_session() as session:
            return await SqlAlchemyProfileRepository(session).get(profile_id)
    finally:
        await close_database()


async def _save_profile(profile: UserProfile) -> None:
    await init_database()
    try:
        async with get_db_session() as session:
            await SqlAlchemyProfileRepository(session).save(profile)
    finally:
        await close_database()


def _load_stored_profile(profile_id: str) -> Optional[UserProfile]:
    """Load a stored profile, failing cleanly when the stored row is invalid."""
    try:
        return asyncio.run(_load_profile(profile_id))
    except DomainError as e:
        logger.error("Stored profile '%s' is invalid: %s", profile_id, e)
        _fail(
            f"Stored profile '{profile_id}' is invalid: {e}. Run 'profile set' to fix it.",
            EXIT_INVALID_INPUT,
        )


def _resolve_inputs(
    birth_date: Optional[str], sex: Optional[str], profile_id: Optional[str]
) -> Tuple[Optional[str], Optional[str]]:
    """Fill missing CLI inputs from the stored profile."""
    if birth_date is not None and sex is not None:
        return birth_date, sex

    stored = _load_stored_profile(profile_id or get_settings().default_profile_id)
    if stored is None:
        return birth_date, sex

    return (
        birth_date if birth_date is not None else stored.birth_date,
        sex if sex is not None else stored.sex.value,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fail(message: str, code: int) -> NoReturn:
    console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code)


def _parse_now(now: Optional[str]) -> Optional[datetime]:
    if now is None:
        return None
    try:
        return datetime.fromisoformat(now)
    except ValueError:
        _fail(f"Invalid --now value {now!r}; expected ISO date/time", EXIT_INVALID_INPUT)


def _build_service() -> LifeCalendarService:
    settings = get_settings()
    table_path = settings.resolved_mortality_table_path()
    try:
        table = load_mortality_table(table_path)
    except DomainError as e:
        logger.error("Failed to load mortality table %s: %s", table_path, e)
        _fail(str(e), EXIT_CONFIG_ERROR)
    return LifeCalendarService(table, cache_size=settings.view_cache_size)


def _compute_view(
    birth_date: Optional[str],
    sex: Optional[str],
    profile_id: Optional[str],
    now: Optional[str] = None,
) -> LifeCalendarView:
    try:
        birth_date, sex = _resolve_inputs(birth_date, sex, profile_id)
        # Reject bad input here; the service would silently treat it as unset
        parse_birth_date(birth_date)
        return _build_service().compute(birth_date, sex, _parse_now(now))
    except (InvalidBirthDate, InvalidSexCategory) as e:
        _fail(str(e), EXIT_INVALID_INPUT)
    except DomainError as e:
        _fail(str(e), EXIT_CONFIG_ERROR)


_CELL_GLYPHS = {
    "lived": ("■", "blue"),
    "extra": ("■", "dark_orange"),
    "current": ("◧", "red"),
    "future": ("□", "grey62"),
}


def _cell_style(cell: WeekCell) -> Tuple[str, str]:
    if cell.is_current:
        return _CELL_GLYPHS["current"]
    if cell.is_lived:
        return _CELL_GLYPHS["extra"] if cell.is_extra_life else _CELL_GLYPHS["lived"]
    return _CELL_GLYPHS["future"]


def _print_grid(view: LifeCalendarView) -> None:
    for row in view.grid:
        line = Text(f"{row.row_index:>3} ", style="dim")
        for cell in row.cells:
            glyph, style = _cell_style(cell)
            line.append(glyph, style=style)
        console.print(line)


def _print_summary(view: LifeCalendarView) -> None:
    table = Table(title="Life Calendar", show_header=False)
    table.add_column("Field", style="cyan", min_width=24)
    table.add_column("Value")

    table.add_row("Birth date", view.birth_date.isoformat() if view.birth_date else "not set")
    table.add_row("Sex", view.sex.value)
    table.add_row("Completed weeks", f"{view.progress.completed_weeks:,}")
    table.add_row("Current week progress", f"{view.progress.current_progress:.0%}")
    table.add_row("Completed years", str(view.progress.completed_years))
    table.add_row(
        "Expectancy at birth",
        f"{view.expectancy.years:.1f} years ({view.expectancy.weeks:,} weeks)",
    )
    if view.stats is not None:
        table.add_row("Chance of dying this year", f"{view.stats.death_prob_percent}%")
        table.add_row("Remaining expectancy", f"{view.stats.remaining_life_expectancy} years")
        table.add_row("Total expectancy", f"{view.total_life_expectancy:.1f} years")
    else:
        table.add_row("Mortality stats", "[dim]unavailable[/dim]")

    console.print(table)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def show(
    birth_date: Optional[str] = BirthDateOption,
    sex: Optional[str] = SexOption,
    profile_id: Optional[str] = ProfileIdOption,
    now: Optional[str] = typer.Option(None, "--now", help="Override current time (ISO)"),
    grid: bool = typer.Option(True, "--grid/--no-grid", help="Print the week grid"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show weeks lived, expectancy, stats and the week grid."""
    view = _compute_view(birth_date, sex, profile_id, now)

    if output_json:
        print(json.dumps(view.to_dict(include_grid=grid), indent=2))
        return

    _print_summary(view)
    if not view.has_birth_date:
        console.print("\n[yellow]Birth date not set.[/yellow] Pass --birth-date or run 'profile set'.")
        return

    console.print(f"\n{format_life_week(view.progress, view.expectancy.years)}\n")
    if grid:
        _print_grid(view)


@app.command()
def stats(
    birth_date: Optional[str] = BirthDateOption,
    sex: Optional[str] = SexOption,
    profile_id: Optional[str] = ProfileIdOption,
    now: Optional[str] = typer.Option(None, "--now", help="Override current time (ISO)"),
) -> None:
    """Print the one-year death probability and remaining life expectancy."""
    view = _compute_view(birth_date, sex, profile_id, now)

    if view.stats is None:
        console.print("Mortality stats unavailable (birth date or sex not set, or age beyond table).")
        return

    console.print(f"Chance of dying this year: {view.stats.death_prob_percent}%")
    console.print(f"Remaining life expectancy: {view.stats.remaining_life_expectancy} years")
    console.print(f"Total life expectancy: {view.total_life_expectancy:.1f} years")


@app.command()
def render(
    birth_date: Optional[str] = BirthDateOption,
    sex: Optional[str] = SexOption,
    profile_id: Optional[str] = ProfileIdOption,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="PNG file path"),
    now: Optional[str] = typer.Option(None, "--now", help="Override current time (ISO)"),
) -> None:
    """Render the life calendar to a PNG image."""
    view = _compute_view(birth_date, sex, profile_id, now)
    if not view.has_birth_date:
        _fail("Birth date not set; nothing to render", EXIT_INVALID_INPUT)

    path = save_life_calendar(view, get_settings().resolved_output_dir(), output)
    console.print(f"✅ Saved {path}")


@profile_app.command("set")
def profile_set(
    birth_date: Optional[str] = BirthDateOption,
    sex: Optional[str] = SexOption,
    profile_id: Optional[str] = ProfileIdOption,
) -> None:
    """Store the birth date and sex used when options are omitted."""
    try:
        profile = UserProfile(
            profile_id=profile_id or get_settings().default_profile_id,
            birth_date=birth_date,
            sex=sex,
        )
    except (InvalidBirthDate, InvalidSexCategory, ValidationError) as e:
        _fail(str(e), EXIT_INVALID_INPUT)

    asyncio.run(_save_profile(profile))
    console.print(
        f"✅ Saved profile '{profile.profile_id}': "
        f"birth date {profile.birth_date or 'not set'}, sex {profile.sex.value}"
    )


@profile_app.command("show")
def profile_show(profile_id: Optional[str] = ProfileIdOption) -> None:
    """Print the stored profile."""
    profile_id = profile_id or get_settings().default_profile_id
    profile = _load_stored_profile(profile_id)
    if profile is None:
        console.print(f"No profile stored for '{profile_id}'.")
        return

    console.print(f"Profile: {profile.profile_id}")
    console.print(f"Birth date: {profile.birth_date or 'not set'}")
    console.print(f"Sex: {profile.sex.value}")


if __name__ == "__main__":
    app()
