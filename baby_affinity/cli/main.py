"""Administrative command line for the rating engine."""

import json
import sys
from dataclasses import dataclass
from pathlib import Path

import click
import structlog

from baby_affinity.names.errors import NameValidationError
from baby_affinity.names.models import Category, NameRecord
from baby_affinity.observability.logging import (
    bind_session_context,
    clear_session_context,
    configure_logging,
)
from baby_affinity.ranking.service import RankQueryService
from baby_affinity.session.session import SelectionSession
from baby_affinity.settings.app import AppSettings, get_settings
from baby_affinity.store.defaults import load_default_names, reset_name_data
from baby_affinity.store.errors import DuplicateNameError, NameStoreError
from baby_affinity.store.models import BulkResult
from baby_affinity.store.store import NameStore


logger = structlog.get_logger()

CATEGORY_CHOICES = ["female", "male", "girl", "boy"]
QUIT_INPUTS = frozenset({"q", "quit", "exit"})


@dataclass
class CliContext:
    """Shared options for all commands."""

    settings: AppSettings
    db_path: Path

    def open_store(self) -> NameStore:
        """Create a store for the configured database (not yet connected)."""
        return NameStore(self.db_path)


def _category(value: str) -> Category:
    return Category.parse(value)


def _echo_bulk_result(result: BulkResult) -> None:
    counts = ", ".join(f"{status.lower()}: {count}" for status, count in sorted(result.summary().items()))
    click.echo(f"{result.operation}: {counts or 'nothing to do'}")
    for outcome in result.failed:
        click.echo(f"  - {outcome.text} ({outcome.status.value}): {outcome.error}", err=True)


def _parse_choices(raw: str, count: int) -> list[int] | None:
    """Parse comma or space separated 1-based indexes; None if invalid."""
    picks: list[int] = []
    for token in raw.replace(",", " ").split():
        if not token.isdigit():
            return None
        index = int(token)
        if not 1 <= index <= count:
            return None
        if index - 1 not in picks:
            picks.append(index - 1)
    return picks


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to SQLite database (default: BABY_AFFINITY_DB_PATH or data/baby_affinity.sqlite).",
)
@click.pass_context
def cli(ctx: click.Context, db_path: Path | None) -> None:
    """Baby Affinity name rating CLI."""
    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json)
    ctx.obj = CliContext(settings=settings, db_path=db_path or settings.db_path)


@cli.command()
@click.pass_obj
def init(obj: CliContext) -> None:
    """Create the database and load the bundled default names."""
    with obj.open_store() as store:
        result = load_default_names(store)
        _echo_bulk_result(result)
        click.echo(f"Names stored: {store.count()}")


@cli.command()
@click.option("--clear", is_flag=True, help="Delete every name instead of restoring defaults.")
@click.confirmation_option(prompt="This erases all ratings. Continue?")
@click.pass_obj
def reset(obj: CliContext, clear: bool) -> None:
    """Reset ratings, evaluations, and favorites (or clear the store)."""
    with obj.open_store() as store:
        result = reset_name_data(store, restore_defaults=not clear)
        _echo_bulk_result(result)
        if not result.all_succeeded:
            sys.exit(1)


@cli.command()
@click.argument("name")
@click.argument("category", type=click.Choice(CATEGORY_CHOICES, case_sensitive=False))
@click.option("--rating", type=int, default=None, help="Initial rating.")
@click.pass_obj
def add(obj: CliContext, name: str, category: str, rating: int | None) -> None:
    """Add a name to a category."""
    try:
        record = (
            NameRecord.create(name, _category(category))
            if rating is None
            else NameRecord.create(name, _category(category), rating=rating)
        )
    except NameValidationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    with obj.open_store() as store:
        try:
            store.insert(record)
        except DuplicateNameError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    click.echo(f"Added {record.category.child_naming.lower()} name {record.text} ({record.rating})")


@cli.command()
@click.argument("category", type=click.Choice(CATEGORY_CHOICES, case_sensitive=False))
@click.option(
    "--limit", type=click.IntRange(min=0), default=10, show_default=True, help="Number of names."
)
@click.option("--favorites", is_flag=True, help="Only show favorite names.")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_obj
def top(obj: CliContext, category: str, limit: int, favorites: bool, json_output: bool) -> None:
    """Show the highest rated names in a category."""
    with obj.open_store() as store:
        service = RankQueryService(store)
        cat = _category(category)
        ranked = service.top_favorites(cat)[:limit] if favorites else service.top_names(cat, limit)

    if json_output:
        click.echo(
            json.dumps(
                [
                    {
                        "rank": r.rank,
                        "text": r.record.text,
                        "rating": r.record.rating,
                        "times_evaluated": r.record.times_evaluated,
                        "is_favorite": r.record.is_favorite,
                    }
                    for r in ranked
                ],
                indent=2,
            )
        )
        return

    if not ranked:
        click.echo("No names yet. Run `baby-affinity init` first.")
        return

    for r in ranked:
        star = " *" if r.record.is_favorite else ""
        click.echo(f"{r.rank:>4}. {r.record.text:<20} {r.record.rating:>5}{star}")


@cli.command()
@click.argument("name")
@click.argument("category", type=click.Choice(CATEGORY_CHOICES, case_sensitive=False))
@click.pass_obj
def rank(obj: CliContext, name: str, category: str) -> None:
    """Show a name's rank within its category."""
    cat = _category(category)
    with obj.open_store() as store:
        record = store.fetch_by_text(name, cat)
        position = RankQueryService(store).rank(record) if record else None
        total = store.count(cat)

    if record is None or position is None:
        click.echo(f"{name} is not a stored {cat.child_naming.lower()} name.", err=True)
        sys.exit(1)

    click.echo(f"{record.text}: rank {position} of {total} (rating {record.rating})")


@cli.command()
@click.argument("name")
@click.argument("category", type=click.Choice(CATEGORY_CHOICES, case_sensitive=False))
@click.pass_obj
def favorite(obj: CliContext, name: str, category: str) -> None:
    """Toggle a name's favorite flag."""
    cat = _category(category)
    with obj.open_store() as store:
        record = store.fetch_by_text(name, cat)
        if record is None:
            click.echo(f"{name} is not a stored {cat.child_naming.lower()} name.", err=True)
            sys.exit(1)
        updated = store.modify(record.identity, lambda current: current.toggled_favorite())

    state = "added to" if updated.is_favorite else "removed from"
    click.echo(f"{updated.text} {state} favorites")


@cli.command()
@click.argument("category", type=click.Choice(CATEGORY_CHOICES, case_sensitive=False))
@click.pass_obj
def pick(obj: CliContext, category: str) -> None:
    """Pick names interactively, one round at a time."""
    cat = _category(category)

    with obj.open_store() as store:
        session = SelectionSession.from_settings(store, cat, obj.settings)
        bind_session_context(session.session_id)
        presented = session.load()

        while presented:
            click.echo("")
            click.echo(f"Round {session.round_number}: choose up to {session.max_selections}")
            for index, record in enumerate(presented, start=1):
                click.echo(f"  {index:>2}. {record.text}")

            raw = click.prompt(
                "Numbers (blank for none, q to quit)", default="", show_default=False
            ).strip()
            if raw.lower() in QUIT_INPUTS:
                break

            choices = _parse_choices(raw, len(presented))
            if choices is None:
                click.echo("Enter numbers from the list, separated by spaces or commas.", err=True)
                continue
            if len(choices) > session.max_selections:
                click.echo(f"Choose at most {session.max_selections} names.", err=True)
                continue

            for index in choices:
                session.select(presented[index])

            result = session.submit()
            for outcome in result.outcomes:
                if outcome.succeeded:
                    delta = (outcome.new_rating or 0) - outcome.record.rating
                    click.echo(f"  {outcome.record.text:<20} {outcome.new_rating:>5} ({delta:+d})")
                else:
                    click.echo(f"  {outcome.record.text:<20} not saved: {outcome.error}", err=True)

            if result.reload_error is not None:
                click.echo(f"Could not load the next round: {result.reload_error}", err=True)
                sys.exit(1)
            presented = session.presented

        if session.round_number == 1 and not presented:
            click.echo("No names to pick from. Run `baby-affinity init` first.")

    clear_session_context()


@cli.command()
@click.pass_obj
def stats(obj: CliContext) -> None:
    """Show per-category name counts and schema version."""
    try:
        with obj.open_store() as store:
            click.echo("Name Database Statistics")
            click.echo("=" * 40)
            click.echo(f"  Schema Version: {store.get_schema_version()}")
            for cat in Category:
                evaluated = store.count(cat) - len(store.fetch_by_evaluated_count(0, cat))
                click.echo(
                    f"  {cat.child_naming} names: {store.count(cat)} "
                    f"({evaluated} evaluated, {len(store.fetch_favorites(cat))} favorites)"
                )
    except NameStoreError as e:
        logger.error("stats_failed", component="cli", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
