"""trashday CLI - recurring pickup reminders."""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path

import click

from .adapters.file_store import FileScheduleStore
from .config import Config, load_config
from .core import schedule as sched
from .core.errors import TrashDayError
from .core.next_pickups import NextPickups
from .core.recurrence import Weekday
from .core.schedule import Schedule, example_schedule
from .format import describe_event, format_next_pickups, format_schedule
from .ical import event_uid, from_ical, pattern_to_rrule, rrule_text, to_ical
from .legacy import from_legacy_json
from .ports import ScheduleStore

TIME = click.DateTime(formats=["%H:%M"])
MOMENT = click.DateTime(formats=["%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M", "%Y-%m-%d"])

# Negative day and ordinal arguments (-1 = last) must not be read as options.
NUMERIC_ARGS = {"ignore_unknown_options": True}


def _weekday(ctx, param, value: str) -> Weekday:
    try:
        return Weekday.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _config(ctx: click.Context) -> Config:
    return ctx.find_root().obj


def _store(ctx: click.Context) -> ScheduleStore:
    return FileScheduleStore(_config(ctx).schedule_path())


def _request_time(ctx: click.Context, at: datetime | None) -> datetime:
    return at if at is not None else _config(ctx).now()


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _update(ctx: click.Context, change, done: str, unchanged: str) -> None:
    """Load the schedule, apply ``change`` and save if it reports a change."""
    store = _store(ctx)
    try:
        schedule = store.load()
        changed = change(schedule)
    except TrashDayError as e:
        _fail(e)
    if changed:
        store.save(schedule)
        click.echo(done)
    else:
        click.echo(unchanged)


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, debug: bool):
    """trashday - recurring pickup reminders."""
    config = load_config()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else config.log_level,
    )
    ctx.obj = config


@main.command("list")
@click.argument("name", required=False)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_cmd(ctx, name: str | None, as_json: bool):
    """List the pickup schedule."""
    try:
        schedule = _store(ctx).load()
    except TrashDayError as e:
        _fail(e)

    events = sched.list_events(schedule, name)
    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "name": e.name.display,
                        "description": describe_event(e),
                        "rrule": rrule_text(pattern_to_rrule(e.pattern)),
                        "anchor": e.anchor.isoformat(),
                        "uid": event_uid(e),
                    }
                    for e in events
                ],
                indent=2,
            )
        )
    else:
        click.echo(format_schedule(Schedule(events)))


@main.command("next")
@click.argument("name", required=False)
@click.option("--at", type=MOMENT, default=None, help="Search from this local time instead of now")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def next_cmd(ctx, name: str | None, at: datetime | None, as_json: bool):
    """Show when each pickup happens next."""
    try:
        schedule = _store(ctx).load()
        next_pickups = NextPickups.build(schedule, _request_time(ctx, at), name)
    except TrashDayError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps({k: v.isoformat() for k, v in next_pickups.as_dict().items()}, indent=2))
    else:
        click.echo(format_next_pickups(next_pickups))


@main.group()
def add():
    """Add a recurring pickup."""


@add.command("weekly")
@click.argument("name")
@click.argument("weekday", callback=_weekday)
@click.argument("time_of_day", metavar="TIME", type=TIME)
@click.option("--at", type=MOMENT, default=None, help="Treat this local time as now")
@click.pass_context
def add_weekly(ctx, name: str, weekday: Weekday, time_of_day: datetime, at: datetime | None):
    """Add a pickup every week on WEEKDAY at TIME (HH:MM)."""
    request_time = _request_time(ctx, at)
    _update(
        ctx,
        lambda s: sched.add_weekly(s, request_time, name, weekday, time_of_day.time()),
        f"Added weekly {name} pickup.",
        f"A weekly {name} pickup already exists at that time.",
    )


@add.command("biweekly")
@click.argument("name")
@click.argument("weekday", callback=_weekday)
@click.argument("time_of_day", metavar="TIME", type=TIME)
@click.option("--next-week", is_flag=True, help="Start with the week after the upcoming one")
@click.option("--at", type=MOMENT, default=None, help="Treat this local time as now")
@click.pass_context
def add_biweekly(ctx, name: str, weekday: Weekday, time_of_day: datetime, next_week: bool, at: datetime | None):
    """Add a pickup every other week on WEEKDAY at TIME (HH:MM)."""
    request_time = _request_time(ctx, at)
    _update(
        ctx,
        lambda s: sched.add_biweekly(s, request_time, name, weekday, time_of_day.time(), next_week),
        f"Added bi-weekly {name} pickup.",
        f"A bi-weekly {name} pickup already exists at that time.",
    )


@add.command("day-of-month", context_settings=NUMERIC_ARGS)
@click.argument("name")
@click.argument("day", type=int)
@click.argument("time_of_day", metavar="TIME", type=TIME)
@click.option("--at", type=MOMENT, default=None, help="Treat this local time as now")
@click.pass_context
def add_day_of_month(ctx, name: str, day: int, time_of_day: datetime, at: datetime | None):
    """Add a monthly pickup on DAY (negative counts from month end)."""
    request_time = _request_time(ctx, at)
    _update(
        ctx,
        lambda s: sched.add_monthly_by_day(s, request_time, name, day, time_of_day.time()),
        f"Added monthly {name} pickup.",
        f"A monthly {name} pickup already exists on that day.",
    )


@add.command("weekday-of-month", context_settings=NUMERIC_ARGS)
@click.argument("name")
@click.argument("ordinal", type=int)
@click.argument("weekday", callback=_weekday)
@click.argument("time_of_day", metavar="TIME", type=TIME)
@click.option("--at", type=MOMENT, default=None, help="Treat this local time as now")
@click.pass_context
def add_weekday_of_month(ctx, name: str, ordinal: int, weekday: Weekday, time_of_day: datetime, at: datetime | None):
    """Add a monthly pickup on the ORDINAL-th WEEKDAY (-1 = last)."""
    request_time = _request_time(ctx, at)
    _update(
        ctx,
        lambda s: sched.add_monthly_by_weekday_ordinal(s, request_time, name, ordinal, weekday, time_of_day.time()),
        f"Added monthly {name} pickup.",
        f"A monthly {name} pickup already exists on that day.",
    )


@main.group()
def delete():
    """Delete one recurring pickup."""


@delete.command("weekly")
@click.argument("name")
@click.argument("weekday", callback=_weekday)
@click.argument("time_of_day", metavar="TIME", type=TIME)
@click.pass_context
def delete_weekly(ctx, name: str, weekday: Weekday, time_of_day: datetime):
    """Delete a weekly pickup."""
    _update(
        ctx,
        lambda s: sched.delete_weekly(s, name, weekday, time_of_day.time()),
        f"Deleted weekly {name} pickup.",
        f"No matching weekly {name} pickup.",
    )


@delete.command("biweekly")
@click.argument("name")
@click.argument("weekday", callback=_weekday)
@click.argument("time_of_day", metavar="TIME", type=TIME)
@click.pass_context
def delete_biweekly(ctx, name: str, weekday: Weekday, time_of_day: datetime):
    """Delete a bi-weekly pickup."""
    _update(
        ctx,
        lambda s: sched.delete_biweekly(s, name, weekday, time_of_day.time()),
        f"Deleted bi-weekly {name} pickup.",
        f"No matching bi-weekly {name} pickup.",
    )


@delete.command("day-of-month", context_settings=NUMERIC_ARGS)
@click.argument("name")
@click.argument("day", type=int)
@click.argument("time_of_day", metavar="TIME", type=TIME)
@click.pass_context
def delete_day_of_month(ctx, name: str, day: int, time_of_day: datetime):
    """Delete a monthly pickup on a fixed day."""
    _update(
        ctx,
        lambda s: sched.delete_monthly_by_day(s, name, day, time_of_day.time()),
        f"Deleted monthly {name} pickup.",
        f"No matching monthly {name} pickup.",
    )


@delete.command("weekday-of-month", context_settings=NUMERIC_ARGS)
@click.argument("name")
@click.argument("ordinal", type=int)
@click.argument("weekday", callback=_weekday)
@click.argument("time_of_day", metavar="TIME", type=TIME)
@click.pass_context
def delete_weekday_of_month(ctx, name: str, ordinal: int, weekday: Weekday, time_of_day: datetime):
    """Delete a monthly pickup on the ORDINAL-th WEEKDAY."""
    _update(
        ctx,
        lambda s: sched.delete_monthly_by_weekday_ordinal(s, name, ordinal, weekday, time_of_day.time()),
        f"Deleted monthly {name} pickup.",
        f"No matching monthly {name} pickup.",
    )


@main.command("delete-all")
@click.argument("name")
@click.pass_context
def delete_all(ctx, name: str):
    """Delete every pickup for NAME."""
    _update(
        ctx,
        lambda s: sched.delete_all_for_name(s, name),
        f"Deleted all {name} pickups.",
        f"No {name} pickups are scheduled.",
    )


@main.command()
@click.confirmation_option(prompt="Delete the entire schedule?")
@click.pass_context
def clear(ctx):
    """Delete the entire schedule."""
    _update(ctx, lambda s: s.clear(), "Schedule cleared.", "No pickups are scheduled.")


@main.command()
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write to a file")
@click.pass_context
def export(ctx, output: Path | None):
    """Export the schedule as iCalendar text."""
    try:
        text = to_ical(_store(ctx).load())
    except TrashDayError as e:
        _fail(e)

    if output:
        output.write_text(text)
        click.echo(f"Schedule saved to {output}")
    else:
        click.echo(text, nl=False)


def _merge(ctx: click.Context, imported: Schedule, replace: bool) -> None:
    def change(schedule: Schedule) -> bool:
        changed = schedule.clear() if replace else False
        for event in imported:
            changed = schedule.add(event) or changed
        return changed

    _update(
        ctx,
        change,
        f"Imported {len(imported)} pickup event(s).",
        "Schedule unchanged.",
    )


@main.command("import-ical")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--replace", is_flag=True, help="Replace the schedule instead of merging")
@click.pass_context
def import_ical(ctx, path: Path, replace: bool):
    """Import pickups from an iCalendar file."""
    try:
        imported = from_ical(path.read_text())
    except TrashDayError as e:
        _fail(e)
    _merge(ctx, imported, replace)


@main.command("import-legacy")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--replace", is_flag=True, help="Replace the schedule instead of merging")
@click.option("--at", type=MOMENT, default=None, help="Anchor pickups from this local time instead of now")
@click.pass_context
def import_legacy(ctx, path: Path, replace: bool, at: datetime | None):
    """Import pickups from a version-1 JSON schedule."""
    try:
        imported = from_legacy_json(path.read_text(), _request_time(ctx, at))
    except TrashDayError as e:
        _fail(e)
    _merge(ctx, imported, replace)


@main.command()
@click.argument("kind", type=click.Choice(["basic", "complex"]), default="basic")
@click.pass_context
def example(ctx, kind: str):
    """Replace the schedule with a demo schedule."""
    _store(ctx).save(example_schedule(kind))
    click.echo(f"Loaded the {kind} example schedule.")
