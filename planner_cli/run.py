# -*- coding: utf-8 -*-
import logging
import os
import sys
import time
import typing as t
from datetime import date, datetime

import click
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from academic_planner.calendar_items import aggregate_calendar, sort_by_start
from academic_planner.day_bucket import bucket_by_day, month_markers
from academic_planner.live_period import POLL_INTERVAL_SECONDS, resolve_live_period, today_column
from academic_planner.models import WEEKDAYS, CalendarItem, DayBucket, PeriodState, UpcomingSummary, local_naive
from academic_planner.periods import PERIODS, format_period_label
from academic_planner.timetable import TimetableGrid, project_timetable, unscheduled
from academic_planner.upcoming import (
    DASHBOARD_WINDOW_DAYS, EXAM_BADGE_WINDOW_DAYS, compute_upcoming, days_until, is_past,
)
from planner_client import client

PLANNER_LOG_LEVEL = os.getenv("PLANNER_LOG_LEVEL", "INFO")

console = Console()

# Color tag -> rich style
TAG_STYLES = {
    "pink": "magenta",
    "yellow": "yellow",
    "blue": "blue",
    "green": "green",
    "purple": "purple",
}


def format_datetime_human(value: t.Optional[datetime]) -> str:
    """Convert a datetime to human-readable format (MM/DD HH:MM)."""
    if value is None:
        return "—"
    return value.strftime("%m/%d %H:%M")


def truncate_title(title: str, max_length: int = 45) -> str:
    """Truncate title to max_length characters, adding ellipsis if needed."""
    if len(title) <= max_length:
        return title
    return title[:max_length-3] + "..."


def describe_period_state(state: PeriodState) -> Text:
    """One-line description of the live period."""
    if state.kind == "during":
        period = PERIODS[state.period - 1]
        return Text(f"Period {state.period} in progress ({period.label()})", style="bold green")
    if state.kind == "between":
        nxt = PERIODS[state.before_period - 1]
        return Text(
            f"Break after period {state.after_period}, period {state.before_period} starts at {nxt.start:%H:%M}",
            style="bold yellow",
        )
    return Text("Outside class hours", style="dim")


def create_timetable_table(grid: TimetableGrid, state: PeriodState, today_index: t.Optional[int] = None) -> Table:
    """Weekly grid; today's column and the running period are highlighted."""
    table = Table(title="🗓 Weekly Timetable", show_header=True, header_style="bold magenta", show_lines=True)
    table.add_column("Time", style="cyan", no_wrap=True)
    for index, day in enumerate(WEEKDAYS):
        style = "bold underline" if today_index == index else ""
        table.add_column(day[:3].title(), header_style=f"bold magenta {style}".strip(), min_width=12)

    for period, cells in grid.rows():
        running = state.kind == "during" and state.period == period
        label = f"{period}  {PERIODS[period - 1].label()}"
        row: list[t.Any] = [Text(label, style="bold green" if running else "")]
        for cell in cells:
            if cell is None:
                row.append("")
            elif not cell.is_span_start:
                row.append(Text("↑", style=TAG_STYLES.get(cell.slot.color or "", "blue")))
            else:
                slot = cell.slot
                text = Text(truncate_title(slot.name, 20), style=f"bold {TAG_STYLES.get(slot.color or '', 'blue')}")
                if slot.room:
                    text.append(f"\n{slot.room}", style="dim")
                row.append(text)
        table.add_row(*row)

    return table


def create_upcoming_table(summary: UpcomingSummary, now: datetime) -> Table:
    """Upcoming tasks and exams with countdowns."""
    table = Table(
        title=f"⏰ Next {summary.window_days} days",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("", style="cyan", width=3)  # Just emoji
    table.add_column("Title", style="white")
    table.add_column("Date/Time", style="yellow")
    table.add_column("In", justify="right")

    for task in summary.upcoming_tasks:
        table.add_row("📋", truncate_title(task.title), format_datetime_human(task.due_date),
                      f"{days_until(task.due_date, now)}d")
    for exam in summary.upcoming_exams:
        table.add_row("📝", truncate_title(exam.title), format_datetime_human(exam.exam_date),
                      f"{days_until(exam.exam_date, now)}d")

    return table


def create_day_table(bucket: DayBucket, now: t.Optional[datetime] = None) -> Table:
    """Everything on one day; exams already started are marked as past."""
    now = now or datetime.now()
    table = Table(title=f"📅 {bucket.day:%A %Y-%m-%d}", show_header=True, header_style="bold magenta")
    table.add_column("", style="cyan", width=3)
    table.add_column("Title", style="white")
    table.add_column("Time", style="yellow")
    table.add_column("Details")

    for task in bucket.tasks:
        table.add_row("📋", truncate_title(task.title), f"{task.due_date:%H:%M}", f"{task.priority} · {task.status}")
    for exam in bucket.exams:
        details = exam.room or "—"
        if is_past(exam, now):
            details += " · past"
        table.add_row("📝", truncate_title(exam.title), f"{exam.exam_date:%H:%M}", details)
    for event in bucket.events:
        when = "all day" if event.all_day else f"{event.start_date:%H:%M}"
        table.add_row("🎉", truncate_title(event.title), when, event.event_type)

    return table


def create_calendar_table(items: list[CalendarItem]) -> Table:
    """Calendar items sorted by start."""
    table = Table(title="📆 Calendar", show_header=True, header_style="bold magenta")
    table.add_column("Start", style="yellow", no_wrap=True)
    table.add_column("End", style="yellow", no_wrap=True)
    table.add_column("Title")
    table.add_column("Kind", style="dim")

    for item in sort_by_start(items):
        table.add_row(
            format_datetime_human(item.start),
            format_datetime_human(item.end),
            Text(truncate_title(item.title), style=TAG_STYLES[item.color_tag]),
            item.source_kind,
        )

    return table


def _parse_at(at: t.Optional[str]) -> datetime:
    if not at:
        return datetime.now()
    try:
        return local_naive(datetime.fromisoformat(at))
    except ValueError:
        raise click.BadParameter(f"Invalid datetime: '{at}'. Expected ISO format, e.g. 2025-01-10T09:30.")


def _fail(error: RuntimeError) -> t.NoReturn:
    console.print(f"[red]Error:[/red] {error}")
    raise SystemExit(1)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--user", "-u", envvar="PLANNER_USER", required=True, help="Owner id to act as.")
@click.option("--service-url", envvar="PLANNER_SERVICE_URL", default=None, help="Planner service base URL.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, user: str, service_url: t.Optional[str], verbose: bool) -> None:
    """Academic planner dashboard: timetable, live period, upcoming work and calendar."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else PLANNER_LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )
    ctx.obj = {"user": user, "service_url": service_url}


@cli.command()
@click.option("--at", default=None, help="Evaluate at this ISO datetime instead of now.")
@click.pass_obj
def timetable(obj: dict, at: t.Optional[str]) -> None:
    """Show the weekly timetable with the running period highlighted."""
    now = _parse_at(at)
    try:
        slots = client.list_classes(obj["user"], base_url=obj["service_url"])
    except RuntimeError as e:
        _fail(e)

    state = resolve_live_period(now)
    console.print(create_timetable_table(project_timetable(slots), state, today_column(now)))
    console.print(describe_period_state(state))

    others = unscheduled(slots)
    if others:
        console.print("\n[dim]Not on the weekly grid:[/dim]")
        for slot in others:
            where = " ".join(filter(None, [slot.day_of_week, format_period_label(slot.period, slot.period_count)]))
            console.print(f"   • {slot.name} [dim]{where or 'unscheduled'}[/dim]")


@cli.command()
@click.option("--at", default=None, help="Evaluate at this ISO datetime instead of now.")
@click.option("--watch", is_flag=True, help="Keep refreshing once a minute.")
@click.pass_obj
def now(obj: dict, at: t.Optional[str], watch: bool) -> None:
    """Show which period is running right now."""
    if not watch:
        current = _parse_at(at)
        console.print(Panel(describe_period_state(resolve_live_period(current)),
                            title=f"🕘 {current:%a %H:%M}", border_style="blue"))
        return

    try:
        slots = client.list_classes(obj["user"], base_url=obj["service_url"])
    except RuntimeError as e:
        _fail(e)
    grid = project_timetable(slots)

    def render() -> Group:
        current = datetime.now()
        state = resolve_live_period(current)
        return Group(create_timetable_table(grid, state, today_column(current)), describe_period_state(state))

    try:
        with Live(render(), console=console, auto_refresh=False) as live:
            while True:
                time.sleep(POLL_INTERVAL_SECONDS)
                live.update(render(), refresh=True)
    except KeyboardInterrupt:
        pass


@cli.command()
@click.option("--days", default=DASHBOARD_WINDOW_DAYS, show_default=True, help="Window length in days.")
@click.option("--at", default=None, help="Window start as ISO datetime instead of now.")
@click.pass_obj
def upcoming(obj: dict, days: int, at: t.Optional[str]) -> None:
    """Show pending work and exams coming up."""
    current = _parse_at(at)
    try:
        tasks = client.list_tasks(obj["user"], base_url=obj["service_url"])
        exams = client.list_exams(obj["user"], base_url=obj["service_url"])
    except RuntimeError as e:
        _fail(e)

    summary = compute_upcoming(current, days, tasks, exams)
    badge = compute_upcoming(current, EXAM_BADGE_WINDOW_DAYS, [], exams)

    stats_text = Text()
    stats_text.append("Pending tasks: ", style="white")
    stats_text.append(f"{summary.pending_task_count}", style="bold green")
    stats_text.append("\n")
    stats_text.append(f"Exams in the next {EXAM_BADGE_WINDOW_DAYS} days: ", style="white")
    stats_text.append(f"{badge.upcoming_exam_count}", style="bold magenta")
    console.print(Panel(stats_text, title="📊 Statistics", border_style="green"))

    if summary.upcoming_tasks or summary.upcoming_exams:
        console.print(create_upcoming_table(summary, current))
    else:
        console.print("[green]✅ Nothing due in this window.[/green]")


@cli.command()
@click.argument("day", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.pass_obj
def day(obj: dict, day: datetime) -> None:
    """Show tasks, exams and events on DAY (YYYY-MM-DD)."""
    try:
        tasks = client.list_tasks(obj["user"], base_url=obj["service_url"])
        exams = client.list_exams(obj["user"], base_url=obj["service_url"])
        events = client.list_events(obj["user"], base_url=obj["service_url"])
    except RuntimeError as e:
        _fail(e)

    bucket = bucket_by_day(day.date(), tasks, exams, events)
    if bucket.is_empty:
        console.print(f"[dim]Nothing on {bucket.day:%Y-%m-%d}.[/dim]")
        return
    console.print(create_day_table(bucket))


@cli.command()
@click.option("--month", default=None, help="Month as YYYY-MM; defaults to the current month.")
@click.pass_obj
def calendar(obj: dict, month: t.Optional[str]) -> None:
    """Show the month's calendar items and which days have something on."""
    if month:
        try:
            first = datetime.strptime(month, "%Y-%m").date()
        except ValueError:
            raise click.BadParameter(f"Invalid month: '{month}'. Expected YYYY-MM.")
    else:
        first = date.today().replace(day=1)

    try:
        tasks = client.list_tasks(obj["user"], base_url=obj["service_url"])
        exams = client.list_exams(obj["user"], base_url=obj["service_url"])
        events = client.list_events(obj["user"], base_url=obj["service_url"])
    except RuntimeError as e:
        _fail(e)

    markers = month_markers(first.year, first.month, tasks, exams, events)
    items = [
        item for item in aggregate_calendar(events, tasks, exams)
        if (item.start.year, item.start.month) == (first.year, first.month)
    ]

    console.print(create_calendar_table(items))

    dots = Text()
    for marked_day, bucket in markers.items():
        if bucket.is_empty:
            continue
        dots.append(f"{marked_day.day:>2} ", style="bold")
        if bucket.has_tasks:
            dots.append("●", style="yellow")
        if bucket.has_exams:
            dots.append("●", style="magenta")
        if bucket.has_events:
            dots.append("●", style="purple")
        dots.append("   ")
    if dots.plain:
        console.print(Panel(dots, title=f"{first:%B %Y}", border_style="dim"))


if __name__ == "__main__":
    cli()
