"""Cadence CLI - habit, task and access tracking."""

import json
import sys
from datetime import date, datetime

import click

from .config import load_config
from .core.dates import parse_iso_date, to_epoch_ms
from .core.errors import MalformedDateError
from .core.periods import PeriodKind, days_in_window, resolve_period
from .notify_format import build_notices, format_notice
from .workflows import (
    check_overdue,
    evaluate_streaks,
    get_clock,
    get_guest_window,
    get_store,
    get_timezone,
    resolve_access,
    sign_in,
    toggle_habit,
    visit,
)


def _now(now_str: str | None) -> datetime:
    """Current time, or the --now override interpreted in the configured timezone."""
    config = load_config()
    if not now_str:
        return get_clock(config).now()
    try:
        parsed = datetime.fromisoformat(now_str)
    except ValueError:
        click.echo(f"Error: invalid --now value {now_str!r}", err=True)
        sys.exit(1)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=get_timezone(config))
    return parsed


def _date_option(value: str | None, default: date | None) -> date | None:
    if not value:
        return default
    try:
        return parse_iso_date(value)
    except MalformedDateError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Cadence - streaks, periods, access windows and overdue checks."""
    if debug:
        import logging

        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.option("--date", "-d", "target_date", default=None, help="Evaluate as of this date (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def streak(target_date: str | None, as_json: bool):
    """Show the current streak of every habit."""
    config = load_config()
    store = get_store(config)
    today = _date_option(target_date, get_clock(config).now().date())
    items, report = evaluate_streaks(store, today)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "date": today.isoformat(),
                    "streaks": [
                        {"id": h.id, "name": h.name, "streak": report.streaks[h.id]}
                        for h in items
                        if h.id in report.streaks
                    ],
                    "skipped": [
                        {"id": d.entity_id, "field": d.field, "message": d.message}
                        for d in report.diagnostics
                    ],
                },
                indent=2,
            )
        )
        return

    if not items:
        click.echo("No habits yet.")
        return

    for h in items:
        if h.id in report.streaks:
            click.echo(f"{report.streaks[h.id]:4}  {h.name or h.id}")
    for d in report.diagnostics:
        click.echo(f"   -  {d.entity_id} skipped: {d.message}", err=True)


@main.command()
@click.argument("habit_id")
@click.option("--date", "-d", "target_date", default=None, help="Date to toggle (YYYY-MM-DD), defaults to today")
def toggle(habit_id: str, target_date: str | None):
    """Mark a habit done (or undone) for a date."""
    config = load_config()
    store = get_store(config)
    today = get_clock(config).now().date()
    day = _date_option(target_date, today)

    new_streak = toggle_habit(store, habit_id, day, today)
    if new_streak is None:
        click.echo(f"Error: no habit with id {habit_id}", err=True)
        sys.exit(1)
    click.echo(f"Toggled {habit_id} on {day.isoformat()}. Streak: {new_streak}")


@main.command()
@click.argument("kind", type=click.Choice([k.value for k in PeriodKind]))
@click.option("--start", default=None, help="Custom period start (YYYY-MM-DD)")
@click.option("--end", default=None, help="Custom period end (YYYY-MM-DD)")
@click.option("--now", "now_str", default=None, help="Reference time (ISO 8601)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def period(kind: str, start: str | None, end: str | None, now_str: str | None, as_json: bool):
    """Resolve a reporting period to concrete dates."""
    config = load_config()
    now = _now(now_str)
    custom_start = _date_option(start, None)
    custom_end = _date_option(end, None)

    result = resolve_period(
        PeriodKind(kind),
        now,
        custom_start,
        custom_end,
        tz=get_timezone(config),
        custom_days=config.custom_period_days,
    )
    if as_json:
        click.echo(json.dumps(result.as_dict(), indent=2))
    else:
        click.echo(f"{result.start_date.isoformat()} .. {result.end_date.isoformat()} ({result.format()})")


@main.command()
@click.argument("count", type=click.IntRange(min=1))
@click.option("--now", "now_str", default=None, help="Reference time (ISO 8601)")
def days(count: int, now_str: str | None):
    """List calendar-grid days starting from this week's Monday."""
    config = load_config()
    for d in days_in_window(count, _now(now_str), tz=get_timezone(config)):
        click.echo(f"{d.isoformat()}  {d.strftime('%a')}")


@main.group(invoke_without_command=True)
@click.pass_context
def guest(ctx):
    """Show or manage the guest access window."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(guest_status)


@guest.command("status")
@click.option("--now", "now_str", default=None, help="Reference time (ISO 8601)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def guest_status(now_str: str | None = None, as_json: bool = False):
    """Show the guest window status."""
    config = load_config()
    window = get_guest_window(config, get_store(config))
    status = window.status(to_epoch_ms(_now(now_str)))

    if as_json:
        click.echo(
            json.dumps(
                {
                    "state": status.state.value,
                    "isActive": status.is_active,
                    "hasExpired": status.has_expired,
                    "remainingMs": status.remaining_ms,
                    "hoursLeft": status.hours_left,
                    "minutesLeft": status.minutes_left,
                    "startedAt": window.started_at,
                },
                indent=2,
            )
        )
    elif status.is_active:
        click.echo(f"Guest access active: {status.format_remaining()} left")
    elif status.has_expired:
        click.echo("Guest access expired. Sign in to keep your data.")
    else:
        click.echo(f"Guest access not started ({status.format_remaining()} available)")


@guest.command("start")
@click.option("--now", "now_str", default=None, help="Reference time (ISO 8601)")
def guest_start(now_str: str | None):
    """Record a visit, starting the guest window if it never started."""
    config = load_config()
    if config.signed_in:
        click.echo("Signed in - guest window not used.")
        return
    window = visit(config, get_store(config), _now(now_str))
    click.echo(f"Guest window started at {window.started_at}")


@guest.command("clear")
def guest_clear():
    """Discard the guest window (as sign-in does)."""
    config = load_config()
    sign_in(config, get_store(config))
    click.echo("Guest window cleared.")


@main.command()
@click.option("--now", "now_str", default=None, help="Reference time (ISO 8601)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def access(now_str: str | None, as_json: bool):
    """Show the access tier and quota usage."""
    config = load_config()
    summary = resolve_access(config, get_store(config), _now(now_str))
    usage = summary.entitlement.usage(summary.counts)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "tier": summary.entitlement.tier.value,
                    "hasElevatedAccess": summary.entitlement.has_elevated_access,
                    "limits": {r.value: check.as_dict() for r, check in usage.items()},
                    "trialDaysLeft": summary.subscription.trial_days_left,
                },
                indent=2,
            )
        )
        return

    click.echo(f"Tier: {summary.entitlement.tier.value}")
    for resource, check in usage.items():
        maximum = "unlimited" if check.max is None else str(check.max)
        marker = "" if check.can_add else "  (limit reached)"
        click.echo(f"  {resource.value:13} {check.current}/{maximum}{marker}")
    if summary.trial_reminder:
        days_left = summary.subscription.trial_days_left
        click.echo(f"\n{days_left} day{'s' if days_left != 1 else ''} left in trial!")


@main.command()
@click.option("--now", "now_str", default=None, help="Reference time (ISO 8601)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def overdue(now_str: str | None, as_json: bool):
    """Report overdue items (once per day)."""
    config = load_config()
    result = check_overdue(config, get_store(config), _now(now_str))

    if as_json:
        click.echo(
            json.dumps(
                {
                    "fired": result.fired,
                    "counts": result.report.counts() if result.report else None,
                    "lastFired": result.guard.last_fired_date_key,
                },
                indent=2,
            )
        )
        return

    if not result.fired:
        click.echo("Nothing new to report today.")
        return
    for notice in build_notices(result.report):
        click.echo(format_notice(notice))


@main.command()
def watch():
    """Refresh guest status every minute and check overdue items daily."""
    from .scheduler import run_watch

    click.echo("Starting Cadence scheduler...")
    click.echo("Press Ctrl+C to stop")
    try:
        run_watch(emit=click.echo)
    except KeyboardInterrupt:
        click.echo("\nScheduler stopped.")


if __name__ == "__main__":
    main()
