"""Periodic checks: guest window refresh and the daily overdue summary."""

import logging
from datetime import datetime, timedelta
from typing import Callable

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from .config import Config, load_config
from .core.dates import to_epoch_ms
from .notify_format import build_notices, format_notice
from .ports import Clock, KeyValueStore
from .workflows import check_overdue, get_clock, get_guest_window, get_store, get_timezone

logger = logging.getLogger(__name__)

Emit = Callable[[str], None]


def refresh_guest_status(config: Config, store: KeyValueStore, clock: Clock, emit: Emit) -> None:
    """Re-derive the guest window status for display."""
    if config.signed_in:
        return
    status = get_guest_window(config, store).status(to_epoch_ms(clock.now()))
    if status.is_active:
        emit(f"Guest access: {status.format_remaining()} left")
    elif status.has_expired:
        emit("Guest access expired. Sign in to keep your data.")


def run_overdue_check(
    config: Config,
    store: KeyValueStore,
    clock: Clock,
    emit: Emit,
    scheduler: BlockingScheduler | None = None,
) -> None:
    """Run the guarded overdue check and queue staggered notices."""
    now = clock.now()
    result = check_overdue(config, store, now)
    if not result.fired:
        return

    for notice in build_notices(result.report):
        message = format_notice(notice)
        if scheduler is None:
            emit(message)
            continue
        scheduler.add_job(
            emit,
            DateTrigger(run_date=now + timedelta(milliseconds=notice.delay_ms)),
            args=[message],
            id=f"overdue_{notice.category}_{now:%Y%m%d}",
            replace_existing=True,
        )


def setup_scheduler(
    config: Config | None = None,
    store: KeyValueStore | None = None,
    clock: Clock | None = None,
    emit: Emit = print,
) -> BlockingScheduler:
    """Set up the periodic jobs."""
    if config is None:
        config = load_config()
    store = store or get_store(config)
    clock = clock or get_clock(config)

    scheduler = BlockingScheduler(timezone=get_timezone(config))

    scheduler.add_job(
        refresh_guest_status,
        IntervalTrigger(minutes=1),
        args=[config, store, clock, emit],
        id="guest_status",
        next_run_time=datetime.now(get_timezone(config)),
    )

    try:
        hour, minute = map(int, config.overdue_check_time.split(":"))
        scheduler.add_job(
            run_overdue_check,
            CronTrigger(hour=hour, minute=minute, timezone=get_timezone(config)),
            args=[config, store, clock, emit, scheduler],
            id="overdue_daily",
        )
        logger.info(f"Scheduled overdue check at {hour:02d}:{minute:02d}")
    except ValueError:
        logger.warning(f"Invalid overdue check time format: {config.overdue_check_time}")

    # Also check once on start-up, like opening the app
    scheduler.add_job(
        run_overdue_check,
        DateTrigger(run_date=datetime.now(get_timezone(config))),
        args=[config, store, clock, emit, scheduler],
        id="overdue_startup",
    )

    return scheduler


def run_watch(config: Config | None = None, emit: Emit = print) -> None:
    """Run the scheduler until interrupted."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )
    scheduler = setup_scheduler(config, emit=emit)
    logger.info("Starting Cadence scheduler...")
    scheduler.start()
