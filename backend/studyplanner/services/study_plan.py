"""Greedy day-by-day study plan generation.

The generator walks the planning window one day at a time and fills each
day's free capacity from an already-ordered work-item queue. It never
backtracks or re-sorts: identical input always yields the identical plan.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Iterator, Mapping, Sequence

from studyplanner.services.capacity import available_hours, blocks_on_day
from studyplanner.services.plan_types import (
    CalendarBlock,
    DayPlan,
    Session,
    StudyPlan,
    WorkItem,
)

logger = logging.getLogger(__name__)

MIN_SESSION_HOURS = 0.5
MAX_SESSION_HOURS = 2.5
DEFAULT_DAY_START = time(hour=9)
SESSION_TITLE_PREFIX = "Study: "

Ledger = Mapping[tuple[str, int], float]


def _iter_days(start_date: date, end_date: date) -> Iterator[date]:
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def _is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def remaining_hours(item: WorkItem, ledger: Ledger) -> float:
    return item.total_hours - ledger.get(item.key, 0.0)


def is_done(item: WorkItem, ledger: Ledger) -> bool:
    return remaining_hours(item, ledger) <= 0


def _allocate(ledger: Ledger, item: WorkItem, hours: float) -> Ledger:
    """Return a new ledger with ``hours`` more booked against ``item``."""
    updated = dict(ledger)
    updated[item.key] = ledger.get(item.key, 0.0) + hours
    return updated


def _make_session(item: WorkItem, start: datetime, hours: float) -> Session:
    return Session(
        title=f"{SESSION_TITLE_PREFIX}{item.title}",
        start_time=start,
        end_time=start + timedelta(hours=hours),
        hours=hours,
        work_item_id=item.id,
        work_item_kind=item.kind,
        subject=item.subject,
        difficulty=item.difficulty,
    )


def plan_day(
    day: date,
    queue: Sequence[WorkItem],
    ledger: Ledger,
    available: float,
    day_start: time = DEFAULT_DAY_START,
) -> tuple[list[Session], Ledger]:
    """Fill one day's capacity from the queue.

    Sessions run back to back from ``day_start``. An item whose next slice
    would be 0.5h or less is skipped for today but stays eligible later.
    """
    sessions: list[Session] = []
    hours_today = 0.0
    opening = datetime.combine(day, day_start)

    for item in queue:
        if hours_today >= available:
            break
        if is_done(item, ledger):
            continue

        session_hours = min(
            remaining_hours(item, ledger),
            available - hours_today,
            MAX_SESSION_HOURS,
        )
        if session_hours <= MIN_SESSION_HOURS:
            continue

        sessions.append(
            _make_session(item, opening + timedelta(hours=hours_today), session_hours)
        )
        ledger = _allocate(ledger, item, session_hours)
        hours_today += session_hours

    return sessions, ledger


def generate_plan(
    work_items: Sequence[WorkItem],
    calendar_blocks: Sequence[CalendarBlock],
    start_date: date,
    end_date: date,
    daily_study_hours: float,
    include_weekends: bool = True,
    day_start: time = DEFAULT_DAY_START,
) -> StudyPlan:
    """Schedule ``work_items`` over ``start_date..end_date`` inclusive.

    ``work_items`` must already be in queue order (see ``work_queue.build_queue``).
    Days with no free capacity, or where nothing fit, are left out of the
    plan entirely. Work that does not fit inside the window is simply left
    unscheduled.
    """
    ledger: Ledger = {}
    daily_plans: list[DayPlan] = []

    for day in _iter_days(start_date, end_date):
        if not include_weekends and _is_weekend(day):
            continue

        free = max(
            0.0,
            available_hours(day, daily_study_hours, blocks_on_day(calendar_blocks, day)),
        )
        if free <= 0:
            continue

        sessions, ledger = plan_day(day, work_items, ledger, free, day_start)
        if sessions:
            daily_plans.append(DayPlan(date=day, sessions=tuple(sessions)))

    plan = StudyPlan(daily_plans=tuple(daily_plans))
    unfinished = sum(1 for item in work_items if not is_done(item, ledger))
    logger.debug(
        f"Generated plan {start_date}..{end_date}: {plan.total_days} days, "
        f"{plan.total_study_hours:.2f}h, {unfinished}/{len(work_items)} items unfinished"
    )
    return plan
