"""Database-backed inputs and outputs of the planner.

These functions do the I/O on either side of the pure planning core: they
load work items, calendar commitments and performance metrics for a user,
and persist an accepted plan as calendar events.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Iterable

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from studyplanner.models.event import Event, EventType
from studyplanner.models.performance import PerformanceAnalytics
from studyplanner.models.syllabus import SyllabusTopic
from studyplanner.models.task import CLOSED_TASK_STATUSES, Task, TaskPriority
from studyplanner.models.user import User
from studyplanner.services.plan_types import (
    CalendarBlock,
    DifficultTopic,
    PerformanceSnapshot,
    UpcomingDeadline,
)

logger = logging.getLogger(__name__)

PERFORMANCE_LOOKBACK_DAYS = 7
UPCOMING_DEADLINE_DAYS = 7
DIFFICULT_TOPIC_MIN_LEVEL = 4
DIFFICULT_TOPIC_LIMIT = 5

_PRIORITY_RANK = case(
    (Task.priority == TaskPriority.URGENT, 1),
    (Task.priority == TaskPriority.HIGH, 2),
    (Task.priority == TaskPriority.MEDIUM, 3),
    (Task.priority == TaskPriority.LOW, 4),
    else_=5,
)


def _open_tasks(db: Session, user: User):
    return db.query(Task).filter(
        Task.user_id == user.id,
        Task.status.notin_(CLOSED_TASK_STATUSES),
    )


def fetch_open_tasks(db: Session, user: User) -> list[Task]:
    return (
        _open_tasks(db, user)
        .order_by(
            Task.due_date.is_(None),
            Task.due_date.asc(),
            _PRIORITY_RANK,
            Task.id.asc(),
        )
        .all()
    )


def fetch_open_topics(db: Session, user: User) -> list[SyllabusTopic]:
    return (
        db.query(SyllabusTopic)
        .filter(
            SyllabusTopic.user_id == user.id,
            SyllabusTopic.completed.is_(False),
        )
        .order_by(
            SyllabusTopic.target_completion_date.is_(None),
            SyllabusTopic.target_completion_date.asc(),
            SyllabusTopic.difficulty_level.desc(),
            SyllabusTopic.id.asc(),
        )
        .all()
    )


def fetch_calendar_blocks(
    db: Session, user: User, start_date: date, end_date: date
) -> list[CalendarBlock]:
    """Existing events that start anywhere inside the planning window."""
    window_start = datetime.combine(start_date, time.min)
    window_end = datetime.combine(end_date, time.max)
    events = (
        db.query(Event)
        .filter(
            Event.user_id == user.id,
            Event.start_time >= window_start,
            Event.start_time <= window_end,
        )
        .order_by(Event.start_time.asc())
        .all()
    )
    return [CalendarBlock(start=event.start_time, end=event.end_time) for event in events]


def _naive_utc(value: datetime) -> datetime:
    # Events are stored as naive UTC
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _optional_float(value: Any) -> float | None:
    return float(value) if value is not None else None


def build_performance_snapshot(db: Session, user: User, today: date) -> PerformanceSnapshot:
    lookback_start = today - timedelta(days=PERFORMANCE_LOOKBACK_DAYS)
    avg_rating, avg_minutes = (
        db.query(
            func.avg(PerformanceAnalytics.average_productivity_rating),
            func.avg(PerformanceAnalytics.total_study_time_minutes),
        )
        .filter(
            PerformanceAnalytics.user_id == user.id,
            PerformanceAnalytics.date >= lookback_start,
        )
        .one()
    )

    overdue_count = (
        _open_tasks(db, user)
        .filter(Task.due_date.isnot(None), Task.due_date < today)
        .count()
    )

    upcoming = (
        _open_tasks(db, user)
        .filter(
            Task.due_date >= today,
            Task.due_date <= today + timedelta(days=UPCOMING_DEADLINE_DAYS),
        )
        .order_by(Task.due_date.asc(), Task.id.asc())
        .all()
    )

    difficult = (
        db.query(SyllabusTopic)
        .filter(
            SyllabusTopic.user_id == user.id,
            SyllabusTopic.completed.is_(False),
            SyllabusTopic.difficulty_level >= DIFFICULT_TOPIC_MIN_LEVEL,
        )
        .order_by(
            SyllabusTopic.difficulty_level.desc(),
            SyllabusTopic.completion_percentage.asc(),
            SyllabusTopic.id.asc(),
        )
        .limit(DIFFICULT_TOPIC_LIMIT)
        .all()
    )

    return PerformanceSnapshot(
        avg_productivity_rating=_optional_float(avg_rating),
        avg_study_time_minutes=_optional_float(avg_minutes),
        overdue_task_count=overdue_count,
        upcoming_deadlines=tuple(
            UpcomingDeadline(
                title=task.title,
                due_date=task.due_date,
                priority=task.priority.value,
            )
            for task in upcoming
        ),
        difficult_topics=tuple(
            DifficultTopic(
                topic=topic.topic,
                subject=topic.subject,
                difficulty=topic.difficulty_level,
                completion_pct=topic.completion_percentage,
            )
            for topic in difficult
        ),
    )


def apply_plan_items(
    db: Session,
    user: User,
    items: Iterable[Any],
    idempotency_key: str | None = None,
) -> list[Event]:
    """Persist plan items as study-session events.

    Without an idempotency key every call inserts new rows, so applying the
    same plan twice duplicates it. With a key, a repeated call for the same
    user returns the events created by the first one.
    """
    if idempotency_key:
        existing = (
            db.query(Event)
            .filter(Event.user_id == user.id, Event.idempotency_key == idempotency_key)
            .order_by(Event.id.asc())
            .all()
        )
        if existing:
            logger.info(
                f"Apply-plan replay for user {user.id} with key {idempotency_key!r}: "
                f"returning {len(existing)} existing events"
            )
            return existing

    created: list[Event] = []
    for item in items:
        event = Event(
            user_id=user.id,
            title=item.title,
            event_type=EventType.STUDY_SESSION.value,
            start_time=_naive_utc(item.start_time),
            end_time=_naive_utc(item.end_time),
            task_id=item.task_id,
            syllabus_id=item.syllabus_id,
            idempotency_key=idempotency_key,
        )
        db.add(event)
        created.append(event)
    db.commit()
    for event in created:
        db.refresh(event)
    return created
