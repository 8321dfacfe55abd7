"""Study-session telemetry and the daily performance rollup it feeds."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from sqlalchemy.orm import Session

from studyplanner.models.performance import PerformanceAnalytics
from studyplanner.models.study_session import StudySessionLog
from studyplanner.models.user import User

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_study_session(
    db: Session,
    user: User,
    task_id: int | None = None,
    syllabus_id: int | None = None,
    event_id: int | None = None,
    now: datetime | None = None,
) -> StudySessionLog:
    session = StudySessionLog(
        user_id=user.id,
        task_id=task_id,
        syllabus_id=syllabus_id,
        event_id=event_id,
        start_time=now or _utcnow(),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def end_study_session(
    db: Session,
    user: User,
    session_id: int,
    productivity_rating: int,
    notes: str | None = None,
    break_count: int = 0,
    now: datetime | None = None,
) -> StudySessionLog | None:
    """Close an active session and fold it into that day's rollup.

    Returns ``None`` when the session does not exist, belongs to someone else
    or has already been ended.
    """
    session = (
        db.query(StudySessionLog)
        .filter(
            StudySessionLog.id == session_id,
            StudySessionLog.user_id == user.id,
            StudySessionLog.end_time.is_(None),
        )
        .first()
    )
    if session is None:
        return None

    ended_at = now or _utcnow()
    session.end_time = ended_at
    session.duration_minutes = max(0, int((ended_at - session.start_time).total_seconds() // 60))
    session.productivity_rating = productivity_rating
    session.notes = notes
    session.break_count = break_count

    record_daily_performance(
        db,
        user_id=user.id,
        day=session.start_time.date(),
        study_minutes=session.duration_minutes,
        productivity_rating=productivity_rating,
    )
    db.commit()
    db.refresh(session)
    return session


def record_daily_performance(
    db: Session,
    user_id: int,
    day: date,
    study_minutes: int,
    productivity_rating: int | None,
) -> PerformanceAnalytics:
    """Add one session to the (user, day) rollup. Does not commit.

    The productivity rating is a count-weighted running mean over every rated
    session of the day, not the average of the previous mean and the new
    rating.
    """
    record = (
        db.query(PerformanceAnalytics)
        .filter(PerformanceAnalytics.user_id == user_id, PerformanceAnalytics.date == day)
        .first()
    )
    if record is None:
        record = PerformanceAnalytics(
            user_id=user_id,
            date=day,
            total_study_time_minutes=0,
            rated_session_count=0,
        )
        db.add(record)

    record.total_study_time_minutes = (record.total_study_time_minutes or 0) + study_minutes

    if productivity_rating is not None:
        count = record.rated_session_count or 0
        previous = record.average_productivity_rating or 0.0
        record.average_productivity_rating = (previous * count + productivity_rating) / (count + 1)
        record.rated_session_count = count + 1

    db.flush()
    logger.debug(
        f"Performance rollup user={user_id} day={day}: "
        f"{record.total_study_time_minutes}min, rating={record.average_productivity_rating}"
    )
    return record
