"""Value types shared by the planner and the recommendation engine.

Everything here is immutable. The planner's only running state, the hours
already placed per work item, lives in an explicit ledger keyed by
``WorkItem.key`` (see ``study_plan``), never on the items themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal

WorkItemKind = Literal["task", "topic"]
RecommendationPriority = Literal["low", "medium", "high", "urgent"]


@dataclass(frozen=True)
class WorkItem:
    id: int
    kind: WorkItemKind
    title: str
    total_hours: float
    due_date: date | None = None
    priority_score: int = 3
    difficulty: int = 3
    subject: str | None = None

    @property
    def key(self) -> tuple[WorkItemKind, int]:
        # Task and topic ids come from different tables and may collide
        return (self.kind, self.id)


@dataclass(frozen=True)
class CalendarBlock:
    start: datetime
    end: datetime

    @property
    def duration_hours(self) -> float:
        return (self.end - self.start).total_seconds() / 3600


@dataclass(frozen=True)
class Session:
    title: str
    start_time: datetime
    end_time: datetime
    hours: float
    work_item_id: int | None = None
    work_item_kind: WorkItemKind | None = None
    subject: str | None = None
    difficulty: int = 3


@dataclass(frozen=True)
class DayPlan:
    date: date
    sessions: tuple[Session, ...]

    @property
    def total_hours(self) -> float:
        return sum(session.hours for session in self.sessions)


@dataclass(frozen=True)
class StudyPlan:
    daily_plans: tuple[DayPlan, ...]

    @property
    def total_days(self) -> int:
        return len(self.daily_plans)

    @property
    def total_study_hours(self) -> float:
        return sum(day.total_hours for day in self.daily_plans)


@dataclass(frozen=True)
class UpcomingDeadline:
    title: str
    due_date: date
    priority: str


@dataclass(frozen=True)
class DifficultTopic:
    topic: str
    subject: str | None
    difficulty: int
    completion_pct: int


@dataclass(frozen=True)
class PerformanceSnapshot:
    avg_productivity_rating: float | None = None
    avg_study_time_minutes: float | None = None
    overdue_task_count: int = 0
    upcoming_deadlines: tuple[UpcomingDeadline, ...] = field(default_factory=tuple)
    difficult_topics: tuple[DifficultTopic, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Recommendation:
    type: str
    priority: RecommendationPriority
    title: str
    description: str
    action: str
