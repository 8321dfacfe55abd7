from datetime import date, datetime
from typing import Literal

from pydantic import Field, validator

from studyplanner.schemas.base import CamelModel


class GeneratePlanRequest(CamelModel):
    start_date: date
    end_date: date
    daily_study_hours: float | None = Field(default=None, ge=1, le=16)
    include_weekends: bool = True
    # Accepted for client compatibility; due dates always lead the queue
    prioritize_due_tasks: bool = True

    @validator("end_date")
    def end_not_before_start(cls, v, values):
        start = values.get("start_date")
        if start and v < start:
            raise ValueError("endDate must not be before startDate")
        return v


class PlannedSession(CamelModel):
    title: str
    start_time: datetime
    end_time: datetime
    task_id: int | None = None
    syllabus_id: int | None = None
    subject: str | None = None
    difficulty: int
    estimated_hours: float


class DayPlanPublic(CamelModel):
    day: date = Field(alias="date")
    total_hours: float
    sessions: list[PlannedSession]


class StudyPlanPublic(CamelModel):
    total_days: int
    total_study_hours: float
    daily_plans: list[DayPlanPublic]


class GeneratePlanResponse(CamelModel):
    message: str
    study_plan: StudyPlanPublic


class PlanItem(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    start_time: datetime
    end_time: datetime
    task_id: int | None = None
    syllabus_id: int | None = None

    @validator("end_time")
    def end_after_start(cls, v, values):
        start = values.get("start_time")
        if start and v <= start:
            raise ValueError("endTime must be after startTime")
        return v


class ApplyPlanRequest(CamelModel):
    plan_items: list[PlanItem]


class EventPublic(CamelModel):
    id: int
    title: str
    event_type: str
    start_time: datetime
    end_time: datetime
    task_id: int | None = None
    syllabus_id: int | None = None
    created_at: datetime


class ApplyPlanResponse(CamelModel):
    message: str
    created_events: list[EventPublic]


class RecommendationPublic(CamelModel):
    type: str
    priority: Literal["low", "medium", "high", "urgent"]
    title: str
    description: str
    action: str


class RecommendationsResponse(CamelModel):
    recommendations: list[RecommendationPublic]
