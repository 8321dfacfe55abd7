from datetime import datetime

from pydantic import Field

from studyplanner.schemas.base import CamelModel


class StudySessionStart(CamelModel):
    task_id: int | None = None
    syllabus_id: int | None = None
    event_id: int | None = None


class StudySessionEnd(CamelModel):
    productivity_rating: int = Field(ge=1, le=5)
    notes: str | None = None
    break_count: int = Field(default=0, ge=0)


class StudySessionPublic(CamelModel):
    id: int
    user_id: int
    task_id: int | None
    syllabus_id: int | None
    event_id: int | None
    start_time: datetime
    end_time: datetime | None
    duration_minutes: int | None
    productivity_rating: int | None
    notes: str | None
    break_count: int
