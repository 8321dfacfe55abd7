from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from studyplanner.db.base import Base


class EventType(str, PyEnum):
    STUDY_SESSION = "study_session"
    EXAM = "exam"
    ASSIGNMENT = "assignment"
    MEETING = "meeting"
    BREAK = "break"
    OTHER = "other"


class EventStatus(str, PyEnum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    event_type = Column(String(50), nullable=False, default=EventType.STUDY_SESSION.value)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    location = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default=EventStatus.SCHEDULED.value)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True)
    syllabus_id = Column(Integer, ForeignKey("syllabus.id", ondelete="SET NULL"), nullable=True)
    # Client-supplied key for apply-plan requests; replays return the same rows
    idempotency_key = Column(String(64), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user = relationship("User", back_populates="events")
    task = relationship("Task")
    syllabus_topic = relationship("SyllabusTopic")
