from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from studyplanner.db.base import Base


class StudySessionLog(Base):
    """A timed study session as actually carried out (telemetry, not a plan)."""

    __tablename__ = "study_sessions"
    __table_args__ = (
        CheckConstraint(
            "productivity_rating IS NULL OR (productivity_rating BETWEEN 1 AND 5)",
            name="ck_study_sessions_productivity_rating",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True)
    syllabus_id = Column(Integer, ForeignKey("syllabus.id", ondelete="SET NULL"), nullable=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="SET NULL"), nullable=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=True)
    duration_minutes = Column(Integer, nullable=True)
    productivity_rating = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    break_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="study_sessions")
