from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from studyplanner.db.base import Base


class TaskPriority(str, PyEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(str, PyEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Tasks in these states never reach the planner
CLOSED_TASK_STATUSES = (TaskStatus.COMPLETED.value, TaskStatus.CANCELLED.value)


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(
            "difficulty_level IS NULL OR (difficulty_level BETWEEN 1 AND 5)",
            name="ck_tasks_difficulty_level",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    subject = Column(String(100), nullable=True)
    priority = Column(SQLEnum(TaskPriority), nullable=False, default=TaskPriority.MEDIUM)
    # Use String for SQLite compatibility - enum values are stored as lowercase strings
    status = Column(String(20), nullable=False, default=TaskStatus.PENDING.value)
    due_date = Column(Date, nullable=True, index=True)
    estimated_hours = Column(Numeric(5, 2, asdecimal=False), nullable=True)
    actual_hours = Column(Numeric(5, 2, asdecimal=False), nullable=True)
    difficulty_level = Column(Integer, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user = relationship("User", back_populates="tasks")

    @property
    def is_open(self) -> bool:
        return self.status not in CLOSED_TASK_STATUSES
