from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from studyplanner.db.base import Base


class SyllabusTopic(Base):
    __tablename__ = "syllabus"
    __table_args__ = (
        CheckConstraint(
            "completion_percentage BETWEEN 0 AND 100",
            name="ck_syllabus_completion_percentage",
        ),
        CheckConstraint(
            "difficulty_level IS NULL OR (difficulty_level BETWEEN 1 AND 5)",
            name="ck_syllabus_difficulty_level",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    subject = Column(String(100), nullable=False, index=True)
    topic = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    chapter_number = Column(Integer, nullable=True)
    estimated_study_hours = Column(Numeric(5, 2, asdecimal=False), nullable=True)
    completed = Column(Boolean, nullable=False, default=False, index=True)
    completion_percentage = Column(Integer, nullable=False, default=0)
    start_date = Column(Date, nullable=True)
    target_completion_date = Column(Date, nullable=True)
    actual_completion_date = Column(Date, nullable=True)
    difficulty_level = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user = relationship("User", back_populates="syllabus_topics")
