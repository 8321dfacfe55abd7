from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from studyplanner.db.base import Base


class PerformanceAnalytics(Base):
    """Per-user, per-day rollup of study telemetry."""

    __tablename__ = "performance_analytics"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_performance_analytics_user_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    total_study_time_minutes = Column(Integer, nullable=False, default=0)
    tasks_completed = Column(Integer, nullable=False, default=0)
    average_productivity_rating = Column(Float, nullable=True)
    # Number of rated sessions folded into average_productivity_rating
    rated_session_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user = relationship("User", back_populates="performance")
