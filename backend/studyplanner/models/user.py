from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from studyplanner.db.base import Base

CASCADE_ALL_DELETE_ORPHAN = "all, delete-orphan"


class UserRole(str, PyEnum):
    USER = "user"
    ACADEMIC_ADVISOR = "academic_advisor"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    # String for SQLite compatibility, values from UserRole
    role = Column(String(50), nullable=False, default=UserRole.USER.value)
    is_active = Column(Boolean, nullable=False, default=True)
    daily_study_hours = Column(Float, nullable=False, default=6)
    include_weekends = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    tasks = relationship(
        "Task", back_populates="user", cascade=CASCADE_ALL_DELETE_ORPHAN
    )
    syllabus_topics = relationship(
        "SyllabusTopic", back_populates="user", cascade=CASCADE_ALL_DELETE_ORPHAN
    )
    events = relationship(
        "Event", back_populates="user", cascade=CASCADE_ALL_DELETE_ORPHAN
    )
    study_sessions = relationship(
        "StudySessionLog", back_populates="user", cascade=CASCADE_ALL_DELETE_ORPHAN
    )
    performance = relationship(
        "PerformanceAnalytics", back_populates="user", cascade=CASCADE_ALL_DELETE_ORPHAN
    )
