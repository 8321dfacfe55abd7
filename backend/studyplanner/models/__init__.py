from studyplanner.models.user import User
from studyplanner.models.task import Task
from studyplanner.models.syllabus import SyllabusTopic
from studyplanner.models.event import Event
from studyplanner.models.study_session import StudySessionLog
from studyplanner.models.performance import PerformanceAnalytics

__all__ = [
    "User",
    "Task",
    "SyllabusTopic",
    "Event",
    "StudySessionLog",
    "PerformanceAnalytics",
]
