"""Rule-based study recommendations derived from recent performance.

Each rule looks at one aspect of a ``PerformanceSnapshot`` and yields at most
one recommendation. Rules run in a fixed order and their output is returned
in that same order, without re-ranking by priority.
"""

from __future__ import annotations

from typing import Callable

from studyplanner.services.plan_types import PerformanceSnapshot, Recommendation

LOW_PRODUCTIVITY_RATING = 3
MIN_DAILY_STUDY_MINUTES = 120


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def _productivity_rule(snapshot: PerformanceSnapshot) -> Recommendation | None:
    rating = snapshot.avg_productivity_rating
    if rating is None or rating >= LOW_PRODUCTIVITY_RATING:
        return None
    return Recommendation(
        type="performance",
        priority="high",
        title="Improve Study Effectiveness",
        description=(
            f"Your recent productivity rating averages {rating:.1f}/5, which is below average. "
            "Consider shorter, more focused study sessions with regular breaks."
        ),
        action="Try the Pomodoro Technique: 25-minute focused sessions with 5-minute breaks.",
    )


def _study_time_rule(snapshot: PerformanceSnapshot) -> Recommendation | None:
    minutes = snapshot.avg_study_time_minutes
    if minutes is None or minutes >= MIN_DAILY_STUDY_MINUTES:
        return None
    return Recommendation(
        type="time",
        priority="medium",
        title="Increase Study Time",
        description=(
            f"You're studying about {round(minutes)} minutes per day on average, "
            "less than 2 hours. Consider increasing your daily study commitment."
        ),
        action="Gradually increase your daily study time by 30 minutes each week.",
    )


def _overdue_rule(snapshot: PerformanceSnapshot) -> Recommendation | None:
    count = snapshot.overdue_task_count
    if count <= 0:
        return None
    return Recommendation(
        type="deadline",
        priority="urgent",
        title="Address Overdue Tasks",
        description=(
            f"You have {_plural(count, 'overdue task')}. "
            "Prioritize completing these immediately."
        ),
        action=(
            "Review and reschedule overdue tasks. "
            "Consider breaking large tasks into smaller, manageable parts."
        ),
    )


def _upcoming_deadlines_rule(snapshot: PerformanceSnapshot) -> Recommendation | None:
    count = len(snapshot.upcoming_deadlines)
    if count == 0:
        return None
    return Recommendation(
        type="planning",
        priority="high",
        title="Prepare for Upcoming Deadlines",
        description=f"You have {_plural(count, 'task')} due within the next week.",
        action="Allocate extra time for high-priority tasks with approaching deadlines.",
    )


def _difficult_topics_rule(snapshot: PerformanceSnapshot) -> Recommendation | None:
    topics = snapshot.difficult_topics
    if not topics:
        return None
    names = ", ".join(topic.topic for topic in topics)
    return Recommendation(
        type="difficulty",
        priority="medium",
        title="Focus on Challenging Topics",
        description=(
            f"You have {_plural(len(topics), 'difficult topic')} with low completion rates: {names}."
        ),
        action="Schedule dedicated time for challenging subjects when you're most alert and focused.",
    )


RULES: tuple[Callable[[PerformanceSnapshot], Recommendation | None], ...] = (
    _productivity_rule,
    _study_time_rule,
    _overdue_rule,
    _upcoming_deadlines_rule,
    _difficult_topics_rule,
)


def derive_recommendations(snapshot: PerformanceSnapshot) -> list[Recommendation]:
    recommendations: list[Recommendation] = []
    for rule in RULES:
        recommendation = rule(snapshot)
        if recommendation is not None:
            recommendations.append(recommendation)
    return recommendations
