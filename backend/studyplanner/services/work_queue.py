"""Normalizes tasks and syllabus topics into one ordered work-item queue."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Sequence

from studyplanner.services.plan_types import WorkItem

TASK_PRIORITY_SCORE = {
    "urgent": 5,
    "high": 4,
    "medium": 3,
    "low": 2,
}

DEFAULT_PRIORITY_SCORE = 3
DEFAULT_ESTIMATED_HOURS = 2.0
DEFAULT_DIFFICULTY = 3

# Topics less than half done rank like a "medium" task, the rest like "low"
TOPIC_BEHIND_SCORE = 3
TOPIC_ON_TRACK_SCORE = 2
TOPIC_BEHIND_THRESHOLD = 50


def task_priority_score(priority: Any) -> int:
    label = getattr(priority, "value", priority)
    if isinstance(label, str):
        return TASK_PRIORITY_SCORE.get(label.lower(), DEFAULT_PRIORITY_SCORE)
    return DEFAULT_PRIORITY_SCORE


def topic_priority_score(completion_percentage: int | None) -> int:
    if (completion_percentage or 0) < TOPIC_BEHIND_THRESHOLD:
        return TOPIC_BEHIND_SCORE
    return TOPIC_ON_TRACK_SCORE


def _hours_or_default(value: float | None) -> float:
    # A missing or zero estimate still gets scheduled
    return float(value) if value else DEFAULT_ESTIMATED_HOURS


def task_to_work_item(task: Any) -> WorkItem:
    return WorkItem(
        id=task.id,
        kind="task",
        title=task.title,
        total_hours=_hours_or_default(task.estimated_hours),
        due_date=task.due_date,
        priority_score=task_priority_score(task.priority),
        difficulty=task.difficulty_level or DEFAULT_DIFFICULTY,
        subject=task.subject,
    )


def topic_to_work_item(topic: Any) -> WorkItem:
    return WorkItem(
        id=topic.id,
        kind="topic",
        title=topic.topic,
        total_hours=_hours_or_default(topic.estimated_study_hours),
        due_date=topic.target_completion_date,
        priority_score=topic_priority_score(topic.completion_percentage),
        difficulty=topic.difficulty_level or DEFAULT_DIFFICULTY,
        subject=topic.subject,
    )


def _queue_key(item: WorkItem) -> tuple[int, date, int]:
    if item.due_date is None:
        return (1, date.max, -item.priority_score)
    return (0, item.due_date, -item.priority_score)


def order_work_items(items: Iterable[WorkItem]) -> tuple[WorkItem, ...]:
    """Due-dated items first (earliest first), then higher priority score.

    ``sorted`` is stable, so items with equal keys keep their input order.
    """
    return tuple(sorted(items, key=_queue_key))


def build_queue(tasks: Sequence[Any], topics: Sequence[Any]) -> tuple[WorkItem, ...]:
    """Build the planner queue from task and syllabus-topic records.

    Tasks come before topics ahead of the sort, so on a tie a task keeps
    precedence over a topic and each group keeps its source order.
    """
    items = [task_to_work_item(task) for task in tasks]
    items.extend(topic_to_work_item(topic) for topic in topics)
    return order_work_items(items)
