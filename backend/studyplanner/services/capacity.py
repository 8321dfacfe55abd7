from __future__ import annotations

from datetime import date
from typing import Iterable

from studyplanner.services.plan_types import CalendarBlock


def blocks_on_day(blocks: Iterable[CalendarBlock], day: date) -> list[CalendarBlock]:
    """Blocks that start on ``day``. A block crossing midnight counts only there."""
    return [block for block in blocks if block.start.date() == day]


def available_hours(
    day: date, daily_study_hours: float, blocks: Iterable[CalendarBlock]
) -> float:
    """Study hours left on ``day`` once existing commitments are taken out.

    ``blocks`` should already be restricted to the day (see ``blocks_on_day``).
    The result can be negative when the day is over-committed; callers clamp
    it to zero before allocating anything.
    """
    committed = sum(block.duration_hours for block in blocks)
    return daily_study_hours - committed
