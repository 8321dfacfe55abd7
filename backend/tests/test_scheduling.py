from datetime import date, datetime, time, timedelta

from studyplanner.models.syllabus import SyllabusTopic
from studyplanner.models.task import Task, TaskPriority
from studyplanner.services.capacity import available_hours, blocks_on_day
from studyplanner.services.plan_types import CalendarBlock, WorkItem
from studyplanner.services.study_plan import (
    MAX_SESSION_HOURS,
    MIN_SESSION_HOURS,
    generate_plan,
)
from studyplanner.services.work_queue import (
    build_queue,
    order_work_items,
    task_priority_score,
    topic_priority_score,
)

MONDAY = date(2024, 3, 4)


def _item(item_id: int, hours: float, due: date | None = None, score: int = 3, kind: str = "task") -> WorkItem:
    return WorkItem(
        id=item_id,
        kind=kind,
        title=f"Item {item_id}",
        total_hours=hours,
        due_date=due,
        priority_score=score,
        subject="Maths",
    )


def _block(day: date, start_hour: int, end_hour: int) -> CalendarBlock:
    return CalendarBlock(
        start=datetime.combine(day, time(hour=start_hour)),
        end=datetime.combine(day, time(hour=end_hour)),
    )


def _hours_by_item(plan) -> dict[tuple[str, int], float]:
    totals: dict[tuple[str, int], float] = {}
    for day in plan.daily_plans:
        for session in day.sessions:
            key = (session.work_item_kind, session.work_item_id)
            totals[key] = totals.get(key, 0.0) + session.hours
    return totals


def test_available_hours_subtracts_blocks_on_the_day():
    blocks = [_block(MONDAY, 9, 11), _block(MONDAY, 14, 15), _block(MONDAY + timedelta(days=1), 9, 17)]
    todays = blocks_on_day(blocks, MONDAY)

    assert len(todays) == 2
    assert available_hours(MONDAY, 6, todays) == 3


def test_available_hours_can_go_negative():
    assert available_hours(MONDAY, 6, [_block(MONDAY, 8, 18)]) == -4


def test_block_crossing_midnight_counts_on_its_start_day():
    block = CalendarBlock(
        start=datetime.combine(MONDAY, time(hour=23)),
        end=datetime.combine(MONDAY + timedelta(days=1), time(hour=1)),
    )
    assert blocks_on_day([block], MONDAY) == [block]
    assert blocks_on_day([block], MONDAY + timedelta(days=1)) == []


def test_priority_scores():
    assert task_priority_score(TaskPriority.URGENT) == 5
    assert task_priority_score("high") == 4
    assert task_priority_score("medium") == 3
    assert task_priority_score(TaskPriority.LOW) == 2
    assert task_priority_score(None) == 3
    assert topic_priority_score(0) == 3
    assert topic_priority_score(49) == 3
    assert topic_priority_score(50) == 2
    assert topic_priority_score(None) == 3


def test_queue_puts_due_dates_first_then_priority():
    no_due_urgent = _item(1, 2, score=5)
    late_low = _item(2, 2, due=MONDAY + timedelta(days=5), score=2)
    early_low = _item(3, 2, due=MONDAY + timedelta(days=1), score=2)
    no_due_low = _item(4, 2, score=2)
    early_high = _item(5, 2, due=MONDAY + timedelta(days=1), score=4)

    ordered = order_work_items([no_due_urgent, late_low, early_low, no_due_low, early_high])

    assert [item.id for item in ordered] == [5, 3, 2, 1, 4]


def test_queue_is_stable_for_identical_keys():
    due = MONDAY + timedelta(days=2)
    first = _item(10, 2, due=due, score=3)
    second = _item(11, 2, due=due, score=3)

    assert [item.id for item in order_work_items([first, second])] == [10, 11]
    assert [item.id for item in order_work_items([second, first])] == [11, 10]


def test_build_queue_maps_records_and_keeps_tasks_before_topics():
    due = MONDAY + timedelta(days=3)
    task = Task(
        id=1,
        title="Problem set",
        priority=TaskPriority.MEDIUM,
        due_date=due,
        estimated_hours=None,
        difficulty_level=None,
        subject="Physics",
    )
    topic = SyllabusTopic(
        id=1,
        topic="Thermodynamics",
        subject="Physics",
        completion_percentage=20,
        target_completion_date=due,
        estimated_study_hours=4,
        difficulty_level=5,
    )

    queue = build_queue([task], [topic])

    assert [(item.kind, item.id) for item in queue] == [("task", 1), ("topic", 1)]
    assert queue[0].total_hours == 2.0
    assert queue[0].difficulty == 3
    assert queue[1].priority_score == 3
    assert queue[1].title == "Thermodynamics"
    assert queue[1].total_hours == 4.0


def test_single_task_single_day():
    plan = generate_plan([_item(1, 2)], [], MONDAY, MONDAY, daily_study_hours=6)

    assert plan.total_days == 1
    assert plan.total_study_hours == 2
    (day,) = plan.daily_plans
    (session,) = day.sessions
    assert session.hours == 2
    assert session.start_time == datetime.combine(MONDAY, time(hour=9))
    assert session.end_time == datetime.combine(MONDAY, time(hour=11))
    assert session.title == "Study: Item 1"


def test_session_cap_and_remaining_capacity():
    plan = generate_plan([_item(1, 3), _item(2, 3)], [], MONDAY, MONDAY, daily_study_hours=4)

    sessions = plan.daily_plans[0].sessions
    assert [(s.work_item_id, s.hours) for s in sessions] == [(1, 2.5), (2, 1.5)]
    assert sessions[1].start_time == datetime.combine(MONDAY, time(hour=11, minute=30))
    assert plan.total_study_hours == 4


def test_fragment_at_or_below_minimum_is_never_emitted():
    plan = generate_plan(
        [_item(1, 3), _item(2, 3)], [], MONDAY, MONDAY + timedelta(days=1), daily_study_hours=4
    )

    second_day = plan.daily_plans[1].sessions
    # Item 1 has 0.5h left, which is not above the minimum
    assert [(s.work_item_id, s.hours) for s in second_day] == [(2, 1.5)]
    assert _hours_by_item(plan)[("task", 1)] == 2.5


def test_small_remainder_skips_item_but_not_the_rest_of_the_queue():
    plan = generate_plan([_item(1, 2.75), _item(2, 1)], [], MONDAY, MONDAY, daily_study_hours=6)

    sessions = plan.daily_plans[0].sessions
    assert [(s.work_item_id, s.hours) for s in sessions] == [(1, 2.5), (2, 1)]


def test_fully_booked_day_is_left_out():
    blocks = [_block(MONDAY, 9, 17)]
    plan = generate_plan([_item(1, 2)], blocks, MONDAY, MONDAY + timedelta(days=1), daily_study_hours=6)

    assert [day.date for day in plan.daily_plans] == [MONDAY + timedelta(days=1)]
    assert plan.total_days == 1


def test_day_with_too_little_capacity_is_left_out():
    blocks = [_block(MONDAY, 9, 14), _block(MONDAY, 15, 15)]
    plan = generate_plan([_item(1, 2)], blocks, MONDAY, MONDAY, daily_study_hours=5.5)

    assert plan.daily_plans == ()
    assert plan.total_study_hours == 0


def test_weekends_skipped_when_excluded():
    saturday = MONDAY + timedelta(days=5)
    next_monday = MONDAY + timedelta(days=7)

    plan = generate_plan([_item(1, 2)], [], saturday, next_monday, daily_study_hours=6, include_weekends=False)
    assert [day.date for day in plan.daily_plans] == [next_monday]

    plan = generate_plan([_item(1, 2)], [], saturday, next_monday, daily_study_hours=6, include_weekends=True)
    assert [day.date for day in plan.daily_plans] == [saturday]


def test_capacity_bound_respects_existing_events():
    blocks = [_block(MONDAY, 13, 15)]
    items = [_item(1, 3), _item(2, 3), _item(3, 3)]

    plan = generate_plan(items, blocks, MONDAY, MONDAY, daily_study_hours=6)

    assert plan.daily_plans[0].total_hours <= 6 - 2 + 1e-9


def test_properties_hold_over_a_longer_window():
    items = order_work_items(
        [
            _item(1, 7, due=MONDAY + timedelta(days=4), score=4),
            _item(2, 1.2, due=MONDAY + timedelta(days=2), score=2),
            _item(3, 5.5, score=5),
            _item(4, 0.75, score=3),
            _item(1, 3, due=MONDAY + timedelta(days=1), kind="topic"),
        ]
    )
    blocks = [_block(MONDAY, 10, 12), _block(MONDAY + timedelta(days=2), 8, 13)]

    plan = generate_plan(items, blocks, MONDAY, MONDAY + timedelta(days=6), daily_study_hours=5)

    totals = {item.key: item.total_hours for item in items}
    for key, hours in _hours_by_item(plan).items():
        assert hours <= totals[key] + 1e-9

    for day in plan.daily_plans:
        committed = sum(b.duration_hours for b in blocks_on_day(blocks, day.date))
        assert day.total_hours <= 5 - committed + 1e-9
        assert day.total_hours > 0
        previous_end = None
        for session in day.sessions:
            assert MIN_SESSION_HOURS < session.hours <= MAX_SESSION_HOURS
            assert session.start_time.date() == day.date
            if previous_end is not None:
                assert session.start_time >= previous_end
            previous_end = session.end_time

    assert plan.total_days == len(plan.daily_plans)
    assert abs(plan.total_study_hours - sum(d.total_hours for d in plan.daily_plans)) < 1e-9


def test_earlier_due_date_finishes_first():
    later = _item(1, 4, due=MONDAY + timedelta(days=6))
    earlier = _item(2, 4, due=MONDAY + timedelta(days=3))

    plan = generate_plan(order_work_items([later, earlier]), [], MONDAY, MONDAY + timedelta(days=4), daily_study_hours=3)

    finished_on: dict[int, date] = {}
    booked: dict[int, float] = {1: 0.0, 2: 0.0}
    for day in plan.daily_plans:
        for session in day.sessions:
            booked[session.work_item_id] += session.hours
            if booked[session.work_item_id] >= 4 and session.work_item_id not in finished_on:
                finished_on[session.work_item_id] = day.date

    assert finished_on[2] <= finished_on[1]
    assert plan.daily_plans[0].sessions[0].work_item_id == 2


def test_identical_keys_are_scheduled_in_input_order():
    due = MONDAY + timedelta(days=1)
    plan = generate_plan(
        order_work_items([_item(7, 1, due=due), _item(3, 1, due=due)]),
        [],
        MONDAY,
        MONDAY,
        daily_study_hours=6,
    )
    assert [s.work_item_id for s in plan.daily_plans[0].sessions] == [7, 3]


def test_unfinished_work_is_not_an_error_and_generation_is_repeatable():
    items = [_item(1, 20), _item(2, 10)]

    first = generate_plan(items, [], MONDAY, MONDAY + timedelta(days=1), daily_study_hours=4)
    second = generate_plan(items, [], MONDAY, MONDAY + timedelta(days=1), daily_study_hours=4)

    assert first == second
    assert first.total_study_hours == 8


def test_empty_queue_gives_empty_plan():
    plan = generate_plan([], [], MONDAY, MONDAY + timedelta(days=6), daily_study_hours=6)
    assert plan.total_days == 0
    assert plan.total_study_hours == 0


def test_custom_day_start():
    plan = generate_plan([_item(1, 1)], [], MONDAY, MONDAY, daily_study_hours=6, day_start=time(hour=14))
    assert plan.daily_plans[0].sessions[0].start_time == datetime.combine(MONDAY, time(hour=14))
