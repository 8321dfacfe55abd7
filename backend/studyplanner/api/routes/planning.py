import logging
from dataclasses import asdict
from datetime import datetime, time, timezone

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from studyplanner.api import deps
from studyplanner.core.config import get_settings
from studyplanner.db.session import get_db
from studyplanner.models.user import User
from studyplanner.schemas.planning import (
    ApplyPlanRequest,
    ApplyPlanResponse,
    DayPlanPublic,
    EventPublic,
    GeneratePlanRequest,
    GeneratePlanResponse,
    PlannedSession,
    RecommendationPublic,
    RecommendationsResponse,
    StudyPlanPublic,
)
from studyplanner.services import sources
from studyplanner.services.plan_types import Session as PlanSession
from studyplanner.services.plan_types import StudyPlan
from studyplanner.services.recommendations import derive_recommendations
from studyplanner.services.study_plan import generate_plan
from studyplanner.services.work_queue import build_queue

logger = logging.getLogger(__name__)

router = APIRouter()


def _serialize_session(session: PlanSession) -> PlannedSession:
    return PlannedSession(
        title=session.title,
        start_time=session.start_time,
        end_time=session.end_time,
        task_id=session.work_item_id if session.work_item_kind == "task" else None,
        syllabus_id=session.work_item_id if session.work_item_kind == "topic" else None,
        subject=session.subject,
        difficulty=session.difficulty,
        estimated_hours=session.hours,
    )


def _serialize_plan(plan: StudyPlan) -> StudyPlanPublic:
    return StudyPlanPublic(
        total_days=plan.total_days,
        total_study_hours=plan.total_study_hours,
        daily_plans=[
            DayPlanPublic(
                day=day.date,
                total_hours=day.total_hours,
                sessions=[_serialize_session(session) for session in day.sessions],
            )
            for day in plan.daily_plans
        ],
    )


@router.post("/generate-plan", response_model=GeneratePlanResponse)
def generate_study_plan(
    payload: GeneratePlanRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> GeneratePlanResponse:
    """Build a day-by-day study plan for the requested window.

    Nothing is persisted; the client reviews the plan and sends the sessions
    it wants to keep to ``/apply-plan``.
    """
    settings = get_settings()
    daily_hours = payload.daily_study_hours or settings.default_daily_study_hours

    queue = build_queue(
        sources.fetch_open_tasks(db, current_user),
        sources.fetch_open_topics(db, current_user),
    )
    blocks = sources.fetch_calendar_blocks(db, current_user, payload.start_date, payload.end_date)

    plan = generate_plan(
        queue,
        blocks,
        payload.start_date,
        payload.end_date,
        daily_study_hours=daily_hours,
        include_weekends=payload.include_weekends,
        day_start=time(hour=settings.study_day_start_hour),
    )
    logger.info(
        f"Study plan for user {current_user.id}: {len(queue)} work items, "
        f"{len(blocks)} calendar blocks, {plan.total_days} days, {plan.total_study_hours:.2f}h"
    )
    return GeneratePlanResponse(
        message="Study plan generated successfully",
        study_plan=_serialize_plan(plan),
    )


@router.post(
    "/apply-plan",
    response_model=ApplyPlanResponse,
    status_code=status.HTTP_201_CREATED,
)
def apply_study_plan(
    payload: ApplyPlanRequest,
    idempotency_key: str | None = Header(default=None, max_length=64),
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> ApplyPlanResponse:
    """Save plan sessions as calendar events.

    Send an ``Idempotency-Key`` header to make retries safe; without one,
    applying the same plan twice creates duplicate events.
    """
    events = sources.apply_plan_items(
        db, current_user, payload.plan_items, idempotency_key=idempotency_key
    )
    logger.info(f"Applied study plan for user {current_user.id}: {len(events)} events")
    return ApplyPlanResponse(
        message="Study plan applied successfully",
        created_events=[EventPublic.model_validate(event) for event in events],
    )


@router.get("/recommendations", response_model=RecommendationsResponse)
def get_recommendations(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> RecommendationsResponse:
    today = datetime.now(timezone.utc).date()
    snapshot = sources.build_performance_snapshot(db, current_user, today)
    return RecommendationsResponse(
        recommendations=[
            RecommendationPublic(**asdict(recommendation))
            for recommendation in derive_recommendations(snapshot)
        ]
    )
