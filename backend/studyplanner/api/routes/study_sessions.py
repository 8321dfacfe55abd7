import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from studyplanner.api import deps
from studyplanner.db.session import get_db
from studyplanner.models.user import User
from studyplanner.schemas.study_session import (
    StudySessionEnd,
    StudySessionPublic,
    StudySessionStart,
)
from studyplanner.services import telemetry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=StudySessionPublic, status_code=status.HTTP_201_CREATED)
def start_session(
    payload: StudySessionStart,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> StudySessionPublic:
    session = telemetry.start_study_session(
        db,
        current_user,
        task_id=payload.task_id,
        syllabus_id=payload.syllabus_id,
        event_id=payload.event_id,
    )
    return StudySessionPublic.model_validate(session)


@router.put("/{session_id}/end", response_model=StudySessionPublic)
def end_session(
    session_id: int,
    payload: StudySessionEnd,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> StudySessionPublic:
    session = telemetry.end_study_session(
        db,
        current_user,
        session_id,
        productivity_rating=payload.productivity_rating,
        notes=payload.notes,
        break_count=payload.break_count,
    )
    if session is None:
        logger.warning(f"Active study session not found: session_id={session_id}, user_id={current_user.id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Active study session not found",
        )
    return StudySessionPublic.model_validate(session)
