from fastapi import APIRouter

from studyplanner.api.routes import (
    auth,
    planning,
    study_sessions,
)


api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(planning.router, prefix="/planning", tags=["planning"])
api_router.include_router(study_sessions.router, prefix="/study-sessions", tags=["study-sessions"])
