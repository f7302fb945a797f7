from typing import Optional
from uuid import UUID
import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Security, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.service import get_current_user_id
from app.core.database import get_db
from app.core.errors import InternalError
from app.goals.routes import goal_id_param
from app.progress.schemas import (
    ProgressCreate,
    ProgressEnvelope,
    ProgressListResponse,
    ProgressResponse,
)
from app.progress.service import list_progress, log_progress

router = APIRouter(prefix="/goals", tags=["Progress"])
logger = logging.getLogger(__name__)


@router.post(
    "/{goal_id}/progress",
    response_model=ProgressEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Log progress for a goal",
    description="Record a dated progress entry against a goal owned by the authenticated user.",
    responses={
        201: {"description": "Progress logged successfully."},
        400: {"description": "Invalid goal ID or validation error."},
        401: {"description": "Unauthorized."},
        404: {"description": "Target goal not found."},
        500: {"description": "Failed to log progress."},
    },
)
def log_progress_route(
    entry: Optional[ProgressCreate] = Body(default=None),
    user_id: UUID = Security(get_current_user_id),
    goal_id: UUID = Depends(goal_id_param),
    db: Session = Depends(get_db),
) -> ProgressEnvelope:
    try:
        log = log_progress(db, goal_id, entry or ProgressCreate(), user_id)
    except HTTPException:
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to log progress on goal {goal_id} for user {user_id}")
        raise InternalError("Failed to log progress")
    return ProgressEnvelope(progress=ProgressResponse.model_validate(log))


@router.get(
    "/{goal_id}/progress",
    response_model=ProgressListResponse,
    summary="Get progress for a goal",
    description="List progress entries of a goal, newest entry date first.",
    responses={
        200: {"description": "Progress entries retrieved successfully."},
        400: {"description": "Invalid goal ID."},
        401: {"description": "Unauthorized."},
        404: {"description": "Target goal not found."},
        500: {"description": "Failed to retrieve progress."},
    },
)
def list_progress_route(
    user_id: UUID = Security(get_current_user_id),
    goal_id: UUID = Depends(goal_id_param),
    db: Session = Depends(get_db),
) -> ProgressListResponse:
    try:
        logs = list_progress(db, goal_id, user_id)
    except HTTPException:
        raise
    except SQLAlchemyError:
        logger.exception(f"Failed to fetch progress of goal {goal_id} for user {user_id}")
        raise InternalError("Failed to retrieve progress")
    return ProgressListResponse(progress_logs=[ProgressResponse.model_validate(p) for p in logs])
