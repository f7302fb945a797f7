from uuid import UUID
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, Security, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.service import get_current_user_id
from app.core.database import get_db
from app.core.errors import InternalError
from app.goals.schemas import GoalCreate, GoalEnvelope, GoalListResponse, GoalResponse, GoalUpdate
from app.goals.service import (
    create_goal,
    delete_goal,
    get_goal,
    list_goals,
    parse_goal_id,
    update_goal,
)

router = APIRouter(prefix="/goals", tags=["Goals"])
logger = logging.getLogger(__name__)


def goal_id_param(goal_id: str) -> UUID:
    return parse_goal_id(goal_id)


@router.post(
    "",
    response_model=GoalEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new goal",
    description="Create a new goal for the authenticated user.",
    responses={
        201: {"description": "Goal created successfully."},
        400: {"description": "Missing title or validation error."},
        401: {"description": "Unauthorized."},
        500: {"description": "Goal creation failed."},
    },
)
def create_goal_route(
    goal: GoalCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> GoalEnvelope:
    try:
        return GoalEnvelope(goal=GoalResponse.model_validate(create_goal(db, goal, user_id)))
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to create goal for user {user_id}")
        raise InternalError("Failed to create goal")


@router.get(
    "",
    response_model=GoalListResponse,
    summary="Get all user goals",
    description="Retrieve all goals owned by the authenticated user, newest first.",
    responses={
        200: {"description": "Goals retrieved successfully."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to retrieve goals."},
    },
)
def read_user_goals_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> GoalListResponse:
    try:
        goals = list_goals(db, user_id)
    except SQLAlchemyError:
        logger.exception(f"Failed to fetch goals for user {user_id}")
        raise InternalError("Failed to retrieve goals")
    return GoalListResponse(goals=[GoalResponse.model_validate(g) for g in goals])


@router.get(
    "/{goal_id}",
    response_model=GoalEnvelope,
    summary="Get a specific goal",
    description="Retrieve a specific goal by its unique ID.",
    responses={
        200: {"description": "Goal retrieved successfully."},
        400: {"description": "Invalid goal ID."},
        401: {"description": "Unauthorized."},
        404: {"description": "Goal not found."},
    },
)
def read_goal_route(
    user_id: UUID = Security(get_current_user_id),
    goal_id: UUID = Depends(goal_id_param),
    db: Session = Depends(get_db),
) -> GoalEnvelope:
    return GoalEnvelope(goal=GoalResponse.model_validate(get_goal(db, goal_id, user_id)))


@router.put(
    "/{goal_id}",
    response_model=GoalEnvelope,
    summary="Update an existing goal",
    description="Apply a partial update to a goal; omitted fields are left unchanged.",
    responses={
        200: {"description": "Goal updated successfully."},
        400: {"description": "Invalid goal ID or validation error."},
        401: {"description": "Unauthorized."},
        404: {"description": "Goal not found."},
        500: {"description": "Failed to update goal."},
    },
)
def update_goal_route(
    goal: GoalUpdate,
    user_id: UUID = Security(get_current_user_id),
    goal_id: UUID = Depends(goal_id_param),
    db: Session = Depends(get_db),
) -> GoalEnvelope:
    try:
        return GoalEnvelope(goal=GoalResponse.model_validate(update_goal(db, goal_id, goal, user_id)))
    except HTTPException:
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to update goal {goal_id} for user {user_id}")
        raise InternalError("Failed to update goal")


@router.delete(
    "/{goal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a goal",
    description="Delete a goal and every progress entry logged against it.",
    responses={
        204: {"description": "Goal deleted successfully."},
        400: {"description": "Invalid goal ID."},
        401: {"description": "Unauthorized."},
        404: {"description": "Goal not found."},
        500: {"description": "Failed to delete goal."},
    },
)
def delete_goal_route(
    user_id: UUID = Security(get_current_user_id),
    goal_id: UUID = Depends(goal_id_param),
    db: Session = Depends(get_db),
) -> Response:
    try:
        delete_goal(db, goal_id, user_id)
    except HTTPException:
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to delete goal {goal_id} for user {user_id}")
        raise InternalError("Failed to delete goal")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
