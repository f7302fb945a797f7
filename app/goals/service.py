import logging
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError
from app.goals.db import GoalRepository
from app.goals.models import Goal
from app.goals.schemas import GoalCreate, GoalUpdate
from app.progress.db import ProgressRepository

logger = logging.getLogger(__name__)


def parse_goal_id(raw_id: str) -> UUID:
    """Rejects malformed ids up front so they never reach a query."""
    try:
        return UUID(raw_id)
    except (TypeError, ValueError):
        raise ValidationError("Invalid Goal ID format.")


def create_goal(db: Session, goal: GoalCreate, user_id: UUID) -> Goal:
    """
    Creates a new goal owned by the user.

    Args:
        db (Session): SQLAlchemy session.
        goal (GoalCreate): Validated input.
        user_id (UUID): ID of the owner.

    Returns:
        Goal: The created goal.
    """
    new_goal = GoalRepository(db, user_id).add(
        title=goal.title,
        description=goal.description,
        status=goal.status,
        target_date=goal.target_date,
    )
    db.commit()
    db.refresh(new_goal)
    logger.info("Created goal %s for user %s", new_goal.id, user_id)
    return new_goal


def list_goals(db: Session, user_id: UUID) -> List[Goal]:
    return GoalRepository(db, user_id).list_newest_first()


def get_goal(db: Session, goal_id: UUID, user_id: UUID) -> Goal:
    goal = GoalRepository(db, user_id).get(goal_id)
    if goal is None:
        raise NotFoundError("Goal not found.")
    return goal


def update_goal(db: Session, goal_id: UUID, changes: GoalUpdate, user_id: UUID) -> Goal:
    """
    Applies a partial update; fields absent from the request keep their values.

    Raises:
        ValidationError: Nothing to update.
        NotFoundError: No goal with this id is owned by the user.
    """
    update_data = changes.model_dump(exclude_unset=True)
    if not update_data:
        raise ValidationError("No update fields provided.")

    goal = GoalRepository(db, user_id).update(goal_id, update_data)
    if goal is None:
        raise NotFoundError("Goal not found.")
    db.commit()
    db.refresh(goal)
    return goal


def delete_goal(db: Session, goal_id: UUID, user_id: UUID) -> int:
    """
    Deletes a goal together with its progress entries in one transaction.

    Returns:
        int: Number of progress entries removed with the goal.
    """
    goals = GoalRepository(db, user_id)
    if goals.get(goal_id) is None:
        raise NotFoundError("Goal not found.")

    removed = ProgressRepository(db, user_id).delete_for_goal(goal_id)
    goals.delete(goal_id)
    db.commit()
    logger.info("Deleted goal %s for user %s (%d progress entries)", goal_id, user_id, removed)
    return removed
