import logging
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.database import utcnow
from app.core.errors import NotFoundError
from app.goals.db import GoalRepository
from app.progress.db import ProgressRepository
from app.progress.models import ProgressLog
from app.progress.schemas import ProgressCreate

logger = logging.getLogger(__name__)


def _require_owned_goal(db: Session, goal_id: UUID, user_id: UUID) -> None:
    if GoalRepository(db, user_id).get(goal_id) is None:
        raise NotFoundError("Target goal not found.")


def log_progress(db: Session, goal_id: UUID, entry: ProgressCreate, user_id: UUID) -> ProgressLog:
    """
    Logs a progress entry against a goal the user owns.

    Args:
        db (Session): SQLAlchemy session.
        goal_id (UUID): Target goal.
        entry (ProgressCreate): Validated input; a missing date means "now".
        user_id (UUID): ID of the owner.

    Returns:
        ProgressLog: The created entry.
    """
    _require_owned_goal(db, goal_id, user_id)
    log = ProgressRepository(db, user_id).add(
        goal_id=goal_id,
        date=entry.date or utcnow(),
        notes=entry.notes,
        value=entry.value,
    )
    db.commit()
    db.refresh(log)
    return log


def list_progress(db: Session, goal_id: UUID, user_id: UUID) -> List[ProgressLog]:
    _require_owned_goal(db, goal_id, user_id)
    return ProgressRepository(db, user_id).for_goal(goal_id)
