from typing import List
from uuid import UUID

from app.core.repository import OwnedRepository
from app.progress.models import ProgressLog


class ProgressRepository(OwnedRepository[ProgressLog]):
    """Progress entries of a single account."""

    model = ProgressLog

    def for_goal(self, goal_id: UUID) -> List[ProgressLog]:
        """
        Lists the entries logged against one goal.

        Args:
            goal_id (UUID): ID of the goal.

        Returns:
            List[ProgressLog]: Newest entry date first; ties broken by creation time, then id.
        """
        return (
            self.filter_by(goal_id=goal_id)
            .order_by(ProgressLog.date.desc(), ProgressLog.created_at.desc(), ProgressLog.id.desc())
            .all()
        )

    def delete_for_goal(self, goal_id: UUID) -> int:
        return self.filter_by(goal_id=goal_id).delete(synchronize_session=False)
