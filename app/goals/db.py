from typing import List

from app.core.repository import OwnedRepository
from app.goals.models import Goal


class GoalRepository(OwnedRepository[Goal]):
    """Goals of a single account."""

    model = Goal

    def list_newest_first(self) -> List[Goal]:
        return self.list(Goal.created_at.desc(), Goal.id.desc())
