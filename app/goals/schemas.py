from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.database import as_utc

GOAL_STATUSES = ("active", "completed")
TITLE_MAX_LENGTH = 150
DESCRIPTION_MAX_LENGTH = 500


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)


class GoalFields(BaseSchema):
    description: Optional[str] = None
    status: Optional[str] = None
    target_date: Optional[datetime] = None

    @field_validator("description")
    @classmethod
    def check_description(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if len(value) > DESCRIPTION_MAX_LENGTH:
            raise ValueError(f"Goal description cannot exceed {DESCRIPTION_MAX_LENGTH} characters")
        return value

    @field_validator("target_date")
    @classmethod
    def check_target_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    @field_validator("status")
    @classmethod
    def check_status(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("Goal status is required.")
        if value not in GOAL_STATUSES:
            raise ValueError(f"{value} is not a supported goal status. Please use 'active' or 'completed'.")
        return value


def _check_title_length(title: str) -> str:
    if len(title) > TITLE_MAX_LENGTH:
        raise ValueError(f"Goal title cannot exceed {TITLE_MAX_LENGTH} characters")
    return title


class GoalCreate(GoalFields):
    title: Optional[str] = Field(default=None, validate_default=True)
    status: str = "active"

    @field_validator("title")
    @classmethod
    def check_title(cls, value: Optional[str]) -> str:
        if not value:
            raise ValueError("Goal title is required.")
        value = value.strip()
        if not value:
            raise ValueError("Goal title cannot be empty.")
        return _check_title_length(value)


class GoalUpdate(GoalFields):
    """Partial update: only fields present in the request body are applied."""

    title: Optional[str] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, value: Optional[str]) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("Goal title cannot be empty.")
        return _check_title_length(value)


class GoalResponse(BaseSchema):
    id: UUID
    user_id: UUID
    title: str
    description: Optional[str] = None
    status: str
    target_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class GoalEnvelope(BaseModel):
    goal: GoalResponse


class GoalListResponse(BaseModel):
    goals: List[GoalResponse]
