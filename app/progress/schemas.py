from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.database import as_utc

NOTES_MAX_LENGTH = 500


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)


class ProgressCreate(BaseSchema):
    date: Optional[datetime] = None  # defaults to submission time
    notes: Optional[str] = None
    value: Optional[float] = Field(default=None, allow_inf_nan=False)

    @field_validator("date")
    @classmethod
    def check_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    @field_validator("notes")
    @classmethod
    def check_notes(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if len(value) > NOTES_MAX_LENGTH:
            raise ValueError(f"Progress notes cannot exceed {NOTES_MAX_LENGTH} characters")
        return value


class ProgressResponse(BaseSchema):
    id: UUID
    user_id: UUID
    goal_id: UUID
    date: datetime
    notes: Optional[str] = None
    value: Optional[float] = None
    created_at: datetime
    updated_at: datetime


class ProgressEnvelope(BaseModel):
    progress: ProgressResponse


class ProgressListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    progress_logs: List[ProgressResponse] = Field(alias="progressLogs")
