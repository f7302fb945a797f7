from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, field_validator

PASSWORD_MIN_LENGTH = 8


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class RegisterRequest(BaseSchema):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseSchema):
    email: Optional[str] = None
    password: Optional[str] = None


class AccountCreate(BaseSchema):
    """Field rules applied by the credential store before anything is persisted."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        value = value.strip().lower()
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise ValueError("Please provide a valid email address")
        return value

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
        return value


class TokenResponse(BaseModel):
    token: str
