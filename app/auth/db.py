import logging
from typing import Optional
from uuid import UUID

from pydantic import ValidationError as SchemaError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, load_only

from app.auth.models import User
from app.auth.schemas import AccountCreate
from app.auth.security import PasswordHasher
from app.core.errors import ConflictError, ValidationError, validation_message

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def get_account_by_email(db: Session, email: str, include_password: bool = False) -> Optional[User]:
    """
    Looks up an account by email (case-insensitive).

    Args:
        db (Session): SQLAlchemy session.
        email (str): Email as supplied by the client.
        include_password (bool): Load the password hash as well.

    Returns:
        Optional[User]: The account, or None.
    """
    query = db.query(User).filter(User.email == normalize_email(email))
    if not include_password:
        query = query.options(load_only(User.id, User.email, User.created_at, User.updated_at))
    return query.first()


def get_account_by_id(db: Session, account_id: UUID) -> Optional[User]:
    return db.query(User).options(load_only(User.id)).filter(User.id == account_id).first()


def create_account(db: Session, hasher: PasswordHasher, email: str, password: str) -> User:
    """
    Persists a new account, hashing the password first.

    Raises:
        ValidationError: Email syntax or password length is invalid.
        ConflictError: An account with this email already exists.
    """
    try:
        fields = AccountCreate(email=email, password=password)
    except SchemaError as e:
        raise ValidationError(validation_message(e.errors()))

    if get_account_by_email(db, fields.email) is not None:
        raise ConflictError("Email already in use.")

    user = User(email=fields.email, password=hasher.hash(fields.password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration for the same email.
        db.rollback()
        raise ConflictError("Email already in use.")
    db.refresh(user)
    logger.info("Created account %s", user.id)
    return user
