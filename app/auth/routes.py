import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.schemas import LoginRequest, RegisterRequest, TokenResponse
from app.auth.security import PasswordHasher, TokenService
from app.auth.service import handle_login, handle_register
from app.core.database import get_db
from app.core.dependency import get_password_hasher, get_token_service
from app.core.errors import InternalError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    responses={
        201: {"description": "Account created, token issued"},
        400: {"description": "Missing fields or validation error"},
        409: {"description": "Email already in use"},
        500: {"description": "Registration failed"},
    },
)
def register_route(
    user: RegisterRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> TokenResponse:
    try:
        return handle_register(user, db, hasher, tokens)
    except HTTPException:
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Registration failed")
        raise InternalError("Registration failed")


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login and receive a bearer token",
    responses={
        200: {"description": "Login successful"},
        400: {"description": "Missing fields"},
        401: {"description": "Invalid credentials"},
        500: {"description": "Server error"},
    },
)
def login_route(
    user: LoginRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> TokenResponse:
    try:
        return handle_login(user, db, hasher, tokens)
    except HTTPException:
        raise
    except SQLAlchemyError:
        logger.exception("Login failed")
        raise InternalError("Login failed")
