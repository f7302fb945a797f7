import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.dependencies.models import Dependant
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session
from starlette.routing import Match

from app.auth.db import create_account, get_account_by_email, get_account_by_id
from app.auth.schemas import LoginRequest, RegisterRequest, TokenResponse
from app.auth.security import PasswordHasher, TokenError, TokenService
from app.core.database import get_db
from app.core.dependency import get_token_service
from app.core.errors import UnauthenticatedError, ValidationError

logger = logging.getLogger(__name__)
bearer = HTTPBearer(auto_error=False)

INVALID_CREDENTIALS = "Invalid credentials."


def _require_credentials(email: Optional[str], password: Optional[str]) -> None:
    if not email or not password:
        raise ValidationError("Email and password are required.")


def handle_register(
    req: RegisterRequest, db: Session, hasher: PasswordHasher, tokens: TokenService
) -> TokenResponse:
    """
    Registers an email/password account and logs it in.

    Args:
        req (RegisterRequest): Email and password.
        db (Session): DB session.
        hasher (PasswordHasher): Hashing capability handed to the credential store.
        tokens (TokenService): Token issuer.

    Returns:
        TokenResponse: Bearer token for the new account.
    """
    _require_credentials(req.email, req.password)
    user = create_account(db, hasher, req.email, req.password)
    logger.info("Registered account %s", user.id)
    return TokenResponse(token=tokens.issue(user.id))


def handle_login(
    req: LoginRequest, db: Session, hasher: PasswordHasher, tokens: TokenService
) -> TokenResponse:
    """
    Handles login via email and password.

    An unknown email and a wrong password fail identically.
    """
    _require_credentials(req.email, req.password)
    user = get_account_by_email(db, req.email, include_password=True)
    if user is None or not hasher.verify(req.password, user.password):
        logger.info("Rejected login attempt")
        raise UnauthenticatedError(INVALID_CREDENTIALS)

    logger.info("Login for account %s", user.id)
    return TokenResponse(token=tokens.issue(user.id))


def _protected(dependant: Dependant) -> bool:
    return any(
        dep.call is get_current_user_id or _protected(dep) for dep in dependant.dependencies
    )


def _authenticate(token: Optional[str], db: Session, tokens: TokenService) -> UUID:
    if not token:
        raise UnauthenticatedError("Not authorized, no token")

    try:
        account_id = tokens.verify(token)
    except TokenError as e:
        logger.warning("Token rejected (%s): %s", type(e).__name__, e)
        raise UnauthenticatedError("Not authorized, token failed")

    if get_account_by_id(db, account_id) is None:
        logger.warning("Token rejected: account %s no longer exists", account_id)
        raise UnauthenticatedError("Not authorized, token failed")
    return account_id


def get_current_user_id(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> UUID:
    """
    Access-control gate for protected routes.

    Extracts the bearer token, verifies it and confirms the account still
    exists. The client only ever sees a generic message; the precise reason
    is logged.

    Returns:
        UUID: Authenticated account id, also stored on ``request.state``.

    Raises:
        UnauthenticatedError: On any missing, invalid or stale credential.
    """
    account_id = _authenticate(creds.credentials if creds else None, db, tokens)
    request.state.user_id = account_id
    return account_id


def guard_unparsed_request(request: Request) -> None:
    """
    Runs the access-control gate for a request whose body never parsed.

    FastAPI decodes the body before resolving dependencies, so a protected
    route with a broken JSON body would otherwise answer 400 to a caller
    without credentials.
    """
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            break
    else:
        return
    dependant = getattr(route, "dependant", None)
    if dependant is None or not _protected(dependant):
        return

    scheme, token = get_authorization_scheme_param(request.headers.get("Authorization"))
    if scheme.lower() != "bearer":
        token = None
    db: Session = request.app.state.session_factory()
    try:
        _authenticate(token, db, request.app.state.token_service)
    finally:
        db.close()
