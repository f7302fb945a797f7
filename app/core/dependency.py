# app/core/dependency.py
from fastapi import Request

from app.auth.security import PasswordHasher, TokenService


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher
