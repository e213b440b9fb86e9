"""Dependency injection helpers for FastAPI routes."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from userapi.core.tokens import bearer_subject, unauthorized
from userapi.db.session import get_db
from userapi.repositories.user_repository import UserRepository
from userapi.services.auth_service import AuthService
from userapi.services.user_service import UserService

logger = logging.getLogger(__name__)


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_user_service(repository: UserRepository = Depends(get_user_repository)) -> UserService:
    """UserService bound to the request-scoped DB session."""
    return UserService(repository)


def get_auth_service(user_service: UserService = Depends(get_user_service)) -> AuthService:
    return AuthService(user_service)


def current_user_login(
    user_id: str | None = Depends(bearer_subject),
    repository: UserRepository = Depends(get_user_repository),
) -> str:
    """
    Requester identity for authenticated endpoints.

    The token carries the user id; the login is looked up on every request so
    a renamed, revoked or deleted account cannot be impersonated by its old
    token. 401 when the token is missing, invalid or no longer maps to an
    active user.
    """
    if not user_id:
        raise unauthorized()
    login = repository.find_active_login_by_id(user_id)
    if login is None:
        logger.warning("Token subject %s no longer maps to an active user", user_id)
        raise unauthorized("Account is no longer active")
    return login


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
RequesterDep = Annotated[str, Depends(current_user_login)]
