"""
Authentication use case: credential login followed by token issuance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from userapi.core.tokens import issue_token
from userapi.services.results import Failure, Outcome, Success
from userapi.services.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass
class AccessToken:
    access_token: str
    login: str
    is_admin: bool
    token_type: str = "bearer"


@dataclass
class AuthService:
    """Exchanges login/password for a bearer token."""

    user_service: UserService

    def authenticate(self, login: str, password: str) -> Outcome[AccessToken]:
        raw_login = (login or "").strip()
        # a login request speaks for itself: requester == target
        result = self.user_service.get_by_credentials(raw_login, password or "", requested_by=raw_login)
        if isinstance(result, Failure):
            logger.warning("Failed login for %s: %s", raw_login, result.kind.value)
            return result
        user = result.value
        token = issue_token(user.id, user.is_admin)
        return Success(AccessToken(access_token=token, login=user.login, is_admin=user.is_admin))
