"""
User account use cases: authorization and state transitions.

Every public method resolves to ``Success`` or a named ``Failure``. Storage
errors other than a login collision propagate to the caller.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping

from userapi.db.models import User
from userapi.domain.users import Gender
from userapi.repositories.user_repository import LoginTakenError, UserRepository
from userapi.services.results import (
    ErrorKind,
    Failure,
    Outcome,
    Success,
    access_denied,
    login_exists,
    not_found,
    revoked,
)

logger = logging.getLogger(__name__)


class UserService:
    """Decides who may view or mutate a user record and applies the change."""

    def __init__(self, repository: UserRepository) -> None:
        self.repository = repository

    # -------------------------------------- helpers --------------------------------------
    def authorize(
        self,
        target_login: str,
        requester_login: str | None,
        *,
        admin_only: bool,
        allow_self: bool,
        require_active: bool,
    ) -> Outcome[User]:
        target = self.repository.find_by_login(target_login)
        if target is None:
            return not_found(target_login)
        if require_active and not target.is_active:
            return revoked(target_login)
        is_admin = bool(requester_login) and self.repository.is_admin(requester_login)
        is_self = target_login == requester_login
        if admin_only:
            permitted = is_admin
        else:
            permitted = is_admin or (allow_self and is_self)
        if not permitted:
            logger.warning("Access denied: %s -> %s", requester_login, target_login)
            return access_denied(requester_login, target_login)
        return Success(target)

    def _require_admin(self, requester_login: str | None) -> Failure | None:
        if requester_login and self.repository.is_admin(requester_login):
            return None
        logger.warning("Admin-only operation denied for %s", requester_login)
        return access_denied(requester_login)

    def _update(self, login: str, changes: Mapping[str, Any], modified_by: str) -> Outcome[User]:
        check = self.authorize(login, modified_by, admin_only=False, allow_self=True, require_active=True)
        if isinstance(check, Failure):
            return check
        user = self.repository.update(login, changes, modified_by)
        if user is None:
            # revoked (or removed) between the check and the write
            return revoked(login)
        return Success(user)

    # -------------------------------------- create --------------------------------------
    def create_user(
        self,
        login: str,
        password: str,
        name: str,
        gender: Gender = Gender.UNSPECIFIED,
        birthday: date | None = None,
        is_admin: bool = False,
        created_by: str | None = None,
    ) -> Outcome[User]:
        """Create an account; ``created_by=None`` means self-registration."""
        if not self.repository.is_login_available(login):
            return login_exists(login)
        if is_admin and not (created_by and self.repository.is_admin(created_by)):
            is_admin = False
        try:
            user = self.repository.create(
                login,
                password,
                name,
                gender=gender,
                birthday=birthday,
                is_admin=is_admin,
                created_by=created_by,
            )
        except LoginTakenError:
            return login_exists(login)
        logger.info("Created user %s (admin=%s) by %s", login, user.is_admin, created_by or "self-registration")
        return Success(user)

    # -------------------------------------- updates --------------------------------------
    def update_name(self, login: str, new_name: str, modified_by: str) -> Outcome[User]:
        return self._update(login, {"name": new_name}, modified_by)

    def update_gender(self, login: str, new_gender: Gender, modified_by: str) -> Outcome[User]:
        return self._update(login, {"gender": new_gender}, modified_by)

    def update_birthday(self, login: str, new_birthday: date | None, modified_by: str) -> Outcome[User]:
        return self._update(login, {"birthday": new_birthday}, modified_by)

    def update_password(self, login: str, new_password: str, modified_by: str) -> Outcome[User]:
        return self._update(login, {"password": new_password}, modified_by)

    def update_login(self, login: str, new_login: str, modified_by: str) -> Outcome[User]:
        check = self.authorize(login, modified_by, admin_only=False, allow_self=True, require_active=True)
        if isinstance(check, Failure):
            return check
        if not self.repository.is_login_available(new_login):
            return login_exists(new_login)
        try:
            user = self.repository.update(login, {"login": new_login}, modified_by)
        except LoginTakenError:
            return login_exists(new_login)
        if user is None:
            return revoked(login)
        logger.info("Login changed %s -> %s by %s", login, new_login, modified_by)
        return Success(user)

    # -------------------------------------- reads --------------------------------------
    def get_user(self, login: str, requested_by: str) -> Outcome[User]:
        """Admin view of any record, revoked ones included."""
        return self.authorize(login, requested_by, admin_only=True, allow_self=False, require_active=False)

    def get_by_credentials(self, login: str, password: str, requested_by: str | None) -> Outcome[User]:
        target = self.repository.find_by_login(login)
        if target is None:
            return not_found(login)
        if not target.is_active:
            return revoked(login)
        if login != requested_by:
            logger.warning("Credential lookup for %s requested by %s", login, requested_by)
            return access_denied(requested_by, login)
        user = self.repository.find_by_credentials(login, password)
        if user is None:
            return Failure(ErrorKind.USER_NOT_FOUND, "Invalid login or password")
        return Success(user)

    def list_active_users(self, requested_by: str) -> Outcome[list[User]]:
        denied = self._require_admin(requested_by)
        if denied:
            return denied
        return Success(self.repository.list_active_sorted_by_creation())

    def list_older_than(self, age: int, requested_by: str) -> Outcome[list[User]]:
        denied = self._require_admin(requested_by)
        if denied:
            return denied
        if age < 0:
            return Failure(ErrorKind.INVALID_AGE, f"Age must be non-negative, got {age}")
        return Success(self.repository.list_older_than(age))

    # -------------------------------------- delete / restore --------------------------------------
    def delete_user(self, login: str, soft: bool, revoked_by: str) -> Outcome[User]:
        """Returns the user as it was before deletion."""
        check = self.authorize(login, revoked_by, admin_only=True, allow_self=False, require_active=False)
        if isinstance(check, Failure):
            return check
        user = check.value
        if soft and not user.is_active:
            return revoked(login)
        if not self.repository.delete(login, soft, revoked_by):
            return revoked(login) if soft else not_found(login)
        logger.info("%s deleted user %s by %s", "Soft" if soft else "Hard", login, revoked_by)
        return Success(user)

    def restore_user(self, login: str, modified_by: str) -> Outcome[User]:
        check = self.authorize(login, modified_by, admin_only=True, allow_self=False, require_active=False)
        if isinstance(check, Failure):
            return check
        user = self.repository.restore(login, modified_by)
        if user is None:
            return Failure(ErrorKind.USER_NOT_FOUND, f"User '{login}' does not exist or has not been revoked")
        logger.info("Restored user %s by %s", login, modified_by)
        return Success(user)
