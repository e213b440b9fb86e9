"""High-level data access helpers for user accounts backed by SQLAlchemy."""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from userapi.core.security import hash_password, needs_rehash, verify_password
from userapi.db.models import User
from userapi.domain.users import Gender, birthday_cutoff

logger = logging.getLogger(__name__)

# columns callers may change through update(); stamps and identity are managed here
UPDATABLE_FIELDS = frozenset({"login", "password", "name", "gender", "birthday"})


class UserStoreError(Exception):
    """Base class for storage-level user errors."""


class LoginTakenError(UserStoreError):
    """Raised when the unique constraint on login rejects a write."""

    def __init__(self, login: str):
        super().__init__(f"Login '{login}' is already taken")
        self.login = login


def _is_login_conflict(exc: IntegrityError) -> bool:
    detail = str(exc.orig).lower()
    return "unique" in detail or "duplicate" in detail


class UserRepository:
    """CRUD helpers wrapping a request-scoped SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    # -------------------------- writes --------------------------
    def create(
        self,
        login: str,
        password: str,
        name: str,
        gender: Gender = Gender.UNSPECIFIED,
        birthday: date | None = None,
        is_admin: bool = False,
        created_by: str | None = None,
    ) -> User:
        user = User(
            login=login,
            password_hash=hash_password(password),
            name=name,
            gender=gender,
            birthday=birthday,
            is_admin=bool(is_admin),
            created_on=self._now(),
            created_by=created_by,
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if not _is_login_conflict(exc):
                raise
            logger.info("Insert rejected, login %s already taken", login)
            raise LoginTakenError(login) from exc
        self.session.refresh(user)
        return user

    def update(self, login: str, changes: Mapping[str, Any], modified_by: str) -> Optional[User]:
        """
        Apply ``changes`` to an active user in one conditional statement.

        Returns None when the user is absent or revoked. A ``password`` entry is
        hashed before it is written.
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported user fields: {sorted(unknown)}")
        values = dict(changes)
        if "password" in values:
            values["password_hash"] = hash_password(values.pop("password"))
        values["modified_on"] = self._now()
        values["modified_by"] = modified_by
        stmt = (
            update(User)
            .where(User.login == login, User.revoked_on.is_(None))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if not _is_login_conflict(exc):
                raise
            raise LoginTakenError(values.get("login", login)) from exc
        if result.rowcount == 0:
            return None
        return self.find_by_login(values.get("login", login))

    def delete(self, login: str, soft: bool, revoked_by: str) -> bool:
        """Soft delete stamps revoked fields on an active user; hard delete removes the row."""
        if soft:
            now = self._now()
            stmt = (
                update(User)
                .where(User.login == login, User.revoked_on.is_(None))
                .values(revoked_on=now, revoked_by=revoked_by, modified_on=now, modified_by=revoked_by)
                .execution_options(synchronize_session=False)
            )
        else:
            stmt = delete(User).where(User.login == login).execution_options(synchronize_session=False)
        result = self.session.execute(stmt)
        self.session.commit()
        return result.rowcount > 0

    def restore(self, login: str, modified_by: str) -> Optional[User]:
        stmt = (
            update(User)
            .where(User.login == login, User.revoked_on.is_not(None))
            .values(revoked_on=None, revoked_by=None, modified_on=self._now(), modified_by=modified_by)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        self.session.commit()
        if result.rowcount == 0:
            return None
        return self.find_by_login(login)

    # -------------------------- reads --------------------------
    def _select(self):
        # bulk UPDATE bypasses the identity map; always take fresh column values
        return select(User).execution_options(populate_existing=True)

    def find_by_login(self, login: str) -> Optional[User]:
        stmt = self._select().where(User.login == login)
        return self.session.execute(stmt).scalar_one_or_none()

    def find_by_credentials(self, login: str, password: str) -> Optional[User]:
        stmt = self._select().where(User.login == login, User.revoked_on.is_(None))
        user = self.session.execute(stmt).scalar_one_or_none()
        if not user or not verify_password(password, user.password_hash):
            return None
        if needs_rehash(user.password_hash):
            user.password_hash = hash_password(password)
            self.session.commit()
        return user

    def find_active_login_by_id(self, user_id: str) -> Optional[str]:
        """Current login of an active user; None when the id is unknown or revoked."""
        stmt = select(User.login).where(User.id == user_id, User.revoked_on.is_(None))
        return self.session.execute(stmt).scalar_one_or_none()

    def is_login_available(self, login: str) -> bool:
        stmt = select(User.id).where(User.login == login).limit(1)
        return self.session.execute(stmt).first() is None

    def is_admin(self, login: str) -> bool:
        """True only for an existing, active administrator."""
        stmt = select(User.is_admin).where(User.login == login, User.revoked_on.is_(None))
        return bool(self.session.execute(stmt).scalar_one_or_none())

    def is_active(self, login: str) -> bool:
        stmt = select(User.id).where(User.login == login, User.revoked_on.is_(None)).limit(1)
        return self.session.execute(stmt).first() is not None

    def list_active_sorted_by_creation(self) -> list[User]:
        stmt = self._select().where(User.revoked_on.is_(None)).order_by(User.created_on.asc(), User.login.asc())
        return list(self.session.execute(stmt).scalars().all())

    def list_older_than(self, age: int, today: date | None = None) -> list[User]:
        cutoff = birthday_cutoff(age, today)
        if cutoff is None:
            return []
        stmt = (
            self._select()
            .where(User.revoked_on.is_(None), User.birthday.is_not(None), User.birthday <= cutoff)
            .order_by(User.birthday.asc(), User.login.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

