"""SQLAlchemy models for persisted user accounts."""
from __future__ import annotations

import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    String,
    Text,
    func,
)

from userapi.domain.users import Gender

from .session import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        # revoked_on and revoked_by are set together or not at all
        CheckConstraint(
            "(revoked_on IS NULL AND revoked_by IS NULL) OR (revoked_on IS NOT NULL AND revoked_by IS NOT NULL)",
            name="ck_users_revoked_pair",
        ),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    login = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(Text, nullable=False)
    name = Column(String(100), nullable=False)
    gender = Column(Enum(Gender, name="gender"), nullable=False, default=Gender.UNSPECIFIED)
    birthday = Column(Date, nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_on = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    created_by = Column(String(50), nullable=True)
    modified_on = Column(DateTime(timezone=True), nullable=True)
    modified_by = Column(String(50), nullable=True)
    revoked_on = Column(DateTime(timezone=True), nullable=True)
    revoked_by = Column(String(50), nullable=True)

    @property
    def is_active(self) -> bool:
        return self.revoked_on is None

    def __repr__(self) -> str:
        return f"<User login={self.login!r} admin={self.is_admin} active={self.is_active}>"
