"""Tagged outcomes returned by the user use cases."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    USER_NOT_FOUND = "user_not_found"
    USER_REVOKED = "user_revoked"
    ACCESS_DENIED = "access_denied"
    LOGIN_ALREADY_EXISTS = "login_already_exists"
    INVALID_AGE = "invalid_age"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str


Outcome = Union[Success[T], Failure]


def not_found(login: str) -> Failure:
    return Failure(ErrorKind.USER_NOT_FOUND, f"User '{login}' does not exist")


def revoked(login: str) -> Failure:
    return Failure(ErrorKind.USER_REVOKED, f"User '{login}' is revoked")


def access_denied(requester: str | None, target: str | None = None) -> Failure:
    if target:
        return Failure(
            ErrorKind.ACCESS_DENIED,
            f"User '{requester}' does not have permission to access/modify user '{target}'",
        )
    return Failure(ErrorKind.ACCESS_DENIED, "Access is denied")


def login_exists(login: str) -> Failure:
    return Failure(ErrorKind.LOGIN_ALREADY_EXISTS, f"Login '{login}' already exists")
