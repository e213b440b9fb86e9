"""Request and response payloads for the HTTP layer."""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from userapi.domain.users import Gender, is_strong_password

LOGIN_REGEX = r"^[A-Za-z0-9]+$"
PASSWORD_REGEX = r"^[A-Za-z0-9]+$"
NAME_REGEX = r"^[A-Za-zА-Яа-яЁё]+$"


# ---------------------------------------- requests ----------------------------------------
class CreateUserRequest(BaseModel):
    login: str = Field(min_length=1, max_length=50, pattern=LOGIN_REGEX, description="Latin letters and digits only.")
    password: str = Field(min_length=6, max_length=100, pattern=PASSWORD_REGEX)
    name: str = Field(min_length=1, max_length=100, pattern=NAME_REGEX, description="Latin or Cyrillic letters.")
    gender: Gender = Gender.UNSPECIFIED
    birthday: Optional[date] = None
    is_admin: bool = Field(default=False, description="Honoured only when the creator is an active admin.")


class RegisterRequest(BaseModel):
    login: str = Field(min_length=1, max_length=50, pattern=LOGIN_REGEX)
    password: str = Field(min_length=6, max_length=100, pattern=PASSWORD_REGEX)
    name: str = Field(min_length=1, max_length=100, pattern=NAME_REGEX)
    gender: Gender = Gender.UNSPECIFIED
    birthday: Optional[date] = None


class LoginRequest(BaseModel):
    login: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1, max_length=100)


class UpdateNameRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100, pattern=NAME_REGEX)


class UpdateGenderRequest(BaseModel):
    gender: Gender


class UpdateBirthdayRequest(BaseModel):
    birthday: Optional[date] = None

    @field_validator("birthday")
    @classmethod
    def _not_in_future(cls, value: Optional[date]) -> Optional[date]:
        if value is not None and value > date.today():
            raise ValueError("birthday cannot be in the future")
        return value


class UpdatePasswordRequest(BaseModel):
    new_password: str = Field(min_length=8, max_length=100)

    @field_validator("new_password")
    @classmethod
    def _strong(cls, value: str) -> str:
        if not is_strong_password(value):
            raise ValueError(
                "Password must contain at least one lowercase letter, one uppercase letter, "
                "one number and one special character (@$!%*?&)"
            )
        return value


class UpdateLoginRequest(BaseModel):
    new_login: str = Field(min_length=1, max_length=50, pattern=LOGIN_REGEX)


# ---------------------------------------- responses ----------------------------------------
class UserSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    login: str
    name: str
    gender: Gender
    birthday: Optional[date] = None
    is_admin: bool
    created_on: datetime


class UserDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    gender: Gender
    birthday: Optional[date] = None
    is_active: bool


class AuthenticatedUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    login: str
    name: str
    gender: Gender
    birthday: Optional[date] = None
    is_admin: bool


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
