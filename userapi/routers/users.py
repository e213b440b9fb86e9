from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from userapi.core.dependencies import RequesterDep, UserServiceDep
from userapi.schemas import (
    AuthenticatedUserResponse,
    CreateUserRequest,
    LoginRequest,
    RegisterRequest,
    UpdateBirthdayRequest,
    UpdateGenderRequest,
    UpdateLoginRequest,
    UpdateNameRequest,
    UpdatePasswordRequest,
    UserDetailResponse,
    UserSummaryResponse,
)
from userapi.services.results import ErrorKind, Failure, Outcome

router = APIRouter(prefix="/api/users", tags=["users"])

FAILURE_STATUS = {
    ErrorKind.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.USER_REVOKED: status.HTTP_403_FORBIDDEN,
    ErrorKind.ACCESS_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.LOGIN_ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_AGE: status.HTTP_400_BAD_REQUEST,
}


def unwrap(result: Outcome):
    """Return the success value or raise the HTTP error mapped from the failure kind."""
    if isinstance(result, Failure):
        raise HTTPException(
            status_code=FAILURE_STATUS[result.kind],
            detail={"error": result.kind.value, "message": result.message},
        )
    return result.value


# ---------------------------------------- create ----------------------------------------
@router.post("/register", response_model=UserSummaryResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, service: UserServiceDep):
    """Self-registration; never grants admin rights."""
    return unwrap(
        service.create_user(
            payload.login,
            payload.password,
            payload.name,
            gender=payload.gender,
            birthday=payload.birthday,
            is_admin=False,
            created_by=None,
        )
    )


@router.post("", response_model=UserSummaryResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: CreateUserRequest, service: UserServiceDep, requester: RequesterDep):
    return unwrap(
        service.create_user(
            payload.login,
            payload.password,
            payload.name,
            gender=payload.gender,
            birthday=payload.birthday,
            is_admin=payload.is_admin,
            created_by=requester,
        )
    )


# ---------------------------------------- updates ----------------------------------------
@router.patch("/{login}/name", response_model=AuthenticatedUserResponse)
def update_name(login: str, payload: UpdateNameRequest, service: UserServiceDep, requester: RequesterDep):
    return unwrap(service.update_name(login, payload.name, requester))


@router.patch("/{login}/gender", response_model=AuthenticatedUserResponse)
def update_gender(login: str, payload: UpdateGenderRequest, service: UserServiceDep, requester: RequesterDep):
    return unwrap(service.update_gender(login, payload.gender, requester))


@router.patch("/{login}/birthday", response_model=AuthenticatedUserResponse)
def update_birthday(login: str, payload: UpdateBirthdayRequest, service: UserServiceDep, requester: RequesterDep):
    return unwrap(service.update_birthday(login, payload.birthday, requester))


@router.patch("/{login}/password", response_model=AuthenticatedUserResponse)
def update_password(login: str, payload: UpdatePasswordRequest, service: UserServiceDep, requester: RequesterDep):
    return unwrap(service.update_password(login, payload.new_password, requester))


@router.patch("/{login}/login", response_model=AuthenticatedUserResponse)
def update_login(login: str, payload: UpdateLoginRequest, service: UserServiceDep, requester: RequesterDep):
    return unwrap(service.update_login(login, payload.new_login, requester))


# ---------------------------------------- reads ----------------------------------------
@router.get("", response_model=list[UserSummaryResponse])
def list_active(service: UserServiceDep, requester: RequesterDep):
    return unwrap(service.list_active_users(requester))


@router.get("/older-than/{age}", response_model=list[UserSummaryResponse])
def list_older_than(age: int, service: UserServiceDep, requester: RequesterDep):
    return unwrap(service.list_older_than(age, requester))


@router.post("/me", response_model=AuthenticatedUserResponse)
def get_me(payload: LoginRequest, service: UserServiceDep, requester: RequesterDep):
    """Re-check own credentials and return the caller's profile."""
    return unwrap(service.get_by_credentials(payload.login, payload.password, requester))


@router.get("/{login}", response_model=UserDetailResponse)
def get_user(login: str, service: UserServiceDep, requester: RequesterDep):
    return unwrap(service.get_user(login, requester))


# ---------------------------------------- delete / restore ----------------------------------------
@router.delete("/{login}", response_model=UserSummaryResponse)
def delete_user(
    login: str,
    service: UserServiceDep,
    requester: RequesterDep,
    soft: bool = Query(True, description="Revoke instead of removing the record."),
):
    return unwrap(service.delete_user(login, soft, requester))


@router.post("/{login}/restore", response_model=UserSummaryResponse)
def restore_user(login: str, service: UserServiceDep, requester: RequesterDep):
    return unwrap(service.restore_user(login, requester))
