from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from userapi.core.dependencies import AuthServiceDep
from userapi.schemas import LoginRequest, TokenResponse
from userapi.services.results import Failure

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, auth_service: AuthServiceDep):
    result = auth_service.authenticate(payload.login, payload.password)
    if isinstance(result, Failure):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid login or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = result.value
    return TokenResponse(access_token=token.access_token, token_type=token.token_type)
