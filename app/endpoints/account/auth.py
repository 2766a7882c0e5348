# app/endpoints/account/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from core.deps import get_current_user
from database.session import get_db
from models.account.user import User
from schemas.account.auth import AuthTokens, LoginInput, UserResponse
from service import auth as auth_service

router = APIRouter()


@router.post(
    "/login",
    response_model=AuthTokens,
    summary="이메일/비밀번호 로그인",
)
def login(
    payload: LoginInput,
    db: Session = Depends(get_db),
):
    try:
        return auth_service.login(db, payload)
    except auth_service.AuthError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from e


@router.get("/me", response_model=UserResponse, summary="내 계정 정보")
def read_me(me: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(me)
