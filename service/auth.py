# service/auth.py
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from core.security import issue_tokens, verify_password
from crud.account.user import get_user_by_email, touch_last_login
from schemas.account.auth import AuthTokens, LoginInput

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """이메일/비밀번호 불일치 또는 비활성 계정."""


def login(db: Session, payload: LoginInput) -> AuthTokens:
    user = get_user_by_email(db, payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("login failed: email=%s", payload.email)
        raise AuthError("invalid email or password")
    if (user.status or "").lower() != "active":
        raise AuthError("inactive user")

    touch_last_login(db, user)
    tokens = issue_tokens(user.id)
    return AuthTokens(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
    )
