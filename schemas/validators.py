# schemas/validators.py
from __future__ import annotations

from typing import Any

# 예산/실적 복합키의 텍스트 항목
KEY_TEXT_FIELDS = ("platform", "operation_type", "budget_type")


def strip_text(value: Any) -> Any:
    """앞뒤 공백 제거. 문자열이 아니면 그대로 두고 타입 검증에 맡긴다."""
    if isinstance(value, str):
        return value.strip()
    return value


def reject_null(value: Any) -> Any:
    # 생략은 허용, 명시적 null 은 NOT NULL 컬럼이라 거부
    if value is None:
        raise ValueError("must not be null")
    return value
