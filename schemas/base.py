# schemas/base.py
from __future__ import annotations
from typing import Any, Generic, TypeVar
from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ORMBase(BaseModel):
    # 응답 키는 camelCase (budgetAmount ...), 입력은 snake/camel 모두 허용
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Page(ORMBase, Generic[T]):
    items: list[T]
    total: int
    page: int
    size: int

    # {"total", "items", "limit", "offset"} 형태도 받아서 page/size 로 매핑
    @model_validator(mode="before")
    @classmethod
    def from_limit_offset(cls, data: Any):
        if isinstance(data, dict):
            if "page" not in data and "size" not in data:
                limit = data.get("limit")
                offset = data.get("offset", 0)
                if limit is not None:
                    data = dict(data)
                    data["size"] = int(limit)
                    data["page"] = int(offset) // int(limit) + 1
        return data
