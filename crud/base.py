# crud/base.py
from __future__ import annotations

from typing import Any, Generic, Iterable, Mapping, Optional, Sequence, Tuple, TypeVar

from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.inspection import inspect as sa_inspect
from sqlalchemy.orm import Session

from models.base import Base

# ---- 제네릭 타입 ----
ModelT = TypeVar("ModelT", bound=Base)
CreateT = TypeVar("CreateT", bound=BaseModel)
UpdateT = TypeVar("UpdateT", bound=BaseModel)


class CRUDBase(Generic[ModelT, CreateT, UpdateT]):
    """
    공통 CRUD 베이스.
    - get, list_page, create, update, delete
    - 모델의 첫 번째 PK 컬럼을 자동 사용
    """

    def __init__(self, model: type[ModelT]):
        self.model = model

    # ---------- 내부 유틸 ----------
    @property
    def _pk_col(self):
        return sa_inspect(self.model).primary_key[0]

    def _to_data(
        self,
        obj: CreateT | UpdateT | Mapping[str, Any],
        *,
        exclude_unset: bool = True,
    ) -> dict[str, Any]:
        if isinstance(obj, BaseModel):
            return obj.model_dump(exclude_unset=exclude_unset)
        return dict(obj)

    def _apply_order_by(self, stmt: Select, order_by: Optional[Iterable[str]]) -> Select:
        if not order_by:
            return stmt.order_by(self._pk_col.asc())
        clauses = []
        for field in order_by:
            desc = field.startswith("-")
            col = getattr(self.model, field.lstrip("-"), None)
            if col is None:
                continue
            clauses.append(col.desc() if desc else col.asc())
        return stmt.order_by(*clauses) if clauses else stmt

    # ---------- 조회 ----------
    def get(self, db: Session, id: Any) -> Optional[ModelT]:
        return db.get(self.model, id)

    def list_page(
        self,
        db: Session,
        *,
        conditions: Sequence[Any] = (),
        offset: int = 0,
        limit: int = 50,
        order_by: Optional[Iterable[str]] = None,
        options: Sequence[Any] = (),
    ) -> Tuple[list[ModelT], int]:
        """조건 목록으로 필터링한 (rows, total)."""
        base = select(self.model).where(*conditions)

        total = db.execute(
            select(func.count()).select_from(base.subquery())
        ).scalar_one()

        stmt = self._apply_order_by(base, order_by).options(*options)
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)
        return list(db.execute(stmt).scalars().all()), int(total or 0)

    # ---------- 쓰기 ----------
    def create(self, db: Session, *, obj_in: CreateT | Mapping[str, Any], commit: bool = True) -> ModelT:
        # 생성 시에는 스키마 기본값(budget_type 등)도 포함
        data = self._to_data(obj_in, exclude_unset=False)
        db_obj: ModelT = self.model(**data)  # type: ignore[arg-type]
        db.add(db_obj)
        if commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelT,
        obj_in: UpdateT | Mapping[str, Any],
        exclude_none: bool = False,
        commit: bool = True,
    ) -> ModelT:
        data = self._to_data(obj_in)
        if exclude_none:
            data = {k: v for k, v in data.items() if v is not None}
        for field, value in data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        db.add(db_obj)
        if commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
        return db_obj

    def delete(self, db: Session, *, db_obj: ModelT) -> None:
        db.delete(db_obj)
        db.commit()
