# app/endpoints/common/health.py
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from database.session import get_db

router = APIRouter()


@router.get("", summary="헬스 체크 (DB 연결 포함)")
def health(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "ok", "database": "ok"}
