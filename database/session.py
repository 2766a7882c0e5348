# database/session.py
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from core import config

# -----------------------------------------------------------------------------------
# 1) DB URL 설정
#    - 우선순위: 환경변수 DATABASE_URL → DB, DB_USER, ... 조합 (core.config)
# -----------------------------------------------------------------------------------
DATABASE_URL = config.DATABASE_URL

if not DATABASE_URL:
    raise RuntimeError(
        "DB connection settings are missing. "
        "Set DATABASE_URL or DB_USER/DB_PASSWORD/DB_SERVER/DB_NAME in .env."
    )


# -----------------------------------------------------------------------------------
# 2) SQLAlchemy Engine / SessionLocal
# -----------------------------------------------------------------------------------
def build_engine(url: str, **kwargs):
    """엔진 생성. SQLite 는 FK 제약(ON DELETE CASCADE)을 켜 둔다."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)

    engine = create_engine(url, echo=config.SQL_ECHO, future=True, **kwargs)

    if url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def _enable_sqlite_fk(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True,
)


# FastAPI Depends(get_db) 에서 쓸 세션 팩토리
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
