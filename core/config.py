# core/config.py
import os
from pathlib import Path
from dotenv import load_dotenv

# 0) .env 로드
load_dotenv()

# 1) 경로
BASE_DIR = Path(__file__).resolve().parent.parent

# 2) DB
DB = os.getenv("DB", "postgresql")
DB_USER = os.getenv("DB_USER", "")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_SERVER = os.getenv("DB_SERVER", "")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "")

# DATABASE_URL 이 있으면 우선 사용
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"{DB}://{DB_USER}:{DB_PASSWORD}@{DB_SERVER}:{DB_PORT}/{DB_NAME}"
    if all([DB_USER, DB_PASSWORD, DB_SERVER, DB_NAME]) else "",
)
SQL_ECHO = os.getenv("SQL_ECHO", "false").strip().lower() in {"true", "1", "yes", "on"}

# 3) 로깅
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# 4) CORS
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# 5) 예산/실적 기본값
DEFAULT_BUDGET_TYPE = os.getenv("DEFAULT_BUDGET_TYPE", "月次予算")
CSV_IMPORT_MAX_ERRORS = int(os.getenv("CSV_IMPORT_MAX_ERRORS", "10"))
TREND_MONTHS = 12


# 6) 권한 (높을수록 강함)
ROLE_LEVELS = {
    "member": 1,
    "manager": 2,
    "admin": 3,
}
