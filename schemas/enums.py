# schemas/enums.py
from enum import Enum


# --------------------
# 사용자 역할 (admin > manager > member)
# --------------------
class Role(str, Enum):
    admin = "admin"
    manager = "manager"
    member = "member"


class UserStatus(str, Enum):
    active = "active"
    suspended = "suspended"


# --------------------
# 응답 포맷
# --------------------
class ExportFormat(str, Enum):
    json = "json"
    csv = "csv"
