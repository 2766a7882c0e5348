# models/account/user.py
from sqlalchemy import Column, Text, DateTime, CheckConstraint, text

from models.base import Base, BigIntPK, TimeStampMixin


# ========== users ==========
class User(TimeStampMixin, Base):
    __tablename__ = "users"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    email = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=True)
    password_hash = Column(Text, nullable=False)
    role = Column(Text, nullable=False, server_default=text("'member'"))  # admin | manager | member
    status = Column(Text, nullable=False, server_default=text("'active'"))
    department = Column(Text, nullable=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'manager', 'member')", name="chk_users_role"),
    )
