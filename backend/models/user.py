"""
Authorized user model - staff allowed to use the dashboard
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from datetime import datetime
from backend.database import Base


class AuthorizedUser(Base):
    __tablename__ = "authorized_users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False, default="Sales Manager")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.now)
