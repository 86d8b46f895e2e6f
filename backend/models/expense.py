"""
Expense model - day-to-day business spending
"""
from sqlalchemy import Column, Integer, Float, String, Text, DateTime
from datetime import datetime
from enum import Enum
from backend.database import Base


class ExpenseCategory(str, Enum):
    INGREDIENTS = "ingredients"
    FUEL = "fuel"
    PACKAGING = "packaging"
    UTILITIES = "utilities"
    LABOR = "labor"
    RENT = "rent"
    OTHER = "other"


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Float, nullable=False)
    category = Column(String, nullable=False, default=ExpenseCategory.OTHER.value)
    date = Column(DateTime, nullable=False, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
