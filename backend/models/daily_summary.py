"""
Daily summary model - one cached profit/loss snapshot per calendar day
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, UniqueConstraint
from datetime import datetime
from backend.database import Base


class DailySummary(Base):
    __tablename__ = "daily_summaries"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(String, nullable=False, index=True)  # "YYYY-MM-DD"
    total_orders = Column(Integer, nullable=False, default=0)  # non-cancelled only
    total_revenue = Column(Float, nullable=False, default=0)
    total_expenses = Column(Float, nullable=False, default=0)
    net_profit = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now)

    __table_args__ = (
        UniqueConstraint('date', name='uq_daily_summary_date'),
    )
