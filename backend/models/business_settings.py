"""
Business settings model - a single row of shop configuration
"""
from sqlalchemy import Column, Integer, Float, String, DateTime
from datetime import datetime
from backend.database import Base


class BusinessSettings(Base):
    __tablename__ = "business_settings"

    id = Column(Integer, primary_key=True, index=True)
    price_per_plate = Column(Float, nullable=False)
    tax_rate = Column(Float, nullable=False, default=0)
    delivery_charge = Column(Float, nullable=False, default=0)
    business_name = Column(String, nullable=False)
    business_phone = Column(String, nullable=False, default="")
    business_address = Column(String, nullable=False, default="")
    currency = Column(String, nullable=False)
    open_time = Column(String, nullable=False)   # "HH:MM"
    close_time = Column(String, nullable=False)  # "HH:MM"
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
