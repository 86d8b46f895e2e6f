"""
Order models - customer orders with their line items
"""
from sqlalchemy import Column, Integer, Float, String, Text, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum
from backend.database import Base


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderChannel(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class PaymentMode(str, Enum):
    UPI = "upi"
    CASH = "cash"


class Order(Base):
    """A single order taken at the counter or through the customer portal"""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    quantity = Column(Integer, nullable=False, default=0)  # plates across all items
    total_amount = Column(Float, nullable=False, default=0)  # sum of item totals
    status = Column(SQLEnum(OrderStatus, native_enum=False), nullable=False, default=OrderStatus.PENDING)
    order_date = Column(DateTime, nullable=False, default=datetime.now, index=True)

    notes = Column(Text, nullable=True)
    customer_name = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    payment_mode = Column(SQLEnum(PaymentMode, native_enum=False), nullable=True)
    order_type = Column(SQLEnum(OrderChannel, native_enum=False), nullable=False, default=OrderChannel.OFFLINE)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relationships
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id")


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    total = Column(Float, nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
