"""
Order API endpoints - taking orders and moving them through the kitchen
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, ValidationInfo, field_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.database import get_db
from backend.models.user import AuthorizedUser
from backend.models.order import Order, OrderItem, OrderStatus, OrderChannel, PaymentMode
from backend.api.auth import get_current_user
from backend.services.date_windows import Period, resolve_window
from backend.utils.validators import validate_amount, validate_phone

router = APIRouter()
logger = logging.getLogger(__name__)


# --- Pydantic Schemas ---

class OrderItemCreate(BaseModel):
    name: str
    price: float
    quantity: int = Field(default=1, ge=1)
    total: Optional[float] = None  # defaults to price * quantity

    @field_validator("price")
    @classmethod
    def _price(cls, v):
        return validate_amount(v)

    @field_validator("total")
    @classmethod
    def _total(cls, v, info: ValidationInfo):
        if v is None:
            return v
        v = validate_amount(v)
        price, quantity = info.data.get("price"), info.data.get("quantity")
        if price is not None and quantity is not None and round(v - price * quantity, 2) != 0:
            raise ValueError(f"Line total {v} does not match price {price} x quantity {quantity}")
        return v


class OrderItemResponse(BaseModel):
    id: int
    name: str
    price: float
    quantity: int
    total: float

    class Config:
        from_attributes = True


class OrderCreate(BaseModel):
    items: List[OrderItemCreate] = Field(min_length=1)
    notes: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    payment_mode: Optional[PaymentMode] = None
    order_type: OrderChannel = OrderChannel.OFFLINE

    @field_validator("customer_phone")
    @classmethod
    def _phone(cls, v):
        return validate_phone(v) if v else v


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderResponse(BaseModel):
    id: int
    quantity: int
    total_amount: float
    status: OrderStatus
    order_date: datetime
    notes: Optional[str]
    customer_name: Optional[str]
    customer_phone: Optional[str]
    payment_mode: Optional[PaymentMode]
    order_type: OrderChannel
    items: List[OrderItemResponse] = []
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


async def _load_order(db: AsyncSession, order_id: int) -> Optional[Order]:
    result = await db.execute(
        select(Order).options(selectinload(Order.items)).where(Order.id == order_id)
    )
    return result.scalar_one_or_none()


# --- Endpoints ---

@router.post("/", response_model=OrderResponse)
async def create_order(
    data: OrderCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    """Create a pending order; totals are computed from the line items"""
    items = [
        OrderItem(
            name=item.name,
            price=item.price,
            quantity=item.quantity,
            total=item.total if item.total is not None else item.price * item.quantity,
        )
        for item in data.items
    ]
    now = datetime.now()
    order = Order(
        items=items,
        quantity=sum(i.quantity for i in items),
        total_amount=sum(i.total for i in items),
        status=OrderStatus.PENDING,
        order_date=now,
        created_at=now,
        updated_at=now,
        **data.model_dump(exclude={"items"}),
    )
    db.add(order)
    await db.commit()

    logger.info(f"Created {order.order_type.value} order {order.id}: {order.quantity} plates, total={order.total_amount}")
    return await _load_order(db, order.id)


@router.get("/", response_model=List[OrderResponse])
async def list_orders(
    status: Optional[OrderStatus] = None,
    order_type: Optional[OrderChannel] = None,
    limit: int = Query(default=50, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    """Most recent orders first"""
    query = (
        select(Order)
        .options(selectinload(Order.items))
        .order_by(Order.order_date.desc())
        .limit(limit)
    )
    if status:
        query = query.where(Order.status == status)
    if order_type:
        query = query.where(Order.order_type == order_type)

    result = await db.execute(query)
    return result.scalars().all()


@router.get("/today", response_model=List[OrderResponse])
async def list_today_orders(
    db: AsyncSession = Depends(get_db),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    window = resolve_window(Period.TODAY)
    result = await db.execute(
        select(Order)
        .options(selectinload(Order.items))
        .where(Order.order_date >= window.start, Order.order_date <= window.end)
        .order_by(Order.order_date.desc())
    )
    return result.scalars().all()


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    order = await _load_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    order = await _load_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    order.status = data.status
    order.updated_at = datetime.now()
    await db.commit()

    logger.info(f"Order {order_id} moved to {data.status.value}")
    return await _load_order(db, order_id)
