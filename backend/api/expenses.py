"""
Expense API endpoints - recording and reviewing business spending
"""
import logging
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database import get_db
from backend.models.user import AuthorizedUser
from backend.models.expense import Expense, ExpenseCategory
from backend.api.auth import get_current_user
from backend.services.date_windows import DateRange, InvalidRangeError, Period, resolve_window
from backend.utils.validators import validate_amount

router = APIRouter()
logger = logging.getLogger(__name__)


# --- Pydantic Schemas ---

class ExpenseCreate(BaseModel):
    amount: float
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: Optional[datetime] = None  # defaults to now
    description: str = ""

    @field_validator("amount")
    @classmethod
    def _amount(cls, v):
        return validate_amount(v)


class ExpenseResponse(BaseModel):
    id: int
    amount: float
    category: str
    date: datetime
    description: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


# --- Endpoints ---

@router.post("/", response_model=ExpenseResponse)
async def create_expense(
    data: ExpenseCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    now = datetime.now()
    expense = Expense(
        amount=data.amount,
        category=data.category.value,
        date=data.date or now,
        description=data.description,
        created_at=now,
        updated_at=now,
    )
    db.add(expense)
    await db.commit()
    await db.refresh(expense)

    logger.info(f"Recorded {expense.category} expense {expense.id}: {expense.amount}")
    return expense


@router.get("/", response_model=List[ExpenseResponse])
async def list_expenses(
    start: Optional[date] = None,
    end: Optional[date] = None,
    category: Optional[ExpenseCategory] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    """Expenses in [start, end] (whole days), newest first; today's when no range is given"""
    try:
        if start is None and end is None:
            window = resolve_window(Period.TODAY)
        else:
            custom = DateRange(start=start, end=end) if start and end else None
            window = resolve_window(Period.CUSTOM, custom)
    except InvalidRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    query = (
        select(Expense)
        .where(Expense.date >= window.start, Expense.date <= window.end)
        .order_by(Expense.date.desc())
    )
    if category:
        query = query.where(Expense.category == category.value)

    result = await db.execute(query)
    return result.scalars().all()


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    result = await db.execute(select(Expense).where(Expense.id == expense_id))
    expense = result.scalar_one_or_none()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")

    await db.delete(expense)
    await db.commit()

    logger.info(f"Deleted expense {expense_id}")
    return {"message": "Expense deleted"}
