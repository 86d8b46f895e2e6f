"""
Reports API - profit/loss, expense breakdown, trends and daily summaries
"""
import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.config import get_settings
from backend.database import get_db, get_session_factory
from backend.models.user import AuthorizedUser
from backend.api.auth import get_current_user
from backend.services.business_settings import get_business_settings
from backend.services.daily_summaries import DailySummaryCache, DateLocks
from backend.services.date_windows import DateRange, DateWindow, InvalidRangeError, Period
from backend.services.profit_calculator import (
    DailyPoint,
    ExpenseBreakdown,
    ProfitCalculator,
    ProfitData,
)
from backend.services.record_store import RecordStore, RecordStoreError, SqlRecordStore
from backend.utils.helpers import format_currency, format_percentage

router = APIRouter()
logger = logging.getLogger(__name__)
settings = get_settings()


# --- Pydantic Schemas ---

class ProfitResponse(ProfitData):
    period: Period
    start: datetime
    end: datetime
    degraded: bool = False  # True when the figures are zeros from a failed fetch
    formatted: Dict[str, str] = {}


class DailySummaryResponse(BaseModel):
    id: int
    date: str
    total_orders: int
    total_revenue: float
    total_expenses: float
    net_profit: float
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


# --- Dependencies ---

def get_record_store(
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> RecordStore:
    return SqlRecordStore(session_factory, order_limit=settings.ORDER_FETCH_LIMIT)


def get_profit_calculator(store: RecordStore = Depends(get_record_store)) -> ProfitCalculator:
    return ProfitCalculator(store)


def get_summary_cache(
    request: Request,
    calculator: ProfitCalculator = Depends(get_profit_calculator),
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> DailySummaryCache:
    locks = getattr(request.app.state, "summary_locks", None)
    if locks is None:
        locks = request.app.state.summary_locks = DateLocks()
    return DailySummaryCache(calculator, session_factory, locks=locks)


def _custom_range(start: Optional[date], end: Optional[date]) -> Optional[DateRange]:
    if start and end:
        return DateRange(start=start, end=end)
    return None


def _resolve(calculator: ProfitCalculator, period: Period, start, end) -> DateWindow:
    try:
        return calculator.resolve(period, _custom_range(start, end))
    except InvalidRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))


# --- Endpoints ---

@router.get("/window", response_model=DateWindow)
async def get_window(
    period: Period = Period.TODAY,
    start: Optional[date] = None,
    end: Optional[date] = None,
    calculator: ProfitCalculator = Depends(get_profit_calculator),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    """Concrete start/end instants a period selector resolves to"""
    return _resolve(calculator, period, start, end)


@router.get("/profit", response_model=ProfitResponse)
async def get_profit(
    period: Period = Period.TODAY,
    start: Optional[date] = None,
    end: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    calculator: ProfitCalculator = Depends(get_profit_calculator),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    """Revenue, expenses, net profit and margin for the period"""
    window = _resolve(calculator, period, start, end)
    result = await calculator.profit_result_for(window)
    data = result.data

    stored = await get_business_settings(db)
    currency = stored.currency if stored else settings.DEFAULT_CURRENCY

    return ProfitResponse(
        **data.model_dump(),
        period=period,
        start=window.start,
        end=window.end,
        degraded=not result.ok,
        formatted={
            "total_revenue": format_currency(data.total_revenue, currency),
            "total_expenses": format_currency(data.total_expenses, currency),
            "net_profit": format_currency(data.net_profit, currency),
            "profit_margin": format_percentage(data.profit_margin),
        },
    )


@router.get("/expense-breakdown", response_model=ExpenseBreakdown)
async def get_expense_breakdown(
    period: Period = Period.TODAY,
    start: Optional[date] = None,
    end: Optional[date] = None,
    calculator: ProfitCalculator = Depends(get_profit_calculator),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    """Spending per category; all categories are always listed"""
    window = _resolve(calculator, period, start, end)
    return await calculator.expense_breakdown_for(window)


@router.get("/trend", response_model=List[DailyPoint])
async def get_trend(
    days: int = Query(default=settings.TREND_DEFAULT_DAYS, ge=1, le=settings.TREND_MAX_DAYS),
    calculator: ProfitCalculator = Depends(get_profit_calculator),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    """Daily profit, revenue and expenses for the trailing days, oldest first"""
    return await calculator.get_daily_trend(days)


@router.get("/daily-summary/{day}", response_model=DailySummaryResponse)
async def get_daily_summary(
    day: date,
    cache: DailySummaryCache = Depends(get_summary_cache),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    summary = await cache.get_summary(day)
    if not summary:
        raise HTTPException(status_code=404, detail="Daily summary not found")
    return summary


@router.post("/daily-summary/{day}", response_model=DailySummaryResponse)
async def compute_daily_summary(
    day: date,
    cache: DailySummaryCache = Depends(get_summary_cache),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    """Recompute the day's totals and store them"""
    try:
        return await cache.compute_and_store(day)
    except RecordStoreError as e:
        logger.error(f"Daily summary for {day} not stored: {e}")
        raise HTTPException(status_code=503, detail="Records unavailable, summary not updated")
