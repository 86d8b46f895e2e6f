"""
Profit and expense reporting over order and expense records.

Revenue counts every non-cancelled order placed inside the window; expenses
count every expense dated inside it. Reads go through a RecordStore; a
failed read degrades the report to zeros instead of raising, so dashboards
keep rendering. Use `calculate_profit_result` to see whether that happened.
"""
import asyncio
import logging
from datetime import date, timedelta
from typing import Callable, Iterable, List, Optional, Union

from pydantic import BaseModel

from backend.models.order import Order, OrderStatus
from backend.models.expense import Expense, ExpenseCategory
from backend.services.date_windows import DateRange, DateWindow, Period, resolve_window
from backend.services.record_store import RecordStore

logger = logging.getLogger(__name__)


# --- Result Schemas ---

class ProfitData(BaseModel):
    total_revenue: float = 0
    total_expenses: float = 0
    net_profit: float = 0
    profit_margin: float = 0
    total_orders: int = 0


class ProfitResult(BaseModel):
    ok: bool
    data: ProfitData
    error: Optional[str] = None


class CategoryTotal(BaseModel):
    category: ExpenseCategory
    amount: float
    percentage: float


class ExpenseBreakdown(BaseModel):
    breakdown: List[CategoryTotal]
    total_expenses: float


class DailyPoint(BaseModel):
    date: str  # YYYY-MM-DD
    profit: float
    revenue: float
    expenses: float


# --- Reducers ---

def percent_of(part: float, whole: float) -> float:
    """Percentage rounded to one decimal, 0 when the whole is not positive"""
    return round(part / whole * 100, 1) if whole > 0 else 0


def summarize_profit(
    orders: Iterable[Order],
    expenses: Iterable[Expense],
    window: DateWindow,
) -> ProfitData:
    """Reduce raw records to revenue, expense and profit figures for the window"""
    counted = [
        o for o in orders
        if window.contains(o.order_date) and o.status != OrderStatus.CANCELLED
    ]
    total_revenue = sum(o.total_amount or 0 for o in counted)
    total_expenses = sum(e.amount or 0 for e in expenses if window.contains(e.date))
    net_profit = total_revenue - total_expenses

    return ProfitData(
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        net_profit=net_profit,
        profit_margin=percent_of(net_profit, total_revenue),
        total_orders=len(counted),
    )


def _category_of(expense: Expense) -> ExpenseCategory:
    try:
        return ExpenseCategory(expense.category)
    except ValueError:
        logger.warning(f"Expense {expense.id} has unknown category {expense.category!r}, counted as other")
        return ExpenseCategory.OTHER


def summarize_expenses(expenses: Iterable[Expense], window: DateWindow) -> ExpenseBreakdown:
    """Per-category totals; every category is listed, in enumeration order"""
    buckets = {category: 0.0 for category in ExpenseCategory}
    for expense in expenses:
        if window.contains(expense.date):
            buckets[_category_of(expense)] += expense.amount or 0

    total_expenses = sum(buckets.values())
    return ExpenseBreakdown(
        breakdown=[
            CategoryTotal(
                category=category,
                amount=amount,
                percentage=percent_of(amount, total_expenses),
            )
            for category, amount in buckets.items()
        ],
        total_expenses=total_expenses,
    )


def empty_breakdown() -> ExpenseBreakdown:
    return ExpenseBreakdown(
        breakdown=[CategoryTotal(category=c, amount=0, percentage=0) for c in ExpenseCategory],
        total_expenses=0,
    )


# --- Service ---

class ProfitCalculator:
    """
    Period-based profit, expense breakdown and trend reports
    """

    def __init__(self, store: RecordStore, today: Optional[Callable[[], date]] = None):
        self.store = store
        self._today = today or date.today

    def resolve(self, period: Union[Period, str], custom_range: Optional[DateRange] = None) -> DateWindow:
        return resolve_window(period, custom_range, today=self._today())

    async def aggregate_profit(self, window: DateWindow) -> ProfitData:
        """Fetch and reduce one window; store failures propagate"""
        orders, expenses = await asyncio.gather(
            self.store.fetch_orders(window),
            self.store.fetch_expenses(window),
        )
        return summarize_profit(orders, expenses, window)

    async def calculate_profit_result(
        self,
        period: Union[Period, str],
        custom_range: Optional[DateRange] = None,
    ) -> ProfitResult:
        """Like calculate_profit, but reports whether the figures are real"""
        return await self.profit_result_for(self.resolve(period, custom_range))

    async def profit_result_for(self, window: DateWindow) -> ProfitResult:
        try:
            data = await self.aggregate_profit(window)
        except Exception as e:
            logger.error(
                f"Error calculating profit for {window.start:%Y-%m-%d}..{window.end:%Y-%m-%d}: {e}",
                exc_info=True,
            )
            return ProfitResult(ok=False, data=ProfitData(), error=str(e))
        return ProfitResult(ok=True, data=data)

    async def calculate_profit(
        self,
        period: Union[Period, str],
        custom_range: Optional[DateRange] = None,
    ) -> ProfitData:
        result = await self.calculate_profit_result(period, custom_range)
        return result.data

    async def get_today_profit(self) -> ProfitData:
        return await self.calculate_profit(Period.TODAY)

    async def get_weekly_profit(self) -> ProfitData:
        return await self.calculate_profit(Period.WEEK)

    async def get_monthly_profit(self) -> ProfitData:
        return await self.calculate_profit(Period.MONTH)

    async def get_expense_breakdown(
        self,
        period: Union[Period, str],
        custom_range: Optional[DateRange] = None,
    ) -> ExpenseBreakdown:
        return await self.expense_breakdown_for(self.resolve(period, custom_range))

    async def expense_breakdown_for(self, window: DateWindow) -> ExpenseBreakdown:
        try:
            expenses = await self.store.fetch_expenses(window)
        except Exception as e:
            logger.error(f"Error calculating expense breakdown: {e}", exc_info=True)
            return empty_breakdown()
        return summarize_expenses(expenses, window)

    async def get_daily_trend(self, days: int = 7) -> List[DailyPoint]:
        """
        One point per day for the trailing `days` days, oldest first.

        Days are computed one after another; a day whose fetch fails shows
        zeros without affecting the rest of the series.
        """
        today = self._today()
        trend = []
        for offset in range(days - 1, -1, -1):
            day = today - timedelta(days=offset)
            profit = await self.calculate_profit(Period.CUSTOM, DateRange(start=day, end=day))
            trend.append(DailyPoint(
                date=day.isoformat(),
                profit=profit.net_profit,
                revenue=profit.total_revenue,
                expenses=profit.total_expenses,
            ))
        return trend
