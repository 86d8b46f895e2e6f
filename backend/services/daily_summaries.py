"""
Cached per-day profit/loss summaries, keyed by "YYYY-MM-DD".

There is at most one summary row per date. Recomputing a day updates that
row in place and keeps its id and created_at.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Dict, Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.models.daily_summary import DailySummary
from backend.services.date_windows import day_window
from backend.services.profit_calculator import ProfitCalculator, ProfitData

logger = logging.getLogger(__name__)


def date_key(day: Union[date, datetime]) -> str:
    if isinstance(day, datetime):
        day = day.date()
    return day.isoformat()


class DateLocks:
    """Per-date asyncio locks, dropped once no task holds or waits on them"""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, key: str):
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]


class DailySummaryCache:
    """
    Reads and refreshes DailySummary rows.

    Refreshes for the same date are serialized per instance through
    `locks`; pass a shared DateLocks to serialize across instances.
    """

    def __init__(
        self,
        calculator: ProfitCalculator,
        session_factory: async_sessionmaker,
        locks: Optional[DateLocks] = None,
    ):
        self.calculator = calculator
        self.session_factory = session_factory
        self.locks = locks if locks is not None else DateLocks()

    @staticmethod
    async def _find(session: AsyncSession, key: str) -> Optional[DailySummary]:
        result = await session.execute(select(DailySummary).where(DailySummary.date == key))
        return result.scalar_one_or_none()

    async def get_summary(self, day: Union[date, datetime]) -> Optional[DailySummary]:
        """Stored summary for the day, or None; never computes one"""
        async with self.session_factory() as session:
            return await self._find(session, date_key(day))

    async def compute_and_store(self, day: Union[date, datetime]) -> DailySummary:
        """
        Recompute the day's totals from raw records and upsert its summary.

        Raises RecordStoreError when the records cannot be read; nothing is
        written in that case.
        """
        key = date_key(day)
        async with self.locks.hold(key):
            figures = await self.calculator.aggregate_profit(day_window(day))
            try:
                return await self._upsert(key, figures)
            except IntegrityError:
                # Another writer inserted the same date first; update theirs
                logger.info(f"Daily summary {key} inserted concurrently, retrying as update")
                return await self._upsert(key, figures)

    async def _upsert(self, key: str, figures: ProfitData) -> DailySummary:
        now = datetime.now()
        async with self.session_factory() as session:
            summary = await self._find(session, key)
            if summary:
                action = "Updated"
            else:
                action = "Created"
                summary = DailySummary(date=key, created_at=now)
                session.add(summary)

            summary.total_orders = figures.total_orders
            summary.total_revenue = figures.total_revenue
            summary.total_expenses = figures.total_expenses
            summary.net_profit = figures.net_profit
            summary.updated_at = now

            await session.commit()

        logger.info(
            f"{action} daily summary {key}: orders={figures.total_orders}, "
            f"revenue={figures.total_revenue}, expenses={figures.total_expenses}, "
            f"net={figures.net_profit}"
        )
        return summary
