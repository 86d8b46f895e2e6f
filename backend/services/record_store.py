"""
Read-only access to order and expense records for the report services
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from backend.models.order import Order
from backend.models.expense import Expense
from backend.services.date_windows import DateWindow

logger = logging.getLogger(__name__)


class RecordStoreError(Exception):
    """A fetch from the underlying store failed"""


class RecordStore(ABC):
    """
    Source of Order and Expense records consumed by the aggregation services
    """

    @abstractmethod
    async def fetch_orders(
        self,
        window: Optional[DateWindow] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """Orders newest first, restricted to the window when one is given"""
        pass

    @abstractmethod
    async def fetch_expenses(self, window: DateWindow) -> List[Expense]:
        """Expenses dated inside the window, newest first"""
        pass


class SqlRecordStore(RecordStore):
    """
    RecordStore over the SQLAlchemy tables.

    Each fetch opens its own session so orders and expenses can be
    fetched concurrently.
    """

    def __init__(self, session_factory: async_sessionmaker, order_limit: Optional[int] = None):
        self.session_factory = session_factory
        self.order_limit = order_limit

    async def fetch_orders(
        self,
        window: Optional[DateWindow] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        query = select(Order).order_by(Order.order_date.desc())
        if window is not None:
            query = query.where(Order.order_date >= window.start, Order.order_date <= window.end)

        limit = limit or self.order_limit
        if limit:
            query = query.limit(limit)

        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                orders = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise RecordStoreError(f"Failed to fetch orders: {e}") from e

        if limit and len(orders) == limit:
            logger.warning(f"Order fetch hit the {limit} row cap; older orders in the window are ignored")
        return orders

    async def fetch_expenses(self, window: DateWindow) -> List[Expense]:
        query = (
            select(Expense)
            .where(Expense.date >= window.start, Expense.date <= window.end)
            .order_by(Expense.date.desc())
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise RecordStoreError(f"Failed to fetch expenses: {e}") from e
