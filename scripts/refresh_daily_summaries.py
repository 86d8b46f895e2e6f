"""
Recompute cached daily summaries for the trailing days (nightly or manual job)

Usage:
    python -m scripts.refresh_daily_summaries [days]   # default 1 (today only)
"""
import asyncio
import sys
from datetime import date, timedelta

from backend.config import get_settings
from backend.database import engine, AsyncSessionLocal
from backend.services.daily_summaries import DailySummaryCache
from backend.services.profit_calculator import ProfitCalculator
from backend.services.record_store import SqlRecordStore
from backend.utils.logger import configure_logging


async def refresh(days: int):
    settings = get_settings()
    store = SqlRecordStore(AsyncSessionLocal, order_limit=settings.ORDER_FETCH_LIMIT)
    cache = DailySummaryCache(ProfitCalculator(store), AsyncSessionLocal)

    today = date.today()
    for offset in range(days - 1, -1, -1):
        summary = await cache.compute_and_store(today - timedelta(days=offset))
        print(f"{summary.date}: orders={summary.total_orders} net={summary.net_profit:.2f}")

    await engine.dispose()


if __name__ == "__main__":
    configure_logging()
    asyncio.run(refresh(int(sys.argv[1]) if len(sys.argv) > 1 else 1))
