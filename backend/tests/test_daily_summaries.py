"""
Daily summary cache and SQL record store tests.
Runs against a temporary SQLite file so concurrent fetches use separate connections.
"""
import asyncio
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import func, select

from backend.models.order import Order, OrderStatus
from backend.models.expense import Expense
from backend.models.daily_summary import DailySummary
from backend.services.daily_summaries import DailySummaryCache, DateLocks, date_key
from backend.services.date_windows import Period, day_window
from backend.services.profit_calculator import ProfitCalculator
from backend.services.record_store import RecordStoreError, SqlRecordStore

DAY = date(2026, 10, 14)
NOON = datetime(2026, 10, 14, 12, 0)


@pytest.fixture()
def store(session_factory):
    return SqlRecordStore(session_factory, order_limit=1000)


@pytest.fixture()
def cache(store, session_factory):
    return DailySummaryCache(ProfitCalculator(store, today=lambda: DAY), session_factory)


async def _seed_day(db_session):
    db_session.add_all([
        Order(total_amount=300, quantity=2, status=OrderStatus.COMPLETED, order_date=NOON),
        Order(total_amount=200, quantity=1, status=OrderStatus.CANCELLED, order_date=NOON),
        Order(total_amount=150, quantity=1, status=OrderStatus.PENDING, order_date=NOON - timedelta(days=1)),
        Expense(amount=100, category="fuel", date=NOON),
        Expense(amount=40, category="rent", date=NOON - timedelta(days=1)),
    ])
    await db_session.commit()


async def _count_summaries(db_session):
    result = await db_session.execute(select(func.count(DailySummary.id)))
    return result.scalar()


# ===================== SQL RECORD STORE =====================


async def test_store_filters_by_window(store, db_session):
    await _seed_day(db_session)

    orders = await store.fetch_orders(day_window(DAY))
    expenses = await store.fetch_expenses(day_window(DAY))

    assert sorted(o.total_amount for o in orders) == [200, 300]
    assert [e.amount for e in expenses] == [100]


async def test_store_orders_without_window_newest_first(store, db_session):
    await _seed_day(db_session)

    orders = await store.fetch_orders()
    assert len(orders) == 3
    assert orders[-1].total_amount == 150


async def test_store_order_limit(session_factory, db_session):
    db_session.add_all([
        Order(total_amount=10 * i, status=OrderStatus.COMPLETED, order_date=NOON - timedelta(hours=i))
        for i in range(5)
    ])
    await db_session.commit()

    capped = SqlRecordStore(session_factory, order_limit=3)
    orders = await capped.fetch_orders()
    assert [o.total_amount for o in orders] == [0, 10, 20]
    assert len(await capped.fetch_orders(limit=2)) == 2


async def test_store_wraps_database_errors(session_factory):
    async with session_factory() as session:
        engine = session.bind
    async with engine.begin() as conn:
        await conn.exec_driver_sql("DROP TABLE expenses")

    with pytest.raises(RecordStoreError, match="Failed to fetch expenses"):
        await SqlRecordStore(session_factory).fetch_expenses(day_window(DAY))


async def test_profit_over_sql_store(store, db_session):
    await _seed_day(db_session)
    data = await ProfitCalculator(store, today=lambda: DAY).calculate_profit(Period.TODAY)

    assert data.total_revenue == 300
    assert data.total_expenses == 100
    assert data.net_profit == 200
    assert data.profit_margin == 66.7
    assert data.total_orders == 1


# ===================== DAILY SUMMARY CACHE =====================


async def test_get_summary_absent_returns_none(cache):
    assert await cache.get_summary(DAY) is None


async def test_compute_and_store_creates_summary(cache, db_session):
    await _seed_day(db_session)

    summary = await cache.compute_and_store(DAY)

    assert summary.id is not None
    assert summary.date == "2026-10-14"
    assert summary.total_orders == 1
    assert summary.total_revenue == 300
    assert summary.total_expenses == 100
    assert summary.net_profit == 200

    stored = await cache.get_summary(DAY)
    assert stored.id == summary.id


async def test_compute_and_store_is_idempotent(cache, db_session):
    await _seed_day(db_session)

    first = await cache.compute_and_store(DAY)
    second = await cache.compute_and_store(DAY)

    assert second.id == first.id
    assert second.created_at == first.created_at
    assert (second.total_orders, second.total_revenue, second.total_expenses, second.net_profit) == \
        (first.total_orders, first.total_revenue, first.total_expenses, first.net_profit)
    assert await _count_summaries(db_session) == 1


async def test_recompute_after_cancellation(cache, db_session):
    await _seed_day(db_session)
    first = await cache.compute_and_store(DAY)

    result = await db_session.execute(select(Order).where(Order.total_amount == 300))
    completed = result.scalar_one()
    completed.status = OrderStatus.CANCELLED
    await db_session.commit()

    refreshed = await cache.compute_and_store(DAY)

    assert refreshed.id == first.id
    assert refreshed.total_orders == 0
    assert refreshed.total_revenue == 0
    assert refreshed.net_profit == -100
    assert refreshed.updated_at >= first.updated_at
    assert await _count_summaries(db_session) == 1


async def test_summaries_are_per_day(cache, db_session):
    await _seed_day(db_session)

    today = await cache.compute_and_store(DAY)
    yesterday = await cache.compute_and_store(DAY - timedelta(days=1))

    assert today.id != yesterday.id
    assert yesterday.date == "2026-10-13"
    assert yesterday.total_revenue == 150
    assert yesterday.total_expenses == 40
    assert await _count_summaries(db_session) == 2


async def test_accepts_datetime_day(cache, db_session):
    await _seed_day(db_session)
    summary = await cache.compute_and_store(datetime(2026, 10, 14, 21, 30))
    assert summary.date == date_key(DAY)


async def test_concurrent_recompute_keeps_one_row(cache, db_session):
    await _seed_day(db_session)

    results = await asyncio.gather(*(cache.compute_and_store(DAY) for _ in range(5)))

    assert len({s.id for s in results}) == 1
    assert await _count_summaries(db_session) == 1


async def test_store_failure_writes_nothing(session_factory, memory_store, db_session):
    memory_store.fail_orders = True
    cache = DailySummaryCache(ProfitCalculator(memory_store, today=lambda: DAY), session_factory)

    with pytest.raises(RecordStoreError):
        await cache.compute_and_store(DAY)

    assert await _count_summaries(db_session) == 0


async def test_date_locks_released_after_recompute(cache, db_session):
    await _seed_day(db_session)

    await asyncio.gather(
        *(cache.compute_and_store(DAY) for _ in range(3)),
        cache.compute_and_store(DAY - timedelta(days=1)),
    )
    assert len(cache.locks) == 0
    assert await _count_summaries(db_session) == 2


async def test_date_locks_released_after_failure(session_factory, memory_store):
    memory_store.fail_orders = True
    cache = DailySummaryCache(ProfitCalculator(memory_store, today=lambda: DAY), session_factory)

    with pytest.raises(RecordStoreError):
        await cache.compute_and_store(DAY)

    assert len(cache.locks) == 0


async def test_date_locks_kept_while_waiting():
    locks = DateLocks()
    entered = asyncio.Event()
    release = asyncio.Event()

    async def holder():
        async with locks.hold("2026-10-14"):
            entered.set()
            await release.wait()

    async def waiter():
        async with locks.hold("2026-10-14"):
            pass

    first = asyncio.create_task(holder())
    await entered.wait()
    second = asyncio.create_task(waiter())
    await asyncio.sleep(0)
    assert len(locks) == 1

    release.set()
    await asyncio.gather(first, second)
    assert len(locks) == 0
