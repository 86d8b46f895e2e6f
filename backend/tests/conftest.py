"""
Test fixtures - file-backed SQLite database, in-memory record store + authorized HTTP client
"""
from typing import List, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from backend.config import get_settings
from backend.database import Base, get_db, get_session_factory
from backend.main import app
from backend.models import AuthorizedUser, Expense, Order
from backend.services.date_windows import DateWindow
from backend.services.record_store import RecordStore, RecordStoreError

AUTH_EMAIL = "manager@biryanihouse.in"


class InMemoryRecordStore(RecordStore):
    """RecordStore over plain lists; set fail_* to simulate store outages"""

    def __init__(self):
        self.orders: List[Order] = []
        self.expenses: List[Expense] = []
        self.fail_orders = False
        self.fail_expenses = False
        self.order_fetches = 0
        self.expense_fetches = 0

    async def fetch_orders(self, window: Optional[DateWindow] = None, limit: Optional[int] = None):
        self.order_fetches += 1
        if self.fail_orders:
            raise RecordStoreError("orders unavailable")
        rows = [o for o in self.orders if window is None or window.contains(o.order_date)]
        return rows[:limit] if limit else rows

    async def fetch_expenses(self, window: DateWindow):
        self.expense_fetches += 1
        if self.fail_expenses:
            raise RecordStoreError("expenses unavailable")
        return [e for e in self.expenses if window.contains(e.date)]


@pytest.fixture()
def memory_store():
    return InMemoryRecordStore()


@pytest_asyncio.fixture()
async def session_factory(tmp_path):
    """Fresh SQLite file per test; each session gets its own connection"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """Insert baseline test data: one active and one deactivated user"""
    manager = AuthorizedUser(email=AUTH_EMAIL, name="Counter Manager", is_active=True)
    former = AuthorizedUser(email="former@biryanihouse.in", name="Former Staff", is_active=False)

    db_session.add_all([manager, former])
    await db_session.commit()
    await db_session.refresh(manager)

    return {"user": manager, "former": former}


@pytest_asyncio.fixture()
async def client(db_session, session_factory, seed_data):
    """Authorized httpx AsyncClient bound to the FastAPI app"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        ac.headers[get_settings().AUTH_HEADER] = AUTH_EMAIL
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unauth_client(db_session, session_factory, seed_data):
    """httpx AsyncClient without the identity header"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
