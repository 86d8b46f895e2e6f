"""
Main FastAPI application
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from backend.config import get_settings
from backend.database import engine, AsyncSessionLocal, create_tables
from backend.models import AuthorizedUser
from backend.api import orders, expenses, business_settings, reports
from backend.services.daily_summaries import DateLocks
from backend.utils.logger import configure_logging

settings = get_settings()
configure_logging(settings.DEBUG)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    logger.info("Database tables created")

    # Seed the first authorized user so a fresh install can be used
    if settings.SEED_ADMIN_EMAIL:
        async with AsyncSessionLocal() as session:
            result = await session.execute(
                select(AuthorizedUser).where(AuthorizedUser.email == settings.SEED_ADMIN_EMAIL)
            )
            if not result.scalar_one_or_none():
                session.add(AuthorizedUser(email=settings.SEED_ADMIN_EMAIL, name="Admin"))
                await session.commit()
                logger.info(f"Created authorized user {settings.SEED_ADMIN_EMAIL}")

    yield

    await engine.dispose()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)
app.state.summary_locks = DateLocks()

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(expenses.router, prefix="/api/expenses", tags=["Expenses"])
app.include_router(business_settings.router, prefix="/api/settings", tags=["Settings"])
app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
