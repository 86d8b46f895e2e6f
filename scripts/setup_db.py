"""
Database setup script

Usage:
    python -m scripts.setup_db [manager@example.com ...]
"""
import asyncio
import sys

from sqlalchemy import select

from backend.database import engine, AsyncSessionLocal, create_tables
from backend.models import AuthorizedUser


async def setup_database(emails: list[str]):
    """Create tables and authorize the given staff emails"""
    print("Creating database tables...")
    await create_tables()
    print("Tables created")

    async with AsyncSessionLocal() as session:
        for email in emails:
            result = await session.execute(select(AuthorizedUser).where(AuthorizedUser.email == email))
            if result.scalar_one_or_none():
                print(f"Already authorized: {email}")
                continue
            session.add(AuthorizedUser(email=email))
            print(f"Authorized: {email}")
        await session.commit()

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(setup_database(sys.argv[1:]))
