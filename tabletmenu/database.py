"""
Database Connection Module
Handles the relational store using the SQLAlchemy async engine.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from tabletmenu.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _engine_options(database_url: str) -> dict:
    """Pool options per backend; SQLite gets one shared connection."""
    if database_url.startswith("sqlite"):
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {
        "pool_size": 5,  # Connection pool size
        "max_overflow": 10,  # Extra connections when pool is full
        "pool_pre_ping": True,
    }


# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    **_engine_options(settings.database_url),
)

# Session factory - creates new database sessions
async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False  # Objects remain accessible after commit
)


# Base class for all our models
class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncSession:
    """
    Dependency injection for FastAPI routes.
    Yields a database session and ensures cleanup.
    """
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(bind: AsyncEngine | None = None) -> None:
    """
    Create all tables in database.
    Called once at application startup.
    """
    # Importing the models registers their tables on Base.metadata
    from tabletmenu import models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def seed_defaults(session: AsyncSession) -> None:
    """
    Insert the default branch and branding when their tables are empty.
    """
    from tabletmenu.models import Branch, Branding, BRANDING_ID

    branch_count = await session.scalar(select(func.count(Branch.id)))
    if not branch_count:
        logger.info("Seeding initial branch...")
        session.add(Branch(
            name=settings.default_branch_name,
            address=settings.default_branch_address,
            phone=settings.default_branch_phone,
        ))

    if await session.get(Branding, BRANDING_ID) is None:
        logger.info("Seeding initial branding...")
        session.add(Branding(id=BRANDING_ID, restaurant_name=settings.default_restaurant_name))

    await session.commit()
