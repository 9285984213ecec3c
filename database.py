import logging
from typing import AsyncIterator

from fastapi import Request
from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

import models  # noqa: F401  registers the bookings table on SQLModel.metadata
from config import Settings

logger = logging.getLogger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    if not settings.database_url:
        raise ValueError("DATABASE_URL is empty. Please check your .env file.")
    return create_async_engine(settings.database_url, echo=settings.sql_echo, future=True)


def create_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine):
    async with engine.begin() as conn:
        # This creates the tables if they don't exist
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Table bookings ready")


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    async_session = request.app.state.session_factory
    async with async_session() as session:
        yield session
