import logging
from typing import AsyncGenerator
from app.core.config import settings
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker, create_async_engine)

# Initialize the logger for async database events
logger = logging.getLogger(__name__)

# --- DATABASE URL CONFIGURATION ---

db_url = settings.database_url

if not db_url:
    raise RuntimeError("DATABASE_URL is not set")


# --- ASYNC ENGINE CONFIG (FastAPI)
# One engine per process; every request gets its own session from it.

engine_options = {"echo": False, "pool_pre_ping": True}
if not db_url.startswith("sqlite"):
    engine_options.update(pool_size=10, max_overflow=20)

async_engine = create_async_engine(db_url, **engine_options)

AsyncSessionLocal = async_sessionmaker(
    async_engine,
    class_= AsyncSession,
    expire_on_commit= False,
)


# --- FASTAPI DEPENDENCY
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI Dependency that provides an asynchronous database session.
    """
    async with AsyncSessionLocal() as session:
        try:
            logger.debug("Database: New async session yielded for API request.")
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.exception(f"Database: Async session error: {e}")
            raise
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
