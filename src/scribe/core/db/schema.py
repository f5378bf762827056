"""Table creation for deployments without a migration step."""

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel import SQLModel

import src.scribe.models  # noqa: F401  (registers every table on SQLModel.metadata)
from src.scribe.core.logging import get_logger

logger = get_logger(__name__)


async def init_models(engine: AsyncEngine) -> None:
    """Create missing tables. Existing tables are left untouched."""
    async with engine.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables ensured", tables=sorted(SQLModel.metadata.tables))
