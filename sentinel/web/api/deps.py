"""Dependencies and helpers shared by the API routers."""

import logging
from typing import Annotated, Awaitable, Callable

from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core import ChangeFeed, ViewCache
from ...shared.db import get_db_session

logger = logging.getLogger(__name__)


def get_change_feed(request: Request) -> ChangeFeed:
    return request.app.state.changes


def get_view_cache(request: Request) -> ViewCache:
    return request.app.state.view_cache


DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Changes = Annotated[ChangeFeed, Depends(get_change_feed)]
Views = Annotated[ViewCache, Depends(get_view_cache)]


async def run_dependent_write(
    db: AsyncSession,
    description: str,
    write: Callable[[], Awaitable[object]],
) -> bool:
    """
    Perform a write that follows an already committed primary write.

    A failure is rolled back and logged; the primary write stands.

    Returns:
        True if the dependent write was committed
    """
    try:
        await write()
        await db.commit()
        return True
    except SQLAlchemyError as e:
        await db.rollback()
        logger.warning("Dependent write failed (%s): %s", description, e)
        return False
