"""Store-failure fallback for report services.

Report consumers never see a store error: the failed read is logged, the
session is rolled back, and the report degrades to its empty form.
"""

import logging
from collections.abc import Callable
from functools import wraps

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

log = logging.getLogger(__name__)

# asyncpg surfaces an unreachable server as a bare OSError (ConnectionRefusedError,
# TimeoutError), not wrapped by SQLAlchemy
STORE_ERRORS = (SQLAlchemyError, OSError)


async def _rollback_quietly(db: AsyncSession) -> None:
    try:
        await db.rollback()
    except STORE_ERRORS:
        log.warning("Rollback failed after store error", exc_info=True)


def degrades_to(default: Callable[[], object]):
    """Return ``default()`` when the wrapped call fails against the store.

    The wrapped coroutine must take the session as its first argument. Only
    store errors (``SQLAlchemyError`` and connection-level ``OSError``) are
    absorbed; anything else is a bug and propagates.
    """
    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(db: AsyncSession, *args, **kwargs):
            try:
                return await func(db, *args, **kwargs)
            except STORE_ERRORS:
                log.exception("Store access failed in %s; returning fallback", func.__qualname__)
                await _rollback_quietly(db)
                return default()
        return wrapper
    return decorator
