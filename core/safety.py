"""
Transaction safety helpers shared by the inventory and order apps.

Every mutating core operation opens its own transaction and takes row locks
with select_for_update(). When the database reports a write collision
(deadlock, serialization failure, or SQLite's "database is locked"), the
outermost transaction boundary retries the whole operation a bounded number
of times. Nested calls never retry locally: the collision is re-raised as
PersistenceConflict so the outer boundary can start over from a clean
transaction.
"""

from django.conf import settings
from django.db import OperationalError, transaction
from functools import wraps
import logging
import time
from typing import Callable

from core.exceptions import PersistenceConflict

logger = logging.getLogger(__name__)


def retry_on_conflict(max_attempts: int = None, base_delay: float = None, using: str = None):
    """
    Decorator to retry an operation when a concurrent write collides with it.

    Args:
        max_attempts: Total attempts including the first one
                      (defaults to settings.PERSISTENCE_CONFLICT_MAX_ATTEMPTS)
        base_delay: Initial delay between attempts in seconds, doubled on every retry
                    (defaults to settings.PERSISTENCE_CONFLICT_RETRY_DELAY)
        using: Database alias whose transaction state decides whether to retry

    Raises:
        PersistenceConflict once the attempts are exhausted, or immediately when
        called inside an outer atomic block.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            attempts = max_attempts or settings.PERSISTENCE_CONFLICT_MAX_ATTEMPTS
            delay = settings.PERSISTENCE_CONFLICT_RETRY_DELAY if base_delay is None else base_delay
            nested = transaction.get_connection(using).in_atomic_block

            for attempt in range(1, attempts + 1):
                try:
                    return func(*args, **kwargs)
                except (OperationalError, PersistenceConflict) as e:
                    if nested or attempt >= attempts:
                        logger.error(
                            f"Persistence conflict in {func.__name__} after {attempt} attempt(s): {e}",
                            extra={'event': 'persistence.conflict', 'operation': func.__name__},
                        )
                        if isinstance(e, PersistenceConflict):
                            raise
                        raise PersistenceConflict(str(e), operation=func.__name__) from e

                    wait = delay * (2 ** (attempt - 1))
                    logger.warning(
                        f"Retry {attempt}/{attempts - 1} for {func.__name__} "
                        f"after {wait:.2f}s: {e}",
                        extra={'event': 'persistence.retry', 'operation': func.__name__},
                    )
                    if wait:
                        time.sleep(wait)

        return wrapper
    return decorator
