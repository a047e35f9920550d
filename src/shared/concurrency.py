"""Optimistic-concurrency retry for read-modify-write commands."""

import threading

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

logger = structlog.get_logger(__name__)

DEFAULT_ATTEMPTS = 3

_LOCK_STRIPES = 64
_locks = [threading.Lock() for _ in range(_LOCK_STRIPES)]


def lock_for(key: str) -> threading.Lock:
    """Process-wide lock shared by every caller passing the same ``key``."""
    return _locks[hash(key) % _LOCK_STRIPES]


def process_with_retry(command, attempts: int = DEFAULT_ATTEMPTS):
    """Process ``command`` synchronously, re-running it on version conflicts.

    A conflict means another request persisted the same aggregate between our
    load and our save. The handler reloads fresh state on every attempt, so
    replaying the command applies its delta on top of the winner's write.
    """
    for attempt in range(1, attempts + 1):
        try:
            return current_domain.process(command, asynchronous=False)
        except ExpectedVersionError:
            if attempt == attempts:
                logger.warning(
                    "Giving up after version conflicts",
                    command=type(command).__name__,
                    attempts=attempts,
                )
                raise
            logger.info(
                "Version conflict, retrying",
                command=type(command).__name__,
                attempt=attempt,
            )
