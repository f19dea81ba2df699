"""Periodic removal of stale authentication tokens."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app.services.auth import get_auth_service

logger = logging.getLogger("hoaxify")


class TokenCleanupTask:
    """Deletes tokens unused for longer than ``max_age`` every ``interval_seconds``.

    Owned by the application lifespan: ``start()`` at boot, ``stop()`` at
    shutdown. Failures are logged and the loop keeps going.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        interval_seconds: float,
        max_age: timedelta = timedelta(days=7),
    ) -> None:
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.max_age = max_age
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> int:
        """Delete stale tokens now. Returns the number removed."""
        db = self.session_factory()
        try:
            cutoff = datetime.utcnow() - self.max_age
            return get_auth_service().delete_stale_tokens(db, cutoff)
        finally:
            db.close()

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                deleted = await asyncio.to_thread(self.run_once)
                if deleted:
                    logger.info("Token cleanup removed %d stale tokens", deleted)
                else:
                    logger.debug("Token cleanup: no stale tokens")
            except Exception as e:
                logger.error("Error in scheduled token cleanup: %s", e)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("Started token cleanup task (every %ss)", self.interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Token cleanup task stopped")
