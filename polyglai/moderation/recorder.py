"""Usage recorder: detected violations → profanity_records.

The validation gate must return without waiting on the database, so
records are handed off to an asyncio.Queue and written by a single
background worker. Writes are attempted once; failures are logged and
dropped. Records still queued when the process dies are lost.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from polyglai.types import UsageRecord

if TYPE_CHECKING:
    from polyglai.db.supabase_client import ModerationStore

logger = logging.getLogger(__name__)


class UsageRecorder:
    """Fire-and-forget writer for UsageRecord rows."""

    def __init__(self, store: "ModerationStore", max_pending: int = 1000):
        self._store = store
        self._queue: asyncio.Queue[UsageRecord] = asyncio.Queue(maxsize=max_pending)
        self._worker: asyncio.Task | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    # --- Handoff (non-blocking) ---

    def dispatch(
        self,
        *,
        text: str,
        context: str | None = None,
        language: str | None = None,
        detected_words: list[str] | None = None,
        user_id: str | None = None,
    ) -> bool:
        """Queues a record for the background worker and returns immediately.

        Returns False when nothing was queued (no user, or queue full).
        Safe to call from sync code; from a foreign thread the record is
        handed to the worker's loop.
        """
        if not user_id:
            logger.info("No authenticated user, skipping profanity recording")
            return False

        record = UsageRecord.create(
            user_id=user_id,
            text=text,
            context=context,
            language=language,
            detected_words=detected_words,
        )

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if self._loop is not None and running is not self._loop:
            self._loop.call_soon_threadsafe(self._enqueue, record)
            return True
        return self._enqueue(record)

    def _enqueue(self, record: UsageRecord) -> bool:
        try:
            self._queue.put_nowait(record)
        except asyncio.QueueFull:
            logger.warning(
                "Recorder queue full (%d), dropping record for user %s",
                self._queue.maxsize,
                record.user_id,
            )
            return False
        return True

    # --- Direct write ---

    async def record_profanity_usage(
        self,
        *,
        text: str,
        context: str | None = None,
        language: str | None = None,
        detected_words: list[str] | None = None,
        user_id: str | None = None,
    ) -> None:
        """Writes one record now. Never raises."""
        if not user_id:
            logger.info("No authenticated user, skipping profanity recording")
            return
        record = UsageRecord.create(
            user_id=user_id,
            text=text,
            context=context,
            language=language,
            detected_words=detected_words,
        )
        await self._write(record)

    async def _write(self, record: UsageRecord) -> None:
        try:
            await self._store.insert_record(record)
            logger.info(
                "Recorded profanity usage: %d words detected in %s",
                len(record.detected_words),
                record.context,
                extra={
                    "user_id": record.user_id,
                    "context": record.context,
                    "language": record.language,
                    "detected_count": len(record.detected_words),
                },
            )
        except Exception:
            logger.exception("Error recording profanity usage for user %s", record.user_id)

    # --- Worker lifecycle ---

    async def start(self) -> None:
        if self.is_running:
            return
        self._loop = asyncio.get_running_loop()
        self._worker = asyncio.create_task(self._run(), name="usage-recorder")
        logger.info("Usage recorder started")

    async def stop(self, timeout: float = 5.0) -> None:
        """Flushes queued records (up to ``timeout``) and stops the worker."""
        if self._worker is None:
            return

        try:
            await asyncio.wait_for(self._queue.join(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Usage recorder stopped with %d records pending", self.pending)

        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        self._loop = None
        logger.info("Usage recorder stopped")

    async def _run(self) -> None:
        while True:
            record = await self._queue.get()
            try:
                await self._write(record)
            finally:
                self._queue.task_done()
