import asyncio
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Dict, List, Optional

RetryCallback = Callable[[str], Awaitable[None]]
RetryGuard = Callable[[str], Awaitable[bool]]


class RetryScheduler:
    """
    One-shot, cancellable retry timers keyed by bookmark URI.

    At most one retry is outstanding per URI: scheduling again replaces the
    pending task. A task removes itself before invoking its callback, so the
    callback may schedule the next retry for the same URI.
    """

    def __init__(self):
        self._retry_tasks: Dict[str, asyncio.Task] = {}
        self._due_at: Dict[str, datetime] = {}
        self.scheduled_total = 0

        logging.debug("RetryScheduler initialized")

    def schedule(
        self,
        uri: str,
        delay_seconds: float,
        on_fire: RetryCallback,
        should_fire: Optional[RetryGuard] = None,
    ) -> asyncio.Task:
        """Arm a retry for ``uri``; replaces any pending retry for it."""
        self._cancel_existing(uri)

        retry_task = asyncio.create_task(
            self._execute_retry_task(uri, delay_seconds, on_fire, should_fire),
            name=f"retry:{uri}",
        )
        self._retry_tasks[uri] = retry_task
        self._due_at[uri] = datetime.now() + timedelta(seconds=delay_seconds)
        self.scheduled_total += 1

        logging.info(f"Scheduled mount retry for {uri} in {delay_seconds}s")
        return retry_task

    def cancel(self, uri: str) -> bool:
        """Cancel the pending retry for ``uri``. Safe when none exists."""
        cancelled = self._cancel_existing(uri)
        if cancelled:
            logging.debug(f"Cancelled retry for {uri}")
        return cancelled

    def cancel_all(self) -> int:
        """Cancel all pending retries."""
        cancelled_count = 0
        for uri in list(self._retry_tasks):
            if self._cancel_existing(uri):
                cancelled_count += 1
        if cancelled_count:
            logging.info(f"Cancelled {cancelled_count} pending mount retries")
        return cancelled_count

    def has_pending(self, uri: str) -> bool:
        return uri in self._retry_tasks

    def pending_uris(self) -> List[str]:
        return list(self._retry_tasks)

    def pending_tasks(self) -> List[asyncio.Task]:
        return list(self._retry_tasks.values())

    def due_at(self, uri: str) -> Optional[datetime]:
        return self._due_at.get(uri)

    def _cancel_existing(self, uri: str) -> bool:
        task = self._retry_tasks.pop(uri, None)
        self._due_at.pop(uri, None)
        if task is None:
            return False
        # A firing retry may reschedule its own URI; it is already off the books then
        if task is not asyncio.current_task() and not task.done():
            task.cancel()
        return True

    async def _execute_retry_task(
        self,
        uri: str,
        delay_seconds: float,
        on_fire: RetryCallback,
        should_fire: Optional[RetryGuard],
    ) -> None:
        try:
            await asyncio.sleep(delay_seconds)
        except asyncio.CancelledError:
            logging.debug(f"Retry task for {uri} cancelled before firing")
            raise

        # Fire exactly once: leave the books before running the callback
        if self._retry_tasks.get(uri) is asyncio.current_task():
            self._retry_tasks.pop(uri, None)
            self._due_at.pop(uri, None)

        try:
            if should_fire is not None and not await should_fire(uri):
                logging.debug(f"Retry for {uri} skipped - no longer needed")
                return
            logging.info(f"Retry executing for {uri}")
            await on_fire(uri)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logging.error(f"Error in retry task for {uri}: {e}", exc_info=True)
