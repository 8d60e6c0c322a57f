import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional, Set

from ..config import Settings
from ..core.events.bookmark_events import (
    BookmarkStateChangedEvent,
    BookmarksReloadedEvent,
    ReconcileCompletedEvent,
    StatusSummaryChangedEvent,
)
from ..core.events.event_bus import DomainEventBus
from ..core.exceptions import (
    TerminalMountFailure,
    TransientMountFailure,
    UnknownBookmarkError,
    UnmountFailure,
)
from ..models import (
    Bookmark,
    BookmarkState,
    BulkActionResult,
    FailureRecord,
    MountRecord,
    MountState,
    NotificationSeverity,
    OverallStatus,
    ReconcileSummary,
    StatusSummary,
)
from .bookmark_store import BookmarkStore
from .network_mount.mount_observer import MountObserver
from .network_mount.mount_service import NetworkMountService
from .notification_service import NotificationService
from .retry_scheduler import RetryScheduler
from .symlink_manager import SymlinkManager


class MountLifecycleController:
    """
    Keeps network bookmarks mounted and their symlinks in place.

    Mount state is never stored: every decision re-queries the OS through the
    MountObserver and combines it with per-URI failure records, which live
    here (not on the reloaded Bookmark objects) so a reload does not reset
    them. All work runs on one event loop. Mount calls are dispatched as tasks
    and guarded by an in-flight set so a URI has at most one outstanding
    mount request. Completion code always re-resolves the bookmark by URI.
    """

    def __init__(
        self,
        settings: Settings,
        bookmark_store: BookmarkStore,
        mount_observer: MountObserver,
        mount_service: NetworkMountService,
        symlink_manager: SymlinkManager,
        retry_scheduler: RetryScheduler,
        notifier: NotificationService,
        event_bus: DomainEventBus,
    ):
        self._settings = settings
        self._store = bookmark_store
        self._observer = mount_observer
        self._mount_service = mount_service
        self._symlinks = symlink_manager
        self._retries = retry_scheduler
        self._notifier = notifier
        self._event_bus = event_bus

        self._bookmarks: List[Bookmark] = []
        self._failures: Dict[str, FailureRecord] = {}
        self._mounting: Set[str] = set()
        self._operations: Set[asyncio.Task] = set()
        self._timers: Set[asyncio.Task] = set()
        self._symlink_errors: Set[str] = set()
        self._periodic_task: Optional[asyncio.Task] = None

        self._is_running = False
        self._destroyed = False
        self._startup_in_progress = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def bookmarks(self) -> List[Bookmark]:
        return list(self._bookmarks)

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def startup_in_progress(self) -> bool:
        return self._startup_in_progress

    @property
    def settings(self) -> Settings:
        return self._settings

    async def start(self) -> None:
        """Load bookmarks, arm the periodic check and the delayed startup mount pass."""
        if self._is_running:
            logging.warning("Mount controller already running")
            return
        if self._destroyed:
            raise RuntimeError("Mount controller has been destroyed")

        self._is_running = True
        await self.reload_bookmarks()
        self._start_periodic_check()

        self._startup_in_progress = True
        self._schedule_timer(self._settings.startup_delay_seconds, self._run_startup_check, "startup-check")
        self._schedule_timer(self._settings.startup_settle_seconds, self._finish_startup, "startup-settle")
        logging.info(
            f"Mount controller started - {len(self._bookmarks)} bookmarks, "
            f"startup mount in {self._settings.startup_delay_seconds}s"
        )

    async def destroy(self) -> None:
        """
        Stop timers, cancel retries and remove every managed symlink.

        Each step runs even if an earlier one fails. In-flight OS calls are
        left to finish; their completion code sees the controller is gone.
        """
        if self._destroyed:
            return
        self._destroyed = True
        self._is_running = False
        cancelled: List[asyncio.Task] = []

        try:
            if self._periodic_task:
                self._periodic_task.cancel()
                cancelled.append(self._periodic_task)
                self._periodic_task = None
        except Exception as e:
            logging.error(f"Error stopping periodic check: {e}")

        try:
            for timer in list(self._timers):
                timer.cancel()
                cancelled.append(timer)
            self._timers.clear()
        except Exception as e:
            logging.error(f"Error cancelling timers: {e}")

        try:
            cancelled.extend(self._retries.pending_tasks())
            self._retries.cancel_all()
        except Exception as e:
            logging.error(f"Error cancelling retries: {e}")

        try:
            removed = await self._symlinks.remove_all(self._bookmarks)
            logging.info(f"Removed {removed} managed symlinks")
        except Exception as e:
            logging.error(f"Error removing symlinks: {e}")

        if cancelled:
            await asyncio.gather(*cancelled, return_exceptions=True)

        self._startup_in_progress = False
        logging.info("Mount controller destroyed")

    async def wait_idle(self, include_retries: bool = True) -> None:
        """Wait until no mount, unmount, grace timer (or retry) task is outstanding."""
        while True:
            tasks = [t for t in (*self._operations, *self._timers) if not t.done()]
            if include_retries:
                tasks.extend(t for t in self._retries.pending_tasks() if not t.done())
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)

    def apply_settings(self, settings: Settings) -> None:
        """Swap in reloaded settings; re-arm the periodic check if its interval changed."""
        interval_changed = settings.check_interval != self._settings.check_interval
        self._settings = settings
        self._notifier.update_settings(settings)
        self._mount_service.update_settings(settings)
        self._symlinks.base_dir = settings.mount_base_path
        self._store.update_paths(settings.bookmarks_path, settings.bookmark_settings_path)

        if interval_changed and self._is_running:
            logging.info(f"Check interval changed to {settings.check_interval}min - re-arming periodic check")
            self._start_periodic_check()

    def _start_periodic_check(self) -> None:
        if self._periodic_task:
            self._periodic_task.cancel()
            self._periodic_task = None
        self._periodic_task = asyncio.create_task(self._periodic_loop(), name="periodic-check")

    async def _periodic_loop(self) -> None:
        interval = self._settings.check_interval * 60
        logging.info(f"Periodic mount check armed - every {self._settings.check_interval}min")
        try:
            while not self._destroyed:
                await asyncio.sleep(interval)
                try:
                    await self.reconcile()
                except Exception as e:
                    logging.error(f"Error in periodic mount check: {e}", exc_info=True)
        except asyncio.CancelledError:
            logging.debug("Periodic mount check cancelled")

    def _schedule_timer(self, delay: float, callback: Callable[[], Awaitable[None]], name: str) -> None:
        timer = asyncio.create_task(self._run_timer(delay, callback, name), name=name)
        self._timers.add(timer)
        timer.add_done_callback(self._timers.discard)

    async def _run_timer(self, delay: float, callback: Callable[[], Awaitable[None]], name: str) -> None:
        await asyncio.sleep(delay)
        if self._destroyed:
            return
        try:
            await callback()
        except Exception as e:
            logging.error(f"Error in timer {name}: {e}", exc_info=True)

    async def _run_startup_check(self) -> None:
        await self.reconcile(manual=False, is_startup=True)

    async def _finish_startup(self) -> None:
        self._startup_in_progress = False
        await self.publish_all_states()

    def _track(self, coro: Awaitable, name: str) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._operations.add(task)
        task.add_done_callback(self._operations.discard)
        return task

    # ------------------------------------------------------------------
    # Bookmarks
    # ------------------------------------------------------------------

    async def reload_bookmarks(self) -> List[Bookmark]:
        bookmarks = await self._store.load()
        persisted, diagnostic = await self._store.load_persisted()
        self._store.apply_persisted_settings(bookmarks, persisted)

        current = {bookmark.uri for bookmark in bookmarks}
        for uri in list(self._failures):
            if uri not in current:
                self._failures.pop(uri, None)
                self._retries.cancel(uri)
        for uri in self._symlinks.tracked_uris():
            if uri not in current:
                await self._symlinks.remove_tracked(uri)
        for bookmark in bookmarks:
            self._sync_failure_fields(bookmark)

        self._bookmarks = bookmarks
        await self._event_bus.publish(
            BookmarksReloadedEvent(count=len(bookmarks), diagnostic=str(diagnostic) if diagnostic else None)
        )
        return bookmarks

    async def reload_bookmark_settings(self) -> None:
        """Re-apply the persisted settings after an external change to the settings store."""
        persisted, _ = await self._store.load_persisted()
        self._store.apply_persisted_settings(self._bookmarks, persisted)
        for bookmark in self._bookmarks:
            if not bookmark.enabled:
                self._retries.cancel(bookmark.uri)
        await self.publish_all_states()

    def get_bookmark(self, uri: str) -> Optional[Bookmark]:
        for bookmark in self._bookmarks:
            if bookmark.uri == uri:
                return bookmark
        return None

    def _require_bookmark(self, uri: str) -> Bookmark:
        bookmark = self.get_bookmark(uri)
        if bookmark is None:
            raise UnknownBookmarkError(uri)
        return bookmark

    def get_failure(self, uri: str) -> FailureRecord:
        return self._failures.setdefault(uri, FailureRecord())

    def _sync_failure_fields(self, bookmark: Bookmark) -> None:
        failure = self._failures.get(bookmark.uri)
        if failure is None:
            return
        bookmark.fail_count = failure.fail_count
        bookmark.last_attempt = failure.last_attempt

    def _retries_exhausted(self, uri: str) -> bool:
        failure = self._failures.get(uri)
        return failure is not None and failure.fail_count > self._settings.retry_attempts

    def _reset_failure(self, uri: str) -> None:
        self._failures.pop(uri, None)
        bookmark = self.get_bookmark(uri)
        if bookmark is not None:
            bookmark.fail_count = 0

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    async def reconcile(self, manual: bool = False, is_startup: bool = False) -> ReconcileSummary:
        """
        Compare the bookmark list with live mount state and dispatch fixes.

        Enabled and unmounted bookmarks get a mount request; mounted ones get
        their symlink checked. Symlinks are maintained for mounted disabled
        bookmarks too. Automatic passes leave bookmarks with a pending retry
        or exhausted retries alone.
        """
        summary = ReconcileSummary(manual=manual, startup=is_startup)
        await self.reload_bookmarks()

        for bookmark in list(self._bookmarks):
            if self._destroyed:
                break
            record = await self._observer.observe(bookmark.uri)
            if self._destroyed:
                break

            if bookmark.enabled:
                summary.checked += 1
                if record.mounted:
                    summary.already_mounted += 1
                    self._retries.cancel(bookmark.uri)
                    failure = self._failures.get(bookmark.uri)
                    if failure is not None and failure.fail_count:
                        # Mounted behind our back; that ends any failure streak
                        self._reset_failure(bookmark.uri)
                    if bookmark.create_symlink:
                        await self._ensure_symlink(bookmark, record.mount_path)
                        summary.symlinks_refreshed += 1
                    continue

                if not manual and self._retries.has_pending(bookmark.uri):
                    logging.debug(f"Retry pending for {bookmark.name} - leaving it to the retry")
                    continue
                if not manual and self._retries_exhausted(bookmark.uri):
                    logging.debug(f"Retries exhausted for {bookmark.name} - waiting for manual action")
                    continue
                if self._dispatch_mount(bookmark.uri, is_startup=is_startup):
                    summary.mount_requests += 1

            elif record.mounted and bookmark.create_symlink:
                await self._ensure_symlink(bookmark, record.mount_path)
                summary.symlinks_refreshed += 1

        if manual:
            await self._notifier.notify(
                "Mount Check",
                f"Checking {summary.checked} locations, {summary.already_mounted} already mounted",
            )

        logging.info(
            f"Reconcile pass: {summary.checked} enabled, {summary.already_mounted} mounted, "
            f"{summary.mount_requests} mount requests",
            extra={"operation": "reconcile", "manual": manual, "startup": is_startup},
        )
        await self._event_bus.publish(ReconcileCompletedEvent(summary=summary))
        await self.publish_summary()
        return summary

    async def check_all(self) -> ReconcileSummary:
        return await self.reconcile(manual=True)

    def _dispatch_mount(self, uri: str, is_retry: bool = False, is_startup: bool = False) -> bool:
        """Issue a mount request as a task unless one is already outstanding for ``uri``."""
        if uri in self._mounting:
            logging.debug(f"Mount already in flight for {uri}")
            return False

        # Claim before the task runs so a second dispatch in the same tick is rejected
        self._mounting.add(uri)
        self._track(self._run_mount(uri, is_retry, is_startup), f"mount:{uri}")
        return True

    # ------------------------------------------------------------------
    # Mounting
    # ------------------------------------------------------------------

    async def mount_one(self, uri: str, is_retry: bool = False, is_startup: bool = False) -> bool:
        """
        Mount one bookmark. Already mounted counts as success.

        Success resets the failure count and schedules symlink creation after
        a short grace delay. Failure increments it and either schedules a
        retry or, past the retry limit, reports a terminal failure.
        """
        if uri in self._mounting:
            logging.debug(f"Mount already in flight for {uri}")
            return False
        self._mounting.add(uri)
        return await self._run_mount(uri, is_retry, is_startup)

    async def _run_mount(self, uri: str, is_retry: bool, is_startup: bool) -> bool:
        # The caller has claimed ``uri`` in self._mounting; the claim ends with the OS call
        error: Optional[TransientMountFailure] = None
        try:
            if self.get_bookmark(uri) is None:
                logging.warning(f"Mount requested for unknown bookmark {uri}")
                return False

            record = await self._observer.observe(uri)
            if not record.mounted and not self._destroyed:
                await self.publish_state(uri, record)
                try:
                    await self._mount_service.mount(uri)
                except TransientMountFailure as e:
                    error = e
        finally:
            self._mounting.discard(uri)

        if self._destroyed:
            logging.debug(f"Mount of {uri} finished after shutdown - ignoring result")
            return False

        if record.mounted:
            await self._handle_already_mounted(uri, record, is_retry, is_startup)
            return True

        if error is not None:
            await self._handle_mount_failure(uri, error)
            return False

        self._handle_mount_success(uri, is_startup)
        return True

    async def _handle_already_mounted(
        self, uri: str, record: MountRecord, is_retry: bool, is_startup: bool
    ) -> None:
        self._retries.cancel(uri)
        self._reset_failure(uri)
        bookmark = self.get_bookmark(uri)
        if bookmark is None:
            return

        await self._ensure_symlink(bookmark, record.mount_path)
        if not is_retry and not is_startup:
            await self._notifier.notify("Already Mounted", bookmark.name)
        await self.publish_state(uri, record)

    def _handle_mount_success(self, uri: str, is_startup: bool) -> None:
        now = datetime.now()
        self._failures[uri] = FailureRecord(fail_count=0, last_attempt=now)
        self._retries.cancel(uri)

        bookmark = self.get_bookmark(uri)
        if bookmark is not None:
            bookmark.fail_count = 0
            bookmark.last_attempt = now
            logging.info(f"Successfully mounted: {bookmark.name}", extra={"operation": "mount", "uri": uri})

        self._schedule_timer(
            self._settings.symlink_grace_seconds,
            lambda: self._complete_mount(uri, is_startup),
            f"symlink:{uri}",
        )

    async def _complete_mount(self, uri: str, is_startup: bool) -> None:
        bookmark = self.get_bookmark(uri)
        if bookmark is None:
            return

        record = await self._observer.observe(uri)
        symlink_created = False
        if record.mounted and bookmark.create_symlink:
            symlink_created = await self._ensure_symlink(bookmark, record.mount_path)

        if not record.mounted:
            logging.warning(f"{bookmark.name} was no longer mounted after the grace delay")
        elif not is_startup:
            message = bookmark.name
            if bookmark.create_symlink and symlink_created:
                message = f"{bookmark.name} → {self._symlinks.desired_path(bookmark)}"
            await self._notifier.notify("Mounted Successfully", message, NotificationSeverity.SUCCESS)

        await self.publish_state(uri, record)
        await self.publish_summary()

    async def _handle_mount_failure(self, uri: str, error: TransientMountFailure) -> None:
        failure = self.get_failure(uri)
        failure.fail_count += 1
        failure.last_attempt = datetime.now()

        bookmark = self.get_bookmark(uri)
        if bookmark is None:
            logging.warning(f"Mount of {uri} failed but the bookmark is gone - not retrying")
            return
        self._sync_failure_fields(bookmark)

        limit = self._settings.retry_attempts
        logging.error(
            f"Failed to mount {bookmark.name}: {error.message}",
            extra={"operation": "mount_failure", "uri": uri, "fail_count": failure.fail_count},
        )

        if not bookmark.enabled:
            # Disabled while the mount was in flight
            self._retries.cancel(uri)
        elif failure.fail_count <= limit:
            self._retries.schedule(uri, self._settings.retry_delay, self._on_retry_fire, self._should_retry)
            await self._notifier.notify(
                "Mount Failed - Retrying",
                f"{bookmark.name} (attempt {failure.fail_count}/{limit})",
                NotificationSeverity.ERROR,
            )
        else:
            terminal = TerminalMountFailure(uri, failure.fail_count, error.message)
            logging.error(str(terminal), extra={"operation": "mount_exhausted", "uri": uri})
            await self._notifier.notify(
                "Mount Failed", f"{bookmark.name}: {error.message}", NotificationSeverity.ERROR
            )

        await self.publish_state(uri)

    async def _should_retry(self, uri: str) -> bool:
        if self._destroyed:
            return False
        bookmark = self.get_bookmark(uri)
        if bookmark is None or not bookmark.enabled:
            return False
        return not await self._observer.is_mounted(uri)

    async def _on_retry_fire(self, uri: str) -> None:
        self._dispatch_mount(uri, is_retry=True, is_startup=self._startup_in_progress)

    async def _ensure_symlink(self, bookmark: Bookmark, mount_path: Optional[str]) -> bool:
        if not bookmark.create_symlink:
            return True

        if await self._symlinks.ensure(bookmark, mount_path):
            self._symlink_errors.discard(bookmark.uri)
            return True

        # Mount itself still counts as successful; report the link problem once
        if bookmark.uri not in self._symlink_errors:
            self._symlink_errors.add(bookmark.uri)
            await self._notifier.notify(
                "Symlink Failed",
                f"{bookmark.name}: could not create {self._symlinks.desired_path(bookmark)}",
                NotificationSeverity.ERROR,
            )
        return False

    # ------------------------------------------------------------------
    # Unmounting
    # ------------------------------------------------------------------

    async def unmount_one(self, uri: str) -> bool:
        """
        Unmount one bookmark, removing its symlink once the unmount succeeded.

        When the share is not mounted, stale links are still cleaned up.
        """
        bookmark = self.get_bookmark(uri)
        if bookmark is None:
            logging.warning(f"Unmount requested for unknown bookmark {uri}")
            return False

        record = await self._observer.observe(uri)
        if not record.mounted:
            if bookmark.create_symlink or self._symlinks.tracked_path(uri):
                await self._symlinks.remove(bookmark)
            await self._notifier.notify("Not Mounted", bookmark.name)
            await self.publish_state(uri, record)
            return False

        try:
            await self._mount_service.unmount(uri)
        except UnmountFailure as e:
            logging.error(f"Failed to unmount {bookmark.name}: {e.message}")
            await self._notifier.notify(
                "Unmount Failed", f"{bookmark.name}: {e.message}", NotificationSeverity.ERROR
            )
            await self.publish_state(uri)
            return False

        if self._destroyed:
            return True

        bookmark = self.get_bookmark(uri)
        if bookmark is None:
            return True
        if bookmark.create_symlink or self._symlinks.tracked_path(uri):
            await self._symlinks.remove(bookmark)

        logging.info(f"Successfully unmounted: {bookmark.name}", extra={"operation": "unmount", "uri": uri})
        await self._notifier.notify("Unmounted", bookmark.name, NotificationSeverity.SUCCESS)
        await self.publish_state(uri)
        await self.publish_summary()
        return True

    # ------------------------------------------------------------------
    # User commands
    # ------------------------------------------------------------------

    def mount_now(self, uri: str) -> bool:
        """Manual mount: renews the retry budget and dispatches a mount request."""
        self._require_bookmark(uri)
        self._retries.cancel(uri)
        self._reset_failure(uri)
        return self._dispatch_mount(uri)

    def request_unmount(self, uri: str) -> asyncio.Task:
        self._require_bookmark(uri)
        return self._track(self.unmount_one(uri), f"unmount:{uri}")

    async def mount_all_enabled(self) -> BulkActionResult:
        count = 0
        for bookmark in list(self._bookmarks):
            if not bookmark.enabled:
                continue
            if await self._observer.is_mounted(bookmark.uri):
                continue
            self._retries.cancel(bookmark.uri)
            self._reset_failure(bookmark.uri)
            if self._dispatch_mount(bookmark.uri):
                count += 1

        await self._notifier.notify("Mounting All", f"Attempting to mount {count} locations")
        return BulkActionResult(action="mount_all", attempted=count)

    async def unmount_all(self) -> BulkActionResult:
        count = 0
        for bookmark in list(self._bookmarks):
            if await self._observer.is_mounted(bookmark.uri):
                self._track(self.unmount_one(bookmark.uri), f"unmount:{bookmark.uri}")
                count += 1

        await self._notifier.notify("Unmounting All", f"Unmounting {count} locations")
        return BulkActionResult(action="unmount_all", attempted=count)

    async def set_enabled(self, uri: str, enabled: bool) -> Bookmark:
        bookmark = self._require_bookmark(uri)
        bookmark.enabled = enabled
        if not enabled:
            self._retries.cancel(uri)

        await self._store.persist(self._bookmarks)
        logging.info(f"Auto mount {'enabled' if enabled else 'disabled'} for {bookmark.name}")
        await self.publish_state(uri)
        await self.publish_summary()
        return bookmark

    async def set_symlink(
        self, uri: str, create_symlink: Optional[bool] = None, symlink_path: Optional[str] = None
    ) -> Bookmark:
        """Change symlink preferences; the old link goes away before the new one is made."""
        bookmark = self._require_bookmark(uri)
        new_create = bookmark.create_symlink if create_symlink is None else create_symlink
        new_path = bookmark.symlink_path if symlink_path is None else symlink_path.strip()

        if bookmark.create_symlink and (not new_create or new_path != bookmark.symlink_path):
            await self._symlinks.remove(bookmark)
            self._symlink_errors.discard(uri)

        bookmark.create_symlink = new_create
        bookmark.symlink_path = new_path
        await self._store.persist(self._bookmarks)

        record = await self._observer.observe(uri)
        if record.mounted and bookmark.create_symlink:
            await self._ensure_symlink(bookmark, record.mount_path)
        await self.publish_state(uri, record)
        return bookmark

    # ------------------------------------------------------------------
    # State for presenters
    # ------------------------------------------------------------------

    def _state_for(self, bookmark: Bookmark, record: MountRecord) -> BookmarkState:
        failure = self._failures.get(bookmark.uri) or FailureRecord()
        if bookmark.uri in self._mounting:
            state = MountState.MOUNTING
        elif record.mounted:
            state = MountState.MOUNTED
        elif self._retries.has_pending(bookmark.uri):
            state = MountState.RETRY_SCHEDULED
        elif failure.fail_count > 0:
            state = MountState.FAILED
        else:
            state = MountState.UNMOUNTED

        link_path = self._symlinks.tracked_path(bookmark.uri)
        if link_path is None and bookmark.create_symlink and record.mounted:
            link_path = str(self._symlinks.desired_path(bookmark))

        return BookmarkState(
            uri=bookmark.uri,
            name=bookmark.name,
            enabled=bookmark.enabled,
            create_symlink=bookmark.create_symlink,
            symlink_path=bookmark.symlink_path,
            state=state,
            mounted=record.mounted,
            mount_path=record.mount_path,
            link_path=link_path,
            fail_count=failure.fail_count,
            retry_attempts=self._settings.retry_attempts,
            retry_pending=self._retries.has_pending(bookmark.uri),
            last_attempt=failure.last_attempt,
        )

    async def get_bookmark_state(self, uri: str, record: Optional[MountRecord] = None) -> Optional[BookmarkState]:
        bookmark = self.get_bookmark(uri)
        if bookmark is None:
            return None
        if record is None:
            record = await self._observer.observe(uri)
        return self._state_for(bookmark, record)

    async def get_bookmark_states(self) -> List[BookmarkState]:
        states = []
        for bookmark in list(self._bookmarks):
            record = await self._observer.observe(bookmark.uri)
            states.append(self._state_for(bookmark, record))
        return states

    async def get_status_summary(self) -> StatusSummary:
        total = len(self._bookmarks)
        enabled = sum(1 for bookmark in self._bookmarks if bookmark.enabled)
        mounted = 0
        for bookmark in list(self._bookmarks):
            if await self._observer.is_mounted(bookmark.uri):
                mounted += 1

        if total == 0:
            overall = OverallStatus.IDLE
        elif mounted >= enabled:
            overall = OverallStatus.ALL_MOUNTED
        elif mounted > 0:
            overall = OverallStatus.PARTIAL
        else:
            overall = OverallStatus.NONE

        return StatusSummary(
            total=total,
            mounted=mounted,
            enabled=enabled,
            check_interval=self._settings.check_interval,
            overall=overall,
        )

    async def publish_state(self, uri: str, record: Optional[MountRecord] = None) -> None:
        state = await self.get_bookmark_state(uri, record)
        if state is None:
            return
        await self._event_bus.publish(BookmarkStateChangedEvent(state=state))

    async def publish_summary(self) -> None:
        await self._event_bus.publish(StatusSummaryChangedEvent(summary=await self.get_status_summary()))

    async def publish_all_states(self) -> None:
        for state in await self.get_bookmark_states():
            await self._event_bus.publish(BookmarkStateChangedEvent(state=state))
        await self.publish_summary()
