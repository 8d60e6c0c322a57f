from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NotificationSeverity(str, Enum):
    """Severity of a user-facing notification. Gating flags key off ERROR vs the rest."""

    INFO = "INFO"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class MountState(str, Enum):
    """
    Per-bookmark lifecycle state, inferred on demand - never stored.

    Workflow: Unmounted -> Mounting -> Mounted
    Failure:  Mounting -> RetryScheduled -> Mounting ... -> Failed (retries exhausted)
    """

    UNMOUNTED = "Unmounted"
    MOUNTING = "Mounting"  # OS mount call in flight
    MOUNTED = "Mounted"
    RETRY_SCHEDULED = "RetryScheduled"  # failed, retry task pending
    FAILED = "Failed"  # failed, no automatic retry left


class OverallStatus(str, Enum):
    """Aggregate indicator shown next to the status line."""

    IDLE = "IDLE"  # no network bookmarks at all
    ALL_MOUNTED = "ALL_MOUNTED"
    PARTIAL = "PARTIAL"
    NONE = "NONE"


class Bookmark(BaseModel):
    """
    A remote location from the bookmarks file plus its automount preferences.

    ``uri`` is the identity. ``enabled``/``create_symlink``/``symlink_path`` are
    user configuration (persisted); ``fail_count``/``last_attempt`` are runtime
    failure tracking (never persisted).
    """

    model_config = ConfigDict(validate_assignment=True)

    uri: str = Field(..., description="Remote resource locator, e.g. smb://server/share")
    name: str = Field(..., description="Display name from the bookmarks file or derived from the URI")
    enabled: bool = Field(default=True, description="Whether reconciliation auto-mounts this bookmark")
    create_symlink: bool = Field(default=False, description="Maintain a stable symlink to the mount")
    symlink_path: str = Field(default="", description="Optional leaf name override for the symlink")
    fail_count: int = Field(default=0, ge=0, description="Consecutive failed mount attempts")
    last_attempt: Optional[datetime] = Field(default=None, description="Most recent mount attempt")


class BookmarkSettings(BaseModel):
    """User-configurable projection of a bookmark, as stored in the settings JSON."""

    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = True
    create_symlink: bool = Field(default=False, alias="createSymlink")
    symlink_path: str = Field(default="", alias="symlinkPath")

    @field_validator("enabled", mode="before")
    @classmethod
    def _missing_enabled_means_true(cls, value: Any) -> Any:
        return True if value is None else value

    @field_validator("create_symlink", mode="before")
    @classmethod
    def _falsy_symlink_flag(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("symlink_path", mode="before")
    @classmethod
    def _falsy_symlink_path(cls, value: Any) -> Any:
        return "" if value is None else value


class MountRecord(BaseModel):
    """Live observation of one URI's mount. Only valid for a single reconcile pass."""

    uri: str
    mounted: bool = False
    mount_path: Optional[str] = None


class FailureRecord(BaseModel):
    """Fail tracking keyed by URI so it survives bookmark reloads."""

    fail_count: int = Field(default=0, ge=0)
    last_attempt: Optional[datetime] = None


class BookmarkState(BaseModel):
    """Snapshot of a bookmark for presenters (menu, WebSocket clients)."""

    uri: str
    name: str
    enabled: bool
    create_symlink: bool
    symlink_path: str
    state: MountState
    mounted: bool
    mount_path: Optional[str] = None
    link_path: Optional[str] = None
    fail_count: int = 0
    retry_attempts: int = 0
    retry_pending: bool = False
    last_attempt: Optional[datetime] = None


class StatusSummary(BaseModel):
    total: int
    mounted: int
    enabled: int
    check_interval: int
    overall: OverallStatus

    @property
    def status_text(self) -> str:
        return f"{self.mounted}/{self.total} mounted • Check every {self.check_interval}min"


class ReconcileSummary(BaseModel):
    """Outcome of one reconcile pass. Mount results arrive later, per bookmark."""

    checked: int = 0  # enabled bookmarks looked at
    already_mounted: int = 0
    mount_requests: int = 0
    symlinks_refreshed: int = 0
    manual: bool = False
    startup: bool = False
    completed_at: datetime = Field(default_factory=datetime.now)


class BulkActionResult(BaseModel):
    """Bulk command result: how many actions were attempted, not how many succeeded."""

    action: str
    attempted: int
