from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils.host_config import get_hostname_settings_file

DEFAULT_MOUNT_BASE = "~/NetworkMounts"


class Settings(BaseSettings):
    # Bookmark sources
    bookmarks_file: str = "~/.config/gtk-3.0/bookmarks"
    bookmark_settings_file: str = "~/.config/share-automount/settings.json"

    # Reconciliation timing
    check_interval: int = Field(default=5, ge=1)  # minutes between periodic checks
    startup_delay_seconds: float = Field(default=5.0, ge=0)
    startup_settle_seconds: float = Field(default=10.0, ge=0)
    symlink_grace_seconds: float = Field(default=1.0, ge=0)  # let GVFS path settle
    mount_timeout_seconds: float = Field(default=60.0, gt=0)

    # Retry handling
    retry_attempts: int = Field(default=3, ge=0)
    retry_delay: int = Field(default=30, ge=0)  # seconds

    # Notifications
    show_notifications: bool = True
    show_success_notifications: bool = False
    show_error_notifications: bool = True

    # Symlinks
    custom_mount_base: str = DEFAULT_MOUNT_BASE

    # Logging konfiguration
    log_level: str = "INFO"
    log_file_path: str = "logs/share_automount.log"
    log_retention_days: int = 30

    model_config = SettingsConfigDict(
        env_file=get_hostname_settings_file(), extra="ignore"
    )

    @property
    def log_directory(self) -> Path:
        """Returnerer log directory som Path objekt"""
        return Path(self.log_file_path).parent

    @property
    def mount_base_path(self) -> Path:
        """Base directory for managed symlinks, falling back to ~/NetworkMounts."""
        base = self.custom_mount_base.strip() or DEFAULT_MOUNT_BASE
        return Path(base).expanduser()

    @property
    def bookmarks_path(self) -> Path:
        return Path(self.bookmarks_file).expanduser()

    @property
    def bookmark_settings_path(self) -> Path:
        return Path(self.bookmark_settings_file).expanduser()

    @property
    def config_file_info(self) -> dict:
        """Return information about which configuration file is being used."""
        from .utils.host_config import get_hostname, list_all_settings_files

        return {
            "hostname": get_hostname(),
            "active_config_file": get_hostname_settings_file(),
            "all_available_configs": list_all_settings_files(),
        }
