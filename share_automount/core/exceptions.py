# share_automount/core/exceptions.py


class AutomountError(Exception):
    """Base class for all share automount failures."""


class TransientMountFailure(AutomountError):
    """Raised when the OS mount call for a bookmark fails. Retried up to the configured limit."""

    def __init__(self, uri: str, message: str):
        self.uri = uri
        self.message = message
        super().__init__(f"Mount of {uri} failed: {message}")


class TerminalMountFailure(AutomountError):
    """A bookmark has exhausted its automatic retries."""

    def __init__(self, uri: str, fail_count: int, message: str):
        self.uri = uri
        self.fail_count = fail_count
        self.message = message
        super().__init__(
            f"Mount of {uri} gave up after {fail_count} failed attempts: {message}"
        )


class UnmountFailure(AutomountError):
    """Raised when the OS refuses to unmount a share."""

    def __init__(self, uri: str, message: str):
        self.uri = uri
        self.message = message
        super().__init__(f"Unmount of {uri} failed: {message}")


class SymlinkConflict(AutomountError):
    """The desired symlink location is occupied by a real file or directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Cannot create symlink at {path}: path exists and is not a symlink")


class ConfigParseFailure(AutomountError):
    """Persisted bookmark settings could not be parsed. Callers fall back to defaults."""

    def __init__(self, source: str, message: str):
        self.source = source
        self.message = message
        super().__init__(f"Invalid bookmark settings in {source}: {message}")


class ResolutionFailure(AutomountError):
    """The OS mount state for a URI could not be queried. Treated as unmounted."""

    def __init__(self, uri: str, message: str):
        self.uri = uri
        self.message = message
        super().__init__(f"Could not resolve mount state for {uri}: {message}")


class UnknownBookmarkError(AutomountError):
    """A command referenced a URI that is not in the current bookmark list."""

    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"Unknown bookmark: {uri}")


class UnsupportedPlatformError(AutomountError):
    """Raised when platform is not supported for network mounting."""
