"""Share Automount - keeps network bookmarks mounted and linked."""

__version__ = "0.1.0"
