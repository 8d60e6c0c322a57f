"""
Host-specific configuration management utility.

Picks the env file the Settings class reads. A machine keeps its own
``{hostname}-settings.env`` so that bookmarks, mount base and retry policy
can differ per workstation while sharing one checked-in ``settings.env``.
"""

import logging
import shutil
import socket
from pathlib import Path

BASE_SETTINGS_FILE = "settings.env"


def get_hostname() -> str:
    """Get the current hostname (without domain)."""
    return socket.gethostname().split(".")[0]


def get_hostname_settings_file() -> str:
    """
    Get the appropriate settings file for this host.

    Logic:
    1. Check if {hostname}-settings.env exists
    2. If not, seed it from settings.env with a short header
    3. Without a base file, fall back to settings.env (pydantic-settings
       silently ignores a missing env file)

    Returns:
        str: Path to the env file Settings should read
    """
    try:
        hostname = get_hostname()
        base_settings = Path(BASE_SETTINGS_FILE)
        host_settings = Path(f"{hostname}-settings.env")

        if host_settings.exists():
            logging.debug(f"Using existing host-specific configuration: {host_settings}")
            return str(host_settings)

        if not base_settings.exists():
            logging.debug("Base settings.env not found, using defaults and environment")
            return BASE_SETTINGS_FILE

        shutil.copy2(base_settings, host_settings)
        content = host_settings.read_text(encoding="utf-8")
        host_header = (
            f"# Host-specific share automount configuration for: {hostname}\n"
            "# Generated from settings.env - edit freely for this machine\n\n"
        )
        host_settings.write_text(host_header + content, encoding="utf-8")
        logging.info(f"Created host-specific configuration: {host_settings}")
        return str(host_settings)

    except OSError as e:
        logging.error(f"Error handling host-specific settings: {e}")
        return BASE_SETTINGS_FILE


def list_all_settings_files() -> list[str]:
    """List all available settings files (base + host-specific)."""
    settings_files = []

    if Path(BASE_SETTINGS_FILE).exists():
        settings_files.append(BASE_SETTINGS_FILE)

    for file_path in Path(".").glob("*-settings.env"):
        settings_files.append(str(file_path))

    return settings_files
