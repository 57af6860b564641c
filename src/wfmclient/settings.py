"""Configuration directory, server list location and download directory."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

APP_NAME = "wfmclient"
CONFIG_DIR_ENV = "WFMCLIENT_CONFIG_DIR"
SERVERS_FILE_NAME = "servers"
DOWNLOADS_FILE_NAME = "downloads"


def default_config_dir() -> Path:
    """Return the per-user configuration directory for this platform."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()

    home = Path.home()
    if sys.platform == "darwin":
        return home / "Library" / "Preferences" / APP_NAME
    if sys.platform == "win32":
        return home / "AppData" / "Local" / APP_NAME
    return Path(os.environ.get("XDG_CONFIG_HOME") or home / ".config") / APP_NAME


def default_download_dir() -> Path:
    return Path.home() / APP_NAME


@dataclass
class Settings:
    config_dir: Path
    download_dir: Path

    @property
    def server_list_file(self) -> Path:
        return self.config_dir / SERVERS_FILE_NAME

    @property
    def download_dir_file(self) -> Path:
        return self.config_dir / DOWNLOADS_FILE_NAME

    @classmethod
    def load(cls, config_dir: str | Path | None = None) -> Settings:
        """Load settings, creating missing files and directories on the way."""
        config_dir = Path(config_dir) if config_dir else default_config_dir()
        config_dir.mkdir(parents=True, exist_ok=True)

        servers = config_dir / SERVERS_FILE_NAME
        if not servers.exists():
            servers.touch()

        downloads = config_dir / DOWNLOADS_FILE_NAME
        if not downloads.exists():
            downloads.write_text(str(default_download_dir()), encoding="utf-8")

        lines = downloads.read_text(encoding="utf-8").splitlines()
        download_dir = Path(lines[0].strip()) if lines and lines[0].strip() else default_download_dir()
        download_dir.mkdir(parents=True, exist_ok=True)

        logger.debug("Config dir %s, download dir %s", config_dir, download_dir)
        return cls(config_dir=config_dir, download_dir=download_dir)

    def set_download_dir(self, path: str | Path) -> None:
        path = Path(path).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        self.download_dir_file.write_text(str(path), encoding="utf-8")
        self.download_dir = path
