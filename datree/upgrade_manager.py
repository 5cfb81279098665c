"""Detect how the tool was installed and upgrade it."""

from __future__ import annotations

import os
import platform
import subprocess

INSTALL_URL_ENV = "DATREE_INSTALL_SCRIPT_URL"


class UpgradeManager:
    """Runs the commands that check for and perform an upgrade."""

    def __init__(self, install_script_url: str | None = None) -> None:
        self.install_script_url = install_script_url

    def is_installed_using_brew(self) -> bool:
        try:
            subprocess.run(
                ["brew", "list", "datree"], capture_output=True, check=True
            )
        except (OSError, subprocess.CalledProcessError):
            return False
        return True

    def is_windows(self) -> bool:
        return "windows" in platform.system().lower()

    def upgrade(self) -> None:
        """Download and run the installation script.

        Raises CalledProcessError if the script fails.
        """
        url = self.install_script_url or os.environ.get(INSTALL_URL_ENV)
        if not url:
            raise RuntimeError(
                f"no installation script URL configured; set {INSTALL_URL_ENV}"
            )
        subprocess.run(["bash", "-c", f"curl {url} | /bin/bash"], check=True)