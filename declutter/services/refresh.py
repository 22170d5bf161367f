"""Desktop refresh hooks.

After files move, desktop shells may keep showing stale icons. The hooks
here nudge the shell; every failure is swallowed since a refresh is only
cosmetic.
"""
from __future__ import annotations

import logging
import os
import subprocess
import sys
import time
from pathlib import Path
from typing import Optional

from ..core.protocols import RefreshHook


logger = logging.getLogger(__name__)

# SHChangeNotify arguments: "associations changed", no item list
SHCNE_ASSOCCHANGED = 0x08000000
SHCNF_IDLIST = 0x0000


def noop_refresh() -> None:
    """Refresh hook that does nothing."""


def safe_refresh(hook: Optional[RefreshHook]) -> None:
    """Run a refresh hook, ignoring anything it raises."""
    if hook is None:
        return
    try:
        hook()
    except Exception as e:
        logger.debug("Desktop refresh failed: %s", e)


class LinuxDesktopRefresher:
    """Asks the running Linux desktop environment to reload.

    The environment is read from ``XDG_CURRENT_DESKTOP``; unknown
    environments are left alone.
    """

    def __init__(self, desktop: Path, min_interval: float = 0.5):
        """Initialize the refresher.

        Args:
            desktop: Directory shown on the desktop.
            min_interval: Minimum seconds between two launched commands.
        """
        self._desktop = desktop
        self._min_interval = min_interval
        self._last_run: Optional[float] = None

    def command(self) -> Optional[list[str]]:
        """Command for the current desktop environment, if any."""
        env = os.environ.get("XDG_CURRENT_DESKTOP", "").lower()
        if any(name in env for name in ("gnome", "unity", "mate")):
            return ["xdg-open", str(self._desktop)]
        if "kde" in env:
            return ["kbuildsycoca5"]
        if "xfce" in env:
            return ["xfdesktop", "--reload"]
        return None

    def __call__(self) -> None:
        cmd = self.command()
        if cmd is None:
            return

        now = time.monotonic()
        if self._last_run is not None and now - self._last_run < self._min_interval:
            return
        self._last_run = now

        try:
            subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            logger.debug("Could not run %s: %s", cmd[0], e)


class WindowsDesktopRefresher:
    """Notifies Explorer through SHChangeNotify."""

    def __call__(self) -> None:
        try:
            import ctypes
            ctypes.windll.shell32.SHChangeNotify(SHCNE_ASSOCCHANGED, SHCNF_IDLIST, None, None)
        except (ImportError, AttributeError, OSError) as e:
            logger.debug("SHChangeNotify failed: %s", e)


def create_refresh_hook(
    desktop: Path,
    enabled: bool = True,
    platform: Optional[str] = None,
) -> RefreshHook:
    """Pick the refresh hook for a platform (defaults to the running one)."""
    if not enabled:
        return noop_refresh

    platform = platform or sys.platform
    if platform.startswith("win"):
        return WindowsDesktopRefresher()
    if platform.startswith("linux"):
        return LinuxDesktopRefresher(desktop)
    return noop_refresh
