"""Operating-system queries for idle time and the focused window."""

from __future__ import annotations

import ctypes
import logging
import subprocess
import sys
from abc import ABC, abstractmethod
from typing import Optional

import psutil

from .models import FocusKey
from .normalization import normalize_window_title, resolve_application

logger = logging.getLogger(__name__)

QUERY_TIMEOUT_SECONDS = 2.0


class FocusProbe(ABC):
    """Platform-specific source of idle time and foreground window identity.

    Implementations never raise: a failed query reports ``0``, ``None`` or an
    empty title and the tracker simply tries again on the next tick.
    """

    @abstractmethod
    def idle_seconds(self) -> int:
        """Seconds since the last keyboard or mouse input."""

    @abstractmethod
    def foreground_identity(self) -> Optional[tuple[str, str]]:
        """Return ``(application, process name for title lookup)``."""

    @abstractmethod
    def window_title(self, process_name: str) -> str:
        """Title of the front window of ``process_name``."""

    def current_focus(self) -> Optional[FocusKey]:
        identity = self.foreground_identity()
        if identity is None:
            return None
        application, process_name = identity
        title = normalize_window_title(application, self.window_title(process_name))
        return FocusKey(application, title)


def run_osascript(script: str) -> Optional[str]:
    try:
        result = subprocess.run(
            ["osascript", "-e", script],
            capture_output=True,
            text=True,
            timeout=QUERY_TIMEOUT_SECONDS,
            check=True,
        )
    except (subprocess.SubprocessError, OSError) as exc:
        logger.debug("osascript failed: %s", exc)
        return None
    return result.stdout.strip()


class MacOSProbe(FocusProbe):
    """Queries System Events through ``osascript`` and idle time through ``ioreg``."""

    def idle_seconds(self) -> int:
        try:
            output = subprocess.run(
                ["ioreg", "-c", "IOHIDSystem"],
                capture_output=True,
                text=True,
                timeout=QUERY_TIMEOUT_SECONDS,
                check=True,
            ).stdout
        except (subprocess.SubprocessError, OSError) as exc:
            logger.debug("ioreg failed: %s", exc)
            return 0
        for line in output.splitlines():
            if "HIDIdleTime" in line:
                try:
                    return int(line.rsplit("=", 1)[-1].strip()) // 1_000_000_000
                except ValueError:
                    logger.debug("Unexpected HIDIdleTime line: %r", line)
                    return 0
        return 0

    def foreground_identity(self) -> Optional[tuple[str, str]]:
        app_name = run_osascript(
            'tell application "System Events" to get name of first process '
            "whose frontmost is true"
        )
        if not app_name:
            return None
        bundle_id = run_osascript("id of application (path to frontmost application as text)")
        return resolve_application(app_name, bundle_id)

    def window_title(self, process_name: str) -> str:
        escaped = process_name.replace("\\", "\\\\").replace('"', '\\"')
        script = (
            f'tell application "System Events" to tell process "{escaped}" '
            'to get value of attribute "AXTitle" of window 1'
        )
        return run_osascript(script) or ""


def ticks_between(earlier: int, later: int) -> int:
    """Milliseconds between two 32-bit tick counts, across one wraparound."""
    return (later - earlier) & 0xFFFFFFFF


class WindowsProbe(FocusProbe):
    """Retrieves idle time and the foreground window through Win32 APIs."""

    class LASTINPUTINFO(ctypes.Structure):
        _fields_ = [("cbSize", ctypes.c_uint), ("dwTime", ctypes.c_ulong)]

    def __init__(self) -> None:
        self._user32 = ctypes.windll.user32  # type: ignore[attr-defined]
        self._kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
        self._kernel32.GetTickCount.restype = ctypes.c_ulong
        self._hwnd: Optional[int] = None

    def idle_seconds(self) -> int:
        last_input = self.LASTINPUTINFO()
        last_input.cbSize = ctypes.sizeof(last_input)
        if not self._user32.GetLastInputInfo(ctypes.byref(last_input)):
            logger.warning("GetLastInputInfo failed; assuming not idle.")
            return 0
        elapsed_ms = ticks_between(last_input.dwTime, self._kernel32.GetTickCount())
        return elapsed_ms // 1000

    def foreground_identity(self) -> Optional[tuple[str, str]]:
        hwnd = self._user32.GetForegroundWindow()
        self._hwnd = hwnd or None
        if not hwnd:
            return None

        pid = ctypes.c_ulong()
        self._user32.GetWindowThreadProcessId(hwnd, ctypes.byref(pid))
        if not pid.value:
            return None
        try:
            process_name = psutil.Process(pid.value).name()
        except (psutil.Error, ProcessLookupError):
            return None
        return process_name, process_name

    def window_title(self, process_name: str) -> str:
        # The title belongs to the window found by the last identity query.
        if not self._hwnd:
            return ""
        length = self._user32.GetWindowTextLengthW(self._hwnd)
        buffer = ctypes.create_unicode_buffer(length + 1)
        self._user32.GetWindowTextW(self._hwnd, buffer, length + 1)
        return buffer.value.strip()


def default_probe() -> FocusProbe:
    """Return the probe for the running platform."""
    if sys.platform == "darwin":
        return MacOSProbe()
    if sys.platform == "win32":
        return WindowsProbe()
    raise RuntimeError(f"Focus tracking is not supported on {sys.platform!r}.")
