"""Utilities to normalize application names and window titles."""

from __future__ import annotations

import re
from typing import Optional

VSCODE_APP = "Visual Studio Code"
VSCODE_BUNDLE_ID = "com.microsoft.VSCode"
VSCODE_PROCESS = "Electron"

_TITLE_SUFFIXES: dict[str, tuple[str, ...]] = {
    VSCODE_APP.lower(): (" — Visual Studio Code", " - Visual Studio Code"),
    "code.exe": (" - Visual Studio Code",),
    "msedge.exe": (" - Microsoft Edge",),
    "chrome.exe": (" - Google Chrome",),
    "firefox.exe": (" - Mozilla Firefox",),
    "brave.exe": (" - Brave",),
}


def resolve_application(app_name: str, bundle_id: Optional[str]) -> tuple[str, str]:
    """Return ``(application, process name for title lookup)``.

    VS Code reports its frontmost process as ``Electron``; it is tracked under
    its product name but its windows are still looked up on the Electron
    process.
    """
    if bundle_id == VSCODE_BUNDLE_ID:
        return VSCODE_APP, VSCODE_PROCESS
    return app_name, app_name


def normalize_window_title(application: Optional[str], window_title: Optional[str]) -> str:
    """Strip per-application suffixes so only the document or tab name is kept."""
    if not window_title:
        return ""
    normalized = window_title.strip()
    if application:
        for suffix in _TITLE_SUFFIXES.get(application.lower(), ()):
            if normalized.endswith(suffix):
                normalized = normalized[: -len(suffix)].rstrip(" -—")
                break
    return re.sub(r"\s{2,}", " ", normalized).strip()
