# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

# src/manifest_broker/browser.py

import logging
import os
import sys
import webbrowser

lib_logger = logging.getLogger("manifest_broker")


def is_headless_environment() -> bool:
    """
    Detects environments where no local browser can be opened.

    macOS and Windows always have a desktop session. Elsewhere a display
    server is required.
    """
    if sys.platform == "darwin" or sys.platform.startswith("win"):
        return False
    return not (os.getenv("DISPLAY") or os.getenv("WAYLAND_DISPLAY"))


def open_browser(url: str) -> bool:
    """
    Opens the URL in the default browser, best effort.

    A failure is only logged: the user can always open the URL manually.
    """
    try:
        opened = webbrowser.open(url)
    except Exception as e:
        lib_logger.warning(
            f"Failed to open browser automatically: {e}. Please open the URL manually."
        )
        return False

    if not opened:
        lib_logger.warning("No browser available. Please open the URL manually.")
        return False

    lib_logger.info("Browser opened successfully")
    return True
