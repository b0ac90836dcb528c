# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

# src/manifest_broker/state.py

import hmac
import logging
import secrets
import threading
from typing import Optional

lib_logger = logging.getLogger("manifest_broker")

STATE_TOKEN_BYTES = 16


def generate_state() -> str:
    """
    Generate a fresh anti-forgery state token.

    Returns:
        32 hex characters (128 bits from the OS CSPRNG)
    """
    return secrets.token_hex(STATE_TOKEN_BYTES)


class StateTokenStore:
    """
    Holds the single state token the callback is expected to echo back.

    Only one authorization flow runs at a time, so there is exactly one
    expected token. Every ``issue()`` replaces it, which means reloading the
    entry page invalidates any form served before it.
    """

    def __init__(self):
        self._expected: Optional[str] = None
        self._lock = threading.Lock()

    def issue(self) -> str:
        """Mints a new token and makes it the expected one."""
        token = generate_state()
        with self._lock:
            self._expected = token
        lib_logger.debug(f"Issued state token ...{token[-6:]}")
        return token

    @property
    def current(self) -> Optional[str]:
        with self._lock:
            return self._expected

    def matches(self, candidate: Optional[str]) -> bool:
        """Checks a callback's state against the most recently issued token."""
        expected = self.current
        if not expected or not candidate:
            return False
        return hmac.compare_digest(expected.encode(), candidate.encode())
