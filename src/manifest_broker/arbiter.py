# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

# src/manifest_broker/arbiter.py

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from .errors import SessionError, SessionTimeoutError

lib_logger = logging.getLogger("manifest_broker")

OUTCOME_CODE = "code"
OUTCOME_ERROR = "error"


@dataclass(frozen=True)
class Outcome:
    """The first thing that happened to the session: a code or an error."""

    kind: str
    code: Optional[str] = None
    error: Optional[SessionError] = None


class OutcomeArbiter:
    """
    Single-fire rendezvous between the callback listener and the session.

    Backed by one asyncio.Future, so a delivery never blocks the HTTP
    handler and only the first delivery (or the deadline) counts. The
    ``done()`` check and the set happen without yielding to the loop, which
    makes each delivery atomic with respect to other handlers.
    """

    def __init__(self):
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._outcome: Optional[Outcome] = None

    @property
    def resolved(self) -> bool:
        return self._future.done()

    @property
    def outcome(self) -> Optional[Outcome]:
        return self._outcome

    def deliver_code(self, code: str) -> bool:
        """Resolves the session with an authorization code, if still open."""
        if self._future.done():
            lib_logger.debug("Ignoring authorization code, session already resolved")
            return False
        self._outcome = Outcome(kind=OUTCOME_CODE, code=code)
        self._future.set_result(code)
        return True

    def deliver_error(self, error: SessionError) -> bool:
        """Resolves the session with an error, if still open."""
        if self._future.done():
            lib_logger.debug(
                f"Ignoring {type(error).__name__}, session already resolved"
            )
            return False
        self._outcome = Outcome(kind=OUTCOME_ERROR, error=error)
        self._future.set_exception(error)
        return True

    async def wait(self, timeout: float) -> str:
        """
        Waits for the first outcome or the deadline, whichever comes first.

        Args:
            timeout: Seconds to wait before giving up

        Returns:
            The authorization code

        Raises:
            SessionError: The delivered error, or SessionTimeoutError
        """
        try:
            # Shielded so the deadline does not cancel the future itself
            return await asyncio.wait_for(asyncio.shield(self._future), timeout=timeout)
        except asyncio.TimeoutError:
            error = SessionTimeoutError("Timeout - no response received")
            if self.deliver_error(error):
                # Mark the exception retrieved; the shield detached our waiter
                self._future.exception()
                raise error
            # A delivery landed between the deadline and this handler
            return self._future.result()
