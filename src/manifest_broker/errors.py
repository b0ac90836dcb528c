# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

# src/manifest_broker/errors.py

from typing import Optional


class BrokerError(Exception):
    """Base class for every error raised by manifest_broker."""


class SessionError(BrokerError):
    """
    A terminal failure of the authorization session.

    None of these are retried. The CLI prints ``str(error)`` as a single
    line and exits non-zero.
    """


class NoCodeError(SessionError):
    """The callback arrived without an authorization code."""


class StateMismatchError(SessionError):
    """The callback's state does not match the most recently issued token."""


class SessionTimeoutError(SessionError):
    """No callback arrived before the session deadline."""


class TransportError(SessionError):
    """The local listener or the network failed."""


class ExchangeRejectedError(SessionError):
    """The manifest conversion call returned something other than 201."""

    def __init__(self, status_code: int, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(f"GitHub API error: {status_code}")


class DecodeFailureError(SessionError):
    """The manifest conversion response could not be decoded."""
