# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

# src/manifest_broker/__init__.py

__version__ = "0.1.0"

from .arbiter import Outcome, OutcomeArbiter
from .callback_server import CallbackListener
from .config import BrokerSettings
from .errors import (
    BrokerError,
    DecodeFailureError,
    ExchangeRejectedError,
    NoCodeError,
    SessionError,
    SessionTimeoutError,
    StateMismatchError,
    TransportError,
)
from .exchange import AppCredentials, CredentialExchanger
from .session import SessionController
from .state import StateTokenStore, generate_state

__all__ = [
    "AppCredentials",
    "BrokerError",
    "BrokerSettings",
    "CallbackListener",
    "CredentialExchanger",
    "DecodeFailureError",
    "ExchangeRejectedError",
    "NoCodeError",
    "Outcome",
    "OutcomeArbiter",
    "SessionController",
    "SessionError",
    "SessionTimeoutError",
    "StateMismatchError",
    "StateTokenStore",
    "TransportError",
    "generate_state",
]
