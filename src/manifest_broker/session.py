# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

# src/manifest_broker/session.py

import logging
from typing import Callable, Optional

from .arbiter import OutcomeArbiter
from .browser import is_headless_environment, open_browser
from .callback_server import CallbackListener
from .config import BrokerSettings
from .display import console, print_instructions
from .exchange import AppCredentials, CredentialExchanger

lib_logger = logging.getLogger("manifest_broker")


class SessionController:
    """
    Runs one manifest flow from start to finish.

    listener → browser → arbiter (code, error or deadline) → exchange.
    The listener is torn down on every path out of ``run()``.
    """

    def __init__(
        self,
        settings: BrokerSettings,
        exchanger: Optional[CredentialExchanger] = None,
        opener: Callable[[str], bool] = open_browser,
    ):
        self.settings = settings
        self.exchanger = exchanger or CredentialExchanger(settings)
        self.opener = opener
        self.arbiter: Optional[OutcomeArbiter] = None
        self.listener: Optional[CallbackListener] = None

    async def run(self) -> AppCredentials:
        """
        Performs the interactive flow and returns the new app's credentials.

        Raises:
            SessionError: On any terminal failure of the session
        """
        self.arbiter = OutcomeArbiter()
        self.listener = CallbackListener(self.settings, self.arbiter)

        await self.listener.start()
        try:
            headless = is_headless_environment()
            will_open = self.settings.open_browser and not headless
            print_instructions(
                self.listener.entry_url, will_open=will_open, headless=headless
            )

            if will_open:
                # Not fatal: the URL is printed above
                self.opener(self.listener.entry_url)

            with console.status(
                "[bold green]Waiting for authorization in the browser...[/bold green]",
                spinner="dots",
            ):
                code = await self.arbiter.wait(self.settings.timeout)

            console.print("  Authorization received. Exchanging code for credentials...")
            lib_logger.debug("Calling the manifest conversion endpoint")
            return await self.exchanger.exchange(code)
        finally:
            await self.listener.stop()
