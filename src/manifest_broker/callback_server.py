# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

# src/manifest_broker/callback_server.py

import logging
import socket
from typing import Optional, Tuple

from aiohttp import web

from .arbiter import OutcomeArbiter
from .config import CALLBACK_PATH, BrokerSettings
from .errors import NoCodeError, SessionError, StateMismatchError, TransportError
from .pages import render_error_page, render_form_page, render_success_page
from .state import StateTokenStore

lib_logger = logging.getLogger("manifest_broker")


class CallbackListener:
    """
    Minimal HTTP server for the GitHub App manifest flow.

    Serves the entry page (which mints the expected state token) and the
    callback page (which checks it and hands the outcome to the arbiter).
    """

    def __init__(
        self,
        settings: BrokerSettings,
        arbiter: OutcomeArbiter,
        tokens: Optional[StateTokenStore] = None,
    ):
        self.settings = settings
        self.arbiter = arbiter
        self.tokens = tokens or StateTokenStore()
        self.app = self.build_app()
        self.runner: Optional[web.AppRunner] = None
        self.site: Optional[web.TCPSite] = None

    @property
    def port(self) -> int:
        return self.settings.port

    @property
    def entry_url(self) -> str:
        return self.settings.base_url

    @property
    def redirect_url(self) -> str:
        return self.settings.redirect_url

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/", self._handle_entry)
        app.router.add_get(CALLBACK_PATH, self._handle_callback)
        app.router.add_post(CALLBACK_PATH, self._handle_callback)
        app.router.add_get("/favicon.ico", self._handle_favicon)
        return app

    def _is_port_available(self) -> bool:
        """Checks if the callback port is available."""
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            sock.bind(("", self.port))
            sock.close()
            return True
        except OSError:
            return False

    async def start(self):
        """Starts the listener, raising TransportError if it cannot bind."""
        if not self._is_port_available():
            raise TransportError(f"Port {self.port} is already in use")

        runner = web.AppRunner(
            self.app,
            access_log=None,
            shutdown_timeout=self.settings.shutdown_grace,
        )
        await runner.setup()
        site = web.TCPSite(runner, self.settings.host, self.port)
        try:
            await site.start()
        except OSError as e:
            await runner.cleanup()
            raise TransportError(f"Could not listen on port {self.port}: {e}") from e

        self.runner = runner
        self.site = site

        lib_logger.info(f"Server running at {self.entry_url}")

    async def stop(self):
        """Stops the listener, giving in-flight requests the grace period."""
        if self.site:
            await self.site.stop()
            self.site = None
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
            lib_logger.debug("Callback listener stopped")

    async def __aenter__(self) -> "CallbackListener":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()

    async def _handle_entry(self, request: web.Request) -> web.Response:
        state = self.tokens.issue()
        return web.Response(
            text=render_form_page(state, self.settings),
            content_type="text/html",
            charset="utf-8",
        )

    async def _handle_favicon(self, request: web.Request) -> web.Response:
        return web.Response(status=204)

    async def _read_params(self, request: web.Request) -> Tuple[str, str]:
        """Reads code and state from the query, falling back to a POSTed form."""
        code = request.query.get("code", "")
        state = request.query.get("state", "")
        if request.method == "POST" and (not code or not state):
            form = await request.post()
            code = code or str(form.get("code", ""))
            state = state or str(form.get("state", ""))
        return code, state

    def _reject(self, error: SessionError) -> web.Response:
        lib_logger.error(f"Callback rejected: {error}")
        self.arbiter.deliver_error(error)
        return web.Response(
            status=400,
            text=render_error_page(str(error)),
            content_type="text/html",
            charset="utf-8",
        )

    async def _handle_callback(self, request: web.Request) -> web.Response:
        """Handles the redirect from GitHub after the app was created."""
        code, state = await self._read_params(request)

        # State first: a forged callback is reported as forged whether or not
        # it carries a code
        if not self.tokens.matches(state):
            return self._reject(
                StateMismatchError("invalid state parameter - possible CSRF attack")
            )

        if not code:
            return self._reject(NoCodeError("no code received from GitHub"))

        if self.arbiter.deliver_code(code):
            lib_logger.info("Authorization received.")
        else:
            lib_logger.debug("Duplicate callback after the session was resolved")

        return web.Response(
            text=render_success_page(),
            content_type="text/html",
            charset="utf-8",
        )
