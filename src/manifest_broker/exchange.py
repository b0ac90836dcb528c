# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

# src/manifest_broker/exchange.py

import logging
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional

import httpx

from .config import GITHUB_ACCEPT, GITHUB_API_VERSION, BrokerSettings
from .errors import DecodeFailureError, ExchangeRejectedError, TransportError

lib_logger = logging.getLogger("manifest_broker")


@dataclass(frozen=True)
class AppCredentials:
    """
    Credentials of the GitHub App created from the manifest.

    Field names match the conversion response one to one.
    """

    id: int
    slug: str
    name: str
    client_id: str
    client_secret: str = field(repr=False)
    pem: str = field(repr=False)
    webhook_secret: str = field(repr=False)
    html_url: str

    @classmethod
    def from_payload(cls, payload: Any) -> "AppCredentials":
        """
        Builds credentials from a decoded conversion response.

        Raises:
            DecodeFailureError: If a field is missing or has the wrong type
        """
        if not isinstance(payload, dict):
            raise DecodeFailureError(
                f"Expected a JSON object, got {type(payload).__name__}"
            )

        values: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in payload:
                raise DecodeFailureError(f"Missing field '{f.name}' in GitHub response")
            value = payload[f.name]
            expected = int if f.name == "id" else str
            # bool is an int subclass; GitHub never sends one for id
            if not isinstance(value, expected) or isinstance(value, bool):
                raise DecodeFailureError(
                    f"Field '{f.name}' should be {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
            values[f.name] = value
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def env_lines(self) -> List[str]:
        return [
            f"GITHUB_CLIENT_ID={self.client_id}",
            f"GITHUB_CLIENT_SECRET={self.client_secret}",
        ]


class CredentialExchanger:
    """
    Converts a manifest code into app credentials with one API call.

    The call is never retried: the code is single use, so a second attempt
    could only fail.
    """

    def __init__(
        self,
        settings: BrokerSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": GITHUB_ACCEPT,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    async def exchange(self, code: str) -> AppCredentials:
        """
        Exchanges the manifest code for the new app's credentials.

        Raises:
            ExchangeRejectedError: GitHub answered with anything but 201
            DecodeFailureError: The 201 body is not a valid credentials object
            TransportError: The request failed or timed out
        """
        url = self.settings.conversion_url(code)

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.exchange_timeout, transport=self._transport
            ) as client:
                response = await client.post(url, headers=self._headers())
        except httpx.TimeoutException as e:
            raise TransportError(
                f"GitHub API did not respond within {self.settings.exchange_timeout:g}s"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"GitHub API request failed: {e}") from e

        if response.status_code != 201:
            lib_logger.error(
                f"Manifest conversion failed: {response.status_code} {response.text}"
            )
            raise ExchangeRejectedError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeFailureError(f"Invalid JSON in GitHub response: {e}") from e

        credentials = AppCredentials.from_payload(payload)
        lib_logger.info(f"Created GitHub App '{credentials.slug}' (id {credentials.id})")
        return credentials
