"""Chainlaunch REST API v1 Client.

Architecture Overview:
---------------------
This client wraps the Chainlaunch control-plane API, providing:
- Async HTTP communication via httpx
- Basic authentication with username/password or an API key
- Raw response bytes for 2xx, typed exceptions for everything else

The client returns bytes rather than decoded JSON: deciding whether a body
has the expected shape belongs to the caller (controller or resolver), which
raises ParseError with operation context.

Authentication:
--------------
- username + password set: Basic auth with those credentials
- otherwise api_key set: Basic auth with the key as username, empty password

Error Mapping:
-------------
- 2xx: body bytes returned unchanged
- 404: RemoteNotFoundError (a RemoteError subclass)
- other non-2xx: RemoteError with status_code and body
- httpx.HTTPError (connection refused, timeout, ...): RemoteError

No retry, backoff or rate-limit handling is performed. A failed call is
surfaced to the caller as-is.
"""

import json as jsonlib
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from ..config import ChainlaunchConfig
from ..constants import API_PREFIX
from ..utils.exceptions import RemoteError, RemoteNotFoundError
from .response_models import ErrorResponse

logger = structlog.get_logger(__name__)


class ChainlaunchClient:
    """
    Chainlaunch REST API v1 Client.

    A single instance holds only immutable configuration and a connection
    pool, so it can be shared by any number of controllers and resolvers.
    """

    def __init__(self, config: ChainlaunchConfig):
        """
        Initialize client from connection configuration.

        Args:
            config: Chainlaunch connection settings. Validated here so a
                misconfigured client fails before the first request.
        """
        config.validate()
        self.config = config
        self.base_url = f"{config.url.rstrip('/')}{API_PREFIX}"
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "ChainlaunchClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def auth(self) -> httpx.BasicAuth:
        """Basic auth credentials, preferring username/password over the API key."""
        if self.config.has_username_password:
            return httpx.BasicAuth(self.config.username, self.config.password)
        return httpx.BasicAuth(self.config.api_key, "")

    @property
    def client(self) -> httpx.AsyncClient:
        """Get HTTP client with lazy initialization."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                auth=self.auth,
                verify=self.config.verify_ssl,
                timeout=self.config.timeout,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> bytes:
        """
        Make an authenticated request to the Chainlaunch API.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: API path relative to /api/v1 (e.g. "/networks/fabric")
            json: Optional JSON body

        Returns:
            Raw response body

        Raises:
            RemoteNotFoundError: For 404 Not Found
            RemoteError: For any other non-2xx status or transport failure
        """
        logger.debug("Chainlaunch API request", method=method, url=f"{self.base_url}{path}")
        if json is not None:
            logger.debug("Request body", body=jsonlib.dumps(json))

        try:
            response = await self.client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error("Chainlaunch API request failed", method=method, path=path, error=str(e))
            raise RemoteError(f"Error performing request {method} {path}: {e}") from e

        logger.debug(
            "Chainlaunch API response",
            status=response.status_code,
            body=response.text,
        )

        if response.is_success:
            return response.content

        body = response.text
        if response.status_code == 404:
            raise RemoteNotFoundError(path, body)

        raise RemoteError(
            f"API request failed with status {response.status_code}: "
            f"{self._error_message(response)}",
            status_code=response.status_code,
            body=body,
        )

    def _error_message(self, response: httpx.Response) -> str:
        """Extract a readable message from an error response, falling back to raw text."""
        if not response.headers.get("content-type", "").startswith("application/json"):
            return response.text
        try:
            message = ErrorResponse.model_validate_json(response.content).get_full_message()
        except ValidationError:
            return response.text
        return message or response.text

    async def get(self, path: str) -> bytes:
        """Helper for GET requests."""
        return await self.request("GET", path)

    async def post(self, path: str, json: dict[str, Any] | None = None) -> bytes:
        """Helper for POST requests."""
        return await self.request("POST", path, json=json)
