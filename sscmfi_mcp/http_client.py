"""HTTP client for the SSCMFI calculation engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from sscmfi_mcp.errors import ToolExecutionError

logger = logging.getLogger(__name__)


@dataclass
class EngineError(ToolExecutionError):
    """Engine request error.

    ``status_code`` is 0 when the engine was never reached. ``body`` holds the
    decoded response body when the engine answered.
    """

    status_code: int
    message: str
    body: Any = None

    def __str__(self) -> str:
        return self.message


class EngineClient:
    """Single-shot JSON POST client for the engine endpoint."""

    def __init__(
        self,
        api_url: str,
        timeout_seconds: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not api_url:
            raise ValueError("SSCMFI_API_URL is required")
        self.api_url = api_url
        if client is None:
            options = {} if timeout_seconds is None else {"timeout": timeout_seconds}
            client = httpx.AsyncClient(**options)
        self._client = client

    async def calculate(self, payload: dict) -> Any:
        """POST one calculation payload and return the decoded JSON body."""
        try:
            response = await self._client.post(
                self.api_url,
                json=payload,
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            logger.warning(f"Engine request to {self.api_url} failed: {exc!r}")
            raise EngineError(0, str(exc) or type(exc).__name__) from exc

        if response.status_code >= 400:
            raise EngineError(
                response.status_code,
                f"Request failed with status code {response.status_code}",
                body=_decode_body(response),
            )

        try:
            return response.json()
        except ValueError as exc:
            raise EngineError(
                response.status_code,
                f"Engine returned a non-JSON body: {exc}",
                body=response.text or None,
            ) from exc

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "EngineClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
