"""
HTTP client the dashboard uses to reach the explanation server.

The dashboard never talks to the inference API directly and never sees its key:
every explanation goes through POST /explain on the server.
"""
from __future__ import annotations

from typing import Any

import httpx

from explainer.errors import CLIENT_FAILURE
from explainer.explanation.schemas import ExplanationResult, Failure, Success
from explainer.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 35.0


class ServiceClient:
    """Async client for the explanation server. Results, not exceptions."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ServiceClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request_explanation(self, concept: str) -> ExplanationResult:
        """POST /explain once. Any transport error, error status or bad body is a Failure."""
        try:
            resp = await self._client.post("/explain", json={"concept": concept})
            resp.raise_for_status()
            data = resp.json()
            text = data["response"]
        except httpx.HTTPStatusError as e:
            logger.error("Explanation server returned %s: %s", e.response.status_code, e.response.text[:500])
            return Failure(CLIENT_FAILURE)
        except httpx.HTTPError as e:
            logger.error("Error reaching explanation server: %s", e)
            return Failure(CLIENT_FAILURE)
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Unexpected response from explanation server: %s", e)
            return Failure(CLIENT_FAILURE)
        return Success(str(text))

    async def list_topics(self) -> list[str]:
        """GET /topics; raises httpx.HTTPError on failure."""
        resp = await self._client.get("/topics")
        resp.raise_for_status()
        return [str(t) for t in resp.json().get("topics", [])]
