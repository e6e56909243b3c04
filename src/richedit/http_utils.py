"""HTTP utilities for storage requests with retry logic and connection pooling."""

from __future__ import annotations

import asyncio
from typing import Any, Final

import httpx

from richedit.config import (
    RICHEDIT_UPLOAD_BACKOFF_S,
    RICHEDIT_UPLOAD_MAX_RETRIES,
    RICHEDIT_UPLOAD_TIMEOUT_S,
    RICHEDIT_USER_AGENT,
)
from richedit.exceptions import StorageError

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

_MAX_REDIRECTS: Final[int] = 5


async def request_with_retries(
    method: str,
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    headers: dict[str, str] | None = None,
    content: bytes | None = None,
    json: Any = None,
    error_class: type[StorageError] = StorageError,
) -> httpx.Response:
    """Send a request, retrying transient failures with exponential backoff.

    Args:
        method: HTTP method, e.g. ``"POST"``.
        url: The URL to call.
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.
        headers: Extra request headers.
        content: Raw request body.
        json: JSON request body.
        error_class: Exception raised when the request fails.

    Returns:
        The successful response.

    Raises:
        StorageError (or ``error_class``): On a non-retryable error status, or
            when every attempt failed.
    """
    timeout = httpx.Timeout(RICHEDIT_UPLOAD_TIMEOUT_S)
    default_headers = {"User-Agent": RICHEDIT_USER_AGENT}
    last_exc: Exception | None = None

    async def do_request(http_client: httpx.AsyncClient) -> httpx.Response:
        nonlocal last_exc

        for attempt in range(RICHEDIT_UPLOAD_MAX_RETRIES + 1):
            try:
                response = await http_client.request(
                    method, url, headers=headers, content=content, json=json
                )

                if response.status_code in RETRY_STATUS_CODES:
                    last_exc = error_class(f"HTTP {response.status_code} from {url}")
                elif response.status_code >= 400:
                    raise error_class(
                        f"HTTP {response.status_code} from {url}: {response.text[:200]}"
                    )
                else:
                    return response
            except httpx.RequestError as exc:
                last_exc = exc

            if attempt < RICHEDIT_UPLOAD_MAX_RETRIES:
                backoff = RICHEDIT_UPLOAD_BACKOFF_S * (2**attempt)
                await asyncio.sleep(backoff)

        raise error_class(f"Failed to {method} {url}: {last_exc}")

    if client is not None:
        return await do_request(client)

    async with httpx.AsyncClient(
        timeout=timeout,
        headers=default_headers,
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    ) as new_client:
        return await do_request(new_client)
