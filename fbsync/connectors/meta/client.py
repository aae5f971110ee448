"""FBSync — Meta API Client.

Handles authentication, error parsing and cursor pagination.
Requests are issued once; a failed call surfaces as MetaAPIError.
"""

from typing import Any, Dict, List, Optional

import httpx

from fbsync.config import settings
from fbsync.core.logging import get_logger

logger = get_logger("meta.client")


def graph_base() -> str:
    return f"{settings.meta_base_url}/{settings.meta_api_version}"


class MetaAPIError(Exception):
    """Raised when Meta API returns an error."""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        error_code: int = 0,
        payload: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.error_code = error_code
        self.payload = payload or {}
        super().__init__(message)


class MetaClient:
    """Async HTTP client for Meta Marketing API."""

    def __init__(
        self,
        access_token: str | None = None,
        ad_account_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.access_token = access_token or settings.meta_access_token
        self.ad_account_id = ad_account_id or settings.meta_ad_account_id
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=settings.meta_timeout_seconds, transport=self._transport
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "MetaClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ── Core Request Method ──

    async def _request(
        self,
        method: str,
        url: str,
        params: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        """Make a single request and decode the JSON body."""
        params = dict(params or {})
        params["access_token"] = self.access_token

        client = await self._get_client()

        try:
            resp = await client.request(method, url, params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            body: Dict[str, Any] = {}
            if e.response.headers.get("content-type", "").startswith(
                "application/json"
            ):
                try:
                    body = e.response.json()
                except ValueError:
                    body = {}
            error = body.get("error", {}) if isinstance(body, dict) else {}
            error_msg = error.get("message", str(e))
            error_code = error.get("code", 0)
            raise MetaAPIError(
                error_msg, e.response.status_code, error_code, body
            ) from e
        except httpx.RequestError as e:
            raise MetaAPIError(f"Connection failed: {e}") from e

        try:
            return resp.json()
        except ValueError as e:
            raise MetaAPIError(
                "Malformed response: body is not JSON", resp.status_code
            ) from e

    # ── Pagination ──

    async def get_paginated(
        self,
        url: str,
        params: Dict[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> List[Dict[str, Any]]:
        """Fetch all pages of a paginated endpoint."""
        all_data: List[Dict[str, Any]] = []
        params = params or {}
        max_pages = max_pages or settings.meta_max_pages
        current_url = url

        for page in range(max_pages):
            # The `next` cursor URL already carries every query parameter
            result = await self._request(
                "GET", current_url, params if page == 0 else None
            )
            data = result.get("data") if isinstance(result, dict) else None
            if not isinstance(data, list):
                raise MetaAPIError(
                    "Malformed response: missing 'data' list",
                    payload=result if isinstance(result, dict) else {},
                )
            if not all(isinstance(item, dict) for item in data):
                raise MetaAPIError(
                    "Malformed response: 'data' items must be objects",
                    payload=result,
                )
            all_data.extend(data)

            # Check for next page
            next_url = (result.get("paging") or {}).get("next")
            if not next_url:
                break
            current_url = next_url
        else:
            logger.warning(f"Stopped after {max_pages} pages for {url}")

        logger.info(f"Fetched {len(all_data)} records from {url}")
        return all_data
