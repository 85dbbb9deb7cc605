"""ADLENS — Published Spreadsheet Client.

Fetches the raw CSV export of a published spreadsheet. A single GET per
call: retry policy belongs to whoever restarts the pipeline.
"""

from typing import Optional

import httpx

from adlens.config import settings
from adlens.core.errors import RetrievalError
from adlens.core.logging import get_logger

logger = get_logger("sheets.client")


def mask_url(url: str) -> str:
    """Hide the query string of a source URL for safe logging."""
    return url.split("?", 1)[0] + ("?…" if "?" in url else "")


class SheetClient:
    """Async HTTP client for a published CSV endpoint."""

    def __init__(
        self,
        source_url: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.source_url = settings.source_url if source_url is None else source_url
        self.timeout = settings.request_timeout if timeout is None else timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def fetch_text(self) -> str:
        """GET the CSV payload; non-2xx and transport failures raise RetrievalError."""
        if not self.source_url:
            raise RetrievalError("No source URL configured")

        client = await self._get_client()
        try:
            resp = await client.get(self.source_url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(
                f"Source returned HTTP {status}",
                extra={"status_code": status},
            )
            raise RetrievalError(
                f"Failed to fetch data (HTTP {status})", status_code=status
            ) from e
        except httpx.RequestError as e:
            raise RetrievalError(f"Failed to fetch data: {e}") from e

        text = resp.text
        logger.info(
            f"Fetched {len(text)} characters from {mask_url(self.source_url)}",
            extra={"status_code": resp.status_code},
        )
        return text
