import asyncio

import httpx
import pytest

from adlens.connectors.sheets.client import SheetClient, mask_url
from adlens.core.errors import RetrievalError

URL = "https://sheets.example.com/pub?output=csv"


def _fetch(client: SheetClient) -> str:
    async def _run():
        try:
            return await client.fetch_text()
        finally:
            await client.close()

    return asyncio.run(_run())


def test_returns_body_on_success():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, text="date,spend\n2024-01-29,1\n")

    client = SheetClient(URL, transport=httpx.MockTransport(handler))

    assert _fetch(client) == "date,spend\n2024-01-29,1\n"
    assert seen == [URL]


def test_follows_redirects():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "sheets.example.com":
            return httpx.Response(307, headers={"location": "https://cdn.example.com/export.csv"})
        return httpx.Response(200, text="date\n")

    client = SheetClient(URL, transport=httpx.MockTransport(handler))

    assert _fetch(client) == "date\n"


@pytest.mark.parametrize("status", [404, 500])
def test_non_success_status_is_retrieval_error(status):
    client = SheetClient(URL, transport=httpx.MockTransport(lambda r: httpx.Response(status)))

    with pytest.raises(RetrievalError) as exc:
        _fetch(client)

    assert exc.value.status_code == status
    assert str(status) in str(exc.value)


def test_network_failure_is_retrieval_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = SheetClient(URL, transport=httpx.MockTransport(handler))

    with pytest.raises(RetrievalError, match="connection refused"):
        _fetch(client)


def test_missing_source_url_is_retrieval_error():
    with pytest.raises(RetrievalError, match="No source URL"):
        _fetch(SheetClient(""))


def test_mask_url_hides_query():
    assert mask_url(URL) == "https://sheets.example.com/pub?…"
    assert mask_url("https://a.example/x.csv") == "https://a.example/x.csv"
