"""Unit tests for BaseAPIClient request handling."""

import httpx
import pytest
import pytest_asyncio
import respx

from pricelens.core.exceptions import ExternalServiceError
from pricelens.services.base import BaseAPIClient

BASE_URL = "https://api.example.test"


@pytest_asyncio.fixture
async def client():
    api = BaseAPIClient(service="example", base_url=BASE_URL, timeout=1.0)
    yield api
    await api.close()


class TestBaseAPIClientRequests:
    """Tests for successful and failed requests."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_json_returns_decoded_body(self, client: BaseAPIClient) -> None:
        respx.get(f"{BASE_URL}/ping").mock(return_value=httpx.Response(200, json={"ok": True}))

        assert await client.get_json("/ping") == {"ok": True}

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_accept_header(self, client: BaseAPIClient) -> None:
        route = respx.get(f"{BASE_URL}/ping").mock(return_value=httpx.Response(200, json={}))

        await client.get_json("/ping")

        assert route.calls.last.request.headers["accept"] == "application/json"

    @pytest.mark.asyncio
    @respx.mock
    async def test_client_error_raises_with_status(self, client: BaseAPIClient) -> None:
        respx.get(f"{BASE_URL}/missing").mock(return_value=httpx.Response(404))

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.get_json("/missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.service == "example"

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_is_single_attempt(self, client: BaseAPIClient) -> None:
        route = respx.get(f"{BASE_URL}/flaky").mock(return_value=httpx.Response(503))

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.get_json("/flaky")

        assert exc_info.value.status_code == 503
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_timeout_raises_external_error(self, client: BaseAPIClient) -> None:
        respx.get(f"{BASE_URL}/slow").mock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.get_json("/slow")

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_connection_error_raises_external_error(self, client: BaseAPIClient) -> None:
        respx.get(f"{BASE_URL}/down").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(ExternalServiceError):
            await client.get_json("/down")

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_json_raises_external_error(self, client: BaseAPIClient) -> None:
        respx.get(f"{BASE_URL}/html").mock(
            return_value=httpx.Response(200, text="<html>maintenance</html>")
        )

        with pytest.raises(ExternalServiceError, match="Malformed JSON"):
            await client.get_json("/html")


class TestBaseAPIClientLifecycle:
    """Tests for lazy creation and cleanup."""

    @pytest.mark.asyncio
    async def test_client_created_lazily_and_closed(self) -> None:
        api = BaseAPIClient(service="example", base_url=BASE_URL)
        assert api._client is None

        http_client = await api._get_client()
        assert http_client is await api._get_client()

        await api.close()
        assert api._client is None

    @pytest.mark.asyncio
    async def test_close_without_requests_is_noop(self) -> None:
        api = BaseAPIClient(service="example", base_url=BASE_URL)
        await api.close()
        assert api._client is None
