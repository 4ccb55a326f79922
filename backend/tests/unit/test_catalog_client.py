"""
Unit tests for CatalogClient — form-authenticated catalog requests.

Version: 1.0.0
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from partsync.clients.catalog_client import CatalogClient
from partsync.core.exceptions import AuthOrNetworkError


pytestmark = pytest.mark.unit


@pytest.fixture
def client(mock_settings):
    return CatalogClient(mock_settings)


@pytest.fixture
def transport():
    """Patch httpx.AsyncClient; yields the object whose .post is awaited."""
    with patch("partsync.clients.catalog_client.httpx.AsyncClient") as MockAsyncClient:
        mock_ctx = AsyncMock()
        MockAsyncClient.return_value.__aenter__ = AsyncMock(return_value=mock_ctx)
        MockAsyncClient.return_value.__aexit__ = AsyncMock(return_value=False)
        yield mock_ctx


def _response(status_code=200, body=None, text=""):
    resp = MagicMock(status_code=status_code, text=text)
    resp.json.return_value = body or {}
    return resp


class TestBuildCredentials:

    def test_credentials_from_settings(self, client):
        creds = client.build_credentials()
        assert creds.as_form() == {"username": "test-user", "password": "test-pass", "user_token": "test-token"}

    def test_missing_credentials_raise(self, mock_settings):
        mock_settings.parts_api_user_token = None
        with pytest.raises(AuthOrNetworkError):
            CatalogClient(mock_settings).build_credentials()


class TestRequests:

    @pytest.mark.asyncio
    async def test_parts_page_posts_credentials_and_paging(self, client, credentials, transport):
        body = {"data": [{"id": "1"}], "pagination": {"total_count": 1}}
        transport.post = AsyncMock(return_value=_response(body=body))

        result = await client.fetch_parts_page(credentials, 2, 50)

        assert result == body
        args, kwargs = transport.post.await_args
        assert args[0] == "https://catalog.test/v2/get/parts"
        assert kwargs["data"] == credentials.as_form()
        assert kwargs["params"] == {"page": 2, "limit": 50}

    @pytest.mark.asyncio
    async def test_reference_lookups_unwrap_list(self, client, credentials, transport):
        transport.post = AsyncMock(return_value=_response(body={"list": [{"id": "42", "en": "Bumpers"}]}))

        assert await client.fetch_categories(credentials) == [{"id": "42", "en": "Bumpers"}]
        assert transport.post.await_args.args[0] == "https://catalog.test/get/categories"

    @pytest.mark.asyncio
    async def test_car_lookup_url(self, client, credentials, transport):
        transport.post = AsyncMock(return_value=_response(body={}))

        assert await client.fetch_car(credentials, "501") == []
        assert transport.post.await_args.args[0] == "https://catalog.test/get/car/501"

    @pytest.mark.asyncio
    async def test_non_200_raises(self, client, credentials, transport):
        transport.post = AsyncMock(return_value=_response(status_code=401, text="denied"))

        with pytest.raises(AuthOrNetworkError) as exc_info:
            await client.fetch_car_brands(credentials)
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, client, credentials, transport):
        transport.post = AsyncMock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(AuthOrNetworkError):
            await client.fetch_car_models(credentials)

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self, client, credentials, transport):
        resp = _response(text="<html>maintenance</html>")
        resp.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        transport.post = AsyncMock(return_value=resp)

        with pytest.raises(AuthOrNetworkError, match="non-JSON"):
            await client.fetch_parts_page(credentials, 2, 100)

    @pytest.mark.asyncio
    async def test_non_object_body_raises(self, client, credentials, transport):
        resp = _response()
        resp.json.return_value = ["not", "an", "object"]
        transport.post = AsyncMock(return_value=resp)

        with pytest.raises(AuthOrNetworkError, match="expected an object"):
            await client.fetch_car_models(credentials)
