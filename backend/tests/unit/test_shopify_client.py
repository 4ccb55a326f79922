"""
Unit tests for ShopifyClient HTTP transport layer.

Tests domain normalization, GID conversion, REST/GraphQL calls,
error handling, and mutation userErrors checking.

Version: 1.0.0
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from partsync.clients.shopify_client import ShopifyClient
from partsync.core.exceptions import CommerceUserError, ExternalAPIError


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_client(
    domain: str = "test-store.myshopify.com",
    token: str = "shpat_test",
    version: str = "2025-01",
) -> ShopifyClient:
    """Create a ShopifyClient with mock settings."""
    settings = MagicMock()
    settings.shopify_store_domain = domain
    settings.shopify_access_token = token
    settings.shopify_api_version = version
    settings.http_timeout_seconds = 5
    return ShopifyClient(settings)


def _patched_transport(mock_response):
    patcher = patch("partsync.clients.shopify_client.httpx.AsyncClient")
    MockAsyncClient = patcher.start()
    mock_ctx = AsyncMock()
    mock_ctx.request = AsyncMock(return_value=mock_response)
    MockAsyncClient.return_value.__aenter__ = AsyncMock(return_value=mock_ctx)
    MockAsyncClient.return_value.__aexit__ = AsyncMock(return_value=False)
    return patcher, mock_ctx


# ---------------------------------------------------------------------------
# _normalize_store_domain
# ---------------------------------------------------------------------------

class TestNormalizeStoreDomain:
    """Tests for ShopifyClient._normalize_store_domain."""

    def test_none_returns_none(self):
        assert ShopifyClient._normalize_store_domain(None) is None

    def test_bare_domain_appends_myshopify(self):
        assert ShopifyClient._normalize_store_domain("test-store") == "test-store.myshopify.com"

    def test_full_https_url_stripped(self):
        result = ShopifyClient._normalize_store_domain("https://test-store.myshopify.com/")
        assert result == "test-store.myshopify.com"


# ---------------------------------------------------------------------------
# to_gid
# ---------------------------------------------------------------------------

class TestToGid:

    def test_numeric_id_converted(self):
        assert _make_client().to_gid("Product", 12345) == "gid://shopify/Product/12345"

    def test_already_gid_returned_unchanged(self):
        gid = "gid://shopify/InventoryItem/111"
        assert _make_client().to_gid("InventoryItem", gid) == gid


# ---------------------------------------------------------------------------
# call_shopify
# ---------------------------------------------------------------------------

class TestCallShopify:
    """Tests for ShopifyClient.call_shopify."""

    @pytest.mark.asyncio
    async def test_successful_post(self):
        client = _make_client()
        mock_response = MagicMock(status_code=200, text='{"data": {}}')
        mock_response.json.return_value = {"data": {}}
        patcher, mock_ctx = _patched_transport(mock_response)
        try:
            result = await client.call_shopify("POST", "/graphql.json", json={"query": "{}"})
        finally:
            patcher.stop()

        assert result == {"data": {}}
        kwargs = mock_ctx.request.await_args.kwargs
        assert kwargs["url"] == "https://test-store.myshopify.com/admin/api/2025-01/graphql.json"
        assert kwargs["headers"]["X-Shopify-Access-Token"] == "shpat_test"

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        client = _make_client()
        patcher, _ = _patched_transport(MagicMock(status_code=429, text="Rate limited"))
        try:
            with pytest.raises(ExternalAPIError) as exc_info:
                await client.call_shopify("POST", "/graphql.json")
        finally:
            patcher.stop()
        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        client = _make_client()
        patcher, mock_ctx = _patched_transport(None)
        mock_ctx.request = AsyncMock(side_effect=httpx.ConnectError("refused"))
        try:
            with pytest.raises(ExternalAPIError):
                await client.call_shopify("POST", "/graphql.json")
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_empty_body_returns_empty_dict(self):
        client = _make_client()
        patcher, _ = _patched_transport(MagicMock(status_code=200, text=""))
        try:
            assert await client.call_shopify("POST", "/graphql.json") == {}
        finally:
            patcher.stop()


# ---------------------------------------------------------------------------
# call_shopify_graphql / run_mutation
# ---------------------------------------------------------------------------

class TestGraphQL:

    @pytest.mark.asyncio
    async def test_graphql_errors_raise_502(self):
        client = _make_client()
        client.call_shopify = AsyncMock(return_value={"errors": [{"message": "internal error"}]})

        with pytest.raises(ExternalAPIError) as exc_info:
            await client.call_shopify_graphql("query { shop { name } }")
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_graphql_sends_variables(self):
        client = _make_client()
        client.call_shopify = AsyncMock(return_value={"data": {"shop": {"name": "TestShop"}}})

        await client.call_shopify_graphql("query", {"id": "1"})

        client.call_shopify.assert_awaited_once_with(
            "POST", "/graphql.json", json={"query": "query", "variables": {"id": "1"}}
        )

    @pytest.mark.asyncio
    async def test_run_mutation_returns_operation_payload(self):
        client = _make_client()
        client.call_shopify = AsyncMock(return_value={
            "data": {"productUpdate": {"product": {"id": "gid://shopify/Product/1"}, "userErrors": []}}
        })

        result = await client.run_mutation("productUpdate", "mutation", {})
        assert result["product"]["id"] == "gid://shopify/Product/1"

    @pytest.mark.asyncio
    async def test_run_mutation_raises_on_user_errors(self):
        client = _make_client()
        errors = [{"field": ["title"], "message": "Title can't be blank"}]
        client.call_shopify = AsyncMock(return_value={"data": {"productCreate": {"product": None, "userErrors": errors}}})

        with pytest.raises(CommerceUserError) as exc_info:
            await client.run_mutation("productCreate", "mutation", {})
        assert exc_info.value.user_errors == errors

    @pytest.mark.asyncio
    async def test_run_mutation_custom_errors_key(self):
        client = _make_client()
        client.call_shopify = AsyncMock(return_value={
            "data": {"productDeleteMedia": {"mediaUserErrors": [{"message": "not found"}]}}
        })

        with pytest.raises(CommerceUserError):
            await client.run_mutation("productDeleteMedia", "mutation", {}, errors_key="mediaUserErrors")


# ---------------------------------------------------------------------------
# _base_url
# ---------------------------------------------------------------------------

class TestBaseUrl:

    def test_base_url_format(self):
        assert _make_client()._base_url() == "https://test-store.myshopify.com/admin/api/2025-01"

    def test_missing_token_raises(self):
        with pytest.raises(ExternalAPIError) as exc_info:
            _make_client(token="")._base_url()
        assert exc_info.value.status_code == 500
