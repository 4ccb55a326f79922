import logging
from typing import Any, Dict, Optional

import httpx

from partsync.core.config import Settings
from partsync.core.exceptions import CommerceUserError, ExternalAPIError

logger = logging.getLogger("shopify_client")


class ShopifyClient:
    """HTTP transport for the Shopify Admin API (GraphQL)."""

    def __init__(self, settings: Settings) -> None:
        raw_domain = settings.shopify_store_domain
        self._store_domain = self._normalize_store_domain(raw_domain)
        self._token = settings.shopify_access_token
        self._api_version = settings.shopify_api_version
        self._timeout = settings.http_timeout_seconds
        logger.info(f"ShopifyClient initialized: domain={self._store_domain} (raw: {raw_domain})")

    @staticmethod
    def _normalize_store_domain(domain: Optional[str]) -> Optional[str]:
        """
        Normalize Shopify store domain to ensure it has .myshopify.com suffix.

        Handles these formats:
        - "my-store" -> "my-store.myshopify.com"
        - "my-store.myshopify.com" -> "my-store.myshopify.com" (unchanged)
        - "https://my-store.myshopify.com" -> "my-store.myshopify.com" (strips protocol)
        """
        if not domain:
            return domain

        domain = domain.replace("https://", "").replace("http://", "")
        domain = domain.rstrip("/")

        if not domain.endswith(".myshopify.com"):
            domain = f"{domain}.myshopify.com"

        return domain

    @staticmethod
    def to_gid(entity: str, value: str | int) -> str:
        if isinstance(value, str) and value.startswith("gid://"):
            return value
        return f"gid://shopify/{entity}/{value}"

    def _base_url(self) -> str:
        if not self._store_domain or not self._token:
            raise ExternalAPIError("Shopify", "Shopify env vars missing", status_code=500)
        return f"https://{self._store_domain}/admin/api/{self._api_version}"

    async def call_shopify(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        base = self._base_url()
        url = f"{base}{path}"
        logger.info("shopify request method=%s path=%s", method, path)

        headers = {
            "X-Shopify-Access-Token": self._token or "",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(method=method, url=url, headers=headers, json=json, params=params)
        except httpx.RequestError as exc:
            raise ExternalAPIError("Shopify", f"request failed: {exc!r}") from exc

        logger.info("shopify response status=%s path=%s", resp.status_code, path)
        if resp.status_code >= 400:
            raise ExternalAPIError("Shopify", resp.text, status_code=resp.status_code)

        if resp.text:
            return resp.json()
        return {}

    async def call_shopify_graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload = {"query": query, "variables": variables or {}}
        data = await self.call_shopify("POST", "/graphql.json", json=payload)
        if data.get("errors"):
            raise ExternalAPIError("Shopify", str(data.get("errors")), status_code=502)
        return data

    async def run_mutation(
        self,
        operation: str,
        mutation: str,
        variables: Optional[Dict[str, Any]] = None,
        errors_key: str = "userErrors",
    ) -> Dict[str, Any]:
        """Execute a mutation and return its payload; a non-empty errors list raises."""
        data = await self.call_shopify_graphql(mutation, variables)
        result = (data.get("data") or {}).get(operation) or {}
        errors = result.get(errors_key) or []
        if errors:
            logger.info("shopify %s %s=%s", operation, errors_key, errors)
            raise CommerceUserError(operation, errors)
        return result
