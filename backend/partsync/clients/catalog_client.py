"""
Catalog HTTP client — form-authenticated calls to the remote parts API.

Every request is a POST carrying the shared credentials as form fields.
Credentials are built once per run by the caller and passed in; the
client holds no auth state of its own.
Version: 1.0.0
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from partsync.core.config import Settings
from partsync.core.exceptions import AuthOrNetworkError
from partsync.schemas.parts import CatalogCredentials

logger = logging.getLogger("catalog_client")


class CatalogClient:
    def __init__(self, settings: Settings) -> None:
        self._parts_endpoint = settings.parts_api_endpoint
        self._base_url = settings.parts_api_base_url.rstrip("/")
        self._username = settings.parts_api_username
        self._password = settings.parts_api_password
        self._user_token = settings.parts_api_user_token
        self._timeout = settings.http_timeout_seconds

    def build_credentials(self) -> CatalogCredentials:
        if not (self._username and self._password and self._user_token):
            raise AuthOrNetworkError(
                "PARTS_API_USER_NAME, PARTS_API_PASSWORD and PARTS_API_USER_TOKEN env vars are required",
                status_code=500,
            )
        return CatalogCredentials(
            username=self._username,
            password=self._password,
            user_token=self._user_token,
        )

    async def _post(
        self,
        url: str,
        credentials: CatalogCredentials,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        logger.info("catalog request url=%s params=%s", url, params)
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(url, data=credentials.as_form(), params=params)
        except httpx.RequestError as exc:
            raise AuthOrNetworkError(f"request to {url} failed: {exc!r}") from exc

        if resp.status_code != 200:
            raise AuthOrNetworkError(
                f"{url} returned {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )
        try:
            body = resp.json()
        except ValueError as exc:
            raise AuthOrNetworkError(f"{url} returned a non-JSON body: {exc}") from exc
        if not isinstance(body, dict):
            raise AuthOrNetworkError(f"{url} returned {type(body).__name__}, expected an object")
        return body

    async def fetch_parts_page(
        self, credentials: CatalogCredentials, page: int, limit: int
    ) -> Dict[str, Any]:
        """Fetch one page: {"data": [...], "pagination": {"total_count": N}}."""
        return await self._post(
            self._parts_endpoint, credentials, params={"page": page, "limit": limit}
        )

    async def fetch_car(self, credentials: CatalogCredentials, car_id: str) -> List[Any]:
        body = await self._post(f"{self._base_url}/get/car/{car_id}", credentials)
        return body.get("list") or []

    async def fetch_car_models(self, credentials: CatalogCredentials) -> List[Dict[str, Any]]:
        body = await self._post(f"{self._base_url}/get/car_models", credentials)
        return body.get("list") or []

    async def fetch_car_brands(self, credentials: CatalogCredentials) -> List[Dict[str, Any]]:
        body = await self._post(f"{self._base_url}/get/car_brands", credentials)
        return body.get("list") or []

    async def fetch_categories(self, credentials: CatalogCredentials) -> List[Dict[str, Any]]:
        body = await self._post(f"{self._base_url}/get/categories", credentials)
        return body.get("list") or []
