"""
Enrichment resolver — vehicle model, brand and category for a part.

Four dependent lookups: car by id -> car model list -> brand list ->
category list, each matched client-side by exact id. A missing match or
a failed lookup yields a SkipSignal; nothing here raises to the caller.
Version: 1.0.0
"""
import logging
from typing import Any, Dict, List, Optional, Union

from partsync.clients.catalog_client import CatalogClient
from partsync.core.exceptions import AuthOrNetworkError
from partsync.schemas.parts import CatalogCredentials, EnrichmentBundle, RemotePart, SkipSignal

logger = logging.getLogger("enrichment_resolver")


def _find_by_id(items: List[Dict[str, Any]], wanted: Any) -> Optional[Dict[str, Any]]:
    if wanted is None:
        return None
    wanted = str(wanted)
    for item in items:
        if str(item.get("id")) == wanted:
            return item
    return None


def _car_model_id(car_list: List[Any]) -> Optional[str]:
    """The car endpoint nests its record one list deep: list[0][0].car_model."""
    if not car_list:
        return None
    first = car_list[0]
    if isinstance(first, list):
        first = first[0] if first else None
    if not isinstance(first, dict):
        return None
    model_id = first.get("car_model")
    return str(model_id) if model_id is not None else None


class EnrichmentResolver:
    def __init__(self, client: CatalogClient) -> None:
        self._client = client

    async def resolve(
        self, credentials: CatalogCredentials, part: RemotePart
    ) -> Union[EnrichmentBundle, SkipSignal]:
        try:
            return await self._resolve(credentials, part)
        except AuthOrNetworkError as e:
            logger.error("enrichment lookup failed part_id=%s: %s", part.id, e)
            return SkipSignal(part_id=part.id, reason=f"lookup failed: {e}")

    async def _resolve(
        self, credentials: CatalogCredentials, part: RemotePart
    ) -> Union[EnrichmentBundle, SkipSignal]:
        if not part.car_id:
            return SkipSignal(part_id=part.id, reason="part has no car_id")

        model_id = _car_model_id(await self._client.fetch_car(credentials, part.car_id))
        if model_id is None:
            return SkipSignal(part_id=part.id, reason=f"car {part.car_id} not found")

        model = _find_by_id(await self._client.fetch_car_models(credentials), model_id)
        if model is None:
            return SkipSignal(part_id=part.id, reason=f"car model {model_id} not found")

        brand = _find_by_id(await self._client.fetch_car_brands(credentials), model.get("brand"))
        if brand is None:
            return SkipSignal(part_id=part.id, reason=f"brand {model.get('brand')} not found")

        category = _find_by_id(await self._client.fetch_categories(credentials), part.category_id)
        if category is None:
            return SkipSignal(part_id=part.id, reason=f"category {part.category_id} not found")

        fields = {
            "model_name": model.get("name"),
            "year_start": model.get("year_start"),
            "year_end": model.get("year_end"),
            "brand_id": model.get("brand"),
            "brand_name": brand.get("name"),
            "category_label": category.get("en"),
        }
        missing = [k for k, v in fields.items() if v is None or v == ""]
        if missing:
            return SkipSignal(part_id=part.id, reason=f"incomplete reference data: {', '.join(missing)}")

        return EnrichmentBundle(**{k: str(v) for k, v in fields.items()})
