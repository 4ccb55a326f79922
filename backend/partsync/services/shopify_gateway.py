"""
Shopify gateway — product, variant, media and inventory operations.

Holds the GraphQL documents and turns ProductPayload objects into
mutation variables. All HTTP goes through ShopifyClient; every mutation
is checked for userErrors there.
Version: 1.0.0
"""
import logging
from typing import Any, Dict, List, Optional

from partsync.clients.shopify_client import ShopifyClient
from partsync.core.constants.publishing import (
    INVENTORY_ADJUST_REASON,
    INVENTORY_QUANTITY_NAME,
)
from partsync.core.exceptions import ExternalAPIError
from partsync.schemas.publishing import ProductPayload

logger = logging.getLogger("shopify_gateway")


PRODUCT_CREATE = """
mutation productCreate($product: ProductCreateInput!, $media: [CreateMediaInput!]) {
  productCreate(product: $product, media: $media) {
    product {
      id
      media(first: 250) { nodes { id } }
    }
    userErrors { field message }
  }
}
"""

PRODUCT_UPDATE = """
mutation productUpdate($product: ProductUpdateInput!, $media: [CreateMediaInput!]) {
  productUpdate(product: $product, media: $media) {
    product {
      id
      status
      media(first: 250) { nodes { id } }
    }
    userErrors { field message }
  }
}
"""

VARIANTS_BULK_CREATE = """
mutation productVariantsBulkCreate($productId: ID!, $variants: [ProductVariantsBulkInput!]!) {
  productVariantsBulkCreate(productId: $productId, variants: $variants, strategy: REMOVE_STANDALONE_VARIANT) {
    productVariants {
      id
      inventoryItem { id }
    }
    userErrors { field message }
  }
}
"""

VARIANTS_BULK_UPDATE = """
mutation productVariantsBulkUpdate($productId: ID!, $variants: [ProductVariantsBulkInput!]!) {
  productVariantsBulkUpdate(productId: $productId, variants: $variants) {
    productVariants { id }
    userErrors { field message }
  }
}
"""

PRODUCT_DELETE_MEDIA = """
mutation productDeleteMedia($productId: ID!, $mediaIds: [ID!]!) {
  productDeleteMedia(productId: $productId, mediaIds: $mediaIds) {
    deletedMediaIds
    mediaUserErrors { field message }
  }
}
"""

INVENTORY_ADJUST = """
mutation inventoryAdjustQuantities($input: InventoryAdjustQuantitiesInput!) {
  inventoryAdjustQuantities(input: $input) {
    inventoryAdjustmentGroup { reason }
    userErrors { field message }
  }
}
"""

LOCATIONS_QUERY = """
query {
  locations(first: 1) { edges { node { id name } } }
}
"""

PRODUCT_OPTIONS_QUERY = """
query productOptions($id: ID!) {
  product(id: $id) { options { id name } }
}
"""

AVAILABLE_QUANTITY_QUERY = """
query availableQuantity($id: ID!, $locationId: ID!) {
  inventoryItem(id: $id) {
    inventoryLevel(locationId: $locationId) {
      quantities(names: ["available"]) { name quantity }
    }
  }
}
"""


def _media_ids(product: Dict[str, Any]) -> List[str]:
    nodes = ((product.get("media") or {}).get("nodes")) or []
    return [n["id"] for n in nodes if n.get("id")]


class ShopifyGateway:
    """Commerce-side operations used by the sync engine and webhook reactor."""

    def __init__(self, client: ShopifyClient) -> None:
        self._client = client
        self._default_location_id: Optional[str] = None

    # ── Queries ───────────────────────────────────────────────────

    async def get_default_location_id(self) -> str:
        """First location of the shop, cached for the life of the gateway."""
        if self._default_location_id:
            return self._default_location_id
        data = await self._client.call_shopify_graphql(LOCATIONS_QUERY)
        edges = (((data.get("data") or {}).get("locations") or {}).get("edges")) or []
        if not edges:
            raise ExternalAPIError("Shopify", "no locations configured", status_code=404)
        self._default_location_id = edges[0]["node"]["id"]
        logger.info("shopify default location=%s", self._default_location_id)
        return self._default_location_id

    async def get_option_id(self, product_id: str) -> str:
        data = await self._client.call_shopify_graphql(
            PRODUCT_OPTIONS_QUERY, {"id": self._client.to_gid("Product", product_id)}
        )
        options = (((data.get("data") or {}).get("product") or {}).get("options")) or []
        if not options:
            raise ExternalAPIError("Shopify", f"product {product_id} has no options", status_code=404)
        return options[0]["id"]

    async def get_available_quantity(self, inventory_item_id: str, location_id: str) -> int:
        data = await self._client.call_shopify_graphql(
            AVAILABLE_QUANTITY_QUERY,
            {
                "id": self._client.to_gid("InventoryItem", inventory_item_id),
                "locationId": location_id,
            },
        )
        item = (data.get("data") or {}).get("inventoryItem") or {}
        level = item.get("inventoryLevel") or {}
        for q in level.get("quantities") or []:
            if q.get("name") == INVENTORY_QUANTITY_NAME:
                return int(q.get("quantity") or 0)
        return 0

    # ── Product mutations ─────────────────────────────────────────

    async def create_product(self, payload: ProductPayload) -> Dict[str, Any]:
        """productCreate, then productVariantsBulkCreate with price and stock.

        Returns product_id, variant_id, inventory_item_id and media_ids.
        """
        product_input = {
            "title": payload.title,
            "descriptionHtml": payload.description_html,
            "tags": payload.tags,
            "metafields": payload.metafields,
        }
        result = await self._client.run_mutation(
            "productCreate",
            PRODUCT_CREATE,
            {"product": product_input, "media": payload.media_input()},
        )
        product = result.get("product") or {}
        product_id = product.get("id")
        if not product_id:
            raise ExternalAPIError("Shopify", f"productCreate returned no product for part {payload.part_id}")
        logger.info("shopify product created part_id=%s product_id=%s", payload.part_id, product_id)

        option_id = await self.get_option_id(product_id)
        variant: Dict[str, Any] = {
            "price": payload.variant.price,
            "barcode": payload.variant.barcode,
            "optionValues": [{"optionId": option_id, "name": payload.variant.option_name}],
        }
        if payload.variant.inventory_quantity is not None and payload.variant.location_id:
            variant["inventoryQuantities"] = [{
                "locationId": payload.variant.location_id,
                "availableQuantity": payload.variant.inventory_quantity,
            }]

        try:
            variants_result = await self._client.run_mutation(
                "productVariantsBulkCreate",
                VARIANTS_BULK_CREATE,
                {"productId": product_id, "variants": [variant]},
            )
        except Exception:
            logger.critical(
                "shopify product %s created without its variant for part_id=%s (consistency risk)",
                product_id, payload.part_id,
            )
            raise
        created = (variants_result.get("productVariants") or [{}])[0]
        return {
            "product_id": product_id,
            "variant_id": created.get("id"),
            "inventory_item_id": (created.get("inventoryItem") or {}).get("id"),
            "media_ids": _media_ids(product),
        }

    async def update_product(
        self, product_id: str, variant_id: Optional[str], payload: ProductPayload
    ) -> Dict[str, Any]:
        """productUpdate, then productVariantsBulkUpdate for the stored variant."""
        product_input: Dict[str, Any] = {
            "id": self._client.to_gid("Product", product_id),
            "title": payload.title,
            "descriptionHtml": payload.description_html,
            "status": payload.status,
        }
        if payload.metafields:
            product_input["metafields"] = payload.metafields
        variables: Dict[str, Any] = {"product": product_input}
        if payload.media_changed:
            variables["media"] = payload.media_input()

        result = await self._client.run_mutation("productUpdate", PRODUCT_UPDATE, variables)
        product = result.get("product") or {}

        if variant_id:
            await self._client.run_mutation(
                "productVariantsBulkUpdate",
                VARIANTS_BULK_UPDATE,
                {
                    "productId": product_input["id"],
                    "variants": [{
                        "id": self._client.to_gid("ProductVariant", variant_id),
                        "price": payload.variant.price,
                        "barcode": payload.variant.barcode,
                    }],
                },
            )
        logger.info(
            "shopify product updated part_id=%s product_id=%s fields=%s",
            payload.part_id, product_id, sorted(payload.changed_fields),
        )
        return {"product_id": product_id, "media_ids": _media_ids(product)}

    async def delete_media(self, product_id: str, media_ids: List[str]) -> List[str]:
        if not media_ids:
            return []
        result = await self._client.run_mutation(
            "productDeleteMedia",
            PRODUCT_DELETE_MEDIA,
            {"productId": self._client.to_gid("Product", product_id), "mediaIds": media_ids},
            errors_key="mediaUserErrors",
        )
        return result.get("deletedMediaIds") or []

    async def set_product_status(self, product_id: str, status: str) -> None:
        await self._client.run_mutation(
            "productUpdate",
            PRODUCT_UPDATE,
            {"product": {"id": self._client.to_gid("Product", product_id), "status": status}},
        )
        logger.info("shopify product status set product_id=%s status=%s", product_id, status)

    # ── Inventory ─────────────────────────────────────────────────

    async def adjust_inventory(self, inventory_item_id: str, location_id: str, delta: int) -> None:
        await self._client.run_mutation(
            "inventoryAdjustQuantities",
            INVENTORY_ADJUST,
            {
                "input": {
                    "reason": INVENTORY_ADJUST_REASON,
                    "name": INVENTORY_QUANTITY_NAME,
                    "changes": [{
                        "delta": delta,
                        "inventoryItemId": self._client.to_gid("InventoryItem", inventory_item_id),
                        "locationId": location_id,
                    }],
                }
            },
        )
        logger.info(
            "shopify inventory adjusted item=%s location=%s delta=%d",
            inventory_item_id, location_id, delta,
        )
