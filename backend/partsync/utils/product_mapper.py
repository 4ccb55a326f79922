"""
Product mapper — pure transformation from catalog part to Shopify payload.

No I/O here: the sync engine resolves enrichment, media and the default
location first and passes them in, so every function is unit-testable
without network calls.
Version: 1.0.0
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Union

from partsync.core.constants.publishing import (
    DEFAULT_DESCRIPTION,
    DEFAULT_PRICE,
    DEFAULT_TITLE,
    INITIAL_STOCK_QUANTITY,
    METAFIELD_KEYS,
    METAFIELD_NAMESPACE,
    METAFIELD_TYPE,
    PRODUCT_TAGS,
    STATUS_ACTIVE,
    STATUS_DRAFT,
)
from partsync.schemas.parts import EnrichmentBundle, RemotePart, ResolvedMedia, SyncedPartRecord
from partsync.schemas.publishing import NoChange, ProductPayload, VariantInput

logger = logging.getLogger("product_mapper")


# ── Field helpers ─────────────────────────────────────────────────

def resolve_title(part: RemotePart) -> str:
    return part.name or DEFAULT_TITLE


def resolve_description(part: RemotePart) -> str:
    return part.notes or DEFAULT_DESCRIPTION


def resolve_price(part: RemotePart) -> str:
    """original_price, then price, then "0.00"."""
    return part.original_price or part.price or DEFAULT_PRICE


def resolve_barcode(part: RemotePart) -> str:
    return part.manufacturer_code or ""


def derive_status(price: str) -> str:
    """Zero (or unparseable) price means the product must not be purchasable."""
    try:
        amount = Decimal(str(price).strip())
    except InvalidOperation:
        logger.info(f"unparseable price {price!r}, treating as zero")
        return STATUS_DRAFT
    return STATUS_DRAFT if amount == 0 else STATUS_ACTIVE


# ── Metafields ────────────────────────────────────────────────────

def build_metafield_values(part: RemotePart, enrichment: EnrichmentBundle) -> Dict[str, str]:
    values = {
        "year": enrichment.year_range,
        "car": enrichment.brand_name,
        "part_number": part.id,
        "model": enrichment.model_name,
        "product_type": enrichment.category_label,
    }
    return {key: str(values[key]) for key in METAFIELD_KEYS}


def to_metafield_inputs(values: Dict[str, str]) -> List[Dict[str, str]]:
    return [
        {"namespace": METAFIELD_NAMESPACE, "key": key, "type": METAFIELD_TYPE, "value": value}
        for key, value in values.items()
    ]


# ── Payload builders ──────────────────────────────────────────────

def build_create_payload(
    part: RemotePart,
    enrichment: EnrichmentBundle,
    media: Optional[ResolvedMedia] = None,
    location_id: Optional[str] = None,
) -> ProductPayload:
    """Payload for productCreate + productVariantsBulkCreate.

    In-stock parts carry a starting quantity at location_id; the caller
    must supply location_id for those.
    """
    metafield_values = build_metafield_values(part, enrichment)
    variant = VariantInput(
        price=resolve_price(part),
        barcode=resolve_barcode(part),
        option_name=resolve_title(part),
    )
    if part.in_stock:
        if not location_id:
            raise ValueError(f"location_id required for in-stock part {part.id}")
        variant.location_id = location_id
        variant.inventory_quantity = INITIAL_STOCK_QUANTITY

    return ProductPayload(
        part_id=part.id,
        title=resolve_title(part),
        description_html=resolve_description(part),
        tags=list(PRODUCT_TAGS),
        metafields=to_metafield_inputs(metafield_values),
        metafield_values=metafield_values,
        variant=variant,
        media=media,
        media_changed=bool(media and media.descriptors),
        photo_refs=part.photo_refs,
        changed_fields={"title", "description", "price", "barcode", "metafields"},
    )


def build_update_payload(
    part: RemotePart,
    enrichment: EnrichmentBundle,
    existing: SyncedPartRecord,
) -> Union[ProductPayload, NoChange]:
    """Diff part against the stored record.

    Returns NoChange when nothing differs. Otherwise the payload always
    carries title, description and status; its metafields list holds only
    the changed entries. Media is flagged, not resolved: the caller
    attaches ResolvedMedia when media_changed is set.
    """
    new_values = build_metafield_values(part, enrichment)
    changed_metafields = {
        key: value
        for key, value in new_values.items()
        if existing.metafields.get(key) != value
    }

    title = resolve_title(part)
    description = resolve_description(part)
    price = resolve_price(part)
    barcode = resolve_barcode(part)
    photo_refs = part.photo_refs

    changed = set()
    if title != existing.title:
        changed.add("title")
    if description != existing.description:
        changed.add("description")
    if price != existing.price:
        changed.add("price")
    if barcode != (existing.barcode or ""):
        changed.add("barcode")
    media_changed = photo_refs != existing.photo_refs
    if media_changed:
        changed.add("media")

    if not changed and not changed_metafields:
        return NoChange(part_id=part.id)

    if changed_metafields:
        changed.add("metafields")

    merged_values = dict(existing.metafields)
    merged_values.update(changed_metafields)

    return ProductPayload(
        part_id=part.id,
        title=title,
        description_html=description,
        status=derive_status(price),
        metafields=to_metafield_inputs(changed_metafields),
        metafield_values=merged_values,
        variant=VariantInput(price=price, barcode=barcode, option_name=title),
        media_changed=media_changed,
        photo_refs=photo_refs,
        changed_fields=changed,
    )


def record_changes(payload: ProductPayload) -> Dict[str, object]:
    """Columns to $set on the local record after a successful update."""
    changes: Dict[str, object] = {}
    if "title" in payload.changed_fields:
        changes["title"] = payload.title
    if "description" in payload.changed_fields:
        changes["description"] = payload.description_html
    if "price" in payload.changed_fields:
        changes["price"] = payload.variant.price
    if "barcode" in payload.changed_fields:
        changes["barcode"] = payload.variant.barcode
    if "metafields" in payload.changed_fields:
        changes["metafields"] = payload.metafield_values
    if payload.media_changed:
        changes["media"] = payload.media_input()
        changes["photo_refs"] = payload.photo_refs
    return changes
