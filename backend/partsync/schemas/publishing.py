"""
Publishing schemas — product payloads produced by the product mapper.

Version: 1.0.0
"""
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field

from partsync.schemas.parts import ResolvedMedia


class VariantInput(BaseModel):
    price: str
    barcode: str = ""
    option_name: str
    # Set only for in-stock parts on create
    location_id: Optional[str] = None
    inventory_quantity: Optional[int] = None


class ProductPayload(BaseModel):
    """Everything the gateway needs for one productCreate/productUpdate."""
    part_id: str
    title: str
    description_html: str
    tags: List[str] = Field(default_factory=list)
    status: Optional[str] = None
    metafields: List[Dict[str, str]] = Field(default_factory=list)
    # Full metafield values after this write, for the local mirror
    metafield_values: Dict[str, str] = Field(default_factory=dict)
    variant: VariantInput
    media: Optional[ResolvedMedia] = None
    media_changed: bool = False
    photo_refs: List[str] = Field(default_factory=list)
    changed_fields: Set[str] = Field(default_factory=set)

    def media_input(self) -> List[Dict[str, Any]]:
        if self.media is None:
            return []
        return self.media.as_input()


class NoChange(BaseModel):
    """Update evaluation found nothing to write."""
    part_id: str
