"""
Parts schemas — catalog records, enrichment, media and the local mirror row.

RemotePart mirrors the catalog payload (unknown fields are kept so the
raw snapshot can be stored verbatim). SyncedPartRecord is one row of the
local mirror table, keyed by rrr_part_id.
Version: 1.0.0
"""
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator

from partsync.core.constants.catalog import IN_STOCK_STATUS
from partsync.core.constants.publishing import MEDIA_CONTENT_TYPE_IMAGE


def _to_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


class CatalogCredentials(BaseModel):
    """Form-encoded credentials sent with every catalog request."""
    model_config = ConfigDict(frozen=True)

    username: str = ""
    password: str = ""
    user_token: str = ""

    def as_form(self) -> Dict[str, str]:
        return {
            "username": self.username,
            "password": self.password,
            "user_token": self.user_token,
        }


class RemotePart(BaseModel):
    """One part record from the remote catalog."""
    model_config = ConfigDict(extra="allow")

    id: str
    name: Optional[str] = None
    notes: Optional[str] = None
    photo: Optional[str] = None
    part_photo_gallery: List[str] = Field(default_factory=list)
    original_price: Optional[str] = None
    price: Optional[str] = None
    manufacturer_code: Optional[str] = None
    car_id: Optional[str] = None
    category_id: Optional[str] = None
    status: Optional[str] = None

    @field_validator(
        "id", "original_price", "price", "manufacturer_code",
        "car_id", "category_id", "status",
        mode="before",
    )
    @classmethod
    def _stringify(cls, value: Any) -> Optional[str]:
        return _to_optional_str(value)

    @field_validator("part_photo_gallery", mode="before")
    @classmethod
    def _gallery_list(cls, value: Any) -> List[str]:
        if not value:
            return []
        if isinstance(value, str):
            return [value]
        return [str(v) for v in value if v]

    @property
    def photo_refs(self) -> List[str]:
        """Gallery when present, otherwise the single photo, otherwise nothing."""
        if self.part_photo_gallery:
            return list(self.part_photo_gallery)
        if self.photo:
            return [self.photo]
        return []

    @property
    def in_stock(self) -> bool:
        return self.status == IN_STOCK_STATUS


class CatalogPage(BaseModel):
    """One page of the catalog feed."""
    page: int
    parts: List[RemotePart] = Field(default_factory=list)
    total_count: int = 0


class EnrichmentBundle(BaseModel):
    """Reference data resolved for one part; never persisted on its own."""
    model_name: str
    year_start: str
    year_end: str
    brand_id: str
    brand_name: str
    category_label: str

    @property
    def year_range(self) -> str:
        return f"{self.year_start}-{self.year_end}"


class SkipSignal(BaseModel):
    """Outcome meaning: do not process this part any further this run."""
    part_id: str
    reason: str


class MediaDescriptor(BaseModel):
    """CreateMediaInput as sent to Shopify."""
    mediaContentType: str = MEDIA_CONTENT_TYPE_IMAGE
    originalSource: str


class ResolvedMedia(BaseModel):
    descriptors: List[MediaDescriptor] = Field(default_factory=list)
    cleanup_handles: Set[str] = Field(default_factory=set)

    def as_input(self) -> List[Dict[str, str]]:
        return [d.model_dump() for d in self.descriptors]


class SyncedPartRecord(BaseModel):
    """Local mirror row for a part that has been created in Shopify."""
    model_config = ConfigDict(extra="ignore")

    rrr_part_id: str
    shopify_product_id: str
    shopify_variant_id: Optional[str] = None
    shopify_inventory_item_id: Optional[str] = None
    metafields: Dict[str, str] = Field(default_factory=dict)
    title: Optional[str] = None
    price: Optional[str] = None
    barcode: Optional[str] = None
    description: Optional[str] = None
    media: List[Dict[str, Any]] = Field(default_factory=list)
    media_ids: List[str] = Field(default_factory=list)
    photo_refs: List[str] = Field(default_factory=list)

    @field_validator("rrr_part_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value)
