"""
Publishing constants — product defaults, tags, metafields, inventory.

Shopify product mapping constants.
Version: 1.0.0
"""

# Fallbacks when the catalog leaves a field empty
DEFAULT_TITLE: str = "No Title"
DEFAULT_DESCRIPTION: str = "No description"
DEFAULT_PRICE: str = "0.00"

# Tags applied to every created product
PRODUCT_TAGS: list[str] = ["parts"]

# Metafields written from enrichment data
METAFIELD_NAMESPACE: str = "custom"
METAFIELD_TYPE: str = "single_line_text_field"
METAFIELD_KEYS: tuple[str, ...] = ("year", "car", "part_number", "model", "product_type")

# Product statuses
STATUS_ACTIVE: str = "ACTIVE"
STATUS_DRAFT: str = "DRAFT"

# Media content type for CreateMediaInput
MEDIA_CONTENT_TYPE_IMAGE: str = "IMAGE"

# Starting available quantity for in-stock parts on create
INITIAL_STOCK_QUANTITY: int = 100

# Inventory adjustments issued by the webhook reactor
INVENTORY_ADJUST_REASON: str = "correction"
INVENTORY_QUANTITY_NAME: str = "available"
WAREHOUSE_RESTOCK_DELTA: int = 1
WAREHOUSE_STATUS: str = "in_warehouse"
