"""
Constants package — re-exports from domain-specific modules.

Usage:
    from partsync.core.constants.catalog import RASTER_EXTENSIONS
    from partsync.core.constants.publishing import METAFIELD_KEYS
    # or import everything:
    from partsync.core.constants import catalog, publishing
Version: 1.0.0
"""

from partsync.core.constants import catalog, publishing
from partsync.core.constants.catalog import (
    DEFAULT_PAGE_SIZE,
    FIRST_PAGE,
    IN_STOCK_STATUS,
    RASTER_EXTENSIONS,
)
from partsync.core.constants.publishing import (
    DEFAULT_TITLE,
    DEFAULT_DESCRIPTION,
    DEFAULT_PRICE,
    PRODUCT_TAGS,
    METAFIELD_NAMESPACE,
    METAFIELD_KEYS,
    STATUS_ACTIVE,
    STATUS_DRAFT,
    INITIAL_STOCK_QUANTITY,
    WAREHOUSE_RESTOCK_DELTA,
)

__all__ = [
    "catalog",
    "publishing",
    "DEFAULT_PAGE_SIZE",
    "FIRST_PAGE",
    "IN_STOCK_STATUS",
    "RASTER_EXTENSIONS",
    "DEFAULT_TITLE",
    "DEFAULT_DESCRIPTION",
    "DEFAULT_PRICE",
    "PRODUCT_TAGS",
    "METAFIELD_NAMESPACE",
    "METAFIELD_KEYS",
    "STATUS_ACTIVE",
    "STATUS_DRAFT",
    "INITIAL_STOCK_QUANTITY",
    "WAREHOUSE_RESTOCK_DELTA",
]
