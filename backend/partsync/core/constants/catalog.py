"""
Catalog constants — paging, stock status codes, media classification.

Remote parts catalog constants.
Version: 1.0.0
"""

# Parts requested per catalog page
DEFAULT_PAGE_SIZE: int = 100

# First page index of the catalog API
FIRST_PAGE: int = 1

# RemotePart.status value meaning "in stock"
IN_STOCK_STATUS: str = "0"

# Image extensions that are fetched and rehosted; everything else is used as-is
RASTER_EXTENSIONS: frozenset[str] = frozenset({"jpg", "jpeg", "png"})

# Content types for rehosted uploads, keyed by lowercase extension
IMAGE_CONTENT_TYPES: dict[str, str] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
}

# Object key prefix for rehosted images
MEDIA_KEY_PREFIX: str = "images"

# User agent presented by the headless browser when fetching images
BROWSER_USER_AGENT: str = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/113.0.0.0 Safari/537.36"
)
