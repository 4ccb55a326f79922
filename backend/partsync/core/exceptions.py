"""
Custom exception hierarchy for the parts sync service.

Exceptions are categorized as:
- RetryableError: Transient errors; the supervising Celery task may
  restart a whole run after a backoff
- NonRetryableError: Permanent errors for a single part; the part is
  logged as failed and the run moves on

The reconciliation engine itself never retries. Per-part errors are
caught at the per-part boundary; only AuthOrNetworkError raised before
the first catalog page aborts a run.
"""
from typing import Any, Dict, List


class PartSyncException(Exception):
    """Base exception for the parts sync service."""
    pass


# ============================================
# RETRYABLE ERRORS - may restart a whole run
# ============================================
class RetryableError(PartSyncException):
    """
    Base class for errors where a later attempt might succeed:
    - Network timeouts
    - Temporary service unavailability
    - Store connection hiccups
    """
    pass


class ExternalAPIError(RetryableError):
    """
    Error from an external HTTP API (catalog, Shopify).

    Typically transient - the external service might recover.
    """
    def __init__(self, service: str, message: str, status_code: int = None):
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service} API error: {message}")


class AuthOrNetworkError(ExternalAPIError):
    """
    Catalog or auxiliary reference API unreachable, or it rejected the
    credentials.

    Fatal for a run only when raised before the first page was fetched.
    """
    def __init__(self, message: str, status_code: int = None):
        super().__init__("Parts catalog", message, status_code)


class LocalStoreError(RetryableError):
    """
    Local mirror (Supabase) read or write failed.

    When raised after a successful Shopify mutation the part is left in a
    possibly inconsistent state; it is logged, never rolled back.
    """
    def __init__(self, table: str, message: str):
        self.table = table
        super().__init__(f"Local store {table} failed: {message}")


# ============================================
# NON-RETRYABLE ERRORS - fail one part
# ============================================
class NonRetryableError(PartSyncException):
    """
    Base class for errors where retrying won't help:
    - Image source refused or vanished
    - Shopify rejected the payload
    """
    pass


class MediaFetchError(NonRetryableError):
    """Image fetch returned a non-200 status or no response at all."""
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Unable to fetch media {url}: {reason}")


class CommerceUserError(NonRetryableError):
    """Shopify mutation reported field-level userErrors."""
    def __init__(self, operation: str, user_errors: List[Dict[str, Any]]):
        self.operation = operation
        self.user_errors = user_errors
        super().__init__(f"Shopify {operation} userErrors: {user_errors}")
