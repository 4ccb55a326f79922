import os
from typing import Optional
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel


load_dotenv()


def _env_flag(name: str, default: str = "true") -> bool:
    # Only the literal "false" disables a flag.
    return os.getenv(name, default).strip().lower() != "false"


class Settings(BaseModel):
    # Shopify
    shopify_store_domain: str | None = os.getenv("SHOPIFY_STORE_DOMAIN")
    shopify_access_token: str | None = os.getenv("SHOPIFY_ACCESS_TOKEN")
    shopify_api_version: str = os.getenv("SHOPIFY_API_VERSION", "2025-01")

    # Remote parts catalog
    parts_api_username: str | None = os.getenv("PARTS_API_USER_NAME")
    parts_api_password: str | None = os.getenv("PARTS_API_PASSWORD")
    parts_api_user_token: str | None = os.getenv("PARTS_API_USER_TOKEN")
    parts_api_endpoint: str = os.getenv("PARTS_API_ENDPOINT", "https://api.rrr.lt/v2/get/parts")
    parts_api_base_url: str = os.getenv("PARTS_API_BASE_URL", "https://api.rrr.lt")
    parts_page_size: int = int(os.getenv("PARTS_PAGE_SIZE", "100"))

    # Supabase (local mirror)
    supabase_url: str | None = os.getenv("SUPABASE_URL")
    supabase_service_role_key: str | None = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    supabase_raw_parts_table: str = os.getenv("SUPABASE_RAW_PARTS_TABLE", "rrr_parts")
    supabase_synced_parts_table: str = os.getenv("SUPABASE_SYNCED_PARTS_TABLE", "shopify_parts")

    # AWS S3 (rehosted media)
    aws_access_key_id: str | None = os.getenv("AWS_ACCESS_KEY_ID")
    aws_secret_access_key: str | None = os.getenv("AWS_SECRET_ACCESS_KEY")
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")
    aws_s3_bucket_name: str | None = os.getenv("AWS_S3_BUCKET_NAME")
    media_public_base_url: Optional[str] = os.getenv("MEDIA_PUBLIC_BASE_URL")

    # Media resolution
    media_rehost_inverted: bool = os.getenv("MEDIA_REHOST_INVERTED", "false").strip().lower() == "true"
    browser_navigation_timeout_ms: int = int(os.getenv("BROWSER_NAVIGATION_TIMEOUT_MS", "30000"))

    # Redis / Celery
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    celery_broker_url: str = os.getenv("CELERY_BROKER_URL", os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    celery_result_backend: str = os.getenv("CELERY_RESULT_BACKEND", os.getenv("REDIS_URL", "redis://localhost:6379/0"))

    # Scheduling
    cron_job_enabled: bool = _env_flag("CRON_JOB_ENABLED")
    cron_expression: str = os.getenv("CRON_EXPRESSION", "0 0 * * *")
    cron_expression_for_media_deletion: str = os.getenv("CRON_EXPRESSION_FOR_MEDIA_DELETION", "0 3 * * *")
    sync_run_lock_ttl_seconds: int = int(os.getenv("SYNC_RUN_LOCK_TTL_SECONDS", "21600"))

    # Transport
    http_timeout_seconds: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = Settings()
