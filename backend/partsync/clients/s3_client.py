"""
S3 client — object upload, listing and bulk delete for rehosted media.

Requires AWS credentials with s3:PutObject, s3:ListBucket and
s3:DeleteObject on the media bucket.
"""
import logging
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import ClientError

from partsync.core.config import Settings
from partsync.core.exceptions import ExternalAPIError

logger = logging.getLogger(__name__)


def get_s3_client(settings: Settings):
    """
    Get boto3 S3 client.

    Explicit keys are passed only when configured; otherwise boto3 falls
    back to its normal credential chain.
    """
    kwargs: Dict[str, Any] = {"region_name": settings.aws_region}
    if settings.aws_access_key_id and settings.aws_secret_access_key:
        kwargs["aws_access_key_id"] = settings.aws_access_key_id
        kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
    return boto3.client("s3", **kwargs)


def _error_message(e: ClientError) -> str:
    error_code = e.response.get("Error", {}).get("Code", "Unknown")
    error_msg = e.response.get("Error", {}).get("Message", str(e))
    return f"{error_code}: {error_msg}"


class S3Client:
    def __init__(self, settings: Settings, client=None) -> None:
        self._bucket = settings.aws_s3_bucket_name
        self._region = settings.aws_region
        self._public_base_url = settings.media_public_base_url
        self._settings = settings
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_s3_client(self._settings)
        return self._client

    @property
    def bucket(self) -> str:
        if not self._bucket:
            raise ExternalAPIError("S3", "AWS_S3_BUCKET_NAME is not set", status_code=500)
        return self._bucket

    def public_url(self, key: str) -> str:
        if self._public_base_url:
            return f"{self._public_base_url.rstrip('/')}/{key}"
        return f"https://{self.bucket}.s3.{self._region}.amazonaws.com/{key}"

    async def put_object(self, key: str, body: bytes, content_type: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except ClientError as e:
            logger.error(f"S3 put_object failed key={key}: {_error_message(e)}")
            raise ExternalAPIError("S3", _error_message(e)) from e
        logger.info("s3 uploaded bucket=%s key=%s bytes=%d", self.bucket, key, len(body))

    async def delete_objects(self, keys: List[str]) -> int:
        """Bulk delete; returns how many keys S3 reports as deleted."""
        if not keys:
            return 0
        try:
            resp = self.client.delete_objects(
                Bucket=self.bucket,
                Delete={"Objects": [{"Key": k} for k in keys], "Quiet": False},
            )
        except ClientError as e:
            logger.error(f"S3 delete_objects failed count={len(keys)}: {_error_message(e)}")
            raise ExternalAPIError("S3", _error_message(e)) from e

        errors = resp.get("Errors") or []
        for err in errors:
            logger.warning("s3 delete failed key=%s code=%s", err.get("Key"), err.get("Code"))
        return len(resp.get("Deleted") or [])

    async def list_objects(self, continuation_token: Optional[str] = None) -> Dict[str, Any]:
        """One ListObjectsV2 page: {"keys": [...], "is_truncated": bool, "next_token": str|None}."""
        params: Dict[str, Any] = {"Bucket": self.bucket}
        if continuation_token:
            params["ContinuationToken"] = continuation_token
        try:
            resp = self.client.list_objects_v2(**params)
        except ClientError as e:
            logger.error(f"S3 list_objects_v2 failed: {_error_message(e)}")
            raise ExternalAPIError("S3", _error_message(e)) from e

        return {
            "keys": [obj["Key"] for obj in resp.get("Contents") or []],
            "is_truncated": bool(resp.get("IsTruncated")),
            "next_token": resp.get("NextContinuationToken"),
        }
