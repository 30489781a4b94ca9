# academy/services/uploads.py
"""
Photo storage. Uploads create new objects only; nothing is overwritten and
the API never reads objects back.
"""
import logging
import mimetypes
import uuid
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from academy.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp", "image/heic"}


class UploadError(Exception):
    pass


class Uploader(Protocol):
    def store(self, data: bytes, *, content_type: str, filename: str | None = None) -> str:
        ...


def get_s3_client():
    """
    S3 client; ``S3_ENDPOINT_URL`` switches to an S3-compatible store (MinIO).
    """
    kwargs = dict(
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.AWS_REGION,
    )
    if settings.S3_ENDPOINT_URL:
        kwargs["endpoint_url"] = settings.S3_ENDPOINT_URL
    return boto3.client("s3", **kwargs)


def object_key(content_type: str, filename: str | None = None) -> str:
    ext = mimetypes.guess_extension(content_type) or ""
    if not ext and filename and "." in filename:
        ext = "." + filename.rsplit(".", 1)[1].lower()
    return f"reservations/{uuid.uuid4().hex}{ext}"


def public_url(key: str, bucket: str | None = None) -> str:
    bucket = bucket or settings.S3_BUCKET_NAME
    if settings.S3_PUBLIC_BASE_URL:
        return f"{settings.S3_PUBLIC_BASE_URL.rstrip('/')}/{key}"
    if settings.S3_ENDPOINT_URL:
        return f"{settings.S3_ENDPOINT_URL.rstrip('/')}/{bucket}/{key}"
    return f"https://{bucket}.s3.{settings.AWS_REGION}.amazonaws.com/{key}"


class S3Uploader:
    def __init__(self, client=None, bucket: str | None = None):
        self.bucket = bucket or settings.S3_BUCKET_NAME
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_s3_client()
        return self._client

    def store(self, data: bytes, *, content_type: str, filename: str | None = None) -> str:
        if not self.bucket:
            logger.error("Photo upload attempted but S3_BUCKET_NAME is not configured")
            raise UploadError("S3_BUCKET_NAME is not configured")
        key = object_key(content_type, filename)
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload {key} to bucket {self.bucket}: {e}")
            raise UploadError("photo upload failed") from e
        logger.info(f"Uploaded photo {key} ({len(data)} bytes)")
        return public_url(key, self.bucket)


def get_uploader() -> Uploader:
    return S3Uploader()
