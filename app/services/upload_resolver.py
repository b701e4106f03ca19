"""Resolve an optional uploaded file to a canonical image reference.

Two backends exist, one per storage mode: ``LocalUploadBackend`` writes the
bytes under the configured upload directory, ``S3UploadBackend`` sends them to
an S3-compatible bucket. Only one of them is active per deployment.

``UploadResolver.resolve`` never raises for a backend failure; it returns a
``FailedUpload`` so callers cannot confuse a failed upload with "no image".
"""
import asyncio
import logging
import mimetypes
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Union

import aiofiles
import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from app.exceptions import UploadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomingFile:
    filename: str
    content: bytes
    content_type: Optional[str] = None


@dataclass(frozen=True)
class LocalImage:
    filename: str


@dataclass(frozen=True)
class RemoteImage:
    url: str
    key: str


@dataclass(frozen=True)
class NoImage:
    pass


@dataclass(frozen=True)
class FailedUpload:
    reason: str


ImageReference = Union[LocalImage, RemoteImage, NoImage, FailedUpload]


def _generated_name(original: str) -> str:
    ext = os.path.splitext(original)[1].lower()
    return f"{uuid.uuid4().hex}{ext}"


class UploadBackend(Protocol):
    async def store(self, file: IncomingFile) -> ImageReference:
        ...

    async def delete(self, reference: ImageReference) -> None:
        ...


class LocalUploadBackend:
    """Writes uploads to a server-controlled directory."""

    def __init__(self, upload_dir: Union[str, Path]):
        self.upload_dir = Path(upload_dir)

    async def store(self, file: IncomingFile) -> ImageReference:
        filename = _generated_name(file.filename)
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(self.upload_dir / filename, "wb") as f:
                await f.write(file.content)
        except OSError as e:
            raise UploadError(f"Error saving file: {str(e)}") from e

        logger.info("Stored upload %s as %s", file.filename, filename)
        return LocalImage(filename=filename)

    async def delete(self, reference: ImageReference) -> None:
        if not isinstance(reference, LocalImage):
            return
        path = self.upload_dir / reference.filename
        if path.exists():
            os.unlink(path)
            logger.info("Removed local upload %s", reference.filename)


class S3UploadBackend:
    """Sends uploads to an S3-compatible bucket through a boto3 client."""

    def __init__(
        self,
        client,
        bucket: str,
        key_prefix: str = "",
        public_base_url: Optional[str] = None,
        region: str = "us-east-1"
    ):
        self.client = client
        self.bucket = bucket
        self.key_prefix = key_prefix
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.region = region

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def store(self, file: IncomingFile) -> ImageReference:
        key = f"{self.key_prefix}{_generated_name(file.filename)}"
        content_type = (
            file.content_type
            or mimetypes.guess_type(file.filename)[0]
            or "application/octet-stream"
        )
        try:
            # boto3 is blocking
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=file.content,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to upload %s to bucket %s: %s", key, self.bucket, e)
            raise UploadError(f"Cloud upload failed: {str(e)}") from e

        logger.info("Uploaded %s to bucket %s", key, self.bucket)
        return RemoteImage(url=self.public_url(key), key=key)

    async def delete(self, reference: ImageReference) -> None:
        if not isinstance(reference, RemoteImage):
            return
        try:
            await asyncio.to_thread(self.client.delete_object, Bucket=self.bucket, Key=reference.key)
        except (ClientError, BotoCoreError) as e:
            raise UploadError(f"Cloud deletion failed: {str(e)}") from e
        logger.info("Removed %s from bucket %s", reference.key, self.bucket)


def canonical_reference(reference: ImageReference) -> Optional[str]:
    """The string stored on the product: remote URL, else local filename, else None."""
    if isinstance(reference, FailedUpload):
        raise UploadError(reference.reason)
    if isinstance(reference, RemoteImage):
        return reference.url
    if isinstance(reference, LocalImage):
        return reference.filename
    return None


class UploadResolver:
    """Stages an optional upload on the active backend."""

    def __init__(self, backend: UploadBackend):
        self.backend = backend

    async def resolve(self, file: Optional[IncomingFile]) -> ImageReference:
        if file is None or not file.filename:
            return NoImage()
        if not file.content:
            logger.warning("Ignoring empty upload %s", file.filename)
            return NoImage()

        try:
            reference = await self.backend.store(file)
        except UploadError as e:
            return FailedUpload(reason=e.message)

        if isinstance(reference, RemoteImage) and not reference.url:
            return FailedUpload(reason="Storage backend returned no URL")
        return reference

    async def discard(self, reference: ImageReference) -> None:
        """Delete a staged upload whose product will not be committed."""
        if not isinstance(reference, (LocalImage, RemoteImage)):
            return
        try:
            await self.backend.delete(reference)
        except (UploadError, OSError):
            # The request already failed; keep its original error.
            logger.exception("Could not discard staged upload %s", reference)


def build_upload_backend(config) -> UploadBackend:
    """Create the backend for the configured storage mode."""
    if config.storage_mode == "cloud":
        if not config.s3_bucket:
            raise UploadError("S3_BUCKET must be set when STORAGE_MODE is 'cloud'")
        client = boto3.client(
            "s3",
            aws_access_key_id=config.s3_access_key_id,
            aws_secret_access_key=config.s3_secret_access_key,
            region_name=config.s3_region,
            endpoint_url=config.s3_endpoint_url,
            config=BotoConfig(signature_version="s3v4"),
        )
        return S3UploadBackend(
            client,
            bucket=config.s3_bucket,
            key_prefix=config.s3_key_prefix,
            public_base_url=config.s3_public_base_url,
            region=config.s3_region,
        )
    return LocalUploadBackend(config.upload_dir)
