"""
Cloud-agnostic interfaces for object listing and URL signing.

Implementations (GCS via google-cloud-storage, S3 via boto3) live in
gcs_storage and s3_storage. The mapping engine depends on these interfaces
and receives the implementation at construction time.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


class ListedObject(BaseModel):
    """One object reported by a listing: bucket name and full object key."""

    model_config = ConfigDict(frozen=True)

    bucket: str
    name: str


class SignOptions(BaseModel):
    """Options for one signed URL. expires_at is absolute and timezone-aware."""

    model_config = ConfigDict(frozen=True)

    method: str = "GET"
    access_id: str
    private_key: bytes
    expires_at: datetime


@runtime_checkable
class ObjectLister(Protocol):
    """Paginated listing of one bucket by prefix."""

    def list_objects(self, prefix: str, *, delimiter: str = "/") -> Iterable[ListedObject]:
        """
        Yield objects directly under prefix (non-recursive when delimiter is "/").

        Iteration is lazy and may raise a transport error at any page boundary.
        Normal exhaustion means there are no more results.
        """
        ...


@runtime_checkable
class UrlSigner(Protocol):
    """Produce time-limited signed URLs."""

    def sign(self, bucket: str, key: str, options: SignOptions) -> str:
        """Return an absolute signed URL for bucket/key. Raises on malformed credentials."""
        ...
