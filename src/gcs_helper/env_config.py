"""
Platform adapter facade: build the storage adapter from settings by platform (gcp | aws).

The returned object implements both ObjectLister and UrlSigner. Region and
endpoint for aws are resolved by boto3 from its usual AWS_* variables.
"""

from __future__ import annotations

from .config import GcsHelperSettings


def object_storage_from_settings(settings: GcsHelperSettings):
    """Return the storage adapter for settings.platform."""
    if settings.platform == "gcp":
        from .gcs_storage import GcsObjectStorage, client_from_settings

        return GcsObjectStorage(
            client_from_settings(settings.client),
            settings.bucket_name,
            timeout=settings.client.timeout.total_seconds(),
        )
    if settings.platform == "aws":
        from .s3_storage import S3ObjectStorage, client_config

        return S3ObjectStorage(settings.bucket_name, config=client_config(settings.client))
    raise NotImplementedError(
        f"platform={settings.platform!r} is not implemented; use gcp or aws."
    )
