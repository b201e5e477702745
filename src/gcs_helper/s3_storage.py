"""S3 implementation of ObjectLister and UrlSigner."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timezone

import boto3
from botocore.config import Config

from .config import ClientSettings
from .interfaces import ListedObject, SignOptions


def client_config(settings: ClientSettings) -> Config:
    """botocore Config with timeouts and connection pool size from settings."""
    timeout = settings.timeout.total_seconds()
    return Config(
        connect_timeout=timeout,
        read_timeout=timeout,
        max_pool_connections=settings.max_idle_conns,
        retries={"total_max_attempts": 1},
    )


class S3ObjectStorage:
    """Lists one bucket with list_objects_v2 and presigns GET URLs."""

    def __init__(
        self,
        bucket_name: str,
        *,
        region_name: str | None = None,
        endpoint_url: str | None = None,
        config: Config | None = None,
    ) -> None:
        self._bucket_name = bucket_name
        self._region_name = region_name
        self._endpoint_url = endpoint_url
        self._client = boto3.client(
            "s3",
            region_name=region_name,
            endpoint_url=endpoint_url,
            config=config,
        )

    def list_objects(self, prefix: str, *, delimiter: str = "/") -> Iterator[ListedObject]:
        """Yield objects under prefix, one page at a time."""
        paginator = self._client.get_paginator("list_objects_v2")
        pages = paginator.paginate(Bucket=self._bucket_name, Prefix=prefix, Delimiter=delimiter)
        for page in pages:
            for item in page.get("Contents", []):
                yield ListedObject(bucket=self._bucket_name, name=item["Key"])

    def sign(self, bucket: str, key: str, options: SignOptions) -> str:
        """Presign a URL for bucket/key using the access id / private key as the key pair."""
        client = boto3.client(
            "s3",
            region_name=self._region_name,
            endpoint_url=self._endpoint_url,
            aws_access_key_id=options.access_id,
            aws_secret_access_key=options.private_key.decode("utf-8"),
        )
        expires_in = int((options.expires_at - datetime.now(timezone.utc)).total_seconds())
        operation = "head_object" if options.method.upper() == "HEAD" else "get_object"
        return client.generate_presigned_url(
            operation,
            Params={"Bucket": bucket, "Key": key},
            ExpiresIn=max(1, expires_in),
        )
