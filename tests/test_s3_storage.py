"""Tests for the S3 lister and signer (moto-backed)."""

from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlsplit

import boto3
import pytest
from moto import mock_aws

from gcs_helper.config import ClientSettings
from gcs_helper.interfaces import ObjectLister, SignOptions, UrlSigner
from gcs_helper.s3_storage import S3ObjectStorage, client_config

BUCKET = "test-media-bucket"


@pytest.fixture
def aws_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set fake AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def media_bucket(aws_credentials):
    """Create a bucket with objects at two levels."""
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=BUCKET)
        for key in (
            "videos/asset/asset_720p.mp4",
            "videos/asset/asset_360p.mp4",
            "videos/asset/nested/deep_720p.mp4",
            "videos/other/other_720p.mp4",
        ):
            client.put_object(Bucket=BUCKET, Key=key, Body=b"x")
        yield BUCKET


def test_implements_interfaces(media_bucket: str) -> None:
    storage = S3ObjectStorage(media_bucket, region_name="us-east-1")
    assert isinstance(storage, ObjectLister)
    assert isinstance(storage, UrlSigner)


def test_list_is_non_recursive(media_bucket: str) -> None:
    storage = S3ObjectStorage(media_bucket, region_name="us-east-1")
    objects = list(storage.list_objects("videos/asset/", delimiter="/"))
    assert [o.name for o in objects] == [
        "videos/asset/asset_360p.mp4",
        "videos/asset/asset_720p.mp4",
    ]
    assert {o.bucket for o in objects} == {media_bucket}


def test_list_missing_prefix_is_empty(media_bucket: str) -> None:
    storage = S3ObjectStorage(media_bucket, region_name="us-east-1")
    assert list(storage.list_objects("nothing/")) == []


def test_sign_uses_given_key_pair_and_expiry(media_bucket: str) -> None:
    storage = S3ObjectStorage(media_bucket, region_name="us-east-1")
    options = SignOptions(
        access_id="AKIDSIGNER",
        private_key=b"signer-secret",
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=10),
    )
    url = storage.sign(media_bucket, "videos/asset/asset_720p.mp4", options)
    parts = urlsplit(url)
    assert parts.path.endswith("videos/asset/asset_720p.mp4")
    query = parse_qs(parts.query)
    credential = query.get("X-Amz-Credential", query.get("AWSAccessKeyId", [""]))[0]
    assert credential.startswith("AKIDSIGNER")


def test_client_config_from_settings() -> None:
    config = client_config(
        ClientSettings(timeout=timedelta(seconds=5), max_idle_conns=16)
    )
    assert config.connect_timeout == 5
    assert config.read_timeout == 5
    assert config.max_pool_connections == 16


def test_idle_conn_timeout_parsed_but_not_applied() -> None:
    settings = ClientSettings(idle_conn_timeout="3m")
    assert settings.idle_conn_timeout == timedelta(minutes=3)
    config = client_config(settings)
    assert config.max_pool_connections == settings.max_idle_conns
