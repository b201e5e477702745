"""Tests for the platform adapter facade."""

from unittest.mock import patch

import pytest

from gcs_helper.env_config import object_storage_from_settings
from gcs_helper.gcs_storage import GcsObjectStorage
from gcs_helper.s3_storage import S3ObjectStorage
from tests.helpers import make_settings


def test_gcp_builds_gcs_storage() -> None:
    with patch("gcs_helper.gcs_storage.client_from_settings") as factory:
        storage = object_storage_from_settings(make_settings(platform="GCP "))
    assert isinstance(storage, GcsObjectStorage)
    factory.assert_called_once()


def test_aws_builds_s3_storage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    storage = object_storage_from_settings(make_settings(platform="aws"))
    assert isinstance(storage, S3ObjectStorage)


def test_unknown_platform_raises() -> None:
    with pytest.raises(NotImplementedError, match="not implemented"):
        object_storage_from_settings(make_settings(platform="azure"))
