"""Pytest fixtures: app and settings wired to the in-memory storage fake."""

import os

import pytest
from fastapi.testclient import TestClient

from gcs_helper.config import GcsHelperSettings
from gcs_helper.main import create_app
from tests.helpers import FakeObjectStorage, make_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop gcs-helper variables inherited from the environment."""
    for name in list(os.environ):
        if name.startswith(("GCS_HELPER_", "GCS_CLIENT_", "GCS_SIGNER_")):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def settings() -> GcsHelperSettings:
    return make_settings()


@pytest.fixture
def client(settings: GcsHelperSettings, storage: FakeObjectStorage) -> TestClient:
    """TestClient for an app wired to the fake storage."""
    return TestClient(create_app(settings, storage))
