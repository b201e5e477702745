"""Dependencies and app state for FastAPI routes."""

from fastapi import Request

from .config import GcsHelperSettings
from .mapping import PrefixMapper
from .signing import URLSigningStage


def get_app_settings(request: Request) -> GcsHelperSettings:
    """Return settings stored on app state by create_app."""
    return request.app.state.settings


def get_object_storage(request: Request):
    """Return the storage adapter from app state, building it from settings on first use."""
    storage = getattr(request.app.state, "object_storage", None)
    if storage is not None:
        return storage
    from .env_config import object_storage_from_settings

    storage = object_storage_from_settings(get_app_settings(request))
    request.app.state.object_storage = storage
    return storage


def get_prefix_mapper(request: Request) -> PrefixMapper:
    """Return the PrefixMapper from app state or build it around the storage adapter."""
    mapper = getattr(request.app.state, "prefix_mapper", None)
    if mapper is not None:
        return mapper
    mapper = PrefixMapper(get_app_settings(request), get_object_storage(request))
    request.app.state.prefix_mapper = mapper
    return mapper


def get_signing_stage(request: Request) -> URLSigningStage:
    """Return the URL signing stage; signing is a no-op when credentials are not configured."""
    stage = getattr(request.app.state, "signing_stage", None)
    if stage is not None:
        return stage
    settings = get_app_settings(request)
    signer = get_object_storage(request) if settings.signer.enabled else None
    stage = URLSigningStage(settings.signer, signer)
    request.app.state.signing_stage = stage
    return stage
