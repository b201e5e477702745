"""
FastAPI app: maps a storage prefix to a JSON clip manifest.

Paths starting with the configured map prefix go to the mapping handler;
``/`` is a health check; anything else is 404.
"""

import logging

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from . import __version__
from .config import GcsHelperSettings, get_settings
from .deps import get_app_settings, get_prefix_mapper, get_signing_stage
from .env_config import object_storage_from_settings
from .exceptions import InvalidRequestError, ListingError, SigningError
from .logging_config import configure_logging, parse_log_level
from .mapping import append_extra_resources

logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

router = APIRouter()


def _extra_resources(request: Request, token: str) -> str | None:
    """Return the first value of the extra-resources query parameter, if configured."""
    if not token:
        return None
    values = request.query_params.getlist(token)
    return values[0] if values else None


def map_request(request: Request, prefix: str) -> Response:
    """Handle one mapping request for an already-stripped logical prefix."""
    if request.method != "GET":
        return PlainTextResponse("method not allowed", status_code=405)
    settings = get_app_settings(request)
    try:
        if not prefix:
            raise InvalidRequestError("prefix cannot be empty", status_code=400)
        manifest = get_prefix_mapper(request).map_prefix(prefix)
    except InvalidRequestError as e:
        return PlainTextResponse(str(e), status_code=e.status_code)
    except ListingError as e:
        logger.error("failed to map request prefix=%s attempts=%s: %s", prefix, e.attempts, e)
        return PlainTextResponse(str(e), status_code=500)
    manifest = append_extra_resources(
        manifest, _extra_resources(request, settings.extra_resources_token)
    )
    try:
        manifest = get_signing_stage(request).sign_manifest(manifest)
    except SigningError as e:
        logger.error("failed to sign URLs bucket=%s key=%s: %s", e.bucket, e.key, e)
        return PlainTextResponse(str(e), status_code=500)
    return JSONResponse(manifest.to_wire().model_dump())


@router.api_route("/{path:path}", methods=ALL_METHODS)
def dispatch(request: Request, settings: GcsHelperSettings = Depends(get_app_settings)) -> Response:
    """Route to the mapping handler, the health check, or 404."""
    path = request.url.path
    if path.startswith(settings.map_prefix):
        prefix = path.replace(settings.map_prefix, "", 1).lstrip("/")
        return map_request(request, prefix)
    if path == "/":
        return Response(status_code=200)
    return PlainTextResponse("not found", status_code=404)


def create_app(settings: GcsHelperSettings, storage=None) -> FastAPI:
    """Build the app around immutable settings; storage defaults to the platform adapter."""
    # No docs routes: every path belongs to the dispatcher
    app = FastAPI(
        title="gcs-helper",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    if storage is not None:
        app.state.object_storage = storage
    app.include_router(router)
    return app


def app_from_env() -> FastAPI:
    """App factory for ``uvicorn --factory gcs_helper.main:app_from_env``.

    The storage client (and its connection pool) is built here, so bad
    credentials fail startup instead of every request.
    """
    settings = get_settings()
    configure_logging(parse_log_level(settings.log_level))
    logger.info(
        "gcs-helper starting (listen=%s, bucket=%s, platform=%s, signing=%s)",
        settings.listen,
        settings.bucket_name,
        settings.platform,
        settings.signer.enabled,
    )
    return create_app(settings, object_storage_from_settings(settings))


def run() -> None:
    app = app_from_env()
    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
