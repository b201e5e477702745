"""URL signing stage: rewrite storage clips into signed, time-limited request URIs."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from .config import SignerSettings
from .exceptions import SigningError
from .interfaces import UrlSigner
from .models import Clip, Manifest, OpaqueResource, Sequence, StorageLocator

logger = logging.getLogger(__name__)


def request_uri(url: str) -> str:
    """Return the path and query of an absolute URL."""
    parts = urlsplit(url)
    path = parts.path or "/"
    if parts.query:
        return f"{path}?{parts.query}"
    return path


class URLSigningStage:
    """Signs every StorageLocator clip of a manifest; other clips pass through.

    Each clip gets its own expiry computed at signing time.
    """

    def __init__(self, settings: SignerSettings, signer: UrlSigner | None) -> None:
        self._settings = settings
        self._signer = signer

    @property
    def enabled(self) -> bool:
        return self._settings.enabled and self._signer is not None

    def _sign_clip(self, clip: Clip) -> Clip:
        resource = clip.resource
        if not isinstance(resource, StorageLocator):
            return clip
        options = self._settings.options()
        try:
            url = self._signer.sign(resource.bucket, resource.key, options)
            signed = request_uri(url)
        except Exception as exc:
            raise SigningError(resource.bucket, resource.key, exc) from exc
        return clip.model_copy(update={"resource": OpaqueResource(value=signed)})

    def sign_manifest(self, manifest: Manifest) -> Manifest:
        """Return a new manifest with signed paths. Raises SigningError on the first failure."""
        if not self.enabled:
            return manifest
        sequences = [
            Sequence(clips=tuple(self._sign_clip(clip) for clip in seq.clips))
            for seq in manifest.sequences
        ]
        logger.debug("signed %s sequences", len(sequences))
        return Manifest(sequences=tuple(sequences))
