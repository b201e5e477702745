"""Prefix-to-manifest gateway for object storage, with optional signed URLs."""

from .exceptions import GcsHelperError, InvalidRequestError, ListingError, SigningError
from .interfaces import ListedObject, ObjectLister, SignOptions, UrlSigner
from .mapping import PrefixMapper, append_extra_resources
from .models import Clip, Manifest, ManifestOut, OpaqueResource, Sequence, StorageLocator
from .signing import URLSigningStage

__version__ = "0.1.0"
__all__ = [
    "Clip",
    "GcsHelperError",
    "InvalidRequestError",
    "ListedObject",
    "ListingError",
    "Manifest",
    "ManifestOut",
    "ObjectLister",
    "OpaqueResource",
    "PrefixMapper",
    "Sequence",
    "SignOptions",
    "SigningError",
    "StorageLocator",
    "URLSigningStage",
    "UrlSigner",
    "append_extra_resources",
]
