"""
Prefix-to-manifest mapping.

map_prefix lists the requested prefix and every alternate location in order
and concatenates the matches. Any listing failure aborts the whole mapping;
results from prefixes already listed are dropped.
"""

from __future__ import annotations

import logging

from .config import GcsHelperSettings
from .exceptions import InvalidRequestError
from .interfaces import ObjectLister
from .listing import ListingAdapter, RetryPolicy
from .models import Manifest, OpaqueResource, Sequence
from .prefixes import FilterPatterns, physical_prefixes, select_filter

logger = logging.getLogger(__name__)


def retry_policy_from_settings(settings: GcsHelperSettings) -> RetryPolicy:
    return RetryPolicy(
        max_attempts=settings.list_max_attempts,
        backoff=settings.list_retry_backoff,
    )


class PrefixMapper:
    """Builds the manifest for one logical prefix."""

    def __init__(
        self,
        settings: GcsHelperSettings,
        lister: ObjectLister,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._extra_prefixes = tuple(settings.map_extra_prefixes)
        self._patterns = FilterPatterns(
            standard=settings.map_regex_filter,
            hd=settings.map_regex_hd_filter,
        )
        self._adapter = ListingAdapter(lister, policy or retry_policy_from_settings(settings))

    def physical_prefixes(self, prefix: str) -> list[str]:
        return physical_prefixes(prefix, self._extra_prefixes)

    def map_prefix(self, prefix: str) -> Manifest:
        """Return the merged manifest for prefix.

        Raises InvalidRequestError for an empty prefix and ListingError when
        any physical prefix cannot be listed.
        """
        if not prefix:
            raise InvalidRequestError("prefix cannot be empty", status_code=400)
        sequences: list[Sequence] = []
        for physical in self.physical_prefixes(prefix):
            listing_prefix, pattern = select_filter(physical, self._patterns)
            found = self._adapter.expand(listing_prefix, pattern)
            logger.debug("prefix=%s matched %s objects", listing_prefix, len(found))
            sequences.extend(found)
        return Manifest(sequences=tuple(sequences))


def append_extra_resources(manifest: Manifest, resources: str | None) -> Manifest:
    """Append one sequence per non-empty comma-separated token, verbatim and unfiltered."""
    if not resources:
        return manifest
    extra = [
        Sequence.single(OpaqueResource(value=token))
        for token in resources.split(",")
        if token
    ]
    return manifest.extended(extra)
