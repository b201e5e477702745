"""
Object listing with bounded retry.

A listing is an idempotent read, so on any failure the partial result is
discarded and the whole listing restarts from the first page. The default
policy retries every error up to 5 attempts in total with no delay; callers
can plug in a predicate to stop early on terminal errors and an exponential
backoff base.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta

from .exceptions import ListingError
from .interfaces import ObjectLister
from .models import Sequence, StorageLocator
from .prefixes import matches

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5
LIST_DELIMITER = "/"


def _always(_exc: Exception) -> bool:
    return True


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to attempt a listing, which errors to retry, and how long to wait."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    should_retry: Callable[[Exception], bool] = field(default=_always)
    backoff: timedelta = timedelta(0)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def delay(self, attempt: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt."""
        base = self.backoff.total_seconds()
        if base <= 0:
            return 0.0
        return base * (2 ** (attempt - 1))


class ListingAdapter:
    """Lists one prefix and turns each matching object into a one-clip Sequence."""

    def __init__(
        self,
        lister: ObjectLister,
        policy: RetryPolicy | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._lister = lister
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    def _list_once(self, prefix: str, pattern: re.Pattern[str]) -> list[Sequence]:
        sequences = []
        for obj in self._lister.list_objects(prefix, delimiter=LIST_DELIMITER):
            if matches(pattern, obj.name):
                sequences.append(Sequence.single(StorageLocator(bucket=obj.bucket, key=obj.name)))
        return sequences

    def expand(self, prefix: str, pattern: re.Pattern[str]) -> list[Sequence]:
        """Return sequences for objects under prefix whose filename matches pattern.

        Raises ListingError with the last underlying error once the policy gives up.
        """
        policy = self._policy
        attempt = 0
        while True:
            attempt += 1
            try:
                return self._list_once(prefix, pattern)
            except Exception as exc:
                if attempt >= policy.max_attempts or not policy.should_retry(exc):
                    raise ListingError(prefix, attempt, exc) from exc
                delay = policy.delay(attempt)
                logger.warning(
                    "listing prefix=%s failed (attempt %s/%s), retrying in %.2fs: %s",
                    prefix,
                    attempt,
                    policy.max_attempts,
                    delay,
                    exc,
                )
                if delay:
                    self._sleep(delay)
