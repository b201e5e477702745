"""Shared test helpers: settings factory and in-memory storage fake."""

from collections.abc import Iterator

from gcs_helper.config import GcsHelperSettings, SignerSettings
from gcs_helper.interfaces import ListedObject, SignOptions

BUCKET = "some-bucket"
STANDARD_FILTER = r"(240|360|424|480|720|1080)p(\.mp4|[a-z0-9_-]{37}\.(vtt|srt))$"
HD_FILTER = r"((720|1080)p\.mp4)|(\.(vtt|srt))$"


class FakeObjectStorage:
    """ObjectLister and UrlSigner for tests.

    objects maps a listing prefix to object keys. failures maps a prefix to
    the errors raised by successive listings (popped in order); each failing
    listing yields one object before raising, to exercise partial pages.
    """

    def __init__(
        self,
        objects: dict[str, list[str]] | None = None,
        failures: dict[str, list[Exception]] | None = None,
        sign_error: Exception | None = None,
    ) -> None:
        self.objects = objects or {}
        self.failures = failures or {}
        self.sign_error = sign_error
        self.list_calls: list[tuple[str, str]] = []
        self.sign_calls: list[tuple[str, str, SignOptions]] = []

    def list_objects(self, prefix: str, *, delimiter: str = "/") -> Iterator[ListedObject]:
        self.list_calls.append((prefix, delimiter))
        names = self.objects.get(prefix, [])
        pending = self.failures.get(prefix)
        if pending:
            error = pending.pop(0)
            for name in names[:1]:
                yield ListedObject(bucket=BUCKET, name=name)
            raise error
        for name in names:
            yield ListedObject(bucket=BUCKET, name=name)

    def sign(self, bucket: str, key: str, options: SignOptions) -> str:
        self.sign_calls.append((bucket, key, options))
        if self.sign_error is not None:
            raise self.sign_error
        expires = int(options.expires_at.timestamp())
        return (
            f"https://storage.googleapis.com/{bucket}/{key}"
            f"?Expires={expires}&GoogleAccessId={options.access_id}&Signature=c2ln"
        )


def make_settings(**overrides) -> GcsHelperSettings:
    """Settings with test defaults; keyword arguments override fields."""
    values = {
        "bucket_name": BUCKET,
        "map_prefix": "/map/",
        "extra_resources_token": "extra",
        "map_regex_filter": STANDARD_FILTER,
        "map_regex_hd_filter": HD_FILTER,
        "map_extra_prefixes": ["subtitles/", "mp4s/"],
        "signer": SignerSettings(),
    }
    values.update(overrides)
    return GcsHelperSettings(**values)
