"""GCP GCS implementation of ObjectLister and UrlSigner."""

from __future__ import annotations

from collections.abc import Iterator

import google.auth
from google.auth.transport.requests import AuthorizedSession
from google.cloud import storage as gcs_storage
from google.oauth2 import service_account
from requests.adapters import HTTPAdapter

from .config import ClientSettings
from .interfaces import ListedObject, SignOptions

READ_ONLY_SCOPE = "https://www.googleapis.com/auth/devstorage.read_only"
TOKEN_URI = "https://oauth2.googleapis.com/token"


def client_from_settings(settings: ClientSettings) -> gcs_storage.Client:
    """Build a storage client whose HTTP pool keeps up to max_idle_conns connections."""
    credentials, project = google.auth.default(scopes=[READ_ONLY_SCOPE])
    session = AuthorizedSession(credentials)
    adapter = HTTPAdapter(
        pool_connections=settings.max_idle_conns,
        pool_maxsize=settings.max_idle_conns,
    )
    session.mount("https://", adapter)
    return gcs_storage.Client(project=project, credentials=credentials, _http=session)


def _signing_credentials(options: SignOptions) -> service_account.Credentials:
    """Service-account credentials from an access id (client email) and PEM key."""
    info = {
        "client_email": options.access_id,
        "private_key": options.private_key.decode("utf-8"),
        "token_uri": TOKEN_URI,
    }
    return service_account.Credentials.from_service_account_info(info)


class GcsObjectStorage:
    """Lists one bucket and signs V2 URLs using google-cloud-storage."""

    def __init__(
        self,
        client: gcs_storage.Client,
        bucket_name: str,
        *,
        timeout: float | None = None,
    ) -> None:
        self._client = client
        self._bucket_name = bucket_name
        self._timeout = timeout

    def list_objects(self, prefix: str, *, delimiter: str = "/") -> Iterator[ListedObject]:
        """Yield objects under prefix; pages are fetched lazily."""
        kwargs = {"prefix": prefix, "delimiter": delimiter}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        for blob in self._client.list_blobs(self._bucket_name, **kwargs):
            yield ListedObject(bucket=blob.bucket.name, name=blob.name)

    def sign(self, bucket: str, key: str, options: SignOptions) -> str:
        """Return a V2 signed URL for bucket/key."""
        credentials = _signing_credentials(options)
        blob = self._client.bucket(bucket).blob(key)
        return blob.generate_signed_url(
            version="v2",
            expiration=options.expires_at,
            method=options.method,
            credentials=credentials,
        )
