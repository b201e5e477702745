"""
Service config from environment with defaults.
Uses pydantic-settings so all env vars are validated and documented in one model.
Settings are frozen: build them once at startup and pass them to components.
"""

from __future__ import annotations

import base64
import re
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .interfaces import SignOptions

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: Any) -> timedelta:
    """Parse a duration such as ``"2s"``, ``"1h30m"`` or ``"500ms"``.

    Plain numbers are taken as seconds; timedeltas pass through.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)
    text = str(value).strip()
    if not text:
        raise ValueError("empty duration")
    try:
        return timedelta(seconds=float(text))
    except ValueError:
        pass
    seconds = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text):
        raise ValueError(f"invalid duration {text!r}")
    return timedelta(seconds=seconds)


class ClientSettings(BaseSettings):
    """Storage client communication: timeouts and keep-alive connections."""

    model_config = SettingsConfigDict(env_prefix="GCS_CLIENT_", extra="ignore", frozen=True)

    timeout: timedelta = timedelta(seconds=2)
    # Parsed for env compatibility only; neither requests nor botocore exposes an idle timeout
    idle_conn_timeout: timedelta = timedelta(seconds=120)
    max_idle_conns: int = Field(10, ge=1)

    @field_validator("timeout", "idle_conn_timeout", mode="before")
    @classmethod
    def _duration(cls, v: object) -> timedelta:
        return parse_duration(v)


class SignerSettings(BaseSettings):
    """Signed URL generation. Signing is enabled only when both credentials are set."""

    model_config = SettingsConfigDict(env_prefix="GCS_SIGNER_", extra="ignore", frozen=True)

    expiration: timedelta = timedelta(minutes=20)
    access_id: str = ""
    # Base64 in the environment, raw key material here
    private_key: bytes = b""

    @field_validator("expiration", mode="before")
    @classmethod
    def _duration(cls, v: object) -> timedelta:
        return parse_duration(v)

    @field_validator("private_key", mode="before")
    @classmethod
    def _decode_private_key(cls, v: object) -> bytes:
        if isinstance(v, bytes):
            return v
        if v is None or v == "":
            return b""
        return base64.b64decode(str(v), validate=True)

    @property
    def enabled(self) -> bool:
        return bool(self.access_id) and bool(self.private_key)

    def options(self) -> SignOptions | None:
        """Return options for signing one object now, or None when signing is disabled."""
        if not self.enabled:
            return None
        return SignOptions(
            method="GET",
            access_id=self.access_id,
            private_key=self.private_key,
            expires_at=datetime.now(timezone.utc) + self.expiration,
        )


class GcsHelperSettings(BaseSettings):
    """
    All environment variables used by gcs-helper.
    Env vars are read as GCS_HELPER_<FIELD>; client and signer settings use
    their own GCS_CLIENT_ and GCS_SIGNER_ prefixes.
    """

    model_config = SettingsConfigDict(env_prefix="GCS_HELPER_", extra="ignore", frozen=True)

    listen: str = ":8080"
    bucket_name: str
    log_level: str = "debug"

    # Path prefix routed to the mapping handler; the remainder is the logical prefix
    map_prefix: str = ""
    # Query parameter carrying comma-separated extra resources
    extra_resources_token: str = ""
    # Applied to the base filename of each listed object
    map_regex_filter: re.Pattern[str] = re.compile("")
    map_regex_hd_filter: re.Pattern[str] = re.compile("")
    # Alternate locations, each joined with the last segment of the requested prefix
    map_extra_prefixes: Annotated[list[str], NoDecode] = Field(default_factory=list)

    # Storage backend: gcp | aws
    platform: str = "gcp"

    list_max_attempts: int = Field(5, ge=1)
    list_retry_backoff: timedelta = timedelta(0)

    client: ClientSettings = Field(default_factory=ClientSettings)
    signer: SignerSettings = Field(default_factory=SignerSettings)

    @field_validator("map_extra_prefixes", mode="before")
    @classmethod
    def _split_prefixes(cls, v: object) -> list[str]:
        if isinstance(v, str):
            return v.split(",") if v else []
        return v  # type: ignore[return-value]

    @field_validator("list_retry_backoff", mode="before")
    @classmethod
    def _duration(cls, v: object) -> timedelta:
        return parse_duration(v)

    @field_validator("platform", mode="after")
    @classmethod
    def _normalize_platform(cls, v: str) -> str:
        return (v or "gcp").strip().lower()

    @property
    def host(self) -> str:
        host, _, _ = self.listen.rpartition(":")
        return host or "0.0.0.0"

    @property
    def port(self) -> int:
        _, _, port = self.listen.rpartition(":")
        return int(port)


def get_settings() -> GcsHelperSettings:
    """Return validated settings from current environment."""
    return GcsHelperSettings()
