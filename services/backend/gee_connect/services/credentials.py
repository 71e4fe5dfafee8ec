"""Service account and default credential helpers."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Any, Mapping

import ee
import google.auth
from google.auth.exceptions import DefaultCredentialsError
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from gee_connect.errors import CredentialsError, credentials_hint

logger = logging.getLogger(__name__)

EE_SCOPES = [
    "https://www.googleapis.com/auth/cloud-platform",
    "https://www.googleapis.com/auth/earthengine",
]


class ServiceAccountKey(BaseModel):
    """The JSON key downloaded from the service account's KEYS tab."""

    model_config = ConfigDict(extra="allow")

    type: str = "service_account"
    client_email: str
    private_key: str
    project_id: str | None = None
    private_key_id: str | None = None
    client_id: str | None = None
    token_uri: str | None = None

    @field_validator("type")
    @classmethod
    def _service_account_only(cls, value: str) -> str:
        if value != "service_account":
            raise ValueError(f"expected a service_account key, got {value!r}")
        return value

    @field_validator("client_email")
    @classmethod
    def _looks_like_email(cls, value: str) -> str:
        value = value.strip()
        if "@" not in value:
            raise ValueError("client_email is not an email address")
        return value

    def public_info(self) -> dict[str, str | None]:
        return {
            "client_email": self.client_email,
            "project_id": self.project_id,
            "private_key_id": self.private_key_id,
        }

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json"))


def _decode_text(raw: str) -> dict[str, Any]:
    text = raw.strip()
    if not text.startswith("{"):
        try:
            # secret managers and `base64` wrap long output across lines
            compact = "".join(text.split())
            text = base64.b64decode(compact, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise CredentialsError(
                "Service account key is neither JSON nor base64-encoded JSON",
                hints=credentials_hint(),
            ) from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CredentialsError(
            f"Service account key is not valid JSON: {exc.msg}",
            hints=credentials_hint(),
        ) from exc
    if not isinstance(data, dict):
        raise CredentialsError("Service account key must be a JSON object")
    return data


def parse_service_account_key(raw: Mapping[str, Any] | str | bytes) -> ServiceAccountKey:
    """Accept a mapping, a JSON string or a base64-encoded JSON string."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CredentialsError(
                "Service account key is not a UTF-8 JSON file (P12 keys are not supported)",
                hints=credentials_hint(),
            ) from exc
    data = dict(raw) if isinstance(raw, Mapping) else _decode_text(raw)
    if not data.get("client_email"):
        raise CredentialsError(
            "Service account key missing client_email.", hints=credentials_hint()
        )
    try:
        return ServiceAccountKey.model_validate(data)
    except ValidationError as exc:
        raise CredentialsError(
            f"Invalid service account key: {exc.errors()[0]['msg']}",
            hints=credentials_hint(data.get("project_id")),
        ) from exc


def read_service_account_key(path: str | Path) -> ServiceAccountKey:
    key_path = Path(path).expanduser()
    if not key_path.is_file():
        raise CredentialsError(
            f"Earth Engine credential file not found: {key_path}",
            hints=credentials_hint(),
            ctx={"key_path": str(key_path)},
        )
    with key_path.open("rb") as handle:
        return parse_service_account_key(handle.read())


def service_account_credentials(
    key_path: str | Path | None = None,
    email: str | None = None,
    key_data: Mapping[str, Any] | str | None = None,
) -> tuple[Any, ServiceAccountKey]:
    """Build ``ee.ServiceAccountCredentials`` from a key file or inline key.

    When ``email`` is given it must match the key's ``client_email``; the
    SDK would otherwise fail later with an opaque token error.
    """
    if key_data is not None:
        key = parse_service_account_key(key_data)
    elif key_path is not None:
        key = read_service_account_key(key_path)
    else:
        raise CredentialsError(
            "No service account key configured. Set GOOGLE_APPLICATION_CREDENTIALS "
            "or EE_SERVICE_ACCOUNT_KEY.",
            hints=credentials_hint(),
        )

    account = (email or "").strip() or key.client_email
    if account != key.client_email:
        raise CredentialsError(
            f"Service account email {account} does not match key client_email "
            f"{key.client_email}",
            hints=credentials_hint(key.project_id),
            ctx={"email": account, "client_email": key.client_email},
        )

    try:
        if key_data is not None:
            credentials = ee.ServiceAccountCredentials(account, key_data=key.to_json())
        else:
            credentials = ee.ServiceAccountCredentials(account, str(key_path))
    except ValueError as exc:
        # google.auth rejects a malformed private_key here, before any network call
        raise CredentialsError(
            f"Could not load the service account private key: {exc}",
            hints=credentials_hint(key.project_id),
            ctx={"client_email": key.client_email},
        ) from exc
    logger.info(
        "Loaded service account credentials for %s (key id %s)",
        account,
        key.private_key_id or "unknown",
    )
    return credentials, key


def default_credentials(scopes: list[str] | None = None) -> tuple[Any, str | None]:
    """Application Default Credentials and the project they report."""
    try:
        credentials, project = google.auth.default(scopes=scopes or EE_SCOPES)
    except DefaultCredentialsError as exc:
        raise CredentialsError(str(exc), hints=credentials_hint()) from exc
    logger.info("Loaded application default credentials (project=%s)", project)
    return credentials, project
