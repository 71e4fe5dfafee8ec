"""Earth Engine initialisation helpers."""

from __future__ import annotations

import logging
import threading
from typing import Any

import ee

from gee_connect.config import Settings, get_settings
from gee_connect.errors import CredentialsError, classify_ee_error
from gee_connect.models.schemas import AuthStatus
from gee_connect.services.credentials import (
    default_credentials,
    service_account_credentials,
)

logger = logging.getLogger(__name__)

_EE_INIT_LOCK = threading.Lock()
_EE_INITIALISED = False
_STATUS = AuthStatus()


def resolve_credentials(settings: Settings) -> tuple[Any, AuthStatus]:
    """Pick the credential source according to ``settings.auth_mode``."""
    mode = settings.auth_mode
    has_key = bool(settings.service_account_key or settings.google_credentials_path)

    if mode == "service_account" and not has_key:
        raise CredentialsError(
            "EE_AUTH_MODE=service_account but no key is configured. Set "
            "GOOGLE_APPLICATION_CREDENTIALS or EE_SERVICE_ACCOUNT_KEY."
        )

    if mode != "default" and has_key:
        credentials, key = service_account_credentials(
            key_path=None if settings.service_account_key else settings.google_credentials_path,
            email=settings.service_account_email,
            key_data=settings.service_account_key,
        )
        project = settings.gcp_project or key.project_id
        return credentials, AuthStatus(
            mode="service_account", project=project, account=key.client_email
        )

    credentials, adc_project = default_credentials()
    account = getattr(credentials, "service_account_email", None)
    return credentials, AuthStatus(
        mode="default", project=settings.gcp_project or adc_project, account=account
    )


def initialize(
    credentials: Any = None,
    project: str | None = None,
    *,
    force: bool = False,
    settings: Settings | None = None,
) -> AuthStatus:
    """Initialise the Earth Engine client, once per process unless forced."""
    global _EE_INITIALISED, _STATUS
    if _EE_INITIALISED and not force:
        return _STATUS

    with _EE_INIT_LOCK:
        if _EE_INITIALISED and not force:
            return _STATUS

        settings = settings or get_settings()
        target = project or settings.gcp_project
        try:
            if credentials is None:
                credentials, pending = resolve_credentials(settings)
            else:
                pending = AuthStatus(
                    mode="explicit",
                    project=settings.gcp_project,
                    account=getattr(credentials, "service_account_email", None),
                )
            if project:
                pending = pending.model_copy(update={"project": project})
            target = pending.project

            kwargs: dict[str, Any] = {"project": pending.project}
            if settings.ee_api_url:
                kwargs["opt_url"] = settings.ee_api_url
            ee.Initialize(credentials, **kwargs)
        except Exception as exc:
            # a failed (re-)initialisation leaves no usable client behind
            _EE_INITIALISED = False
            _STATUS = AuthStatus()
            error = classify_ee_error(exc, project=target)
            logger.error(
                "Earth Engine initialisation failed [%s]: %s", error.code, exc
            )
            if error is exc:
                raise
            raise error from exc

        _STATUS = pending.model_copy(update={"initialized": True})
        _EE_INITIALISED = True
        logger.info(
            "Initialized Earth Engine (mode=%s, project=%s, account=%s)",
            _STATUS.mode,
            _STATUS.project,
            _STATUS.account,
        )
        return _STATUS


def ensure_ee() -> AuthStatus:
    """Initialise the Earth Engine client exactly once."""
    return initialize()


def status() -> AuthStatus:
    return _STATUS


def reset() -> None:
    """Forget the current initialisation so the next call starts over."""
    global _EE_INITIALISED, _STATUS
    with _EE_INIT_LOCK:
        _EE_INITIALISED = False
        _STATUS = AuthStatus()
