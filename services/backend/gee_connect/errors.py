from __future__ import annotations

from typing import Any, Dict, Optional, Type

EE_API_LIBRARY_URL = (
    "https://console.cloud.google.com/apis/library/earthengine.googleapis.com"
)
BILLING_URL = "https://console.cloud.google.com/billing/linkedaccount"
REGISTRATION_URL = "https://code.earthengine.google.com/register"
SERVICE_ACCOUNTS_URL = "https://console.cloud.google.com/iam-admin/serviceaccounts"


def _with_project(url: str, project: Optional[str]) -> str:
    return f"{url}?project={project}" if project else url


class EarthEngineSetupError(RuntimeError):
    code = "ee_error"

    def __init__(
        self,
        msg: str,
        hints: Optional[str] = None,
        ctx: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(msg)
        self.hints = hints
        self.ctx = ctx or {}

    def payload(self) -> Dict[str, Any]:
        return {"code": self.code, "message": str(self), "hint": self.hints}


class CredentialsError(EarthEngineSetupError):
    """Key file or ambient credentials are missing, malformed or rejected."""

    code = "invalid_credentials"


class ApiNotEnabledError(EarthEngineSetupError):
    """The Earth Engine API is switched off for the project."""

    code = "api_not_enabled"


class BillingNotLinkedError(EarthEngineSetupError):
    """No billing account, or the project is not registered for Earth Engine."""

    code = "billing_not_linked"


class PermissionDeniedError(EarthEngineSetupError):
    code = "permission_denied"


class AssetNotFoundError(EarthEngineSetupError):
    code = "asset_not_found"


def credentials_hint(project: Optional[str] = None) -> str:
    return (
        "Check that the key path and service account email are correct, or "
        "run `gcloud auth application-default login` for default credentials. "
        f"Keys are managed at {_with_project(SERVICE_ACCOUNTS_URL, project)}"
    )


def api_hint(project: Optional[str] = None) -> str:
    return f"Enable the Earth Engine API at {_with_project(EE_API_LIBRARY_URL, project)}"


def billing_hint(project: Optional[str] = None) -> str:
    return (
        f"Link a billing account at {_with_project(BILLING_URL, project)} "
        f"and register the project for Earth Engine at {REGISTRATION_URL}"
    )


def permission_hint(project: Optional[str] = None) -> str:
    return (
        "Grant the service account the 'Earth Engine Resource Viewer' and "
        "'Service Usage Consumer' roles"
        + (f" on project {project}" if project else "")
    )


# Order matters: the first matching fragment wins.
_RULES: tuple[tuple[tuple[str, ...], Type[EarthEngineSetupError], Any], ...] = (
    (
        ("billing", "not registered", "not signed up"),
        BillingNotLinkedError,
        billing_hint,
    ),
    (
        ("has not been used in project", "is disabled", "service_disabled", "api not enabled"),
        ApiNotEnabledError,
        api_hint,
    ),
    (
        ("invalid_grant", "credentials", "could not deserialize key", "unauthenticated", "please authorize"),
        CredentialsError,
        credentials_hint,
    ),
    # Missing assets read "not found (does not exist or caller does not have
    # access)", so this has to run before the permission rule.
    (
        ("not found", "does not exist"),
        AssetNotFoundError,
        None,
    ),
    (
        ("permission", "forbidden", "caller does not have"),
        PermissionDeniedError,
        permission_hint,
    ),
)


def classify_ee_error(
    exc: BaseException, project: Optional[str] = None
) -> EarthEngineSetupError:
    """Map an Earth Engine SDK failure onto the setup error taxonomy."""
    if isinstance(exc, EarthEngineSetupError):
        return exc
    message = str(exc) or exc.__class__.__name__
    lowered = message.lower()
    ctx: Dict[str, Any] = {"project": project, "source": exc.__class__.__name__}
    for fragments, error_cls, hint_fn in _RULES:
        if any(fragment in lowered for fragment in fragments):
            hint = hint_fn(project) if hint_fn else None
            return error_cls(message, hints=hint, ctx=ctx)
    return EarthEngineSetupError(message, ctx=ctx)
