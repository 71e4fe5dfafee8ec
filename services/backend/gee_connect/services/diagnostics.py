"""Environment diagnostics for an Earth Engine project setup.

Each check mirrors one of the manual setup steps: a project is chosen, a key
was downloaded for the service account, the API is enabled with billing
linked (initialisation succeeds), and a real read works.
"""

from __future__ import annotations

import logging

from gee_connect.config import Settings, get_settings
from gee_connect.errors import EarthEngineSetupError
from gee_connect.models.schemas import DoctorReport
from gee_connect.services import earth_engine, query
from gee_connect.services.credentials import (
    parse_service_account_key,
    read_service_account_key,
)

logger = logging.getLogger(__name__)


def _check_project(report: DoctorReport, settings: Settings) -> None:
    if settings.gcp_project:
        report.add("project", "ok", settings.gcp_project)
    else:
        report.add(
            "project",
            "warn",
            "GCP_PROJECT is not set",
            hint="Set GCP_PROJECT to the Cloud project registered for Earth Engine",
        )


def _check_key(report: DoctorReport, settings: Settings) -> None:
    if settings.auth_mode == "default":
        report.add("key", "skip", "EE_AUTH_MODE=default uses application default credentials")
        return
    if not (settings.service_account_key or settings.google_credentials_path):
        if settings.auth_mode == "service_account":
            report.add(
                "key",
                "fail",
                "No service account key configured",
                hint="Set GOOGLE_APPLICATION_CREDENTIALS or EE_SERVICE_ACCOUNT_KEY",
            )
        else:
            report.add("key", "skip", "No key configured; falling back to default credentials")
        return
    try:
        if settings.service_account_key:
            key = parse_service_account_key(settings.service_account_key)
            source = "EE_SERVICE_ACCOUNT_KEY"
        else:
            key = read_service_account_key(settings.google_credentials_path)
            source = settings.google_credentials_path
    except EarthEngineSetupError as exc:
        report.add("key", "fail", str(exc), hint=exc.hints)
        return

    email = settings.service_account_email
    if email and email != key.client_email:
        report.add(
            "key",
            "fail",
            f"EE_SERVICE_ACCOUNT={email} does not match key client_email {key.client_email}",
            hint="Use the email shown on the service account's details page",
        )
        return
    report.add("key", "ok", f"{key.client_email} ({source})")


def run_diagnostics(settings: Settings | None = None, *, query_check: bool = True) -> DoctorReport:
    """Run the setup checks in order and collect their outcome."""
    settings = settings or get_settings()
    report = DoctorReport()

    _check_project(report, settings)
    _check_key(report, settings)

    initialized = False
    try:
        auth = earth_engine.initialize(force=True, settings=settings)
    except EarthEngineSetupError as exc:
        report.add("initialize", "fail", f"[{exc.code}] {exc}", hint=exc.hints)
    else:
        initialized = True
        report.add("initialize", "ok", f"mode={auth.mode} project={auth.project}")

    if not query_check:
        report.add("query", "skip", "disabled")
    elif not initialized:
        report.add("query", "skip", "Earth Engine is not initialized")
    else:
        try:
            value = query.fetch_image_property(settings.sample_image, settings.sample_property)
        except EarthEngineSetupError as exc:
            report.add("query", "fail", f"[{exc.code}] {exc}", hint=exc.hints)
        except ValueError as exc:
            report.add("query", "fail", str(exc))
        else:
            report.add("query", "ok", f"{settings.sample_property} = {value!r}")

    for check in report.checks:
        logger.debug("doctor %s: %s %s", check.name, check.status, check.detail)
    return report

