"""Command line entry point: ``gee-connect``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from gee_connect.config import Settings, get_settings
from gee_connect.errors import EarthEngineSetupError
from gee_connect.services import earth_engine, query
from gee_connect.services.credentials import read_service_account_key
from gee_connect.services.diagnostics import run_diagnostics
from gee_connect.utils.logging_colors import setup_logging

logger = logging.getLogger(__name__)

STATUS_LABELS = {"ok": "OK", "warn": "WARN", "fail": "FAIL", "skip": "SKIP"}


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = get_settings()
    update: dict[str, object] = {}
    if getattr(args, "project", None):
        update["gcp_project"] = args.project
    if getattr(args, "key", None):
        update["google_credentials_path"] = args.key
        update["service_account_key"] = None
        update["auth_mode"] = "service_account"
    if getattr(args, "email", None):
        update["service_account_email"] = args.email
    if getattr(args, "default", False):
        update["auth_mode"] = "default"
    return settings.model_copy(update=update) if update else settings


def _report_error(exc: EarthEngineSetupError) -> int:
    print(f"error [{exc.code}]: {exc}", file=sys.stderr)
    if exc.hints:
        print(f"hint: {exc.hints}", file=sys.stderr)
    return 1


def cmd_check(args: argparse.Namespace) -> int:
    settings = _settings_from_args(args)
    image = args.image or settings.sample_image
    prop = args.property or settings.sample_property
    try:
        earth_engine.initialize(settings=settings)
        value = query.fetch_image_property(image, prop)
    except EarthEngineSetupError as exc:
        return _report_error(exc)
    print(f"{prop}: {value}")
    return 0


def cmd_describe(args: argparse.Namespace) -> int:
    settings = _settings_from_args(args)
    try:
        earth_engine.initialize(settings=settings)
        summary = query.describe_image(args.asset)
    except EarthEngineSetupError as exc:
        return _report_error(exc)
    print(json.dumps(summary.model_dump(by_alias=True), indent=2))
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    report = run_diagnostics(_settings_from_args(args), query_check=not args.no_query)
    if args.json:
        print(json.dumps(report.model_dump(by_alias=True), indent=2))
    else:
        width = max(len(check.name) for check in report.checks)
        for check in report.checks:
            print(f"{check.name:<{width}}  {STATUS_LABELS[check.status]:<4}  {check.detail}")
            if check.hint and check.status in ("warn", "fail"):
                print(f"{'':<{width}}        -> {check.hint}")
    return 0 if report.ok else 1


def cmd_key_info(args: argparse.Namespace) -> int:
    try:
        key = read_service_account_key(args.path)
    except EarthEngineSetupError as exc:
        return _report_error(exc)
    print(json.dumps(key.public_info(), indent=2))
    return 0


def _add_auth_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--key", help="Path to the service account JSON key")
    parser.add_argument("--email", help="Service account email (must match the key)")
    parser.add_argument("--project", help="Cloud project registered for Earth Engine")
    parser.add_argument(
        "--default",
        action="store_true",
        help="Use application default credentials instead of a key",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "gee-connect", description="Authenticate to Earth Engine and verify access."
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Initialise and read one image property")
    _add_auth_options(check)
    check.add_argument("--image", help="Image asset id")
    check.add_argument("--property", help="Property to print")
    check.set_defaults(func=cmd_check)

    describe = sub.add_parser("describe", help="Print an image's bands and properties")
    _add_auth_options(describe)
    describe.add_argument("asset", help="Image asset id")
    describe.set_defaults(func=cmd_describe)

    doctor = sub.add_parser("doctor", help="Diagnose the project and credential setup")
    _add_auth_options(doctor)
    doctor.add_argument("--no-query", action="store_true", help="Skip the sample query")
    doctor.add_argument("--json", action="store_true", help="Print the report as JSON")
    doctor.set_defaults(func=cmd_doctor)

    key_info = sub.add_parser("key-info", help="Show the non-secret fields of a key file")
    key_info.add_argument("path", help="Path to the service account JSON key")
    key_info.set_defaults(func=cmd_key_info)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level, settings.log_color)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
