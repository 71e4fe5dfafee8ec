"""Minimal walk-through: credentials -> ee.Initialize -> one read-only query.

    python tools/quickstart.py --key ee-key.json --email svc@project.iam.gserviceaccount.com
    python tools/quickstart.py --default --project my-project
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.append(str(BACKEND_DIR))

from gee_connect.config import DEFAULT_SAMPLE_IMAGE, DEFAULT_SAMPLE_PROPERTY  # noqa: E402
from gee_connect.errors import EarthEngineSetupError  # noqa: E402
from gee_connect.services import earth_engine, query  # noqa: E402
from gee_connect.services.credentials import (  # noqa: E402
    default_credentials,
    service_account_credentials,
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser("Earth Engine quickstart")
    parser.add_argument("--key", help="Path to the service account JSON key")
    parser.add_argument("--email", help="Service account email")
    parser.add_argument("--project", help="Cloud project id")
    parser.add_argument("--default", action="store_true", help="Use default credentials")
    parser.add_argument("--image", default=DEFAULT_SAMPLE_IMAGE)
    parser.add_argument("--property", default=DEFAULT_SAMPLE_PROPERTY)
    args = parser.parse_args(argv)
    if args.email and not args.key:
        parser.error("--email names the account inside a key file; pass --key as well")
    if args.default and args.key:
        parser.error("--default and --key are mutually exclusive")

    try:
        if args.default or not args.key:
            credentials, project = default_credentials()
        else:
            credentials, key = service_account_credentials(args.key, args.email)
            project = key.project_id
        earth_engine.initialize(credentials, args.project or project)
        value = query.fetch_image_property(args.image, args.property)
    except EarthEngineSetupError as exc:
        print(f"Setup failed [{exc.code}]: {exc}", file=sys.stderr)
        if exc.hints:
            print(f"  -> {exc.hints}", file=sys.stderr)
        return 1

    print(f"{args.property}: {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
