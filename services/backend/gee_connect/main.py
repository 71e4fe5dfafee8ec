from __future__ import annotations

import logging

from fastapi import FastAPI

from gee_connect.api.routes import router
from gee_connect.config import get_settings
from gee_connect.errors import EarthEngineSetupError
from gee_connect.services.earth_engine import ensure_ee
from gee_connect.utils.logging_colors import setup_logging

logger = logging.getLogger(__name__)

app = FastAPI(title="gee-connect", version="1.0.0")


@app.on_event("startup")
def _startup() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_color)
    try:
        ensure_ee()
    except EarthEngineSetupError as exc:
        # Keep serving so /healthz and /doctor can report the problem.
        logger.error("Earth Engine initialisation failed [%s]: %s", exc.code, exc)
        if exc.hints:
            logger.error("Hint: %s", exc.hints)


app.include_router(router)


@app.get("/")
def root() -> dict[str, object]:
    settings = get_settings()
    return {
        "service": "gee-connect",
        "project": settings.gcp_project,
        "authMode": settings.auth_mode,
    }


@app.get("/healthz")
def healthz() -> dict[str, object]:
    return {"ok": True}
