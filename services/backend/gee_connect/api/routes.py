from fastapi import APIRouter, HTTPException, Query

from gee_connect.errors import AssetNotFoundError, EarthEngineSetupError
from gee_connect.models.schemas import AuthStatus, DoctorReport, ImagePropertyResponse
from gee_connect.services import earth_engine, query
from gee_connect.services.diagnostics import run_diagnostics

router = APIRouter()


def _setup_error(exc: EarthEngineSetupError) -> HTTPException:
    status_code = 404 if isinstance(exc, AssetNotFoundError) else 503
    return HTTPException(status_code=status_code, detail=exc.payload())


@router.get("/ee/status", response_model=AuthStatus)
def ee_status() -> AuthStatus:
    return earth_engine.status()


# Earth Engine health check
@router.get("/ee/health")
def ee_health():
    try:
        auth = earth_engine.ensure_ee()
        epoch = query.server_round_trip()
    except EarthEngineSetupError as exc:
        raise _setup_error(exc) from exc
    return {"ok": True, "project": auth.project, "mode": auth.mode, "serverTime": epoch}


@router.get("/images/property", response_model=ImagePropertyResponse)
def image_property(
    asset: str = Query(..., description="Earth Engine image asset id"),
    name: str = Query(..., description="Image property to read"),
) -> ImagePropertyResponse:
    try:
        value = query.fetch_image_property(asset, name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except EarthEngineSetupError as exc:
        raise _setup_error(exc) from exc
    return ImagePropertyResponse(asset=asset, property=name, value=value)


@router.get("/doctor", response_model=DoctorReport)
def doctor(query_check: bool = Query(True, alias="query")) -> DoctorReport:
    return run_diagnostics(query_check=query_check)
