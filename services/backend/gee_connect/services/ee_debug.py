from __future__ import annotations
import functools
import logging
import traceback

from gee_connect.errors import EarthEngineSetupError, classify_ee_error
from gee_connect.services import earth_engine

logger = logging.getLogger(__name__)

PACKAGE_MARKER = "gee_connect"


def debug_trace(error: BaseException, prefix: str = "EE TRACE") -> None:
    """
    Log the innermost gee_connect frame involved in an Earth Engine failure.
    Example output:
      [EE TRACE] Image.load: Image asset 'X' not found. at services/query.py:31 (fetch_image_property)
    """
    tb = traceback.extract_tb(error.__traceback__)
    for frame in reversed(tb):
        if PACKAGE_MARKER in frame.filename:
            fname = frame.filename.split(PACKAGE_MARKER)[-1].lstrip("/\\")
            logger.error("[%s] %s at %s:%s (%s)", prefix, error, fname, frame.lineno, frame.name)
            break
    else:
        logger.error("[%s] %s", prefix, error)


def debug_wrap(func):
    """
    Decorator: wrap any function that calls Earth Engine.
    On failure, logs the trace and re-raises as a classified setup error.

    Usage:
        @debug_wrap
        def my_query(...):
            ...
    """

    @functools.wraps(func)
    def _inner(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (ValueError, EarthEngineSetupError):
            raise
        except Exception as exc:
            debug_trace(exc)
            raise classify_ee_error(exc, project=earth_engine.status().project) from exc

    return _inner
