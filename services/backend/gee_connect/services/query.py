"""The illustrative read-only query run after initialisation."""

from __future__ import annotations

import logging
from typing import Any

import ee

from gee_connect.models.schemas import ImageSummary
from gee_connect.services.earth_engine import ensure_ee
from gee_connect.services.ee_debug import debug_wrap

logger = logging.getLogger(__name__)


def _require(value: str, label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{label} must not be empty")
    return value


@debug_wrap
def fetch_image_property(asset_id: str, prop: str) -> Any:
    """Return a single property of an image asset, or None if it is absent."""
    asset_id = _require(asset_id, "asset id")
    prop = _require(prop, "property name")
    ensure_ee()
    value = ee.Image(asset_id).get(prop).getInfo()
    logger.debug("%s[%s] = %r", asset_id, prop, value)
    return value


@debug_wrap
def describe_image(asset_id: str) -> ImageSummary:
    asset_id = _require(asset_id, "asset id")
    ensure_ee()
    info = ee.Image(asset_id).getInfo() or {}
    bands = [band.get("id") for band in info.get("bands", []) if band.get("id")]
    properties = sorted((info.get("properties") or {}).keys())
    return ImageSummary(id=info.get("id", asset_id), band_ids=bands, property_names=properties)


@debug_wrap
def server_round_trip() -> str:
    """Trivial call to confirm connectivity."""
    ensure_ee()
    return ee.Date(0).format().getInfo()
