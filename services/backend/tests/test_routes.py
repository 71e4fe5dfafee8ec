from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from gee_connect.main import app

SAMPLE_IMAGE = "LANDSAT/LC08/C02/T1_TOA/LC08_044034_20140318"


@pytest.fixture
def client():
    return TestClient(app)


def test_healthz_does_not_touch_earth_engine(client, ee_context):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert "initialize_calls" not in ee_context


def test_root_reports_configuration(client, monkeypatch):
    monkeypatch.setenv("GCP_PROJECT", "demo-project")

    body = client.get("/").json()

    assert body["service"] == "gee-connect"
    assert body["project"] == "demo-project"
    assert body["authMode"] == "auto"


def test_status_before_initialisation(client):
    body = client.get("/ee/status").json()

    assert body == {"mode": "none", "project": None, "account": None, "initialized": False}


def test_ee_health_ok(client, ee_context, adc):
    response = client.get("/ee/health")

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["project"] == "adc-project"
    assert body["mode"] == "default"
    assert client.get("/ee/status").json()["initialized"] is True


def test_ee_health_reports_setup_error(client, ee_context, adc):
    ee_context["initialize_error"] = ee_context["fake"].EEException(
        "This API method requires billing to be enabled."
    )

    response = client.get("/ee/health")

    assert response.status_code == 503
    detail = response.json()["detail"]
    assert detail["code"] == "billing_not_linked"
    assert "billing" in detail["hint"]


def test_image_property(client, ee_context, adc):
    response = client.get(
        "/images/property", params={"asset": SAMPLE_IMAGE, "name": "CLOUD_COVER"}
    )

    assert response.status_code == 200
    assert response.json() == {
        "asset": SAMPLE_IMAGE,
        "property": "CLOUD_COVER",
        "value": 0.29,
    }


def test_image_property_bad_request(client, ee_context, adc):
    response = client.get("/images/property", params={"asset": " ", "name": "CLOUD_COVER"})

    assert response.status_code == 400


def test_image_property_unknown_asset(client, ee_context, adc):
    ee_context["get_info_error"] = ee_context["fake"].EEException(
        "Image.load: Image asset 'users/nobody/x' not found."
    )

    response = client.get(
        "/images/property", params={"asset": "users/nobody/x", "name": "CLOUD_COVER"}
    )

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "asset_not_found"


def test_doctor_endpoint(client, ee_context, adc):
    response = client.get("/doctor", params={"query": "false"})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert [check["name"] for check in body["checks"]] == [
        "project",
        "key",
        "initialize",
        "query",
    ]
    assert body["checks"][-1]["status"] == "skip"


def test_startup_failure_is_not_fatal(ee_context, adc):
    ee_context["initialize_error"] = ee_context["fake"].EEException(
        "Earth Engine API has not been used in project 1 before or it is disabled."
    )

    with TestClient(app) as client:
        assert client.get("/healthz").status_code == 200
        assert client.get("/ee/status").json()["initialized"] is False


def test_image_property_with_malformed_key(client, ee_context, key_file, monkeypatch):
    monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", str(key_file))
    ee_context["credentials_error"] = ValueError("Unable to load PEM file.")

    response = client.get(
        "/images/property", params={"asset": SAMPLE_IMAGE, "name": "CLOUD_COVER"}
    )

    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "invalid_credentials"


def test_ee_health_with_malformed_key(client, ee_context, key_file, monkeypatch):
    monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", str(key_file))
    ee_context["credentials_error"] = ValueError("Unable to load PEM file.")

    response = client.get("/ee/health")

    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "invalid_credentials"


def test_image_property_missing_asset_message_from_sdk(client, ee_context, adc):
    ee_context["get_info_error"] = ee_context["fake"].EEException(
        "Image.load: Image asset 'users/x/y' not found "
        "(does not exist or caller does not have access)."
    )

    response = client.get("/images/property", params={"asset": "users/x/y", "name": "A"})

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "asset_not_found"


def test_ping_route_is_gone(client):
    assert client.get("/ping").status_code == 404
