"""Tests for the Flask API."""

from __future__ import annotations

import time

import pytest

import assessment_translator.logger as app_logger
from assessment_translator.config import load_config
from assessment_translator.web import create_app
from assessment_translator.web import tasks

from conftest import make_config


@pytest.fixture
def app():
    app = create_app(make_config("google", credentials=False))
    app.config["TESTING"] = True
    yield app
    tasks.reset_jobs()


@pytest.fixture
def client(app):
    return app.test_client()


WORKBOOK = {
    "Quiz": {
        "headers": ["question", "explanation_id"],
        "rows": [
            {"question": "Pick one", "explanation_id": "42"},
            {"question": "Pick one", "explanation_id": "43"},
        ],
    }
}


def _wait_for_job(client, job_id, timeout=10.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        job = client.get(f"/api/jobs/{job_id}").get_json()
        if job["state"] in ("completed", "failed", "cancelled"):
            return job
        time.sleep(0.05)
    raise AssertionError(f"job {job_id} did not finish")


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_translate_uses_default_columns(client):
    response = client.post("/api/translate", json={"workbook": WORKBOOK, "languages": ["hi", "ta"]})

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["languages"] == ["hi", "ta"]
    rows = payload["results"]["ta"]["Quiz"]["rows"]
    assert rows == [
        {"question": "[TA] Pick one", "explanation_id": "42"},
        {"question": "[TA] Pick one", "explanation_id": "43"},
    ]


def test_translate_all_columns_with_null_allow_list(client):
    response = client.post(
        "/api/translate",
        json={"workbook": WORKBOOK, "languages": ["hi"], "translatable_columns": None},
    )

    rows = response.get_json()["results"]["hi"]["Quiz"]["rows"]
    assert rows[0]["explanation_id"] == "[HI] 42"


def test_translate_single_sheet_body(client):
    response = client.post(
        "/api/translate",
        json={"rows": [{"question": "Cat"}], "languages": ["bn"], "translatable_columns": None},
    )

    assert response.get_json()["results"]["bn"]["Sheet1"]["rows"] == [{"question": "[BN] Cat"}]


@pytest.mark.parametrize(
    "body",
    [
        {},
        ["not", "an", "object"],
        "plain text",
        {"workbook": WORKBOOK, "languages": []},
        {"workbook": WORKBOOK, "languages": "hi"},
        {"workbook": {"Quiz": {"headers": ["question"], "rows": []}}, "languages": ["hi"]},
        {"workbook": WORKBOOK, "languages": ["hi"], "translatable_columns": "question"},
    ],
)
def test_translate_rejects_bad_input(client, body):
    response = client.post("/api/translate", json=body)

    assert response.status_code == 400
    assert response.get_json()["code"] == "invalid_input"


def test_translate_accepts_sheets_key(client):
    response = client.post("/api/translate", json={"sheets": WORKBOOK, "languages": ["hi"]})

    assert response.status_code == 200
    assert response.get_json()["results"]["hi"]["Quiz"]["rows"][0]["question"] == "[HI] Pick one"


def test_job_rejects_array_body(client):
    response = client.post("/api/jobs", json=[{"question": "Cat"}])

    assert response.status_code == 400
    assert response.get_json()["code"] == "invalid_input"


def test_translate_rejects_unknown_provider(client):
    response = client.post("/api/translate", json={"workbook": WORKBOOK, "languages": ["hi"], "provider": "deepl"})

    assert response.status_code == 400
    assert response.get_json()["code"] == "configuration_error"


def test_background_job(client):
    response = client.post("/api/jobs", json={"workbook": WORKBOOK, "languages": ["mr"]})

    assert response.status_code == 202
    job = _wait_for_job(client, response.get_json()["job_id"])
    assert job["state"] == "completed"
    assert job["result"]["mr"]["Quiz"]["rows"][0]["question"] == "[MR] Pick one"
    assert job["progress"]["phase"] == "language_done"


def test_unknown_job(client):
    assert client.get("/api/jobs/does-not-exist").status_code == 404
    assert client.post("/api/jobs/does-not-exist/cancel").status_code == 404


def test_reset_clears_jobs_and_endpoint_cache(app, client):
    app.extensions["endpoint_cache"].set("translation_hi", "https://compute.example/hi")
    job_id = client.post("/api/jobs", json={"workbook": WORKBOOK, "languages": ["hi"]}).get_json()["job_id"]
    _wait_for_job(client, job_id)

    response = client.post("/api/reset")

    assert response.get_json() == {"status": "reset", "discarded_jobs": 1}
    assert len(app.extensions["endpoint_cache"]) == 0
    assert client.get(f"/api/jobs/{job_id}").status_code == 404


def test_settings_hide_credentials(client):
    payload = client.get("/api/settings/").get_json()

    assert payload["translation_provider"] == "google"
    assert payload["providers"]["google"]["has_credentials"] is False
    assert "question" in payload["translatable_columns"]


def test_languages(client):
    payload = client.get("/api/settings/languages?provider=bhashini").get_json()
    assert len(payload["languages"]) == 12
    assert payload["languages"][0] == {"code": "hi", "name": "Hindi", "native": "हिंदी"}

    assert client.get("/api/settings/languages?provider=deepl").status_code == 400


class TestUpdateSettings:

    @pytest.fixture
    def config_file(self, tmp_path):
        return tmp_path / "config" / "config.json"

    @pytest.fixture
    def settings_client(self, config_file):
        app = create_app(make_config("google", credentials=False), config_file=config_file)
        app.config["TESTING"] = True
        return app.test_client()

    def test_saves_and_applies_changes(self, settings_client, config_file):
        response = settings_client.put(
            "/api/settings/",
            json={"config": {
                "translation_provider": "bhashini",
                "bhashini": {"user_id": "user-1234", "ulca_api_key": "ulca-5678"},
                "log_mode": "off",
            }},
        )

        assert response.status_code == 200
        settings = response.get_json()["settings"]
        assert settings["translation_provider"] == "bhashini"
        assert settings["providers"]["bhashini"]["has_credentials"] is True
        assert "ulca-5678" not in response.get_data(as_text=True)

        saved = load_config(config_file)
        assert saved["bhashini"]["user_id"] == "user-1234"
        assert saved["bhashini"]["pipeline_id"] == "64392f96daac500b55c543cd"
        assert settings_client.get("/api/settings/").get_json()["translation_provider"] == "bhashini"
        assert app_logger._log_mode_cache == "off"

    @pytest.mark.parametrize(
        "body",
        [
            {},
            ["config"],
            {"config": "google"},
            {"config": {"translation_provider": "deepl"}},
            {"config": {"log_mode": "verbose"}},
            {"config": {"google": {"batch_size": 0}}},
            {"config": {"translation": {"batch_delay": -1}}},
        ],
    )
    def test_rejects_invalid_settings(self, settings_client, config_file, body):
        response = settings_client.put("/api/settings/", json=body)

        assert response.status_code == 400
        assert not config_file.exists()
