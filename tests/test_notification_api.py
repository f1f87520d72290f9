"""
Unit tests for the notification api.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from barkpush.api.defs.request.notification_body import SendNotificationBody
from barkpush.api.notification import build_message, router
from barkpush.comms.message import InterruptionLevel
from barkpush.errors import EncryptionError


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    app.include_router(router)
    return app


@pytest.fixture
def bark(app) -> MagicMock:
    bark = MagicMock()
    bark.async_send = AsyncMock(return_value={})
    app.bark = bark
    return bark


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


class TestBuildMessage:
    """Tests for mapping request bodies onto messages."""

    def test_optional_fields(self):
        body = SendNotificationBody(
            title="Title",
            body="Body",
            devices=["d1"],
            level="passive",
            badge=2,
            group="g",
            url="https://example.com",
            copy_text="copied",
            is_archive=1,
        )

        msg = build_message(body)

        assert msg.title == "Title"
        assert msg.level is InterruptionLevel.passive
        assert (msg.badge, msg.group, msg.url, msg.copy, msg.is_archive) == (
            2,
            "g",
            "https://example.com",
            "copied",
            1,
        )

    @pytest.mark.parametrize("title", [None, ""])
    def test_missing_title_uses_default(self, title):
        msg = build_message(SendNotificationBody(title=title, body="Body", devices=["d1"]))

        assert msg.title == "Notification"
        assert not msg.encrypted


class TestSendNotification:
    """Tests for POST /notifications/send."""

    def test_success(self, client, bark):
        response = client.post(
            "/notifications/send",
            json={"title": "Hi", "body": "There", "devices": ["d1", "d1", "d2"]},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Notification sent to 2 device(s)."}
        msg, devices = bark.async_send.call_args.args
        assert msg.body == "There"
        assert devices == ["d1", "d1", "d2"]

    def test_partial_failure(self, client, bark):
        bark.async_send.return_value = {"d1": "410GONE!"}

        response = client.post(
            "/notifications/send", json={"body": "There", "devices": ["d1", "d2"]}
        )

        assert response.status_code == 502
        assert response.json()["success"] is False
        assert response.json()["failed"] == {"d1": "410GONE!"}

    def test_configuration_error(self, client, bark):
        response = client.post(
            "/notifications/send",
            json={"body": "There", "devices": ["d1"], "level": "critical"},
        )

        assert response.status_code == 400
        assert "interruption level" in response.json()["message"]
        bark.async_send.assert_not_called()

    def test_non_ascii_key_is_a_configuration_error(self, client, bark):
        def serialize_only(msg, devices):
            msg.serialize()
            return {}

        bark.async_send.side_effect = serialize_only

        response = client.post(
            "/notifications/send",
            json={
                "body": "There",
                "devices": ["d1"],
                "enc_type": "aes192",
                "mode": "gcm",
                "key": "é" * 24,
            },
        )

        assert response.status_code == 400
        assert "24 bytes" in response.json()["message"]

    def test_encryption_error(self, client, bark):
        bark.async_send.side_effect = EncryptionError("aes128 requires a 16 byte key, got 24")

        response = client.post("/notifications/send", json={"body": "There", "devices": ["d1"]})

        assert response.status_code == 500
        assert response.json()["success"] is False

    def test_requires_devices(self, client, bark):
        response = client.post("/notifications/send", json={"body": "There", "devices": []})

        assert response.status_code == 422

    def test_client_unavailable(self, client, app):
        response = client.post("/notifications/send", json={"body": "There", "devices": ["d1"]})

        assert response.status_code == 503
