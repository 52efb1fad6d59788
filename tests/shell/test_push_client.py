"""Tests for the push gateway client.

Uses the `responses` library to mock HTTP requests.
"""

import json
from dataclasses import replace
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest
import requests
import responses

from src.core.notifications import NearbyNotification, ProximityNotification
from src.shell.push_client import PushClient, PushResponse


WEBHOOK_URL = "https://push.example.com/notify"


@pytest.fixture
def nearby_command():
    return NearbyNotification(
        event_id="evt-1",
        home_team="Richmond",
        away_team="Carlton",
        venue_name="The Corner Hotel",
        venue_address="57 Swan St",
        event_date=datetime(2024, 3, 16, tzinfo=timezone.utc),
        check_in_time=None,
        distance_km=1.2,
    )


@pytest.fixture
def proximity_command():
    return ProximityNotification(
        event_id="evt-1",
        home_team="Richmond",
        away_team="Carlton",
        check_in_time=None,
        venue_name="The Corner Hotel",
        venue_address="57 Swan St",
        distance_meters=12.0,
    )


class TestSendPayload:
    """Tests for PushClient.send_payload()."""

    def test_missing_url_returns_failure(self):
        result = PushClient().send_payload({"title": "hi"})

        assert result == PushResponse(
            success=False,
            status_code=0,
            error="Push webhook URL not configured",
        )

    @responses.activate
    def test_success(self):
        responses.add(responses.POST, WEBHOOK_URL, json={"ok": True}, status=200)

        result = PushClient(WEBHOOK_URL).send_payload({"title": "hi"}, user_id="u1")

        assert result.success is True
        assert result.status_code == 200
        assert result.error is None

        body = json.loads(responses.calls[0].request.body)
        assert body == {"title": "hi", "user_id": "u1"}

    @responses.activate
    def test_does_not_mutate_payload(self):
        responses.add(responses.POST, WEBHOOK_URL, status=204)
        payload = {"title": "hi"}

        PushClient(WEBHOOK_URL).send_payload(payload, user_id="u1")

        assert payload == {"title": "hi"}

    @responses.activate
    def test_non_2xx_returns_failure(self):
        responses.add(responses.POST, WEBHOOK_URL, body="bad token", status=401)

        result = PushClient(WEBHOOK_URL).send_payload({"title": "hi"})

        assert result.success is False
        assert result.status_code == 401
        assert result.error == "bad token"

    @responses.activate
    def test_timeout(self):
        responses.add(responses.POST, WEBHOOK_URL, body=requests.Timeout())

        result = PushClient(WEBHOOK_URL).send_payload({"title": "hi"})

        assert result.success is False
        assert result.error == "Request timed out"

    @responses.activate
    def test_connection_error(self):
        responses.add(
            responses.POST,
            WEBHOOK_URL,
            body=requests.ConnectionError("connection refused"),
        )

        result = PushClient(WEBHOOK_URL).send_payload({"title": "hi"})

        assert result.success is False
        assert result.status_code == 0
        assert "connection refused" in result.error


class TestDeliverAndCancel:
    """Tests for PushClient.deliver() and PushClient.cancel()."""

    @responses.activate
    def test_deliver_nearby(self, nearby_command):
        responses.add(responses.POST, WEBHOOK_URL, status=200)

        result = PushClient(WEBHOOK_URL).deliver(nearby_command, user_id="u1")

        assert result.success is True
        body = json.loads(responses.calls[0].request.body)
        assert body["kind"] == "nearby"
        assert body["tag"] == "favorite_team_nearby:evt-1"
        assert body["user_id"] == "u1"

    @responses.activate
    def test_deliver_proximity(self, proximity_command):
        responses.add(responses.POST, WEBHOOK_URL, status=200)

        PushClient(WEBHOOK_URL).deliver(proximity_command, user_id="u1")

        body = json.loads(responses.calls[0].request.body)
        assert body["kind"] == "proximity"
        assert body["priority"] == "high"

    @responses.activate
    def test_cancel(self):
        responses.add(responses.POST, WEBHOOK_URL, status=200)

        result = PushClient(WEBHOOK_URL).cancel("evt-1", user_id="u1")

        assert result.success is True
        body = json.loads(responses.calls[0].request.body)
        assert body["action"] == "cancel"
        assert body["tags"] == [
            "favorite_team_nearby:evt-1",
            "favorite_team_proximity:evt-1",
        ]

    @responses.activate
    def test_deliver_uses_display_timezone(self, proximity_command):
        responses.add(responses.POST, WEBHOOK_URL, status=200)
        command = replace(
            proximity_command,
            check_in_time=datetime(2026, 3, 14, 8, 30, tzinfo=timezone.utc),
        )

        client = PushClient(WEBHOOK_URL, display_timezone=ZoneInfo("Australia/Perth"))
        client.deliver(command)

        body = json.loads(responses.calls[0].request.body)
        assert "⏰ Starts at 4:30 PM" in body["body"]
