"""Unit tests for event parsing.

Pure function tests - no mocks needed.
"""

import pytest
from datetime import datetime, timedelta, timezone

from src.core.event import (
    Coordinate,
    Event,
    filter_upcoming_events,
    parse_event,
    parse_events,
)


@pytest.fixture
def sample_document():
    """A Firestore event document as the mobile app writes it."""
    return {
        "id": "evt123",
        "hostUserId": "host1",
        "matchDetails": {
            "homeTeam": "Richmond",
            "awayTeam": "Carlton",
            "competition": "AFL",
        },
        "location": {
            "name": "The Corner Hotel",
            "address": "57 Swan St, Richmond VIC",
            "latitude": -37.8255,
            "longitude": 144.9925,
        },
        "date": datetime(2024, 3, 14, 8, 30, tzinfo=timezone.utc),
        "checkInTime": datetime(2024, 3, 14, 8, 0, tzinfo=timezone.utc),
        "isActive": True,
    }


class TestParseEvent:
    """Tests for parse_event()."""

    def test_parses_valid_document(self, sample_document):
        event = parse_event("doc1", sample_document)

        assert event is not None
        assert event.id == "evt123"
        assert event.home_team == "Richmond"
        assert event.away_team == "Carlton"
        assert event.location == Coordinate(-37.8255, 144.9925)
        assert event.venue_name == "The Corner Hotel"
        assert event.venue_address == "57 Swan St, Richmond VIC"
        assert event.check_in_time == datetime(2024, 3, 14, 8, 0, tzinfo=timezone.utc)
        assert event.is_active is True

    def test_falls_back_to_document_id(self, sample_document):
        del sample_document["id"]
        event = parse_event("doc1", sample_document)
        assert event.id == "doc1"

    def test_missing_match_details(self, sample_document):
        """Events without match details parse with no teams."""
        del sample_document["matchDetails"]
        event = parse_event("doc1", sample_document)

        assert event.home_team is None
        assert event.away_team is None
        assert event.teams == ()

    def test_missing_location_returns_none(self, sample_document):
        del sample_document["location"]
        assert parse_event("doc1", sample_document) is None

    def test_bad_coordinates_return_none(self, sample_document):
        sample_document["location"]["latitude"] = "not-a-number"
        assert parse_event("doc1", sample_document) is None

    def test_naive_datetime_assumed_utc(self, sample_document):
        sample_document["date"] = datetime(2024, 3, 14, 8, 30)
        event = parse_event("doc1", sample_document)
        assert event.date.tzinfo == timezone.utc

    def test_millisecond_timestamp(self, sample_document):
        sample_document["date"] = 1710405000000
        event = parse_event("doc1", sample_document)
        assert event.date == datetime(2024, 3, 14, 8, 30, tzinfo=timezone.utc)

    def test_iso_string_timestamp(self, sample_document):
        sample_document["date"] = "2024-03-14T08:30:00Z"
        event = parse_event("doc1", sample_document)
        assert event.date == datetime(2024, 3, 14, 8, 30, tzinfo=timezone.utc)

    def test_offset_string_normalised_to_utc(self, sample_document):
        sample_document["date"] = "2024-03-14T19:30:00+11:00"
        event = parse_event("doc1", sample_document)

        assert event.date == datetime(2024, 3, 14, 8, 30, tzinfo=timezone.utc)
        assert event.date.utcoffset() == timedelta(0)

    @pytest.mark.parametrize("field", ["homeTeam", "awayTeam"])
    def test_non_string_team_returns_none(self, sample_document, field):
        sample_document["matchDetails"][field] = 123
        assert parse_event("doc1", sample_document) is None

    @pytest.mark.parametrize("field", ["date", "checkInTime"])
    def test_out_of_range_timestamp_returns_none(self, sample_document, field):
        sample_document[field] = 10**20
        assert parse_event("doc1", sample_document) is None


class TestParseEvents:
    """Tests for parse_events()."""

    def test_drops_invalid_and_keeps_order(self, sample_document):
        second = {**sample_document, "id": "evt456"}
        documents = [
            ("a", sample_document),
            ("b", {"location": {}}),
            ("c", second),
        ]

        result = parse_events(documents)

        assert [e.id for e in result] == ["evt123", "evt456"]

    def test_drops_bad_teams_and_timestamps(self, sample_document):
        bad_team = {
            **sample_document,
            "id": "bad-team",
            "matchDetails": {"homeTeam": 123, "awayTeam": "Carlton"},
        }
        bad_date = {**sample_document, "id": "bad-date", "date": 10**20}
        documents = [
            ("a", sample_document),
            ("b", bad_team),
            ("c", bad_date),
        ]

        result = parse_events(documents)

        assert [e.id for e in result] == ["evt123"]

    def test_empty(self):
        assert parse_events([]) == []


class TestFilterUpcomingEvents:
    """Tests for filter_upcoming_events()."""

    def make_event(self, event_id, date):
        return Event(
            id=event_id,
            home_team="Richmond",
            away_team="Carlton",
            location=Coordinate(0.0, 0.0),
            date=date,
        )

    def test_keeps_today_and_future(self):
        now = datetime(2024, 3, 14, 15, 0, tzinfo=timezone.utc)
        events = [
            self.make_event("yesterday", now - timedelta(days=1)),
            self.make_event("this-morning", now.replace(hour=1)),
            self.make_event("tomorrow", now + timedelta(days=1)),
            self.make_event("undated", None),
        ]

        result = filter_upcoming_events(events, now)

        assert [e.id for e in result] == ["this-morning", "tomorrow", "undated"]
