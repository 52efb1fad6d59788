"""Tests for the Firestore client.

Uses unittest.mock in place of the Firestore SDK client.
"""

from unittest.mock import MagicMock, Mock

import pytest

from src.core.errors import EventFetchError
from src.shell.firestore_client import FirestoreClient, FirestoreConfig


def make_doc(doc_id, data, exists=True):
    doc = Mock()
    doc.id = doc_id
    doc.exists = exists
    doc.to_dict.return_value = data
    return doc


def event_data(home="Richmond", lat=-37.8136, lon=144.9631):
    return {
        "matchDetails": {"homeTeam": home, "awayTeam": "Carlton"},
        "location": {
            "name": "The Corner Hotel",
            "address": "57 Swan St",
            "latitude": lat,
            "longitude": lon,
        },
        "isActive": True,
    }


@pytest.fixture
def sdk_client():
    return MagicMock()


@pytest.fixture
def client(sdk_client):
    c = FirestoreClient(FirestoreConfig(events_collection="events", users_collection="users"))
    c._client = sdk_client
    return c


def set_stream(sdk_client, docs):
    query = sdk_client.collection.return_value.where.return_value.order_by.return_value
    query.stream.return_value = iter(docs)
    return query


class TestGetAllActiveEvents:
    """Tests for FirestoreClient.get_all_active_events()."""

    def test_parses_documents_in_order(self, client, sdk_client):
        set_stream(sdk_client, [
            make_doc("a", event_data("Richmond")),
            make_doc("b", event_data("Geelong")),
        ])

        events = client.get_all_active_events()

        assert [e.id for e in events] == ["a", "b"]
        assert events[0].home_team == "Richmond"
        sdk_client.collection.assert_called_with("events")

    def test_skips_malformed_documents(self, client, sdk_client):
        set_stream(sdk_client, [
            make_doc("good", event_data()),
            make_doc("no-location", {"matchDetails": {"homeTeam": "Richmond"}}),
            make_doc("empty", None),
        ])

        events = client.get_all_active_events()

        assert [e.id for e in events] == ["good"]

    def test_filters_active_and_orders_by_date(self, client, sdk_client):
        set_stream(sdk_client, [])

        client.get_all_active_events()

        collection = sdk_client.collection.return_value
        where_kwargs = collection.where.call_args.kwargs
        field_filter = where_kwargs["filter"]
        assert field_filter.field_path == "isActive"
        assert field_filter.op_string == "=="
        assert field_filter.value is True
        collection.where.return_value.order_by.assert_called_once()
        assert collection.where.return_value.order_by.call_args.args == ("date",)

    def test_query_failure_raises_event_fetch_error(self, client, sdk_client):
        query = set_stream(sdk_client, [])
        query.stream.side_effect = RuntimeError("deadline exceeded")

        with pytest.raises(EventFetchError, match="deadline exceeded"):
            client.get_all_active_events()


class TestGetUser:
    """Tests for FirestoreClient.get_user()."""

    def _document(self, sdk_client):
        return sdk_client.collection.return_value.document.return_value

    def test_returns_profile(self, client, sdk_client):
        self._document(sdk_client).get.return_value = make_doc(
            "u1", {"username": "tiger", "teams": ["Richmond", 7, "Carlton"]}
        )

        user = client.get_user("u1")

        assert user.id == "u1"
        assert user.username == "tiger"
        assert user.favorite_teams == ("Richmond", "Carlton")
        sdk_client.collection.assert_called_with("users")
        sdk_client.collection.return_value.document.assert_called_with("u1")

    def test_missing_user_returns_none(self, client, sdk_client):
        self._document(sdk_client).get.return_value = make_doc("u1", None, exists=False)

        assert client.get_user("u1") is None

    def test_lookup_failure_returns_none(self, client, sdk_client):
        self._document(sdk_client).get.side_effect = RuntimeError("unavailable")

        assert client.get_user("u1") is None

    def test_user_without_teams(self, client, sdk_client):
        self._document(sdk_client).get.return_value = make_doc("u1", {"username": "x"})

        user = client.get_user("u1")

        assert user.favorite_teams == ()
        assert user.has_favorite_teams is False
