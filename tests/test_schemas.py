from datetime import datetime, timedelta
import uuid

import pytest
from marshmallow import ValidationError

from quickpoll.models.base import utcnow
from quickpoll.schemas import create_poll_schema, parse_deadline, submit_vote_schema


def _future(days=1):
    return (utcnow() + timedelta(days=days)).strftime("%Y-%m-%dT%H:%M")


def _payload(**overrides):
    payload = {
        "creator_name": "  Casey  ",
        "creator_email": "casey@example.com",
        "question": "Which day works best?",
        "options": ["Monday", " Tuesday "],
        "deadline": _future(),
    }
    payload.update(overrides)
    return payload


def test_create_poll_schema_accepts_datetime_local_and_trims():
    data = create_poll_schema.load(_payload())

    assert data["creator_name"] == "Casey"
    assert data["options"] == ["Monday", "Tuesday"]
    assert data["show_realtime_results"] is True
    assert isinstance(data["deadline"], datetime)
    assert data["deadline"].tzinfo is None


def test_parse_deadline_converts_offsets_to_utc():
    assert parse_deadline("2030-01-01T12:00:00+02:00") == datetime(2030, 1, 1, 10, 0)
    assert parse_deadline("2030-01-01T12:00:00Z") == datetime(2030, 1, 1, 12, 0)
    assert parse_deadline("2030-01-01T12:00") == datetime(2030, 1, 1, 12, 0)


@pytest.mark.parametrize(
    "overrides, field, message",
    [
        ({"options": ["Only one"]}, "options", "At least 2 options required"),
        ({"question": "Why"}, "question", "Question must be at least 5 characters"),
        ({"creator_email": "not-an-email"}, "creator_email", "Valid email required"),
        ({"creator_name": "   "}, "creator_name", "Name is required"),
        ({"deadline": "2001-01-01T00:00"}, "deadline", "Deadline must be in the future"),
        ({"deadline": "next tuesday"}, "deadline", "Deadline must be a valid date and time"),
    ],
)
def test_create_poll_schema_rejects_bad_input(overrides, field, message):
    with pytest.raises(ValidationError) as excinfo:
        create_poll_schema.load(_payload(**overrides))

    assert message in excinfo.value.messages[field]


def test_create_poll_schema_rejects_blank_option():
    with pytest.raises(ValidationError) as excinfo:
        create_poll_schema.load(_payload(options=["Monday", "  "]))

    assert excinfo.value.messages["options"] == {1: ["Option cannot be empty"]}


def test_create_poll_schema_respects_hidden_results_flag():
    data = create_poll_schema.load(_payload(show_realtime_results=False))

    assert data["show_realtime_results"] is False


def test_submit_vote_schema_requires_uuids():
    with pytest.raises(ValidationError) as excinfo:
        submit_vote_schema.load(
            {
                "poll_id": "abc",
                "poll_option_id": str(uuid.uuid4()),
                "voter_name": "Val",
                "voter_email": "val@example.com",
            }
        )

    assert set(excinfo.value.messages) == {"poll_id"}


def test_submit_vote_schema_loads_valid_vote():
    poll_id = uuid.uuid4()

    data = submit_vote_schema.load(
        {
            "poll_id": str(poll_id),
            "poll_option_id": str(uuid.uuid4()),
            "voter_name": " Val ",
            "voter_email": "val@example.com",
            "extra": "ignored",
        }
    )

    assert data["poll_id"] == poll_id
    assert data["voter_name"] == "Val"
    assert "extra" not in data
