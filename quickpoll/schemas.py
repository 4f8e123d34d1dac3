from datetime import datetime, timezone

from marshmallow import (
    EXCLUDE,
    Schema,
    ValidationError,
    fields,
    pre_load,
    validate,
    validates,
)

from quickpoll.models.base import utcnow


def parse_deadline(raw):
    """Parse an ISO-8601 or ``datetime-local`` string into a naive UTC datetime."""
    value = (raw or "").strip()
    if not value:
        raise ValueError("empty deadline")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    # datetime-local inputs submit "YYYY-MM-DDTHH:MM" without seconds.
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class DeadlineField(fields.Field):
    default_error_messages = {"invalid": "Deadline must be a valid date and time"}

    def _deserialize(self, value, attr, data, **kwargs):
        if not isinstance(value, str):
            raise self.make_error("invalid")
        try:
            return parse_deadline(value)
        except ValueError as error:
            raise self.make_error("invalid") from error


class _StrippedSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    @pre_load
    def strip_strings(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if isinstance(value, str):
                value = value.strip()
            elif isinstance(value, list):
                value = [item.strip() if isinstance(item, str) else item for item in value]
            cleaned[key] = value
        return cleaned


class CreatePollSchema(_StrippedSchema):
    creator_name = fields.Str(
        required=True,
        validate=[
            validate.Length(min=1, error="Name is required"),
            validate.Length(max=255),
        ],
    )
    creator_email = fields.Email(required=True, error_messages={"invalid": "Valid email required"})
    question = fields.Str(
        required=True,
        validate=validate.Length(min=5, error="Question must be at least 5 characters"),
    )
    options = fields.List(
        fields.Str(
            validate=[
                validate.Length(min=1, error="Option cannot be empty"),
                validate.Length(max=500),
            ],
        ),
        required=True,
        validate=validate.Length(min=2, error="At least 2 options required"),
    )
    deadline = DeadlineField(required=True)
    show_realtime_results = fields.Bool(load_default=True)

    @validates("deadline")
    def deadline_in_future(self, value, **kwargs):
        if value <= utcnow():
            raise ValidationError("Deadline must be in the future")


class SubmitVoteSchema(_StrippedSchema):
    poll_id = fields.UUID(required=True)
    poll_option_id = fields.UUID(required=True)
    voter_name = fields.Str(
        required=True,
        validate=[
            validate.Length(min=1, error="Name is required"),
            validate.Length(max=255),
        ],
    )
    voter_email = fields.Email(required=True, error_messages={"invalid": "Valid email required"})


create_poll_schema = CreatePollSchema()
submit_vote_schema = SubmitVoteSchema()
