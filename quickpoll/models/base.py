import uuid
from datetime import datetime, timezone


def utcnow():
    """Current time as a naive UTC datetime, the form every timestamp column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id():
    return str(uuid.uuid4())


def isoformat(value):
    if value is None:
        return None
    return value.isoformat() + "Z"
