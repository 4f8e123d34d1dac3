import uuid

ACCESS_CODE_LENGTH = 8


def generate_access_code():
    return uuid.uuid4().hex[:ACCESS_CODE_LENGTH].upper()


def normalize_access_code(raw):
    return (raw or "").strip().upper()
