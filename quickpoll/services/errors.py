class PollError(Exception):
    """Base class for failures that map onto an HTTP status and a user-facing message."""

    status_code = 500
    message = "An unexpected error occurred. Please try again."

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {"error": self.message}


class InvalidRequest(PollError):
    status_code = 400
    message = "Invalid request"


class InvalidAccessCode(InvalidRequest):
    message = "Invalid access code format. Code must be exactly 8 characters."


class InvalidOption(InvalidRequest):
    message = "Invalid poll option"


class PollNotFound(PollError):
    status_code = 404
    message = "Poll not found"


class ResultsHidden(PollError):
    status_code = 403
    message = "Results are not available until voting closes"


class DuplicateVote(PollError):
    status_code = 409
    message = "You have already voted in this poll"


class VotingClosed(PollError):
    status_code = 410
    message = "Voting has closed for this poll"


class AccessCodeUnavailable(PollError):
    message = "Failed to generate unique access code. Please try again."


class PersistenceError(PollError):
    pass
