from flask import current_app, url_for
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from quickpoll.extensions import broadcaster, db
from quickpoll.models import Poll, PollOption, Vote
from quickpoll.models.base import utcnow
from quickpoll.services.errors import (
    AccessCodeUnavailable,
    DuplicateVote,
    InvalidAccessCode,
    InvalidOption,
    PersistenceError,
    PollNotFound,
    VotingClosed,
)
from quickpoll.services.results import tally_poll_results
from quickpoll.services.security import (
    ACCESS_CODE_LENGTH,
    generate_access_code,
    normalize_access_code,
)


def _unique_access_code():
    attempts = current_app.config.get("ACCESS_CODE_ATTEMPTS", 5)
    for _ in range(attempts):
        code = generate_access_code()
        if not Poll.query.filter_by(access_code=code).first():
            return code
        current_app.logger.warning("Access code collision on %s, retrying", code)
    raise AccessCodeUnavailable()


def create_poll(data):
    """Insert a poll and its options from validated ``CreatePollSchema`` data."""
    access_code = _unique_access_code()

    poll = Poll(
        creator_name=data["creator_name"],
        creator_email=data["creator_email"],
        question=data["question"],
        deadline=data["deadline"],
        show_realtime_results=data.get("show_realtime_results", True),
        access_code=access_code,
    )
    try:
        db.session.add(poll)
        db.session.flush()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Poll creation failed")
        raise PersistenceError("Failed to create poll. Please try again.")

    try:
        for index, option_text in enumerate(data["options"]):
            db.session.add(
                PollOption(poll_id=poll.id, option_text=option_text, display_order=index)
            )
        db.session.commit()
    except SQLAlchemyError:
        # Rolling back discards the flushed poll row along with its options.
        db.session.rollback()
        current_app.logger.exception("Poll options creation failed")
        raise PersistenceError("Failed to create poll options. Please try again.")

    current_app.logger.info(
        "Poll %s created with %d options (code %s)", poll.id, len(data["options"]), access_code
    )
    return poll


def get_poll(poll_id):
    poll = db.session.get(Poll, str(poll_id))
    if poll is None:
        raise PollNotFound()
    return poll


def get_poll_options(poll):
    return (
        PollOption.query.filter_by(poll_id=poll.id)
        .order_by(PollOption.display_order.asc())
        .all()
    )


def find_poll_by_code(raw_code):
    code = normalize_access_code(raw_code)
    if len(code) != ACCESS_CODE_LENGTH:
        raise InvalidAccessCode()

    poll = Poll.query.filter_by(access_code=code).first()
    if poll is None:
        raise PollNotFound("Poll not found. Please check the access code and try again.")
    return poll


def submit_vote(data, now=None):
    """Record a vote from validated ``SubmitVoteSchema`` data and notify live listeners."""
    now = now or utcnow()
    poll_id = str(data["poll_id"])
    option_id = str(data["poll_option_id"])
    voter_email = data["voter_email"].lower()

    poll = get_poll(poll_id)

    if now > poll.deadline:
        current_app.logger.info("Rejected vote on closed poll %s", poll_id)
        raise VotingClosed()

    option = PollOption.query.filter_by(id=option_id, poll_id=poll_id).first()
    if option is None:
        raise InvalidOption()

    existing = Vote.query.filter_by(poll_id=poll_id, voter_email=voter_email).first()
    if existing is not None:
        current_app.logger.info("Duplicate vote on poll %s", poll_id)
        raise DuplicateVote()

    vote = Vote(
        poll_id=poll_id,
        poll_option_id=option_id,
        voter_name=data["voter_name"],
        voter_email=voter_email,
        submitted_at=now,
    )
    try:
        db.session.add(vote)
        db.session.commit()
    except IntegrityError:
        # A concurrent submission won the race past the existence check.
        db.session.rollback()
        current_app.logger.info("Duplicate vote on poll %s caught by constraint", poll_id)
        raise DuplicateVote()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Vote insertion failed for poll %s", poll_id)
        raise PersistenceError("Failed to submit vote. Please try again.")

    current_app.logger.info("Vote %s recorded on poll %s", vote.id, poll_id)
    publish_results(poll)
    return vote


def publish_results(poll):
    if not poll.show_realtime_results or broadcaster.subscriber_count(poll.id) == 0:
        return 0
    return broadcaster.publish(poll.id, tally_poll_results(poll))


def share_url(poll):
    base_url = (current_app.config.get("APP_URL") or "").rstrip("/")
    if base_url:
        return f"{base_url}/poll/{poll.id}"
    return url_for("poll_page", poll_id=poll.id, _external=True)
