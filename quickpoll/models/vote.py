from quickpoll.extensions import db
from quickpoll.models.base import new_id, utcnow


class Vote(db.Model):
    __tablename__ = "votes"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    poll_id = db.Column(db.String(36), db.ForeignKey("polls.id"), nullable=False, index=True)
    poll_option_id = db.Column(
        db.String(36), db.ForeignKey("poll_options.id"), nullable=False, index=True
    )
    voter_name = db.Column(db.String(255), nullable=False)
    voter_email = db.Column(db.String(255), nullable=False)
    submitted_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        # One vote per voter email per poll.
        db.UniqueConstraint("poll_id", "voter_email", name="uq_votes_poll_voter_email"),
    )
