from quickpoll.extensions import db
from quickpoll.models.base import isoformat, new_id, utcnow


class PollOption(db.Model):
    __tablename__ = "poll_options"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    poll_id = db.Column(db.String(36), db.ForeignKey("polls.id"), nullable=False, index=True)
    option_text = db.Column(db.String(500), nullable=False)
    display_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    votes = db.relationship("Vote", backref="option", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "poll_id": self.poll_id,
            "option_text": self.option_text,
            "display_order": self.display_order,
            "created_at": isoformat(self.created_at),
        }
