from quickpoll.extensions import db
from quickpoll.models.base import isoformat, new_id, utcnow


class Poll(db.Model):
    __tablename__ = "polls"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    creator_name = db.Column(db.String(255), nullable=False)
    creator_email = db.Column(db.String(255), nullable=False)
    question = db.Column(db.Text, nullable=False)
    deadline = db.Column(db.DateTime, nullable=False)
    show_realtime_results = db.Column(db.Boolean, nullable=False, default=True)
    access_code = db.Column(db.String(8), unique=True, nullable=False, index=True)

    options = db.relationship(
        "PollOption",
        backref="poll",
        lazy=True,
        order_by="PollOption.display_order",
        cascade="all, delete-orphan",
    )
    votes = db.relationship("Vote", backref="poll", lazy=True, cascade="all, delete-orphan")

    def is_expired(self, now=None):
        return self.deadline < (now or utcnow())

    def results_visible(self, now=None):
        return self.show_realtime_results or self.is_expired(now)

    def realtime_enabled(self, now=None):
        return self.show_realtime_results and not self.is_expired(now)

    def to_dict(self):
        return {
            "id": self.id,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
            "creator_name": self.creator_name,
            "creator_email": self.creator_email,
            "question": self.question,
            "deadline": isoformat(self.deadline),
            "show_realtime_results": self.show_realtime_results,
            "access_code": self.access_code,
        }
