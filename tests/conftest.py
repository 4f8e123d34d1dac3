from datetime import timedelta
from pathlib import Path
import sys
import os

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# Safety default for any module-level app creation during test imports.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from quickpoll import create_app
from quickpoll.extensions import db
from quickpoll.models import Poll, PollOption, Vote
from quickpoll.models.base import utcnow


@pytest.fixture()
def app(tmp_path: Path):
    db_file = tmp_path / "test.sqlite3"
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_file}",
            "SQLALCHEMY_ENGINE_OPTIONS": {},
            "APP_URL": "",
            "REALTIME_KEEPALIVE_SECONDS": 0.05,
        }
    )

    with app.app_context():
        driver = db.engine.url.drivername
        if driver != "sqlite":
            raise RuntimeError(
                f"Test database must be SQLite, got '{driver}'. Refusing to run destructive test setup."
            )
        db.drop_all()
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def db_session(app):
    with app.app_context():
        yield db.session


@pytest.fixture()
def make_poll(db_session):
    counter = {"n": 0}

    def _make_poll(
        options=("Red", "Green", "Blue"),
        deadline=None,
        show_realtime_results=True,
        question="Favourite colour?",
    ):
        counter["n"] += 1
        poll = Poll(
            creator_name="Casey",
            creator_email="casey@example.com",
            question=question,
            deadline=deadline or utcnow() + timedelta(days=1),
            show_realtime_results=show_realtime_results,
            access_code=f"CODE{counter['n']:04d}",
        )
        db_session.add(poll)
        db_session.flush()
        for index, text in enumerate(options):
            db_session.add(PollOption(poll_id=poll.id, option_text=text, display_order=index))
        db_session.commit()
        return poll

    return _make_poll


@pytest.fixture()
def add_vote(db_session):
    def _add_vote(poll, option, email, name="Voter", submitted_at=None):
        vote = Vote(
            poll_id=poll.id,
            poll_option_id=option.id,
            voter_name=name,
            voter_email=email,
            submitted_at=submitted_at or utcnow(),
        )
        db_session.add(vote)
        db_session.commit()
        return vote

    return _add_vote


@pytest.fixture()
def open_poll(make_poll):
    return make_poll()


@pytest.fixture()
def closed_poll(make_poll):
    return make_poll(deadline=utcnow() - timedelta(hours=1))


@pytest.fixture()
def hidden_poll(make_poll):
    return make_poll(show_realtime_results=False)
