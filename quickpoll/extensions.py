from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

from quickpoll.services.realtime import VoteBroadcaster

db = SQLAlchemy()
migrate = Migrate()
broadcaster = VoteBroadcaster()
