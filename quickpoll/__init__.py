from flask import Flask

from quickpoll.config import Config
from quickpoll.extensions import db, migrate
from quickpoll.routes import register_routes


def create_app(overrides=None):
    app = Flask(
        __name__,
        template_folder="../templates",
        static_folder="../static",
    )
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)
    migrate.init_app(app, db)

    register_routes(app)
    return app


app = create_app()

__all__ = ["app", "db", "migrate", "create_app"]
