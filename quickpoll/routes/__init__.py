from quickpoll.routes.api import register_api_routes
from quickpoll.routes.errors import register_error_handlers
from quickpoll.routes.public import register_public_routes


def register_routes(app):
    register_error_handlers(app)
    register_api_routes(app)
    register_public_routes(app)
