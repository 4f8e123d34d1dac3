from flask import current_app, jsonify, render_template, request
from marshmallow import ValidationError

from quickpoll.extensions import db
from quickpoll.services.errors import PollError


def wants_json():
    return request.path.startswith("/api/")


def validation_error_response(error):
    return jsonify({"error": "Validation failed", "issues": error.messages}), 400


def register_error_handlers(app):
    @app.errorhandler(PollError)
    def handle_poll_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return validation_error_response(error)

    @app.errorhandler(404)
    def handle_not_found(error):
        if wants_json():
            return jsonify({"error": "Not found"}), 404
        return render_template("404.html"), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        if wants_json():
            return jsonify({"error": "Method not allowed"}), 405
        return error

    @app.errorhandler(500)
    def handle_server_error(error):
        db.session.rollback()
        original = getattr(error, "original_exception", None)
        current_app.logger.error(
            "Unexpected error in %s %s", request.method, request.path, exc_info=original
        )
        if wants_json():
            return jsonify({"error": "An unexpected error occurred. Please try again."}), 500
        return render_template("500.html"), 500
