from flask import Response, current_app, jsonify, request

from quickpoll.extensions import broadcaster
from quickpoll.models.base import isoformat
from quickpoll.schemas import create_poll_schema, submit_vote_schema
from quickpoll.services.errors import InvalidRequest, ResultsHidden
from quickpoll.services.polls import (
    create_poll,
    find_poll_by_code,
    get_poll,
    get_poll_options,
    share_url,
    submit_vote,
)
from quickpoll.services.realtime import event_stream
from quickpoll.services.results import get_visible_results


def _json_body():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidRequest("Invalid JSON body")
    return payload


def register_api_routes(app):
    @app.route("/api/polls", methods=["POST"])
    def api_create_poll():
        data = create_poll_schema.load(_json_body())
        poll = create_poll(data)
        return (
            jsonify(
                {
                    "success": True,
                    "poll": {
                        "id": poll.id,
                        "access_code": poll.access_code,
                        "question": poll.question,
                        "deadline": isoformat(poll.deadline),
                        "share_url": share_url(poll),
                    },
                }
            ),
            201,
        )

    @app.route("/api/polls/<poll_id>")
    def api_get_poll(poll_id):
        poll = get_poll(poll_id)
        return jsonify(
            {
                "poll": poll.to_dict(),
                "options": [option.to_dict() for option in get_poll_options(poll)],
            }
        )

    @app.route("/api/polls/by-code/<code>")
    def api_poll_by_code(code):
        poll = find_poll_by_code(code)
        return jsonify(
            {
                "poll_id": poll.id,
                "question": poll.question,
                "deadline": isoformat(poll.deadline),
            }
        )

    @app.route("/api/votes", methods=["POST"])
    def api_submit_vote():
        data = submit_vote_schema.load(_json_body())
        vote = submit_vote(data)
        return (
            jsonify(
                {
                    "success": True,
                    "vote": {
                        "id": vote.id,
                        "poll_id": vote.poll_id,
                        "created_at": isoformat(vote.submitted_at),
                    },
                }
            ),
            201,
        )

    @app.route("/api/polls/<poll_id>/results")
    def api_poll_results(poll_id):
        poll = get_poll(poll_id)
        return jsonify(get_visible_results(poll))

    @app.route("/api/polls/<poll_id>/results/stream")
    def api_poll_results_stream(poll_id):
        poll = get_poll(poll_id)
        if not poll.realtime_enabled():
            raise ResultsHidden("Live results are not available for this poll")

        # Subscribe first so a vote landing while the snapshot is taken still arrives.
        listener = broadcaster.subscribe(poll.id)
        try:
            snapshot = get_visible_results(poll)
        except Exception:
            broadcaster.unsubscribe(poll.id, listener)
            raise

        keepalive = current_app.config["REALTIME_KEEPALIVE_SECONDS"]
        current_app.logger.debug("Live results stream opened for poll %s", poll.id)

        response = Response(
            event_stream(broadcaster, poll.id, listener, snapshot, keepalive=keepalive),
            mimetype="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )
        # Covers a client that disconnects before the first frame is produced.
        response.call_on_close(lambda: broadcaster.unsubscribe(poll.id, listener))
        return response
