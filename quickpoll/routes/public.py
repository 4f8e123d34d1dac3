from flask import abort, flash, redirect, render_template, request, url_for
from markupsafe import Markup
from marshmallow import ValidationError

from quickpoll.models.base import utcnow
from quickpoll.schemas import create_poll_schema, submit_vote_schema
from quickpoll.services.charts import render_pie_svg
from quickpoll.services.errors import PollError, PollNotFound
from quickpoll.services.polls import (
    create_poll,
    find_poll_by_code,
    get_poll,
    get_poll_options,
    share_url,
    submit_vote,
)
from quickpoll.services.results import tally_poll_results


def _poll_or_404(poll_id):
    try:
        return get_poll(poll_id)
    except PollNotFound:
        abort(404)


def _first_messages(messages):
    """Flatten marshmallow's error dict to one message per field for form display."""
    errors = {}
    for field, value in messages.items():
        while isinstance(value, (list, dict)) and value:
            value = value[0] if isinstance(value, list) else next(iter(value.values()))
        errors[field] = value
    return errors


def register_public_routes(app):
    @app.template_filter("datetime")
    def format_datetime(value, fmt="%b %d, %Y %H:%M UTC"):
        if value is None:
            return ""
        return value.strftime(fmt)

    @app.route("/")
    def index():
        return render_template("index.html")

    @app.route("/create", methods=["GET", "POST"])
    def create_poll_page():
        if request.method == "GET":
            return render_template("create.html", form={}, errors={})

        form = {
            "creator_name": request.form.get("creator_name") or "",
            "creator_email": request.form.get("creator_email") or "",
            "question": request.form.get("question") or "",
            "options": request.form.get("options") or "",
            "deadline": request.form.get("deadline") or "",
            "show_realtime_results": bool(request.form.get("show_realtime_results")),
        }
        payload = dict(form)
        payload["options"] = [
            line.strip() for line in form["options"].splitlines() if line.strip()
        ]

        try:
            data = create_poll_schema.load(payload)
        except ValidationError as error:
            return (
                render_template("create.html", form=form, errors=_first_messages(error.messages)),
                400,
            )

        try:
            poll = create_poll(data)
        except PollError as error:
            flash(error.message, "error")
            return render_template("create.html", form=form, errors={}), error.status_code

        return redirect(url_for("create_success", poll_id=poll.id))

    @app.route("/create/success/<poll_id>")
    def create_success(poll_id):
        poll = _poll_or_404(poll_id)
        return render_template("create_success.html", poll=poll, share_url=share_url(poll))

    @app.route("/join", methods=["GET", "POST"])
    def join_poll():
        if request.method == "POST":
            raw_code = request.form.get("access_code") or ""

            if not raw_code.strip():
                flash("Please enter an access code.", "join_error")
                return redirect(url_for("join_poll"))

            try:
                poll = find_poll_by_code(raw_code)
            except PollError as error:
                flash(error.message, "join_error")
                return redirect(url_for("join_poll"))

            return redirect(url_for("poll_page", poll_id=poll.id))

        return render_template("join.html")

    @app.route("/poll/<poll_id>", methods=["GET", "POST"])
    def poll_page(poll_id):
        poll = _poll_or_404(poll_id)
        options = get_poll_options(poll)
        now = utcnow()

        if request.method == "POST":
            form = {
                "poll_id": poll.id,
                "poll_option_id": request.form.get("poll_option_id") or "",
                "voter_name": request.form.get("voter_name") or "",
                "voter_email": request.form.get("voter_email") or "",
            }
            try:
                data = submit_vote_schema.load(form)
            except ValidationError as error:
                return (
                    render_template(
                        "poll.html",
                        poll=poll,
                        options=options,
                        is_expired=poll.is_expired(now),
                        form=form,
                        errors=_first_messages(error.messages),
                    ),
                    400,
                )

            try:
                submit_vote(data)
            except PollError as error:
                flash(error.message, "vote_error")
                return redirect(url_for("poll_page", poll_id=poll.id))

            if poll.show_realtime_results:
                flash("Your vote has been recorded!", "success")
                return redirect(url_for("poll_results_page", poll_id=poll.id))

            flash(
                "Your vote has been recorded! Thank you for voting. "
                "Results will be available after the deadline.",
                "success",
            )
            return redirect(url_for("index"))

        return render_template(
            "poll.html",
            poll=poll,
            options=options,
            is_expired=poll.is_expired(now),
            form={},
            errors={},
        )

    @app.route("/poll/<poll_id>/results")
    def poll_results_page(poll_id):
        poll = _poll_or_404(poll_id)
        now = utcnow()

        if not poll.results_visible(now):
            return render_template(
                "results.html",
                poll=poll,
                is_expired=False,
                hidden=True,
                results=None,
                pie_chart=None,
                realtime=False,
            )

        results = tally_poll_results(poll)
        pie_chart = render_pie_svg(results["results"])
        return render_template(
            "results.html",
            poll=poll,
            is_expired=poll.is_expired(now),
            hidden=False,
            results=results,
            pie_chart=Markup(pie_chart) if pie_chart else None,
            realtime=poll.realtime_enabled(now),
        )
