import math

from quickpoll.models import PollOption, Vote
from quickpoll.models.base import isoformat
from quickpoll.services.errors import ResultsHidden


def rounded_percentage(count, total):
    if total <= 0:
        return 0
    # Half-up rounding: 1 of 8 votes is 13%, not the 12% round() would give.
    return int(math.floor(count / total * 100 + 0.5))


def tally_poll_results(poll):
    options = (
        PollOption.query.filter_by(poll_id=poll.id)
        .order_by(PollOption.display_order.asc())
        .all()
    )
    votes = (
        Vote.query.filter_by(poll_id=poll.id)
        .order_by(Vote.submitted_at.asc(), Vote.id.asc())
        .all()
    )

    voters_by_option = {option.id: [] for option in options}
    for vote in votes:
        if vote.poll_option_id in voters_by_option:
            voters_by_option[vote.poll_option_id].append(
                {
                    "voter_name": vote.voter_name,
                    "voter_email": vote.voter_email,
                    "submitted_at": isoformat(vote.submitted_at),
                }
            )

    total_votes = sum(len(voters) for voters in voters_by_option.values())

    results = []
    for option in options:
        voters = voters_by_option[option.id]
        results.append(
            {
                "option_id": option.id,
                "option_text": option.option_text,
                "vote_count": len(voters),
                "percentage": rounded_percentage(len(voters), total_votes),
                "voters": voters,
            }
        )

    return {
        "poll_id": poll.id,
        "total_votes": total_votes,
        "results": results,
    }


def get_visible_results(poll, now=None):
    if not poll.results_visible(now):
        raise ResultsHidden()
    return tally_poll_results(poll)
