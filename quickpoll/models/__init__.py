from quickpoll.models.poll import Poll
from quickpoll.models.poll_option import PollOption
from quickpoll.models.vote import Vote

__all__ = [
    "Poll",
    "PollOption",
    "Vote",
]
