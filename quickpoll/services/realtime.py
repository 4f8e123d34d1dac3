import json
import queue
import threading

DEFAULT_QUEUE_SIZE = 16


class VoteBroadcaster:
    def __init__(self, queue_size=DEFAULT_QUEUE_SIZE):
        self._queue_size = queue_size
        self._lock = threading.Lock()
        self._subscribers = {}

    def subscribe(self, poll_id):
        listener = queue.Queue(maxsize=self._queue_size)
        with self._lock:
            self._subscribers.setdefault(poll_id, []).append(listener)
        return listener

    def unsubscribe(self, poll_id, listener):
        with self._lock:
            listeners = self._subscribers.get(poll_id)
            if not listeners:
                return
            if listener in listeners:
                listeners.remove(listener)
            if not listeners:
                self._subscribers.pop(poll_id, None)

    def subscriber_count(self, poll_id):
        with self._lock:
            return len(self._subscribers.get(poll_id, ()))

    def publish(self, poll_id, payload):
        with self._lock:
            listeners = list(self._subscribers.get(poll_id, ()))

        # Every payload is a full tally, so a lagging listener loses its oldest one.
        for listener in listeners:
            while True:
                try:
                    listener.put_nowait(payload)
                    break
                except queue.Full:
                    try:
                        listener.get_nowait()
                    except queue.Empty:
                        pass
        return len(listeners)


def format_event(payload, event="results"):
    lines = []
    if event:
        lines.append(f"event: {event}")
    for line in json.dumps(payload).splitlines():
        lines.append(f"data: {line}")
    return "\n".join(lines) + "\n\n"


def event_stream(broadcaster, poll_id, listener, snapshot, keepalive=15.0):
    """Yield SSE frames for a listener that was subscribed before snapshot was taken."""
    try:
        yield format_event(snapshot)
        while True:
            try:
                payload = listener.get(timeout=keepalive)
            except queue.Empty:
                yield ": keepalive\n\n"
                continue
            yield format_event(payload)
    finally:
        broadcaster.unsubscribe(poll_id, listener)
