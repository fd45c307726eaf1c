"""Freshness token tracking.

Every write returns a ZedToken. Passing the latest one on reads says "show
me the graph at least as fresh as this". The tracker keeps the last token
this process observed, last store wins. Tokens are opaque and never compared
locally, so a slow write response can move the tracked token backwards;
that staleness is accepted.

Another replica may have written after our latest token. Reads only
reflect this process's own writes.
"""

import threading

from authzed.api.v1.core_pb2 import ZedToken
from authzed.api.v1.permission_service_pb2 import Consistency


class ConsistencyTracker:
    """Atomically swappable cell holding the latest observed ZedToken."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._token: ZedToken | None = None

    def load(self) -> ZedToken | None:
        """Latest token, None before the first write."""
        with self._lock:
            return self._token

    def store(self, token: ZedToken | None) -> None:
        """Replace the tracked token. Empty tokens are ignored."""
        if token is None or not token.token:
            return
        with self._lock:
            self._token = token

    def consistency(self) -> Consistency:
        """Consistency requirement for the next read or check."""
        token = self.load()
        if token is None:
            return Consistency(minimize_latency=True)
        return Consistency(at_least_as_fresh=token)
