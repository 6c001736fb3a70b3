"""Last-request-wins bookkeeping for callers that recompute on user input."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Any, Optional

logger = logging.getLogger(__name__)


class RequestSequencer:
    """Hands out increasing request ids and keeps only the newest result.

    A result is committed only if no request issued after it has already
    committed, so a slow fetch can never overwrite fresher state.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._issued = 0
        self._committed_id = 0
        self._result: Any = None

    def next_id(self) -> int:
        with self._lock:
            self._issued += 1
            return self._issued

    def observe(self, request_id: int) -> None:
        """Record an id issued by the caller rather than by :meth:`next_id`."""
        with self._lock:
            self._issued = max(self._issued, request_id)

    def commit(self, request_id: int, result: Any) -> bool:
        with self._lock:
            if request_id <= self._committed_id:
                logger.debug(
                    "Discarding stale result %d (latest %d).",
                    request_id,
                    self._committed_id,
                )
                return False
            self._committed_id = request_id
            self._issued = max(self._issued, request_id)
            self._result = result
            return True

    def is_current(self, request_id: int) -> bool:
        with self._lock:
            return request_id >= self._issued

    @property
    def latest(self) -> tuple[int, Any]:
        with self._lock:
            return self._committed_id, self._result


DEFAULT_MAX_VIEWS = 64


class ViewStateStore:
    """One :class:`RequestSequencer` per dashboard view.

    At most ``max_views`` views are tracked; the least recently used one is
    dropped when a new view id arrives at capacity.
    """

    def __init__(self, max_views: int = DEFAULT_MAX_VIEWS) -> None:
        if max_views < 1:
            raise ValueError(f"max_views must be positive, got {max_views}")
        self._lock = threading.Lock()
        self._max_views = max_views
        self._views: OrderedDict[str, RequestSequencer] = OrderedDict()

    def sequencer(self, view_id: str) -> RequestSequencer:
        with self._lock:
            sequencer = self._views.get(view_id)
            if sequencer is None:
                sequencer = RequestSequencer()
                self._views[view_id] = sequencer
                if len(self._views) > self._max_views:
                    evicted, _ = self._views.popitem(last=False)
                    logger.debug("Dropping state for view %s.", evicted)
            else:
                self._views.move_to_end(view_id)
            return sequencer

    def __len__(self) -> int:
        with self._lock:
            return len(self._views)

    def get(self, view_id: str) -> Optional[RequestSequencer]:
        with self._lock:
            return self._views.get(view_id)
