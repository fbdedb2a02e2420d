from __future__ import annotations

"""
Preview Session Store.

One session per open preview pane. A session owns the extra-assigns map of
its pane; the synchronizer never holds state, so the store replaces the map
wholesale after every event.

The store is bounded: opening a session beyond 'max_sessions' drops the least
recently used one. Panes that are never closed explicitly therefore cannot
grow the store without limit.
"""

import logging
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from storyshelf.domain.constants import DEFAULT_MAX_PREVIEW_SESSIONS
from storyshelf.domain.story_models import StoryDescriptor

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class PreviewSession:
    id: str
    story_path: str
    story: StoryDescriptor
    variation_id: Optional[str] = None
    theme: Optional[str] = None
    playground: bool = False
    extra_assigns: Dict[str, Any] = field(default_factory=dict)


class SessionStore:
    """Process-local, thread-safe LRU map of session id -> PreviewSession."""

    def __init__(self, max_sessions: int = DEFAULT_MAX_PREVIEW_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {max_sessions}")
        self._max_sessions = max_sessions
        self._lock = threading.Lock()
        self._sessions: "OrderedDict[str, PreviewSession]" = OrderedDict()

    @property
    def max_sessions(self) -> int:
        return self._max_sessions

    def open(
            self,
            story_path: str,
            story: StoryDescriptor,
            variation_id: Optional[str] = None,
            theme: Optional[str] = None,
            playground: bool = False,
    ) -> PreviewSession:
        session = PreviewSession(
            id=uuid.uuid4().hex,
            story_path=story_path,
            story=story,
            variation_id=variation_id,
            theme=theme,
            playground=playground,
        )
        with self._lock:
            self._sessions[session.id] = session
            while len(self._sessions) > self._max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logger.debug(f"Evicted least recently used preview session: {evicted_id}")
        return session

    def get(self, session_id: str) -> Optional[PreviewSession]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
            return session

    def apply(
            self,
            session_id: str,
            update: Callable[[PreviewSession], Tuple[T, Dict[str, Any]]],
    ) -> Optional[Tuple[T, PreviewSession]]:
        """
        Read, compute and store a session's extra assigns as one step.

        'update' runs under the store lock and must not call back into the
        store. It receives the current session and returns a result for the
        caller plus the new extra-assigns map.

        Returns:
            Optional[Tuple[T, PreviewSession]]: The result of 'update' and the
                                                stored session, or None if the
                                                session does not exist.
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            result, extra_assigns = update(session)
            session = replace(session, extra_assigns=extra_assigns)
            self._sessions[session_id] = session
            self._sessions.move_to_end(session_id)
            return result, session

    def close(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions
