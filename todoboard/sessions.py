"""
View Sessions — Per-Browser View Ownership
===========================================
Each browser (identified by a cookie) gets a ViewSession that owns its
views. Navigating between pages mounts one view and unmounts the other,
so state is never shared across sessions or pages.
"""

from __future__ import annotations

import logging
import secrets
from collections import OrderedDict
from typing import Optional

from todoboard.config import AppConfig
from todoboard.environment import EnvironmentInspectorView, EnvironmentSource
from todoboard.todos import TodoListView

logger = logging.getLogger(__name__)


class ViewSession:
    """The views belonging to one browser."""

    def __init__(self, config: AppConfig, source: EnvironmentSource):
        self._config = config
        self._source = source
        self.todos: Optional[TodoListView] = None
        self.inspector: Optional[EnvironmentInspectorView] = None

    def show_todos(self) -> TodoListView:
        """Mount the to-do view (if needed) and drop the inspector."""
        if self.inspector is not None:
            self.inspector.unmount()
            self.inspector = None
        if self.todos is None:
            self.todos = TodoListView()
        return self.todos

    def show_environment(self) -> EnvironmentInspectorView:
        """Unmount the to-do view and mount a fresh inspector.

        Must be called from a running event loop; the fetch starts here.
        """
        if self.todos is not None:
            self.todos.unmount()
            self.todos = None
        if self.inspector is not None:
            self.inspector.unmount()
        self.inspector = EnvironmentInspectorView(
            seed=self._config.seed_entries(),
            source=self._source,
            timeout=self._config.fetch_timeout,
        )
        self.inspector.mount()
        return self.inspector

    def close(self) -> None:
        if self.todos is not None:
            self.todos.unmount()
            self.todos = None
        if self.inspector is not None:
            self.inspector.unmount()
            self.inspector = None


class SessionRegistry:
    """Live sessions keyed by id, least recently used evicted first."""

    def __init__(self, config: AppConfig, source: EnvironmentSource,
                 max_sessions: Optional[int] = None):
        self._config = config
        self._source = source
        self._max_sessions = max_sessions or config.max_sessions
        self._sessions: OrderedDict[str, ViewSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def open(self, session_id: Optional[str] = None) -> tuple[str, ViewSession]:
        """Return the session for ``session_id``, creating one if unknown."""
        if session_id and session_id in self._sessions:
            self._sessions.move_to_end(session_id)
            return session_id, self._sessions[session_id]

        new_id = secrets.token_urlsafe(16)
        session = ViewSession(self._config, self._source)
        self._sessions[new_id] = session

        while len(self._sessions) > self._max_sessions:
            old_id, old = self._sessions.popitem(last=False)
            old.close()
            logger.info("Evicted idle session %s", old_id[:8])
        return new_id, session

    def close(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.close()

    def close_all(self) -> None:
        while self._sessions:
            _, session = self._sessions.popitem()
            session.close()
