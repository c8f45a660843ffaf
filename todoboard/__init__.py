"""
todoboard — Server-Rendered Todo List with an Environment Inspector
====================================================================
Two independent pages, each backed by view-local state.

Architecture:
    todos        — TodoItem, TodoCollection, TodoListView
    environment  — EnvironmentInspectorView and its HTTP source
    config       — AppConfig, read once at startup
    sessions     — Per-browser ownership of mounted views
    render       — Jinja2 page rendering
    server       — FastAPI routes
    cli          — serve / env / shell commands
"""

__version__ = "0.1.0"

from todoboard.todos import TodoItem, TodoCollection, TodoListView, MonotonicIds, TimestampIds
from todoboard.environment import (
    EnvironmentInspectorView, HttpEnvironmentSource, LoadStatus, FetchError,
)
from todoboard.config import AppConfig, ConfigError

__all__ = [
    "TodoItem", "TodoCollection", "TodoListView", "MonotonicIds", "TimestampIds",
    "EnvironmentInspectorView", "HttpEnvironmentSource", "LoadStatus", "FetchError",
    "AppConfig", "ConfigError",
]
