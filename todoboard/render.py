"""HTML rendering for the two pages using Jinja2 templates."""

from __future__ import annotations

import os
from typing import Any

import jinja2

from todoboard import environment, todos
from todoboard.environment import EnvironmentInspectorView, LoadStatus
from todoboard.todos import TodoListView

_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")
_ENV = jinja2.Environment(
    loader=jinja2.FileSystemLoader(_TEMPLATE_DIR),
    autoescape=jinja2.select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def render(template_name: str, **kwargs: Any) -> str:
    """Render a Jinja2 template with the given keyword arguments."""
    template = _ENV.get_template(template_name)
    return template.render(**kwargs)


def render_todo_page(view: TodoListView) -> str:
    return render(
        "todos.html",
        items=list(view.items),
        draft_text=view.draft_text,
        empty_message=todos.EMPTY_MESSAGE,
    )


def render_environment_page(view: EnvironmentInspectorView) -> str:
    # Loading is decided by status, never by an empty map.
    return render(
        "env.html",
        entries=view.entries(),
        loading=view.is_loading and not view.vars,
        failed=view.status is LoadStatus.FAILED,
        loading_message=environment.LOADING_MESSAGE,
        empty_message=environment.EMPTY_MESSAGE,
    )
