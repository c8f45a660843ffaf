"""
todoboard Server — Web Interface for the Todo List
====================================================
FastAPI application serving the to-do page and the environment inspector.

Launch:
    python -m todoboard.server          # Direct
    todoboard serve                     # Via CLI

Endpoints:
    GET    /                          → Todo page
    POST   /todos                     → Add (form field "text")
    POST   /todos/{id}/toggle         → Toggle completion
    POST   /todos/{id}/delete         → Delete
    GET    /env                       → Environment inspector page
    GET    /api/env                   → Server environment (debug endpoint)
    GET    /api/todos                 → Todo list snapshot
    POST   /api/todos                 → Add ({"text": ...})
    POST   /api/todos/{id}/toggle     → Toggle completion
    DELETE /api/todos/{id}            → Delete
    GET    /api/health                → Liveness + session count
"""

from __future__ import annotations

import logging
import os
import threading
import webbrowser
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from todoboard import __version__
from todoboard.config import AppConfig
from todoboard.environment import EnvironmentSource, HttpEnvironmentSource
from todoboard.render import render_environment_page, render_todo_page
from todoboard.sessions import SessionRegistry, ViewSession
from todoboard.todos import TodoListView

logger = logging.getLogger(__name__)

SESSION_COOKIE = "todoboard_session"
STATIC_DIR = os.path.join(os.path.dirname(__file__), "static")

# Global state — set by configure(), lazily on first request otherwise
_state = {
    "config": None,
    "source": None,
    "sessions": None,
}


def configure(config: Optional[AppConfig] = None,
              source: Optional[EnvironmentSource] = None) -> SessionRegistry:
    """(Re)initialize server state, closing any existing sessions."""
    if _state["sessions"] is not None:
        _state["sessions"].close_all()

    config = config or AppConfig.from_environ()
    source = source or HttpEnvironmentSource(config.env_endpoint, config.fetch_timeout)

    _state["config"] = config
    _state["source"] = source
    _state["sessions"] = SessionRegistry(config, source)
    logger.info("Environment page fetches %s", config.env_endpoint)
    return _state["sessions"]


def _registry() -> SessionRegistry:
    if _state["sessions"] is None:
        configure()
    return _state["sessions"]


def _open_session(request: Request) -> tuple[str, ViewSession]:
    return _registry().open(request.cookies.get(SESSION_COOKIE))


def _with_cookie(response, request: Request, session_id: str):
    if request.cookies.get(SESSION_COOKIE) != session_id:
        response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    _registry()
    yield
    if _state["sessions"] is not None:
        _state["sessions"].close_all()


# ─────────────────────────────────────────────────────────────
#  App Setup
# ─────────────────────────────────────────────────────────────

app = FastAPI(title="todoboard", version=__version__, lifespan=lifespan)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


# ─────────────────────────────────────────────────────────────
#  Request Models
# ─────────────────────────────────────────────────────────────

class TodoCreate(BaseModel):
    text: str


# ─────────────────────────────────────────────────────────────
#  Routes — Pages
# ─────────────────────────────────────────────────────────────

def _back_to_todos(request: Request, session_id: str) -> RedirectResponse:
    return _with_cookie(RedirectResponse("/", status_code=303), request, session_id)


def _keep_draft(session: ViewSession, text: Optional[str]) -> TodoListView:
    """Item buttons submit the add form, so they carry the typed draft."""
    view = session.show_todos()
    if text is not None:
        view.update_draft(text)
    return view


@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Render the to-do page."""
    session_id, session = _open_session(request)
    view = session.show_todos()
    return _with_cookie(HTMLResponse(render_todo_page(view)), request, session_id)


@app.post("/todos")
async def add_todo(request: Request, text: str = Form("")):
    session_id, session = _open_session(request)
    session.show_todos().add(text)
    return _back_to_todos(request, session_id)


@app.post("/todos/{todo_id}/toggle")
async def toggle_todo(request: Request, todo_id: int, text: Optional[str] = Form(None)):
    session_id, session = _open_session(request)
    view = _keep_draft(session, text)
    view.toggle(todo_id)
    return _back_to_todos(request, session_id)


@app.post("/todos/{todo_id}/delete")
async def delete_todo(request: Request, todo_id: int, text: Optional[str] = Form(None)):
    session_id, session = _open_session(request)
    view = _keep_draft(session, text)
    view.remove(todo_id)
    return _back_to_todos(request, session_id)


@app.get("/env", response_class=HTMLResponse)
async def env_page(request: Request):
    """Render the environment page once its fetch has settled.

    The fetch is bounded by the configured timeout, so this always returns.
    """
    session_id, session = _open_session(request)
    view = session.show_environment()
    await view.wait()
    return _with_cookie(HTMLResponse(render_environment_page(view)), request, session_id)


# ─────────────────────────────────────────────────────────────
#  Routes — REST API
# ─────────────────────────────────────────────────────────────

@app.get("/api/env")
async def api_env():
    """Return the server-side environment the inspector displays."""
    _registry()
    return JSONResponse(_state["config"].server_environment())


@app.get("/api/todos")
async def api_todos(request: Request):
    session_id, session = _open_session(request)
    view = session.show_todos()
    return _with_cookie(JSONResponse(view.snapshot()), request, session_id)


@app.post("/api/todos")
async def api_add_todo(request: Request, req: TodoCreate):
    session_id, session = _open_session(request)
    view = session.show_todos()
    view.add(req.text)
    return _with_cookie(JSONResponse(view.snapshot()), request, session_id)


@app.post("/api/todos/{todo_id}/toggle")
async def api_toggle_todo(request: Request, todo_id: int):
    session_id, session = _open_session(request)
    view = session.show_todos()
    view.toggle(todo_id)
    return _with_cookie(JSONResponse(view.snapshot()), request, session_id)


@app.delete("/api/todos/{todo_id}")
async def api_delete_todo(request: Request, todo_id: int):
    session_id, session = _open_session(request)
    view = session.show_todos()
    view.remove(todo_id)
    return _with_cookie(JSONResponse(view.snapshot()), request, session_id)


@app.get("/api/health")
async def api_health():
    return JSONResponse({"status": "ok", "sessions": len(_registry())})


# ─────────────────────────────────────────────────────────────
#  Startup
# ─────────────────────────────────────────────────────────────

def run_server(config: Optional[AppConfig] = None, open_browser: bool = True):
    """Launch the todoboard server."""
    import uvicorn

    if config is None:
        config = AppConfig.from_environ()
    configure(config)

    url = f"http://{config.host}:{config.port}"
    if open_browser:
        def _open():
            import time
            time.sleep(1.5)
            webbrowser.open(url)
        threading.Thread(target=_open, daemon=True).start()

    print(f"\n─── todoboard ───")
    print(f"  {url}")
    print(f"  Press Ctrl+C to stop\n")

    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    run_server()
