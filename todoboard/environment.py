"""
Environment Inspector — View State for the Environment Page
============================================================
Shows name/value pairs from two sources: seed entries known before any
network traffic, and one best-effort fetch of the server's debug endpoint.

Components:
    LoadStatus               — not loaded / loaded / failed
    FetchError               — Any failure of an environment source
    HttpEnvironmentSource    — GET of the debug endpoint (urllib in a thread)
    EnvironmentInspectorView — Seed, fetch once, render sorted

Write order:
    mount() seeds synchronously, then the fetch result (or the diagnostic
    entry) replaces the whole map. A result that arrives after unmount(),
    or for an earlier mount, is dropped.
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.request
from enum import Enum
from functools import lru_cache
from typing import Any, Awaitable, Callable, Mapping, Optional

import pyuca

logger = logging.getLogger(__name__)

ERROR_KEY = "Error"
ERROR_MESSAGE = "Could not fetch server-side environment variables."
LOADING_MESSAGE = "Loading environment variables..."
EMPTY_MESSAGE = "No environment variables reported."

EnvironmentSource = Callable[[], Awaitable[Mapping[str, str]]]


class LoadStatus(Enum):
    NOT_LOADED = "not_loaded"
    LOADED = "loaded"
    FAILED = "failed"


class FetchError(Exception):
    """The environment endpoint could not be read or returned junk."""


@lru_cache(maxsize=None)
def _collator() -> pyuca.Collator:
    return pyuca.Collator()


def collation_key(name: str) -> tuple:
    """Sort key for display order: "_" before letters, case only breaks ties."""
    return (_collator().sort_key(name), name)


def parse_payload(payload: Any) -> dict[str, str]:
    """Validate a decoded response: a JSON object of string to string."""
    if not isinstance(payload, dict):
        raise FetchError(f"Expected a JSON object, got {type(payload).__name__}")
    for key, value in payload.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise FetchError(f"Non-string entry for {key!r}")
    return dict(payload)


# ─────────────────────────────────────────────────────────────
#  HTTP Source
# ─────────────────────────────────────────────────────────────

class HttpEnvironmentSource:
    """Fetches the environment map from a fixed URL.

    The request itself is blocking urllib, run on a worker thread so the
    event loop stays free (the endpoint may be served by the same process).
    """

    def __init__(self, url: str, timeout: float = 5.0):
        self.url = url
        self.timeout = timeout

    async def __call__(self) -> dict[str, str]:
        return await asyncio.to_thread(self.fetch)

    def fetch(self) -> dict[str, str]:
        req = urllib.request.Request(
            self.url,
            headers={"Accept": "application/json"},
            method="GET",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                status = resp.status
                body = resp.read()
        except urllib.error.HTTPError as e:
            raise FetchError(f"HTTP {e.code} from {self.url}") from e
        except (urllib.error.URLError, OSError) as e:
            raise FetchError(f"Cannot reach {self.url}: {e}") from e

        if not 200 <= status < 300:
            raise FetchError(f"HTTP {status} from {self.url}")

        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise FetchError(f"Malformed body from {self.url}: {e}") from e
        return parse_payload(payload)


# ─────────────────────────────────────────────────────────────
#  Inspector View
# ─────────────────────────────────────────────────────────────

class EnvironmentInspectorView:
    """State behind the environment page."""

    def __init__(
        self,
        seed: Mapping[str, str],
        source: EnvironmentSource,
        timeout: float = 5.0,
    ):
        self._seed = dict(seed)
        self._source = source
        self._timeout = timeout
        self._task: Optional[asyncio.Task] = None
        self._generation = 0
        self.vars: dict[str, str] = {}
        self.status = LoadStatus.NOT_LOADED
        self.mounted = False

    def mount(self) -> asyncio.Task:
        """Seed the map and start the one fetch. Needs a running loop."""
        self.unmount()
        self._generation += 1
        self.mounted = True
        self.vars = dict(self._seed)
        self.status = LoadStatus.NOT_LOADED
        self._task = asyncio.get_running_loop().create_task(self._load(self._generation))
        return self._task

    def unmount(self) -> None:
        self.mounted = False
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Wait until the current fetch has been applied or dropped."""
        task = self._task
        if task is None:
            return
        await asyncio.wait([task])

    async def _load(self, generation: int) -> None:
        try:
            payload = await asyncio.wait_for(self._source(), timeout=self._timeout)
            data = parse_payload(payload)
        except asyncio.TimeoutError:
            logger.warning("Environment fetch timed out after %.1fs", self._timeout)
            self._apply(generation, {ERROR_KEY: ERROR_MESSAGE}, LoadStatus.FAILED)
        except Exception as e:
            logger.warning("Environment fetch failed: %s", e)
            self._apply(generation, {ERROR_KEY: ERROR_MESSAGE}, LoadStatus.FAILED)
        else:
            self._apply(generation, data, LoadStatus.LOADED)

    def _apply(self, generation: int, data: dict[str, str], status: LoadStatus) -> None:
        if not self.mounted or generation != self._generation:
            logger.debug("Dropping environment result for a disposed view")
            return
        self.vars = data
        self.status = status

    @property
    def is_loading(self) -> bool:
        return self.status is LoadStatus.NOT_LOADED

    def entries(self) -> list[tuple[str, str]]:
        """Entries sorted by key in Unicode collation order."""
        return sorted(self.vars.items(), key=lambda kv: collation_key(kv[0]))
