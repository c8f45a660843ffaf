"""
Todo List — View State for the Todo Page
=========================================
In-memory to-do list owned by a single view instance.

Components:
    TodoItem        — One task with its completion flag
    MonotonicIds    — Counter id source (default)
    TimestampIds    — Millisecond id source that never repeats
    TodoCollection  — Ordered items, insertion order is display order
    TodoListView    — Draft text + collection, the unit the page renders

Every operation is total: empty text and unknown ids are silent no-ops.
The collection lives exactly as long as the view that owns it.
"""

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass, asdict
from typing import Callable, Iterator, Optional

logger = logging.getLogger(__name__)

IdSource = Callable[[], int]

EMPTY_MESSAGE = "No todos yet! Add some above."


# ─────────────────────────────────────────────────────────────
#  Todo Item
# ─────────────────────────────────────────────────────────────

@dataclass
class TodoItem:
    """A user-entered task. Only ``completed`` changes after creation."""

    id: int
    text: str
    completed: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


# ─────────────────────────────────────────────────────────────
#  Id Sources
# ─────────────────────────────────────────────────────────────

class MonotonicIds:
    """Strictly increasing integer ids starting at ``start``."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def __call__(self) -> int:
        return next(self._counter)


class TimestampIds:
    """Wall-clock millisecond ids.

    Two calls inside the same millisecond (or after the clock steps
    backwards) get ``last + 1`` instead of a repeated value.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0

    def __call__(self) -> int:
        now = int(self._clock() * 1000)
        self._last = now if now > self._last else self._last + 1
        return self._last


# ─────────────────────────────────────────────────────────────
#  Todo Collection
# ─────────────────────────────────────────────────────────────

class TodoCollection:
    """Ordered to-do items with unique ids.

    Items are appended on add, flipped in place on toggle and dropped on
    remove; the survivors keep their relative order.
    """

    def __init__(self, id_source: Optional[IdSource] = None):
        self._next_id = id_source or MonotonicIds()
        self._items: list[TodoItem] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[TodoItem]:
        return iter(self._items)

    @property
    def items(self) -> tuple[TodoItem, ...]:
        return tuple(self._items)

    def get(self, todo_id: int) -> Optional[TodoItem]:
        for item in self._items:
            if item.id == todo_id:
                return item
        return None

    def add(self, text: str) -> Optional[TodoItem]:
        """Append a new item, or return None when ``text`` is blank.

        The stored text is the caller's text as given; only the emptiness
        check looks at the trimmed form.
        """
        if not text.strip():
            logger.debug("Ignoring blank todo text")
            return None

        live = {item.id for item in self._items}
        new_id = self._next_id()
        while new_id in live:
            new_id = self._next_id()

        item = TodoItem(id=new_id, text=text)
        self._items.append(item)
        logger.debug("Added todo %d", item.id)
        return item

    def toggle(self, todo_id: int) -> bool:
        item = self.get(todo_id)
        if item is None:
            logger.debug("Toggle ignored, no todo %r", todo_id)
            return False
        item.completed = not item.completed
        return True

    def remove(self, todo_id: int) -> bool:
        kept = [item for item in self._items if item.id != todo_id]
        if len(kept) == len(self._items):
            logger.debug("Remove ignored, no todo %r", todo_id)
            return False
        self._items = kept
        return True

    def to_list(self) -> list[dict]:
        return [item.to_dict() for item in self._items]


# ─────────────────────────────────────────────────────────────
#  Todo List View
# ─────────────────────────────────────────────────────────────

class TodoListView:
    """State behind the to-do page: the draft input plus the collection.

    The collection starts empty when the view is created (mounted) and is
    discarded by ``unmount()``.
    """

    def __init__(self, id_source: Optional[IdSource] = None):
        self._id_source = id_source
        self.items = TodoCollection(id_source)
        self.draft_text = ""
        self.mounted = True

    def update_draft(self, text: str) -> None:
        self.draft_text = text

    def add(self, text: Optional[str] = None) -> None:
        """Commit ``text`` (or the current draft) as a new item.

        Blank input leaves both the list and the draft untouched; a
        successful add clears the draft.
        """
        if text is None:
            text = self.draft_text
        if self.items.add(text) is None:
            return
        self.draft_text = ""

    def toggle(self, todo_id: int) -> None:
        self.items.toggle(todo_id)

    def remove(self, todo_id: int) -> None:
        self.items.remove(todo_id)

    def unmount(self) -> None:
        self.items = TodoCollection(self._id_source)
        self.draft_text = ""
        self.mounted = False

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0

    def snapshot(self) -> dict:
        """Render/JSON view of the current state."""
        return {
            "draft_text": self.draft_text,
            "items": self.items.to_list(),
            "count": len(self.items),
        }
