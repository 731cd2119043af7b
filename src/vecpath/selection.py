"""Selection tracking of the document that contains paths."""

from __future__ import annotations

import logging
from typing import Any, List, Protocol

logger = logging.getLogger(__name__)


class SelectionListener(Protocol):
    """The containing document as seen from a path.

    A path reports only the transitions of its selected segment count between
    zero and non-zero, and its own removal.
    """

    def select_item(self, item: Any, selected: bool) -> None: ...

    def remove_item(self, item: Any) -> None: ...


class Document:
    """Minimal document keeping an ordered item list and the set of selected items."""

    def __init__(self):
        self._items: List[Any] = []
        self._selected: List[Any] = []

    @property
    def items(self) -> List[Any]:
        return list(self._items)

    @property
    def selected_items(self) -> List[Any]:
        """The selected items in the order they were selected."""
        return list(self._selected)

    def add_item(self, item: Any) -> Any:
        """Add _item_ to the document and make the document its selection listener."""
        if item not in self._items:
            self._items.append(item)
        item.project = self
        if item.selected:
            self.select_item(item, True)
        return item

    def select_item(self, item: Any, selected: bool) -> None:
        if selected:
            if not any(s is item for s in self._selected):
                self._selected.append(item)
        else:
            self._selected = [s for s in self._selected if s is not item]
        logger.debug("Item %r %s", item, "selected" if selected else "deselected")

    def remove_item(self, item: Any) -> None:
        self._items = [i for i in self._items if i is not item]
        self._selected = [s for s in self._selected if s is not item]
