"""
Drag-and-drop reordering of top-level menu nodes.

Moves are applied to a local working sequence and persisted together as one
bulk sort-order update. Every commit rewrites the whole sequence to a dense
1..N order rather than diffing against the previous values.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

import httpx

from navconsole.models.menu import MenuType
from navconsole.schemas.menu_schemas import MenuOrderUpdate
from navconsole.services.menu_tree import MenuEntry, sort_entries

logger = logging.getLogger(__name__)

T = TypeVar("T")


def move_item(sequence: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Return a copy with the item at ``from_index`` reinserted at ``to_index``."""
    size = len(sequence)
    for index in (from_index, to_index):
        if not 0 <= index < size:
            raise IndexError(f"index {index} out of range for {size} menu(s)")
    items = list(sequence)
    item = items.pop(from_index)
    items.insert(to_index, item)
    return items


def compute_updates(sequence: Iterable[Any]) -> list[MenuOrderUpdate]:
    """Dense 1-based sort order for every node, in sequence order."""
    return [MenuOrderUpdate(id=node.id, sort_order=position) for position, node in enumerate(sequence, start=1)]


class ReorderReconciler:
    """Working order of the top-level menu nodes, with discard and batch commit."""

    def __init__(self, client=None, nodes: Iterable[Any] = ()):
        self.client = client
        self.last_error: Exception | None = None
        self._baseline: tuple[MenuEntry, ...] = ()
        self._working: list[MenuEntry] = []
        self.has_unsaved_changes = False
        self.load(nodes)

    @property
    def baseline(self) -> list[MenuEntry]:
        return list(self._baseline)

    @property
    def sequence(self) -> list[MenuEntry]:
        return list(self._working)

    def load(self, nodes: Iterable[Any]) -> list[MenuEntry]:
        """Adopt a freshly fetched authoritative order."""
        entries = [MenuEntry.from_record(node) for node in nodes]
        self._baseline = tuple(sort_entries(entry for entry in entries if entry.menu_type == MenuType.top))
        self._working = list(self._baseline)
        self.has_unsaved_changes = False
        self.last_error = None
        return self.sequence

    async def refresh(self) -> list[MenuEntry]:
        menus = await self.client.list_menus(menu_type=MenuType.top.value)
        return self.load(menus)

    def apply_move(self, from_index: int, to_index: int) -> list[MenuEntry]:
        if from_index == to_index:
            move_item(self._working, from_index, to_index)  # bounds check only
            return self.sequence
        self._working = move_item(self._working, from_index, to_index)
        self.has_unsaved_changes = True
        return self.sequence

    compute_updates = staticmethod(compute_updates)

    def discard(self) -> list[MenuEntry]:
        self._working = list(self._baseline)
        self.has_unsaved_changes = False
        return self.sequence

    async def commit(self, sequence: Sequence[Any] | None = None) -> bool:
        """Persist the whole order as one batch; False leaves the working order untouched."""
        entries = self._working if sequence is None else [MenuEntry.from_record(node) for node in sequence]
        updates = compute_updates(entries)
        try:
            await self.client.bulk_update_menu_order(updates)
        except (httpx.HTTPError, ValueError) as exc:
            self.last_error = exc
            if sequence is not None:
                self._working = list(entries)
                self.has_unsaved_changes = True
            logger.warning("Menu order commit failed for %d menu(s): %s", len(updates), exc)
            return False

        committed = tuple(
            dataclasses.replace(entry, sort_order=update.sort_order) for entry, update in zip(entries, updates, strict=True)
        )
        self._baseline = committed
        self._working = list(committed)
        self.has_unsaved_changes = False
        self.last_error = None
        logger.info("Committed menu order for %d menu(s)", len(updates))
        return True
