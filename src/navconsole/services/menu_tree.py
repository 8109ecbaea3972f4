"""
Two-level navigation tree built from the flat menu node list.

The tree is rebuilt from scratch on every change and handed out as frozen
dataclasses. Sub nodes whose parent is missing, inactive, or not a top node
are reported as orphans instead of failing the build.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from navconsole.models.menu import LEGACY_MENU_TYPES, MenuType

logger = logging.getLogger(__name__)


def _field(record: Any, snake: str, camel: str | None = None, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        if snake in record:
            return record[snake]
        if camel and camel in record:
            return record[camel]
        return default
    return getattr(record, snake, default)


def coerce_menu_type(value: Any) -> MenuType:
    if isinstance(value, MenuType):
        return value
    raw = str(getattr(value, "value", value)).strip().lower()
    if raw in LEGACY_MENU_TYPES:
        return LEGACY_MENU_TYPES[raw]
    return MenuType(raw)


@dataclass(frozen=True)
class MenuEntry:
    """Immutable snapshot of one persisted menu node."""

    id: int
    name: str
    label: str
    menu_type: MenuType
    parent_id: int | None = None
    sort_order: int = 0
    is_active: bool = True
    icon: str | None = None
    route: str | None = None

    @classmethod
    def from_record(cls, record: Any) -> MenuEntry:
        """Build from an ORM row, a pydantic model, or a snake/camel-case dict."""
        if isinstance(record, MenuEntry):
            return record
        return cls(
            id=int(_field(record, "id")),
            name=_field(record, "name"),
            label=_field(record, "label"),
            menu_type=coerce_menu_type(_field(record, "menu_type", "menuType")),
            parent_id=_field(record, "parent_id", "parentId"),
            sort_order=int(_field(record, "sort_order", "sortOrder", 0) or 0),
            is_active=bool(_field(record, "is_active", "isActive", True)),
            icon=_field(record, "icon"),
            route=_field(record, "route"),
        )

    @property
    def is_top(self) -> bool:
        return self.menu_type == MenuType.top


def sort_key(entry: MenuEntry) -> tuple[int, int]:
    """Display order among siblings: sort order first, id breaks ties."""
    return (entry.sort_order, entry.id)


def sort_entries(entries: Iterable[MenuEntry]) -> list[MenuEntry]:
    return sorted(entries, key=sort_key)


@dataclass(frozen=True)
class MenuTreeNode:
    entry: MenuEntry
    children: tuple[MenuEntry, ...] = ()

    @property
    def name(self) -> str:
        return self.entry.name


@dataclass(frozen=True)
class MenuTree:
    roots: tuple[MenuTreeNode, ...] = ()
    orphans: tuple[MenuEntry, ...] = field(default=(), compare=False)

    def __iter__(self):
        return iter(self.roots)

    def __len__(self) -> int:
        return len(self.roots)

    def targets(self) -> list[tuple[str, str | None]]:
        """Every selectable permission target, in display order."""
        result: list[tuple[str, str | None]] = []
        for root in self.roots:
            result.append((root.entry.name, None))
            result.extend((root.entry.name, child.name) for child in root.children)
        return result

    def filter(self, visible: Callable[[str, str | None], bool]) -> MenuTree:
        """Keep top nodes the predicate accepts, and their accepted children."""
        roots = []
        for root in self.roots:
            if not visible(root.entry.name, None):
                continue
            children = tuple(child for child in root.children if visible(root.entry.name, child.name))
            roots.append(MenuTreeNode(root.entry, children))
        return MenuTree(tuple(roots), self.orphans)


def top_level_candidates(records: Iterable[Any]) -> list[MenuEntry]:
    """Active top nodes in display order; also the parent choices for new sub nodes."""
    entries = [MenuEntry.from_record(record) for record in records]
    return sort_entries(entry for entry in entries if entry.is_top and entry.is_active)


def build_tree(records: Iterable[Any]) -> MenuTree:
    entries = [MenuEntry.from_record(record) for record in records]
    tops = sort_entries(entry for entry in entries if entry.is_top and entry.is_active)
    top_ids = {entry.id for entry in tops}

    children_by_parent: dict[int, list[MenuEntry]] = {top_id: [] for top_id in top_ids}
    orphans: list[MenuEntry] = []
    for entry in entries:
        if entry.is_top or not entry.is_active:
            continue
        if entry.parent_id in top_ids:
            children_by_parent[entry.parent_id].append(entry)
        else:
            orphans.append(entry)

    if orphans:
        logger.warning("Excluded %d orphaned sub menu(s) from tree: %s", len(orphans), [o.name for o in orphans])

    roots = tuple(MenuTreeNode(top, tuple(sort_entries(children_by_parent[top.id]))) for top in tops)
    return MenuTree(roots, tuple(sort_entries(orphans)))
