"""
Role permission editor.

Drives the checkbox grid that grants read/write/manage on menu targets to a
role. Each toggle rewrites the full grant list through the codec; saving
replaces the role's stored list as a whole.

    NO_ROLE_SELECTED -> ROLE_LOADED -> DIRTY -> SAVING -> ROLE_LOADED
                                         ^                  |
                                         +---- (failure) ---+
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import httpx

from navconsole.services.menu_tree import MenuEntry, MenuTree, build_tree
from navconsole.services.permission_codec import Capability, LevelFlags, decode_levels, set_level

logger = logging.getLogger(__name__)


class EditorState(enum.StrEnum):
    no_role_selected = "no_role_selected"
    role_loaded = "role_loaded"
    dirty = "dirty"
    saving = "saving"


class EditorStateError(RuntimeError):
    """Raised when an action is not allowed in the editor's current state."""


@dataclass(frozen=True)
class RoleSnapshot:
    id: int
    name: str
    display_name: str
    is_active: bool
    permissions: tuple[str, ...]

    @classmethod
    def from_record(cls, record: Any) -> RoleSnapshot:
        if isinstance(record, RoleSnapshot):
            return record
        if isinstance(record, dict):
            get = record.get
        else:

            def get(key, default=None):
                return getattr(record, key, default)

        return cls(
            id=int(get("id")),
            name=get("name") or "",
            display_name=get("displayName") or get("display_name") or get("name") or "",
            is_active=bool(get("isActive", get("is_active", True))),
            permissions=tuple(get("permissions") or ()),
        )


@dataclass(frozen=True)
class PermissionRow:
    """One checkbox row: a top node (``sub`` is None) or one of its children."""

    top: str
    sub: str | None
    label: str
    levels: LevelFlags
    expanded: bool = False
    children: tuple[PermissionRow, ...] = ()


class PermissionEditor:
    def __init__(self, client=None):
        self.client = client
        self.state = EditorState.no_role_selected
        self.role: RoleSnapshot | None = None
        self.tree: MenuTree = MenuTree()
        self.baseline: list[str] = []
        self.permissions: list[str] = []
        self.expanded: set[str] = set()
        self.last_error: Exception | None = None

    # ---- Loading ----
    def load_role(self, role: Any, tree: MenuTree | Iterable[Any]) -> None:
        snapshot = RoleSnapshot.from_record(role)
        if not snapshot.is_active:
            raise EditorStateError(f"role '{snapshot.name}' is inactive and cannot be edited")
        if self.state == EditorState.saving:
            raise EditorStateError("cannot switch roles while a save is in progress")
        self.role = snapshot
        self.tree = tree if isinstance(tree, MenuTree) else build_tree(tree)
        self.baseline = list(snapshot.permissions)
        self.permissions = list(snapshot.permissions)
        self.last_error = None
        self.state = EditorState.role_loaded

    async def select_role(self, role_id: int) -> None:
        role = await self.client.get_role(role_id)
        menus = await self.client.list_menus()
        self.load_role(role, build_tree(menus))

    # ---- Editing ----
    def levels(self, top: str, sub: str | None = None) -> LevelFlags:
        return decode_levels(self.permissions, top, sub)

    def toggle(self, top: str, sub: str | None, level: Capability | str, enabled: bool) -> list[str]:
        if self.state == EditorState.no_role_selected:
            raise EditorStateError("select a role before changing permissions")
        if self.state == EditorState.saving:
            raise EditorStateError("permissions are being saved")
        self.permissions = set_level(self.permissions, top, sub, level, enabled)
        self.state = EditorState.dirty
        return list(self.permissions)

    def toggle_expanded(self, top: str) -> bool:
        """Expand or collapse a top row; never touches permissions or state."""
        if top in self.expanded:
            self.expanded.discard(top)
            return False
        self.expanded.add(top)
        return True

    @property
    def has_unsaved_changes(self) -> bool:
        return self.state in (EditorState.dirty, EditorState.saving) and set(self.permissions) != set(self.baseline)

    def rows(self) -> list[PermissionRow]:
        rows = []
        for root in self.tree:
            top = root.entry.name
            children = tuple(self._row(top, child) for child in root.children)
            rows.append(
                PermissionRow(
                    top=top,
                    sub=None,
                    label=root.entry.label,
                    levels=self.levels(top),
                    expanded=top in self.expanded,
                    children=children,
                )
            )
        return rows

    def _row(self, top: str, child: MenuEntry) -> PermissionRow:
        return PermissionRow(top=top, sub=child.name, label=child.label, levels=self.levels(top, child.name))

    # ---- Persistence ----
    async def save(self) -> bool:
        """Replace the role's stored permissions with the pending list.

        Returns False on a persistence failure; the editor stays dirty with
        the same pending list so the save can be retried.
        """
        if self.state != EditorState.dirty:
            raise EditorStateError(f"nothing to save in state '{self.state}'")

        pending = list(self.permissions)
        self.state = EditorState.saving
        try:
            saved = await self.client.update_role_permissions(self.role.id, pending)
            stored = list((saved or {}).get("permissions", pending))
        except (httpx.HTTPError, ValueError) as exc:
            # ValueError covers a success status with an undecodable body
            self.last_error = exc
            self.state = EditorState.dirty
            logger.warning("Saving permissions for role %s failed: %s", self.role.name, exc)
            return False
        except Exception:
            self.state = EditorState.dirty
            raise

        self.role = RoleSnapshot.from_record({**(saved or {}), "id": self.role.id, "name": self.role.name, "permissions": stored})
        self.baseline = stored
        self.permissions = list(stored)
        self.last_error = None
        self.state = EditorState.role_loaded
        logger.info("Saved %d grant(s) for role %s", len(stored), self.role.name)
        return True
