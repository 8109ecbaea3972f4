"""
Grant-string codec for role permissions.

A role stores its menu permissions as a flat list of grant strings, one per
menu target:

    "<top>:<levels>"          grant on a top-level node alone
    "<top>:<sub>:<levels>"    grant on a sub node, scoped under its top node

``levels`` is a comma-separated, non-empty subset of ``read``, ``write`` and
``manage``. Inside this module grants are handled as ``Grant`` values (a
``GrantTarget`` plus a frozenset of ``Capability``) and only turned back into
strings at the storage boundary.

Entries that cannot be decoded (wrong segment count, unknown capability token,
empty name) decode to "no grant" and are carried through every rewrite
verbatim, unless the caller rewrites the very target they claim to name.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SEGMENT_SEPARATOR = ":"
LEVEL_SEPARATOR = ","
WILDCARD_TARGET = "*"


class Capability(enum.StrEnum):
    read = "read"
    write = "write"
    manage = "manage"


# Canonical encoding order, also the privilege order (lowest first)
CAPABILITY_ORDER: tuple[Capability, ...] = (Capability.read, Capability.write, Capability.manage)
_RANK = {cap: rank for rank, cap in enumerate(CAPABILITY_ORDER)}


@dataclass(frozen=True)
class GrantTarget:
    """A menu target: a top node alone (``sub`` is None) or a top/sub pair."""

    top: str
    sub: str | None = None

    def __post_init__(self):
        for name in (self.top, self.sub):
            if name is not None and SEGMENT_SEPARATOR in name:
                raise ValueError(f"menu name {name!r} must not contain {SEGMENT_SEPARATOR!r}")

    @property
    def key(self) -> str:
        return self.top if self.sub is None else f"{self.top}{SEGMENT_SEPARATOR}{self.sub}"

    def matches_segments(self, segments: Sequence[str]) -> bool:
        """Positional match used by lookups: 2 segments for top-only, 3 for top/sub."""
        if self.sub is None:
            return len(segments) == 2 and segments[0] == self.top
        return len(segments) == 3 and segments[0] == self.top and segments[1] == self.sub


@dataclass(frozen=True)
class Grant:
    target: GrantTarget
    levels: frozenset[Capability]

    def encode(self) -> str:
        return format_grant(self.target, self.levels)

    def allows(self, level: Capability) -> bool:
        """True when any held level is at least as strong as ``level``."""
        required = _RANK[Capability(level)]
        return any(_RANK[held] >= required for held in self.levels)


@dataclass(frozen=True)
class LevelFlags:
    """Checkbox view of a target's levels."""

    read: bool = False
    write: bool = False
    manage: bool = False

    @classmethod
    def from_levels(cls, levels: Iterable[Capability]) -> LevelFlags:
        held = set(levels)
        return cls(
            read=Capability.read in held,
            write=Capability.write in held,
            manage=Capability.manage in held,
        )


NO_GRANT = LevelFlags()


def _split(raw: str) -> list[str]:
    return raw.split(SEGMENT_SEPARATOR)


def _parse_levels(raw_levels: str) -> frozenset[Capability] | None:
    tokens = [token.strip() for token in raw_levels.split(LEVEL_SEPARATOR)]
    try:
        levels = frozenset(Capability(token) for token in tokens)
    except ValueError:
        return None
    return levels or None


def parse_grant(raw: str) -> Grant | None:
    """Decode one grant string, or return None when it is malformed."""
    if not isinstance(raw, str):
        return None
    segments = _split(raw)
    if len(segments) == 2:
        top, sub, raw_levels = segments[0], None, segments[1]
    elif len(segments) == 3:
        top, sub, raw_levels = segments
        if not sub:
            return None
    else:
        return None
    if not top:
        return None
    levels = _parse_levels(raw_levels)
    if levels is None:
        return None
    return Grant(GrantTarget(top, sub), levels)


def format_grant(target: GrantTarget, levels: Iterable[Capability | str]) -> str:
    """Encode ``levels`` on ``target``; levels are written in canonical order."""
    held = {Capability(level) for level in levels}
    if not held:
        raise ValueError(f"cannot encode an empty grant for {target.key!r}")
    joined = LEVEL_SEPARATOR.join(cap.value for cap in CAPABILITY_ORDER if cap in held)
    return f"{target.key}{SEGMENT_SEPARATOR}{joined}"


def _is_same_target(raw: str, target: GrantTarget) -> bool:
    return isinstance(raw, str) and target.matches_segments(_split(raw))


def find_grant(permissions: Iterable[str], top: str, sub: str | None = None) -> Grant | None:
    """First decodable grant naming exactly ``(top, sub)``."""
    target = GrantTarget(top, sub)
    for raw in permissions or ():
        if not _is_same_target(raw, target):
            continue
        grant = parse_grant(raw)
        if grant is not None:
            return grant
    return None


def decode_levels(permissions: Iterable[str], top: str, sub: str | None = None) -> LevelFlags:
    grant = find_grant(permissions, top, sub)
    return NO_GRANT if grant is None else LevelFlags.from_levels(grant.levels)


def set_level(
    permissions: Sequence[str],
    top: str,
    sub: str | None,
    level: Capability | str,
    enabled: bool,
) -> list[str]:
    """Return a new permission list with ``level`` switched on or off for one target.

    Every existing entry for the target is removed, the first decodable one
    supplies the starting levels, and a single re-encoded entry is appended
    when any level remains. Entries for other targets are kept in place,
    malformed ones included.
    """
    target = GrantTarget(top, sub)
    capability = Capability(level)

    kept: list[str] = []
    current: frozenset[Capability] | None = None
    for raw in permissions or ():
        if not _is_same_target(raw, target):
            kept.append(raw)
            continue
        grant = parse_grant(raw)
        if grant is None:
            logger.warning("Dropping malformed grant %r while rewriting target %s", raw, target.key)
            continue
        if current is None:
            current = grant.levels

    levels = set(current or ())
    if enabled:
        levels.add(capability)
    else:
        levels.discard(capability)

    if levels:
        kept.append(format_grant(target, levels))
    return kept


def normalize_permissions(permissions: Iterable[str]) -> list[str]:
    """Collapse duplicate targets and canonicalize level order.

    The first decodable entry per target wins and keeps its position.
    Malformed entries are kept verbatim (exact duplicates collapse).
    """
    seen_targets: set[GrantTarget] = set()
    seen_raw: set[str] = set()
    normalized: list[str] = []
    for raw in permissions or ():
        grant = parse_grant(raw)
        if grant is None:
            if isinstance(raw, str) and raw not in seen_raw:
                seen_raw.add(raw)
                normalized.append(raw)
            continue
        if grant.target in seen_targets:
            continue
        seen_targets.add(grant.target)
        normalized.append(grant.encode())
    return normalized


class PermissionSet:
    """Structured, read-only view of a role's grant list."""

    def __init__(self, grants: dict[GrantTarget, frozenset[Capability]], unparsed: Sequence[str] = ()):
        self._grants = dict(grants)
        self.unparsed: tuple[str, ...] = tuple(unparsed)

    @classmethod
    def from_strings(cls, permissions: Iterable[str]) -> PermissionSet:
        grants: dict[GrantTarget, frozenset[Capability]] = {}
        unparsed: list[str] = []
        for raw in permissions or ():
            grant = parse_grant(raw)
            if grant is None:
                unparsed.append(raw)
            elif grant.target not in grants:
                grants[grant.target] = grant.levels
        return cls(grants, unparsed)

    def to_strings(self) -> list[str]:
        return [format_grant(target, levels) for target, levels in self._grants.items()] + list(self.unparsed)

    def levels_for(self, top: str, sub: str | None = None) -> frozenset[Capability]:
        return self._grants.get(GrantTarget(top, sub), frozenset())

    def targets(self) -> list[GrantTarget]:
        return list(self._grants)

    def __len__(self) -> int:
        return len(self._grants)

    def __contains__(self, target: object) -> bool:
        return target in self._grants


def has_permission(
    permissions: Iterable[str],
    top: str,
    sub: str | None = None,
    level: Capability | str = Capability.read,
) -> bool:
    """True when the exact target, or a wildcard grant, holds ``level`` or higher."""
    required = Capability(level)
    permissions = list(permissions or ())
    grant = find_grant(permissions, top, sub)
    if grant is not None and grant.allows(required):
        return True
    wildcard = find_grant(permissions, WILDCARD_TARGET)
    return wildcard is not None and wildcard.allows(required)


def has_any_grant(permissions: Iterable[str], top: str, sub: str | None = None) -> bool:
    permissions = list(permissions or ())
    return find_grant(permissions, top, sub) is not None or find_grant(permissions, WILDCARD_TARGET) is not None
