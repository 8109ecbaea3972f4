"""
Navigation menu nodes.

The menu is a two-level forest: ``top`` nodes (GLinks) at the root and ``sub``
nodes (PLinks) attached to exactly one top node. Role grant strings refer to
nodes by ``name``, so names are unique and never contain ``:``.
"""

import enum
from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from navconsole.db import Base


def _utc_now():
    """Helper function for SQLAlchemy default/onupdate."""
    return datetime.now(UTC)


class MenuType(enum.StrEnum):
    """Closed set of menu node kinds.

    - top: GLink, root of a navigation group. Never has a parent.
    - sub: PLink, always attached to a top node.
    """

    top = "top"
    sub = "sub"


# Legacy spellings still sent by older console builds
LEGACY_MENU_TYPES: dict[str, MenuType] = {
    "glink": MenuType.top,
    "plink": MenuType.sub,
}

# Icons the console front-end can render for a menu node
MENU_ICONS: frozenset[str] = frozenset(
    {
        # Navigation & layout
        "Home", "Settings", "List", "LayoutGrid", "LayoutDashboard", "Navigation", "Menu", "Grid3X3", "Link",
        # Actions
        "Plus", "Edit", "Trash2", "Search", "Filter", "Download", "Upload", "RefreshCw",
        # People & organizations
        "Users", "User", "UserCheck", "Building", "Building2",
        # Maritime & logistics
        "Ship", "ShipWheel", "Anchor", "Package", "Truck", "Plane", "Construction",
        # Finance
        "DollarSign", "CreditCard",
        # Communication
        "FileText", "Mail", "Phone", "MessageSquare", "Bell",
        # Time
        "Calendar", "Clock",
        # Security
        "Shield", "Key", "Power",
        # Infrastructure
        "Database", "Server", "Globe", "MapPin", "Zap", "Cog",
        # Reporting
        "BarChart3", "PieChart", "Activity", "TrendingUp",
        # Status
        "CheckCircle", "AlertCircle", "Info", "HelpCircle",
        # Media & files
        "Camera", "Image", "Video", "Music", "Folder", "File", "Archive", "Tag",
        # Misc
        "Star", "Heart", "Bookmark", "Flag", "Award", "Target", "Compass", "Map",
        "Circle", "ChevronRight", "Dot", "Square",
    }
)


class MenuNode(Base):
    __tablename__ = "menus"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)  # Grant-string key, e.g. 'dashboard'
    label = Column(String(128), nullable=False)  # Display text
    icon = Column(String(64), nullable=True)
    route = Column(String(256), nullable=True)  # '/ports' or templated '/ports/:id'
    menu_type = Column(Enum(MenuType, name="menu_type"), nullable=False, default=MenuType.top)
    parent_id = Column(Integer, ForeignKey("menus.id"), nullable=True, index=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=_utc_now, nullable=False)
    updated_at = Column(DateTime, default=_utc_now, onupdate=_utc_now, nullable=False)

    parent = relationship("MenuNode", remote_side=[id], back_populates="children")
    children = relationship("MenuNode", back_populates="parent")
