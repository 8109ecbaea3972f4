"""Keyword-based icon suggestions for new menu nodes."""

from dataclasses import dataclass

from navconsole.models.menu import MENU_ICONS, MenuType

MAX_RECOMMENDATIONS = 6


@dataclass(frozen=True)
class IconMapping:
    keywords: tuple[str, ...]
    icon: str
    reason: str


@dataclass(frozen=True)
class IconRecommendation:
    icon: str
    reason: str
    category: str  # 'exact' | 'contextual' | 'fallback'


NAVIGATION = (
    IconMapping(("dashboard", "home", "main"), "LayoutDashboard", "Perfect for dashboard/main navigation"),
    IconMapping(("user", "profile", "account"), "User", "User management and profiles"),
    IconMapping(("setting", "config", "admin"), "Settings", "Settings and configuration"),
    IconMapping(("port", "harbor", "dock"), "Anchor", "Maritime and port operations"),
    IconMapping(("terminal", "ship", "vessel"), "Ship", "Terminal and shipping operations"),
    IconMapping(("organization", "company", "business"), "Building2", "Organizations and businesses"),
    IconMapping(("access", "permission", "security"), "Shield", "Security and access control"),
    IconMapping(("activation", "process", "workflow"), "Navigation", "Process and workflow management"),
    IconMapping(("report", "analytics", "data"), "BarChart3", "Reports and analytics"),
    IconMapping(("notification", "alert", "message"), "Bell", "Notifications and alerts"),
)

FUNCTIONAL = (
    IconMapping(("menu", "navigation", "structure"), "Menu", "Menu management and structure"),
    IconMapping(("role", "permission", "access"), "Key", "Role and permission management"),
    IconMapping(("email", "mail", "notification"), "Mail", "Email and communication"),
    IconMapping(("terminal", "container", "cargo"), "ShipWheel", "Terminal operations"),
    IconMapping(("user", "people", "staff"), "Users", "User management"),
    IconMapping(("port", "location", "facility"), "MapPin", "Port locations and facilities"),
    IconMapping(("activation", "enable", "start"), "Power", "Activation and enabling features"),
    IconMapping(("assignment", "assign", "delegate"), "UserCheck", "Assignment and delegation"),
    IconMapping(("organization", "org", "company"), "Building", "Organization management"),
    IconMapping(("config", "setup", "configure"), "Cog", "Configuration and setup"),
)

MARITIME = (
    IconMapping(("ship", "vessel", "maritime"), "Ship", "Maritime vessels and shipping"),
    IconMapping(("anchor", "port", "harbor"), "Anchor", "Port and harbor operations"),
    IconMapping(("container", "cargo", "freight"), "Package", "Container and cargo handling"),
    IconMapping(("crane", "loading", "handling"), "Construction", "Loading and handling equipment"),
    IconMapping(("berth", "dock", "wharf"), "Square", "Berth and docking facilities"),
)

BUSINESS = (
    IconMapping(("manage", "management", "admin"), "Settings", "Management and administration"),
    IconMapping(("list", "view", "browse"), "List", "Listing and browsing"),
    IconMapping(("add", "create", "new"), "Plus", "Adding and creating new items"),
    IconMapping(("edit", "modify", "update"), "Edit", "Editing and modifications"),
    IconMapping(("delete", "remove", "trash"), "Trash2", "Deletion and removal"),
    IconMapping(("search", "find", "filter"), "Search", "Search and filtering"),
    IconMapping(("export", "download", "save"), "Download", "Export and download"),
    IconMapping(("import", "upload", "load"), "Upload", "Import and upload"),
)

FALLBACKS: dict[MenuType, tuple[tuple[str, str], ...]] = {
    MenuType.top: (
        ("LayoutDashboard", "Standard navigation section"),
        ("Navigation", "General navigation"),
        ("Menu", "Menu section"),
        ("Grid3X3", "Grid layout section"),
        ("Folder", "Section folder"),
    ),
    MenuType.sub: (
        ("Circle", "Standard menu item"),
        ("ChevronRight", "Navigation item"),
        ("Dot", "Simple menu point"),
        ("Square", "Menu block"),
        ("Star", "Featured item"),
    ),
}


def get_icon_recommendations(
    name: str,
    label: str,
    menu_type: MenuType | str = MenuType.top,
    current_icon: str | None = None,
) -> list[IconRecommendation]:
    menu_type = MenuType(menu_type)
    search_text = f"{name or ''} {label or ''}".lower()
    first_word = search_text.split()[0] if search_text.split() else ""
    head = NAVIGATION if menu_type == MenuType.top else FUNCTIONAL
    mappings = [mapping for mapping in (*head, *BUSINESS, *MARITIME) if mapping.icon in MENU_ICONS]

    exact = [m for m in mappings if any(keyword in search_text for keyword in m.keywords)]
    recommendations = [IconRecommendation(m.icon, m.reason, "exact") for m in exact]

    if len(recommendations) < 5:
        contextual = [
            m
            for m in mappings
            if m not in exact
            and any(keyword[:4] in search_text or (first_word and first_word in keyword) for keyword in m.keywords)
        ]
        for m in contextual[: 5 - len(recommendations)]:
            recommendations.append(IconRecommendation(m.icon, f"Related to {m.reason.lower()}", "contextual"))

    if len(recommendations) < 3:
        for icon, reason in FALLBACKS[menu_type][: 3 - len(recommendations)]:
            recommendations.append(IconRecommendation(icon, reason, "fallback"))

    unique: list[IconRecommendation] = []
    seen: set[str] = set()
    for rec in recommendations:
        if rec.icon in seen or rec.icon == current_icon:
            continue
        seen.add(rec.icon)
        unique.append(rec)
    return unique[:MAX_RECOMMENDATIONS]
