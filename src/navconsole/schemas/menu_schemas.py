import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from navconsole.models.menu import LEGACY_MENU_TYPES, MENU_ICONS, MenuType

# Lowercase identifier, no whitespace, never ':' (grant-string separator)
MENU_NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_.-]*$")


class CamelModel(BaseModel):
    """Wire models are camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _coerce_menu_type(value):
    if isinstance(value, str):
        normalized = value.strip().lower()
        return LEGACY_MENU_TYPES.get(normalized, normalized)
    return value


def _validate_name(value: str) -> str:
    if not MENU_NAME_PATTERN.match(value):
        raise ValueError("name must be lowercase letters, digits, '-', '_' or '.', without whitespace or ':'")
    return value


def _validate_icon(value: str | None) -> str | None:
    if value in (None, ""):
        return None
    if value not in MENU_ICONS:
        raise ValueError(f"unknown icon '{value}'")
    return value


class MenuSchema(CamelModel):
    """Menu node as returned by the API."""

    id: int
    name: str
    label: str
    icon: str | None = None
    route: str | None = None
    menu_type: MenuType
    parent_id: int | None = None
    sort_order: int = 0
    is_active: bool = True


class MenuCreateRequest(CamelModel):
    """Body of POST /api/menus."""

    name: str = Field(..., min_length=1, max_length=100)
    label: str = Field(..., min_length=1, max_length=128)
    icon: str | None = Field(default=None, max_length=64)
    route: str | None = Field(default=None, max_length=256)
    menu_type: MenuType = MenuType.top
    parent_id: int | None = None
    sort_order: int = 0
    is_active: bool = True

    @field_validator("menu_type", mode="before")
    @classmethod
    def _menu_type_aliases(cls, value):
        return _coerce_menu_type(value)

    @field_validator("name")
    @classmethod
    def _name_format(cls, value: str) -> str:
        return _validate_name(value)

    @field_validator("icon")
    @classmethod
    def _known_icon(cls, value: str | None) -> str | None:
        return _validate_icon(value)

    @field_validator("label")
    @classmethod
    def _label_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("label is required")
        return value.strip()

    @field_validator("route")
    @classmethod
    def _blank_route_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @model_validator(mode="after")
    def _check_parent(self):
        if self.menu_type == MenuType.top:
            self.parent_id = None
        elif self.parent_id is None:
            raise ValueError("a sub menu requires a parent top menu")
        return self


class MenuUpdateRequest(MenuCreateRequest):
    """Body of PUT /api/menus/{id}; same shape as creation."""


class MenuOrderUpdate(CamelModel):
    id: int
    sort_order: int = Field(..., ge=0)


class BulkOrderUpdateRequest(CamelModel):
    updates: list[MenuOrderUpdate]


class MenuTreeNodeSchema(CamelModel):
    menu: MenuSchema
    children: list[MenuSchema] = []


class MenuTreeResponse(CamelModel):
    tree: list[MenuTreeNodeSchema]
    orphan_ids: list[int] = []


class IconRecommendationSchema(CamelModel):
    icon: str
    reason: str
    category: str
