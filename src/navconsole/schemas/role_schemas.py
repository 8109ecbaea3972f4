from pydantic import Field, field_validator

from navconsole.schemas.menu_schemas import CamelModel


def _clean_permissions(value):
    if value is None:
        return []
    return [item for item in value if isinstance(item, str) and item.strip()]


class RoleSchema(CamelModel):
    """Role with its raw grant strings."""

    id: int
    name: str
    display_name: str
    description: str | None = ""
    is_active: bool = True
    permissions: list[str] = []

    @field_validator("permissions", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return value or []


class RoleListResponse(CamelModel):
    roles: list[RoleSchema]


class RoleCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=64)
    display_name: str = Field(..., min_length=1, max_length=128)
    description: str = Field(default="", max_length=256)
    is_active: bool = True
    permissions: list[str] = []

    @field_validator("permissions", mode="before")
    @classmethod
    def _drop_blank(cls, value):
        return _clean_permissions(value)


class RoleUpdateRequest(CamelModel):
    """Body of PUT /api/roles/{id}. ``permissions`` replaces the stored array as a whole."""

    display_name: str | None = Field(None, min_length=1, max_length=128)
    description: str | None = Field(None, max_length=256)
    is_active: bool | None = None
    permissions: list[str] | None = None

    @field_validator("permissions", mode="before")
    @classmethod
    def _drop_blank(cls, value):
        return None if value is None else _clean_permissions(value)
