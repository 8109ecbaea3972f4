import httpx
import pytest

from navconsole.external_services.console_api_client import ConsoleAPIClient
from navconsole.main import app


async def test_menu_and_role_calls_against_api(as_admin, seed_role):
    seed_role("operator", ["ports:read"])
    seed_role("retired", is_active=False)

    async with ConsoleAPIClient("http://testserver", transport=httpx.ASGITransport(app=app)) as client:
        ports = await client.create_menu({"name": "ports", "label": "Ports", "menuType": "top", "icon": "Anchor"})
        assert ports["id"] > 0

        fetched = await client.get_menu(ports["id"])
        assert fetched["name"] == "ports"

        updated = await client.update_menu(ports["id"], {**fetched, "label": "All Ports"})
        assert updated["label"] == "All Ports"

        toggled = await client.toggle_menu_status(ports["id"])
        assert toggled["isActive"] is False

        roles = await client.list_roles()
        assert [role["name"] for role in roles] == ["operator", "retired"]
        active = await client.list_roles(active_only=True)
        assert [role["name"] for role in active] == ["operator"]


async def test_error_status_raises():
    async with ConsoleAPIClient("http://testserver", transport=httpx.ASGITransport(app=app)) as client:
        with pytest.raises(httpx.HTTPStatusError) as excinfo:
            await client.get_menu(1)
    assert excinfo.value.response.status_code == 401
