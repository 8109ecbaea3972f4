import logging
from collections.abc import Iterable
from time import perf_counter
from typing import Any

import httpx

from navconsole.dependencies.settings import get_settings
from navconsole.schemas.menu_schemas import MenuOrderUpdate

logger = logging.getLogger(__name__)


class ConsoleAPIClient:
    """Async client for the console's menu and role endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        access_token: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self.base_url = (base_url or get_settings().console_api_base_url).rstrip("/")
        self.access_token = access_token
        self._timeout = httpx.Timeout(timeout, connect=timeout)
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self._timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def _perform_request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Execute an HTTP request while recording latency."""

        started = perf_counter()
        try:
            response = await self._client.request(method, path, headers=self._headers(), params=params, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            elapsed_ms = (perf_counter() - started) * 1000
            logger.warning(
                "Console API request failed: method=%s path=%s status=%s elapsed_ms=%.1f",
                method,
                path,
                exc.response.status_code,
                elapsed_ms,
            )
            raise
        except httpx.HTTPError as exc:
            elapsed_ms = (perf_counter() - started) * 1000
            logger.warning(
                "Console API request error: method=%s path=%s elapsed_ms=%.1f error=%s",
                method,
                path,
                elapsed_ms,
                exc,
            )
            raise

        elapsed_ms = (perf_counter() - started) * 1000
        logger.info(
            "Console API request: method=%s path=%s status=%s elapsed_ms=%.1f",
            method,
            path,
            response.status_code,
            elapsed_ms,
        )
        return response

    # ---- Menus ----
    async def list_menus(self, menu_type: str | None = None) -> list[dict[str, Any]]:
        params = {"type": menu_type} if menu_type else None
        response = await self._perform_request("GET", "/api/menus", params=params)
        return response.json()

    async def get_menu(self, menu_id: int) -> dict[str, Any]:
        response = await self._perform_request("GET", f"/api/menus/{menu_id}")
        return response.json()

    async def create_menu(self, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self._perform_request("POST", "/api/menus", json=payload)
        return response.json()

    async def update_menu(self, menu_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self._perform_request("PUT", f"/api/menus/{menu_id}", json=payload)
        return response.json()

    async def toggle_menu_status(self, menu_id: int) -> dict[str, Any]:
        response = await self._perform_request("PATCH", f"/api/menus/{menu_id}/toggle-status")
        return response.json()

    async def bulk_update_menu_order(self, updates: Iterable[MenuOrderUpdate]) -> dict[str, Any]:
        body = {"updates": [update.model_dump(by_alias=True) for update in updates]}
        response = await self._perform_request("PATCH", "/api/menus/bulk-update-order", json=body)
        return response.json()

    # ---- Roles ----
    async def list_roles(self, active_only: bool = False) -> list[dict[str, Any]]:
        params = {"activeOnly": "true"} if active_only else None
        response = await self._perform_request("GET", "/api/roles", params=params)
        return response.json()["roles"]

    async def get_role(self, role_id: int) -> dict[str, Any]:
        response = await self._perform_request("GET", f"/api/roles/{role_id}")
        return response.json()

    async def update_role_permissions(self, role_id: int, permissions: list[str]) -> dict[str, Any]:
        response = await self._perform_request("PUT", f"/api/roles/{role_id}", json={"permissions": list(permissions)})
        return response.json()
