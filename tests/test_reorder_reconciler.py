import json
from itertools import permutations

import httpx
import pytest

from navconsole.external_services.console_api_client import ConsoleAPIClient
from navconsole.main import app
from navconsole.services.reorder_reconciler import ReorderReconciler, compute_updates, move_item


def _top(id, name, sort_order):
    return {"id": id, "name": name, "label": name.title(), "menuType": "top", "parentId": None, "sortOrder": sort_order, "isActive": True}


NODES = [_top(1, "a", 1), _top(2, "b", 2), _top(3, "c", 3)]


def _pairs(updates):
    return [(update.id, update.sort_order) for update in updates]


def test_move_last_to_front():
    reconciler = ReorderReconciler(nodes=NODES)
    sequence = reconciler.apply_move(2, 0)
    assert [entry.id for entry in sequence] == [3, 1, 2]
    assert _pairs(compute_updates(sequence)) == [(3, 1), (1, 2), (2, 3)]
    assert reconciler.has_unsaved_changes


def test_compute_updates_is_dense_for_every_permutation():
    reconciler = ReorderReconciler(nodes=NODES)
    for order in permutations(reconciler.sequence):
        assert sorted(update.sort_order for update in compute_updates(order)) == [1, 2, 3]


def test_load_orders_by_sort_order_then_id():
    reconciler = ReorderReconciler(nodes=[_top(5, "e", 2), _top(4, "d", 2), _top(9, "z", 1)])
    assert [entry.id for entry in reconciler.sequence] == [9, 4, 5]


def test_load_ignores_sub_nodes():
    sub = {"id": 8, "name": "s", "label": "S", "menuType": "sub", "parentId": 1, "sortOrder": 0, "isActive": True}
    reconciler = ReorderReconciler(nodes=[*NODES, sub])
    assert [entry.id for entry in reconciler.sequence] == [1, 2, 3]


def test_discard_restores_baseline():
    reconciler = ReorderReconciler(nodes=NODES)
    reconciler.apply_move(0, 2)
    reconciler.apply_move(1, 0)
    assert reconciler.discard() == reconciler.baseline
    assert [entry.id for entry in reconciler.sequence] == [1, 2, 3]
    assert not reconciler.has_unsaved_changes


def test_same_index_move_is_not_a_change():
    reconciler = ReorderReconciler(nodes=NODES)
    reconciler.apply_move(1, 1)
    assert not reconciler.has_unsaved_changes


def test_move_out_of_range():
    with pytest.raises(IndexError):
        move_item([1, 2, 3], 0, 3)
    reconciler = ReorderReconciler(nodes=NODES)
    with pytest.raises(IndexError):
        reconciler.apply_move(-1, 0)
    assert not reconciler.has_unsaved_changes


async def test_commit_sends_one_batch_and_adopts_baseline():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"message": "ok", "updated": 3})

    client = ConsoleAPIClient("http://console.test", "token", transport=httpx.MockTransport(handler))
    reconciler = ReorderReconciler(client, NODES)
    reconciler.apply_move(2, 0)

    assert await reconciler.commit() is True
    await client.aclose()

    assert len(requests) == 1
    assert requests[0].method == "PATCH"
    assert requests[0].url.path == "/api/menus/bulk-update-order"
    assert requests[0].headers["Authorization"] == "Bearer token"
    assert json.loads(requests[0].content) == {
        "updates": [{"id": 3, "sortOrder": 1}, {"id": 1, "sortOrder": 2}, {"id": 2, "sortOrder": 3}]
    }
    assert not reconciler.has_unsaved_changes
    assert [(entry.id, entry.sort_order) for entry in reconciler.baseline] == [(3, 1), (1, 2), (2, 3)]
    assert reconciler.discard() == reconciler.baseline


async def test_commit_failure_keeps_working_order():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"detail": "boom"})

    client = ConsoleAPIClient("http://console.test", transport=httpx.MockTransport(handler))
    reconciler = ReorderReconciler(client, NODES)
    reconciler.apply_move(0, 1)

    assert await reconciler.commit() is False
    await client.aclose()

    assert isinstance(reconciler.last_error, httpx.HTTPStatusError)
    assert reconciler.has_unsaved_changes
    assert [entry.id for entry in reconciler.sequence] == [2, 1, 3]
    assert [entry.id for entry in reconciler.baseline] == [1, 2, 3]


async def test_commit_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = ConsoleAPIClient("http://console.test", transport=httpx.MockTransport(handler))
    reconciler = ReorderReconciler(client, NODES)
    reconciler.apply_move(0, 2)
    assert await reconciler.commit() is False
    await client.aclose()
    assert reconciler.has_unsaved_changes


async def test_refresh_and_commit_against_api(as_admin, seed_menus):
    seed_menus(("dashboard", "top", None, 5), ("ports", "top", None, 5), ("terminals", "sub", "ports", 1), ("configuration", "top", None, 9))

    async with ConsoleAPIClient("http://testserver", transport=httpx.ASGITransport(app=app)) as client:
        reconciler = ReorderReconciler(client)
        loaded = await reconciler.refresh()
        assert [entry.name for entry in loaded] == ["dashboard", "ports", "configuration"]

        reconciler.apply_move(2, 0)
        assert await reconciler.commit() is True

        menus = await client.list_menus(menu_type="top")
    assert [(menu["name"], menu["sortOrder"]) for menu in menus] == [("configuration", 1), ("dashboard", 2), ("ports", 3)]


async def test_failed_commit_of_explicit_sequence_adopts_it():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"detail": "maintenance"})

    client = ConsoleAPIClient("http://console.test", transport=httpx.MockTransport(handler))
    reconciler = ReorderReconciler(client, NODES)
    proposed = [NODES[1], NODES[2], NODES[0]]

    assert await reconciler.commit(proposed) is False
    await client.aclose()

    assert [entry.id for entry in reconciler.sequence] == [2, 3, 1]
    assert reconciler.has_unsaved_changes
    assert [entry.id for entry in reconciler.baseline] == [1, 2, 3]
    assert [entry.id for entry in reconciler.discard()] == [1, 2, 3]


async def test_commit_with_undecodable_body_keeps_working_order():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"not json")

    client = ConsoleAPIClient("http://console.test", transport=httpx.MockTransport(handler))
    reconciler = ReorderReconciler(client, NODES)
    reconciler.apply_move(2, 0)

    assert await reconciler.commit() is False
    await client.aclose()
    assert isinstance(reconciler.last_error, ValueError)
    assert [entry.id for entry in reconciler.sequence] == [3, 1, 2]
    assert reconciler.has_unsaved_changes
