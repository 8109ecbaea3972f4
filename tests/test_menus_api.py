from navconsole.models.menu import MenuNode


def _create(client, **body):
    payload = {"name": "dashboard", "label": "Dashboard", "menuType": "top"}
    payload.update(body)
    return client.post("/api/menus", json=payload)


def test_requires_authentication(client):
    assert client.get("/api/menus").status_code == 401


def test_create_top_and_sub(client, as_admin):
    top = _create(client, name="ports", label="Ports", icon="Anchor", parentId=42)
    assert top.status_code == 201, top.text
    top_body = top.json()
    assert top_body["menuType"] == "top"
    assert top_body["parentId"] is None

    sub = _create(client, name="terminals", label="Terminals", menuType="sub", parentId=top_body["id"], route="/ports/:id/terminals")
    assert sub.status_code == 201, sub.text
    assert sub.json()["parentId"] == top_body["id"]
    assert sub.json()["route"] == "/ports/:id/terminals"


def test_legacy_type_names_are_accepted(client, as_admin):
    top = _create(client, name="ports", label="Ports", menuType="glink")
    assert top.json()["menuType"] == "top"
    sub = _create(client, name="terminals", label="Terminals", menuType="plink", parentId=top.json()["id"])
    assert sub.json()["menuType"] == "sub"

    listed = client.get("/api/menus", params={"type": "plink"})
    assert [menu["name"] for menu in listed.json()] == ["terminals"]


def test_unknown_type_filter(client, as_admin):
    assert client.get("/api/menus", params={"type": "folder"}).status_code == 400


def test_validation_errors(client, as_admin):
    assert _create(client, name="").status_code == 422
    assert _create(client, name="Has Space").status_code == 422
    assert _create(client, name="ports:east").status_code == 422
    assert _create(client, label="   ").status_code == 422
    assert _create(client, icon="NotAnIcon").status_code == 422
    assert _create(client, name="terminals", menuType="sub").status_code == 422


def test_sub_parent_rules(client, as_admin, seed_menus):
    ids = seed_menus(("ports", "top", None, 1), ("terminals", "sub", "ports", 1), ("archive", "top", None, 2, False))

    under_sub = _create(client, name="berths", label="Berths", menuType="sub", parentId=ids["terminals"])
    assert under_sub.status_code == 400

    under_inactive = _create(client, name="old", label="Old", menuType="sub", parentId=ids["archive"])
    assert under_inactive.status_code == 400

    missing = _create(client, name="gone", label="Gone", menuType="sub", parentId=999)
    assert missing.status_code == 400


def test_duplicate_name_conflicts(client, as_admin):
    assert _create(client).status_code == 201
    assert _create(client).status_code == 409


def test_default_icon_from_recommendations(client, as_admin):
    created = _create(client, name="harbor-ops", label="Harbor Operations")
    assert created.json()["icon"] == "Anchor"


def test_update_keeps_type_fixed(client, as_admin, seed_menus):
    ids = seed_menus(("ports", "top", None, 1))
    url = f"/api/menus/{ids['ports']}"

    changed = client.put(url, json={"name": "ports", "label": "All Ports", "menuType": "top", "sortOrder": 4})
    assert changed.status_code == 200, changed.text
    assert changed.json()["label"] == "All Ports"
    assert changed.json()["sortOrder"] == 4

    flipped = client.put(url, json={"name": "ports", "label": "Ports", "menuType": "sub", "parentId": ids["ports"]})
    assert flipped.status_code == 400


def test_update_missing_menu(client, as_admin):
    assert client.put("/api/menus/404", json={"name": "x", "label": "X"}).status_code == 404


def test_toggle_status(client, as_admin, seed_menus):
    ids = seed_menus(("ports", "top", None, 1))
    first = client.patch(f"/api/menus/{ids['ports']}/toggle-status")
    assert first.json()["isActive"] is False
    second = client.patch(f"/api/menus/{ids['ports']}/toggle-status")
    assert second.json()["isActive"] is True


def test_delete_rules(client, as_admin, seed_menus):
    ids = seed_menus(("ports", "top", None, 1), ("terminals", "sub", "ports", 1))
    assert client.delete(f"/api/menus/{ids['ports']}").status_code == 409
    assert client.delete(f"/api/menus/{ids['terminals']}").json() == {"deleted": ids["terminals"]}
    assert client.delete(f"/api/menus/{ids['ports']}").status_code == 200
    assert client.get(f"/api/menus/{ids['ports']}").status_code == 404


def test_bulk_update_order(client, as_admin, seed_menus):
    ids = seed_menus(("a", "top", None, 7), ("b", "top", None, 7), ("c", "top", None, 7))
    body = {"updates": [{"id": ids["c"], "sortOrder": 1}, {"id": ids["a"], "sortOrder": 2}, {"id": ids["b"], "sortOrder": 3}]}
    resp = client.patch("/api/menus/bulk-update-order", json=body)
    assert resp.status_code == 200, resp.text
    assert resp.json()["updated"] == 3

    listed = client.get("/api/menus", params={"type": "top"}).json()
    assert [menu["name"] for menu in listed] == ["c", "a", "b"]


def test_bulk_update_is_all_or_nothing(client, as_admin, seed_menus, db):
    ids = seed_menus(("a", "top", None, 1), ("b", "top", None, 2))
    body = {"updates": [{"id": ids["b"], "sortOrder": 1}, {"id": 999, "sortOrder": 2}]}
    assert client.patch("/api/menus/bulk-update-order", json=body).status_code == 404

    db.expire_all()
    assert db.get(MenuNode, ids["b"]).sort_order == 2

    duplicate = {"updates": [{"id": ids["a"], "sortOrder": 1}, {"id": ids["a"], "sortOrder": 2}]}
    assert client.patch("/api/menus/bulk-update-order", json=duplicate).status_code == 400


def test_tree_endpoint_reports_orphans(client, as_admin, seed_menus):
    ids = seed_menus(
        ("ports", "top", None, 2),
        ("dashboard", "top", None, 1),
        ("terminals", "sub", "ports", 1),
        ("archive", "top", None, 3, False),
        ("old-reports", "sub", "archive", 1),
    )
    body = client.get("/api/menus/tree").json()
    assert [node["menu"]["name"] for node in body["tree"]] == ["dashboard", "ports"]
    assert [child["name"] for child in body["tree"][1]["children"]] == ["terminals"]
    assert body["orphanIds"] == [ids["old-reports"]]


def test_navigation_filtered_by_grants(client, as_user, seed_menus):
    seed_menus(("dashboard", "top", None, 1), ("ports", "top", None, 2), ("terminals", "sub", "ports", 1), ("port-list", "sub", "ports", 2))
    as_user(["ports:read", "ports:terminals:read", "mystery"])

    body = client.get("/api/menus/navigation").json()
    assert [node["menu"]["name"] for node in body["tree"]] == ["ports"]
    assert [child["name"] for child in body["tree"][0]["children"]] == ["terminals"]


def test_navigation_empty_for_inactive_role(client, as_user, seed_menus):
    seed_menus(("dashboard", "top", None, 1))
    as_user(["dashboard:read"], role_active=False)
    assert client.get("/api/menus/navigation").json()["tree"] == []


def test_mutations_need_manage_grant(client, as_user, seed_menus):
    ids = seed_menus(("ports", "top", None, 1))
    as_user(["configuration:menus:write"])

    assert client.get("/api/menus").status_code == 200
    denied = client.patch(f"/api/menus/{ids['ports']}/toggle-status")
    assert denied.status_code == 403
    assert denied.json()["detail"] == "missing permission: configuration:menus:manage"

    as_user(["configuration:menus:manage"])
    assert client.patch(f"/api/menus/{ids['ports']}/toggle-status").status_code == 200


def test_icon_endpoints(client, as_admin):
    icons = client.get("/api/menus/icons").json()
    assert "Anchor" in icons
    assert icons == sorted(icons)

    recs = client.get("/api/menus/icon-recommendations", params={"name": "ports", "label": "Harbor", "currentIcon": "Anchor"}).json()
    assert recs
    assert "Anchor" not in [rec["icon"] for rec in recs]
