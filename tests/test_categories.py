from storefront.models.user import Role
from tests.helpers import auth_header, login_as


def _create(client, token, **body):
    payload = {"nameEn": "Phones", "nameAr": "هواتف"}
    payload.update(body)
    return client.post("/api/admin/categories", json=payload, headers=auth_header(token))


def test_category_crud(client, db_session):
    _, token = login_as(client, db_session, Role.ADMIN)

    parent = _create(client, token)
    assert parent.status_code == 201, parent.text
    parent_id = parent.json()["data"]["id"]

    child = _create(client, token, nameEn="Smartphones", parentId=parent_id)
    assert child.status_code == 201, child.text
    child_id = child.json()["data"]["id"]
    assert child.json()["data"]["parentId"] == parent_id

    listing = client.get("/api/categories")
    assert listing.status_code == 200
    assert [c["nameEn"] for c in listing.json()["data"]] == ["Phones", "Smartphones"]

    detail = client.get(f"/api/categories/{child_id}")
    assert detail.status_code == 200
    assert detail.json()["data"]["productCount"] == 0

    upd = client.patch(f"/api/admin/categories/{child_id}", json={"nameEn": "Mobiles"}, headers=auth_header(token))
    assert upd.status_code == 200, upd.text
    assert upd.json()["data"]["nameEn"] == "Mobiles"
    assert upd.json()["data"]["parentId"] == parent_id

    self_parent = client.patch(
        f"/api/admin/categories/{child_id}", json={"parentId": child_id}, headers=auth_header(token)
    )
    assert self_parent.status_code == 400

    d = client.delete(f"/api/admin/categories/{child_id}", headers=auth_header(token))
    assert d.status_code == 204
    assert client.get(f"/api/categories/{child_id}").status_code == 404


def test_category_in_use_cannot_be_deleted(client, db_session):
    _, token = login_as(client, db_session, Role.ADMIN)
    category_id = _create(client, token).json()["data"]["id"]

    p = client.post(
        "/api/admin/products",
        json={"title": "Phone", "price": 10, "categoryId": category_id, "stockCount": 1},
        headers=auth_header(token),
    )
    assert p.status_code == 201, p.text

    assert client.get(f"/api/categories/{category_id}").json()["data"]["productCount"] == 1

    d = client.delete(f"/api/admin/categories/{category_id}", headers=auth_header(token))
    assert d.status_code == 409
    assert d.json()["error"]["code"] == "CATEGORY_IN_USE"


def test_unknown_parent(client, db_session):
    _, token = login_as(client, db_session, Role.ADMIN)
    r = _create(client, token, parentId="00000000-0000-0000-0000-000000000000")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "CATEGORY_NOT_FOUND"


def test_user_cannot_manage_categories(client, db_session):
    _, token = login_as(client, db_session, Role.USER)
    assert _create(client, token).status_code == 403


def test_patch_null_name_rejected_but_null_parent_detaches(client, db_session):
    _, token = login_as(client, db_session, Role.ADMIN)
    parent_id = _create(client, token).json()["data"]["id"]
    child_id = _create(client, token, nameEn="Smartphones", parentId=parent_id).json()["data"]["id"]

    r = client.patch(f"/api/admin/categories/{child_id}", json={"nameEn": None}, headers=auth_header(token))
    assert r.status_code == 400, r.text
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"

    detach = client.patch(f"/api/admin/categories/{child_id}", json={"parentId": None}, headers=auth_header(token))
    assert detach.status_code == 200, detach.text
    assert detach.json()["data"]["parentId"] is None
    assert detach.json()["data"]["nameEn"] == "Smartphones"
