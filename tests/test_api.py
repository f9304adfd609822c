from database.models import Order, User
from services.export_service import XLSX_MEDIA_TYPE


def _auth(user: User) -> dict[str, str]:
    return {"X-User-Id": str(user.id)}


def test_ping(api_client):
    assert api_client.get("/ping").json() == {"message": "pong"}
    assert api_client.get("/api/status").status_code == 404


def test_requests_without_identity_are_unauthorized(api_client):
    response = api_client.get("/api/orders")
    assert response.status_code == 401
    assert response.json() == {"statusCode": 401, "message": "Unauthorized"}


def test_managers_require_admin(api_client, make_manager):
    manager = make_manager()
    response = api_client.get("/api/managers", headers=_auth(manager))
    assert response.status_code == 403


def test_create_and_list_managers(api_client, admin):
    response = api_client.post(
        "/api/managers/create",
        json={"name": " Alice ", "surname": "Smith", "email": "Alice@Example.com"},
        headers=_auth(admin),
    )
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "alice@example.com"
    assert data["name"] == "Alice"
    assert "password" not in data

    duplicate = api_client.post(
        "/api/managers/create",
        json={"name": "A", "surname": "S", "email": "alice@example.com"},
        headers=_auth(admin),
    )
    assert duplicate.status_code == 400
    assert duplicate.json() == {"statusCode": 400, "message": "Email is already in use."}

    listing = api_client.get("/api/managers?limit=5", headers=_auth(admin)).json()
    assert listing["totalCount"] == 1
    assert listing["totalPages"] == 1
    assert listing["limit"] == 5
    assert listing["data"][0]["email"] == "alice@example.com"


def test_manager_patch_and_statistic(api_client, admin, make_manager, make_order):
    manager = make_manager()
    make_order(manager=manager, status="Agree")

    response = api_client.patch(
        f"/api/managers/{manager.id}",
        json={"status": "vacation", "password": "new-password"},
        headers=_auth(admin),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "vacation"
    assert User.get_by_id(manager.id).password.startswith("pbkdf2_sha256$")

    stats = api_client.get(f"/api/managers/{manager.email}/statistic", headers=_auth(admin))
    assert stats.json() == {"total": 1, "inWork": 0, "agree": 1, "disagree": 0, "dubbing": 0}

    missing = api_client.get("/api/managers/9999", headers=_auth(admin))
    assert missing.status_code == 404
    assert missing.json()["message"] == "User not found"


def test_list_orders_with_filters_and_sort(api_client, make_manager, make_order):
    me = make_manager()
    make_order(age=25, course="PCX")
    make_order(age=30, course="PCX")
    make_order(age=41, course="PCX")
    make_order(age=25, course="QACX")

    response = api_client.get(
        "/api/orders",
        params=[
            ("filter.age", "25"),
            ("filter.age", "30"),
            ("filter.course", "PCX"),
            ("sortBy", "age:ASC"),
            ("limit", "1"),
        ],
        headers=_auth(me),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["totalCount"] == 2
    assert body["totalPages"] == 2
    assert [o["age"] for o in body["data"]] == [25]


def test_invalid_age_filter(api_client, make_manager):
    response = api_client.get(
        "/api/orders", params={"filter.age": "abc"}, headers=_auth(make_manager())
    )
    assert response.status_code == 400
    assert response.json() == {"statusCode": 400, "message": "Invalid age value"}


def test_edit_and_comment_flow(api_client, make_manager, make_order):
    me = make_manager(name="Nina", surname="Bondar")
    other = make_manager()
    order = make_order(status=None)

    comment = api_client.post(
        f"/api/orders/{order.id}/comments", json={"comment": "first call"}, headers=_auth(me)
    )
    assert comment.status_code == 201
    assert comment.json()["author"] == "Nina Bondar"

    fetched = api_client.get(f"/api/orders/{order.id}", headers=_auth(me)).json()
    assert fetched["status"] == "In work"
    assert fetched["manager"]["id"] == me.id

    forbidden = api_client.patch(
        f"/api/orders/{order.id}", json={"status": "Agree"}, headers=_auth(other)
    )
    assert forbidden.status_code == 403
    assert forbidden.json()["statusCode"] == 403

    ok = api_client.patch(f"/api/orders/{order.id}", json={"status": "Agree"}, headers=_auth(me))
    assert ok.status_code == 200
    assert Order.get_by_id(order.id).status == "Agree"

    comments = api_client.get(f"/api/orders/{order.id}/comments", headers=_auth(me)).json()
    assert [c["text"] for c in comments] == ["first call"]


def test_groups_and_statistic(api_client, make_manager, make_order):
    me = make_manager()
    first = api_client.post("/api/orders/groups", json={"name": "oct"}, headers=_auth(me))
    second = api_client.post("/api/orders/groups", json={"name": "oct"}, headers=_auth(me))
    assert first.json()["id"] == second.json()["id"]
    assert [g["name"] for g in api_client.get("/api/orders/groups", headers=_auth(me)).json()] == ["oct"]

    make_order(status=None)
    stats = api_client.get("/api/orders/statistic", headers=_auth(me)).json()
    assert stats["total"] == 1
    assert stats["new"] == 1


def test_excel_download(api_client, make_manager, make_order):
    me = make_manager()
    make_order(manager=me)
    response = api_client.get("/api/orders/my/excel", headers=_auth(me))
    assert response.status_code == 200
    assert response.headers["content-type"] == XLSX_MEDIA_TYPE
    assert "my_orders.xlsx" in response.headers["content-disposition"]
    assert response.content[:2] == b"PK"


def test_my_orders(api_client, make_manager, make_order):
    me = make_manager()
    mine = make_order(manager=me)
    make_order()
    body = api_client.get("/api/orders/my", headers=_auth(me)).json()
    assert [o["id"] for o in body["data"]] == [mine.id]


def test_missing_order(api_client, make_manager):
    response = api_client.get("/api/orders/777", headers=_auth(make_manager()))
    assert response.status_code == 404
    assert response.json() == {"statusCode": 404, "message": "Order not found"}


def test_read_order_by_email(api_client, make_manager, make_order):
    order = make_order(email="Lead@Mail.com")
    response = api_client.get("/api/orders/lead@mail.com", headers=_auth(make_manager()))
    assert response.status_code == 200
    assert response.json()["id"] == order.id


def test_edit_order_rejects_unknown_status(api_client, make_manager, make_order):
    me = make_manager()
    order = make_order(status="Agree")
    response = api_client.patch(
        f"/api/orders/{order.id}", json={"status": "Whatever"}, headers=_auth(me)
    )
    assert response.status_code == 422
    assert Order.get_by_id(order.id).status == "Agree"

    ok = api_client.patch(f"/api/orders/{order.id}", json={"status": "New"}, headers=_auth(me))
    assert ok.status_code == 200
    assert ok.json()["status"] is None


def test_create_manager_requires_email(api_client, admin):
    response = api_client.post(
        "/api/managers/create",
        json={"name": "Bob", "surname": "B", "email": "bob"},
        headers=_auth(admin),
    )
    assert response.status_code == 422
    assert User.select().count() == 1


def test_page_zero_is_bad_request(api_client, make_manager):
    response = api_client.get("/api/orders", params={"page": "0"}, headers=_auth(make_manager()))
    assert response.status_code == 400
    assert response.json() == {"statusCode": 400, "message": "Page must be a positive integer"}
