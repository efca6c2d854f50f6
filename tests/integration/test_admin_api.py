from datetime import datetime, timezone

from emporium.db.repositories import records
from emporium.db.repositories import shop as shop_repo


def test_admin_routes_hidden_from_non_admins(client, user_headers):
    for path in ("/api/admin/customers", "/api/admin/dashboard", "/api/admin/audit-logs"):
        assert client.get(path).status_code == 404
        assert client.get(path, headers=user_headers).status_code == 404
    assert client.post("/api/admin/schema", headers=user_headers).status_code == 404


def test_customers_exclude_admins(client, admin_headers, user_factory):
    user_factory("zoe@example.com", display_name="Zoe")
    user_factory("adam@example.com", display_name="Adam")
    user_factory("boss@example.com", role="admin")

    rows = client.get("/api/admin/customers", params={"orderBy": "email", "orderDirection": "ASC"}, headers=admin_headers).json()
    assert [r["email"] for r in rows] == ["adam@example.com", "zoe@example.com"]

    rows = client.get("/api/admin/customers", params={"query": "zo"}, headers=admin_headers).json()
    assert [r["email"] for r in rows] == ["zoe@example.com"]


def test_update_and_delete_customer_are_audited(client, admin_headers, user_factory):
    zoe = user_factory("zoe@example.com", display_name="Zoe")
    boss = user_factory("boss@example.com", role="admin")

    r = client.put(f"/api/admin/customers/{zoe.id}", json={"display_name": "Zoe Q"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["display_name"] == "Zoe Q"
    assert r.json()["email"] == "zoe@example.com"

    r = client.put(f"/api/admin/customers/{boss.id}", json={"display_name": "X"}, headers=admin_headers)
    assert r.status_code == 404

    r = client.delete(f"/api/admin/customers/{zoe.id}", headers=admin_headers)
    assert r.json() == {"message": "Customer deleted successfully."}
    assert client.delete(f"/api/admin/customers/{zoe.id}", headers=admin_headers).status_code == 404

    logs = client.get("/api/admin/audit-logs", headers=admin_headers).json()
    assert {log["action_type"] for log in logs} == {"customer_update", "customer_delete"}
    update = next(log for log in logs if log["action_type"] == "customer_update")
    assert update["target_id"] == zoe.id
    assert update["metadata"] == {"fields": ["display_name"]}

    only_deletes = client.get(
        "/api/admin/audit-logs", params={"action_type": "customer_delete"}, headers=admin_headers
    ).json()
    assert len(only_deletes) == 1


def test_schema_bootstrap(client, admin_headers):
    r = client.post("/api/admin/schema", headers=admin_headers)
    assert r.status_code == 201
    assert r.json() == {"message": "Tables created successfully."}


def _sale(db, buyer, amount, paid_at):
    order = records.create(db, "ShopOrder", {"user_id": buyer.id, "status": "paid", "total_amount": amount})
    records.create(
        db,
        "ShopPayment",
        {"order_id": order.id, "product_id": [], "payment_date": paid_at, "payment_method": "card", "amount": amount},
    )


def test_dashboard_figures(db_session, user_factory):
    buyer = user_factory("buyer@example.com", display_name="Buyer")
    _sale(db_session, buyer, 10.0, datetime(2026, 1, 15, tzinfo=timezone.utc))
    _sale(db_session, buyer, 25.5, datetime(2026, 3, 2, tzinfo=timezone.utc))
    _sale(db_session, buyer, 4.5, datetime(2026, 3, 20, tzinfo=timezone.utc))
    _sale(db_session, buyer, 100.0, datetime(2025, 3, 20, tzinfo=timezone.utc))

    data = shop_repo.dashboard(db_session, now=datetime(2026, 3, 25, tzinfo=timezone.utc))

    assert data["total_revenue"] == 140.0
    assert data["orders_count"] == 4
    assert data["sales_this_month"] == 2
    assert len(data["monthly_revenue"]) == 12
    assert data["monthly_revenue"][0] == {"name": "Jan", "total": 10.0}
    assert data["monthly_revenue"][2] == {"name": "Mar", "total": 30.0}
    assert data["monthly_revenue"][11] == {"name": "Dec", "total": 0.0}
    assert [sale["amount"] for sale in data["recent_sales"]] == [4.5, 25.5, 10.0, 100.0]
    assert data["recent_sales"][0]["email"] == "buyer@example.com"
    assert data["recent_sales"][0]["name"] == "Buyer"


def test_dashboard_endpoint(client, admin_headers):
    r = client.get("/api/admin/dashboard", headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["total_revenue"] == 0.0
    assert body["recent_sales"] == []
    assert [m["name"] for m in body["monthly_revenue"]][:3] == ["Jan", "Feb", "Mar"]


def test_audit_logs_filter_by_target(client, admin_headers, user_factory):
    zoe = user_factory("zoe@example.com")
    amy = user_factory("amy@example.com")
    client.put(f"/api/admin/customers/{zoe.id}", json={"display_name": "Z"}, headers=admin_headers)
    client.put(f"/api/admin/customers/{amy.id}", json={"display_name": "A"}, headers=admin_headers)

    rows = client.get(
        "/api/admin/audit-logs",
        params={"target_type": "customer", "target_id": amy.id, "status": "success"},
        headers=admin_headers,
    ).json()
    assert [row["target_id"] for row in rows] == [amy.id]


def test_audit_log_paging_is_bounded(client, admin_headers):
    r = client.get("/api/admin/audit-logs", params={"skip": -5}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Validation error"
    assert r.json()["details"][0]["path"] == "skip"
    assert client.get("/api/admin/audit-logs", params={"limit": 1000}, headers=admin_headers).status_code == 400
    assert client.get("/api/admin/audit-logs", params={"limit": 1}, headers=admin_headers).status_code == 200
