import pytest
from fastapi.testclient import TestClient

from app.core.constants import GenderEnum, OrderStatusEnum
from app.schemas.stats import BarCharts, DashboardStats, LineCharts, PieCharts
from tests.helpers.asserts import api_call, assert_error
from tests.helpers.contract import validate_response_schema

REPORTS = [
    ("/dashboard/stats", DashboardStats, "admin-stats"),
    ("/dashboard/pie", PieCharts, "admin-pie-charts"),
    ("/dashboard/bar", BarCharts, "admin-bar-charts"),
    ("/dashboard/line", LineCharts, "admin-line-charts"),
]


@pytest.fixture
def populated_store(admin_user, user_factory, product_factory, order_factory):
    customer = user_factory(gender=GenderEnum.FEMALE)
    laptop = product_factory(category="electronics", stock=3)
    book = product_factory(name="Novel", category="books", stock=0)
    order_factory(customer, products=[laptop, book], total=300, discount=20, tax=30, shipping_charges=10)
    order_factory(customer, products=[book], total=100, status=OrderStatusEnum.DELIVERED)
    return customer


@pytest.mark.asyncio
@pytest.mark.parametrize("path, schema, key", REPORTS, ids=[p for p, _, _ in REPORTS])
async def test_reports_are_cached_under_admin_keys(client: TestClient, cache, admin_user, populated_store, path, schema, key):
    r = api_call(client, "GET", path, params={"id": admin_user.id})

    validate_response_schema(r.json()["data"], schema)
    assert await cache.get(key) == r.json()["data"]


def test_dashboard_stats_figures(client: TestClient, admin_user, populated_store):
    data = api_call(client, "GET", "/dashboard/stats", params={"id": admin_user.id}).json()["data"]

    assert data["count"] == {"revenue": 400, "product": 2, "user": 2, "order": 2}
    assert data["category_count"] == {"books": 50, "electronics": 50}
    assert data["user_ratio"] == {"male": 1, "female": 1}
    assert data["chart"]["order"][-1] == 2
    assert data["chart"]["revenue"][-1] == 400
    assert sorted(t["quantity"] for t in data["latest_transaction"]) == [1, 2]


def test_pie_chart_figures(client: TestClient, admin_user, populated_store):
    data = api_call(client, "GET", "/dashboard/pie", params={"id": admin_user.id}).json()["data"]

    assert data["order_fullfillment"] == {"processing": 1, "shipped": 0, "delivered": 1}
    assert data["stock_availability"] == {"in_stock": 1, "out_of_stock": 1}
    assert data["revenue_distribution"] == {
        "net_margin": 220,
        "discount": 20,
        "production_cost": 10,
        "burnt": 30,
        "marketing_cost": 120,
    }
    assert data["admin_customer"] == {"admin": 1, "customer": 1}


@pytest.mark.asyncio
async def test_order_placement_refreshes_reports(
    client: TestClient, cache, admin_user, populated_store, product_factory, order_payload
):
    before = api_call(client, "GET", "/dashboard/bar", params={"id": admin_user.id}).json()["data"]
    product = product_factory(stock=2)

    api_call(client, "POST", "/order/new", json=order_payload(populated_store.id, [
        {"product_id": product.id, "name": product.name, "photo": "p.jpg", "price": product.price, "quantity": 1}
    ]))

    assert not await cache.exists("admin-bar-charts")
    after = api_call(client, "GET", "/dashboard/bar", params={"id": admin_user.id}).json()["data"]
    assert after["orders"][-1] == before["orders"][-1] + 1


def test_dashboard_requires_admin(client: TestClient, user_factory):
    assert_error(client.get("/api/v1/dashboard/stats"), 401, "Please login first as admin")
    assert_error(client.get("/api/v1/dashboard/line", params={"id": user_factory().id}), 403, "You are not admin")
