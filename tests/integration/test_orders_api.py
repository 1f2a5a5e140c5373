"""Integration tests for the order service HTTP endpoints."""

import pytest
from services.order_service.app.main import app
from services.order_service.models import CartItem, Order
from sqlalchemy import func, select
from tests.factories import (
    CartItemFactory,
    MemberFactory,
    PointFactory,
    ProductFactory,
    override_member,
    persist,
)


async def _setup(db):
    member = await persist(db, MemberFactory.create())
    pizza = await persist(db, ProductFactory.create(name="pizza", price=20000))
    salad = await persist(db, ProductFactory.create(name="salad", price=8000))
    pizza_item, salad_item = await persist(
        db,
        CartItemFactory.create(member.id, pizza.id, quantity=3),
        CartItemFactory.create(member.id, salad.id, quantity=1),
    )
    await persist(db, PointFactory.create(member.id, amount=1000))
    return {
        "member_id": member.id,
        "pizza_id": pizza.id,
        "cart_ids": [pizza_item.id, salad_item.id],
    }


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_place_and_fetch_order(client, db_session):
    """POST /orders then GET /orders/{id} and GET /orders."""
    data = await _setup(db_session)

    with override_member(app, db_session, data["member_id"]):
        response = await client.post(
            "/orders",
            json={"cart_item_ids": data["cart_ids"], "point": 1000, "total_price": 68000},
        )
        assert response.status_code == 201, response.text
        order_id = response.json()["order_id"]

        detail = await client.get(f"/orders/{order_id}")
        assert detail.status_code == 200
        body = detail.json()
        assert body["order_id"] == order_id
        assert body["total_price"] == 68000
        assert body["used_point"] == 1000
        assert body["earned_point"] == 6700
        assert body["items"][0]["product_id"] == data["pizza_id"]
        assert body["items"][0]["name"] == "pizza"

        listing = await client.get("/orders")
        assert listing.status_code == 200
        assert [o["order_id"] for o in listing.json()] == [order_id]

        points = await client.get("/points/me")
        assert points.status_code == 200
        assert points.json()["total_available"] == 6700


@pytest.mark.asyncio
@pytest.mark.integration
async def test_rejected_order_maps_to_error_code(client, db_session):
    """Business rejections return their stable code and leave nothing behind."""
    data = await _setup(db_session)

    with override_member(app, db_session, data["member_id"]):
        mismatch = await client.post(
            "/orders",
            json={"cart_item_ids": data["cart_ids"], "point": 0, "total_price": 71000},
        )
        excess = await client.post(
            "/orders",
            json={"cart_item_ids": data["cart_ids"], "point": 70000, "total_price": 68000},
        )
        short = await client.post(
            "/orders",
            json={"cart_item_ids": data["cart_ids"], "point": 5000, "total_price": 68000},
        )

    assert mismatch.status_code == 409
    assert mismatch.json()["code"] == "total_price_mismatch"
    assert excess.status_code == 400
    assert excess.json()["code"] == "redemption_exceeds_total"
    assert short.status_code == 409
    assert short.json()["code"] == "insufficient_points"

    assert await db_session.scalar(select(func.count()).select_from(Order)) == 0
    assert await db_session.scalar(select(func.count()).select_from(CartItem)) == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_order_not_found_and_not_owner(client, db_session):
    data = await _setup(db_session)
    stranger = await persist(db_session, MemberFactory.create())
    stranger_id = stranger.id

    with override_member(app, db_session, data["member_id"]):
        created = await client.post(
            "/orders",
            json={"cart_item_ids": data["cart_ids"], "point": 0, "total_price": 68000},
        )
        order_id = created.json()["order_id"]
        missing = await client.get("/orders/10000000")

    with override_member(app, db_session, stranger_id):
        foreign = await client.get(f"/orders/{order_id}")

    assert missing.status_code == 404
    assert missing.json()["code"] == "order_not_found"
    assert foreign.status_code == 403
    assert foreign.json()["code"] == "not_owner"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_invalid_request_body(client, db_session):
    data = await _setup(db_session)

    with override_member(app, db_session, data["member_id"]):
        negative = await client.post(
            "/orders",
            json={"cart_item_ids": data["cart_ids"], "point": -1, "total_price": 68000},
        )
        duplicated = await client.post(
            "/orders",
            json={
                "cart_item_ids": [data["cart_ids"][0], data["cart_ids"][0]],
                "point": 0,
                "total_price": 120000,
            },
        )
        empty = await client.post(
            "/orders", json={"cart_item_ids": [], "point": 0, "total_price": 0}
        )
        oversized = await client.post(
            "/orders",
            json={"cart_item_ids": data["cart_ids"], "point": 0, "total_price": 10**20},
        )

    assert negative.status_code == 422
    assert duplicated.status_code == 422
    assert empty.status_code == 422
    assert oversized.status_code == 422
    assert await db_session.scalar(select(func.count()).select_from(Order)) == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_requires_authentication(client):
    response = await client.get("/orders")
    assert response.status_code in (401, 403)
