"""Unit tests for cart item validation order and outcomes."""

import pytest
from services.order_service.exceptions import (
    CartItemNotFound,
    NotOwner,
    QuantityExceedsStock,
)
from services.order_service.services.cart_validation import load_and_validate
from services.order_service.services.inventory import apply_decrements
from tests.factories import CartItemFactory, MemberFactory, ProductFactory, persist


@pytest.mark.asyncio
@pytest.mark.unit
async def test_validated_items_keep_input_order(db_session):
    member = await persist(db_session, MemberFactory.create())
    a = await persist(db_session, ProductFactory.create(name="a"))
    b = await persist(db_session, ProductFactory.create(name="b"))
    item_a, item_b = await persist(
        db_session,
        CartItemFactory.create(member.id, a.id),
        CartItemFactory.create(member.id, b.id),
    )

    validated = await load_and_validate(db_session, member, [item_b.id, item_a.id])

    assert [v.cart_item.id for v in validated] == [item_b.id, item_a.id]
    assert [v.product.name for v in validated] == ["b", "a"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_quantity_equal_to_stock_is_allowed(db_session):
    member = await persist(db_session, MemberFactory.create())
    product = await persist(db_session, ProductFactory.create(stock=2))
    item = await persist(
        db_session, CartItemFactory.create(member.id, product.id, quantity=2)
    )

    validated = await load_and_validate(db_session, member, [item.id])
    await apply_decrements(db_session, validated)

    assert product.stock == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_ownership_checked_before_stock(db_session):
    owner = await persist(db_session, MemberFactory.create())
    other = await persist(db_session, MemberFactory.create())
    product = await persist(db_session, ProductFactory.create(stock=0))
    item = await persist(db_session, CartItemFactory.create(owner.id, product.id))

    with pytest.raises(NotOwner):
        await load_and_validate(db_session, other, [item.id])

    with pytest.raises(QuantityExceedsStock):
        await load_and_validate(db_session, owner, [item.id])


@pytest.mark.asyncio
@pytest.mark.unit
async def test_missing_cart_item(db_session):
    member = await persist(db_session, MemberFactory.create())

    with pytest.raises(CartItemNotFound):
        await load_and_validate(db_session, member, [424242])
