"""
Tests for the entity services and the statistics aggregator.

Run against the in-memory store; no HTTP involved.
"""

import io
from datetime import datetime
from decimal import Decimal

import pytest

from core.errors import NotFoundError, StoreError, ValidationError
from services import (
    CustomerService,
    ImageUpload,
    OrderService,
    ProductService,
    StatisticsService,
)
from services.products import parse_price, parse_stock
from services.statistics import format_amount, order_total


@pytest.fixture
def customers(store):
    return CustomerService(store)


@pytest.fixture
def products(store, uploads):
    return ProductService(store, uploads)


@pytest.fixture
def orders(store):
    return OrderService(store)


# -----------------------------
# Customers
# -----------------------------

@pytest.mark.asyncio
async def test_customers_listed_newest_first(customers):
    ids = [await customers.create({"name": f"cliente {i}"}) for i in range(4)]

    listed = await customers.list_all()

    assert [c["id"] for c in listed] == list(reversed(ids))
    assert all(isinstance(c["registrationDate"], datetime) for c in listed)


@pytest.mark.asyncio
async def test_customer_cannot_supply_id_or_registration_date(customers):
    customer_id = await customers.create({
        "id": "forged",
        "name": "Ana",
        "registrationDate": "1999-01-01",
    })

    customer = await customers.get(customer_id)
    assert customer["id"] == customer_id
    assert customer["name"] == "Ana"
    assert isinstance(customer["registrationDate"], datetime)


@pytest.mark.asyncio
async def test_customer_payload_must_be_object(customers):
    with pytest.raises(ValidationError):
        await customers.create(["not", "an", "object"])


@pytest.mark.asyncio
async def test_get_unknown_customer(customers):
    with pytest.raises(NotFoundError):
        await customers.get("nope")


# -----------------------------
# Products
# -----------------------------

@pytest.mark.parametrize("raw, expected", [
    ("19.99", 19.99),
    (" 7 ", 7.0),
    (3, 3.0),
    (2.5, 2.5),
])
def test_parse_price_accepts_numbers(raw, expected):
    assert parse_price(raw) == expected
    assert isinstance(parse_price(raw), float)


@pytest.mark.parametrize("raw", [None, "", "  ", "abc", "nan", "inf", True, [1]])
def test_parse_price_rejects_garbage(raw):
    with pytest.raises(ValidationError):
        parse_price(raw)


@pytest.mark.parametrize("raw, expected", [("5", 5), (" 12 ", 12), (4, 4), (3.0, 3)])
def test_parse_stock_accepts_integers(raw, expected):
    assert parse_stock(raw) == expected
    assert isinstance(parse_stock(raw), int)


@pytest.mark.parametrize("raw", [None, "", "2.5", 2.5, "five", False])
def test_parse_stock_rejects_garbage(raw):
    with pytest.raises(ValidationError):
        parse_stock(raw)


@pytest.mark.asyncio
async def test_product_create_coerces_numbers(products):
    product_id = await products.create(
        name="Caneca",
        description="350ml",
        price="19.99",
        stock="5",
    )

    product = await products.get(product_id)
    assert product["price"] == 19.99
    assert product["stock"] == 5
    assert isinstance(product["stock"], int)
    assert product["imageUrl"] is None
    assert isinstance(product["creationDate"], datetime)


@pytest.mark.asyncio
async def test_product_create_with_invalid_price_writes_nothing(products, uploads):
    with pytest.raises(ValidationError):
        await products.create(
            name="Caneca",
            description=None,
            price="dezenove",
            stock="5",
            image=ImageUpload(filename="caneca.png", file=io.BytesIO(b"png")),
        )

    assert await products.list_all() == []
    assert list(uploads.directory.iterdir()) == []


@pytest.mark.asyncio
async def test_product_create_stores_image(products, uploads):
    product_id = await products.create(
        name="Caneca",
        description=None,
        price="10",
        stock="1",
        image=ImageUpload(filename="Caneca.PNG", file=io.BytesIO(b"image-bytes")),
    )

    product = await products.get(product_id)
    assert product["imageUrl"].startswith("/uploads/")
    assert product["imageUrl"].endswith(".png")
    assert uploads.path_for(product["imageUrl"]).read_bytes() == b"image-bytes"


@pytest.mark.asyncio
async def test_product_image_removed_when_store_write_fails(products, uploads, store, monkeypatch):
    async def failing_add(data):
        raise StoreError("quota exceeded")

    monkeypatch.setattr(store.collection(ProductService.COLLECTION_NAME), "add", failing_add)

    with pytest.raises(StoreError):
        await products.create(
            name="Caneca",
            description=None,
            price="10",
            stock="1",
            image=ImageUpload(filename="caneca.png", file=io.BytesIO(b"x")),
        )

    assert list(uploads.directory.iterdir()) == []


@pytest.mark.asyncio
async def test_product_update_overwrites_mutable_fields_only(products):
    product_id = await products.create(
        name="Caneca",
        description="350ml",
        price="19.99",
        stock="5",
        image=ImageUpload(filename="c.jpg", file=io.BytesIO(b"x")),
    )
    before = await products.get(product_id)

    await products.update(product_id, name="Caneca grande", description=None, price=25, stock="8")

    after = await products.get(product_id)
    assert after["name"] == "Caneca grande"
    assert after["description"] is None
    assert after["price"] == 25.0
    assert after["stock"] == 8
    assert after["imageUrl"] == before["imageUrl"]
    assert after["creationDate"] == before["creationDate"]


@pytest.mark.asyncio
async def test_product_update_unknown_id(products):
    with pytest.raises(NotFoundError):
        await products.update("missing", name="x", description=None, price=1, stock=1)


@pytest.mark.asyncio
async def test_product_update_validates_before_lookup(products):
    with pytest.raises(ValidationError):
        await products.update("missing", name="x", description=None, price="abc", stock=1)


@pytest.mark.asyncio
async def test_product_delete_removes_record_and_image(products, uploads):
    product_id = await products.create(
        name="Caneca",
        description=None,
        price="1",
        stock="1",
        image=ImageUpload(filename="c.png", file=io.BytesIO(b"x")),
    )
    image_path = uploads.path_for((await products.get(product_id))["imageUrl"])

    await products.delete(product_id)

    assert product_id not in [p["id"] for p in await products.list_all()]
    assert not image_path.exists()


@pytest.mark.asyncio
async def test_product_delete_survives_unremovable_image(products, uploads, store):
    # A directory where the image file should be cannot be unlinked
    (uploads.directory / "stuck.png").mkdir()
    product_id = await store.collection(ProductService.COLLECTION_NAME).add({
        "name": "Caneca",
        "imageUrl": "/uploads/stuck.png",
    })

    await products.delete(product_id)

    assert await store.collection(ProductService.COLLECTION_NAME).get(product_id) is None


@pytest.mark.asyncio
async def test_product_delete_unknown_id_is_noop(products):
    await products.delete("missing")


# -----------------------------
# Orders
# -----------------------------

@pytest.mark.asyncio
async def test_order_always_starts_pending(orders):
    order_id = await orders.create({"total": 12.5, "status": "delivered"})

    order = await orders.get(order_id)
    assert order["status"] == "pending"
    assert order["total"] == 12.5
    assert isinstance(order["orderDate"], datetime)


@pytest.mark.asyncio
async def test_order_status_update_changes_only_status(orders):
    order_id = await orders.create({"total": 30, "items": [{"sku": "A1", "qty": 2}]})
    before = await orders.get(order_id)

    await orders.update_status(order_id, "shipped")

    after = await orders.get(order_id)
    assert after["status"] == "shipped"
    assert {k: v for k, v in after.items() if k != "status"} == {
        k: v for k, v in before.items() if k != "status"
    }


@pytest.mark.asyncio
async def test_order_status_update_unknown_id(orders):
    with pytest.raises(NotFoundError):
        await orders.update_status("missing", "shipped")


@pytest.mark.asyncio
@pytest.mark.parametrize("status", ["", None, 3])
async def test_order_status_must_be_non_empty_string(orders, status):
    order_id = await orders.create({})

    with pytest.raises(ValidationError):
        await orders.update_status(order_id, status)


@pytest.mark.asyncio
async def test_order_status_is_stored_verbatim(orders):
    order_id = await orders.create({})

    await orders.update_status(order_id, "  ")

    assert (await orders.get(order_id))["status"] == "  "


@pytest.mark.asyncio
async def test_orders_listed_newest_first(orders):
    ids = [await orders.create({"total": i}) for i in range(3)]

    assert [o["id"] for o in await orders.list_all()] == list(reversed(ids))


# -----------------------------
# Statistics
# -----------------------------

@pytest.mark.asyncio
async def test_statistics_aggregate(store, customers, products, orders):
    ids = [
        await orders.create({"total": 10.50}),
        await orders.create({"total": 0}),
        await orders.create({"total": None}),
        await orders.create({"total": 25.00}),
        await orders.create({}),
    ]
    await orders.update_status(ids[2], "shipped")
    await orders.update_status(ids[4], "Pending")
    await customers.create({"name": "Ana"})
    await products.create(name="Caneca", description=None, price="1", stock="1")

    stats = await StatisticsService(store).compute()

    assert stats.to_dict() == {
        "totalOrders": 5,
        "totalSales": "35.50",
        "totalProducts": 1,
        "totalCustomers": 1,
        "pendingOrders": 3,
    }


@pytest.mark.asyncio
async def test_statistics_on_empty_store(store):
    stats = await StatisticsService(store).compute()

    assert stats.to_dict() == {
        "totalOrders": 0,
        "totalSales": "0.00",
        "totalProducts": 0,
        "totalCustomers": 0,
        "pendingOrders": 0,
    }


@pytest.mark.asyncio
async def test_statistics_read_failure_aborts(store, monkeypatch):
    async def failing_get_all():
        raise StoreError("connection reset")

    monkeypatch.setattr(
        store.collection(CustomerService.COLLECTION_NAME), "get_all", failing_get_all
    )

    with pytest.raises(StoreError, match="connection reset"):
        await StatisticsService(store).compute()


@pytest.mark.asyncio
async def test_statistics_with_very_large_totals(store, orders):
    await orders.create({"total": 1e26})
    await orders.create({"total": "1e30"})
    await orders.create({"total": 10.5})

    stats = await StatisticsService(store).compute()

    assert stats.to_dict()["totalSales"] == f"{10**30 + 10**26 + 10}.50"


@pytest.mark.parametrize("value, expected", [
    (None, Decimal(0)),
    (10.5, Decimal("10.5")),
    (7, Decimal(7)),
    ("4.25", Decimal("4.25")),
    ("abc", Decimal(0)),
    (True, Decimal(0)),
    (float("nan"), Decimal(0)),
    ({"amount": 3}, Decimal(0)),
    ("1e400", Decimal(0)),
])
def test_order_total(value, expected):
    assert order_total(value) == expected


def test_format_amount_rounds_half_up():
    assert format_amount(Decimal("0.125")) == "0.13"
    assert format_amount(Decimal("35.5")) == "35.50"
    assert format_amount(Decimal(0)) == "0.00"
    assert format_amount(Decimal("1e30")) == "1" + "0" * 30 + ".00"
    assert format_amount(Decimal("123456789012345678901234567890.125")) == (
        "123456789012345678901234567890.13"
    )
