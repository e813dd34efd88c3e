"""
Wildwood Zoo Backend — Gift Shop Tests
========================================

What:  Products, inventory and gift shop sales.

What we test:
    ✅ Product writes need a gift shop manager
    ✅ Inventory is unique per (shop, product)
    ✅ A sale decrements stock and stores only the card's last four digits
    ✅ A rejected sale changes nothing
    ✅ Visitors only see their own transactions
"""

import pytest
from sqlalchemy import func, select

from wildwood.models import Inventory, ShopTransaction


async def _stock(database, inventory_id: int) -> int:
    async with database.session_factory() as session:
        return (await session.get(Inventory, inventory_id)).quantity_in_stock


@pytest.fixture
def shop_manager(seed):
    async def _make():
        return await seed.staff(username="shopboss", role="Manager", staff_type="Gift Shop Clerk")
    return _make


class TestProducts:

    @pytest.mark.asyncio
    async def test_manage_products(self, test_client, seed, auth_headers, shop_manager):
        boss = await shop_manager()
        headers = auth_headers(boss)

        created = await test_client.post(
            "/api/products",
            json={"name": "Safari Mug", "price": 9.5, "category": "Kitchen"},
            headers=headers,
        )
        assert created.status_code == 201
        product_id = created.json()["product"]["id"]

        patched = await test_client.patch(
            f"/api/products/{product_id}", json={"available": False, "description": None}, headers=headers,
        )
        assert patched.status_code == 200

        fetched = await test_client.get(f"/api/products/{product_id}")
        assert fetched.json()["available"] is False

        deleted = await test_client.delete(f"/api/products/{product_id}", headers=headers)
        assert deleted.status_code == 200
        assert (await test_client.get(f"/api/products/{product_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_general_manager_cannot_edit_products(self, test_client, seed, auth_headers):
        manager = await seed.staff()
        response = await test_client.post(
            "/api/products",
            json={"name": "Safari Mug", "price": 9.5, "category": "Kitchen"},
            headers=auth_headers(manager),
        )
        assert response.status_code == 403


class TestInventory:

    @pytest.mark.asyncio
    async def test_add_update_remove(self, test_client, test_db, seed, auth_headers, shop_manager):
        boss = await shop_manager()
        shop = await seed.gift_shop()
        product = await seed.product()
        headers = auth_headers(boss)
        body = {"gift_shop_id": shop.id, "product_id": product.id, "quantity_in_stock": 5}

        added = await test_client.post("/api/inventory", json=body, headers=headers)
        assert added.status_code == 201
        inventory_id = added.json()["inventory_id"]

        duplicate = await test_client.post("/api/inventory", json=body, headers=headers)
        assert duplicate.status_code == 400

        updated = await test_client.put(
            f"/api/inventory/{inventory_id}", json={"quantity_in_stock": 12}, headers=headers,
        )
        assert updated.status_code == 200
        assert await _stock(test_db, inventory_id) == 12

        listing = await test_client.get(f"/api/inventory/shop/{shop.id}")
        assert [row["product_name"] for row in listing.json()["inventory"]] == ["Plush Lion"]

        removed = await test_client.delete(f"/api/inventory/{inventory_id}", headers=headers)
        assert removed.status_code == 200

    @pytest.mark.asyncio
    async def test_shop_listing_hides_unavailable_products(self, test_client, seed):
        shop = await seed.gift_shop()
        retired = await seed.product(name="Old Poster", available=False)
        await seed.inventory(shop.id, retired.id, 3)

        listing = await test_client.get(f"/api/inventory/shop/{shop.id}")
        assert listing.json()["inventory"] == []


class TestShopPurchase:

    @pytest.mark.asyncio
    async def test_sale_decrements_stock(self, test_client, test_db, seed, auth_headers):
        visitor = await seed.visitor()
        shop = await seed.gift_shop()
        lion = await seed.product(name="Plush Lion", price=12.5)
        mug = await seed.product(name="Safari Mug", price=9.5)
        lion_stock = await seed.inventory(shop.id, lion.id, 5)
        mug_stock = await seed.inventory(shop.id, mug.id, 1)

        response = await test_client.post(
            "/api/shop/purchase",
            json={
                "gift_shop_id": shop.id,
                "products": [
                    {"product_id": lion.id, "quantity": 1},
                    {"product_id": mug.id, "quantity": 1},
                    {"product_id": lion.id, "quantity": 1},
                ],
                "card_number": "4111 1111 1111 1234",
            },
            headers=auth_headers(visitor),
        )

        assert response.status_code == 201
        assert response.json()["total_paid"] == 34.5
        assert await _stock(test_db, lion_stock.id) == 3
        assert await _stock(test_db, mug_stock.id) == 0

        detail = await test_client.get(
            f"/api/shop/transactions/{response.json()['transaction_id']}", headers=auth_headers(visitor),
        )
        body = detail.json()
        assert body["card_last_four"] == "1234"
        assert body["gift_shop_name"] == "Safari Gifts"
        assert {(i["product_name"], i["quantity"], i["subtotal"]) for i in body["items"]} == {
            ("Plush Lion", 2, 25.0),
            ("Safari Mug", 1, 9.5),
        }

    @pytest.mark.asyncio
    async def test_short_stock_changes_nothing(self, test_client, test_db, seed, auth_headers):
        visitor = await seed.visitor()
        shop = await seed.gift_shop()
        lion = await seed.product(name="Plush Lion")
        mug = await seed.product(name="Safari Mug")
        lion_stock = await seed.inventory(shop.id, lion.id, 5)
        await seed.inventory(shop.id, mug.id, 1)

        response = await test_client.post(
            "/api/shop/purchase",
            json={
                "gift_shop_id": shop.id,
                "products": [{"product_id": lion.id, "quantity": 2}, {"product_id": mug.id, "quantity": 2}],
                "card_number": "4111111111111234",
            },
            headers=auth_headers(visitor),
        )

        assert response.status_code == 400
        assert await _stock(test_db, lion_stock.id) == 5
        async with test_db.session_factory() as session:
            assert (await session.execute(select(func.count(ShopTransaction.id)))).scalar_one() == 0

    @pytest.mark.asyncio
    async def test_unknown_shop_is_404(self, test_client, seed, auth_headers):
        visitor = await seed.visitor()
        product = await seed.product()
        response = await test_client.post(
            "/api/shop/purchase",
            json={"gift_shop_id": 99, "products": [{"product_id": product.id, "quantity": 1}], "card_number": "1234"},
            headers=auth_headers(visitor),
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_card_number_needs_digits(self, test_client, seed, auth_headers):
        visitor = await seed.visitor()
        response = await test_client.post(
            "/api/shop/purchase",
            json={"gift_shop_id": 1, "products": [{"product_id": 1, "quantity": 1}], "card_number": "abcd-efgh"},
            headers=auth_headers(visitor),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_transactions_scoped_to_visitor(self, test_client, seed, auth_headers):
        buyer = await seed.visitor(username="buyer")
        other = await seed.visitor(username="other")
        clerk = await seed.staff(username="clerk", role="Staff", staff_type="Gift Shop Clerk")
        shop = await seed.gift_shop()
        product = await seed.product()
        await seed.inventory(shop.id, product.id, 10)

        sale = await test_client.post(
            "/api/shop/purchase",
            json={"gift_shop_id": shop.id, "products": [{"product_id": product.id, "quantity": 1}], "card_number": "5555444433331111"},
            headers=auth_headers(buyer),
        )
        transaction_id = sale.json()["transaction_id"]

        own = await test_client.get("/api/shop/transactions", headers=auth_headers(buyer))
        assert [t["id"] for t in own.json()["transactions"]] == [transaction_id]

        theirs = await test_client.get("/api/shop/transactions", headers=auth_headers(other))
        assert theirs.json()["transactions"] == []
        hidden = await test_client.get(f"/api/shop/transactions/{transaction_id}", headers=auth_headers(other))
        assert hidden.status_code == 404

        clerk_view = await test_client.get("/api/shop/transactions", headers=auth_headers(clerk))
        assert len(clerk_view.json()["transactions"]) == 1

    @pytest.mark.asyncio
    async def test_shops_listing(self, test_client, seed):
        await seed.gift_shop(name="Reptile House Shop")
        response = await test_client.get("/api/shop/shops")
        assert [s["name"] for s in response.json()["shops"]] == ["Reptile House Shop"]
