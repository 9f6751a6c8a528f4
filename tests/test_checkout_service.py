"""Order pipeline tests against the in-memory storage."""

from decimal import Decimal

import pytest

from storefront.api.v1.cart.services import cart_session_key
from storefront.api.v1.checkout.services import CheckoutService
from storefront.core.exceptions import (
    EmptyCartException,
    InvalidInputException,
    PersistenceFailureException,
    UnauthorizedException,
)
from storefront.models import OrderStatus
from storefront.storage import StorageError
from storefront.storage.memory import MemoryOrderItemStore


async def create_user(storage, username="alice"):
    return await storage.users.create({"username": username, "password_hash": "not-a-real-hash"})


async def create_product(storage, name="Shirt", price="10.00", inventory=10):
    return await storage.products.create({
        "name": name,
        "description": f"{name} description",
        "image_url": "https://example.com/image.jpg",
        "category": "ladies",
        "subcategory": "shirts-blouses",
        "price": Decimal(price),
        "inventory": inventory,
        "in_stock": inventory is None or inventory > 0,
    })


class RecordingNotifier:
    def __init__(self):
        self.payloads = []

    def __call__(self, payload):
        self.payloads.append(payload)


class FailingOrderItemStore(MemoryOrderItemStore):
    async def create(self, data):
        raise StorageError("order_items unavailable")


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def service(memory_storage, notifier):
    return CheckoutService(memory_storage, notifier=notifier)


async def snapshot(storage):
    return {name: dict(rows) for name, rows in storage.tables.items()}


class TestSuccessfulCheckout:
    async def test_two_products_scenario(self, memory_storage, service):
        user = await create_user(memory_storage)
        product_a = await create_product(memory_storage, "A", "10.00", inventory=10)
        product_b = await create_product(memory_storage, "B", "5.50", inventory=4)
        session_id = cart_session_key(user.id)
        await memory_storage.carts.add(session_id, product_a.id, 2)
        await memory_storage.carts.add(session_id, product_b.id, 1)

        result = await service.checkout(user.id, "  221B Baker Street  ")

        order = result.order
        assert result.created is True
        assert order.total == Decimal("25.50")
        assert order.status == OrderStatus.PROCESSING
        assert order.shipping_address == "221B Baker Street"
        assert order.user_id == user.id

        items = await memory_storage.order_items.list_for_order(order.id)
        assert len(items) == 2
        assert sum(item.price * item.quantity for item in items) == order.total

        assert (await memory_storage.products.get(product_a.id)).inventory == 8
        assert (await memory_storage.products.get(product_b.id)).inventory == 3
        assert await memory_storage.carts.list_lines(session_id) == []

    async def test_one_item_per_distinct_product(self, memory_storage, service):
        user = await create_user(memory_storage)
        session_id = cart_session_key(user.id)
        products = [await create_product(memory_storage, f"P{i}", "3.00") for i in range(4)]
        for product in products:
            await memory_storage.carts.add(session_id, product.id, 1)
        # Adding again increments the existing line
        await memory_storage.carts.add(session_id, products[0].id, 2)

        order = (await service.checkout(user.id, "Main St 1")).order

        items = await memory_storage.order_items.list_for_order(order.id)
        assert len(items) == 4
        assert {item.product_id for item in items} == {p.id for p in products}
        assert order.total == Decimal("18.00")

    async def test_inventory_floors_at_zero(self, memory_storage, service):
        user = await create_user(memory_storage)
        product = await create_product(memory_storage, inventory=1)
        await memory_storage.carts.add(cart_session_key(user.id), product.id, 5)

        await service.checkout(user.id, "Main St 1")

        product = await memory_storage.products.get(product.id)
        assert product.inventory == 0
        assert product.in_stock is False

    async def test_untracked_inventory_is_left_alone(self, memory_storage, service):
        user = await create_user(memory_storage)
        product = await create_product(memory_storage, inventory=None)
        await memory_storage.carts.add(cart_session_key(user.id), product.id, 3)

        await service.checkout(user.id, "Main St 1")

        product = await memory_storage.products.get(product.id)
        assert product.inventory is None
        assert product.in_stock is True

    async def test_item_price_is_a_snapshot(self, memory_storage, service):
        user = await create_user(memory_storage)
        product = await create_product(memory_storage, price="12.00")
        await memory_storage.carts.add(cart_session_key(user.id), product.id, 1)

        order = (await service.checkout(user.id, "Main St 1")).order
        await memory_storage.products.update(product.id, {"price": Decimal("99.00")})

        items = await memory_storage.order_items.list_for_order(order.id)
        assert items[0].price == Decimal("12.00")
        assert (await memory_storage.orders.get(order.id)).total == Decimal("12.00")

    async def test_other_carts_are_untouched(self, memory_storage, service):
        alice = await create_user(memory_storage, "alice")
        bob = await create_user(memory_storage, "bob")
        product = await create_product(memory_storage)
        await memory_storage.carts.add(cart_session_key(alice.id), product.id, 1)
        await memory_storage.carts.add(cart_session_key(bob.id), product.id, 2)
        await memory_storage.carts.add("guest-session", product.id, 1)

        await service.checkout(alice.id, "Main St 1")

        assert len(await memory_storage.carts.list_lines(cart_session_key(bob.id))) == 1
        assert len(await memory_storage.carts.list_lines("guest-session")) == 1

    async def test_stale_lines_are_skipped(self, memory_storage, service):
        user = await create_user(memory_storage)
        kept = await create_product(memory_storage, "Kept", "4.00")
        gone = await create_product(memory_storage, "Gone", "7.00")
        session_id = cart_session_key(user.id)
        await memory_storage.carts.add(session_id, kept.id, 2)
        await memory_storage.carts.add(session_id, gone.id, 1)
        await memory_storage.products.delete(gone.id)

        order = (await service.checkout(user.id, "Main St 1")).order

        items = await memory_storage.order_items.list_for_order(order.id)
        assert [item.product_id for item in items] == [kept.id]
        assert order.total == Decimal("8.00")
        assert await memory_storage.carts.list_lines(session_id) == []

    async def test_missing_price_counts_as_zero(self, memory_storage, service):
        user = await create_user(memory_storage)
        priced = await create_product(memory_storage, "Priced", "6.00")
        unpriced = await create_product(memory_storage, "Unpriced", "1.00")
        memory_storage.assign(unpriced, {"price": None})
        session_id = cart_session_key(user.id)
        await memory_storage.carts.add(session_id, priced.id, 1)
        await memory_storage.carts.add(session_id, unpriced.id, 3)

        order = (await service.checkout(user.id, "Main St 1")).order

        assert order.total == Decimal("6.00")
        items = await memory_storage.order_items.list_for_order(order.id)
        assert sorted(item.price for item in items) == [Decimal("0"), Decimal("6.00")]

    async def test_confirmation_email_is_dispatched(self, memory_storage, service, notifier):
        user = await create_user(memory_storage)
        product = await create_product(memory_storage, price="2.50")
        await memory_storage.carts.add(cart_session_key(user.id), product.id, 2)

        order = (await service.checkout(user.id, "Main St 1")).order

        assert len(notifier.payloads) == 1
        payload = notifier.payloads[0]
        assert payload["order"]["id"] == str(order.id)
        assert payload["order"]["total"] == "5.00"
        assert payload["item_count"] == 1
        assert payload["username"] == "alice"

    async def test_notification_failure_does_not_fail_checkout(self, memory_storage):
        def broken_notifier(payload):
            raise RuntimeError("broker down")

        user = await create_user(memory_storage)
        product = await create_product(memory_storage)
        await memory_storage.carts.add(cart_session_key(user.id), product.id, 1)

        result = await CheckoutService(memory_storage, notifier=broken_notifier).checkout(user.id, "Main St 1")

        assert await memory_storage.orders.get(result.order.id) is not None


class TestCheckoutPreconditions:
    async def test_unauthenticated(self, memory_storage, service):
        before = await snapshot(memory_storage)

        with pytest.raises(UnauthorizedException):
            await service.checkout(None, "Main St 1")

        assert await snapshot(memory_storage) == before

    @pytest.mark.parametrize("address", [None, "", "   \t\n"])
    async def test_blank_address(self, memory_storage, service, address):
        user = await create_user(memory_storage)
        product = await create_product(memory_storage)
        await memory_storage.carts.add(cart_session_key(user.id), product.id, 1)
        before = await snapshot(memory_storage)

        with pytest.raises(InvalidInputException):
            await service.checkout(user.id, address)

        assert await snapshot(memory_storage) == before
        assert (await memory_storage.products.get(product.id)).inventory == 10

    async def test_empty_cart(self, memory_storage, service, notifier):
        user = await create_user(memory_storage)
        before = await snapshot(memory_storage)

        with pytest.raises(EmptyCartException):
            await service.checkout(user.id, "Main St 1")

        assert await snapshot(memory_storage) == before
        assert notifier.payloads == []

    async def test_cart_of_only_stale_lines_is_empty(self, memory_storage, service):
        user = await create_user(memory_storage)
        product = await create_product(memory_storage)
        await memory_storage.carts.add(cart_session_key(user.id), product.id, 1)
        await memory_storage.products.delete(product.id)

        with pytest.raises(EmptyCartException):
            await service.checkout(user.id, "Main St 1")

        assert await memory_storage.orders.list() == []

    async def test_second_checkout_reports_empty_cart(self, memory_storage, service):
        user = await create_user(memory_storage)
        product = await create_product(memory_storage)
        await memory_storage.carts.add(cart_session_key(user.id), product.id, 1)

        await service.checkout(user.id, "Main St 1")
        with pytest.raises(EmptyCartException):
            await service.checkout(user.id, "Main St 1")

        assert len(await memory_storage.orders.list_for_user(user.id)) == 1


class TestCheckoutAtomicity:
    async def test_store_failure_rolls_back_every_write(self, memory_storage, notifier):
        user = await create_user(memory_storage)
        product = await create_product(memory_storage, inventory=5)
        session_id = cart_session_key(user.id)
        await memory_storage.carts.add(session_id, product.id, 2)
        memory_storage.order_items = FailingOrderItemStore(memory_storage)
        service = CheckoutService(memory_storage, notifier=notifier)

        with pytest.raises(PersistenceFailureException) as exc_info:
            await service.checkout(user.id, "Main St 1")

        assert isinstance(exc_info.value.__cause__, StorageError)
        assert exc_info.value.status_code == 500
        assert await memory_storage.orders.list() == []
        assert (await memory_storage.products.get(product.id)).inventory == 5
        assert len(await memory_storage.carts.list_lines(session_id)) == 1
        assert notifier.payloads == []


class TestCheckoutIdempotency:
    async def test_repeated_token_returns_original_order(self, memory_storage, service, notifier):
        user = await create_user(memory_storage)
        product = await create_product(memory_storage, inventory=10)
        session_id = cart_session_key(user.id)
        await memory_storage.carts.add(session_id, product.id, 1)

        first = await service.checkout(user.id, "Main St 1", checkout_token="retry-1")
        await memory_storage.carts.add(session_id, product.id, 1)
        second = await service.checkout(user.id, "Main St 1", checkout_token="retry-1")

        assert first.created is True
        assert second.created is False
        assert second.order.id == first.order.id
        assert len(await memory_storage.orders.list()) == 1
        assert (await memory_storage.products.get(product.id)).inventory == 9
        # The replay does not consume the new cart contents
        assert len(await memory_storage.carts.list_lines(session_id)) == 1
        assert len(notifier.payloads) == 1

    async def test_tokens_are_scoped_per_user(self, memory_storage, service):
        alice = await create_user(memory_storage, "alice")
        bob = await create_user(memory_storage, "bob")
        product = await create_product(memory_storage)
        await memory_storage.carts.add(cart_session_key(alice.id), product.id, 1)
        await memory_storage.carts.add(cart_session_key(bob.id), product.id, 1)

        first = await service.checkout(alice.id, "Main St 1", checkout_token="same")
        second = await service.checkout(bob.id, "Main St 2", checkout_token="same")

        assert second.created is True
        assert second.order.id != first.order.id
