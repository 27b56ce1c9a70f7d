import unittest
from decimal import Decimal

from apps.carts.mappers import CartLineMapper, CartMapper
from apps.carts.models import Cart
from apps.carts.services import CartService
from apps.catalog.dtos import ProductDTO
from apps.catalog.store import CatalogStore
from apps.common.errors import NotFoundError
from apps.common.notifications import ERROR, INFO, SUCCESS, WARNING, Notifier


def make_product(product_id, name, price):
    return ProductDTO(product_id=product_id, name=name, price=Decimal(price))


class CartServiceTests(unittest.TestCase):
    def setUp(self):
        self.service = CartService(CartMapper(CartLineMapper(symbol="₹")))
        self.catalog = CatalogStore(
            [make_product(1, "Pen", "10.00"), make_product(2, "Book", "25.50")]
        )
        self.cart = Cart()
        self.notifier = Notifier()

    def levels(self):
        return [n.level for n in self.notifier.items]

    def messages(self):
        return [n.message for n in self.notifier.items]

    def test_add_item_appends_and_notifies(self):
        line = self.service.add_item(self.cart, self.catalog, 1, self.notifier)
        self.assertEqual(line.quantity, 1)
        self.assertEqual(self.service.item_count(self.cart), 1)
        self.assertEqual(self.messages(), ["Added Pen to cart"])
        self.assertEqual(self.levels(), [SUCCESS])

    def test_add_item_twice_increments(self):
        self.service.add_item(self.cart, self.catalog, 1, self.notifier)
        line = self.service.add_item(self.cart, self.catalog, 1, self.notifier)
        self.assertEqual(line.quantity, 2)
        self.assertEqual(len(self.cart), 1)
        self.assertEqual(self.service.total(self.cart), Decimal("20.00"))

    def test_add_unknown_product_raises_and_leaves_cart(self):
        self.service.add_item(self.cart, self.catalog, 1, self.notifier)
        with self.assertRaises(NotFoundError) as ctx:
            self.service.add_item(self.cart, self.catalog, 999, self.notifier)
        self.assertEqual(ctx.exception.product_id, 999)
        self.assertEqual(ctx.exception.collection, "catalog")
        self.assertEqual(self.cart.item_count(), 1)
        self.assertEqual(self.notifier.items[-1].message, "Product not found")
        self.assertEqual(self.notifier.items[-1].level, WARNING)

    def test_add_item_against_unloaded_catalog_raises(self):
        with self.assertRaises(NotFoundError):
            self.service.add_item(self.cart, CatalogStore(), 1, self.notifier)
        self.assertTrue(self.cart.is_empty())

    def test_set_quantity_updates_line(self):
        self.service.add_item(self.cart, self.catalog, 1, self.notifier)
        line = self.service.set_quantity(self.cart, 1, 5, self.notifier)
        self.assertEqual(line.quantity, 5)
        self.assertEqual(self.service.total(self.cart), Decimal("50.00"))
        self.assertEqual(self.notifier.items[-1].message, "Cart updated")
        self.assertEqual(self.notifier.items[-1].level, INFO)

    def test_set_quantity_zero_is_equivalent_to_remove(self):
        self.service.add_item(self.cart, self.catalog, 1, self.notifier)
        other = Cart()
        self.service.add_item(other, self.catalog, 1, Notifier())

        self.assertIsNone(self.service.set_quantity(self.cart, 1, 0, self.notifier))
        self.service.remove_item(other, 1, Notifier())

        self.assertEqual(self.cart.lines(), other.lines())
        self.assertEqual(self.notifier.items[-1].message, "Removed Pen from cart")

    def test_set_quantity_on_missing_line_raises_not_found(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.service.set_quantity(self.cart, 7, 2, self.notifier)
        self.assertEqual(ctx.exception.collection, "cart")
        self.assertTrue(self.cart.is_empty())
        self.assertEqual(self.messages(), ["Item not found in cart"])

    def test_set_quantity_zero_on_missing_line_is_silent(self):
        self.assertIsNone(self.service.set_quantity(self.cart, 7, 0, self.notifier))
        self.assertEqual(len(self.notifier), 0)

    def test_remove_item_absent_is_noop(self):
        self.service.add_item(self.cart, self.catalog, 2, Notifier())
        self.assertIsNone(self.service.remove_item(self.cart, 1, self.notifier))
        self.assertEqual(self.cart.item_count(), 1)
        self.assertEqual(len(self.notifier), 0)

    def test_clear_notifies_only_when_lines_existed(self):
        self.service.clear(self.cart, self.notifier)
        self.assertEqual(len(self.notifier), 0)
        self.service.add_item(self.cart, self.catalog, 1, Notifier())
        self.service.clear(self.cart, self.notifier)
        self.assertTrue(self.cart.is_empty())
        self.assertEqual(self.messages(), ["Cart cleared"])

    def test_checkout_empty_cart_returns_error_tuple(self):
        order, error = self.service.checkout(self.cart, self.notifier)
        self.assertIsNone(order)
        self.assertEqual(error[0], "EMPTY_CART")
        self.assertEqual(error[1], "Your cart is empty")
        self.assertTrue(self.cart.is_empty())
        self.assertEqual(self.levels(), [WARNING])

    def test_checkout_summarises_and_clears(self):
        self.service.add_item(self.cart, self.catalog, 1, Notifier())
        self.service.add_item(self.cart, self.catalog, 2, Notifier())
        self.service.set_quantity(self.cart, 1, 2, Notifier())

        order, error = self.service.checkout(self.cart, self.notifier)

        self.assertIsNone(error)
        self.assertEqual(order.item_count, 3)
        self.assertEqual(order.total, "45.50")
        self.assertEqual(order.total_display, "₹45.50")
        self.assertEqual(order.message, "Order placed successfully!")
        self.assertTrue(self.cart.is_empty())
        self.assertEqual(self.service.total(self.cart), Decimal("0"))
        self.assertEqual(self.levels(), [SUCCESS])
        self.assertNotIn(ERROR, self.levels())

    def test_render_delegates_to_mapper(self):
        self.service.add_item(self.cart, self.catalog, 1, Notifier())
        dto = self.service.render(self.cart)
        self.assertEqual(dto.item_count, 1)
        self.assertEqual(dto.total_display, "₹10.00")
