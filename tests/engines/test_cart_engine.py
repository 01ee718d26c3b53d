"""
Tests for the Cart engine: line mutations, stock ceilings, bill-level
fields and snapshot loading.

The cart never touches catalog stock; every test that mutates the cart
also checks the catalog is unchanged where that matters.
"""

import itertools
import logging
from decimal import Decimal

import pytest

from posbill.core.commands import ReasonCode
from posbill.core.config import EngineSettings
from posbill.core.primitives import PaymentMethod
from posbill.engines.cart import Cart, LineItem
from posbill.engines.catalog import Catalog, Product


def _catalog(*products):
    if not products:
        products = (
            Product(1, "Product A", Decimal("100"), 2, "Electronics"),
            Product(2, "Product B", Decimal("50"), 10, "Accessories"),
            Product(3, "Product Z", Decimal("20"), 0, "Accessories"),
        )
    return Catalog(products)


def _cart(catalog=None, settings=None):
    catalog = catalog if catalog is not None else _catalog()
    counter = itertools.count(1)
    return Cart(
        product_lookup=catalog.find_by_id,
        settings=settings,
        id_factory=lambda: f"line-{next(counter)}",
    )


# ══════════════════════════════════════════════════════════════
# LINE ITEM MODEL
# ══════════════════════════════════════════════════════════════

class TestLineItem:
    def test_from_product_copies_name_and_price(self):
        product = Product(1, "Product A", Decimal("100"), 5, "Electronics")
        item = LineItem.from_product(product, "line-1")
        assert item.name == "Product A"
        assert item.unit_price == Decimal("100")
        assert item.quantity == 1

    def test_line_total(self):
        item = LineItem("line-1", 1, "Product A", Decimal("19.99"), 3)
        assert item.line_total == Decimal("59.97")

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValueError, match="quantity must be >= 1"):
            LineItem("line-1", 1, "Product A", Decimal("1"), 0)

    def test_quantity_must_be_int(self):
        with pytest.raises(TypeError):
            LineItem("line-1", 1, "Product A", Decimal("1"), 1.5)

    def test_dict_round_trip(self):
        item = LineItem("line-1", "sku-1", "Product A", Decimal("12.50"), 2)
        assert LineItem.from_dict(item.to_dict()) == item


# ══════════════════════════════════════════════════════════════
# ADD PRODUCT
# ══════════════════════════════════════════════════════════════

class TestAddProduct:
    def test_new_line(self):
        catalog = _catalog()
        cart = _cart(catalog)
        outcome = cart.add_product(catalog.find_by_id(1))

        assert outcome.is_accepted
        assert outcome.value.line_id == "line-1"
        assert [i.product_id for i in cart.items] == [1]
        assert cart.items[0].quantity == 1

    def test_same_product_bumps_quantity(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))
        outcome = cart.add_product(catalog.find_by_id(1))

        assert outcome.is_accepted
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2
        assert cart.items[0].line_id == "line-1"

    def test_bump_past_stock_rejected(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))
        cart.add_product(catalog.find_by_id(1))

        outcome = cart.add_product(catalog.find_by_id(1))

        assert outcome.code == ReasonCode.STOCK_EXCEEDED
        assert cart.items[0].quantity == 2

    def test_out_of_stock_rejected(self):
        catalog = _catalog()
        cart = _cart(catalog)
        outcome = cart.add_product(catalog.find_by_id(3))

        assert outcome.code == ReasonCode.OUT_OF_STOCK
        assert "'Product Z' is out of stock." == outcome.reason.message
        assert cart.is_empty()

    def test_lines_keep_insertion_order(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(2))
        cart.add_product(catalog.find_by_id(1))
        cart.add_product(catalog.find_by_id(2))
        assert [i.product_id for i in cart.items] == [2, 1]

    def test_stock_untouched(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))
        assert catalog.available_stock(1) == 2


# ══════════════════════════════════════════════════════════════
# SET QUANTITY
# ══════════════════════════════════════════════════════════════

class TestSetQuantity:
    def test_within_stock(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(2))

        outcome = cart.set_quantity("line-1", 7)

        assert outcome.is_accepted
        assert cart.items[0].quantity == 7
        assert cart.item_count() == 7

    def test_quantity_at_stock_is_allowed(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))
        assert cart.set_quantity("line-1", 2).is_accepted

    def test_above_stock_rejected_and_unchanged(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))
        cart.add_product(catalog.find_by_id(1))

        outcome = cart.set_quantity("line-1", 3)

        assert outcome.code == ReasonCode.STOCK_EXCEEDED
        assert cart.items[0].quantity == 2
        assert catalog.available_stock(1) == 2

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_below_one_removes_line(self, quantity):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))

        outcome = cart.set_quantity("line-1", quantity)

        assert outcome.is_accepted
        assert cart.is_empty()

    def test_unknown_line(self):
        outcome = _cart().set_quantity("missing", 2)
        assert outcome.code == ReasonCode.LINE_ITEM_NOT_FOUND

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_removing_unknown_line_is_noop(self, quantity):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))

        outcome = cart.set_quantity("missing", quantity)

        assert outcome.is_accepted
        assert [i.line_id for i in cart.items] == ["line-1"]

    def test_non_integer_quantity(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))
        with pytest.raises(TypeError):
            cart.set_quantity("line-1", "2")

    def test_unresolvable_product_uses_fallback_ceiling(self, caplog):
        cart = _cart(_catalog(), settings=EngineSettings(fallback_stock_ceiling=5))
        cart.load({"items": [
            {"line_id": "l1", "product_id": 99, "name": "Gone",
             "unit_price": "10", "quantity": 1},
        ]})

        with caplog.at_level(logging.WARNING, logger="posbill.cart"):
            assert cart.set_quantity("l1", 5).is_accepted
        assert "fallback ceiling" in caplog.text
        assert cart.set_quantity("l1", 6).code == ReasonCode.STOCK_EXCEEDED

    def test_unresolvable_product_without_fallback(self):
        cart = _cart(_catalog(), settings=EngineSettings(fallback_stock_ceiling=None))
        cart.load({"items": [
            {"line_id": "l1", "product_id": 99, "name": "Gone",
             "unit_price": "10", "quantity": 1},
        ]})

        outcome = cart.set_quantity("l1", 2)

        assert outcome.code == ReasonCode.PRODUCT_NOT_FOUND
        assert cart.items[0].quantity == 1


# ══════════════════════════════════════════════════════════════
# PRICE / REMOVE / CLEAR
# ══════════════════════════════════════════════════════════════

class TestSetPrice:
    def test_override_changes_line_not_catalog(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))

        outcome = cart.set_price("line-1", "80")

        assert outcome.is_accepted
        assert cart.items[0].unit_price == Decimal("80")
        assert catalog.find_by_id(1).unit_price == Decimal("100")

    def test_zero_price_allowed(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))
        assert cart.set_price("line-1", 0).is_accepted
        assert cart.subtotal() == 0

    def test_negative_price_rejected(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))

        outcome = cart.set_price("line-1", "-1")

        assert outcome.code == ReasonCode.INVALID_PRICE
        assert cart.items[0].unit_price == Decimal("100")

    def test_unknown_line_checked_first(self):
        outcome = _cart().set_price("missing", "-1")
        assert outcome.code == ReasonCode.LINE_ITEM_NOT_FOUND


class TestRemoveAndClear:
    def test_remove_is_idempotent(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))
        cart.add_product(catalog.find_by_id(2))

        cart.remove_item("line-1")
        after_first = cart.items
        cart.remove_item("line-1")

        assert cart.items == after_first
        assert [i.product_id for i in cart.items] == [2]

    def test_remove_unknown_is_noop(self):
        cart = _cart()
        cart.remove_item("nothing")
        assert cart.is_empty()

    def test_clear_resets_lines_and_discount(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))
        cart.set_discount(10)
        cart.set_customer("Asha", "98450")

        cart.clear()

        assert cart.is_empty()
        assert cart.discount_percent == 0
        assert cart.customer_name == "Asha"

    def test_reset_clears_customer_by_default(self):
        cart = _cart()
        cart.set_customer("Asha", "98450")
        cart.set_payment_method("UPI")

        cart.reset()

        assert cart.customer_name == ""
        assert cart.customer_phone == ""
        assert cart.payment_method is PaymentMethod.CASH

    def test_reset_can_keep_customer(self):
        cart = _cart(settings=EngineSettings(reset_customer_on_commit=False))
        cart.set_customer("Asha", "98450")
        cart.reset()
        assert cart.customer_name == "Asha"


# ══════════════════════════════════════════════════════════════
# BILL-LEVEL FIELDS AND TOTALS
# ══════════════════════════════════════════════════════════════

class TestBillFields:
    @pytest.mark.parametrize("raw,stored", [
        (-5, Decimal("0")),
        ("12.5", Decimal("12.5")),
        (250, Decimal("100")),
    ])
    def test_discount_clamped(self, raw, stored):
        cart = _cart()
        assert cart.set_discount(raw) == stored
        assert cart.discount_percent == stored

    def test_payment_method(self):
        cart = _cart()
        outcome = cart.set_payment_method("NetBanking")
        assert outcome.value is PaymentMethod.NET_BANKING
        assert cart.payment_method is PaymentMethod.NET_BANKING

    def test_invalid_payment_method(self):
        cart = _cart()
        outcome = cart.set_payment_method("Cheque")
        assert outcome.code == ReasonCode.INVALID_PAYMENT_METHOD
        assert cart.payment_method is PaymentMethod.CASH

    def test_default_payment_method_from_settings(self):
        cart = _cart(settings=EngineSettings(default_payment_method="Card"))
        assert cart.payment_method is PaymentMethod.CARD

    def test_set_customer_none_becomes_blank(self):
        cart = _cart()
        cart.set_customer(None, None)
        assert cart.customer_name == ""
        assert cart.customer_phone == ""


class TestTotals:
    def test_empty_cart(self):
        cart = _cart()
        assert cart.subtotal() == 0
        assert cart.totals().total == 0

    def test_subtotal_tracks_lines(self):
        catalog = Catalog([
            Product(1, "Product A", Decimal("500"), 10, "Electronics"),
        ])
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))
        cart.set_quantity("line-1", 2)
        cart.set_discount(10)

        breakdown = cart.totals()

        assert breakdown.subtotal == Decimal("1000")
        assert breakdown.tax_amount == Decimal("180")
        assert breakdown.discount_amount == Decimal("100")
        assert breakdown.total == Decimal("1080")

    def test_explicit_tax_rate(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))
        assert cart.totals(tax_rate="0").total == Decimal("100")


# ══════════════════════════════════════════════════════════════
# SNAPSHOT
# ══════════════════════════════════════════════════════════════

class TestCartSnapshot:
    def test_round_trip(self):
        catalog = _catalog()
        cart = _cart(catalog)
        cart.add_product(catalog.find_by_id(1))
        cart.add_product(catalog.find_by_id(2))
        cart.set_discount("7.5")
        cart.set_customer("Asha", "98450")
        cart.set_payment_method("Card")

        restored = _cart(catalog)
        restored.load(cart.to_dict())

        assert restored.items == cart.items
        assert restored.discount_percent == Decimal("7.5")
        assert restored.customer_name == "Asha"
        assert restored.payment_method is PaymentMethod.CARD

    def test_duplicate_product_lines_rejected(self):
        cart = _cart()
        data = {"items": [
            {"line_id": "a", "product_id": 1, "name": "A", "unit_price": "1", "quantity": 1},
            {"line_id": "b", "product_id": 1, "name": "A", "unit_price": "1", "quantity": 1},
        ]}
        with pytest.raises(ValueError, match="duplicate product"):
            cart.load(data)
        assert cart.is_empty()

    def test_duplicate_line_ids_rejected(self):
        cart = _cart()
        data = {"items": [
            {"line_id": "a", "product_id": 1, "name": "A", "unit_price": "1", "quantity": 1},
            {"line_id": "a", "product_id": 2, "name": "B", "unit_price": "1", "quantity": 1},
        ]}
        with pytest.raises(ValueError, match="duplicate line ids"):
            cart.load(data)
