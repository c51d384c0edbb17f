"""
CartAggregator — line items for one checkout session.

Pure and synchronous: no store access, no locking.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from orderflow._errors import Errors, ValidationError
from orderflow._types import ZERO, Error, Money, Ok, Result
from orderflow.cart._selection import AddonSelectionValidator
from orderflow.cart._types import CartItem
from orderflow.catalog import CatalogView, ProductSize


logger = logging.getLogger(__name__)


class Cart:
    """
    Example:
        cart = Cart(view)
        match cart.add("burger", size="Grande", addons={"bacon"}, quantity=2):
            case Ok(item):
                ...
            case Error(e):
                show(e.message)
    """

    __slots__ = ("_catalog", "_items")

    def __init__(self, catalog: CatalogView, items: Iterable[CartItem] = ()) -> None:
        self._catalog = catalog
        self._items: list[CartItem] = list(items)

    # ═══════════════════════════════════════════════════════════════════════════
    # Mutation
    # ═══════════════════════════════════════════════════════════════════════════

    def add(
        self,
        product_id: str,
        *,
        size: str | None = None,
        addons: Iterable[str] = (),
        quantity: int = 1,
        notes: str | None = None,
    ) -> Result[CartItem, ValidationError]:
        """Price a new line and append it. Nothing changes on error."""
        if quantity < 1:
            return Error(Errors.invalid_quantity(quantity))

        product = self._catalog.product(product_id)
        if product is None:
            return Error(Errors.unknown("product", product_id))
        if not product.is_available:
            return Error(Errors.unavailable("product", product.name))

        chosen: ProductSize | None
        if size is None:
            chosen = product.default_size()
            if chosen is None:
                return Error(Errors.unavailable("size", product.name))
        else:
            chosen = product.size(size)
            if chosen is None:
                return Error(Errors.unknown("size", size))
            if not chosen.is_available:
                return Error(Errors.unavailable("size", size))

        selected = frozenset(addons)
        categories = self._catalog.categories_for(product)
        match AddonSelectionValidator.check(categories, selected):
            case Error(e):
                return Error(e)
            case Ok(_):
                pass

        picked = tuple(
            addon
            for category in categories
            for addon in category.addons
            if addon.id in selected
        )
        unit = chosen.price + sum((a.price for a in picked), ZERO)
        item = CartItem(
            product_id=product.id,
            product_name=product.name,
            size=chosen,
            addons=picked,
            quantity=quantity,
            total_price=unit * quantity,
            notes=notes or None,
        )
        self._items.append(item)
        logger.debug("cart: added %s x%d (%s)", product.name, quantity, item.total_price)
        return Ok(item)

    def remove(self, index: int) -> CartItem | None:
        if not 0 <= index < len(self._items):
            return None
        return self._items.pop(index)

    def increment(self, index: int) -> CartItem | None:
        if not 0 <= index < len(self._items):
            return None
        item = self._items[index]
        unit = item.unit_price
        item.quantity += 1
        item.total_price = unit * item.quantity
        return item

    def decrement(self, index: int) -> CartItem | None:
        """Drop one unit; quantity never goes below 1."""
        if not 0 <= index < len(self._items):
            return None
        item = self._items[index]
        if item.quantity > 1:
            unit = item.unit_price
            item.quantity -= 1
            item.total_price = unit * item.quantity
        return item

    def clear(self) -> None:
        self._items.clear()

    # ═══════════════════════════════════════════════════════════════════════════
    # Derived
    # ═══════════════════════════════════════════════════════════════════════════

    @property
    def items(self) -> tuple[CartItem, ...]:
        return tuple(self._items)

    @property
    def subtotal(self) -> Money:
        return sum((item.total_price for item in self._items), ZERO)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CartItem]:
        return iter(tuple(self._items))


__all__ = ("Cart",)
