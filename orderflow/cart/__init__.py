"""
Cart — line items, addon rules, subtotal.

    from orderflow import cart

    c = cart.Cart(view)
    c.add("acai", size="500ml", addons={"granola", "banana"})
    c.subtotal
"""

from orderflow.cart._types import CartItem
from orderflow.cart._selection import AddonSelectionValidator
from orderflow.cart._cart import Cart

__all__ = (
    "CartItem",
    "AddonSelectionValidator",
    "Cart",
)
