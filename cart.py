"""
Cart service.

Each operation mutates the user's embedded cart and the product's stock
counter together: the cart is written first, then the stock. When the stock
write does not go through, the previous cart is written back.
"""
from typing import Callable, Tuple

import database
from catalog import adjust_stock
from errors import InsufficientStock, NotFound, NotInCart, OutOfStock, ProductNotFound
from logger import get_logger
from schemas import Cart

logger = get_logger("cart")

Check = Callable[[dict, Cart, str], None]
Apply = Callable[[Cart, str], int]


def _load(user_id: str, product_id: str) -> Tuple[dict, dict, Cart]:
    user = database.get_document("user", user_id)
    product = database.get_document("product", product_id)
    if product is None:
        raise ProductNotFound()
    if user is None:
        raise NotFound("User not found")
    return user, product, Cart(**(user.get("cart") or {}))


def _commit(user: dict, key: str, before: Cart, after: Cart, stock_delta: int) -> dict:
    user_id = str(user["_id"])
    database.update_document("user", user_id, {"cart": after.model_dump()})
    try:
        applied = adjust_stock(key, stock_delta)
    except Exception:
        logger.warning(f"Stock write failed for {key}; restoring cart of {user_id}")
        database.update_document("user", user_id, {"cart": before.model_dump()})
        raise
    if not applied:
        logger.warning(f"Stock for {key} changed concurrently; restoring cart of {user_id}")
        database.update_document("user", user_id, {"cart": before.model_dump()})
        # a restock only misses when the product itself is gone
        if stock_delta > 0:
            raise ProductNotFound()
        raise InsufficientStock("Insufficient stock")
    return database.get_document("user", user_id)


def _mutate(user_id: str, product_id: str, check: Check, apply: Apply, action: str) -> dict:
    user, product, cart = _load(user_id, product_id)
    key = str(product["_id"])
    try:
        check(product, cart, key)
    except (InsufficientStock, OutOfStock, NotInCart) as e:
        logger.info(f"{action} rejected for user {user_id}, product {key}: {e}")
        raise
    before = cart.model_copy(deep=True)
    stock_delta = apply(cart, key)
    updated = _commit(user, key, before, cart, stock_delta)
    logger.info(
        f"{action}: user {user_id} product {key} stock {stock_delta:+d} "
        f"cart count={cart.count} total={cart.total}"
    )
    return updated


def _require_in_cart(product: dict, cart: Cart, key: str) -> None:
    if cart.quantity(key) < 1:
        raise NotInCart("Product not found in cart")


def add_to_cart(user_id: str, product_id: str, price: float, quantity: int) -> dict:
    def check(product: dict, cart: Cart, key: str) -> None:
        if quantity > product.get("stocks", 0):
            raise InsufficientStock("Insufficient stock")

    def apply(cart: Cart, key: str) -> int:
        cart.add(key, quantity, price)
        return -quantity

    return _mutate(user_id, product_id, check, apply, "add-to-cart")


def increase_cart_item(user_id: str, product_id: str, price: float) -> dict:
    # increasing needs an existing entry; add-to-cart creates one
    def check(product: dict, cart: Cart, key: str) -> None:
        if product.get("stocks", 0) < 1:
            raise OutOfStock("No stock available")
        _require_in_cart(product, cart, key)

    def apply(cart: Cart, key: str) -> int:
        cart.add(key, 1, price)
        return -1

    return _mutate(user_id, product_id, check, apply, "increase-cart")


def decrease_cart_item(user_id: str, product_id: str, price: float) -> dict:
    def apply(cart: Cart, key: str) -> int:
        cart.take(key, 1, price)
        return 1

    return _mutate(user_id, product_id, _require_in_cart, apply, "decrease-cart")


def remove_from_cart(user_id: str, product_id: str, price: float) -> dict:
    def apply(cart: Cart, key: str) -> int:
        quantity = cart.quantity(key)
        cart.take(key, quantity, price)
        return quantity

    return _mutate(user_id, product_id, _require_in_cart, apply, "remove-from-cart")
