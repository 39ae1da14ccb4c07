"""
Catalog service: read/write access to products.

Every write returns the refreshed product list, newest first.
"""
import re
from dataclasses import dataclass
from typing import List

from pymongo import ReturnDocument

import database
from errors import NotFound, PermissionDenied, ProductNotFound
from logger import get_logger
from schemas import Product, ProductCreate, ProductUpdate

logger = get_logger("catalog")

COLLECTION = "product"
SIMILAR_LIMIT = 5


@dataclass(frozen=True)
class AdminGrant:
    """Proof that `user_id` was checked to be an admin."""
    user_id: str


def authorize_admin(user_id: str) -> AdminGrant:
    user = database.get_document("user", user_id)
    if user is None:
        raise NotFound("User not found")
    if not user.get("is_admin"):
        logger.info(f"Rejected catalog delete by non-admin {user_id}")
        raise PermissionDenied("You don't have permission")
    return AdminGrant(user_id=str(user["_id"]))


def list_products() -> List[dict]:
    return database.get_documents(COLLECTION, newest_first=True)


def get_product(product_id: str) -> dict:
    product = database.get_document(COLLECTION, product_id)
    if product is None:
        raise ProductNotFound()
    return product


def create_product(payload: ProductCreate) -> List[dict]:
    product = Product(**payload.model_dump())
    product_id = database.create_document(COLLECTION, product)
    logger.info(f"Created product {product_id} ({product.name})")
    return list_products()


def update_product(product_id: str, payload: ProductUpdate) -> List[dict]:
    fields = payload.model_dump(exclude_none=True)
    if not fields:
        get_product(product_id)
        return list_products()
    if not database.update_document(COLLECTION, product_id, fields):
        raise ProductNotFound()
    logger.info(f"Updated product {product_id}: {sorted(fields)}")
    return list_products()


def delete_product(product_id: str, grant: AdminGrant) -> List[dict]:
    if database.delete_document(COLLECTION, product_id):
        logger.info(f"Product {product_id} deleted by admin {grant.user_id}")
    return list_products()


def get_with_similar(product_id: str) -> dict:
    product = get_product(product_id)
    similar = database.get_documents(
        COLLECTION,
        {"category": product["category"], "_id": {"$ne": product["_id"]}},
        limit=SIMILAR_LIMIT,
    )
    return {"product": product, "similar": similar}


def list_by_category(category: str) -> List[dict]:
    if category == "all":
        return list_products()
    return database.get_documents(COLLECTION, {"category": category}, newest_first=True)


def search(key: str) -> List[dict]:
    pattern = {"$regex": re.escape(key), "$options": "i"}
    return database.get_documents(
        COLLECTION,
        {"$or": [{"name": pattern}, {"description": pattern}, {"category": pattern}]},
    )


def adjust_stock(product_id: str, delta: int) -> bool:
    """Apply `delta` to the product's stocks.

    A decrement only applies while at least `-delta` units remain, so two
    concurrent reservations cannot drive stocks below zero. Returns False
    when nothing was updated.
    """
    oid = database.to_object_id(product_id)
    if oid is None:
        return False
    query = {"_id": oid}
    if delta < 0:
        query["stocks"] = {"$gte": -delta}
    updated = database.get_collection(COLLECTION).find_one_and_update(
        query,
        {"$inc": {"stocks": delta}},
        return_document=ReturnDocument.AFTER,
    )
    return updated is not None
