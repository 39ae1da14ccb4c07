from typing import List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pymongo.errors import PyMongoError

import cart
import catalog
import database
import users
from config import settings
from database import serialize
from errors import ProductNotFound, StoreError
from logger import get_logger
from schemas import (
    AddToCartRequest,
    Cart,
    CartRequest,
    DeleteRequest,
    ProductCreate,
    ProductUpdate,
    UserCreate,
    UserLogin,
)

logger = get_logger("api")

app = FastAPI(title="Storefront API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Errors are answered as plain text with the raw message

@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}"
        for err in exc.errors()
    )
    return PlainTextResponse(message, status_code=400)


@app.exception_handler(PyMongoError)
async def database_error_handler(request: Request, exc: PyMongoError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return PlainTextResponse(str(exc), status_code=400)


def _many(docs: List[dict]) -> List[dict]:
    return [serialize(d) for d in docs]


def _user(doc: dict) -> dict:
    out = serialize(doc)
    out["cart"] = Cart(**(doc.get("cart") or {})).rendered()
    return out


# Health
@app.get("/health")
def health():
    return {"backend": "ok", "db": database.ping()}


# Users
@app.post("/users/signup", status_code=201)
def signup(payload: UserCreate):
    return _user(users.register(payload))


@app.post("/users/login")
def login(creds: UserLogin):
    return _user(users.login(creds))


@app.get("/users/{user_id}")
def get_user(user_id: str):
    return _user(users.get_user(user_id))


# Products
@app.get("/products")
def list_products():
    return _many(catalog.list_products())


@app.post("/products", status_code=201)
def create_product(payload: ProductCreate):
    return _many(catalog.create_product(payload))


@app.get("/products/category/{category}")
def list_by_category(category: str):
    return _many(catalog.list_by_category(category))


@app.get("/products/search/{key}")
def search_products(key: str):
    return _many(catalog.search(key))


# Cart
@app.post("/products/add-to-cart")
def add_to_cart(payload: AddToCartRequest):
    try:
        user = cart.add_to_cart(payload.user_id, payload.product_id, payload.price, payload.quantity)
    except ProductNotFound as e:
        return PlainTextResponse(e.message, status_code=404)
    return _user(user)


@app.post("/products/increase-cart")
def increase_cart(payload: CartRequest):
    return _user(cart.increase_cart_item(payload.user_id, payload.product_id, payload.price))


@app.post("/products/decrease-cart")
def decrease_cart(payload: CartRequest):
    return _user(cart.decrease_cart_item(payload.user_id, payload.product_id, payload.price))


@app.post("/products/remove-from-cart")
def remove_from_cart(payload: CartRequest):
    return _user(cart.remove_from_cart(payload.user_id, payload.product_id, payload.price))


@app.get("/products/{product_id}")
def get_product(product_id: str):
    found = catalog.get_with_similar(product_id)
    return {"product": serialize(found["product"]), "similar": _many(found["similar"])}


@app.patch("/products/{product_id}")
def update_product(product_id: str, payload: ProductUpdate):
    return _many(catalog.update_product(product_id, payload))


@app.delete("/products/{product_id}")
def delete_product(product_id: str, payload: DeleteRequest):
    grant = catalog.authorize_admin(payload.user_id)
    return _many(catalog.delete_product(product_id, grant))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
