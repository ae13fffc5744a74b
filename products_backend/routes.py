"""
HTTP routes for the products backend.

Each handler makes a single adapter call; adapter errors propagate to the
exception handlers installed in ``products_backend.app``.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from products_backend.auth import AuthClient
from products_backend.dependencies import (
    Backends,
    get_auth_client,
    get_backends,
    get_store_client,
)
from products_backend.schemas import (
    Credentials,
    HealthResponse,
    ProductCreate,
    ProductUpdate,
)
from products_backend.store import StoreClient

router = APIRouter()

PRODUCTS_TABLE = "products"


@router.post("/signup")
def signup(payload: Credentials, auth: AuthClient = Depends(get_auth_client)):
    data = auth.sign_up(payload.email, payload.password)
    return {"data": data}


@router.post("/login")
def login(payload: Credentials, auth: AuthClient = Depends(get_auth_client)):
    data = auth.sign_in(payload.email, payload.password)
    return {"data": data}


@router.get("/products")
def list_products(store: StoreClient = Depends(get_store_client)):
    return store.select_all(PRODUCTS_TABLE)


@router.post("/products", status_code=201)
def create_product(
    payload: ProductCreate, store: StoreClient = Depends(get_store_client)
):
    return store.insert_many(PRODUCTS_TABLE, [payload.model_dump()])


@router.put("/products/{product_id}")
def update_product(
    product_id: str,
    payload: ProductUpdate,
    store: StoreClient = Depends(get_store_client),
):
    return store.update_where(PRODUCTS_TABLE, "id", product_id, payload.as_patch())


@router.delete("/products/{product_id}")
def delete_product(product_id: str, store: StoreClient = Depends(get_store_client)):
    return store.delete_where(PRODUCTS_TABLE, "id", product_id)


@router.get("/health", response_model=HealthResponse)
def health(backends: Backends = Depends(get_backends)):
    return HealthResponse(status="ok", mode=backends.mode)
