import uuid
from typing import Any, Dict, List, Optional

from loguru import logger

from .core import validate_product, validate_product_patch
from .database import ProductStore
from .errors import ApiError
from .models import Product, ProductPage

# This file contains the core logic for all product endpoints.

PRODUCT_NOT_FOUND = "Product not found"
SEARCH_QUERY_REQUIRED = "Search query (q) is required."


def _positive_int(raw: Optional[str]) -> Optional[int]:
    try:
        value = int(raw) if raw is not None else None
    except ValueError:
        return None
    if value is None or value < 1:
        return None
    return value


def _require(store: ProductStore, product_id: str) -> Product:
    product = store.get(product_id)
    if product is None:
        raise ApiError.not_found(PRODUCT_NOT_FOUND)
    return product


# Product queries
def list_products_logic(
    store: ProductStore,
    category: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
) -> ProductPage:
    products = store.by_category(category) if category else store.all()

    # page and limit fall back to "first page, everything" when absent or junk
    page_no = _positive_int(page) or 1
    size = _positive_int(limit) or len(products)
    start = (page_no - 1) * size

    return ProductPage(
        page=page_no,
        limit=size,
        total=len(products),
        products=products[start:start + size],
    )


def get_product_logic(store: ProductStore, product_id: str) -> Product:
    return _require(store, product_id)


def search_products_logic(store: ProductStore, q: Optional[str]) -> List[Product]:
    if not q or not q.strip():
        raise ApiError.validation(SEARCH_QUERY_REQUIRED)
    return store.search(q)


def product_stats_logic(store: ProductStore) -> Dict[str, int]:
    return store.category_counts()


# Product mutations
def create_product_logic(store: ProductStore, payload: Any) -> Product:
    data = validate_product(payload)
    product = Product(id=str(uuid.uuid4()), **data.model_dump())
    store.add(product)
    logger.info("Created product {} ({})", product.id, product.name)
    return product


def update_product_logic(store: ProductStore, product_id: str, payload: Any) -> Product:
    product = _require(store, product_id)
    data = validate_product(payload)
    for field, value in data.model_dump().items():
        setattr(product, field, value)
    logger.info("Updated product {}", product_id)
    return product


def patch_product_logic(store: ProductStore, product_id: str, payload: Any) -> Product:
    product = _require(store, product_id)
    patch = validate_product_patch(payload)
    for field, value in patch.changes().items():
        setattr(product, field, value)
    logger.info("Patched product {}: {}", product_id, sorted(patch.changes()))
    return product


def delete_product_logic(store: ProductStore, product_id: str) -> Product:
    removed = store.remove(product_id)
    if removed is None:
        raise ApiError.not_found(PRODUCT_NOT_FOUND)
    logger.info("Deleted product {}", product_id)
    return removed
