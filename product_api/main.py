# product_api/main.py
import secrets
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from .config import Settings, get_settings
from .database import ProductStore
from .errors import ApiError, error_response
from .logic import (
    create_product_logic,
    delete_product_logic,
    get_product_logic,
    list_products_logic,
    patch_product_logic,
    product_stats_logic,
    search_products_logic,
    update_product_logic,
)
from .logs import configure_logging
from .models import Product, ProductPage

API_KEY_HEADER = "x-api-key"
PUBLIC_PATHS = ("/", "/hello")
INVALID_JSON = "Request body must be valid JSON."


# ---------------------------
# Middleware
# ---------------------------
class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Reject every non-public request whose x-api-key differs from the secret."""

    def __init__(self, app, api_key: Optional[str], public_paths: Iterable[str] = PUBLIC_PATHS):
        super().__init__(app)
        self.api_key = api_key or ""
        self.public_paths = frozenset(public_paths)

    def is_authorized(self, supplied: str) -> bool:
        # with no configured secret nothing matches
        if not self.api_key or not supplied:
            return False
        return secrets.compare_digest(supplied.encode(), self.api_key.encode())

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.public_paths:
            return await call_next(request)
        if not self.is_authorized(request.headers.get(API_KEY_HEADER, "")):
            logger.warning("Rejected {} {}: bad or missing API key", request.method, request.url.path)
            return error_response(ApiError.unauthorized())
        return await call_next(request)


async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    start = time.perf_counter()

    with logger.contextualize(request_id=request_id):
        logger.info("{} {}", request.method, request.url.path)
        try:
            response = await call_next(request)
        except Exception as exc:
            # rendered here so the 500 still carries the request id
            response = error_response(exc)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "{} {} -> {} ({:.1f} ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )

    response.headers.setdefault("X-Request-ID", request_id)
    return response


# ---------------------------
# Exception handlers
# ---------------------------
async def api_error_handler(request: Request, exc: ApiError):
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        return error_response(ApiError.validation(INVALID_JSON))
    message = errors[0].get("msg") if errors else None
    return error_response(ApiError.validation(message))


async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return error_response(ApiError.not_found("Route not found"))
    return await http_exception_handler(request, exc)


async def unexpected_error_handler(request: Request, exc: Exception):
    return error_response(exc)


# ---------------------------
# Routes
# ---------------------------
def get_store(request: Request) -> ProductStore:
    return request.app.state.store


public = APIRouter()
router = APIRouter(prefix="/api/products", tags=["products"])


@public.get("/", response_class=PlainTextResponse)
def root():
    return "Welcome to the Product API! Go to /api/products to see all products."


@public.get("/hello", response_class=PlainTextResponse)
def hello():
    return "Hello world!"


@router.get("", response_model=ProductPage)
def list_products(
    category: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    store: ProductStore = Depends(get_store),
):
    return list_products_logic(store, category=category, page=page, limit=limit)


# search and stats must be registered before /{product_id}
@router.get("/search", response_model=List[Product])
def search_products(q: Optional[str] = None, store: ProductStore = Depends(get_store)):
    return search_products_logic(store, q)


@router.get("/stats", response_model=Dict[str, int])
def product_stats(store: ProductStore = Depends(get_store)):
    return product_stats_logic(store)


@router.get("/{product_id}", response_model=Product)
def get_product(product_id: str, store: ProductStore = Depends(get_store)):
    return get_product_logic(store, product_id)


@router.post("", response_model=Product, status_code=201)
def create_product(payload: Any = Body(None), store: ProductStore = Depends(get_store)):
    return create_product_logic(store, payload)


@router.put("/{product_id}", response_model=Product)
def update_product(product_id: str, payload: Any = Body(None), store: ProductStore = Depends(get_store)):
    return update_product_logic(store, product_id, payload)


@router.patch("/{product_id}", response_model=Product)
def patch_product(product_id: str, payload: Any = Body(None), store: ProductStore = Depends(get_store)):
    return patch_product_logic(store, product_id, payload)


@router.delete("/{product_id}", response_model=Product)
def delete_product(product_id: str, store: ProductStore = Depends(get_store)):
    return delete_product_logic(store, product_id)


# ---------------------------
# App factory
# ---------------------------
def create_app(settings: Optional[Settings] = None, store: Optional[ProductStore] = None) -> FastAPI:
    settings = settings or get_settings()

    if not settings.api_key:
        logger.warning("API_KEY is not set; every /api request will be rejected")

    app = FastAPI(title="Product API (in-memory)")
    app.state.settings = settings
    app.state.store = store if store is not None else ProductStore.seeded()

    # last added runs first: logging -> CORS -> API key -> routes
    app.add_middleware(ApiKeyMiddleware, api_key=settings.api_key)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(BaseHTTPMiddleware, dispatch=log_requests)

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, not_found_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(public)
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Server is running on http://localhost:{}", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
