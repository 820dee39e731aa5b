import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, APIRouter, Depends, Request, Response, status
from fastapi.responses import PlainTextResponse
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.orm import Session

from .db import get_session, init_db
from .errors import register_error_handlers
from .logger import configure_logging
from .repository import SqlProductRepository
from .schemas import (
    ErrorDocument,
    ProductCollectionDocument,
    ProductDocument,
    ProductIn,
    ProductPatch,
)
from .service import ProductService

APP_NAME = "products"

# Optional prefix for routes. Leave empty ("") if your Gateway strips it.
API_PREFIX = os.getenv("API_PREFIX", "").strip()
if API_PREFIX and not API_PREFIX.startswith("/"):
    API_PREFIX = "/" + API_PREFIX
API_PREFIX = API_PREFIX.rstrip("/")

logger = logging.getLogger(__name__)

# ---- Startup: logging, schema + tables (idempotent) ----
@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    init_db()
    yield

app = FastAPI(title="Product API", version="1.0.0", docs_url="/api/docs", lifespan=lifespan)
router = APIRouter(prefix=API_PREFIX, tags=["Products"])
register_error_handlers(app, APP_NAME)

# ---- Prometheus metrics ----
REQS = Counter("http_requests_total", "Total HTTP requests", ["service", "path", "method", "status"])
LAT  = Histogram("http_request_duration_seconds", "Request latency", ["service", "path", "method"])

@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start = time.time()
    client = request.client.host if request.client else "-"
    logger.info("Request: %s %s from %s", request.method, request.url.path, client)
    response = await call_next(request)
    elapsed = time.time() - start
    REQS.labels(APP_NAME, request.url.path, request.method, response.status_code).inc()
    LAT.labels(APP_NAME, request.url.path, request.method).observe(elapsed)
    logger.info(
        "Response: %s %s status=%s duration=%.1fms",
        request.method, request.url.path, response.status_code, elapsed * 1000,
    )
    return response

@app.get("/health", response_class=PlainTextResponse)
def health():
    return "ok"

@app.get("/metrics")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

def get_product_service(session: Session = Depends(get_session)) -> ProductService:
    return ProductService(SqlProductRepository(session), base_path=f"{API_PREFIX}/products")

ERRORS = {
    400: {"model": ErrorDocument, "description": "Invalid input"},
    404: {"model": ErrorDocument, "description": "Product or page not found"},
    500: {"model": ErrorDocument, "description": "Internal error"},
}

@router.post("/products", response_model=ProductDocument, status_code=status.HTTP_201_CREATED, responses=ERRORS)
def create_product(payload: ProductIn, service: ProductService = Depends(get_product_service)):
    return service.create(payload)

@router.get("/products", response_model=ProductCollectionDocument, responses=ERRORS)
def list_products(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    service: ProductService = Depends(get_product_service),
):
    return service.find_all(page, limit)

@router.get("/products/{pid}", response_model=ProductDocument, responses=ERRORS)
def get_product(pid: int, service: ProductService = Depends(get_product_service)):
    return service.find_one(pid)

@router.patch("/products/{pid}", response_model=ProductDocument, responses=ERRORS)
def update_product(pid: int, payload: ProductPatch, service: ProductService = Depends(get_product_service)):
    return service.update(pid, payload)

# Deleted resources carry no links, so drop the null field from the body
@router.delete("/products/{pid}", response_model=ProductDocument, response_model_exclude_none=True, responses=ERRORS)
def delete_product(pid: int, service: ProductService = Depends(get_product_service)):
    return service.remove(pid)

app.include_router(router)
