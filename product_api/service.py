"""
Product service: validates input, drives the repository, projects records
into JSON:API documents and classifies failures.

Only ValidationError and NotFoundError reach callers as-is. Anything else
raised while an operation runs becomes an InternalError with a generic
message; the original exception is logged with its traceback and chained.
"""

import logging
from typing import Optional

from .errors import InternalError, NotFoundError, ServiceError, ValidationError
from .models import Product
from .pagination import (
    MAX_ROW_OFFSET,
    build_collection_links,
    compute_last_page,
    normalize_pagination,
)
from .repository import ProductRepository
from .schemas import (
    CollectionLinks,
    CollectionMeta,
    Pagination,
    ProductAttributes,
    ProductCollectionDocument,
    ProductDocument,
    ProductIn,
    ProductPatch,
    ProductResource,
    ResourceLinks,
)


class ProductService:
    def __init__(
        self,
        repository: ProductRepository,
        logger: Optional[logging.Logger] = None,
        base_path: str = "/products",
    ):
        self.repository = repository
        self.logger = logger or logging.getLogger(__name__)
        self.base_path = base_path.rstrip("/")

    # ---------- Projection ----------
    def _resource(self, product: Product, with_links: bool = True) -> ProductResource:
        links = ResourceLinks(self=f"{self.base_path}/{product.id}") if with_links else None
        return ProductResource(
            id=product.id,
            attributes=ProductAttributes.model_validate(product),
            links=links,
        )

    # ---------- Failure helpers ----------
    def _reject(self, operation: str, exc: ServiceError) -> ServiceError:
        self.logger.warning("%s product rejected: %s", operation, exc.message)
        return exc

    def _internal(self, operation: str, exc: Exception, message: str) -> InternalError:
        self.logger.error("%s product failed: %s", operation, exc, exc_info=exc)
        return InternalError(message)

    def _not_found(self, operation: str, product_id: int) -> ServiceError:
        return self._reject(operation, NotFoundError(f"resource with id {product_id} not found"))

    # ---------- Operations ----------
    def create(self, payload: ProductIn) -> ProductDocument:
        self.logger.info("create product attempt: name=%r price=%r", payload.name, payload.price)
        if not isinstance(payload.name, str) or not payload.name.strip() or payload.price is None:
            raise self._reject("create", ValidationError("name and price are required"))
        if payload.price < 0:
            raise self._reject("create", ValidationError("price must be non-negative"))

        try:
            product = self.repository.create({"name": payload.name, "price": payload.price})
            saved = self.repository.save(product)
        except ServiceError:
            raise
        except Exception as exc:
            raise self._internal("create", exc, "internal error while creating the product") from exc

        self.logger.info("create product succeeded: id=%s", saved.id)
        return ProductDocument(data=self._resource(saved))

    def find_all(self, page: Optional[int] = None, limit: Optional[int] = None) -> ProductCollectionDocument:
        request = normalize_pagination(page, limit)
        self.logger.info("find_all products attempt: page=%s limit=%s", request.page, request.limit)
        try:
            if request.offset > MAX_ROW_OFFSET:
                # No store can hold rows that far out
                raise self._reject("find_all", NotFoundError("no resources for this page"))
            products, total = self.repository.find_and_count(
                skip=request.offset, take=min(request.limit, MAX_ROW_OFFSET)
            )
            if not products and request.page > 1:
                raise self._reject("find_all", NotFoundError("no resources for this page"))
        except ServiceError:
            raise
        except Exception as exc:
            raise self._internal("find_all", exc, "internal error while listing products") from exc

        last_page = compute_last_page(total, request.limit)
        self.logger.info(
            "find_all products succeeded: page=%s returned=%s total=%s",
            request.page, len(products), total,
        )
        return ProductCollectionDocument(
            data=[self._resource(p) for p in products],
            meta=CollectionMeta(
                pagination=Pagination(page=request.page, limit=request.limit, total=total)
            ),
            links=CollectionLinks(**build_collection_links(self.base_path, request, last_page)),
        )

    def find_one(self, product_id: int) -> ProductDocument:
        self.logger.info("find_one product attempt: id=%s", product_id)
        try:
            product = self.repository.find_one(product_id)
            if product is None:
                raise self._not_found("find_one", product_id)
        except ServiceError:
            raise
        except Exception as exc:
            raise self._internal(
                "find_one", exc, f"internal error while fetching product {product_id}"
            ) from exc

        self.logger.info("find_one product succeeded: id=%s", product_id)
        return ProductDocument(data=self._resource(product))

    def update(self, product_id: int, patch: ProductPatch) -> ProductDocument:
        changes = patch.changes()
        self.logger.info("update product attempt: id=%s changes=%r", product_id, changes)
        try:
            product = self.repository.find_one(product_id)
            if product is None:
                raise self._not_found("update", product_id)

            merged = {"name": product.name, "price": product.price, **changes}
            if merged["price"] < 0:
                raise self._reject("update", ValidationError("price must be non-negative"))
            if not isinstance(merged["name"], str) or not merged["name"].strip():
                raise self._reject("update", ValidationError("name must be a non-empty string"))

            for field, value in changes.items():
                setattr(product, field, value)
            saved = self.repository.save(product)
        except ServiceError:
            raise
        except Exception as exc:
            raise self._internal(
                "update", exc, f"internal error while updating product {product_id}"
            ) from exc

        self.logger.info("update product succeeded: id=%s", product_id)
        return ProductDocument(data=self._resource(saved))

    def remove(self, product_id: int) -> ProductDocument:
        self.logger.info("remove product attempt: id=%s", product_id)
        try:
            product = self.repository.find_one(product_id)
            if product is None:
                raise self._not_found("remove", product_id)

            # Snapshot before the row goes away; a deleted resource has no self link
            document = ProductDocument(data=self._resource(product, with_links=False))
            result = self.repository.delete(product_id)
            if result.affected == 0:
                raise self._not_found("remove", product_id)
        except ServiceError:
            raise
        except Exception as exc:
            raise self._internal(
                "remove", exc, f"internal error while removing product {product_id}"
            ) from exc

        self.logger.info("remove product succeeded: id=%s", product_id)
        return document
