"""Fake repositories for service tests."""

from typing import Dict, List, Optional, Set, Tuple

from product_api.models import Product
from product_api.repository import DeleteResult


def _copy(product: Product) -> Product:
    return Product(id=product.id, name=product.name, price=product.price)


class InMemoryProductRepository:
    """Dict-backed repository. Hands out copies so callers can't mutate stored rows."""

    def __init__(self) -> None:
        self.rows: Dict[int, Product] = {}
        self.next_id = 1
        self.saves = 0

    def create(self, data: dict) -> Product:
        return Product(**data)

    def save(self, product: Product) -> Product:
        self.saves += 1
        if product.id is None:
            product.id = self.next_id
            self.next_id += 1
        self.rows[product.id] = _copy(product)
        return product

    def find_one(self, product_id: int) -> Optional[Product]:
        row = self.rows.get(product_id)
        return _copy(row) if row is not None else None

    def find_and_count(self, skip: int, take: int) -> Tuple[List[Product], int]:
        ordered = [self.rows[k] for k in sorted(self.rows)]
        return [_copy(p) for p in ordered[skip:skip + take]], len(ordered)

    def delete(self, product_id: int) -> DeleteResult:
        removed = self.rows.pop(product_id, None)
        return DeleteResult(affected=1 if removed is not None else 0)


class FailingProductRepository(InMemoryProductRepository):
    """Raises a storage error from the named operations."""

    def __init__(self, fail_on: Set[str]) -> None:
        super().__init__()
        self.fail_on = fail_on

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise RuntimeError(f"connection reset during {operation}")

    def save(self, product: Product) -> Product:
        self._maybe_fail("save")
        return super().save(product)

    def find_one(self, product_id: int) -> Optional[Product]:
        self._maybe_fail("find_one")
        return super().find_one(product_id)

    def find_and_count(self, skip: int, take: int) -> Tuple[List[Product], int]:
        self._maybe_fail("find_and_count")
        return super().find_and_count(skip, take)

    def delete(self, product_id: int) -> DeleteResult:
        self._maybe_fail("delete")
        return super().delete(product_id)


class RacingDeleteRepository(InMemoryProductRepository):
    """Simulates another request deleting the row between lookup and delete."""

    def delete(self, product_id: int) -> DeleteResult:
        return DeleteResult(affected=0)


def seed(repository: InMemoryProductRepository, count: int) -> List[Product]:
    return [
        repository.save(repository.create({"name": f"product-{i}", "price": float(i)}))
        for i in range(1, count + 1)
    ]
