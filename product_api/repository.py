from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from .models import Product


@dataclass(frozen=True)
class DeleteResult:
    affected: int


class ProductRepository(Protocol):
    """Persistence operations the product service relies on.

    Any of them may raise; the service treats every storage error the same way.
    """

    def create(self, data: dict) -> Product:
        """Build an unsaved Product. No I/O."""
        ...

    def save(self, product: Product) -> Product:
        """Insert or update; assigns ``id`` on first save."""
        ...

    def find_one(self, product_id: int) -> Optional[Product]:
        ...

    def find_and_count(self, skip: int, take: int) -> Tuple[List[Product], int]:
        ...

    def delete(self, product_id: int) -> DeleteResult:
        ...


class SqlProductRepository:
    """SQLAlchemy implementation. Commit/rollback belong to the session owner."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, data: dict) -> Product:
        return Product(**data)

    def save(self, product: Product) -> Product:
        self.session.add(product)
        self.session.flush()
        self.session.refresh(product)
        return product

    def find_one(self, product_id: int) -> Optional[Product]:
        return self.session.get(Product, product_id)

    def find_and_count(self, skip: int, take: int) -> Tuple[List[Product], int]:
        total = self.session.execute(select(func.count()).select_from(Product)).scalar_one()
        rows = self.session.execute(
            select(Product).order_by(Product.id).offset(skip).limit(take)
        ).scalars().all()
        return list(rows), total

    def delete(self, product_id: int) -> DeleteResult:
        result = self.session.execute(delete(Product).where(Product.id == product_id))
        return DeleteResult(affected=result.rowcount)
