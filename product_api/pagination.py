"""Page/limit normalization and collection link construction for list endpoints."""

from dataclasses import dataclass
from typing import Dict, Optional

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
# Largest OFFSET/LIMIT a signed 64-bit storage integer can carry
MAX_ROW_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def normalize_pagination(page: Optional[int] = None, limit: Optional[int] = None) -> PageRequest:
    """Coerce missing, zero or negative values to the defaults."""
    if page is None or page <= 0:
        page = DEFAULT_PAGE
    if limit is None or limit <= 0:
        limit = DEFAULT_LIMIT
    return PageRequest(page=page, limit=limit)


def compute_last_page(total: int, limit: int) -> int:
    """Ceiling of total / limit, never below 1 so an empty collection still has a last page."""
    if total <= 0:
        return 1
    return ((total - 1) // limit) + 1


def page_link(base_path: str, page: int, limit: int) -> str:
    return f"{base_path}?page={page}&limit={limit}"


def build_collection_links(base_path: str, request: PageRequest, last_page: int) -> Dict[str, Optional[str]]:
    page, limit = request.page, request.limit
    return {
        "self": page_link(base_path, page, limit),
        "first": page_link(base_path, 1, limit),
        "last": page_link(base_path, last_page, limit),
        "prev": page_link(base_path, page - 1, limit) if page > 1 else None,
        "next": page_link(base_path, page + 1, limit) if page < last_page else None,
    }
