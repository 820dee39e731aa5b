from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from .models import NAME_MAX_LENGTH

# ---- Request bodies ----
# Both fields are optional here: missing values must reach the service,
# which reports them as validation errors with its own messages.
# Prices are strict so JSON booleans are not read as 1.0 or 0.0.

class ProductIn(BaseModel):
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    price: Optional[float] = Field(default=None, strict=True, allow_inf_nan=False)

class ProductPatch(BaseModel):
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    price: Optional[float] = Field(default=None, strict=True, allow_inf_nan=False)

    def changes(self) -> dict:
        """Fields the client actually sent; explicit nulls count as absent."""
        return self.model_dump(exclude_unset=True, exclude_none=True)

# ---- JSON:API envelopes ----

class ProductAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    price: float

class ResourceLinks(BaseModel):
    self: str

class ProductResource(BaseModel):
    type: Literal["product"] = "product"
    id: int
    attributes: ProductAttributes
    links: Optional[ResourceLinks] = None

class ProductDocument(BaseModel):
    data: ProductResource

class Pagination(BaseModel):
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)

class CollectionMeta(BaseModel):
    pagination: Pagination

class CollectionLinks(BaseModel):
    self: str
    first: str
    last: str
    prev: Optional[str] = None
    next: Optional[str] = None

class ProductCollectionDocument(BaseModel):
    data: List[ProductResource]
    meta: CollectionMeta
    links: CollectionLinks

# ---- Errors ----

class ErrorSource(BaseModel):
    pointer: str

class ErrorObject(BaseModel):
    status: str
    title: str
    detail: str
    source: ErrorSource

class ErrorDocument(BaseModel):
    errors: List[ErrorObject]
