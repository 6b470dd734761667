"""Catalog store: cached product listings and the create/update/delete calls behind them.

The whole catalog is fetched at once and replaced wholesale after every
mutation; there is no pagination and no incremental merge. Filtering and
sorting run over the cached snapshot only.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

import structlog

from gabonshop.core.clock import now_ms
from gabonshop.domain.images import normalize_images
from gabonshop.domain.repositories.gateway import PRODUCTS, DocumentGateway
from gabonshop.domain.schemas.auth import CurrentUser
from gabonshop.domain.schemas.product import (
    ALL_CATEGORIES,
    ProductCreate,
    ProductQuery,
    ProductRead,
    ProductUpdate,
    SortKey,
)

logger = structlog.get_logger(__name__)


def to_product(doc: Dict[str, Any]) -> ProductRead:
    """Build the cached view of a raw product document."""
    images = normalize_images(doc)
    return ProductRead(
        id=doc["id"],
        title=doc.get("title") or "",
        description=doc.get("description") or "",
        price=doc.get("price"),
        category=doc.get("category"),
        location=doc.get("location"),
        images=images,
        cover_image=images[0] if images else None,
        owner_id=doc.get("owner_id"),
        owner_name=doc.get("owner_name"),
        owner_phone=doc.get("owner_phone"),
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


def _matches(product: ProductRead, term: str, search_owner: bool) -> bool:
    fields = [product.title, product.description]
    if search_owner:
        fields.append(product.owner_name or "")
    return any(term in (value or "").lower() for value in fields)


def filter_and_sort(products: Sequence[ProductRead], query: ProductQuery) -> List[ProductRead]:
    """Search, category filter and sort over a product sequence.

    ``sorted`` is stable: products with equal sort keys keep the order they
    had in ``products``.
    """
    result = list(products)

    if query.search and query.search.strip():
        term = query.search.lower()
        result = [p for p in result if _matches(p, term, query.search_owner)]

    if query.category and query.category not in ALL_CATEGORIES:
        result = [p for p in result if p.category == query.category]

    if query.sort == SortKey.OLDEST:
        return sorted(result, key=lambda p: p.created_at or 0)
    if query.sort == SortKey.PRICE_ASC:
        return sorted(result, key=lambda p: p.price or 0)
    if query.sort == SortKey.PRICE_DESC:
        return sorted(result, key=lambda p: p.price or 0, reverse=True)
    return sorted(result, key=lambda p: p.created_at or 0, reverse=True)


class CatalogStore:
    def __init__(self, gateway: DocumentGateway, clock: Callable[[], int] = now_ms):
        self.gateway = gateway
        self.clock = clock
        self.products: List[ProductRead] = []

    # Lifecycle

    def init(self) -> None:
        self.load_all()

    def refresh(self) -> None:
        self.load_all()

    def dispose(self) -> None:
        self.products = []

    # Gateway-backed operations

    def load_all(self) -> List[ProductRead]:
        docs = self.gateway.list_documents(PRODUCTS, order_by="created_at", descending=True)
        self.products = [to_product(doc) for doc in docs]
        logger.debug("Catalog loaded", count=len(self.products))
        return self.products

    def create(self, data: ProductCreate, owner: CurrentUser) -> str:
        now = self.clock()
        doc = {
            **data.model_dump(),
            "owner_id": owner.id,
            "owner_name": owner.name or owner.email,
            "owner_phone": owner.phone or "",
            "created_at": now,
            "updated_at": now,
        }
        product_id = self.gateway.add_document(PRODUCTS, doc)
        logger.info("Product created", product_id=product_id, owner_id=owner.id)
        self.load_all()
        return product_id

    def update(self, product_id: str, patch: ProductUpdate) -> None:
        changes = patch.model_dump(exclude_unset=True)
        changes["updated_at"] = self.clock()
        self.gateway.update_document(PRODUCTS, product_id, changes)
        logger.info("Product updated", product_id=product_id, fields=sorted(changes))
        self.load_all()

    def delete(self, product_id: str) -> None:
        self.gateway.delete_document(PRODUCTS, product_id)
        logger.info("Product deleted", product_id=product_id)
        self.load_all()

    # Views over the cache

    def get(self, product_id: str) -> Optional[ProductRead]:
        return next((p for p in self.products if p.id == product_id), None)

    def by_owner(self, owner_id: str) -> List[ProductRead]:
        return [p for p in self.products if p.owner_id == owner_id]

    def recent(self, limit: int = 6) -> List[ProductRead]:
        return filter_and_sort(self.products, ProductQuery(sort=SortKey.RECENT))[:limit]

    def filter_and_sort(
        self, query: ProductQuery, products: Optional[Sequence[ProductRead]] = None
    ) -> List[ProductRead]:
        return filter_and_sort(self.products if products is None else products, query)
