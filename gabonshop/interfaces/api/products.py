"""Products API routes: browse, search, detail, and owner create/edit/delete."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from gabonshop.application.services.catalog_store import CatalogStore
from gabonshop.application.services.formatting import (
    format_listing_date,
    format_price,
    whatsapp_link,
)
from gabonshop.core.exceptions import EntityNotFoundException, ForbiddenException
from gabonshop.domain.schemas.auth import CurrentUser
from gabonshop.domain.schemas.product import (
    ProductCreate,
    ProductCreated,
    ProductDetail,
    ProductQuery,
    ProductRead,
    ProductUpdate,
    SortKey,
)
from gabonshop.interfaces.api.deps import get_current_user
from gabonshop.interfaces.deps import get_catalog

router = APIRouter(prefix="/api/products", tags=["Products"])


def _owned_product(catalog: CatalogStore, product_id: str, user: CurrentUser) -> ProductRead:
    product = catalog.get(product_id)
    if product is None:
        raise EntityNotFoundException("Ce produit n'existe pas ou a été supprimé.")
    if product.owner_id != user.id:
        raise ForbiddenException("Vous ne pouvez modifier que vos propres annonces.")
    return product


@router.get("", response_model=List[ProductRead])
def list_products(
    search: Optional[str] = None,
    category: Optional[str] = None,
    sort: SortKey = SortKey.RECENT,
    catalog: CatalogStore = Depends(get_catalog),
):
    return catalog.filter_and_sort(ProductQuery(search=search, category=category, sort=sort))


@router.get("/recent", response_model=List[ProductRead])
def recent_products(
    limit: int = Query(6, ge=1, le=50),
    catalog: CatalogStore = Depends(get_catalog),
):
    return catalog.recent(limit)


@router.get("/mine", response_model=List[ProductRead])
def my_products(
    catalog: CatalogStore = Depends(get_catalog),
    user: CurrentUser = Depends(get_current_user),
):
    return catalog.by_owner(user.id)


@router.get("/{product_id}", response_model=ProductDetail)
def product_detail(product_id: str, catalog: CatalogStore = Depends(get_catalog)):
    product = catalog.get(product_id)
    if product is None:
        raise EntityNotFoundException("Ce produit n'existe pas ou a été supprimé.")
    return ProductDetail(
        **product.model_dump(),
        price_label=format_price(product.price),
        posted_label=format_listing_date(product.created_at),
        whatsapp_link=whatsapp_link(product.owner_phone, product.title),
    )


@router.post("", response_model=ProductCreated, status_code=status.HTTP_201_CREATED)
def create_product(
    body: ProductCreate,
    catalog: CatalogStore = Depends(get_catalog),
    user: CurrentUser = Depends(get_current_user),
):
    return ProductCreated(id=catalog.create(body, user))


@router.patch("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: str,
    body: ProductUpdate,
    catalog: CatalogStore = Depends(get_catalog),
    user: CurrentUser = Depends(get_current_user),
):
    _owned_product(catalog, product_id, user)
    catalog.update(product_id, body)
    return catalog.get(product_id)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: str,
    catalog: CatalogStore = Depends(get_catalog),
    user: CurrentUser = Depends(get_current_user),
):
    _owned_product(catalog, product_id, user)
    catalog.delete(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
