"""Admin API: dashboard numbers, user list, audit trail and moderation deletions."""

from typing import List

from fastapi import APIRouter, Depends

from gabonshop.application.services.catalog_store import CatalogStore
from gabonshop.application.services.formatting import format_whatsapp_number
from gabonshop.application.services.moderation_service import (
    ModerationDialog,
    ModerationService,
)
from gabonshop.core.exceptions import EntityNotFoundException
from gabonshop.domain.schemas.auth import CurrentUser, UserRead
from gabonshop.domain.schemas.moderation import (
    DashboardStats,
    ModerationLogEntry,
    ModerationRequest,
    ModerationTarget,
)
from gabonshop.domain.schemas.product import ProductRead
from gabonshop.interfaces.api.deps import require_admin
from gabonshop.interfaces.deps import get_catalog, get_moderation

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(
    moderation: ModerationService = Depends(get_moderation),
    admin: CurrentUser = Depends(require_admin),
):
    return moderation.dashboard_stats()


@router.get("/products", response_model=List[ProductRead])
def all_products(
    catalog: CatalogStore = Depends(get_catalog),
    admin: CurrentUser = Depends(require_admin),
):
    return catalog.products


@router.get("/users", response_model=List[UserRead])
def list_users(
    moderation: ModerationService = Depends(get_moderation),
    admin: CurrentUser = Depends(require_admin),
):
    users = moderation.load_users()
    for user in users:
        user.whatsapp = format_whatsapp_number(user.phone)
    return users


@router.get("/moderation-logs", response_model=List[ModerationLogEntry])
def moderation_logs(
    moderation: ModerationService = Depends(get_moderation),
    admin: CurrentUser = Depends(require_admin),
):
    return moderation.list_logs()


@router.post("/moderation/products/{product_id}", response_model=DashboardStats)
def moderate_product(
    product_id: str,
    body: ModerationRequest,
    catalog: CatalogStore = Depends(get_catalog),
    moderation: ModerationService = Depends(get_moderation),
    admin: CurrentUser = Depends(require_admin),
):
    product = catalog.get(product_id)
    if product is None:
        raise EntityNotFoundException("Ce produit n'existe pas ou a été supprimé.")

    dialog = ModerationDialog(moderation)
    dialog.open(ModerationTarget.PRODUCT, product)
    dialog.edit_reason(body.reason)
    dialog.confirm(admin.id)
    return moderation.dashboard_stats()


@router.post("/moderation/users/{user_id}", response_model=DashboardStats)
def moderate_user(
    user_id: str,
    body: ModerationRequest,
    moderation: ModerationService = Depends(get_moderation),
    admin: CurrentUser = Depends(require_admin),
):
    if not any(u.id == user_id for u in moderation.load_users()):
        raise EntityNotFoundException("Utilisateur introuvable.")

    dialog = ModerationDialog(moderation)
    dialog.open(ModerationTarget.USER, user_id)
    dialog.edit_reason(body.reason)
    dialog.confirm(admin.id)
    return moderation.dashboard_stats()
