"""Public site configuration consumed by the listing form and filters."""

from fastapi import APIRouter

from gabonshop.config import get_settings
from gabonshop.domain.schemas.product import CATEGORIES, LOCATIONS, MAX_IMAGES, SortKey

settings = get_settings()
router = APIRouter(prefix="/api/config", tags=["Config"])


@router.get("")
def site_config():
    return {
        "categories": CATEGORIES,
        "locations": LOCATIONS,
        "sort_options": [key.value for key in SortKey],
        "max_images": MAX_IMAGES,
        "uploadcare_public_key": settings.UPLOADCARE_PUBLIC_KEY,
    }
