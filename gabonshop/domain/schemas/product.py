"""Pydantic schemas for Product listings."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

MAX_IMAGES = 10

CATEGORIES = [
    "Véhicules", "Immobilier", "Informatique", "Mode", "Maison", "Loisirs", "Autres",
]

LOCATIONS = [
    "Libreville", "Port-Gentil", "Franceville", "Oyem", "Moanda", "Mouila",
    "Lambaréné", "Makokou", "Koulamoutou", "Tchibanga", "Autre",
]

# Category values meaning "no category filter"
ALL_CATEGORIES = ("all", "Tous")


class SortKey(str, Enum):
    RECENT = "recent"
    OLDEST = "oldest"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"


def _required_text(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("Veuillez remplir tous les champs obligatoires.")
    return value


def _image_list(value: list[str]) -> list[str]:
    urls = [url.strip() for url in value if url and url.strip()]
    if not urls:
        raise ValueError("Veuillez ajouter au moins une photo.")
    if len(urls) > MAX_IMAGES:
        raise ValueError(f"{MAX_IMAGES} photos maximum.")
    return urls


class ProductCreate(BaseModel):
    title: str
    description: str
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None
    location: Optional[str] = None
    images: list[str]

    model_config = {"extra": "forbid"}

    @field_validator("title", "description")
    @classmethod
    def check_text(cls, value: str) -> str:
        return _required_text(value)

    @field_validator("images")
    @classmethod
    def check_images(cls, value: list[str]) -> list[str]:
        return _image_list(value)


class ProductUpdate(BaseModel):
    """Partial patch; owner fields are not part of it and cannot change."""
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None
    location: Optional[str] = None
    images: Optional[list[str]] = None

    model_config = {"extra": "forbid"}

    @field_validator("title", "description")
    @classmethod
    def check_text(cls, value: Optional[str]) -> str:
        # Only runs when the key is sent; an explicit null cannot blank the field
        return _required_text(value)

    @field_validator("images")
    @classmethod
    def check_images(cls, value: Optional[list[str]]) -> list[str]:
        return _image_list(value or [])


class ProductRead(BaseModel):
    """A product as held by the catalog: images already normalized."""
    id: str
    title: str = ""
    description: str = ""
    price: Optional[float] = None
    category: Optional[str] = None
    location: Optional[str] = None
    images: list[str] = []
    cover_image: Optional[str] = None
    owner_id: Optional[str] = None
    owner_name: Optional[str] = None
    owner_phone: Optional[str] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None


class ProductDetail(ProductRead):
    price_label: str
    posted_label: str
    whatsapp_link: Optional[str] = None


class ProductQuery(BaseModel):
    search: Optional[str] = None
    category: Optional[str] = None
    sort: SortKey = SortKey.RECENT
    search_owner: bool = False


class ProductCreated(BaseModel):
    id: str
