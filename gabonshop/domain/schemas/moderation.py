"""Pydantic schemas for moderation."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ModerationTarget(str, Enum):
    PRODUCT = "product"
    USER = "user"


class ModerationLogEntry(BaseModel):
    id: Optional[str] = None
    type: ModerationTarget
    target_id: str
    target_owner_id: Optional[str] = None
    target_title: Optional[str] = None
    reason: str
    admin_id: str
    created_at: int


class ModerationRequest(BaseModel):
    reason: str = ""


class DashboardStats(BaseModel):
    total_users: int
    total_products: int
    total_admins: int
