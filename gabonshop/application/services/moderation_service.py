"""Moderation service: admin deletions, each preceded by an audit log entry.

The log write and the delete are two separate gateway calls. The delete only
runs once the log write has returned; when the delete then fails, the log
entry stays behind and the error goes to the caller. Nothing is retried or
rolled back.
"""

from enum import Enum
from typing import Callable, List, Optional, Union

import structlog

from gabonshop.application.services.catalog_store import CatalogStore
from gabonshop.core.clock import now_ms
from gabonshop.core.exceptions import BusinessRuleViolationException
from gabonshop.domain.repositories.gateway import (
    MODERATION_LOGS,
    PRODUCTS,
    USERS,
    DocumentGateway,
)
from gabonshop.domain.schemas.auth import UserRead
from gabonshop.domain.schemas.moderation import (
    DashboardStats,
    ModerationLogEntry,
    ModerationTarget,
)
from gabonshop.domain.schemas.product import ProductRead

logger = structlog.get_logger(__name__)

REASON_REQUIRED = "Un motif est obligatoire."


def _require_reason(reason: str) -> str:
    reason = (reason or "").strip()
    if not reason:
        raise BusinessRuleViolationException(REASON_REQUIRED)
    return reason


class ModerationService:
    def __init__(
        self,
        gateway: DocumentGateway,
        catalog: CatalogStore,
        clock: Callable[[], int] = now_ms,
    ):
        self.gateway = gateway
        self.catalog = catalog
        self.clock = clock

    def _log(self, entry: ModerationLogEntry) -> str:
        return self.gateway.add_document(MODERATION_LOGS, entry.model_dump(exclude={"id"}, mode="json"))

    def delete_product_with_reason(self, product: ProductRead, reason: str, admin_id: str) -> None:
        reason = _require_reason(reason)
        self._log(
            ModerationLogEntry(
                type=ModerationTarget.PRODUCT,
                target_id=product.id,
                target_owner_id=product.owner_id,
                target_title=product.title,
                reason=reason,
                admin_id=admin_id,
                created_at=self.clock(),
            )
        )
        self.gateway.delete_document(PRODUCTS, product.id)
        logger.info("Product removed by moderation", product_id=product.id, admin_id=admin_id)
        self.catalog.load_all()

    def delete_user_with_reason(self, user_id: str, reason: str, admin_id: str) -> None:
        reason = _require_reason(reason)
        self._log(
            ModerationLogEntry(
                type=ModerationTarget.USER,
                target_id=user_id,
                target_owner_id=user_id,
                reason=reason,
                admin_id=admin_id,
                created_at=self.clock(),
            )
        )
        self.gateway.delete_document(USERS, user_id)
        logger.info("User removed by moderation", user_id=user_id, admin_id=admin_id)

    def load_users(self) -> List[UserRead]:
        docs = self.gateway.list_documents(USERS)
        return [
            UserRead(
                id=doc["id"],
                name=doc.get("name") or "",
                email=doc.get("email") or "",
                phone=doc.get("phone") or "",
                role=doc.get("role") or "user",
                created_at=doc.get("created_at"),
            )
            for doc in docs
        ]

    def list_logs(self) -> List[ModerationLogEntry]:
        docs = self.gateway.list_documents(MODERATION_LOGS, order_by="created_at", descending=True)
        return [ModerationLogEntry(**doc) for doc in docs]

    def dashboard_stats(self) -> DashboardStats:
        users = self.load_users()
        return DashboardStats(
            total_users=len(users),
            total_products=len(self.catalog.products),
            total_admins=sum(1 for u in users if u.role == "admin"),
        )


class DialogState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class ModerationDialog:
    """Confirmation dialog in front of a moderation deletion.

    closed -> open(kind, target) -> edit_reason(...) -> confirm() -> closed.
    Confirm is only available while the reason is not blank; cancel discards
    the reason. There is no in-flight state, so a second confirm issued
    before the first returns runs the deletion twice.
    """

    def __init__(self, service: ModerationService):
        self.service = service
        self.state = DialogState.CLOSED
        self.kind: Optional[ModerationTarget] = None
        self.target: Optional[Union[ProductRead, UserRead, str]] = None
        self.reason = ""

    def open(self, kind: ModerationTarget, target: Union[ProductRead, UserRead, str]) -> None:
        self.state = DialogState.OPEN
        self.kind = kind
        self.target = target
        self.reason = ""

    def edit_reason(self, text: str) -> None:
        if self.state is DialogState.OPEN:
            self.reason = text

    @property
    def can_confirm(self) -> bool:
        return self.state is DialogState.OPEN and bool(self.reason.strip())

    def confirm(self, admin_id: str) -> None:
        if not self.can_confirm:
            raise BusinessRuleViolationException(REASON_REQUIRED)

        if self.kind is ModerationTarget.PRODUCT:
            self.service.delete_product_with_reason(self.target, self.reason, admin_id)
        else:
            user_id = self.target if isinstance(self.target, str) else self.target.id
            self.service.delete_user_with_reason(user_id, self.reason, admin_id)
        self.cancel()

    def cancel(self) -> None:
        self.state = DialogState.CLOSED
        self.kind = None
        self.target = None
        self.reason = ""
