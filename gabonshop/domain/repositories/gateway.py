"""
Gateway interfaces.
The application talks to its backend only through these two contracts:
document CRUD on named collections, and account/session management.
"""

from typing import Any, Dict, List, Optional, Protocol

from gabonshop.domain.schemas.auth import AuthSession

USERS = "users"
PRODUCTS = "products"
MODERATION_LOGS = "moderationLogs"

Document = Dict[str, Any]


class DocumentGateway(Protocol):
    """Document store holding the `users`, `products` and `moderationLogs` collections."""

    def list_documents(
        self, collection: str, order_by: Optional[str] = None, descending: bool = False
    ) -> List[Document]:
        """Every document of a collection, each carrying its `id`."""
        ...

    def get_document(self, collection: str, doc_id: str) -> Optional[Document]:
        """One document, or None when it does not exist."""
        ...

    def add_document(self, collection: str, data: Document) -> str:
        """Create a document with a gateway-issued id and return that id."""
        ...

    def set_document(self, collection: str, doc_id: str, data: Document) -> None:
        """Create or replace the document stored under `doc_id`."""
        ...

    def update_document(self, collection: str, doc_id: str, patch: Document) -> None:
        """Merge `patch` into an existing document."""
        ...

    def delete_document(self, collection: str, doc_id: str) -> None:
        """Hard delete; deleting a missing document is not an error."""
        ...


class AuthGateway(Protocol):
    """Account store and token issuer."""

    def create_account(self, email: str, password: str) -> AuthSession:
        ...

    def sign_in(self, email: str, password: str) -> AuthSession:
        ...

    def verify_token(self, token: str) -> Optional[AuthSession]:
        ...
