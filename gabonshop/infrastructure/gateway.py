"""
SQLAlchemy implementation of the data and auth gateways.

Every call opens its own session and commits before returning, so callers see
the same one-call-one-round-trip behavior they would get from a hosted
document service. Storage failures surface as ``GatewayError``.
"""

from contextlib import contextmanager
from datetime import timedelta
from typing import Dict, Iterator, List, Optional, Type

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from gabonshop.config import get_settings
from gabonshop.core.clock import now_ms
from gabonshop.core.exceptions import (
    BusinessRuleViolationException,
    EntityNotFoundException,
    GatewayError,
    UnauthorizedException,
)
from gabonshop.domain.models.credential import Credential
from gabonshop.domain.models.moderation_log import ModerationLog
from gabonshop.domain.models.product import Product
from gabonshop.domain.models.user import UserProfile
from gabonshop.domain.repositories.gateway import (
    MODERATION_LOGS,
    PRODUCTS,
    USERS,
    Document,
)
from gabonshop.domain.schemas.auth import AuthSession
from gabonshop.infrastructure.database import Base
from gabonshop.infrastructure.repositories.base_repository import (
    SQLAlchemyRepository,
    new_document_id,
)

settings = get_settings()
logger = structlog.get_logger(__name__)

COLLECTIONS: Dict[str, Type[Base]] = {
    USERS: UserProfile,
    PRODUCTS: Product,
    MODERATION_LOGS: ModerationLog,
}


class SQLAlchemyDocumentGateway:
    """Collections of documents stored in SQL tables."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def _repository(self, collection: str) -> Iterator[SQLAlchemyRepository]:
        model = COLLECTIONS.get(collection)
        if model is None:
            raise ValueError(f"Unknown collection: {collection}")

        db: Session = self.session_factory()
        try:
            yield SQLAlchemyRepository(db, model)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Gateway call failed", collection=collection, error=str(e))
            raise GatewayError(details={"collection": collection}) from e
        finally:
            db.close()

    def list_documents(
        self, collection: str, order_by: Optional[str] = None, descending: bool = False
    ) -> List[Document]:
        with self._repository(collection) as repo:
            return [repo.to_document(row) for row in repo.list(order_by, descending)]

    def get_document(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._repository(collection) as repo:
            row = repo.get_by_id(doc_id)
            return repo.to_document(row) if row is not None else None

    def add_document(self, collection: str, data: Document) -> str:
        with self._repository(collection) as repo:
            row = repo.create({**data, "id": new_document_id()})
            logger.debug("Document added", collection=collection, doc_id=row.id)
            return row.id

    def set_document(self, collection: str, doc_id: str, data: Document) -> None:
        with self._repository(collection) as repo:
            repo.upsert(doc_id, data)

    def update_document(self, collection: str, doc_id: str, patch: Document) -> None:
        with self._repository(collection) as repo:
            row = repo.get_by_id(doc_id)
            if row is None:
                raise EntityNotFoundException(details={"collection": collection, "id": doc_id})
            repo.update(row, patch)

    def delete_document(self, collection: str, doc_id: str) -> None:
        with self._repository(collection) as repo:
            repo.delete(doc_id)


class SQLAlchemyAuthGateway:
    """Email/password accounts with bcrypt hashes and signed bearer tokens."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    def _issue_token(self, account: Credential) -> str:
        expire = timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
        claims = {
            "sub": account.uid,
            "email": account.email,
            "exp": int((now_ms() / 1000) + expire.total_seconds()),
        }
        return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    def _session_for(self, account: Credential) -> AuthSession:
        return AuthSession(
            uid=account.uid,
            email=account.email,
            display_name=account.display_name,
            token=self._issue_token(account),
        )

    def create_account(self, email: str, password: str) -> AuthSession:
        email = email.strip().lower()
        db: Session = self.session_factory()
        try:
            account = Credential(
                uid=new_document_id(),
                email=email,
                password_hash=self.pwd_context.hash(password),
                created_at=now_ms(),
            )
            db.add(account)
            db.commit()
            db.refresh(account)
            logger.info("Account created", uid=account.uid)
            return self._session_for(account)
        except IntegrityError as e:
            db.rollback()
            raise BusinessRuleViolationException("Cette adresse email est déjà utilisée") from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Account creation failed", error=str(e))
            raise GatewayError() from e
        finally:
            db.close()

    def sign_in(self, email: str, password: str) -> AuthSession:
        db: Session = self.session_factory()
        try:
            account = (
                db.query(Credential)
                .filter(Credential.email == email.strip().lower())
                .first()
            )
        except SQLAlchemyError as e:
            logger.error("Sign-in lookup failed", error=str(e))
            raise GatewayError() from e
        finally:
            db.close()

        if account is None or not self.pwd_context.verify(password, account.password_hash):
            raise UnauthorizedException("Email ou mot de passe incorrect")
        return self._session_for(account)

    def verify_token(self, token: str) -> Optional[AuthSession]:
        try:
            claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        except JWTError:
            return None

        uid = claims.get("sub")
        if not uid:
            return None
        return AuthSession(uid=uid, email=claims.get("email", ""), token=token)
