"""FastAPI dependencies: per-request identity and role checks."""

from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from gabonshop.application.services.identity_store import IdentityStore
from gabonshop.core.exceptions import ForbiddenException, UnauthorizedException
from gabonshop.domain.schemas.auth import CurrentUser
from gabonshop.infrastructure.auth_client import AuthSessionClient
from gabonshop.infrastructure.gateway import SQLAlchemyAuthGateway, SQLAlchemyDocumentGateway
from gabonshop.interfaces.deps import get_auth_gateway, get_gateway

security = HTTPBearer(auto_error=False)


def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_gateway: SQLAlchemyAuthGateway = Depends(get_auth_gateway),
    gateway: SQLAlchemyDocumentGateway = Depends(get_gateway),
) -> Generator[IdentityStore, None, None]:
    """An identity store for this request, restored from the bearer token if any."""
    identity = IdentityStore(AuthSessionClient(auth_gateway), gateway)
    identity.init()
    if credentials is not None:
        identity.restore(credentials.credentials)
    try:
        yield identity
    finally:
        identity.dispose()


def get_optional_user(identity: IdentityStore = Depends(get_identity)) -> Optional[CurrentUser]:
    return identity.current_user


def get_current_user(user: Optional[CurrentUser] = Depends(get_optional_user)) -> CurrentUser:
    if user is None:
        raise UnauthorizedException("Vous devez être connecté.")
    return user


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Require admin role."""
    if not user.is_admin:
        raise ForbiddenException("Réservé aux administrateurs.")
    return user
