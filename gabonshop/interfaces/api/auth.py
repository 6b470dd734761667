"""Auth API routes: register, login, logout, me."""

from fastapi import APIRouter, Depends, Response, status

from gabonshop.application.services.identity_store import IdentityStore
from gabonshop.core.exceptions import UnauthorizedException
from gabonshop.domain.schemas.auth import (
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
)
from gabonshop.interfaces.api.deps import get_current_user, get_identity

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _token_response(identity: IdentityStore, token: str) -> TokenResponse:
    # The subscription has already projected the new session
    if identity.current_user is None:
        raise UnauthorizedException("Session introuvable")
    return TokenResponse(access_token=token, user=identity.current_user)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, identity: IdentityStore = Depends(get_identity)):
    session = identity.register(body)
    return _token_response(identity, session.token)


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, identity: IdentityStore = Depends(get_identity)):
    session = identity.login(body.email, body.password)
    return _token_response(identity, session.token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(identity: IdentityStore = Depends(get_identity)):
    # Tokens are stateless; the client drops its copy
    identity.logout()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=CurrentUser)
def get_me(user: CurrentUser = Depends(get_current_user)):
    return user
