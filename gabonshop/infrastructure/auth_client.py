"""
Client-side view of the auth gateway: one current session plus listeners.

Listeners registered with ``on_auth_state_changed`` are called right away with
the current session, then after every sign-in, sign-out or restore. Callers
learn about state changes from the callbacks, not from return values.
"""

from typing import Callable, List, Optional

import structlog

from gabonshop.domain.repositories.gateway import AuthGateway
from gabonshop.domain.schemas.auth import AuthSession

logger = structlog.get_logger(__name__)

AuthListener = Callable[[Optional[AuthSession]], None]


class AuthSessionClient:
    def __init__(self, gateway: AuthGateway):
        self.gateway = gateway
        self.current_session: Optional[AuthSession] = None
        self._listeners: List[AuthListener] = []

    def on_auth_state_changed(self, listener: AuthListener) -> Callable[[], None]:
        """Subscribe; returns the function that unsubscribes."""
        self._listeners.append(listener)
        listener(self.current_session)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_session(self, session: Optional[AuthSession]) -> None:
        self.current_session = session
        for listener in list(self._listeners):
            listener(session)

    def create_account(self, email: str, password: str) -> AuthSession:
        # A new account is signed in straight away
        session = self.gateway.create_account(email, password)
        self._set_session(session)
        return session

    def sign_in(self, email: str, password: str) -> AuthSession:
        session = self.gateway.sign_in(email, password)
        self._set_session(session)
        return session

    def restore(self, token: str) -> Optional[AuthSession]:
        """Resume a session from a bearer token; an invalid token signs out."""
        session = self.gateway.verify_token(token)
        if session is None:
            logger.debug("Bearer token rejected")
        self._set_session(session)
        return session

    def sign_out(self) -> None:
        self._set_session(None)
