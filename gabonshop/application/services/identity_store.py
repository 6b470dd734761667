"""Identity store: the signed-in user, projected from the auth session and the profile document."""

from typing import Any, Callable, Dict, Optional

import structlog

from gabonshop.core.clock import now_ms
from gabonshop.core.exceptions import GatewayError
from gabonshop.domain.repositories.gateway import USERS, DocumentGateway
from gabonshop.domain.schemas.auth import AuthSession, CurrentUser, RegisterRequest
from gabonshop.infrastructure.auth_client import AuthSessionClient

logger = structlog.get_logger(__name__)


def project_user(session: AuthSession, profile: Optional[Dict[str, Any]]) -> CurrentUser:
    """Merge a session with its profile document.

    A missing profile (account created but profile write lost) gives
    empty name/phone and the ``user`` role.
    """
    if profile is None:
        logger.warning("Profile document missing", uid=session.uid)
        profile = {}

    return CurrentUser(
        id=session.uid,
        uid=session.uid,
        name=profile.get("name") or session.display_name or "",
        email=profile.get("email") or session.email,
        phone=profile.get("phone") or "",
        role=profile.get("role") or "user",
        created_at=profile.get("created_at"),
    )


class IdentityStore:
    def __init__(self, auth: AuthSessionClient, gateway: DocumentGateway):
        self.auth = auth
        self.gateway = gateway
        self.current_user: Optional[CurrentUser] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._registering = False

    def init(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.auth.on_auth_state_changed(self._on_auth_state_changed)

    def refresh(self) -> None:
        self._on_auth_state_changed(self.auth.current_session)

    def dispose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.current_user = None

    def _on_auth_state_changed(self, session: Optional[AuthSession]) -> None:
        # register() projects once its profile write is done
        if self._registering:
            return
        if session is None:
            self.current_user = None
            return

        try:
            profile = self.gateway.get_document(USERS, session.uid)
        except GatewayError:
            logger.exception("Profile fetch failed", uid=session.uid)
            self.current_user = None
            return

        self.current_user = project_user(session, profile)

    def register(self, fields: RegisterRequest) -> AuthSession:
        """Create the account, then its profile. The two writes are not atomic."""
        self._registering = True
        try:
            session = self.auth.create_account(fields.email, fields.password)
            self.gateway.set_document(
                USERS,
                session.uid,
                {
                    "name": fields.name.strip(),
                    "phone": (fields.phone or "").strip(),
                    "email": fields.email,
                    "role": "user",
                    "created_at": now_ms(),
                },
            )
        finally:
            self._registering = False
            self.refresh()
        return session

    def login(self, email: str, password: str) -> AuthSession:
        return self.auth.sign_in(email, password)

    def restore(self, token: str) -> Optional[AuthSession]:
        return self.auth.restore(token)

    def logout(self) -> None:
        self.auth.sign_out()
