import pytest

from gabonshop.application.services.identity_store import IdentityStore, project_user
from gabonshop.core.exceptions import GatewayError, UnauthorizedException
from gabonshop.domain.repositories.gateway import USERS
from gabonshop.domain.schemas.auth import AuthSession, RegisterRequest
from gabonshop.infrastructure.gateway import SQLAlchemyDocumentGateway
from gabonshop.infrastructure.database import SessionLocal


class FailingProfileGateway(SQLAlchemyDocumentGateway):
    """Profile writes and/or reads on `users` fail like a lost network call."""

    def __init__(self, session_factory, fail_writes=True, fail_reads=False):
        super().__init__(session_factory)
        self.fail_writes = fail_writes
        self.fail_reads = fail_reads

    def set_document(self, collection, doc_id, data):
        if collection == USERS and self.fail_writes:
            raise GatewayError()
        return super().set_document(collection, doc_id, data)

    def get_document(self, collection, doc_id):
        if collection == USERS and self.fail_reads:
            raise GatewayError()
        return super().get_document(collection, doc_id)


class RecordingProfileGateway(SQLAlchemyDocumentGateway):
    """Keeps every profile read on `users`."""

    def __init__(self, session_factory):
        super().__init__(session_factory)
        self.profile_reads = []

    def get_document(self, collection, doc_id):
        doc = super().get_document(collection, doc_id)
        if collection == USERS:
            self.profile_reads.append(doc)
        return doc


def registration(email="awa@mail.ga", **overrides):
    fields = {"name": "Awa Ndong", "email": email, "phone": " 077123456 ", "password": "secret1"}
    fields.update(overrides)
    return RegisterRequest(**fields)


def test_starts_signed_out(auth_client, gateway):
    identity = IdentityStore(auth_client, gateway)
    identity.init()
    assert identity.current_user is None


def test_register_projects_profile(auth_client, gateway):
    identity = IdentityStore(auth_client, gateway)
    identity.init()
    session = identity.register(registration())

    user = identity.current_user
    assert user.id == session.uid == user.uid
    assert user.name == "Awa Ndong"
    assert user.phone == "077123456"
    assert user.email == "awa@mail.ga"
    assert user.role == "user"
    assert gateway.get_document(USERS, session.uid)["role"] == "user"


def test_register_reads_profile_only_after_writing_it(auth_client, fresh_db):
    gateway = RecordingProfileGateway(SessionLocal)
    identity = IdentityStore(auth_client, gateway)
    identity.init()
    identity.register(registration())

    assert len(gateway.profile_reads) == 1
    assert gateway.profile_reads[0]["name"] == "Awa Ndong"
    assert identity.current_user.name == "Awa Ndong"


def test_profile_write_failure_leaves_account_with_defaults(auth_client, fresh_db):
    gateway = FailingProfileGateway(SessionLocal)
    identity = IdentityStore(auth_client, gateway)
    identity.init()

    with pytest.raises(GatewayError):
        identity.register(registration())

    # The account exists and is signed in, but has no profile document
    user = identity.current_user
    assert user is not None
    assert user.role == "user"
    assert user.name == ""
    assert user.phone == ""
    assert gateway.get_document(USERS, user.id) is None


def test_profile_fetch_failure_is_treated_as_signed_out(auth_client, fresh_db):
    gateway = FailingProfileGateway(SessionLocal, fail_writes=False, fail_reads=True)
    identity = IdentityStore(auth_client, gateway)
    identity.init()
    identity.register(registration())
    assert identity.current_user is None


def test_login_and_logout_are_observed_through_subscription(auth_client, gateway):
    IdentityStore(auth_client, gateway).register(registration())
    auth_client.sign_out()

    identity = IdentityStore(auth_client, gateway)
    identity.init()
    assert identity.current_user is None

    identity.login("AWA@mail.ga", "secret1")
    assert identity.current_user.name == "Awa Ndong"

    identity.logout()
    assert identity.current_user is None


def test_wrong_password_is_rejected(auth_client, gateway):
    identity = IdentityStore(auth_client, gateway)
    identity.init()
    identity.register(registration())
    identity.logout()

    with pytest.raises(UnauthorizedException):
        identity.login("awa@mail.ga", "wrong-password")
    assert identity.current_user is None


def test_restore_from_token(auth_client, gateway):
    session = IdentityStore(auth_client, gateway).register(registration())

    other = IdentityStore(type(auth_client)(auth_client.gateway), gateway)
    other.init()
    other.restore(session.token)
    assert other.current_user.id == session.uid

    other.restore("not-a-token")
    assert other.current_user is None


def test_dispose_unsubscribes(auth_client, gateway):
    IdentityStore(auth_client, gateway).register(registration())
    auth_client.sign_out()

    identity = IdentityStore(auth_client, gateway)
    identity.init()
    identity.dispose()
    auth_client.sign_in("awa@mail.ga", "secret1")
    assert identity.current_user is None


def test_project_user_defaults():
    session = AuthSession(uid="u1", email="x@mail.ga")
    user = project_user(session, None)
    assert (user.id, user.uid, user.name, user.phone, user.email, user.role) == (
        "u1", "u1", "", "", "x@mail.ga", "user",
    )
    admin = project_user(session, {"name": "Chef", "role": "admin", "phone": "066"})
    assert admin.is_admin
    assert admin.name == "Chef"


def test_register_validation():
    with pytest.raises(ValueError):
        registration(name="   ")
    with pytest.raises(ValueError):
        registration(password_confirm="different")
    with pytest.raises(ValueError):
        registration(password="123")
