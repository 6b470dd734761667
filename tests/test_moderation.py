import pytest

from gabonshop.application.services.catalog_store import CatalogStore
from gabonshop.application.services.moderation_service import (
    DialogState,
    ModerationDialog,
    ModerationService,
)
from gabonshop.core.exceptions import BusinessRuleViolationException, GatewayError
from gabonshop.domain.repositories.gateway import MODERATION_LOGS, PRODUCTS, USERS
from gabonshop.domain.schemas.auth import CurrentUser
from gabonshop.domain.schemas.moderation import ModerationTarget
from gabonshop.domain.schemas.product import ProductCreate
from gabonshop.infrastructure.database import SessionLocal
from gabonshop.infrastructure.gateway import SQLAlchemyDocumentGateway


class ScriptedGateway(SQLAlchemyDocumentGateway):
    """Fails adds and/or deletes on chosen collections; records the call order."""

    def __init__(self, session_factory, fail_add=(), fail_delete=()):
        super().__init__(session_factory)
        self.fail_add = set(fail_add)
        self.fail_delete = set(fail_delete)
        self.calls = []

    def add_document(self, collection, data):
        self.calls.append(("add", collection))
        if collection in self.fail_add:
            raise GatewayError()
        return super().add_document(collection, data)

    def delete_document(self, collection, doc_id):
        self.calls.append(("delete", collection))
        if collection in self.fail_delete:
            raise GatewayError()
        return super().delete_document(collection, doc_id)


OWNER = CurrentUser(id="owner-1", uid="owner-1", name="Awa")


@pytest.fixture
def scripted(fresh_db, clock):
    def build(**kwargs):
        gateway = ScriptedGateway(SessionLocal, **kwargs)
        catalog = CatalogStore(gateway)
        catalog.init()
        product_id = catalog.create(
            ProductCreate(title="Montre", description="Contrefaçon", images=["m.jpg"]), OWNER
        )
        gateway.calls.clear()
        return gateway, catalog, ModerationService(gateway, catalog, clock=clock), catalog.get(product_id)
    return build


def test_delete_product_logs_then_deletes(scripted):
    gateway, catalog, service, product = scripted()

    service.delete_product_with_reason(product, "spam", "admin-1")

    assert gateway.calls == [("add", MODERATION_LOGS), ("delete", PRODUCTS)]
    logs = gateway.list_documents(MODERATION_LOGS)
    assert len(logs) == 1
    log = logs[0]
    assert log["type"] == "product"
    assert log["target_id"] == product.id
    assert log["target_owner_id"] == "owner-1"
    assert log["target_title"] == "Montre"
    assert log["reason"] == "spam"
    assert log["admin_id"] == "admin-1"
    assert catalog.get(product.id) is None
    assert all(p.id != product.id for p in catalog.load_all())


@pytest.mark.parametrize("reason", ["", "   ", "\n"])
def test_blank_reason_rejected_before_any_write(scripted, reason):
    gateway, catalog, service, product = scripted()

    with pytest.raises(BusinessRuleViolationException):
        service.delete_product_with_reason(product, reason, "admin-1")

    assert gateway.calls == []
    assert catalog.get(product.id) is not None


def test_failed_log_write_skips_delete(scripted):
    gateway, catalog, service, product = scripted(fail_add={MODERATION_LOGS})

    with pytest.raises(GatewayError):
        service.delete_product_with_reason(product, "spam", "admin-1")

    assert gateway.calls == [("add", MODERATION_LOGS)]
    assert gateway.get_document(PRODUCTS, product.id) is not None


def test_failed_delete_leaves_orphan_log(scripted):
    gateway, catalog, service, product = scripted(fail_delete={PRODUCTS})

    with pytest.raises(GatewayError):
        service.delete_product_with_reason(product, "spam", "admin-1")

    assert len(gateway.list_documents(MODERATION_LOGS)) == 1
    assert gateway.get_document(PRODUCTS, product.id) is not None


def test_delete_user_with_reason(scripted):
    gateway, catalog, service, _ = scripted()
    gateway.set_document(USERS, "u-9", {"name": "Spammeur", "role": "user"})

    service.delete_user_with_reason("u-9", "  fraude  ", "admin-1")

    log = gateway.list_documents(MODERATION_LOGS)[0]
    assert log["type"] == "user"
    assert log["target_id"] == log["target_owner_id"] == "u-9"
    assert log["reason"] == "fraude"
    assert "target_title" not in log
    assert gateway.get_document(USERS, "u-9") is None


def test_logs_newest_first_and_stats(scripted):
    gateway, catalog, service, product = scripted()
    gateway.set_document(USERS, "a", {"role": "admin"})
    gateway.set_document(USERS, "b", {})

    stats = service.dashboard_stats()
    assert (stats.total_users, stats.total_products, stats.total_admins) == (2, 1, 1)

    service.delete_user_with_reason("b", "premier", "a")
    service.delete_product_with_reason(product, "second", "a")
    assert [entry.reason for entry in service.list_logs()] == ["second", "premier"]


def test_dialog_state_machine(scripted):
    gateway, catalog, service, product = scripted()
    dialog = ModerationDialog(service)

    assert dialog.state is DialogState.CLOSED
    assert not dialog.can_confirm

    dialog.open(ModerationTarget.PRODUCT, product)
    assert dialog.state is DialogState.OPEN
    assert dialog.reason == ""
    assert not dialog.can_confirm

    dialog.edit_reason("   ")
    assert not dialog.can_confirm
    with pytest.raises(BusinessRuleViolationException):
        dialog.confirm("admin-1")
    assert gateway.calls == []

    dialog.edit_reason("Annonce frauduleuse")
    assert dialog.can_confirm
    dialog.confirm("admin-1")

    assert dialog.state is DialogState.CLOSED
    assert dialog.reason == ""
    assert catalog.get(product.id) is None


def test_dialog_cancel_discards_reason(scripted):
    gateway, catalog, service, product = scripted()
    dialog = ModerationDialog(service)
    dialog.open(ModerationTarget.PRODUCT, product)
    dialog.edit_reason("spam")
    dialog.cancel()

    assert dialog.state is DialogState.CLOSED
    assert dialog.reason == ""
    assert not dialog.can_confirm
    assert gateway.calls == []
