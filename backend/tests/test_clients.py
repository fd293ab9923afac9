"""Tests for client administration and the client cascade delete."""

import pytest

from assetvault.core.exceptions import NotFoundError
from assetvault.models import Asset, Client, Notification, NotificationType, Showroom, ShowroomAsset, User
from assetvault.schemas.asset import AssetCreate
from assetvault.schemas.showroom import ShowroomAssetCreate, ShowroomCreate
from assetvault.services.clients import ClientService
from assetvault.services.notifications import NotificationLedger
from assetvault.services.records import UploadedFile

from conftest import OTHER_TENANT_ID, TENANT_ID


class BrokenFilesClientService(ClientService):
    def _delete_files(self, client_id, tenant_id):
        raise OSError("uploads volume unavailable")


@pytest.fixture
def client_service(session_factory, storage):
    return ClientService(session_factory, storage)


@pytest.fixture
def populated(db, owner, stranger, showroom_service, asset_service, tenant_users):
    """One showroom with two assets and three files, plus data of another client"""
    showroom = showroom_service.create_showroom(ShowroomCreate(name="Downtown"), owner)
    first = showroom_service.create_asset(showroom.id, ShowroomAssetCreate(name="Screen"), owner)
    second = showroom_service.create_asset(showroom.id, ShowroomAssetCreate(name="Speaker"), owner)
    showroom_service.add_asset_files(
        showroom.id, first.id, [UploadedFile("a.pdf", b"a"), UploadedFile("b.pdf", b"b")], owner
    )
    showroom_service.add_asset_files(showroom.id, second.id, [UploadedFile("c.pdf", b"c")], owner)
    asset_service.create(AssetCreate(name="Router admin"), owner)

    ledger = NotificationLedger(db)
    ledger.create(
        title="reminder", message="m", type=NotificationType.EXPIRATION_REMINDER,
        tenant_id=TENANT_ID, client_id=owner.client_id,
    )
    ledger.create(
        title="other", message="m", type=NotificationType.EXPIRATION_REMINDER,
        tenant_id=TENANT_ID, client_id=stranger.client_id,
    )
    asset_service.create(AssetCreate(name="Neighbour"), stranger)
    db.close()
    return showroom


def count(session_factory, model, client_id):
    with session_factory() as session:
        return session.query(model).filter(model.client_id == client_id).count()


class TestListClients:
    def test_scoped_to_tenant(self, client_service, client_record, other_client_record, db):
        db.add(Client(name="Initech", tenant_id=OTHER_TENANT_ID))
        db.commit()

        names = [client.name for client in client_service.list_clients(TENANT_ID)]

        assert names == ["Acme Corp", "Globex"]

    def test_get_client_in_other_tenant(self, client_service, client_record):
        with pytest.raises(NotFoundError, match="Client not found"):
            client_service.get_client(client_record.id, OTHER_TENANT_ID)


class TestDeleteClient:
    def test_cascade_removes_everything_owned(self, client_service, populated, owner, storage, session_factory):
        result = client_service.delete_client(owner.client_id, TENANT_ID)

        assert result.ok
        assert result.deleted
        for model in (Asset, Showroom, ShowroomAsset, Notification, User):
            assert count(session_factory, model, owner.client_id) == 0
        assert result.counts["showroom_assets"] == 2
        assert result.counts["users"] == 3
        assert not storage.exists([TENANT_ID, owner.client_id])
        with session_factory() as session:
            assert session.get(Client, owner.client_id) is None

    def test_other_client_is_untouched(self, client_service, populated, owner, stranger, session_factory):
        client_service.delete_client(owner.client_id, TENANT_ID)

        assert count(session_factory, Asset, stranger.client_id) == 1
        assert count(session_factory, Notification, stranger.client_id) == 1
        with session_factory() as session:
            assert session.get(Client, stranger.client_id) is not None

    def test_failed_branch_is_reported_and_others_complete(self, session_factory, storage, populated, owner):
        service = BrokenFilesClientService(session_factory, storage)

        result = service.delete_client(owner.client_id, TENANT_ID)

        assert result.deleted
        assert not result.ok
        assert [failure.branch for failure in result.failures] == ["files"]
        assert result.to_dict()["failures"] == [{"branch": "files", "error": "uploads volume unavailable"}]
        assert count(session_factory, ShowroomAsset, owner.client_id) == 0
        assert storage.exists([TENANT_ID, owner.client_id])
        with session_factory() as session:
            assert session.get(Client, owner.client_id) is None

    def test_client_without_files(self, client_service, client_record):
        result = client_service.delete_client(client_record.id, TENANT_ID)
        assert result.ok
        assert result.counts["files"] == 0

    def test_unknown_client(self, client_service):
        with pytest.raises(NotFoundError):
            client_service.delete_client("missing", TENANT_ID)

    def test_client_of_other_tenant(self, client_service, client_record, session_factory):
        with pytest.raises(NotFoundError):
            client_service.delete_client(client_record.id, OTHER_TENANT_ID)
        with session_factory() as session:
            assert session.get(Client, client_record.id) is not None
