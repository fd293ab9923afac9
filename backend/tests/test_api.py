"""End-to-end tests of the HTTP API through FastAPI's TestClient."""

import pytest

from assetvault.models import Notification, NotificationType
from assetvault.services.notifications import NotificationLedger

from conftest import TENANT_ID, auth_headers


ASSET_BODY = {
    "name": "Office Wi-Fi",
    "type": "CREDENTIALS",
    "fields": [
        {"key": "ssid", "value": "acme-guest"},
        {"key": "passphrase", "type": "PASSWORD", "is_secret": True, "value": "correct horse"},
    ],
    "tags": ["network"],
}


def create_asset(api, user, body=None):
    response = api.post("/api/v1/assets/", json=body or ASSET_BODY, headers=auth_headers(user))
    assert response.status_code == 201, response.text
    return response.json()


class TestService:
    def test_health(self, api):
        response = api.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, api):
        assert api.get("/").json()["message"] == "Asset Vault API"


class TestAuthentication:
    def test_missing_token(self, api):
        assert api.get("/api/v1/assets/").status_code == 401

    def test_invalid_token(self, api):
        response = api.get("/api/v1/assets/", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_missing_client_scope(self, api, unscoped_user):
        response = api.post("/api/v1/assets/", json=ASSET_BODY, headers=auth_headers(unscoped_user))
        assert response.status_code == 400
        assert response.json()["detail"] == "Client scope is required"


class TestAssetsApi:
    def test_create_and_get(self, api, owner):
        created = create_asset(api, owner)

        response = api.get(f"/api/v1/assets/{created['id']}", headers=auth_headers(owner))

        assert response.status_code == 200
        values = {field["key"]: field["value"] for field in response.json()["fields"]}
        assert values == {"ssid": "acme-guest", "passphrase": "correct horse"}

    def test_foreign_asset_is_not_found(self, api, owner, stranger):
        created = create_asset(api, owner)
        response = api.get(f"/api/v1/assets/{created['id']}", headers=auth_headers(stranger))
        assert response.status_code == 404
        assert response.json()["detail"] == "Asset not found"

    def test_patch_is_partial(self, api, owner):
        created = create_asset(api, owner)

        response = api.patch(
            f"/api/v1/assets/{created['id']}", json={"name": "Guest Wi-Fi"}, headers=auth_headers(owner)
        )

        body = response.json()
        assert body["name"] == "Guest Wi-Fi"
        assert body["tags"] == ["network"]
        assert len(body["fields"]) == 2

    def test_credentials_listing(self, api, owner):
        create_asset(api, owner)
        response = api.get("/api/v1/assets/credentials", headers=auth_headers(owner))
        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Office Wi-Fi"]

    def test_file_upload_and_removal(self, api, owner, storage):
        created = create_asset(api, owner)
        headers = auth_headers(owner)

        response = api.post(
            f"/api/v1/assets/{created['id']}/files",
            files=[("files", ("router.txt", b"admin/admin", "text/plain"))],
            headers=headers,
        )
        assert response.status_code == 200, response.text
        [uploaded] = response.json()["files"]
        assert uploaded["original_name"] == "router.txt"
        assert storage.exists(uploaded["relative_path"])

        response = api.delete(f"/api/v1/assets/{created['id']}/files/{uploaded['id']}", headers=headers)
        assert response.json()["files"] == []
        assert not storage.exists(uploaded["relative_path"])

    def test_uploaded_file_url_is_served(self, api, owner, stranger):
        created = create_asset(api, owner)
        response = api.post(
            f"/api/v1/assets/{created['id']}/files",
            files=[("files", ("router.txt", b"admin/admin", "text/plain"))],
            headers=auth_headers(owner),
        )
        [uploaded] = response.json()["files"]

        response = api.get(uploaded["url"], headers=auth_headers(owner))
        assert response.status_code == 200
        assert response.content == b"admin/admin"

        assert api.get(uploaded["url"]).status_code == 401
        assert api.get(uploaded["url"], headers=auth_headers(stranger)).status_code == 404

    def test_download_cannot_escape_client_directory(self, api, owner, stranger, storage):
        storage.write([TENANT_ID, stranger.client_id, "a1", "secret.txt"], b"theirs")
        escape = f"/uploads/{TENANT_ID}/{owner.client_id}/%2E%2E/{stranger.client_id}/a1/secret.txt"

        assert api.get(escape, headers=auth_headers(owner)).status_code == 404
        assert api.get(f"/uploads/{TENANT_ID}/{owner.client_id}/missing.txt", headers=auth_headers(owner)).status_code == 404

    def test_upload_without_files(self, api, owner):
        created = create_asset(api, owner)
        response = api.post(f"/api/v1/assets/{created['id']}/files", headers=auth_headers(owner))
        assert response.status_code == 400

    def test_delete(self, api, owner):
        created = create_asset(api, owner)
        headers = auth_headers(owner)

        assert api.delete(f"/api/v1/assets/{created['id']}", headers=headers).status_code == 200
        assert api.get(f"/api/v1/assets/{created['id']}", headers=headers).status_code == 404


class TestShowroomsApi:
    def test_showroom_asset_flow(self, api, owner):
        headers = auth_headers(owner)
        showroom = api.post(
            "/api/v1/showrooms/",
            json={"name": "Downtown", "templates": [{"name": "Banner", "sizes": [{"label": "wide", "width": 1200, "height": 400}]}]},
            headers=headers,
        ).json()

        response = api.post(
            f"/api/v1/showrooms/{showroom['id']}/assets",
            json={"name": "Screen", "fields": [{"key": "pin", "is_secret": True, "value": "4321"}]},
            headers=headers,
        )
        assert response.status_code == 201
        asset = response.json()
        assert asset["showroom_id"] == showroom["id"]
        assert asset["fields"][0]["value"] == "4321"

        template_id = showroom["templates"][0]["id"]
        response = api.patch(
            f"/api/v1/showrooms/{showroom['id']}/templates/{template_id}",
            json={"description": "Front window"},
            headers=headers,
        )
        template = response.json()["templates"][0]
        assert template["name"] == "Banner"
        assert template["description"] == "Front window"

        response = api.delete(f"/api/v1/showrooms/{showroom['id']}", headers=headers)
        assert response.json()["assets_deleted"] == 1
        assert api.get(f"/api/v1/showrooms/{showroom['id']}", headers=headers).status_code == 404

    def test_foreign_showroom(self, api, owner, stranger):
        showroom = api.post("/api/v1/showrooms/", json={"name": "Downtown"}, headers=auth_headers(owner)).json()
        response = api.get(f"/api/v1/showrooms/{showroom['id']}/assets", headers=auth_headers(stranger))
        assert response.status_code == 404
        assert response.json()["detail"] == "Showroom not found"


class TestNotificationsApi:
    @pytest.fixture
    def seeded(self, session_factory, owner):
        with session_factory() as session:
            ledger = NotificationLedger(session)
            for title, user_id in (("broadcast", None), ("mine", owner.user_id), ("theirs", "someone-else")):
                ledger.create(
                    title=title, message="m", type=NotificationType.EXPIRATION_REMINDER,
                    tenant_id=TENANT_ID, client_id=owner.client_id, user_id=user_id,
                )

    def test_list_and_count(self, api, owner, seeded):
        headers = auth_headers(owner)

        titles = {n["title"] for n in api.get("/api/v1/notifications/", headers=headers).json()}
        count = api.get("/api/v1/notifications/unread-count", headers=headers).json()["count"]

        assert titles == {"broadcast", "mine"}
        assert count == 2

    def test_mark_read(self, api, owner, seeded):
        headers = auth_headers(owner)
        first = api.get("/api/v1/notifications/", headers=headers).json()[0]

        response = api.patch(f"/api/v1/notifications/{first['id']}/read", headers=headers)

        assert response.status_code == 200
        assert api.get("/api/v1/notifications/unread-count", headers=headers).json()["count"] == 1

    def test_mark_read_unknown(self, api, owner):
        response = api.patch("/api/v1/notifications/missing/read", headers=auth_headers(owner))
        assert response.status_code == 404

    def test_mark_all_read(self, api, owner, seeded, session_factory):
        headers = auth_headers(owner)

        response = api.patch("/api/v1/notifications/read-all", headers=headers)

        assert response.json()["updated"] == 2
        with session_factory() as session:
            unread = session.query(Notification).filter(Notification.is_read.is_(False)).all()
            assert [n.title for n in unread] == ["theirs"]


class TestClientsApi:
    def test_requires_superadmin(self, api, owner, client_record):
        assert api.get("/api/v1/clients/", headers=auth_headers(owner)).status_code == 403
        assert api.delete(f"/api/v1/clients/{client_record.id}", headers=auth_headers(owner)).status_code == 403

    def test_list_and_delete(self, api, superadmin, owner, client_record, db):
        db.close()
        create_asset(api, owner)
        headers = auth_headers(superadmin)

        assert [c["name"] for c in api.get("/api/v1/clients/", headers=headers).json()] == ["Acme Corp"]

        response = api.delete(f"/api/v1/clients/{client_record.id}", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["deleted"] is True
        assert body["failures"] == []
        assert body["counts"]["assets"] == 1
        assert api.get("/api/v1/assets/", headers=auth_headers(owner)).json() == []

    def test_get_client(self, api, superadmin, client_record, db):
        client_id = client_record.id
        db.close()
        headers = auth_headers(superadmin)

        response = api.get(f"/api/v1/clients/{client_id}", headers=headers)

        assert response.status_code == 200
        assert response.json()["name"] == "Acme Corp"
        assert api.get("/api/v1/clients/missing", headers=headers).status_code == 404

    def test_delete_unknown_client(self, api, superadmin):
        response = api.delete("/api/v1/clients/missing", headers=auth_headers(superadmin))
        assert response.status_code == 404

    def test_superadmin_has_no_client_scope(self, api, superadmin):
        response = api.get("/api/v1/assets/", headers=auth_headers(superadmin))
        assert response.status_code == 400
