from fastapi.testclient import TestClient

from apphub.core.config import settings
from apphub.main import app
from apphub.models.account import Account
from apphub.models.app import AppDetails

from conftest import USER_PASSWORD, login


MEDIA = {"name": "Media", "apps_name": "mymedia", "code": "MM", "sort_order": 1}


def _create_app(admin_client, **details):
    payload = {"group": MEDIA}
    if details:
        payload["details"] = details
    resp = admin_client.post("/admin/app-create", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _create_account(admin_client, app_id, username="media_bot"):
    resp = admin_client.post("/admin/app-accounts", json={
        "username": username, "password": USER_PASSWORD, "app_id": app_id,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_group_crud(admin_client):
    created = admin_client.post("/admin/groups", json=MEDIA)
    assert created.status_code == 201
    group = created.json()
    assert group["details"] is None

    resp = admin_client.put(f"/admin/groups/{group['id']}", json={"apps_name": "mymedia2"})
    assert resp.json()["apps_name"] == "mymedia2"
    assert [g["name"] for g in admin_client.get("/admin/groups").json()] == ["Media"]

    assert admin_client.delete(f"/admin/groups/{group['id']}").status_code == 200
    assert admin_client.get(f"/admin/groups/{group['id']}").status_code == 404


def test_app_create_with_details(admin_client):
    created = _create_app(admin_client, icon="media.png", background_color="#ff0000")
    assert created["details"]["icon"] == "media.png"
    assert created["details"]["background_color"] == "#ff0000"

    listing = admin_client.get("/admin/app-create").json()
    assert [a["id"] for a in listing] == [created["id"]]
    assert listing[0]["details"]["icon"] == "media.png"


def test_deleting_app_removes_its_details(admin_client, db):
    created = _create_app(admin_client, icon="media.png")
    assert admin_client.delete(f"/admin/groups/{created['id']}").status_code == 200
    assert db.query(AppDetails).count() == 0


def test_app_account_can_sign_in(admin_client, db):
    created = _create_app(admin_client)
    account = _create_account(admin_client, created["id"])
    assert account["app_name"] == "Media"
    assert account["is_active"] is True

    row = db.get(Account, account["account_id"])
    assert row.email == f"media_bot@{settings.app_account_email_domain}"
    assert row.role_name == "user"

    bot = TestClient(app)
    assert login(bot, "media_bot", USER_PASSWORD).status_code == 200


def test_app_account_errors(admin_client, make_account):
    created = _create_app(admin_client)
    make_account("taken")

    unknown_app = admin_client.post("/admin/app-accounts", json={
        "username": "bot_one", "password": USER_PASSWORD, "app_id": 9999,
    })
    assert unknown_app.status_code == 400
    assert unknown_app.json()["detail"] == "App not found"

    clash = admin_client.post("/admin/app-accounts", json={
        "username": "taken", "password": USER_PASSWORD, "app_id": created["id"],
    })
    assert clash.status_code == 409

    weak = admin_client.post("/admin/app-accounts", json={
        "username": "bot_two", "password": "weak", "app_id": created["id"],
    })
    assert weak.status_code == 400


def test_check_reports_provisioned_accounts(admin_client):
    created = _create_app(admin_client)
    assert admin_client.get(f"/admin/app-accounts/check/{created['id']}").json() == {
        "exists": False, "accounts": 0,
    }
    _create_account(admin_client, created["id"])
    assert admin_client.get(f"/admin/app-accounts/check/{created['id']}").json() == {
        "exists": True, "accounts": 1,
    }


def test_reset_password_issues_new_secret_and_revokes_sessions(admin_client):
    created = _create_app(admin_client)
    account = _create_account(admin_client, created["id"])
    bot = TestClient(app)
    login(bot, "media_bot", USER_PASSWORD)
    assert bot.get("/auth/me").status_code == 200

    resp = admin_client.post(f"/admin/app-accounts/{account['id']}/reset-password")
    assert resp.status_code == 200
    temporary = resp.json()["temporary_password"]
    assert temporary != USER_PASSWORD

    assert bot.get("/auth/me").status_code == 401
    bot.cookies.clear()
    assert login(bot, "media_bot", USER_PASSWORD).status_code == 401
    assert login(bot, "media_bot", temporary).status_code == 200


def test_delete_app_account_then_app(admin_client):
    created = _create_app(admin_client)
    account = _create_account(admin_client, created["id"])

    in_use = admin_client.delete(f"/admin/groups/{created['id']}")
    assert in_use.status_code == 409
    assert in_use.json()["detail"] == "App is still in use"

    assert admin_client.delete(f"/admin/app-accounts/{account['id']}").status_code == 200
    assert admin_client.get("/admin/app-accounts").json() == {"accounts": []}
    assert admin_client.delete(f"/admin/app-accounts/{account['id']}").status_code == 404

    bot = TestClient(app)
    assert login(bot, "media_bot", USER_PASSWORD).status_code == 401
    assert admin_client.delete(f"/admin/groups/{created['id']}").status_code == 200


def test_app_management_is_admin_only(client, make_account):
    make_account("cora", role="corporate")
    login(client, "cora", USER_PASSWORD)
    assert client.get("/admin/groups").status_code == 403
    assert client.get("/admin/app-accounts").status_code == 403
