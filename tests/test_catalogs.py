import pytest

from apphub.models.audit_log import AuditLog

from conftest import USER_PASSWORD, login


def test_category_lifecycle(admin_client, db):
    created = admin_client.post("/admin/categories", json={"name": "Media", "code": "MED", "sort_order": 2})
    assert created.status_code == 201
    category = created.json()
    assert category["is_active"] is True

    admin_client.post("/admin/categories", json={"name": "Chat", "sort_order": 1})
    names = [c["name"] for c in admin_client.get("/admin/categories").json()]
    assert names == ["Chat", "Media"]

    updated = admin_client.put(f"/admin/categories/{category['id']}", json={"code": "MDA"})
    assert updated.status_code == 200
    assert updated.json()["code"] == "MDA"
    assert updated.json()["name"] == "Media"

    toggled = admin_client.put(f"/admin/categories/{category['id']}/status")
    assert toggled.json()["is_active"] is False

    deleted = admin_client.delete(f"/admin/categories/{category['id']}")
    assert deleted.json()["detail"] == "Category deleted successfully"
    assert admin_client.get(f"/admin/categories/{category['id']}").status_code == 404

    actions = {a for (a,) in db.query(AuditLog.action).all()}
    assert {"create_categories", "update_categories", "delete_categories"} <= actions


def test_duplicate_language_code_conflicts(admin_client):
    assert admin_client.post("/admin/languages", json={"name": "English", "code": "en"}).status_code == 201
    resp = admin_client.post("/admin/languages", json={"name": "Englisch", "code": "en"})
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Language already exists"


def test_update_rejects_null_for_required_column(admin_client):
    level = admin_client.post("/admin/education", json={"level": "Graduate"}).json()
    resp = admin_client.put(f"/admin/education/{level['id']}", json={"level": None})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "level cannot be null"

    assert admin_client.put(f"/admin/education/{level['id']}", json={}).status_code == 400


def test_professions_filter_by_category(admin_client):
    admin_client.post("/admin/professions", json={"name": "Surgeon", "category": "Health"})
    admin_client.post("/admin/professions", json={"name": "Nurse", "category": "Health"})
    admin_client.post("/admin/professions", json={"name": "Welder", "category": "Trade"})

    health = admin_client.get("/admin/professions", params={"category": "Health"}).json()
    assert [p["name"] for p in health] == ["Nurse", "Surgeon"]
    assert len(admin_client.get("/admin/professions").json()) == 3


def test_profession_requires_category(admin_client):
    resp = admin_client.post("/admin/professions", json={"name": "Welder"})
    assert resp.status_code == 400
    assert [e["field"] for e in resp.json()["errors"]] == ["category"]


@pytest.mark.parametrize("path", ["/admin/categories", "/admin/languages", "/admin/education", "/admin/professions"])
def test_catalogs_are_admin_only(client, make_account, path):
    make_account("cora", role="corporate")
    login(client, "cora", USER_PASSWORD)
    resp = client.get(path)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Access denied. Required role: admin"
