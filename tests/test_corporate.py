import pytest
from fastapi.testclient import TestClient

from apphub.main import app
from apphub.models.corporate import GalleryImage

from conftest import ADMIN_PASSWORD, USER_PASSWORD, login


AD = {"ad_type": "banner", "title": "Autumn sale", "url": "https://example.com/sale"}


@pytest.fixture()
def corporate_client(client, make_account):
    make_account("cora", role="corporate")
    assert login(client, "cora", USER_PASSWORD).status_code == 200
    return client


def _other_corporate(make_account):
    make_account("otto", role="corporate")
    other = TestClient(app)
    assert login(other, "otto", USER_PASSWORD).status_code == 200
    return other


# -- Ads -------------------------------------------------------------------------


def test_ad_lifecycle(corporate_client):
    created = corporate_client.post("/corporate/ads", json=AD)
    assert created.status_code == 201
    ad = created.json()
    assert ad["owner_id"] is not None
    assert ad["is_active"] is True

    corporate_client.post("/corporate/ads", json={**AD, "ad_type": "sidebar", "title": "Side"})
    banners = corporate_client.get("/corporate/ads", params={"ad_type": "banner"}).json()
    assert [a["title"] for a in banners] == ["Autumn sale"]

    resp = corporate_client.put(f"/corporate/ads/{ad['id']}", json={"title": "Winter sale"})
    assert resp.json()["title"] == "Winter sale"
    assert resp.json()["ad_type"] == "banner"

    assert corporate_client.put(f"/corporate/ads/{ad['id']}/status").json()["is_active"] is False
    assert corporate_client.delete(f"/corporate/ads/{ad['id']}").json()["detail"] == "Ad deleted successfully"
    assert corporate_client.get(f"/corporate/ads/{ad['id']}").status_code == 404


def test_rows_are_scoped_to_their_owner(corporate_client, make_account):
    ad = corporate_client.post("/corporate/ads", json=AD).json()
    other = _other_corporate(make_account)

    assert other.get("/corporate/ads").json() == []
    assert other.get(f"/corporate/ads/{ad['id']}").status_code == 404
    assert other.put(f"/corporate/ads/{ad['id']}", json={"title": "Mine now"}).status_code == 404
    assert other.delete(f"/corporate/ads/{ad['id']}").status_code == 404

    admin = TestClient(app)
    login(admin, "admin", ADMIN_PASSWORD, path="/auth/login")
    listing = admin.get("/corporate/ads").json()
    assert [a["id"] for a in listing] == [ad["id"]]
    assert admin.get(f"/corporate/ads/{ad['id']}").json()["title"] == "Autumn sale"


def test_required_field_cannot_be_nulled(corporate_client):
    ad = corporate_client.post("/corporate/ads", json=AD).json()
    resp = corporate_client.put(f"/corporate/ads/{ad['id']}", json={"title": None})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "title cannot be null"


# -- Other content ---------------------------------------------------------------


def test_terms_default_version(corporate_client):
    resp = corporate_client.post("/corporate/terms-conditions", json={"title": "Terms", "content": "Be nice."})
    assert resp.status_code == 201
    assert resp.json()["version"] == "1.0"


def test_award_carries_tag_line(corporate_client):
    resp = corporate_client.post("/corporate/awards", json={
        "title": "Best app", "content": "Won in 2026", "tag_line": "Top pick",
    })
    assert resp.status_code == 201
    assert resp.json()["tag_line"] == "Top pick"


def test_contact_email_is_validated(corporate_client):
    bad = corporate_client.post("/corporate/contact-us", json={"company_name": "Acme", "email": "nope"})
    assert bad.status_code == 400
    assert bad.json()["errors"][0]["field"] == "email"

    good = corporate_client.post("/corporate/contact-us", json={"company_name": "Acme", "email": "Info@Acme.com"})
    assert good.status_code == 201
    assert good.json()["email"] == "info@acme.com"


def test_social_links_ordered_by_platform(corporate_client):
    corporate_client.post("/corporate/social-links", json={"platform": "youtube", "url": "https://yt.example"})
    corporate_client.post("/corporate/social-links", json={"platform": "facebook", "url": "https://fb.example"})
    platforms = [link["platform"] for link in corporate_client.get("/corporate/social-links").json()]
    assert platforms == ["facebook", "youtube"]


def test_feedback_triage(corporate_client):
    created = corporate_client.post("/corporate/feedback", json={
        "name": "Pia",
        "email": "pia@example.com",
        "feedback_type": "bug",
        "subject": "Crash",
        "message": "It crashed.",
        "rating": 2,
    })
    assert created.status_code == 201
    entry = created.json()
    assert entry["status"] == "pending"

    bad = corporate_client.put(f"/corporate/feedback/{entry['id']}", json={"status": "ignored"})
    assert bad.status_code == 400

    ok = corporate_client.put(f"/corporate/feedback/{entry['id']}", json={"status": "resolved"})
    assert ok.json()["status"] == "resolved"
    assert corporate_client.get("/corporate/feedback", params={"status": "pending"}).json() == []
    assert corporate_client.put(f"/corporate/feedback/{entry['id']}/status").status_code == 404


def test_feedback_rating_range(corporate_client):
    resp = corporate_client.post("/corporate/feedback", json={
        "name": "Pia", "email": "pia@example.com", "feedback_type": "bug",
        "subject": "Crash", "message": "It crashed.", "rating": 6,
    })
    assert resp.status_code == 400


# -- Gallery images ----------------------------------------------------------------


def test_gallery_images(corporate_client, db):
    gallery = corporate_client.post("/corporate/galleries", json={"name": "Launch"}).json()
    path = f"/corporate/galleries/{gallery['id']}/images"

    added = corporate_client.post(path, json={"images": [
        {"image": "b.png", "sort_order": 2},
        {"image": "a.png", "caption": "First", "sort_order": 1},
    ]})
    assert added.status_code == 201
    assert len(added.json()) == 2

    listing = corporate_client.get(path).json()
    assert [i["image"] for i in listing] == ["a.png", "b.png"]

    assert corporate_client.post(path, json={"images": []}).status_code == 400

    first = listing[0]["id"]
    assert corporate_client.delete(f"{path}/{first}").status_code == 200
    assert corporate_client.delete(f"{path}/{first}").status_code == 404

    assert corporate_client.delete(f"/corporate/galleries/{gallery['id']}").status_code == 200
    assert db.query(GalleryImage).count() == 0


def test_gallery_images_follow_gallery_owner(corporate_client, make_account):
    gallery = corporate_client.post("/corporate/galleries", json={"name": "Launch"}).json()
    other = _other_corporate(make_account)
    resp = other.post(f"/corporate/galleries/{gallery['id']}/images", json={"images": [{"image": "x.png"}]})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Gallery not found"


# -- Access ------------------------------------------------------------------------


def test_user_role_is_refused(client, make_account):
    make_account("uli")
    login(client, "uli", USER_PASSWORD)
    resp = client.get("/corporate/ads")
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Access denied. Required role: admin or corporate"


def test_anonymous_is_401(client):
    assert client.get("/corporate/about-us").status_code == 401
