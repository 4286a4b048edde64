import pytest

from conftest import USER_PASSWORD, login


@pytest.fixture()
def hierarchy(admin_client):
    """One continent → country → state → district chain."""
    continent = admin_client.post("/admin/continents", json={"name": "Asia", "code": "AS"}).json()
    country = admin_client.post("/admin/countries", json={
        "continent_id": continent["id"],
        "name": "India",
        "code": "IN",
        "currency": "INR",
        "phone_code": "+91",
    }).json()
    state = admin_client.post("/admin/states", json={
        "country_id": country["id"], "name": "Kerala", "code": "KL",
    }).json()
    district = admin_client.post("/admin/districts", json={
        "state_id": state["id"], "name": "Ernakulam", "code": "EKM",
    }).json()
    return {"continent": continent, "country": country, "state": state, "district": district}


def test_create_and_fetch(admin_client, hierarchy):
    country = hierarchy["country"]
    assert country["currency"] == "INR"
    assert country["status"] is True

    resp = admin_client.get(f"/admin/countries/{country['id']}")
    assert resp.status_code == 200
    assert resp.json()["name"] == "India"
    assert admin_client.get("/admin/countries/9999").status_code == 404


def test_list_ordered_by_sort_order_then_name(admin_client):
    admin_client.post("/admin/continents", json={"name": "Europe", "code": "EU", "sort_order": 2})
    admin_client.post("/admin/continents", json={"name": "Africa", "code": "AF", "sort_order": 2})
    admin_client.post("/admin/continents", json={"name": "Oceania", "code": "OC", "sort_order": 1})

    names = [c["name"] for c in admin_client.get("/admin/continents").json()]
    assert names == ["Oceania", "Africa", "Europe"]


def test_missing_parent_rejected(admin_client):
    resp = admin_client.post("/admin/states", json={"country_id": 4242, "name": "Nowhere", "code": "NW"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Country not found"


def test_update_and_toggle_status(admin_client, hierarchy):
    state = hierarchy["state"]
    resp = admin_client.put(f"/admin/states/{state['id']}", json={
        "country_id": state["country_id"], "name": "Kerala State", "code": "KL", "sort_order": 3,
    })
    assert resp.status_code == 200
    assert resp.json()["name"] == "Kerala State"

    toggled = admin_client.put(f"/admin/states/{state['id']}/status")
    assert toggled.json()["status"] is False
    toggled = admin_client.put(f"/admin/states/{state['id']}/status")
    assert toggled.json()["status"] is True


def test_delete_refused_while_children_exist(admin_client, hierarchy):
    country_id = hierarchy["country"]["id"]
    resp = admin_client.delete(f"/admin/countries/{country_id}")
    assert resp.status_code == 409

    assert admin_client.delete(f"/admin/districts/{hierarchy['district']['id']}").status_code == 200
    assert admin_client.delete(f"/admin/states/{hierarchy['state']['id']}").status_code == 200
    assert admin_client.delete(f"/admin/countries/{country_id}").status_code == 200
    assert admin_client.get(f"/admin/countries/{country_id}").status_code == 404


def test_filtered_lists(admin_client, hierarchy):
    continent_id = hierarchy["continent"]["id"]
    country_id = hierarchy["country"]["id"]
    state_id = hierarchy["state"]["id"]

    assert [c["code"] for c in admin_client.get(f"/admin/countries/by-continent/{continent_id}").json()] == ["IN"]
    assert [s["code"] for s in admin_client.get(f"/admin/states/by-country/{country_id}").json()] == ["KL"]
    assert [d["code"] for d in admin_client.get(f"/admin/districts/by-state/{state_id}").json()] == ["EKM"]
    assert [d["code"] for d in admin_client.get(f"/admin/districts/by-country/{country_id}").json()] == ["EKM"]
    assert admin_client.get("/admin/districts/by-country/9999").json() == []


def test_locations_need_admin(client, make_account):
    make_account("xena", role="regional")
    login(client, "xena", USER_PASSWORD)
    assert client.get("/admin/continents").status_code == 403
    client.cookies.clear()
    assert client.get("/admin/continents").status_code == 401
