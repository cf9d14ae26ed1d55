from conftest import make_company


def _seed_companies(db):
    a = make_company(db, name="Cafe Alpha", slug="cafe-alpha", city_slug="riyadh", category_slug="cafes")
    b = make_company(db, name="Cafe Beta", slug="cafe-beta", city_slug="riyadh", category_slug="cafes")
    c = make_company(db, name="Clinic One", slug="clinic-one", city_slug="jeddah", category_slug="clinics")
    d = make_company(db, name="Cafe Closed", slug="cafe-closed", city_slug="riyadh", category_slug="cafes")
    a.rating, a.reviews_count = 4.7, 12
    b.rating, b.reviews_count = 4.1, 5
    c.rating, c.reviews_count = 4.9, 2
    d.rating, d.is_active = 5.0, False
    db.commit()


def test_companies_filter_city_and_min_rating(client, db):
    _seed_companies(db)

    r = client.get("/companies", params={"city": "riyadh", "min_rating": 4.5})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["total"] == 1
    assert body["items"][0]["slug"] == "cafe-alpha"


def test_companies_sorted_by_rating_and_hide_inactive(client, db):
    _seed_companies(db)

    r = client.get("/companies", params={"country": "saudi-arabia"})
    body = r.json()
    assert [c["slug"] for c in body["items"]] == ["clinic-one", "cafe-alpha", "cafe-beta"]


def test_companies_search_and_pagination(client, db):
    _seed_companies(db)

    r1 = client.get("/companies", params={"q": "cafe", "category": "cafes", "limit": 1, "offset": 0})
    body1 = r1.json()
    assert body1["total"] == 2
    assert len(body1["items"]) == 1

    r2 = client.get("/companies", params={"q": "cafe", "category": "cafes", "limit": 1, "offset": 1})
    body2 = r2.json()
    assert len(body2["items"]) == 1
    assert body2["items"][0]["id"] != body1["items"][0]["id"]


def test_get_company_by_slug(client, db):
    _seed_companies(db)

    r = client.get("/companies/cafe-alpha")
    assert r.status_code == 200
    assert r.json()["city"] == "riyadh"

    assert client.get("/companies/cafe-closed").status_code == 404
    assert client.get("/companies/missing").status_code == 404


def test_admin_creates_company_and_owner(client, db, admin_headers):
    existing = make_company(db)
    payload = {
        "name": "Bright Dental",
        "country_id": existing.country_id,
        "city_id": existing.city_id,
        "category_id": existing.category_id,
        "phone": "+966500000000",
    }
    r = client.post("/admin/companies", json=payload, headers=admin_headers)
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["slug"] == "bright-dental"
    assert created["rating"] == 0
    assert created["reviews_count"] == 0

    dup = client.post("/admin/companies", json=payload, headers=admin_headers)
    assert dup.status_code == 409

    reg = client.post("/auth/register", json={"email": "boss@example.com", "password": "password123"})
    user_token = reg.json()["access_token"]
    me = client.get("/me", headers={"Authorization": f"Bearer {user_token}"}).json()

    r2 = client.post(f"/admin/companies/{created['id']}/owners", json={"user_id": me["id"]}, headers=admin_headers)
    assert r2.status_code == 201, r2.text
    me_after = client.get("/me", headers={"Authorization": f"Bearer {user_token}"}).json()
    assert me_after["role"] == "company_owner"


def test_admin_soft_deletes_company(client, db, admin_headers):
    company = make_company(db)

    r = client.delete(f"/admin/companies/{company.id}", headers=admin_headers)
    assert r.status_code == 200, r.text
    assert client.get(f"/companies/{company.slug}").status_code == 404


def test_company_admin_routes_require_admin(client, db):
    company = make_company(db)
    r = client.delete(f"/admin/companies/{company.id}")
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "UNAUTHORIZED"
