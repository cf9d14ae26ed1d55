import pytest

from conftest import make_company, make_review
from murabaat.models.companies import Company
from murabaat.services.errors import NotFoundError
from murabaat.services.ratings import average_rating, recompute_all_company_ratings, recompute_company_rating


@pytest.mark.parametrize(
    "ratings, expected",
    [
        ([], 0.0),
        ([5], 5.0),
        ([5, 3], 4.0),
        ([5, 4], 4.5),
        ([5, 4, 4, 4], 4.3),  # 4.25 rounds half up
        ([1, 2, 2], 1.7),
    ],
)
def test_average_rating(ratings, expected):
    assert average_rating(ratings) == expected


def test_recompute_counts_only_approved_reviews(db, company):
    make_review(db, company, rating=5)
    make_review(db, company, rating=3)
    make_review(db, company, rating=1, approved=False)

    summary = recompute_company_rating(db, company_id=company.id)

    assert summary.rating == 4.0
    assert summary.reviews_count == 2
    db.refresh(company)
    assert company.rating == 4.0
    assert company.reviews_count == 2


def test_recompute_without_approved_reviews_resets_to_zero(db, company):
    company.rating, company.reviews_count = 3.3, 9
    db.commit()
    make_review(db, company, rating=4, approved=False)

    recompute_company_rating(db, company_id=company.id)

    db.refresh(company)
    assert company.rating == 0
    assert company.reviews_count == 0


def test_recompute_is_idempotent(db, company):
    for r in (5, 4, 4, 2):
        make_review(db, company, rating=r)

    first = recompute_company_rating(db, company_id=company.id)
    second = recompute_company_rating(db, company_id=company.id)

    assert first == second
    assert (first.rating, first.reviews_count) == (3.8, 4)


def test_recompute_unknown_company(db):
    with pytest.raises(NotFoundError):
        recompute_company_rating(db, company_id="does-not-exist")


def test_recompute_all_heals_stale_aggregates(db):
    a = make_company(db, name="A", slug="a")
    b = make_company(db, name="B", slug="b")
    make_review(db, a, rating=5)
    make_review(db, a, rating=4)
    make_review(db, b, rating=2)
    b.rating, b.reviews_count = 5.0, 40
    db.commit()

    assert recompute_all_company_ratings(db) == 2

    db.expire_all()
    assert (db.get(Company, a.id).rating, db.get(Company, a.id).reviews_count) == (4.5, 2)
    assert (db.get(Company, b.id).rating, db.get(Company, b.id).reviews_count) == (2.0, 1)


def test_recalculate_endpoint(client, db, company, admin_headers):
    make_review(db, company, rating=5)
    make_review(db, company, rating=3)

    r = client.post("/admin/recalculate-ratings", headers=admin_headers)
    assert r.status_code == 200, r.text
    assert r.json() == {"success": True, "companies": 1}

    body = client.get(f"/companies/{company.slug}").json()
    assert body["rating"] == 4.0
    assert body["reviews_count"] == 2
