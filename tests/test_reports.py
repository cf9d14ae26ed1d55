import pytest

from conftest import make_review
from murabaat.models.enums import ReportStatus
from murabaat.models.reviews import Review, ReviewReport
from murabaat.services.errors import InvalidStateError, NotFoundError, Unauthorized, ValidationError
from murabaat.services.permissions import ANONYMOUS
from murabaat.services.reports import adjudicate_report, report_stats, submit_report

DESCRIPTION = "هذا التقييم يحتوي على إعلانات"


def test_submit_report_is_pending(db, company):
    review = make_review(db, company, rating=1)

    report = submit_report(db, review_id=review.id, reason="SPAM", description=DESCRIPTION)

    assert report.status == ReportStatus.pending.value
    assert report.review_id == review.id
    assert report.reporter_email is None


@pytest.mark.parametrize("reason, description", [("NOT_A_REASON", DESCRIPTION), ("SPAM", "   ")])
def test_submit_report_validation(db, company, reason, description):
    review = make_review(db, company, rating=1)
    with pytest.raises(ValidationError):
        submit_report(db, review_id=review.id, reason=reason, description=description)


def test_cannot_report_pending_or_missing_review(db, company):
    pending = make_review(db, company, rating=1, approved=False)
    with pytest.raises(NotFoundError):
        submit_report(db, review_id=pending.id, reason="SPAM", description=DESCRIPTION)
    with pytest.raises(NotFoundError):
        submit_report(db, review_id="missing", reason="SPAM", description=DESCRIPTION)


def test_approving_report_deletes_review_and_updates_aggregate(db, company, admin_principal):
    keep = make_review(db, company, rating=4)
    bad = make_review(db, company, rating=1)
    bad_id = bad.id
    report = submit_report(db, review_id=bad_id, reason="FAKE_REVIEW", description=DESCRIPTION)

    result = adjudicate_report(db, admin_principal, report_id=report.id, decision="approve")

    assert result.status == ReportStatus.approved.value
    assert result.resolved_at is not None
    assert result.review_id is None
    db.expire_all()
    assert db.get(Review, bad_id) is None
    assert db.get(ReviewReport, report.id) is not None
    assert db.get(Review, keep.id) is not None
    db.refresh(company)
    assert (company.rating, company.reviews_count) == (4.0, 1)


def test_rejecting_report_keeps_review(db, company, admin_principal):
    review = make_review(db, company, rating=2)
    report = submit_report(db, review_id=review.id, reason="OTHER", description=DESCRIPTION)

    result = adjudicate_report(db, admin_principal, report_id=report.id, decision="reject")

    assert result.status == ReportStatus.rejected.value
    db.expire_all()
    assert db.get(Review, review.id) is not None


@pytest.mark.parametrize("first, second", [("approve", "reject"), ("reject", "approve"), ("reject", "reject")])
def test_readjudication_is_invalid(db, company, admin_principal, first, second):
    review = make_review(db, company, rating=2)
    report = submit_report(db, review_id=review.id, reason="HARASSMENT", description=DESCRIPTION)
    adjudicate_report(db, admin_principal, report_id=report.id, decision=first)

    with pytest.raises(InvalidStateError):
        adjudicate_report(db, admin_principal, report_id=report.id, decision=second)


def test_second_report_on_deleted_review_can_still_be_approved(db, company, admin_principal):
    review = make_review(db, company, rating=1)
    one = submit_report(db, review_id=review.id, reason="SPAM", description=DESCRIPTION)
    two = submit_report(db, review_id=review.id, reason="SPAM", description=DESCRIPTION)

    adjudicate_report(db, admin_principal, report_id=one.id, decision="approve")
    result = adjudicate_report(db, admin_principal, report_id=two.id, decision="approve")

    assert result.status == ReportStatus.approved.value
    assert result.review_id is None


def test_adjudication_requires_admin(db, company):
    review = make_review(db, company, rating=1)
    report = submit_report(db, review_id=review.id, reason="SPAM", description=DESCRIPTION)

    with pytest.raises(Unauthorized):
        adjudicate_report(db, ANONYMOUS, report_id=report.id, decision="approve")
    db.expire_all()
    assert db.get(Review, review.id) is not None


def test_report_stats(db, company, admin_principal):
    review = make_review(db, company, rating=1)
    other = make_review(db, company, rating=2)
    a = submit_report(db, review_id=review.id, reason="SPAM", description=DESCRIPTION)
    submit_report(db, review_id=review.id, reason="SPAM", description=DESCRIPTION)
    b = submit_report(db, review_id=other.id, reason="OTHER", description=DESCRIPTION)
    adjudicate_report(db, admin_principal, report_id=b.id, decision="reject")
    adjudicate_report(db, admin_principal, report_id=a.id, decision="approve")

    stats = report_stats(db)

    assert (stats.total, stats.pending, stats.approved, stats.rejected) == (3, 1, 1, 1)
    assert stats.processing_rate == 67
    assert stats.by_reason == [
        {"reason": "SPAM", "count": 2, "percentage": 67},
        {"reason": "OTHER", "count": 1, "percentage": 33},
    ]


def test_report_flow_over_http(client, db, company, admin_headers):
    review_id = make_review(db, company, rating=1).id

    r = client.post(
        f"/reviews/{review_id}/report",
        json={"reason": "INAPPROPRIATE_LANGUAGE", "description": DESCRIPTION, "reporter_email": "r@example.com"},
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["reason"] == "لغة غير لائقة"
    assert body["status"] == "PENDING"
    report_id = body["report_id"]

    listing = client.get("/admin/reports", params={"status": "pending"}, headers=admin_headers).json()
    assert listing["total"] == 1
    assert listing["items"][0]["company_id"] == company.id

    r = client.patch(f"/admin/reports/{report_id}", json={"action": "approve"}, headers=admin_headers)
    assert r.status_code == 200, r.text
    assert r.json()["data"]["status"] == "APPROVED"
    assert r.json()["data"]["review_id"] is None

    r = client.patch(f"/admin/reports/{report_id}", json={"action": "reject"}, headers=admin_headers)
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "INVALID_STATE"

    assert client.post(f"/reviews/{review_id}/helpful").status_code == 404

    stats = client.get("/admin/reports/stats", headers=admin_headers).json()
    assert stats["approved"] == 1
    assert stats["processing_rate"] == 100


def test_report_validation_over_http(client, db, company):
    review_id = make_review(db, company, rating=1).id

    r = client.post(f"/reviews/{review_id}/report", json={"reason": "RUDE", "description": DESCRIPTION})
    assert r.status_code == 400
    r = client.post(f"/reviews/{review_id}/report", json={"reason": "SPAM", "description": "short"})
    assert r.status_code == 400
    r = client.post("/reviews/missing/report", json={"reason": "SPAM", "description": DESCRIPTION})
    assert r.status_code == 404
