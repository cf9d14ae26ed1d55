import logging

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from conftest import auth_header, login, make_company, make_owner, make_review, make_user, principal_for
from murabaat.models.notifications import Notification
from murabaat.models.reviews import Review
from murabaat.services import reviews as review_service
from murabaat.services.errors import NotFoundError
from murabaat.services.notifications import list_notifications, mark_all_read, mark_read


def _submit(db, company, **kw):
    return review_service.submit_review(
        db,
        company_id=company.id,
        rating=kw.pop("rating", 4),
        comment="تجربة ممتازة مع الفريق",
        user_name=kw.pop("user_name", "سارة"),
        **kw,
    )


def test_submission_notifies_company_owners(db, company):
    owner = make_owner(db, company)
    review = _submit(db, company)

    items, stats = list_notifications(db, principal_for(owner))

    assert len(items) == 1
    n = items[0]
    assert n.type == "review"
    assert n.company_id == company.id
    assert n.data == {"review_id": review.id}
    assert "سارة" in n.message and company.name in n.message
    assert n.is_read is False
    assert stats.unread_count == 1
    assert stats.by_type["review"] == 1


def test_notification_failure_keeps_review(db, company, monkeypatch, caplog):
    def _broken(*args, **kwargs):
        raise OperationalError("INSERT INTO notifications", {}, Exception("database is locked"))

    monkeypatch.setattr(review_service, "notify_new_review", _broken)

    with caplog.at_level(logging.ERROR, logger="murabaat.services.reviews"):
        review = _submit(db, company)

    assert "Owner notification failed" in caplog.text
    stored = db.get(Review, review.id)
    assert stored is not None and stored.is_approved is False
    assert db.scalars(select(Notification)).all() == []


def test_owner_only_sees_own_company_notifications(db, company):
    other = make_company(db, name="Other", slug="other")
    owner = make_owner(db, company)
    other_owner = make_owner(db, other, email="other-owner@example.com")
    _submit(db, company)
    other_review = _submit(db, other)

    items, _ = list_notifications(db, principal_for(owner))
    assert [n.company_id for n in items] == [company.id]

    foreign = db.scalar(select(Notification).where(Notification.company_id == other.id))
    with pytest.raises(NotFoundError):
        mark_read(db, principal_for(owner), notification_id=foreign.id)

    items, _ = list_notifications(db, principal_for(other_owner))
    assert items[0].data == {"review_id": other_review.id}


def test_mark_read_and_mark_all_read(db, company):
    owner = make_owner(db, company)
    for name in ("أ", "ب", "ج"):
        _submit(db, company, user_name=name)

    items, stats = list_notifications(db, principal_for(owner))
    assert stats.unread_count == 3

    read = mark_read(db, principal_for(owner), notification_id=items[0].id)
    assert read.is_read is True
    assert list_notifications(db, principal_for(owner))[1].unread_count == 2

    assert mark_all_read(db, principal_for(owner)) == 2
    unread, stats = list_notifications(db, principal_for(owner), unread_only=True)
    assert unread == [] and stats.unread_count == 0
    assert mark_all_read(db, principal_for(owner)) == 0


def test_notifications_over_http(client, db, company):
    owner = make_owner(db, company)
    headers = auth_header(login(client, owner.email))

    r = client.post(
        f"/companies/{company.id}/reviews",
        json={"user_name": "خالد", "rating": 2, "comment": "الانتظار كان طويلاً جداً"},
    )
    assert r.status_code == 201, r.text
    review_id = r.json()["id"]

    body = client.get("/company/notifications", headers=headers).json()
    assert body["stats"]["unread_count"] == 1
    notification = body["items"][0]
    assert notification["data"] == {"review_id": review_id}

    r = client.patch(f"/company/notifications/{notification['id']}/read", headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["is_read"] is True

    assert client.patch("/company/notifications/missing/read", headers=headers).status_code == 404
    assert client.patch("/company/notifications/read-all", headers=headers).json() == {"updated": 0}

    plain = make_user(db, email="plain@example.com")
    r = client.get("/company/notifications", headers=auth_header(login(client, plain.email)))
    assert r.status_code == 401


def test_admin_dashboard_covers_every_company(client, db, company, admin_headers):
    other = make_company(db, name="Other", slug="other")
    make_review(db, company, rating=5)
    make_review(db, other, rating=3, approved=False)

    body = client.get("/company/reviews", headers=admin_headers).json()
    assert body["total"] == 2

    _submit(db, other)
    notes = client.get("/company/notifications", headers=admin_headers).json()
    assert notes["stats"]["unread_count"] == 1
