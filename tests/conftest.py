import os
import tempfile
from pathlib import Path

_tmpdir = Path(tempfile.mkdtemp(prefix="murabaat_test_"))
_db_path = _tmpdir / "test.db"

os.environ.setdefault("DATABASE_URL", f"sqlite:///{_db_path.as_posix()}")
os.environ.setdefault("APP_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_DIR", "")

import pytest
from sqlalchemy import select
from fastapi.testclient import TestClient

from murabaat.core.rate_limit import _reset_for_tests
from murabaat.core.security import get_password_hash
from murabaat.db.base import Base
from murabaat.db.session import SessionLocal, engine
from murabaat.main import create_app
from murabaat.models.companies import Company, CompanyOwner
from murabaat.models.enums import UserRole
from murabaat.models.reviews import Review
from murabaat.models.taxonomy import Category, City, Country
from murabaat.models.users import UserAuth
from murabaat.services.permissions import Principal


@pytest.fixture()
def clean_db():
    _reset_for_tests()

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db(clean_db):
    session = SessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client(clean_db):
    app = create_app()
    with TestClient(app) as c:
        yield c


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def make_company(db, *, name="مطعم الريف", slug="al-reef", city_slug="riyadh", category_slug="restaurants") -> Company:
    country = db.scalar(select(Country).where(Country.slug == "saudi-arabia"))
    if country is None:
        country = Country(code="SA", name="السعودية", slug="saudi-arabia")
        db.add(country)
        db.flush()
    city = db.scalar(select(City).where(City.slug == city_slug))
    if city is None:
        city = City(country_id=country.id, name=city_slug.title(), slug=city_slug)
        db.add(city)
        db.flush()
    category = db.scalar(select(Category).where(Category.slug == category_slug))
    if category is None:
        category = Category(name=category_slug.title(), slug=category_slug)
        db.add(category)
        db.flush()

    company = Company(
        name=name,
        slug=slug,
        country_id=country.id,
        city_id=city.id,
        category_id=category.id,
    )
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


def make_review(db, company: Company, *, rating: int, approved: bool = True, user_name="زائر", **kw) -> Review:
    review = Review(
        company_id=company.id,
        user_name=user_name,
        rating=rating,
        title=kw.pop("title", ""),
        comment=kw.pop("comment", "تجربة جيدة جداً مع الخدمة"),
        is_approved=approved,
        **kw,
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    return review


def make_user(db, *, email: str, role: UserRole = UserRole.user, name: str | None = None) -> UserAuth:
    user = UserAuth(email=email, name=name, password_hash=get_password_hash("password123"), role=role.value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_owner(db, company: Company, *, email="owner@example.com") -> UserAuth:
    user = make_user(db, email=email, role=UserRole.company_owner)
    db.add(CompanyOwner(company_id=company.id, user_id=user.id))
    db.commit()
    return user


def principal_for(user: UserAuth) -> Principal:
    return Principal(user_id=user.id, role=UserRole(user.role))


def login(client, email: str, password: str = "password123") -> str:
    r = client.post("/auth/token", data={"username": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]


@pytest.fixture()
def company(db) -> Company:
    return make_company(db)


@pytest.fixture()
def admin(db) -> UserAuth:
    return make_user(db, email="admin@example.com", role=UserRole.admin, name="Admin")


@pytest.fixture()
def admin_principal(admin) -> Principal:
    return principal_for(admin)


@pytest.fixture()
def admin_headers(client, admin) -> dict[str, str]:
    return auth_header(login(client, admin.email))
