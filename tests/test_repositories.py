from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, func, select, text
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from tourism_api.database import init_migrate
from tourism_api.dto import LoginDTO, ProfileDTO, RegisterDTO
from tourism_api.models import Destination, Review, User
from tourism_api.repositories import AdminRepository, NotFoundError, TourisRepository

PASSWORD = "password"


@pytest.fixture
def engine(tmp_path, monkeypatch):
    for name in ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET"):
        monkeypatch.delenv(name, raising=False)
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_migrate(engine)
    yield engine
    engine.dispose()


def _payload(username="alice", bod="2000-01-02"):
    password = PASSWORD
    return RegisterDTO(
        role=2,
        username=username,
        password=password,
        email=f"{username}@example.com",
        phone=f"phone-{username}",
        full_name="Alice Doe",
        photo="https://img.example.com/a.jpg",
        idphoto="",
        bod=bod,
        address="Main Street 1",
    )


def _add(engine, *objects):
    with Session(engine, expire_on_commit=False) as session:
        session.add_all(objects)
        session.commit()
    return objects


def _user(name):
    return User(
        role=2,
        username=name,
        password=PASSWORD,
        email=f"{name}@example.com",
        phone=f"phone-{name}",
    )


def _destination(name, deleted=False):
    return Destination(
        name=name,
        description="desc",
        image1=f"{name}-1.jpg",
        image2=f"{name}-2.jpg",
        image3=f"{name}-3.jpg",
        image4=f"{name}-4.jpg",
        price=100,
        address="addr",
        location="loc",
        average_rating=Decimal("4.5"),
        deleted_at=datetime.now(timezone.utc) if deleted else None,
    )


def test_register_then_read_profile(engine):
    repo = AdminRepository(engine)
    repo.register_admin(_payload())
    user = repo.login_admin(LoginDTO(username="alice", password=PASSWORD))
    assert user.password == PASSWORD
    assert repo.get_profile_admin(user.user_id) == ProfileDTO(
        user_id=user.user_id,
        full_name="Alice Doe",
        photo="https://img.example.com/a.jpg",
        bod="2000-01-02T00:00:00Z",
        address="Main Street 1",
        role=2,
        username="alice",
        email="alice@example.com",
        phone="phone-alice",
    )


def test_register_with_bad_birth_date_uses_zero_date(engine):
    repo = AdminRepository(engine)
    repo.register_admin(_payload(bod="02/01/2000"))
    user = repo.login_admin(LoginDTO(username="alice", password=PASSWORD))
    assert repo.get_profile_admin(user.user_id).bod == "0001-01-01T00:00:00Z"


def test_duplicate_register_is_rolled_back(engine):
    repo = AdminRepository(engine)
    repo.register_admin(_payload())
    with pytest.raises(IntegrityError):
        repo.register_admin(_payload())
    with Session(engine) as session:
        assert session.scalar(select(func.count()).select_from(User)) == 1


def test_login_unknown_user(engine):
    with pytest.raises(NotFoundError):
        AdminRepository(engine).login_admin(LoginDTO(username="nobody", password=PASSWORD))


def test_login_ignores_deleted_user(engine):
    user = _user("carol")
    user.deleted_at = datetime.now(timezone.utc)
    _add(engine, user)
    with pytest.raises(NotFoundError):
        AdminRepository(engine).login_admin(LoginDTO(username="carol", password=PASSWORD))


def test_missing_profile(engine):
    with pytest.raises(NotFoundError):
        AdminRepository(engine).get_profile_admin(42)


def test_destinations_skip_deleted(engine):
    beach, _ = _add(engine, _destination("Beach"), _destination("Ruins", deleted=True))
    found = AdminRepository(engine).get_all_destination()
    assert [item.name for item in found] == ["Beach"]
    assert found[0].destination_id == beach.destination_id
    assert found[0].average_rating == Decimal("4.5")


def test_destination_by_id(engine):
    (lake,) = _add(engine, _destination("Lake"))
    found = AdminRepository(engine).get_destination_by_id(lake.destination_id)
    assert found.name == "Lake"
    assert found.image4 == "Lake-4.jpg"
    with pytest.raises(NotFoundError):
        AdminRepository(engine).get_destination_by_id(lake.destination_id + 1)


def test_tourist_profile_matches_admin_profile(engine):
    admin = AdminRepository(engine)
    admin.register_admin(_payload())
    user = admin.login_admin(LoginDTO(username="alice", password=PASSWORD))
    assert TourisRepository(engine).get_profile_touris(user.user_id) == admin.get_profile_admin(
        user.user_id
    )


def test_reviews_of_one_user(engine):
    alice, bob, beach = _add(engine, _user("alice"), _user("bob"), _destination("Beach"))
    first, second, _ = _add(
        engine,
        Review(destination_id=beach.destination_id, user_id=alice.user_id, review_detail="nice", rating=5),
        Review(destination_id=beach.destination_id, user_id=alice.user_id, review_detail="ok", rating=3),
        Review(destination_id=beach.destination_id, user_id=bob.user_id, review_detail="meh", rating=2),
    )
    reviews = TourisRepository(engine).get_all_review_touris(alice.user_id)
    assert [r.review_id for r in reviews] == [first.review_id, second.review_id]
    assert {r.name for r in reviews} == {"Beach"}
    assert [r.rating for r in reviews] == [5, 3]
    assert reviews[0].image1 == "Beach-1.jpg"
    assert reviews[0].review_detail == "nice"


def test_reviews_empty_for_unknown_user(engine):
    assert TourisRepository(engine).get_all_review_touris(99) == []


@pytest.mark.parametrize("method", ["create_review_touris", "update_review_touris", "delete_review_touris"])
def test_review_flags_need_is_active_column(engine, method):
    with pytest.raises(DBAPIError):
        getattr(TourisRepository(engine), method)(1)


def test_review_flags_toggle_is_active(engine):
    alice, beach = _add(engine, _user("alice"), _destination("Beach"))
    (review,) = _add(
        engine,
        Review(destination_id=beach.destination_id, user_id=alice.user_id, review_detail="x", rating=1),
    )
    with engine.begin() as conn:
        conn.execute(text("ALTER TABLE reviews ADD COLUMN is_active BOOLEAN"))
    repo = TourisRepository(engine)

    def flag():
        with engine.connect() as conn:
            return conn.execute(
                text("SELECT is_active FROM reviews WHERE review_id = :id"),
                {"id": review.review_id},
            ).scalar()

    repo.create_review_touris(review.review_id)
    assert flag() == 1
    repo.update_review_touris(review.review_id)
    assert flag() == 0
    repo.create_review_touris(review.review_id)
    repo.delete_review_touris(review.review_id)
    assert flag() == 0