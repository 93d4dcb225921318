"""Database access for administrators and tourists."""

import re
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List

from sqlalchemy import DateTime, bindparam, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .dto import (
    DestinationResponseDTO,
    LoginDTO,
    ProfileDTO,
    RegisterDTO,
    ReviewResponseDTO,
)
from .models import Destination, Profile, Review, User
from .storage import StorageError, delete_from_cloudinary

_ZERO_DATE = date(1, 1, 1)
_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

_SET_ACTIVE = text(
    "UPDATE reviews SET is_active = :active, updated_at = :now "
    "WHERE review_id = :review_id AND deleted_at IS NULL"
).bindparams(bindparam("now", type_=DateTime(timezone=True)))


class NotFoundError(LookupError):
    """No row matched the query."""

    def __init__(self, message: str = "record not found"):
        super().__init__(message)


def _parse_bod(value: str) -> date:
    if _DATE.fullmatch(value):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    return _ZERO_DATE


def _bod_text(value) -> str:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    if isinstance(value, date):
        return f"{value.isoformat()}T00:00:00Z"
    return "" if value is None else str(value)


def _discard_photo(public_id: str) -> None:
    if not public_id:
        return
    try:
        delete_from_cloudinary(public_id)
    except StorageError:
        pass


def _destination_dto(row: Destination) -> DestinationResponseDTO:
    return DestinationResponseDTO(
        destination_id=row.destination_id,
        name=row.name,
        description=row.description,
        image1=row.image1,
        image2=row.image2,
        image3=row.image3,
        image4=row.image4,
        price=row.price,
        average_rating=row.average_rating if row.average_rating is not None else Decimal(0),
        assessment_result=(
            row.assessment_result if row.assessment_result is not None else Decimal(0)
        ),
        address=row.address,
        location=row.location,
    )


class _Repository:
    def __init__(self, engine: Engine):
        self._sessions = sessionmaker(engine, expire_on_commit=False)

    def _profile(self, user_id: int) -> ProfileDTO:
        stmt = (
            select(
                Profile.user_id,
                User.username,
                Profile.full_name,
                Profile.photo,
                Profile.bod,
                Profile.address,
                User.role,
                User.email,
                User.phone,
            )
            .join(User, User.user_id == Profile.user_id)
            .where(Profile.user_id == user_id)
            .order_by(Profile.profile_id)
            .limit(1)
        )
        with self._sessions() as session:
            row = session.execute(stmt).first()
        if row is None:
            raise NotFoundError()
        values = dict(row._mapping)
        values["bod"] = _bod_text(values["bod"])
        return ProfileDTO(**values)


class AdminRepository(_Repository):
    """Accounts, profiles and destinations."""

    def register_admin(self, payload: RegisterDTO) -> None:
        """Store a user and its profile in one transaction."""
        bod = _parse_bod(payload.bod)
        with self._sessions.begin() as session:
            try:
                user = User(
                    username=payload.username,
                    password=payload.password,
                    email=payload.email,
                    phone=payload.phone,
                    role=payload.role,
                )
                session.add(user)
                session.flush()
                session.add(
                    Profile(
                        user_id=user.user_id,
                        full_name=payload.full_name,
                        photo=payload.photo,
                        bod=bod,
                        address=payload.address,
                    )
                )
                session.flush()
            except SQLAlchemyError:
                _discard_photo(payload.idphoto)
                raise

    def login_admin(self, payload: LoginDTO) -> User:
        """Find the account with the given username."""
        stmt = (
            select(User)
            .where(User.username == payload.username, User.deleted_at.is_(None))
            .order_by(User.user_id)
            .limit(1)
        )
        with self._sessions() as session:
            user = session.scalars(stmt).first()
        if user is None:
            raise NotFoundError()
        return user

    def get_profile_admin(self, user_id: int) -> ProfileDTO:
        """The profile joined with its account."""
        return self._profile(user_id)

    def get_all_destination(self) -> List[DestinationResponseDTO]:
        """Every destination that is not deleted."""
        stmt = (
            select(Destination)
            .where(Destination.deleted_at.is_(None))
            .order_by(Destination.destination_id)
        )
        with self._sessions() as session:
            return [_destination_dto(row) for row in session.scalars(stmt)]

    def get_destination_by_id(self, destination_id: int) -> DestinationResponseDTO:
        """One destination by its id."""
        stmt = (
            select(Destination)
            .where(
                Destination.destination_id == destination_id,
                Destination.deleted_at.is_(None),
            )
            .order_by(Destination.destination_id)
            .limit(1)
        )
        with self._sessions() as session:
            row = session.scalars(stmt).first()
            if row is None:
                raise NotFoundError()
            return _destination_dto(row)


class TourisRepository(_Repository):
    """Tourist profiles and reviews."""

    def get_profile_touris(self, user_id: int) -> ProfileDTO:
        """The profile joined with its account."""
        return self._profile(user_id)

    def get_all_review_touris(self, user_id: int) -> List[ReviewResponseDTO]:
        """The user's reviews with the name and first image of each destination."""
        stmt = (
            select(
                Review.review_id,
                Review.user_id,
                Review.destination_id,
                Review.rating,
                Review.review_detail,
                Review.created_at,
                Destination.image1,
                Destination.name,
            )
            .select_from(Review)
            .join(User, User.user_id == Review.user_id)
            .join(Destination, Destination.destination_id == Review.destination_id)
            .where(Review.user_id == user_id, Review.deleted_at.is_(None))
            .order_by(Review.review_id)
        )
        with self._sessions() as session:
            return [ReviewResponseDTO(**row._mapping) for row in session.execute(stmt)]

    def _set_active(self, review_id: int, active: bool) -> None:
        session: Session
        with self._sessions.begin() as session:
            session.execute(
                _SET_ACTIVE,
                {
                    "active": active,
                    "now": datetime.now(timezone.utc),
                    "review_id": review_id,
                },
            )

    def create_review_touris(self, review_id: int) -> None:
        """Mark the review active."""
        self._set_active(review_id, True)

    def update_review_touris(self, review_id: int) -> None:
        """Mark the review inactive."""
        self._set_active(review_id, False)

    def delete_review_touris(self, review_id: int) -> None:
        """Mark the review inactive."""
        self._set_active(review_id, False)