"""Database tables for users, profiles, destinations, criteria and reviews."""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base for all tables."""


class _Timestamps:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), index=True, nullable=True
    )


class User(_Timestamps, Base):
    """An account; role tells admins from tourists."""

    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    role: Mapped[int] = mapped_column(Integer, nullable=False)
    username: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    phone: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    profile: Mapped[Optional["Profile"]] = relationship(back_populates="user")


class Profile(Base):
    """Personal details belonging to exactly one user."""

    __tablename__ = "profiles"

    profile_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.user_id"), nullable=False, unique=True
    )
    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    photo: Mapped[str] = mapped_column(Text, nullable=False)
    bod: Mapped[date] = mapped_column(Date, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)

    user: Mapped["User"] = relationship(back_populates="profile")


class Criteria(_Timestamps, Base):
    """An assessment criterion for destinations."""

    __tablename__ = "criteria"

    criteria_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)


class Destination(_Timestamps, Base):
    """A tourist destination."""

    __tablename__ = "destinations"

    destination_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image1: Mapped[str] = mapped_column(Text, nullable=False)
    image2: Mapped[str] = mapped_column(Text, nullable=False)
    image3: Mapped[str] = mapped_column(Text, nullable=False)
    image4: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    average_rating: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 3), default=Decimal(0)
    )
    assessment_result: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 3), default=Decimal(0)
    )
    address: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(Text, nullable=False)


class Review(_Timestamps, Base):
    """A user's review and rating of a destination."""

    __tablename__ = "reviews"

    review_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    destination_id: Mapped[int] = mapped_column(
        ForeignKey("destinations.destination_id"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), nullable=False)
    review_detail: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    destination: Mapped["Destination"] = relationship()
    user: Mapped["User"] = relationship()


class DetailCriteria(_Timestamps, Base):
    """A user's score of a destination on one criterion."""

    __tablename__ = "detail_criteria"

    detail_criteria_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), nullable=False)
    destination_id: Mapped[int] = mapped_column(
        ForeignKey("destinations.destination_id"), nullable=False
    )
    criteria_id: Mapped[int] = mapped_column(
        ForeignKey("criteria.criteria_id"), nullable=False
    )
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    user: Mapped["User"] = relationship()
    destination: Mapped["Destination"] = relationship()
    criteria: Mapped["Criteria"] = relationship()