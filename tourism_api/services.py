"""Business rules for registration, login, destinations, profiles and reviews."""

import uuid
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from .auth import create_token
from .dto import (
    DestinationResponseDTO,
    LoginDTO,
    LoginJWT,
    ProfileDTO,
    RegisterDTO,
    RegisterInsertDTO,
    ReviewResponseDTO,
)
from .hashing import compare_hash, hash_bcrypt
from .repositories import AdminRepository, NotFoundError, TourisRepository
from .storage import upload_to_cloudinary


class LoginError(Exception):
    """The username or the password is wrong."""


class AdminService:
    """Registration, login, destinations and admin profiles."""

    def __init__(self, repository: AdminRepository):
        self._repository = repository

    def register_admin(self, payload: RegisterInsertDTO) -> None:
        """Upload the photo if given, hash the password and store the account."""
        photo_url = ""
        idphoto = ""
        if payload.photo is not None:
            stream = getattr(payload.photo, "stream", payload.photo)
            uploaded = upload_to_cloudinary(stream, str(uuid.uuid4()))
            photo_url = uploaded.secure_url
            idphoto = uploaded.public_id
        record = RegisterDTO(
            role=payload.role,
            username=payload.username,
            password=payload.password,
            email=payload.email,
            phone=payload.phone,
            full_name=payload.full_name,
            photo=photo_url,
            idphoto=idphoto,
            bod=payload.bod,
            address=payload.address,
        )
        record.password = hash_bcrypt(record.password)
        self._repository.register_admin(record)

    def login_admin(self, payload: LoginDTO) -> LoginJWT:
        """Check the credentials and issue a token."""
        try:
            user = self._repository.login_admin(payload)
        except (NotFoundError, SQLAlchemyError) as exc:
            raise LoginError("username or password incorrect") from exc
        try:
            compare_hash(user.password, payload.password)
        except ValueError as exc:
            raise LoginError("username or password incorrect") from exc
        token = create_token(user.user_id, user.role, user.username)
        return LoginJWT(username=user.username, token=token)

    def get_all_destination(self) -> List[DestinationResponseDTO]:
        """Every destination."""
        return self._repository.get_all_destination()

    def get_destination_by_id(self, destination_id: int) -> DestinationResponseDTO:
        """One destination by its id."""
        return self._repository.get_destination_by_id(destination_id)

    def get_profile_admin(self, user_id: int) -> ProfileDTO:
        """The admin's profile."""
        return self._repository.get_profile_admin(user_id)


class TourisService:
    """Tourist profiles and reviews."""

    def __init__(self, repository: TourisRepository):
        self._repository = repository

    def get_profile_touris(self, user_id: int) -> ProfileDTO:
        """The tourist's profile."""
        return self._repository.get_profile_touris(user_id)

    def get_all_review_touris(self, user_id: int) -> List[ReviewResponseDTO]:
        """The tourist's reviews."""
        return self._repository.get_all_review_touris(user_id)

    def create_review_touris(self, review_id: int) -> None:
        """Mark a review active."""
        self._repository.create_review_touris(review_id)

    def update_review_touris(self, review_id: int) -> None:
        """Mark a review inactive."""
        self._repository.update_review_touris(review_id)

    def delete_review_touris(self, review_id: int) -> None:
        """Mark a review inactive."""
        self._repository.delete_review_touris(review_id)