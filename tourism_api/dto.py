"""Request and response shapes, their validation and JSON rendering."""

import re
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

_EMAIL = re.compile(
    r"[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)+"
)

PASSWORD = "password"
_REQUIRED = "required"


def _field(json_name: str, default: Any = None, validate: str = "") -> Any:
    return field(default=default, metadata={"json": json_name, "validate": validate})


def _password_field() -> Any:
    return field(default_factory=str, metadata={"json": PASSWORD, "validate": _REQUIRED})


def _struct_name(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in name.split("_"))


class ValidationError(ValueError):
    """One or more fields failed their validation rules."""

    def __init__(self, struct: str, failures: list):
        self.failures = list(failures)
        message = "\n".join(
            f"Key: '{struct}.{name}' Error:Field validation for '{name}' failed on the '{tag}' tag"
            for name, tag in self.failures
        )
        super().__init__(message)


@dataclass
class RegisterDTO:
    role: int = _field("role", 0, "required")
    username: str = _field("username", "", "required")
    password: str = _password_field()
    email: str = _field("email", "", "required,email")
    phone: str = _field("phone", "", "required")
    full_name: str = _field("full_name", "", "required")
    photo: str = _field("photo", "", "required")
    idphoto: str = _field("idphoto", "", "required")
    bod: str = _field("bod", "", "required")
    address: str = _field("address", "", "required")


@dataclass
class RegisterInsertDTO:
    role: int = _field("role", 0, "required")
    username: str = _field("username", "", "required")
    password: str = _password_field()
    email: str = _field("email", "", "required,email")
    phone: str = _field("phone", "", "required")
    full_name: str = _field("full_name", "", "required")
    photo: Optional[Any] = _field("Photo", None)
    bod: str = _field("bod", "", "required")
    address: str = _field("address", "", "required")


@dataclass
class LoginDTO:
    username: str = _field("username", "", "required")
    password: str = _password_field()


@dataclass
class LoginJWT:
    username: str = _field("username", "")
    token: str = _field("token", "")


@dataclass
class DestinationCreateDTO:
    name: str = _field("name", "", "required")
    description: str = _field("description", "", "required")
    image1: str = _field("image1", "", "required")
    image2: str = _field("image2", "", "required")
    image3: str = _field("image3", "", "required")
    image4: str = _field("image4", "", "required")
    price: int = _field("price", 0, "required")
    address: str = _field("address", "", "required")
    location: str = _field("location", "", "required")


@dataclass
class DestinationResponseDTO:
    destination_id: int = _field("destination_id", 0)
    name: str = _field("name", "")
    description: str = _field("description", "")
    image1: str = _field("image1", "")
    image2: str = _field("image2", "")
    image3: str = _field("image3", "")
    image4: str = _field("image4", "")
    price: int = _field("price", 0)
    average_rating: Decimal = _field("average_rating", Decimal(0))
    assessment_result: Decimal = _field("assessment_result", Decimal(0))
    address: str = _field("address", "")
    location: str = _field("location", "")


@dataclass
class ProfileDTO:
    user_id: int = _field("user_id", 0)
    full_name: str = _field("full_name", "")
    photo: str = _field("photo", "")
    bod: str = _field("bod", "")
    address: str = _field("address", "")
    role: int = _field("role", 0)
    username: str = _field("username", "")
    email: str = _field("email", "")
    phone: str = _field("phone", "")


@dataclass
class InsertProfileDTO:
    user_id: int = _field("user_id", 0, "required")
    full_name: str = _field("full_name", "")
    photo: Optional[Any] = _field("Photo", None)
    bod: str = _field("bod", "")
    address: str = _field("address", "")
    username: str = _field("username", "")
    password: str = _password_field()


@dataclass
class ReviewResponseDTO:
    review_id: int = _field("review_id", 0)
    user_id: int = _field("user_id", 0)
    destination_id: int = _field("destination_id", 0)
    name: str = _field("name", "")
    image1: str = _field("image1", "")
    created_at: Optional[datetime] = _field("created_at", None)
    rating: int = _field("rating", 0)
    review_detail: str = _field("review_detail", "")


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, int, float, Decimal)):
        return not value
    return False


def _check(tag: str, value: Any) -> bool:
    if tag == "required":
        return not _is_zero(value)
    if tag == "email":
        return isinstance(value, str) and _EMAIL.fullmatch(value) is not None
    raise TypeError(f"unknown validation tag {tag!r}")


def validate(obj: Any) -> Any:
    """Check every field's rules and return the object; raise ValidationError if any fail."""
    if not is_dataclass(obj) or isinstance(obj, type):
        raise TypeError("validate expects a dataclass instance")
    failures = []
    for item in fields(obj):
        rules = [tag for tag in item.metadata.get("validate", "").split(",") if tag]
        value = getattr(obj, item.name)
        for tag in rules:
            if not _check(tag, value):
                failures.append((_struct_name(item.name), tag))
                break
    if failures:
        raise ValidationError(type(obj).__name__, failures)
    return obj


def _decimal_text(value: Decimal) -> str:
    if value == 0:
        return "0"
    return f"{value.normalize():f}"


def to_dict(obj: Any) -> Any:
    """Render DTOs, lists and scalar values as JSON-ready data."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return {
            item.metadata.get("json", item.name): to_dict(getattr(obj, item.name))
            for item in fields(obj)
        }
    if isinstance(obj, (list, tuple)):
        return [to_dict(value) for value in obj]
    if isinstance(obj, dict):
        return {key: to_dict(value) for key, value in obj.items()}
    if isinstance(obj, Decimal):
        return _decimal_text(obj)
    if isinstance(obj, datetime):
        text = obj.isoformat()
        return text[:-6] + "Z" if text.endswith("+00:00") else text
    if isinstance(obj, date):
        return obj.isoformat()
    return obj