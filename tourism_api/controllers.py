"""HTTP handlers for administrators and tourists."""

import json
from typing import Any, Callable, Mapping

from flask import g, jsonify, request

from .auth import claim_data
from .convert import parse_uint, string_to_int
from .dto import LoginDTO, RegisterInsertDTO, ValidationError, validate
from .response import Response
from .services import AdminService, TourisService

REGISTER_ROLE = 2


class _BindError(Exception):
    def __init__(self, message: str, code: int):
        super().__init__(message)
        self.code = code


def _reply(message: str, code: int, data: Any = None):
    return jsonify(Response(message=message, code=code, data=data).to_dict()), code


def _lookup(source: Mapping, name: str) -> Any:
    if name in source:
        return source[name]
    for key, value in source.items():
        if key.lower() == name.lower():
            return value
    return None


def _bind_login() -> LoginDTO:
    if not request.content_length:
        if request.method not in ("GET", "DELETE"):
            raise _BindError("Request body can't be empty", 400)
        source: Mapping = request.args
    elif request.mimetype == "application/json":
        try:
            source = json.loads(request.get_data())
        except ValueError as exc:
            raise _BindError(f"Syntax error: {exc}", 400) from exc
        if not isinstance(source, dict):
            raise _BindError("Unmarshal type error: expected=object", 400)
    elif request.mimetype in ("application/x-www-form-urlencoded", "multipart/form-data"):
        source = request.form
    else:
        raise _BindError("Unsupported Media Type", 415)

    values = {}
    for name in ("username", "password"):
        value = _lookup(source, name)
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise _BindError(
                f"Unmarshal type error: expected=string, got={type(value).__name__}, field={name}",
                400,
            )
        values[name] = value
    return LoginDTO(**values)


def _current_user_id() -> int:
    claims = g.get("user") or {}
    return int(claim_data(claims, "userID"))


class AdminController:
    """Registration, login, destinations and the admin profile."""

    def __init__(self, service: AdminService):
        self._service = service

    def register(self):
        """Create an account from form fields and an optional photo."""
        payload = RegisterInsertDTO(
            role=REGISTER_ROLE,
            username=request.values.get("username", ""),
            password=request.values.get("password", ""),
            email=request.values.get("email", ""),
            phone=request.values.get("phone", ""),
            full_name=request.values.get("full_name", ""),
            photo=request.files.get("photo"),
            bod=request.values.get("bod", ""),
            address=request.values.get("address", ""),
        )
        try:
            validate(payload)
        except ValidationError as exc:
            return _reply(str(exc), 400)
        try:
            self._service.register_admin(payload)
        except Exception as exc:  # every failure is reported to the client
            return _reply(str(exc), 500)
        return _reply("success", 200)

    def login_admin(self):
        """Check credentials and answer with a token."""
        try:
            payload = _bind_login()
        except _BindError as exc:
            return jsonify({"message": str(exc)}), exc.code
        try:
            validate(payload)
        except ValidationError as exc:
            return _reply(str(exc), 400)
        try:
            result = self._service.login_admin(payload)
        except Exception as exc:  # every failure is reported to the client
            return _reply(str(exc), 401)
        return _reply("login success", 200, result)

    def get_all_destination(self):
        """List every destination."""
        try:
            result = self._service.get_all_destination()
        except Exception as exc:  # every failure is reported to the client
            return _reply(str(exc), 500)
        return _reply("success", 200, result)

    def get_destination_by_id(self):
        """One destination, chosen by the destination_id form or query value."""
        raw_id = request.values.get("destination_id", "")
        if raw_id == "":
            return _reply("id is required", 400)
        try:
            result = self._service.get_destination_by_id(string_to_int(raw_id))
        except Exception as exc:  # every failure is reported to the client
            return _reply(str(exc), 500)
        return _reply("success", 200, result)

    def get_profile_admin(self):
        """The profile of the admin the token belongs to."""
        try:
            profile = self._service.get_profile_admin(_current_user_id())
        except Exception as exc:  # every failure is reported to the client
            return _reply(str(exc), 500)
        return _reply("success", 200, profile)


class TourisController:
    """The tourist profile and reviews."""

    def __init__(self, service: TourisService):
        self._service = service

    def get_profile_touris(self):
        """The profile of the tourist the token belongs to."""
        try:
            profile = self._service.get_profile_touris(_current_user_id())
        except Exception as exc:  # every failure is reported to the client
            return _reply(str(exc), 500)
        return _reply("success", 200, profile)

    def get_all_review_touris(self):
        """Every review the tourist wrote."""
        try:
            reviews = self._service.get_all_review_touris(_current_user_id())
        except Exception as exc:  # every failure is reported to the client
            return _reply(str(exc), 500)
        return _reply("success", 200, reviews)

    def _review_action(self, action: Callable[[int], None], done: str):
        review_id = parse_uint(request.values.get("review_id", ""))
        if review_id != 0:
            return _reply("Invalid review_id", 400)
        try:
            action(review_id)
        except Exception as exc:  # every failure is reported to the client
            return _reply(str(exc), 500)
        return _reply(done, 200)

    def create_review_touris(self):
        """Mark a review active."""
        return self._review_action(
            self._service.create_review_touris, "Review created successfully"
        )

    def update_review_touris(self):
        """Mark a review inactive."""
        return self._review_action(
            self._service.update_review_touris, "Review updated successfully"
        )

    def delete_review_touris(self):
        """Mark a review inactive."""
        return self._review_action(
            self._service.delete_review_touris, "Review deleted successfully"
        )