"""JSON Web Tokens and the role checks that guard routes.

A route guarded by role_jwt stores the verified claims in flask.g.user.
"""

import functools
import math
import os
import time
from typing import Any, Callable, Mapping, Optional

import jwt
from flask import g, jsonify, request

from .response import Response

TOKEN_LIFETIME = 24 * 60 * 60
_ALGORITHM = "HS256"
_SCHEME = "Bearer"


class AuthError(Exception):
    """A token is missing, malformed, expired or wrongly signed."""

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code


def _key() -> str:
    return os.environ.get("JWT_KEY", "")


def create_token(user_id: int, role: int, username: str) -> str:
    """Sign a token for the user that expires in 24 hours."""
    claims = {
        "userID": user_id,
        "role": role,
        "username": username,
        "exp": int(time.time()) + TOKEN_LIFETIME,
    }
    token = jwt.encode(claims, _key(), algorithm=_ALGORITHM)
    return token.decode("ascii") if isinstance(token, bytes) else token


def decode_token(token: str) -> dict:
    """Verify a token and return its claims."""
    try:
        return jwt.decode(token, _key(), algorithms=[_ALGORITHM])
    except jwt.PyJWTError as exc:
        raise AuthError("invalid or expired jwt") from exc


def claim_data(claims: Mapping[str, Any], field: str) -> Any:
    """One claim's value, or None when it is absent."""
    return claims.get(field)


def _reply(message: str, code: int):
    return jsonify(Response(message=message, code=code).to_dict()), code


def _go_text(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    size = len(_SCHEME)
    if len(header) > size + 1 and header[:size] == _SCHEME:
        return header[size + 1:]
    return None


def authorization(view: Callable) -> Callable:
    """Let the request through only when the token's role is 1."""

    @functools.wraps(view)
    def guarded(*args, **kwargs):
        claims = getattr(g, "user", None) or {}
        if _go_text(claim_data(claims, "role")) != "1":
            return _reply("you dont have permission to access", 403)
        return view(*args, **kwargs)

    return guarded


def role_jwt(required_role: int) -> Callable[[Callable], Callable]:
    """Require a valid bearer token whose role equals required_role."""

    def decorator(view: Callable) -> Callable:
        @functools.wraps(view)
        def guarded(*args, **kwargs):
            token = _bearer_token()
            if token is None:
                return jsonify({"message": "missing or malformed jwt"}), 400
            try:
                claims = decode_token(token)
            except AuthError as exc:
                return jsonify({"message": str(exc)}), exc.status_code
            g.user = claims

            role = claims.get("role")
            if isinstance(role, bool) or not isinstance(role, (int, float)):
                return _reply("invalid role format", 403)
            if (isinstance(role, float) and not math.isfinite(role)) or int(role) != required_role:
                return _reply(
                    "your role doesn't have permission to access this resource", 403
                )
            return view(*args, **kwargs)

        return guarded

    return decorator