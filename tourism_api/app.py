"""The web application: routes, CORS, access log and the command that starts it."""

import argparse
import logging
import os
import sys
import time
from typing import Optional, Sequence

from dotenv import load_dotenv
from flask import Flask, g, request
from sqlalchemy.engine import Engine

from .auth import role_jwt
from .controllers import AdminController, TourisController
from .convert import get_role_int
from .database import init_db
from .repositories import AdminRepository, TourisRepository
from .services import AdminService, TourisService

_log = logging.getLogger(__name__)

_ALLOW_METHODS = "GET,HEAD,PUT,PATCH,POST,DELETE"
_ALLOW_HEADERS = "Origin,Content-Type,Accept,Authorization"


def _trim(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{frac:0{digits}d}".rstrip("0")


def _human_latency(seconds: float) -> str:
    ns = max(0, round(seconds * 1e9))
    if ns == 0:
        return "0s"
    if ns < 1_000:
        return f"{ns}ns"
    if ns < 1_000_000:
        return _trim(ns, 1_000) + "µs"
    if ns < 1_000_000_000:
        return _trim(ns, 1_000_000) + "ms"
    hours, rest = divmod(ns, 3600 * 10**9)
    minutes, rest = divmod(rest, 60 * 10**9)
    text = _trim(rest, 10**9) + "s"
    if minutes or hours:
        text = f"{minutes}m{text}"
    if hours:
        text = f"{hours}h{text}"
    return text


def _install_middleware(app: Flask) -> None:
    @app.before_request
    def start_and_preflight():
        g.request_started = time.perf_counter()
        if request.method == "OPTIONS":
            response = app.response_class(status=204)
            for header in ("Origin", "Access-Control-Request-Method", "Access-Control-Request-Headers"):
                response.headers.add("Vary", header)
            response.headers["Access-Control-Allow-Origin"] = "*"
            response.headers["Access-Control-Allow-Methods"] = _ALLOW_METHODS
            response.headers["Access-Control-Allow-Headers"] = _ALLOW_HEADERS
            return response
        return None

    @app.after_request
    def cors_and_log(response):
        if request.method != "OPTIONS":
            response.headers.add("Vary", "Origin")
            response.headers["Access-Control-Allow-Origin"] = "*"
        started = g.get("request_started", time.perf_counter())
        uri = request.path
        if request.query_string:
            uri += "?" + request.query_string.decode("latin-1")
        sys.stdout.write(
            f"method={request.method}, uri={uri}, status={response.status_code}, "
            f"latency_human={_human_latency(time.perf_counter() - started)}\n"
        )
        return response


def create_app(engine: Engine) -> Flask:
    """Build the application on top of a database engine."""
    app = Flask(__name__)
    _install_middleware(app)

    admin = AdminController(AdminService(AdminRepository(engine)))
    touris = TourisController(TourisService(TourisRepository(engine)))
    admin_only = role_jwt(get_role_int("ADMIN"))
    touris_only = role_jwt(get_role_int("TOURIS"))

    def ping():
        return app.response_class("ping", mimetype="text/plain")

    routes = [
        ("/", "ping", ping, "GET"),
        ("/v1/profile/", "admin_profile", admin_only(admin.get_profile_admin), "GET"),
        ("/v2/profile/", "touris_profile", touris_only(touris.get_profile_touris), "GET"),
        ("/auth/register", "register", admin.register, "POST"),
        ("/auth/login", "login", admin.login_admin, "POST"),
        ("/destination", "destinations", admin.get_all_destination, "GET"),
        ("/destination/id", "destination", admin.get_destination_by_id, "GET"),
        ("/v2/review", "review_list", touris_only(touris.get_all_review_touris), "GET"),
        ("/v2/review", "review_create", touris_only(touris.create_review_touris), "POST"),
        ("/v2/review", "review_update", touris_only(touris.update_review_touris), "PUT"),
        ("/v2/review", "review_delete", touris_only(touris.delete_review_touris), "DELETE"),
    ]
    for rule, endpoint, view, method in routes:
        app.add_url_rule(rule, endpoint, view, methods=[method])
    return app


def _listen_address(address: str) -> tuple:
    host, sep, port_text = address.rpartition(":")
    if not sep or (port_text and not port_text.isdigit()):
        raise ValueError(f"invalid listen address {address!r}")
    return host or "0.0.0.0", int(port_text) if port_text else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load .env, connect to the database and serve on the address in PORT."""
    parser = argparse.ArgumentParser(description="Serve the tourism API.")
    parser.parse_args(argv)

    if not os.path.isfile(".env"):
        _log.critical("Error loading .env file")
        return 1
    load_dotenv(".env")

    engine = init_db()
    app = create_app(engine)
    try:
        host, port = _listen_address(os.environ.get("PORT", ""))
    except ValueError as exc:
        _log.error("%s", exc)
        return 1
    app.run(host=host, port=port)
    return 0