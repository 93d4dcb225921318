# tourism-api

A small Flask backend for a tourism destination catalogue. It keeps user
accounts with profiles, a list of destinations, and the reviews tourists
write, in a SQLAlchemy database. Requests to protected routes carry a JSON
Web Token (HS256), and access is split by role: administrators and tourists.

## Installation

```
pip install .
```

The server connects to PostgreSQL through SQLAlchemy, so a PostgreSQL driver
that SQLAlchemy can use for `postgresql://` URLs must be installed as well;
it is not pulled in by this package.

To run the tests:

```
pip install ".[test]"
pytest
```

## Configuration

Settings come from the environment. At start-up `tourism-api` loads a
`.env` file from the current directory; if that file is missing it logs
`Error loading .env file` and exits with status 1.

| Variable | Meaning |
| --- | --- |
| `PORT` | listen address as `host:port`, e.g. `:8080` (an empty host means all interfaces) |
| `DB_ADDRESS` | PostgreSQL host |
| `DB_PORT` | PostgreSQL port (digits only) |
| `DB_USERNAME` | PostgreSQL user |
| `DB_PASSWORD` | PostgreSQL password |
| `DB_NAME` | PostgreSQL database name |
| `JWT_KEY` | key used to sign and check tokens |
| `ADMIN` | numeric role id of administrators |
| `TOURIS` | numeric role id of tourists |
| `CLOUDINARY_CLOUD_NAME`, `CLOUDINARY_API_KEY`, `CLOUDINARY_API_SECRET` | image hosting for profile photos |
| `NEXTCLOUD_WEBDAV_URL`, `NEXTCLOUD_USERNAME`, `NEXTCLOUD_PASSWORD`, `NEXTCLOUD_PUBLIC_URL` | WebDAV storage used by `tourism_api.storage.upload_to_nextcloud` |

A made-up example `.env`:

```
PORT=:8080
DB_ADDRESS=localhost
DB_PORT=5432
DB_USERNAME=user
DB_PASSWORD=password
DB_NAME=tourism
JWT_KEY=secret
ADMIN=1
TOURIS=2
CLOUDINARY_CLOUD_NAME=demo
CLOUDINARY_API_KEY=placeholder
CLOUDINARY_API_SECRET=secret
```

The database connection is made with `sslmode=disable`. On start-up the
tables `users`, `profiles`, `criteria`, `destinations`, `reviews` and
`detail_criteria` are created if they do not exist yet.

## Running

```
tourism-api
```

Each request is logged to standard output as
`method=..., uri=..., status=..., latency_human=...`. CORS is open to every
origin for the methods GET, HEAD, PUT, PATCH, POST and DELETE, and
`OPTIONS` preflight requests are answered with `204`.

## Endpoints

Responses are JSON objects with `message`, `code` and `data`.

Open to everyone:

| Method | Path | Purpose |
| --- | --- | --- |
| GET | `/` | health check, answers the text `ping` |
| POST | `/auth/register` | register an account from form fields `username`, `password`, `email`, `phone`, `full_name`, `bod` (YYYY-MM-DD), `address` and an optional `photo` file |
| POST | `/auth/login` | log in with `username` and `password` (JSON or form); returns the username and a token valid for 24 hours |
| GET | `/destination` | list all destinations |
| GET | `/destination/id` | one destination, chosen by the `destination_id` query or form value |

Registration always creates accounts with role `2`. Every field except
`photo` is required and `email` must look like an e-mail address; a failed
check answers `400`. The password is stored as a bcrypt hash (cost 14). A
photo is uploaded to Cloudinary into the `profile` folder, and its URL is
kept in the profile. A wrong username or password at login answers `401`
with `username or password incorrect`.

Administrators (`Authorization: Bearer token`, role `ADMIN`):

| Method | Path | Purpose |
| --- | --- | --- |
| GET | `/v1/profile/` | the caller's profile |

Tourists (`Authorization: Bearer token`, role `TOURIS`):

| Method | Path | Purpose |
| --- | --- | --- |
| GET | `/v2/profile/` | the caller's profile |
| GET | `/v2/review` | the caller's reviews with the name and first image of each destination |
| POST | `/v2/review` | mark a review active, by `review_id` |
| PUT | `/v2/review` | mark a review inactive, by `review_id` |
| DELETE | `/v2/review` | mark a review inactive, by `review_id` |

On the protected routes a missing or malformed `Authorization` header
answers `400`, an invalid or expired token `401`, and a token whose `role`
claim is not a number or not the route's role `403`.

## Limitations

- There are no routes for creating, changing or deleting destinations, and
  none for criteria or criteria scores; those tables are created but only
  reachable through the models in `tourism_api.models`.
- The review routes accept only an absent or zero `review_id`; any other
  value answers `400 Invalid review_id`. They set an `is_active` column on
  `reviews`, which the created tables do not define, so these calls fail
  with `500` unless that column has been added to the database by hand.
  There is no route that writes a new review's text or rating.

## Using it as a library

The application can be built around an existing SQLAlchemy engine, which is
handy for tests or for serving it from another WSGI server. The `ADMIN` and
`TOURIS` roles are read from the environment when the application is built.

```python
from sqlalchemy import create_engine

from tourism_api.app import create_app
from tourism_api.database import init_migrate

engine = create_engine("sqlite://")
init_migrate(engine)
app = create_app(engine)
```

The layers can also be used on their own:

- `tourism_api.database`: `DatabaseConfig` (with `from_env()` and `url()`),
  `init_db()` and `init_migrate()`.
- `tourism_api.repositories`: `AdminRepository` and `TourisRepository` for
  database access; lookups that find nothing raise `NotFoundError`.
- `tourism_api.services`: `AdminService` and `TourisService` for
  registration, login and reviews; bad credentials raise `LoginError`.
- `tourism_api.auth`: `create_token()`, `decode_token()` and the route
  guards `role_jwt()` and `authorization()`.
- `tourism_api.hashing`: `hash_bcrypt()` and `compare_hash()`.
- `tourism_api.storage`: `upload_to_cloudinary()`,
  `delete_from_cloudinary()` and `upload_to_nextcloud()`.
- `tourism_api.dto`: the request and response shapes, `validate()` and
  `to_dict()`.
- `tourism_api.convert`: lenient number parsing (`parse_uint()`,
  `string_to_int()`, `get_role_int()`) and `age()`.