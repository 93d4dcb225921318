"""The JSON envelope every endpoint answers with."""

from dataclasses import dataclass
from typing import Any

from .dto import to_dict


@dataclass
class Response:
    """A message, an HTTP status code and an optional payload."""

    message: str
    code: int
    data: Any = None

    def to_dict(self) -> dict:
        """Render the envelope as JSON-ready data."""
        return {
            "message": self.message,
            "code": self.code,
            "data": to_dict(self.data),
        }