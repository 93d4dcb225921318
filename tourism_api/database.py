"""Connection settings and schema setup for the PostgreSQL database."""

import os
import re
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine

from .models import Base

_PORT = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class DatabaseConfig:
    """Where the database lives and how to log in to it."""

    username: str = ""
    password: str = ""
    address: str = ""
    name: str = ""
    port: str = ""

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Read the settings from the DB_* environment variables."""
        return cls(
            username=os.environ.get("DB_USERNAME", ""),
            password=os.environ.get("DB_PASSWORD", ""),
            address=os.environ.get("DB_ADDRESS", ""),
            name=os.environ.get("DB_NAME", ""),
            port=os.environ.get("DB_PORT", ""),
        )

    def url(self) -> URL:
        """The connection URL, with TLS switched off."""
        port: Optional[int] = None
        if self.port:
            if not _PORT.fullmatch(self.port):
                raise ValueError(f"invalid database port {self.port!r}")
            port = int(self.port)
        return URL.create(
            "postgresql",
            username=self.username or None,
            password=self.password or None,
            host=self.address or None,
            port=port,
            database=self.name or None,
            query={"sslmode": "disable"},
        )


def init_db(config: Optional[DatabaseConfig] = None) -> Engine:
    """Connect to the database, create the tables and return the engine."""
    config = config or DatabaseConfig.from_env()
    engine = create_engine(config.url())
    with engine.connect():
        pass
    init_migrate(engine)
    return engine


def init_migrate(engine: Engine) -> None:
    """Create every table that does not exist yet."""
    Base.metadata.create_all(engine)