from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_mapping(cls, values: Mapping) -> "DBConfig":
        """Build from a settings `DB_CONFIG` dict."""
        return cls(
            host=str(values.get("host", "localhost")),
            port=int(values.get("port", 3306)),
            user=str(values.get("user", "root")),
            password=str(values.get("password", "")),
            database=str(values.get("database", "branch_attendance")),
        )


def open_connection(config: DBConfig, *, with_database: bool = True):
    """Connection with the session pinned to UTC; DATETIME columns hold UTC."""
    kwargs = dict(
        host=config.host,
        port=config.port,
        user=config.user,
        password=config.password,
        time_zone="+00:00",
    )
    if with_database:
        kwargs["database"] = config.database
    return mysql.connector.connect(**kwargs)


class DatabaseConnection:
    """Process-wide factory of short-lived connections, one per repository call."""

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        return open_connection(self._config)
