from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Dict

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = 10

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config.get("password", "")),
            database=str(db_config["database"]),
            connect_timeout=int(db_config.get("connect_timeout", 10)),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = dict(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            connection_timeout=self.connect_timeout,
            use_pure=True,
        )
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class DatabaseConnection:
    """Connection factory, one per database config.

    Every store operation opens its own short-lived connection, so a factory
    is safe to share between request threads and session trackers.
    """

    _instances: Dict[DBConfig, "DatabaseConnection"] = {}
    _lock = threading.Lock()

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        with cls._lock:
            instance = cls._instances.get(config)
            if instance is None:
                instance = cls._instances[config] = cls(config)
            return instance

    def connect(self):
        return mysql.connector.connect(**self._config.connect_kwargs())
