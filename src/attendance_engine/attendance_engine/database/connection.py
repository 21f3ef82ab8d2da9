from __future__ import annotations

from dataclasses import dataclass

import mysql.connector

from ..core.exceptions import StoreUnavailableError


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "attendance_db")),
        )


class DatabaseConnection:
    """DB connection factory owned by the container.

    Note: We create short-lived connections per operation. The factory is built
    once at process start and closed explicitly at teardown.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def connect(self):
        if self._closed:
            raise StoreUnavailableError("Database connection factory is closed")
        try:
            return mysql.connector.connect(
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
            )
        except mysql.connector.Error as e:
            raise StoreUnavailableError(
                f"Cannot reach {self._config.user}@{self._config.host}:{self._config.port}/{self._config.database}: {e}"
            ) from e

    def verify(self) -> None:
        """Open and close one connection; raises StoreUnavailableError."""
        conn = self.connect()
        try:
            cur = conn.cursor()
            cur.execute("SELECT 1")
            cur.fetchall()
            cur.close()
        finally:
            conn.close()

    def close(self) -> None:
        self._closed = True
