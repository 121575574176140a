from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AdminPasswordConfig
from .repository import AdminConfigRepository

_CONFIG_ID = 1


class MySQLAdminConfigRepository(AdminConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[AdminPasswordConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT password_hash, last_updated, email FROM admin_config WHERE id=%s",
                (_CONFIG_ID,),
            )
            row = fetchone(cur)
            if not row or not row.get("password_hash"):
                return None
            return AdminPasswordConfig(
                password_hash=row["password_hash"],
                last_updated=row["last_updated"],
                email=row.get("email") or None,
            )

    def save(self, config: AdminPasswordConfig) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO admin_config(id, password_hash, last_updated, email)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    password_hash=VALUES(password_hash),
                    last_updated=VALUES(last_updated),
                    email=VALUES(email)
                """,
                (_CONFIG_ID, config.password_hash, config.last_updated, config.email),
            )
