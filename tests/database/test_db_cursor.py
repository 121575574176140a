from __future__ import annotations

import mysql.connector
import pytest

from campus_attendance.core.exceptions import StoreError
from campus_attendance.database.mysql_base import db_cursor


class FakeCursor:
    def __init__(self, error=None):
        self.error = error
        self.closed = False

    def execute(self, sql, params=None):
        if self.error:
            raise self.error

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, conn=None, connect_error=None):
        self.conn = conn
        self.connect_error = connect_error

    def connect(self):
        if self.connect_error:
            raise self.connect_error
        return self.conn


def test_success_commits_and_closes():
    cur = FakeCursor()
    conn = FakeConnection(cur)

    with db_cursor(FakeConnFactory(conn)) as (_, c):
        c.execute("SELECT 1")

    assert conn.committed and not conn.rolled_back
    assert conn.closed and cur.closed


def test_driver_error_becomes_store_error_with_same_message():
    cur = FakeCursor(mysql.connector.Error("Duplicate entry"))
    conn = FakeConnection(cur)

    with pytest.raises(StoreError) as exc:
        with db_cursor(FakeConnFactory(conn)) as (_, c):
            c.execute("INSERT INTO attendance VALUES (%s)", ("x",))

    assert "Duplicate entry" in str(exc.value)
    assert str(exc.value) == str(mysql.connector.Error("Duplicate entry"))
    assert conn.rolled_back and not conn.committed
    assert conn.closed and cur.closed


def test_other_errors_roll_back_and_propagate():
    conn = FakeConnection(FakeCursor())

    with pytest.raises(KeyError):
        with db_cursor(FakeConnFactory(conn)):
            raise KeyError("reg_no")

    assert conn.rolled_back and not conn.committed and conn.closed


def test_connect_failure_is_store_error():
    factory = FakeConnFactory(connect_error=mysql.connector.Error("Can't connect to MySQL server"))

    with pytest.raises(StoreError, match="Can't connect"):
        with db_cursor(factory):
            pass
