from __future__ import annotations

import re

from employee_management.database import bootstrap


class RecordingCursor:
    """Answers every lookup with 'no row' and records inserts."""

    def __init__(self, log: list):
        self._log = log
        self.lastrowid = 0

    def execute(self, sql, params=()):
        self._log.append((" ".join(sql.split()), params))
        if sql.lstrip().upper().startswith("INSERT"):
            self.lastrowid += 1

    def fetchone(self):
        return None


class RecordingConnection:
    def __init__(self, log: list):
        self._log = log

    def cursor(self, dictionary=False):
        return RecordingCursor(self._log)

    def commit(self):
        pass

    def close(self):
        pass


DB_CONFIG = {"host": "localhost", "port": 3306, "user": "root", "password": "", "database": "employee_management"}


def test_seeding_two_admins_uses_distinct_employee_codes(monkeypatch):
    log: list = []
    monkeypatch.setattr(bootstrap, "_connect", lambda target, **kw: RecordingConnection(log))

    bootstrap.ensure_demo_admin(DB_CONFIG, email="admin@company.com")
    bootstrap.ensure_demo_admin(DB_CONFIG, email="other@company.com")

    codes = [params[0] for sql, params in log if sql.startswith("INSERT INTO employees")]
    assert len(codes) == 2
    assert codes[0] != codes[1]
    assert all(re.fullmatch(r"EMP[0-9A-F]{10}", code) for code in codes)


def test_schema_statements_skip_database_switching():
    sql = "CREATE DATABASE IF NOT EXISTS x;\nUSE x;\nCREATE TABLE a (id INT);\nCREATE TABLE b (id INT);\n"
    statements = list(bootstrap.iter_sql_statements(bootstrap._strip_create_db_and_use(sql)))
    assert statements == ["CREATE TABLE a (id INT)", "CREATE TABLE b (id INT)"]
