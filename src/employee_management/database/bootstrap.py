from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

import mysql.connector
from werkzeug.security import generate_password_hash

from ..employees.service import generate_employee_code

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "employee_management")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: Optional[str | Path] = None) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path or SCHEMA_PATH).read_text(encoding="utf-8"))

    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied to %s", _as_target(db_config).database)


def ensure_demo_admin(db_config: dict, *, email: str = "admin@company.com", password: str = "admin123") -> None:
    """Seed one department, one position, an admin employee and its login (idempotent)."""
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        cur.execute("SELECT department_id FROM departments WHERE name=%s", ("Administration",))
        row = cur.fetchone()
        if row:
            department_id = int(row["department_id"])
        else:
            cur.execute(
                "INSERT INTO departments(name, description) VALUES(%s, %s)",
                ("Administration", "Company administration"),
            )
            department_id = int(cur.lastrowid)

        cur.execute(
            "SELECT position_id FROM positions WHERE title=%s AND department_id=%s",
            ("Administrator", department_id),
        )
        row = cur.fetchone()
        if row:
            position_id = int(row["position_id"])
        else:
            cur.execute(
                "INSERT INTO positions(title, department_id, base_salary, level) VALUES(%s,%s,%s,%s)",
                ("Administrator", department_id, 0, "manager"),
            )
            position_id = int(cur.lastrowid)

        cur.execute("SELECT employee_id FROM employees WHERE email=%s", (email,))
        row = cur.fetchone()
        if row:
            employee_id = int(row["employee_id"])
        else:
            cur.execute(
                """
                INSERT INTO employees(employee_code, first_name, last_name, email, phone,
                                      department_id, position_id, date_of_joining, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,'active')
                """,
                (generate_employee_code(), "System", "Admin", email, "0000000000",
                 department_id, position_id, date.today()),
            )
            employee_id = int(cur.lastrowid)

        password_hash = generate_password_hash(password)
        cur.execute("SELECT identity_id FROM identities WHERE email=%s", (email,))
        if cur.fetchone():
            cur.execute(
                "UPDATE identities SET password_hash=%s, role='admin', employee_id=%s, is_active=1 WHERE email=%s",
                (password_hash, employee_id, email),
            )
        else:
            cur.execute(
                "INSERT INTO identities(email, password_hash, role, employee_id) VALUES(%s,%s,'admin',%s)",
                (email, password_hash, employee_id),
            )

        conn.commit()
    finally:
        conn.close()
    logger.info("Demo admin ready: %s", email)


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
