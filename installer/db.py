"""MariaDB helpers used to seed installer tables."""

from __future__ import annotations

import logging
import subprocess
from typing import Iterable

from installer.fixtures import FIXTURES, Fixture
from installer.utils import db_ident, log


def _mysql_try(sql: str, database: str | None = None) -> tuple[int, str, str]:
    args = ["mariadb"]
    if database:
        args += ["-D", database]
    args += ["-e", sql]
    try:
        proc = subprocess.run(args, text=True, capture_output=True, check=True)
        return proc.returncode, (proc.stdout or ""), (proc.stderr or "")
    except subprocess.CalledProcessError as exc:
        return exc.returncode, (exc.stdout or ""), (exc.stderr or "")
    except OSError as exc:
        return 127, "", str(exc)


def run_mysql(sql: str, database: str | None = None) -> bool:
    rc, out, err = _mysql_try(sql, database)
    msg = f"SQL: {sql}\nEXIT: {rc}\nSTDOUT: {out.strip()}\nSTDERR: {err.strip()}"
    if rc == 0:
        log(f"PASS: {msg}")
        return True
    logging.error(msg)
    return False


def fixture_statements(fixture: Fixture) -> list[str]:
    return [fixture.drop_sql(), fixture.create_sql()] + fixture.insert_sql()


def load_fixture(site: str, fixture: Fixture) -> bool:
    database = db_ident(site)
    for sql in fixture_statements(fixture):
        if not run_mysql(sql, database):
            logging.error("Could not load fixture %s into %s", fixture.table, database)
            return False
    log(f"PASS: Loaded {len(fixture.records)} rows into {database}.{fixture.table}")
    return True


def load_fixtures(site: str, tables: Iterable[str] | None = None) -> bool:
    names = list(tables or FIXTURES)
    unknown = [n for n in names if n not in FIXTURES]
    if unknown:
        logging.error("Unknown fixture(s): %s", ", ".join(unknown))
        return False
    for name in names:
        if not load_fixture(site, FIXTURES[name]):
            return False
    return True
