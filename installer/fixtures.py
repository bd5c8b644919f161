"""Table fixtures: schema and seed records for the installer tables.

Each Fixture renders MariaDB DDL/DML; installer.db runs it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

ROLE_COMMENT = "The user’s role ID from roles table"
SQL_TYPES = {
    "integer": "INT",
    "string": "VARCHAR",
    "boolean": "TINYINT(1)",
    "datetime": "DATETIME",
}


@dataclass(frozen=True)
class Column:
    name: str
    type: str
    length: int | None = None
    null: bool = False
    default: Any = None
    auto_increment: bool = False
    comment: str = ""

    def sql(self) -> str:
        sql_type = SQL_TYPES[self.type]
        if self.type in ("integer", "string"):
            sql_type += f"({self.length or (11 if self.type == 'integer' else 255)})"
        parts = [f"`{self.name}`", sql_type]
        parts.append("NULL" if self.null else "NOT NULL")
        if self.auto_increment:
            parts.append("AUTO_INCREMENT")
        elif self.default is not None:
            parts.append(f"DEFAULT {sql_value(self.default)}")
        if self.comment:
            parts.append(f"COMMENT {sql_value(self.comment)}")
        return " ".join(parts)


@dataclass(frozen=True)
class Constraint:
    name: str
    type: str
    columns: tuple[str, ...]

    def sql(self) -> str:
        cols = ", ".join(f"`{c}`" for c in self.columns)
        if self.type == "primary":
            return f"PRIMARY KEY ({cols})"
        return f"UNIQUE KEY `{self.name}` ({cols})"


@dataclass(frozen=True)
class Fixture:
    table: str
    columns: tuple[Column, ...]
    constraints: tuple[Constraint, ...] = (Constraint("primary", "primary", ("id",)),)
    records: tuple[dict, ...] = field(default_factory=tuple)

    def column(self, name: str) -> Column:
        for col in self.columns:
            if col.name == name:
                return col
        raise KeyError(f"{self.table} has no column {name}")

    def create_sql(self) -> str:
        lines = [col.sql() for col in self.columns]
        lines += [c.sql() for c in self.constraints]
        body = ",\n  ".join(lines)
        return (
            f"CREATE TABLE IF NOT EXISTS `{self.table}` (\n  {body}\n)"
            " ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;"
        )

    def insert_sql(self) -> list[str]:
        statements = []
        for record in self.records:
            names = ", ".join(f"`{k}`" for k in record)
            values = ", ".join(
                sql_value(v, self.column(k).type) for k, v in record.items()
            )
            statements.append(f"INSERT INTO `{self.table}` ({names}) VALUES ({values});")
        return statements

    def drop_sql(self) -> str:
        return f"DROP TABLE IF EXISTS `{self.table}`;"


def _mysql_datetime(value: str) -> str:
    parsed = datetime.strptime(value, "%Y-%m-%dT%H:%M:%S%z")
    return parsed.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def sql_value(value: Any, column_type: str = "") -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value)
    if column_type == "datetime":
        text = _mysql_datetime(text)
    escaped = text.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def _id() -> Column:
    return Column("id", "integer", auto_increment=True)


def _region(row_id: int, block_id: int, theme: str, region: str = "") -> dict:
    return {"id": row_id, "block_id": block_id, "theme": theme, "region": region, "ordering": 0}


BLOCK_REGIONS = Fixture(
    table="block_regions",
    columns=(
        _id(),
        Column("block_id", "integer", 11),
        Column("theme", "string", 200),
        Column("region", "string", 200, null=True, default=""),
        Column("ordering", "integer", 11, default="0"),
    ),
    constraints=(
        Constraint("primary", "primary", ("id",)),
        Constraint("block_regions_block_id", "unique", ("block_id", "theme")),
    ),
    records=(
        _region(1, 2, "BackendTheme"),
        _region(2, 2, "FrontendTheme", "main-menu"),
        _region(3, 1, "BackendTheme", "main-menu"),
        _region(4, 1, "FrontendTheme"),
        _region(5, 3, "BackendTheme", "dashboard-main"),
        _region(6, 3, "FrontendTheme"),
        _region(7, 4, "BackendTheme", "dashboard-sidebar"),
        _region(8, 4, "FrontendTheme"),
        _region(9, 7, "BackendTheme"),
        _region(10, 7, "FrontendTheme", "sub-menu"),
        _region(11, 5, "BackendTheme"),
        _region(12, 5, "FrontendTheme", "sub-menu"),
        _region(13, 6, "BackendTheme"),
        _region(14, 6, "FrontendTheme", "right-sidebar"),
    ),
)

BLOCKS_ROLES = Fixture(
    table="blocks_roles",
    columns=(
        _id(),
        Column("block_id", "integer", 11),
        Column("role_id", "integer", 10, comment=ROLE_COMMENT),
    ),
)

NODES = Fixture(
    table="nodes",
    columns=(
        _id(),
        Column("node_type_id", "integer", 11),
        Column("node_type_slug", "string", 100),
        Column("translation_for", "integer", 11, null=True),
        Column("slug", "string", 100),
        Column("title", "string", 250),
        Column("description", "string", 200, null=True),
        Column("promote", "boolean", default="0"),
        Column("sticky", "boolean", default="0"),
        Column("comment_status", "integer", 2, default="0"),
        Column("language", "string", 10, null=True),
        Column("status", "boolean"),
        Column("created", "datetime"),
        Column("modified", "datetime"),
        Column("created_by", "integer", 11, null=True),
        Column("modified_by", "integer", 11, null=True),
    ),
    records=(
        {
            "id": 1,
            "node_type_id": 1,
            "node_type_slug": "article",
            "translation_for": None,
            "slug": "hello-world",
            "title": "¡Hello World!",
            "description": "hello world demo article",
            "promote": True,
            "sticky": False,
            "comment_status": 1,
            "language": "",
            "status": True,
            "created": "2014-06-12T07:44:01+0000",
            "modified": "2015-04-04T03:00:33+0000",
            "created_by": 1,
            "modified_by": 1,
        },
        {
            "id": 2,
            "node_type_id": 2,
            "node_type_slug": "page",
            "translation_for": None,
            "slug": "about",
            "title": "About",
            "description": "about QuickAppsCMS demo page",
            "promote": False,
            "sticky": False,
            "comment_status": 0,
            "language": "",
            "status": True,
            "created": "2015-03-31T21:06:50+0000",
            "modified": "2015-03-31T21:06:50+0000",
            "created_by": 1,
            "modified_by": 1,
        },
    ),
)

USERS_ROLES = Fixture(
    table="users_roles",
    columns=(
        _id(),
        Column("user_id", "integer", 11),
        Column("role_id", "integer", 10, comment=ROLE_COMMENT),
    ),
    records=({"id": 1, "user_id": 1, "role_id": 1},),
)

FIXTURES = {f.table: f for f in (BLOCK_REGIONS, BLOCKS_ROLES, NODES, USERS_ROLES)}
