"""Report table provisioning against Hive.

Tables are always rebuilt: the existing table is dropped (purging its data)
and a fresh one created.  The create is never issued if the drop fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from kubemeter.observability.logging import get_logger

_logger = get_logger("hive.tables")


class Queryer(Protocol):
    """Anything that can execute a single HiveQL statement."""

    def query(self, sql: str) -> None: ...


@dataclass(frozen=True)
class Column:
    name: str
    type: str


def s3_location(bucket: str, prefix: str) -> str:
    if not bucket:
        raise ValueError("s3 bucket must not be empty")
    location = f"s3a://{bucket}"
    if prefix:
        location = f"{location}/{prefix.strip('/')}"
    return f"{location}/"


def drop_table_sql(table_name: str, if_exists: bool = True, purge: bool = True) -> str:
    sql = "DROP TABLE "
    if if_exists:
        sql += "IF EXISTS "
    sql += table_name
    if purge:
        sql += " PURGE"
    return sql


def create_table_sql(
    table_name: str,
    columns: list[Column],
    location: str = "",
    external: bool = False,
    if_not_exists: bool = False,
) -> str:
    column_defs = ", ".join(f"`{c.name}` {c.type}" for c in columns)
    sql = f"CREATE {'EXTERNAL ' if external else ''}TABLE "
    if if_not_exists:
        sql += "IF NOT EXISTS "
    sql += f"{table_name} ({column_defs})"
    if location:
        sql += f" LOCATION '{location}'"
    return sql


def _recreate(queryer: Queryer, table_name: str, create_sql: str) -> None:
    queryer.query(drop_table_sql(table_name))
    queryer.query(create_sql)
    _logger.info("report_table_created", table=table_name)


def create_report_table(queryer: Queryer, table_name: str, bucket: str, prefix: str, columns: list[Column]) -> None:
    """Create a managed table whose data lives under ``s3a://bucket/prefix``."""
    location = s3_location(bucket, prefix)
    _recreate(queryer, table_name, create_table_sql(table_name, columns, location=location))


def create_local_report_table(queryer: Queryer, table_name: str, columns: list[Column]) -> None:
    """Create a managed table in Hive's default warehouse location."""
    _recreate(queryer, table_name, create_table_sql(table_name, columns, if_not_exists=True))
