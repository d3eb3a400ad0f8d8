"""Hive table provisioning for resolved report dependencies."""

from kubemeter.hive.tables import (
    Column,
    Queryer,
    create_local_report_table,
    create_report_table,
    create_table_sql,
    drop_table_sql,
    s3_location,
)

__all__ = [
    "Column",
    "Queryer",
    "create_local_report_table",
    "create_report_table",
    "create_table_sql",
    "drop_table_sql",
    "s3_location",
]
