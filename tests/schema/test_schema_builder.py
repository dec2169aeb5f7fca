import logging

from taskhub.core import IntegerField, Model, StringField
from taskhub.dal import ApplicationContext, Employee
from taskhub.dialects import SQLiteDialect
from taskhub.persistence import ContextOptions
from taskhub.schema import SchemaBuilder

builder = SchemaBuilder(SQLiteDialect())


class Board(Model):
    name = StringField(nullable=False)
    columns = IntegerField(default=3)
    slug = StringField(unique=True, default="main")


def test_create_table_sql():
    sql = builder.create_table_sql(Board)
    expected = (
        'CREATE TABLE IF NOT EXISTS "board" ('
        '"id" INTEGER NOT NULL PRIMARY KEY, '
        '"name" TEXT NOT NULL, '
        '"columns" INTEGER DEFAULT 3, '
        "\"slug\" TEXT UNIQUE DEFAULT 'main')"
    )
    assert sql == expected


def test_drop_table_sql():
    assert builder.drop_table_sql(Board) == 'DROP TABLE IF EXISTS "board"'


def test_drop_table_logs_warning(caplog):
    caplog.set_level(logging.WARNING, logger="taskhub.schema.builder")
    SchemaBuilder(SQLiteDialect()).drop_table_sql(Board)
    assert any("DROP TABLE generated" in record.message for record in caplog.records)


def test_employee_table_marks_required_columns():
    context = ApplicationContext(ContextOptions.use_sqlite())
    try:
        sql = builder.create_table_sql(Employee)
    finally:
        context.close()
    assert sql == (
        'CREATE TABLE IF NOT EXISTS "employee" ('
        '"id" TEXT NOT NULL PRIMARY KEY, '
        '"first_name" TEXT NOT NULL, '
        '"last_name" TEXT NOT NULL, '
        '"email" TEXT NOT NULL, '
        '"phone" TEXT NOT NULL)'
    )
