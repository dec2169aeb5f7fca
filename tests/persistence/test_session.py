import sqlite3

import pytest

from taskhub.adapters import ConnectionConfig, SQLiteAdapter
from taskhub.core import IntegerField, Model, StringField
from taskhub.persistence import Session
from taskhub.validation import ValidationError


class Assignee(Model):
    name = StringField(nullable=False)
    load = IntegerField(default=0)


def create_table(session: Session) -> None:
    session.execute(
        'CREATE TABLE IF NOT EXISTS "assignee" (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL, load INTEGER)'
    )


@pytest.fixture
def session(tmp_path):
    session = Session(SQLiteAdapter(), connection_config=ConnectionConfig(url=f"sqlite:///{tmp_path / 'session.db'}"))
    create_table(session)
    yield session
    session.close()


def test_session_add_and_commit_inserts_row(session):
    assignee = Assignee(name="Alice", load=3)
    session.add(assignee)
    assert session.commit() == 1

    row = session.execute('SELECT name, load FROM "assignee"').fetchone()
    assert row["name"] == "Alice"
    assert row["load"] == 3
    assert assignee.id is not None


def test_commit_without_changes_returns_zero(session):
    session.add(Assignee(name="Alice"))
    assert session.commit() == 1
    assert session.commit() == 0


def test_identity_map_returns_same_instance(session):
    session.execute('INSERT INTO "assignee" (name, load) VALUES (?, ?)', ("Bob", 25))
    session.adapter.commit()

    first = session.get(Assignee, id=1)
    second = session.get(Assignee, id=1)
    assert first is second
    assert first.name == "Bob"
    assert session.all(Assignee)[0] is first


def test_get_requires_single_filter(session):
    with pytest.raises(ValueError):
        session.get(Assignee, id=1, name="x")


def test_get_missing_row_returns_none(session):
    assert session.get(Assignee, id=99) is None


def test_loaded_instances_are_updated_when_changed(session):
    assignee = Assignee(name="Dana", load=1)
    session.add(assignee)
    session.commit()

    assignee.load = 2
    assert session.commit() == 1
    stored = session.execute('SELECT load FROM "assignee" WHERE id = ?', (assignee.id,)).fetchone()[0]
    assert stored == 2
    assert session.commit() == 0


def test_mark_dirty_without_changes_writes_nothing(session):
    assignee = Assignee(name="Erin")
    session.add(assignee)
    session.commit()
    session.mark_dirty(assignee)
    assert session.commit() == 0


def test_delete_and_rollback(session):
    session.add(Assignee(name="Chris"))
    session.commit()
    assignee = session.get(Assignee, id=1)

    session.begin()
    session.delete(assignee)
    session.rollback()
    assert session.count(Assignee) == 1
    assert session.tracker.deleted == set()

    session.delete(assignee)
    assert session.commit() == 1
    assert session.count(Assignee) == 0
    assert session.get(Assignee, id=1) is None


def test_deleting_unsaved_instance_forgets_it(session):
    assignee = Assignee(name="Ghost")
    session.add(assignee)
    session.delete(assignee)
    assert session.commit() == 0
    assert session.count(Assignee) == 0


def test_validation_failure_writes_nothing_and_keeps_changes(session):
    valid = Assignee(name="Valid")
    invalid = Assignee()
    session.add(valid)
    session.add(invalid)

    with pytest.raises(ValidationError) as excinfo:
        session.commit()

    assert "name" in excinfo.value.errors
    assert session.count(Assignee) == 0
    assert session.tracker.new == {valid, invalid}
    assert session.transaction_manager.depth == 0

    session.delete(invalid)
    assert session.commit() == 1


def test_driver_error_rolls_back_and_restores_state(session):
    first = Assignee(name="First")
    session.add(first)
    session.commit()

    duplicate = Assignee(name="Second")
    duplicate._field_values["id"] = first.id  # force a primary key clash
    fresh = Assignee(name="Third")
    session.add(fresh)
    session.add(duplicate)

    with pytest.raises(sqlite3.IntegrityError):
        session.commit()

    assert session.count(Assignee) == 1
    assert fresh in session.tracker.new
    assert duplicate in session.tracker.new
    assert session.identity_map.get(Assignee, first.id) is first


def test_transaction_context(session):
    with session.transaction():
        session.add(Assignee(name="Eve", load=31))

    assert session.count(Assignee) == 1


def test_nested_transactions_use_savepoints(session):
    with session.transaction():
        session.add(Assignee(name="Outer", load=44))
        with pytest.raises(RuntimeError):
            with session.transaction():
                session.add(Assignee(name="Inner", load=18))
                raise RuntimeError("inner failure")

    rows = session.execute('SELECT name FROM "assignee" ORDER BY id').fetchall()
    assert [row["name"] for row in rows] == ["Outer"]


def test_session_rejects_dual_connection_config(tmp_path):
    config = ConnectionConfig(url=f"sqlite:///{tmp_path / 'conflict.db'}")
    with pytest.raises(ValueError):
        Session(SQLiteAdapter(), connection_config=config, dsn="sqlite:///:memory:")


def test_session_accepts_dsn_argument(tmp_path):
    session = Session(SQLiteAdapter(), dsn=f"sqlite:///{tmp_path / 'dsn.db'}")
    assert session.execute("SELECT 1").fetchone()[0] == 1
    session.close()
    assert session.is_closed
