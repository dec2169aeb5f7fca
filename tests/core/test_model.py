import uuid

import pytest

from taskhub.core import IntegerField, Model, ModelConfigurationError, StringField, UUIDField


class Project(Model):
    name = StringField(max_length=50, nullable=False)
    priority = IntegerField(default=0)


def test_model_metadata_collects_fields_in_order():
    assert list(Project._meta.fields.keys()) == ["id", "name", "priority"]
    assert Project._meta.primary_key.name == "id"
    assert Project._meta.implicit_primary_key is True
    assert Project._meta.table_name == "project"


def test_base_model_carries_no_fields():
    assert "_meta" not in vars(Model)
    assert not hasattr(Model, "id")


def test_promoted_key_leaves_no_inherited_id():
    class Badge(Model):
        code = StringField()

    Badge._meta.set_primary_key("code")
    badge = Badge(code="B-1")
    assert not hasattr(Badge, "id")
    assert not hasattr(badge, "id")
    assert badge.to_dict() == {"code": "B-1"}


def test_model_initializes_defaults():
    project = Project(name="Backlog")
    assert project.name == "Backlog"
    assert project.priority == 0
    assert project.pk is None


def test_unknown_keyword_is_rejected():
    with pytest.raises(TypeError):
        Project(title="Backlog")


def test_meta_table_override():
    class TaskList(Model):
        title = StringField()

        class Meta:
            table = "task_lists"

    assert TaskList._meta.table_name == "task_lists"


def test_camel_case_name_becomes_snake_case_table():
    class WorkItemNote(Model):
        body = StringField()

    assert WorkItemNote._meta.table_name == "work_item_note"


def test_custom_primary_key_prevents_auto_field():
    class Token(Model):
        token_id = StringField(primary_key=True)

    assert list(Token._meta.fields.keys()) == ["token_id"]
    assert Token._meta.primary_key.name == "token_id"
    assert Token._meta.implicit_primary_key is False


def test_duplicate_primary_key_raises_error():
    with pytest.raises(ModelConfigurationError):

        class BadModel(Model):
            code = IntegerField(primary_key=True)
            other = IntegerField(primary_key=True)


def test_manual_id_field_without_primary_key_errors():
    with pytest.raises(ModelConfigurationError):

        class BadIdentifier(Model):
            id = IntegerField()


def test_dirty_tracking_reports_changed_fields():
    project = Project(name="Backlog")
    assert not project.is_dirty()
    project.priority = 3
    assert project.is_dirty()
    assert project.changed_fields() == ["priority"]


def test_from_row_builds_clean_instance():
    class Member(Model):
        id = UUIDField(primary_key=True)
        handle = StringField(db_column="user_handle")

    member_id = uuid.uuid4()
    member = Member.from_row({"id": str(member_id), "user_handle": "ada"})
    assert member.id == member_id
    assert member.handle == "ada"
    assert not member.is_dirty()


def test_from_row_rejects_unmapped_column():
    with pytest.raises(ModelConfigurationError):
        Project.from_row({"id": 1, "unknown": "x"})


def test_to_dict_and_repr():
    project = Project(name="Backlog", priority=2)
    assert project.to_dict() == {"id": None, "name": "Backlog", "priority": 2}
    assert "name='Backlog'" in repr(project)
