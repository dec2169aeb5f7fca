import pytest

from examples.employee_directory import bootstrap_context, hire, list_directory, run_demo, seed_sample_data
from taskhub.validation import ValidationError


def test_employee_directory_bootstrap_and_seed(tmp_path):
    context = bootstrap_context(dsn=f"sqlite:///{tmp_path / 'directory.db'}")
    try:
        assert seed_sample_data(context) == 3
        directory = list_directory(context)
        assert [entry["name"] for entry in directory] == ["Grace Hopper", "Ada Lovelace", "Alan Turing"]
        assert {"id", "name", "email", "phone"} <= directory[0].keys()
    finally:
        context.close()


def test_hire_commits_through_unit_of_work():
    with bootstrap_context() as context:
        employee = hire(
            context,
            context,
            first_name="Katherine",
            last_name="Johnson",
            email="katherine@example.com",
            phone="555-0103",
        )
        assert context.employees.find(employee.id) is employee
        assert context.employees.count() == 1

        with pytest.raises(ValidationError):
            hire(context, context, first_name="Dorothy", last_name="Vaughan", email="dorothy@example.com")
        assert context.employees.count() == 1


def test_run_employee_demo_returns_directory():
    directory = run_demo()
    assert len(directory) == 3
    assert all(entry["email"] and entry["phone"] for entry in directory)
