"""
Helpers for running the employee directory example end-to-end.
"""

from __future__ import annotations

from typing import Any, Dict, List

from taskhub.dal import ApplicationContext, Employee
from taskhub.persistence import ContextOptions, UnitOfWork

SAMPLE_EMPLOYEES = [
    {"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com", "phone": "555-0100"},
    {"first_name": "Grace", "last_name": "Hopper", "email": "grace@example.com", "phone": "555-0101"},
    {"first_name": "Alan", "last_name": "Turing", "email": "alan@example.com", "phone": "555-0102"},
]


def bootstrap_context(dsn: str = "sqlite:///:memory:") -> ApplicationContext:
    """
    Open a SQLite-backed context and make sure the employee table exists.
    """

    context = ApplicationContext(ContextOptions.use_sqlite(dsn))
    context.ensure_created()
    return context


def hire(context: ApplicationContext, unit_of_work: UnitOfWork, **details: Any) -> Employee:
    """
    Track a new employee and commit it through the unit of work.
    """

    employee = context.employees.add(Employee(**details))
    unit_of_work.save_changes()
    return employee


def seed_sample_data(context: ApplicationContext) -> int:
    context.employees.add_range(Employee(**details) for details in SAMPLE_EMPLOYEES)
    return context.save_changes()


def list_directory(context: ApplicationContext) -> List[Dict[str, Any]]:
    """
    Directory entries sorted by last name.
    """

    entries = [
        {
            "id": str(employee.id),
            "name": employee.full_name,
            "email": employee.email,
            "phone": employee.phone,
        }
        for employee in context.employees.all()
    ]
    return sorted(entries, key=lambda entry: entry["name"].split()[-1])


def run_demo(dsn: str = "sqlite:///:memory:") -> List[Dict[str, Any]]:
    """
    Bootstrap the database, seed employees, and return the directory.
    """

    with bootstrap_context(dsn) as context:
        seed_sample_data(context)
        return list_directory(context)


if __name__ == "__main__":
    for entry in run_demo("sqlite:///employee_directory.db"):
        print(f"{entry['name']:<20} {entry['email']:<24} {entry['phone']}")
