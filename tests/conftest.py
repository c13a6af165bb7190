"""
Workforce Productivity Engine test suite — shared fixtures.

Run:  pytest tests/ -v
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

import pytest

from src.models import Employee, Task, TaskStatus


@pytest.fixture(autouse=True)
def _isolate_ai_env(monkeypatch):
    """Keep insight tests off the network regardless of the developer's shell."""
    for name in ("AI_API_KEY", "AI_PROVIDER", "AI_BASE_URL", "AI_MODEL", "AI_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_task():
    """Factory for tasks; ``completed_at`` implies COMPLETED status."""
    counter = {"n": 0}

    def _make(
        created_at: datetime,
        deadline: Optional[datetime] = None,
        completed_at: Optional[datetime] = None,
        complexity: int = 3,
        status: Optional[TaskStatus] = None,
        employee_id: Optional[str] = "emp-1",
    ) -> Task:
        counter["n"] += 1
        if status is None:
            status = TaskStatus.COMPLETED if completed_at is not None else TaskStatus.ASSIGNED
        return Task(
            id=f"t{counter['n']}",
            title=f"Task {counter['n']}",
            status=status,
            complexity=complexity,
            created_at=created_at,
            deadline=deadline or created_at + timedelta(days=10),
            completed_at=completed_at,
            employee_id=employee_id,
        )

    return _make


@pytest.fixture
def make_month_tasks(make_task):
    """Factory for ``count`` tasks created in a given month, completed on time."""

    def _make(year: int, month: int, count: int = 2, complexity: int = 3, completed: bool = True):
        tasks = []
        for day in range(1, count + 1):
            created = datetime(year, month, day, 9, 0)
            tasks.append(make_task(
                created_at=created,
                deadline=created + timedelta(days=7),
                completed_at=created + timedelta(days=6) if completed else None,
                complexity=complexity,
            ))
        return tasks

    return _make


@pytest.fixture
def employee():
    return Employee(
        id="emp-1",
        name="Dana Ortiz",
        role="Backend Engineer",
        department="Engineering",
        skills=["Python", "gRPC"],
        ai_score=0,
    )
