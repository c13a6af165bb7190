"""In-memory task repository for the Workforce Productivity Engine."""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from src.models import Employee, Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskRepository:
    """Holds one organization's employees and tasks.

    Callers receive list copies, so a scoring pass always reads a single
    consistent snapshot of an employee's tasks.
    """

    def __init__(self, employees: Dict[str, Employee], tasks: Iterable[Task]):
        self._employees = dict(employees)
        self._tasks: Dict[str, Task] = {t.id: t for t in tasks}

    def get_employee(self, employee_id: str) -> Employee:
        return self._employees[employee_id]

    def list_employees(self) -> List[Employee]:
        return list(self._employees.values())

    def get_task(self, task_id: str) -> Task:
        return self._tasks[task_id]

    def list_tasks(self) -> List[Task]:
        return sorted(self._tasks.values(), key=lambda t: t.created_at)

    def tasks_for_employee(self, employee_id: str) -> List[Task]:
        """All tasks of one employee, oldest first."""
        return [t for t in self.list_tasks() if t.employee_id == employee_id]

    def active_task_count(self, employee_id: str) -> int:
        return sum(1 for t in self._tasks.values() if t.employee_id == employee_id and t.is_active)

    def update_status(self, task_id: str, status: TaskStatus,
                      now: Optional[datetime] = None) -> Task:
        """Move a task on the board; completion time is stamped only once."""
        task = self._tasks[task_id]
        if status == TaskStatus.COMPLETED and task.completed_at is None:
            task.completed_at = now or datetime.now()
        task.status = status
        logger.info("Task %s moved to %s", task_id, status.value)
        return task

    def record_score(self, employee_id: str, score: int) -> Employee:
        employee = self._employees[employee_id]
        employee.ai_score = score
        return employee
