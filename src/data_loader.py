"""Data loading and validation for the Workforce Productivity Engine."""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from src.config import MAX_COMPLEXITY
from src.models import Employee, Task, TaskStatus

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 string into a naive local datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        moment = value
    else:
        text = str(value)
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            moment = datetime.fromisoformat(text)
        except ValueError as e:
            raise ValueError(f"Invalid timestamp {value!r}") from e
    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment


def _required_timestamp(record: Dict[str, Any], key: str) -> datetime:
    moment = parse_timestamp(record[key])
    if moment is None:
        raise ValueError(f"Task {record.get('id')}: {key} must not be empty")
    return moment


def _parse_skills(record: Dict[str, Any]) -> List[str]:
    skills = record.get('skills') or []
    if not isinstance(skills, list) or not all(isinstance(s, str) for s in skills):
        raise ValueError(f"Employee {record.get('id')}: skills must be a list of strings")
    return list(skills)


def _parse_task(record: Dict[str, Any]) -> Task:
    try:
        status = TaskStatus(record.get('status', TaskStatus.ASSIGNED.value))
    except ValueError as e:
        raise ValueError(
            f"Task {record.get('id')}: status must be one of "
            f"{', '.join(s.value for s in TaskStatus)}"
        ) from e

    try:
        return Task(
            id=str(record['id']),
            title=record.get('title', ''),
            status=status,
            complexity=int(record.get('complexity', 1)),
            created_at=_required_timestamp(record, 'createdAt'),
            deadline=_required_timestamp(record, 'deadline'),
            completed_at=parse_timestamp(record.get('completedAt')),
            employee_id=record.get('employeeId'),
            organization_id=record.get('organizationId'),
            description=record.get('description')
        )
    except KeyError as e:
        raise ValueError(f"Task {record.get('id')}: missing field {e.args[0]}") from e


def parse_uploaded_data(employees_json: str, tasks_json: str) -> Tuple[Dict[str, Employee], List[Task]]:
    """Parse uploaded JSON data into Employee and Task objects."""
    employees_data = json.loads(employees_json)
    tasks_data = json.loads(tasks_json)

    try:
        employees = {
            str(e['id']): Employee(
                id=str(e['id']),
                name=e['name'],
                role=e.get('role', ''),
                department=e.get('department', ''),
                skills=_parse_skills(e),
                ai_score=int(e.get('aiScore', 0)),
                email=e.get('email')
            )
            for e in employees_data
        }
    except KeyError as e:
        raise ValueError(f"Employee record missing field {e.args[0]}") from e

    tasks = [_parse_task(t) for t in tasks_data]

    logger.info("Parsed %d employees and %d tasks", len(employees), len(tasks))
    return employees, tasks


def validate_data(employees: Dict, tasks: List) -> Tuple[bool, str]:
    """Validate uploaded data for consistency.

    A reopened task may keep the completedAt stamp from its first completion.
    """
    errors = []

    for task in tasks:
        if task.employee_id is not None and task.employee_id not in employees:
            errors.append(f"Task {task.id} assigned to unknown employee {task.employee_id}")
        if not 1 <= task.complexity <= MAX_COMPLEXITY:
            errors.append(f"Task {task.id} has complexity {task.complexity}, expected 1-{MAX_COMPLEXITY}")
        if task.is_completed and task.completed_at is None:
            errors.append(f"Task {task.id} is COMPLETED but has no completedAt")

    if not employees:
        errors.append("No employees found in uploaded file")

    if errors:
        return False, "\n".join(errors)
    return True, f"✅ Loaded {len(employees)} employees and {len(tasks)} tasks"
