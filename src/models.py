"""Data models for the Workforce Productivity Engine."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class TaskStatus(str, Enum):
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


ACTIVE_STATUSES = (TaskStatus.ASSIGNED, TaskStatus.IN_PROGRESS)


@dataclass
class Task:
    id: str
    title: str
    status: TaskStatus
    complexity: int
    created_at: datetime
    deadline: datetime
    completed_at: Optional[datetime] = None
    employee_id: Optional[str] = None
    organization_id: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def month_key(self) -> str:
        return self.created_at.strftime("%Y-%m")


@dataclass
class Employee:
    id: str
    name: str
    role: str
    department: str
    skills: List[str] = field(default_factory=list)
    ai_score: int = 0
    email: Optional[str] = None


@dataclass
class ScoreBreakdown:
    completion_rate: float = 0.0
    speed_score: float = 0.0
    complexity_score: float = 0.0


@dataclass
class ScoreResult:
    score: int
    breakdown: ScoreBreakdown
    total_tasks: int
    completed_tasks: int = 0


@dataclass
class MonthlyDatum:
    month: str
    score: int
    task_count: int
    completed_count: int
    index: int


@dataclass
class TrendResult:
    trend: str
    confidence: str
    slope: float = 0.0
    monthly_data: List[MonthlyDatum] = field(default_factory=list)
    predicted_next_month: Optional[int] = None
    message: Optional[str] = None


@dataclass
class Candidate:
    employee_id: str
    score: int
    active_task_count: int
    name: str = ""
    role: str = ""
    department: str = ""


@dataclass
class RankedCandidate:
    employee_id: str
    current_score: int
    active_task_count: int
    match_score: int
    reason_codes: List[str]
    is_currently_assigned: bool = False
    name: str = ""
    role: str = ""
    department: str = ""

    @property
    def reason(self) -> str:
        return " · ".join(self.reason_codes)


@dataclass
class Insights:
    suggested_skills: List[str]
    performance_summary: str
    performance_tier: str
    source: str


@dataclass
class DepartmentStats:
    department: str
    employee_count: int
    avg_score: int


@dataclass
class OrganizationSummary:
    total_employees: int
    active_employees: int
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    assigned_tasks: int
    avg_productivity_score: int
    department_stats: List[DepartmentStats]
    top_performers: List[Employee]
