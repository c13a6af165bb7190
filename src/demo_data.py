"""Demo organization for the Workforce Productivity Engine dashboard.

Five employees with tasks spread over the previous five months:

- Alice, David: improving trend
- Bob: stable trend
- Carol: declining trend
- Eva: only three tasks, to show the cold-start message
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

import pandas as pd

from src.models import Employee, Task, TaskStatus

ORGANIZATION_ID = "org-acme"

EMPLOYEES = [
    ('alice', 'Alice Johnson', 'Senior Frontend Developer', 'Engineering', ['React', 'TypeScript', 'CSS', 'Figma'], 78),
    ('bob', 'Bob Smith', 'Backend Engineer', 'Engineering', ['Node.js', 'PostgreSQL', 'Docker', 'Redis'], 65),
    ('carol', 'Carol Davis', 'Product Manager', 'Product', ['Roadmapping', 'User Research', 'Agile', 'SQL'], 55),
    ('david', 'David Lee', 'DevOps Engineer', 'Infrastructure', ['AWS', 'Terraform', 'Kubernetes', 'CI/CD'], 72),
    ('eva', 'Eva Martinez', 'Data Analyst', 'Analytics', ['Python', 'SQL', 'Tableau', 'Statistics'], 60),
]

C, P, A = TaskStatus.COMPLETED, TaskStatus.IN_PROGRESS, TaskStatus.ASSIGNED

# (employee, title, complexity, months ago, extra days, deadline days, status)
TASKS = [
    ('alice', 'Design System Audit', 3, 5, 0, 14, C),
    ('alice', 'Storybook Setup', 2, 5, 5, 7, C),
    ('alice', 'Accessibility Audit', 3, 4, 0, 10, C),
    ('alice', 'Dark Mode Implementation', 4, 4, 8, 12, C),
    ('alice', 'Performance Profiling', 4, 3, 2, 10, C),
    ('alice', 'Micro-Frontend Spike', 5, 2, 0, 14, C),
    ('alice', 'Redesign Landing Page', 3, 1, 0, 7, C),
    ('alice', 'Mobile Responsive Fix', 2, 0, -3, 5, A),

    ('bob', 'Auth Service Refactor', 4, 5, 2, 14, C),
    ('bob', 'Rate Limiting Middleware', 3, 5, 10, 7, C),
    ('bob', 'Database Schema Migration', 4, 4, 1, 10, C),
    ('bob', 'Implement Search API', 4, 3, 0, 10, C),
    ('bob', 'Database Query Optimization', 5, 3, 8, 7, C),
    ('bob', 'Background Job Queue', 4, 2, 3, 12, C),
    ('bob', 'gRPC Internal Service', 5, 1, 0, 14, C),
    ('bob', 'API Gateway Config', 3, 0, -2, 10, P),

    ('carol', 'Q3 Roadmap Planning', 3, 5, 0, 7, C),
    ('carol', 'User Interview Sessions', 3, 5, 7, 10, C),
    ('carol', 'Competitive Analysis', 3, 4, 0, 10, C),
    ('carol', 'Sprint Retrospective', 2, 4, 10, 3, C),
    ('carol', 'Feature Spec Writing', 3, 3, 0, 10, C),
    ('carol', 'A/B Test Design', 4, 2, 0, 12, C),
    ('carol', 'User Journey Mapping', 2, 1, 0, 7, C),
    ('carol', 'Feature Prioritization Workshop', 2, 0, -1, 5, A),

    ('david', 'AWS Cost Audit', 3, 5, 1, 10, C),
    ('david', 'Docker Base Images', 2, 5, 8, 7, C),
    ('david', 'Log Aggregation Setup', 4, 4, 2, 12, C),
    ('david', 'Secrets Management', 4, 3, 0, 10, C),
    ('david', 'Zero-Downtime Deployment', 5, 3, 7, 14, C),
    ('david', 'Set Up Monitoring Stack', 5, 2, 0, 14, C),
    ('david', 'CI/CD Pipeline Refactor', 4, 1, 0, 12, C),
    ('david', 'K8s Cluster Upgrade', 5, 0, -2, 14, P),

    ('eva', 'Quarterly Sales Report', 3, 1, 0, 7, C),
    ('eva', 'Churn Cohort Analysis', 4, 0, -5, 10, P),
    ('eva', 'Customer Churn Analysis', 5, 0, 0, 21, A),
]


def months_ago(now: datetime, months: int, extra_days: int = 0) -> datetime:
    moment = pd.Timestamp(now) - pd.DateOffset(months=months) + pd.Timedelta(days=extra_days)
    return moment.to_pydatetime()


def build_demo_organization(now: Optional[datetime] = None) -> Tuple[Dict[str, Employee], List[Task]]:
    """Build the demo employees and tasks relative to ``now``.

    Completed tasks finish one day before their deadline.
    """
    now = now or datetime.now()

    employees = {
        emp_id: Employee(
            id=emp_id,
            name=name,
            role=role,
            department=department,
            skills=list(skills),
            ai_score=ai_score,
            email=f"{emp_id}@acmetech.com"
        )
        for emp_id, name, role, department, skills, ai_score in EMPLOYEES
    }

    tasks = []
    for i, (emp_id, title, complexity, months, extra_days, deadline_days, status) in enumerate(TASKS, start=1):
        created_at = months_ago(now, months, extra_days)
        deadline = created_at + timedelta(days=deadline_days)
        completed_at = deadline - timedelta(days=1) if status == TaskStatus.COMPLETED else None

        tasks.append(Task(
            id=f"task-{i:03d}",
            title=title,
            status=status,
            complexity=complexity,
            created_at=created_at,
            deadline=deadline,
            completed_at=completed_at,
            employee_id=emp_id,
            organization_id=ORGANIZATION_ID
        ))

    return employees, tasks
