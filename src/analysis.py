"""Trend prediction and organization analytics for the Workforce Productivity Engine."""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy import stats as stats_module

from src.config import (
    HIGH_CONFIDENCE_MONTHS,
    MAX_COMPLEXITY,
    MIN_COMPLETED_FOR_TREND,
    MIN_HISTORICAL_MONTHS,
    MIN_MONTHS_FOR_TREND,
    MONTHLY_COMPLETION_WEIGHT,
    MONTHLY_COMPLEXITY_WEIGHT,
    TREND_SLOPE_THRESHOLD,
)
from src.models import (
    DepartmentStats,
    Employee,
    MonthlyDatum,
    OrganizationSummary,
    Task,
    TaskStatus,
    TrendResult,
)
from src.scoring import clamp_score, round_half_up

logger = logging.getLogger(__name__)

COLD_START_MESSAGE = "Collecting more data to predict trends."


def linear_regression(xs: Sequence[float], ys: Sequence[float]) -> Tuple[float, float]:
    """Fit y = slope * x + intercept by ordinary least squares.

    Returns slope 0 and the mean of y when the x values cannot separate
    (zero denominator).
    """
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    n = len(x)

    denominator = n * np.sum(x * x) - np.sum(x) ** 2
    if denominator == 0:
        return 0.0, float(np.mean(y))

    fit = stats_module.linregress(x, y)
    return float(fit.slope), float(fit.intercept)


def build_monthly_data(tasks: Sequence[Task]) -> List[MonthlyDatum]:
    """Aggregate tasks by creation month into performance index points.

    Months without tasks are skipped, so the index counts populated months
    rather than calendar distance.
    """
    by_month: Dict[str, Dict[str, List[Task]]] = {}
    for task in tasks:
        key = task.month_key
        if key not in by_month:
            by_month[key] = {'all': [], 'completed': []}
        by_month[key]['all'].append(task)
        if task.is_completed:
            by_month[key]['completed'].append(task)

    monthly_data = []
    for idx, key in enumerate(sorted(by_month)):
        all_tasks = by_month[key]['all']
        completed = by_month[key]['completed']

        completion_rate = len(completed) / len(all_tasks) * 100 if all_tasks else 0.0
        avg_complexity = (
            np.mean([t.complexity for t in all_tasks]) / MAX_COMPLEXITY * 100
            if all_tasks else 0.0
        )
        score = round_half_up(
            completion_rate * MONTHLY_COMPLETION_WEIGHT
            + avg_complexity * MONTHLY_COMPLEXITY_WEIGHT
        )

        monthly_data.append(MonthlyDatum(
            month=key,
            score=int(score),
            task_count=len(all_tasks),
            completed_count=len(completed),
            index=idx
        ))

    return monthly_data


def classify_trend(slope: float) -> str:
    if slope > TREND_SLOPE_THRESHOLD:
        return 'improving'
    if slope < -TREND_SLOPE_THRESHOLD:
        return 'declining'
    return 'stable'


def predict_trend(tasks: Sequence[Task], now: Optional[datetime] = None) -> TrendResult:
    """Forecast next month's performance index from an employee's task history.

    The month containing ``now`` is partial, so it is shown in ``monthly_data``
    but left out of the fit.
    """
    now = now or datetime.now()

    completed_count = sum(1 for t in tasks if t.is_completed)
    if completed_count < MIN_COMPLETED_FOR_TREND:
        return TrendResult(trend='stable', confidence='insufficient_data', message=COLD_START_MESSAGE)

    monthly_data = build_monthly_data(tasks)
    if len(monthly_data) < MIN_MONTHS_FOR_TREND:
        return TrendResult(trend='stable', confidence='insufficient_data', message=COLD_START_MESSAGE)

    current_month = now.strftime("%Y-%m")
    historical = [m for m in monthly_data if m.month != current_month]

    if len(historical) < MIN_HISTORICAL_MONTHS:
        return TrendResult(trend='stable', confidence='insufficient_data', monthly_data=monthly_data)

    slope, intercept = linear_regression(
        [m.index for m in historical],
        [m.score for m in historical]
    )

    next_idx = monthly_data[-1].index + 1
    predicted = int(round_half_up(clamp_score(slope * next_idx + intercept)))
    confidence = 'high' if len(historical) >= HIGH_CONFIDENCE_MONTHS else 'medium'

    logger.debug(
        "Trend over %d historical months: slope=%.3f intercept=%.3f next=%d",
        len(historical), slope, intercept, predicted,
    )

    return TrendResult(
        trend=classify_trend(slope),
        confidence=confidence,
        slope=round_half_up(slope, 2),
        monthly_data=monthly_data,
        predicted_next_month=predicted
    )


def summarize_organization(employees: Sequence[Employee], tasks: Sequence[Task],
                           top_n: int = 5) -> OrganizationSummary:
    """Compute the admin dashboard figures for one organization."""
    status_counts = {status: 0 for status in TaskStatus}
    active_employee_ids = set()
    for task in tasks:
        status_counts[task.status] += 1
        if task.is_active and task.employee_id is not None:
            active_employee_ids.add(task.employee_id)

    if employees:
        avg_score = int(round_half_up(np.mean([e.ai_score for e in employees])))
        employees_df = pd.DataFrame([
            {'department': e.department, 'ai_score': e.ai_score} for e in employees
        ])
        grouped = employees_df.groupby('department', sort=False)['ai_score'].agg(['count', 'mean'])
        department_stats = [
            DepartmentStats(
                department=department,
                employee_count=int(row['count']),
                avg_score=int(round_half_up(row['mean']))
            )
            for department, row in grouped.iterrows()
        ]
    else:
        avg_score = 0
        department_stats = []

    top_performers = sorted(employees, key=lambda e: -e.ai_score)[:top_n]

    return OrganizationSummary(
        total_employees=len(employees),
        active_employees=len(active_employee_ids),
        total_tasks=len(tasks),
        completed_tasks=status_counts[TaskStatus.COMPLETED],
        in_progress_tasks=status_counts[TaskStatus.IN_PROGRESS],
        assigned_tasks=status_counts[TaskStatus.ASSIGNED],
        avg_productivity_score=avg_score,
        department_stats=department_stats,
        top_performers=top_performers
    )
