"""Productivity scoring for the Workforce Productivity Engine.

Score = CompletionRate x 0.5 + SpeedVsDeadline x 0.3 + AvgComplexity x 0.2
"""

import logging
import math
from datetime import datetime
from typing import Sequence

import numpy as np

from src.config import (
    COMPLETION_WEIGHT,
    COMPLEXITY_WEIGHT,
    DEFAULT_SPEED_SCORE,
    EARLY_FINISH_SCORE,
    MAX_COMPLEXITY,
    ON_TIME_SCORE,
    SPEED_WEIGHT,
)
from src.models import ScoreBreakdown, ScoreResult, Task

logger = logging.getLogger(__name__)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 upward instead of to the nearest even digit."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def clamp_score(value: float) -> float:
    return max(0.0, min(100.0, value))


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999000)


def task_speed_score(task: Task) -> float:
    """Score one completed task against its deadline.

    The deadline counts until the end of its calendar day. On-time work scores
    100, or 110 when finished in under half the allotted window. Late work is
    scaled down by how far past the deadline it landed relative to the window.
    """
    deadline = end_of_day(task.deadline)
    completed_at = task.completed_at
    total_seconds = (deadline - task.created_at).total_seconds()

    if completed_at <= deadline:
        elapsed_seconds = (completed_at - task.created_at).total_seconds()
        if total_seconds > 0 and elapsed_seconds < total_seconds / 2:
            return EARLY_FINISH_SCORE
        return ON_TIME_SCORE

    if total_seconds <= 0:
        return 0
    overdue_seconds = (completed_at - deadline).total_seconds()
    late_penalty = min(1.0, overdue_seconds / total_seconds)
    return max(0, int(round_half_up((1 - late_penalty) * 100)))


def calculate_score(tasks: Sequence[Task]) -> ScoreResult:
    """Compute the 0-100 productivity score for one employee's tasks."""
    if not tasks:
        return ScoreResult(score=0, breakdown=ScoreBreakdown(), total_tasks=0, completed_tasks=0)

    completed = [t for t in tasks if t.is_completed]
    completion_rate = len(completed) / len(tasks) * 100

    if completed:
        speed_score = float(np.mean([task_speed_score(t) for t in completed]))
    else:
        speed_score = float(DEFAULT_SPEED_SCORE)

    avg_complexity = float(np.mean([t.complexity for t in tasks]))
    complexity_score = avg_complexity / MAX_COMPLEXITY * 100

    composite = round_half_up(
        completion_rate * COMPLETION_WEIGHT
        + speed_score * SPEED_WEIGHT
        + complexity_score * COMPLEXITY_WEIGHT
    )
    score = int(clamp_score(composite))

    logger.debug(
        "Scored %d tasks (%d completed): completion=%.1f speed=%.1f complexity=%.1f -> %d",
        len(tasks), len(completed), completion_rate, speed_score, complexity_score, score,
    )

    return ScoreResult(
        score=score,
        breakdown=ScoreBreakdown(
            completion_rate=round_half_up(completion_rate, 1),
            speed_score=round_half_up(speed_score, 1),
            complexity_score=round_half_up(complexity_score, 1),
        ),
        total_tasks=len(tasks),
        completed_tasks=len(completed),
    )
