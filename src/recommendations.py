"""Assignment recommendations for the Workforce Productivity Engine."""

import logging
from typing import Any, List, Optional, Sequence

from src.config import (
    AVAILABILITY_MAX,
    AVAILABILITY_PENALTY_PER_TASK,
    COMPLEX_TASK_THRESHOLD,
    DEFAULT_TASK_COMPLEXITY,
    LOAD_SPREAD_SCORE,
    MAX_COMPLEXITY,
    PERFORMANCE_WEIGHT,
    STRONG_PERFORMER_SCORE,
    TASK_RECOMMENDATION_LIMIT,
)
from src.models import Candidate, Employee, RankedCandidate, Task
from src.repository import TaskRepository
from src.scoring import round_half_up

logger = logging.getLogger(__name__)


def parse_complexity(value: Any, default: int = DEFAULT_TASK_COMPLEXITY) -> int:
    """Read a requested task complexity, falling back to ``default``."""
    try:
        complexity = int(value)
    except (TypeError, ValueError):
        return default
    if complexity == 0:
        return default
    return max(1, min(MAX_COMPLEXITY, complexity))


def complexity_fit(score: int, task_complexity: int) -> int:
    # Hard tasks go to high performers; easy ones spread the load.
    if task_complexity >= COMPLEX_TASK_THRESHOLD:
        return 10 if score >= STRONG_PERFORMER_SCORE else 0
    return 10 if score <= LOAD_SPREAD_SCORE else 5


def reason_codes(candidate: Candidate, task_complexity: int) -> List[str]:
    reasons = []
    if candidate.score >= STRONG_PERFORMER_SCORE:
        reasons.append(f"Strong performer ({candidate.score}%)")
    if candidate.active_task_count == 0:
        reasons.append("No active tasks")
    elif candidate.active_task_count == 1:
        reasons.append("Light workload")
    else:
        reasons.append(f"{candidate.active_task_count} active tasks")
    if task_complexity >= COMPLEX_TASK_THRESHOLD and candidate.score >= STRONG_PERFORMER_SCORE:
        reasons.append("Suited for complex work")
    return reasons


def score_candidate(candidate: Candidate, task_complexity: int) -> RankedCandidate:
    """Compute the 0-100 match score of one employee for a task."""
    performance = candidate.score * PERFORMANCE_WEIGHT
    availability = max(0, AVAILABILITY_MAX - candidate.active_task_count * AVAILABILITY_PENALTY_PER_TASK)
    fit = complexity_fit(candidate.score, task_complexity)
    match_score = int(round_half_up(min(100, performance + availability + fit)))

    return RankedCandidate(
        employee_id=candidate.employee_id,
        current_score=candidate.score,
        active_task_count=candidate.active_task_count,
        match_score=match_score,
        reason_codes=reason_codes(candidate, task_complexity),
        name=candidate.name,
        role=candidate.role,
        department=candidate.department
    )


def rank_employees(candidates: Sequence[Candidate], task_complexity: int) -> List[RankedCandidate]:
    """Rank every candidate for a task of the given complexity, best match first.

    Equal match scores keep their input order.
    """
    ranked = [score_candidate(c, task_complexity) for c in candidates]
    ranked.sort(key=lambda r: -r.match_score)
    return ranked


def recommend_for_task(task: Task, candidates: Sequence[Candidate],
                       limit: Optional[int] = TASK_RECOMMENDATION_LIMIT) -> List[RankedCandidate]:
    """Rank candidates for an existing task and flag its current assignee."""
    ranked = rank_employees(candidates, task.complexity)
    for r in ranked:
        r.is_currently_assigned = task.employee_id is not None and r.employee_id == task.employee_id

    logger.debug("Ranked %d candidates for task %s", len(ranked), task.id)
    return ranked[:limit] if limit is not None else ranked


def build_candidates(employees: Sequence[Employee], repository: TaskRepository) -> List[Candidate]:
    """Turn employees into ranking candidates using their recorded scores."""
    return [
        Candidate(
            employee_id=e.id,
            score=e.ai_score,
            active_task_count=repository.active_task_count(e.id),
            name=e.name,
            role=e.role,
            department=e.department
        )
        for e in employees
    ]
