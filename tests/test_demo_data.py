"""Regression tests against the demo organization."""

from __future__ import annotations

from datetime import datetime

import pytest

from src.analysis import predict_trend
from src.demo_data import build_demo_organization
from src.recommendations import build_candidates, rank_employees
from src.repository import TaskRepository
from src.scoring import calculate_score

NOW = datetime(2025, 6, 15, 12, 0)


@pytest.fixture
def repository():
    return TaskRepository(*build_demo_organization(NOW))


class TestDemoOrganization:

    def test_shape(self, repository):
        assert len(repository.list_employees()) == 5
        assert len(repository.list_tasks()) == 35
        assert len(repository.tasks_for_employee("eva")) == 3

    def test_completed_one_day_before_deadline(self, repository):
        for task in repository.list_tasks():
            if task.is_completed:
                assert (task.deadline - task.completed_at).days == 1

    @pytest.mark.parametrize("employee_id", ["alice", "bob", "carol", "david"])
    def test_seeded_scores_stay_in_range(self, repository, employee_id):
        result = calculate_score(repository.tasks_for_employee(employee_id))
        assert 70 <= result.score <= 100
        assert result.breakdown.speed_score == 100.0
        assert result.completed_tasks == 7

    def test_alice_score(self, repository):
        result = calculate_score(repository.tasks_for_employee("alice"))
        # 87.5 * 0.5 + 100 * 0.3 + 65 * 0.2
        assert result.score == 87
        assert result.breakdown.complexity_score == 65.0

    def test_alice_improving(self, repository):
        trend = predict_trend(repository.tasks_for_employee("alice"), now=NOW)
        assert [m.score for m in trend.monthly_data] == [80, 88, 92, 100, 84, 16]
        assert trend.trend == "improving"
        assert trend.slope == 2.0
        assert trend.confidence == "high"

    def test_eva_cold_start(self, repository):
        trend = predict_trend(repository.tasks_for_employee("eva"), now=NOW)
        assert trend.confidence == "insufficient_data"
        assert trend.monthly_data == []

    def test_ranking_after_scoring(self, repository):
        for employee in repository.list_employees():
            result = calculate_score(repository.tasks_for_employee(employee.id))
            repository.record_score(employee.id, result.score)

        candidates = build_candidates(repository.list_employees(), repository)
        ranked = rank_employees(candidates, task_complexity=5)
        assert len(ranked) == 5
        assert ranked == sorted(ranked, key=lambda r: -r.match_score)
        assert ranked[-1].employee_id == "eva"
