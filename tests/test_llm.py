"""Tests for the insight generator and its providers."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from src.llm import (
    RemoteInsightProvider,
    TemplateInsightProvider,
    generate_insights,
    get_insight_provider,
    performance_tier,
    suggest_skills,
)
from src.models import Employee, ScoreBreakdown, ScoreResult


def _score(value, completion=62.5):
    return ScoreResult(
        score=value,
        breakdown=ScoreBreakdown(completion_rate=completion, speed_score=100.0, complexity_score=60.0),
        total_tasks=8,
        completed_tasks=5,
    )


def _client_returning(content):
    client = MagicMock()
    client.chat.completions.create.return_value = MagicMock(
        choices=[MagicMock(message=MagicMock(content=content))]
    )
    return client


class TestTiers:

    @pytest.mark.parametrize("score,tier", [
        (100, "exceptional"), (80, "exceptional"), (79, "strong"), (60, "strong"),
        (59, "developing"), (40, "developing"), (39, "needs-attention"), (0, "needs-attention"),
    ])
    def test_performance_tier(self, score, tier):
        assert performance_tier(score) == tier


class TestSkillSuggestions:

    def test_filters_existing_skills_case_insensitively(self, employee):
        employee.skills = ["microservices", "GRPC"]
        assert suggest_skills(employee) == [
            "Message Queues (Kafka/RabbitMQ)", "GraphQL", "System Design", "Observability"
        ]

    def test_capped_at_four(self, employee):
        employee.skills = []
        assert len(suggest_skills(employee)) == 4

    def test_first_matching_role_key_wins(self, employee):
        employee.role = "Senior Frontend Developer"
        employee.skills = ["GraphQL"]
        assert suggest_skills(employee) == [
            "Next.js", "Testing (Jest/Cypress)", "Accessibility (WCAG)", "Performance Optimization"
        ]

    def test_unknown_role_uses_first_list(self, employee):
        employee.role = "Chief Happiness Officer"
        employee.skills = []
        assert suggest_skills(employee)[0] == "Next.js"


class TestTemplateProvider:

    def test_exceptional_summary(self, employee):
        insights = TemplateInsightProvider().generate(employee, _score(85))
        assert insights.performance_tier == "exceptional"
        assert insights.source == "template"
        assert "85% productivity score and 5/8 tasks completed" in insights.performance_summary

    def test_developing_summary_mentions_completion_rate(self, employee):
        insights = TemplateInsightProvider().generate(employee, _score(45, completion=50.0))
        assert insights.performance_tier == "developing"
        assert "completion rate of 50%" in insights.performance_summary

    def test_strong_summary_mentions_department(self, employee):
        insights = TemplateInsightProvider().generate(employee, _score(65))
        assert "strong performance in Engineering" in insights.performance_summary


class TestRemoteProvider:

    def test_uses_model_reply(self, employee):
        client = _client_returning(json.dumps({
            "suggestedSkills": ["Kafka", "Terraform", "Go"],
            "performanceSummary": "Dana ships reliably.",
        }))
        provider = RemoteInsightProvider(api_key="sk-test", client=client)
        insights = provider.generate(employee, _score(72))

        assert insights.source == "openai"
        assert insights.suggested_skills == ["Kafka", "Terraform", "Go"]
        assert insights.performance_summary == "Dana ships reliably."
        assert insights.performance_tier == "strong"

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.1
        payload = json.loads(kwargs["messages"][1]["content"])
        assert payload["productivityScore"] == 72
        assert payload["currentSkills"] == ["Python", "gRPC"]

    @pytest.mark.parametrize("content", [
        "not json at all",
        json.dumps({"suggestedSkills": "Kafka", "performanceSummary": "ok"}),
        json.dumps({"suggestedSkills": ["Kafka"]}),
        json.dumps(["Kafka"]),
        None,
    ])
    def test_malformed_reply_falls_back(self, employee, content):
        provider = RemoteInsightProvider(api_key="sk-test", client=_client_returning(content))
        insights = provider.generate(employee, _score(72))
        assert insights.source == "template"
        assert insights.performance_tier == "strong"

    def test_api_error_falls_back(self, employee, caplog):
        client = MagicMock()
        client.chat.completions.create.side_effect = TimeoutError("request timed out")
        provider = RemoteInsightProvider(api_key="sk-test", client=client)

        with caplog.at_level("WARNING", logger="src.llm"):
            insights = provider.generate(employee, _score(30))

        assert insights.source == "template"
        assert insights.performance_tier == "needs-attention"
        assert "template fallback" in caplog.text

    def test_missing_key_skips_remote_call(self, employee):
        client = MagicMock()
        provider = RemoteInsightProvider(client=client)
        insights = provider.generate(employee, _score(50))
        assert insights.source == "template"
        client.chat.completions.create.assert_not_called()

    def test_settings_from_environment(self, monkeypatch):
        monkeypatch.setenv("AI_API_KEY", "sk-env")
        monkeypatch.setenv("AI_MODEL", "gpt-4o")
        monkeypatch.setenv("AI_TIMEOUT_SECONDS", "3")
        provider = RemoteInsightProvider()
        assert provider.api_key == "sk-env"
        assert provider.model == "gpt-4o"
        assert provider.timeout == 3.0


class TestProviderSelection:

    def test_template_without_key(self):
        assert isinstance(get_insight_provider(), TemplateInsightProvider)

    def test_remote_with_key(self, monkeypatch):
        monkeypatch.setenv("AI_API_KEY", "sk-env")
        assert isinstance(get_insight_provider(), RemoteInsightProvider)

    def test_unknown_provider_uses_template(self, monkeypatch):
        monkeypatch.setenv("AI_API_KEY", "sk-env")
        monkeypatch.setenv("AI_PROVIDER", "anthropic")
        assert isinstance(get_insight_provider(), TemplateInsightProvider)

    def test_generate_insights_defaults_to_environment(self, employee):
        insights = generate_insights(employee, _score(90))
        assert insights.source == "template"
        assert insights.performance_tier == "exceptional"

    @pytest.mark.parametrize("raw", ["ten", "-5", "0", "nan"])
    def test_bad_timeout_uses_default(self, monkeypatch, caplog, raw):
        monkeypatch.setenv("AI_API_KEY", "sk-env")
        monkeypatch.setenv("AI_TIMEOUT_SECONDS", raw)

        with caplog.at_level("WARNING", logger="src.llm"):
            provider = get_insight_provider()

        assert provider.timeout == 10.0
        assert "Invalid AI_TIMEOUT_SECONDS" in caplog.text

    def test_bad_timeout_still_answers(self, monkeypatch, employee):
        monkeypatch.setenv("AI_API_KEY", "sk-env")
        monkeypatch.setenv("AI_TIMEOUT_SECONDS", "ten")
        client = MagicMock()
        client.chat.completions.create.side_effect = TimeoutError("slow")

        insights = generate_insights(employee, _score(45), provider=RemoteInsightProvider(client=client))

        assert insights.source == "template"
        assert insights.performance_tier == "developing"
