"""LLM integration for AI-powered employee insights.

Uses an OpenAI-compatible chat API when credentials are configured and falls
back to deterministic template insights otherwise, or when the call fails.
"""

import json
import logging
import os
from typing import List, Optional

from openai import OpenAI

from src.config import (
    DEFAULT_AI_MODEL,
    DEFAULT_AI_PROVIDER,
    DEFAULT_AI_TIMEOUT_SECONDS,
    FALLBACK_TIER,
    MAX_SUGGESTED_SKILLS,
    PERFORMANCE_TIERS,
)
from src.models import Employee, Insights, ScoreResult

logger = logging.getLogger(__name__)

SKILL_SUGGESTIONS = {
    'Frontend Developer': ['Next.js', 'GraphQL', 'Testing (Jest/Cypress)', 'Accessibility (WCAG)',
                           'Performance Optimization', 'Web3/dApps'],
    'Senior Frontend Developer': ['System Design', 'Micro-Frontend Architecture', 'WebAssembly',
                                  'CI/CD Pipeline Design', 'Mentoring'],
    'Backend Engineer': ['Microservices', 'gRPC', 'Message Queues (Kafka/RabbitMQ)', 'GraphQL',
                         'System Design', 'Observability'],
    'Product Manager': ['Data Analytics', 'A/B Testing', 'Technical Writing', 'Stakeholder Management',
                        'Pricing Strategy', 'Growth Hacking'],
    'DevOps Engineer': ['Service Mesh (Istio)', 'Chaos Engineering', 'Security (SAST/DAST)',
                        'Cost Optimization', 'Platform Engineering'],
    'Data Analyst': ['Machine Learning', 'dbt', 'Apache Spark', 'Data Engineering',
                     'Storytelling with Data', 'A/B Testing'],
    'Designer': ['Design Systems', 'Motion Design', 'User Research', 'Accessibility', 'Prototyping',
                 'Design Tokens'],
}

SYSTEM_PROMPT = (
    "You are an HR analytics AI. Given an employee profile and productivity data, return a JSON "
    "object with exactly two fields: \"suggestedSkills\" (array of 3-5 skill strings the employee "
    "should learn based on their role and current gaps) and \"performanceSummary\" (2-3 sentence "
    "performance review). Return ONLY valid JSON, no markdown."
)


def performance_tier(score: int) -> str:
    for threshold, tier in PERFORMANCE_TIERS:
        if score >= threshold:
            return tier
    return FALLBACK_TIER


def suggest_skills(employee: Employee) -> List[str]:
    """Pick role-based skills the employee does not list yet."""
    role = employee.role.lower()
    role_key = next((key for key in SKILL_SUGGESTIONS if key.lower() in role), None)
    if role_key is None:
        role_key = next(iter(SKILL_SUGGESTIONS))

    current = {s.lower() for s in employee.skills}
    missing = [s for s in SKILL_SUGGESTIONS[role_key] if s.lower() not in current]
    return missing[:MAX_SUGGESTED_SKILLS]


def _fmt(value: float) -> str:
    return f"{value:g}"


def _timeout_from_env() -> float:
    raw = os.environ.get("AI_TIMEOUT_SECONDS")
    if not raw:
        return DEFAULT_AI_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError:
        timeout = 0.0
    if not timeout > 0:
        logger.warning("Invalid AI_TIMEOUT_SECONDS %r, using %ss", raw, _fmt(DEFAULT_AI_TIMEOUT_SECONDS))
        return DEFAULT_AI_TIMEOUT_SECONDS
    return timeout


class TemplateInsightProvider:
    """Deterministic insights keyed by performance tier."""

    source = 'template'

    def generate(self, employee: Employee, score: ScoreResult) -> Insights:
        tier = performance_tier(score.score)
        completion = _fmt(score.breakdown.completion_rate)

        summaries = {
            'exceptional': (
                f"{employee.name} is performing exceptionally well as a {employee.role}. "
                f"With a {score.score}% productivity score and {score.completed_tasks}/{score.total_tasks} "
                f"tasks completed, they consistently deliver before deadlines. They are ready for senior "
                f"responsibilities and cross-functional leadership opportunities."
            ),
            'strong': (
                f"{employee.name} demonstrates strong performance in {employee.department}. "
                f"Their {score.score}% score reflects reliable task completion "
                f"({score.completed_tasks}/{score.total_tasks}) and solid time management. Investing in "
                f"the suggested skills below would accelerate their trajectory toward a senior role."
            ),
            'developing': (
                f"{employee.name} shows promise in their {employee.role} position with a {score.score}% "
                f"score. Their completion rate of {completion}% suggests room for improvement in task "
                f"execution. Consider pairing them with a senior mentor and prioritizing the skill gaps "
                f"identified below."
            ),
            'needs-attention': (
                f"{employee.name} requires immediate support. With a {score.score}% productivity score "
                f"and {completion}% completion rate, there may be systemic blockers affecting their "
                f"output. Recommended: a 1-on-1 check-in to identify obstacles, adjusted workload, and "
                f"a structured learning plan."
            ),
        }

        return Insights(
            suggested_skills=suggest_skills(employee),
            performance_summary=summaries[tier],
            performance_tier=tier,
            source=self.source
        )


class RemoteInsightProvider:
    """Insights from an OpenAI-compatible chat model.

    Any failure (missing key, network error, timeout, non-JSON or incomplete
    reply) is logged and answered by the template provider instead.
    """

    source = 'openai'

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 base_url: Optional[str] = None, timeout: Optional[float] = None,
                 fallback: Optional[TemplateInsightProvider] = None, client=None):
        self.api_key = api_key or os.environ.get("AI_API_KEY")
        self.model = model or os.environ.get("AI_MODEL") or DEFAULT_AI_MODEL
        self.base_url = base_url or os.environ.get("AI_BASE_URL") or None
        self.timeout = timeout or _timeout_from_env()
        self.fallback = fallback or TemplateInsightProvider()
        self._client = client

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0
            )
        return self._client

    def _build_payload(self, employee: Employee, score: ScoreResult) -> str:
        return json.dumps({
            'name': employee.name,
            'role': employee.role,
            'department': employee.department,
            'currentSkills': employee.skills,
            'productivityScore': score.score,
            'breakdown': {
                'completionRate': score.breakdown.completion_rate,
                'speedScore': score.breakdown.speed_score,
                'complexityScore': score.breakdown.complexity_score,
            },
            'completedTasks': score.completed_tasks,
            'totalTasks': score.total_tasks,
        })

    def _request(self, employee: Employee, score: ScoreResult) -> Insights:
        response = self._get_client().chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": self._build_payload(employee, score)}
            ],
            temperature=0.1,
            max_tokens=500
        )

        parsed = json.loads(response.choices[0].message.content)
        skills = parsed.get('suggestedSkills')
        summary = parsed.get('performanceSummary')
        if not isinstance(skills, list) or not all(isinstance(s, str) for s in skills):
            raise ValueError("suggestedSkills must be a list of strings")
        if not isinstance(summary, str) or not summary.strip():
            raise ValueError("performanceSummary must be a non-empty string")

        return Insights(
            suggested_skills=skills,
            performance_summary=summary,
            performance_tier=performance_tier(score.score),
            source=self.source
        )

    def generate(self, employee: Employee, score: ScoreResult) -> Insights:
        if not self.api_key:
            return self.fallback.generate(employee, score)
        try:
            return self._request(employee, score)
        except Exception as e:
            logger.warning("AI insight call failed, using template fallback: %s", e)
            return self.fallback.generate(employee, score)


def get_insight_provider():
    """Choose the provider from the AI_* environment variables."""
    api_key = os.environ.get("AI_API_KEY")
    provider = os.environ.get("AI_PROVIDER") or DEFAULT_AI_PROVIDER

    if not api_key:
        return TemplateInsightProvider()
    if provider != 'openai':
        logger.warning("Unsupported AI_PROVIDER %r, using template insights", provider)
        return TemplateInsightProvider()
    return RemoteInsightProvider(api_key=api_key)


def generate_insights(employee: Employee, score: ScoreResult, provider=None) -> Insights:
    """Generate skill suggestions and a performance summary for an employee."""
    provider = provider or get_insight_provider()
    return provider.generate(employee, score)
