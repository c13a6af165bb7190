"""Display helpers shared by the dashboard views."""

from html import escape

from src.config import TIER_BADGES
from src.llm import performance_tier
from src.models import Insights


def tier_title(tier: str) -> str:
    return tier.replace('-', ' ').capitalize()


def tier_badge(score: int) -> str:
    tier = performance_tier(score)
    return f"{TIER_BADGES[tier]} {tier_title(tier)}"


def insight_card_html(insights: Insights) -> str:
    """Render the insight card with every field HTML-escaped."""
    return f"""
        <div class="insight-card">
            <p><strong>{escape(tier_title(insights.performance_tier))}</strong>
            <span style="color: #94a3b8;">({escape(insights.source)})</span></p>
            <p>{escape(insights.performance_summary)}</p>
        </div>
        """
