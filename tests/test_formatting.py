"""Tests for the dashboard display helpers."""

from __future__ import annotations

import pytest

from src.config import PERFORMANCE_TIERS
from src.formatting import insight_card_html, tier_badge
from src.llm import performance_tier
from src.models import Insights


class TestTierBadge:

    @pytest.mark.parametrize("score,badge", [
        (100, "🟢 Exceptional"), (80, "🟢 Exceptional"), (79, "🔵 Strong"),
        (60, "🔵 Strong"), (59, "🟡 Developing"), (40, "🟡 Developing"),
        (39, "🔴 Needs attention"), (0, "🔴 Needs attention"),
    ])
    def test_badge_for_score(self, score, badge):
        assert tier_badge(score) == badge

    def test_follows_configured_thresholds(self, monkeypatch):
        monkeypatch.setattr("src.llm.PERFORMANCE_TIERS", [(90, "exceptional"), *PERFORMANCE_TIERS[1:]])
        assert performance_tier(85) == "strong"
        assert tier_badge(85) == "🔵 Strong"


class TestInsightCard:

    def test_escapes_summary_and_source(self):
        insights = Insights(
            suggested_skills=[],
            performance_summary='<img src=x onerror="alert(1)"> & <script>steal()</script>',
            performance_tier="needs-attention",
            source="<b>openai</b>",
        )

        card = insight_card_html(insights)

        assert "<img" not in card
        assert "<script>" not in card
        assert "&lt;img src=x onerror=&quot;alert(1)&quot;&gt; &amp; &lt;script&gt;" in card
        assert "(&lt;b&gt;openai&lt;/b&gt;)" in card
        assert "<strong>Needs attention</strong>" in card

    def test_plain_summary_unchanged(self):
        insights = Insights(["SQL"], "Steady delivery this quarter.", "strong", "template")
        card = insight_card_html(insights)
        assert '<div class="insight-card">' in card
        assert "<p>Steady delivery this quarter.</p>" in card
