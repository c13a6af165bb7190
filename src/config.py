"""Configuration constants for the Workforce Productivity Engine."""

import os

# Composite productivity score weights
COMPLETION_WEIGHT = 0.5
SPEED_WEIGHT = 0.3
COMPLEXITY_WEIGHT = 0.2

MAX_COMPLEXITY = 5
DEFAULT_SPEED_SCORE = 50
ON_TIME_SCORE = 100
EARLY_FINISH_SCORE = 110

# Monthly performance index weights
MONTHLY_COMPLETION_WEIGHT = 0.6
MONTHLY_COMPLEXITY_WEIGHT = 0.4

MIN_COMPLETED_FOR_TREND = 5
MIN_MONTHS_FOR_TREND = 2
MIN_HISTORICAL_MONTHS = 2
HIGH_CONFIDENCE_MONTHS = 4
TREND_SLOPE_THRESHOLD = 1.5

# Assignment ranking
PERFORMANCE_WEIGHT = 0.5
AVAILABILITY_MAX = 40
AVAILABILITY_PENALTY_PER_TASK = 8
STRONG_PERFORMER_SCORE = 70
LOAD_SPREAD_SCORE = 60
COMPLEX_TASK_THRESHOLD = 4
TASK_RECOMMENDATION_LIMIT = 5
DEFAULT_TASK_COMPLEXITY = 3

PERFORMANCE_TIERS = [
    (80, "exceptional"),
    (60, "strong"),
    (40, "developing"),
]
FALLBACK_TIER = "needs-attention"
TIER_BADGES = {
    "exceptional": "🟢",
    "strong": "🔵",
    "developing": "🟡",
    "needs-attention": "🔴",
}
MAX_SUGGESTED_SKILLS = 4

DEFAULT_AI_PROVIDER = "openai"
DEFAULT_AI_MODEL = "gpt-4o-mini"
DEFAULT_AI_TIMEOUT_SECONDS = 10.0

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
