"""
Workforce Productivity Engine - Team Performance Dashboard
Scores employees from their task history, forecasts monthly trends and ranks assignees.

Scoring Framework:
- Productivity Score: completion rate x 0.5 + speed vs deadline x 0.3 + complexity x 0.2
- Trend: least-squares fit over monthly performance index (current month excluded)
- Assignment: performance x 0.5 + availability (40 - 8/active task) + complexity fit
"""

import logging
from datetime import datetime
from html import escape
from typing import Dict, List, Tuple

import pandas as pd
import streamlit as st

from src.analysis import predict_trend, summarize_organization
from src.config import LOG_LEVEL, MAX_COMPLEXITY, TASK_RECOMMENDATION_LIMIT
from src.data_loader import parse_uploaded_data, validate_data
from src.demo_data import build_demo_organization
from src.formatting import insight_card_html, tier_badge
from src.llm import generate_insights
from src.models import Employee, ScoreResult, Task
from src.recommendations import build_candidates, parse_complexity, rank_employees, recommend_for_task
from src.repository import TaskRepository
from src.scoring import calculate_score

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger("app")

NOW = datetime.now()

# =============================================================================
# DATA LOADING
# =============================================================================

@st.cache_data
def load_demo_data(reference_day: str) -> Tuple[Dict[str, Employee], List[Task]]:
    return build_demo_organization(NOW)


def load_uploaded_data(employees_file, tasks_file) -> Tuple[Dict[str, Employee], List[Task]]:
    try:
        employees, tasks = parse_uploaded_data(
            employees_file.getvalue().decode("utf-8"),
            tasks_file.getvalue().decode("utf-8")
        )
    except ValueError as e:
        st.error(f"Could not read uploaded files: {e}")
        st.stop()

    ok, message = validate_data(employees, tasks)
    if not ok:
        st.error(message)
        st.stop()
    st.sidebar.success(message)
    return employees, tasks


def score_organization(repository: TaskRepository) -> Dict[str, ScoreResult]:
    scores = {}
    for employee in repository.list_employees():
        result = calculate_score(repository.tasks_for_employee(employee.id))
        repository.record_score(employee.id, result.score)
        scores[employee.id] = result
    logger.info("Scored %d employees", len(scores))
    return scores


def ranking_frame(ranked) -> pd.DataFrame:
    return pd.DataFrame([{
        'Employee': r.name or r.employee_id,
        'Role': r.role,
        'Score': r.current_score,
        'Active Tasks': r.active_task_count,
        'Match': r.match_score,
        'Why': r.reason,
        'Assigned': "✅" if r.is_currently_assigned else "",
    } for r in ranked])

# =============================================================================
# STREAMLIT APP
# =============================================================================

st.set_page_config(
    page_title="Workforce Productivity Engine | Acme Technologies",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        text-align: center;
        padding: 1.5rem 0;
        border-bottom: 1px solid rgba(255,255,255,0.1);
        margin-bottom: 1.5rem;
    }

    .section-header {
        font-size: 1.25rem;
        font-weight: 600;
        margin: 1rem 0 0.75rem 0;
    }

    .insight-card {
        background: rgba(30, 41, 59, 0.6);
        border: 1px solid rgba(255,255,255,0.1);
        border-left: 4px solid #22d3ee;
        border-radius: 12px;
        padding: 1.25rem;
        margin-bottom: 1rem;
    }
</style>
""", unsafe_allow_html=True)

st.markdown("""
<div class="main-header">
    <h1>Workforce Productivity Engine</h1>
    <p style="color: #94a3b8;">Task-based productivity scoring, trend forecasting and smart assignment</p>
    <p style="color: #94a3b8; font-size: 0.85rem;">📅 {}</p>
</div>
""".format(NOW.strftime('%B %d, %Y')), unsafe_allow_html=True)

# Sidebar
with st.sidebar:
    st.markdown("### 📂 Data Source")
    source = st.radio("Load from", ["Demo organization", "Upload JSON"], label_visibility="collapsed")

    if source == "Upload JSON":
        employees_file = st.file_uploader("employees.json", type="json")
        tasks_file = st.file_uploader("tasks.json", type="json")
        if employees_file is None or tasks_file is None:
            st.info("Upload both files to continue.")
            st.stop()
        employees, tasks = load_uploaded_data(employees_file, tasks_file)
    else:
        employees, tasks = load_demo_data(NOW.date().isoformat())

repository = TaskRepository(employees, tasks)

with st.spinner('🔄 Scoring employees...'):
    scores = score_organization(repository)
    summary = summarize_organization(repository.list_employees(), repository.list_tasks())

with st.sidebar:
    st.markdown("---")
    st.markdown("### 📊 Quick Summary")

    avg_score = summary.avg_productivity_score
    if avg_score >= 60:
        st.success(f"**Avg Productivity:** {avg_score}")
    elif avg_score >= 40:
        st.warning(f"**Avg Productivity:** {avg_score}")
    else:
        st.error(f"**Avg Productivity:** {avg_score}")

    st.metric("👥 Employees", summary.total_employees)
    st.metric("⚡ Active Employees", summary.active_employees)
    st.metric("📋 Total Tasks", summary.total_tasks)

# =============================================================================
# TABS
# =============================================================================

tab1, tab2, tab3 = st.tabs(["📈 Team Overview", "👤 Employee Profile", "🎯 Task Assignment"])

# =============================================================================
# TAB 1: TEAM OVERVIEW
# =============================================================================

with tab1:
    st.markdown('<div class="section-header">🎯 Key Metrics</div>', unsafe_allow_html=True)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Avg Productivity", summary.avg_productivity_score)
    with col2:
        st.metric("Completed", summary.completed_tasks)
    with col3:
        st.metric("In Progress", summary.in_progress_tasks)
    with col4:
        st.metric("Assigned", summary.assigned_tasks)

    completion = summary.completed_tasks / summary.total_tasks if summary.total_tasks else 0.0
    st.progress(min(completion, 1.0))
    st.caption(f"{completion:.0%} of all tasks completed")

    st.markdown("---")

    col1, col2 = st.columns([2, 1])

    with col1:
        st.markdown('<div class="section-header">📋 Employee Scores</div>', unsafe_allow_html=True)
        score_df = pd.DataFrame([{
            'Employee': e.name,
            'Role': e.role,
            'Department': e.department,
            'Score': scores[e.id].score,
            'Completion %': scores[e.id].breakdown.completion_rate,
            'Speed': scores[e.id].breakdown.speed_score,
            'Complexity': scores[e.id].breakdown.complexity_score,
            'Tasks': f"{scores[e.id].completed_tasks}/{scores[e.id].total_tasks}",
            'Tier': tier_badge(scores[e.id].score),
        } for e in repository.list_employees()])

        if not score_df.empty:
            score_df = score_df.sort_values('Score', ascending=False)
        st.dataframe(
            score_df,
            use_container_width=True,
            hide_index=True,
            column_config={
                'Score': st.column_config.ProgressColumn('Score', format="%d", min_value=0, max_value=100),
            }
        )

    with col2:
        st.markdown('<div class="section-header">🏢 Departments</div>', unsafe_allow_html=True)
        dept_df = pd.DataFrame([{
            'Department': d.department,
            'Employees': d.employee_count,
            'Avg Score': d.avg_score,
        } for d in summary.department_stats])
        st.dataframe(dept_df, use_container_width=True, hide_index=True)

        st.markdown('<div class="section-header">🏆 Top Performers</div>', unsafe_allow_html=True)
        for rank, e in enumerate(summary.top_performers, start=1):
            st.markdown(f"**{rank}. {e.name}** — {e.ai_score} ({e.role})")

# =============================================================================
# TAB 2: EMPLOYEE PROFILE
# =============================================================================

with tab2:
    employee_list = repository.list_employees()
    if not employee_list:
        st.info("No employees loaded.")
    else:
        selected = st.selectbox(
            "Select Employee",
            employee_list,
            format_func=lambda e: f"{e.name} — {e.role}",
            key="profile_employee"
        )
        employee_tasks = repository.tasks_for_employee(selected.id)
        score = scores[selected.id]

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Productivity Score", score.score, delta=tier_badge(score.score))
        with col2:
            st.metric("Completion Rate", f"{score.breakdown.completion_rate:g}%")
        with col3:
            st.metric("Speed vs Deadline", f"{score.breakdown.speed_score:g}")
        with col4:
            st.metric("Complexity", f"{score.breakdown.complexity_score:g}")

        with st.expander("📖 How is the score calculated?"):
            st.markdown("""
            | Component | Weight | Description |
            |-----------|--------|-------------|
            | **Completion Rate** | 50% | Completed tasks / all tasks |
            | **Speed vs Deadline** | 30% | 100 on time, 110 if done in under half the window, scaled down when late |
            | **Complexity** | 20% | Average complexity of all tasks on a 1-5 scale |
            """)

        st.markdown("---")
        st.markdown('<div class="section-header">📉 Performance Trend</div>', unsafe_allow_html=True)

        trend = predict_trend(employee_tasks, now=NOW)
        if trend.confidence == 'insufficient_data' and not trend.monthly_data:
            st.info(f"⏳ {trend.message}")
        else:
            trend_icon = {'improving': '📈', 'declining': '📉'}.get(trend.trend, '➡️')
            col1, col2, col3 = st.columns(3)
            with col1:
                st.metric("Trend", f"{trend_icon} {trend.trend.title()}", delta=f"slope {trend.slope:+.2f}")
            with col2:
                st.metric("Confidence", trend.confidence.replace('_', ' ').title())
            with col3:
                st.metric(
                    "Predicted Next Month",
                    trend.predicted_next_month if trend.predicted_next_month is not None else "—"
                )

            trend_df = pd.DataFrame([{
                'Month': m.month,
                'Score': m.score,
            } for m in trend.monthly_data]).set_index('Month')
            st.line_chart(trend_df)
            st.caption("The current month is shown but not used to fit the trend.")

        st.markdown("---")
        st.markdown('<div class="section-header">💡 AI Insights</div>', unsafe_allow_html=True)

        insights = generate_insights(selected, score)
        st.markdown(insight_card_html(insights), unsafe_allow_html=True)
        if insights.suggested_skills:
            st.markdown("**Suggested skills:** " + ", ".join(insights.suggested_skills))

        st.markdown('<div class="section-header">📋 Task History</div>', unsafe_allow_html=True)
        tasks_df = pd.DataFrame([{
            'Task': t.title,
            'Status': t.status.value,
            'Complexity': t.complexity,
            'Created': t.created_at.strftime('%Y-%m-%d'),
            'Deadline': t.deadline.strftime('%Y-%m-%d'),
            'Completed': t.completed_at.strftime('%Y-%m-%d') if t.completed_at else "",
        } for t in reversed(employee_tasks)])
        st.dataframe(tasks_df, use_container_width=True, hide_index=True)

# =============================================================================
# TAB 3: TASK ASSIGNMENT
# =============================================================================

with tab3:
    candidates = build_candidates(repository.list_employees(), repository)

    mode = st.radio("Recommend for", ["A new task", "An existing task"], horizontal=True)

    if mode == "A new task":
        complexity = parse_complexity(
            st.slider("Task complexity", min_value=1, max_value=MAX_COMPLEXITY, value=3)
        )
        ranked = rank_employees(candidates, complexity)
        st.markdown(f'<div class="section-header">🎯 Best matches for complexity {complexity}</div>',
                    unsafe_allow_html=True)
        st.dataframe(
            ranking_frame(ranked).drop(columns=['Assigned']),
            use_container_width=True,
            hide_index=True,
            column_config={
                'Match': st.column_config.ProgressColumn('Match', format="%d", min_value=0, max_value=100),
            }
        )
    else:
        open_tasks = [t for t in repository.list_tasks() if t.is_active]
        if not open_tasks:
            st.info("No open tasks to reassign.")
        else:
            task = st.selectbox(
                "Select Task",
                open_tasks,
                format_func=lambda t: f"{t.title} (complexity {t.complexity})",
                key="assignment_task"
            )
            ranked = recommend_for_task(task, candidates)
            st.markdown(
                f'<div class="section-header">🎯 Top {TASK_RECOMMENDATION_LIMIT} for "{escape(task.title)}"</div>',
                unsafe_allow_html=True
            )
            st.dataframe(
                ranking_frame(ranked),
                use_container_width=True,
                hide_index=True,
                column_config={
                    'Match': st.column_config.ProgressColumn('Match', format="%d", min_value=0, max_value=100),
                }
            )
