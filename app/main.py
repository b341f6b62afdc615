"""
Streamlit Frontend for Cost Genie

This is the user interface for tracking what everyday costs add up to.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every figure is shown against the user's own income
3. Estimates are labelled as estimates
4. Formatting happens here; the core returns raw Decimals
5. No hidden actions

Pages:
- Add a cost, with a live projection across time buckets
- History, needs and wants lists with tag toggles
- Summary with advisories
- Profile and settings (salary, state, display mode)
"""

import asyncio
from decimal import Decimal
from typing import Optional

import streamlit as st

from cost_genie.calculations import ESTIMATE_DISCLAIMER, get_state_names
from cost_genie.config import get_settings
from cost_genie.models import (
    AdvisoryTier,
    CostEntry,
    CostTag,
    Frequency,
    IncomeBase,
    ProfileUpdate,
    ThemePreference,
    TimeBucket,
    UserProfile,
    resolve_theme,
)
from cost_genie.orchestrator import (
    AnalysisFlow,
    CostTrackingFlow,
    ProfileFlow,
    create_app_components,
)


# Page configuration
st.set_page_config(
    page_title="Cost Genie",
    page_icon="🧞",
    layout="wide",
    initial_sidebar_state="expanded",
)

BUCKET_LABELS = {
    TimeBucket.ONE_TIME: "One time",
    TimeBucket.DAILY: "Daily",
    TimeBucket.WEEKLY: "Weekly",
    TimeBucket.MONTHLY: "Monthly",
    TimeBucket.EVERY_FOUR_MONTHS: "Every 4 months",
    TimeBucket.YEARLY: "Yearly",
}

TIER_BOXES = {
    AdvisoryTier.DANGER: "error-box",
    AdvisoryTier.WARNING: "warning-box",
    AdvisoryTier.INFO: "info-box",
    AdvisoryTier.SUCCESS: "success-box",
}

THEME_COLORS = {
    "light": {"background": "#ffffff", "text": "#2c3e50"},
    "dark": {"background": "#0e1117", "text": "#fafafa"},
}

DEFAULT_USER_ID = "local-user"


def apply_styles(mode: str) -> None:
    """Inject the box styles plus the colors for the active display mode."""
    colors = THEME_COLORS[mode]
    st.markdown(f"""
    <style>
        .stApp {{
            background-color: {colors["background"]};
            color: {colors["text"]};
        }}
        .stButton>button {{
            width: 100%;
        }}
        .success-box {{
            padding: 16px;
            background-color: #d4edda;
            color: #155724;
            border-radius: 10px;
            border-left: 5px solid #28a745;
            margin: 10px 0;
        }}
        .warning-box {{
            padding: 16px;
            background-color: #fff3cd;
            color: #856404;
            border-radius: 10px;
            border-left: 5px solid #ffc107;
            margin: 10px 0;
        }}
        .error-box {{
            padding: 16px;
            background-color: #f8d7da;
            color: #721c24;
            border-radius: 10px;
            border-left: 5px solid #dc3545;
            margin: 10px 0;
        }}
        .info-box {{
            padding: 16px;
            background-color: #cce5ff;
            color: #004085;
            border-radius: 10px;
            border-left: 5px solid #004085;
            margin: 10px 0;
        }}
    </style>
    """, unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def format_currency(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def format_percent(value: Decimal) -> str:
    return f"{value:.2f}%"


def income_label(income: IncomeBase) -> str:
    if income.is_after_tax:
        return f"after-tax income in {income.state} (estimated)"
    return "gross income"


def main():
    """Main application entry point."""
    cost_flow, profile_flow, analysis_flow = get_components()
    app_settings = get_settings().app

    if "theme" not in st.session_state:
        st.session_state.theme = app_settings.default_theme
    apply_styles(resolve_theme(st.session_state.theme))

    # Sidebar navigation
    st.sidebar.title("🧞 Cost Genie")
    st.sidebar.markdown("---")

    user_id = st.sidebar.text_input(
        "User",
        value=st.session_state.get("user_id", DEFAULT_USER_ID),
        help="Costs and income are kept separately per user",
    ).strip() or DEFAULT_USER_ID
    st.session_state.user_id = user_id

    page = st.sidebar.radio(
        "Navigate to:",
        ["➕ Add Cost", "📜 History", "🏠 Needs", "⭐ Wants", "📊 Summary", "⚙️ Profile"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Enter your yearly salary and state
        2. Add what you spend and how often
        3. Mark costs as needs or wants
        4. Check the summary for advice
        """
    )

    profile = run_async(profile_flow.get_profile(user_id))

    # Route to appropriate page
    if page == "➕ Add Cost":
        render_add_cost_page(cost_flow, analysis_flow, user_id, profile)
    elif page == "📜 History":
        render_cost_list_page(cost_flow, user_id, "📜 History", None)
    elif page == "🏠 Needs":
        render_cost_list_page(cost_flow, user_id, "🏠 Needs", CostTag.NEED)
    elif page == "⭐ Wants":
        render_cost_list_page(cost_flow, user_id, "⭐ Wants", CostTag.FAVORITE)
    elif page == "📊 Summary":
        render_summary_page(analysis_flow, user_id)
    elif page == "⚙️ Profile":
        render_profile_page(profile_flow, user_id, profile)


def render_add_cost_page(
    cost_flow: CostTrackingFlow,
    analysis_flow: AnalysisFlow,
    user_id: str,
    profile: Optional[UserProfile],
):
    """Render the add cost page with a live projection."""
    st.title("➕ Add a Cost")
    st.markdown("See what a cost really adds up to over time.")

    col1, col2 = st.columns(2)

    with col1:
        description = st.text_input(
            "What is it? *",
            placeholder="e.g., Morning coffee",
            max_chars=200,
        )
        amount = st.number_input(
            "Amount ($) *",
            min_value=0.0,
            value=0.0,
            step=0.5,
            format="%.2f",
        )
        frequency = st.selectbox(
            "How often? *",
            options=list(Frequency),
            index=list(Frequency).index(Frequency.DAILY),
            format_func=lambda f: f.value.title(),
        )
        need = st.checkbox("This is a need")
        favorite = st.checkbox("This is a want")

    with col2:
        view = run_async(analysis_flow.analyze_cost(Decimal(str(amount)), profile))

        if not view.ok:
            st.markdown(f"""
            <div class="info-box">
                <p>{view.message}</p>
            </div>
            """, unsafe_allow_html=True)
        else:
            st.markdown(f"**Measured against your {income_label(view.income)}**")
            highlighted = frequency.bucket
            for bucket, projection in view.analysis.as_dict().items():
                marker = "👉 " if bucket is highlighted else ""
                st.markdown(
                    f"{marker}**{BUCKET_LABELS[bucket]}:** "
                    f"{format_currency(projection.amount)} "
                    f"({format_percent(projection.percentage)} of income)"
                )
            if view.income.is_after_tax:
                st.caption(ESTIMATE_DISCLAIMER)

    st.markdown("---")

    if st.button("💾 Save Cost", type="primary"):
        if not description.strip():
            st.error("Please describe the cost")
        else:
            try:
                entry = run_async(
                    cost_flow.add_cost(
                        user_id=user_id,
                        description=description,
                        amount=Decimal(str(amount)),
                        frequency=frequency,
                        favorite=favorite,
                        need=need,
                    )
                )
                st.success(
                    f"Saved {entry.description}: {format_currency(entry.amount)} "
                    f"{entry.frequency.value}"
                )
            except Exception as e:
                st.error(f"Failed to save: {str(e)}")


def render_cost_row(cost_flow: CostTrackingFlow, entry: CostEntry):
    col1, col2, col3, col4, col5 = st.columns([4, 2, 1, 1, 1])

    with col1:
        st.markdown(f"**{entry.description}**")
        st.caption(entry.created_at.strftime("%d %B %Y"))
    with col2:
        st.markdown(f"{format_currency(entry.amount)} · {entry.frequency.value}")
    with col3:
        label = "🏠✔" if entry.need else "🏠"
        if st.button(label, key=f"need-{entry.id}", help="Toggle need"):
            run_async(cost_flow.toggle_need(entry.id))
            st.rerun()
    with col4:
        label = "⭐✔" if entry.favorite else "⭐"
        if st.button(label, key=f"fav-{entry.id}", help="Toggle want"):
            run_async(cost_flow.toggle_favorite(entry.id))
            st.rerun()
    with col5:
        if st.button("🗑️", key=f"del-{entry.id}", help="Delete"):
            run_async(cost_flow.delete_cost(entry.id))
            st.rerun()


def render_cost_list_page(
    cost_flow: CostTrackingFlow,
    user_id: str,
    title: str,
    tag: Optional[CostTag],
):
    """Render a list of costs, optionally only those carrying a tag."""
    st.title(title)

    filters = {tag.value: True} if tag else {}
    entries = run_async(cost_flow.list_costs(user_id, **filters))

    if not entries:
        st.info("No costs here yet. Add one from the ➕ Add Cost page.")
        return

    for entry in entries:
        render_cost_row(cost_flow, entry)


def render_summary_page(analysis_flow: AnalysisFlow, user_id: str):
    """Render the financial summary and advisories."""
    st.title("📊 Summary")

    show_all = st.toggle("Show all advice", value=False)
    limit = None if show_all else get_settings().app.max_recommendations

    view = run_async(analysis_flow.build_dashboard(user_id, max_recommendations=limit))

    if not view.ok:
        st.markdown(f"""
        <div class="info-box">
            <p>{view.message}</p>
        </div>
        """, unsafe_allow_html=True)
        return

    summary = view.summary
    st.markdown(f"**Measured against your {income_label(summary.income)}:** "
                f"{format_currency(summary.income.amount)} per year")
    if summary.income.is_after_tax:
        st.caption(ESTIMATE_DISCLAIMER)

    col1, col2, col3 = st.columns(3)
    for col, label, totals in (
        (col1, "🏠 Needs", summary.needs),
        (col2, "⭐ Wants", summary.favorites),
        (col3, "Σ Combined", summary.combined),
    ):
        with col:
            st.metric(
                label,
                format_currency(totals.yearly_total) + " / yr",
                format_percent(totals.percentage_of_income) + " of income",
                delta_color="off",
            )
            st.caption(f"{format_currency(totals.monthly_average)} per month on average")

    st.markdown("---")
    st.subheader("💡 Advice")

    for advisory in view.advisories:
        action = f"<p><em>{advisory.action}</em></p>" if advisory.action else ""
        st.markdown(f"""
        <div class="{TIER_BOXES[advisory.tier]}">
            <h4>{advisory.title}</h4>
            <p>{advisory.description}</p>
            {action}
        </div>
        """, unsafe_allow_html=True)


def render_profile_page(
    profile_flow: ProfileFlow,
    user_id: str,
    profile: Optional[UserProfile],
):
    """Render the profile and settings page."""
    st.title("⚙️ Profile")

    states = [""] + get_state_names()
    current_state = profile.state if profile and profile.state in states else ""

    yearly_salary = st.number_input(
        "Yearly salary ($) *",
        min_value=0.0,
        value=float(profile.yearly_salary) if profile else 0.0,
        step=1000.0,
        format="%.2f",
    )
    state = st.selectbox(
        "State",
        options=states,
        index=states.index(current_state),
        format_func=lambda s: s or "Not selected (use gross income)",
    )

    if st.button("💾 Save Profile", type="primary"):
        if yearly_salary <= 0:
            st.error("Please enter a salary greater than zero")
        else:
            try:
                salary = Decimal(str(yearly_salary))
                if profile:
                    run_async(profile_flow.update_profile(
                        user_id,
                        ProfileUpdate(yearly_salary=salary, state=state),
                    ))
                else:
                    run_async(profile_flow.save_profile(
                        user_id=user_id,
                        yearly_salary=salary,
                        state=state or None,
                    ))
                st.success("Profile saved")
            except Exception as e:
                st.error(f"Failed to save: {str(e)}")

    st.markdown("---")
    st.subheader("🎨 Display")

    themes = list(ThemePreference)
    theme = st.radio(
        "Display mode",
        options=themes,
        index=themes.index(ThemePreference(st.session_state.theme)),
        format_func=lambda t: t.value.title(),
        horizontal=True,
    )
    if theme != st.session_state.theme:
        st.session_state.theme = theme
        st.rerun()


if __name__ == "__main__":
    main()
