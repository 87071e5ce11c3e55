import asyncio
import html

import plotly.express as px
import streamlit as st

from medtrust.core.logging import configure_logging
from medtrust.schemas.access_schemas import LOCATIONS, ROLES, TIME_LABELS, TimeOfDay
from medtrust.services import display_service
from medtrust.services.log_service import EMPTY_STATE_MESSAGE
from medtrust.services.view_service import Perspective, ViewController

# --- CONFIGURATION ---
st.set_page_config(page_title="MedTrust AI | Adaptive Trust-Based EHR Access", layout="centered", page_icon="🏥")
configure_logging()

# One controller per browser session, so form, decision and log survive reruns
if "controller" not in st.session_state:
    st.session_state.controller = ViewController()
controller: ViewController = st.session_state.controller


def seed_form_state(builder):
    # Widgets own their value once keyed; the builder only seeds them when they are (re)created
    defaults = {
        "form_role": builder.role,
        "form_location": builder.location,
        "form_time": builder.time,
        "form_purpose": builder.purpose,
        "form_emergency": builder.emergency,
        "form_justification": builder.justification,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def render_decision_panel(panel):
    outcome = controller.decision_client.outcome
    banner = display_service.decision_banner(outcome)
    panel.markdown(
        f"""
        <div style="background-color: {banner.background}; padding: 1.5rem; border-radius: 0.75rem; margin-top: 1.5rem;">
            <h3 style="color: {banner.color}; margin: 0 0 0.5rem 0;">Dynamic Decision: {banner.text}</h3>
            <p style="margin: 0; font-weight: 500;">Audit Log Message:</p>
            <p style="margin: 0; font-style: italic;">{html.escape(display_service.rationale_text(outcome))}</p>
        </div>
        """,
        unsafe_allow_html=True,
    )


async def submit_and_render(panel):
    task = asyncio.create_task(controller.submit())
    # submit() marks the outcome pending before its first await
    await asyncio.sleep(0)
    render_decision_panel(panel)
    await task


def render_access_request_view():
    builder = controller.builder
    seed_form_state(builder)
    st.header("1. Context-Aware Access Request")

    builder.role = st.selectbox("WHO: User Role", ROLES, key="form_role")
    builder.location = st.selectbox("WHERE: Location/IP", LOCATIONS, key="form_location")
    builder.time = st.selectbox(
        "WHEN: Time of Day", list(TimeOfDay), key="form_time", format_func=lambda t: TIME_LABELS[t]
    )
    builder.purpose = st.text_input("WHY: Resource/Purpose", key="form_purpose", placeholder="e.g., Patient_A_Record")
    builder.emergency = st.checkbox("🚨 Emergency Access (Break-Glass)", key="form_emergency")

    if builder.emergency:
        builder.justification = st.text_input(
            "Justification (for NLP Review)",
            key="form_justification",
            placeholder="e.g., Critical surgery needed now",
        )
        if not builder.can_submit:
            st.caption("A justification is required for emergency access.")

    submitted = st.button("Check Access & Compute Trust Score", type="primary", key="submit_access",
                          disabled=not builder.can_submit)
    panel = st.empty()

    if submitted:
        with st.spinner("Evaluating access request..."):
            asyncio.run(submit_and_render(panel))

    render_decision_panel(panel)


def render_patient_view():
    store = controller.audit_store
    st.header("3. Patient Transparency Dashboard (Who Viewed My Data?)")
    st.write("This view shows Patient A's audit history, ensuring full data accountability.")

    if st.button("Refresh Access Logs 🔄"):
        with st.spinner("Fetching access logs..."):
            asyncio.run(store.refresh())

    if store.is_empty:
        st.info(EMPTY_STATE_MESSAGE)
        return

    k1, k2 = st.columns(2)
    k1.metric("Logged Events", len(store.entries))
    k2.metric("Denied / Restricted", display_service.denied_count(store.entries), delta_color="inverse")

    frame = display_service.entries_to_frame(store.entries)
    st.dataframe(
        frame.style.map(display_service.highlight_actions, subset=["action"]),
        width="stretch",
        hide_index=True,
    )

    counts = display_service.action_counts(store.entries)
    fig = px.bar(counts, x="action", y="count", color="action", title="Access Attempts by Outcome")
    st.plotly_chart(fig, width="stretch")


# --- HEADER & VIEW SWITCHING ---
st.title("🏆 MedTrust AI")
st.caption("Adaptive Trust-Based EHR Access System")

c1, c2 = st.columns(2)
with c1:
    if st.button("⚕️ Doctor/Nurse Access Check", key="nav_requester"):
        asyncio.run(controller.switch_to(Perspective.REQUESTER))
with c2:
    if st.button("👤 Patient Transparency Dashboard", key="nav_transparency"):
        with st.spinner("Fetching access logs..."):
            asyncio.run(controller.switch_to(Perspective.TRANSPARENCY))

st.markdown("---")

if controller.perspective is Perspective.REQUESTER:
    render_access_request_view()
else:
    render_patient_view()
