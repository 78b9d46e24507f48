import streamlit as st

from infrastructure.observability import setup_observability, tag_user
setup_observability()

import ui
from utils import session_manager
from use_cases import auth_flow, bootstrap
from use_cases.session_models import display_email
from views import login_view, messages_view, overview_view, post_editor_view, posts_view

# --- PAGE SETUP ---
st.set_page_config(page_title="Content Dashboard", page_icon="🏛️", layout="wide", initial_sidebar_state="expanded")
ui.setup_style()

# --- STARTUP ORCHESTRATION ---
startup_result = bootstrap.run_startup()
if startup_result.status == "STOP":
    st.error(f"⚠️ {startup_result.error}")
    st.caption("Add the keys to .streamlit/secrets.toml or the environment and restart the app.")
    st.stop()

# --- LOGIN ---
if session_manager.current_route() == session_manager.LOGIN:
    login_view.render_auth_screen()
    st.stop()

NAV_ITEMS = (
    ("📊 Overview", session_manager.OVERVIEW),
    ("✉️ Messages", session_manager.MESSAGES),
    ("📝 Blog Posts", session_manager.POSTS),
)
EDITOR_ROUTES = (session_manager.NEW_POST, session_manager.EDIT_POST)

# === PROTECTED AREA ===
with auth_flow.protected_view() as auth_result:
    if auth_result.status == "STOP":
        # The guard has already replaced the route with the login screen.
        st.rerun()

    guard = auth_result.guard
    route = session_manager.current_route()
    tag_user(auth_result.user_id, screen=route)

    # --- SIDEBAR ---
    with st.sidebar:
        st.markdown("### 🏛️ Content Dashboard")
        for label, target in NAV_ITEMS:
            active = route == target or (target == session_manager.POSTS and route in EDITOR_ROUTES)
            if st.button(label, key=f"nav_{target}", type="primary" if active else "secondary",
                         use_container_width=True):
                session_manager.navigate(target)

        st.divider()
        if st.button("🚪 Logout", key="logout_btn", type="secondary", use_container_width=True):
            session_manager.logout(guard)
        st.caption(f"Logged in as: {display_email(auth_result.session)}")

    if route not in EDITOR_ROUTES:
        post_editor_view.discard_editor()

    # --- BODY ---
    session = auth_result.session
    if route == session_manager.MESSAGES:
        messages_view.render_messages(session)
    elif route == session_manager.POSTS:
        posts_view.render_posts(session)
    elif route == session_manager.NEW_POST:
        post_editor_view.render_editor(session)
    elif route == session_manager.EDIT_POST:
        post_id = session_manager.route_param("post_id")
        if post_id is None:
            session_manager.navigate(session_manager.POSTS, replace=True)
        post_editor_view.render_editor(session, post_id=post_id)
    else:
        overview_view.render_overview(session)

    # A sign-out notification may have arrived while the screen rendered.
    if not guard.is_authenticated:
        guard.settle_navigation()
        st.rerun()
