import logging

import streamlit as st

import auth
import ui
from infrastructure.repositories.supabase_table import StoreError
from use_cases.dashboard_stats import STATS_LOAD_FAILED, load_dashboard_stats
from utils import session_manager

log = logging.getLogger(__name__)


def render_overview(session):
    st.title("Dashboard Overview")
    st.caption("A quick look at your website's activity.")

    try:
        with st.spinner("Loading Dashboard..."):
            stats = load_dashboard_stats(auth.get_post_repo(), auth.get_message_repo())
    except StoreError as e:
        log.error(f"Error fetching dashboard stats: {e}")
        st.error(f"⚠️ {STATS_LOAD_FAILED}")
        return

    c1, c2, c3, c4 = st.columns(4)
    ui.render_stat_card(c1, "✉️", "Unread Messages", stats.unread_messages)
    ui.render_stat_card(c2, "📄", "Total Posts", stats.total_posts)
    ui.render_stat_card(c3, "✅", "Published Posts", stats.published_posts)
    ui.render_stat_card(c4, "✏️", "Drafts", stats.draft_posts)
    st.caption(f"Messages received in total: {stats.total_messages}")

    st.divider()
    st.subheader("Quick Actions")
    q1, q2 = st.columns(2)
    with q1:
        st.markdown("**Create New Post**  \nStart writing a new article for your blog.")
        if st.button("➕ New Post", key="quick_new_post", use_container_width=True):
            session_manager.navigate(session_manager.NEW_POST)
    with q2:
        st.markdown("**Manage Posts**  \nEdit, publish, or delete existing posts.")
        if st.button("➡️ All Posts", key="quick_posts", use_container_width=True):
            session_manager.navigate(session_manager.POSTS)
