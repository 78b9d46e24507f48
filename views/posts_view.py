import logging

import streamlit as st

import auth
import ui
from infrastructure.repositories.supabase_table import StoreError
from use_cases import inbox_flow
from utils import session_manager

log = logging.getLogger(__name__)

POSTS_LOAD_FAILED = "Could not fetch blog posts. Your RLS policies should allow selecting posts if you are logged in."


def _load_posts():
    if st.session_state.posts_cache is None:
        with st.spinner("Loading Posts..."):
            st.session_state.posts_cache = auth.get_post_repo().list_posts()
    return st.session_state.posts_cache


def _render_delete_confirmation(posts):
    target_id = st.session_state.get("confirm_delete_post")
    target = next((p for p in posts if p.id == target_id), None)
    if target is None:
        st.session_state.confirm_delete_post = None
        return

    busy = session_manager.is_pending("post_delete")
    st.warning(f'Are you sure you want to delete the post titled "{target.title}"?')
    c1, c2, _ = st.columns([1, 1, 4])
    if c1.button("🗑 Delete", key="confirm_post_delete", type="primary", disabled=busy):
        session_manager.start_pending("post_delete", target.id)
    if c2.button("Cancel", key="cancel_post_delete", disabled=busy):
        st.session_state.confirm_delete_post = None
        st.rerun()

    if busy:
        try:
            with st.spinner("Deleting..."):
                remaining, error = inbox_flow.delete_post(posts, target.id, auth.get_post_repo())
        finally:
            session_manager.take_pending("post_delete")
        st.session_state.posts_cache = remaining
        st.session_state.confirm_delete_post = None
        if error:
            session_manager.flash("error", error)
        else:
            session_manager.flash("success", f'Post "{target.title}" deleted.')
        st.rerun()


def render_posts(session):
    head, action = st.columns([4, 1])
    head.title("Blog Posts")
    head.caption("Create, edit, and manage all articles.")
    if action.button("➕ Create New Post", key="posts_new", type="primary", use_container_width=True):
        session_manager.navigate(session_manager.NEW_POST)

    try:
        posts = _load_posts()
    except StoreError as e:
        log.error(f"Error fetching posts: {e}")
        st.error(f"⚠️ {POSTS_LOAD_FAILED}")
        return

    ui.render_flash(session_manager.pop_flash())
    _render_delete_confirmation(posts)

    if not posts:
        st.info("No blog posts found. Time to write one!")
        return

    h1, h2, h3, h4 = st.columns([4, 1.2, 1.5, 1.3])
    h1.caption("TITLE")
    h2.caption("STATUS")
    h3.caption("CREATED")
    for post in posts:
        c1, c2, c3, c4 = st.columns([4, 1.2, 1.5, 1.3])
        c1.markdown(f"**{post.title}**  \n`/{post.slug}`")
        c2.markdown(ui.status_badge(post.is_published), unsafe_allow_html=True)
        c3.write(ui.format_date(post.created_at))
        e_col, d_col = c4.columns(2)
        if e_col.button("✏️", key=f"edit_{post.id}", help="Edit Post"):
            session_manager.navigate(session_manager.EDIT_POST, post_id=post.id)
        if d_col.button("🗑", key=f"delete_{post.id}", help="Delete Post"):
            st.session_state.confirm_delete_post = post.id
            st.rerun()
