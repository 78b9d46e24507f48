import logging
import time

import streamlit as st

import auth
import ui
from infrastructure.repositories.supabase_table import StoreError
from use_cases import post_flow
from use_cases.post_form import EDITOR_FIELDS
from use_cases.post_lifecycle import SaveIntent, SlugLatch
from utils import session_manager

log = logging.getLogger(__name__)

NEW_POST_KEY = "__new__"
POST_LOAD_FAILED = "Could not fetch post data. It might not exist."


def _widget_key(name):
    return f"editor_{name}"


def _open_editor(post):
    """Reset editor state for one editing session (new post when post is None)."""
    values = post_flow.form_values_from_post(post) if post else post_flow.blank_form_values()
    for name, value in values.items():
        st.session_state[_widget_key(name)] = value
    st.session_state.editor_post = post
    st.session_state.editor_post_key = post.id if post else NEW_POST_KEY
    st.session_state.editor_latch = SlugLatch(slug=values["slug"])
    st.session_state.editor_errors = {}
    st.session_state.editor_feedback = None


def discard_editor():
    # Widget values are dropped by Streamlit once the editor is no longer rendered.
    for key in ("editor_post", "editor_post_key", "editor_latch", "editor_errors", "editor_feedback"):
        st.session_state.pop(key, None)


def _on_title_change():
    latch = st.session_state.editor_latch
    if latch.follows_title:
        st.session_state[_widget_key("slug")] = latch.on_title_change(st.session_state[_widget_key("title")])


def _on_slug_change():
    st.session_state.editor_latch.on_slug_edit(st.session_state[_widget_key("slug")])


def _current_values():
    return {name: st.session_state.get(_widget_key(name), "") for name in EDITOR_FIELDS}


def _ensure_loaded(post_id):
    target_key = post_id or NEW_POST_KEY
    if st.session_state.get("editor_post_key") == target_key:
        return True
    if post_id is None:
        _open_editor(None)
        return True
    try:
        with st.spinner("Loading Post Editor..."):
            post = auth.get_post_repo().get_post(post_id)
    except StoreError as e:
        log.error(f"Error fetching post {post_id}: {e}")
        return False
    _open_editor(post)
    return True


def _render_fields(errors):
    st.text_input(
        "Title",
        key=_widget_key("title"),
        placeholder="Your Amazing Post Title",
        on_change=_on_title_change,
    )
    ui.field_error(errors, "title")

    st.text_input(
        "URL Slug",
        key=_widget_key("slug"),
        placeholder="your-amazing-post-title",
        on_change=_on_slug_change,
    )
    ui.field_error(errors, "slug")

    write_tab, preview_tab = st.tabs(["Content (Markdown)", "Preview"])
    with write_tab:
        st.text_area("Content", key=_widget_key("content"), height=400, label_visibility="collapsed")
    with preview_tab:
        st.markdown(st.session_state.get(_widget_key("content")) or "_Nothing to preview yet._")
    ui.field_error(errors, "content")

    st.text_area(
        "Excerpt",
        key=_widget_key("excerpt"),
        height=90,
        placeholder="A short, catchy summary for post previews.",
    )

    with st.expander("Optional: Cover Image, Tags & SEO", expanded=bool(errors.get("cover_image_url"))):
        st.text_input("Cover Image URL", key=_widget_key("cover_image_url"), placeholder="https://example.com/image.jpg")
        ui.field_error(errors, "cover_image_url")
        st.text_input("Tags (comma-separated)", key=_widget_key("tags"), placeholder="e.g., Egyptology, Research, History")
        st.text_input("Meta Title (SEO)", key=_widget_key("meta_title"), placeholder="Custom title for search engines")
        st.text_area(
            "Meta Description (SEO)",
            key=_widget_key("meta_description"),
            height=70,
            placeholder="Custom description for search engines",
        )


def _render_actions(post, busy):
    if post is None:
        actions = [("💾 Save as Draft", SaveIntent.SAVE), ("📤 Publish Post", SaveIntent.PUBLISH)]
    elif post.is_published:
        actions = [("💾 Save Changes", SaveIntent.SAVE), ("📥 Unpublish", SaveIntent.UNPUBLISH)]
    else:
        actions = [("💾 Save Changes", SaveIntent.SAVE), ("📤 Publish Post", SaveIntent.PUBLISH)]

    columns = st.columns(len(actions) + 2)
    for col, (label, intent) in zip(columns, actions):
        primary = intent != SaveIntent.SAVE
        if col.button(label, key=f"editor_{intent.value}", type="primary" if primary else "secondary",
                      disabled=busy, use_container_width=True):
            session_manager.start_pending("post_save", intent.value)


def _run_pending_save(post, session):
    intent_value = session_manager.peek_pending("post_save")
    if intent_value is None:
        return
    try:
        with st.spinner("Saving..."):
            result = post_flow.submit_post(
                _current_values(),
                SaveIntent(intent_value),
                repo=auth.get_post_repo(),
                session=session,
                existing=post,
                author_name=auth.author_name_for(session),
            )
    finally:
        session_manager.take_pending("post_save")

    st.session_state.editor_errors = result.field_errors
    if result.ok:
        st.success(f"✅ {result.message}")
        time.sleep(auth.get_redirect_delay())
        discard_editor()
        session_manager.navigate(session_manager.POSTS)

    # Values stay in their widget keys so the user can retry.
    st.session_state.editor_feedback = result.message or None
    st.rerun()


def render_editor(session, post_id=None):
    is_new = post_id is None
    head, back = st.columns([4, 1])
    head.title("Create New Post" if is_new else "Edit Post")
    head.caption(
        "Fill out the details below to add a new article to your blog."
        if is_new else "Modify the details of your article below."
    )
    if back.button("← Back to Posts", key="editor_back", use_container_width=True):
        discard_editor()
        session_manager.navigate(session_manager.POSTS)

    if not _ensure_loaded(post_id):
        st.error(f"⚠️ {POST_LOAD_FAILED}")
        return

    post = st.session_state.editor_post
    errors = st.session_state.get("editor_errors") or {}
    busy = session_manager.is_pending("post_save")

    if post is not None:
        st.markdown(ui.status_badge(post.is_published), unsafe_allow_html=True)

    _render_fields(errors)

    if st.session_state.get("editor_feedback"):
        st.error(f"⚠️ {st.session_state.editor_feedback}")

    _render_actions(post, busy)
    _run_pending_save(post, session)
