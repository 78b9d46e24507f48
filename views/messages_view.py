import logging

import streamlit as st

import auth
import ui
from infrastructure.repositories.supabase_table import StoreError
from use_cases import inbox_flow
from utils import session_manager

log = logging.getLogger(__name__)

MESSAGES_LOAD_FAILED = "Could not fetch messages. Please check your connection and RLS policies."


def _load_messages():
    if st.session_state.messages_cache is None:
        with st.spinner("Loading Messages..."):
            st.session_state.messages_cache = auth.get_message_repo().list_messages()
    return st.session_state.messages_cache


def _render_detail(messages):
    selected = next((m for m in messages if m.id == st.session_state.selected_message), None)
    if selected is None:
        return
    with st.container(border=True):
        top, close = st.columns([10, 1])
        top.subheader(selected.subject_label)
        if close.button("✖", key="close_message", help="Close"):
            st.session_state.selected_message = None
            st.rerun()
        st.markdown(f"From: **{selected.name}** ({selected.email})")
        st.caption(f"Received: {ui.format_datetime(selected.created_at)}")
        st.divider()
        st.text(selected.message)


def _run_pending_delete(messages):
    message_id = session_manager.peek_pending("message_delete")
    if message_id is None:
        return
    try:
        with st.spinner("Deleting..."):
            remaining, error = inbox_flow.delete_message(messages, message_id, auth.get_message_repo())
    finally:
        session_manager.take_pending("message_delete")
    st.session_state.messages_cache = remaining
    st.session_state.confirm_delete_message = None
    if st.session_state.selected_message == message_id and not error:
        st.session_state.selected_message = None
    if error:
        session_manager.flash("error", error)
    st.rerun()


def render_messages(session):
    st.title("Contact Messages")
    st.caption("Review and manage submissions from your public website.")

    try:
        messages = _load_messages()
    except StoreError as e:
        log.error(f"Error fetching messages: {e}")
        st.error(f"⚠️ {MESSAGES_LOAD_FAILED}")
        return

    ui.render_flash(session_manager.pop_flash())
    _render_detail(messages)

    if not messages:
        st.info("You have no messages yet.")
        return

    busy = session_manager.is_pending("message_delete")
    h1, h2, h3, _ = st.columns([3, 3, 2, 1.4])
    h1.caption("FROM")
    h2.caption("SUBJECT")
    h3.caption("RECEIVED")
    for message in messages:
        c1, c2, c3, c4 = st.columns([3, 3, 2, 1.4])
        c1.markdown(f"**{message.name}**  \n{message.email}")
        c2.write(message.subject or "_No Subject_")
        c3.write(ui.time_ago(message.created_at))
        open_col, del_col = c4.columns(2)
        if open_col.button("👁", key=f"open_{message.id}", help="Open Message"):
            st.session_state.selected_message = message.id
            st.rerun()
        if del_col.button("🗑", key=f"delete_msg_{message.id}", help="Delete Message", disabled=busy):
            st.session_state.confirm_delete_message = message.id
            st.rerun()

        if st.session_state.confirm_delete_message == message.id:
            st.warning("Are you sure you want to delete this message? This action cannot be undone.")
            y, n, _ = st.columns([1, 1, 4])
            if y.button("Yes, delete", key=f"confirm_msg_{message.id}", type="primary", disabled=busy):
                session_manager.start_pending("message_delete", message.id)
            if n.button("Cancel", key=f"cancel_msg_{message.id}", disabled=busy):
                st.session_state.confirm_delete_message = None
                st.rerun()

    _run_pending_delete(messages)
