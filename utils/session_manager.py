import logging

import streamlit as st

"""
SESSION STATE CONTRACT

This module owns the Streamlit session state of the dashboard.

Keys of st.session_state:

route: str
    current screen, one of ROUTES
    default: "overview"
    owner: session_manager

route_history: list[str]
    visited screens; replace-navigation overwrites the last entry
    default: ["overview"]
    owner: session_manager

route_params: dict
    parameters of the current screen (post_id for the editor)
    default: {}
    owner: session_manager

supabase_client: supabase.Client | None
    per-browser Supabase client, holds the auth session
    default: None
    owner: auth

pending_actions: dict[str, str]
    actions whose backend call is in flight; their controls render disabled
    default: {}
    owner: session_manager

flash: tuple[str, str] | None
    (level, text) shown once on the next run
    default: None
    owner: views

posts_cache: list[Post] | None
    posts shown in the listing, updated locally after deletes;
    reset by set_route when the listing is navigated to
    default: None
    owner: posts_view

messages_cache: list[Message] | None
    messages shown in the inbox, updated locally after deletes;
    reset by set_route when the inbox is navigated to
    default: None
    owner: messages_view

selected_message / confirm_delete_message / confirm_delete_post: id | None
    row opened in the detail panel / row awaiting delete confirmation
    default: None
    owner: messages_view, posts_view

editor_*: misc
    editor form values, slug latch and loaded post
    default: absent until the editor opens
    owner: post_editor_view
"""

log = logging.getLogger(__name__)

LOGIN = "login"
OVERVIEW = "overview"
POSTS = "posts"
NEW_POST = "new_post"
EDIT_POST = "edit_post"
MESSAGES = "messages"

ROUTES = (LOGIN, OVERVIEW, POSTS, NEW_POST, EDIT_POST, MESSAGES)

# Listings re-fetch whenever they are navigated to.
ROUTE_CACHES = {POSTS: "posts_cache", MESSAGES: "messages_cache"}


def init_session_state():
    if 'route' not in st.session_state:
        st.session_state.route = OVERVIEW
    if 'route_history' not in st.session_state:
        st.session_state.route_history = [st.session_state.route]
    if 'route_params' not in st.session_state:
        st.session_state.route_params = {}
    if 'supabase_client' not in st.session_state:
        st.session_state.supabase_client = None
    if 'pending_actions' not in st.session_state:
        st.session_state.pending_actions = {}
    if 'flash' not in st.session_state:
        st.session_state.flash = None
    if 'posts_cache' not in st.session_state:
        st.session_state.posts_cache = None
    if 'messages_cache' not in st.session_state:
        st.session_state.messages_cache = None
    if 'selected_message' not in st.session_state:
        st.session_state.selected_message = None
    if 'confirm_delete_message' not in st.session_state:
        st.session_state.confirm_delete_message = None
    if 'confirm_delete_post' not in st.session_state:
        st.session_state.confirm_delete_post = None


def current_route():
    return st.session_state.get("route", OVERVIEW)


def route_param(name, default=None):
    return st.session_state.get("route_params", {}).get(name, default)


def set_route(route, replace=False, **params):
    """Record a navigation without rerunning the script."""
    if route not in ROUTES:
        raise ValueError(f"Unknown route: {route}")
    history = list(st.session_state.get("route_history", []))
    if replace and history:
        history[-1] = route
    else:
        history.append(route)
    st.session_state.route_history = history
    st.session_state.route = route
    st.session_state.route_params = dict(params)
    if route in ROUTE_CACHES:
        st.session_state[ROUTE_CACHES[route]] = None
    log.debug(f"Route -> {route} (replace={replace})")


def navigate(route, replace=False, **params):
    set_route(route, replace=replace, **params)
    st.rerun()


def go_back(fallback=OVERVIEW):
    history = list(st.session_state.get("route_history", []))
    if len(history) > 1:
        history.pop()
        target = history[-1]
    else:
        target = fallback
    # Editor targets need params we no longer have.
    if target in (EDIT_POST, LOGIN):
        target = fallback
    st.session_state.route_history = history
    navigate(target, replace=True)


def is_pending(key):
    return key in st.session_state.get("pending_actions", {})


def start_pending(key, value="1"):
    """Mark an action in flight and rerun so its controls render disabled."""
    pending = dict(st.session_state.get("pending_actions", {}))
    pending[key] = value
    st.session_state.pending_actions = pending
    st.rerun()


def take_pending(key):
    pending = dict(st.session_state.get("pending_actions", {}))
    value = pending.pop(key, None)
    st.session_state.pending_actions = pending
    return value


def peek_pending(key):
    return st.session_state.get("pending_actions", {}).get(key)


def flash(level, text):
    st.session_state.flash = (level, text)


def pop_flash():
    value = st.session_state.get("flash")
    st.session_state.flash = None
    return value


def logout(guard):
    """Request sign-out; the guard's SIGNED_OUT notification performs the redirect."""
    try:
        guard.sign_out()
    except Exception as e:
        log.error(f"Sign-out failed: {e}", exc_info=True)
        st.error("Could not sign out. Please try again.")
        return
    if not guard.is_authenticated:
        st.rerun()
