import streamlit as st

import auth
import ui
from use_cases import auth_flow
from utils import session_manager

DEFAULT_PUBLIC_SITE_URL = "https://www.joana-agostinho.com"


def _attempt_sign_in():
    email, password = st.session_state.pop("login_credentials", ("", ""))
    try:
        with st.spinner("Signing in..."):
            auth.sign_in(email, password)
    except auth.InvalidCredentialsError as e:
        session_manager.flash("error", str(e) or "Sign-in failed.")
        return False
    finally:
        session_manager.take_pending("login")
    return True


def render_auth_screen():
    session_manager.init_session_state()
    if auth_flow.redirect_if_signed_in():
        st.rerun()

    st.title("🔐 Dashboard Login")
    st.caption("Access your content management panel.")
    ui.render_flash(session_manager.pop_flash())

    busy = session_manager.is_pending("login")
    with st.form("login_form", clear_on_submit=False):
        email = st.text_input("Email address", key="login_email", placeholder="you@example.com")
        password = st.text_input("Password", type="password", key="login_password", placeholder="••••••••")
        submitted = st.form_submit_button(
            "Signing In..." if busy else "Sign In",
            type="primary",
            use_container_width=True,
            disabled=busy,
        )
        if submitted:
            if not email.strip() or not password:
                st.error("Enter your email address and password.")
            else:
                st.session_state.login_credentials = (email, password)
                session_manager.start_pending("login")

    if busy:
        if _attempt_sign_in():
            # Push, so the login screen stays in history for this action.
            session_manager.navigate(session_manager.OVERVIEW)
        st.rerun()

    public_site = auth.get_setting("PUBLIC_SITE_URL", DEFAULT_PUBLIC_SITE_URL)
    st.caption(f"This is a restricted area. Public site: [Go to Portfolio]({public_site})")
