import pandas as pd
import pendulum
import streamlit as st

ACCENT = "#bfa76f"


def setup_style():
    st.markdown(f"""
    <style>
        :root {{
            --accent: {ACCENT};
            --panel-bg: #161616;
            --text-soft: rgba(234, 234, 234, 0.7);
        }}

        h1, h2, h3 {{
            font-family: Georgia, 'Times New Roman', serif;
            color: var(--accent);
            letter-spacing: -0.02em;
        }}

        .cms-stat-card {{
            background: var(--panel-bg);
            border-radius: 12px;
            padding: 1.2rem 1.4rem;
            box-shadow: 0 8px 24px rgba(0, 0, 0, 0.35);
        }}
        .cms-stat-title {{ font-size: 0.85rem; color: var(--text-soft); }}
        .cms-stat-value {{ font-size: 1.8rem; font-weight: 700; }}

        .cms-badge {{
            padding: 0.1rem 0.6rem;
            border-radius: 999px;
            font-size: 0.75rem;
            font-weight: 600;
        }}
        .cms-badge-published {{ background: rgba(74, 222, 128, 0.12); color: #86efac; }}
        .cms-badge-draft {{ background: rgba(250, 204, 21, 0.12); color: #fde047; }}

        .cms-field-error {{ color: #fca5a5; font-size: 0.8rem; margin-top: -0.6rem; }}
    </style>
    """, unsafe_allow_html=True)


def render_stat_card(container, icon, title, value):
    container.markdown(
        f"""
        <div class="cms-stat-card">
          <div class="cms-stat-title">{icon} {title}</div>
          <div class="cms-stat-value">{value}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def status_badge(is_published):
    if is_published:
        return '<span class="cms-badge cms-badge-published">Published</span>'
    return '<span class="cms-badge cms-badge-draft">Draft</span>'


def field_error(errors, name):
    """Render the validation message of one form field, if any."""
    message = (errors or {}).get(name)
    if message:
        st.markdown(f'<p class="cms-field-error">{message}</p>', unsafe_allow_html=True)


def _to_timestamp(value):
    if not value:
        return None
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    return None if pd.isna(ts) else ts


def format_date(value, fmt="%d %b, %Y"):
    ts = _to_timestamp(value)
    return ts.strftime(fmt) if ts is not None else "—"


def format_datetime(value):
    return format_date(value, "%d %b %Y, %H:%M")


def _to_pendulum(value):
    if isinstance(value, str):
        return pendulum.parse(value)
    if value.tzinfo is None:
        return pendulum.instance(value, tz="UTC")
    return pendulum.instance(value)


def time_ago(value, now=None):
    """Relative received time, e.g. '3 hours ago'."""
    if not value:
        return "—"
    try:
        received = _to_pendulum(value)
    except ValueError:
        return "—"
    now = _to_pendulum(now) if now is not None else pendulum.now("UTC")
    # Clock skew must not produce "in the future" wording.
    received = min(received, now)
    return f"{received.diff_for_humans(now, absolute=True)} ago"


def render_flash(flash):
    if not flash:
        return
    level, text = flash
    if level == "success":
        st.success(text)
    elif level == "error":
        st.error(text)
    else:
        st.info(text)
