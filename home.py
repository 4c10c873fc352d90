from __future__ import annotations

import streamlit as st

from core.config import get_settings
from core.db import get_storage
from core.services.auth import current_user, ensure_default_admin, login, logout
from core.services.demo_data import upsert_reference_data
from core.services.stock import mark_notification_read, unread_notifications
from core.store import DataStore

st.title("🛍️ Market Pro")
st.caption("Invoices, stock, prices and the daily sales ledger for a single shop.")

settings = get_settings()
storage = get_storage(settings.db_path)
ensure_default_admin(storage)
store = DataStore.load(storage)
upsert_reference_data(store)

with st.sidebar:
    st.subheader("Environment")
    st.write(f"**Data directory:** `{settings.data_dir}`")
    st.write(f"**Database:** `{settings.db_path.name}`")

user = current_user(storage)

if user is None:
    st.subheader("Log in")
    with st.form("login"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in", type="primary")
    if submitted:
        result = login(storage, username.strip(), password)
        if result.success:
            st.success(result.message)
            st.rerun()
        else:
            st.error(result.message)
    st.stop()

c1, c2 = st.columns([4, 1])
c1.write(f"Logged in as **{user.name or user.username}** ({user.role})")
if c2.button("Log out"):
    logout(storage)
    st.rerun()

st.divider()
unread = unread_notifications(store)
st.subheader(f"🔔 Notifications ({len(unread)} unread)")

if not store.notifications:
    st.caption("No notifications yet.")

for n in store.notifications[:50]:
    cols = st.columns([6, 1])
    marker = "" if n.read else "🔴 "
    cols[0].markdown(f"{marker}**{n.title}** · {n.message}  \n`{n.created_at}`")
    if not n.read and cols[1].button("Mark read", key=f"read_{n.id}"):
        mark_notification_read(store, n.id)
        st.rerun()
