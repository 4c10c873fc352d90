from __future__ import annotations

import streamlit as st

from core.logging import setup_logging

st.set_page_config(page_title="Market Pro", page_icon="🛍️", layout="wide")
setup_logging()

pages = [
    st.Page("home.py", title="Home", icon="🏠"),
    st.Page("pages/1_🧾_Daily_Sales.py", title="Daily Sales", icon="🧾"),
    st.Page("pages/2_📝_Create_Invoice.py", title="Create Invoice", icon="📝"),
    st.Page("pages/3_🚚_Pending_Orders.py", title="Pending Orders", icon="🚚"),
    st.Page("pages/4_📦_Inventory.py", title="Inventory", icon="📦"),
    st.Page("pages/5_🏷️_Prices.py", title="Prices", icon="🏷️"),
    st.Page("pages/6_📊_Sales_Record.py", title="Sales Record", icon="📊"),
    st.Page("pages/7_⚙️_Settings.py", title="Settings", icon="⚙️"),
]

st.navigation(pages).run()
