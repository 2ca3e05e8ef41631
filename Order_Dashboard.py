import logging

import streamlit as st
import pandas as pd

import config
from domain.models import ORDER_STATUSES
from element_component import (
    get_order_store,
    order_form_dialog,
    delete_confirmation_dialog,
    set_flash,
    show_flash,
)
from services.order_store import search_orders, summarize_orders
from utils.formatting import format_order_date, format_timeline_timestamp

logging.basicConfig(level=config.LOG_LEVEL)

st.set_page_config(page_title="Order Dashboard", page_icon="🖨️", layout="wide")

store = get_order_store()

# -----------------------------------------------------------------------------
# Header
# -----------------------------------------------------------------------------
col_title, col_actions = st.columns([4, 1])
with col_title:
    st.title(config.BUSINESS_NAME)
with col_actions:
    if st.button("➕ Add New Order", type="primary"):
        order_form_dialog(store)
    if st.button("🔄 Reload"):
        ok, msg, _ = store.reload()
        set_flash(ok, msg)
        st.rerun()

show_flash()

# -----------------------------------------------------------------------------
# Summary cards
# -----------------------------------------------------------------------------
orders = store.list_orders()
summary = summarize_orders(orders)

col_total, col_active, col_status = st.columns(3)
col_total.metric("Total Orders", summary.total)
col_active.metric("Active Orders", summary.active)
with col_status:
    st.markdown("**Order Status**")
    for status, count in summary.status_counts.items():
        st.markdown(f"{status}: **{count}**")

st.divider()

# -----------------------------------------------------------------------------
# Order list
# -----------------------------------------------------------------------------
col_heading, col_search = st.columns([3, 1])
col_heading.subheader("Order List")
search_term = col_search.text_input("Search orders...", label_visibility="collapsed",
                                    placeholder="Search orders...")

filtered = search_orders(orders, search_term)

if not filtered:
    st.info("No orders found.")

previous_date = None
for order in filtered:
    if order.date != previous_date:
        st.divider()
        previous_date = order.date

    with st.container(border=True):
        col_head, col_menu = st.columns([5, 1])
        with col_head:
            title = f"{order.id} - {order.client}"
            st.markdown(f"#### ~~{title}~~" if order.is_delivered else f"#### {title}")
            st.caption(format_order_date(order.date))
        with col_menu:
            if st.button("✏️ Edit", key=f"edit_{order.id}"):
                order_form_dialog(store, order.id)
            if st.button("🗑️ Delete", key=f"delete_{order.id}"):
                delete_confirmation_dialog(store, order.id)

        c1, c2, c3, c4 = st.columns(4)
        c1.markdown(f"**Manufacturer:**  \n{order.manufacturer}")
        c2.markdown(f"**Product:**  \n{order.product}")
        c3.markdown(f"**Quantity:**  \n{order.quantity}")
        c4.markdown(f"**Status:**  \n{order.status}")

        # timeline strip, latest entry marked green
        steps = st.columns(max(len(order.timeline), 1))
        for i, (col, entry) in enumerate(zip(steps, order.timeline)):
            dot = "🟢" if i == len(order.timeline) - 1 else "⚪"
            col.caption(f"{dot} {entry.status}  \n{format_timeline_timestamp(entry.timestamp)}")

        col_adv, col_undo, col_jump = st.columns([1, 1, 2])
        with col_adv:
            if st.button("Update Status", key=f"advance_{order.id}", disabled=not order.can_advance):
                ok, msg, _ = store.advance_status(order.id)
                set_flash(ok, msg)
                st.rerun()
        with col_undo:
            if st.button("↩️ Undo", key=f"undo_{order.id}", disabled=not order.can_revert):
                ok, msg, _ = store.revert_status(order.id)
                set_flash(ok, msg)
                st.rerun()
        with col_jump:
            with st.popover("Set Status"):
                target = st.selectbox(
                    "Status",
                    ORDER_STATUSES,
                    index=max(order.stage_index, 0),
                    key=f"jump_status_{order.id}",
                )
                if st.button("Apply", key=f"jump_apply_{order.id}"):
                    ok, msg, _ = store.update_status(order.id, target)
                    set_flash(ok, msg)
                    st.rerun()

# -----------------------------------------------------------------------------
# Export
# -----------------------------------------------------------------------------
if filtered:
    df_orders = pd.DataFrame(
        [
            {
                "Order ID": o.id,
                "Date": o.date,
                "Client": o.client,
                "Manufacturer": o.manufacturer,
                "Product": o.product,
                "Quantity": o.quantity,
                "Status": o.status,
            }
            for o in filtered
        ]
    )
    csv = df_orders.to_csv(index=False).encode("utf-8")
    st.download_button(
        "Download as CSV",
        data=csv,
        file_name="orders.csv",
        mime="text/csv",
    )
