import streamlit as st
import pandas as pd

import config
from data_integrator import get_client, SupabaseOrderCollection
from services.order_store import OrderStore

NEW_OPTION = "➕ Add New"


@st.cache_resource
def get_order_collection() -> SupabaseOrderCollection:
    return SupabaseOrderCollection(get_client(), config.SCHEMA, config.ORDERS_TABLE)


def get_order_store() -> OrderStore:
    """
    One OrderStore per browser session, loaded on first use.
    """
    if "order_store" not in st.session_state:
        store = OrderStore(get_order_collection(), default_product=config.DEFAULT_PRODUCT)
        ok, msg, _ = store.load()
        if not ok:
            st.error(f"Could not load orders: {msg}")
        st.session_state["order_store"] = store
    return st.session_state["order_store"]


def set_flash(ok: bool, msg: str) -> None:
    st.session_state["flash"] = (ok, msg)


def show_flash() -> None:
    flash = st.session_state.pop("flash", None)
    if not flash:
        return
    ok, msg = flash
    if ok:
        st.success(msg)
    else:
        st.error(msg)


def _pick_or_add(label, options, current, key):
    choices = list(options)
    if current and current not in choices:
        choices.append(current)
    choices.append(NEW_OPTION)

    index = choices.index(current) if current in choices else None
    picked = st.selectbox(label, choices, index=index, placeholder=f"Select {label.lower()}", key=key)
    if picked == NEW_OPTION:
        return st.text_input(f"New {label}", key=f"{key}_new").strip()
    return picked or ""


@st.dialog("Order")
def order_form_dialog(store: OrderStore, order_id=None):
    order = store.get_order(order_id) if order_id else None
    if order:
        st.caption("Edit the order details. Click save when you're done.")
    else:
        st.caption("Enter the details for the new order. Click save when you're done.")

    client = _pick_or_add("Client", store.known_clients(), order.client if order else "", "form_client")
    manufacturer = _pick_or_add(
        "Manufacturer", store.known_manufacturers(), order.manufacturer if order else "", "form_manufacturer"
    )
    quantity = st.number_input(
        "Quantity",
        min_value=0,
        step=1,
        value=order.quantity if order else 0,
        key="form_quantity",
    )

    if st.button("Save Changes" if order else "Save Order", type="primary"):
        with st.spinner("Please wait"):
            if order:
                ok, msg, _ = store.edit_order(
                    order.id,
                    {"client": client, "manufacturer": manufacturer, "quantity": quantity},
                )
            else:
                ok, msg, _ = store.create_order(client, manufacturer, quantity)

        if ok:
            set_flash(ok, msg)
            st.rerun()
        else:
            st.error(msg)


@st.dialog("Confirm")
def delete_confirmation_dialog(store: OrderStore, order_id: str):
    order = store.get_order(order_id)
    if order is None:
        st.info(f"Order {order_id} is no longer loaded.")
        return

    df = pd.DataFrame(
        [("Order ID", order.id), ("Client", order.client), ("Manufacturer", order.manufacturer),
         ("Status", order.status)],
        columns=["Key", "Value"],
    )
    st.dataframe(df, hide_index=True)
    st.write("Delete this order?")

    col_yes, col_no = st.columns(2)

    with col_yes:
        if st.button("Yes", type="primary", key="confirm_delete_yes"):
            ok, msg, _ = store.delete_order(order_id)
            if not ok:
                st.error(msg)
            else:
                set_flash(ok, msg)
                st.rerun()
    with col_no:
        if st.button("No"):
            st.rerun()
