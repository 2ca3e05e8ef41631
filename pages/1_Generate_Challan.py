import streamlit as st
import streamlit.components.v1 as components

import config
from domain.models import CHALLAN_TYPES
from element_component import get_order_store, set_flash, show_flash
from services.challan_service import ChallanSelection, generate_challan, render_challan_html
from services.doc_service import build_challan_docx

st.set_page_config(page_title="Generate Challan", page_icon="🧾")
st.title("🧾 Generate Challan")
st.caption("Select challan type and orders to include")

store = get_order_store()

# -----------------------------------------------------------------------------
# Session state defaults
# -----------------------------------------------------------------------------
if "challan_selection" not in st.session_state:
    st.session_state["challan_selection"] = ChallanSelection()
# bumped after each batch so the widgets start empty again
st.session_state.setdefault("challan_nonce", 0)
st.session_state.setdefault("challan_html", None)
st.session_state.setdefault("challan_docx", None)
st.session_state.setdefault("challan", None)
st.session_state.setdefault("challan_print_pending", False)

selection: ChallanSelection = st.session_state["challan_selection"]
nonce = st.session_state["challan_nonce"]

show_flash()

orders = store.list_orders()
order_labels = {o.id: f"{o.id} - {o.client}" for o in orders}

# -----------------------------------------------------------------------------
# 1) Challan type + orders
# -----------------------------------------------------------------------------
selection.challan_type = st.selectbox(
    "Challan type",
    options=list(CHALLAN_TYPES.keys()),
    format_func=lambda k: CHALLAN_TYPES[k],
    index=None,
    placeholder="Select challan type",
    key=f"challan_type_{nonce}",
) or ""

picked = st.multiselect(
    "Select Orders",
    options=list(order_labels.keys()),
    format_func=lambda oid: order_labels.get(oid, oid),
    placeholder="Select orders",
    key=f"challan_orders_{nonce}",
)

for order_id in list(selection.order_ids):
    if order_id not in picked:
        selection.remove_order(order_id)
for order_id in picked:
    selection.add_order(order_id)

# -----------------------------------------------------------------------------
# 2) Photos delivered per order
# -----------------------------------------------------------------------------
if selection.order_ids:
    st.markdown("**Selected Orders:**")
    for order_id in selection.order_ids:
        col_id, col_photos = st.columns([3, 1])
        col_id.write(order_labels.get(order_id, order_id))
        if selection.challan_type == "photos":
            count = col_photos.number_input(
                "No. of photos",
                min_value=0,
                step=1,
                value=selection.photos_delivered.get(order_id, 0),
                key=f"photos_{order_id}_{nonce}",
                label_visibility="collapsed",
            )
            selection.set_photos_delivered(order_id, count)

st.divider()

# -----------------------------------------------------------------------------
# 3) Generate & print
# -----------------------------------------------------------------------------
if st.button("🖨️ Generate and Print Challan", type="primary"):
    def _to_print_view(html: str) -> None:
        st.session_state["challan_html"] = html
        st.session_state["challan_print_pending"] = True

    ok, msg, challan = generate_challan(
        selection,
        orders,
        printer=_to_print_view,
        business_name=config.BUSINESS_NAME,
    )
    if ok:
        st.session_state["challan"] = challan
        st.session_state["challan_docx"] = build_challan_docx(challan)
        st.session_state["challan_nonce"] += 1
        set_flash(ok, msg)
        st.rerun()
    else:
        st.error(msg)

if st.session_state["challan"] is not None:
    challan = st.session_state["challan"]
    st.subheader("Print View")

    # print dialog only on the first render after generating
    if st.session_state["challan_print_pending"]:
        components.html(st.session_state["challan_html"], height=700, scrolling=True)
        st.session_state["challan_print_pending"] = False
    else:
        components.html(render_challan_html(challan, auto_print=False), height=700, scrolling=True)

    col_html, col_docx = st.columns(2)
    col_html.download_button(
        "Download HTML",
        data=render_challan_html(challan, auto_print=False).encode("utf-8"),
        file_name="challan.html",
        mime="text/html",
    )
    if st.session_state["challan_docx"]:
        col_docx.download_button(
            "Download DOCX",
            data=st.session_state["challan_docx"],
            file_name="challan.docx",
            mime="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        )
