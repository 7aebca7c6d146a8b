"""
E-Shop Demo storefront.

Run locally:
  streamlit run storefront.py
"""

import logging

import streamlit as st

from cart import CartCounter, LocalStore
from catalog import CatalogLoader
from filters import PRICE_BRACKETS, category_options, filter_products, products_frame
from modal import CLOSE, OVERLAY, DetailModal
from settings import configure_logging, load_settings

st.set_page_config(page_title="E-Shop Demo", page_icon="🛍", layout="wide")

settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("storefront")

PRICE_LABELS = dict(PRICE_BRACKETS)


def new_loader(previous=None):
    loader = CatalogLoader(settings.products_url, timeout=settings.request_timeout)
    if previous is not None:
        loader.products = previous
    loader.start()
    return loader


def reload_products():
    old = st.session_state.loader
    old.close()
    logger.info("Reloading products, keeping %d until the fetch completes", len(old.products))
    st.session_state.loader = new_loader(old.products)


# =========================
# SESSION STATE
# =========================
if "loader" not in st.session_state:
    st.session_state.loader = new_loader()
if "cart" not in st.session_state:
    cart = CartCounter(LocalStore(settings.state_path))
    cart.load()
    st.session_state.cart = cart
if "modal" not in st.session_state:
    st.session_state.modal = DetailModal()

loader = st.session_state.loader
cart = st.session_state.cart
modal = st.session_state.modal


def close_details():
    modal.click(OVERLAY)


@st.dialog("Product details", width="large", on_dismiss=close_details)
def show_details(product):
    if product.get("image"):
        st.image(product["image"], width=240)
    st.subheader(product.get("title", ""))
    st.caption(product.get("category", ""))
    st.write(f"**${product.get('price', '')}**")
    st.write(product.get("description", ""))
    if st.button("Close", key="modal_close"):
        modal.click(CLOSE)
        st.rerun()


# =========================
# HEADER
# =========================
logo, task, cart_col = st.columns([2, 2, 1])
logo.markdown("### 🛍 E-Shop Demo")
task.markdown("Frontend Recruitment Task")
with cart_col:
    st.markdown(f"**🛒 Cart: {cart.count}**")
    st.button("Clear", key="cart_clear", on_click=cart.clear)

st.sidebar.title("Catalog")
st.sidebar.button("Reload products", on_click=reload_products)
layout = st.sidebar.radio("Layout", ["Grid", "Table"], horizontal=True)


@st.fragment(run_every=1.0)
def watch_catalog():
    if not st.session_state.loader.pending:
        st.rerun()
    st.caption("Loading products...")


if loader.pending:
    watch_catalog()
products = loader.products

# =========================
# FILTERS
# =========================
f1, f2, f3 = st.columns(3)
search = f1.text_input("Search", placeholder="Search by name...", key="search")
category = f2.selectbox("Category", category_options(products), key="category")
price = f3.selectbox(
    "Price",
    [value for value, _ in PRICE_BRACKETS],
    format_func=PRICE_LABELS.get,
    key="price",
)

filtered = filter_products(products, search, category, price)

# =========================
# PRODUCTS
# =========================
if not filtered:
    st.write("No products found.")
elif layout == "Table":
    st.dataframe(products_frame(filtered), hide_index=True)
else:
    cols = st.columns(3)
    for i, p in enumerate(filtered):
        pid = p.get("id", i)
        with cols[i % 3]:
            with st.container(border=True):
                if p.get("image"):
                    st.image(p["image"], width=160)
                st.markdown(f"**{p.get('title', '')}**")
                st.caption(p.get("category", ""))
                st.write(f"${p.get('price', '')}")
                st.write((p.get("description") or "")[:80] + "...")
                add, details = st.columns(2)
                add.button("Add to Cart", key=f"add_{pid}", on_click=cart.add)
                details.button("View Details", key=f"view_{pid}", on_click=modal.view, args=(p,))

if modal.is_open:
    show_details(modal.selected)

st.divider()
st.caption("© 2025 E-Shop Demo | Frontend Recruitment Task")
