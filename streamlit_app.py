"""
Brick Mosaic — interactive tuning

Run with:
    streamlit run streamlit_app.py
"""

from __future__ import annotations

import io
import time

import numpy as np
import streamlit as st
from PIL import Image

from brick_mosaic.catalog import CatalogError, NoEligibleSwatchError, parse_catalog
from brick_mosaic.config import SLIDER_MAX, MosaicConfig
from brick_mosaic.driver import prepare_array, render_mosaic
from brick_mosaic.export import build_lines, format_part_list

# -- Page config -------------------------------------------------------
st.set_page_config(
    page_title="Brick Mosaic",
    page_icon=None,
    layout="wide",
)

_DEFAULTS = MosaicConfig()

st.title("Brick Mosaic")
st.caption(
    "Every tile is four 1x1 tiles under a 2x2 round dish with a 1x1 round "
    "on top. Colours are matched in CIELAB against your catalog, only among "
    "the colours that exist for each shape, and the leftover error is "
    "spread to the neighbouring pieces."
)

# -- Inputs ------------------------------------------------------------
up1, up2 = st.columns(2)
with up1:
    catalog_file = st.file_uploader("Colour catalog", type=["csv", "txt"])
with up2:
    image_file = st.file_uploader(
        "Photo", type=["jpg", "jpeg", "png", "webp", "bmp"],
    )

# -- Controls: every change re-renders from the source ------------------
with st.sidebar:
    st.header("Tiling")
    tiles = st.slider("Tiles on long side", 2, 256, _DEFAULTS.tiles_long_side)
    layers = st.select_slider("Layers", options=[1, 2, 3], value=_DEFAULTS.layers)
    st.header("Sharpening")
    amount = st.slider("Amount", 0, SLIDER_MAX, _DEFAULTS.amount)
    sigma = st.slider("Sigma", 0, SLIDER_MAX, _DEFAULTS.sigma)
    threshold = st.slider("BG threshold", 0, SLIDER_MAX, _DEFAULTS.threshold)
    st.header("Matching")
    luminance = st.slider(
        "Luminance importance", 0, SLIDER_MAX, _DEFAULTS.luminance_factor,
    )
    show_mosaic = st.checkbox("Show mosaic", value=_DEFAULTS.show_mosaic)

if catalog_file is None or image_file is None:
    st.info("Upload a colour catalog and a photo to begin.")
    st.stop()

cfg = MosaicConfig(
    tiles_long_side=tiles,
    layers=layers,
    sigma=sigma,
    threshold=threshold,
    amount=amount,
    luminance_factor=luminance,
    show_mosaic=show_mosaic,
)

try:
    catalog = parse_catalog(io.StringIO(catalog_file.getvalue().decode("utf-8")))
    original = np.array(
        Image.open(io.BytesIO(image_file.getvalue())).convert("RGB"), dtype=np.uint8,
    )
    t0 = time.perf_counter()
    result = render_mosaic(prepare_array(original, cfg), catalog, cfg)
    elapsed = time.perf_counter() - t0
except NoEligibleSwatchError as exc:
    st.error(f"Catalog cannot build this mosaic: {exc}")
    st.stop()
except (CatalogError, ValueError, OSError) as exc:
    st.error(str(exc))
    st.stop()

# -- Result ------------------------------------------------------------
rendered = result.image_rgb
st.image(rendered, use_container_width=True)

buf = io.BytesIO()
Image.fromarray(rendered).save(buf, format="PNG")

if result.mosaic is None:
    st.download_button("Save image", buf.getvalue(), "mosaic.png", "image/png")
    st.stop()

rows, cols = result.mosaic.assignments.shape[:2]
m1, m2, m3, m4 = st.columns(4)
m1.metric("Tiles", f"{cols} × {rows}")
m2.metric("Parts", f"{result.mosaic.tile_count * 6:,}")
m3.metric("Colours used", sum(1 for c in result.part_counts.values() if any(c)))
m4.metric("Time", f"{elapsed:.1f} s")

d1, d2, d3 = st.columns(3)
with d1:
    st.download_button(
        "Save image", buf.getvalue(), "mosaic.png", "image/png",
        use_container_width=True,
    )
with d2:
    ldraw = "".join(
        line + "\n" for line in build_lines(result.mosaic.assignments, catalog)
    )
    st.download_button(
        "Save LDraw file", ldraw, "mosaic.ldr", "text/plain",
        use_container_width=True,
    )
with d3:
    st.download_button(
        "Save part list", format_part_list(result.part_counts), "mosaic.csv",
        "text/csv", use_container_width=True,
    )
