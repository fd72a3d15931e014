#!/usr/bin/env python3
"""
Scrollable beeswarm timeline of earthquake aftershocks.

Reads a CSV with a `time` column ("10 Oct 2025 - 5:14 PM") and a `magnitude`
column, stacks the events along a vertical time axis (15px per minute) and
reveals them as the scroll position moves down the page.

Dependencies:
    pip install -e .

Run:
    streamlit run app.py
"""

from __future__ import annotations

import io
from typing import List, Optional

import streamlit as st
from loguru import logger

from aftershocks.config import CONFIG
from aftershocks.errors import EmptyDatasetError, MissingColumnError
from aftershocks.events import events_to_csv_bytes
from aftershocks.figure import (
    build_figure,
    furthest_scroll,
    page_height,
    show_scroll_hint,
    time_at_viewport_middle,
)
from aftershocks.ingest import events_template_csv_bytes, fetch_table, load_error_message
from aftershocks.log import setup_logging
from aftershocks.pipeline import TimelineModel, build_timeline


# -----------------------
# Data
# -----------------------

def load_records(source: str, uploaded: Optional[bytes] = None) -> Optional[List[dict]]:
    if uploaded is not None:
        buf = io.BytesIO(uploaded)
        buf.name = source
        return fetch_table(buf)
    return fetch_table(source)


@st.cache_data(show_spinner="Laying out aftershocks...")
def timeline_model(records: List[dict], viewport_width: int) -> TimelineModel:
    return build_timeline(records, viewport_width, CONFIG)


# -----------------------
# App
# -----------------------

def init_state():
    if "uploaded" not in st.session_state:
        st.session_state.uploaded = None      # (name, bytes) of the last loaded upload
    if "max_scroll" not in st.session_state:
        st.session_state.max_scroll = 0       # furthest scroll offset reached for this source
        st.session_state.source_key = None


def track_source(key):
    if st.session_state.source_key != key:
        st.session_state.source_key = key
        st.session_state.max_scroll = 0


def data_tab():
    upload = st.file_uploader("Upload data.csv", type=["csv", "tsv", "txt"])
    if st.button("Load uploaded data"):
        if upload is None:
            st.error("Please upload a CSV file first.")
        else:
            st.session_state.uploaded = (upload.name, upload.getvalue())
            st.success(f"Loaded {upload.name}.")

    if st.session_state.uploaded is not None and st.button("Use default data"):
        st.session_state.uploaded = None

    st.markdown("---")
    st.subheader("Templates")
    st.download_button(
            "Download data template.csv",
            events_template_csv_bytes(),
            "data_template.csv",
            )


def view_tab():
    render = CONFIG.render
    viewport_width = st.number_input(
            "Viewport width (px)",
            min_value=320,
            max_value=3840,
            value=render.default_viewport_width,
            step=10,
            help=f"Below {CONFIG.scale.mobile_breakpoint}px the narrow-screen layout is used.",
            )
    viewport_height = st.number_input(
            "Viewport height (px)",
            min_value=300,
            max_value=2400,
            value=render.default_viewport_height,
            step=10,
            )
    return int(viewport_width), int(viewport_height)


def main():
    st.set_page_config(page_title="Aftershock timeline", layout="wide")
    setup_logging(CONFIG.log_level)
    init_state()

    st.title("Aftershocks")

    # ---- SIDEBAR UI ----
    with st.sidebar:
        st.header("Controls")
        tab_data, tab_view = st.tabs(["Data", "View"])
        with tab_data:
            data_tab()
        with tab_view:
            viewport_width, viewport_height = view_tab()

    # ---- DATA ----
    if st.session_state.uploaded is not None:
        name, payload = st.session_state.uploaded
        records = load_records(name, payload)
        track_source(("upload", name, len(payload)))
    else:
        name = CONFIG.data_source
        records = load_records(name)
        track_source(("default", name))

    if records is None:
        st.error(load_error_message(name, uploaded=st.session_state.uploaded is not None))
        st.stop()

    try:
        model = timeline_model(records, viewport_width)
    except MissingColumnError as e:
        logger.error("Unusable table: {}", e)
        st.error(str(e))
        st.stop()
    except EmptyDatasetError:
        logger.warning("No events survived normalization ({} records)", len(records))
        st.warning("No data: none of the rows has a valid time and magnitude.")
        st.stop()

    # ---- SCROLL ----
    with st.sidebar:
        with tab_view:
            scroll_top = st.slider(
                    "Scroll position (px)",
                    min_value=0,
                    max_value=int(page_height(model)),
                    value=0,
                    step=15,
                    help="Events are revealed once they pass the middle of the viewport.",
                    )
            middle = time_at_viewport_middle(model, scroll_top, viewport_height)
            st.caption("Viewport middle: " + middle.strftime("%b %d, %I:%M %p"))
        with tab_data:
            st.subheader("Export")
            st.download_button(
                    "Download positioned events.csv",
                    events_to_csv_bytes(model.events, radius_fn=model.radius_scale),
                    "events_positioned.csv",
                    )

    # ---- MAIN AREA ----
    st.caption(model.subtitle)
    if show_scroll_hint(scroll_top, CONFIG.render):
        st.info("Scroll to reveal the aftershocks")

    # revealing is one-way: scrolling back up keeps what was already shown
    st.session_state.max_scroll = furthest_scroll(scroll_top, st.session_state.max_scroll)
    fig = build_figure(model, st.session_state.max_scroll, viewport_height, CONFIG.render)
    st.plotly_chart(fig, use_container_width=False, config={"displayModeBar": False})


if __name__ == "__main__":
    main()
