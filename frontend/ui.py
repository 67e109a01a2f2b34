"""
Streamlit frontend for MOC Finder.

Calls GET <MOC_FINDER_API_URL>?set_num=... on the local proxy and renders
the alternate builds for the entered LEGO set as cards.

Run with:
    streamlit run frontend/ui.py
"""

import sys
from pathlib import Path

import streamlit as st

# Ensure project root is on sys.path when launched via `streamlit run`
sys.path.insert(0, str(Path(__file__).parent.parent))

from frontend.search import IDLE, SearchResponse, SearchState, resolve, results_heading, start

st.set_page_config(page_title="MOC Finder", layout="centered")
st.title("MOC Finder")
st.caption("Find alternate builds for your LEGO sets")

if "search" not in st.session_state:
    st.session_state.search = IDLE


def _render_results(state: SearchState) -> None:
    response: SearchResponse = state.response
    st.subheader(f"Results for Set: {results_heading(state)}")
    st.markdown(f"Found {response.count} alternate build(s).")

    if response.count <= 0:
        return

    for moc in response.results:
        with st.container(border=True):
            if moc.moc_img_url:
                img_col, text_col = st.columns([1, 3])
                img_col.image(moc.moc_img_url)
            else:
                text_col = st.container()
            text_col.markdown(f"#### [{moc.name}]({moc.moc_url})")
            text_col.markdown(f"By: [{moc.designer_name}]({moc.designer_url})")
            text_col.caption(f"Parts: {moc.num_parts}")


set_num = st.text_input("Enter LEGO Set Number:", placeholder="e.g., 75192 or 10305")
submitted = st.button("Search", type="primary")

if submitted:
    # Drop the previous result and error before the new request runs
    st.session_state.search = start(set_num)
    if st.session_state.search.status == "loading":
        with st.spinner("Loading MOCs…"):
            st.session_state.search = resolve(st.session_state.search)

state: SearchState = st.session_state.search

if state.status == "error":
    st.error(f"Error: {state.error}")
elif state.status == "success":
    _render_results(state)
