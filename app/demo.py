"""
Minesweeper 50/50 Detector - Interactive Demo

Run with: streamlit run app/demo.py
"""

import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import matplotlib.pyplot as plt
import streamlit as st
from typing import Dict, Sequence

from minesweeper_5050 import (
    BoardSnapshot,
    DetectorConfig,
    FormatError,
    PatternDetector,
    plot_probability_map,
    summarize_detection,
)
from minesweeper_5050.detector import CellGroup
from minesweeper_5050.utils import reject_duplicate_keys

EXAMPLE_MAP = {
    "0,0": 0.5, "0,1": 0.5, "0,2": 0.0, "0,3": 0.0,
    "1,0": 1.0, "1,1": 0.2, "1,2": 0.3333333, "1,3": 0.3333333,
    "2,0": 0.0, "2,1": 0.7, "2,2": 0.3333333, "2,3": 0.9,
    "3,0": 0.5, "3,1": 0.0, "3,2": 0.6, "3,3": 0.5,
}

GROUP_COLORS = ["#ffa500", "#00bcd4", "#8bc34a", "#e91e63", "#9c27b0", "#ffeb3b"]


def render_snapshot_html(
    snapshot: BoardSnapshot,
    groups: Sequence[CellGroup],
    epsilon: float,
) -> str:
    """Render the snapshot as an HTML table with groups highlighted."""
    # Scale cell size based on board width
    if snapshot.cols >= 30:
        cell_size = 22
        font_size = "9px"
    elif snapshot.cols >= 16:
        cell_size = 28
        font_size = "11px"
    else:
        cell_size = 40
        font_size = "14px"

    group_of: Dict[tuple, int] = {}
    for i, group in enumerate(groups):
        for cell in group:
            group_of[cell] = i

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for row in range(snapshot.rows):
        html += "<tr>"
        for col in range(snapshot.cols):
            p = snapshot.probability_of((row, col))

            if p is None:
                display = " "
                bg = "#f0f0f0"
                text_color = "#666666"
            elif (row, col) in group_of:
                display = "50/50" if len(groups[group_of[(row, col)]]) == 2 else f"{p:.2f}"
                bg = GROUP_COLORS[group_of[(row, col)] % len(GROUP_COLORS)]
                text_color = "#ffffff"
            elif p >= 1.0 - epsilon:
                display = "M"
                bg = "#ffcccc"
                text_color = "#ff0000"
            elif p <= epsilon:
                display = "S"
                bg = "#ccffcc"
                text_color = "#008000"
            else:
                display = f"{p:.2f}"
                bg = "#c0c0c0"
                text_color = "#333333"

            html += f'''<td style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: 1px solid #999;
                color: {text_color};
                font-weight: bold;
                font-size: {font_size};
            ">{display}</td>'''
        html += "</tr>"

    html += "</table></div>"
    return html


def main():
    st.set_page_config(
        page_title="Minesweeper 50/50 Detector",
        page_icon="💣",
        layout="wide",
    )

    st.title("Minesweeper 50/50 Detector")
    st.markdown("""
    Paste a map of mine probabilities (`"row,col": probability`) produced by a solver
    to find forced guesses.
    """)

    # Sidebar configuration
    st.sidebar.header("Detector Configuration")

    epsilon = st.sidebar.select_slider(
        "Tolerance (epsilon)",
        options=[1e-6, 1e-5, 1e-4, 1e-3],
        value=1e-6,
        format_func=lambda v: f"{v:.0e}",
    )
    max_group_size = st.sidebar.slider(
        "Max group size",
        2,
        8,
        8,
        help="2 reports only 50/50 pairs; larger values also report N cells at 1/N.",
    )

    raw_text = st.text_area(
        "Probability map (JSON)",
        value=json.dumps(EXAMPLE_MAP, indent=1),
        height=300,
    )

    try:
        raw = json.loads(raw_text, object_pairs_hook=reject_duplicate_keys)
    except FormatError as exc:
        st.error(f"{exc.kind.value}: {exc.message}")
        return
    except json.JSONDecodeError as exc:
        st.error(f"Invalid JSON: {exc}")
        return
    if not isinstance(raw, dict):
        st.error("The probability map must be a JSON object.")
        return

    try:
        config = DetectorConfig(epsilon=epsilon, max_group_size=max_group_size)
    except ValueError as exc:
        st.error(str(exc))
        return

    try:
        snapshot = BoardSnapshot.build(raw)
    except FormatError as exc:
        st.error(f"{exc.kind.value}: {exc.message}")
        return

    report = PatternDetector(config).report(snapshot)

    try:
        snapshot.check_grid_size()
    except ValueError as exc:
        st.warning(f"Not rendering the board: {exc}")
    else:
        col1, col2 = st.columns(2)
        with col1:
            st.subheader("Board")
            st.markdown(
                render_snapshot_html(snapshot, report.groups, config.epsilon),
                unsafe_allow_html=True,
            )
        with col2:
            st.subheader("Heatmap")
            fig, ax = plt.subplots()
            plot_probability_map(snapshot, report.groups, ax=ax)
            st.pyplot(fig)

    st.subheader("Summary")
    st.json(summarize_detection(report))

    st.subheader("Detected groups")
    if report.groups:
        st.json(report.to_list())
    else:
        st.info("No forced 50/50 situations detected.")


if __name__ == "__main__":
    main()
