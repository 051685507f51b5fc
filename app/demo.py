"""
Minesweeper Board Inference - Interactive Demo

Run with: streamlit run app/demo.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st
from typing import Dict, Optional, Tuple

from minehint import BoardAnalyzer, DisplayMode, Minesweeper, select_cells
from minehint.display import probability_color
from minehint.solver import AnalysisResult

NUMBER_COLORS = {
    "0": "#cccccc",
    "1": "#0000ff",
    "2": "#008000",
    "3": "#ff0000",
    "4": "#000080",
    "5": "#800000",
    "6": "#008080",
    "7": "#000000",
    "8": "#808080",
}

MODE_LABELS = {
    DisplayMode.MINES: "Proven mines (Alt+Shift+1)",
    DisplayMode.PROBABILITIES: "Probabilities (Alt+Shift+2)",
    DisplayMode.SAFE: "Proven safe (Alt+Shift+3)",
    DisplayMode.EFFICIENCY_MOVE: "Efficiency move (Alt+Shift+4)",
}


def render_board_html(
    game: Minesweeper,
    overlay: Dict[Tuple[int, int], Tuple[str, str]],
    show_mines: bool = False,
) -> str:
    """Render the visible board as HTML with the analysis overlay applied."""
    # Scale cell size based on board width
    if game.width >= 30:
        cell_size = 22
        font_size = "9px"
    elif game.width >= 16:
        cell_size = 28
        font_size = "11px"
    else:
        cell_size = 34
        font_size = "13px"

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for r in range(game.height):
        html += "<tr>"
        for c in range(game.width):
            text_color = "#000000"
            if (r, c) in game.revealed:
                value = str(game.numbers[(r, c)])
                display = value if value != "0" else " "
                bg = "#f0f0f0" if value == "0" else "#ffffff"
                text_color = NUMBER_COLORS.get(value, "#000000")
            elif (r, c) in game.flagged:
                display = "F"
                bg = "#ffa500"
                text_color = "#ffffff"
            elif show_mines and game.is_mine(r, c):
                display = "M"
                bg = "#ffcccc"
                text_color = "#ff0000"
            else:
                display = ""
                bg = "#c0c0c0"

            if (r, c) in overlay and (r, c) not in game.revealed:
                bg, display = overlay[(r, c)]
                text_color = "#000000"

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


def build_overlay(
    result: Optional[AnalysisResult], mode: DisplayMode, efficiency_mode: bool
) -> Dict[Tuple[int, int], Tuple[str, str]]:
    """Map (row, col) -> (css color, label) for the selected result set."""
    if result is None:
        return {}

    overlay: Dict[Tuple[int, int], Tuple[str, str]] = {}
    for cell, probability, label in select_cells(result, mode, efficiency_mode):
        if mode is DisplayMode.MINES:
            color = "rgba(255, 0, 0, 0.65)"
        elif mode is DisplayMode.SAFE or (
            mode is DisplayMode.EFFICIENCY_MOVE and cell in result.known_safe
        ):
            color = "rgba(0, 200, 0, 0.55)"
        elif mode is DisplayMode.EFFICIENCY_MOVE:
            color = "rgba(0, 120, 255, 0.6)"
        else:
            red, green, blue, alpha = probability_color(probability)
            color = f"rgba({red}, {green}, {blue}, {alpha})"
        overlay[cell.coord] = (color, label)
    return overlay


def new_game(height: int, width: int, mines: int, algorithm: str) -> None:
    st.session_state.game = Minesweeper(
        height, width, mines, mines_generation_algorithm=algorithm
    )
    st.session_state.game.reveal(height // 2, width // 2)
    st.session_state.status = 0


def main():
    st.set_page_config(
        page_title="Minesweeper Board Inference",
        page_icon="💣",
        layout="wide",
    )

    st.title("Minesweeper Board Inference")
    st.markdown("""
    Proven mines, proven safe cells and mine probabilities for the visible board.
    """)

    # Sidebar configuration
    st.sidebar.header("Game Configuration")

    preset = st.sidebar.selectbox(
        "Difficulty Preset",
        ["Beginner (9x9, 10)", "Intermediate (16x16, 40)", "Expert (16x30, 99)", "Custom"],
    )

    if preset == "Beginner (9x9, 10)":
        height, width, mines = 9, 9, 10
    elif preset == "Intermediate (16x16, 40)":
        height, width, mines = 16, 16, 40
    elif preset == "Expert (16x30, 99)":
        height, width, mines = 16, 30, 99
    else:
        width = st.sidebar.slider("Width", 5, 30, 16)
        height = st.sidebar.slider("Height", 5, 30, 16)
        max_mines = width * height - 9
        mines = st.sidebar.slider("Mines", 1, max_mines, min(40, max_mines))

    algorithm = st.sidebar.selectbox(
        "Mine Generation",
        ["safe_neighborhood_rule", "safe_first_action_rule"],
        help="safe_neighborhood_rule: First click + neighbors are safe. "
             "safe_first_action_rule: Only first click is safe.",
    )

    st.sidebar.header("Analysis")
    mode = st.sidebar.radio(
        "Show",
        list(MODE_LABELS),
        index=1,
        format_func=lambda m: MODE_LABELS[m],
    )
    efficiency_mode = st.sidebar.checkbox(
        "Efficiency mode",
        value=False,
        help="In probability view, only show entries at or below 10% or at or above 90%.",
    )
    enumeration_limit = st.sidebar.slider(
        "Enumeration limit",
        0,
        20,
        15,
        help="Largest component solved exactly; larger ones use constraint density averaging.",
    )
    use_meta = st.sidebar.checkbox(
        "Use total mine count",
        value=True,
        help="Spread the remaining mine budget over cells no number touches.",
    )

    # Initialize / regenerate on settings change
    current_settings = (height, width, mines, algorithm)
    if st.session_state.get("prev_settings") != current_settings:
        new_game(height, width, mines, algorithm)
        st.session_state.prev_settings = current_settings

    game: Minesweeper = st.session_state.game
    analyzer = BoardAnalyzer(enumeration_limit=enumeration_limit, record_steps=True)
    result = analyzer.analyze(game.snapshot(), meta=game.meta if use_meta else None)

    col1, col2 = st.columns([3, 1])

    with col1:
        st.subheader("Game Board")

        btn_col1, btn_col2, btn_col3, btn_col4 = st.columns(4)
        with btn_col1:
            if st.button("New Board", type="primary"):
                new_game(height, width, mines, algorithm)
                st.rerun()
        with btn_col2:
            if st.button("Open Safe Cells", disabled=result is None or not result.known_safe):
                for cell in result.known_safe:
                    status, _ = game.reveal(cell.row, cell.col)
                    if status != 0:
                        st.session_state.status = status
                        break
                st.rerun()
        with btn_col3:
            if st.button("Flag Mines", disabled=result is None or not result.known_mines):
                for cell in result.known_mines:
                    if cell.coord not in game.flagged:
                        game.flag(cell.row, cell.col)
                st.rerun()
        with btn_col4:
            if st.button("Guess Safest", disabled=result is None or not result.safest_cells()):
                cell, _ = result.safest_cells()[0]
                st.session_state.status, _ = game.reveal(cell.row, cell.col)
                st.rerun()

        finished = st.session_state.status != 0
        overlay = {} if finished else build_overlay(result, mode, efficiency_mode)
        st.markdown(
            render_board_html(game, overlay, show_mines=finished),
            unsafe_allow_html=True,
        )

        if st.session_state.status == 1:
            st.success("Solved! All safe cells revealed.")
        elif st.session_state.status == -1:
            st.error("Game Over! Hit a mine.")

    with col2:
        st.subheader("Analysis Statistics")

        if result is None:
            st.info("Nothing to analyze.")
        else:
            st.metric("Proven mines", len(result.known_mines))
            st.metric("Proven safe", len(result.known_safe))
            safest = result.safest_cells()
            if safest:
                st.metric("Lowest risk", f"{safest[0][1] * 100:.1f}%")

            st.markdown("---")
            st.markdown("**Counters**")
            for key, value in result.stats.as_dict().items():
                if isinstance(value, float):
                    value = f"{value:.4f}"
                st.text(f"{key}: {value}")

            st.markdown("---")
            st.markdown("**Pipeline stages**")
            for step in result.steps:
                st.text(
                    f"{step['step_number']}. {step['stage']}: "
                    f"{len(step['known_mines'])} mines, {len(step['known_safe'])} safe"
                )


if __name__ == "__main__":
    main()
