# visualizer.py
# Renders board states to SVG for visual inspection of submissions.

from typing import List, NamedTuple, Optional

import core
from settings import RenderSettings

MARGIN = 5

class VisResult(NamedTuple):
    score: int
    error: str
    svg: str

def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")

def _rect(x: int, y: int, w: int, h: int, fill: str, extra: str = "") -> str:
    return f'<rect x="{x}" y="{y}" width="{w}" height="{h}" fill="{fill}"{extra}/>'

def render_svg(frame: core.RenderFrame, style: Optional[RenderSettings] = None) -> str:
    """
    Draws one render frame as an SVG document.

    Cells with an equal-valued neighbour use the matched colour, the others the
    unmatched colour. The last operation, if any, is outlined in black.
    Args:
        frame (core.RenderFrame): The board state to draw.
        style (RenderSettings): Colours and cell size. Defaults to RenderSettings().
    Returns:
        str: The SVG document text.
    """
    style = style or RenderSettings()
    d = style.cell_size
    width = height = d * frame.size

    lines: List[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" id="vis" '
        f'viewBox="{-MARGIN} {-MARGIN} {width + 2 * MARGIN} {height + 2 * MARGIN}" '
        f'width="{width + 2 * MARGIN}" height="{height + 2 * MARGIN}" '
        f'style="background-color:white">',
        "<style>text {text-anchor: middle;dominant-baseline: central;}</style>",
    ]

    for i in range(frame.size):
        for j in range(frame.size):
            value = frame.cells[i][j]
            fill = style.matched_color if frame.highlight[i][j] else style.unmatched_color
            lines.append("<g>")
            lines.append(f"<title>{_escape(f'b[{i},{j}] = {value}')}</title>")
            lines.append(_rect(j * d, i * d, d, d, fill))
            if frame.labels is not None:
                lines.append(
                    f'<text x="{j * d + d // 2}" y="{i * d + d // 2}" '
                    f'font-size="{d // 3}">{_escape(frame.labels[i][j])}</text>'
                )
            lines.append("</g>")

    if frame.last_op is not None:
        row, col, n = frame.last_op
        lines.append(_rect(col * d, row * d, n * d, n * d, "none",
                           f' stroke="black" stroke-width="{style.frame_stroke_width}"'))

    lines.append("</svg>")
    return "\n".join(lines)

def get_max_turn(input_text: str, output_text: str) -> int:
    """Number of operations in the submission, or 0 if it does not parse."""
    board = core.parse_board(input_text)
    try:
        return len(core.parse_operations(len(board), output_text))
    except core.ParseError:
        return 0

def vis(input_text: str, output_text: str, turn: int,
        style: Optional[RenderSettings] = None) -> VisResult:
    """
    Scores and draws the state after `turn` operations.

    A submission that does not parse is drawn as the initial board. A replay
    failure is drawn as the last state before the failing operation. Both zero
    the score and report the error message.
    Args:
        input_text (str): The generated board text.
        output_text (str): The submission text.
        turn (int): Turn to draw, clamped to [0, number of operations].
        style (RenderSettings): Appearance of the SVG.
    Returns:
        VisResult: Score of the drawn state, error message, SVG text.
    Raises:
        ParseError: If the board text itself is malformed.
    """
    style = style or RenderSettings()
    board = core.parse_board(input_text)
    try:
        ops = core.parse_operations(len(board), output_text)
    except core.ParseError as e:
        frame = core.build_frame(board, (), 0, style.show_numbers)
        return VisResult(0, str(e), render_svg(frame, style))

    turn = max(0, min(turn, len(ops)))
    try:
        frame = core.build_frame(board, ops, turn, style.show_numbers)
    except core.ReplayOutOfRange as e:
        frame = core.build_frame(board, ops, e.turn, style.show_numbers)
        return VisResult(0, str(e), render_svg(frame, style))

    return VisResult(core.count_adjacent_pairs(frame.cells), "", render_svg(frame, style))
