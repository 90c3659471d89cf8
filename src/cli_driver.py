# cli_driver.py
# This file is intended to be run to generate cases, score or visualize submissions,
# or replay rotations interactively on the CLI.

import argparse
import logging
import os
import sys
from typing import List, Optional

from core import (
    Board,
    Operation,
    apply_operation,
    count_adjacent_pairs,
    fits_on_board,
    format_board,
    generate,
    parse_board,
    score_submission,
)
from settings import get_settings
import visualizer

logger = logging.getLogger(__name__)

def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()

def _write_text(path: str, text: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)

# --- Commands ---

def cmd_gen(seeds: List[int], out_dir: Optional[str]) -> int:
    gen_settings = get_settings().generator
    for seed in seeds:
        board = generate(seed, gen_settings.min_half_size, gen_settings.max_half_size)
        text = format_board(board)
        if out_dir is None:
            print(text, end="")
        else:
            path = os.path.join(out_dir, f"{seed:04d}.txt")
            _write_text(path, text)
            logger.info("seed %d -> %s (%dx%d)", seed, path, len(board), len(board))
    return 0

def cmd_score(input_path: str, output_path: str) -> int:
    result = score_submission(_read_text(input_path), _read_text(output_path))
    print(f"Score = {result.score}")
    if result.error:
        print(result.error, file=sys.stderr)
        return 1
    return 0

def cmd_vis(input_path: str, output_path: str, turn: Optional[int], svg_path: str) -> int:
    input_text = _read_text(input_path)
    output_text = _read_text(output_path)
    if turn is None:
        turn = visualizer.get_max_turn(input_text, output_text)
    result = visualizer.vis(input_text, output_text, turn, get_settings().render)
    _write_text(svg_path, result.svg)
    print(f"Score = {result.score}")
    logger.debug("wrote turn %d to %s", turn, svg_path)
    if result.error:
        print(result.error, file=sys.stderr)
        return 1
    return 0

def cmd_play(input_path: str) -> int:
    current_board = parse_board(_read_text(input_path))
    size = len(current_board)
    history: List[Operation] = []
    display_board_state(current_board, history)

    while True:
        move_input = input("Enter rotation as 'x y n' (Q to quit): ").strip()

        if move_input.upper() == 'Q':
            print("Quitting game.")
            break

        parts = move_input.split()
        if len(parts) != 3 or not all(p.isascii() and p.isdigit() for p in parts):
            print("Invalid input. Enter three non-negative integers.")
            continue

        op = Operation(*map(int, parts))
        if not fits_on_board(size, op):
            print(f"Out of range: the {op.size}x{op.size} square at ({op.row}, {op.col}) leaves the board.")
            continue

        current_board = apply_operation(current_board, op)
        history.append(op)
        display_board_state(current_board, history)

    print("\n--- Final Board State ---")
    display_board_state(current_board, history)
    print(f"{len(history)}")
    for op in history:
        print(f"{op.row} {op.col} {op.size}")
    return 0

# --- Display Function ---
def display_board_state(board: Board, history: List[Operation]):
    """Prints the board, turn and score to the console."""
    print(f"\nTurn: {len(history)}  Score: {count_adjacent_pairs(board)}")
    width = len(str(len(board) * len(board) // 2))
    for row in board:
        print(" ".join(str(v).rjust(width) for v in row))
    print("-" * (len(board) * (width + 1)))

def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pair-rotate",
        description="Generate, score and visualize pair-rotate puzzle cases.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    pg = sub.add_parser("gen", help="Generate boards from seeds.")
    pg.add_argument("seeds", type=int, nargs="+", help="One or more seeds.")
    pg.add_argument("-o", "--out-dir", default=None,
                    help="Write each board to OUT_DIR/<seed>.txt instead of stdout.")

    ps = sub.add_parser("score", help="Score a submission against a board.")
    ps.add_argument("input", help="Path to the board text.")
    ps.add_argument("output", help="Path to the submission text.")

    pv = sub.add_parser("vis", help="Render one turn of a submission to SVG.")
    pv.add_argument("input", help="Path to the board text.")
    pv.add_argument("output", help="Path to the submission text.")
    pv.add_argument("--turn", type=int, default=None, help="Turn to draw. Default: the last one.")
    pv.add_argument("-o", "--svg", default="vis.svg", help="Where to write the SVG. Default: vis.svg")

    pp = sub.add_parser("play", help="Apply rotations to a board interactively.")
    pp.add_argument("input", help="Path to the board text.")

    return p

def main(argv: Optional[List[str]] = None) -> int:
    args = build_argparser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.cmd == "gen":
            return cmd_gen(args.seeds, args.out_dir)
        if args.cmd == "score":
            return cmd_score(args.input, args.output)
        if args.cmd == "vis":
            return cmd_vis(args.input, args.output, args.turn, args.svg)
        return cmd_play(args.input)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"File error: {e}", file=sys.stderr)
        return 2

if __name__ == "__main__":
    raise SystemExit(main())
