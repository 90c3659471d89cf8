# core.py
# This file is intended to be the stateless core logic for the pair-rotate puzzle:
# board generation, submission parsing, rotation replay and scoring.

import random
from typing import List, NamedTuple, Optional, Sequence, Tuple

Board = List[List[int]]

# Upper bound (exclusive) on the declared operation count.
MAX_OPERATIONS = 998244353

DEFAULT_MIN_HALF_SIZE = 2
DEFAULT_MAX_HALF_SIZE = 11

class Operation(NamedTuple):
    """Rotate the size x size sub-square whose top-left cell is (row, col)."""
    row: int
    col: int
    size: int

class ScoreResult(NamedTuple):
    """Score of a submission. A non-empty error always comes with a score of 0."""
    score: int
    error: str = ""

class RenderFrame(NamedTuple):
    """Everything a renderer needs to draw one board state."""
    size: int
    cells: Board
    highlight: List[List[bool]]
    last_op: Optional[Operation]
    labels: Optional[List[List[str]]]

# --- Errors ---

class ParseError(ValueError):
    """Base class for submission and board text that cannot be accepted."""

class MalformedInput(ParseError):
    """The token stream does not match the expected grammar."""

class OutOfRange(ParseError):
    """A coordinate or size falls outside the board's valid bounds."""
    def __init__(self, value: int):
        super().__init__(f"Out of range: {value}")
        self.value = value

class TrailingTokens(ParseError):
    """Extra tokens after the declared operations."""
    def __init__(self):
        super().__init__("Too many outputs")

class ReplayOutOfRange(ValueError):
    """An operation's sub-square extends past the board during replay."""
    def __init__(self, turn: int, operation: Operation):
        super().__init__("Out of range")
        self.turn = turn
        self.operation = operation

# --- Board Helper Functions ---

def get_board_size(board: Board) -> int:
    """
    Gets the size (N) of an N x N board.
    Args:
        board (Board): The game board.
    Returns:
        int: The dimension of the board.
    Raises:
        ValueError: If the board is not square or empty.
    """
    if not board or not all(len(row) == len(board) for row in board):
        raise ValueError("Board must be a non-empty square matrix.")
    return len(board)

def copy_board(board: Board) -> Board:
    return [list(row) for row in board]

def transpose_board(board: Board) -> Board:
    """
    Transposes a given board (swaps rows and columns).
    Args:
        board (Board): The board to transpose.
    Returns:
        Board: A new transposed board.
    """
    n = len(board)
    new_board = [[0] * n for _ in range(n)]
    for r in range(n):
        for c in range(n):
            new_board[c][r] = board[r][c]
    return new_board

def reverse_rows(board: Board) -> Board:
    """
    Reverses each row in a given board.
    Args:
        board (Board): The board whose rows are to be reversed.
    Returns:
        Board: A new board with rows reversed.
    """
    new_board = []
    for row in board:
        new_board.append(row[::-1])
    return new_board

# --- Board Generation ---

def generate(seed: int,
             min_half_size: int = DEFAULT_MIN_HALF_SIZE,
             max_half_size: int = DEFAULT_MAX_HALF_SIZE) -> Board:
    """
    Generates a random board from a seed.

    The side length is twice a number drawn from [min_half_size, max_half_size],
    so it is always even and every value in [0, size*size/2) can be placed
    exactly twice. Cells are filled row-major by drawing, without replacement,
    from the pool of paired values.
    Args:
        seed (int): Seed for the Mersenne Twister stream. Same seed, same board.
        min_half_size (int): Smallest half side length (inclusive).
        max_half_size (int): Largest half side length (inclusive).
    Returns:
        Board: The generated board.
    Raises:
        ValueError: If the half size range is empty or not positive.
    """
    if min_half_size < 1 or max_half_size < min_half_size:
        raise ValueError("Half size range must be positive and non-empty.")

    rng = random.Random(seed)
    size = rng.randint(min_half_size, max_half_size) * 2
    cell_count = size * size

    pool = [0] * cell_count
    for value in range(cell_count // 2):
        pool[value * 2] = value
        pool[value * 2 + 1] = value

    # pool[:drawn] holds the values already placed, pool[drawn:] the remaining ones.
    for drawn in range(cell_count):
        pick = rng.randrange(drawn, cell_count)
        pool[drawn], pool[pick] = pool[pick], pool[drawn]

    return [pool[r * size:(r + 1) * size] for r in range(size)]

# --- Text Formats ---

def _read_int(tokens: Sequence[str], pos: int, low: int, high: int) -> int:
    """
    Reads the token at pos as a non-negative integer in [low, high).
    Raises:
        MalformedInput: If the token is missing or not a decimal integer.
        OutOfRange: If the value lies outside [low, high).
    """
    if pos >= len(tokens):
        raise MalformedInput("Unexpected EOF")
    token = tokens[pos]
    if not (token.isascii() and token.isdigit()):
        raise MalformedInput(f"Parse error: {token}")
    value = int(token)
    if not low <= value < high:
        raise OutOfRange(value)
    return value

def parse_board(text: str) -> Board:
    """
    Parses the generated board format: the size, then size*size row-major values.
    Args:
        text (str): Board text. Whitespace and trailing spaces are insignificant.
    Returns:
        Board: The parsed board.
    Raises:
        ParseError: If the text is malformed or has extra tokens.
    """
    tokens = text.split()
    size = _read_int(tokens, 0, 1, MAX_OPERATIONS)
    pos = 1
    board = []
    for _ in range(size):
        row = []
        for _ in range(size):
            row.append(_read_int(tokens, pos, 0, MAX_OPERATIONS))
            pos += 1
        board.append(row)
    if pos < len(tokens):
        raise TrailingTokens()
    return board

def format_board(board: Board) -> str:
    """Writes a board in the generated board format (each value followed by a space)."""
    lines = [str(len(board))]
    for row in board:
        lines.append("".join(f"{value} " for value in row))
    return "\n".join(lines) + "\n"

def parse_operations(board_size: int, text: str) -> Tuple[Operation, ...]:
    """
    Parses and validates a submitted operation list.

    The first token is the operation count L, followed by L groups of (x, y, n).
    x must lie in [0, board_size); y and n in [0, board_size]. Whether the
    sub-square actually fits is only checked during replay.
    Args:
        board_size (int): Side length of the board the operations target.
        text (str): The submission text.
    Returns:
        Tuple[Operation, ...]: The operations in input order.
    Raises:
        MalformedInput: Missing or non-integer token, or an operation count past the cap.
        OutOfRange: A coordinate or size outside its bounds.
        TrailingTokens: Tokens left after the L declared operations.
    """
    tokens = text.split()
    try:
        count = _read_int(tokens, 0, 0, MAX_OPERATIONS)
    except OutOfRange as e:
        # The count cap is part of the grammar; OutOfRange is for board bounds only.
        raise MalformedInput(str(e)) from e
    ops = []
    pos = 1
    for _ in range(count):
        x = _read_int(tokens, pos, 0, board_size)
        y = _read_int(tokens, pos + 1, 0, board_size + 1)
        n = _read_int(tokens, pos + 2, 0, board_size + 1)
        ops.append(Operation(x, y, n))
        pos += 3
    if pos < len(tokens):
        raise TrailingTokens()
    return tuple(ops)

def format_operations(ops: Sequence[Operation]) -> str:
    lines = [str(len(ops))]
    lines.extend(f"{op.row} {op.col} {op.size}" for op in ops)
    return "\n".join(lines) + "\n"

# --- Rotation Replay ---

def fits_on_board(board_size: int, op: Operation) -> bool:
    return op.row + op.size <= board_size and op.col + op.size <= board_size

def apply_operation(board: Board, op: Operation) -> Board:
    """
    Rotates one sub-square 90 degrees clockwise on a copy of the board.

    The sub-square is read into its own block before anything is written, so the
    local cell (i, j) lands on (j, n-1-i) regardless of overlap.
    Args:
        board (Board): The board before the operation. Not modified.
        op (Operation): The rotation to apply.
    Returns:
        Board: A new board after the rotation.
    Raises:
        ValueError: If the sub-square does not fit on the board.
    """
    size = get_board_size(board)
    if not fits_on_board(size, op):
        raise ValueError(f"Sub-square {op} does not fit on a {size}x{size} board.")

    new_board = copy_board(board)
    if op.size == 0:
        return new_board

    x, y, n = op
    block = [row[y:y + n] for row in board[x:x + n]]
    rotated = reverse_rows(transpose_board(block))
    for i in range(n):
        new_board[x + i][y:y + n] = rotated[i]
    return new_board

def replay(board: Board, ops: Sequence[Operation]) -> List[Board]:
    """
    Applies the operations in order and returns the board after each one.
    Args:
        board (Board): The starting board. Not modified.
        ops (Sequence[Operation]): The operations to replay.
    Returns:
        List[Board]: One snapshot per operation; entry k is the state after ops[k].
    Raises:
        ReplayOutOfRange: If an operation's sub-square leaves the board. Carries
                          the index of the failing operation.
    """
    size = get_board_size(board)
    snapshots = []
    current = board
    for turn, op in enumerate(ops):
        if not fits_on_board(size, op):
            raise ReplayOutOfRange(turn, op)
        current = apply_operation(current, op)
        snapshots.append(current)
    return snapshots

def board_at_turn(board: Board, ops: Sequence[Operation], turn: int) -> Board:
    """
    Returns the board after the first `turn` operations.
    Raises:
        ValueError: If turn is outside [0, len(ops)].
        ReplayOutOfRange: If one of the first `turn` operations leaves the board.
    """
    if not 0 <= turn <= len(ops):
        raise ValueError(f"Turn must be in [0, {len(ops)}], got {turn}.")
    size = get_board_size(board)
    current = copy_board(board)
    for index in range(turn):
        op = ops[index]
        if not fits_on_board(size, op):
            raise ReplayOutOfRange(index, op)
        current = apply_operation(current, op)
    return current

# --- Scoring ---

def matched_cells(board: Board) -> List[List[bool]]:
    """
    Marks every cell that has an equal-valued orthogonal neighbour.
    Args:
        board (Board): The board to inspect.
    Returns:
        List[List[bool]]: Per-cell flags, same shape as the board.
    """
    n = get_board_size(board)
    flags = [[False] * n for _ in range(n)]
    for r in range(n):
        for c in range(n):
            if c + 1 < n and board[r][c] == board[r][c + 1]:
                flags[r][c] = flags[r][c + 1] = True
            if r + 1 < n and board[r][c] == board[r + 1][c]:
                flags[r][c] = flags[r + 1][c] = True
    return flags

def count_adjacent_pairs(board: Board) -> int:
    """
    Counts unordered pairs of horizontally or vertically neighbouring cells with
    equal values. This is the score of a board.
    """
    n = get_board_size(board)
    pairs = 0
    for r in range(n):
        for c in range(n):
            if c + 1 < n and board[r][c] == board[r][c + 1]:
                pairs += 1
            if r + 1 < n and board[r][c] == board[r + 1][c]:
                pairs += 1
    return pairs

def compute_score(board: Board, ops: Sequence[Operation]) -> ScoreResult:
    """
    Replays the operations and scores the final board.
    Args:
        board (Board): The starting board.
        ops (Sequence[Operation]): The submitted operations.
    Returns:
        ScoreResult: The adjacent pair count of the final board, or (0, message)
                     if any operation leaves the board.
    """
    try:
        final_board = board_at_turn(board, ops, len(ops))
    except ReplayOutOfRange as e:
        return ScoreResult(0, str(e))
    return ScoreResult(count_adjacent_pairs(final_board))

def score_submission(input_text: str, output_text: str) -> ScoreResult:
    """
    Parses a board and a submission and scores them.
    Any parse or replay error becomes a zero score carrying the error message.
    """
    try:
        board = parse_board(input_text)
        ops = parse_operations(len(board), output_text)
    except ParseError as e:
        return ScoreResult(0, str(e))
    return compute_score(board, ops)

# --- Rendering Support ---

def build_frame(board: Board, ops: Sequence[Operation], turn: int,
                show_numbers: bool = True) -> RenderFrame:
    """
    Builds the render frame of the board state after `turn` operations.
    Args:
        board (Board): The starting board.
        ops (Sequence[Operation]): The submitted operations.
        turn (int): How many operations to apply, in [0, len(ops)].
        show_numbers (bool): Whether to label each cell with its value.
    Returns:
        RenderFrame: The frame; last_op is the operation that produced this state.
    Raises:
        ValueError: If turn is out of range.
        ReplayOutOfRange: If one of the first `turn` operations leaves the board.
    """
    cells = board_at_turn(board, ops, turn)
    labels = None
    if show_numbers:
        labels = [[str(value) for value in row] for row in cells]
    last_op = ops[turn - 1] if turn > 0 else None
    return RenderFrame(len(cells), cells, matched_cells(cells), last_op, labels)
