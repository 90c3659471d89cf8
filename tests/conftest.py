"""Shared pytest fixtures used across the test suite."""

import pytest

import core


@pytest.fixture
def paired_board() -> core.Board:
    """A 4x4 board holding every value in [0, 8) twice and no adjacent pairs."""
    return [
        [0, 1, 2, 3],
        [1, 0, 3, 2],
        [4, 5, 6, 7],
        [5, 4, 7, 6],
    ]


@pytest.fixture
def board_text(paired_board: core.Board) -> str:
    return core.format_board(paired_board)


@pytest.fixture
def numbered_board() -> core.Board:
    """A 4x4 board with distinct values 0..15, row-major."""
    return [[r * 4 + c for c in range(4)] for r in range(4)]
