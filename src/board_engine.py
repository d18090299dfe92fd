# board_engine.py
# This file is the stateless rules engine for the sliding-tile merge puzzle.
# Boards are plain lists of lists and every function returns a new board.

import logging
import random
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

Board = List[List[int]]

BOARD_SIZE = 4
SPAWN_TWO_PROBABILITY = 0.9
INITIAL_TILES = 2


class Direction(Enum):
    """Represents the possible move directions."""
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class GameStatus(Enum):
    """Progress of a game, derived from a board on demand."""
    IN_PROGRESS = "IN_PROGRESS"
    OVER = "OVER"


class TurnResult(NamedTuple):
    board: Board
    moved: bool
    game_over: bool


class InvalidBoardError(ValueError):
    """Raised when a board does not have the shape or values of a legal board."""


# --- Validation ---

def _is_tile_value(value: int) -> bool:
    return value == 0 or (value >= 2 and value & (value - 1) == 0)


def validate_board(board: Board) -> Board:
    """
    Checks that a board is a BOARD_SIZE x BOARD_SIZE grid of legal tile values.
    Args:
        board (Board): The board to check.
    Returns:
        Board: A copy of the board, safe to hand to the rest of the engine.
    Raises:
        InvalidBoardError: If the dimensions or any cell value are illegal.
    """
    if not isinstance(board, (list, tuple)) or len(board) != BOARD_SIZE:
        raise InvalidBoardError(f"Board must have {BOARD_SIZE} rows.")
    for r, row in enumerate(board):
        if not isinstance(row, (list, tuple)) or len(row) != BOARD_SIZE:
            raise InvalidBoardError(f"Row {r} must have {BOARD_SIZE} cells.")
        for c, value in enumerate(row):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidBoardError(f"Cell ({r}, {c}) must be an integer, got {value!r}.")
            if not _is_tile_value(value):
                raise InvalidBoardError(
                    f"Cell ({r}, {c}) holds {value}; tiles must be 0 or a power of two >= 2."
                )
    return [list(row) for row in board]


def boards_equal(first: Board, second: Board) -> bool:
    """Cell-by-cell comparison of two boards."""
    if len(first) != len(second):
        return False
    return all(list(a) == list(b) for a, b in zip(first, second))


def get_empty_cells(board: Board) -> List[Tuple[int, int]]:
    """
    Get coordinates of empty (0-value) cells in the given board.
    Args:
        board (Board): The board to check.
    Returns:
        List[Tuple[int, int]]: (row, col) tuples for the empty cells, row-major.
    """
    return [
        (r, c)
        for r, row in enumerate(board)
        for c, value in enumerate(row)
        if value == 0
    ]


# --- Grid Primitives ---

def empty_board() -> Board:
    return [[0] * BOARD_SIZE for _ in range(BOARD_SIZE)]


def transpose(board: Board) -> Board:
    """
    Transposes a given board (swaps rows and columns).
    Args:
        board (Board): The board to transpose.
    Returns:
        Board: A new transposed board.
    """
    new_board = empty_board()
    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            new_board[c][r] = board[r][c]
    return new_board


def reverse_rows(board: Board) -> Board:
    """Returns a new board with the cell order of every row reversed."""
    return [list(row)[::-1] for row in board]


# --- Line Reducer ---

def _compress_line(line: List[int]) -> List[int]:
    compressed = [value for value in line if value != 0]
    return compressed + [0] * (len(line) - len(compressed))


def _merge_line(line: List[int]) -> List[int]:
    # One pass; a freshly doubled tile is skipped so it cannot merge again.
    merged = list(line)
    c = 0
    while c < len(merged) - 1:
        if merged[c] != 0 and merged[c] == merged[c + 1]:
            merged[c] *= 2
            merged[c + 1] = 0
            c += 2
        else:
            c += 1
    return merged


def compress(board: Board) -> Board:
    """
    Slides every tile of every row towards column 0, closing the gaps.
    Args:
        board (Board): The board to compress.
    Returns:
        Board: A new board, each row's non-zero tiles first, zero padded.
    """
    return [_compress_line(row) for row in board]


def merge_adjacent_equal(board: Board) -> Board:
    """
    Merges equal neighbours in every row, scanning left to right.
    The left tile of a matching pair doubles and the right one is cleared,
    so [2, 2, 2, 2] becomes [4, 0, 4, 0] rather than [8, 0, 0, 0].
    Args:
        board (Board): The board to merge, usually already compressed.
    Returns:
        Board: A new board with the merges applied.
    """
    return [_merge_line(row) for row in board]


# --- Move Resolver ---

def move_left(board: Board) -> Board:
    # The second compress pulls tiles across the gaps merging leaves behind.
    return compress(merge_adjacent_equal(compress(board)))


def move_right(board: Board) -> Board:
    return reverse_rows(move_left(reverse_rows(board)))


def move_up(board: Board) -> Board:
    return transpose(move_left(transpose(board)))


def move_down(board: Board) -> Board:
    return transpose(move_right(transpose(board)))


_MOVES = {
    Direction.LEFT: move_left,
    Direction.RIGHT: move_right,
    Direction.UP: move_up,
    Direction.DOWN: move_down,
}


def apply_move(direction: Direction, board: Board) -> Board:
    """
    Slides and merges the board in the given direction.
    Args:
        direction (Direction): The direction to move.
        board (Board): The current game board. It is not modified.
    Returns:
        Board: The board after the move. It may equal the input when nothing
               can slide or merge that way; compare with boards_equal.
    Raises:
        ValueError: If direction is not a Direction member.
        InvalidBoardError: If the board is malformed.
    """
    if not isinstance(direction, Direction):
        raise ValueError(f"Invalid direction specified for apply_move: {direction!r}")
    return _MOVES[direction](validate_board(board))


# --- Spawner ---

def spawn_random_tile(board: Board, rng: Optional[random.Random] = None) -> Board:
    """
    Adds a new tile (90% chance of 2, 10% chance of 4) to an empty cell on a copy of the board.
    Args:
        board (Board): The current game board. It is not modified.
        rng (Optional[random.Random]): Source of randomness; the random module
                                       is used when omitted.
    Returns:
        Board: A new board with exactly one empty cell filled. If the board has
               no empty cell, an unchanged copy is returned.
    """
    rng = rng or random
    new_board = validate_board(board)
    empty_cells = get_empty_cells(new_board)
    if not empty_cells:
        logger.warning("Cannot spawn a tile: board has no empty cell.")
        return new_board

    row, col = rng.choice(empty_cells)
    new_board[row][col] = 2 if rng.random() < SPAWN_TWO_PROBABILITY else 4
    logger.debug("Spawned %d at (%d, %d)", new_board[row][col], row, col)
    return new_board


# --- Terminal Detector ---

def is_game_over(board: Board) -> bool:
    """
    Check if no move can change the board.
    Args:
        board (Board): The game board.
    Returns:
        bool: True when there is no empty cell and no two horizontally or
              vertically adjacent cells hold the same value.
    """
    board = validate_board(board)
    for r in range(BOARD_SIZE):
        for c in range(BOARD_SIZE):
            current = board[r][c]
            if current == 0:
                return False
            if c < BOARD_SIZE - 1 and current == board[r][c + 1]:
                return False
            if r < BOARD_SIZE - 1 and current == board[r + 1][c]:
                return False
    return True


def determine_game_status(board: Board) -> GameStatus:
    return GameStatus.OVER if is_game_over(board) else GameStatus.IN_PROGRESS


# --- Game Flow ---

def new_game(rng: Optional[random.Random] = None) -> Board:
    """Returns an empty board with the two starting tiles spawned."""
    board = empty_board()
    for _ in range(INITIAL_TILES):
        board = spawn_random_tile(board, rng)
    return board


def play_turn(board: Board, direction: Direction, rng: Optional[random.Random] = None) -> TurnResult:
    """
    Runs one player input: move, then spawn and re-check only if the move changed the board.
    Args:
        board (Board): The board before the input.
        direction (Direction): The requested move.
        rng (Optional[random.Random]): Source of randomness for the spawn.
    Returns:
        TurnResult: The resulting board, whether the move was effective, and
                    whether the game is over afterwards.
    """
    current = validate_board(board)
    moved_board = apply_move(direction, current)
    if boards_equal(moved_board, current):
        return TurnResult(current, False, is_game_over(current))

    final_board = spawn_random_tile(moved_board, rng)
    return TurnResult(final_board, True, is_game_over(final_board))
