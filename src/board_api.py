import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

import board_engine

logger = logging.getLogger(__name__)

RATE_LIMIT = "100/minute"

# Initialize the rate limiter
limiter = Limiter(key_func=get_remote_address)
app = FastAPI(
    title="Tile Merge Board API",
    description="A stateless API over the tile merge board engine. "\
                "The client holds the current board and sends it with every request.",
    version="1.0.0"
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Pydantic Models for API requests and responses ---

class BoardStateData(BaseModel):
    """A board together with the status derived from it."""
    board: List[List[int]] = Field(..., description="Tile values row by row; 0 marks an empty cell.")
    status: board_engine.GameStatus = Field(
        ...,
        description="Current progress of the game (IN_PROGRESS, OVER)."
    )
    board_size: int = Field(..., gt=0, description="The dimension N of the N x N board.")


class BoardRequestData(BaseModel):
    board: List[List[int]] = Field(..., description="Current N x N game board.")


class MoveRequestData(BoardRequestData):
    """A board and the direction to slide it in."""
    direction: board_engine.Direction = Field(
        ...,
        description="Direction of the move (UP, DOWN, LEFT, RIGHT)."
    )


class MoveResponseData(BoardStateData):
    """Response after a move, including the new board and move effectiveness."""
    move_was_effective: bool = Field(
        ...,
        description="True if the move changed the board, in which case a new tile was spawned."
    )
    message: Optional[str] = Field(
        default=None,
        description="An optional message, e.g. if a move had no effect or the game ended."
    )


def _state_for(board: board_engine.Board) -> BoardStateData:
    return BoardStateData(
        board=board,
        status=board_engine.determine_game_status(board),
        board_size=len(board)
    )

# --- API Endpoints ---

@app.post("/game/new", response_model=BoardStateData, summary="Start a New Game")
@limiter.limit(RATE_LIMIT)
async def start_new_game(request: Request):
    """
    Creates a new game: an empty board with two random tiles (2 or 4).
    """
    try:
        return _state_for(board_engine.new_game())
    except Exception as e:
        logger.error(f"Unexpected error in /game/new: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Could not deal a new board: {str(e)}")


@app.post("/game/status", response_model=BoardStateData, summary="Check a Board")
@limiter.limit(RATE_LIMIT)
async def check_status(request: Request, request_data: BoardRequestData):
    """
    Reports whether any move can still change the submitted board.
    """
    try:
        board = board_engine.validate_board(request_data.board)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Board rejected: {str(e)}")
    return _state_for(board)


@app.post("/game/move", response_model=MoveResponseData, summary="Make a Move in the Game")
@limiter.limit(RATE_LIMIT)
async def make_move(request: Request, request_data: MoveRequestData):
    """
    Resolves one player input against the submitted board.

    Steps:
    1. Slide and merge the tiles in the requested direction.
    2. If the move changed the board, add a new random tile (2 or 4).
    3. Determine the new game status (IN_PROGRESS, OVER).

    A move that changes nothing returns the submitted board untouched.
    """
    try:
        result = board_engine.play_turn(request_data.board, request_data.direction)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Move rejected: {str(e)}")
    except Exception as e:
        logger.error(f"Unexpected error in /game/move: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Could not resolve the move: {str(e)}")

    message_for_client: Optional[str] = None
    if not result.moved:
        message_for_client = "Move was not effective; board state unchanged."
    if result.game_over:
        message_for_client = "Game Over. No more valid moves."

    return MoveResponseData(
        board=result.board,
        status=board_engine.GameStatus.OVER if result.game_over else board_engine.GameStatus.IN_PROGRESS,
        board_size=len(result.board),
        move_was_effective=result.moved,
        message=message_for_client
    )
