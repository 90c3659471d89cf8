import logging

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field
from typing import List
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

import core
import visualizer
from settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Initialize the rate limiter
limiter = Limiter(key_func=get_remote_address, enabled=settings.api.rate_limit_enabled)
app = FastAPI(
    title="Pair Rotate API",
    description="A stateless API for generating pair-rotate boards and scoring "\
                "and visualizing submitted rotation sequences.",
    version="1.0.0"
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Pydantic Models for API requests and responses ---

class GenerateRequest(BaseModel):
    """Seed for a new test case."""
    seed: int = Field(..., ge=0, lt=2**64, description="Seed of the board generator. Same seed, same board.")

class CaseData(BaseModel):
    """A generated test case."""
    seed: int = Field(..., description="Seed the board was generated from.")
    size: int = Field(..., gt=0, description="The dimension N of the N x N board.")
    board: List[List[int]] = Field(..., description="The N x N board, represented as a list of lists.")
    text: str = Field(..., description="The board in the plain text input format.")

class SubmissionData(BaseModel):
    """A board and the operations submitted for it, both in their plain text formats."""
    input: str = Field(..., description="Board text: the size, then size*size values.")
    output: str = Field(..., description="Operation text: L, then L groups of 'x y n'.")

class VisRequest(SubmissionData):
    turn: int = Field(..., ge=0, description="Number of operations to apply before drawing (clamped to max_turn).")

class ScoreData(BaseModel):
    score: int = Field(..., ge=0, description="Adjacent equal pairs on the final board; 0 on any error.")
    error: str = Field(default="", description="Error message; empty when the submission is valid.")
    max_turn: int = Field(..., ge=0, description="Number of parsed operations.")

class VisData(BaseModel):
    score: int = Field(..., ge=0, description="Score of the drawn state; 0 on any error.")
    error: str = Field(default="", description="Error message; empty when the submission is valid.")
    svg: str = Field(..., description="SVG document of the drawn state.")

class ReplayData(BaseModel):
    boards: List[List[List[int]]] = Field(..., description="Board after each operation, in order.")

def _parse_board(text: str) -> core.Board:
    try:
        return core.parse_board(text)
    except core.ParseError as e:
        raise HTTPException(status_code=400, detail=f"Invalid board: {str(e)}")

# --- API Endpoints ---

@app.post("/case/generate", response_model=CaseData, summary="Generate a Test Case")
@limiter.limit(settings.api.rate_limit)
async def generate_case(request: Request, body: GenerateRequest):
    """
    Generates the board for a seed.

    - **seed**: Any non-negative integer. The same seed always yields the same board.
    """
    try:
        board = core.generate(body.seed, settings.generator.min_half_size,
                              settings.generator.max_half_size)
        return CaseData(seed=body.seed, size=len(board), board=board, text=core.format_board(board))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Unexpected error in /case/generate: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"An unexpected error occurred during generation: {str(e)}")


@app.post("/submission/score", response_model=ScoreData, summary="Score a Submission")
@limiter.limit(settings.api.rate_limit)
async def score_submission(request: Request, body: SubmissionData):
    """
    Replays the submitted operations and scores the final board.

    Submission errors (malformed text, out of range operations) are not HTTP
    errors: they are reported in `error` with a score of 0.
    """
    board = _parse_board(body.input)
    try:
        ops = core.parse_operations(len(board), body.output)
    except core.ParseError as e:
        return ScoreData(score=0, error=str(e), max_turn=0)

    try:
        result = core.compute_score(board, ops)
        return ScoreData(score=result.score, error=result.error, max_turn=len(ops))
    except Exception as e:
        logger.error("Unexpected error in /submission/score for a %dx%d board: %s",
                     len(board), len(board), e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"An unexpected server error occurred while scoring: {str(e)}")


@app.post("/submission/vis", response_model=VisData, summary="Visualize a Turn")
@limiter.limit(settings.api.rate_limit)
async def visualize_submission(request: Request, body: VisRequest):
    """
    Draws the board after `turn` operations as SVG, with the score of that state.
    """
    _parse_board(body.input)
    try:
        result = visualizer.vis(body.input, body.output, body.turn, settings.render)
        return VisData(score=result.score, error=result.error, svg=result.svg)
    except Exception as e:
        logger.error("Unexpected error in /submission/vis: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"An unexpected server error occurred while rendering: {str(e)}")


@app.post("/submission/replay", response_model=ReplayData, summary="Replay a Submission")
@limiter.limit(settings.api.rate_limit)
async def replay_submission(request: Request, body: SubmissionData):
    """
    Returns the board after every operation. Any parse or replay error is a 400.
    """
    board = _parse_board(body.input)
    try:
        ops = core.parse_operations(len(board), body.output)
        return ReplayData(boards=core.replay(board, ops))
    except core.ReplayOutOfRange as e:
        raise HTTPException(status_code=400, detail=f"{str(e)} at turn {e.turn}: {tuple(e.operation)}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid submission: {str(e)}")
    except Exception as e:
        logger.error("Unexpected error in /submission/replay: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail=f"An unexpected server error occurred during replay: {str(e)}")
