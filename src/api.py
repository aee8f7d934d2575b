import logging
import random
import uuid
from collections import OrderedDict
from typing import Callable, Dict, List, Optional, Tuple

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, Field
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

import engine
from config import configure_logging, get_settings
from session import GameProgressState, Session

settings = get_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)

# Initialize the rate limiter
limiter = Limiter(key_func=get_remote_address)
app = FastAPI(
    title="2048 Game API",
    description="Play 2048 either through server-side sessions or statelessly, "\
                "sending the full game state with every move.",
    version="1.0.0"
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Session storage ---

class SessionStore:
    """In-memory sessions keyed by id. The oldest session is evicted past `max_sessions`."""

    def __init__(self, max_sessions: int, rng_factory: Callable[[], random.Random] = random.Random):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1.")
        self.max_sessions = max_sessions
        self._rng_factory = rng_factory
        self._sessions: "OrderedDict[str, Session]" = OrderedDict()

    def create(self) -> Tuple[str, Session]:
        session_id = uuid.uuid4().hex
        session = Session(rng=self._rng_factory())
        self._sessions[session_id] = session
        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("Evicted session %s", evicted_id)
        logger.info("Created session %s", session_id)
        return session_id, session

    def get(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}") from None

    def delete(self, session_id: str) -> None:
        self.get(session_id)
        del self._sessions[session_id]
        logger.info("Deleted session %s", session_id)

    def __len__(self) -> int:
        return len(self._sessions)


_store = SessionStore(max_sessions=settings.max_sessions)


def get_store() -> SessionStore:
    return _store

# --- Pydantic Models for API requests and responses ---

class GameStateData(BaseModel):
    """Represents the complete state of a game instance."""
    session_id: Optional[str] = Field(
        default=None,
        description="Id of the server-side session; absent for stateless moves."
    )
    board: List[List[int]] = Field(..., description="The 4 x 4 game board, represented as a list of lists.")
    score: int = Field(..., ge=0, description="Current score of the game.")
    won: bool = Field(..., description="True once a 2048 tile has appeared. Never reset.")
    over: bool = Field(..., description="True once no move is possible. Never reset.")
    progress: GameProgressState = Field(
        ...,
        description="Current progress state of the game (IN_PROGRESS, GAME_WON, GAME_OVER)."
    )
    win_tile: int = Field(default=engine.WIN_TILE, description="The tile value required to win.")
    board_size: int = Field(default=engine.GRID_SIZE, description="The dimension N of the N x N board.")


class MoveData(BaseModel):
    """Direction of a move on a server-side session."""
    direction: engine.Direction = Field(..., description="Direction of the move (up, down, left, right).")


class StatelessMoveData(MoveData):
    """Full client-held state plus the move to apply to it."""
    board: List[List[int]] = Field(..., description="Current 4 x 4 game board state before the move.")
    score: int = Field(..., ge=0, description="Current score before the move.")
    won: bool = Field(default=False, description="Won flag before the move.")
    over: bool = Field(default=False, description="Over flag before the move.")


class MoveResponseData(GameStateData):
    """Response after a move, including the new game state and move effectiveness."""
    move_was_effective: bool = Field(
        ...,
        description="True if the move resulted in a change to the board state, False otherwise."
    )
    message: Optional[str] = Field(
        default=None,
        description="An optional message, e.g., if a move was ignored or the game ended."
    )
    share_text: Optional[str] = Field(
        default=None,
        description="Text embedding the final score, present once the game is over."
    )


def _state_data(session: Session, session_id: Optional[str] = None) -> Dict:
    return dict(session.snapshot(), session_id=session_id)


def _move_response(session: Session, accepted: bool, session_id: Optional[str] = None) -> MoveResponseData:
    message = None
    share_text = None
    if session.over:
        message = session.outcome_message()
        share_text = session.share_text(settings.share_url)
    elif not accepted:
        message = "Move was not effective; board state unchanged."
    elif session.won:
        message = "Congratulations! You won!"

    return MoveResponseData(
        **_state_data(session, session_id),
        move_was_effective=accepted,
        message=message,
        share_text=share_text,
    )

# --- API Endpoints ---

@app.post("/game/new", response_model=GameStateData, summary="Start a New 2048 Game")
@limiter.limit(settings.rate_limit)
async def start_new_game(request: Request, store: SessionStore = Depends(get_store)):
    """
    Creates a server-side session holding a 4 x 4 board with two random tiles,
    score 0 and both the won and over flags unset.
    """
    session_id, session = store.create()
    return GameStateData(**_state_data(session, session_id))


@app.get("/game/{session_id}", response_model=GameStateData, summary="Read a Game")
@limiter.limit(settings.rate_limit)
async def read_game(request: Request, session_id: str, store: SessionStore = Depends(get_store)):
    session = store.get(session_id)
    return GameStateData(**_state_data(session, session_id))


@app.post("/game/{session_id}/move", response_model=MoveResponseData, summary="Make a Move in a Game")
@limiter.limit(settings.rate_limit)
async def make_session_move(
    request: Request,
    session_id: str,
    move: MoveData,
    store: SessionStore = Depends(get_store),
):
    """
    Slides the session's board. An ineffective move, or any move once the
    game is over, leaves the session untouched and reports
    `move_was_effective = false`.
    """
    session = store.get(session_id)
    accepted = session.submit_move(move.direction)
    return _move_response(session, accepted, session_id)


@app.delete("/game/{session_id}", status_code=204, summary="Discard a Game")
@limiter.limit(settings.rate_limit)
async def delete_game(request: Request, session_id: str, store: SessionStore = Depends(get_store)):
    store.delete(session_id)


@app.post("/game/move", response_model=MoveResponseData, summary="Make a Stateless Move")
@limiter.limit(settings.rate_limit)
async def make_move(request: Request, request_data: StatelessMoveData):
    """
    Processes a move on state kept by the client.

    Requires the current `board`, `score`, `won` and `over` flags and the
    `direction` of the move. The API will:
    1. Slide and merge the tiles.
    2. If the board changed, add a new random tile (2 or 4) and the merge score.
    3. Update the won and over flags.
    """
    try:
        session = Session(
            grid=request_data.board,
            score=request_data.score,
            won=request_data.won,
            over=request_data.over,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid game state in request: {str(e)}")

    accepted = session.submit_move(request_data.direction)
    return _move_response(session, accepted)


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
