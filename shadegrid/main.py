"""FastAPI app: CORS, session lifecycle endpoints, grid screenshot and report."""

import logging
import random
from collections import OrderedDict
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

import yaml
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, field_validator, model_validator

from .config import GameConfig, load_config
from .game_state import GameSession
from .report import GameReport, build_report
from .rounds import RoundGenerator
from .screenshot import DEFAULT_CANVAS_SIZE, cell_to_index, pixel_to_cell, render_round_png
from .timer import SessionClock

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

_config: GameConfig | None = None


def get_config() -> GameConfig:
    """Server-wide config, loaded once from $SHADEGRID_CONFIG or defaults."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


@dataclass
class SessionEntry:
    session: GameSession
    clock: SessionClock
    canvas_size: int = DEFAULT_CANVAS_SIZE


# Insertion-ordered so the oldest sessions are evicted first.
SESSIONS: "OrderedDict[str, SessionEntry]" = OrderedDict()


def _close_entry(session_id: str) -> None:
    entry = SESSIONS.pop(session_id, None)
    if entry is not None:
        entry.clock.close()


@asynccontextmanager
async def lifespan(app):
    try:
        yield
    finally:
        for session_id in list(SESSIONS):
            _close_entry(session_id)
        logger.info("Stopped all session clocks")


app = FastAPI(title="Shadegrid API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class SessionCreateRequest(BaseModel):
    """Request body for creating (and starting) a session."""

    seed: int | None = None  # seed the round generator for reproducible rounds
    config_file: str | None = None  # YAML overriding the server config
    canvas_size: int = DEFAULT_CANVAS_SIZE  # screenshot canvas size in pixels

    @field_validator("canvas_size")
    @classmethod
    def validate_canvas_size(cls, v: int) -> int:
        if v < 16:
            raise ValueError(f"canvas_size must be >= 16, got {v}")
        return v


class SelectRequest(BaseModel):
    """Pick a cell by index, or by pixel (x, y) on the screenshot canvas."""

    index: int | None = None
    x: int | None = None
    y: int | None = None

    @field_validator("index")
    @classmethod
    def validate_index(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError(f"index must be non-negative, got {v}")
        return v

    @model_validator(mode="after")
    def require_target(self) -> "SelectRequest":
        if self.index is None and (self.x is None or self.y is None):
            raise ValueError("provide either 'index' or both 'x' and 'y'")
        return self


class SessionSnapshot(BaseModel):
    """Renderable session state."""

    session_id: str
    status: str
    score: int
    time_left: int
    level: int
    grid_size: int | None = None
    base_color: str | None = None
    diff_color: str | None = None
    diff_index: int | None = None
    delta: int | None = None
    last_round_summary: dict[str, Any] | None = None
    generation: int


class SelectResponse(BaseModel):
    correct: bool
    ignored: bool = False
    session: SessionSnapshot


class ScreenResponse(BaseModel):
    image: str  # base64 PNG
    grid_size: int
    size_px: int


def _snapshot(session_id: str, entry: SessionEntry) -> SessionSnapshot:
    return SessionSnapshot(session_id=session_id, **entry.session.snapshot())


def _get_entry(session_id: str) -> SessionEntry:
    entry = SESSIONS.get(session_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    return entry


# Handlers are async so they run on the event loop that owns the clock tasks.


@app.post("/api/session", response_model=SessionSnapshot)
async def session_create(req: SessionCreateRequest) -> SessionSnapshot:
    """Create a session and start it immediately."""
    config = get_config()
    if req.config_file:
        try:
            config = load_config(req.config_file)
        except FileNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        except (ValueError, yaml.YAMLError) as e:
            raise HTTPException(status_code=422, detail=str(e)) from e

    rng = random.Random(req.seed) if req.seed is not None else None
    session = GameSession(generator=RoundGenerator(rng, config), config=config)
    clock = SessionClock(session)
    session_id = uuid4().hex
    entry = SessionEntry(session=session, clock=clock, canvas_size=req.canvas_size)
    SESSIONS[session_id] = entry
    # The session cap is server-wide; per-session config files cannot change it.
    while len(SESSIONS) > get_config().max_sessions:
        oldest = next(iter(SESSIONS))
        logger.info("Evicting session %s", oldest)
        _close_entry(oldest)
    session.start()
    return _snapshot(session_id, entry)


@app.get("/api/session/{session_id}", response_model=SessionSnapshot)
async def session_get(session_id: str) -> SessionSnapshot:
    return _snapshot(session_id, _get_entry(session_id))


@app.post("/api/session/{session_id}/start", response_model=SessionSnapshot)
async def session_restart(session_id: str) -> SessionSnapshot:
    """Start over: full reset, new round 1, fresh clock."""
    entry = _get_entry(session_id)
    entry.session.start()
    return _snapshot(session_id, entry)


@app.post("/api/session/{session_id}/select", response_model=SelectResponse)
async def session_select(session_id: str, req: SelectRequest) -> SelectResponse:
    """Pick a cell. Ignored (not an error) unless the session is playing."""
    entry = _get_entry(session_id)
    session = entry.session
    if not session.is_playing or session.round is None:
        return SelectResponse(correct=False, ignored=True, session=_snapshot(session_id, entry))

    if req.index is not None:
        index = req.index
    elif req.x is not None and req.y is not None:
        side = session.round.grid_size
        row, col = pixel_to_cell(req.x, req.y, side, entry.canvas_size)
        index = cell_to_index(row, col, side)
    else:
        raise HTTPException(status_code=422, detail="provide either 'index' or both 'x' and 'y'")

    correct, _data = session.select(index)
    return SelectResponse(correct=correct, session=_snapshot(session_id, entry))


@app.get("/api/session/{session_id}/screen", response_model=ScreenResponse)
async def session_screen(session_id: str) -> ScreenResponse:
    entry = _get_entry(session_id)
    rnd = entry.session.round
    if rnd is None:
        raise HTTPException(status_code=409, detail="Session has no round yet")
    return ScreenResponse(
        image=render_round_png(rnd, canvas_size=entry.canvas_size),
        grid_size=rnd.grid_size,
        size_px=entry.canvas_size,
    )


@app.get("/api/session/{session_id}/report", response_model=GameReport)
async def session_report(session_id: str) -> GameReport:
    return build_report(_get_entry(session_id).session)


@app.delete("/api/session/{session_id}")
async def session_delete(session_id: str) -> dict[str, str]:
    _get_entry(session_id)
    _close_entry(session_id)
    return {"status": "deleted"}


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}
