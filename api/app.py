import logging
import math
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from engine.config import MatchConfig
from engine.engine import Engine
from engine.errors import MatchStateError, ValidationError
from engine.model import MatchState
from runtime.runner import TickRunner
from .config import settings
from .schemas import EventsResponse, StartRequest, ValueIn

logger = logging.getLogger(__name__)

app = FastAPI(title="Scorched Engine API")
runner: TickRunner | None = None

# Enable CORS for development (front-end runs on a different port)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def _make_runner(seed: int, width: int | None = None, height: int | None = None) -> TickRunner:
    """Build an engine with a fresh match and wrap it in a tick runner."""
    base = MatchConfig()
    try:
        config = MatchConfig(
            width=base.width if width is None else width,
            height=base.height if height is None else height,
        )
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc
    eng = Engine(seed=seed, config=config)
    return TickRunner(eng, tick_ms=settings.TICK_MS, time_compression=settings.TIME_COMPRESSION)

def _require_runner() -> TickRunner:
    if not runner:
        raise HTTPException(400, "Match not started")
    return runner

def _validation_detail(exc: ValidationError) -> dict:
    detail = exc.to_dict()
    # Keep the payload JSON-safe for NaN/inf and arbitrary strings.
    if not isinstance(exc.value, (int, float)) or not math.isfinite(exc.value):
        detail["value"] = str(exc.value)
    detail["message"] = str(exc)
    return detail

def _state_payload(s: MatchState) -> dict:
    proj = s.projectile
    outcome = s.last_outcome
    return {
        "ts_ms": s.ts_ms,
        "phase": s.phase.value,
        "current_player": s.current_player,
        "game_over": s.game_over,
        "winner": s.winner,
        "heightmap": s.heightmap.tolist(),
        "emplacements": [
            {"x": e.x, "y": e.y, "width": e.width, "height": e.height}
            for e in s.emplacements
        ],
        "settings": [{"angle": f.angle, "power": f.power} for f in s.settings],
        "projectile": {"pos": list(proj.pos), "t": proj.elapsed} if proj else None,
        "last_outcome": {
            "kind": outcome.kind.value,
            "pos": list(outcome.position) if outcome.position else None,
            "target_side": outcome.target_side,
        } if outcome else None,
    }

@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": "Scorched Engine API",
        "docs": "/docs",
        "version": "1.0"
    }

@app.on_event("startup")
async def startup():
    """Initialize and start a match on app startup."""
    global runner
    runner = _make_runner(settings.DEFAULT_SEED)
    await runner.start()

@app.on_event("shutdown")
async def shutdown():
    """Stop the tick loop on app shutdown."""
    global runner
    if runner:
        await runner.stop()

@app.post("/match/start")
async def start_match(req: StartRequest):
    """Start a new match with the specified seed, discarding the current one."""
    new_runner = _make_runner(req.seed, req.width, req.height)
    await shutdown()
    global runner
    if runner:
        # Same log, next match number: pollers see the reset.
        new_runner.events = runner.events
        new_runner.events.reset()
    runner = new_runner
    await runner.start()
    s = await runner.snapshot()
    return {"match_id": "local", "current_player": s.current_player}

@app.post("/match/local/angle")
async def post_angle(body: ValueIn):
    """Submit the current player's firing angle."""
    r = _require_runner()
    try:
        s = await r.submit_angle(body.value)
    except ValidationError as exc:
        raise HTTPException(422, _validation_detail(exc)) from exc
    except MatchStateError as exc:
        raise HTTPException(409, str(exc)) from exc
    return _state_payload(s)

@app.post("/match/local/power")
async def post_power(body: ValueIn):
    """Submit the current player's power; the shot is advanced by the tick loop."""
    r = _require_runner()
    try:
        s = await r.submit_power(body.value)
    except ValidationError as exc:
        raise HTTPException(422, _validation_detail(exc)) from exc
    except MatchStateError as exc:
        raise HTTPException(409, str(exc)) from exc
    logger.debug("Shot accepted at ts_ms=%d", s.ts_ms)
    return _state_payload(s)

@app.get("/match/local/state")
async def get_state():
    """Get current match state snapshot."""
    r = _require_runner()
    s = await r.snapshot()
    return _state_payload(s)

@app.get("/match/local/events")
async def get_events(since: int = 0, limit: int = 500):
    """Get events since offset."""
    r = _require_runner()
    evts, next_offset = r.events.since(since, limit)
    return EventsResponse(
        match_no=r.events.match_no,
        next_offset=next_offset,
        events=[{"kind": e.kind, "ts_ms": e.ts_ms, "data": e.data} for e in evts]
    )

@app.post("/match/local/time-control")
async def set_time_control(time_compression: float):
    """Set simulation time compression (1.0 = real-time, higher = faster)."""
    r = _require_runner()
    r.set_time_compression(time_compression)
    return {"time_compression": r.time_compression}

@app.get("/match/local/time-control")
async def get_time_control():
    """Get current time compression setting."""
    r = _require_runner()
    return {"time_compression": r.time_compression}
