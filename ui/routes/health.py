"""Liveness routes polled by the page and by process supervisors."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.health import Status
from utils.timestamp import format_duration, format_timestamp

router = APIRouter(prefix="/api/v1", tags=["health"])

_engine = None
_health_checker = None


def init(engine, health_checker):
    global _engine, _health_checker
    _engine = engine
    _health_checker = health_checker


@router.get("/health")
async def health():
    """Aggregated component report; 503 only when a critical check fails."""
    report = await _health_checker.check()
    return JSONResponse(content=report.to_dict(),
                        status_code=503 if report.status == Status.FAIL else 200)


@router.get("/heartbeat")
async def heartbeat():
    """Current game's counters, read without drawing a frame."""
    game = _engine.simulation
    return {
        "status": "ok",
        "timestamp": format_timestamp(),
        "game_id": game.id,
        "tick": game.tick,
        "game_time_s": round(game.time_elapsed, 3),
        "clock": format_duration(game.time_elapsed),
        "score": game.score,
        "game_state": game.state,
        "engine_state": _engine.state,
        "frames": _engine.frames,
    }
