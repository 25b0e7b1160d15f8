"""API routes for stats and subscribers."""

from fastapi import APIRouter, Depends

from utils.ksuid import ksuid_time
from utils.timestamp import format_duration, format_timestamp
from ui.auth import verify_basic_auth

router = APIRouter(prefix="/api/v1", tags=["api"])

# These will be set by app.py
_engine = None
_bus = None
_file_logger = None


def init(engine, bus, file_logger):
    """Initialize with engine, bus, and logger references."""
    global _engine, _bus, _file_logger
    _engine = engine
    _bus = bus
    _file_logger = file_logger


@router.get("/stats")
async def stats(username=Depends(verify_basic_auth)):
    """Return game, bus and logger statistics (requires basic auth)."""
    snapshot = await _engine.get_snapshot()
    return {
        "timestamp": format_timestamp(),
        "game": {
            "id": snapshot.game_id,
            "started": format_timestamp(ksuid_time(snapshot.game_id) * 1_000_000),
            "state": snapshot.state,
            "tick": snapshot.tick,
            "clock": format_duration(snapshot.time),
            "score": snapshot.score,
            "enemies": len(snapshot.enemies),
            "power_ups": len(snapshot.power_ups),
            "particles": snapshot.particle_count,
        },
        "engine": {
            "state": _engine.state,
            "frames": _engine.frames,
            "games": _engine.games,
        },
        "bus": _bus.get_stats(),
        "logger": _file_logger.get_stats(),
    }


@router.get("/subscribers")
async def subscribers(username=Depends(verify_basic_auth)):
    """Return info about all current subscribers (requires basic auth)."""
    return await _bus.get_subscriber_info()
