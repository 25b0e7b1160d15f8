"""Player-facing routes: key edges and restart."""

import time

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from game.engine import EVENT_TOPIC

router = APIRouter(prefix="/api/v1", tags=["play"])

# These will be set by app.py
_engine = None
_bus = None


def init(engine, bus):
    """Initialize with engine and bus references."""
    global _engine, _bus
    _engine = engine
    _bus = bus


class KeyEvent(BaseModel):
    key: str
    pressed: bool


@router.post("/input")
async def key_event(event: KeyEvent):
    """Report a key-down (pressed=true) or key-up edge."""
    if not await _engine.key_event(event.key, event.pressed):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"unbound key {event.key!r}")
    return {"ok": True, "held": sorted(d.value for d in _engine.input.snapshot())}


@router.post("/restart")
async def restart():
    """Throw away the current game and start a new one."""
    await _engine.restart()
    await _bus.publish({"kind": "restart", "game_id": _engine.simulation.id, "timestamp": time.time()},
                       topic=EVENT_TOPIC)
    return {"ok": True, "game_id": _engine.simulation.id}
