"""Operator routes: pause and resume the frame loop."""

import time

from fastapi import APIRouter, Depends

from game.engine import EVENT_TOPIC
from ui.auth import verify_basic_auth

router = APIRouter(prefix="/api/v1/control", tags=["control"])

# These will be set by app.py
_engine = None
_bus = None


def init(engine, bus):
    """Initialize with engine and bus references."""
    global _engine, _bus
    _engine = engine
    _bus = bus


@router.post("/pause")
async def pause(username=Depends(verify_basic_auth)):
    """Freeze the game clock (requires basic auth)."""
    await _engine.pause()
    await _bus.publish({"kind": "paused", "by": username, "timestamp": time.time()}, topic=EVENT_TOPIC)
    return {"ok": True}


@router.post("/resume")
async def resume(username=Depends(verify_basic_auth)):
    """Restart the game clock (requires basic auth)."""
    await _engine.resume()
    await _bus.publish({"kind": "resumed", "by": username, "timestamp": time.time()}, topic=EVENT_TOPIC)
    return {"ok": True}
