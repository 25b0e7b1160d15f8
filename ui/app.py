"""FastAPI application factory."""

import asyncio
import json
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, StreamingResponse
from fastapi.staticfiles import StaticFiles

from communication.bus import EventBus
from config import load_config
from core.health import (
    get_health_checker,
    check_event_loop,
    create_bus_check,
    create_engine_check,
    create_logger_check,
)
from internal.logging import get_logger, LogLevel, StructuredLogger, AsyncFileLogger
from utils.crash import create_async_handler
from game.engine import GameEngine, EVENT_TOPIC, FRAME_TOPIC
from game.state import GameSnapshot
from ui.routes import control, api, health, play

STATIC_DIR = Path(__file__).parent / "static"


def create_app(config=None):
    """Create and configure the FastAPI application."""
    config = config or load_config()

    StructuredLogger.configure(min_level=LogLevel[config.logging.level.upper()])
    logger_instance = get_logger()

    # Create core components
    bus = EventBus(queue_size=100)
    engine = GameEngine(bus=bus, config=config.game)
    file_logger = AsyncFileLogger(file_path=config.logging.file)
    health_checker = get_health_checker()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger_instance.info("Application starting", version="1.0.0")
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(create_async_handler(logger_instance))

        await file_logger.start()
        # Game events only; frames at 60 fps would swamp the file
        log_sub = await bus.subscribe("logger", max_queue_size=200, topics={EVENT_TOPIC})

        async def log_worker():
            while True:
                topic, item = await log_sub.queue.get()
                file_logger.try_log(item.get("kind", topic), item)

        app.state.log_worker = asyncio.create_task(log_worker())

        health_checker.register("event_loop", check_event_loop, critical=True)
        health_checker.register("event_bus", create_bus_check(bus), critical=True)
        health_checker.register("game_engine", create_engine_check(engine), critical=True)
        health_checker.register("async_logger", create_logger_check(file_logger), critical=False)

        await engine.start()
        logger_instance.info("Application started successfully")

        yield

        # Shutdown
        logger_instance.info("Application shutting down")
        await engine.stop()
        app.state.log_worker.cancel()
        try:
            await app.state.log_worker
        except asyncio.CancelledError:
            pass
        await bus.unsubscribe("logger")
        await file_logger.stop()
        logger_instance.info("Application shutdown complete")

    app = FastAPI(
        title="Square Dodger",
        version="1.0.0",
        description="real-time arcade game: dodge enemies, grab power-ups",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.bus = bus

    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    # Initialize route modules with dependencies
    control.init(engine, bus)
    api.init(engine, bus, file_logger)
    health.init(engine, health_checker)
    play.init(engine, bus)

    app.include_router(control.router)
    app.include_router(api.router)
    app.include_router(health.router)
    app.include_router(play.router)

    # ===================================================================
    # Canvas page & Server-Sent Events (SSE), kept here for direct bus access
    # ===================================================================

    @app.get("/", response_class=HTMLResponse)
    async def index():
        """Serve the game page."""
        return (STATIC_DIR / "index.html").read_text(encoding="utf-8")

    @app.get("/events")
    async def events(request: Request):
        """SSE endpoint - streams frames and game events to the page."""
        subscriber_name = f"ui-{uuid.uuid4().hex[:8]}"
        sub = await bus.subscribe(subscriber_name, max_queue_size=10)

        async def event_generator():
            try:
                snapshot = await engine.get_snapshot()
                yield format_sse(FRAME_TOPIC, snapshot.to_dict())

                while True:
                    if await request.is_disconnected():
                        break

                    try:
                        topic, item = await asyncio.wait_for(sub.queue.get(), timeout=1.0)
                    except asyncio.TimeoutError:
                        yield ": keep-alive\n\n"
                        continue

                    if isinstance(item, GameSnapshot):
                        yield format_sse(FRAME_TOPIC, item.to_dict())
                    else:
                        yield format_sse(EVENT_TOPIC, item)
            finally:
                await bus.unsubscribe(subscriber_name)

        return StreamingResponse(event_generator(), media_type="text/event-stream")

    return app


def format_sse(event, data):
    """Format data as Server-Sent Event."""
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"
