import asyncio
import random
import time
from config import load_config
from internal.logging import get_logger
from game.input import InputState
from game.simulation import Simulation
from game.state import GameSnapshot
from game.surface import CommandSurface

FRAME_TOPIC = "frame"
EVENT_TOPIC = "event"

class EngineState:
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"

class GameEngine:
    """Host frame scheduler: update, draw, publish, once per frame."""

    def __init__(self, bus, config=None):
        self.bus = bus
        self.config = config or load_config().game
        self._lock = asyncio.Lock()
        self._log = get_logger()
        self._rng = random.Random(self.config.seed)
        self.input = InputState()
        self.simulation = None
        self.frames = 0
        self.games = 0
        self._state = EngineState.STOPPED
        self._task = None
        self._stop = asyncio.Event()
        self._pending_events = []
        self._last_publish_tick = -1
        self._last_frame_time = None
        self.reset()

    @property
    def paused(self):
        return self._state == EngineState.PAUSED

    @property
    def state(self):
        return self._state

    def reset(self):
        """Replace the current game with a fresh one."""
        if self.simulation is not None:
            self.simulation.stop()
        self.input.release_all()
        self._last_publish_tick = -1
        self.games += 1
        cfg = self.config
        self.simulation = Simulation(
            cfg.width, cfg.height,
            on_game_over=self._on_game_over,
            on_score=self._on_score,
            rng=self._rng,
            power_ups=cfg.power_ups,
            smart_enemies=cfg.smart_enemies,
        )

    def _on_game_over(self):
        sim = self.simulation
        self._pending_events.append({"kind": "game_over", "game_id": sim.id,
                                     "score": sim.score, "time_s": round(sim.time_elapsed, 3)})

    def _on_score(self, score):
        self._pending_events.append({"kind": "score", "game_id": self.simulation.id, "score": score})

    async def start(self):
        if self._task:
            return
        self._stop.clear()
        self._state = EngineState.RUNNING
        self._last_frame_time = None
        self._task = asyncio.create_task(self._loop())

    async def stop(self):
        self._stop.set()
        if self._task:
            await self._task
            self._task = None
        self._state = EngineState.STOPPED
        async with self._lock:
            self.simulation.stop()
        await self.bus.publish({"kind": "engine_stopped", "frames": self.frames}, topic=EVENT_TOPIC)

    async def pause(self):
        async with self._lock:
            self._state = EngineState.PAUSED
            self._log.info(f"engine paused frame={self.frames}")

    async def resume(self):
        async with self._lock:
            self._state = EngineState.RUNNING
            # Don't bill the paused wall-clock time to the next frame
            self._last_frame_time = None
            self._log.info(f"engine resumed frame={self.frames}")

    async def restart(self):
        async with self._lock:
            self.reset()
            self._log.info("game restarted", games=self.games)

    async def key_event(self, key, pressed):
        async with self._lock:
            if pressed:
                return self.input.key_down(key)
            return self.input.key_up(key)

    def _capture(self):
        surface = CommandSurface(self.simulation.width, self.simulation.height)
        self.simulation.draw(surface)
        return GameSnapshot.capture(self.simulation, surface.to_list())

    async def get_snapshot(self):
        async with self._lock:
            return self._capture()

    def _frame_dt(self, now):
        if self._last_frame_time is None:
            dt = 1 / self.config.frame_rate
        else:
            dt = min(now - self._last_frame_time, self.config.max_dt)
        self._last_frame_time = now
        return dt

    async def _loop(self):
        frame_interval = 1 / self.config.frame_rate
        next_frame_time = time.perf_counter()
        self._log.info(f"engine start fps={self.config.frame_rate}")

        while not self._stop.is_set():
            wait_time = next_frame_time - time.perf_counter()
            if wait_time > 0:
                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=wait_time)
                    break
                except asyncio.TimeoutError:
                    pass
            next_frame_time += frame_interval

            try:
                async with self._lock:
                    sim = self.simulation
                    if self._state == EngineState.RUNNING and sim.running:
                        sim.update(self._frame_dt(time.perf_counter()), self.input.snapshot())
                        self.frames += 1
                    snapshot = None
                    if sim.tick != self._last_publish_tick:
                        snapshot = self._capture()
                        self._last_publish_tick = sim.tick
                    events, self._pending_events = self._pending_events, []
            except Exception as exc:
                self._log.error("frame fail", error=exc, frame=self.frames)
                continue

            for event in events:
                await self.bus.publish(event, topic=EVENT_TOPIC)

            # Paused and finished games go quiet
            if snapshot is not None:
                await self.bus.publish(snapshot, topic=FRAME_TOPIC)

        self._log.info(f"engine stop frame={self.frames}")
