"""Component health for the /health route: event loop, bus, frame loop, file logger."""

import asyncio
import time
from enum import Enum
from utils.timestamp import format_timestamp

class Status(Enum):
    OK = "healthy"
    DEGRADED = "degraded"
    FAIL = "unhealthy"

class CheckResult:
    __slots__ = ("name", "status", "msg")

    def __init__(self, name, status, msg=""):
        self.name = name
        self.status = status
        self.msg = msg

    def to_dict(self):
        return {"name": self.name,
                "status": self.status.value,
                "msg": self.msg}

class HealthReport:
    __slots__ = ("status", "checks", "uptime", "timestamp")

    def __init__(self, status, checks, uptime=0):
        self.status = status
        self.checks = checks
        self.uptime = uptime
        self.timestamp = format_timestamp()

    def to_dict(self):
        return {"status": self.status.value,
                "timestamp": self.timestamp,
                "uptime": round(self.uptime, 1),
                "checks": [check.to_dict() for check in self.checks]}

_checker = None

class HealthChecker:
    def __init__(self, ttl=1.0, timeout=5.0):
        self._checks = {}
        self._cache = None
        self._cache_time = 0
        self._ttl = ttl
        self._timeout = timeout
        self._start_time = time.time()

    def register(self, name, check_fn, critical=True):
        self._checks[name] = (check_fn, critical)
        self._cache = None

    async def _run_one(self, name, check_fn):
        try:
            return await asyncio.wait_for(check_fn(), timeout=self._timeout)
        except asyncio.TimeoutError:
            return CheckResult(name, Status.FAIL, "timeout")
        except Exception as exc:
            # A check that raises counts as unhealthy
            return CheckResult(name, Status.FAIL, str(exc))

    async def check(self):
        now = time.time()
        if self._cache and now - self._cache_time < self._ttl:
            return self._cache

        results = []
        for name, (check_fn, is_critical) in self._checks.items():
            results.append((await self._run_one(name, check_fn), is_critical))

        status = Status.OK
        for result, is_critical in results:
            if result.status == Status.FAIL and is_critical:
                status = Status.FAIL
            elif result.status != Status.OK and status == Status.OK:
                status = Status.DEGRADED

        self._cache = HealthReport(status, [result for result, _ in results], now - self._start_time)
        self._cache_time = now
        return self._cache

def get_health_checker():
    global _checker
    if not _checker:
        _checker = HealthChecker()
    return _checker

# Checks
async def check_event_loop():
    await asyncio.sleep(0)
    return CheckResult("loop", Status.OK)

def create_bus_check(bus, max_drop_ratio=0.25):
    async def check():
        stats = bus.get_stats()

        # Frames are shed by slow SSE clients; a lot of shedding is a degradation
        if stats["total_published"] > 0 and stats["total_dropped"] / stats["total_published"] > max_drop_ratio:
            return CheckResult("bus", Status.DEGRADED, "drops")

        return CheckResult("bus", Status.OK, f"{stats['subscriber_count']}sub")
    return check

def create_engine_check(engine, threshold=5.0):
    last_state = [None, time.time()]

    async def check():
        snapshot = await engine.get_snapshot()
        now = time.time()
        state = engine.state

        if state == "stopped":
            return CheckResult("engine", Status.DEGRADED, "stopped")

        # A paused engine or a finished game legitimately stops ticking
        if state == "paused" or snapshot.state == "ended":
            last_state[0], last_state[1] = snapshot.tick, now
            return CheckResult("engine", Status.OK, f"{state}/{snapshot.state}@{snapshot.tick}")

        if last_state[0] is not None and snapshot.tick == last_state[0] and now - last_state[1] > threshold:
            return CheckResult("engine", Status.FAIL, f"stuck@{snapshot.tick}")

        last_state[0], last_state[1] = snapshot.tick, now
        return CheckResult("engine", Status.OK, f"t{snapshot.tick} score={snapshot.score}")
    return check

def create_logger_check(logger):
    async def check():
        queue_size, max_size = logger.queue.qsize(), logger.queue.maxsize

        if queue_size / max_size > 0.9:
            return CheckResult("log", Status.DEGRADED, f"{queue_size}/{max_size}")

        return CheckResult("log", Status.OK, f"written={logger.written}")
    return check
