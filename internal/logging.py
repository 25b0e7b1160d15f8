import asyncio
import json
import os
import sys
import threading
from enum import IntEnum
from utils.timestamp import format_timestamp

class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

_logger = None
_logger_lock = threading.Lock()

class StructuredLogger:
    """One JSON object per line on stderr."""

    def __init__(self, level=LogLevel.INFO, stream=None, fields=None):
        self.level = level
        self.stream = stream
        self.fields = fields or {}

    def bind(self, **fields):
        """Child logger that stamps every record with `fields` (e.g. game id)."""
        return StructuredLogger(self.level, self.stream, {**self.fields, **fields})

    def _emit(self, level, message, error=None, **kwargs):
        if level < self.level:
            return
        record = {"timestamp": format_timestamp(), "level": level.name, "msg": message,
                  **self.fields, **kwargs}
        if error:
            record["err"] = str(error)
        try:
            print(json.dumps(record, default=str), file=self.stream or sys.stderr, flush=True)
        except (OSError, ValueError):
            pass

    def debug(self, message, **kwargs):
        self._emit(LogLevel.DEBUG, message, **kwargs)

    def info(self, message, **kwargs):
        self._emit(LogLevel.INFO, message, **kwargs)

    def warn(self, message, error=None, **kwargs):
        self._emit(LogLevel.WARN, message, error, **kwargs)

    def error(self, message, error=None, **kwargs):
        self._emit(LogLevel.ERROR, message, error, **kwargs)

    @classmethod
    def configure(cls, min_level=LogLevel.INFO, stream=None):
        global _logger
        with _logger_lock:
            _logger = cls(min_level, stream)

def get_logger():
    global _logger
    if _logger is None:
        with _logger_lock:
            if _logger is None:
                _logger = StructuredLogger()
    return _logger


class AsyncFileLogger:
    """Background task appending game events to a JSON-lines file."""

    def __init__(self, file_path, queue_size=1000):
        self.path = file_path
        self.queue = asyncio.Queue(maxsize=queue_size)
        self._task = None
        self._stop = asyncio.Event()
        self._missing_reported = False
        self.written = 0
        self.dropped = 0

    def try_log(self, kind, data):
        try:
            self.queue.put_nowait({"timestamp": format_timestamp(), "kind": kind, "data": data})
            return True
        except asyncio.QueueFull:
            self.dropped += 1
        return False

    async def start(self):
        if self._task:
            return
        dir_path = os.path.dirname(self.path)
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)
        self._stop.clear()
        self._task = asyncio.create_task(self._run())

    async def stop(self):
        self._stop.set()
        if self._task:
            await self._task
            self._task = None

    def get_stats(self):
        return {
            "queued": self.queue.qsize(),
            "written": self.written,
            "dropped": self.dropped
        }

    async def _next_record(self):
        try:
            return await asyncio.wait_for(self.queue.get(), timeout=0.5)
        except asyncio.TimeoutError:
            return None

    async def _run(self):
        file = open(self.path, "a")
        try:
            while not self._stop.is_set():
                record = await self._next_record()
                if record is None:
                    continue
                # Log file removed underneath us: keep draining so the queue can't grow
                if not os.path.exists(self.path):
                    if not self._missing_reported:
                        get_logger().warn("Log file deleted, logging disabled", path=self.path)
                        self._missing_reported = True
                    self.dropped += 1
                    continue
                try:
                    file.write(json.dumps(record, default=str) + "\n")
                    file.flush()
                    self.written += 1
                except (OSError, TypeError, ValueError) as exc:
                    get_logger().warn("Log write failed", error=exc, path=self.path)
                    self.dropped += 1
            while not self.queue.empty():
                file.write(json.dumps(self.queue.get_nowait(), default=str) + "\n")
                self.written += 1
            file.flush()
        finally:
            file.close()
