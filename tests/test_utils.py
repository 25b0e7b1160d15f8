"""Unit tests for utility modules, errors and logging."""

import io
import json
import sys

import pytest
from core.errors import BaseGameError, ConfigError, GameStateError
from internal.logging import LogLevel, StructuredLogger
from utils import crash
from utils.ksuid import KSUID_LENGTH, generate_ksuid, ksuid_time
from utils.timestamp import format_duration, format_timestamp, now_micros


class TestKSUID:
    """Tests for KSUID generation."""

    def test_generate_ksuid_shape(self):
        """KSUID is a 27 char base62 string."""
        ksuid = generate_ksuid()
        assert isinstance(ksuid, str)
        assert len(ksuid) == KSUID_LENGTH
        assert ksuid.isalnum()

    def test_generate_ksuid_unique(self):
        """KSUIDs are unique."""
        ksuids = [generate_ksuid() for _ in range(100)]
        assert len(set(ksuids)) == 100

    def test_ksuid_time_roundtrip(self):
        """The embedded timestamp can be read back."""
        assert ksuid_time(generate_ksuid(1_700_000_000)) == 1_700_000_000

    def test_generate_ksuid_sortable(self):
        """Later seconds sort after earlier ones."""
        assert generate_ksuid(1_700_000_001) > generate_ksuid(1_700_000_000)


class TestTimestamp:
    """Tests for timestamp utilities."""

    def test_format_timestamp_iso_format(self):
        """Timestamp is ISO 8601 with microseconds."""
        ts = format_timestamp(1_577_836_800_500_000)
        assert ts == "2020-01-01T00:00:00.500000Z"

    def test_now_micros_reasonable_value(self):
        """now_micros returns an int after 2020."""
        micros = now_micros()
        assert isinstance(micros, int)
        assert micros > 1577836808000000

    @pytest.mark.parametrize("seconds,text", [
        (0, "0:00.0"), (5.0, "0:05.0"), (65.3, "1:05.3"), (-3, "0:00.0"),
    ])
    def test_format_duration(self, seconds, text):
        """Game clock renders as M:SS.t."""
        assert format_duration(seconds) == text


class TestErrors:
    """Tests for tracked errors."""

    def test_base_error_tracking(self):
        """Errors carry an id, timestamp and context."""
        err = BaseGameError("boom", context={"a": 1})
        assert len(err.error_id) == KSUID_LENGTH
        assert "T" in err.timestamp
        assert str(err).startswith(f"[{err.error_id}] boom")

    def test_game_state_error_context(self):
        """GameStateError records the game and state."""
        err = GameStateError("finished", game_id="g1", state="ended")
        assert err.context == {"game_id": "g1", "state": "ended"}

    def test_config_error_cause(self):
        """ConfigError keeps its cause."""
        cause = ValueError("bad")
        err = ConfigError("nope", section="game", cause=cause)
        assert err.cause is cause
        assert err.context == {"section": "game"}


class TestStructuredLogger:
    """Tests for JSON logging."""

    def test_emits_json_line(self):
        """Records are one JSON object per line."""
        stream = io.StringIO()
        StructuredLogger(stream=stream).info("game start", width=600)
        record = json.loads(stream.getvalue())
        assert record["level"] == "INFO"
        assert record["msg"] == "game start"
        assert record["width"] == 600

    def test_level_filter(self):
        """Records below the level are dropped."""
        stream = io.StringIO()
        log = StructuredLogger(LogLevel.WARN, stream=stream)
        log.info("quiet")
        log.warn("loud", error=ValueError("x"))
        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["err"] == "x"

    def test_bind_adds_fields(self):
        """Bound loggers stamp their context on every record."""
        stream = io.StringIO()
        log = StructuredLogger(stream=stream).bind(game="abc")
        log.info("tick")
        assert json.loads(stream.getvalue())["game"] == "abc"


class TestCrashHandler:
    """Tests for crash handling utilities."""

    def test_log_crash_writes_file(self, tmp_path, capsys):
        """Crashes go to stderr and a JSON line in the crash log."""
        original = crash._crash_log
        crash.configure(str(tmp_path / "logs" / "crash.log"))
        try:
            try:
                raise GameStateError("finished", game_id="g1")
            except GameStateError:
                record = crash.log_crash(*sys.exc_info())
        finally:
            crash.configure(original)

        line = json.loads((tmp_path / "logs" / "crash.log").read_text())
        assert line["id"] == record["id"]
        assert line["type"] == "GameStateError"
        assert line["context"] == {"game_id": "g1"}
        assert "CRASH" in capsys.readouterr().err

    def test_install_crash_handler(self):
        """install_crash_handler sets sys.excepthook."""
        original_hook = sys.excepthook
        crash.install_crash_handler()
        try:
            assert sys.excepthook == crash.log_crash
        finally:
            sys.excepthook = original_hook
