import json
from numbers import Real
from pathlib import Path

from core.errors import ConfigError
from internal.logging import LogLevel

_DEFAULT_CONFIG = Path(__file__).parent / "config.json"


def _require_number(section, name, value, integer=False):
    """Numbers must be positive; integer counts may also be zero."""
    if isinstance(value, bool) or not isinstance(value, int if integer else Real):
        raise ConfigError(f"{name} must be {'an integer' if integer else 'a number'}, got {value!r}",
                          section=section)
    if value < 0 or (value == 0 and not integer):
        raise ConfigError(f"{name} must be {'>= 0' if integer else 'positive'}, got {value}",
                          section=section)


class GameConfig:
    __slots__ = ("width", "height", "frame_rate", "max_dt", "seed", "power_ups", "smart_enemies")

    def __init__(self, width=600, height=400, frame_rate=60, max_dt=0.1, seed=None,
                 power_ups=("score",), smart_enemies=0):
        self.width = width
        self.height = height
        self.frame_rate = frame_rate
        self.max_dt = max_dt
        self.seed = seed
        self.power_ups = tuple(power_ups)
        self.smart_enemies = smart_enemies

    def validate(self):
        for name in ("width", "height", "frame_rate", "max_dt"):
            _require_number("game", name, getattr(self, name))
        _require_number("game", "smart_enemies", self.smart_enemies, integer=True)
        return self


class ServerConfig:
    __slots__ = ("host", "port")

    def __init__(self, host="127.0.0.1", port=8080):
        self.host = host
        self.port = port


class LoggingConfig:
    __slots__ = ("level", "file", "crash_file")

    def __init__(self, level="INFO", file="logs/dodger.log", crash_file="logs/crash.log"):
        self.level = level
        self.file = file
        self.crash_file = crash_file

    def validate(self):
        if not isinstance(self.level, str) or self.level.upper() not in LogLevel.__members__:
            raise ConfigError(f"level must be one of {sorted(LogLevel.__members__)}, got {self.level!r}",
                              section="logging")
        return self


class Config:
    __slots__ = ("game", "server", "logging")

    def __init__(self, game=None, server=None, logging=None):
        self.game = game or GameConfig()
        self.server = server or ServerConfig()
        self.logging = logging or LoggingConfig()

    @classmethod
    def from_dict(cls, d):
        sections = {}
        for name, section_cls in (("game", GameConfig), ("server", ServerConfig), ("logging", LoggingConfig)):
            try:
                sections[name] = section_cls(**d.get(name, {}))
            except TypeError as exc:
                raise ConfigError(f"bad [{name}] section: {exc}", section=name, cause=exc) from exc
        sections["game"].validate()
        sections["logging"].validate()
        return cls(**sections)


def load_config(path=None):
    config_path = Path(path) if path else _DEFAULT_CONFIG

    if not config_path.exists():
        return Config()

    with open(config_path) as file:
        try:
            data = json.load(file)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{config_path} is not valid JSON", cause=exc) from exc
    return Config.from_dict(data)
