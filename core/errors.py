"""Custom errors with tracking IDs."""

from utils.timestamp import format_timestamp
from utils.ksuid import generate_ksuid


class BaseGameError(Exception):
    """Base error with unique ID and timestamp for tracking."""

    def __init__(self, message, context=None, cause=None):
        super().__init__(message)
        self.error_id = generate_ksuid()
        self.timestamp = format_timestamp()
        self.context = context or {}
        self.cause = cause

    def __str__(self):
        return f"[{self.error_id}] {super().__str__()}"


class ConfigError(BaseGameError):
    """Malformed config file or invalid config values."""

    def __init__(self, message, section=None, **kwargs):
        context = kwargs.pop("context", {})
        if section:
            context["section"] = section
        super().__init__(message, context=context, **kwargs)


class GameStateError(BaseGameError):
    """Operation not allowed in the simulation's current state."""

    def __init__(self, message, game_id=None, state=None, **kwargs):
        context = kwargs.pop("context", {})
        if game_id:
            context["game_id"] = game_id
        if state:
            context["state"] = state
        super().__init__(message, context=context, **kwargs)
