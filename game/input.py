"""Held-key state, fed by key-down / key-up edges from the host."""

from enum import Enum


class Direction(Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


KEY_BINDINGS = {
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
    "w": Direction.UP,
    "s": Direction.DOWN,
}


class InputState:
    """Which logical directions are currently held."""

    def __init__(self, bindings=None):
        self.bindings = bindings or KEY_BINDINGS
        self._held = set()

    def key_down(self, key):
        """Record a key press. Returns False for keys with no binding."""
        direction = self.bindings.get(key)
        if direction is None:
            return False
        self._held.add(direction)
        return True

    def key_up(self, key):
        direction = self.bindings.get(key)
        if direction is None:
            return False
        self._held.discard(direction)
        return True

    def release_all(self):
        self._held.clear()

    def snapshot(self):
        return frozenset(self._held)
