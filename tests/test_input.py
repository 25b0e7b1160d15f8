"""Unit tests for held-key input state and draw recording."""

from game.input import Direction, InputState
from game.surface import CommandSurface


class TestInputState:
    """Tests for InputState."""

    def test_starts_empty(self):
        """Nothing is held initially."""
        assert InputState().snapshot() == frozenset()

    def test_key_down_and_up(self):
        """Edges add and remove directions."""
        state = InputState()
        assert state.key_down("ArrowLeft")
        assert state.snapshot() == {Direction.LEFT}
        assert state.key_up("ArrowLeft")
        assert state.snapshot() == frozenset()

    def test_wasd_aliases(self):
        """WASD maps to the same directions as the arrows."""
        state = InputState()
        for key in "wasd":
            state.key_down(key)
        assert state.snapshot() == frozenset(Direction)

    def test_unknown_key_ignored(self):
        """Unbound keys report False and change nothing."""
        state = InputState()
        assert state.key_down("Space") is False
        assert state.key_up("Space") is False
        assert state.snapshot() == frozenset()

    def test_repeat_key_down_is_idempotent(self):
        """Auto-repeat key-downs don't stack."""
        state = InputState()
        state.key_down("ArrowUp")
        state.key_down("ArrowUp")
        state.key_up("ArrowUp")
        assert state.snapshot() == frozenset()

    def test_snapshot_is_frozen(self):
        """Later edges don't leak into an earlier snapshot."""
        state = InputState()
        state.key_down("ArrowDown")
        snap = state.snapshot()
        state.key_up("ArrowDown")
        assert snap == {Direction.DOWN}

    def test_release_all(self):
        """release_all clears every held direction."""
        state = InputState()
        state.key_down("ArrowDown")
        state.key_down("ArrowRight")
        state.release_all()
        assert state.snapshot() == frozenset()


class TestCommandSurface:
    """Tests for CommandSurface recording."""

    def test_records_in_order(self):
        """Every primitive becomes one command."""
        surface = CommandSurface(600, 400)
        surface.fill_rect(1, 2, 3, 4, "blue")
        surface.fill_circle(5, 6, 7, "lime")
        surface.stroke_circle(5, 6, 7, "#fff")
        surface.fill_rotated_rect(8, 9, 4, 1.23456, "rgba(255,0,0, 0.5)")
        assert surface.to_list() == [
            ["rect", 1, 2, 3, 4, "blue"],
            ["circle", 5, 6, 7, "lime"],
            ["ring", 5, 6, 7, "#fff"],
            ["spin", 8, 9, 4, 1.235, "rgba(255,0,0, 0.5)"],
        ]

    def test_full_clear_resets(self):
        """Clearing the whole canvas drops earlier commands."""
        surface = CommandSurface(600, 400)
        surface.fill_rect(1, 2, 3, 4, "blue")
        surface.clear_rect(0, 0, 600, 400)
        assert surface.commands == [["clear", 0, 0, 600, 400]]

    def test_partial_clear_kept(self):
        """A partial clear is just another command."""
        surface = CommandSurface(600, 400)
        surface.fill_rect(1, 2, 3, 4, "blue")
        surface.clear_rect(0, 0, 10, 10)
        assert len(surface.commands) == 2

    def test_coordinates_rounded(self):
        """Coordinates are rounded to two decimals for the wire."""
        surface = CommandSurface(600, 400)
        surface.fill_rect(1.23456, 2.0, 3, 4, "blue")
        assert surface.commands[0][1] == 1.23
