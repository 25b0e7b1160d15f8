from utils.ksuid import generate_ksuid
from utils.timestamp import format_timestamp


class EntityState:
    __slots__ = ("kind", "x", "y", "size")
    def __init__(self, kind, x, y, size):
        self.kind, self.x, self.y, self.size = kind, x, y, size

    @classmethod
    def of(cls, entity, kind):
        return cls(kind, entity.x, entity.y, entity.size)

    def to_dict(self):
        return {"kind": self.kind, "x": round(self.x, 2), "y": round(self.y, 2), "size": self.size}


class GameSnapshot:
    """Read-only view of one frame, safe to hand to bus subscribers."""
    __slots__ = ("id", "timestamp", "game_id", "tick", "time", "score", "state",
                 "player", "enemies", "power_ups", "particle_count", "frame")

    def __init__(self, game_id, tick, time, score, state, player, enemies, power_ups,
                 particle_count, frame=None, id=None, timestamp=None):
        self.id = id or generate_ksuid()
        self.timestamp = timestamp or format_timestamp()
        self.game_id = game_id
        self.tick = tick
        self.time = time
        self.score = score
        self.state = state
        self.player = player
        self.enemies = enemies
        self.power_ups = power_ups
        self.particle_count = particle_count
        self.frame = frame or []

    @classmethod
    def capture(cls, simulation, frame=None):
        return cls(
            simulation.id,
            simulation.tick,
            simulation.time_elapsed,
            simulation.score,
            simulation.state,
            EntityState.of(simulation.player, "player"),
            [EntityState.of(enemy, enemy.kind.value) for enemy in simulation.enemies],
            [EntityState.of(power_up, getattr(power_up.kind, "value", power_up.kind))
             for power_up in simulation.power_ups],
            len(simulation.particles),
            frame,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "game_id": self.game_id,
            "tick": self.tick,
            "time_s": round(self.time, 3),
            "score": self.score,
            "state": self.state,
            "player": self.player.to_dict(),
            "enemies": [enemy.to_dict() for enemy in self.enemies],
            "power_ups": [power_up.to_dict() for power_up in self.power_ups],
            "particle_count": self.particle_count,
            "frame": self.frame,
        }
