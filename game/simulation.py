"""The game simulation.

One `update(dt, held)` per frame advances everything; `draw(surface)` is a
pure read of the current state. Score changes and the losing collision are
reported through synchronous callbacks.
"""

import math
import random

from core.errors import ConfigError, GameStateError
from game.entities import REFERENCE_FPS, Enemy, Particle, Player, PowerUp, PowerUpType
from game.world import World
from internal.logging import get_logger
from utils.ksuid import generate_ksuid
from utils.timestamp import format_duration

PLAYER_SIZE = 30
ENEMY_SIZE = 30
POWER_UP_SIZE = 20

SPAWN_INTERVAL = 10.0
BUFF_DURATION = 5.0

DAMAGE_COLOR = "255,0,0"
PICKUP_COLOR = "255,255,0"
DAMAGE_PARTICLES = 60
PICKUP_PARTICLES = 25


class GameState:
    RUNNING = "running"
    ENDED = "ended"


class Simulation:
    def __init__(self, width, height, on_game_over=None, on_score=None, rng=None,
                 power_ups=("score",), smart_enemies=0):
        if width <= PLAYER_SIZE or height <= PLAYER_SIZE:
            raise ConfigError(f"canvas {width}x{height} too small for a {PLAYER_SIZE}px player",
                              section="game")
        self.id = generate_ksuid()
        self.rng = rng or random.Random()
        self.world = World(width, height, self.rng)
        self.on_game_over = on_game_over
        self.on_score = on_score
        self._log = get_logger().bind(game=self.id)

        self.player = Player(width / 2 - PLAYER_SIZE / 2, height / 2 - PLAYER_SIZE / 2, PLAYER_SIZE)
        self.enemies = [Enemy(min(200, width - ENEMY_SIZE), min(100, height - ENEMY_SIZE),
                              ENEMY_SIZE, self.rng)]
        for _ in range(smart_enemies):
            x, y = self.world.random_position(ENEMY_SIZE)
            self.enemies.append(Enemy.smart(x, y, ENEMY_SIZE, self.player, self.rng))

        self.power_ups = []
        for index, kind in enumerate(power_ups):
            if index == 0:
                x, y = min(400, width - POWER_UP_SIZE), min(250, height - POWER_UP_SIZE)
            else:
                x, y = self.world.random_position(POWER_UP_SIZE)
            self.power_ups.append(PowerUp(x, y, POWER_UP_SIZE, kind))
        self.particles = []

        self.score = 0
        self.tick = 0
        self.time_elapsed = 0.0
        self.next_spawn_at = SPAWN_INTERVAL
        self.running = True
        self.game_over = False
        self._log.info("game start", width=width, height=height,
                       enemies=len(self.enemies), power_ups=len(self.power_ups))

    @property
    def width(self):
        return self.world.width

    @property
    def height(self):
        return self.world.height

    @property
    def state(self):
        return GameState.RUNNING if self.running else GameState.ENDED

    def update(self, dt, held=frozenset()):
        if not self.running:
            raise GameStateError("update on a finished game", game_id=self.id, state=self.state)
        dt = max(0.0, dt)
        self.tick += 1
        self.time_elapsed += dt

        self._spawn_escalation()
        self.player.expire_buffs(self.time_elapsed)
        self.player.steer(held)

        self.player.update(dt, self.world)
        for enemy in self.enemies:
            enemy.update(dt, self.world)
        for power_up in self.power_ups:
            power_up.update(dt, self.world)
        for particle in self.particles:
            particle.update(dt, self.world)
        self.particles = [particle for particle in self.particles if not particle.is_dead()]

        if self._check_enemy_hits():
            return
        self._check_pickups()

    def draw(self, surface):
        surface.clear_rect(0, 0, self.width, self.height)
        self.player.draw(surface)
        for enemy in self.enemies:
            enemy.draw(surface)
        for power_up in self.power_ups:
            power_up.draw(surface)
        for particle in self.particles:
            particle.draw(surface)

    def stop(self):
        """Tear down: no further updates, no pending buffs, no host callbacks."""
        if not self.running and self.on_game_over is None and self.on_score is None:
            return
        self.running = False
        self.player.clear_buffs()
        self.on_game_over = None
        self.on_score = None
        self._log.info("game stopped", tick=self.tick, score=self.score)

    def spawn_particles(self, x, y, color, count=20, gravity=0.0):
        rng = self.rng
        for _ in range(count):
            heading = rng.uniform(0, 2 * math.pi)
            speed = rng.uniform(-100, 100)
            self.particles.append(Particle(
                x, y, rng.uniform(2, 6), color,
                math.cos(heading) * speed / REFERENCE_FPS,
                math.sin(heading) * speed / REFERENCE_FPS,
                gravity=gravity,
                rotation=rng.uniform(0, 2 * math.pi),
                rotation_speed=(rng.random() - 0.5) * 0.2,
            ))

    def apply_power_up(self, kind):
        if not self.running:
            return
        try:
            kind = PowerUpType(kind)
        except ValueError:
            self._log.warn("unknown power-up ignored", kind=kind)
            return

        expires_at = self.time_elapsed + BUFF_DURATION
        if kind is PowerUpType.SPEED:
            self.player.boost_speed(expires_at)
        elif kind is PowerUpType.SCORE:
            self.score += 1
            if self.on_score:
                self.on_score(self.score)
        elif kind is PowerUpType.INVINCIBLE:
            self.player.grant_invincibility(expires_at)
        self._log.debug("power-up", kind=kind.value, score=self.score)

    def _spawn_escalation(self):
        while self.time_elapsed > self.next_spawn_at:
            x, y = self.world.random_position(ENEMY_SIZE)
            self.enemies.append(Enemy.fast(x, y, ENEMY_SIZE, self.rng))
            self.next_spawn_at += SPAWN_INTERVAL
            self._log.info("fast enemy spawned", enemies=len(self.enemies),
                           at=format_duration(self.time_elapsed))

    def _check_enemy_hits(self):
        if self.player.invincible:
            return False
        for enemy in self.enemies:
            if self.player.overlaps(enemy):
                cx, cy = self.player.center
                self.spawn_particles(cx, cy, DAMAGE_COLOR, DAMAGE_PARTICLES)
                self._end()
                return True
        return False

    def _check_pickups(self):
        for power_up in self.power_ups:
            if self.player.overlaps(power_up):
                cx, cy = power_up.center
                self.spawn_particles(cx, cy, PICKUP_COLOR, PICKUP_PARTICLES)
                self.apply_power_up(power_up.kind)
                power_up.relocate(self.world)

    def _end(self):
        # Fires once even when several enemies connect in the same tick
        if self.game_over:
            return
        self.game_over = True
        self.running = False
        self.player.clear_buffs()
        self._log.info("game over", score=self.score, tick=self.tick,
                       survived=format_duration(self.time_elapsed))
        if self.on_game_over:
            self.on_game_over()
