"""Game entities: player, enemies, power-ups and particles.

Velocities are expressed in canvas units per tick at REFERENCE_FPS and
scaled by the real frame time, so movement is frame-rate independent.
"""

import math
import random
import weakref
from enum import Enum

from game.input import Direction

REFERENCE_FPS = 60

PLAYER_SPEED = 200 / REFERENCE_FPS
PARTICLE_LIFE = 0.5


class Entity:
    """Positioned, sized, drawable record. (x, y) is the top-left corner."""

    def __init__(self, x, y, size, color):
        self.x = x
        self.y = y
        self.size = size
        self.color = color

    @property
    def center(self):
        half = self.size / 2
        return self.x + half, self.y + half

    def overlaps(self, other):
        """Circle test between the two bounding boxes' inscribed circles."""
        (ax, ay), (bx, by) = self.center, other.center
        return math.hypot(ax - bx, ay - by) < (self.size + other.size) / 2

    def update(self, dt, world):
        pass

    def draw(self, surface):
        surface.fill_rect(self.x, self.y, self.size, self.size, self.color)


class Particle(Entity):
    """Fading, spinning square spawned on hits and pickups."""

    def __init__(self, x, y, size, color, vx, vy, life=PARTICLE_LIFE, gravity=0.0,
                 rotation=0.0, rotation_speed=0.0):
        super().__init__(x, y, size, color)
        self.vx = vx
        self.vy = vy
        self.life = life
        self.max_life = life
        self.alpha = 1.0
        self.gravity = gravity
        self.rotation = rotation
        self.rotation_speed = rotation_speed

    def update(self, dt, world=None):
        self.vy += self.gravity * dt
        self.x += self.vx * dt * REFERENCE_FPS
        self.y += self.vy * dt * REFERENCE_FPS
        # Spin is cosmetic and advances per frame, not per second
        self.rotation += self.rotation_speed
        self.life -= dt
        if self.max_life <= 0:
            self.alpha = 0.0
        else:
            self.alpha = max(0.0, min(1.0, self.life / self.max_life))

    def is_dead(self):
        return self.life <= 0

    def draw(self, surface):
        cx, cy = self.center
        surface.fill_rotated_rect(cx, cy, self.size, self.rotation, f"rgba({self.color}, {self.alpha})")


class Player(Entity):
    """The user's square.

    Buffs are stored as expiry times on the simulation clock and dropped by
    `expire_buffs` during the tick. Each active speed boost doubles the
    speed, so overlapping boosts compound and run out one at a time.
    """

    def __init__(self, x, y, size, color="blue", speed=PLAYER_SPEED):
        super().__init__(x, y, size, color)
        self.vx = 0.0
        self.vy = 0.0
        self.base_speed = speed
        self.speed_boosts = []
        self.invincible_until = None

    @property
    def speed(self):
        return self.base_speed * 2 ** len(self.speed_boosts)

    @property
    def invincible(self):
        return self.invincible_until is not None

    @invincible.setter
    def invincible(self, value):
        self.invincible_until = math.inf if value else None

    def boost_speed(self, expires_at):
        self.speed_boosts.append(expires_at)

    def grant_invincibility(self, expires_at):
        if self.invincible_until is None or expires_at > self.invincible_until:
            self.invincible_until = expires_at

    def expire_buffs(self, now):
        self.speed_boosts = [t for t in self.speed_boosts if t > now]
        if self.invincible_until is not None and self.invincible_until <= now:
            self.invincible_until = None

    def clear_buffs(self):
        self.speed_boosts = []
        self.invincible_until = None

    def steer(self, held):
        """Set velocity from the held directions; on each axis the later write wins."""
        speed = self.speed
        self.vx = 0.0
        self.vy = 0.0
        if Direction.LEFT in held:
            self.vx = -speed
        if Direction.RIGHT in held:
            self.vx = speed
        if Direction.UP in held:
            self.vy = -speed
        if Direction.DOWN in held:
            self.vy = speed

    def update(self, dt, world):
        self.x += self.vx * dt * REFERENCE_FPS
        self.y += self.vy * dt * REFERENCE_FPS
        world.clamp(self)


class EnemyKind(Enum):
    BASIC = "basic"
    FAST = "fast"
    SMART = "smart"


# kind -> (speed per tick, color)
ENEMY_TRAITS = {
    EnemyKind.BASIC: (100 / REFERENCE_FPS, "red"),
    EnemyKind.FAST: (200 / REFERENCE_FPS, "orange"),
    EnemyKind.SMART: (120 / REFERENCE_FPS, "purple"),
}


def _chase_target(enemy):
    target = enemy.target
    if target is None:
        return
    (ex, ey), (tx, ty) = enemy.center, target.center
    dx, dy = tx - ex, ty - ey
    dist = math.hypot(dx, dy)
    # Sitting exactly on the target: keep last frame's heading
    if dist > 0:
        enemy.vx = dx / dist * enemy.speed
        enemy.vy = dy / dist * enemy.speed


_STEERING = {
    EnemyKind.SMART: _chase_target,
}


class Enemy(Entity):
    """Autonomous obstacle. Motion policy is picked by `kind`."""

    def __init__(self, x, y, size, rng=None, kind=EnemyKind.BASIC, target=None):
        speed, color = ENEMY_TRAITS[kind]
        super().__init__(x, y, size, color)
        self.kind = kind
        self.speed = speed
        heading = (rng or random).uniform(0, 2 * math.pi)
        self.vx = math.cos(heading) * speed
        self.vy = math.sin(heading) * speed
        self._target = weakref.ref(target) if target is not None else None

    @classmethod
    def fast(cls, x, y, size, rng=None):
        """FastEnemy: basic bounce at double speed."""
        return cls(x, y, size, rng, EnemyKind.FAST)

    @classmethod
    def smart(cls, x, y, size, target, rng=None):
        """SmartEnemy: re-aims at `target` every frame."""
        return cls(x, y, size, rng, EnemyKind.SMART, target)

    @property
    def target(self):
        return self._target() if self._target is not None else None

    def update(self, dt, world):
        steer = _STEERING.get(self.kind)
        if steer:
            steer(self)

        self.x += self.vx * dt * REFERENCE_FPS
        self.y += self.vy * dt * REFERENCE_FPS

        # Reflect per axis, pinning to the wall so it can't get stuck outside
        max_x = world.width - self.size
        max_y = world.height - self.size
        if self.x < 0:
            self.x = 0
            self.vx = abs(self.vx)
        elif self.x > max_x:
            self.x = max_x
            self.vx = -abs(self.vx)

        if self.y < 0:
            self.y = 0
            self.vy = abs(self.vy)
        elif self.y > max_y:
            self.y = max_y
            self.vy = -abs(self.vy)


class PowerUpType(Enum):
    SPEED = "speed"
    SCORE = "score"
    INVINCIBLE = "invincible"


_POWER_UP_BY_VALUE = {kind.value: kind for kind in PowerUpType}

POWER_UP_COLORS = {
    PowerUpType.SPEED: "gold",
    PowerUpType.SCORE: "lime",
    PowerUpType.INVINCIBLE: "magenta",
}


class PowerUp(Entity):
    """Stationary collectible. Moves elsewhere instead of despawning."""

    def __init__(self, x, y, size, kind):
        # Unknown tags are kept as-is; picking them up has no effect
        kind = _POWER_UP_BY_VALUE.get(kind, kind)
        super().__init__(x, y, size, POWER_UP_COLORS.get(kind, "magenta"))
        self.kind = kind

    def relocate(self, world):
        self.x, self.y = world.random_position(self.size)

    def draw(self, surface):
        cx, cy = self.center
        radius = self.size / 2
        surface.fill_circle(cx, cy, radius, self.color)
        surface.stroke_circle(cx, cy, radius, "#fff")
