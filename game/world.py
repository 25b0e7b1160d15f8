"""World defines the canvas boundaries and the game's random source."""

import random


class World:
    """Canvas bounds shared by every entity update."""

    def __init__(self, width, height, rng=None):
        self.width = width
        self.height = height
        self.rng = rng or random.Random()

    def clamp(self, entity):
        """Pull an entity's bounding box fully back onto the canvas."""
        entity.x = max(0, min(entity.x, self.width - entity.size))
        entity.y = max(0, min(entity.y, self.height - entity.size))

    def contains(self, entity):
        return (0 <= entity.x <= self.width - entity.size
                and 0 <= entity.y <= self.height - entity.size)

    def random_position(self, size):
        """Uniform top-left corner that keeps a `size` box on the canvas."""
        return (self.rng.uniform(0, self.width - size),
                self.rng.uniform(0, self.height - size))
