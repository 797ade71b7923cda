import math

import numpy as np

from ..config import LINEAR_SPACING, LINEAR_START, WALK_BOUNDS, WALK_INTERVAL, WALK_SPEED


class ConstantPositionMobility:
    """Node stays where it was placed."""

    def __init__(self, x=0.0, y=0.0):
        self.position = np.array([x, y], dtype=float)

    def position_at(self, current_time):
        return self.position.copy()


class RandomWalk2dMobility:
    """
    2-D random walk in "time" mode: every ``interval`` seconds the node draws a new
    direction and keeps a constant speed, bouncing off the rectangle's edges.
    """

    def __init__(self, rng, x=0.0, y=0.0, speed=WALK_SPEED, interval=WALK_INTERVAL,
                 bounds=WALK_BOUNDS):
        self.rng = rng
        self.speed = speed
        self.interval = interval
        self.bounds = bounds
        self.position = np.array([x, y], dtype=float)
        self.velocity = np.zeros(2)
        self.last_move_time = 0.0

    def change_direction(self, current_time):
        """Moves up to ``current_time`` and draws the next heading."""
        self.move(current_time)
        angle = float(self.rng.uniform(0.0, 2 * math.pi))
        self.velocity = self.speed * np.array([math.cos(angle), math.sin(angle)])

    def move(self, current_time):
        dt = current_time - self.last_move_time
        if dt <= 0:
            return
        self.position = self.position + self.velocity * dt

        # Reflect at the boundaries
        xmin, xmax, ymin, ymax = self.bounds
        for axis, (lower, upper) in enumerate(((xmin, xmax), (ymin, ymax))):
            if self.position[axis] < lower:
                self.position[axis] = 2 * lower - self.position[axis]
                self.velocity[axis] = -self.velocity[axis]
            elif self.position[axis] > upper:
                self.position[axis] = 2 * upper - self.position[axis]
                self.velocity[axis] = -self.velocity[axis]
        self.last_move_time = current_time

    def position_at(self, current_time):
        self.move(current_time)
        return self.position.copy()


def linear_positions(count, start=LINEAR_START, spacing=LINEAR_SPACING):
    """Positions on the x axis at ``start``, ``start + spacing``, ..."""
    return [(start + i * spacing, 0.0) for i in range(count)]
