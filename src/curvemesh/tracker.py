"""Rate-limited scalar animation for model joints.

Two control modes are provided.

``AnimatedParameter`` follows an external factor in ``[0, 100]``.  The
factor maps linearly onto ``[0, maximum]`` and ``current`` walks toward
that target by at most ``speed * delta_ms`` per update.  It never
overshoots and holds exactly once it arrives, so the motion is the same
whatever the frame timing.

``PingPongParameter`` has no external input.  It travels between its
bounds at ``speed`` and turns around whenever it reaches one, giving a
triangle wave.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


def lerp(start: float, end: float, factor: float) -> float:
    return (1 - factor) * start + factor * end


def clamp(number: float, lo: float, hi: float) -> float:
    """Clamp ``number`` into ``[lo, hi]``; reversed bounds are swapped."""
    if lo > hi:
        lo, hi = hi, lo
    return max(lo, min(number, hi))


def sign(x: float) -> float:
    if x > 0:
        return 1.0
    if x < 0:
        return -1.0
    return 0.0


def step_toward(current: float, target: float, max_step: float) -> float:
    """Move ``current`` toward ``target`` by at most ``max_step``."""
    return clamp(current + sign(target - current) * max_step, current, target)


@dataclass
class AnimatedParameter:
    """Joint value chasing a factor-driven target.

    ``real`` is ``current - minimum``, the value the driven transform
    reads.
    """

    minimum: float
    maximum: float
    speed: float
    current: float = 0.0
    real: float = 0.0

    def __post_init__(self):
        self.real = self.current - self.minimum

    def target_for(self, factor: float) -> float:
        return lerp(0.0, self.maximum, clamp(factor, 0.0, 100.0) / 100.0)

    def update(self, factor: float, delta_ms: float) -> float:
        target = self.target_for(factor)
        self.current = step_toward(self.current, target, self.speed * max(delta_ms, 0.0))
        self.real = self.current - self.minimum
        return self.real


class Direction(enum.Enum):
    APPROACHING_MAX = "approaching-max"
    APPROACHING_MIN = "approaching-min"


@dataclass
class PingPongParameter:
    """Value bouncing between ``minimum`` and ``maximum``."""

    minimum: float
    maximum: float
    speed: float
    current: float = 0.0
    direction: Direction = Direction.APPROACHING_MAX

    def __post_init__(self):
        if self.minimum > self.maximum:
            raise ValueError('minimum {} exceeds maximum {}'.format(self.minimum, self.maximum))
        self.current = clamp(self.current, self.minimum, self.maximum)

    @property
    def target(self) -> float:
        if self.direction is Direction.APPROACHING_MAX:
            return self.maximum
        return self.minimum

    def update(self, delta_ms: float) -> float:
        # the step that lands on a bound ends there; the turn happens
        # on arrival and the next update heads the other way
        target = self.target
        self.current = step_toward(self.current, target, self.speed * max(delta_ms, 0.0))
        if self.current == target:
            if self.direction is Direction.APPROACHING_MAX:
                self.direction = Direction.APPROACHING_MIN
            else:
                self.direction = Direction.APPROACHING_MAX
        return self.current


__all__ = [
    "lerp",
    "clamp",
    "sign",
    "step_toward",
    "AnimatedParameter",
    "Direction",
    "PingPongParameter",
]
