"""Circular arc and circle sampling.

Every ring in a curvemesh model starts life here.  Arcs are sampled in
the constant-z plane of their ``center``; builders reposition them
afterwards with the transforms in :mod:`curvemesh.xform`.
"""

from __future__ import annotations

import math
from typing import List, Sequence

from curvemesh.vec import Vec3, isgoodnum

Curve = List[Vec3]


def make_arc(center: Sequence[float], radius: float, point_count: float,
             start_angle: float, end_angle: float, *,
             repeat_last: bool = False) -> Curve:
    """Sample ``point_count`` points along an arc of ``radius`` around ``center``.

    Angles are in degrees.  Samples sit at equal angular steps from
    ``start_angle`` to ``end_angle``; ``x = cos(t) * radius + cx``,
    ``y = sin(t) * radius + cy`` and ``z = cz``.

    ``point_count`` may be fractional, in which case the step is
    computed from the fractional count and ``ceil(point_count)``
    samples are emitted.  ``repeat_last`` appends an explicit copy of
    the first sample, closing the curve.
    """

    if not isgoodnum(point_count) or point_count < 2:
        raise ValueError('arc needs at least two points, got {}'.format(point_count))
    if not isgoodnum(radius):
        raise ValueError('bad arc radius: {}'.format(radius))

    start = math.radians(start_angle)
    end = math.radians(end_angle)
    step = (end - start) / (point_count - 1)

    cx, cy, cz = float(center[0]), float(center[1]), float(center[2])
    points: Curve = []
    for i in range(math.ceil(point_count)):
        angle = start + i * step
        points.append((math.cos(angle) * radius + cx,
                       math.sin(angle) * radius + cy,
                       cz))

    if repeat_last:
        points.append(points[0])
    return points


def make_circle(center: Sequence[float], radius: float, point_count: float, *,
                repeat_last: bool = False) -> Curve:
    """Full circle; the last sample coincides with the first only
    geometrically (at 360 degrees) unless ``repeat_last`` is given."""
    return make_arc(center, radius, point_count, 0, 360, repeat_last=repeat_last)


def reverse_curve(curve: Sequence[Vec3]) -> Curve:
    return list(reversed(curve))


def curve_ends(curves: Sequence[Sequence[Vec3]], index: int) -> Curve:
    """Collect sample ``index`` of every curve, in order.

    Used to gather the open ends of a stack of arcs into a boundary
    loop for capping.
    """
    return [c[index] for c in curves]


__all__ = ["Curve", "make_arc", "make_circle", "reverse_curve", "curve_ends"]
