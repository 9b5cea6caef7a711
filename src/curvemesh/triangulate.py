"""Quad splitting and triangle fans.

The quad split always uses the ``a``-``c`` diagonal.  There is no
shortest-diagonal heuristic: the same ribbon always produces the same
triangles, which keeps welded index buffers stable between builds.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from curvemesh.vec import Vec3, centroid

Triangle = Tuple[Vec3, Vec3, Vec3]


def triangulate_quad(quad: Sequence[Vec3]) -> List[Triangle]:
    """Split ``(a, b, c, d)`` into ``(a, b, c)`` and ``(a, c, d)``."""
    return [(quad[0], quad[1], quad[2]),
            (quad[0], quad[2], quad[3])]


def triangulate_quads(quads: Iterable[Sequence[Vec3]]) -> List[Triangle]:
    triangles: List[Triangle] = []
    for quad in quads:
        triangles.extend(triangulate_quad(quad))
    return triangles


def make_triangle_fan(points: Sequence[Vec3],
                      center: Optional[Sequence[float]] = None) -> List[Triangle]:
    """Fan a closed loop of ``points`` around ``center``.

    One triangle ``(p[i], p[i+1], center)`` is emitted per point, the
    last one wrapping back to ``p[0]``.  ``center`` defaults to the
    centroid of the loop; pass a known origin instead for rings whose
    centroid would make the fan fold over itself.
    """

    if not points:
        raise ValueError('cannot build a triangle fan from an empty loop')
    if center is None:
        center = centroid(points)
    c = (float(center[0]), float(center[1]), float(center[2]))

    n = len(points)
    return [(points[i], points[(i + 1) % n], c) for i in range(n)]


def flatten(triangles: Iterable[Sequence[Vec3]]) -> List[Vec3]:
    """Turn a list of triangles into a flat triangle stream."""
    stream: List[Vec3] = []
    for tri in triangles:
        stream.extend(tri)
    return stream


__all__ = [
    "Triangle",
    "triangulate_quad",
    "triangulate_quads",
    "make_triangle_fan",
    "flatten",
]
