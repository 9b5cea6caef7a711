"""Vertex welding, index buffers and per-vertex normals.

Builders hand this module a *triangle stream*: a flat list of points in
groups of three, carrying no topology.  ``index_points`` welds it into
unique positions plus one index per stream entry, and
``compute_normals`` derives a smooth normal per unique position.  The
result is packaged as an immutable :class:`MeshBuffer`, the only
artifact a rendering collaborator needs.

Welding is exact on rounded coordinates.  Two positions merge if and
only if they are identical after rounding to ``decimals`` places; there
is no nearest-neighbour search, so seams that drift by more than the
rounding granularity stay open.  ``decimals`` is therefore the knob
that controls how aggressively seams are closed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple

import numpy as np

from curvemesh.vec import Vec3, cross, mag, sub

TriTuple = Tuple[Vec3, Vec3, Vec3, Vec3]

DEFAULT_DECIMALS = 5

# faces whose cross product is shorter than this carry no direction
_DEGENERATE_TOL = 1e-12


def face_normal(v0: Sequence[float], v1: Sequence[float], v2: Sequence[float]):
    """Unit normal of ``(v0, v1, v2)`` by the right-hand rule, or ``None``
    for a face too small to have one."""
    n = cross(sub(v1, v0), sub(v2, v0))
    length = mag(n)
    if length <= _DEGENERATE_TOL:
        return None
    return (n[0] / length, n[1] / length, n[2] / length)


def round_to_decimals(value: float, decimals: int) -> float:
    """Round half toward +inf at ``decimals`` places.

    The result is never ``-0.0``, so values on either side of zero that
    round to zero share a weld key.
    """

    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


def _check_decimals(decimals) -> None:
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise ValueError('decimals must be a non-negative integer, got {!r}'.format(decimals))


def index_points(stream: Sequence[Sequence[float]],
                 decimals: int = DEFAULT_DECIMALS) -> Tuple[List[int], List[Vec3]]:
    """Weld a triangle stream into ``(indices, points)``.

    Points are visited in stream order.  Each is rounded to
    ``decimals`` places; the first occurrence of a rounded position is
    appended to ``points`` and every occurrence, first or repeated,
    appends its index to ``indices``.  The index buffer therefore has
    one entry per stream entry and keeps the stream's triangle order and
    winding.
    """

    _check_decimals(decimals)
    if len(stream) % 3:
        raise ValueError('triangle stream length {} is not a multiple of 3'.format(len(stream)))

    indices: List[int] = []
    points: List[Vec3] = []
    seen: Dict[Vec3, int] = {}

    for p in stream:
        key = (round_to_decimals(p[0], decimals),
               round_to_decimals(p[1], decimals),
               round_to_decimals(p[2], decimals))
        index = seen.get(key)
        if index is None:
            index = len(points)
            seen[key] = index
            points.append(key)
        indices.append(index)

    return indices, points


def compute_normals(points: Sequence[Sequence[float]], indices: Sequence[int]) -> List[Vec3]:
    """Return one unit normal per point.

    Every triangle contributes its unit face normal to each of its three
    corners and the sums are normalized.  Zero-area triangles contribute
    nothing; a point touched only by such triangles gets ``(0, 0, 0)``.
    """

    pts = np.asarray(points, dtype=float).reshape(-1, 3)
    idx = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
    normals = np.zeros_like(pts)

    if len(idx):
        v0 = pts[idx[:, 0]]
        v1 = pts[idx[:, 1]]
        v2 = pts[idx[:, 2]]
        face = np.cross(v1 - v0, v2 - v0)
        lengths = np.linalg.norm(face, axis=1)
        keep = lengths > _DEGENERATE_TOL
        unit = face[keep] / lengths[keep, None]
        for corner in range(3):
            np.add.at(normals, idx[keep, corner], unit)

    lengths = np.linalg.norm(normals, axis=1)
    nonzero = lengths > _DEGENERATE_TOL
    normals[nonzero] /= lengths[nonzero, None]
    normals[~nonzero] = 0.0

    return [(float(n[0]), float(n[1]), float(n[2])) for n in normals]


@dataclass(frozen=True)
class MeshBuffer:
    """Welded positions, triangle indices and per-position normals."""

    points: Tuple[Vec3, ...]
    indices: Tuple[int, ...]
    normals: Tuple[Vec3, ...]
    decimals: int = DEFAULT_DECIMALS

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    def faces(self) -> Iterator[Tuple[int, int, int]]:
        for i in range(0, len(self.indices), 3):
            yield self.indices[i], self.indices[i + 1], self.indices[i + 2]

    def triangles(self) -> Iterator[Tuple[Vec3, Vec3, Vec3]]:
        pts = self.points
        for a, b, c in self.faces():
            yield pts[a], pts[b], pts[c]

    def mesh_view(self) -> Iterator[TriTuple]:
        """Yield ``(normal, v0, v1, v2)`` for every non-degenerate face.

        Normals here are flat face normals, not the smoothed per-vertex
        ``normals`` of the buffer.
        """

        for v0, v1, v2 in self.triangles():
            n = face_normal(v0, v1, v2)
            if n is None:
                continue
            yield n, v0, v1, v2

    def bbox(self) -> Tuple[Vec3, Vec3]:
        if not self.points:
            raise ValueError('empty mesh has no bounding box')
        xs, ys, zs = zip(*self.points)
        return (min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs))

    def as_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return ``(positions, indices, normals)`` ready for GPU upload.

        Positions and normals are ``float32`` arrays of shape ``(n, 3)``,
        indices a flat ``uint32`` array.
        """

        positions = np.asarray(self.points, dtype=np.float32).reshape(-1, 3)
        indices = np.asarray(self.indices, dtype=np.uint32)
        normals = np.asarray(self.normals, dtype=np.float32).reshape(-1, 3)
        return positions, indices, normals


def make_mesh(stream: Sequence[Sequence[float]], decimals: int = DEFAULT_DECIMALS) -> MeshBuffer:
    """Weld ``stream`` and derive normals in one step."""

    indices, points = index_points(stream, decimals)
    normals = compute_normals(points, indices)
    return MeshBuffer(points=tuple(points), indices=tuple(indices),
                      normals=tuple(normals), decimals=decimals)


def expand(buffer: MeshBuffer) -> List[Vec3]:
    """Rebuild the (welded) triangle stream a buffer was indexed from."""
    return [buffer.points[i] for i in buffer.indices]


__all__ = [
    "DEFAULT_DECIMALS",
    "MeshBuffer",
    "face_normal",
    "round_to_decimals",
    "index_points",
    "compute_normals",
    "make_mesh",
    "expand",
]
