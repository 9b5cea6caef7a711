"""Accumulate ribbons, fans and lofted grids into one mesh.

``MeshBuilder`` is the single place part builders go through to turn
curves into a :class:`~curvemesh.mesh.MeshBuffer`.  The variation
between call sites (weld precision, fan centers, ribbon winding) is
passed in explicitly instead of living in per-part copies of the
kernel.

Example::

    builder = MeshBuilder(decimals=5)
    builder.add_ribbon(front, back)
    builder.add_fan(back, center=origin, reverse=True)
    buf = builder.build()
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from curvemesh.curves import reverse_curve
from curvemesh.loft import grid_quads
from curvemesh.mesh import DEFAULT_DECIMALS, MeshBuffer, make_mesh
from curvemesh.ribbon import quads_from_line_sequence, quads_from_lines, reverse_quads
from curvemesh.triangulate import Triangle, flatten, make_triangle_fan, triangulate_quads
from curvemesh.vec import Vec3


class MeshBuilder:

    def __init__(self, decimals: int = DEFAULT_DECIMALS):
        self.decimals = decimals
        self._triangles: List[Triangle] = []

    def __len__(self):
        return len(self._triangles)

    def add_triangles(self, triangles: Iterable[Sequence[Vec3]]) -> "MeshBuilder":
        for tri in triangles:
            if len(tri) != 3:
                raise ValueError('triangle must have three points: {}'.format(tri))
            self._triangles.append((tri[0], tri[1], tri[2]))
        return self

    def add_quads(self, quads: Sequence[Sequence[Vec3]], *, reverse: bool = False) -> "MeshBuilder":
        if reverse:
            quads = reverse_quads(quads)
        self._triangles.extend(triangulate_quads(quads))
        return self

    def add_ribbon(self, line_a: Sequence[Vec3], line_b: Sequence[Vec3], *,
                   reverse: bool = False) -> "MeshBuilder":
        return self.add_quads(quads_from_lines(line_a, line_b), reverse=reverse)

    def add_ribbons(self, lines: Sequence[Sequence[Vec3]], *, closed: bool = False,
                    reverse: bool = False) -> "MeshBuilder":
        return self.add_quads(quads_from_line_sequence(lines, closed=closed), reverse=reverse)

    def add_grid(self, rows: Sequence[Sequence[Vec3]], *, reverse: bool = False) -> "MeshBuilder":
        return self.add_quads(grid_quads(rows), reverse=reverse)

    def add_fan(self, points: Sequence[Vec3], center: Optional[Sequence[float]] = None, *,
                reverse: bool = False) -> "MeshBuilder":
        """Cap a closed loop; ``reverse`` walks the loop backwards,
        flipping the fan to face the other way."""
        if reverse:
            points = reverse_curve(points)
        self._triangles.extend(make_triangle_fan(points, center))
        return self

    @property
    def triangles(self) -> List[Triangle]:
        return list(self._triangles)

    @property
    def stream(self) -> List[Vec3]:
        return flatten(self._triangles)

    def build(self) -> MeshBuffer:
        return make_mesh(self.stream, self.decimals)


__all__ = ["MeshBuilder"]
