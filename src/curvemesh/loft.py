"""Grid lofting of four-sided boundary patches.

``grid_fill`` closes the open end of a stack of profile curves.  It
marches row by row from the top chain down and, within a row, from the
left chain to the right.  Each interior point is extrapolated from the
three already known neighbours of its cell::

    tl ---- tr
    |        |
    bl ---- (new)

    new = tl + 2 * (midpoint(bl, tr) - tl)

This is not a bilinear blend of the four chains; errors compound
toward the bottom right and the patch leans toward its top-left edges.
The headband caps are drawn with exactly this lean.
"""

from __future__ import annotations

from typing import List, Sequence

from curvemesh import vec
from curvemesh.ribbon import Quad, quads_from_lines, reverse_quads
from curvemesh.vec import Vec3


def grid_fill(top: Sequence[Vec3], bottom: Sequence[Vec3],
              left: Sequence[Vec3], right: Sequence[Vec3]) -> List[List[Vec3]]:
    """Fill the patch bounded by four point chains.

    ``top`` and ``bottom`` run left to right and share a length;
    ``left`` and ``right`` run top to bottom, hold only the points
    strictly between the top and bottom chains, and share a length
    ``N``.  Returns ``N + 2`` rows, the first being ``top`` and the
    last ``bottom``, each of ``len(top)`` points.
    """

    if len(top) != len(bottom):
        raise ValueError('top and bottom chains differ in length: {} vs {}'
                         .format(len(top), len(bottom)))
    if len(left) != len(right):
        raise ValueError('left and right chains differ in length: {} vs {}'
                         .format(len(left), len(right)))
    if len(top) < 2:
        raise ValueError('grid boundary needs at least two columns')

    lines_to_fill = len(left)
    columns_to_fill = len(top) - 2

    rows: List[List[Vec3]] = [list(top)]
    for i in range(1, lines_to_fill + 1):
        row: List[Vec3] = [left[i - 1]]
        previous = rows[i - 1]
        for j in range(1, columns_to_fill + 1):
            bottom_left = row[j - 1]
            top_right = previous[j]
            top_left = previous[j - 1]

            center = vec.midpoint(bottom_left, top_right)
            to_center = vec.sub(center, top_left)
            row.append(vec.add(top_left, vec.scale3(to_center, 2)))
        row.append(right[i - 1])
        rows.append(row)

    rows.append(list(bottom))
    return rows


# both lofted caps of the headband go through the same construction
unbalanced_grid_fill = grid_fill


def grid_quads(rows: Sequence[Sequence[Vec3]], *, reverse: bool = False) -> List[Quad]:
    """Stitch consecutive grid rows, ``rows[i]`` against ``rows[i + 1]``."""
    quads: List[Quad] = []
    for i in range(len(rows) - 1):
        quads.extend(quads_from_lines(rows[i], rows[i + 1]))
    if reverse:
        quads = reverse_quads(quads)
    return quads


__all__ = ["grid_fill", "unbalanced_grid_fill", "grid_quads"]
