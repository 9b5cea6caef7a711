"""Stitch parallel curves into ribbons of quadrilateral faces."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from curvemesh.vec import Vec3

Quad = Tuple[Vec3, Vec3, Vec3, Vec3]


def quads_from_lines(line_a: Sequence[Vec3], line_b: Sequence[Vec3]) -> List[Quad]:
    """Bridge two equal-length curves with ``len(line_a) - 1`` quads.

    Quad ``i`` is ``(a[i], a[i+1], b[i+1], b[i])``.  Winding stays
    consistent along the ribbon as long as both curves run in the same
    direction.  Curves of different length are a caller error and are
    rejected rather than truncated.
    """

    if len(line_a) != len(line_b):
        raise ValueError('cannot stitch curves of different length: {} vs {}'
                         .format(len(line_a), len(line_b)))

    quads: List[Quad] = []
    for i in range(len(line_a) - 1):
        quads.append((line_a[i], line_a[i + 1], line_b[i + 1], line_b[i]))
    return quads


def reverse_quad(quad: Sequence[Vec3]) -> Quad:
    """Flip the winding of ``quad``."""
    return (quad[3], quad[2], quad[1], quad[0])


def reverse_quads(quads: Sequence[Sequence[Vec3]]) -> List[Quad]:
    return [reverse_quad(q) for q in quads]


def quads_from_line_sequence(lines: Sequence[Sequence[Vec3]], *, closed: bool = False,
                             reverse: bool = False) -> List[Quad]:
    """Stitch every consecutive pair of a stack of curves.

    Each pair is stitched as ``quads_from_lines(lines[i + 1], lines[i])``.
    With ``closed`` the last curve is also stitched back to the first,
    turning a ring of profile curves into a closed tube.
    """

    count = len(lines)
    pairs = count if closed else count - 1
    quads: List[Quad] = []
    for i in range(max(pairs, 0)):
        quads.extend(quads_from_lines(lines[(i + 1) % count], lines[i]))
    if reverse:
        quads = reverse_quads(quads)
    return quads


__all__ = [
    "Quad",
    "quads_from_lines",
    "reverse_quad",
    "reverse_quads",
    "quads_from_line_sequence",
]
