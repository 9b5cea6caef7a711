import math

import pytest

from curvemesh.curves import make_circle
from curvemesh.triangulate import (
    flatten,
    make_triangle_fan,
    triangulate_quad,
    triangulate_quads,
)


QUAD = ((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0))


def test_quad_split_uses_first_diagonal():
    t0, t1 = triangulate_quad(QUAD)
    assert t0 == (QUAD[0], QUAD[1], QUAD[2])
    assert t1 == (QUAD[0], QUAD[2], QUAD[3])
    # the shared edge is q0-q2
    assert set(t0) & set(t1) == {QUAD[0], QUAD[2]}


def test_triangulate_quads():
    tris = triangulate_quads([QUAD, QUAD])
    assert len(tris) == 4
    assert flatten(tris)[:3] == list(tris[0])


def test_fan_wraps_around():
    loop = [(1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (-1.0, 0.0, 0.0), (0.0, -1.0, 0.0)]
    fan = make_triangle_fan(loop)
    assert len(fan) == len(loop)
    assert fan[0] == (loop[0], loop[1], (0.0, 0.0, 0.0))
    assert fan[-1] == (loop[-1], loop[0], (0.0, 0.0, 0.0))


def test_fan_center_default_and_override():
    loop = make_circle((0, 0, 2), 1, 9)[:-1]
    fan = make_triangle_fan(loop)
    cx, cy, cz = fan[0][2]
    assert abs(cx) < 1e-12 and abs(cy) < 1e-12
    assert math.isclose(cz, 2.0)

    fan = make_triangle_fan(loop, center=(0, 0, 5))
    assert all(tri[2] == (0.0, 0.0, 5.0) for tri in fan)


def test_fan_needs_points():
    with pytest.raises(ValueError):
        make_triangle_fan([])

