import math

import numpy as np
import pytest

from curvemesh.builder import MeshBuilder
from curvemesh.curves import make_arc
from curvemesh.mesh import (
    MeshBuffer,
    compute_normals,
    expand,
    face_normal,
    index_points,
    make_mesh,
    round_to_decimals,
)

# two counter-clockwise triangles covering the unit square in z = 0
SQUARE = [
    (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0),
    (0.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0),
]


def _tube_stream():
    a = make_arc((0, 0, 1), 1, 5, 0, 180)
    b = make_arc((0, 0, -1), 1, 5, 0, 180)
    return MeshBuilder().add_ribbon(a, b).stream


def test_round_to_decimals():
    assert round_to_decimals(2.5, 0) == 3
    assert round_to_decimals(-2.5, 0) == -2
    assert round_to_decimals(1.234567, 3) == 1.235
    zero = round_to_decimals(-0.000001, 5)
    assert zero == 0.0
    assert math.copysign(1.0, zero) == 1.0


def test_index_square():
    indices, points = index_points(SQUARE)
    assert points == [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)]
    assert indices == [0, 1, 2, 0, 2, 3]


def test_index_invariants():
    stream = _tube_stream()
    indices, points = index_points(stream)
    assert len(indices) == len(stream)
    assert all(0 <= i < len(points) for i in indices)
    assert len(set(points)) == len(points)
    # two 5-point arcs weld down to 10 distinct positions
    assert len(points) == 10
    for i, p in zip(indices, stream):
        assert all(abs(a - b) <= 0.5e-5 + 1e-12 for a, b in zip(points[i], p))


def test_index_is_idempotent():
    indices, points = index_points(_tube_stream())
    again_indices, again_points = index_points([points[i] for i in indices])
    assert again_indices == indices
    assert again_points == points


def test_weld_precision():
    near = [(1.000001, 0.0, 0.0), (1.000004, 0.0, 0.0), (1.0, 1.0, 0.0)]
    indices, points = index_points(near)
    assert indices == [0, 0, 1]
    assert points[0] == (1.0, 0.0, 0.0)

    apart = [(1.00001, 0.0, 0.0), (1.00002, 0.0, 0.0), (1.0, 1.0, 0.0)]
    indices, _ = index_points(apart)
    assert indices == [0, 1, 2]

    coarse = [(1.0001, 0.0, 0.0), (1.0002, 0.0, 0.0), (1.0, 1.0, 0.0)]
    assert index_points(coarse, decimals=3)[0] == [0, 0, 1]
    assert index_points(coarse, decimals=5)[0] == [0, 1, 2]


def test_signed_zero_welds():
    stream = [(0.0, 0.0, 0.0), (-0.0, -0.000001, 0.0), (1.0, 0.0, 0.0)]
    indices, points = index_points(stream)
    assert indices == [0, 0, 1]


def test_index_errors():
    with pytest.raises(ValueError):
        index_points(SQUARE[:4])
    with pytest.raises(ValueError):
        index_points(SQUARE, decimals=-1)
    with pytest.raises(ValueError):
        index_points(SQUARE, decimals=True)
    with pytest.raises(ValueError):
        index_points(SQUARE, decimals=2.0)
    assert index_points([]) == ([], [])


def test_flat_normals():
    indices, points = index_points(SQUARE)
    normals = compute_normals(points, indices)
    assert len(normals) == len(points)
    for n in normals:
        assert n == (0.0, 0.0, 1.0)


def test_degenerate_faces_are_skipped():
    stream = SQUARE + [(5.0, 5.0, 5.0), (5.0, 5.0, 5.0), (6.0, 6.0, 6.0)]
    indices, points = index_points(stream)
    normals = compute_normals(points, indices)
    assert normals[:4] == [(0.0, 0.0, 1.0)] * 4
    # touched only by a zero-area face
    assert normals[4] == (0.0, 0.0, 0.0)
    assert normals[5] == (0.0, 0.0, 0.0)


def test_normals_are_unit_length():
    buf = make_mesh(_tube_stream())
    for n in buf.normals:
        assert math.isclose(math.sqrt(n[0] ** 2 + n[1] ** 2 + n[2] ** 2), 1.0)


def test_mesh_buffer():
    buf = make_mesh(SQUARE, decimals=4)
    assert isinstance(buf, MeshBuffer)
    assert buf.decimals == 4
    assert buf.triangle_count == 2
    assert list(buf.faces()) == [(0, 1, 2), (0, 2, 3)]
    assert next(buf.triangles()) == tuple(SQUARE[:3])
    assert buf.bbox() == ((0.0, 0.0, 0.0), (1.0, 1.0, 0.0))
    assert expand(buf) == SQUARE


def test_mesh_view_skips_degenerate():
    stream = SQUARE + [(5.0, 5.0, 5.0), (5.0, 5.0, 5.0), (6.0, 6.0, 6.0)]
    buf = make_mesh(stream)
    view = list(buf.mesh_view())
    assert len(view) == 2
    assert all(normal == (0.0, 0.0, 1.0) for normal, _, _, _ in view)


def test_empty_mesh():
    buf = make_mesh([])
    assert buf.triangle_count == 0
    with pytest.raises(ValueError):
        buf.bbox()


def test_as_arrays():
    buf = make_mesh(SQUARE)
    positions, indices, normals = buf.as_arrays()
    assert positions.dtype == np.float32 and positions.shape == (4, 3)
    assert indices.dtype == np.uint32 and indices.shape == (6,)
    assert normals.dtype == np.float32 and normals.shape == (4, 3)
    np.testing.assert_array_equal(indices, [0, 1, 2, 0, 2, 3])


def test_face_normal():
    assert face_normal((0, 0, 0), (1, 0, 0), (0, 1, 0)) == (0.0, 0.0, 1.0)
    assert face_normal((0, 0, 0), (0, 1, 0), (1, 0, 0)) == (0.0, 0.0, -1.0)
    assert face_normal((0, 0, 0), (1, 1, 1), (2, 2, 2)) is None


def test_small_faces_agree_between_view_and_normals():
    # a cross product of 1e-8 is small but still has a direction
    tiny = [(0.0, 0.0, 0.0), (0.0001, 0.0, 0.0), (0.0, 0.0001, 0.0)]
    buf = make_mesh(tiny)
    view = list(buf.mesh_view())
    assert len(view) == 1
    assert all(vec_close(n, (0.0, 0.0, 1.0)) for n in buf.normals)
    assert vec_close(view[0][0], (0.0, 0.0, 1.0))


def vec_close(a, b):
    return all(math.isclose(x, y, abs_tol=1e-9) for x, y in zip(a, b))
