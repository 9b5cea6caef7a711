# -*- coding: utf-8 -*-
"""Procedural curve-to-mesh construction kernel.

The building blocks are re-exported here::

    from curvemesh import make_arc, MeshBuilder

    ring = make_arc((0, 0, 0), 1.0, 33, 0, 360)
"""
import logging

from importlib.metadata import PackageNotFoundError, version

from curvemesh.builder import MeshBuilder
from curvemesh.curves import make_arc, make_circle
from curvemesh.loft import grid_fill, unbalanced_grid_fill
from curvemesh.mesh import MeshBuffer, compute_normals, index_points, make_mesh
from curvemesh.ribbon import quads_from_lines, reverse_quad, reverse_quads
from curvemesh.tracker import AnimatedParameter, PingPongParameter
from curvemesh.triangulate import make_triangle_fan, triangulate_quad

try:
    __version__ = version("curvemesh")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "MeshBuilder",
    "MeshBuffer",
    "make_arc",
    "make_circle",
    "quads_from_lines",
    "reverse_quad",
    "reverse_quads",
    "triangulate_quad",
    "make_triangle_fan",
    "grid_fill",
    "unbalanced_grid_fill",
    "index_points",
    "compute_normals",
    "make_mesh",
    "AnimatedParameter",
    "PingPongParameter",
]
