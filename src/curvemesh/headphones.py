"""Headphone part builders.

Every part is a stack of arcs stitched into ribbons, closed off with
fans or lofted grids and welded into a :class:`~curvemesh.mesh.MeshBuffer`.
All parts are built around the origin in their own frame; placing them
in the assembly is the job of :mod:`curvemesh.rig`.

Headband bars are described by a *profile*: a list of ``ArcBase``
entries (arc radius and z offset) that walk once around the bar's cross
section.  ``SideCounts`` splits that walk into the top, left, bottom
and right chains used to loft the bar's end caps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Sequence

from curvemesh import vec
from curvemesh.builder import MeshBuilder
from curvemesh.config import HeadbandParams, HeadphoneConfig, MuffParams
from curvemesh.curves import curve_ends, make_arc, make_circle, reverse_curve
from curvemesh.loft import grid_fill
from curvemesh.mesh import MeshBuffer
from curvemesh.ribbon import quads_from_lines
from curvemesh.vec import Vec3
from curvemesh.xform import rotate_points, scale_about, scale_points, translate_points

logger = logging.getLogger(__name__)

ORIGIN: Vec3 = (0.0, 0.0, 0.0)
X_AXIS: Vec3 = (1.0, 0.0, 0.0)
Y_AXIS: Vec3 = (0.0, 1.0, 0.0)
Z_AXIS: Vec3 = (0.0, 0.0, 1.0)


class ArcBase(NamedTuple):
    radius: float
    z: float


class SideCounts(NamedTuple):
    top: int
    left: int
    bottom: int
    right: int


@dataclass
class HeadbandMeshes:
    center: MeshBuffer
    left: MeshBuffer
    right: MeshBuffer
    inner: MeshBuffer
    cushion: MeshBuffer

    def items(self):
        return [("center", self.center), ("left", self.left), ("right", self.right),
                ("inner", self.inner), ("cushion", self.cushion)]


@dataclass
class MuffMeshes:
    base: MeshBuffer
    cushion: MeshBuffer
    brace: MeshBuffer
    buttons: List[MeshBuffer] = field(default_factory=list)

    def items(self):
        parts = [("base", self.base), ("cushion", self.cushion), ("brace", self.brace)]
        parts.extend((f"button{i}", b) for i, b in enumerate(self.buttons))
        return parts


def _finish(name: str, builder: MeshBuilder) -> MeshBuffer:
    buf = builder.build()
    logger.debug("built %s: %d points, %d triangles", name, len(buf.points), buf.triangle_count)
    return buf


def _lift(center: Sequence[float], dz: float) -> Vec3:
    return vec.add(center, (0.0, 0.0, dz))


## ear muff parts
## ---------------

def make_muff_base(center: Sequence[float], radius: float, thickness: float, *,
                   decimals: int = 5) -> MeshBuffer:
    """Cup shell: a short closed cylinder wall capped on the back."""

    point_count = 64 + 1
    front = make_arc(_lift(center, thickness / 2), radius, point_count, 0, 360)
    back = make_arc(_lift(center, -thickness / 2), radius, point_count, 0, 360)

    builder = MeshBuilder(decimals)
    builder.add_ribbon(front, back)
    builder.add_fan(back)
    return _finish("muff base", builder)


def make_muff_buttons(center: Sequence[float], radius: float, thickness: float,
                      amount: int, total_angle: float, gap_angle: float, *,
                      decimals: int = 5) -> List[MeshBuffer]:
    """Row of ``amount`` curved buttons on the rim of the cup.

    The row spans ``total_angle`` degrees centred on the bottom of the
    cup (270 degrees) with ``gap_angle`` degrees between neighbours.
    """

    if amount < 1:
        raise ValueError('need at least one button, got {}'.format(amount))

    points_per_button = 64 * (total_angle / 360)
    angle_per_button = (total_angle - gap_angle * (amount - 1)) / amount
    start_angle = 270 - total_angle / 2

    # (radius factor, z offset) of the seven profile arcs of a button
    profile = [
        (0.98, thickness / 2),
        (1.01, thickness / 2),
        (1.04, thickness / 2),
        (1.04, -thickness / 3),
        (1.04, -thickness / 2),
        (1.01, -thickness / 2),
        (0.98, -thickness / 2),
    ]

    buttons = []
    for i in range(amount):
        button_start = start_angle + angle_per_button * i + gap_angle * i
        button_end = start_angle + angle_per_button * (i + 1) + gap_angle * i

        arcs = [make_arc(_lift(center, dz), radius * k, points_per_button, button_start, button_end)
                for k, dz in profile]

        builder = MeshBuilder(decimals)
        for a, b in zip(arcs, arcs[1:]):
            builder.add_ribbon(a, b)
        builder.add_fan(curve_ends(arcs, -1), reverse=True)
        builder.add_fan(curve_ends(arcs, 0))
        buttons.append(_finish(f"muff button {i}", builder))

    return buttons


def _brace_cap(pivot: Vec3, thickness: float, cap_point_count: int) -> List[Vec3]:
    # half circle standing across the end of the yoke
    cap = make_arc(pivot, thickness / 2, cap_point_count, 180, 360)
    return rotate_points(cap, pivot, Y_AXIS, 90)


def make_muff_brace(center: Sequence[float], radius: float, thickness: float,
                    width: float, *, decimals: int = 5) -> MeshBuffer:
    """Half-ring yoke holding the cup, with a screw post on top.

    The yoke is a closed tube of ten semicircular arcs.  A small window
    is cut from the middle of its outer face and the screw post rises
    from the rim of that window: its base loop is lifted and shrunk, then
    bridged to a tilted circle and a short cylinder.
    """

    point_count = 55
    cap_point_count = 15
    outer = radius * 1.1

    arc_top_center = make_arc(center, outer, point_count, 0, 180)
    arc_bottom_center = make_arc(center, radius, point_count, 0, 180)

    def _ring(r, dz):
        return make_arc(_lift(center, dz), r, point_count, 0, 180)

    main_arcs = [
        _ring(outer, -thickness / 2),
        _ring(outer, -thickness / 4),
        arc_top_center,
        _ring(outer, thickness / 4),
        _ring(outer, thickness / 2),
        _ring(radius, thickness / 2),
        _ring(radius, thickness / 4),
        arc_bottom_center,
        _ring(radius, -thickness / 4),
        _ring(radius, -thickness / 2),
    ]

    half = len(main_arcs) // 2
    top_arcs = main_arcs[:half]
    center_top_arcs = top_arcs[1:-1]
    bottom_arcs = main_arcs[half:]
    center_bottom_arcs = bottom_arcs[1:-1]

    cap_arcs_front = [_brace_cap(arc_top_center[-1], thickness, cap_point_count),
                      _brace_cap(arc_bottom_center[-1], thickness, cap_point_count)]
    cap_arcs_back = [_brace_cap(arc_top_center[0], thickness, cap_point_count),
                     _brace_cap(arc_bottom_center[0], thickness, cap_point_count)]

    # ribbon i joins arc i to arc i+1, wrapping around the cross section
    ribbons = [quads_from_lines(main_arcs[(i + 1) % len(main_arcs)], arc)
               for i, arc in enumerate(main_arcs)]
    # cut the window for the screw post out of the outer ribbons
    slice_at = len(ribbons[0]) // 2
    for i in range(half - 1):
        del ribbons[i][slice_at - 2:slice_at + 2]

    mid = len(center_top_arcs[0]) // 2
    lo, hi = mid - 2, mid + 2

    screw_base = (reverse_curve(top_arcs[0][lo:hi + 1])
                  + [arc[lo] for arc in center_top_arcs]
                  + list(top_arcs[-1][lo:hi + 1])
                  + reverse_curve([arc[hi] for arc in center_top_arcs]))
    screw_base.append(screw_base[0])

    level = screw_base[0][1] + width / 3
    lower = [(p[0], level, p[2]) for p in screw_base]
    lower_center = vec.add(vec.centroid(lower[:-1]), (0.0, 0.2, 0.0))
    lower = [scale_about(p, lower_center, 0.7) for p in lower]

    upper_center = vec.add(lower_center, (0.0, width / 3, 0.0))
    upper = make_circle(upper_center, width / 2, 17)
    upper = rotate_points(upper, upper_center, X_AXIS, 90)
    upper = rotate_points(upper, upper_center, Y_AXIS, 180 - 45)

    top = translate_points(upper, (0.0, width / 2, 0.0))

    builder = MeshBuilder(decimals)
    for ribbon in ribbons:
        builder.add_quads(ribbon)
    builder.add_ribbon(cap_arcs_front[1], cap_arcs_front[0])
    builder.add_ribbon(cap_arcs_back[0], cap_arcs_back[1])
    builder.add_ribbon(screw_base, lower)
    builder.add_ribbon(lower, upper)
    builder.add_ribbon(upper, top)

    builder.add_fan(cap_arcs_front[0] + curve_ends(center_top_arcs, -1))
    builder.add_fan(cap_arcs_back[0] + curve_ends(center_top_arcs, 0), reverse=True)
    builder.add_fan(cap_arcs_back[1] + curve_ends(center_bottom_arcs, 0))
    builder.add_fan(cap_arcs_front[1] + curve_ends(center_bottom_arcs, -1), reverse=True)
    return _finish("muff brace", builder)


def make_muff_cushion(center: Sequence[float], radius: float, thickness: float, *,
                      decimals: int = 5) -> MeshBuffer:
    """Ear pad: a half torus swept around the cup, skirted and capped.

    Each cross section is a partial circle (-60 to 180 degrees) turned to
    face outward from the cup axis, extended by a straight skirt of
    depth ``thickness`` and squashed to 0.8 along z.
    """

    point_count = 64 + 1
    sub_point_count = 16
    sub_radius = radius * 0.3

    base_arc = make_arc(center, radius * 1.075 - sub_radius, point_count, 0, 360)

    sections = []
    for index, sub_center in enumerate(base_arc):
        arc = make_arc(sub_center, sub_radius, sub_point_count, -60, 180)
        outward = vec.normalize(vec.sub(sub_center, center))
        arc = rotate_points(arc, sub_center, Z_AXIS, (360 / (point_count - 1)) * index)
        arc = rotate_points(arc, center, outward, 90)

        last = arc[-1]
        arc = arc + [vec.add(last, (0.0, 0.0, -thickness / 4)),
                     vec.add(last, (0.0, 0.0, -thickness / 4 * 3)),
                     vec.add(last, (0.0, 0.0, -thickness))]
        arc = translate_points(arc, (0.0, 0.0, -thickness / 5))
        sections.append(scale_points(arc, center, (1.0, 1.0, 0.8)))

    builder = MeshBuilder(decimals)
    for i, arc in enumerate(sections):
        builder.add_ribbon(arc, sections[(i + 1) % len(sections)])
    builder.add_fan(curve_ends(sections, -1), reverse=True)
    return _finish("muff cushion", builder)


def make_muff(params: Optional[MuffParams] = None, has_buttons: bool = False, *,
              decimals: int = 5) -> MuffMeshes:
    """Build every mesh of one ear muff around the origin."""

    if params is None:
        params = MuffParams()
    center = ORIGIN
    r = params.radius

    base = make_muff_base(center, r, params.base_thickness, decimals=decimals)
    cushion = make_muff_cushion(center, r, params.cushion_thickness, decimals=decimals)
    brace = make_muff_brace(center, r * 1.01, params.brace_thickness, params.brace_width,
                            decimals=decimals)
    buttons = []
    if has_buttons:
        buttons = make_muff_buttons(center, r, params.base_thickness / 3,
                                    params.button_count, params.button_total_angle,
                                    params.button_gap_angle, decimals=decimals)
    return MuffMeshes(base=base, cushion=cushion, brace=brace, buttons=buttons)


## headband parts
## --------------

def _side_chains(arcs: Sequence[Sequence[Vec3]], counts: SideCounts, index: int):
    t, l, b, r = counts
    top = arcs[:t]
    left = arcs[t:t + l]
    bottom = arcs[t + l:t + l + b]
    right = arcs[t + l + b:t + l + b + r]
    return (reverse_curve(curve_ends(top, index)),
            curve_ends(bottom, index),
            reverse_curve(curve_ends(left, index)),
            curve_ends(right, index))


def make_headband_bar(profile: Sequence[ArcBase], counts: SideCounts,
                      start_angle: float, end_angle: float, *,
                      point_count: int = 64, decimals: int = 5) -> MeshBuffer:
    """Curved bar swept along an arc from ``start_angle`` to ``end_angle``.

    The profile arcs form a closed tube; both open ends are lofted shut
    with :func:`~curvemesh.loft.grid_fill`, the far one wound the other
    way so both caps face outward.
    """

    if sum(counts) != len(profile):
        raise ValueError('side counts {} do not cover a profile of {} arcs'
                         .format(tuple(counts), len(profile)))

    arcs = [make_arc((0.0, 0.0, base.z), base.radius, point_count, start_angle, end_angle)
            for base in profile]

    near = grid_fill(*_side_chains(arcs, counts, 0))
    far = grid_fill(*_side_chains(arcs, counts, len(arcs[0]) - 1))

    builder = MeshBuilder(decimals)
    builder.add_ribbons(arcs, closed=True)
    builder.add_grid(near)
    builder.add_grid(far, reverse=True)
    return _finish("headband bar", builder)


def make_headband_cushion(bases: Sequence[ArcBase], start_angle: float, end_angle: float, *,
                          point_count: int = 64, decimals: int = 5) -> MeshBuffer:
    """Pad under the headband: a sagging strip with a flared rim."""

    top_base, bottom_base = bases[0], bases[1]
    drop = (0.0, -(top_base.radius / 20), 0.0)

    def _arc(base_z, r):
        return translate_points(make_arc((0.0, 0.0, base_z), r, point_count, start_angle, end_angle), drop)

    top_arc = _arc(top_base.z, top_base.radius)
    bottom_arc = _arc(bottom_base.z, bottom_base.radius)

    z_difference = top_arc[0][2] - bottom_arc[0][2]
    inner_count = point_count // 16
    inner_arcs = [_arc(top_base.z - (z_difference / (inner_count + 1)) * (i + 1), top_base.radius)
                  for i in range(inner_count)]

    strip = [top_arc] + inner_arcs + [bottom_arc]

    bottom_edge = (list(top_arc)
                   + curve_ends(inner_arcs, -1)
                   + reverse_curve(bottom_arc)
                   + reverse_curve(curve_ends(inner_arcs, 0))
                   + [top_arc[0]])
    top_edge = scale_points(translate_points(bottom_edge, (0.0, top_base.radius / 20, 0.0)),
                            ORIGIN, (1.1, 1.0, 1.1))

    builder = MeshBuilder(decimals)
    builder.add_ribbons(strip)
    builder.add_ribbon(bottom_edge, top_edge)
    return _finish("headband cushion", builder)


def headband_profiles(params: HeadbandParams):
    """Return the ``(profile, counts)`` pairs of the headband bars and
    the two cushion bases."""

    r, z = params.radius, params.z

    def _loop(inner, mid, outer):
        return [
            ArcBase(inner, z), ArcBase(inner, z * 0.8), ArcBase(inner, 0.0),
            ArcBase(inner, -z * 0.8), ArcBase(inner, -z),
            ArcBase(mid, -z),
            ArcBase(outer, -z), ArcBase(outer, -z * 0.8), ArcBase(outer, 0.0),
            ArcBase(outer, z * 0.8), ArcBase(outer, z),
            ArcBase(mid, z),
        ]

    sides = _loop(r, r * 1.05, r * 1.1)
    center = _loop(r * 1.02, r * 1.05, r * 1.08)
    loop_counts = SideCounts(top=5, left=1, bottom=5, right=1)

    inner = [
        ArcBase(r * 1.04, z * 0.8),
        ArcBase(r * 1.04, -z * 0.8),
        ArcBase(r * 1.06, -z * 0.8),
        ArcBase(r * 1.06, z * 0.8),
    ]
    inner_counts = SideCounts(top=2, left=0, bottom=2, right=0)

    cushion = [ArcBase(center[0].radius, center[0].z * 0.75),
               ArcBase(center[loop_counts.top - 1].radius, center[loop_counts.top - 1].z * 0.6)]

    return {
        "sides": (sides, loop_counts),
        "center": (center, loop_counts),
        "inner": (inner, inner_counts),
        "cushion": cushion,
    }


def make_headband(params: Optional[HeadbandParams] = None, *, decimals: int = 5) -> HeadbandMeshes:
    """Build the five headband meshes.

    The side bars sit at either end of the band, the centre bar between
    them and the inner bar runs underneath the full span.
    """

    if params is None:
        params = HeadbandParams()
    profiles = headband_profiles(params)
    gap = params.gap_size
    left_start = params.left_start
    right_start = params.right_start
    side = params.side_bar_size
    n = params.point_count

    center = make_headband_bar(*profiles["center"], left_start + side + gap, right_start - side - gap,
                               point_count=n, decimals=decimals)
    right = make_headband_bar(*profiles["sides"], left_start, left_start + side,
                              point_count=n, decimals=decimals)
    left = make_headband_bar(*profiles["sides"], right_start - side, right_start,
                             point_count=n, decimals=decimals)
    inner = make_headband_bar(*profiles["inner"], left_start + gap, right_start - gap,
                              point_count=n, decimals=decimals)
    cushion = make_headband_cushion(profiles["cushion"], left_start + side + gap * 5,
                                    right_start - side - gap * 5, point_count=n, decimals=decimals)
    return HeadbandMeshes(center=center, left=left, right=right, inner=inner, cushion=cushion)


def make_headphones(config: Optional[HeadphoneConfig] = None):
    """Build the headband and both muffs; the right muff carries the
    buttons.  Returns ``(headband, left_muff, right_muff)``."""

    if config is None:
        config = HeadphoneConfig()
    headband = make_headband(config.headband, decimals=config.decimals)
    left = make_muff(config.muff, has_buttons=False, decimals=config.decimals)
    right = make_muff(config.muff, has_buttons=True, decimals=config.decimals)
    logger.info("built headphone meshes: %d parts",
                len(headband.items()) + len(left.items()) + len(right.items()))
    return headband, left, right


__all__ = [
    "ArcBase",
    "SideCounts",
    "HeadbandMeshes",
    "MuffMeshes",
    "make_muff_base",
    "make_muff_buttons",
    "make_muff_brace",
    "make_muff_cushion",
    "make_muff",
    "make_headband_bar",
    "make_headband_cushion",
    "headband_profiles",
    "make_headband",
    "make_headphones",
]
