"""Scene hierarchy and per-frame update for the headphone model.

The rig owns the built meshes, the transform node tree that places
them, the material colors and the joint trackers.  It has no loop of
its own: the host's frame driver calls :meth:`Rig.tick` once per frame,
before drawing, with a :class:`UiIntent` snapshot of the user controls
and the elapsed time in milliseconds.

Within a tick the palette is applied first, then every tracker is
advanced, then the joint rotations are written.  A renderer reading
``node.world_matrix()`` after ``tick`` returns always sees this frame's
joint values.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from curvemesh import vec
from curvemesh.config import Color, HeadphoneConfig, Palette
from curvemesh.headphones import HeadbandMeshes, MuffMeshes, make_headband, make_muff
from curvemesh.mesh import MeshBuffer
from curvemesh.tracker import AnimatedParameter
from curvemesh.vec import Vec3
from curvemesh.xform import Matrix, Rotation, Scale, Translation, transform_points

logger = logging.getLogger(__name__)

BODY = "body"
CUSHION = "cushion"


class Node:
    """Transform node, optionally carrying a mesh.

    ``rotation`` holds Euler angles in radians.  The local transform is
    ``T * Ry * Rx * Rz * S``: scale first, then roll about z, pitch
    about x, yaw about y, then translate.
    """

    def __init__(self, name: str, mesh: Optional[MeshBuffer] = None,
                 parent: Optional["Node"] = None, material: Optional[str] = None):
        self.name = name
        self.mesh = mesh
        self.material = material
        self.position: Vec3 = (0.0, 0.0, 0.0)
        self.rotation: Vec3 = (0.0, 0.0, 0.0)
        self.scaling: Vec3 = (1.0, 1.0, 1.0)
        self.children: List["Node"] = []
        self.parent: Optional["Node"] = None
        if parent is not None:
            self.set_parent(parent)

    def __repr__(self):
        return "Node({!r})".format(self.name)

    def set_parent(self, parent: Optional["Node"]) -> None:
        node = parent
        while node is not None:
            if node is self:
                raise ValueError('{} cannot be parented under its own descendant'.format(self.name))
            node = node.parent
        if self.parent is not None:
            self.parent.children.remove(self)
        self.parent = parent
        if parent is not None:
            parent.children.append(self)

    def set_rotation(self, x: Optional[float] = None, y: Optional[float] = None,
                     z: Optional[float] = None) -> None:
        rx, ry, rz = self.rotation
        self.rotation = (rx if x is None else x, ry if y is None else y, rz if z is None else z)

    def local_matrix(self) -> Matrix:
        rx, ry, rz = (math.degrees(a) for a in self.rotation)
        M = Translation(self.position)
        M = M.mul(Rotation((0, 1, 0), ry))
        M = M.mul(Rotation((1, 0, 0), rx))
        M = M.mul(Rotation((0, 0, 1), rz))
        return M.mul(Scale(self.scaling))

    def world_matrix(self) -> Matrix:
        if self.parent is None:
            return self.local_matrix()
        return self.parent.world_matrix().mul(self.local_matrix())

    def world_points(self) -> List[Vec3]:
        if self.mesh is None:
            return []
        return transform_points(self.mesh.points, self.world_matrix())

    def iter_tree(self) -> Iterator["Node"]:
        yield self
        for child in self.children:
            yield from child.iter_tree()


@dataclass(frozen=True)
class UiIntent:
    """What the user controls ask for, sampled once per frame.

    Factors are percentages in ``[0, 100]``; out-of-range values are
    clamped by the trackers.
    """

    color: str = "black"
    muff_y: float = 20.0
    muff_x: float = 50.0
    extension: float = 50.0


@dataclass
class MaterialState:
    body: Color
    cushion: Color
    active_color: str

    def apply(self, name: str, palette: Palette) -> None:
        self.body = palette.body
        self.cushion = palette.muff
        self.active_color = name


@dataclass
class MuffNodes:
    root: Node
    base: Node
    cushion: Node
    brace: Node
    buttons: List[Node] = field(default_factory=list)


@dataclass
class HeadbandNodes:
    inner: Node
    center: Node
    left: Node
    right: Node
    cushion: Node


def _headband_nodes(meshes: HeadbandMeshes, lift: float) -> HeadbandNodes:
    inner = Node("headband_inner", meshes.inner, material=BODY)
    inner.position = (0.0, lift, 0.0)
    nodes = HeadbandNodes(
        inner=inner,
        center=Node("headband_center", meshes.center, inner, BODY),
        left=Node("headband_left", meshes.left, inner, BODY),
        right=Node("headband_right", meshes.right, inner, BODY),
        cushion=Node("headband_cushion", meshes.cushion, inner, CUSHION),
    )
    return nodes


def _muff_nodes(name: str, meshes: MuffMeshes, base_thickness: float,
                base_tilt: float) -> MuffNodes:
    root = Node(name)
    brace = Node(f"{name}_brace", meshes.brace, root, BODY)
    base = Node(f"{name}_base", meshes.base, brace, BODY)
    base.set_rotation(x=base_tilt)
    cushion = Node(f"{name}_cushion", meshes.cushion, base, CUSHION)
    cushion.position = (0.0, 0.0, base_thickness)
    buttons = [Node(f"{name}_button{i}", b, base, BODY) for i, b in enumerate(meshes.buttons)]
    return MuffNodes(root=root, base=base, cushion=cushion, brace=brace, buttons=buttons)


class Rig:
    """Assembled headphones plus the state that animates them."""

    def __init__(self, config: HeadphoneConfig, headband: HeadbandNodes,
                 left_muff: MuffNodes, right_muff: MuffNodes):
        self.config = config
        self.headband = headband
        self.left_muff = left_muff
        self.right_muff = right_muff

        palette = config.palette(config.default_color)
        self.materials = MaterialState(body=palette.body, cushion=palette.muff,
                                       active_color=config.default_color)
        self._rejected_color: Optional[str] = None

        self.joints: Dict[str, AnimatedParameter] = {
            name: AnimatedParameter(minimum=limits.minimum, maximum=limits.maximum,
                                    speed=limits.speed)
            for name, limits in config.joints.items()
        }

    @property
    def root(self) -> Node:
        return self.headband.inner

    def default_intent(self) -> UiIntent:
        f = self.config.initial_factors
        return UiIntent(color=self.config.default_color, muff_y=f["muff_y"],
                        muff_x=f["muff_x"], extension=f["extension"])

    def nodes(self) -> Iterator[Node]:
        return self.root.iter_tree()

    def find(self, name: str) -> Node:
        for node in self.nodes():
            if node.name == name:
                return node
        raise KeyError(name)

    def drawables(self) -> Iterator[Tuple[Node, Matrix, Color]]:
        """Yield ``(node, world_matrix, color)`` for every mesh node."""
        for node in self.nodes():
            if node.mesh is None:
                continue
            color = self.materials.cushion if node.material == CUSHION else self.materials.body
            yield node, node.world_matrix(), color

    def _apply_color(self, name: str) -> None:
        if name == self.materials.active_color:
            return
        palette = self.config.palettes.get(name)
        if palette is None:
            if name != self._rejected_color:
                logger.warning("ignoring unknown color %r, keeping %r",
                               name, self.materials.active_color)
                self._rejected_color = name
            return
        self.materials.apply(name, palette)
        self._rejected_color = None
        logger.debug("switched palette to %s", name)

    def tick(self, intent: UiIntent, delta_ms: float) -> None:
        """Advance the rig by one frame of ``delta_ms`` milliseconds."""

        self._apply_color(intent.color)

        muff_y = self.joints["muff_y"].update(intent.muff_y, delta_ms)
        muff_x = self.joints["muff_x"].update(intent.muff_x, delta_ms)
        extension = self.joints["extension"].update(intent.extension, delta_ms)

        self.left_muff.brace.set_rotation(y=muff_y)
        self.right_muff.brace.set_rotation(y=-muff_y)

        self.left_muff.base.set_rotation(x=muff_x)
        self.right_muff.base.set_rotation(x=muff_x)

        self.headband.left.set_rotation(z=extension)
        self.headband.right.set_rotation(z=-extension)


def build_rig(config: Optional[HeadphoneConfig] = None) -> Rig:
    """Build every mesh and assemble the headphones.

    The left muff hangs from the left headband bar and the right muff,
    which carries the buttons, from the right one.
    """

    if config is None:
        config = HeadphoneConfig()
    asm = config.assembly
    muff = config.muff

    headband = _headband_nodes(make_headband(config.headband, decimals=config.decimals),
                               asm.headband_lift)

    base_tilt = math.radians(asm.base_tilt_deg)
    left = _muff_nodes("left_muff", make_muff(muff, has_buttons=False, decimals=config.decimals),
                       muff.base_thickness, base_tilt)
    right = _muff_nodes("right_muff", make_muff(muff, has_buttons=True, decimals=config.decimals),
                        muff.base_thickness, base_tilt)

    scaling = (asm.muff_scale, asm.muff_scale * asm.muff_y_stretch, asm.muff_scale)
    turn = math.radians(asm.muff_turn_deg)
    tilt = math.radians(asm.muff_tilt_deg)

    left.root.set_parent(headband.left)
    left.root.position = (-asm.muff_x, asm.muff_y, 0.0)
    left.root.scaling = scaling
    left.root.rotation = (tilt, turn, 0.0)

    right.root.set_parent(headband.right)
    right.root.position = (asm.muff_x, asm.muff_y, 0.0)
    right.root.scaling = scaling
    right.root.rotation = (tilt, -turn, 0.0)

    rest = config.joints["extension"].maximum
    headband.left.set_rotation(z=rest)
    headband.right.set_rotation(z=-rest)

    rig = Rig(config, headband, left, right)
    logger.info("assembled rig with %d nodes", sum(1 for _ in rig.nodes()))
    return rig


def world_bbox(rig: Rig) -> Tuple[Vec3, Vec3]:
    """Bounding box of every mesh in world space."""
    lo = [math.inf] * 3
    hi = [-math.inf] * 3
    for node in rig.nodes():
        for p in node.world_points():
            for k in range(3):
                lo[k] = min(lo[k], p[k])
                hi[k] = max(hi[k], p[k])
    if lo[0] == math.inf:
        raise ValueError('rig has no geometry')
    return vec.point(lo), vec.point(hi)


__all__ = [
    "Node",
    "UiIntent",
    "MaterialState",
    "MuffNodes",
    "HeadbandNodes",
    "Rig",
    "build_rig",
    "world_bbox",
]
