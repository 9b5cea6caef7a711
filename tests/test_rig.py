import logging
import math

import pytest

from curvemesh import vec
from curvemesh.config import HeadphoneConfig
from curvemesh.mesh import make_mesh
from curvemesh.rig import (
    CUSHION,
    Node,
    Rig,
    UiIntent,
    build_rig,
    world_bbox,
)

SQUARE = [
    (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0),
    (0.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0),
]


@pytest.fixture
def rig():
    return build_rig(HeadphoneConfig())


class TestNode:
    """transform node hierarchy"""

    def test_local_matrix(self):
        node = Node("n")
        node.position = (1.0, 2.0, 3.0)
        assert vec.vclose(node.local_matrix().mul((0, 0, 0)), (1, 2, 3))
        node.scaling = (2.0, 1.0, 1.0)
        assert vec.vclose(node.local_matrix().mul((1, 0, 0)), (3, 2, 3))

    def test_rotation_order(self):
        node = Node("n")
        node.set_rotation(y=math.pi / 2)
        assert vec.vclose(node.local_matrix().mul((0, 0, 1)), (1, 0, 0))
        node.set_rotation(x=math.pi / 2)
        assert node.rotation == (math.pi / 2, math.pi / 2, 0.0)

    def test_parent_chain(self):
        parent = Node("parent")
        parent.set_rotation(z=math.pi / 2)
        child = Node("child", parent=parent)
        child.position = (1.0, 0.0, 0.0)
        assert vec.vclose(child.world_matrix().mul((0, 0, 0)), (0, 1, 0))
        assert parent.children == [child]
        assert [n.name for n in parent.iter_tree()] == ["parent", "child"]

    def test_reparent(self):
        a, b = Node("a"), Node("b")
        child = Node("child", parent=a)
        child.set_parent(b)
        assert a.children == []
        assert b.children == [child]
        with pytest.raises(ValueError):
            b.set_parent(child)

    def test_world_points(self):
        node = Node("n", make_mesh(SQUARE))
        node.position = (0.0, 0.0, 1.0)
        assert all(p[2] == 1.0 for p in node.world_points())
        assert Node("empty").world_points() == []


def test_rig_structure(rig):
    assert isinstance(rig, Rig)
    names = [n.name for n in rig.nodes()]
    assert names[0] == "headband_inner"
    # five headband meshes, two muffs of root/brace/base/cushion, three buttons
    assert len(names) == 5 + 4 + 4 + 3
    assert rig.left_muff.root.parent is rig.headband.left
    assert rig.right_muff.root.parent is rig.headband.right
    assert len(rig.right_muff.buttons) == 3
    assert rig.left_muff.buttons == []
    assert rig.find("right_muff_cushion").material == CUSHION
    with pytest.raises(KeyError):
        rig.find("speaker")


def test_rig_rest_pose(rig):
    assert rig.headband.inner.position == (0.0, 4.0, 0.0)
    assert rig.left_muff.root.position == (-4.9, -5.04, 0.0)
    assert rig.right_muff.root.position == (4.9, -5.04, 0.0)
    assert rig.left_muff.root.scaling == (0.75, 0.75 * 1.1, 0.75)
    assert math.isclose(rig.left_muff.root.rotation[1], math.pi / 2)
    assert math.isclose(rig.right_muff.root.rotation[1], -math.pi / 2)
    assert rig.left_muff.cushion.position == (0.0, 0.0, 1.5)
    assert math.isclose(rig.left_muff.base.rotation[0], math.pi / 16)


def test_joints_start_at_zero(rig):
    for name, joint in rig.joints.items():
        assert joint.current == 0.0
        assert joint.real == -rig.config.joints[name].minimum


def test_tick_drives_joints(rig):
    intent = UiIntent(muff_y=100, muff_x=100, extension=100)
    for _ in range(200):
        rig.tick(intent, 16)

    muff_y = rig.joints["muff_y"]
    assert math.isclose(muff_y.current, math.radians(110))
    assert rig.left_muff.brace.rotation[1] == muff_y.real
    assert rig.right_muff.brace.rotation[1] == -muff_y.real

    muff_x = rig.joints["muff_x"].real
    assert rig.left_muff.base.rotation[0] == muff_x
    assert rig.right_muff.base.rotation[0] == muff_x

    extension = rig.joints["extension"].real
    assert math.isclose(extension, 1.5 * math.pi / 16)
    assert rig.headband.left.rotation[2] == extension
    assert rig.headband.right.rotation[2] == -extension


def test_tick_writes_this_frames_values(rig):
    rig.tick(UiIntent(muff_y=50), 16)
    step = math.pi / 2000 * 16
    assert math.isclose(rig.left_muff.brace.rotation[1], step - math.radians(20))


def test_zero_tick_changes_nothing(rig):
    rig.tick(UiIntent(), 16)
    before = {n.name: n.rotation for n in rig.nodes()}
    rig.tick(UiIntent(), 0)
    assert {n.name: n.rotation for n in rig.nodes()} == before


def test_color_switch(rig):
    assert rig.materials.active_color == "black"
    rig.tick(UiIntent(color="pink"), 16)
    pink = rig.config.palettes["pink"]
    assert rig.materials.active_color == "pink"
    assert rig.materials.body == pink.body
    assert rig.materials.cushion == pink.muff

    colors = {node.name: color for node, _, color in rig.drawables()}
    assert colors["left_muff_cushion"] == pink.muff
    assert colors["headband_center"] == pink.body


def test_unknown_color_is_ignored(rig, caplog):
    with caplog.at_level(logging.WARNING, logger="curvemesh.rig"):
        rig.tick(UiIntent(color="purple"), 16)
        rig.tick(UiIntent(color="purple"), 16)
    assert rig.materials.active_color == "black"
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "purple" in warnings[0].getMessage()


def test_default_intent(rig):
    intent = rig.default_intent()
    assert intent == UiIntent(color="black", muff_y=20.0, muff_x=50.0, extension=50.0)


def test_drawables_and_bbox(rig):
    drawables = list(rig.drawables())
    # the two muff roots carry no mesh
    assert len(drawables) == len(list(rig.nodes())) - 2
    lo, hi = world_bbox(rig)
    assert all(math.isfinite(c) for c in lo + hi)
    # the muffs hang symmetrically below the band
    assert math.isclose(lo[0], -hi[0], abs_tol=1e-3)
    assert lo[1] < 0 < hi[1]
