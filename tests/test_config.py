import dataclasses
import math

import pytest

from curvemesh.config import (
    CURVEMESH_CONFIG,
    ConfigError,
    HeadphoneConfig,
    JointLimits,
    clear_cache,
    config_from_mapping,
    load_config,
)


@pytest.fixture(autouse=True)
def fresh_cache(monkeypatch):
    monkeypatch.delenv(CURVEMESH_CONFIG, raising=False)
    clear_cache()
    yield
    clear_cache()


def test_bundled_document_matches_defaults():
    assert load_config() == HeadphoneConfig()


def test_defaults():
    cfg = HeadphoneConfig()
    assert cfg.decimals == 5
    assert cfg.default_color == "black"
    assert set(cfg.palettes) == {"black", "white", "pink", "cream"}
    assert cfg.muff.radius == 3.5
    assert cfg.headband.point_count == 64
    assert cfg.palette("pink").body.albedo == (0.9, 0.6286, 0.6475)
    with pytest.raises(ConfigError):
        cfg.palette("purple")


def test_joint_limits_in_radians():
    muff_y = HeadphoneConfig().joints["muff_y"]
    assert math.isclose(muff_y.minimum, math.radians(20))
    assert math.isclose(muff_y.maximum, 110 * math.pi / 180)
    assert math.isclose(muff_y.speed, math.pi / 2000)
    extension = HeadphoneConfig().joints["extension"]
    assert math.isclose(extension.maximum, 1.5 * math.pi / 16)
    assert math.isclose(extension.speed, math.pi / 5000)


def test_override_file(tmp_path):
    doc = tmp_path / "override.yaml"
    doc.write_text(
        "muff:\n"
        "  radius: 3.8\n"
        "joints:\n"
        "  muff_y:\n"
        "    maximum_deg: 95\n"
        "palettes:\n"
        "  red:\n"
        "    body: {albedo: [0.6, 0.05, 0.05], reflection: [0.6, 0.1, 0.1]}\n"
        "    muff: {albedo: [0.3, 0.01, 0.01], reflection: [0.5, 0.5, 0.5]}\n"
    )
    cfg = load_config(doc)
    assert cfg.muff.radius == 3.8
    assert cfg.muff.base_thickness == 1.5
    assert cfg.joints["muff_y"] == JointLimits(20.0, 95.0, 0.09)
    assert cfg.joints["muff_x"] == HeadphoneConfig().joints["muff_x"]
    assert cfg.palette("red").muff.albedo == (0.3, 0.01, 0.01)
    assert "black" in cfg.palettes


def test_environment_variable(tmp_path, monkeypatch):
    doc = tmp_path / "env.yaml"
    doc.write_text("decimals: 3\ndefault_color: white\n")
    monkeypatch.setenv(CURVEMESH_CONFIG, str(doc))
    cfg = load_config()
    assert cfg.decimals == 3
    assert cfg.default_color == "white"


def test_explicit_path_wins_over_environment(tmp_path, monkeypatch):
    env_doc = tmp_path / "env.yaml"
    env_doc.write_text("decimals: 3\n")
    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("decimals: 4\n")
    monkeypatch.setenv(CURVEMESH_CONFIG, str(env_doc))
    assert load_config(explicit).decimals == 4


def test_documents_are_cached(tmp_path):
    doc = tmp_path / "cached.yaml"
    doc.write_text("decimals: 3\n")
    first = load_config(doc)
    doc.write_text("decimals: 2\n")
    assert load_config(doc) is first
    clear_cache()
    assert load_config(doc).decimals == 2


def test_empty_document(tmp_path):
    doc = tmp_path / "empty.yaml"
    doc.write_text("")
    assert load_config(doc) == HeadphoneConfig()


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml")


def test_malformed_yaml(tmp_path):
    doc = tmp_path / "bad.yaml"
    doc.write_text("muff: [radius\n")
    with pytest.raises(ConfigError):
        load_config(doc)


@pytest.mark.parametrize("data", [
    {"speakers": 2},
    {"muff": {"diameter": 7}},
    {"muff": {"radius": "big"}},
    {"muff": [1, 2]},
    {"joints": {"elbow": {"minimum_deg": 0}}},
    {"palettes": {"red": {"body": {"albedo": [1, 0, 0], "reflection": [1, 0, 0]}}}},
    {"palettes": {"red": {"body": {"albedo": [1, 0], "reflection": [1, 0, 0]},
                          "muff": {"albedo": [1, 0, 0], "reflection": [1, 0, 0]}}}},
    {"default_color": "purple"},
    {"initial_factors": {"elbow": 10}},
    {"initial_factors": {"muff_y": "lots"}},
    {"initial_factors": {"muff_y": True}},
    {"initial_factors": [1, 2]},
    {"decimals": -2},
    {"decimals": "many"},
    {"decimals": True},
    {"decimals": 2.5},
    {"default_color": 3},
    {"headband": {"point_count": 12.9}},
    {"headband": {"point_count": True}},
    {"muff": {"radius": True}},
    {"muff": {"radius": float("inf")}},
    {"joints": {"muff_y": {"maximum_deg": None}}},
])
def test_bad_documents(data):
    with pytest.raises(ConfigError):
        config_from_mapping(data)


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)


def test_initial_factors_override():
    cfg = config_from_mapping({"initial_factors": {"muff_y": 80}})
    assert cfg.initial_factors == {"muff_y": 80.0, "muff_x": 50.0, "extension": 50.0}


def test_whole_floats_accepted_for_counts():
    cfg = config_from_mapping({"headband": {"point_count": 48.0}, "decimals": 3.0})
    assert cfg.headband.point_count == 48
    assert isinstance(cfg.headband.point_count, int)
    assert cfg.decimals == 3


def test_integers_accepted_for_lengths():
    cfg = config_from_mapping({"muff": {"radius": 4}})
    assert cfg.muff.radius == 4.0
    assert isinstance(cfg.muff.radius, float)


def test_cached_config_is_read_only():
    cfg = load_config()
    with pytest.raises(TypeError):
        cfg.joints["muff_y"] = JointLimits(0.0, 1.0, 1.0)
    with pytest.raises(TypeError):
        cfg.initial_factors["muff_y"] = 99.0
    with pytest.raises(TypeError):
        del cfg.palettes["black"]
    assert load_config() is cfg
    assert load_config().joints["muff_y"] == JointLimits(20.0, 110.0, 0.09)


def test_replace_keeps_tables_read_only():
    cfg = dataclasses.replace(HeadphoneConfig(), decimals=2)
    assert cfg.decimals == 2
    assert cfg.palettes == HeadphoneConfig().palettes
    with pytest.raises(TypeError):
        cfg.initial_factors["extension"] = 0.0
