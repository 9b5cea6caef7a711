"""Headphone shape parameters, joint limits and color palettes.

The dataclass defaults describe the stock headphone model.  A YAML
document can override any subset of them.  Documents are searched for
in this order:

    1. an explicit path passed to :func:`load_config`
    2. the path named by the ``CURVEMESH_CONFIG`` environment variable
    3. the bundled ``curvemesh/data/headphones.yaml``

Example override::

    muff:
      radius: 3.8
    joints:
      muff_y:
        maximum_deg: 95
    palettes:
      red:
        body: {albedo: [0.6, 0.05, 0.05], reflection: [0.6, 0.1, 0.1]}
        muff: {albedo: [0.3, 0.01, 0.01], reflection: [0.5, 0.5, 0.5]}
"""

from __future__ import annotations

import dataclasses
import logging
import math
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

__all__ = [
    "CURVEMESH_CONFIG",
    "ConfigError",
    "Color",
    "Palette",
    "HeadbandParams",
    "MuffParams",
    "AssemblyParams",
    "JointLimits",
    "HeadphoneConfig",
    "load_config",
    "config_from_mapping",
    "clear_cache",
]

# Environment variable naming an override document
CURVEMESH_CONFIG = "CURVEMESH_CONFIG"

_BUNDLED_CONFIG = Path(__file__).parent / "data" / "headphones.yaml"

RGB = Tuple[float, float, float]


class ConfigError(ValueError):
    """Raised for unreadable or inconsistent configuration documents."""


@dataclass(frozen=True)
class Color:
    albedo: RGB
    reflection: RGB


@dataclass(frozen=True)
class Palette:
    body: Color
    muff: Color


@dataclass(frozen=True)
class HeadbandParams:
    radius: float = 5.5
    z: float = 0.75
    point_count: int = 64
    gap_size: float = 2.0
    left_start: float = -15.0
    right_start: float = 195.0
    side_bar_size: float = 60.0


@dataclass(frozen=True)
class MuffParams:
    radius: float = 3.5
    base_thickness: float = 1.5
    cushion_thickness: float = 1.5
    brace_thickness: float = 1.0
    brace_width: float = 0.5
    button_count: int = 3
    button_total_angle: float = 72.0
    button_gap_angle: float = 3.0


@dataclass(frozen=True)
class AssemblyParams:
    headband_lift: float = 4.0
    muff_x: float = 4.9
    muff_y: float = -5.04
    muff_scale: float = 0.75
    muff_y_stretch: float = 1.1
    muff_turn_deg: float = 90.0
    muff_tilt_deg: float = -11.25
    base_tilt_deg: float = 11.25


@dataclass(frozen=True)
class JointLimits:
    """Joint range in degrees and rate in degrees per millisecond."""

    minimum_deg: float
    maximum_deg: float
    speed_deg_per_ms: float

    @property
    def minimum(self) -> float:
        return math.radians(self.minimum_deg)

    @property
    def maximum(self) -> float:
        return math.radians(self.maximum_deg)

    @property
    def speed(self) -> float:
        return math.radians(self.speed_deg_per_ms)


def _default_joints() -> Dict[str, JointLimits]:
    return {
        "muff_y": JointLimits(20.0, 110.0, 0.09),
        "muff_x": JointLimits(5.0, 50.0, 0.09),
        "extension": JointLimits(0.0, 16.875, 0.036),
    }


def _default_palettes() -> Dict[str, Palette]:
    return {
        "black": Palette(body=Color((0.05, 0.05, 0.05), (0.5, 0.5, 0.5)),
                         muff=Color((0.01, 0.01, 0.01), (0.5, 0.5, 0.5))),
        "white": Palette(body=Color((0.8, 0.8, 0.8), (0.8, 0.8, 0.8)),
                         muff=Color((1.0, 1.0, 1.0), (1.0, 1.0, 1.0))),
        "pink": Palette(body=Color((0.9, 0.6286, 0.6475), (0.9, 0.6286, 0.6475)),
                        muff=Color((1.0, 0.898, 0.925), (1.0, 0.898, 0.925))),
        "cream": Palette(body=Color((0.8928, 0.8856, 0.5817), (0.8928, 0.8856, 0.5817)),
                         muff=Color((0.992, 0.984, 0.831), (0.992, 0.984, 0.831))),
    }


def _default_factors() -> Dict[str, float]:
    return {"muff_y": 20.0, "muff_x": 50.0, "extension": 50.0}


@dataclass(frozen=True)
class HeadphoneConfig:
    headband: HeadbandParams = field(default_factory=HeadbandParams)
    muff: MuffParams = field(default_factory=MuffParams)
    assembly: AssemblyParams = field(default_factory=AssemblyParams)
    joints: Mapping[str, JointLimits] = field(default_factory=_default_joints)
    palettes: Mapping[str, Palette] = field(default_factory=_default_palettes)
    default_color: str = "black"
    initial_factors: Mapping[str, float] = field(default_factory=_default_factors)
    decimals: int = 5

    def __post_init__(self):
        # cached instances are shared, so their tables must be read-only
        for name in ("joints", "palettes", "initial_factors"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def palette(self, name: str) -> Palette:
        try:
            return self.palettes[name]
        except KeyError:
            raise ConfigError(f"unknown palette: {name!r}") from None


def _rgb(value: Any, where: str) -> RGB:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ConfigError(f"{where}: expected three color components, got {value!r}")
    try:
        return float(value[0]), float(value[1]), float(value[2])
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{where}: bad color component in {value!r}") from exc


def _coerce(current: Any, value: Any, where: str) -> Any:
    """Convert ``value`` to the type of the default it replaces."""
    if isinstance(current, str):
        if not isinstance(value, str):
            raise ConfigError(f"{where}: expected a string, got {value!r}")
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{where}: expected a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ConfigError(f"{where}: expected a finite number, got {value!r}")
    if isinstance(current, int):
        if value != int(value):
            raise ConfigError(f"{where}: expected a whole number, got {value!r}")
        return int(value)
    return float(value)


def _section(cls, base, data: Any, where: str):
    """Apply a mapping of overrides onto dataclass instance ``base``."""
    if data is None:
        return base
    if not isinstance(data, Mapping):
        raise ConfigError(f"{where}: expected a mapping, got {type(data).__name__}")
    names = {f.name for f in dataclasses.fields(cls)}
    updates = {}
    for key, value in data.items():
        if key not in names:
            raise ConfigError(f"{where}: unknown key {key!r}")
        updates[key] = _coerce(getattr(base, key), value, f"{where}.{key}")
    return dataclasses.replace(base, **updates)


def _joints(data: Any, base: Mapping[str, JointLimits]) -> Dict[str, JointLimits]:
    if data is None:
        return dict(base)
    if not isinstance(data, Mapping):
        raise ConfigError("joints: expected a mapping")
    joints = dict(base)
    for name, spec in data.items():
        if name not in joints:
            raise ConfigError(f"joints: unknown joint {name!r}")
        joints[name] = _section(JointLimits, joints[name], spec, f"joints.{name}")
    return joints


def _palettes(data: Any, base: Mapping[str, Palette]) -> Dict[str, Palette]:
    if data is None:
        return dict(base)
    if not isinstance(data, Mapping):
        raise ConfigError("palettes: expected a mapping")
    palettes = dict(base)
    for name, spec in data.items():
        where = f"palettes.{name}"
        if not isinstance(spec, Mapping) or set(spec) != {"body", "muff"}:
            raise ConfigError(f"{where}: expected exactly 'body' and 'muff' entries")
        parts = {}
        for part in ("body", "muff"):
            entry = spec[part]
            if not isinstance(entry, Mapping) or set(entry) != {"albedo", "reflection"}:
                raise ConfigError(f"{where}.{part}: expected 'albedo' and 'reflection'")
            parts[part] = Color(albedo=_rgb(entry["albedo"], f"{where}.{part}.albedo"),
                                reflection=_rgb(entry["reflection"], f"{where}.{part}.reflection"))
        palettes[str(name)] = Palette(**parts)
    return palettes


def config_from_mapping(data: Optional[Mapping[str, Any]]) -> HeadphoneConfig:
    """Build a :class:`HeadphoneConfig` from parsed YAML (or any mapping)."""

    base = HeadphoneConfig()
    if data is None:
        return base
    if not isinstance(data, Mapping):
        raise ConfigError("configuration document must be a mapping")

    known = {f.name for f in dataclasses.fields(HeadphoneConfig)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"unknown configuration keys: {sorted(unknown)}")

    factors = dict(base.initial_factors)
    overrides = data.get("initial_factors")
    if overrides is not None and not isinstance(overrides, Mapping):
        raise ConfigError("initial_factors: expected a mapping")
    for name, value in (overrides or {}).items():
        if name not in factors:
            raise ConfigError(f"initial_factors: unknown joint {name!r}")
        factors[name] = _coerce(0.0, value, f"initial_factors.{name}")

    decimals = _coerce(base.decimals, data.get("decimals", base.decimals), "decimals")
    if decimals < 0:
        raise ConfigError(f"decimals must be non-negative, got {decimals}")
    default_color = _coerce(base.default_color, data.get("default_color", base.default_color),
                            "default_color")

    cfg = HeadphoneConfig(
        headband=_section(HeadbandParams, base.headband, data.get("headband"), "headband"),
        muff=_section(MuffParams, base.muff, data.get("muff"), "muff"),
        assembly=_section(AssemblyParams, base.assembly, data.get("assembly"), "assembly"),
        joints=_joints(data.get("joints"), base.joints),
        palettes=_palettes(data.get("palettes"), base.palettes),
        default_color=default_color,
        initial_factors=factors,
        decimals=decimals,
    )
    if cfg.default_color not in cfg.palettes:
        raise ConfigError(f"default_color {cfg.default_color!r} has no palette")
    return cfg


def clear_cache() -> None:
    """Forget cached documents, e.g. after editing an override file."""
    _load_config_cached.cache_clear()


def _resolve_path(path: Optional[Path]) -> Path:
    if path is not None:
        return path
    env_path = os.environ.get(CURVEMESH_CONFIG)
    if env_path:
        return Path(env_path).expanduser()
    return _BUNDLED_CONFIG


@lru_cache(maxsize=16)
def _load_config_cached(path_str: str) -> HeadphoneConfig:
    path = Path(path_str)
    if not path.exists():
        raise ConfigError(f"configuration file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"cannot parse {path}: {exc}") from exc
    logger.debug("loaded configuration from %s", path)
    return config_from_mapping(data)


def load_config(path: Optional[os.PathLike] = None) -> HeadphoneConfig:
    """Load the headphone configuration.

    Args:
        path: Optional YAML document; see the module docstring for the
            search order when omitted.

    Returns:
        HeadphoneConfig with overrides applied on top of the defaults.

    Raises:
        ConfigError: If the document is missing, malformed, or names
            unknown keys.
    """
    resolved = _resolve_path(Path(path) if path is not None else None)
    return _load_config_cached(str(resolved.resolve()))
