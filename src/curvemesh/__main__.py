#!/usr/bin/env python3
"""
Command line tools for curvemesh.

Usage:
    python -m curvemesh build [--config FILE] [--decimals N] [--json]
    python -m curvemesh animate [--config FILE] [--ticks N] [--dt MS]
                                [--muff-y F] [--muff-x F] [--extension F]
                                [--color NAME] [--json]

Examples:
    # Build every part and list point/triangle counts
    python -m curvemesh build

    # Coarser welding
    python -m curvemesh build --decimals 3

    # Open the muffs fully over one second of 16 ms frames
    python -m curvemesh animate --ticks 60 --dt 16 --muff-y 100 --muff-x 100
"""

import argparse
import json
import logging
import math
import sys
from dataclasses import replace

from curvemesh.config import ConfigError, load_config
from curvemesh.logging_config import setup_logging

logger = logging.getLogger("curvemesh.cli")


def _load(args):
    config = load_config(args.config)
    if getattr(args, "decimals", None) is not None:
        if args.decimals < 0:
            raise ConfigError(f"--decimals must be non-negative, got {args.decimals}")
        config = replace(config, decimals=args.decimals)
    return config


def _fmt_point(p) -> str:
    return "({:.3f}, {:.3f}, {:.3f})".format(*p)


def cmd_build(args):
    """Build every headphone part and report its size."""
    from curvemesh.headphones import make_headphones

    try:
        config = _load(args)
    except (ConfigError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    headband, left, right = make_headphones(config)
    rows = []
    for group, meshes in (("headband", headband), ("left_muff", left), ("right_muff", right)):
        for name, buf in meshes.items():
            lo, hi = buf.bbox()
            rows.append({
                "part": f"{group}.{name}",
                "points": len(buf.points),
                "triangles": buf.triangle_count,
                "bbox": [list(lo), list(hi)],
            })

    if args.json:
        print(json.dumps({"decimals": config.decimals, "parts": rows}, indent=2))
        return 0

    print(f"{'part':<24} {'points':>8} {'triangles':>10}  bbox")
    for row in rows:
        lo, hi = row["bbox"]
        print(f"{row['part']:<24} {row['points']:>8} {row['triangles']:>10}  "
              f"{_fmt_point(lo)} - {_fmt_point(hi)}")
    total_points = sum(r["points"] for r in rows)
    total_tris = sum(r["triangles"] for r in rows)
    print(f"{'total':<24} {total_points:>8} {total_tris:>10}")
    return 0


def cmd_animate(args):
    """Drive the rig for a number of frames and print joint values."""
    from curvemesh.rig import UiIntent, build_rig

    try:
        config = _load(args)
    except (ConfigError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.ticks < 0 or args.dt < 0:
        print("Error: --ticks and --dt must be non-negative", file=sys.stderr)
        return 1

    rig = build_rig(config)
    base = rig.default_intent()
    intent = UiIntent(
        color=args.color if args.color is not None else base.color,
        muff_y=args.muff_y if args.muff_y is not None else base.muff_y,
        muff_x=args.muff_x if args.muff_x is not None else base.muff_x,
        extension=args.extension if args.extension is not None else base.extension,
    )
    logger.info("animating %d ticks of %.1f ms with %s", args.ticks, args.dt, intent)

    frames = []
    for i in range(args.ticks):
        rig.tick(intent, args.dt)
        frames.append({
            "tick": i + 1,
            "color": rig.materials.active_color,
            **{name: joint.real for name, joint in rig.joints.items()},
        })

    if args.json:
        print(json.dumps(frames, indent=2))
        return 0

    names = list(rig.joints)
    print(f"{'tick':>6} " + " ".join(f"{n + ' (deg)':>16}" for n in names) + "  color")
    for frame in frames:
        print(f"{frame['tick']:>6} "
              + " ".join(f"{math.degrees(frame[n]):>16.3f}" for n in names)
              + f"  {frame['color']}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='curvemesh',
        description='Procedural headphone model construction tools',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--log-file', metavar='FILE', help='Also write debug logging to FILE')
    subparsers = parser.add_subparsers(dest='subcommand', help='Available commands')

    def _common(p):
        p.add_argument('-c', '--config', metavar='FILE', help='YAML configuration override')
        p.add_argument('--json', action='store_true', help='Emit JSON instead of a table')

    build_parser = subparsers.add_parser('build', help='Build all parts and report sizes')
    _common(build_parser)
    build_parser.add_argument('--decimals', type=int, metavar='N',
                              help='Weld precision in decimal places')

    anim_parser = subparsers.add_parser('animate', help='Run the joint trackers')
    _common(anim_parser)
    anim_parser.add_argument('--ticks', type=int, default=60, help='Number of frames')
    anim_parser.add_argument('--dt', type=float, default=16.0, help='Frame time in milliseconds')
    anim_parser.add_argument('--muff-y', type=float, help='Muff swivel factor, 0-100')
    anim_parser.add_argument('--muff-x', type=float, help='Muff tilt factor, 0-100')
    anim_parser.add_argument('--extension', type=float, help='Headband extension factor, 0-100')
    anim_parser.add_argument('--color', help='Palette name')

    args = parser.parse_args(argv)

    setup_logging(args.verbose, log_file=args.log_file)

    if args.subcommand == 'build':
        return cmd_build(args)
    elif args.subcommand == 'animate':
        return cmd_animate(args)
    else:
        parser.print_help()
        return 0


if __name__ == '__main__':
    sys.exit(main())
