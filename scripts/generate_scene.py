#!/usr/bin/env python3
"""Scene generation CLI.

Composes a starfield/nebula scene for a seed and canvas size and prints it
to stdout. Nothing is written to disk.

Usage:
    # Per-layer summary (default)
    python scripts/generate_scene.py --seed 1337 --width 1920 --height 1080

    # Full scene as JSON / YAML
    python scripts/generate_scene.py --seed 42 --format json > scene.json
    python scripts/generate_scene.py --format yaml --config my_scene.v1.yaml

    # Timing + determinism check over repeated runs
    python scripts/generate_scene.py --repeat 5

Outputs:
    - summary: seed, canvas, config hash, per-layer counts, point hashes and spacing stats
    - json / yaml: Scene.to_dict() plus the palette as '#rrggbb' strings

Exit codes:
    0 success, 2 invalid configuration, 3 non-deterministic repeat
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from src.space_paint import DEFAULT_SEED, compose_scene
from src.space_paint.compose import DEFAULT_CONFIG_PATH
from src.utils import color as color_utils, fs, geometry, hashing, logging_config, profiler, validators
from src.utils.validators import ConfigurationError

logger = logging_config.get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate a seeded starfield/nebula scene description",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--seed', type=int, default=DEFAULT_SEED,
                        help=f'Scene seed (32-bit), default: {DEFAULT_SEED}')
    parser.add_argument('--width', type=int, default=800, help='Canvas width (px), default: 800')
    parser.add_argument('--height', type=int, default=600, help='Canvas height (px), default: 600')
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help=f'Scene config YAML (scene.v1), default: {DEFAULT_CONFIG_PATH.name}'
    )
    parser.add_argument(
        '--format',
        type=str,
        default='summary',
        choices=['summary', 'json', 'yaml'],
        help='Output format, default: summary'
    )
    parser.add_argument('--repeat', type=int, default=1,
                        help='Compose N times, report mean time and check fingerprints match')
    parser.add_argument('--log_level', type=str, default='INFO', help='Logging level, default: INFO')
    parser.add_argument('--log_json', action='store_true', help='JSON-line log output on stderr')
    return parser.parse_args(argv)


def summarize(scene, config_path: Path) -> dict:
    """Per-layer counts and spacing statistics."""
    layers = []
    for layer in scene.layers:
        points = layer.points
        min_distance = geometry.pairwise_min_distance(points)
        layers.append({
            'name': layer.name,
            'kind': layer.kind,
            'blend': layer.blend,
            'records': len(layer),
            'points_sha256': hashing.sha256_array(geometry.as_point_array(points)),
            'min_spacing_px': None if min_distance == float('inf') else round(min_distance, 2),
            'center_fraction': round(geometry.center_fraction(points, scene.width, scene.height), 4),
        })
    return {
        'seed': scene.seed,
        'canvas': f"{scene.width}x{scene.height}",
        'config': str(config_path),
        'config_sha256': hashing.sha256_file(config_path),
        'fingerprint': scene.fingerprint(),
        'records': scene.record_count,
        'layers': layers,
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging_config.setup_logging(
        log_level=args.log_level,
        json=args.log_json,
        context={'app': 'generate_scene', 'seed': args.seed},
    )
    logging_config.install_excepthook()

    config_path = Path(args.config) if args.config else DEFAULT_CONFIG_PATH
    try:
        config = validators.load_scene_config(config_path)
        timings = profiler.TimerAccumulator("compose")
        fingerprints = set()
        scene = None
        for _ in range(max(1, args.repeat)):
            with timings.measure():
                scene = compose_scene(args.seed, args.width, args.height, config)
            fingerprints.add(scene.fingerprint())
    except (ConfigurationError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    logger.info(f"Composed {scene.record_count} records, {timings}")
    if len(fingerprints) > 1:
        logger.error(f"Repeated runs disagree: {sorted(fingerprints)}")
        return 3

    if args.format == 'summary':
        print(json.dumps(summarize(scene, config_path), indent=2))
    else:
        payload = scene.to_dict()
        payload['palette'] = [color_utils.hex_string(c) for c in config.palette]
        if args.format == 'json':
            print(json.dumps(payload))
        else:
            print(fs.dump_yaml(payload), end='')
    return 0


if __name__ == '__main__':
    sys.exit(main())
