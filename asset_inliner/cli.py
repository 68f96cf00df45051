"""
Command line for the page build.

Usage:
    python -m asset_inliner [--docs] [--config FILE] [--compression FMT]
                            [--no-firmware] [--check] [--verbose]

Options:
    --docs          Build docs/index.html with CDN script references
                    (default: dist/index.html with inlined bundles + .gz)
    --config        YAML build configuration (default: ./build.yaml if present)
    --compression   gzip or deflate (dist mode)
    --no-firmware   Don't copy the compressed page into the ESP32 sources
    --check         Verify outputs are up to date without writing
    --verbose       Debug logging
"""

import argparse
from pathlib import Path
from typing import List, Optional

from asset_inliner.build import run_build
from asset_inliner.compression import FORMATS
from asset_inliner.config import BuildMode, load_config
from asset_inliner.errors import BuildError
from asset_inliner.logging import configure_logging, get_logger

log = get_logger('cli')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='asset-inliner',
        description="Build the curve editor page with inlined or CDN-hosted mojs bundles",
    )
    parser.add_argument(
        "--docs",
        action="store_true",
        help="Build the published docs page (CDN references, no compression)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML build configuration",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Project root (default: config file directory or current directory)",
    )
    parser.add_argument(
        "--compression",
        choices=FORMATS,
        default=None,
        help="Compressed artifact format",
    )
    parser.add_argument(
        "--no-firmware",
        action="store_true",
        help="Skip copying the compressed page to the firmware asset path",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Verify outputs match the inputs without writing",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        configure_logging(level='DEBUG')

    mode = BuildMode.from_flag(args.docs)

    try:
        config = load_config(args.config, root=args.root, compression=args.compression)
        if args.verbose:
            # .env levels were applied while loading; the flag wins
            configure_logging(level='DEBUG')
        if args.no_firmware:
            config = config.model_copy(update={'firmware_asset': None})

        log.info("Building %s (%s)", mode.value, config.compression if mode is BuildMode.DIST else "cdn")
        result = run_build(config, mode, check=args.check,
                           publish_firmware=not args.no_firmware)
    except BuildError as e:
        log.error("%s failed: %s", e.step, e)
        return 1

    if not result.checked:
        log.info("Build complete: %d file(s) in %s", len(result.written), result.output_dir)
    return 0
