#!/usr/bin/env python3
"""Open a sequence store from a profile and print its species diagnostics."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from seqhub import (  # noqa: E402
    SequenceWindow,
    StoreProfileLoader,
    Strand,
    build_store,
)

logger = logging.getLogger("seqhub.stats")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print species and chromosome lengths of a store")
    parser.add_argument("--profile", required=True, help="Profile name under config/stores or path")
    parser.add_argument("--profiles-dir", default=None, help="Directory holding store profiles")
    parser.add_argument(
        "--window",
        default=None,
        help="Optional species:chromosome:start-end[:strand] window to fetch",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser.parse_args()


def parse_window(value: str) -> SequenceWindow:
    parts = value.split(":")
    if len(parts) not in (3, 4):
        raise ValueError(f"Window must look like species:chromosome:start-end[:strand], got {value}")
    start, _, end = parts[2].partition("-")
    strand = Strand.parse(parts[3]) if len(parts) == 4 else Strand.PLUS
    return SequenceWindow(parts[0], parts[1], int(start), int(end), strand)


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    profile = StoreProfileLoader(args.profiles_dir).load(args.profile)
    logger.info("Opening %s store for profile %s", profile.settings.backend.value, profile.name)

    with build_store(profile.settings) as store:
        if args.window:
            window = parse_window(args.window)
            result = store.fetch_sequence(window)
            if result is None:
                logger.warning("No sequence stored for %s", window.composite_key)
            else:
                print(f">{result.name}:{result.offset}+{result.length}")
                print(result.text())
            features = store.fetch_features(window)
            logger.info("%d hints overlap the window", len(features))
        store.print_diagnostics()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
