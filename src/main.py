#!/usr/bin/env python3
"""
Replay recorded gaze samples through the classification engine.

Samples are read from a JSON array or a JSON-lines file; each sample
carries x, y, duration, an optional aoi and a timestamp in milliseconds.
Every completed window is printed as one JSON object per line.
"""

import sys
import json
import logging
import argparse
from pathlib import Path
from typing import List, Dict, Any, Optional

from config import ClassifierConfig, WindowPolicy
from gaze_classification import ClassificationEngine, ZoomController, ZoomEvent
from utils.validation import setup_logging

logger = logging.getLogger(__name__)


def load_samples(path: Path) -> List[Dict[str, Any]]:
    """Load gaze samples from a JSON array or JSON-lines file."""
    with open(path, 'r', encoding='utf-8') as f:
        text = f.read()

    stripped = text.lstrip()
    if stripped.startswith('['):
        samples = json.loads(stripped)
    else:
        samples = [json.loads(line) for line in text.splitlines() if line.strip()]

    logger.info(f"Loaded {len(samples)} gaze samples from {path}")
    return samples


def replay(samples: List[Dict[str, Any]], config: Optional[ClassifierConfig] = None,
           out=None) -> List[Dict[str, Any]]:
    """
    Feed samples through a fresh engine.

    Args:
        samples: Sample mappings, each with a 'timestamp' in ms
        config: Engine configuration
        out: Stream receiving one JSON line per completed window

    Returns:
        Wire form of every classification result
    """
    def on_zoom_change(event: ZoomEvent):
        logger.info(f"Zoom changed: {event.to_dict()}")

    def on_zoom_reset(state):
        logger.info(f"Zoom reset: {', '.join(f'{z.value}={s}' for z, s in state.items())}")

    engine = ClassificationEngine(
        config, zoom_controller=ZoomController(on_zoom_change=on_zoom_change, on_zoom_reset=on_zoom_reset))

    results = []
    for index, sample in enumerate(samples):
        if 'timestamp' not in sample:
            raise ValueError(f"Sample {index} has no timestamp")
        result = engine.ingest(sample, sample['timestamp'])
        if result is None:
            continue
        data = result.to_dict()
        results.append(data)
        if out is not None:
            out.write(json.dumps(data) + "\n")

    stats = engine.get_statistics()
    logger.info(f"Replay finished: {stats.samples_ingested} samples, "
                f"{stats.windows_completed} windows, {stats.type_counts}")
    return results


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Classify reading strategy from recorded gaze samples")
    parser.add_argument('samples', type=Path, help="JSON or JSON-lines file of gaze samples")
    parser.add_argument('--config', type=Path, help="JSON file with configuration overrides")
    parser.add_argument('--window-size', type=float, help="Window size in milliseconds")
    parser.add_argument('--carry-over', action='store_true',
                        help="Retain unexpired samples into the next window")
    parser.add_argument('--log-file', default=None, help="Write a detailed log to this file")
    parser.add_argument('-v', '--verbose', action='store_true', help="Log progress to the console")
    args = parser.parse_args(argv)

    setup_logging(args.log_file, console_level=logging.INFO if args.verbose else logging.WARNING)

    try:
        config = ClassifierConfig.from_json_file(args.config) if args.config else ClassifierConfig()
        if args.window_size is not None:
            config.window_size_ms = args.window_size
        if args.carry_over:
            config.window_policy = WindowPolicy.CARRY_OVER
        config.validate()

        replay(load_samples(args.samples), config, out=sys.stdout)
    except (OSError, ValueError) as e:
        logger.error(f"Replay failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
