"""Replay recorded detections through the tracking engine.

Each line of the input file is one frame:
    {"detections": [{"bbox": [x, y, w, h], "class_name": "person", "velocity": 0.0}]}
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Iterator, List

from loguru import logger

from .config import EngineConfig
from .detection import Detection
from .engine import TrackingEngine
from .events import NotificationCenter, count_by_category
from .geometry import Rect


def parse_zone(text: str) -> Rect:
    try:
        x, y, w, h = (int(v) for v in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Zone must be x,y,w,h integers, got {text!r}")
    return Rect(x, y, w, h)


def read_frames(path: Path) -> Iterator[List[Detection]]:
    with path.open(encoding="utf-8") as f:
        for line_no, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning(f"Skipping malformed frame at line {line_no}: {e}")
                continue
            yield [Detection.from_dict(d) for d in record.get("detections", [])]


def replay(engine: TrackingEngine, frames: Iterator[List[Detection]], fps: float) -> int:
    """Feed frames at a synthetic clock of 1/fps seconds per frame. Returns frame count."""
    count = 0
    for count, detections in enumerate(frames, 1):
        engine.update(detections, now=count / fps)
    return count


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Replay detections through the security tracking engine")
    parser.add_argument("--detections", type=Path, required=True, help="JSON-lines file, one frame per line")
    parser.add_argument("--zone", type=parse_zone, action="append", default=[], help="Restricted zone x,y,w,h (repeatable)")
    parser.add_argument("--night-vision", action="store_true", help="Report movement as night activity")
    parser.add_argument("--max-velocity", type=float, default=None, help="Speed alarm threshold, m/s")
    parser.add_argument("--min-movement", type=float, default=None, help="Pixels per frame to count as moving")
    parser.add_argument("--fps", type=float, default=30.0, help="Frame rate of the recording")
    parser.add_argument("--camera-id", type=str, default="CAM_01", help="Camera identifier")
    parser.add_argument("--log-dir", type=Path, default=None, help="Also write events as JSON lines here")
    parser.add_argument("--log-level", type=str, default="INFO", help="Loguru level for stderr")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())

    if args.fps <= 0:
        logger.error(f"--fps must be positive, got {args.fps}")
        return 2

    cfg = EngineConfig()
    cfg.events.camera_id = args.camera_id
    cfg.tracking.frame_interval_s = 1.0 / args.fps
    cfg.behavior.night_vision = args.night_vision
    if args.max_velocity is not None:
        cfg.motion.max_allowed_velocity = args.max_velocity
    if args.min_movement is not None:
        cfg.motion.min_movement_px = args.min_movement
    if args.log_dir is not None:
        cfg.events.log_dir = args.log_dir
        cfg.events.enable_file_logging = True

    center = NotificationCenter.from_config(cfg.events)
    collected = []
    center.add_handler(collected.append)

    engine = TrackingEngine(cfg, sink=center)
    for zone in args.zone:
        engine.add_restricted_zone(zone)

    n_frames = replay(engine, read_frames(args.detections), args.fps)

    logger.info(f"Replayed {n_frames} frames, {len(engine.store)} tracks still live")
    for category, count in sorted(count_by_category(collected).items(), key=lambda kv: kv[0].value):
        print(f"{category.value:>18}: {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
