#!/usr/bin/env python3
"""
Gyro tracker demo on synthetic data

Generates a frame pair related by a known camera rotation, tracks it and
reports precision/recall against the ground truth together with the
tracker counters.

Usage:
    gyro-tracker-demo --num-keypoints 500 --rotation-deg 2.0 --bit-noise 20
"""

import argparse
import sys
import time

import numpy as np

from .camera import PinholeCamera
from .config import GyroTrackerConfig, load_config
from .gyro_tracker import GyroTracker
from .logger import configure_root_logger, get_logger
from .rotation import Quaternion
from .statistics import StatsCollector
from .synthetic import make_rotated_frame_pair

logger = get_logger("demo")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the gyro feature tracker on a synthetic scene")
    parser.add_argument("--num-keypoints", type=int, default=500,
                        help="Keypoints in the first frame (default: 500)")
    parser.add_argument("--descriptor-bytes", type=int, default=48,
                        help="Binary descriptor width in bytes (default: 48)")
    parser.add_argument("--rotation-deg", type=float, default=1.5,
                        help="Camera rotation between frames in degrees (default: 1.5)")
    parser.add_argument("--bit-noise", type=int, default=20,
                        help="Bits flipped per descriptor in the second frame (default: 20)")
    parser.add_argument("--pixel-noise", type=float, default=1.0,
                        help="Keypoint position noise std-dev in pixels (default: 1.0)")
    parser.add_argument("--preset", default="default",
                        help="Configuration preset (default, slow_motion, fast_motion, strict)")
    parser.add_argument("--config", default=None, help="JSON configuration file, overrides --preset")
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_root_logger(level=args.log_level, log_file=args.log_file)

    if args.config:
        config = GyroTrackerConfig.from_dict(load_config(args.config))
    else:
        config = GyroTrackerConfig.from_preset(args.preset)

    camera = PinholeCamera(fx=458.0, fy=457.0, cx=367.0, cy=248.0, width=752, height=480)
    axis = np.array([0.3, 1.0, 0.1])
    axis /= np.linalg.norm(axis)
    q_Ckp1_Ck = Quaternion.from_rotation_vector(axis * np.deg2rad(args.rotation_deg))

    pair = make_rotated_frame_pair(
        camera, q_Ckp1_Ck,
        num_keypoints=args.num_keypoints,
        descriptor_size_bytes=args.descriptor_bytes,
        bit_noise=args.bit_noise,
        pixel_noise=args.pixel_noise,
        seed=args.seed
    )
    logger.info(f"Camera: {camera}")
    logger.info(f"Config: {config.to_dict()}")
    logger.info(f"Frame k: {len(pair.frame_k)} keypoints, frame k+1: {len(pair.frame_kp1)} keypoints")

    stats = StatsCollector()
    tracker = GyroTracker(camera, config=config, statistics=stats)

    start_time = time.time()
    matches = tracker.track(q_Ckp1_Ck, pair.frame_k, pair.frame_kp1)
    elapsed = time.time() - start_time

    correct = sum(1 for m in matches if pair.ground_truth.get(m.index_k) == m.index_kp1)
    precision = correct / len(matches) if matches else 0.0
    recall = correct / len(pair.ground_truth) if pair.ground_truth else 0.0

    logger.info(f"Tracked {len(matches)} keypoints in {elapsed * 1000:.1f} ms")
    logger.info(f"Precision: {precision:.3f}, recall: {recall:.3f}")
    stats.log_summary()
    return 0


if __name__ == "__main__":
    sys.exit(main())
