"""
Shared fixtures for the FeatureTracking tests.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

project_root = Path(__file__).parent.parent  # Go up from tests/ to project root
sys.path.insert(0, str(project_root))

from FeatureTracking import (
    GyroTrackerConfig,
    PinholeCamera,
    StatsCollector,
    make_frame,
)


@pytest.fixture
def camera():
    """EuRoC-like camera, 752x480, no distortion"""
    return PinholeCamera(fx=458.0, fy=457.0, cx=367.0, cy=248.0,
                         width=752, height=480, camera_id="cam0")


@pytest.fixture
def small_camera():
    """100x100 camera used by the hand-built scenarios"""
    return PinholeCamera(fx=100.0, fy=100.0, cx=50.0, cy=50.0,
                         width=100, height=100, camera_id="cam_small")


@pytest.fixture
def stats():
    return StatsCollector()


@pytest.fixture
def scenario_config():
    return GyroTrackerConfig(small_search_distance=5, large_search_distance=20,
                             matching_threshold_bits_ratio=0.8)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def frame_factory():
    """Build frames on a given camera with increasing timestamps"""
    def _make(camera, keypoints, descriptors, timestamp_ns=0, track_ids=None):
        return make_frame(np.asarray(keypoints, dtype=np.float64),
                          np.asarray(descriptors, dtype=np.uint8),
                          camera.camera_id, timestamp_ns, track_ids)
    return _make
