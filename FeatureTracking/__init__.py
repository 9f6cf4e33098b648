"""
Gyroscope-aided Feature Tracking

Frame-to-frame keypoint tracking for visual-inertial front ends. The rotation
between two frames, integrated from the gyroscope, predicts where each
keypoint of frame k reappears in frame k+1; binary descriptors are then
matched inside a narrow and, if needed, a wide window around the prediction.

Main Components:
- Position prediction through a camera model and a unit quaternion
- Row-bucketed spatial index over the keypoints of the target frame
- Two-tier windowed Hamming matching with greedy one-to-one assignment
- Injectable statistics sinks for match/no-match counters

Quick Start:
    >>> import FeatureTracking as ft
    >>> camera = ft.PinholeCamera(fx=458.0, fy=457.0, cx=367.0, cy=248.0, width=752, height=480)
    >>> tracker = ft.GyroTracker(camera)
    >>> matches = tracker.track(q_Ckp1_Ck, frame_k, frame_kp1)
"""

__version__ = "1.0.0"
__author__ = "Feature Tracking Team"

# Core data structures
from .core_data_structures import (
    VisualFrame,
    MatchWithScore,
    KeypointIndexEntry,
    Vector2,
    ProjectionResult,
    TrackerPreconditionError,
    DescriptorSizeError,
    matches_to_serializable,
    matches_from_serializable
)

# Base classes
from .base_classes import (
    BaseCamera,
    BaseFeatureTracker
)

# Geometry
from .rotation import Quaternion
from .camera import PinholeCamera
from .prediction import predict_keypoints_by_rotation, GyroTrackerMatchingData

# Matching
from .descriptor_distance import (
    MAX_DESCRIPTOR_SIZE_BITS,
    hamming_distance,
    hamming_distances,
    check_descriptor_size
)
from .row_index import RowBucketedIndex, build_row_lookup_table, row_window
from .windowed_matcher import WindowedMatcher, WindowSearchResult
from .gyro_tracker import GyroTracker

# Observability
from .statistics import (
    StatisticsSink,
    NullStatistics,
    StatsCollector,
    MATCH_BITS_STAT,
    NO_MATCH_NUM_CHECKED_STAT
)

# Configuration management
from .config import (
    GyroTrackerConfig,
    get_default_config,
    create_config_from_preset,
    merge_configs,
    validate_config,
    save_config,
    load_config
)

# Utilities
from .utils import (
    clamp,
    pixel_distance,
    extract_correspondences,
    matches_to_index_arrays,
    sort_matches_by_score
)
from .synthetic import (
    SyntheticFramePair,
    make_frame,
    make_rotated_frame_pair,
    random_descriptors,
    flip_bits
)
from .logger import setup_logger, get_logger, configure_root_logger


def get_version_info():
    """Get version and configuration information"""
    return {
        'version': __version__,
        'max_descriptor_size_bits': MAX_DESCRIPTOR_SIZE_BITS,
        'default_config': get_default_config(),
        'counters': [MATCH_BITS_STAT, NO_MATCH_NUM_CHECKED_STAT]
    }


__all__ = [
    # Core data structures
    'VisualFrame', 'MatchWithScore', 'KeypointIndexEntry', 'Vector2', 'ProjectionResult',
    'TrackerPreconditionError', 'DescriptorSizeError',
    'matches_to_serializable', 'matches_from_serializable',

    # Base classes
    'BaseCamera', 'BaseFeatureTracker',

    # Geometry
    'Quaternion', 'PinholeCamera', 'predict_keypoints_by_rotation', 'GyroTrackerMatchingData',

    # Matching
    'MAX_DESCRIPTOR_SIZE_BITS', 'hamming_distance', 'hamming_distances', 'check_descriptor_size',
    'RowBucketedIndex', 'build_row_lookup_table', 'row_window',
    'WindowedMatcher', 'WindowSearchResult', 'GyroTracker',

    # Observability
    'StatisticsSink', 'NullStatistics', 'StatsCollector',
    'MATCH_BITS_STAT', 'NO_MATCH_NUM_CHECKED_STAT',

    # Configuration
    'GyroTrackerConfig', 'get_default_config', 'create_config_from_preset', 'merge_configs',
    'validate_config', 'save_config', 'load_config',

    # Utilities
    'clamp', 'pixel_distance', 'extract_correspondences', 'matches_to_index_arrays',
    'sort_matches_by_score',
    'SyntheticFramePair', 'make_frame', 'make_rotated_frame_pair', 'random_descriptors', 'flip_bits',
    'setup_logger', 'get_logger', 'configure_root_logger',

    # Info
    'get_version_info'
]
