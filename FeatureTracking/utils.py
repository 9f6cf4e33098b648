"""
Utility functions for feature tracking.

Small numeric helpers used by the matcher plus functions that turn match
lists into arrays for downstream consumers.
"""

import numpy as np
from typing import List, Tuple

from .core_data_structures import MatchWithScore, Vector2, VisualFrame


# =============================================================================
# Numeric Helpers
# =============================================================================

def clamp(lower: int, upper: int, value: float) -> int:
    """Truncate value to int and clamp it to [lower, upper]"""
    return min(max(int(value), lower), upper)


def pixel_distance(a: Vector2, b: Vector2) -> float:
    """Euclidean distance between two pixel positions"""
    return (a - b).norm()


# =============================================================================
# Correspondence Extraction
# =============================================================================

def matches_to_index_arrays(matches: List[MatchWithScore]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split matches into index arrays

    Returns:
        Tuple of (indices_k, indices_kp1) int arrays
    """
    if not matches:
        return np.zeros(0, dtype=np.int64), np.zeros(0, dtype=np.int64)
    indices_k = np.array([m.index_k for m in matches], dtype=np.int64)
    indices_kp1 = np.array([m.index_kp1 for m in matches], dtype=np.int64)
    return indices_k, indices_kp1


def extract_correspondences(
    frame_k: VisualFrame,
    frame_kp1: VisualFrame,
    matches: List[MatchWithScore]
) -> np.ndarray:
    """
    Pixel correspondences for a list of matches

    Returns:
        (M, 4) array of [x_k, y_k, x_kp1, y_kp1]
    """
    if not matches:
        return np.zeros((0, 4))
    indices_k, indices_kp1 = matches_to_index_arrays(matches)
    return np.hstack([frame_k.keypoints[indices_k], frame_kp1.keypoints[indices_kp1]])


def sort_matches_by_score(matches: List[MatchWithScore],
                          descending: bool = True) -> List[MatchWithScore]:
    return sorted(matches, key=lambda m: m.score, reverse=descending)
