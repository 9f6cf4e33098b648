"""
Row-bucketed spatial index over the keypoints of the target frame.

Keypoints are sorted by their row (y) coordinate and a lookup table with one
entry per image row stores how many sorted keypoints lie strictly above that
row. A band of rows [top, bottom] then maps to a contiguous slice of the
sorted keypoints.
"""

import numpy as np
from typing import Tuple

from .core_data_structures import KeypointIndexEntry, Vector2
from .utils import clamp


def build_row_lookup_table(sorted_rows: np.ndarray, image_height: int) -> np.ndarray:
    """
    Lookup table where table[r] is the number of keypoints with row < r

    Args:
        sorted_rows: Row coordinates sorted in ascending order
        image_height: Image height in pixels

    Returns:
        (image_height,) int array, monotonically non-decreasing
    """
    # Single pass over rows and keypoints; equivalent to advancing a cursor
    # over sorted_rows while the keypoint row is below r.
    table = np.searchsorted(sorted_rows, np.arange(image_height), side='left')
    assert table.shape[0] == image_height
    return table.astype(np.int64)


def row_window(predicted_row: float, radius: float, image_height: int) -> Tuple[int, int]:
    """Clamped [top, bottom] row band around a predicted row"""
    top = clamp(0, image_height - 1, predicted_row + 0.5 - radius)
    bottom = clamp(0, image_height - 1, predicted_row + 0.5 + radius)
    assert 0 <= top <= bottom < image_height
    return top, bottom


class RowBucketedIndex:
    """Keypoints sorted by row with a per-row cumulative count table"""

    def __init__(self, indices: np.ndarray, measurements: np.ndarray,
                 row_lookup_table: np.ndarray, image_height: int):
        self.indices = indices
        self.measurements = measurements
        self.row_lookup_table = row_lookup_table
        self.image_height = image_height

    @classmethod
    def build(cls, keypoints: np.ndarray, image_height: int) -> 'RowBucketedIndex':
        """
        Build the index from the target frame keypoints

        Args:
            keypoints: (N, 2) array of (x, y) measurements
            image_height: Image height in pixels

        Returns:
            RowBucketedIndex
        """
        if image_height <= 0:
            raise ValueError(f"Image height must be positive, got {image_height}")
        keypoints = np.asarray(keypoints, dtype=np.float64).reshape(-1, 2)
        order = np.argsort(keypoints[:, 1], kind='stable')
        measurements = keypoints[order]
        table = build_row_lookup_table(measurements[:, 1], image_height)
        return cls(order.astype(np.int64), measurements, table, image_height)

    def __len__(self):
        return self.indices.shape[0]

    def entry(self, position: int) -> KeypointIndexEntry:
        """Sorted entry at a position of the index"""
        return KeypointIndexEntry(
            index=int(self.indices[position]),
            measurement=Vector2.from_array(self.measurements[position])
        )

    def candidate_range(self, top: int, bottom: int) -> Tuple[int, int]:
        """
        Slice [begin, end) of sorted keypoints for the row band [top, bottom]

        The exclusive upper row is capped at image_height - 1, so keypoints
        on the last image row are never returned.
        """
        last_row = self.image_height - 1
        begin = int(self.row_lookup_table[clamp(0, last_row, top)])
        end = int(self.row_lookup_table[clamp(0, last_row, min(bottom + 1, last_row))])
        return begin, max(begin, end)

    def query(self, top: int, bottom: int) -> Tuple[np.ndarray, np.ndarray]:
        """Original indices and measurements of keypoints in a row band"""
        begin, end = self.candidate_range(top, bottom)
        return self.indices[begin:end], self.measurements[begin:end]
