"""
Core data structures and enums for the feature tracking system.

This module contains the fundamental data classes, enumerations and error
types used throughout the gyro-aided tracking pipeline.
"""

import math
import numpy as np
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field
from enum import Enum


class TrackerPreconditionError(ValueError):
    """Raised when a caller breaks the tracking contract (bad frame pair)."""


class DescriptorSizeError(ValueError):
    """Raised when descriptors are wider than the supported bit ceiling."""


class ProjectionResult(Enum):
    """Outcome of projecting a bearing vector into the image"""
    KEYPOINT_VISIBLE = "keypoint_visible"
    KEYPOINT_OUTSIDE_IMAGE_BOX = "keypoint_outside_image_box"
    POINT_BEHIND_CAMERA = "point_behind_camera"
    PROJECTION_INVALID = "projection_invalid"

    def is_keypoint_visible(self) -> bool:
        return self is ProjectionResult.KEYPOINT_VISIBLE


@dataclass(frozen=True)
class Vector2:
    """Pixel position (x = column, y = row)"""
    x: float
    y: float

    def __sub__(self, other: 'Vector2') -> 'Vector2':
        return Vector2(self.x - other.x, self.y - other.y)

    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    @classmethod
    def from_array(cls, values) -> 'Vector2':
        return cls(float(values[0]), float(values[1]))


@dataclass(frozen=True)
class KeypointIndexEntry:
    """Entry of the row-bucketed index: original frame index and measurement"""
    index: int
    measurement: Vector2


@dataclass(frozen=True)
class MatchWithScore:
    """
    Correspondence between a keypoint of frame (k+1) and one of frame k.

    Attributes:
        index_kp1: Keypoint index in frame (k+1)
        index_k: Keypoint index in frame k
        score: Match score reported to the caller
    """
    index_kp1: int
    index_k: int
    score: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {'index_kp1': self.index_kp1, 'index_k': self.index_k, 'score': self.score}


def _as_descriptor_bytes(descriptors) -> np.ndarray:
    """
    Convert descriptors to uint8 without wrapping values

    Raises:
        ValueError: If values are not whole numbers in [0, 255]
    """
    descriptors = np.asarray(descriptors)
    if descriptors.dtype == np.uint8:
        return descriptors
    if descriptors.size == 0:
        return descriptors.astype(np.uint8)
    if not np.issubdtype(descriptors.dtype, np.number):
        raise ValueError(f"Descriptors must be numeric bytes, got dtype {descriptors.dtype}")
    if (not np.all(np.isfinite(descriptors)) or descriptors.min() < 0 or descriptors.max() > 255
            or not np.array_equal(descriptors, np.floor(descriptors))):
        raise ValueError(
            f"Descriptor values must be whole numbers in [0, 255], got dtype {descriptors.dtype} "
            f"with range [{descriptors.min()}, {descriptors.max()}]")
    return descriptors.astype(np.uint8)


@dataclass
class VisualFrame:
    """
    Container for the per-frame data consumed by the tracker.

    Keypoints are stored as an (N, 2) array of (x, y) pixel positions and
    descriptors as an (N, L) uint8 array, one row of L bytes per keypoint.
    """
    keypoints: Optional[np.ndarray]
    descriptors: Optional[np.ndarray]
    camera_id: str
    timestamp_ns: int
    track_ids: Optional[np.ndarray] = None
    descriptor_size_bytes: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.keypoints is not None:
            self.keypoints = np.asarray(self.keypoints, dtype=np.float64).reshape(-1, 2)
        if self.descriptors is not None:
            self.descriptors = np.ascontiguousarray(_as_descriptor_bytes(self.descriptors))
            if self.descriptors.ndim != 2:
                raise ValueError(
                    f"Descriptors must be a 2D (N, L) array, got shape {self.descriptors.shape}")
            if self.descriptor_size_bytes is None:
                self.descriptor_size_bytes = self.descriptors.shape[1]
        if self.track_ids is not None:
            self.track_ids = np.asarray(self.track_ids, dtype=np.int64)

    def __len__(self):
        return self.num_keypoints

    @property
    def num_keypoints(self) -> int:
        return 0 if self.keypoints is None else self.keypoints.shape[0]

    @property
    def num_descriptors(self) -> int:
        return 0 if self.descriptors is None else self.descriptors.shape[0]

    def has_keypoint_measurements(self) -> bool:
        return self.keypoints is not None

    def has_descriptors(self) -> bool:
        return self.descriptors is not None

    def has_track_ids(self) -> bool:
        return self.track_ids is not None

    def get_keypoint(self, index: int) -> Vector2:
        return Vector2.from_array(self.keypoints[self._checked_index(index)])

    def get_descriptor(self, index: int) -> np.ndarray:
        """
        Read-only view of one descriptor row, borrowed from this frame

        Args:
            index: Keypoint index

        Returns:
            (L,) uint8 view into the descriptor matrix (no copy)
        """
        view = self.descriptors[self._checked_index(index)]
        view.flags.writeable = False
        return view

    def _checked_index(self, index: int) -> int:
        if not 0 <= index < self.num_keypoints:
            raise IndexError(f"Keypoint index {index} out of range [0, {self.num_keypoints})")
        return index

    def to_serializable(self) -> Dict[str, Any]:
        """Convert to serializable format"""
        return {
            'keypoints': self.keypoints.tolist() if self.keypoints is not None else None,
            'descriptors': self.descriptors.tolist() if self.descriptors is not None else None,
            'track_ids': self.track_ids.tolist() if self.track_ids is not None else None,
            'camera_id': self.camera_id,
            'timestamp_ns': self.timestamp_ns,
            'descriptor_size_bytes': self.descriptor_size_bytes
        }


def matches_to_serializable(matches: List[MatchWithScore]) -> List[Dict[str, Any]]:
    """Convert matches to serializable format"""
    return [match.to_dict() for match in matches]


def matches_from_serializable(matches_data: List[Dict[str, Any]]) -> List[MatchWithScore]:
    """Convert serialized matches back to MatchWithScore objects"""
    return [
        MatchWithScore(
            index_kp1=int(m['index_kp1']),
            index_k=int(m['index_k']),
            score=float(m.get('score', 0.0))
        )
        for m in matches_data
    ]
