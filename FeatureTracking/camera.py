"""
Pinhole camera model with optional radial-tangential distortion.

Back-projection and projection go through OpenCV so that the distortion
model is the same one used for calibration.
"""

import uuid
import cv2
import numpy as np
from typing import List, Optional, Tuple

from .base_classes import BaseCamera
from .core_data_structures import ProjectionResult

# Bearings with a smaller z component are treated as behind the camera.
MIN_BEARING_DEPTH = 1e-9

UNDISTORT_CRITERIA = (cv2.TERM_CRITERIA_COUNT | cv2.TERM_CRITERIA_EPS, 30, 1e-12)


class PinholeCamera(BaseCamera):
    """Pinhole camera with intrinsics (fx, fy, cx, cy) and image size"""

    def __init__(self, fx: float, fy: float, cx: float, cy: float,
                 width: int, height: int,
                 distortion: Optional[np.ndarray] = None,
                 camera_id: Optional[str] = None):
        """
        Initialize camera

        Args:
            fx, fy: Focal lengths in pixels
            cx, cy: Principal point in pixels
            width, height: Image size in pixels
            distortion: Optional OpenCV distortion coefficients (k1, k2, p1, p2[, k3])
            camera_id: Geometry identifier, generated when omitted
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        if fx <= 0 or fy <= 0:
            raise ValueError(f"Focal lengths must be positive, got fx={fx}, fy={fy}")

        self.K = np.array([
            [fx, 0.0, cx],
            [0.0, fy, cy],
            [0.0, 0.0, 1.0]
        ], dtype=np.float64)
        self.distortion = (np.zeros(5, dtype=np.float64) if distortion is None
                           else np.asarray(distortion, dtype=np.float64).ravel())
        self._width = int(width)
        self._height = int(height)
        self._camera_id = camera_id or uuid.uuid4().hex

    @classmethod
    def from_matrix(cls, K: np.ndarray, width: int, height: int,
                    distortion: Optional[np.ndarray] = None,
                    camera_id: Optional[str] = None) -> 'PinholeCamera':
        K = np.asarray(K, dtype=np.float64)
        return cls(K[0, 0], K[1, 1], K[0, 2], K[1, 2], width, height,
                   distortion=distortion, camera_id=camera_id)

    @property
    def camera_id(self) -> str:
        return self._camera_id

    @property
    def image_width(self) -> int:
        return self._width

    @property
    def image_height(self) -> int:
        return self._height

    def __repr__(self):
        return (f"PinholeCamera(id={self._camera_id}, size={self._width}x{self._height}, "
                f"fx={self.K[0, 0]:.1f}, fy={self.K[1, 1]:.1f})")

    def back_project(self, keypoints: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        keypoints = np.asarray(keypoints, dtype=np.float64).reshape(-1, 2)
        if keypoints.shape[0] == 0:
            return np.zeros((0, 3)), np.zeros(0, dtype=bool)

        normalized = cv2.undistortPoints(
            keypoints.reshape(-1, 1, 2), self.K, self.distortion,
            R=np.eye(3), P=np.eye(3), criteria=UNDISTORT_CRITERIA).reshape(-1, 2)
        bearings = np.hstack([normalized, np.ones((normalized.shape[0], 1))])
        bearings /= np.linalg.norm(bearings, axis=1, keepdims=True)

        valid = np.all(np.isfinite(bearings), axis=1)
        return bearings, valid

    def project(self, bearings: np.ndarray) -> Tuple[np.ndarray, List[ProjectionResult]]:
        bearings = np.asarray(bearings, dtype=np.float64).reshape(-1, 3)
        num_points = bearings.shape[0]
        keypoints = np.full((num_points, 2), np.nan)
        results = [ProjectionResult.POINT_BEHIND_CAMERA] * num_points
        if num_points == 0:
            return keypoints, results

        in_front = bearings[:, 2] > MIN_BEARING_DEPTH
        if np.any(in_front):
            projected, _ = cv2.projectPoints(
                bearings[in_front].reshape(-1, 1, 3),
                np.zeros(3), np.zeros(3), self.K, self.distortion)
            keypoints[in_front] = projected.reshape(-1, 2)

        for i in np.flatnonzero(in_front):
            if not np.all(np.isfinite(keypoints[i])):
                results[i] = ProjectionResult.PROJECTION_INVALID
            elif self.is_keypoint_visible(keypoints[i]):
                results[i] = ProjectionResult.KEYPOINT_VISIBLE
            else:
                results[i] = ProjectionResult.KEYPOINT_OUTSIDE_IMAGE_BOX
        return keypoints, results
