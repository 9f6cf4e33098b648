"""
Base classes and interfaces for feature tracking.

This module defines the abstract base classes that camera models and
feature trackers must implement.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .core_data_structures import MatchWithScore, ProjectionResult, VisualFrame
from .rotation import Quaternion


class BaseCamera(ABC):
    """Abstract camera geometry: back-projection and projection"""

    @property
    @abstractmethod
    def camera_id(self) -> str:
        """Stable geometry identifier"""
        pass

    @property
    @abstractmethod
    def image_width(self) -> int:
        pass

    @property
    @abstractmethod
    def image_height(self) -> int:
        pass

    @abstractmethod
    def back_project(self, keypoints: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Back-project pixels to bearing vectors

        Args:
            keypoints: (N, 2) pixel positions (x, y)

        Returns:
            Tuple of ((N, 3) bearing vectors in the optical frame, (N,) bool valid mask)
        """
        pass

    @abstractmethod
    def project(self, bearings: np.ndarray) -> Tuple[np.ndarray, List[ProjectionResult]]:
        """
        Project bearing vectors to pixels

        Args:
            bearings: (N, 3) vectors in the optical frame

        Returns:
            Tuple of ((N, 2) pixel positions, per-point ProjectionResult)
        """
        pass

    def is_keypoint_visible(self, keypoint: np.ndarray) -> bool:
        """Check that a pixel lies inside the image box"""
        return bool(0.0 <= keypoint[0] < self.image_width and
                    0.0 <= keypoint[1] < self.image_height)


class BaseFeatureTracker(ABC):
    """Abstract base class for frame-to-frame feature trackers"""

    @abstractmethod
    def track(self, q_Ckp1_Ck: Quaternion, frame_k: VisualFrame, frame_kp1: VisualFrame,
              matches: Optional[List[MatchWithScore]] = None) -> List[MatchWithScore]:
        """
        Match keypoints of frame (k+1) against keypoints of frame k

        Args:
            q_Ckp1_Ck: Rotation from camera frame k to camera frame k+1
            frame_k: Earlier frame
            frame_kp1: Later frame
            matches: Optional output list, cleared and filled in place

        Returns:
            List of matches
        """
        pass
