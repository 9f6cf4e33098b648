"""
Rotation-based keypoint position prediction.

A keypoint of frame k is back-projected to a bearing vector, rotated into the
optical frame of frame k+1 and projected again with the same camera. This
gives the position where the keypoint is expected to reappear when the camera
motion between the frames is dominated by rotation.
"""

import numpy as np
from typing import Tuple

from .base_classes import BaseCamera
from .core_data_structures import VisualFrame
from .descriptor_distance import check_descriptor_size
from .logger import get_logger
from .rotation import Quaternion
from .row_index import RowBucketedIndex

logger = get_logger("prediction")


def predict_keypoints_by_rotation(camera: BaseCamera,
                                  keypoints_k: np.ndarray,
                                  q_Ckp1_Ck: Quaternion) -> Tuple[np.ndarray, np.ndarray]:
    """
    Predict frame (k+1) positions of frame k keypoints

    Args:
        camera: Camera shared by both frames
        keypoints_k: (N, 2) keypoint measurements of frame k
        q_Ckp1_Ck: Rotation from camera frame k to camera frame k+1

    Returns:
        Tuple of ((N, 2) predicted positions, (N,) bool success mask).
        Positions of failed predictions are NaN.
    """
    keypoints_k = np.asarray(keypoints_k, dtype=np.float64).reshape(-1, 2)
    num_points = keypoints_k.shape[0]
    predicted = np.full((num_points, 2), np.nan)
    success = np.zeros(num_points, dtype=bool)
    if num_points == 0:
        return predicted, success

    bearings_k, back_projection_valid = camera.back_project(keypoints_k)
    if not np.any(back_projection_valid):
        return predicted, success

    bearings_kp1 = q_Ckp1_Ck.rotate(bearings_k[back_projection_valid])
    projected, results = camera.project(bearings_kp1)

    valid_indices = np.flatnonzero(back_projection_valid)
    visible = np.array([result.is_keypoint_visible() for result in results], dtype=bool)
    predicted[valid_indices[visible]] = projected[visible]
    success[valid_indices[visible]] = True
    return predicted, success


class GyroTrackerMatchingData:
    """
    Per-call data shared by the windowed matcher

    Holds the predicted positions of frame k keypoints in frame (k+1) and the
    row-bucketed index over the keypoints of frame (k+1). Built fresh for
    every frame pair and discarded afterwards.
    """

    def __init__(self, q_Ckp1_Ck: Quaternion, frame_kp1: VisualFrame,
                 frame_k: VisualFrame, camera: BaseCamera):
        self.q_Ckp1_Ck = q_Ckp1_Ck
        self.num_points_k = frame_k.num_keypoints
        self.num_points_kp1 = frame_kp1.num_keypoints
        self.descriptor_size_bytes = frame_kp1.descriptor_size_bytes
        self.descriptor_size_bits = check_descriptor_size(self.descriptor_size_bytes)
        self.image_height = camera.image_height

        self.predicted_keypoint_positions_kp1, self.prediction_success = \
            predict_keypoints_by_rotation(camera, frame_k.keypoints, q_Ckp1_Ck)
        self.keypoints_kp1_by_y = RowBucketedIndex.build(frame_kp1.keypoints, camera.image_height)

        num_failed = self.num_points_k - int(np.count_nonzero(self.prediction_success))
        if num_failed:
            logger.debug(f"{num_failed}/{self.num_points_k} keypoints could not be predicted")
