"""
Synthetic frame pairs for testing and benchmarking the tracker.

Keypoints are sampled uniformly in the image, moved by a pure camera rotation
and given binary descriptors with a controlled number of flipped bits, so the
correct correspondences are known.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Optional

from .base_classes import BaseCamera
from .core_data_structures import VisualFrame
from .prediction import predict_keypoints_by_rotation
from .rotation import Quaternion


@dataclass
class SyntheticFramePair:
    """Frame pair with known correspondences (index_k -> index_kp1)"""
    frame_k: VisualFrame
    frame_kp1: VisualFrame
    q_Ckp1_Ck: Quaternion
    ground_truth: Dict[int, int]


def random_descriptors(num_descriptors: int, descriptor_size_bytes: int,
                       rng: Optional[np.random.Generator] = None) -> np.ndarray:
    rng = rng or np.random.default_rng()
    return rng.integers(0, 256, size=(num_descriptors, descriptor_size_bytes), dtype=np.uint8)


def flip_bits(descriptor: np.ndarray, num_bits: int,
              rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Copy of a descriptor with exactly num_bits distinct bits flipped"""
    rng = rng or np.random.default_rng()
    bits = np.unpackbits(np.asarray(descriptor, dtype=np.uint8))
    if num_bits > bits.size:
        raise ValueError(f"Cannot flip {num_bits} bits of a {bits.size}-bit descriptor")
    positions = rng.choice(bits.size, size=num_bits, replace=False)
    bits[positions] ^= 1
    return np.packbits(bits)


def make_frame(keypoints: np.ndarray, descriptors: np.ndarray, camera_id: str,
               timestamp_ns: int, track_ids: Optional[np.ndarray] = None) -> VisualFrame:
    """Frame with track ids defaulting to -1 (untracked)"""
    keypoints = np.asarray(keypoints, dtype=np.float64).reshape(-1, 2)
    if track_ids is None:
        track_ids = np.full(keypoints.shape[0], -1, dtype=np.int64)
    return VisualFrame(
        keypoints=keypoints,
        descriptors=descriptors,
        camera_id=camera_id,
        timestamp_ns=timestamp_ns,
        track_ids=track_ids
    )


def make_rotated_frame_pair(camera: BaseCamera,
                            q_Ckp1_Ck: Quaternion,
                            num_keypoints: int = 200,
                            descriptor_size_bytes: int = 32,
                            bit_noise: int = 0,
                            pixel_noise: float = 0.0,
                            margin: float = 20.0,
                            frame_interval_ns: int = 33_000_000,
                            shuffle: bool = True,
                            seed: Optional[int] = None) -> SyntheticFramePair:
    """
    Generate a frame pair related by a pure rotation

    Args:
        camera: Camera used for both frames
        q_Ckp1_Ck: Rotation from frame k to frame k+1
        num_keypoints: Keypoints sampled in frame k
        descriptor_size_bytes: Descriptor width
        bit_noise: Bits flipped in each frame (k+1) descriptor
        pixel_noise: Std-dev of Gaussian noise added to frame (k+1) positions
        margin: Distance of sampled keypoints from the image border
        frame_interval_ns: Timestamp difference between the frames
        shuffle: Shuffle frame (k+1) keypoint order
        seed: Random seed

    Returns:
        SyntheticFramePair; keypoints leaving the image are dropped from frame (k+1)
    """
    rng = np.random.default_rng(seed)
    width, height = camera.image_width, camera.image_height

    keypoints_k = np.column_stack([
        rng.uniform(margin, width - margin, num_keypoints),
        rng.uniform(margin, height - margin, num_keypoints)
    ])
    descriptors_k = random_descriptors(num_keypoints, descriptor_size_bytes, rng)

    predicted, success = predict_keypoints_by_rotation(camera, keypoints_k, q_Ckp1_Ck)
    source_indices = np.flatnonzero(success)
    keypoints_kp1 = predicted[source_indices]
    if pixel_noise > 0.0:
        keypoints_kp1 = keypoints_kp1 + rng.normal(0.0, pixel_noise, keypoints_kp1.shape)
    descriptors_kp1 = np.array(
        [flip_bits(descriptors_k[i], bit_noise, rng) for i in source_indices],
        dtype=np.uint8).reshape(-1, descriptor_size_bytes)

    order = rng.permutation(source_indices.size) if shuffle else np.arange(source_indices.size)
    keypoints_kp1 = keypoints_kp1[order]
    descriptors_kp1 = descriptors_kp1[order]
    source_indices = source_indices[order]

    track_ids_k = np.arange(num_keypoints, dtype=np.int64)
    frame_k = make_frame(keypoints_k, descriptors_k, camera.camera_id, 0, track_ids_k)
    frame_kp1 = make_frame(keypoints_kp1, descriptors_kp1, camera.camera_id,
                           frame_interval_ns, track_ids_k[source_indices])

    ground_truth = {int(index_k): int(index_kp1)
                    for index_kp1, index_k in enumerate(source_indices)}
    return SyntheticFramePair(frame_k, frame_kp1, q_Ckp1_Ck, ground_truth)
