"""
Gyroscope-aided feature tracker.

The tracker validates a frame pair, predicts where the keypoints of frame k
land in frame (k+1) given the gyro rotation, and matches them greedily with
the windowed matcher. It keeps no state between calls.
"""

from typing import List, Optional

from .base_classes import BaseCamera, BaseFeatureTracker
from .config import GyroTrackerConfig
from .core_data_structures import MatchWithScore, TrackerPreconditionError, VisualFrame
from .logger import get_logger
from .prediction import GyroTrackerMatchingData
from .rotation import Quaternion
from .statistics import NullStatistics, StatisticsSink
from .windowed_matcher import WindowedMatcher

logger = get_logger("gyro_tracker")


class GyroTracker(BaseFeatureTracker):
    """Frame-to-frame tracker for binary descriptors using a rotation prior"""

    def __init__(self, camera: BaseCamera,
                 config: Optional[GyroTrackerConfig] = None,
                 statistics: Optional[StatisticsSink] = None):
        """
        Initialize tracker

        Args:
            camera: Camera geometry shared by all tracked frames
            config: Search radii and matching threshold
            statistics: Sink for the match/no-match counters

        Raises:
            ValueError: If the configuration is invalid
        """
        self.camera = camera
        self.config = config or GyroTrackerConfig()
        self.config.validate()
        self.statistics = statistics or NullStatistics()
        self.matcher = WindowedMatcher(self.config, self.statistics)

    def track(self, q_Ckp1_Ck: Quaternion, frame_k: VisualFrame, frame_kp1: VisualFrame,
              matches: Optional[List[MatchWithScore]] = None) -> List[MatchWithScore]:
        self._check_frame_pair(frame_k, frame_kp1)

        if matches is None:
            matches = []
        matches.clear()
        matches.extend(self.match_features(q_Ckp1_Ck, frame_kp1, frame_k))
        return matches

    def match_features(self, q_Ckp1_Ck: Quaternion, frame_kp1: VisualFrame,
                       frame_k: VisualFrame) -> List[MatchWithScore]:
        """
        Match the descriptors of frame (k+1) with those of frame k

        No validation is done here; use track() for caller-supplied frames.
        """
        matching_data = GyroTrackerMatchingData(q_Ckp1_Ck, frame_kp1, frame_k, self.camera)
        return self.matcher.match(matching_data, frame_kp1, frame_k)

    def _check_frame_pair(self, frame_k: VisualFrame, frame_kp1: VisualFrame):
        for name, frame in (('frame_k', frame_k), ('frame_kp1', frame_kp1)):
            if frame is None:
                self._fail(f"{name} is None")
            if not frame.has_keypoint_measurements():
                self._fail(f"{name} has no keypoint measurements")
            if not frame.has_track_ids():
                self._fail(f"{name} has no track ids")
            if not frame.has_descriptors():
                self._fail(f"{name} has no descriptors")
            if frame.camera_id != self.camera.camera_id:
                self._fail(f"{name} camera {frame.camera_id} does not match "
                           f"tracker camera {self.camera.camera_id}")
            if frame.descriptors.shape[1] != frame.descriptor_size_bytes:
                self._fail(f"{name} descriptor width {frame.descriptors.shape[1]} does not "
                           f"match descriptor size {frame.descriptor_size_bytes} bytes")
            if frame.num_keypoints != frame.num_descriptors:
                self._fail(f"{name} has {frame.num_keypoints} keypoints but "
                           f"{frame.num_descriptors} descriptors")

        # Make sure the frames are in order time-wise.
        if frame_kp1.timestamp_ns <= frame_k.timestamp_ns:
            self._fail(f"frame_kp1 timestamp {frame_kp1.timestamp_ns} is not after "
                       f"frame_k timestamp {frame_k.timestamp_ns}")
        if frame_k.descriptor_size_bytes != frame_kp1.descriptor_size_bytes:
            self._fail(f"Descriptor sizes differ: {frame_k.descriptor_size_bytes} vs "
                       f"{frame_kp1.descriptor_size_bytes} bytes")

    @staticmethod
    def _fail(message: str):
        logger.error(message)
        raise TrackerPreconditionError(message)
