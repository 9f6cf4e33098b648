"""
Two-tier windowed descriptor matcher.

For every keypoint of frame k, in ascending index order, candidates of frame
(k+1) are searched around the predicted position: first in a narrow window,
then, only if nothing was accepted, in a wide window. A candidate is accepted
when its score (descriptor bits minus Hamming distance) strictly beats the
running best, which starts at the threshold score. Accepted candidates are
claimed for the rest of the call, so the result depends on the processing
order: the first sufficiently good claimant wins.
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Optional

from .config import GyroTrackerConfig
from .core_data_structures import MatchWithScore, Vector2, VisualFrame
from .descriptor_distance import hamming_distances
from .logger import get_logger
from .prediction import GyroTrackerMatchingData
from .row_index import RowBucketedIndex, row_window
from .statistics import (
    MATCH_BITS_STAT,
    NO_MATCH_NUM_CHECKED_STAT,
    NullStatistics,
    StatisticsSink,
)
from .utils import pixel_distance

logger = get_logger("windowed_matcher")


@dataclass
class WindowSearchResult:
    """Outcome of searching one window for one source keypoint"""
    index_kp1: int
    best_score: int
    num_checked: int

    @property
    def found(self) -> bool:
        return self.index_kp1 >= 0


class WindowedMatcher:
    """Greedy narrow-then-wide window matcher"""

    def __init__(self, config: Optional[GyroTrackerConfig] = None,
                 statistics: Optional[StatisticsSink] = None):
        self.config = config or GyroTrackerConfig()
        self.statistics = statistics or NullStatistics()

    def match(self, matching_data: GyroTrackerMatchingData,
              frame_kp1: VisualFrame, frame_k: VisualFrame) -> List[MatchWithScore]:
        """
        Match every predictable keypoint of frame k against frame (k+1)

        Args:
            matching_data: Predictions and row index for this frame pair
            frame_kp1: Frame (k+1), owner of the candidate descriptors
            frame_k: Frame k, owner of the source descriptors

        Returns:
            Matches in ascending order of frame k index
        """
        descriptor_size_bits = matching_data.descriptor_size_bits
        threshold_score = int(descriptor_size_bits * self.config.matching_threshold_bits_ratio)
        index = matching_data.keypoints_kp1_by_y
        descriptors_kp1 = frame_kp1.descriptors

        # Keypoints of frame (k+1) that are already claimed by a match.
        is_keypoint_kp1_matched = np.zeros(matching_data.num_points_kp1, dtype=bool)
        matches: List[MatchWithScore] = []
        num_unpredicted = 0

        for i in range(matching_data.num_points_k):
            if not matching_data.prediction_success[i]:
                num_unpredicted += 1
                continue

            predicted = matching_data.predicted_keypoint_positions_kp1[i]
            descriptor_k = frame_k.get_descriptor(i)
            processed_kp1 = np.zeros(matching_data.num_points_kp1, dtype=bool)

            result = self._search_window(
                index, predicted, self.config.small_search_distance, descriptor_k,
                descriptors_kp1, is_keypoint_kp1_matched, processed_kp1,
                threshold_score, descriptor_size_bits)
            num_checked = result.num_checked

            if not result.found:
                result = self._search_window(
                    index, predicted, self.config.large_search_distance, descriptor_k,
                    descriptors_kp1, is_keypoint_kp1_matched, processed_kp1,
                    threshold_score, descriptor_size_bits)
                num_checked += result.num_checked

            if result.found:
                is_keypoint_kp1_matched[result.index_kp1] = True
                score = (result.best_score / descriptor_size_bits
                         if self.config.emit_descriptor_score else 0.0)
                matches.append(MatchWithScore(result.index_kp1, i, score))
                self.statistics.add_sample(MATCH_BITS_STAT, result.best_score)
            else:
                self.statistics.add_sample(NO_MATCH_NUM_CHECKED_STAT, num_checked)

        logger.debug(
            f"Matched {len(matches)}/{matching_data.num_points_k} keypoints "
            f"({num_unpredicted} unpredicted, {matching_data.num_points_kp1} candidates)")
        return matches

    def _search_window(self, index: RowBucketedIndex, predicted: np.ndarray, radius: float,
                       descriptor_k: np.ndarray, descriptors_kp1: np.ndarray,
                       is_keypoint_kp1_matched: np.ndarray, processed_kp1: np.ndarray,
                       best_score: int, descriptor_size_bits: int) -> WindowSearchResult:
        """
        Score the unclaimed, unprocessed candidates inside one window

        Every scored candidate is marked in processed_kp1. The first
        candidate with the highest score is accepted if that score is
        strictly greater than best_score.
        """
        top, bottom = row_window(predicted[1], radius, index.image_height)
        candidates, measurements = index.query(top, bottom)

        bound_left = int(predicted[0] - radius)
        bound_right = int(predicted[0] + radius)
        available = ((measurements[:, 0] >= bound_left) &
                     (measurements[:, 0] <= bound_right) &
                     ~is_keypoint_kp1_matched[candidates] &
                     ~processed_kp1[candidates])
        candidates = candidates[available]
        measurements = measurements[available]
        if candidates.size == 0:
            return WindowSearchResult(-1, best_score, 0)

        assert 0 <= candidates.min() and candidates.max() < is_keypoint_kp1_matched.shape[0]
        scores = descriptor_size_bits - hamming_distances(descriptor_k, descriptors_kp1[candidates])
        assert scores.max() <= descriptor_size_bits
        processed_kp1[candidates] = True

        best = int(np.argmax(scores))
        if scores[best] <= best_score:
            return WindowSearchResult(-1, best_score, int(candidates.size))

        assert pixel_distance(Vector2.from_array(predicted),
                              Vector2.from_array(measurements[best])) < 2 * (radius + 1)
        return WindowSearchResult(int(candidates[best]), int(scores[best]), int(candidates.size))
