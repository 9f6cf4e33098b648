import dataclasses

import numpy as np
import pytest

from FeatureTracking import (
    DescriptorSizeError,
    GyroTracker,
    GyroTrackerConfig,
    MATCH_BITS_STAT,
    MatchWithScore,
    NO_MATCH_NUM_CHECKED_STAT,
    PinholeCamera,
    Quaternion,
    TrackerPreconditionError,
    VisualFrame,
    flip_bits,
    make_rotated_frame_pair,
    random_descriptors,
)


@pytest.fixture
def frame_pair(small_camera, frame_factory, rng):
    descriptors = random_descriptors(3, 32, rng)
    keypoints = [[30.0, 10.0], [60.0, 50.0], [40.0, 90.0]]
    frame_k = frame_factory(small_camera, keypoints, descriptors, 100)
    frame_kp1 = frame_factory(small_camera, keypoints, descriptors, 200)
    return frame_k, frame_kp1


# =============================================================================
# Preconditions
# =============================================================================

def test_valid_pair_is_accepted(small_camera, frame_pair):
    tracker = GyroTracker(small_camera)
    matches = tracker.track(Quaternion.identity(), *frame_pair)
    assert len(matches) == 3


@pytest.mark.parametrize("field, value", [
    ('keypoints', None),
    ('descriptors', None),
    ('track_ids', None),
    ('camera_id', 'other_camera'),
])
def test_missing_or_foreign_frame_data_raises(small_camera, frame_pair, field, value):
    frame_k, frame_kp1 = frame_pair
    tracker = GyroTracker(small_camera)

    with pytest.raises(TrackerPreconditionError):
        tracker.track(Quaternion.identity(), frame_k, dataclasses.replace(frame_kp1, **{field: value}))
    with pytest.raises(TrackerPreconditionError):
        tracker.track(Quaternion.identity(), dataclasses.replace(frame_k, **{field: value}), frame_kp1)


@pytest.mark.parametrize("timestamp_kp1", [100, 50])
def test_non_increasing_timestamps_raise(small_camera, frame_pair, timestamp_kp1):
    frame_k, frame_kp1 = frame_pair
    frame_kp1 = dataclasses.replace(frame_kp1, timestamp_ns=timestamp_kp1)
    with pytest.raises(TrackerPreconditionError):
        GyroTracker(small_camera).track(Quaternion.identity(), frame_k, frame_kp1)


def test_keypoint_descriptor_count_mismatch_raises(small_camera, frame_pair, rng):
    frame_k, frame_kp1 = frame_pair
    frame_kp1 = dataclasses.replace(frame_kp1, descriptors=random_descriptors(2, 32, rng))
    with pytest.raises(TrackerPreconditionError):
        GyroTracker(small_camera).track(Quaternion.identity(), frame_k, frame_kp1)


def test_descriptor_width_mismatch_raises(small_camera, frame_pair):
    frame_k, frame_kp1 = frame_pair
    frame_kp1 = dataclasses.replace(frame_kp1, descriptor_size_bytes=16)
    with pytest.raises(TrackerPreconditionError):
        GyroTracker(small_camera).track(Quaternion.identity(), frame_k, frame_kp1)


def test_descriptor_sizes_must_agree_between_frames(small_camera, frame_pair, frame_factory, rng):
    frame_k, _ = frame_pair
    frame_kp1 = frame_factory(small_camera, frame_k.keypoints, random_descriptors(3, 16, rng), 200)
    with pytest.raises(TrackerPreconditionError):
        GyroTracker(small_camera).track(Quaternion.identity(), frame_k, frame_kp1)


def test_descriptors_wider_than_512_bits_raise(small_camera, frame_factory, rng):
    descriptors = random_descriptors(2, 65, rng)
    frame_k = frame_factory(small_camera, [[10.0, 10.0], [20.0, 20.0]], descriptors, 0)
    frame_kp1 = frame_factory(small_camera, [[10.0, 10.0], [20.0, 20.0]], descriptors, 1)
    with pytest.raises(DescriptorSizeError):
        GyroTracker(small_camera).track(Quaternion.identity(), frame_k, frame_kp1)


def test_invalid_config_is_rejected(small_camera):
    with pytest.raises(ValueError):
        GyroTracker(small_camera, GyroTrackerConfig(small_search_distance=30, large_search_distance=10))


def test_output_container_is_cleared_and_filled(small_camera, frame_pair):
    matches = [MatchWithScore(99, 99, 1.0)]
    result = GyroTracker(small_camera).track(Quaternion.identity(), *frame_pair, matches=matches)

    assert result is matches
    assert MatchWithScore(99, 99, 1.0) not in matches
    assert [(m.index_kp1, m.index_k) for m in matches] == [(0, 0), (1, 1), (2, 2)]


# =============================================================================
# Matching behaviour
# =============================================================================

def test_concrete_scenario(small_camera, frame_factory, scenario_config, stats, rng):
    descriptors_k = random_descriptors(3, 32, rng)
    frame_k = frame_factory(small_camera, [[30.0, 10.0], [60.0, 50.0], [40.0, 90.0]],
                            descriptors_k, 0)
    frame_kp1 = frame_factory(small_camera, [[32.0, 9.0], [60.0, 52.0], [40.0, 200.0]],
                              [flip_bits(descriptors_k[0], 2, rng), descriptors_k[1], descriptors_k[2]],
                              33_000_000)

    tracker = GyroTracker(small_camera, scenario_config, stats)
    matches = tracker.track(Quaternion.identity(), frame_k, frame_kp1)

    assert matches == [MatchWithScore(0, 0, 0.0), MatchWithScore(1, 1, 0.0)]
    assert stats.samples(MATCH_BITS_STAT) == [254, 256]
    assert stats.samples(NO_MATCH_NUM_CHECKED_STAT) == [0]


def test_identity_case_matches_every_keypoint_to_itself(camera, stats):
    pair = make_rotated_frame_pair(camera, Quaternion.identity(), num_keypoints=300,
                                   shuffle=False, seed=7)
    frame_kp1 = dataclasses.replace(pair.frame_k, timestamp_ns=pair.frame_k.timestamp_ns + 1)

    matches = GyroTracker(camera, statistics=stats).track(Quaternion.identity(), pair.frame_k, frame_kp1)

    assert [(m.index_kp1, m.index_k) for m in matches] == [(i, i) for i in range(300)]
    assert stats.samples(MATCH_BITS_STAT) == [256.0] * 300
    assert stats.count(NO_MATCH_NUM_CHECKED_STAT) == 0


def test_rotated_scene_is_tracked(camera, stats):
    q = Quaternion.from_rotation_vector([0.005, 0.02, -0.01])
    pair = make_rotated_frame_pair(camera, q, num_keypoints=400, bit_noise=10,
                                   pixel_noise=0.5, seed=3)

    matches = GyroTracker(camera, statistics=stats).track(q, pair.frame_k, pair.frame_kp1)

    correct = sum(1 for m in matches if pair.ground_truth.get(m.index_k) == m.index_kp1)
    assert correct == len(pair.ground_truth)
    assert len(matches) == len(pair.ground_truth)


def test_wrong_rotation_prior_loses_tracks(camera):
    q = Quaternion.from_rotation_vector([0.0, 0.15, 0.0])
    pair = make_rotated_frame_pair(camera, q, num_keypoints=200, seed=5)

    matches = GyroTracker(camera).track(Quaternion.identity(), pair.frame_k, pair.frame_kp1)

    # ~70 px of unmodelled motion is beyond the wide window.
    assert len(matches) == 0


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_matches_are_injective_and_bounded(camera, seed):
    q = Quaternion.from_rotation_vector([0.01, -0.01, 0.02])
    pair = make_rotated_frame_pair(camera, q, num_keypoints=600, descriptor_size_bytes=8,
                                   bit_noise=12, pixel_noise=3.0, seed=seed)

    matches = GyroTracker(camera).track(q, pair.frame_k, pair.frame_kp1)

    indices_k = [m.index_k for m in matches]
    indices_kp1 = [m.index_kp1 for m in matches]
    assert len(matches) <= min(len(pair.frame_k), len(pair.frame_kp1))
    assert len(set(indices_k)) == len(indices_k)
    assert len(set(indices_kp1)) == len(indices_kp1)
    assert indices_k == sorted(indices_k)


@pytest.mark.parametrize("distortion", [None, [-0.28, 0.07, 0.0002, 0.00002]])
def test_track_through_pinhole_camera(frame_factory, rng, distortion):
    camera = PinholeCamera(fx=100.0, fy=100.0, cx=50.0, cy=50.0, width=100, height=100,
                           distortion=distortion, camera_id="cam_e2e")
    descriptors = random_descriptors(1, 32, rng)
    frame_k = frame_factory(camera, [[48.0, 52.0]], descriptors, 0)
    frame_kp1 = frame_factory(camera, [[48.0, 52.0]], descriptors, 1)

    matches = GyroTracker(camera).track(Quaternion.identity(), frame_k, frame_kp1)

    assert matches == [MatchWithScore(0, 0, 0.0)]


def test_empty_frames(small_camera, frame_factory):
    empty_k = frame_factory(small_camera, np.zeros((0, 2)), np.zeros((0, 32)), 0)
    empty_kp1 = frame_factory(small_camera, np.zeros((0, 2)), np.zeros((0, 32)), 1)
    assert GyroTracker(small_camera).track(Quaternion.identity(), empty_k, empty_kp1) == []


def test_frames_are_not_modified(camera):
    q = Quaternion.from_rotation_vector([0.0, 0.01, 0.0])
    pair = make_rotated_frame_pair(camera, q, num_keypoints=50, seed=11)
    keypoints_before = pair.frame_kp1.keypoints.copy()
    descriptors_before = pair.frame_kp1.descriptors.copy()

    GyroTracker(camera).track(q, pair.frame_k, pair.frame_kp1)

    np.testing.assert_array_equal(pair.frame_kp1.keypoints, keypoints_before)
    np.testing.assert_array_equal(pair.frame_kp1.descriptors, descriptors_before)
    assert isinstance(pair.frame_kp1, VisualFrame)
