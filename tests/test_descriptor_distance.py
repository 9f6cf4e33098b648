import numpy as np
import pytest

from FeatureTracking import (
    DescriptorSizeError,
    MAX_DESCRIPTOR_SIZE_BITS,
    check_descriptor_size,
    flip_bits,
    hamming_distance,
    hamming_distances,
    random_descriptors,
)


def test_identical_descriptors_have_zero_distance(rng):
    descriptor = random_descriptors(1, 32, rng)[0]
    assert hamming_distance(descriptor, descriptor.copy()) == 0


def test_complement_has_full_distance(rng):
    descriptor = random_descriptors(1, 64, rng)[0]
    assert hamming_distance(descriptor, np.bitwise_not(descriptor)) == 512


def test_known_bytes():
    a = np.array([0b00000000, 0b11110000, 0xFF], dtype=np.uint8)
    b = np.array([0b00000001, 0b00001111, 0xFF], dtype=np.uint8)
    assert hamming_distance(a, b) == 9


@pytest.mark.parametrize("num_bits", [0, 1, 7, 64, 255])
def test_flipped_bits_are_counted(rng, num_bits):
    descriptor = random_descriptors(1, 32, rng)[0]
    assert hamming_distance(descriptor, flip_bits(descriptor, num_bits, rng)) == num_bits


def test_vectorized_distances_match_scalar(rng):
    descriptor = random_descriptors(1, 48, rng)[0]
    candidates = random_descriptors(20, 48, rng)
    expected = [hamming_distance(descriptor, c) for c in candidates]
    np.testing.assert_array_equal(hamming_distances(descriptor, candidates), expected)


def test_vectorized_distances_of_empty_block(rng):
    descriptor = random_descriptors(1, 32, rng)[0]
    assert hamming_distances(descriptor, np.zeros((0, 32), dtype=np.uint8)).shape == (0,)


def test_length_mismatch_raises(rng):
    with pytest.raises(ValueError):
        hamming_distance(random_descriptors(1, 32, rng)[0], random_descriptors(1, 16, rng)[0])
    with pytest.raises(ValueError):
        hamming_distances(random_descriptors(1, 32, rng)[0], random_descriptors(3, 16, rng))


def test_descriptor_size_ceiling():
    assert check_descriptor_size(64) == MAX_DESCRIPTOR_SIZE_BITS
    assert check_descriptor_size(32) == 256
    with pytest.raises(DescriptorSizeError):
        check_descriptor_size(65)
    with pytest.raises(DescriptorSizeError):
        check_descriptor_size(0)
