"""
Hamming distance between fixed-width binary descriptors.
"""

import numpy as np

from .core_data_structures import DescriptorSizeError

# Binary descriptors (ORB, BRISK, FREAK, ...) are at most 512 bits wide.
MAX_DESCRIPTOR_SIZE_BITS = 512

_POPCOUNT_TABLE = np.array([bin(value).count('1') for value in range(256)], dtype=np.uint16)


def check_descriptor_size(descriptor_size_bytes: int) -> int:
    """
    Validate a descriptor width and return it in bits

    Raises:
        DescriptorSizeError: If the width is not in (0, 512] bits
    """
    size_bits = int(descriptor_size_bytes) * 8
    if size_bits <= 0 or size_bits > MAX_DESCRIPTOR_SIZE_BITS:
        raise DescriptorSizeError(
            f"Descriptor size of {size_bits} bits is not supported "
            f"(must be in (0, {MAX_DESCRIPTOR_SIZE_BITS}])")
    return size_bits


def hamming_distance(descriptor_a: np.ndarray, descriptor_b: np.ndarray) -> int:
    """
    Number of differing bits between two descriptors of identical length

    Args:
        descriptor_a: (L,) uint8 descriptor
        descriptor_b: (L,) uint8 descriptor

    Returns:
        Hamming distance in [0, 8L]
    """
    if descriptor_a.shape != descriptor_b.shape:
        raise ValueError(
            f"Descriptor length mismatch: {descriptor_a.shape} vs {descriptor_b.shape}")
    xor = np.bitwise_xor(descriptor_a, descriptor_b)
    distance = int(_POPCOUNT_TABLE[xor].sum())
    assert distance <= descriptor_a.size * 8
    return distance


def hamming_distances(descriptor: np.ndarray, candidates: np.ndarray) -> np.ndarray:
    """
    Hamming distance from one descriptor to each row of a candidate block

    Args:
        descriptor: (L,) uint8 descriptor
        candidates: (M, L) uint8 descriptors

    Returns:
        (M,) int array of distances
    """
    if candidates.shape[0] == 0:
        return np.zeros(0, dtype=np.int64)
    if candidates.shape[1] != descriptor.shape[0]:
        raise ValueError(
            f"Descriptor length mismatch: {descriptor.shape[0]} vs {candidates.shape[1]}")
    xor = np.bitwise_xor(candidates, descriptor[np.newaxis, :])
    return _POPCOUNT_TABLE[xor].sum(axis=1, dtype=np.int64)
