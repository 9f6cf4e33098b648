"""
Unit quaternion value type.

Only the operations the tracker needs are exposed: rotating bearing vectors,
inversion and conversion to a rotation matrix. Quaternions are stored in
Hamilton convention (w, x, y, z); scipy uses scalar-last ordering.
"""

import numpy as np
from dataclasses import dataclass
from scipy.spatial.transform import Rotation


@dataclass(frozen=True)
class Quaternion:
    """Unit quaternion, e.g. q_Ckp1_Ck rotating frame-k vectors into frame k+1"""
    w: float
    x: float
    y: float
    z: float

    def __post_init__(self):
        norm = np.sqrt(self.w ** 2 + self.x ** 2 + self.y ** 2 + self.z ** 2)
        if not np.isfinite(norm) or norm == 0.0:
            raise ValueError("Quaternion must have a finite, non-zero norm")
        # Normalize in place; the dataclass is frozen for callers.
        object.__setattr__(self, 'w', float(self.w / norm))
        object.__setattr__(self, 'x', float(self.x / norm))
        object.__setattr__(self, 'y', float(self.y / norm))
        object.__setattr__(self, 'z', float(self.z / norm))

    @classmethod
    def identity(cls) -> 'Quaternion':
        return cls(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_scipy(cls, rotation: Rotation) -> 'Quaternion':
        x, y, z, w = rotation.as_quat()
        return cls(w, x, y, z)

    @classmethod
    def from_rotation_vector(cls, rotation_vector) -> 'Quaternion':
        """Axis-angle vector in radians"""
        return cls.from_scipy(Rotation.from_rotvec(np.asarray(rotation_vector, dtype=np.float64)))

    @classmethod
    def from_matrix(cls, matrix) -> 'Quaternion':
        return cls.from_scipy(Rotation.from_matrix(np.asarray(matrix, dtype=np.float64)))

    @classmethod
    def from_euler(cls, sequence: str, angles, degrees: bool = False) -> 'Quaternion':
        return cls.from_scipy(Rotation.from_euler(sequence, angles, degrees=degrees))

    def to_scipy(self) -> Rotation:
        return Rotation.from_quat([self.x, self.y, self.z, self.w])

    def as_matrix(self) -> np.ndarray:
        return self.to_scipy().as_matrix()

    def inverse(self) -> 'Quaternion':
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def rotate(self, vectors: np.ndarray) -> np.ndarray:
        """
        Rotate one (3,) vector or a stack of (N, 3) vectors

        Args:
            vectors: Vectors expressed in the source frame

        Returns:
            Rotated vectors with the same shape as the input
        """
        vectors = np.asarray(vectors, dtype=np.float64)
        if vectors.size == 0:
            return vectors.reshape(-1, 3)
        return self.to_scipy().apply(vectors)

    def angle(self) -> float:
        """Rotation angle in radians"""
        return float(np.linalg.norm(self.to_scipy().as_rotvec()))
