"""
core/curve.py
Purpose: Immutable stress-strain history of a triaxial test
"""

from typing import Iterable, Iterator, Tuple

import numpy as np


class StressStrainCurve:
    """
    Ordered (strain, stress) samples, non-decreasing in strain.

    The arrays are copied on construction and flagged read-only so a curve
    can be handed to several calibrations without being changed underneath.
    """

    def __init__(self, strains: Iterable[float], stresses: Iterable[float]):
        strain = np.array(strains, dtype=float)
        stress = np.array(stresses, dtype=float)

        if strain.ndim != 1 or stress.ndim != 1:
            raise ValueError("Strain and stress must be one-dimensional")
        if strain.shape != stress.shape:
            raise ValueError(
                f"Strain and stress lengths differ: {strain.size} != {stress.size}"
            )
        if not (np.all(np.isfinite(strain)) and np.all(np.isfinite(stress))):
            raise ValueError("Curve contains non-finite values")
        if np.any(strain < 0) or np.any(stress < 0):
            raise ValueError("Strain and stress must be non-negative")
        if np.any(np.diff(strain) < 0):
            raise ValueError("Strain must be non-decreasing")

        strain.setflags(write=False)
        stress.setflags(write=False)
        self._strain = strain
        self._stress = stress

    @classmethod
    def from_samples(cls, samples: Iterable[Tuple[float, float]]) -> "StressStrainCurve":
        pairs = list(samples)
        return cls([p[0] for p in pairs], [p[1] for p in pairs])

    @property
    def strain(self) -> np.ndarray:
        return self._strain

    @property
    def stress(self) -> np.ndarray:
        return self._stress

    @property
    def peak_index(self) -> int:
        """Index of the first sample carrying the maximum stress"""
        return int(np.argmax(self._stress))

    @property
    def peak_stress(self) -> float:
        return float(self._stress[self.peak_index])

    def __len__(self) -> int:
        return int(self._strain.size)

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        for eps, sig in zip(self._strain, self._stress):
            yield float(eps), float(sig)

    def __repr__(self) -> str:
        return f"StressStrainCurve(n={len(self)}, peak={self.peak_stress if len(self) else None})"
