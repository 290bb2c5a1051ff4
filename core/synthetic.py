"""
core/synthetic.py
Purpose: Stand-in stress-strain curve when no recorded test history exists

Not used by MaterialCalibrator itself; callers decide whether a fabricated
curve is acceptable input.
"""

from core.curve import StressStrainCurve
from core.material_model import FailureState


def generate_synthetic_curve(failure: FailureState, young_modulus: float,
                             num_points: int = 20) -> StressStrainCurve:
    """
    Three-segment curve ending at the failure strain

    Elastic up to one third of the samples, linear hardening up to the
    deviator stress at failure over the second third, then softening by up
    to 20 % over the last third.

    Args:
        failure: Failure readings (sigma1, sigma3, strain_at_failure)
        young_modulus: Slope of the elastic segment
        num_points: Number of samples (at least 3)
    """
    if num_points < 3:
        raise ValueError(f"num_points must be at least 3, got {num_points}")

    third = num_points // 3
    two_thirds = 2 * num_points // 3
    deviator = failure.sigma1 - failure.sigma3
    eps_f = failure.strain_at_failure
    elastic_end = young_modulus * (eps_f / 3)

    strains = []
    stresses = []
    for i in range(num_points):
        strain = eps_f * (i / (num_points - 1))
        if i < third:
            stress = young_modulus * strain
        elif i < two_thirds:
            stress = elastic_end + (deviator - elastic_end) * ((i - third) / third)
        else:
            softening = 1.0 - 0.2 * ((i - two_thirds) / third)
            stress = deviator * softening
        strains.append(strain)
        stresses.append(max(stress, 0.0))

    return StressStrainCurve(strains, stresses)
