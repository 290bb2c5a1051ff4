import logging
import math
import numpy as np
from typing import Any, Dict, Optional, Tuple

from core.curve import StressStrainCurve
from core.material_model import CalibrationParameters, FailureState
from utils.config_manager import (
    CalibrationSettings,
    load_config,
    seed_from_config,
    settings_from_config,
)

logger = logging.getLogger(__name__)


class InsufficientDataError(ValueError):
    """Raised when a curve is too short to calibrate from"""


class MaterialCalibrator:
    """
    Derives CalibrationParameters from a stress-strain curve and the stress
    state read at failure.

    The calibrator keeps only its settings; every call works on the curve it
    is given and returns a new parameter set.
    """

    def __init__(self, settings: Optional[CalibrationSettings] = None,
                 seed: Optional[CalibrationParameters] = None):
        self.settings = settings or CalibrationSettings()
        self.seed = seed or seed_from_config(None)

    @classmethod
    def from_config(cls, config_path: str) -> "MaterialCalibrator":
        config = load_config(config_path)
        return cls(settings_from_config(config), seed_from_config(config))

    def calibrate(self, curve: StressStrainCurve, failure: FailureState,
                  seed: Optional[CalibrationParameters] = None) -> CalibrationParameters:
        """
        Run the full calibration pipeline

        Args:
            curve: Observed stress-strain history
            failure: Principal stresses and shear stress at failure
            seed: Current parameter estimates, used where the data cannot decide

        Returns:
            New CalibrationParameters

        Raises:
            InsufficientDataError: If the curve has fewer samples than the regression minimum
        """
        seed = seed or self.seed
        minimum = self.settings.minimum_points_for_regression
        if len(curve) < minimum:
            raise InsufficientDataError(
                f"Insufficient stress-strain data for calibration ({len(curve)} < {minimum} points). "
                "Run a test first."
            )

        young_modulus = self.calibrate_young_modulus(curve, seed.young_modulus)
        poisson_ratio = self.calibrate_poisson_ratio(failure, seed.poisson_ratio)
        yield_strength = self.calibrate_yield_strength(curve, young_modulus)
        brittle_strength = self.calibrate_brittle_strength(curve, seed.young_modulus)
        friction_angle, cohesion = self.calibrate_mohr_coulomb(failure, yield_strength)

        result = CalibrationParameters(
            young_modulus=young_modulus,
            poisson_ratio=poisson_ratio,
            yield_strength=yield_strength,
            brittle_strength=brittle_strength,
            friction_angle_deg=friction_angle,
            cohesion=cohesion
        )
        logger.info(f"Calibration finished: {result.model_dump()}")
        return result

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    def calibrate_young_modulus(self, curve: StressStrainCurve, current_modulus: float) -> float:
        """Least-squares slope of the elastic part of the curve, clamped"""
        s = self.settings
        strain_limit = s.estimated_yield_strain * s.elastic_zone_limit
        mask = curve.strain <= strain_limit

        if np.count_nonzero(mask) >= s.minimum_points_for_regression:
            x = curve.strain[mask]
            y = curve.stress[mask]
        else:
            logger.debug(
                f"Only {np.count_nonzero(mask)} samples below strain {strain_limit:g}, "
                f"using the first {s.minimum_points_for_regression} samples"
            )
            count = min(s.minimum_points_for_regression, len(curve))
            x = curve.strain[:count]
            y = curve.stress[:count]

        slope = ols_slope(x, y, s.regression_tolerance)
        if slope is None:
            logger.warning("Degenerate elastic regression, keeping current Young's modulus")
            slope = current_modulus

        return _clamp(slope, s.min_young_modulus, s.max_young_modulus)

    def calibrate_poisson_ratio(self, failure: FailureState, current_ratio: float) -> float:
        """Nudge the current Poisson's ratio according to the stress ratio at failure"""
        s = self.settings
        stress_ratio = (failure.sigma1 - failure.sigma3) / max(failure.sigma3, s.min_sigma3_for_ratio)

        adjusted = current_ratio
        if stress_ratio > s.dilatant_stress_ratio:
            adjusted = max(s.dilatant_poisson_floor, current_ratio - s.dilatant_poisson_step)
        elif stress_ratio < s.compressible_stress_ratio:
            adjusted = min(s.compressible_poisson_ceiling, current_ratio + s.compressible_poisson_step)

        return _clamp(adjusted, s.min_poisson_ratio, s.max_poisson_ratio)

    def calibrate_yield_strength(self, curve: StressStrainCurve, young_modulus: float) -> float:
        """0.2 % offset yield stress, peak-based estimate when the offset line is never crossed"""
        s = self.settings
        crossing = offset_yield_point(curve, young_modulus, s.yield_offset_strain)

        if crossing is not None:
            yield_stress = crossing[1]
        else:
            peak = curve.peak_stress
            ductile = (len(curve) > s.ductile_min_points and
                       curve.stress[-1] > s.ductile_final_stress_fraction * peak)
            fraction = s.ductile_yield_fraction if ductile else s.brittle_yield_fraction
            logger.debug(
                f"No offset crossing found, estimating yield from peak ({'ductile' if ductile else 'brittle'})"
            )
            yield_stress = peak * fraction

        return _clamp(yield_stress,
                      young_modulus * s.min_yield_fraction_of_e,
                      young_modulus * s.max_yield_fraction_of_e)

    def calibrate_brittle_strength(self, curve: StressStrainCurve, young_modulus: float) -> float:
        """Peak stress with a margin that grows when the curve softens sharply after the peak"""
        s = self.settings
        peak_index = curve.peak_index
        peak = curve.peak_stress
        brittle_strength = peak * s.brittle_margin

        post_index = peak_index + s.post_peak_offset
        if post_index < len(curve) and peak > 0:
            drop = (peak - curve.stress[post_index]) / peak
            if drop > s.softening_drop_threshold:
                brittle_strength = peak * s.softening_margin

        return _clamp(brittle_strength,
                      young_modulus * s.min_brittle_fraction_of_e,
                      young_modulus * s.max_brittle_fraction_of_e)

    def calibrate_mohr_coulomb(self, failure: FailureState, yield_strength: float) -> Tuple[float, float]:
        """
        Friction angle and cohesion from a single failure state

        A one-point inversion of the Coulomb criterion, not a regression over
        several confining pressures. Cohesion is evaluated with the angle
        before it is clamped.

        Returns:
            (friction_angle_deg, cohesion)
        """
        s = self.settings
        sigma1, sigma3 = failure.sigma1, failure.sigma3
        mean_stress = (sigma1 + sigma3) / 2.0

        if abs(mean_stress) > 0:
            ratio = failure.shear_stress / mean_stress
        else:
            logger.warning("Zero mean stress at failure, friction angle set to its lower bound")
            ratio = math.sin(math.radians(s.min_friction_angle))
        if not -1.0 <= ratio <= 1.0:
            logger.warning(f"Shear/mean stress ratio {ratio:.4f} outside [-1, 1], clipping")
            ratio = _clamp(ratio, -1.0, 1.0)

        phi = math.asin(ratio)
        sin_phi = math.sin(phi)
        cos_phi = math.cos(phi)

        if cos_phi > 1e-12:
            cohesion = (sigma1 - sigma3) / (2 * cos_phi) - (sigma1 + sigma3) * sin_phi / (2 * cos_phi)
        else:
            logger.warning("Friction angle of 90 deg at failure, cohesion set to its lower bound")
            cohesion = -math.inf

        friction_angle = _clamp(math.degrees(phi), s.min_friction_angle, s.max_friction_angle)
        cohesion = _clamp(cohesion,
                          yield_strength * s.min_cohesion_fraction_of_yield,
                          yield_strength * s.max_cohesion_fraction_of_yield)
        return friction_angle, cohesion


def ols_slope(x: np.ndarray, y: np.ndarray, tolerance: float = 1e-10) -> Optional[float]:
    """Closed-form least-squares slope, None when the x values do not spread"""
    n = len(x)
    sum_x = float(np.sum(x))
    sum_y = float(np.sum(y))
    sum_xy = float(np.sum(x * y))
    sum_x2 = float(np.sum(x * x))

    denom = n * sum_x2 - sum_x * sum_x
    if abs(denom) < tolerance:
        return None
    return (n * sum_xy - sum_x * sum_y) / denom


def offset_yield_point(curve: StressStrainCurve, young_modulus: float,
                       offset_strain: float = 0.002) -> Optional[Tuple[float, float]]:
    """
    First crossing of the curve with the line stress = E*(strain - offset)

    Returns:
        (strain, stress) interpolated at the crossing, or None
    """
    strain = curve.strain
    stress = curve.stress
    offset_line = young_modulus * (strain - offset_strain)
    above = stress >= offset_line

    for i in range(1, len(curve)):
        if above[i] == above[i - 1]:
            continue
        prev_gap = offset_line[i - 1] - stress[i - 1]
        denom = (stress[i] - stress[i - 1]) - (offset_line[i] - offset_line[i - 1])
        if denom == 0:
            t = 0.0
        else:
            t = prev_gap / denom
        return (float(strain[i - 1] + t * (strain[i] - strain[i - 1])),
                float(stress[i - 1] + t * (stress[i] - stress[i - 1])))
    return None


def apply_calibration(current: CalibrationParameters,
                      calibrated: CalibrationParameters) -> CalibrationParameters:
    """
    Merge a calibration result into the current parameters

    Cohesion and friction angle are only taken over when the calibrated
    values are positive.
    """
    update: Dict[str, Any] = {
        'young_modulus': calibrated.young_modulus,
        'poisson_ratio': calibrated.poisson_ratio,
        'yield_strength': calibrated.yield_strength,
        'brittle_strength': calibrated.brittle_strength,
    }
    if calibrated.cohesion > 0:
        update['cohesion'] = calibrated.cohesion
    if calibrated.friction_angle_deg > 0:
        update['friction_angle_deg'] = calibrated.friction_angle_deg
    return CalibrationParameters(**{**current.model_dump(), **update})


def _clamp(value: float, lower: float, upper: float) -> float:
    return float(max(lower, min(upper, value)))
