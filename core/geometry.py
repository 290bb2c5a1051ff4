"""
core/geometry.py
Purpose: Mohr circle and Coulomb envelope geometry

Two line forms of the same envelope are used on purpose:

    tau = c*cos(phi) + sigma*sin(phi)   -> tangency_point (failure detected)
    tau = c + sigma*tan(phi)            -> envelope_value, analytical_failure_point

They give different failure points for the same circle; keep them separate.
All functions are pure. Degenerate intermediate values are logged and
replaced by a fallback instead of raising.
"""

import logging
import math
from typing import Optional

from core.material_model import (
    FailureEnvelope,
    FailurePoint,
    MohrCircle,
    StressState,
    TangentLine,
)

logger = logging.getLogger(__name__)

RADIUS_EPSILON = 1e-3
SIN_PHI_SQ_CAP = 0.9999
TAN_PHI_SENTINEL = 1e6
SLOPE_SENTINEL = 1000.0
SLOPE_TOLERANCE = 1e-4
DENOMINATOR_TOLERANCE = 1e-4


def circle_for(stress: StressState) -> MohrCircle:
    """Mohr circle of a stress state, radius floored to RADIUS_EPSILON"""
    sigma1 = stress.sigma1
    sigma3 = stress.sigma3
    return MohrCircle(
        center=(sigma1 + sigma3) / 2.0,
        radius=max((sigma1 - sigma3) / 2.0, RADIUS_EPSILON)
    )


def _bounded_tan(phi: float) -> float:
    m = math.tan(phi)
    if not math.isfinite(m) or abs(m) > TAN_PHI_SENTINEL:
        logger.debug(f"tan(phi) out of range for phi={math.degrees(phi):.4f} deg, clamping")
        return math.copysign(TAN_PHI_SENTINEL, m) if not math.isnan(m) else 0.0
    return m


def envelope_value(envelope: FailureEnvelope, sigma: float) -> float:
    """Shear stress on the straight envelope tau = c + sigma*tan(phi)"""
    return envelope.cohesion + sigma * _bounded_tan(envelope.phi)


def tangent_envelope_value(envelope: FailureEnvelope, sigma: float) -> float:
    """Shear stress on the tangency form tau = c*cos(phi) + sigma*sin(phi)"""
    phi = envelope.phi
    return envelope.cohesion * math.cos(phi) + sigma * math.sin(phi)


def tangency_point(circle: MohrCircle, envelope: FailureEnvelope) -> FailurePoint:
    """
    Failure point once failure has been detected

    Solves the distance condition between the circle centre and the line
    tau = c*cos(phi) + sigma*sin(phi).

    Args:
        circle: Mohr circle at failure
        envelope: Cohesion and friction angle

    Returns:
        FailurePoint (sigma, tau), always finite
    """
    phi = envelope.phi
    sin_phi = math.sin(phi)
    cos_phi = math.cos(phi)
    k = envelope.cohesion * cos_phi

    sin_phi_sq = sin_phi * sin_phi
    if sin_phi_sq > SIN_PHI_SQ_CAP:
        logger.debug(f"sin^2(phi)={sin_phi_sq:.6f} capped at {SIN_PHI_SQ_CAP}")
        sin_phi_sq = SIN_PHI_SQ_CAP

    sigma_f = (circle.center * (1 - sin_phi_sq) - 2 * k * sin_phi) / (1 - sin_phi_sq)
    if not math.isfinite(sigma_f):
        logger.debug("Non-finite tangency sigma, falling back to circle center")
        sigma_f = circle.center

    tau_f = k + sigma_f * sin_phi
    if not math.isfinite(tau_f):
        logger.debug("Non-finite tangency tau, falling back to circle radius")
        tau_f = circle.radius

    return FailurePoint(sigma=sigma_f, tau=tau_f)


def analytical_failure_point(circle: MohrCircle, envelope: FailureEnvelope) -> FailurePoint:
    """
    Failure point while the circle has not reached the envelope

    Uses the straight envelope tau = c + m*sigma with m = tan(phi).
    """
    m = math.tan(envelope.phi)
    if not math.isfinite(m):
        logger.debug("Non-finite envelope slope, using 0")
        m = 0.0

    denom = 1 + m * m
    if abs(denom) > DENOMINATOR_TOLERANCE:
        sigma_f = (circle.center - envelope.cohesion * m) / denom
    else:
        logger.debug(f"Degenerate denominator {denom:.3e}, falling back to circle center")
        sigma_f = circle.center

    return FailurePoint(sigma=sigma_f, tau=envelope.cohesion + m * sigma_f)


def tangent_line(circle: MohrCircle, point: FailurePoint) -> TangentLine:
    """Line through `point` perpendicular to the radius of `circle` drawn to it"""
    dx = point.sigma - circle.center
    if abs(dx) > SLOPE_TOLERANCE:
        radial = point.tau / dx
    else:
        # vertical radius
        radial = SLOPE_SENTINEL

    if abs(radial) > SLOPE_TOLERANCE:
        slope = -1.0 / radial
    else:
        slope = -SLOPE_SENTINEL

    return TangentLine(point=point, radial_slope=radial, slope=slope)


def is_failed(circle: MohrCircle, envelope: FailureEnvelope) -> bool:
    """True when the circle radius reaches the envelope shear at its centre"""
    return circle.radius >= envelope_value(envelope, circle.center)


def failure_proximity(circle: MohrCircle, envelope: FailureEnvelope) -> float:
    """Radius as a percentage of the envelope shear at the circle centre"""
    failure_shear = envelope_value(envelope, circle.center)
    if failure_shear <= 0:
        return math.inf
    return circle.radius / failure_shear * 100.0


def failure_point(circle: MohrCircle, envelope: FailureEnvelope,
                  failed: Optional[bool] = None) -> FailurePoint:
    """Pick the tangency or analytical failure point depending on the failure status"""
    if failed is None:
        failed = is_failed(circle, envelope)
    if failed:
        return tangency_point(circle, envelope)
    return analytical_failure_point(circle, envelope)
