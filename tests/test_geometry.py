"""
Tests for Mohr circle / Coulomb envelope geometry.
"""

import math

import numpy as np
import pytest

from core.geometry import (
    RADIUS_EPSILON,
    SLOPE_SENTINEL,
    TAN_PHI_SENTINEL,
    analytical_failure_point,
    circle_for,
    envelope_value,
    failure_point,
    failure_proximity,
    is_failed,
    tangency_point,
    tangent_envelope_value,
    tangent_line,
)
from core.material_model import FailureEnvelope, FailurePoint, MohrCircle, StressState


@pytest.mark.parametrize("confining, axial", [
    (10.0, 120.0),
    (120.0, 10.0),
    (0.0, 0.0),
    (25.0, 25.0),
    (5.0, 5.0005),
])
def test_circle_contains_principal_stresses(confining, axial):
    """Radius floored at epsilon and both principal stresses inside the circle."""
    stress = StressState(confining_pressure=confining, axial_pressure=axial)
    circle = circle_for(stress)

    assert stress.sigma1 >= stress.sigma3
    assert circle.radius >= RADIUS_EPSILON
    assert circle.sigma_min <= stress.sigma3 + 1e-12
    assert stress.sigma1 <= circle.sigma_max + 1e-12


def test_circle_center_and_radius():
    circle = circle_for(StressState(confining_pressure=10.0, axial_pressure=120.0))
    assert circle.center == pytest.approx(65.0)
    assert circle.radius == pytest.approx(55.0)


@pytest.mark.parametrize("phi", [0.0, 1.0, 15.0, 30.0, 45.0, 60.0, 75.0, 85.0, 89.0])
@pytest.mark.parametrize("cohesion", [0.0, 5.0, 50.0])
def test_failure_points_are_finite(phi, cohesion):
    circle = MohrCircle(center=65.0, radius=55.0)
    envelope = FailureEnvelope(cohesion=cohesion, friction_angle_deg=phi)

    for point in (tangency_point(circle, envelope), analytical_failure_point(circle, envelope)):
        assert math.isfinite(point.sigma)
        assert math.isfinite(point.tau)


def test_purely_cohesive_envelope():
    """phi = 0: both paths give the point above the centre at tau = c."""
    circle = MohrCircle(center=40.0, radius=10.0)
    envelope = FailureEnvelope(cohesion=12.0, friction_angle_deg=0.0)

    tangent = tangency_point(circle, envelope)
    analytical = analytical_failure_point(circle, envelope)
    assert tangent.sigma == pytest.approx(40.0)
    assert tangent.tau == pytest.approx(12.0)
    assert analytical.sigma == pytest.approx(40.0)
    assert analytical.tau == pytest.approx(12.0)


def test_tangency_point_cohesionless():
    circle = MohrCircle(center=100.0, radius=50.0)
    envelope = FailureEnvelope(cohesion=0.0, friction_angle_deg=30.0)

    point = tangency_point(circle, envelope)
    assert point.sigma == pytest.approx(100.0)
    assert point.tau == pytest.approx(50.0)


def test_tangency_point_near_ninety_degrees_is_capped():
    circle = MohrCircle(center=100.0, radius=50.0)
    envelope = FailureEnvelope(cohesion=10.0, friction_angle_deg=89.9)

    point = tangency_point(circle, envelope)
    phi = math.radians(89.9)
    expected_sigma = (100.0 * (1 - 0.9999) - 2 * 10.0 * math.cos(phi) * math.sin(phi)) / (1 - 0.9999)
    assert point.sigma == pytest.approx(expected_sigma)
    assert math.isfinite(point.tau)


def test_analytical_failure_point():
    circle = MohrCircle(center=100.0, radius=50.0)
    envelope = FailureEnvelope(cohesion=0.0, friction_angle_deg=45.0)

    point = analytical_failure_point(circle, envelope)
    assert point.sigma == pytest.approx(50.0)
    assert point.tau == pytest.approx(50.0)


def test_two_parameterisations_differ():
    """The two failure points are not the same point for a general envelope."""
    circle = MohrCircle(center=100.0, radius=50.0)
    envelope = FailureEnvelope(cohesion=10.0, friction_angle_deg=30.0)

    tangent = tangency_point(circle, envelope)
    analytical = analytical_failure_point(circle, envelope)
    assert not np.isclose(tangent.sigma, analytical.sigma)


def test_envelope_values():
    envelope = FailureEnvelope(cohesion=10.0, friction_angle_deg=45.0)
    assert envelope_value(envelope, 20.0) == pytest.approx(30.0)
    assert tangent_envelope_value(envelope, 20.0) == pytest.approx(30.0 * math.sqrt(0.5))

    flat = FailureEnvelope(cohesion=10.0, friction_angle_deg=0.0)
    assert tangent_envelope_value(flat, 5.0) == pytest.approx(10.0)


def test_envelope_value_clamps_slope_near_ninety():
    envelope = FailureEnvelope(cohesion=1.0, friction_angle_deg=89.99999999)
    assert envelope_value(envelope, 1.0) == pytest.approx(1.0 + TAN_PHI_SENTINEL)


def test_envelope_rejects_invalid_angles():
    with pytest.raises(ValueError):
        FailureEnvelope(cohesion=1.0, friction_angle_deg=90.0)
    with pytest.raises(ValueError):
        FailureEnvelope(cohesion=-1.0, friction_angle_deg=30.0)


def test_tangent_line_slopes():
    circle = MohrCircle(center=100.0, radius=50.0)
    point = FailurePoint(sigma=75.0, tau=50.0 * math.cos(math.radians(30.0)))

    line = tangent_line(circle, point)
    assert line.radial_slope == pytest.approx(point.tau / -25.0)
    assert line.slope == pytest.approx(-1.0 / line.radial_slope)
    assert line.tau_at(point.sigma) == pytest.approx(point.tau)


def test_tangent_line_sentinels():
    circle = MohrCircle(center=100.0, radius=50.0)

    vertical = tangent_line(circle, FailurePoint(sigma=100.0, tau=50.0))
    assert vertical.radial_slope == SLOPE_SENTINEL
    assert vertical.slope == pytest.approx(-1.0 / SLOPE_SENTINEL)

    horizontal = tangent_line(circle, FailurePoint(sigma=150.0, tau=0.0))
    assert horizontal.radial_slope == 0.0
    assert horizontal.slope == -SLOPE_SENTINEL


def test_circle_tangent_point_lies_on_circle():
    circle = MohrCircle(center=100.0, radius=50.0)
    point = circle.tangent_point(30.0)

    assert point.sigma == pytest.approx(75.0)
    assert point.tau == pytest.approx(50.0 * math.cos(math.radians(30.0)))
    assert math.hypot(point.sigma - 100.0, point.tau) == pytest.approx(50.0)


def test_failure_status_and_proximity():
    envelope = FailureEnvelope(cohesion=0.0, friction_angle_deg=30.0)
    shear_at_center = 100.0 * math.tan(math.radians(30.0))

    stable = MohrCircle(center=100.0, radius=50.0)
    failed = MohrCircle(center=100.0, radius=60.0)

    assert not is_failed(stable, envelope)
    assert is_failed(failed, envelope)
    assert failure_proximity(stable, envelope) == pytest.approx(50.0 / shear_at_center * 100.0)

    # negative centre under a cohesionless envelope has no positive shear capacity
    assert failure_proximity(MohrCircle(center=-1.0, radius=0.5), envelope) == math.inf


def test_failure_point_dispatch():
    envelope = FailureEnvelope(cohesion=10.0, friction_angle_deg=30.0)
    failed = MohrCircle(center=100.0, radius=80.0)
    stable = MohrCircle(center=100.0, radius=20.0)

    assert failure_point(failed, envelope) == tangency_point(failed, envelope)
    assert failure_point(stable, envelope) == analytical_failure_point(stable, envelope)
    assert failure_point(stable, envelope, failed=True) == tangency_point(stable, envelope)
