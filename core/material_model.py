"""
core/material_model.py
Purpose: Value types shared by the geometry and calibration code

Key Classes:

StressState, MohrCircle, FailureEnvelope: Mohr-Coulomb geometry inputs
FailurePoint, TangentLine: geometry outputs
FailureState, CalibrationParameters: calibration inputs/outputs

All models are frozen; nothing here caches derived state.
"""

import math

from pydantic import BaseModel, ConfigDict, Field


class StressState(BaseModel):
    """Confining and axial pressure of a triaxial sample"""
    model_config = ConfigDict(frozen=True)

    confining_pressure: float
    axial_pressure: float

    @property
    def sigma1(self) -> float:
        return max(self.confining_pressure, self.axial_pressure)

    @property
    def sigma3(self) -> float:
        return min(self.confining_pressure, self.axial_pressure)


class MohrCircle(BaseModel):
    model_config = ConfigDict(frozen=True)

    center: float
    radius: float = Field(gt=0)

    @property
    def sigma_min(self) -> float:
        return self.center - self.radius

    @property
    def sigma_max(self) -> float:
        return self.center + self.radius

    def tangent_point(self, friction_angle_deg: float) -> "FailurePoint":
        """
        Point on the circle where a line inclined at the friction angle touches it

        Args:
            friction_angle_deg: Inclination of the touching line [deg]

        Returns:
            FailurePoint on the circle boundary
        """
        phi = math.radians(friction_angle_deg)
        return FailurePoint(
            sigma=self.center - self.radius * math.sin(phi),
            tau=self.radius * math.cos(phi)
        )


class FailureEnvelope(BaseModel):
    """Linear Coulomb envelope given by cohesion and friction angle"""
    model_config = ConfigDict(frozen=True)

    cohesion: float = Field(ge=0)
    friction_angle_deg: float = Field(ge=0, lt=90)

    @property
    def phi(self) -> float:
        return math.radians(self.friction_angle_deg)


class FailurePoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    sigma: float
    tau: float


class TangentLine(BaseModel):
    """Line touching a Mohr circle at `point`, with the radial slope it was derived from"""
    model_config = ConfigDict(frozen=True)

    point: FailurePoint
    radial_slope: float
    slope: float

    def tau_at(self, sigma: float) -> float:
        return self.point.tau + self.slope * (sigma - self.point.sigma)


class FailureState(BaseModel):
    """Principal stresses and shear stress read at the failure of a test"""
    model_config = ConfigDict(frozen=True)

    sigma1: float
    sigma3: float
    shear_stress: float
    strain_at_failure: float = Field(default=0.0, ge=0)

    @property
    def stress_state(self) -> StressState:
        return StressState(confining_pressure=self.sigma3, axial_pressure=self.sigma1)


class CalibrationParameters(BaseModel):
    """Material parameter set, used both as calibration seed and result"""
    model_config = ConfigDict(frozen=True)

    young_modulus: float = Field(gt=0)
    poisson_ratio: float = Field(gt=0, lt=0.5)
    yield_strength: float = Field(gt=0)
    brittle_strength: float = Field(gt=0)
    friction_angle_deg: float = 30.0
    cohesion: float = Field(default=5.0, ge=0)

    @property
    def envelope(self) -> FailureEnvelope:
        return FailureEnvelope(
            cohesion=self.cohesion,
            friction_angle_deg=self.friction_angle_deg
        )
