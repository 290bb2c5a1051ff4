import yaml
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.material_model import CalibrationParameters


class CalibrationSettings(BaseModel):
    """Named constants of the calibration heuristics with their defaults"""
    model_config = ConfigDict(frozen=True, extra='forbid')

    minimum_points_for_regression: int = Field(default=5, ge=2)

    # Young's modulus
    estimated_yield_strain: float = 0.003
    elastic_zone_limit: float = 0.2
    regression_tolerance: float = 1e-10
    min_young_modulus: float = 1000.0
    max_young_modulus: float = 200000.0

    # Poisson's ratio
    dilatant_stress_ratio: float = 4.0
    compressible_stress_ratio: float = 2.0
    min_sigma3_for_ratio: float = 0.1
    dilatant_poisson_step: float = 0.05
    dilatant_poisson_floor: float = 0.15
    compressible_poisson_step: float = 0.03
    compressible_poisson_ceiling: float = 0.45
    min_poisson_ratio: float = 0.05
    max_poisson_ratio: float = 0.49

    # Yield strength
    yield_offset_strain: float = 0.002
    ductile_min_points: int = 10
    ductile_final_stress_fraction: float = 0.8
    ductile_yield_fraction: float = 0.85
    brittle_yield_fraction: float = 0.70
    min_yield_fraction_of_e: float = 0.001
    max_yield_fraction_of_e: float = 0.2

    # Brittle strength
    brittle_margin: float = 1.05
    softening_margin: float = 1.10
    post_peak_offset: int = 3
    softening_drop_threshold: float = 0.2
    min_brittle_fraction_of_e: float = 0.005
    max_brittle_fraction_of_e: float = 0.3

    # Mohr-Coulomb
    min_friction_angle: float = 10.0
    max_friction_angle: float = 60.0
    min_cohesion_fraction_of_yield: float = 0.05
    max_cohesion_fraction_of_yield: float = 1.0


DEFAULT_SEED = CalibrationParameters(
    young_modulus=50000.0,
    poisson_ratio=0.25,
    yield_strength=500.0,
    brittle_strength=800.0,
    friction_angle_deg=30.0,
    cohesion=10.0
)


def load_config(path: str) -> Dict[str, Any]:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def save_config(config: Dict[str, Any], path: str):
    with open(path, 'w') as f:
        yaml.dump(config, f, sort_keys=False)


def settings_from_config(config: Optional[Dict[str, Any]]) -> CalibrationSettings:
    """Build CalibrationSettings from the 'calibration' section (defaults if absent)"""
    section = (config or {}).get('calibration') or {}
    return CalibrationSettings(**section)


def seed_from_config(config: Optional[Dict[str, Any]]) -> CalibrationParameters:
    """Seed parameters from the 'seed_parameters' section, falling back to DEFAULT_SEED"""
    section = (config or {}).get('seed_parameters') or {}
    if not section:
        return DEFAULT_SEED
    return CalibrationParameters(**{**DEFAULT_SEED.model_dump(), **section})
