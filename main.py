# main.py
import argparse
import json
import logging
import os
import sys

from core.calibrator import InsufficientDataError, MaterialCalibrator
from pydantic import ValidationError

from core.geometry import (
    analytical_failure_point,
    circle_for,
    failure_point,
    failure_proximity,
    is_failed,
    tangency_point,
    tangent_line,
)
from core.material_model import FailureState
from core.synthetic import generate_synthetic_curve
from interfaces.data_loader import ExperimentalDataLoader
from utils.config_manager import load_config, seed_from_config, settings_from_config
from utils.logging_config import setup_logging

logger = logging.getLogger("main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Mohr-Coulomb Triaxial Calibration Tool')
    parser.add_argument('--config', type=str, default='config.yaml',
                        help='YAML configuration file')
    parser.add_argument('--curve', type=str, default=None,
                        help='CSV file with the stress-strain history')
    parser.add_argument('--cell-pressure', type=float, default=None,
                        help='Confining (cell) pressure of the test')
    parser.add_argument('--sigma1', type=float, default=None,
                        help='Major principal stress at failure (overrides the curve peak)')
    parser.add_argument('--sigma3', type=float, default=None,
                        help='Minor principal stress at failure (overrides the cell pressure)')
    parser.add_argument('--shear', type=float, default=None,
                        help='Shear stress at failure (overrides the circle radius)')
    parser.add_argument('--failure-strain', type=float, default=None,
                        help='Axial strain at failure')
    parser.add_argument('--synthetic', action='store_true',
                        help='Generate a synthetic curve from the failure readings')
    parser.add_argument('--output', type=str, default=None,
                        help='Write the results to this JSON file')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable debug logging')
    return parser


def resolve_failure_state(args, loader, config) -> FailureState:
    """Combine failure readings from the loaded curve, the config and the command line"""
    section = dict(config.get('failure_state') or {})
    if loader.tests:
        section = {**section, **loader.failure_state('test').model_dump()}

    overrides = {
        'sigma1': args.sigma1,
        'sigma3': args.sigma3,
        'shear_stress': args.shear,
        'strain_at_failure': args.failure_strain,
    }
    section.update({k: v for k, v in overrides.items() if v is not None})

    if 'shear_stress' not in section and 'sigma1' in section and 'sigma3' in section:
        section['shear_stress'] = (section['sigma1'] - section['sigma3']) / 2.0
    logger.debug(f"Failure readings: {section}")
    return FailureState(**section)


def describe_failure_errors(error: ValidationError) -> str:
    """Name the failure readings that are missing or invalid"""
    missing = [str(err['loc'][0]) for err in error.errors() if err['type'] == 'missing']
    invalid = [f"{err['loc'][0]} ({err['msg']})" for err in error.errors() if err['type'] != 'missing']

    parts = []
    if missing:
        parts.append(f"missing failure readings: {', '.join(missing)}; "
                     "pass --sigma1 and --sigma3, load a curve, or set failure_state in the config")
    if invalid:
        parts.append(f"invalid failure readings: {', '.join(invalid)}")
    return "; ".join(parts)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    config = load_config(args.config) if os.path.exists(args.config) else {}
    if not config:
        print(f"Config not found or empty: {args.config}, using defaults")

    calibrator = MaterialCalibrator(settings_from_config(config), seed_from_config(config))
    data_config = config.get('data') or {}
    loader = ExperimentalDataLoader(
        strain_column=data_config.get('strain_column', 'StrainYY'),
        stress_column=data_config.get('stress_column', 'StressYY')
    )

    curve_path = args.curve or data_config.get('filepath')
    use_curve = bool(curve_path) and not args.synthetic
    if use_curve:
        cell_pressure = args.cell_pressure
        if cell_pressure is None:
            cell_pressure = data_config.get('cell_pressure', 0.0)
        curve = loader.load_test(curve_path, 'test', cell_pressure)

    try:
        failure = resolve_failure_state(args, loader, config)
    except ValidationError as e:
        print(f"Calibration failed: {describe_failure_errors(e)}")
        return 1

    if not use_curve:
        curve = generate_synthetic_curve(failure, calibrator.seed.young_modulus)
        print(f"Using synthetic curve with {len(curve)} samples")

    try:
        params = calibrator.calibrate(curve, failure)
    except InsufficientDataError as e:
        print(f"Calibration failed: not enough data, run a test first ({e})")
        return 1

    envelope = params.envelope
    circle = circle_for(failure.stress_state)
    failed = is_failed(circle, envelope)
    tangency = tangency_point(circle, envelope)
    analytical = analytical_failure_point(circle, envelope)
    point = failure_point(circle, envelope, failed)
    line = tangent_line(circle, point)

    print("\nCalibrated parameters:")
    for name, value in params.model_dump().items():
        print(f"  {name:20s} {value:12.4f}")
    print(f"\nMohr circle at failure: center={circle.center:.3f}, radius={circle.radius:.3f}")
    print(f"Status: {'FAILURE' if failed else 'Stable'} "
          f"(proximity {failure_proximity(circle, envelope):.1f}%)")
    print(f"Tangency point:   sigma={tangency.sigma:.3f}, tau={tangency.tau:.3f}")
    print(f"Analytical point: sigma={analytical.sigma:.3f}, tau={analytical.tau:.3f}")
    print(f"Tangent slope:    {line.slope:.4f}")

    if args.output:
        output = {
            'parameters': params.model_dump(),
            'failure_state': failure.model_dump(),
            'circle': circle.model_dump(),
            'failed': failed,
            'tangency_point': tangency.model_dump(),
            'analytical_point': analytical.model_dump(),
            'failure_point': point.model_dump(),
            'tangent_line': line.model_dump(),
        }
        with open(args.output, 'w') as f:
            json.dump(output, f, indent=2)
        print(f"Results saved to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
