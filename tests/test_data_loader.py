"""
Tests for CSV loading of experimental curves.
"""

import pandas as pd
import pytest

from core.curve import StressStrainCurve
from interfaces.data_loader import ExperimentalDataLoader


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "drained_100.csv"
    pd.DataFrame({
        'StrainYY': [0.0, 0.002, 0.001, 0.003, 0.004],
        'StressYY': [0.0, 80.0, 40.0, 100.0, 90.0],
        'p': [100.0] * 5,
    }).to_csv(path, index=False)
    return str(path)


def test_load_test_sorts_by_strain(csv_file):
    loader = ExperimentalDataLoader()
    curve = loader.load_test(csv_file, 'drained_100', cell_pressure=100.0)

    assert isinstance(curve, StressStrainCurve)
    assert list(curve.strain) == [0.0, 0.001, 0.002, 0.003, 0.004]
    assert list(curve.stress) == [0.0, 40.0, 80.0, 100.0, 90.0]
    assert loader.tests['drained_100'] is curve


def test_failure_state_from_peak(csv_file):
    loader = ExperimentalDataLoader()
    loader.load_test(csv_file, 'drained_100', cell_pressure=100.0)

    failure = loader.failure_state('drained_100')
    assert failure.sigma3 == 100.0
    assert failure.sigma1 == 200.0
    assert failure.shear_stress == 50.0
    assert failure.strain_at_failure == 0.003


def test_custom_columns(tmp_path):
    path = tmp_path / "test.csv"
    pd.DataFrame({'eps': [0.0, 0.001], 'q': [0.0, 10.0]}).to_csv(path, index=False)

    loader = ExperimentalDataLoader(strain_column='eps', stress_column='q')
    curve = loader.load_test(str(path), 'custom', cell_pressure=0.0)
    assert len(curve) == 2


def test_missing_column(tmp_path):
    path = tmp_path / "test.csv"
    pd.DataFrame({'eps': [0.0, 0.001], 'q': [0.0, 10.0]}).to_csv(path, index=False)

    with pytest.raises(KeyError):
        ExperimentalDataLoader().load_test(str(path), 'custom', cell_pressure=0.0)
