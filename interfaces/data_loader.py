"""
interfaces/data_loader.py
Purpose: Load experimental triaxial test data

Key Function:

python
def load_test(self, filepath, test_type, cell_pressure):
    # Stores a StressStrainCurve (axial strain vs deviator stress) per test

"""

import logging
import pandas as pd
from typing import Dict

from core.curve import StressStrainCurve
from core.material_model import FailureState

logger = logging.getLogger(__name__)


class ExperimentalDataLoader:
    def __init__(self, strain_column: str = 'StrainYY', stress_column: str = 'StressYY'):
        self.strain_column = strain_column
        self.stress_column = stress_column
        self.tests: Dict[str, StressStrainCurve] = {}
        self.cell_pressures: Dict[str, float] = {}

    def load_test(self, filepath: str, test_type: str, cell_pressure: float) -> StressStrainCurve:
        """Load test data from CSV, sorted by strain"""
        df = pd.read_csv(filepath)
        missing = [c for c in (self.strain_column, self.stress_column) if c not in df.columns]
        if missing:
            raise KeyError(f"Columns {missing} not found in {filepath}")

        df = df[[self.strain_column, self.stress_column]].dropna()
        df = df.sort_values(self.strain_column, kind='stable')

        curve = StressStrainCurve(df[self.strain_column].values, df[self.stress_column].values)
        self.tests[test_type] = curve
        self.cell_pressures[test_type] = float(cell_pressure)
        logger.info(f"Loaded test '{test_type}' from {filepath}: {len(curve)} samples")
        return curve

    def failure_state(self, test_type: str) -> FailureState:
        """
        Failure readings taken at the peak deviator stress of a loaded test

        sigma3 is the cell pressure, sigma1 adds the peak deviator stress and
        the shear stress is the Mohr circle radius.
        """
        curve = self.tests[test_type]
        cell_pressure = self.cell_pressures[test_type]
        peak = curve.peak_stress
        sigma1 = cell_pressure + peak
        return FailureState(
            sigma1=sigma1,
            sigma3=cell_pressure,
            shear_stress=(sigma1 - cell_pressure) / 2.0,
            strain_at_failure=float(curve.strain[curve.peak_index])
        )
