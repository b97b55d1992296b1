"""Tax calculator interface."""

from abc import ABC, abstractmethod

import pandas as pd


class TaxCalculator(ABC):
    """A batch tax calculator.

    Implementations accept a DataFrame of TAXSIM-35 input columns and
    return one output row per input row, carrying the input's taxsimid.
    """

    name: str

    @abstractmethod
    def submit(self, batch: pd.DataFrame) -> pd.DataFrame:
        """Run a batch through the calculator.

        Args:
            batch: TAXSIM input rows (see TAXSIM_INPUT_COLUMNS)

        Returns:
            Calculator output with numbered columns (v22, v25, ...)

        Raises:
            AdapterTimeoutError: The calculator did not answer in time
            CalculatorError: The calculator failed
        """
        pass
