"""Tax-calculator adapter: grid rows in, named benefit amounts out."""

from typing import Dict, Optional, Tuple

import numpy as np
import pandas as pd

from ..errors import AdapterMismatchError
from .base import TaxCalculator
from .variable_mapping import (
    OUTPUT_FIELDS,
    TAXSIM_INPUT_COLUMNS,
    get_filing_status_code,
    output_column,
)


RESULT_KEY_COLUMNS = ["taxsimid", "year", "state", "dependent_count", "earnings"]

# Age of the (single) primary filer in every synthetic household
PRIMARY_AGE = 30


class TaxCalculatorAdapter:
    """Submit an earnings grid to a TaxCalculator and name its outputs.

    Example:
        >>> adapter = TaxCalculatorAdapter(TaxSimClient())
        >>> results = adapter.run(grid)
        >>> results[["earnings", "federal_eitc", "state_eitc"]].head()
    """

    def __init__(
        self,
        calculator: TaxCalculator,
        output_fields: Optional[Dict[str, Tuple[int, ...]]] = None,
        show_progress: bool = True,
    ):
        self.calculator = calculator
        self.output_fields = output_fields or OUTPUT_FIELDS
        self.show_progress = show_progress

    @staticmethod
    def assign_ids(grid: pd.DataFrame) -> pd.DataFrame:
        """Number grid rows 1..N in order, as taxsimid."""
        identified = grid.reset_index(drop=True).copy()
        identified["taxsimid"] = np.arange(1, len(identified) + 1)
        return identified

    @staticmethod
    def to_taxsim_input(grid: pd.DataFrame) -> pd.DataFrame:
        """Translate identified grid rows into TAXSIM input columns."""
        batch = pd.DataFrame(index=grid.index)
        batch["taxsimid"] = grid["taxsimid"]
        batch["year"] = grid["year"]
        batch["state"] = grid["state"]
        batch["mstat"] = grid["marital_status"].map(get_filing_status_code)
        batch["page"] = PRIMARY_AGE
        batch["sage"] = 0
        batch["depx"] = grid["dependent_count"]
        for col in ("age1", "age2", "age3"):
            if col in grid.columns:
                batch[col] = grid[col].fillna(0).astype(int)
            else:
                batch[col] = 0
        batch["pwages"] = grid["earnings"]

        for col in TAXSIM_INPUT_COLUMNS:
            if col not in batch.columns:
                batch[col] = 0

        # Full output (v10-v45)
        batch["idtl"] = 2

        return batch[TAXSIM_INPUT_COLUMNS]

    def map_output(self, raw: pd.DataFrame) -> pd.DataFrame:
        """Map numbered calculator fields to named benefits.

        A named benefit is null for a row when any of its source fields
        is absent from the output or null in that row.
        """
        named = pd.DataFrame(index=raw.index)
        if "taxsimid" in raw.columns:
            named["taxsimid"] = pd.to_numeric(raw["taxsimid"], errors="coerce").fillna(0).astype("int64")

        for name, indices in self.output_fields.items():
            columns = [output_column(i) for i in indices]
            if all(col in raw.columns for col in columns):
                named[name] = raw[columns].astype(float).sum(axis=1, skipna=False)
            else:
                named[name] = np.nan

        return named

    def run(self, grid: pd.DataFrame) -> pd.DataFrame:
        """Run the grid through the calculator.

        Args:
            grid: Rows from build_grid

        Returns:
            One row per grid row with RESULT_KEY_COLUMNS plus the named
            benefit fields

        Raises:
            AdapterMismatchError: The calculator returned a different row count
        """
        identified = self.assign_ids(grid)
        batch = self.to_taxsim_input(identified)

        if self.show_progress:
            print(f"Running {self.calculator.name} on {len(batch):,} records...")

        raw = self.calculator.submit(batch)

        if len(raw) != len(batch):
            raise AdapterMismatchError(submitted=len(batch), received=len(raw))

        named = self.map_output(raw.reset_index(drop=True))
        keys = identified[RESULT_KEY_COLUMNS]

        if "taxsimid" in named.columns:
            returned_ids = set(named["taxsimid"])
            if named["taxsimid"].duplicated().any() or returned_ids != set(keys["taxsimid"]):
                matched = len(returned_ids & set(keys["taxsimid"]))
                raise AdapterMismatchError(submitted=len(batch), received=matched)
            results = keys.merge(named, on="taxsimid", how="left")
        else:
            # No id echoed back; outputs are in submission order
            results = pd.concat([keys, named], axis=1)

        if self.show_progress:
            print(f"{self.calculator.name} completed: {len(results):,} results")

        return results
