"""Shared fixtures: a deterministic stand-in for TAXSIM."""

import numpy as np
import pandas as pd
import pytest

from caleitc_schedules.config import PipelineConfig
from caleitc_schedules.taxsim.base import TaxCalculator


def fake_federal_eitc(wages, depx):
    """Trapezoid: 34% phase-in to a $3,400 plateau, 16% phase-out from $20,000.

    Childless filers get a small 7.65% credit capped at $500, phased out
    from $8,500.
    """
    wages = np.asarray(wages, dtype=float)
    depx = np.asarray(depx)
    with_kids = np.clip(np.minimum(0.34 * wages, 3400.0) - 0.16 * np.maximum(wages - 20000, 0), 0, None)
    childless = np.clip(np.minimum(0.0765 * wages, 500.0) - 0.0765 * np.maximum(wages - 8500, 0), 0, None)
    return np.where(depx > 0, with_kids, childless)


def fake_state_eitc(wages):
    """20% phase-in to $1,000, then linear phase-out reaching zero at $30,000."""
    wages = np.asarray(wages, dtype=float)
    return np.clip(np.minimum(0.2 * wages, 1000.0) - 0.04 * np.maximum(wages - 5000, 0), 0, None)


class FakeTaxSim(TaxCalculator):
    """Answers TAXSIM batches with closed-form credits.

    Args:
        drop_rows: Number of output rows to drop from the end
        omit_columns: Output columns to leave out
    """

    name = "FakeTaxSim"

    def __init__(self, drop_rows=0, omit_columns=()):
        self.drop_rows = drop_rows
        self.omit_columns = set(omit_columns)
        self.batches = []

    def submit(self, batch):
        self.batches.append(batch.copy())
        wages = batch["pwages"].to_numpy(dtype=float)
        depx = batch["depx"].to_numpy()
        per_child = np.where(batch["year"].to_numpy() >= 2018, 2000.0, 1000.0)
        ctc = np.where(wages > 2500, np.minimum(per_child * depx, 0.15 * (wages - 2500)), 0.0)

        out = pd.DataFrame({
            "taxsimid": batch["taxsimid"].to_numpy(),
            "year": batch["year"].to_numpy(),
            "state": batch["state"].to_numpy(),
            "fiitax": 0.0,
            "siitax": 0.0,
            "v22": 0.0,
            "v23": ctc,
            "v25": fake_federal_eitc(wages, depx),
            "v39": fake_state_eitc(wages),
        })
        out = out.drop(columns=[c for c in self.omit_columns if c in out.columns])
        if self.drop_rows:
            out = out.iloc[: len(out) - self.drop_rows]
        return out


@pytest.fixture
def fake_taxsim():
    return FakeTaxSim()


@pytest.fixture
def small_config(tmp_path):
    """Coarse earnings axis and temp output directories."""
    return PipelineConfig(
        years=[2016, 2017],
        tcja_years=(2017, 2018),
        yctc_year=2019,
        earnings_step=1000,
        earnings_max=50000,
        output_dir=tmp_path / "interim",
        figure_dir=tmp_path / "figures",
    )
