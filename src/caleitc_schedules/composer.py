"""Compose benefit schedules from calculator output.

Adds the fields TAXSIM does not produce directly (total EITC and the
California Young Child Tax Credit) and recodes zero benefits at positive
earnings to missing, so plotted curves break where a household is not
eligible instead of running along zero.
"""

from typing import Union

import numpy as np
import pandas as pd

from .config import YCTCPolicy


KEY_COLUMNS = ["year", "earnings", "dependent_count"]

BENEFIT_FIELDS = [
    "federal_eitc",
    "state_eitc",
    "total_eitc",
    "child_tax_credit",
    "young_child_tax_credit",
]

SCHEDULE_COLUMNS = KEY_COLUMNS + BENEFIT_FIELDS

CALCULATOR_FIELDS = ["federal_eitc", "state_eitc", "child_tax_credit"]


def yctc_amount(
    earnings: Union[float, np.ndarray, pd.Series],
    policy: YCTCPolicy = YCTCPolicy(),
) -> Union[float, np.ndarray]:
    """YCTC for an eligible household at the given earnings.

    Flat below the phase-out start, linear phase-out up to and including
    the phase-out end, NaN above it.
    """
    e = np.asarray(earnings, dtype=float)
    amount = np.where(
        e < policy.phaseout_start,
        policy.amount,
        np.where(
            e <= policy.phaseout_end,
            policy.amount - policy.phaseout_rate * (e - policy.phaseout_start),
            np.nan,
        ),
    )
    # The linear piece can dip below zero if the rate and range disagree
    amount = np.where(amount < 0, 0.0, amount)
    if amount.ndim == 0:
        return float(amount)
    return amount


def recode_zero_benefits(schedule: pd.DataFrame, columns=None) -> pd.DataFrame:
    """Replace exact-zero benefits at positive earnings with NaN.

    Rows with zero earnings keep their values.
    """
    recoded = schedule.copy()
    positive = recoded["earnings"] > 0
    for col in columns or BENEFIT_FIELDS:
        if col in recoded.columns:
            recoded.loc[positive & (recoded[col] == 0), col] = np.nan
    return recoded


def compose_schedule(results: pd.DataFrame, policy: YCTCPolicy = YCTCPolicy()) -> pd.DataFrame:
    """Build the long-form benefit schedule from named calculator results.

    Args:
        results: Output of TaxCalculatorAdapter.run
        policy: YCTC parameters

    Returns:
        DataFrame with SCHEDULE_COLUMNS, one row per
        (year, earnings, dependent_count)
    """
    schedule = results[KEY_COLUMNS].copy()
    for col in CALCULATOR_FIELDS:
        if col in results.columns:
            schedule[col] = results[col].astype(float)
        else:
            schedule[col] = np.nan

    schedule["total_eitc"] = schedule[["federal_eitc", "state_eitc"]].sum(axis=1, min_count=1)

    # A young child is required; childless filers can still get CalEITC
    eligible = (
        (schedule["year"] >= policy.start_year)
        & (schedule["dependent_count"] > 0)
        & (schedule["state_eitc"] > 0)
    )
    schedule["young_child_tax_credit"] = np.where(
        eligible,
        yctc_amount(schedule["earnings"], policy),
        np.nan,
    )

    schedule = recode_zero_benefits(schedule)

    return (
        schedule[SCHEDULE_COLUMNS]
        .sort_values(["year", "dependent_count", "earnings"])
        .reset_index(drop=True)
    )
