"""Synthetic household earnings grid.

Each grid row is one single-filer California household at a given
earnings level, year and number of qualifying children. Every
dependent-count category within a year shares the same earnings axis so
that the resulting benefit curves line up.
"""

from typing import Iterable, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .config import PipelineConfig
from .errors import GenerationError
from .taxsim.variable_mapping import TAXSIM_MAX_YEAR, TAXSIM_MIN_YEAR, get_state_code


GRID_COLUMNS = [
    "year", "earnings", "state", "dependent_count", "marital_status",
    "age1", "age2", "age3",
]

# 3 is the "3 or more" bucket; TAXSIM's EITC does not vary past it
MAX_DEPENDENT_BUCKET = 3


def earnings_axis(step: int = 50, maximum: int = 50000) -> np.ndarray:
    """Earnings levels 0, step, 2*step, ..., maximum."""
    if step <= 0 or maximum <= 0:
        raise GenerationError(
            f"Earnings step and maximum must be positive (step={step}, maximum={maximum})"
        )
    return np.arange(0, maximum + 1, step, dtype=np.int64)


def _normalize_years(years: Union[int, Iterable[int]]) -> list:
    if isinstance(years, (int, np.integer)):
        years = [years]
    years = [int(y) for y in years]

    if not years:
        raise GenerationError("At least one year is required")
    for year in years:
        if year < TAXSIM_MIN_YEAR or year > TAXSIM_MAX_YEAR:
            raise GenerationError(
                f"Unsupported year {year}: TAXSIM-35 covers {TAXSIM_MIN_YEAR}-{TAXSIM_MAX_YEAR}"
            )
    return years


def build_grid(
    years: Union[int, Iterable[int]],
    max_dependents: int = 3,
    earnings_step: int = 50,
    earnings_max: int = 50000,
    child_ages: Sequence[int] = (4, 5),
    age_conditioned_from: Optional[int] = 2019,
    state: str = "CA",
    marital_status: str = "single",
) -> pd.DataFrame:
    """Build the year x dependent count x earnings grid.

    Args:
        years: A year or list of years
        max_dependents: Highest dependent count, 1-3 (3 means "3 or more")
        earnings_step: Spacing of the earnings axis
        earnings_max: Top of the earnings axis
        child_ages: Child ages attached in age-conditioned years
        age_conditioned_from: First year in which child ages are attached
            (None to never attach them)
        state: State abbreviation
        marital_status: Filing status of every household

    Returns:
        DataFrame with GRID_COLUMNS, sorted by year, dependent count, earnings
    """
    if max_dependents < 1 or max_dependents > MAX_DEPENDENT_BUCKET:
        raise GenerationError(
            f"max_dependents must be between 1 and {MAX_DEPENDENT_BUCKET}, got {max_dependents}"
        )
    if len(child_ages) > 3:
        raise GenerationError("At most three child ages can be attached")

    years = _normalize_years(years)
    axis = earnings_axis(earnings_step, earnings_max)
    state_code = get_state_code(state)

    frames = []
    for year in years:
        index = pd.MultiIndex.from_product(
            [[year], range(max_dependents + 1), axis],
            names=["year", "dependent_count", "earnings"],
        )
        frame = index.to_frame(index=False)
        frame["state"] = state_code
        frame["marital_status"] = marital_status

        attach_ages = age_conditioned_from is not None and year >= age_conditioned_from
        for i in range(3):
            column = pd.array([pd.NA] * len(frame), dtype="Int64")
            if attach_ages and i < len(child_ages):
                # Only as many ages as the household has children
                has_child = (frame["dependent_count"] > i).to_numpy()
                column[has_child] = child_ages[i]
            frame[f"age{i + 1}"] = column
        frames.append(frame)

    grid = pd.concat(frames, ignore_index=True)
    return grid[GRID_COLUMNS]


def grid_for_config(years: Union[int, Iterable[int]], config: PipelineConfig) -> pd.DataFrame:
    """Build the grid with every setting taken from a PipelineConfig."""
    return build_grid(
        years,
        max_dependents=config.max_dependents,
        earnings_step=config.earnings_step,
        earnings_max=config.earnings_max,
        child_ages=config.child_ages,
        age_conditioned_from=config.yctc.start_year,
        state=config.state,
        marital_status=config.marital_status,
    )
