"""Build benefit schedules and write the appendix outputs.

build_schedule is a pure function of (year, config, calculator); the
run_pipeline driver calls it once per year and owns every file write.
"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from .composer import compose_schedule
from .config import PipelineConfig
from .figures import TCJA_YCTC_FIGURE, eitc_figure_name, plot_eitc_schedule, plot_tcja_yctc
from .grid import grid_for_config
from .reshape import to_wide
from .taxsim.adapter import TaxCalculatorAdapter
from .taxsim.base import TaxCalculator
from .taxsim.client import TaxSimClient
from .taxsim.executable import TaxSimExecutable


@dataclass
class ScheduleRun:
    """Long and wide schedules for one year."""

    year: int
    long: pd.DataFrame
    wide: pd.DataFrame


@dataclass
class PipelineResult:
    """Files written by a pipeline run."""

    schedules: Dict[int, ScheduleRun] = field(default_factory=dict)
    schedule_files: List[Path] = field(default_factory=list)
    figure_files: List[Path] = field(default_factory=list)
    published_files: List[Path] = field(default_factory=list)


def schedule_file_name(year: int) -> str:
    return f"benefit_schedule_{year}.csv"


def make_calculator(config: PipelineConfig) -> TaxCalculator:
    """Construct the TAXSIM calculator the configuration asks for."""
    if config.calculator == "local":
        return TaxSimExecutable(taxsim_path=config.taxsim_path, timeout=config.timeout)
    return TaxSimClient(timeout=config.timeout, max_retries=config.max_retries)


def build_schedule(
    year: int,
    config: PipelineConfig,
    calculator: TaxCalculator,
    show_progress: bool = True,
) -> ScheduleRun:
    """Grid -> calculator -> composed long form -> wide form, for one year.

    Nothing is written to disk.
    """
    grid = grid_for_config(year, config)
    adapter = TaxCalculatorAdapter(calculator, show_progress=show_progress)
    results = adapter.run(grid)
    long = compose_schedule(results, config.yctc)
    return ScheduleRun(year=year, long=long, wide=to_wide(long))


def _publish(path: Path, config: PipelineConfig, result: PipelineResult):
    if not config.publish:
        return
    config.publish_dir.mkdir(parents=True, exist_ok=True)
    target = config.publish_dir / path.name
    shutil.copy2(path, target)
    result.published_files.append(target)


def run_pipeline(
    config: PipelineConfig,
    calculator: Optional[TaxCalculator] = None,
    show_progress: bool = True,
) -> PipelineResult:
    """Build every schedule the configuration needs and write outputs.

    For each year the schedule is built and its figure drawn to a staging
    file first; only then are the CSV and the figure put in place. An
    error stops the run with no files for the failing year and leaves
    earlier years' files in place.

    Args:
        config: Pipeline configuration
        calculator: Tax calculator (default: built from config)
        show_progress: Print progress messages

    Returns:
        PipelineResult listing the schedules and written files
    """
    calculator = calculator or make_calculator(config)
    result = PipelineResult()

    config.output_dir.mkdir(parents=True, exist_ok=True)
    config.figure_dir.mkdir(parents=True, exist_ok=True)

    for year in config.all_years:
        if show_progress:
            print(f"Building benefit schedule for {year}...")

        run = build_schedule(year, config, calculator, show_progress=show_progress)

        # Draw the year's figure before anything for the year reaches disk
        staged_figure = None
        if year in config.years:
            final = config.figure_dir / eitc_figure_name(year)
            staged_figure = final.with_name(f".{final.stem}.partial{final.suffix}")
            try:
                plot_eitc_schedule(run.wide, year, staged_figure)
            except Exception:
                staged_figure.unlink(missing_ok=True)
                raise

        result.schedules[year] = run

        schedule_path = config.output_dir / schedule_file_name(year)
        run.long.to_csv(schedule_path, index=False)
        result.schedule_files.append(schedule_path)

        if staged_figure is not None:
            figure_path = staged_figure.replace(config.figure_dir / eitc_figure_name(year))
            result.figure_files.append(figure_path)
            _publish(figure_path, config, result)

    pre_year, post_year = config.tcja_years
    figure_path = plot_tcja_yctc(
        {year: run.wide for year, run in result.schedules.items()},
        pre_year=pre_year,
        post_year=post_year,
        yctc_year=config.yctc_year,
        path=config.figure_dir / TCJA_YCTC_FIGURE,
    )
    result.figure_files.append(figure_path)
    _publish(figure_path, config, result)

    if show_progress:
        print(
            f"Wrote {len(result.schedule_files)} schedules and "
            f"{len(result.figure_files)} figures"
        )

    return result
