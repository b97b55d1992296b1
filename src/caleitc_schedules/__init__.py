"""CalEITC benefit schedules: TAXSIM-35 based federal and California credit schedules."""

from caleitc_schedules.composer import (
    BENEFIT_FIELDS,
    SCHEDULE_COLUMNS,
    compose_schedule,
    recode_zero_benefits,
    yctc_amount,
)
from caleitc_schedules.config import PipelineConfig, YCTCPolicy
from caleitc_schedules.errors import (
    AdapterMismatchError,
    AdapterTimeoutError,
    CalculatorError,
    ConfigError,
    GenerationError,
    ReshapeConflictError,
    ScheduleError,
)
from caleitc_schedules.grid import build_grid, earnings_axis, grid_for_config
from caleitc_schedules.pipeline import (
    PipelineResult,
    ScheduleRun,
    build_schedule,
    run_pipeline,
)
from caleitc_schedules.reshape import to_long, to_wide
from caleitc_schedules.taxsim import TaxCalculator, TaxCalculatorAdapter

__version__ = "0.1.0"
__all__ = [
    # Configuration
    "PipelineConfig",
    "YCTCPolicy",
    # Grid
    "build_grid",
    "earnings_axis",
    "grid_for_config",
    # Calculator
    "TaxCalculator",
    "TaxCalculatorAdapter",
    # Composition and reshaping
    "BENEFIT_FIELDS",
    "SCHEDULE_COLUMNS",
    "compose_schedule",
    "recode_zero_benefits",
    "yctc_amount",
    "to_long",
    "to_wide",
    # Pipeline
    "PipelineResult",
    "ScheduleRun",
    "build_schedule",
    "run_pipeline",
    # Errors
    "ScheduleError",
    "ConfigError",
    "GenerationError",
    "CalculatorError",
    "AdapterMismatchError",
    "AdapterTimeoutError",
    "ReshapeConflictError",
]
