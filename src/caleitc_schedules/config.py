"""Pipeline configuration.

A single PipelineConfig value is passed to every pipeline call; nothing
is read from module-level state. Configurations can be loaded from YAML:

    years: [2015, 2016, 2017]
    tcja_years: [2017, 2018]
    yctc_year: 2019
    output_dir: data/interim
    figure_dir: output/figures
    publish: true
    publish_dir: ../paper/figures
    yctc:
      start_year: 2019
      amount: 1000
"""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .errors import ConfigError


@dataclass(frozen=True)
class YCTCPolicy:
    """California Young Child Tax Credit parameters.

    The credit is a flat amount below phaseout_start, falls by
    phaseout_rate per dollar between phaseout_start and phaseout_end, and
    is not available above phaseout_end.
    """

    start_year: int = 2019
    amount: float = 1000.0
    phaseout_start: float = 25000.0
    phaseout_end: float = 30000.0
    phaseout_rate: float = 0.2

    def active(self, year: int) -> bool:
        return year >= self.start_year


@dataclass
class PipelineConfig:
    """Settings for one run of the schedule pipeline.

    Attributes:
        years: Years that get a federal/state EITC schedule figure
        tcja_years: (pre, post) years compared in the TCJA child tax credit figure
        yctc_year: Year whose YCTC schedule is drawn in the TCJA/YCTC figure
        max_dependents: Highest dependent count (3 means "3 or more")
        state: State abbreviation sent to the calculator
        marital_status: Filing status of every synthetic household
        earnings_step: Spacing of the earnings axis, in dollars
        earnings_max: Top of the earnings axis, in dollars
        child_ages: Representative child ages used in age-conditioned years
        yctc: Young Child Tax Credit policy
        output_dir: Where long-form schedule CSVs are written
        figure_dir: Where figures are written
        publish_dir: Secondary directory figures are mirrored to
        publish: Mirror figures to publish_dir
        calculator: "remote" (TAXSIM-35 service) or "local" (executable)
        taxsim_path: Path to the local TAXSIM executable
        timeout: Calculator timeout in seconds
        max_retries: Remote calculator retry attempts
    """

    years: List[int] = field(default_factory=lambda: [2015, 2016, 2017])
    tcja_years: Tuple[int, int] = (2017, 2018)
    yctc_year: int = 2019
    max_dependents: int = 3
    state: str = "CA"
    marital_status: str = "single"
    earnings_step: int = 50
    earnings_max: int = 50000
    child_ages: Tuple[int, ...] = (4, 5)
    yctc: YCTCPolicy = field(default_factory=YCTCPolicy)
    output_dir: Path = Path("data/interim")
    figure_dir: Path = Path("output/figures")
    publish_dir: Optional[Path] = None
    publish: bool = False
    calculator: str = "remote"
    taxsim_path: Optional[Path] = None
    timeout: int = 120
    max_retries: int = 3

    def __post_init__(self):
        self.years = [int(y) for y in self.years]
        self.tcja_years = tuple(int(y) for y in self.tcja_years)
        self.child_ages = tuple(int(a) for a in self.child_ages)
        self.output_dir = Path(self.output_dir)
        self.figure_dir = Path(self.figure_dir)
        if self.publish_dir is not None:
            self.publish_dir = Path(self.publish_dir)
        if self.taxsim_path is not None:
            self.taxsim_path = Path(self.taxsim_path)

        if len(self.tcja_years) != 2:
            raise ConfigError(f"tcja_years needs exactly two years, got {self.tcja_years}")
        if len(self.child_ages) > 3:
            raise ConfigError("TAXSIM accepts at most three child ages")
        if self.calculator not in ("remote", "local"):
            raise ConfigError(f"Unknown calculator '{self.calculator}' (use 'remote' or 'local')")
        if self.publish and self.publish_dir is None:
            raise ConfigError("publish is set but publish_dir is not")

    @property
    def all_years(self) -> List[int]:
        """Every year the run needs a schedule for, sorted."""
        return sorted(set(self.years) | set(self.tcja_years) | {self.yctc_year})

    def with_overrides(self, **overrides: Any) -> "PipelineConfig":
        """Return a copy with the given non-None fields replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        kwargs = dict(data)
        yctc = kwargs.get("yctc")
        if isinstance(yctc, dict):
            policy_keys = {f.name for f in fields(YCTCPolicy)}
            bad = sorted(set(yctc) - policy_keys)
            if bad:
                raise ConfigError(f"Unknown yctc keys: {', '.join(bad)}")
            kwargs["yctc"] = YCTCPolicy(**yctc)
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "PipelineConfig":
        """Load a configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Could not parse {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)
