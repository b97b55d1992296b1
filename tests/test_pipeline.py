"""Tests for the per-year schedule builder and the output driver."""

from unittest.mock import patch

import numpy as np
import pandas as pd
import pytest

from caleitc_schedules.composer import SCHEDULE_COLUMNS
from caleitc_schedules.config import PipelineConfig
from caleitc_schedules.errors import AdapterMismatchError
from caleitc_schedules.pipeline import (
    build_schedule,
    make_calculator,
    run_pipeline,
    schedule_file_name,
)
from caleitc_schedules.taxsim.client import TaxSimClient

from conftest import FakeTaxSim


class TestBuildSchedule:
    def test_long_and_wide(self, small_config, fake_taxsim):
        run = build_schedule(2019, small_config, fake_taxsim, show_progress=False)

        assert run.year == 2019
        assert list(run.long.columns) == SCHEDULE_COLUMNS
        assert len(run.long) == 51 * 4
        assert len(run.wide) == 51
        assert "young_child_tax_credit_1" in run.wide.columns

    def test_writes_nothing(self, small_config, fake_taxsim):
        build_schedule(2017, small_config, fake_taxsim, show_progress=False)
        assert not small_config.output_dir.exists()
        assert not small_config.figure_dir.exists()

    def test_yctc_only_in_policy_year(self, small_config, fake_taxsim):
        before = build_schedule(2018, small_config, fake_taxsim, show_progress=False)
        after = build_schedule(2019, small_config, fake_taxsim, show_progress=False)

        assert before.long["young_child_tax_credit"].isna().all()
        row = after.long[(after.long["earnings"] == 20000) & (after.long["dependent_count"] == 1)]
        assert row["young_child_tax_credit"].iloc[0] == 1000

    def test_high_earnings_are_null(self, small_config, fake_taxsim):
        run = build_schedule(2017, small_config, fake_taxsim, show_progress=False)
        top = run.long[run.long["earnings"] == 50000]
        assert top["state_eitc"].isna().all()
        assert top["federal_eitc"].isna().all()

    def test_zero_earnings_keep_zero(self, small_config, fake_taxsim):
        run = build_schedule(2017, small_config, fake_taxsim, show_progress=False)
        bottom = run.long[run.long["earnings"] == 0]
        assert (bottom["federal_eitc"] == 0).all()
        assert (bottom["total_eitc"] == 0).all()


class TestRunPipeline:
    def test_writes_schedules_and_figures(self, small_config, fake_taxsim):
        result = run_pipeline(small_config, fake_taxsim, show_progress=False)

        assert sorted(result.schedules) == [2016, 2017, 2018, 2019]
        for year in (2016, 2017, 2018, 2019):
            assert (small_config.output_dir / schedule_file_name(year)).exists()

        figure_names = sorted(p.name for p in result.figure_files)
        assert figure_names == [
            "fig_appA_eitc_2016.jpg",
            "fig_appA_eitc_2017.jpg",
            "fig_appA_tcja_yctc.jpg",
        ]
        assert all(p.exists() for p in result.figure_files)
        assert result.published_files == []

    def test_schedule_file_contents(self, small_config, fake_taxsim):
        run_pipeline(small_config, fake_taxsim, show_progress=False)
        written = pd.read_csv(small_config.output_dir / "benefit_schedule_2019.csv")

        assert list(written.columns) == SCHEDULE_COLUMNS
        assert len(written) == 51 * 4
        assert not written.duplicated(["year", "earnings", "dependent_count"]).any()

    def test_publish_mirrors_figures(self, small_config, fake_taxsim, tmp_path):
        config = small_config.with_overrides(publish=True, publish_dir=tmp_path / "paper")
        result = run_pipeline(config, fake_taxsim, show_progress=False)

        assert len(result.published_files) == len(result.figure_files)
        for path in result.figure_files:
            assert (tmp_path / "paper" / path.name).exists()

    def test_mismatch_writes_no_file(self, small_config):
        with pytest.raises(AdapterMismatchError):
            run_pipeline(small_config, FakeTaxSim(drop_rows=1), show_progress=False)

        assert not list(small_config.output_dir.glob("*.csv"))
        assert not list(small_config.figure_dir.glob("*.jpg"))

    def test_failure_keeps_earlier_years(self, small_config):
        class FailsIn2018(FakeTaxSim):
            def submit(self, batch):
                out = super().submit(batch)
                if (batch["year"] == 2018).any():
                    return out.iloc[:-1]
                return out

        with pytest.raises(AdapterMismatchError):
            run_pipeline(small_config, FailsIn2018(), show_progress=False)

        assert (small_config.output_dir / "benefit_schedule_2016.csv").exists()
        assert (small_config.output_dir / "benefit_schedule_2017.csv").exists()
        assert not (small_config.output_dir / "benefit_schedule_2018.csv").exists()

    def test_figure_failure_writes_nothing_for_year(self, small_config, fake_taxsim):
        with patch(
            "caleitc_schedules.pipeline.plot_eitc_schedule",
            side_effect=RuntimeError("cannot draw"),
        ):
            with pytest.raises(RuntimeError, match="cannot draw"):
                run_pipeline(small_config, fake_taxsim, show_progress=False)

        assert not (small_config.output_dir / "benefit_schedule_2016.csv").exists()
        assert not list(small_config.figure_dir.glob("*.jpg"))
        assert not list(small_config.figure_dir.glob(".*partial*"))

    def test_progress_messages(self, small_config, fake_taxsim, capsys):
        run_pipeline(small_config, fake_taxsim)
        out = capsys.readouterr().out
        assert "Building benefit schedule for 2016" in out
        assert "Wrote 4 schedules and 3 figures" in out


class TestMakeCalculator:
    def test_remote_default(self):
        calculator = make_calculator(PipelineConfig(timeout=30, max_retries=5))
        assert isinstance(calculator, TaxSimClient)
        assert calculator.timeout == 30
        assert calculator.max_retries == 5

    def test_local(self, tmp_path):
        exe = tmp_path / "taxsim35-unix.exe"
        exe.write_text("")
        calculator = make_calculator(PipelineConfig(calculator="local", taxsim_path=exe))
        assert calculator.taxsim_path == exe
