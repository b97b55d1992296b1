"""CLI for caleitc-schedules."""

import math
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from caleitc_schedules.composer import yctc_amount
from caleitc_schedules.config import PipelineConfig
from caleitc_schedules.errors import ScheduleError
from caleitc_schedules.grid import grid_for_config
from caleitc_schedules.pipeline import run_pipeline
from caleitc_schedules.taxsim.adapter import TaxCalculatorAdapter

console = Console()


def load_config(config_file) -> PipelineConfig:
    if config_file:
        return PipelineConfig.from_yaml(config_file)
    return PipelineConfig()


@click.group()
def cli():
    """Federal and California EITC/CTC/YCTC benefit schedules from TAXSIM-35."""
    pass


@cli.command()
@click.option("--config", "-c", "config_file", type=click.Path(exists=True), help="YAML configuration file")
@click.option("--year", "-y", "years", type=int, multiple=True, help="EITC figure year (repeatable)")
@click.option("--output-dir", type=click.Path(), help="Directory for schedule CSVs")
@click.option("--figure-dir", type=click.Path(), help="Directory for figures")
@click.option("--publish/--no-publish", default=None, help="Mirror figures to the publish directory")
@click.option("--publish-dir", type=click.Path(), help="Publish directory")
@click.option("--local", is_flag=True, help="Use a local TAXSIM executable instead of the remote service")
@click.option("--taxsim-path", type=click.Path(exists=True), help="Path to the TAXSIM executable")
@click.option("--quiet", "-q", is_flag=True, help="Suppress progress messages")
def run(config_file, years, output_dir, figure_dir, publish, publish_dir, local, taxsim_path, quiet):
    """Build schedules, write schedule CSVs and draw the appendix figures."""
    try:
        config = load_config(config_file).with_overrides(
            years=list(years) or None,
            output_dir=output_dir,
            figure_dir=figure_dir,
            publish=publish,
            publish_dir=publish_dir,
            calculator="local" if local else None,
            taxsim_path=taxsim_path,
        )

        console.print("\n[bold]CalEITC benefit schedules[/bold]")
        console.print(f"Years: {', '.join(str(y) for y in config.all_years)}\n")

        result = run_pipeline(config, show_progress=not quiet)
    except ScheduleError as e:
        console.print(f"[red]{type(e).__name__}: {e}[/red]")
        raise click.ClickException(str(e))

    table = Table(title="Outputs")
    table.add_column("Kind", style="cyan")
    table.add_column("Path")
    for path in result.schedule_files:
        table.add_row("schedule", str(path))
    for path in result.figure_files:
        table.add_row("figure", str(path))
    for path in result.published_files:
        table.add_row("published", str(path))
    console.print(table)

    console.print(f"\n[green]Done: {len(result.schedules)} schedules built[/green]")


@cli.command()
@click.option("--year", "-y", "years", type=int, multiple=True, required=True, help="Tax year (repeatable)")
@click.option("--max-dependents", "-d", type=int, default=None, help="Highest dependent count (1-3)")
@click.option("--config", "-c", "config_file", type=click.Path(exists=True), help="YAML configuration file")
@click.option("--output", "-o", type=click.Path(), required=True, help="CSV file for the TAXSIM input batch")
def grid(years, max_dependents, config_file, output):
    """Write the TAXSIM input batch for an earnings grid."""
    try:
        config = load_config(config_file).with_overrides(max_dependents=max_dependents)
        identified = TaxCalculatorAdapter.assign_ids(grid_for_config(list(years), config))
    except ScheduleError as e:
        console.print(f"[red]{type(e).__name__}: {e}[/red]")
        raise click.ClickException(str(e))

    batch = TaxCalculatorAdapter.to_taxsim_input(identified)
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    batch.to_csv(output, index=False)

    console.print(f"[green]Wrote {len(batch):,} TAXSIM records to {output}[/green]")


@cli.command()
@click.argument("earnings", type=float)
@click.option("--year", "-y", default=2019, help="Tax year")
@click.option("--config", "-c", "config_file", type=click.Path(exists=True), help="YAML configuration file")
def yctc(earnings, year, config_file):
    """Show the Young Child Tax Credit for an eligible household."""
    try:
        policy = load_config(config_file).yctc
    except ScheduleError as e:
        raise click.ClickException(str(e))

    if not policy.active(year):
        console.print(f"[yellow]No YCTC in {year} (starts {policy.start_year})[/yellow]")
        return

    amount = yctc_amount(earnings, policy)
    if math.isnan(amount) or (earnings > 0 and amount == 0):
        console.print(f"YCTC at ${earnings:,.0f}: [dim]not available[/dim]")
    else:
        console.print(f"YCTC at ${earnings:,.0f}: [bold]${amount:,.2f}[/bold]")


if __name__ == "__main__":
    cli()
