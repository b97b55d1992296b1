"""Appendix figures drawn from wide-form benefit schedules."""

from pathlib import Path
from typing import Dict, Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.ticker import FuncFormatter

import pandas as pd

from .reshape import wide_column


QC_LABELS = {0: "0 QC", 1: "1 QC", 2: "2 QC", 3: "3+ QC"}
QC_COLORS = {0: "#4d4d4d", 1: "#2b6cb0", 2: "#c05621", 3: "#2f855a"}

_dollars = FuncFormatter(lambda x, _: f"${x:,.0f}")


def eitc_figure_name(year: int) -> str:
    return f"fig_appA_eitc_{year}.jpg"


TCJA_YCTC_FIGURE = "fig_appA_tcja_yctc.jpg"


def _dependent_counts(wide: pd.DataFrame, field: str):
    prefix = f"{field}_"
    return sorted(
        int(c[len(prefix):]) for c in wide.columns
        if c.startswith(prefix) and c[len(prefix):].isdigit()
    )


def _style(ax, xlabel="Earnings", ylabel="Credit amount"):
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.xaxis.set_major_formatter(_dollars)
    ax.yaxis.set_major_formatter(_dollars)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.set_xlim(left=0)
    ax.set_ylim(bottom=0)


def _save(fig, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=300, bbox_inches="tight")
    plt.close(fig)
    return path


def plot_eitc_schedule(wide: pd.DataFrame, year: int, path: Union[str, Path]) -> Path:
    """Federal EITC, CalEITC and combined EITC by qualifying children.

    Args:
        wide: Wide-form schedule (any years; only `year` is drawn)
        year: Tax year to draw
        path: Output image path

    Returns:
        The written path
    """
    data = wide[wide["year"] == year].sort_values("earnings")
    if data.empty:
        raise ValueError(f"No schedule rows for {year}")

    fig, axes = plt.subplots(1, 3, figsize=(15, 4.5), sharey=True)
    panels = [
        ("federal_eitc", "Federal EITC"),
        ("state_eitc", "CalEITC"),
        ("total_eitc", "Federal + CalEITC"),
    ]

    for ax, (field, title) in zip(axes, panels):
        for count in _dependent_counts(data, field):
            ax.plot(
                data["earnings"],
                data[wide_column(field, count)],
                color=QC_COLORS.get(count, "black"),
                lw=1.8,
                label=QC_LABELS.get(count, f"{count} QC"),
            )
        ax.set_title(title)
        _style(ax)

    axes[0].legend(frameon=False)
    fig.suptitle(f"EITC schedules, single filers in California, {year}")
    fig.tight_layout()

    return _save(fig, path)


def plot_tcja_yctc(
    schedules: Dict[int, pd.DataFrame],
    pre_year: int,
    post_year: int,
    yctc_year: int,
    path: Union[str, Path],
) -> Path:
    """Child tax credit before and after TCJA, and the YCTC.

    Args:
        schedules: Wide-form schedules keyed by year
        pre_year: Last pre-TCJA year
        post_year: First TCJA year
        yctc_year: Year whose Young Child Tax Credit is drawn
        path: Output image path
    """
    fig, (ax_ctc, ax_yctc) = plt.subplots(1, 2, figsize=(12, 4.5))

    for year, style in ((pre_year, "--"), (post_year, "-")):
        data = schedules[year].sort_values("earnings")
        for count in _dependent_counts(data, "child_tax_credit"):
            if count == 0:
                continue
            ax_ctc.plot(
                data["earnings"],
                data[wide_column("child_tax_credit", count)],
                ls=style,
                color=QC_COLORS.get(count, "black"),
                lw=1.8,
                label=f"{QC_LABELS.get(count, count)}, {year}",
            )
    ax_ctc.set_title("Federal child tax credit")
    ax_ctc.legend(frameon=False, fontsize=8)
    _style(ax_ctc)

    data = schedules[yctc_year].sort_values("earnings")
    for count in _dependent_counts(data, "young_child_tax_credit"):
        if count == 0:
            continue
        ax_yctc.plot(
            data["earnings"],
            data[wide_column("young_child_tax_credit", count)],
            color=QC_COLORS.get(count, "black"),
            lw=1.8,
            label=QC_LABELS.get(count, f"{count} QC"),
        )
    ax_yctc.set_title(f"California Young Child Tax Credit, {yctc_year}")
    ax_yctc.legend(frameon=False, fontsize=8)
    _style(ax_yctc)

    fig.tight_layout()
    return _save(fig, path)
