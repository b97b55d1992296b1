"""Long <-> wide reshaping of benefit schedules.

The wide form has one row per (year, earnings) and one column per benefit
field and dependent count, named ``<field>_<dependent_count>``
(``federal_eitc_0``, ``federal_eitc_1``, ...). Figures address columns by
these names.
"""

import re
from typing import List, Optional

import pandas as pd

from .composer import BENEFIT_FIELDS, KEY_COLUMNS
from .errors import ReshapeConflictError


WIDE_KEY_COLUMNS = ["year", "earnings"]

_WIDE_COLUMN = re.compile(r"^(?P<field>.+)_(?P<count>\d+)$")


def wide_column(field: str, dependent_count: int) -> str:
    return f"{field}_{int(dependent_count)}"


def to_wide(long: pd.DataFrame, fields: Optional[List[str]] = None) -> pd.DataFrame:
    """Pivot a long-form schedule on dependent_count.

    Args:
        long: One row per (year, earnings, dependent_count)
        fields: Benefit columns to spread (default: every benefit field present)

    Returns:
        One row per (year, earnings) present in any dependent-count
        category; missing combinations are NaN

    Raises:
        ReshapeConflictError: The key columns are not unique
    """
    fields = fields or [f for f in BENEFIT_FIELDS if f in long.columns]

    duplicated = long.duplicated(KEY_COLUMNS, keep=False)
    if duplicated.any():
        dupes = long.loc[duplicated, KEY_COLUMNS].drop_duplicates()
        raise ReshapeConflictError(list(dupes.itertuples(index=False, name=None)))

    if long.empty:
        return pd.DataFrame(
            {col: pd.Series(dtype=long[col].dtype) for col in WIDE_KEY_COLUMNS}
        )

    counts = sorted(long["dependent_count"].unique())
    pivoted = long.pivot(index=WIDE_KEY_COLUMNS, columns="dependent_count", values=fields)

    columns = [(field, count) for field in fields for count in counts]
    pivoted = pivoted.reindex(columns=pd.MultiIndex.from_tuples(columns))
    pivoted.columns = [wide_column(field, count) for field, count in columns]

    return pivoted.sort_index().reset_index()


def to_long(
    wide: pd.DataFrame,
    drop_empty: bool = False,
    keys: Optional[pd.DataFrame] = None,
) -> pd.DataFrame:
    """Melt a wide schedule back to one row per (year, earnings, dependent_count).

    The wide form cannot tell an absent combination from a present one
    whose benefits are all NaN. Without ``keys`` every combination comes
    back, so only full grids round-trip exactly; pass the original
    long form's key columns as ``keys`` to restore exactly those rows.

    Args:
        wide: Output of to_wide
        drop_empty: Drop rows whose benefit fields are all NaN (this also
            drops genuinely all-missing rows)
        keys: Frame with the (year, earnings, dependent_count) rows to keep
    """
    if wide.empty or len(wide.columns) == len(WIDE_KEY_COLUMNS):
        return pd.DataFrame(columns=KEY_COLUMNS)

    value_columns = [c for c in wide.columns if c not in WIDE_KEY_COLUMNS]
    melted = wide.melt(id_vars=WIDE_KEY_COLUMNS, value_vars=value_columns, var_name="column")

    parts = melted["column"].str.extract(_WIDE_COLUMN)
    melted["field"] = parts["field"]
    melted["dependent_count"] = parts["count"].astype("int64")

    long = melted.set_index(KEY_COLUMNS + ["field"])["value"].unstack("field")
    long.columns.name = None

    fields = [f for f in BENEFIT_FIELDS if f in long.columns]
    fields += [f for f in long.columns if f not in fields]
    long = long[fields].reset_index()

    if keys is not None:
        long = long.merge(keys[KEY_COLUMNS].drop_duplicates(), on=KEY_COLUMNS, how="inner")
    if drop_empty:
        long = long.dropna(subset=fields, how="all")

    return long.sort_values(["year", "dependent_count", "earnings"]).reset_index(drop=True)
