"""Metric stage contract.

Enforces the guarantee that aggregator output and the assembled metric
tables hold at most one value per (SITE, METRIC).
"""

import pandas as pd
from phabmet.contracts.base import require

METRIC_COLUMNS = ("SITE", "METRIC", "VALUE")


def assert_metric_table(df: pd.DataFrame) -> None:
    """Enforce long metric table contract.

    Raises
    ------
    SchemaError
        If a column is missing or (SITE, METRIC) repeats.
    """
    require(
        isinstance(df, pd.DataFrame),
        f"Metric contract violated: output is {type(df)}, expected DataFrame"
    )
    for col in METRIC_COLUMNS:
        require(
            col in df.columns,
            f"Metric contract violated: missing required column '{col}'"
        )
    dupes = df.duplicated(subset=["SITE", "METRIC"], keep=False)
    require(
        not dupes.any(),
        "Metric contract violated: duplicate (SITE, METRIC) for "
        f"{sorted(df.loc[dupes, 'METRIC'].astype(str).unique())}"
    )


def assert_wide_table(df: pd.DataFrame, required=()) -> None:
    """Enforce wide metric table contract.

    Parameters
    ----------
    df : pd.DataFrame
        Wide table indexed by SITE.

    required : iterable of str, optional
        Metric columns that must exist.

    Raises
    ------
    SchemaError
        If the index is not SITE, sites repeat, or a required column is absent.
    """
    require(
        df.index.name == "SITE",
        f"Wide metric contract violated: index is '{df.index.name}', expected 'SITE'"
    )
    require(
        df.index.is_unique,
        "Wide metric contract violated: duplicate SITE rows"
    )
    for col in required:
        require(
            col in df.columns,
            f"Wide metric contract violated: missing required column '{col}'"
        )
