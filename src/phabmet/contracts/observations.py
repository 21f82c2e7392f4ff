"""Observation stage contract.

Enforces the shape of the long-format observation table and of the
per-parameter slices handed to category aggregators.
"""

import pandas as pd
from phabmet.contracts.base import require

OBSERVATION_COLUMNS = ("SITE", "STATION", "PARAMETER", "RESULT")
PARAMETER_COLUMNS = ("SITE", "STATION", "RESULT")


def assert_observation_table(df: pd.DataFrame) -> None:
    """Enforce observation table contract.

    Parameters
    ----------
    df : pd.DataFrame
        Long observation table with SITE, STATION, PARAMETER, RESULT.

    Raises
    ------
    SchemaError
        If the table is not a DataFrame, a column is missing, or
        (SITE, STATION, PARAMETER) is not unique.
    """
    require(
        isinstance(df, pd.DataFrame),
        f"Observation contract violated: input is {type(df)}, expected DataFrame"
    )
    for col in OBSERVATION_COLUMNS:
        require(
            col in df.columns,
            f"Observation contract violated: missing required column '{col}'"
        )
    dupes = df.duplicated(subset=["SITE", "STATION", "PARAMETER"], keep=False)
    require(
        not dupes.any(),
        "Observation contract violated: duplicate (SITE, STATION, PARAMETER) "
        f"keys for site(s) {sorted(df.loc[dupes, 'SITE'].astype(str).unique())}"
    )


def assert_parameter_table(df: pd.DataFrame, parameter: str) -> None:
    """Enforce the per-parameter slice contract (strict mode only).

    Parameters
    ----------
    df : pd.DataFrame
        Table for one parameter with exactly SITE, STATION, RESULT.

    parameter : str
        Parameter name, for error messages.

    Raises
    ------
    SchemaError
        If columns differ from SITE, STATION, RESULT or keys repeat.
    """
    require(
        isinstance(df, pd.DataFrame),
        f"Parameter contract violated: '{parameter}' is {type(df)}, expected DataFrame"
    )
    require(
        tuple(sorted(df.columns)) == tuple(sorted(PARAMETER_COLUMNS)),
        f"Parameter contract violated: '{parameter}' has columns {list(df.columns)}, "
        f"expected {list(PARAMETER_COLUMNS)}"
    )
    require(
        not df.duplicated(subset=["SITE", "STATION"]).any(),
        f"Parameter contract violated: duplicate (SITE, STATION) keys in '{parameter}'"
    )
