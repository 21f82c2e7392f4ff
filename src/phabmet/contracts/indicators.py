"""Indicator stage contracts.

Covariates must be one row per site; indicator output must hold one
row per scored site with a condition from the indicator's vocabulary.
"""

import pandas as pd
from phabmet.contracts.base import require

COVARIATE_COLUMNS = ("SITE", "ECOREGION", "ORIGIN", "LAT_DD", "LON_DD", "ELEVATION", "AREA_HA")
RESULT_COLUMNS = (
    "SITE", "INDICATOR", "OBSERVED", "EXPECTED", "OE", "CONDITION", "NOT_ASSESSED_REASON",
)


def assert_covariate_table(df: pd.DataFrame) -> None:
    """Enforce covariate table contract.

    Only SITE is mandatory; an absent covariate column makes every site
    Not Assessed for indicators needing it, it is not a schema error.
    """
    require(
        isinstance(df, pd.DataFrame),
        f"Covariate contract violated: input is {type(df)}, expected DataFrame"
    )
    require(
        "SITE" in df.columns,
        "Covariate contract violated: missing required column 'SITE'"
    )
    require(
        not df["SITE"].duplicated().any(),
        "Covariate contract violated: more than one row per SITE"
    )


def assert_indicator_output(df: pd.DataFrame, classes, not_assessed: str) -> None:
    """Enforce indicator output contract.

    Raises
    ------
    SchemaError
        If columns are missing, sites repeat, or a condition lies outside
        ``classes`` plus the Not Assessed sentinel.
    """
    for col in RESULT_COLUMNS:
        require(
            col in df.columns,
            f"Indicator contract violated: missing required column '{col}'"
        )
    require(
        not df["SITE"].duplicated().any(),
        "Indicator contract violated: more than one result per SITE"
    )
    allowed = set(classes) | {not_assessed}
    unknown = set(df["CONDITION"]) - allowed
    require(
        not unknown,
        f"Indicator contract violated: unexpected condition class(es) {sorted(unknown)}"
    )
