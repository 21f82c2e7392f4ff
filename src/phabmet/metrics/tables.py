"""Table helpers shared by the category aggregators.

Centralized helper functions for:
- Slicing the long observation table into per-parameter tables
- Normalizing raw text results (trim, upper-case, drop blanks)
- Numeric coercion with TypeCoercionError reporting
- Code-to-weight mapping with InvalidCodeValue reporting or an OTHER bucket
- Station-level frames and long metric melting

All functions return new frames; inputs are never modified in place.
"""

import logging
from typing import Dict, Iterable, Mapping, Optional

import numpy as np
import pandas as pd

from phabmet.contracts import InvalidCodeValue, SchemaError, TypeCoercionError, require
from phabmet.contracts.observations import PARAMETER_COLUMNS

__all__ = [
    'slice_observations',
    'normalize_table',
    'coerce_numeric',
    'map_codes',
    'reference_weights',
    'station_frame',
    'melt_metrics',
    'empty_metrics',
    'modal_class',
]

logger = logging.getLogger(__name__)

STATION_INDEX = ["SITE", "STATION"]


# ============================================================================
# SLICING AND NORMALIZATION
# ============================================================================

def slice_observations(observations: pd.DataFrame, parameters: Iterable[str]) -> Dict[str, pd.DataFrame]:
    """Split a long observation table into one table per parameter.

    Parameters absent from the observation table are omitted from the result.

    Parameters
    ----------
    observations : pd.DataFrame
        Columns SITE, STATION, PARAMETER, RESULT.
    parameters : iterable of str
        Parameter names wanted.

    Returns
    -------
    dict
        Parameter name -> DataFrame with SITE, STATION, RESULT.
    """
    wanted = set(parameters)
    names = observations["PARAMETER"].astype(str).str.strip().str.upper()
    tables = {}
    for name, group in observations[names.isin(wanted)].groupby(names[names.isin(wanted)]):
        tables[name] = group.loc[:, list(PARAMETER_COLUMNS)].reset_index(drop=True)
    return tables


def normalize_table(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with trimmed, upper-cased RESULT text and blanks dropped.

    STATION is cast to str so tables from different sources join cleanly.
    """
    out = df.loc[:, list(PARAMETER_COLUMNS)].copy()
    out["STATION"] = out["STATION"].astype(str)
    result = out["RESULT"]
    text = result.astype(str).str.strip().str.upper()
    missing = result.isna() | text.isin(["", "NAN", "NA"])
    out["RESULT"] = text
    return out[~missing].reset_index(drop=True)


# ============================================================================
# COERCION
# ============================================================================

def coerce_numeric(df: pd.DataFrame, parameter: str) -> pd.DataFrame:
    """Add a float VALUE column parsed from RESULT.

    Raises
    ------
    TypeCoercionError
        If any non-missing RESULT cannot be parsed as a number.
    """
    out = df.copy()
    out["VALUE"] = pd.to_numeric(out["RESULT"], errors="coerce").astype(float)
    bad = out["VALUE"].isna() | ~np.isfinite(out["VALUE"])
    if bad.any():
        raise TypeCoercionError(parameter, out.loc[bad, "RESULT"], out.loc[bad, "SITE"])
    return out


def map_codes(df: pd.DataFrame, parameter: str, mapping: Mapping,
              other: Optional[str] = None) -> pd.DataFrame:
    """Add a VALUE column by looking each RESULT code up in ``mapping``.

    Parameters
    ----------
    df : pd.DataFrame
        Normalized parameter table.
    parameter : str
        Parameter name, for error messages.
    mapping : mapping
        Code -> value (weight or class label).
    other : str, optional
        Catch-all code. Unknown codes are remapped to it instead of raising.

    Raises
    ------
    InvalidCodeValue
        If a code is not in ``mapping`` and no catch-all is defined.
    """
    out = df.copy()
    known = out["RESULT"].isin(list(mapping))
    if not known.all():
        if other is None:
            raise InvalidCodeValue(parameter, out.loc[~known, "RESULT"], out.loc[~known, "SITE"])
        logger.warning("Remapped %d unrecognized '%s' code(s) %s to %s",
                       int((~known).sum()), parameter,
                       sorted(out.loc[~known, "RESULT"].unique()), other)
        out.loc[~known, "RESULT"] = other
    out["VALUE"] = out["RESULT"].map(mapping)
    return out


def reference_weights(reference: Optional[pd.DataFrame], default: Mapping[str, float]) -> Dict[str, float]:
    """Resolve a code -> weight mapping from an optional reference table.

    Parameters
    ----------
    reference : pd.DataFrame, optional
        Columns CODE and WEIGHT (PRESENCE is accepted and ignored; presence
        is always WEIGHT > 0). None means use ``default``.
    default : mapping
        Configured code -> weight mapping.

    Raises
    ------
    SchemaError
        If the reference table lacks CODE or WEIGHT, or has non-numeric weights.
    """
    if reference is None:
        return dict(default)

    require("CODE" in reference.columns, "Reference contract violated: missing 'CODE'")
    require("WEIGHT" in reference.columns, "Reference contract violated: missing 'WEIGHT'")
    weights = pd.to_numeric(reference["WEIGHT"], errors="coerce")
    if weights.isna().any():
        raise SchemaError("Reference contract violated: non-numeric WEIGHT values")
    codes = reference["CODE"].astype(str).str.strip().str.upper()
    return dict(zip(codes, weights.astype(float)))


# ============================================================================
# FRAMES
# ============================================================================

def station_frame(columns: Mapping[str, pd.DataFrame], names: Iterable[str]) -> pd.DataFrame:
    """Join per-type VALUE columns into one station-level frame.

    Parameters
    ----------
    columns : mapping
        Type name -> table with SITE, STATION, VALUE.
    names : iterable of str
        Column order of the result; types without data become all-NaN.

    Returns
    -------
    pd.DataFrame
        Index (SITE, STATION), one column per type.
    """
    names = list(names)
    series = [
        tbl.set_index(STATION_INDEX)["VALUE"].rename(name)
        for name, tbl in columns.items()
        if tbl is not None and not tbl.empty
    ]
    if not series:
        index = pd.MultiIndex.from_arrays([[], []], names=STATION_INDEX)
        return pd.DataFrame(index=index, columns=names, dtype=float)
    return pd.concat(series, axis=1).reindex(columns=names)


def melt_metrics(frame: pd.DataFrame) -> pd.DataFrame:
    """Melt a site-indexed metric frame to SITE, METRIC, VALUE, dropping NaN."""
    if frame.empty:
        return empty_metrics()
    long = (
        frame.rename_axis("SITE")
        .reset_index()
        .melt(id_vars="SITE", var_name="METRIC", value_name="VALUE")
    )
    long = long[long["VALUE"].notna()].copy()
    long["VALUE"] = long["VALUE"].astype(object)
    return long.reset_index(drop=True)


def empty_metrics() -> pd.DataFrame:
    """An empty long metric table with the contract columns."""
    return pd.DataFrame({
        "SITE": pd.Series(dtype=object),
        "METRIC": pd.Series(dtype=object),
        "VALUE": pd.Series(dtype=object),
    })


def modal_class(frame: pd.DataFrame, labels: Mapping[str, str], empty: Optional[str] = None) -> pd.Series:
    """Label of the largest column per row; ties joined with '-' in column order.

    Parameters
    ----------
    frame : pd.DataFrame
        Site-indexed frequencies or cover values.
    labels : mapping
        Column name -> class label.
    empty : str, optional
        Label for rows whose maximum is 0 or NaN (None leaves them NaN).
    """
    columns = [c for c in labels if c in frame.columns]
    values = frame[columns].astype(float)
    top = values.max(axis=1)
    out = pd.Series(np.nan, index=frame.index, dtype=object)
    for site, row in values.iterrows():
        best = top.loc[site]
        if not np.isfinite(best) or best <= 0:
            out.loc[site] = empty if empty is not None else np.nan
            continue
        winners = [labels[c] for c in columns if row[c] == best]
        out.loc[site] = "-".join(winners)
    return out
