"""Indicator calculator contract, covariate join and threshold classification.

An indicator reads a few metrics (and, for modeled indicators, site
covariates) from the joined site table and produces one IndicatorResult
per site:

1. Check that every declared metric and covariate is present and finite.
2. Compute the observed value.
3. Evaluate the pre-fit expected-value model for the site's
   ecoregion/origin (modeled indicators only).
4. Form the observed/expected ratio; an expected value <= 0 or a ratio
   that overflows is not assessable.
5. Map the ratio (or the observed value, for site-independent
   indicators) through ordered thresholds to a condition class.

Any failed requirement raises MissingRequiredInput for that site only,
which is turned into a Not Assessed result. Other sites are unaffected.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence

import numpy as np
import pandas as pd

from phabmet.contracts import (
    MissingRequiredInput,
    TypeCoercionError,
    assert_covariate_table,
    assert_indicator_output,
    assert_wide_table,
)
from phabmet.contracts.indicators import COVARIATE_COLUMNS, RESULT_COLUMNS
from phabmet.schemas.base import PhabFrozenModel
from phabmet.schemas.indicator import WILDCARD

if TYPE_CHECKING:
    from phabmet.schemas import InternalConfig

__all__ = [
    'IndicatorResult',
    'IndicatorCalculator',
    'join_covariates',
    'classify',
    'register_indicator',
    'get_indicator',
    'available_indicators',
]

logger = logging.getLogger(__name__)

ORIGIN_CLASSES = ("NATURAL", "MAN_MADE")
NUMERIC_COVARIATES = ("LAT_DD", "LON_DD", "ELEVATION", "AREA_HA")
MISSING_COVARIATES = "_MISSING_COVARIATES"

_REGISTRY: Dict[str, type] = {}


def register_indicator(cls):
    """Class decorator adding an indicator to the registry under ``cls.name``."""
    if not cls.name:
        raise ValueError(f"{cls.__name__} has no indicator name")
    _REGISTRY[cls.name] = cls
    return cls


def get_indicator(name: str) -> type:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"Unknown indicator '{name}'. Available: {available_indicators()}"
        ) from None


def available_indicators() -> list:
    return sorted(_REGISTRY)


# ============================================================================
# RESULT RECORD
# ============================================================================

class IndicatorResult(PhabFrozenModel):
    """One site's result for one indicator. Immutable once built."""

    site: Any
    indicator: str
    observed: Optional[float] = None
    expected: Optional[float] = None
    oe: Optional[float] = None
    condition: str
    not_assessed_reason: Optional[str] = None

    def to_row(self) -> dict:
        return {
            "SITE": self.site,
            "INDICATOR": self.indicator,
            "OBSERVED": self.observed,
            "EXPECTED": self.expected,
            "OE": self.oe,
            "CONDITION": self.condition,
            "NOT_ASSESSED_REASON": self.not_assessed_reason,
        }


def results_frame(results: Sequence[IndicatorResult]) -> pd.DataFrame:
    """Tabulate results with the indicator output columns, sorted by SITE."""
    df = pd.DataFrame([r.to_row() for r in results], columns=list(RESULT_COLUMNS))
    for col in ("OBSERVED", "EXPECTED", "OE"):
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)
    if not df.empty:
        df = df.sort_values("SITE", kind="mergesort").reset_index(drop=True)
    return df


# ============================================================================
# JOIN AND CLASSIFY
# ============================================================================

def join_covariates(wide: pd.DataFrame, covariates: Optional[pd.DataFrame]) -> pd.DataFrame:
    """Outer join of the wide metric table with site covariates.

    Parameters
    ----------
    wide : pd.DataFrame
        Wide metric table indexed by SITE.
    covariates : pd.DataFrame, optional
        One row per SITE with any of ECOREGION, ORIGIN, LAT_DD, LON_DD,
        ELEVATION, AREA_HA. Absent columns are added as missing.

    Returns
    -------
    pd.DataFrame
        Index SITE covering sites of both tables. ``_MISSING_COVARIATES``
        flags sites with no covariate row. ECOREGION and ORIGIN are
        upper-cased; an ORIGIN outside NATURAL/MAN_MADE is treated as missing.

    Raises
    ------
    SchemaError
        If the covariate table has no SITE column or repeats a SITE.
    TypeCoercionError
        If a numeric covariate holds a non-numeric value.
    """
    assert_wide_table(wide)
    if covariates is None:
        covariates = pd.DataFrame(columns=["SITE"])
    assert_covariate_table(covariates)

    cov = covariates.copy()
    for col in COVARIATE_COLUMNS[1:]:
        if col not in cov.columns:
            cov[col] = np.nan

    for col in ("ECOREGION", "ORIGIN"):
        raw = cov[col]
        text = raw.where(raw.isna(), raw.astype(str).str.strip().str.upper())
        cov[col] = text.where(text != "", np.nan)
    invalid = cov["ORIGIN"].notna() & ~cov["ORIGIN"].isin(ORIGIN_CLASSES)
    if invalid.any():
        logger.debug("Treating %d unrecognized ORIGIN value(s) as missing: %s",
                     int(invalid.sum()), sorted(cov.loc[invalid, "ORIGIN"].unique()))
        cov.loc[invalid, "ORIGIN"] = np.nan

    for col in NUMERIC_COVARIATES:
        values = pd.to_numeric(cov[col], errors="coerce")
        bad = values.isna() & cov[col].notna()
        if bad.any():
            raise TypeCoercionError(col, cov.loc[bad, col], cov.loc[bad, "SITE"])
        cov[col] = values.astype(float)

    cov = cov.set_index("SITE")[list(COVARIATE_COLUMNS[1:])]
    cov[MISSING_COVARIATES] = False
    overlap = [c for c in cov.columns if c in wide.columns]
    joined = wide.drop(columns=overlap).join(cov, how="outer")
    joined[MISSING_COVARIATES] = joined[MISSING_COVARIATES].isna() | joined[MISSING_COVARIATES].astype(bool)
    joined.index.name = "SITE"
    n_missing = int(joined[MISSING_COVARIATES].sum())
    if n_missing:
        logger.debug("%d site(s) have metrics but no covariate row", n_missing)
    return joined


def classify(value: float, cuts: Sequence[float], classes: Sequence[str]) -> str:
    """Map a value to its condition class.

    Class i covers ``[cuts[i-1], cuts[i])``; the first class is open below
    and the last open above, so every finite value gets exactly one class.

    Raises
    ------
    ValueError
        If the cuts are not strictly ascending, do not match the number of
        classes, or ``value`` is not finite.
    """
    cuts = list(cuts)
    if len(classes) != len(cuts) + 1:
        raise ValueError(f"{len(cuts)} cut points cannot partition {len(classes)} classes")
    if any(b <= a for a, b in zip(cuts, cuts[1:])):
        raise ValueError(f"cut points must be strictly ascending, got {cuts}")
    if not math.isfinite(value):
        raise ValueError(f"cannot classify non-finite value {value}")
    return classes[int(np.searchsorted(cuts, value, side="right"))]


def _finite(value) -> bool:
    try:
        return value is not None and math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


# ============================================================================
# CALCULATOR
# ============================================================================

class IndicatorCalculator(ABC):
    """Base class for per-indicator calculators.

    Subclasses define:

    - ``name``: indicator name and registry key (e.g. "RVEGQ")
    - ``config_key``: attribute of ``config.indicators`` holding the
      IndicatorConfig (classes, thresholds, models, required covariates)
    - ``metrics``: metric columns read by ``observed``
    - ``modeled``: False for site-independent indicators (no expected value)
    - ``observed(values)``: observed value from the metric values
    """

    name: str = ""
    config_key: str = ""
    metrics: tuple = ()
    modeled: bool = True

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.settings = getattr(config.indicators, self.config_key)
        self.not_assessed = config.indicators.not_assessed

    @abstractmethod
    def observed(self, values: Dict[str, float]) -> float:
        """Observed value from the required metric values."""

    # ------------------------------------------------------------------
    # Requirements
    # ------------------------------------------------------------------

    def require_metric(self, site, row: pd.Series, metric: str) -> float:
        value = row.get(metric, np.nan)
        if not _finite(value):
            raise MissingRequiredInput(site, f"missing_metric:{metric}")
        return float(value)

    def require_covariate(self, site, row: pd.Series, covariate: str):
        value = row.get(covariate, np.nan)
        if covariate in NUMERIC_COVARIATES:
            if not _finite(value):
                raise MissingRequiredInput(site, f"missing_covariate:{covariate}")
            return float(value)
        if value is None or (isinstance(value, float) and math.isnan(value)):
            raise MissingRequiredInput(site, f"missing_covariate:{covariate}")
        return value

    def observed_value(self, site, row: pd.Series) -> float:
        values = {m: self.require_metric(site, row, m) for m in self.metrics}
        return float(self.observed(values))

    def expected_value(self, site, row: pd.Series) -> float:
        ecoregion = self.require_covariate(site, row, "ECOREGION")
        origin = self.require_covariate(site, row, "ORIGIN")
        model = self.settings.find_model(ecoregion, origin)
        if model is None:
            raise MissingRequiredInput(site, f"no_model:{ecoregion}|{origin}")
        cov = {c: self.require_covariate(site, row, c) for c in model.required_covariates()}
        expected = model.predict(
            lat=cov.get("LAT_DD", 0.0),
            lon=cov.get("LON_DD", 0.0),
            elevation=cov.get("ELEVATION", 0.0),
            area=cov.get("AREA_HA", 1.0),
        )
        if not math.isfinite(expected) or expected <= 0:
            raise MissingRequiredInput(site, "nonpositive_expected")
        return expected

    def thresholds(self, site, row: pd.Series):
        if not self.modeled:
            key = (WILDCARD, WILDCARD)
        else:
            key = (row.get("ECOREGION"), row.get("ORIGIN"))
        found = self.settings.find_thresholds(*key)
        if found is None:
            raise MissingRequiredInput(site, f"no_thresholds:{key[0]}|{key[1]}")
        return found.cuts

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def score(self, site, row: pd.Series) -> IndicatorResult:
        """Score one site; raises MissingRequiredInput when not assessable."""
        observed = self.observed_value(site, row)
        for covariate in self.settings.required_covariates:
            self.require_covariate(site, row, covariate)

        if not self.modeled:
            condition = classify(observed, self.thresholds(site, row), self.settings.classes)
            return IndicatorResult(site=site, indicator=self.name, observed=observed,
                                   condition=condition)

        expected = self.expected_value(site, row)
        ratio = observed / expected
        if not math.isfinite(ratio):
            raise MissingRequiredInput(site, "nonfinite_ratio")
        condition = classify(ratio, self.thresholds(site, row), self.settings.classes)
        return IndicatorResult(site=site, indicator=self.name, observed=observed,
                               expected=expected, oe=ratio, condition=condition)

    def evaluate(self, site, row: pd.Series) -> IndicatorResult:
        """Score one site, converting a missing input into Not Assessed."""
        try:
            return self.score(site, row)
        except MissingRequiredInput as exc:
            logger.debug("%s not assessed for site %s: %s", self.name, site, exc.reason)
            return IndicatorResult(site=site, indicator=self.name, condition=self.not_assessed,
                                   not_assessed_reason=exc.reason)

    def compute(self, joined: pd.DataFrame) -> pd.DataFrame:
        """Score every site of a joined metric/covariate table.

        Returns
        -------
        pd.DataFrame
            Columns SITE, INDICATOR, OBSERVED, EXPECTED, OE, CONDITION,
            NOT_ASSESSED_REASON; one row per site, sorted by SITE.
        """
        results = [self.evaluate(site, row) for site, row in joined.iterrows()]
        df = results_frame(results)
        assert_indicator_output(df, self.settings.classes, self.not_assessed)
        n_na = int((df["CONDITION"] == self.not_assessed).sum())
        logger.info("%s: %d site(s) scored, %d not assessed", self.name, len(df) - n_na, n_na)
        return df

    def calculate(self, wide: pd.DataFrame, covariates: Optional[pd.DataFrame] = None) -> pd.DataFrame:
        """Join ``wide`` with ``covariates`` and score every site."""
        return self.compute(join_covariates(wide, covariates))
