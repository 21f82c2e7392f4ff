"""Observed/expected condition indicators.

- base: Calculator contract, covariate join, threshold classification
- riparian_disturbance: RDIS (site-independent)
- cover_complexity: RVEGQ, LITCVRQ
- drawdown: DRAWDOWN
- composite: LITRIPCVRQ from LITCVRQ and RVEGQ

Importing this package registers every indicator.
"""

from phabmet.indicators.base import (
    IndicatorCalculator,
    IndicatorResult,
    available_indicators,
    classify,
    get_indicator,
    join_covariates,
    register_indicator,
)
from phabmet.indicators.riparian_disturbance import RiparianDisturbanceIndicator
from phabmet.indicators.cover_complexity import LittoralCoverComplexity, RiparianVegetationComplexity
from phabmet.indicators.drawdown import DrawdownIndicator
from phabmet.indicators.composite import CompositeCoverComplexity

__all__ = [
    "IndicatorCalculator",
    "IndicatorResult",
    "available_indicators",
    "classify",
    "get_indicator",
    "join_covariates",
    "register_indicator",
    "RiparianDisturbanceIndicator",
    "RiparianVegetationComplexity",
    "LittoralCoverComplexity",
    "DrawdownIndicator",
    "CompositeCoverComplexity",
]
