"""Composite littoral-riparian cover complexity (LITRIPCVRQ).

Combines the already computed LITCVRQ and RVEGQ results. A site where
either component is Not Assessed (or absent) is Not Assessed with reason
``component_not_assessed``; otherwise the mean of the component observed
values is scored against its own expected-value model and thresholds.
"""

import logging
from typing import Dict, Optional

import numpy as np
import pandas as pd

from phabmet.contracts import MissingRequiredInput, require
from phabmet.indicators.base import IndicatorCalculator, join_covariates, register_indicator

__all__ = ['CompositeCoverComplexity']

logger = logging.getLogger(__name__)


@register_indicator
class CompositeCoverComplexity(IndicatorCalculator):
    """LITRIPCVRQ from the LITCVRQ and RVEGQ component results."""

    name = "LITRIPCVRQ"
    config_key = "litripcvrq"
    components = ("LITCVRQ", "RVEGQ")

    def observed(self, values):
        return sum(values.values()) / len(values)

    def observed_value(self, site, row):
        values = {}
        for component in self.components:
            condition = row.get(f"{component}_CONDITION", np.nan)
            observed = row.get(f"{component}_OBSERVED", np.nan)
            if not isinstance(condition, str) or condition == self.not_assessed:
                raise MissingRequiredInput(site, "component_not_assessed")
            if observed is None or not np.isfinite(observed):
                raise MissingRequiredInput(site, "component_not_assessed")
            values[component] = float(observed)
        return float(self.observed(values))

    def component_table(self, components: Dict[str, pd.DataFrame]) -> pd.DataFrame:
        """Site-indexed OBSERVED/CONDITION columns of each component."""
        frames = []
        for component in self.components:
            require(
                component in components,
                f"Composite {self.name} needs component '{component}' results"
            )
            result = components[component].set_index("SITE")[["OBSERVED", "CONDITION"]]
            frames.append(result.add_prefix(f"{component}_"))
        table = pd.concat(frames, axis=1)
        table.index.name = "SITE"
        return table

    def calculate_from_components(self, components: Dict[str, pd.DataFrame],
                                  covariates: Optional[pd.DataFrame] = None) -> pd.DataFrame:
        """Score the composite for every site of either component.

        Parameters
        ----------
        components : dict
            Indicator name -> result table, holding at least LITCVRQ and RVEGQ.
        covariates : pd.DataFrame, optional
            Site covariates, as for the component indicators.

        Raises
        ------
        SchemaError
            If a component result table is missing.
        """
        table = self.component_table(components)
        joined = join_covariates(table, covariates)
        # Sites known only from covariates have no component results to combine.
        joined = joined.loc[joined.index.isin(table.index)]
        return self.compute(joined)
