"""Metric table assembly.

Concatenates aggregator outputs into one long metric table and pivots it
to a wide per-site table. Wide columns are coerced to float unless the
metric is a known class-label metric.
"""

import logging
from typing import TYPE_CHECKING

import pandas as pd

from phabmet.contracts import SchemaError, assert_metric_table, assert_wide_table
from phabmet.metrics.tables import empty_metrics, melt_metrics

if TYPE_CHECKING:
    from phabmet.schemas import InternalConfig

__all__ = ['MetricTableAssembler']

logger = logging.getLogger(__name__)


class MetricTableAssembler:
    """Long/wide metric table conversion with numeric/categorical typing.

    Example usage::

        assembler = MetricTableAssembler(config)
        long = assembler.assemble(fish_cover_metrics, bank_metrics)
        wide = assembler.to_wide(long)
        round_trip = assembler.to_long(wide)
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.categorical = frozenset(config.assembler.categorical_metrics)

    def value_kind(self, metric: str) -> str:
        """Return "categorical" for class-label metrics, "numeric" otherwise."""
        return "categorical" if metric in self.categorical else "numeric"

    def assemble(self, *tables: pd.DataFrame) -> pd.DataFrame:
        """Outer union of long metric tables.

        Sites may differ between tables. The union must still hold at most
        one value per (SITE, METRIC).

        Raises
        ------
        SchemaError
            If a table lacks a contract column or a (SITE, METRIC) repeats.
        """
        parts = [t for t in tables if t is not None and not t.empty]
        for part in parts:
            assert_metric_table(part)
        if not parts:
            return empty_metrics()

        long = pd.concat([p.loc[:, ["SITE", "METRIC", "VALUE"]] for p in parts], ignore_index=True)
        assert_metric_table(long)
        long = long.sort_values(["SITE", "METRIC"], kind="mergesort").reset_index(drop=True)
        logger.info("Assembled %d metric values: %d site(s), %d metric(s)",
                    len(long), long["SITE"].nunique(), long["METRIC"].nunique())
        return long

    def to_wide(self, long: pd.DataFrame) -> pd.DataFrame:
        """Pivot a long metric table to one row per SITE.

        Returns
        -------
        pd.DataFrame
            Index SITE, one column per METRIC, columns sorted by name.
            Numeric metrics are float; categorical metrics are object.

        Raises
        ------
        SchemaError
            If a numeric metric holds a value that is not a number.
        """
        assert_metric_table(long)
        if long.empty:
            return pd.DataFrame(index=pd.Index([], name="SITE"))

        wide = long.pivot(index="SITE", columns="METRIC", values="VALUE")
        wide = wide.reindex(columns=sorted(wide.columns))
        wide.columns.name = None

        for metric in wide.columns:
            if metric in self.categorical:
                continue
            raw = wide[metric]
            coerced = pd.to_numeric(raw, errors="coerce")
            bad = coerced.isna() & raw.notna()
            if bad.any():
                raise SchemaError(
                    f"Metric '{metric}' is classified as numeric but holds "
                    f"non-numeric value(s) {sorted(raw[bad].astype(str).unique())}"
                )
            wide[metric] = coerced.astype(float)

        assert_wide_table(wide)
        return wide

    def to_long(self, wide: pd.DataFrame) -> pd.DataFrame:
        """Re-melt a wide metric table, dropping empty cells."""
        assert_wide_table(wide)
        long = melt_metrics(wide)
        long = long.sort_values(["SITE", "METRIC"], kind="mergesort").reset_index(drop=True)
        assert_metric_table(long)
        return long
