"""Shared logic for cover-class categories.

Cover classes 0-4 are converted to cover fractions through the configured
weight table (or a per-call reference table). For each cover type the
site-level metrics are:

- ``<P>FC<T>``: mean cover fraction over stations where T was recorded
- ``<P>FP<T>``: fraction of those stations where T was present (cover > 0)

plus category-specific sums of mean cover (``<P>I...`` indices), the
fraction of stations with any cover present and the number of types
present at the site.
"""

import logging
from typing import Dict, Optional

import numpy as np
import pandas as pd

from phabmet.metrics.base import DRAWDOWN_SUFFIX, CategoryAggregator
from phabmet.metrics.tables import map_codes, modal_class, reference_weights, station_frame

__all__ = ['CoverAggregator', 'SubstrateAggregator']

logger = logging.getLogger(__name__)


class CoverAggregator(CategoryAggregator):
    """Aggregator for categories made of cover-class parameters.

    Subclasses set:

    - ``prefix``: metric prefix ("FC", "AM", "RV", ...)
    - ``cover_parameters``: metric fragment -> standard parameter name
    - ``indices``: index name -> fragments summed from mean cover
    - ``any_presence_metric`` / ``count_metric``: optional metric names
    """

    prefix: str = ""
    cover_parameters: Dict[str, str] = {}
    indices: Dict[str, tuple] = {}
    any_presence_metric: Optional[str] = None
    count_metric: Optional[str] = None

    def cover_weights(self, reference: Optional[pd.DataFrame]) -> Dict[str, float]:
        return reference_weights(reference, self.vocab.cover_classes)

    def cover_station_frame(self, tables: Dict[str, pd.DataFrame], weights: Dict[str, float],
                            suffix: str = "") -> pd.DataFrame:
        """Station-level cover fractions, one column per fragment."""
        columns = {}
        for fragment, parameter in self.cover_parameters.items():
            name = parameter + suffix
            if name in tables:
                columns[fragment] = map_codes(tables[name], name, weights)
        return station_frame(columns, self.cover_parameters)

    def cover_metrics(self, station: pd.DataFrame) -> pd.DataFrame:
        """Site-level cover metrics from a station-level cover frame."""
        if station.empty:
            return pd.DataFrame()

        station = station.astype(float)
        mean_cover = station.groupby(level="SITE").mean()
        present = (station > 0).astype(float).where(station.notna())
        presence = present.groupby(level="SITE").mean()

        out = pd.concat(
            [mean_cover.add_prefix(f"{self.prefix}FC"), presence.add_prefix(f"{self.prefix}FP")],
            axis=1,
        )
        for name, members in self.indices.items():
            out[f"{self.prefix}{name}"] = mean_cover[list(members)].sum(axis=1, min_count=1)

        if self.any_presence_metric:
            any_present = (station.fillna(0.0) > 0).any(axis=1).astype(float)
            out[self.any_presence_metric] = any_present.groupby(level="SITE").mean()
        if self.count_metric:
            out[self.count_metric] = self.count_types(out)
        return out

    def count_types(self, metrics: pd.DataFrame) -> pd.Series:
        """Number of types present at the site, from the FP columns."""
        fp = metrics[[f"{self.prefix}FP{t}" for t in self.cover_parameters]]
        counts = (fp > 0).sum(axis=1).astype(float)
        return counts.where(fp.notna().any(axis=1))

    def zoned_cover_metrics(self, tables: Dict[str, pd.DataFrame], weights: Dict[str, float],
                            extent: Optional[pd.Series]):
        """Standard, drawdown and synthesized cover metric frames."""
        standard = self.cover_metrics(self.cover_station_frame(tables, weights))
        if self.zone_type is None:
            return standard, pd.DataFrame(), pd.DataFrame()

        drawdown = self.cover_metrics(self.cover_station_frame(tables, weights, DRAWDOWN_SUFFIX))
        synthesized = self.synthesizer.blend(standard, drawdown, extent)
        if self.count_metric and not synthesized.empty:
            synthesized[self.count_metric] = self.count_types(synthesized)
        return standard, drawdown, synthesized

    def _compute(self, tables, reference, extent):
        weights = self.cover_weights(reference)
        standard, drawdown, synthesized = self.zoned_cover_metrics(tables, weights, extent)
        if self.zone_type is None:
            return standard
        return self.zone_outputs(standard, drawdown, synthesized)


class SubstrateAggregator(CoverAggregator):
    """Cover classes of substrate size classes plus diameter summaries.

    Adds ``<P>XLDIA`` (mean over stations of cover-weighted log10 diameter),
    ``<P>VLDIA`` (its standard deviation) and ``<P>OSUB`` (dominant class by
    mean cover, categorical).
    """

    def diameter_metrics(self, station: pd.DataFrame) -> pd.DataFrame:
        diameters = {
            frag: d for frag, d in self.vocab.substrate_diameters.items()
            if frag in self.cover_parameters
        }
        if station.empty or not diameters:
            return pd.DataFrame()

        sized = station[list(diameters)].astype(float)
        log_d = pd.Series({frag: np.log10(d) for frag, d in diameters.items()})
        total = sized.sum(axis=1, min_count=1)
        weighted = sized.mul(log_d, axis=1).sum(axis=1, min_count=1)
        station_ldia = (weighted / total).where(total > 0)

        grouped = station_ldia.groupby(level="SITE")
        out = pd.DataFrame({
            f"{self.prefix}XLDIA": grouped.mean(),
            f"{self.prefix}VLDIA": grouped.std(ddof=1),
        })
        return out

    def dominant_class(self, metrics: pd.DataFrame) -> pd.Series:
        labels = {f"{self.prefix}FC{frag}": frag for frag in self.cover_parameters}
        return modal_class(metrics, labels, empty="NONE")

    def _compute(self, tables, reference, extent):
        weights = self.cover_weights(reference)
        station = self.cover_station_frame(tables, weights)
        metrics = self.cover_metrics(station)
        if metrics.empty:
            return metrics
        metrics = pd.concat([metrics, self.diameter_metrics(station)], axis=1)
        metrics[f"{self.prefix}OSUB"] = self.dominant_class(metrics)
        return metrics
