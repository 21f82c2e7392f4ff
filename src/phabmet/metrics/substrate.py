"""Shoreline and littoral bottom substrate metrics.

Both categories record size-class cover. Bottom substrate also records
sediment color and odor, each with an OTHER catch-all: codes outside the
vocabulary are counted as OTHER rather than rejected.
"""

import pandas as pd

from phabmet.metrics.base import register_aggregator
from phabmet.metrics.cover import SubstrateAggregator
from phabmet.metrics.tables import map_codes, modal_class

__all__ = ['ShorelineSubstrateAggregator', 'BottomSubstrateAggregator']

SUBSTRATE_TYPES = (
    "BEDROCK", "BOULDERS", "COBBLE", "GRAVEL", "SAND", "SILT",
    "ORGANIC", "WOODY", "VEGETATION", "OTHER",
)


@register_aggregator
class ShorelineSubstrateAggregator(SubstrateAggregator):
    """Shoreline substrate: SSFC*, SSFP*, SSXLDIA, SSVLDIA, SSOSUB."""

    category = "shoreline_substrate"
    prefix = "SS"
    cover_parameters = {t: f"SS_{t}" for t in SUBSTRATE_TYPES}
    parameters = tuple(cover_parameters.values())


@register_aggregator
class BottomSubstrateAggregator(SubstrateAggregator):
    """Bottom substrate: size-class metrics plus color and odor frequencies."""

    category = "bottom_substrate"
    prefix = "BS"
    cover_parameters = {t: f"BS_{t}" for t in SUBSTRATE_TYPES if t != "VEGETATION"}
    parameters = tuple(cover_parameters.values()) + ("BS_COLOR", "BS_ODOR")

    def _class_frequencies(self, table: pd.DataFrame, parameter: str, classes, label: str) -> pd.DataFrame:
        """BSF<label><class> fractions and the BSO<label> modal class."""
        if table.empty:
            return pd.DataFrame()
        other = self.vocab.other_code if self.vocab.other_code in classes else None
        coded = map_codes(table, parameter, {c: c for c in classes}, other=other)
        counts = pd.crosstab(coded["SITE"], coded["VALUE"]).reindex(columns=list(classes), fill_value=0)
        freq = counts.div(counts.sum(axis=1), axis=0).astype(float)
        freq.columns = [f"BSF{label}{c}" for c in classes]
        freq[f"BSO{label}"] = modal_class(freq, {f"BSF{label}{c}": c for c in classes})
        return freq

    def _compute(self, tables, reference, extent):
        metrics = super()._compute(tables, reference, extent)
        color = self._class_frequencies(tables["BS_COLOR"], "BS_COLOR",
                                        self.vocab.color_classes, "COLOR")
        odor = self._class_frequencies(tables["BS_ODOR"], "BS_ODOR",
                                       self.vocab.odor_classes, "ODOR")
        frames = [f for f in (metrics, color, odor) if not f.empty]
        if not frames:
            return pd.DataFrame()
        return pd.concat(frames, axis=1)
