"""Riparian vegetation cover and type metrics.

Cover classes are recorded for canopy, understory and ground layers;
canopy and understory are also typed (deciduous, coniferous, broadleaf
evergreen, mixed, none). Cover metrics of the riparian plot and the
drawdown zone are blended into ``_SYN`` metrics; vegetation type
frequencies are synthesized by pooling both zones' station records.
"""

import logging

import pandas as pd

from phabmet.metrics.base import DRAWDOWN_SUFFIX, register_aggregator
from phabmet.metrics.cover import CoverAggregator
from phabmet.metrics.synthesis import SynthesisPolicy, ZoneSynthesizer
from phabmet.metrics.tables import map_codes

__all__ = ['RiparianVegetationAggregator']

logger = logging.getLogger(__name__)

TYPE_PARAMETERS = {"CAN": "RV_CANOPY", "UND": "RV_UNDERSTORY"}


@register_aggregator
class RiparianVegetationAggregator(CoverAggregator):
    """Riparian vegetation: RVFC*, RVFP*, RVI* indices and RVFPCAN*/RVFPUND* types."""

    category = "riparian_vegetation"
    zone_type = "riparian"
    prefix = "RV"
    cover_parameters = {
        "CANBIG": "RV_CANOPY_BIG",
        "CANSMALL": "RV_CANOPY_SMALL",
        "UNDWOODY": "RV_UNDERSTORY_WOODY",
        "UNDNONW": "RV_UNDERSTORY_NONWOODY",
        "GNDWOODY": "RV_GROUND_WOODY",
        "GNDNONW": "RV_GROUND_NONWOODY",
        "GNDINUNDATED": "RV_GROUND_INUNDATED",
        "GNDBARREN": "RV_GROUND_BARREN",
    }
    parameters = tuple(cover_parameters.values()) + tuple(TYPE_PARAMETERS.values())
    drawdown_parameters = parameters
    indices = {
        "ICANOPY": ("CANBIG", "CANSMALL"),
        "IUNDERSTORY": ("UNDWOODY", "UNDNONW"),
        "IGROUND": ("GNDWOODY", "GNDNONW"),
        "IWOODY": ("CANBIG", "CANSMALL", "UNDWOODY", "GNDWOODY"),
        "ITALLWOOD": ("CANBIG", "CANSMALL", "UNDWOODY"),
        "IHERBS": ("UNDNONW", "GNDNONW"),
        "ICANUND": ("CANBIG", "CANSMALL", "UNDWOODY", "UNDNONW"),
        "ITOTALVEG": ("CANBIG", "CANSMALL", "UNDWOODY", "UNDNONW", "GNDWOODY", "GNDNONW"),
    }

    def __init__(self, config):
        super().__init__(config)
        policy = self.synthesis_policy()
        self.type_synthesizer = ZoneSynthesizer(SynthesisPolicy(
            method="recombine", combine="pool", tag=policy.tag,
            plot_extent=policy.plot_extent, fallback_weight=policy.fallback_weight,
        ))

    def type_records(self, tables, suffix: str = "") -> pd.DataFrame:
        """Station records of vegetation type, index (SITE, STATION), columns CAN/UND."""
        types = self.vocab.vegetation_types
        records = []
        for layer, parameter in TYPE_PARAMETERS.items():
            name = parameter + suffix
            table = tables.get(name)
            if table is None or table.empty:
                continue
            coded = map_codes(table, name, types)
            records.append(coded.set_index(["SITE", "STATION"])["VALUE"].rename(layer))
        if not records:
            return pd.DataFrame()
        return pd.concat(records, axis=1)

    def type_frequencies(self, records: pd.DataFrame) -> pd.DataFrame:
        """RVFP<layer><TYPE>: fraction of typed stations with each vegetation type."""
        if records.empty:
            return pd.DataFrame()
        labels = list(dict.fromkeys(self.vocab.vegetation_types.values()))
        frames = []
        for layer in TYPE_PARAMETERS:
            if layer not in records.columns:
                continue
            values = records[layer].dropna()
            if values.empty:
                continue
            sites = values.index.get_level_values("SITE")
            counts = pd.crosstab(sites, values.to_numpy()).reindex(columns=labels, fill_value=0)
            freq = counts.div(counts.sum(axis=1), axis=0).astype(float)
            freq.columns = [f"RVFP{layer}{t}" for t in labels]
            frames.append(freq)
        if not frames:
            return pd.DataFrame()
        out = pd.concat(frames, axis=1)
        out.index.name = "SITE"
        return out

    def _compute(self, tables, reference, extent):
        weights = self.cover_weights(reference)
        standard, drawdown, synthesized = self.zoned_cover_metrics(tables, weights, extent)

        std_types = self.type_records(tables)
        dd_types = self.type_records(tables, DRAWDOWN_SUFFIX)
        pooled = self.type_synthesizer.recombine(std_types, dd_types)
        # Pooled frequencies exist only where the riparian plot was typed.
        if not std_types.empty and not pooled.empty:
            std_sites = std_types.index.get_level_values("SITE").unique()
            pooled = pooled[pooled.index.get_level_values("SITE").isin(std_sites)]
        else:
            pooled = pd.DataFrame()

        def _join(cover, types):
            frames = [f for f in (cover, types) if not f.empty]
            return pd.concat(frames, axis=1) if frames else pd.DataFrame()

        return self.zone_outputs(
            _join(standard, self.type_frequencies(std_types)),
            _join(drawdown, self.type_frequencies(dd_types)),
            _join(synthesized, self.type_frequencies(pooled)),
        )
