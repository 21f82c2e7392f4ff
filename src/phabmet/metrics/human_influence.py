"""Human influence metrics.

Each influence type is recorded per station as a proximity code: absent
("0"), present in the plot ("C", circa) or present beyond the plot ("P").
Codes map to proximity weights. The drawdown zone is synthesized by
keeping, per station and type, the larger weight of the two zones before
the site-level metrics are re-tabulated.
"""

import logging

import pandas as pd

from phabmet.metrics.base import DRAWDOWN_SUFFIX, CategoryAggregator, register_aggregator
from phabmet.metrics.synthesis import SynthesisPolicy, ZoneSynthesizer
from phabmet.metrics.tables import map_codes, reference_weights, station_frame

__all__ = ['HumanInfluenceAggregator']

logger = logging.getLogger(__name__)

INFLUENCE_TYPES = (
    "BUILDINGS", "COMMERCIAL", "CROPS", "DOCKS", "LANDFILL", "LAWN", "ORCHARD",
    "OTHER", "PARK", "PASTURE", "POWERLINES", "ROADS", "WALLS",
)
AGRICULTURAL_TYPES = ("CROPS", "ORCHARD", "PASTURE")


@register_aggregator
class HumanInfluenceAggregator(CategoryAggregator):
    """Human influence: HIFP*, HIPW* and the HII* disturbance indices."""

    category = "human_influence"
    zone_type = "riparian"
    parameters = tuple(f"HI_{t}" for t in INFLUENCE_TYPES)
    drawdown_parameters = parameters

    def synthesis_policy(self) -> SynthesisPolicy:
        policy = super().synthesis_policy()
        return policy.model_copy(update={"method": "recombine", "combine": "max"})

    def station_frames(self, tables, weights, suffix: str = ""):
        """Station-level proximity weights and circa flags, one column per type."""
        circa_code = self.vocab.circa_code
        weighted, circa = {}, {}
        for t in INFLUENCE_TYPES:
            name = f"HI_{t}{suffix}"
            table = tables.get(name)
            if table is None or table.empty:
                continue
            coded = map_codes(table, name, weights)
            weighted[t] = coded
            circa[t] = coded.assign(VALUE=(coded["RESULT"] == circa_code).astype(float))
        return station_frame(weighted, INFLUENCE_TYPES), station_frame(circa, INFLUENCE_TYPES)

    def influence_metrics(self, weighted: pd.DataFrame, circa: pd.DataFrame) -> pd.DataFrame:
        """Site-level metrics from station weight and circa frames."""
        if weighted.empty:
            return pd.DataFrame()

        weighted = weighted.astype(float)
        circa = circa.astype(float)
        by_site = weighted.groupby(level="SITE")
        present = (weighted > 0).astype(float).where(weighted.notna())
        mean_weight = by_site.mean()
        presence = present.groupby(level="SITE").mean()
        circa_freq = circa.groupby(level="SITE").mean()

        out = pd.concat([presence.add_prefix("HIFP"), mean_weight.add_prefix("HIPW")], axis=1)
        out["HIFPANY"] = (weighted.fillna(0.0) > 0).any(axis=1).astype(float).groupby(level="SITE").mean()
        out["HIFPANYCIRCA"] = (circa.fillna(0.0) > 0).any(axis=1).astype(float).groupby(level="SITE").mean()

        non_ag = [t for t in INFLUENCE_TYPES if t not in AGRICULTURAL_TYPES]
        out["HIIALL"] = mean_weight.sum(axis=1, min_count=1)
        out["HIIAG"] = mean_weight[list(AGRICULTURAL_TYPES)].sum(axis=1, min_count=1)
        out["HIINONAG"] = mean_weight[non_ag].sum(axis=1, min_count=1)
        out["HIIALLCIRCA"] = circa_freq.sum(axis=1, min_count=1)

        recorded = presence.notna().any(axis=1)
        out["HINALL"] = (presence > 0).sum(axis=1).astype(float).where(recorded)
        return out

    def _compute(self, tables, reference, extent):
        weights = reference_weights(reference, self.vocab.proximity_weights)

        std_weighted, std_circa = self.station_frames(tables, weights)
        dd_weighted, dd_circa = self.station_frames(tables, weights, DRAWDOWN_SUFFIX)

        standard = self.influence_metrics(std_weighted, std_circa)
        drawdown = self.influence_metrics(dd_weighted, dd_circa)

        synthesized = pd.DataFrame()
        if not standard.empty:
            syn = self.influence_metrics(
                self.synthesizer.recombine(std_weighted, dd_weighted),
                self.synthesizer.recombine(std_circa, dd_circa),
            )
            # Sites with drawdown records only get no synthesized value.
            synthesized = syn.reindex(standard.index)

        return self.zone_outputs(standard, drawdown, synthesized)
