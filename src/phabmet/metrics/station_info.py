"""Station information metrics: water depth at the station and surface film."""

import logging

import pandas as pd

from phabmet.metrics.base import CategoryAggregator, register_aggregator
from phabmet.metrics.tables import coerce_numeric, map_codes

__all__ = ['StationInfoAggregator']

logger = logging.getLogger(__name__)


@register_aggregator
class StationInfoAggregator(CategoryAggregator):
    """SIXDEPTH, SIVDEPTH, SINDEPTH and SIFPSURFACE_FILM."""

    category = "station_info"
    parameters = ("DEPTH_AT_STATION", "SURFACE_FILM")

    def _compute(self, tables, reference, extent):
        frames = []

        depth = tables["DEPTH_AT_STATION"]
        if not depth.empty:
            grouped = coerce_numeric(depth, "DEPTH_AT_STATION").groupby("SITE")["VALUE"]
            frames.append(pd.DataFrame({
                "SIXDEPTH": grouped.mean(),
                "SIVDEPTH": grouped.std(ddof=1),
                "SINDEPTH": grouped.count().astype(float),
            }))

        film = tables["SURFACE_FILM"]
        if not film.empty:
            flags = map_codes(film, "SURFACE_FILM", self.vocab.yes_no)
            frames.append(flags.groupby("SITE")["VALUE"].mean().rename("SIFPSURFACE_FILM").to_frame())

        if not frames:
            return pd.DataFrame()
        return pd.concat(frames, axis=1)
