"""Bank feature metrics.

ANGLE is recorded either as a class code (F, G, S, V or the class name)
or as degrees, which are bucketed by the configured angle breaks:
interval i is [break[i-1], break[i]). DRAWDOWN flags whether a drawdown
zone was observed; HORIZ_DIST_DD and VERT_HEIGHT_DD measure its extent.
"""

import logging

import numpy as np
import pandas as pd

from phabmet.contracts import InvalidCodeValue
from phabmet.metrics.base import CategoryAggregator, register_aggregator
from phabmet.metrics.tables import coerce_numeric, map_codes, modal_class

__all__ = ['BankFeaturesAggregator', 'angle_class']

logger = logging.getLogger(__name__)

MEASURES = {"HORIZ_DIST_DD": "HORIZDIST", "VERT_HEIGHT_DD": "VERTHEIGHT"}


def angle_class(degrees: pd.Series, classes, breaks) -> pd.Series:
    """Bucket bank angles in degrees into named classes."""
    positions = np.digitize(degrees.to_numpy(dtype=float), np.asarray(breaks, dtype=float))
    return pd.Series(np.asarray(classes, dtype=object)[positions], index=degrees.index)


@register_aggregator
class BankFeaturesAggregator(CategoryAggregator):
    """Bank angle class frequencies, drawdown presence and drawdown extent."""

    category = "bank_features"
    parameters = ("ANGLE", "DRAWDOWN", "HORIZ_DIST_DD", "VERT_HEIGHT_DD")

    def angle_classes(self, table: pd.DataFrame) -> pd.DataFrame:
        """Add a VALUE column holding the angle class of each station.

        Raises
        ------
        InvalidCodeValue
            If a code is unknown or a numeric angle lies outside [0, max_angle].
        """
        vocab = self.vocab
        codes = dict(vocab.angle_codes)
        codes.update({c: c for c in vocab.angle_classes})

        out = table.copy()
        degrees = pd.to_numeric(out["RESULT"], errors="coerce")
        numeric = degrees.notna()
        if numeric.any():
            bad = numeric & ((degrees < 0) | (degrees > vocab.max_angle))
            if bad.any():
                raise InvalidCodeValue("ANGLE", out.loc[bad, "RESULT"], out.loc[bad, "SITE"])
        out["VALUE"] = pd.Series(np.nan, index=out.index, dtype=object)
        if numeric.any():
            out.loc[numeric, "VALUE"] = angle_class(degrees[numeric], vocab.angle_classes, vocab.angle_breaks)
        if (~numeric).any():
            coded = map_codes(out.loc[~numeric, ["SITE", "STATION", "RESULT"]], "ANGLE", codes)
            out.loc[~numeric, "VALUE"] = coded["VALUE"].to_numpy()
        return out

    def angle_metrics(self, table: pd.DataFrame) -> pd.DataFrame:
        classes = list(self.vocab.angle_classes)
        coded = self.angle_classes(table)
        counts = pd.crosstab(coded["SITE"], coded["VALUE"]).reindex(columns=classes, fill_value=0)
        n = counts.sum(axis=1)
        freq = counts.div(n, axis=0).astype(float)
        freq.columns = [f"BFF{c}" for c in classes]
        freq["BFNANGLE"] = n.astype(float)
        freq["BFOANGLE"] = modal_class(freq, {f"BFF{c}": c for c in classes})
        freq.index.name = "SITE"
        return freq

    def _compute(self, tables, reference, extent):
        frames = []

        if not tables["ANGLE"].empty:
            frames.append(self.angle_metrics(tables["ANGLE"]))

        if not tables["DRAWDOWN"].empty:
            flags = map_codes(tables["DRAWDOWN"], "DRAWDOWN", self.vocab.yes_no)
            frames.append(flags.groupby("SITE")["VALUE"].mean().rename("BFFDRAWDOWN").to_frame())

        for parameter, fragment in MEASURES.items():
            table = tables[parameter]
            if table.empty:
                continue
            grouped = coerce_numeric(table, parameter).groupby("SITE")["VALUE"]
            frames.append(pd.DataFrame({
                f"BFX{fragment}_DD": grouped.mean(),
                f"BFN{fragment}_DD": grouped.count().astype(float),
            }))

        if not frames:
            return pd.DataFrame()
        return pd.concat(frames, axis=1)
