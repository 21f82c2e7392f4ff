"""Drawdown zone synthesis.

Some surveys sample an additional drawdown zone, exposed by water-level
fluctuation, next to the standard littoral/riparian plots. The synthesizer
reconciles standard-zone and drawdown-zone values into one estimate that
is comparable across surveys with and without drawdown sampling.

Two strategies, selected by a small policy descriptor:

- **blend**: site-level continuous/fractional metrics are mixed with a
  drawdown weight ``w = clip(extent / plot_extent, 0, 1)``::

      syn = (1 - w) * standard + w * drawdown

  Sites with only standard values keep them exactly. Sites with only
  drawdown values get no synthesized value. A missing extent falls back to
  ``fallback_weight`` (0.5, the unweighted mean) and is never an error.

- **recombine**: station-level coded data are merged before re-tabulation.
  ``max`` keeps the larger weight of the two zones per station; ``pool``
  stacks both zones' observations so frequencies are counted over both.
  A zone absent at a station contributes nothing.

The output tag is fixed per category: ``_SYN`` for riparian data and
``_SIM`` for littoral data.
"""

import logging
from typing import Literal, Optional

import pandas as pd
from pydantic import Field

from phabmet.metrics.tables import coerce_numeric, normalize_table
from phabmet.schemas.base import PhabFrozenModel

__all__ = ['SynthesisPolicy', 'ZoneSynthesizer', 'drawdown_extent']

logger = logging.getLogger(__name__)


class SynthesisPolicy(PhabFrozenModel):
    """Policy descriptor for one category's zone synthesis."""

    method: Literal["blend", "recombine"]
    tag: Literal["_SYN", "_SIM"]
    plot_extent: float = Field(gt=0)
    fallback_weight: float = Field(0.5, ge=0, le=1)
    combine: Literal["max", "pool"] = "max"


class ZoneSynthesizer:
    """Combine standard-zone and drawdown-zone values under a SynthesisPolicy.

    Examples
    --------
    >>> policy = SynthesisPolicy(method="blend", tag="_SYN", plot_extent=15.0)
    >>> synth = ZoneSynthesizer(policy)
    >>> syn = synth.blend(standard_metrics, drawdown_metrics, extent)
    """

    def __init__(self, policy: SynthesisPolicy):
        self.policy = policy
        self.tag = policy.tag

    def synthesize(self, standard: pd.DataFrame, drawdown: pd.DataFrame,
                   extent: Optional[pd.Series] = None) -> pd.DataFrame:
        """Dispatch to the policy's strategy."""
        if self.policy.method == "blend":
            return self.blend(standard, drawdown, extent)
        return self.recombine(standard, drawdown)

    def weights(self, sites: pd.Index, extent: Optional[pd.Series]) -> pd.Series:
        """Drawdown weight per site, with the unweighted fallback for missing extents."""
        if extent is None:
            w = pd.Series(self.policy.fallback_weight, index=sites, dtype=float)
            missing = sites
        else:
            ext = pd.to_numeric(extent, errors="coerce").reindex(sites)
            w = (ext / self.policy.plot_extent).clip(lower=0.0, upper=1.0)
            missing = sites[w.isna().to_numpy()]
            w = w.fillna(self.policy.fallback_weight)
        if len(missing):
            logger.debug("No drawdown extent for %d site(s); using fallback weight %.2f",
                         len(missing), self.policy.fallback_weight)
        return w

    def blend(self, standard: pd.DataFrame, drawdown: pd.DataFrame,
              extent: Optional[pd.Series] = None) -> pd.DataFrame:
        """Weighted blend of site-indexed metric frames.

        Parameters
        ----------
        standard : pd.DataFrame
            Standard-zone metrics, index SITE, one column per base metric name.
        drawdown : pd.DataFrame
            Drawdown-zone metrics with the same base metric names.
        extent : pd.Series, optional
            Horizontal drawdown extent (m) per SITE.

        Returns
        -------
        pd.DataFrame
            Synthesized metrics for the standard-zone sites; NaN where the
            standard value is missing.
        """
        if standard.empty:
            return standard.copy()
        dd = drawdown.reindex(index=standard.index, columns=standard.columns)
        both = dd.notna() & standard.notna()
        if not both.to_numpy().any():
            return standard.copy()

        sites_with_dd = standard.index[both.any(axis=1).to_numpy()]
        w = self.weights(sites_with_dd, extent).reindex(standard.index).fillna(0.0)
        mixed = standard.mul(1.0 - w, axis=0) + dd.mul(w, axis=0)
        return mixed.where(both, standard)

    def recombine(self, standard: pd.DataFrame, drawdown: pd.DataFrame) -> pd.DataFrame:
        """Merge station-level frames from both zones.

        Parameters
        ----------
        standard, drawdown : pd.DataFrame
            Index (SITE, STATION), one column per type. For ``pool`` the
            frames are stacked; for ``max`` the per-station maximum is kept.
        """
        if drawdown is None or drawdown.empty:
            return standard.copy()
        if standard.empty:
            stacked = drawdown.copy()
        else:
            stacked = pd.concat([standard, drawdown])
        if self.policy.combine == "pool":
            return stacked
        return stacked.groupby(level=["SITE", "STATION"]).max()


def drawdown_extent(observations: pd.DataFrame, parameter: str = "HORIZ_DIST_DD") -> pd.Series:
    """Mean horizontal drawdown extent (m) per site.

    Parameters
    ----------
    observations : pd.DataFrame
        Long observation table (SITE, STATION, PARAMETER, RESULT).
    parameter : str
        Parameter holding the horizontal distance to the drawdown edge.

    Returns
    -------
    pd.Series
        Index SITE, float extent; sites without the parameter are absent.

    Raises
    ------
    TypeCoercionError
        If a value of ``parameter`` is not numeric.
    """
    names = observations["PARAMETER"].astype(str).str.strip().str.upper()
    rows = observations[names == parameter]
    if rows.empty:
        return pd.Series(dtype=float, name="EXTENT").rename_axis("SITE")
    values = coerce_numeric(normalize_table(rows), parameter)
    return values.groupby("SITE")["VALUE"].mean().rename("EXTENT")
