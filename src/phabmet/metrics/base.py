"""Category aggregator contract and registry.

Every measurement category (fish cover, riparian vegetation, human
influence, ...) is one CategoryAggregator subclass registered under its
category name. All share one input/output contract:

    tables (one per parameter: SITE, STATION, RESULT)
      -> long metric table (SITE, METRIC, VALUE)

Categories with a drawdown zone set ``zone_type`` and get a
ZoneSynthesizer configured for their zone: riparian categories tag
synthesized metrics ``_SYN``, littoral categories ``_SIM``.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, Optional

import pandas as pd

from phabmet.contracts import assert_metric_table, assert_parameter_table
from phabmet.metrics.synthesis import SynthesisPolicy, ZoneSynthesizer
from phabmet.metrics.tables import empty_metrics, melt_metrics, normalize_table, slice_observations

if TYPE_CHECKING:
    from phabmet.schemas import InternalConfig

__all__ = [
    'CategoryAggregator',
    'register_aggregator',
    'get_aggregator',
    'available_categories',
]

logger = logging.getLogger(__name__)

DRAWDOWN_SUFFIX = "_DD"

_REGISTRY: Dict[str, type] = {}


def register_aggregator(cls):
    """Class decorator adding an aggregator to the registry under ``cls.category``."""
    if not cls.category:
        raise ValueError(f"{cls.__name__} has no category name")
    if cls.category in _REGISTRY and _REGISTRY[cls.category] is not cls:
        raise ValueError(f"Category '{cls.category}' already registered")
    _REGISTRY[cls.category] = cls
    return cls


def get_aggregator(category: str) -> type:
    """Look up an aggregator class by category name.

    Raises
    ------
    KeyError
        If no aggregator is registered under ``category``.
    """
    try:
        return _REGISTRY[category]
    except KeyError:
        raise KeyError(
            f"Unknown category '{category}'. Available: {available_categories()}"
        ) from None


def available_categories() -> list:
    return sorted(_REGISTRY)


class CategoryAggregator(ABC):
    """Base class for per-category metric aggregators.

    Subclasses define:

    - ``category``: registry key
    - ``parameters``: standard-zone parameter names
    - ``drawdown_parameters``: subset of ``parameters`` also sampled in the
      drawdown zone (as ``<name>_DD``)
    - ``zone_type``: "riparian", "littoral" or None
    - ``_compute(tables, reference, extent)``: site-indexed metric frame

    Not thread-safe to mutate, but ``compute`` holds no state between calls,
    so one instance may be shared by concurrent callers.
    """

    category: str = ""
    parameters: tuple = ()
    drawdown_parameters: tuple = ()
    zone_type: Optional[str] = None

    def __init__(self, config: "InternalConfig"):
        """Initialize aggregator with validated configuration.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration.
        """
        self.config = config
        self.vocab = config.vocabularies
        self.synthesizer = None
        if self.zone_type is not None:
            self.synthesizer = ZoneSynthesizer(self.synthesis_policy())

    # ------------------------------------------------------------------
    # Zones
    # ------------------------------------------------------------------

    def synthesis_policy(self) -> SynthesisPolicy:
        """Blend policy for this category's zone type."""
        syn = self.config.synthesis
        if self.zone_type == "riparian":
            return SynthesisPolicy(method="blend", tag="_SYN",
                                   plot_extent=syn.riparian_plot_depth,
                                   fallback_weight=syn.fallback_weight)
        return SynthesisPolicy(method="blend", tag="_SIM",
                               plot_extent=syn.littoral_plot_width,
                               fallback_weight=syn.fallback_weight)

    @property
    def standard_suffix(self) -> str:
        """Suffix of standard-zone-only metrics ("_RIP", "_LIT" or "")."""
        return {"riparian": "_RIP", "littoral": "_LIT"}.get(self.zone_type, "")

    @property
    def synthesis_tag(self) -> str:
        return self.synthesizer.tag if self.synthesizer is not None else ""

    def all_parameters(self) -> tuple:
        """Standard parameters followed by their drawdown variants."""
        return tuple(self.parameters) + tuple(p + DRAWDOWN_SUFFIX for p in self.drawdown_parameters)

    def zone_outputs(self, standard: pd.DataFrame, drawdown: pd.DataFrame,
                     synthesized: pd.DataFrame) -> pd.DataFrame:
        """Suffix and join the three zone variants of a site metric frame."""
        frames = [
            standard.add_suffix(self.standard_suffix),
            drawdown.add_suffix(DRAWDOWN_SUFFIX),
            synthesized.add_suffix(self.synthesis_tag),
        ]
        frames = [f for f in frames if not f.empty]
        if not frames:
            return pd.DataFrame()
        return pd.concat(frames, axis=1)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def compute(self, tables: Dict[str, pd.DataFrame], reference: Optional[pd.DataFrame] = None,
                extent: Optional[pd.Series] = None, test_mode: bool = False) -> pd.DataFrame:
        """Compute this category's metrics.

        Parameters
        ----------
        tables : dict
            Parameter name -> DataFrame with SITE, STATION, RESULT.
            Drawdown parameters are keyed ``<name>_DD``.
        reference : pd.DataFrame, optional
            CODE/WEIGHT table replacing the configured code weights.
        extent : pd.Series, optional
            Horizontal drawdown extent per SITE, used as synthesis weight.
        test_mode : bool, optional
            Relax input-shape validation: absent parameter tables are
            treated as empty and a missing STATION column is filled.

        Returns
        -------
        pd.DataFrame
            Long metric table (SITE, METRIC, VALUE) sorted by SITE, METRIC.

        Raises
        ------
        SchemaError
            If an input table is malformed (strict mode).
        InvalidCodeValue
            If a coded value lies outside its vocabulary.
        TypeCoercionError
            If a numeric parameter holds non-numeric values.
        """
        prepared = self._prepare_tables(tables, test_mode)
        frame = self._compute(prepared, reference, extent)
        out = melt_metrics(frame) if frame is not None and not frame.empty else empty_metrics()
        out = out.sort_values(["SITE", "METRIC"], kind="mergesort").reset_index(drop=True)
        assert_metric_table(out)
        logger.info("%s: %d metric values for %d site(s)",
                    self.category, len(out), out["SITE"].nunique())
        return out

    def compute_from_observations(self, observations: pd.DataFrame,
                                  reference: Optional[pd.DataFrame] = None,
                                  extent: Optional[pd.Series] = None,
                                  test_mode: bool = False) -> pd.DataFrame:
        """Slice a long observation table and compute this category's metrics."""
        tables = slice_observations(observations, self.all_parameters())
        if not test_mode:
            # Parameters never observed in the survey are legitimately empty.
            for name in self.all_parameters():
                tables.setdefault(name, pd.DataFrame(columns=["SITE", "STATION", "RESULT"]))
        return self.compute(tables, reference=reference, extent=extent, test_mode=test_mode)

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def _prepare_tables(self, tables: Dict[str, pd.DataFrame], test_mode: bool) -> Dict[str, pd.DataFrame]:
        """Validate and normalize the input tables."""
        prepared = {}
        for name in self.all_parameters():
            df = tables.get(name)
            if df is None:
                if not test_mode and name in self.parameters:
                    assert_parameter_table(df, name)
                prepared[name] = pd.DataFrame(columns=["SITE", "STATION", "RESULT"])
                continue
            if test_mode:
                df = df.copy()
                if "STATION" not in df.columns:
                    df["STATION"] = range(len(df))
            else:
                assert_parameter_table(df, name)
            prepared[name] = normalize_table(df)
        return prepared

    @abstractmethod
    def _compute(self, tables: Dict[str, pd.DataFrame], reference: Optional[pd.DataFrame],
                 extent: Optional[pd.Series]) -> pd.DataFrame:
        """Return a site-indexed frame with one column per metric name."""
