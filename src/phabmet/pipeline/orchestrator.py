"""Batch pipeline orchestration.

Runs the category aggregators over one observation table, assembles the
metric tables and scores the condition indicators. Every stage is a pure
function of its inputs; aggregators may run in a thread pool because
they share no mutable state, and their outputs are merged by category
name rather than by completion order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, Optional

import pandas as pd

from phabmet.contracts import assert_observation_table
from phabmet.indicators import CompositeCoverComplexity, available_indicators, get_indicator
from phabmet.metrics import available_categories, drawdown_extent, get_aggregator
from phabmet.pipeline.assembler import MetricTableAssembler

if TYPE_CHECKING:
    from phabmet.schemas import InternalConfig

__all__ = ['PhabPipeline', 'PipelineResult', 'setup_logging']

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "phabmet"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the package logger with one console handler.

    Repeated calls only update the level.
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    pkg_logger.setLevel(log_level)

    handler = next((h for h in pkg_logger.handlers if getattr(h, "_phabmet", False)), None)
    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        handler._phabmet = True
        pkg_logger.addHandler(handler)
    handler.setLevel(log_level)
    return pkg_logger


@dataclass(frozen=True)
class PipelineResult:
    """Outputs of one pipeline run."""
    metrics: pd.DataFrame
    wide: pd.DataFrame
    indicators: Dict[str, pd.DataFrame] = field(default_factory=dict)


class PhabPipeline:
    """Observation table -> metrics -> wide table -> condition indicators.

    Example usage::

        from phabmet.schemas import ParamConfig, UserConfig, resolve_config
        from phabmet.pipeline import PhabPipeline, setup_logging

        config = resolve_config(ParamConfig(), UserConfig(MAX_WORKERS=4))
        setup_logging(config.logging.level)
        result = PhabPipeline(config).run(observations, covariates)
        result.indicators["RVEGQ"]
    """

    def __init__(self, config: "InternalConfig", configure_logging: bool = False):
        """Initialize the pipeline.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration. ``pipeline.max_workers``
            sets the aggregator thread count.
        configure_logging : bool, optional
            Call setup_logging() with ``config.logging.level``. Off by
            default.
        """
        self.config = config
        self.assembler = MetricTableAssembler(config)
        if configure_logging:
            setup_logging(config.logging.level)

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    def compute_metrics(self, observations: pd.DataFrame,
                        categories: Optional[Iterable[str]] = None,
                        references: Optional[Dict[str, pd.DataFrame]] = None,
                        test_mode: bool = False) -> pd.DataFrame:
        """Run the category aggregators and assemble their outputs.

        Parameters
        ----------
        observations : pd.DataFrame
            Long observation table (SITE, STATION, PARAMETER, RESULT).
        categories : iterable of str, optional
            Categories to run; all registered categories by default.
        references : dict, optional
            Category name -> CODE/WEIGHT reference table.
        test_mode : bool, optional
            Passed to every aggregator. A table without a STATION column
            gets one from the row position.

        Returns
        -------
        pd.DataFrame
            Long metric table (SITE, METRIC, VALUE) sorted by SITE, METRIC.

        Raises
        ------
        KeyError
            If a category name is not registered.
        SchemaError, InvalidCodeValue, TypeCoercionError
            From any aggregator; the whole call fails.
        """
        if not test_mode:
            assert_observation_table(observations)
        elif "STATION" not in observations.columns:
            observations = observations.assign(STATION=range(len(observations)))
        names = sorted(categories) if categories is not None else available_categories()
        aggregators = {name: get_aggregator(name)(self.config) for name in names}
        references = references or {}
        extent = drawdown_extent(observations, self.config.synthesis.extent_parameter)

        def run(name):
            return aggregators[name].compute_from_observations(
                observations, reference=references.get(name), extent=extent, test_mode=test_mode,
            )

        workers = min(self.config.pipeline.max_workers, len(names)) if names else 1
        if workers > 1:
            logger.info("Running %d aggregator(s) on %d thread(s)", len(names), workers)
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {name: executor.submit(run, name) for name in names}
                outputs = {name: futures[name].result() for name in names}
        else:
            outputs = {name: run(name) for name in names}

        return self.assembler.assemble(*(outputs[name] for name in names))

    # ------------------------------------------------------------------
    # Indicators
    # ------------------------------------------------------------------

    def compute_indicators(self, wide: pd.DataFrame, covariates: Optional[pd.DataFrame] = None,
                           indicators: Optional[Iterable[str]] = None) -> Dict[str, pd.DataFrame]:
        """Score condition indicators from a wide metric table.

        The composite runs after its components; components it needs but
        that were not requested are computed as well and returned too.

        Returns
        -------
        dict
            Indicator name -> result table.
        """
        names = list(indicators) if indicators is not None else available_indicators()
        for name in names:
            get_indicator(name)

        composite = CompositeCoverComplexity.name
        wanted = [n for n in names if n != composite]
        if composite in names:
            wanted += [c for c in CompositeCoverComplexity.components if c not in wanted]

        results = {}
        for name in wanted:
            results[name] = get_indicator(name)(self.config).calculate(wide, covariates)
        if composite in names:
            results[composite] = CompositeCoverComplexity(self.config).calculate_from_components(
                results, covariates
            )
        return dict(sorted(results.items()))

    def run(self, observations: pd.DataFrame, covariates: Optional[pd.DataFrame] = None,
            references: Optional[Dict[str, pd.DataFrame]] = None) -> PipelineResult:
        """Full run: metrics, wide table and every indicator."""
        logger.info("=" * 60)
        logger.info("Starting habitat metric pipeline: %d observation(s)", len(observations))
        metrics = self.compute_metrics(observations, references=references)
        wide = self.assembler.to_wide(metrics)
        indicators = self.compute_indicators(wide, covariates)
        logger.info("Pipeline complete: %d site(s), %d metric(s), %d indicator(s)",
                    len(wide), wide.shape[1], len(indicators))
        logger.info("=" * 60)
        return PipelineResult(metrics=metrics, wide=wide, indicators=indicators)
