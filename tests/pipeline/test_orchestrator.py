"""Integration tests for the batch pipeline."""

import logging

import pandas as pd
import pytest

from phabmet.indicators import available_indicators
from phabmet.metrics import available_categories
from phabmet.pipeline import PhabPipeline, PipelineResult, setup_logging
from tests.helpers.observations import metric_value

pytestmark = pytest.mark.integration


@pytest.fixture
def pipeline(internal_config):
    return PhabPipeline(internal_config)


def test_full_run(pipeline, survey, lake_covariates):
    result = pipeline.run(survey, lake_covariates)

    assert isinstance(result, PipelineResult)
    assert sorted(result.metrics["SITE"].unique()) == ["L1", "L2"]
    assert list(result.wide.index) == ["L1", "L2"]
    assert sorted(result.indicators) == available_indicators()

    for name, table in result.indicators.items():
        assert list(table["SITE"]) == ["L1", "L2"], name
        assert (table["INDICATOR"] == name).all()


def test_full_run_scores_complete_lakes(pipeline, survey, lake_covariates):
    result = pipeline.run(survey, lake_covariates)
    for name, table in result.indicators.items():
        assert (table["CONDITION"] != "Not Assessed").all(), name


def test_every_category_contributes(pipeline, survey):
    long = pipeline.compute_metrics(survey)
    for prefix in ("FC", "AM", "RV", "HI", "SI", "BF", "SS", "BS"):
        assert long["METRIC"].str.startswith(prefix).any(), prefix


def test_drawdown_extent_sets_blend_weight(pipeline, survey):
    long = pipeline.compute_metrics(survey, categories=["fish_cover"])

    # L1: extent 4 m in a 10 m plot; L2: 20 m, clipped to the drawdown value.
    assert metric_value(long, "L1", "FCFCBOULDERS_SIM") == pytest.approx(0.6 * 0.4625 + 0.4 * 0.05)
    assert metric_value(long, "L2", "FCFCBOULDERS_SIM") == pytest.approx(0.05)


def test_categories_subset(pipeline, survey):
    long = pipeline.compute_metrics(survey, categories=["station_info"])
    assert set(long["METRIC"]) == {"SIXDEPTH", "SIVDEPTH", "SINDEPTH", "SIFPSURFACE_FILM"}


def test_unknown_category(pipeline, survey):
    with pytest.raises(KeyError, match="fish"):
        pipeline.compute_metrics(survey, categories=["fish"])


def test_threaded_run_matches_serial(make_config, survey):
    serial = PhabPipeline(make_config()).compute_metrics(survey)
    threaded = PhabPipeline(make_config(MAX_WORKERS=4)).compute_metrics(survey)
    pd.testing.assert_frame_equal(serial, threaded)


def test_composite_brings_its_components(pipeline, survey, lake_covariates):
    wide = pipeline.assembler.to_wide(pipeline.compute_metrics(survey))
    results = pipeline.compute_indicators(wide, lake_covariates, indicators=["LITRIPCVRQ"])
    assert list(results) == ["LITCVRQ", "LITRIPCVRQ", "RVEGQ"]


def test_unknown_indicator(pipeline):
    wide = pd.DataFrame(index=pd.Index([], name="SITE"))
    with pytest.raises(KeyError):
        pipeline.compute_indicators(wide, indicators=["RVEG"])


def test_test_mode_fills_missing_station(pipeline):
    observations = pd.DataFrame({
        "SITE": ["S1", "S1", "S1", "S1"],
        "PARAMETER": ["DEPTH_AT_STATION", "DEPTH_AT_STATION", "DEPTH_AT_STATION", "HORIZ_DIST_DD"],
        "RESULT": ["1", "2", "3", "5"],
    })
    long = pipeline.compute_metrics(observations, categories=["station_info"], test_mode=True)

    assert metric_value(long, "S1", "SIXDEPTH") == pytest.approx(2.0)
    assert metric_value(long, "S1", "SINDEPTH") == 3.0
    assert "STATION" not in observations.columns


@pytest.fixture
def package_logger():
    """The phabmet logger with its console handler removed before and after."""
    logger = logging.getLogger("phabmet")
    level = logger.level

    def strip():
        for handler in [h for h in logger.handlers if getattr(h, "_phabmet", False)]:
            logger.removeHandler(handler)

    strip()
    yield logger
    strip()
    logger.setLevel(level)


def console_handlers(logger):
    return [h for h in logger.handlers if getattr(h, "_phabmet", False)]


def test_setup_logging_is_idempotent(package_logger):
    setup_logging("INFO")
    logger = setup_logging("debug")

    assert logger is package_logger
    assert len(console_handlers(logger)) == 1
    assert logger.level == logging.DEBUG


def test_pipeline_leaves_handlers_alone(package_logger, internal_config):
    PhabPipeline(internal_config)
    assert console_handlers(package_logger) == []


def test_pipeline_can_configure_logging(package_logger, make_config):
    PhabPipeline(make_config(LOG_LEVEL="WARNING"), configure_logging=True)
    assert len(console_handlers(package_logger)) == 1
    assert package_logger.level == logging.WARNING
    logger = setup_logging("debug")

    handlers = [h for h in logger.handlers if getattr(h, "_phabmet", False)]
    assert len(handlers) == 1
    assert logger.level == logging.DEBUG
    setup_logging("INFO")


def test_registries_are_complete():
    assert len(available_categories()) == 8
    assert len(available_indicators()) == 5
