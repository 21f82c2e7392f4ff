"""Indicator fixtures: configs with flat expected-value models.

A flat model (intercept only) makes the expected value independent of
the covariate values, so the tests can work out O/E ratios by hand.
"""

import pytest

from phabmet.schemas import resolve_config
from phabmet.schemas.indicator import ExpectedValueModel
from tests.helpers.configs import with_models
from tests.helpers.observations import make_wide

FLAT_MODELS = {
    "rvegq": 0.5,
    "litcvrq": 0.5,
    "litripcvrq": 0.5,
    "drawdown": 1.0,
}


@pytest.fixture
def flat_param_config(param_config):
    for key, intercept in FLAT_MODELS.items():
        with_models(param_config, key, {"ANY|ANY": ExpectedValueModel(intercept=intercept)})
    return param_config


@pytest.fixture
def flat_config(flat_param_config):
    return resolve_config(flat_param_config, None)


@pytest.fixture
def scored_wide():
    """S1 and S2 carry every indicator metric; S3 lacks the littoral ones."""
    site = {
        "RVICANOPY_SYN": 0.4,
        "RVIUNDERSTORY_SYN": 0.5,
        "RVIGROUND_SYN": 0.6,
        "FCINATURAL_SIM": 0.3,
        "AMIALL_SIM": 0.1,
        "BFXVERTHEIGHT_DD": 2.0,
        "HIFPANYCIRCA_SYN": 0.25,
        "HIIALL_SYN": 0.25,
    }
    partial = {k: v for k, v in site.items() if k not in ("FCINATURAL_SIM", "AMIALL_SIM")}
    return make_wide({"S1": site, "S2": dict(site), "S3": partial})
