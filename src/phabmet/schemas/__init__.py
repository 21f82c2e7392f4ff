"""Pydantic configuration schemas for the phabmet pipeline.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
load_indicator_tables : function
    Read pre-fit model/threshold tables from JSON
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
IndicatorConfig, ExpectedValueModel, ThresholdSet : class
    Indicator model and threshold tables
"""

from phabmet.schemas.resolve import resolve_config, load_indicator_tables
from phabmet.schemas.internal import InternalConfig
from phabmet.schemas.param import ParamConfig
from phabmet.schemas.user import UserConfig
from phabmet.schemas.indicator import ExpectedValueModel, IndicatorConfig, ThresholdSet

__all__ = [
    'resolve_config',
    'load_indicator_tables',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'ExpectedValueModel',
    'IndicatorConfig',
    'ThresholdSet',
]
