"""Resolve the layered configuration into one InternalConfig.

User overrides win over the expert defaults in ParamConfig. Settings are
merged key by key, except indicator model and threshold tables: a user
`models` or `thresholds` mapping (from UserConfig or load_indicator_tables())
replaces that indicator's default mapping as a whole.
"""

import json
from pathlib import Path
from typing import Optional, Union

from phabmet.schemas.internal import InternalConfig
from phabmet.schemas.param import ParamConfig
from phabmet.schemas.user import UserConfig

# Indicator sections a user supplies whole rather than merged into defaults
REPLACED_TABLES = ("models", "thresholds")


def deep_merge(base: dict, *overrides: dict) -> dict:
    """Recursively merge ``overrides`` into a copy of ``base``.

    Mappings present on both sides are merged key by key; any other value
    from a later override replaces the earlier one. ``base`` is not modified.

    Examples
    --------
    >>> defaults = {"synthesis": {"riparian_plot_depth": 15.0, "littoral_plot_width": 10.0}}
    >>> deep_merge(defaults, {"synthesis": {"littoral_plot_width": 20.0}})
    {'synthesis': {'riparian_plot_depth': 15.0, 'littoral_plot_width': 20.0}}
    """
    merged = dict(base)
    for override in overrides:
        for key, value in override.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = deep_merge(current, value)
            else:
                merged[key] = value
    return merged


def resolve_config(
    param_cfg: Union[dict, ParamConfig],
    user_cfg: Optional[Union[dict, UserConfig]] = None,
) -> InternalConfig:
    """Build the frozen runtime config from expert defaults and user overrides.

    Parameters
    ----------
    param_cfg : dict or ParamConfig
        Complete expert defaults.
    user_cfg : dict or UserConfig, optional
        Overrides; None or an empty dict keeps every default.

    Returns
    -------
    InternalConfig
        Validated configuration handed to every pipeline stage.

    Raises
    ------
    pydantic.ValidationError
        If a layer or the merged result is invalid (e.g. unordered
        threshold cuts or a cover weight outside [0, 1]).

    Examples
    --------
    >>> config = resolve_config(ParamConfig(), UserConfig(MAX_WORKERS=4))
    >>> config.pipeline.max_workers
    4
    """
    param = param_cfg if isinstance(param_cfg, ParamConfig) else ParamConfig.model_validate(param_cfg)

    if user_cfg is None or (isinstance(user_cfg, dict) and not user_cfg):
        user = UserConfig()
    elif not isinstance(user_cfg, UserConfig):
        user = UserConfig.model_validate(user_cfg)
    else:
        user = user_cfg

    overrides = user.to_internal_overrides()

    # Deep merge: param < user
    merged = deep_merge(param.model_dump(), overrides)
    _replace_indicator_tables(merged, overrides)

    return InternalConfig.model_validate(merged)


def _replace_indicator_tables(merged: dict, overrides: dict) -> None:
    """Put user model and threshold tables in place of the merged ones."""
    for name, section in (overrides.get("indicators") or {}).items():
        if not isinstance(section, dict):
            continue
        for field in REPLACED_TABLES:
            if field in section:
                merged["indicators"][name][field] = section[field]


def load_indicator_tables(path: Union[str, Path]) -> dict:
    """Load indicator model/threshold tables from a JSON file.

    The file holds a mapping of indicator name (``rdis``, ``rvegq``,
    ``litcvrq``, ``litripcvrq``, ``drawdown``) to an IndicatorConfig-shaped
    dict. The result is meant for ``UserConfig(indicators=...)``.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the top level is not a JSON object.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Indicator tables not found: {path}")

    with path.open() as fh:
        tables = json.load(fh)

    if not isinstance(tables, dict):
        raise ValueError(f"Indicator tables in {path} must be a JSON object")
    return tables
