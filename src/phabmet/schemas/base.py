"""Shared pydantic bases for phabmet schemas and value records.

Config layers (ParamConfig, UserConfig, InternalConfig and their sections)
derive from PhabBaseModel. Values handed between stages, such as a zone
synthesis policy, an expected-value model, a threshold set or one site's
indicator result, derive from PhabFrozenModel so no stage can alter them
after validation.
"""

from pydantic import BaseModel, ConfigDict


class PhabBaseModel(BaseModel):
    """Base for all phabmet config sections.

    Unknown keys are rejected so a misspelled override fails at resolution
    instead of being ignored. Codes, keys and category names arrive from
    field sheets and JSON tables, so string fields lose surrounding
    whitespace.
    """

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
    )


class PhabFrozenModel(PhabBaseModel):
    """Immutable, hashable value record."""

    model_config = ConfigDict(frozen=True)
