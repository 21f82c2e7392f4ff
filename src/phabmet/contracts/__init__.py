"""Pipeline contracts and error taxonomy.

Contracts fail immediately when a stage receives or produces a table
that does not meet its promised structure.

Key principle:
- Pydantic validates config correctness
- Contracts validate table structure between stages
- Aggregators and indicators handle the science edge cases
"""

from phabmet.contracts.failure import (
    ContractViolation,
    InvalidCodeValue,
    MissingRequiredInput,
    PhabError,
    SchemaError,
    TypeCoercionError,
)
from phabmet.contracts.base import require
from phabmet.contracts.observations import assert_observation_table, assert_parameter_table
from phabmet.contracts.metrics import assert_metric_table, assert_wide_table
from phabmet.contracts.indicators import assert_covariate_table, assert_indicator_output

__all__ = [
    "ContractViolation",
    "InvalidCodeValue",
    "MissingRequiredInput",
    "PhabError",
    "SchemaError",
    "TypeCoercionError",
    "require",
    "assert_observation_table",
    "assert_parameter_table",
    "assert_metric_table",
    "assert_wide_table",
    "assert_covariate_table",
    "assert_indicator_output",
]
