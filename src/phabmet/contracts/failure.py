"""Error taxonomy for the habitat metric pipeline.

Aggregation-time data errors (InvalidCodeValue, TypeCoercionError,
SchemaError) are fatal to the whole call. MissingRequiredInput is raised
per site at indicator time and is converted to a Not Assessed result by
the calculators; it never escapes a calculator.
"""


class PhabError(RuntimeError):
    """Base class for all pipeline errors."""
    pass


class ContractViolation(PhabError):
    """Raised when a stage contract is violated.

    It means a table handed to or produced by a stage does not have the
    structure that stage promises.
    """
    pass


class SchemaError(ContractViolation):
    """A required column is absent, keys are duplicated, or a metric is
    classified as numeric but holds non-numeric values."""
    pass


class InvalidCodeValue(PhabError):
    """A categorical observation lies outside its defined vocabulary."""

    def __init__(self, parameter: str, codes, sites=()):
        self.parameter = parameter
        self.codes = sorted({str(c) for c in codes})
        self.sites = sorted({str(s) for s in sites})
        super().__init__(
            f"Invalid code(s) {self.codes} for parameter '{parameter}' "
            f"at site(s) {self.sites}"
        )


class TypeCoercionError(PhabError):
    """A value cannot be interpreted as the numeric type its parameter requires."""

    def __init__(self, parameter: str, values, sites=()):
        self.parameter = parameter
        self.values = sorted({str(v) for v in values})
        self.sites = sorted({str(s) for s in sites})
        super().__init__(
            f"Non-numeric value(s) {self.values} for numeric parameter "
            f"'{parameter}' at site(s) {self.sites}"
        )


class MissingRequiredInput(PhabError):
    """An indicator lacks a declared metric or covariate for one site."""

    def __init__(self, site, reason: str):
        self.site = site
        self.reason = reason
        super().__init__(f"Site {site}: {reason}")
