"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for stage
contracts. It raises SchemaError by default, the error a malformed table
produces anywhere in the pipeline.
"""

from phabmet.contracts.failure import SchemaError


def require(condition: bool, message: str, error: type = SchemaError) -> None:
    """Enforce a pipeline contract.

    Parameters
    ----------
    condition : bool
        The invariant that must be true.

    message : str
        Error message explaining the violation.

    error : type, optional
        Exception class raised when the condition fails (default SchemaError).

    Raises
    ------
    SchemaError
        If condition is False (or ``error`` when given).

    Examples
    --------
    >>> require("SITE" in df.columns, "Observation contract: missing 'SITE'")
    """
    if not condition:
        raise error(message)
