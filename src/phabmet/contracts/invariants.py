"""Formal pipeline invariants.

This file documents what each stage MUST produce. Use it as a reviewer
anchor and system reference.
"""

PIPELINE_INVARIANTS = {
    "observations": [
        "Columns SITE, STATION, PARAMETER, RESULT exist",
        "(SITE, STATION, PARAMETER) is unique",
        "RESULT is untyped text; coercion happens per parameter",
    ],

    "aggregation": [
        "Output columns are SITE, METRIC, VALUE",
        "At most one VALUE per (SITE, METRIC)",
        "Unknown codes raise InvalidCodeValue unless the parameter has an OTHER bucket",
        "Non-numeric values of numeric parameters raise TypeCoercionError",
    ],

    "synthesis": [
        "Standard-zone only sites: synthesized value == standard value",
        "Both zones: blended value lies between the two zone values",
        "Missing drawdown extent degrades to the fallback weight, never an error",
        "Tag is _SYN for riparian categories and _SIM for littoral categories",
    ],

    "assembly": [
        "Wide table indexed by SITE, one column per METRIC",
        "Non-categorical columns are float typed",
        "wide -> long reproduces the assembled (SITE, METRIC, VALUE) triples",
    ],

    "indicators": [
        "One result per site in the scored set",
        "CONDITION is Not Assessed iff an input, model or threshold set is missing or expected <= 0",
        "Threshold intervals are contiguous and cover the real line",
        "Composite is Not Assessed whenever a component is Not Assessed",
    ],
}

# Which stages are optional vs required
STAGE_REQUIREMENTS = {
    "observations": "REQUIRED",
    "aggregation": "REQUIRED",
    "synthesis": "OPTIONAL",    # Only where drawdown parameters exist
    "assembly": "REQUIRED",
    "indicators": "OPTIONAL",   # Only when covariates are supplied
}
