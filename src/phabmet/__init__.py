"""`phabmet` - Physical HABitat METrics and condition indicators for lake surveys.

Subpackages:
- metrics: Category aggregators and drawdown zone synthesis
- pipeline: Metric table assembly and orchestration
- indicators: Observed/expected condition indicators
- schemas: Pydantic configuration
- contracts: Stage contracts and error taxonomy
"""

__version__ = "0.1.0"
