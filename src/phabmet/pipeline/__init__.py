"""Pipeline modules.

- assembler: Long/wide metric tables with numeric/categorical typing
- orchestrator: Aggregators -> assembly -> indicators
"""

from phabmet.pipeline.assembler import MetricTableAssembler
from phabmet.pipeline.orchestrator import PhabPipeline, PipelineResult, setup_logging

__all__ = [
    "MetricTableAssembler",
    "PhabPipeline",
    "PipelineResult",
    "setup_logging",
]
