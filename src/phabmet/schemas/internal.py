"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and contains NO optional fields that processing code depends on.

The nested sections reuse the ParamConfig section models; the difference is
that every section is required here and the whole object is frozen.
"""

from pydantic import ConfigDict
from phabmet.schemas.base import PhabBaseModel
from phabmet.schemas.param import (
    AssemblerConfig,
    IndicatorsConfig,
    LoggingConfig,
    PipelineConfig,
    SynthesisConfig,
    VocabularyConfig,
)


class InternalConfig(PhabBaseModel):
    """Authoritative runtime configuration.

    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.cover_weights = config.vocabularies.cover_classes  # NOT .get()
            self.plot_depth = config.synthesis.riparian_plot_depth

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation

    All of that happens during config resolution, not in runtime code.
    """

    vocabularies: VocabularyConfig
    synthesis: SynthesisConfig
    assembler: AssemblerConfig
    indicators: IndicatorsConfig
    pipeline: PipelineConfig
    logging: LoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
