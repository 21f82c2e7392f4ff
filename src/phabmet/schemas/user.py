"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs with aliases for common naming patterns
(e.g., LOG_LEVEL -> logging.level, MAX_WORKERS -> pipeline.max_workers).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults.
"""

from typing import Any, Literal, Optional
from pydantic import Field, field_validator
from phabmet.schemas.base import PhabBaseModel


class UserSynthesisConfig(PhabBaseModel):
    """User-facing synthesis config."""
    riparian_plot_depth: Optional[float] = None
    littoral_plot_width: Optional[float] = None
    fallback_weight: Optional[float] = None
    extent_parameter: Optional[str] = None


class UserConfig(PhabBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.

    Usage
    -----
        user_cfg = UserConfig(
            LOG_LEVEL="debug",
            MAX_WORKERS=4,
            indicators={"rvegq": {"thresholds": {"XER|NATURAL": {"cuts": [0.4, 0.8]}}}},
        )

        internal = resolve_config(param_cfg, user_cfg)
    """

    # Flat aliases
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(
        None, alias="LOG_LEVEL"
    )
    max_workers: Optional[int] = Field(None, alias="MAX_WORKERS")
    riparian_plot_depth: Optional[float] = Field(None, alias="RIPARIAN_PLOT_DEPTH")
    littoral_plot_width: Optional[float] = Field(None, alias="LITTORAL_PLOT_WIDTH")
    fallback_weight: Optional[float] = Field(None, alias="FALLBACK_WEIGHT")
    categorical_metrics: Optional[list[str]] = Field(None, alias="CATEGORICAL_METRICS")
    not_assessed: Optional[str] = Field(None, alias="NOT_ASSESSED")

    # Nested overrides (advanced users)
    synthesis: Optional[UserSynthesisConfig] = None
    vocabularies: Optional[dict[str, Any]] = None
    indicators: Optional[dict[str, Any]] = None

    model_config = PhabBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lowercase level names."""
        if isinstance(v, str):
            return v.upper().strip()
        return v

    @field_validator("categorical_metrics", mode="before")
    @classmethod
    def normalize_metric_names(cls, v):
        """Metric names are upper case."""
        if v is not None:
            return [str(m).strip().upper() for m in v]
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        if self.max_workers is not None:
            overrides["pipeline"] = {"max_workers": self.max_workers}

        # Synthesis section
        synthesis = {}
        if self.riparian_plot_depth is not None:
            synthesis["riparian_plot_depth"] = self.riparian_plot_depth
        if self.littoral_plot_width is not None:
            synthesis["littoral_plot_width"] = self.littoral_plot_width
        if self.fallback_weight is not None:
            synthesis["fallback_weight"] = self.fallback_weight

        # Merge with explicit synthesis config
        if self.synthesis is not None:
            synthesis.update(self.synthesis.model_dump(exclude_none=True))

        if synthesis:
            overrides["synthesis"] = synthesis

        if self.categorical_metrics is not None:
            overrides["assembler"] = {"categorical_metrics": self.categorical_metrics}

        if self.vocabularies is not None:
            overrides["vocabularies"] = dict(self.vocabularies)

        indicators = dict(self.indicators) if self.indicators is not None else {}
        if self.not_assessed is not None:
            indicators["not_assessed"] = self.not_assessed
        if indicators:
            overrides["indicators"] = indicators

        return overrides
