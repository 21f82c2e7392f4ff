"""ParamConfig: Expert defaults for the phabmet pipeline.

This module defines the complete default configuration: code vocabularies,
cover-class weights, synthesis plot extents, the categorical metric set and
indicator model/threshold tables. No runtime code defines fallback values;
this is the single source of truth for defaults.

The default expected-value coefficients and thresholds are placeholders
with the right structure. Authoritative tables are supplied through
UserConfig overrides or ``load_indicator_tables()``.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal
from pydantic import Field, field_validator, model_validator
from phabmet.schemas.base import PhabBaseModel
from phabmet.schemas.indicator import ExpectedValueModel, IndicatorConfig, ThresholdSet


# =============================================================================
# Nested Configuration Models
# =============================================================================

class VocabularyConfig(PhabBaseModel):
    """Coded-value vocabularies and their numeric weights."""
    cover_classes: dict[str, float] = Field(
        default_factory=lambda: {"0": 0.0, "1": 0.05, "2": 0.25, "3": 0.575, "4": 0.875}
    )
    proximity_weights: dict[str, float] = Field(
        default_factory=lambda: {"0": 0.0, "P": 0.5, "C": 1.0}
    )
    circa_code: str = "C"
    yes_no: dict[str, float] = Field(default_factory=lambda: {"Y": 1.0, "N": 0.0})
    angle_classes: tuple[str, ...] = ("FLAT", "GRADUAL", "STEEP", "VERTICAL")
    angle_codes: dict[str, str] = Field(
        default_factory=lambda: {"F": "FLAT", "G": "GRADUAL", "S": "STEEP", "V": "VERTICAL"},
        description="Field codes for bank angle classes; class names are accepted as well",
    )
    angle_breaks: tuple[float, ...] = Field(
        (5.0, 30.0, 75.0), description="Degree breaks between consecutive angle classes"
    )
    max_angle: float = 90.0
    vegetation_types: dict[str, str] = Field(
        default_factory=lambda: {
            "D": "DECIDUOUS",
            "C": "CONIFEROUS",
            "E": "BROADLEAF",
            "M": "MIXED",
            "N": "NONE",
        }
    )
    substrate_diameters: dict[str, float] = Field(
        default_factory=lambda: {
            "BEDROCK": 5656.854,
            "BOULDERS": 1000.0,
            "COBBLE": 126.491,
            "GRAVEL": 11.314,
            "SAND": 0.346,
            "SILT": 0.00775,
        },
        description="Geometric mean class diameters in mm",
    )
    color_classes: tuple[str, ...] = ("BLACK", "BROWN", "GRAY", "RED", "OTHER")
    odor_classes: tuple[str, ...] = ("NONE", "H2S", "ANOXIC", "CHEMICAL", "OIL", "OTHER")
    other_code: str = "OTHER"

    @field_validator("cover_classes", "proximity_weights", "yes_no")
    @classmethod
    def weights_in_unit_interval(cls, v):
        """Cover and presence weights are fractions."""
        bad = {k: w for k, w in v.items() if not 0.0 <= w <= 1.0}
        if bad:
            raise ValueError(f"weights must lie in [0, 1], got {bad}")
        return {str(k).strip().upper(): float(w) for k, w in v.items()}

    @model_validator(mode="after")
    def angle_breaks_match_classes(self):
        """Angle breaks split [0, max_angle] into one interval per class."""
        breaks = self.angle_breaks
        if len(breaks) != len(self.angle_classes) - 1:
            raise ValueError(
                f"{len(breaks)} angle breaks for {len(self.angle_classes)} angle classes"
            )
        if any(b <= a for a, b in zip(breaks, breaks[1:])) or (breaks and breaks[-1] >= self.max_angle):
            raise ValueError(f"angle breaks must ascend below {self.max_angle}, got {breaks}")
        unknown = set(self.angle_codes.values()) - set(self.angle_classes)
        if unknown:
            raise ValueError(f"angle codes map to unknown classes {sorted(unknown)}")
        return self


class SynthesisConfig(PhabBaseModel):
    """Drawdown zone synthesis settings."""
    riparian_plot_depth: float = Field(15.0, gt=0, description="Riparian plot depth in m")
    littoral_plot_width: float = Field(10.0, gt=0, description="Littoral plot width in m")
    fallback_weight: float = Field(
        0.5, ge=0, le=1, description="Drawdown weight when the extent is unknown"
    )
    extent_parameter: str = "HORIZ_DIST_DD"


class AssemblerConfig(PhabBaseModel):
    """Metric table assembly settings."""
    categorical_metrics: tuple[str, ...] = (
        "BFOANGLE",
        "SSOSUB",
        "BSOSUB",
        "BSOCOLOR",
        "BSOODOR",
    )


def _oe_thresholds() -> dict[str, ThresholdSet]:
    return {
        "ANY|ANY": ThresholdSet(cuts=(0.5, 0.75)),
        "XER|ANY": ThresholdSet(cuts=(0.4, 0.7)),
        "WMT|MAN_MADE": ThresholdSet(cuts=(0.45, 0.7)),
    }


def _rvegq_config() -> IndicatorConfig:
    return IndicatorConfig(
        classes=("Poor", "Fair", "Good"),
        thresholds=_oe_thresholds(),
        models={
            "ANY|NATURAL": ExpectedValueModel(
                intercept=-0.42, lat=0.004, elevation=-0.00004, log_area=-0.03,
                transform="log10", offset=0.01,
            ),
            "ANY|MAN_MADE": ExpectedValueModel(
                intercept=-0.51, lat=0.003, elevation=-0.00003, log_area=-0.02,
                transform="log10", offset=0.01,
            ),
            "XER|ANY": ExpectedValueModel(
                intercept=-0.78, elevation=0.00002, log_area=-0.04,
                transform="log10", offset=0.01,
            ),
        },
        required_covariates=("ECOREGION", "ORIGIN", "LAT_DD", "LON_DD", "ELEVATION", "AREA_HA"),
    )


def _litcvrq_config() -> IndicatorConfig:
    return IndicatorConfig(
        classes=("Poor", "Fair", "Good"),
        thresholds=_oe_thresholds(),
        models={
            "ANY|NATURAL": ExpectedValueModel(
                intercept=-0.86, lat=0.002, lon=0.001, log_area=-0.05,
                transform="log10", offset=0.01,
            ),
            "ANY|MAN_MADE": ExpectedValueModel(
                intercept=-0.93, lon=0.001, log_area=-0.04,
                transform="log10", offset=0.01,
            ),
        },
        required_covariates=("ECOREGION", "ORIGIN", "LAT_DD", "LON_DD", "ELEVATION", "AREA_HA"),
    )


def _litripcvrq_config() -> IndicatorConfig:
    return IndicatorConfig(
        classes=("Poor", "Fair", "Good"),
        thresholds=_oe_thresholds(),
        models={
            "ANY|NATURAL": ExpectedValueModel(
                intercept=-0.61, lat=0.003, elevation=-0.00002, log_area=-0.04,
                transform="log10", offset=0.01,
            ),
            "ANY|MAN_MADE": ExpectedValueModel(
                intercept=-0.69, lat=0.002, log_area=-0.03,
                transform="log10", offset=0.01,
            ),
        },
        required_covariates=("ECOREGION", "ORIGIN", "LAT_DD", "LON_DD", "ELEVATION", "AREA_HA"),
    )


def _drawdown_config() -> IndicatorConfig:
    return IndicatorConfig(
        classes=("Small", "Medium", "Large"),
        thresholds={"ANY|ANY": ThresholdSet(cuts=(1.5, 3.0))},
        models={
            "ANY|NATURAL": ExpectedValueModel(intercept=0.4),
            "ANY|MAN_MADE": ExpectedValueModel(intercept=1.2),
            "XER|MAN_MADE": ExpectedValueModel(intercept=2.5),
        },
        required_covariates=("ECOREGION", "ORIGIN"),
    )


def _rdis_config() -> IndicatorConfig:
    return IndicatorConfig(
        classes=("Good", "Fair", "Poor"),
        thresholds={"ANY|ANY": ThresholdSet(cuts=(0.2, 0.75))},
    )


class IndicatorsConfig(PhabBaseModel):
    """Condition indicator settings."""
    not_assessed: str = "Not Assessed"
    rdis: IndicatorConfig = Field(default_factory=_rdis_config)
    rvegq: IndicatorConfig = Field(default_factory=_rvegq_config)
    litcvrq: IndicatorConfig = Field(default_factory=_litcvrq_config)
    litripcvrq: IndicatorConfig = Field(default_factory=_litripcvrq_config)
    drawdown: IndicatorConfig = Field(default_factory=_drawdown_config)


class PipelineConfig(PhabBaseModel):
    """Orchestration settings."""
    max_workers: int = Field(1, ge=1, le=64, description="Aggregator threads; 1 runs serially")


class LoggingConfig(PhabBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(PhabBaseModel):
    """Complete expert configuration with all defaults.

    This is the single source of truth for all pipeline parameters.
    Every tunable parameter MUST have a default here.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg)

    Runtime code only sees InternalConfig.
    """

    vocabularies: VocabularyConfig = Field(default_factory=VocabularyConfig)
    synthesis: SynthesisConfig = Field(default_factory=SynthesisConfig)
    assembler: AssemblerConfig = Field(default_factory=AssemblerConfig)
    indicators: IndicatorsConfig = Field(default_factory=IndicatorsConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
