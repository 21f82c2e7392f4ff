"""Root-level pytest fixtures for the phabmet test suite.

Provides shared configuration fixtures following the Pydantic-based
configuration layers. Tests build configs through these fixtures instead
of constructing InternalConfig by hand.
"""

import pytest

from phabmet.schemas import ParamConfig, UserConfig, resolve_config


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults.

    Use this as the base for all test configs. Override specific values
    with make_config or by assigning validated section models.
    """
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides).

    Examples
    --------
    >>> def test_fish_cover_tag(internal_config):
    ...     agg = FishCoverAggregator(internal_config)
    ...     assert agg.synthesis_tag == "_SIM"
    """
    return resolve_config(param_config, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_plot_depth(make_config):
    ...     config = make_config(RIPARIAN_PLOT_DEPTH=20)
    ...     assert config.synthesis.riparian_plot_depth == 20.0
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            return resolve_config(param_config, UserConfig(**user_overrides))
        return resolve_config(param_config, None)

    return _make
