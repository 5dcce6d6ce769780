"""Tests for configuration management."""

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_artboard_size,
    get_environment,
    get_environment_info,
    get_log_level,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("MCP_PORT", raising=False)
        assert get_environment(EnvVar.MCP_PORT) == 18080

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("MCP_PORT", "9999")
        assert get_environment(EnvVar.MCP_PORT, override=5000) == 5000

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("PATTERN_ARTBOARD_WIDTH", "800")
        result = get_environment(EnvVar.PATTERN_ARTBOARD_WIDTH)
        assert result == 800
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_bool_type_conversion_true(self, monkeypatch):
        """Boolean type conversion for true values."""
        for value in ("true", "1", "yes", "TRUE", "Yes"):
            monkeypatch.setenv("PATTERN_EXCLUSIVE_MAPPING", value)
            assert get_environment(EnvVar.PATTERN_EXCLUSIVE_MAPPING) is True

    @pytest.mark.unit
    def test_bool_type_conversion_false(self, monkeypatch):
        """Boolean type conversion for false values."""
        for value in ("false", "0", "no", "FALSE", "No"):
            monkeypatch.setenv("PATTERN_STRICT_MANIFESTS", value)
            assert get_environment(EnvVar.PATTERN_STRICT_MANIFESTS) is False

    @pytest.mark.unit
    def test_unrecognized_bool_returns_default(self, monkeypatch):
        """Unparseable booleans fall back to the default."""
        monkeypatch.setenv("PATTERN_STRICT_MANIFESTS", "maybe")
        assert get_environment(EnvVar.PATTERN_STRICT_MANIFESTS) is True

    @pytest.mark.unit
    def test_invalid_int_returns_default(self, monkeypatch):
        """Invalid integer value returns default."""
        monkeypatch.setenv("MCP_PORT", "not-a-number")
        assert get_environment(EnvVar.MCP_PORT) == 18080

    @pytest.mark.unit
    def test_engine_defaults(self, monkeypatch):
        """Engine switches default to strict, permissive, flat."""
        for name in (
            "PATTERN_STRICT_MANIFESTS",
            "PATTERN_EXCLUSIVE_MAPPING",
            "PATTERN_GENERATOR_NESTED",
        ):
            monkeypatch.delenv(name, raising=False)

        assert get_environment(EnvVar.PATTERN_STRICT_MANIFESTS) is True
        assert get_environment(EnvVar.PATTERN_EXCLUSIVE_MAPPING) is False
        assert get_environment(EnvVar.PATTERN_GENERATOR_NESTED) is False


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.MCP_PORT)
        assert isinstance(info, EnvConfig)
        assert info.name == "MCP_PORT"
        assert info.default == 18080
        assert info.var_type is int
        assert info.category == "service"

    @pytest.mark.unit
    def test_every_variable_is_described(self):
        """Every variable carries a description."""
        for var in EnvVar:
            assert get_environment_info(var).description


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_list_all(self):
        assert list_environment_variables() == list(EnvVar)

    @pytest.mark.unit
    def test_filter_by_category(self):
        engine = list_environment_variables("engine")
        assert EnvVar.PATTERN_EXCLUSIVE_MAPPING in engine
        assert EnvVar.MCP_PORT not in engine

    @pytest.mark.unit
    def test_unknown_category_is_empty(self):
        assert list_environment_variables("corpus") == []


class TestConvenienceFunctions:
    """Tests for convenience accessors."""

    @pytest.mark.unit
    def test_artboard_size(self, monkeypatch):
        monkeypatch.setenv("PATTERN_ARTBOARD_WIDTH", "1280")
        monkeypatch.delenv("PATTERN_ARTBOARD_HEIGHT", raising=False)
        assert get_artboard_size() == (1280, 1024)

    @pytest.mark.unit
    def test_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert get_log_level() == "DEBUG"
