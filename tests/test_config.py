"""Tests for configuration classes."""

import pytest
from pydantic import ValidationError

from receipt_scanner.core.config import ParsingConfig, ScanConfig


class TestParsingConfig:
    """Tests for ParsingConfig class."""

    def test_default_values(self) -> None:
        """Test default parsing config values."""
        config = ParsingConfig()

        assert config.enable_lenient_parse is True
        assert config.enable_regex_fallback is True
        assert config.error_context_chars == 20
        assert config.log_preview_chars == 100

    def test_negative_sizes_rejected(self) -> None:
        """Test that character counts cannot be negative."""
        with pytest.raises(ValidationError):
            ParsingConfig(error_context_chars=-1)

        with pytest.raises(ValidationError):
            ParsingConfig(log_preview_chars=-5)


class TestScanConfig:
    """Tests for ScanConfig class."""

    def test_default_values(self) -> None:
        """Test default scan config values."""
        config = ScanConfig()

        assert config.temperature == 0.0
        assert config.max_tokens is None
        assert config.max_retries == 3
        assert config.use_cache is True
        assert config.prompt is None
        assert config.additional_context is None
        assert config.parsing == ParsingConfig()

    def test_custom_values(self) -> None:
        """Test scan config with custom values."""
        config = ScanConfig(
            temperature=0.2,
            max_retries=5,
            prompt="Read the receipt",
            parsing=ParsingConfig(enable_regex_fallback=False),
        )

        assert config.temperature == 0.2
        assert config.max_retries == 5
        assert config.prompt == "Read the receipt"
        assert config.parsing.enable_regex_fallback is False

    def test_parsing_from_dict(self) -> None:
        """Test that nested parsing settings validate from plain data."""
        config = ScanConfig.model_validate({"parsing": {"error_context_chars": 5}})

        assert config.parsing.error_context_chars == 5
        assert config.parsing.enable_lenient_parse is True

    def test_temperature_validation(self) -> None:
        """Test temperature must be between 0 and 2."""
        with pytest.raises(ValidationError):
            ScanConfig(temperature=2.5)

        with pytest.raises(ValidationError):
            ScanConfig(temperature=-0.1)

    def test_max_retries_validation(self) -> None:
        """Test at least one model call is attempted."""
        with pytest.raises(ValidationError):
            ScanConfig(max_retries=0)

    def test_parsing_configs_are_independent(self) -> None:
        """Test that each scan config gets its own parsing config."""
        first = ScanConfig()
        second = ScanConfig()

        assert first.parsing is not second.parsing
