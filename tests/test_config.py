"""Tests for stackrouter.config — separator configuration."""

import pytest

from stackrouter.config import DEFAULT_CONFIGURATION, Configuration, load_configuration
from stackrouter.errors import ConfigurationError


class TestConfiguration:
    def test_defaults(self) -> None:
        cfg = Configuration()

        assert cfg.block_separator == "~"
        assert cfg.param_separator == "="
        assert cfg == DEFAULT_CONFIGURATION

    def test_override(self) -> None:
        cfg = Configuration(block_separator="!", param_separator=",")

        assert cfg.block_separator == "!"
        assert cfg.param_separator == ","

    def test_frozen(self) -> None:
        cfg = Configuration()

        with pytest.raises(AttributeError):
            cfg.block_separator = "-"  # type: ignore[misc]

    @pytest.mark.parametrize("separator", ["-", "_", "'", ".", "!", "~", "*"])
    def test_safe_block_separators(self, separator: str) -> None:
        assert Configuration(block_separator=separator).block_separator == separator

    def test_block_separator_outside_safe_set(self) -> None:
        with pytest.raises(ConfigurationError, match="block_separator"):
            Configuration(block_separator="|")

    def test_block_separator_length(self) -> None:
        with pytest.raises(ConfigurationError, match="1 length"):
            Configuration(block_separator="~~")

    def test_param_separator_length(self) -> None:
        with pytest.raises(ConfigurationError, match="1 length"):
            Configuration(param_separator="")

    @pytest.mark.parametrize("separator", list(";/?:@&+$#"))
    def test_reserved_param_separators(self, separator: str) -> None:
        with pytest.raises(ConfigurationError, match="param_separator"):
            Configuration(param_separator=separator)

    def test_slash_param_separator_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            Configuration(param_separator="/")

    def test_hash_param_separator_rejected(self) -> None:
        """``#`` is part of the enforced reserved set."""
        with pytest.raises(ConfigurationError):
            Configuration(param_separator="#")

    def test_percent_param_separator_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="percent"):
            Configuration(param_separator="%")

    @pytest.mark.parametrize("separator", ["0", "2", "9", "a", "F"])
    def test_hex_digit_param_separator_rejected(self, separator: str) -> None:
        with pytest.raises(ConfigurationError, match="hex digit"):
            Configuration(param_separator=separator)

    def test_non_hex_letter_param_separator_allowed(self) -> None:
        assert Configuration(param_separator="g").param_separator == "g"

    def test_separators_must_differ(self) -> None:
        with pytest.raises(ConfigurationError, match="differ"):
            Configuration(block_separator="!", param_separator="!")

    def test_hashable(self) -> None:
        assert hash(Configuration()) == hash(DEFAULT_CONFIGURATION)


class TestLoadConfiguration:
    def test_none_gives_defaults(self) -> None:
        assert load_configuration() == DEFAULT_CONFIGURATION

    def test_partial_mapping(self) -> None:
        cfg = load_configuration({"block_separator": "."})

        assert cfg.block_separator == "."
        assert cfg.param_separator == "="

    def test_camel_case_keys(self) -> None:
        cfg = load_configuration({"blockSeparator": "-", "paramSeparator": ","})

        assert cfg == Configuration(block_separator="-", param_separator=",")

    def test_keyword_overrides_win(self) -> None:
        cfg = load_configuration({"param_separator": ","}, param_separator="^")
        assert cfg.param_separator == "^"

    def test_configuration_passes_through(self) -> None:
        cfg = Configuration(block_separator="*")
        assert load_configuration(cfg) is cfg

    def test_configuration_with_keyword_override(self) -> None:
        cfg = load_configuration(Configuration(block_separator="*"), param_separator=",")
        assert cfg == Configuration(block_separator="*", param_separator=",")

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown configuration key"):
            load_configuration({"separator": "~"})

    def test_invalid_value_fails_fast(self) -> None:
        with pytest.raises(ConfigurationError):
            load_configuration({"paramSeparator": "?"})
