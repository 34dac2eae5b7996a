"""
Tests for Configuration
=======================
GeneratorConfig validation, format parsing and the settings loader.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from genpass.charset import CharacterSet, ALPHANUMERIC_CHARS
from genpass.config import (
    GeneratorConfig,
    OutputFormat,
    Limits,
    parse_format,
    load_limits,
    default_workers,
    HYPHENATED_LENGTH,
)
from genpass.errors import InvalidConfig, EmptyCharset, CharsetTooLarge
from genpass.settings import get_setting


class TestParseFormat:
    """Tests for parse_format()."""

    @pytest.mark.parametrize("raw,expected", [
        ("hyphenated", OutputFormat.HYPHENATED),
        ("h", OutputFormat.HYPHENATED),
        ("HYPHENATED", OutputFormat.HYPHENATED),
        ("compact", OutputFormat.COMPACT),
        ("c", OutputFormat.COMPACT),
        ("Compact", OutputFormat.COMPACT),
        (OutputFormat.COMPACT, OutputFormat.COMPACT),
    ])
    def test_aliases(self, raw, expected):
        assert parse_format(raw) is expected

    def test_invalid(self):
        with pytest.raises(InvalidConfig):
            parse_format("invalid")


class TestDefaults:
    """Defaults come from app.yaml."""

    def test_defaults(self):
        config = GeneratorConfig()
        assert parse_format(config.format) is OutputFormat.HYPHENATED
        assert config.length == 15
        assert config.count == 1
        assert config.charset == ALPHANUMERIC_CHARS
        assert config.parallel is True
        assert config.workers == 0
        assert config.timeout == 30.0

    def test_limits(self):
        assert load_limits() == Limits()

    def test_hyphenated_length(self):
        assert HYPHENATED_LENGTH == 20
        assert GeneratorConfig(format="h").output_length == 20
        assert GeneratorConfig(format="c", length=9).output_length == 9

    def test_missing_generator_settings(self, custom_settings):
        """A settings file without generator defaults is an error."""
        custom_settings("limits:\n  max_batch_size: 5\n")
        with pytest.raises(ValueError, match="generator settings missing"):
            GeneratorConfig()

    def test_explicit_fields_need_no_settings(self, custom_settings):
        custom_settings("{}\n")
        config = GeneratorConfig(format="c", length=5, count=1, charset="ab",
                                 parallel=False, workers=1, timeout=0)
        assert config.validate().length == 5


class TestValidate:
    """Tests for GeneratorConfig.validate()."""

    def test_normalizes(self):
        config = GeneratorConfig(format="c", length=10, charset="aab").validate()
        assert config.format is OutputFormat.COMPACT
        assert isinstance(config.charset, CharacterSet)
        assert str(config.charset) == "ab"

    def test_returns_copy(self):
        original = GeneratorConfig(format="c", workers=0)
        validated = original.validate()
        assert original.format == "c"
        assert original.workers == 0
        assert validated is not original

    def test_idempotent(self):
        once = GeneratorConfig(format="c", length=10).validate()
        assert once.validate() == once

    @pytest.mark.parametrize("length", [0, -1, 1025])
    def test_invalid_length(self, length):
        with pytest.raises(InvalidConfig, match="invalid length"):
            GeneratorConfig(format="c", length=length).validate()

    @pytest.mark.parametrize("count", [0, -3, 1001])
    def test_invalid_count(self, count):
        with pytest.raises(InvalidConfig, match="invalid count"):
            GeneratorConfig(count=count).validate()

    def test_boundaries_accepted(self):
        GeneratorConfig(format="c", length=1, count=1).validate()
        GeneratorConfig(format="c", length=1024, count=1000).validate()

    def test_empty_charset(self):
        with pytest.raises(EmptyCharset):
            GeneratorConfig(charset="").validate()

    def test_charset_too_large(self):
        raw = "".join(chr(0x100 + i) for i in range(300))
        with pytest.raises(CharsetTooLarge):
            GeneratorConfig(charset=raw).validate()

    def test_negative_timeout(self):
        with pytest.raises(InvalidConfig, match="invalid timeout"):
            GeneratorConfig(timeout=-1).validate()

    def test_all_errors_reported(self):
        with pytest.raises(InvalidConfig) as exc_info:
            GeneratorConfig(length=0, count=0).validate()
        message = str(exc_info.value)
        assert "invalid length" in message
        assert "invalid count" in message

    def test_invalid_format(self):
        with pytest.raises(InvalidConfig):
            GeneratorConfig(format="bogus").validate()

    @pytest.mark.parametrize("workers", [0, -4])
    def test_default_workers(self, workers):
        config = GeneratorConfig(workers=workers).validate()
        assert config.workers == default_workers()
        assert 1 <= config.workers <= 32

    def test_workers_capped(self):
        assert GeneratorConfig(workers=100).validate().workers == 32

    def test_workers_kept(self):
        assert GeneratorConfig(workers=3).validate().workers == 3


class TestSettings:
    """Tests for the settings loader."""

    def test_dotted_path(self):
        assert get_setting("limits.max_batch_size") == 1000
        assert get_setting("generator.type") == "hyphenated"

    def test_missing_returns_default(self):
        assert get_setting("limits.nope", 42) == 42
        assert get_setting("generator.length.deeper") is None

    def test_env_override(self, custom_settings):
        custom_settings("limits:\n  max_batch_size: 5\n")
        assert get_setting("limits.max_batch_size") == 5
        assert load_limits().max_batch_size == 5
        assert load_limits().max_string_length == 1024

    def test_override_changes_validation(self, custom_settings):
        custom_settings(
            "generator:\n"
            "  type: compact\n"
            "  length: 8\n"
            "  count: 6\n"
            "  charset: abc\n"
            "  parallel: false\n"
            "  workers: 1\n"
            "  timeout: 0\n"
            "limits:\n"
            "  max_batch_size: 5\n"
        )
        with pytest.raises(InvalidConfig, match="invalid count"):
            GeneratorConfig().validate()

    def test_missing_file(self, custom_settings, tmp_path, monkeypatch):
        from genpass.settings import load_app_config, CONFIG_ENV_VAR
        custom_settings("{}\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.yaml"))
        load_app_config.cache_clear()
        with pytest.raises(FileNotFoundError):
            get_setting("limits")
