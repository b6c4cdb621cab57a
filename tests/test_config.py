"""
Tests for threshold configuration and TOML loading.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from varstring import StringValue, Kind, ConfigError, TRACE_OPS, get_trace_level
from varstring import config as config_module
from varstring.config import (
    Config, Thresholds, load_config, config_from_mapping, config_from_environment,
    INLINE_CAPACITY_LIMIT, CONFIG_ENV_VAR, TRACE_ENV_VAR,
)


class TestThresholds:
    """Tests for the dispatch rule and its validation"""

    def test_defaults(self):
        thresholds = Thresholds()
        assert thresholds.top == 23
        assert thresholds.bottom == 255

    def test_select_boundaries(self):
        thresholds = Thresholds(top=16, bottom=255)
        assert thresholds.select(0) is Kind.INLINE
        assert thresholds.select(16) is Kind.INLINE
        assert thresholds.select(17) is Kind.EXCLUSIVE
        assert thresholds.select(255) is Kind.EXCLUSIVE
        assert thresholds.select(256) is Kind.SHARED

    def test_top_above_inline_limit(self):
        with pytest.raises(ConfigError):
            Thresholds(top=INLINE_CAPACITY_LIMIT + 1, bottom=300)

    def test_negative_top(self):
        with pytest.raises(ConfigError):
            Thresholds(top=-1)

    def test_bottom_not_above_top(self):
        with pytest.raises(ConfigError):
            Thresholds(top=10, bottom=10)

    @pytest.mark.parametrize("bad", ["16", 1.5, True])
    def test_non_integer(self, bad):
        with pytest.raises(ConfigError):
            Thresholds(top=bad)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            Thresholds().top = 5


class TestLoadConfig:
    """Tests for TOML parsing"""

    def test_full_file(self, tmp_path):
        path = tmp_path / "varstring.toml"
        path.write_text(
            '[thresholds]\n'
            'top = 16\n'
            'bottom = 128\n'
            '\n'
            '[varstring]\n'
            'encoding = "latin-1"\n'
            'trace_level = 2\n'
        )
        config = load_config(str(path))
        assert config.thresholds == Thresholds(top=16, bottom=128)
        assert config.encoding == "latin-1"
        assert config.trace_level == 2

    def test_missing_keys_take_defaults(self, tmp_path):
        path = tmp_path / "varstring.toml"
        path.write_text('[thresholds]\nbottom = 1000\n')
        config = load_config(str(path))
        assert config.thresholds == Thresholds(top=23, bottom=1000)
        assert config.encoding == "utf-8"
        assert config.trace_level == 0

    def test_empty_file(self, tmp_path):
        path = tmp_path / "varstring.toml"
        path.write_text('')
        assert load_config(str(path)) == Config()

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "varstring.toml"
        path.write_text('[thresholds\ntop = ')
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(str(tmp_path / "nope.toml"))

    def test_unknown_threshold_key(self):
        with pytest.raises(ConfigError, match="middle"):
            config_from_mapping({'thresholds': {'middle': 3}})

    def test_thresholds_must_be_table(self):
        with pytest.raises(ConfigError):
            config_from_mapping({'thresholds': 5})

    def test_unknown_encoding(self):
        with pytest.raises(ConfigError, match="encoding"):
            config_from_mapping({'varstring': {'encoding': 'no-such-codec'}})

    def test_negative_trace_level(self):
        with pytest.raises(ConfigError):
            config_from_mapping({'varstring': {'trace_level': -1}})


class TestEnvironment:
    """Tests for VARSTRING_CONFIG / VARSTRING_TRACE"""

    def test_unset_gives_defaults(self):
        assert config_from_environment({}) == Config()

    def test_config_path(self, tmp_path):
        path = tmp_path / "vs.toml"
        path.write_text('[thresholds]\ntop = 8\nbottom = 64\n')
        config = config_from_environment({CONFIG_ENV_VAR: str(path)})
        assert config.thresholds == Thresholds(top=8, bottom=64)

    def test_trace_override(self, tmp_path):
        path = tmp_path / "vs.toml"
        path.write_text('[varstring]\ntrace_level = 1\n')
        config = config_from_environment({CONFIG_ENV_VAR: str(path), TRACE_ENV_VAR: "2"})
        assert config.trace_level == 2

    def test_bad_trace_value(self):
        with pytest.raises(ConfigError):
            config_from_environment({TRACE_ENV_VAR: "loud"})


class TestConfigure:
    """Tests for installing the process configuration at startup"""

    def test_replaces_active(self, unlocked_config):
        custom = Config(thresholds=Thresholds(top=8, bottom=64), encoding="latin-1")
        unlocked_config(custom)
        assert config_module.ACTIVE is custom
        assert StringValue("x" * 9).kind is Kind.EXCLUSIVE
        assert bytes(StringValue("é")) == b"\xe9"

    def test_applies_trace_level(self, unlocked_config):
        unlocked_config(Config(trace_level=TRACE_OPS))
        assert get_trace_level() == TRACE_OPS

    def test_locked_after_first_value(self, unlocked_config):
        StringValue("abc")
        with pytest.raises(ConfigError, match="fixed"):
            unlocked_config(Config(thresholds=Thresholds(top=2, bottom=4)))
        assert StringValue("x" * 10).kind is Kind.INLINE

    def test_empty_value_does_not_lock(self, unlocked_config):
        StringValue()
        unlocked_config(Config(thresholds=Thresholds(top=2, bottom=4)))
        assert StringValue("x" * 10).kind is Kind.SHARED
