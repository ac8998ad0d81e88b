# =============================================================================
# test_config.py - Configuration Tests
# =============================================================================

import logging

import pytest
from r16asm.config import AssemblerConfig


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("R16ASM_MAX_LABELS", "R16ASM_LOG_LEVEL", "R16ASM_WARN_OVERLAP"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDefaults:

    def test_defaults(self):
        config = AssemblerConfig()
        assert config.max_labels == 512
        assert config.log_level == "WARNING"
        assert config.warn_on_overlap is True

    def test_logging_level(self):
        assert AssemblerConfig().logging_level() == logging.WARNING
        assert AssemblerConfig(log_level="debug").logging_level() == logging.DEBUG

    def test_unknown_logging_level(self):
        with pytest.raises(ValueError):
            AssemblerConfig(log_level="LOUD").logging_level()


class TestFromEnv:

    def test_no_variables(self, clean_env):
        assert AssemblerConfig.from_env() == AssemblerConfig()

    def test_all_variables(self, clean_env):
        clean_env.setenv("R16ASM_MAX_LABELS", "64")
        clean_env.setenv("R16ASM_LOG_LEVEL", "info")
        clean_env.setenv("R16ASM_WARN_OVERLAP", "off")
        config = AssemblerConfig.from_env()
        assert config.max_labels == 64
        assert config.log_level == "INFO"
        assert config.warn_on_overlap is False

    @pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
    def test_true_values(self, clean_env, value):
        clean_env.setenv("R16ASM_WARN_OVERLAP", value)
        assert AssemblerConfig.from_env().warn_on_overlap is True

    @pytest.mark.parametrize("value", ["0", "0x10", "-3"])
    def test_bad_max_labels(self, clean_env, value):
        clean_env.setenv("R16ASM_MAX_LABELS", value)
        with pytest.raises(ValueError):
            AssemblerConfig.from_env()

    def test_bad_boolean(self, clean_env):
        clean_env.setenv("R16ASM_WARN_OVERLAP", "maybe")
        with pytest.raises(ValueError, match="boolean"):
            AssemblerConfig.from_env()

    def test_bad_log_level(self, clean_env):
        clean_env.setenv("R16ASM_LOG_LEVEL", "LOUD")
        with pytest.raises(ValueError, match="unknown log level"):
            AssemblerConfig.from_env()
