import logging

import pytest

from slidegen.agents.exceptions import (
    GenerationCancelledError,
    GenerationError,
    InvalidConfigError,
    ModelError,
    ModelErrorReason,
    get_retry_delay,
    is_retryable,
)
from slidegen.config.logging_config import get_logging_config, setup_logging, should_log_progress
from slidegen.config.settings import Config, ModelConfig, PipelineConfig, get_config


def test_config_reads_environment(monkeypatch):
    monkeypatch.setenv("SLIDEGEN_MODEL", "gpt-4o-mini")
    monkeypatch.setenv("SLIDEGEN_TOP_K", "40")
    monkeypatch.setenv("SLIDEGEN_ASSETS_PER_SLIDE", "3")

    config = Config()

    assert config.model.model == "gpt-4o-mini"
    assert config.model.top_k == 40
    assert config.pipeline.assets_per_slide == 3


def test_to_dict_masks_secrets():
    config = Config(
        model=ModelConfig(api_key="sk-secret-1234"),
        pipeline=PipelineConfig(pexels_api_key="pexels-9876"),
    )
    data = config.to_dict()
    assert data["model"]["api_key"] == "***1234"
    assert data["pipeline"]["pexels_api_key"] == "***9876"


@pytest.mark.parametrize("config", [
    Config(model=ModelConfig(temperature=3)),
    Config(model=ModelConfig(structured_mode="xml")),
    Config(pipeline=PipelineConfig(research_depth="deep")),
    Config(pipeline=PipelineConfig(max_parallel_assets=0)),
])
def test_validate_rejects_bad_values(config):
    with pytest.raises(InvalidConfigError):
        config.validate()


def test_get_config_is_cached():
    assert get_config() is get_config()


def test_retry_helpers():
    timeout = ModelError(ModelErrorReason.TIMEOUT)
    limited = ModelError("rate-limited")

    assert is_retryable(timeout)
    assert not is_retryable(ModelError(ModelErrorReason.UNKNOWN))
    assert not is_retryable(GenerationCancelledError("stop"))
    assert not is_retryable(ValueError("x"))
    assert get_retry_delay(timeout, 2, base_delay=1.0, multiplier=2.0) == 4.0
    assert get_retry_delay(limited, 0, base_delay=1.0) == 2.0


def test_generation_error_exposes_stage_and_cancellation():
    cancelled = GenerationError("Topic", GenerationCancelledError("stop"), 1.23456)
    assert cancelled.cancelled
    assert cancelled.stage is None
    assert cancelled.context == {"topic": "Topic", "elapsed_time": 1.235}
    assert "caused by: GenerationCancelledError" in str(cancelled)


def test_logging_profiles(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.delenv("DEBUG", raising=False)
    production = get_logging_config()
    assert production["environment"] == "production"
    assert should_log_progress(50, production)
    assert not should_log_progress(75, production)

    monkeypatch.setenv("DEBUG", "true")
    debug = get_logging_config()
    assert debug["default_level"] == "DEBUG"
    assert should_log_progress(75, debug)


def test_setup_logging_keeps_existing_handlers(monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.delenv("ENV", raising=False)
    root = logging.getLogger()
    previous_level = root.level
    marker = logging.NullHandler()
    root.addHandler(marker)
    try:
        config = setup_logging("debug")
        assert marker in root.handlers
        assert root.level == logging.DEBUG
        assert config["default_level"] == "DEBUG"

        setup_logging("not-a-level")
        assert root.level == logging.INFO
    finally:
        root.removeHandler(marker)
        root.setLevel(previous_level)
