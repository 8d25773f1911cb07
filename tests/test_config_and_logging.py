"""Configuration loading, option defaults and structured logging."""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from engine_app.config import DEFAULT_SCORE_WEIGHTS, EngineConfig
from engine_app.logging_config import JsonFormatter, correlation_context, log_event, operation_context, redact_for_log
from engine_app.observability import instrument_operation
from models.options import GenerationOptions, StylePreference, validate_options


def test_default_config_is_valid():
    config = EngineConfig().validate()
    assert config.weights == DEFAULT_SCORE_WEIGHTS
    assert sum(config.weights.values()) == pytest.approx(1.0)
    assert config.recency_window_seconds == 7 * 24 * 60 * 60


@pytest.mark.parametrize(
    "overrides",
    [
        {"weights": {**DEFAULT_SCORE_WEIGHTS, "variety": -0.1}},
        {"weights": {"sparkle": 1.0}},
        {"score_floor": 0.9, "score_ceiling": 0.8},
        {"recency_window_days": 0},
        {"max_candidates": 0},
    ],
)
def test_invalid_config_is_rejected(overrides):
    with pytest.raises(ValueError):
        EngineConfig(**overrides).validate()


def test_from_env_reads_environment_variables(monkeypatch):
    monkeypatch.delenv("OUTFIT_CONFIG_PATH", raising=False)
    monkeypatch.delenv("OUTFIT_ENV", raising=False)
    monkeypatch.setenv("OUTFIT_MAX_CANDIDATES", "50")
    monkeypatch.setenv("OUTFIT_SCORE_FLOOR", "0.5")
    monkeypatch.setenv("OUTFIT_WEIGHT_VARIETY", "0.1")

    config = EngineConfig.from_env()
    assert config.max_candidates == 50
    assert config.score_floor == 0.5
    assert config.weights["variety"] == 0.1
    assert config.weights["color_harmony"] == DEFAULT_SCORE_WEIGHTS["color_harmony"]


def test_from_env_reads_environment_file(tmp_path, monkeypatch):
    env_dir = tmp_path / "environments"
    env_dir.mkdir()
    (env_dir / "staging.yaml").write_text(
        "# staging tuning\nmax_depth: 12\ncurve_steepness: \"3.5\"\nweight_user_preference: 0.1\n"
    )
    monkeypatch.delenv("OUTFIT_CONFIG_PATH", raising=False)
    monkeypatch.setenv("OUTFIT_ENV", "staging")
    monkeypatch.setenv("OUTFIT_CONFIG_DIR", str(env_dir))
    monkeypatch.setenv("OUTFIT_MAX_DEPTH", "9")

    config = EngineConfig.from_env()
    assert config.environment == "staging"
    assert config.max_depth == 9
    assert config.curve_steepness == 3.5
    assert config.weights["user_preference"] == 0.1


def test_options_defaults_scale_with_catalog_size():
    config = EngineConfig()
    assert GenerationOptions().resolve_defaults(4, config).max_results == 5
    assert GenerationOptions().resolve_defaults(40, config).max_results == 10
    assert GenerationOptions().resolve_defaults(400, config).max_results == 20
    resolved = GenerationOptions(max_results=3).resolve_defaults(400, config)
    assert resolved.max_results == 3
    assert resolved.min_score == 0.1
    assert resolved.style_preference == StylePreference()


def test_options_normalise_values():
    options = validate_options(
        {"season": "Autumn", "occasion": "Work", "preferred_colors": ["Navy", "#FF0000"], "excluded_items": [1, "b"]}
    )
    assert options.season == "fall"
    assert options.occasion == "work"
    assert options.preferred_colors == ["#000080", "#ff0000"]
    assert options.excluded_items == ["1", "b"]
    assert validate_options(None) == GenerationOptions()


def test_json_formatter_emits_structured_payload():
    record = logging.LogRecord("outfit", logging.INFO, __file__, 1, "generation_completed", None, None)
    record.event = "generation_completed"
    record.correlation_id = "abc123"
    record.contact = "someone@example.com"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["event"] == "generation_completed"
    assert payload["correlation_id"] == "abc123"
    assert payload["level"] == "INFO"
    assert payload["operation"] is None
    assert payload["data"] == {"contact": "[redacted-email]"}


def test_redact_for_log_masks_sensitive_keys():
    scrubbed = redact_for_log({"brand": "Acme", "price": 10, "nested": {"user_id": "u1", "count": 2}})
    assert scrubbed == {"brand": "[redacted]", "price": "[redacted]", "nested": {"user_id": "[redacted]", "count": 2}}


def test_log_event_attaches_correlation_id(caplog):
    logger = logging.getLogger("tests.outfit")
    with caplog.at_level(logging.INFO, logger="tests.outfit"):
        with correlation_context("corr-1"):
            log_event(logger, logging.INFO, "generation_started", catalog_size=3)
    record = caplog.records[-1]
    assert record.event == "generation_started"
    assert record.correlation_id == "corr-1"
    assert record.operation is None
    assert record.data == {"catalog_size": 3}


def test_instrument_operation_logs_and_reraises(caplog):
    @instrument_operation("tests.explode")
    def explode():
        raise RuntimeError("boom")

    @instrument_operation("tests.count")
    def count():
        return [1, 2, 3]

    with caplog.at_level(logging.INFO):
        assert count() == [1, 2, 3]
        with pytest.raises(RuntimeError):
            explode()

    events = [(getattr(record, "event", None), getattr(record, "operation", None)) for record in caplog.records]
    assert ("operation_completed", "tests.count") in events
    assert ("operation_failed", "tests.explode") in events
    completed = next(record for record in caplog.records if getattr(record, "operation", None) == "tests.count")
    assert completed.data["result_count"] == 3


def test_operation_context_tags_nested_events(caplog):
    logger = logging.getLogger("tests.outfit")
    with caplog.at_level(logging.INFO, logger="tests.outfit"):
        with correlation_context("outer"):
            with operation_context("engine.generate") as scoped_id:
                log_event(logger, logging.INFO, "generation_started")
    record = caplog.records[-1]
    assert scoped_id == "outer"
    assert record.operation == "engine.generate"
    assert record.correlation_id == "outer"
