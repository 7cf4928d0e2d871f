"""Tests for configuration models and YAML loading."""

import logging

import pytest
from pydantic import ValidationError

from resultpager.core.config import (
    AppConfig,
    ConfigError,
    MappingMode,
    ProgressConfig,
    ResultConfig,
    default_config_path,
    load_app_config,
    validate_app_config_file,
)
from resultpager.core.logging import JSONFormatter, get_contextual_logger, get_logger


class TestModels:
    def test_defaults(self):
        config = ResultConfig()
        assert config.page_size == 100
        assert config.mappings["page_next"].key == "L"
        assert config.mappings["yank_selection_csv"].mode == MappingMode.VISUAL
        assert len(config.mappings) == 8

    def test_partial_mappings_merge(self):
        config = ResultConfig.model_validate({"mappings": {"page_prev": {"key": "p"}}})
        assert config.mappings["page_prev"].key == "p"
        assert config.mappings["page_next"].key == "L"

    def test_page_size_positive(self):
        with pytest.raises(ValidationError):
            ResultConfig(page_size=0)

    def test_unknown_spinner(self):
        with pytest.raises(ValidationError):
            ProgressConfig(spinner="definitely-not-a-spinner")


class TestLoader:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_app_config(tmp_path / "app.yaml") == AppConfig()

    def test_load_with_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PAGER_SIZE", "25")
        path = tmp_path / "app.yaml"
        path.write_text(
            "result:\n"
            "  page_size: ${PAGER_SIZE}\n"
            "  progress:\n"
            "    text_prefix: ${PREFIX:-Running}\n"
            "logging:\n"
            "  level: debug\n",
            encoding="utf-8",
        )
        config = load_app_config(path)
        assert config.result.page_size == 25
        assert config.result.progress.text_prefix == "Running"
        assert config.logging.level == "DEBUG"

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "app.yaml"
        path.write_text("result: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError) as exc:
            load_app_config(path)
        assert exc.value.path == path
        assert exc.value.details

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "app.yaml"
        path.write_text("result:\n  page_size: -1\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_app_config(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "app.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_app_config(path)

    def test_validate_file(self, tmp_path):
        path = tmp_path / "app.yaml"
        path.write_text("result:\n  page_size: 0\n", encoding="utf-8")
        errors = validate_app_config_file(path)
        assert len(errors) == 1
        assert errors[0].startswith("result.page_size")
        assert validate_app_config_file(tmp_path / "missing.yaml") == [f"File not found: {tmp_path / 'missing.yaml'}"]


class TestLogging:
    def test_namespaced_loggers(self):
        assert get_logger().name == "resultpager"
        assert get_logger("result").name == "resultpager.result"

    def test_json_formatter_includes_call_context(self):
        record = logging.LogRecord("resultpager.result", logging.INFO, __file__, 1, "rendered %d", (3,), None)
        record.call_id = "c1"
        record.page = 2
        line = JSONFormatter().format(record)
        assert '"message":"rendered 3"' in line
        assert '"call_id":"c1"' in line
        assert '"page":2' in line

    def test_contextual_logger_adds_call(self, caplog):
        log = get_contextual_logger("result", call_id="c9")
        with caplog.at_level(logging.INFO, logger="resultpager"):
            log.info("hello")
        assert caplog.records[-1].call_id == "c9"


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("result:\n  page_size: 7\n", encoding="utf-8")
    monkeypatch.setenv("RESULTPAGER_CONFIG", str(path))
    assert default_config_path() == path
    assert load_app_config().result.page_size == 7
