import io
import logging

import pytest

from config import ConfigurationManager, get_config
from src.utils.logger import ROOT_LOGGER_NAME, get_logger, setup_logger


def test_dotted_lookup_and_defaults():
    assert get_config("aggregation.max_candidates") == 8
    assert get_config("llm.retry.max_attempts") == 3
    assert get_config("missing.key", "fallback") == "fallback"
    assert get_config("aggregation.max_candidates.deeper", 1) == 1


def test_relative_paths_are_resolved():
    output_dir = get_config("paths.output_dir")
    assert output_dir.endswith("outputs")
    assert output_dir != "outputs"


def test_custom_configuration_file(tmp_path):
    settings = tmp_path / "settings.yaml"
    settings.write_text("aggregation:\n  max_candidates: 3\n", encoding="utf-8")

    ConfigurationManager(str(settings))

    assert get_config("aggregation.max_candidates") == 3
    # Keys missing from the file fall back to in-code defaults
    assert get_config("aggregation.tolerance", 0.01) == 0.01


def test_environment_variable_selects_file(tmp_path, monkeypatch):
    settings = tmp_path / "env.yaml"
    settings.write_text("extraction:\n  default_currency: INR\n", encoding="utf-8")
    monkeypatch.setenv("AMOUNT_DETECTION_CONFIG", str(settings))

    assert get_config("extraction.default_currency") == "INR"


def test_missing_configuration_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigurationManager(str(tmp_path / "nope.yaml"))


def test_module_loggers_live_under_the_project_logger():
    assert get_logger("src.pipeline").name == f"{ROOT_LOGGER_NAME}.src.pipeline"
    assert get_logger(ROOT_LOGGER_NAME).name == ROOT_LOGGER_NAME


def test_setup_logger_writes_to_given_stream():
    stream = io.StringIO()
    setup_logger(level="INFO", colorize=False, stream=stream)

    get_logger("tests").info("hello")
    get_logger("tests").debug("hidden")

    output = stream.getvalue()
    assert "hello" in output
    assert "hidden" not in output
    assert logging.getLogger(ROOT_LOGGER_NAME).propagate is False
