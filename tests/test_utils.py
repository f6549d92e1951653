import json
import logging
import logging.handlers

import pytest

from utils import DEFAULT_CONFIG, load_config, merge_config, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_load_config_fills_missing_keys(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"simulation_parameters": {"density": 120}, "run_control": {"fps": 30}}))

    config = load_config(str(path))

    assert config["simulation_parameters"]["density"] == 120
    assert config["simulation_parameters"]["base_hue"] == 180
    assert config["run_control"]["fps"] == 30
    assert config["run_control"]["log_throttle_steps"] == DEFAULT_CONFIG["run_control"]["log_throttle_steps"]
    assert config["visualization"] == DEFAULT_CONFIG["visualization"]


def test_load_config_reraises_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "absent.json"))


def test_load_config_reraises_bad_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")

    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_load_config_rejects_non_objects(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]")

    with pytest.raises(ValueError):
        load_config(str(path))


def test_merge_config_does_not_mutate_defaults():
    merged = merge_config(DEFAULT_CONFIG, {"logging": {"level": "DEBUG"}})

    assert merged["logging"]["level"] == "DEBUG"
    assert DEFAULT_CONFIG["logging"]["level"] == "INFO"


def test_setup_logging_adds_rotating_file_handler(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "run.log"

    setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})

    assert restore_root_logger.level == logging.DEBUG
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in restore_root_logger.handlers)
    assert log_file.exists()


def test_setup_logging_without_file(restore_root_logger):
    setup_logging({"logging": {"level": "WARNING", "log_file": None}})

    assert len(restore_root_logger.handlers) == 1
    assert not isinstance(restore_root_logger.handlers[0], logging.FileHandler)
