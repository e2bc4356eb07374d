import json
import tempfile
from pathlib import Path

import config_paths


def _load_with(cfg_dir: Path):
    orig_dir = config_paths.CONFIG_DIR
    orig_json = config_paths.CONFIG_JSON
    try:
        config_paths.CONFIG_DIR = str(cfg_dir)
        config_paths.CONFIG_JSON = str(cfg_dir / "config.json")
        return config_paths.load_config()
    finally:
        config_paths.CONFIG_DIR = orig_dir
        config_paths.CONFIG_JSON = orig_json


def test_load_config_defaults_without_json():
    with tempfile.TemporaryDirectory() as tmp:
        cfg = _load_with(Path(tmp) / "tabsel")
        assert cfg == config_paths.default_config()
        assert cfg["SELECTION_MODES"] == ["row"]
        assert cfg["FILTER_ENABLED"] is True


def test_load_config_reads_json_overrides():
    with tempfile.TemporaryDirectory() as tmp:
        cfg_dir = Path(tmp) / "tabsel"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        (cfg_dir / "config.json").write_text(
            json.dumps(
                {
                    "input": {"format": "JSON", "has_header": False},
                    "selection": {"modes": ["cell", "row"], "filter": False},
                    "output": {"format": "csv"},
                    "log_level": "debug",
                }
            )
        )
        cfg = _load_with(cfg_dir)
        assert cfg["INPUT_FORMAT"] == "json"
        assert cfg["HAS_HEADER"] is False
        assert cfg["SELECTION_MODES"] == ["cell", "row"]
        assert cfg["FILTER_ENABLED"] is False
        assert cfg["OUTPUT_FORMAT"] == "csv"
        assert cfg["LOG_LEVEL"] == "DEBUG"


def test_load_config_ignores_invalid_fields():
    with tempfile.TemporaryDirectory() as tmp:
        cfg_dir = Path(tmp) / "tabsel"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        (cfg_dir / "config.json").write_text(
            json.dumps(
                {
                    "input": {"format": "xml", "has_header": "yes"},
                    "selection": {"modes": ["diagonal", "column"]},
                    "output": "json",
                }
            )
        )
        cfg = _load_with(cfg_dir)
        assert cfg["INPUT_FORMAT"] == "csv"
        assert cfg["HAS_HEADER"] is True
        assert cfg["SELECTION_MODES"] == ["column"]
        assert cfg["OUTPUT_FORMAT"] == "plain"


def test_load_config_survives_broken_json():
    with tempfile.TemporaryDirectory() as tmp:
        cfg_dir = Path(tmp) / "tabsel"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        (cfg_dir / "config.json").write_text("{not json")
        assert _load_with(cfg_dir) == config_paths.default_config()
