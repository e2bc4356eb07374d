import json
import logging
import os

from table_model import InputFormat, OutputFormat, SelectionMode

logger = logging.getLogger(__name__)

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "tabsel")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LOG_DIR = CONFIG_DIR
LOG_PATH = os.path.join(LOG_DIR, "tabsel.log")

# default settings
INPUT_FORMAT_DEFAULT = InputFormat.CSV.value
HAS_HEADER_DEFAULT = True
SELECTION_MODES_DEFAULT = [SelectionMode.ROW.value]
FILTER_ENABLED_DEFAULT = True
OUTPUT_FORMAT_DEFAULT = OutputFormat.PLAIN.value
LOG_LEVEL_DEFAULT = "WARNING"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def default_config():
    return {
        "INPUT_FORMAT": INPUT_FORMAT_DEFAULT,
        "HAS_HEADER": HAS_HEADER_DEFAULT,
        "SELECTION_MODES": list(SELECTION_MODES_DEFAULT),
        "FILTER_ENABLED": FILTER_ENABLED_DEFAULT,
        "OUTPUT_FORMAT": OUTPUT_FORMAT_DEFAULT,
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
    }


def _section(data, name):
    value = data.get(name)
    return value if isinstance(value, dict) else {}


def _choice(value, allowed):
    if isinstance(value, str) and value.strip().lower() in allowed:
        return value.strip().lower()
    return None


def load_config():
    cfg = default_config()

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_JSON, exc)
        return cfg

    if not isinstance(data, dict):
        logger.warning("ignoring config %s: top level is not an object", CONFIG_JSON)
        return cfg

    input_cfg = _section(data, "input")
    fmt = _choice(input_cfg.get("format"), InputFormat.names())
    if fmt:
        cfg["INPUT_FORMAT"] = fmt
    elif "format" in input_cfg:
        logger.warning("config: invalid input.format %r", input_cfg.get("format"))
    if isinstance(input_cfg.get("has_header"), bool):
        cfg["HAS_HEADER"] = input_cfg["has_header"]

    selection_cfg = _section(data, "selection")
    modes = selection_cfg.get("modes")
    if isinstance(modes, list):
        valid = [_choice(m, SelectionMode.names()) for m in modes]
        valid = [m for m in valid if m]
        if valid:
            cfg["SELECTION_MODES"] = valid
        else:
            logger.warning("config: selection.modes has no valid entries")
    if isinstance(selection_cfg.get("filter"), bool):
        cfg["FILTER_ENABLED"] = selection_cfg["filter"]

    output_cfg = _section(data, "output")
    out_fmt = _choice(output_cfg.get("format"), OutputFormat.names())
    if out_fmt:
        cfg["OUTPUT_FORMAT"] = out_fmt
    elif "format" in output_cfg:
        logger.warning("config: invalid output.format %r", output_cfg.get("format"))

    level = data.get("log_level")
    if isinstance(level, str) and level.strip().upper() in _LOG_LEVELS:
        cfg["LOG_LEVEL"] = level.strip().upper()

    return cfg
