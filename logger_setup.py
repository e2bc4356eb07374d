"""
logger_setup.py

Application-wide logging for tabsel. Console output goes to stderr so it
never mixes with the selection written to stdout; a rotating file under
the config directory keeps DEBUG detail for troubleshooting.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

import config_paths

LOG_ENV_VAR = "TABSEL_LOG"


def resolve_level(level, env=None) -> int:
    env = os.environ if env is None else env
    override = env.get(LOG_ENV_VAR)
    name = override if override else level
    if isinstance(name, int):
        return name
    value = logging.getLevelName(str(name or "WARNING").strip().upper())
    return value if isinstance(value, int) else logging.WARNING


class ConfigureLogger:
    """
    Configures the root logger with a console handler on stderr and a
    rotating file handler. Handlers installed by a previous instance are
    replaced, so configuring twice does not duplicate output.
    """

    def __init__(
        self,
        console_level="WARNING",
        log_dir: str | None = None,
        log_name: str = "tabsel",
        file_level: int = logging.DEBUG,
        max_bytes: int = 1_000_000,
        backup_count: int = 3,
    ):
        self.logger = logging.getLogger()
        self.logger.setLevel(logging.DEBUG)
        for handler in list(self.logger.handlers):
            if getattr(handler, "_tabsel_handler", False):
                self.logger.removeHandler(handler)
                handler.close()

        self._setup_console_handler(resolve_level(console_level))

        log_dir = log_dir if log_dir is not None else config_paths.LOG_DIR
        try:
            os.makedirs(log_dir, exist_ok=True)
        except OSError as exc:
            self.logger.warning("file logging disabled: %s", exc)
            return
        log_file_path = os.path.join(log_dir, f"{log_name}.log")
        self._setup_file_handler(log_file_path, file_level, max_bytes, backup_count)

    def _setup_console_handler(self, level: int):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        console_handler._tabsel_handler = True
        self.logger.addHandler(console_handler)

    def _setup_file_handler(self, path: str, level: int, max_bytes: int, backup_count: int):
        try:
            file_handler = RotatingFileHandler(
                path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
            )
        except OSError as exc:
            self.logger.warning("file logging disabled: %s", exc)
            return
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        file_handler._tabsel_handler = True
        self.logger.addHandler(file_handler)
