# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging configuration for pypos readers and interpolators"""

import logging
import sys
from enum import Enum
from typing import Optional

ROOT_LOGGER = "pypos"


class LogLevel(Enum):
    """Log levels, with TRACE below DEBUG for per-chunk decode messages"""
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


TRACE = LogLevel.TRACE.value
logging.addLevelName(TRACE, "TRACE")


def _level(level: str) -> int:
    try:
        return LogLevel[level.upper()].value
    except KeyError:
        raise ValueError(f"Unknown log level: {level!r}") from None


class ColoredFormatter(logging.Formatter):
    """Formatter colouring the level name for terminal output"""

    COLORS = {
        'TRACE': '\033[36m',     # Cyan
        'DEBUG': '\033[34m',     # Blue
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.RESET)
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logger(name: str = ROOT_LOGGER,
                 level: str = "INFO",
                 log_file: Optional[str] = None,
                 console: bool = True) -> logging.Logger:
    """
    Setup logger with specified configuration

    Every pypos module logs under ``pypos.<module>``, so configuring the
    default ``pypos`` logger covers all readers and interpolators.

    Parameters:
    -----------
    name : str
        Logger name
    level : str
        Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file : Optional[str]
        Log file path (if None, no file logging)
    console : bool
        Enable console output

    Returns:
    --------
    logging.Logger
        Configured logger
    """
    numeric_level = _level(level)
    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    logger.handlers = []

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(ColoredFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        ))
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the pypos namespace"""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


class LogContext:
    """Context manager for temporary log level change"""

    def __init__(self, logger: logging.Logger, level: str):
        self.logger = logger
        self.new_level = _level(level)
        self.old_level = None

    def __enter__(self):
        self.old_level = self.logger.level
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.setLevel(self.old_level)


class LoggerConfig:
    """Logger configuration manager for module-specific log levels"""

    def __init__(self):
        self.module_levels = {}
        self.default_level = "INFO"
        self.log_file = None
        self.console = True

    def set_module_level(self, module_name: str, level: str):
        """Set log level for a specific module, e.g. 'pypos.io.pos'"""
        _level(level)
        self.module_levels[module_name] = level

    def get_level_for_module(self, module_name: str) -> str:
        return self.module_levels.get(module_name, self.default_level)

    def configure_from_dict(self, config: dict):
        """Configure from dictionary"""
        if 'default_level' in config:
            _level(config['default_level'])
            self.default_level = config['default_level']
        if 'log_file' in config:
            self.log_file = config['log_file']
        if 'console' in config:
            self.console = config['console']
        for module, level in config.get('module_levels', {}).items():
            self.set_module_level(module, level)

    def setup_all_loggers(self):
        setup_logger(ROOT_LOGGER, self.default_level, self.log_file, self.console)
        for module, level in self.module_levels.items():
            # module loggers only change level; records propagate to the root handlers
            logging.getLogger(module).setLevel(_level(level))


# Global logger configuration
logger_config = LoggerConfig()


def setup_logger_from_config(config: dict):
    """Setup loggers from configuration dictionary

    Example config:
    {
        'default_level': 'INFO',
        'log_file': 'decode.log',
        'console': True,
        'module_levels': {
            'pypos.io.pos': 'DEBUG',
            'pypos.io.base': 'TRACE',
        }
    }
    """
    logger_config.configure_from_dict(config)
    logger_config.setup_all_loggers()


__all__ = [
    'LogLevel', 'TRACE', 'ColoredFormatter', 'LogContext', 'LoggerConfig',
    'setup_logger', 'setup_logger_from_config', 'get_logger', 'logger_config',
]
