"""Core types: results, exit codes and configuration."""

from .config import CONFIG_FILENAME, ConfigError, FlowConfig, load_config, load_config_or_default
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "CONFIG_FILENAME",
    "ConfigError",
    "FlowConfig",
    "load_config",
    "load_config_or_default",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
