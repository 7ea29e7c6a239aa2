"""
Falkor Core

Configuration, logging, exceptions and data models shared by the engine.
"""

from .config import (
    FalkorConfig,
    LoggingConfig,
    get_config,
    load_config,
    reload_config,
    update_config,
    set_base_url,
    set_root_schema_path,
)
from .exceptions import (
    FalkorException,
    ConfigurationError,
    NetworkError,
    SchemaError,
    ChainAbortedError,
)
from .models import HTTPRequest, HTTPResponse, TestState

__all__ = [
    "FalkorConfig",
    "LoggingConfig",
    "get_config",
    "load_config",
    "reload_config",
    "update_config",
    "set_base_url",
    "set_root_schema_path",
    "FalkorException",
    "ConfigurationError",
    "NetworkError",
    "SchemaError",
    "ChainAbortedError",
    "HTTPRequest",
    "HTTPResponse",
    "TestState",
]
