"""inisupport - INI-backed configuration store and syslog logging shim.

A thread-safe, three-tier configuration store (defaults, overrides, loaded
file) and a logger that writes to syslog or standard error.
"""
# ruff: noqa: F401

from .exceptions import (
    ConfigLoadError,
    InisupportError,
    InitializationError,
    StoreStateError,
)
from .inifile import IniDictionary, IniParser
from .log import (
    LOG_ALERT,
    LOG_CRIT,
    LOG_DEBUG,
    LOG_EMERG,
    LOG_ERR,
    LOG_INFO,
    LOG_NOTICE,
    LOG_WARNING,
    Logger,
    LoggerSettings,
    parse_facility,
    parse_level,
)
from .shared import reset_shared, shared_logger, shared_store
from .store import ConfigStore

__version__ = "0.1.0"
