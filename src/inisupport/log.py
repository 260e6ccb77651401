"""Logging shim writing to syslog or standard error.

Level, facility, routing and identity are either set directly through the
setters or, with ``use_config`` on, read from a ``ConfigStore`` (``log:*``
keys) each time the channel is opened. Any change closes the channel; the
next message reopens it with the new settings.

The logger holds no lock. Setters are meant to be called while the
application configures itself; a message emitted concurrently with a setter
may be routed with either the old or the new settings, and two threads may
both open the channel. This race is accepted.
"""

from __future__ import annotations

import sys
import syslog
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence

from .utils import parse_int

if TYPE_CHECKING:
    from .store import ConfigStore

LOG_EMERG = syslog.LOG_EMERG
LOG_ALERT = syslog.LOG_ALERT
LOG_CRIT = syslog.LOG_CRIT
LOG_ERR = syslog.LOG_ERR
LOG_WARNING = syslog.LOG_WARNING
LOG_NOTICE = syslog.LOG_NOTICE
LOG_INFO = syslog.LOG_INFO
LOG_DEBUG = syslog.LOG_DEBUG

LOG_USER = syslog.LOG_USER
LOG_DAEMON = syslog.LOG_DAEMON

_LEVEL_NAMES: Dict[str, int] = {
    "emerg": LOG_EMERG,
    "emergency": LOG_EMERG,
    "alert": LOG_ALERT,
    "crit": LOG_CRIT,
    "critical": LOG_CRIT,
    "err": LOG_ERR,
    "error": LOG_ERR,
    "warn": LOG_WARNING,
    "warning": LOG_WARNING,
    "notice": LOG_NOTICE,
    "info": LOG_INFO,
    "debug": LOG_DEBUG,
}

# Only facilities the platform defines are recognised
_FACILITY_NAMES: Dict[str, int] = {
    name: getattr(syslog, constant)
    for name, constant in (
        ("auth", "LOG_AUTH"),
        ("authpriv", "LOG_AUTHPRIV"),
        ("cron", "LOG_CRON"),
        ("daemon", "LOG_DAEMON"),
        ("ftp", "LOG_FTP"),
        ("kern", "LOG_KERN"),
        ("lpr", "LOG_LPR"),
        ("mail", "LOG_MAIL"),
        ("news", "LOG_NEWS"),
        ("security", "LOG_SECURITY"),
        ("syslog", "LOG_SYSLOG"),
        ("remoteauth", "LOG_REMOTEAUTH"),
        ("uucp", "LOG_UUCP"),
        ("user", "LOG_USER"),
        ("local0", "LOG_LOCAL0"),
        ("local1", "LOG_LOCAL1"),
        ("local2", "LOG_LOCAL2"),
        ("local3", "LOG_LOCAL3"),
        ("local4", "LOG_LOCAL4"),
        ("local5", "LOG_LOCAL5"),
        ("local6", "LOG_LOCAL6"),
        ("local7", "LOG_LOCAL7"),
    )
    if hasattr(syslog, constant)
}


def parse_level(level: str) -> int:
    """Convert a level name to its syslog severity.

    Args:
        level: Name such as ``"notice"`` or ``"err"`` (case-insensitive), or a
            decimal number

    Returns:
        Severity number; unrecognised text that is not a number yields 0
    """
    known = _LEVEL_NAMES.get(level.strip().lower())
    if known is not None:
        return known
    return parse_int(level)


def parse_facility(facility: str) -> int:
    """Convert a facility name to its syslog constant, ``LOG_USER`` if unknown."""
    return _FACILITY_NAMES.get(facility.strip().lower(), LOG_USER)


@dataclass(frozen=True)
class LoggerSettings:
    """Settings a channel is opened with.

    Attributes:
        stderr: Also copy syslog messages to standard error
        syslog: Route to syslog; when False, write to standard error only
        level: Most verbose severity emitted (syslog numbering)
        facility: Syslog facility
        ident: Identity prefixed to messages
    """

    stderr: bool = False
    syslog: bool = True
    level: int = LOG_NOTICE
    facility: int = LOG_DAEMON
    ident: str = "(unknown)"


# Settings a use_config channel resolves to when no log:* key is set
_CONFIG_DEFAULTS = LoggerSettings(stderr=False, syslog=True, level=LOG_NOTICE, facility=LOG_USER, ident="(none)")


class Logger:
    """Level-gated logger routed to syslog or standard error."""

    def __init__(self, store: Optional["ConfigStore"] = None):
        """Initialize a closed logger with default settings.

        Args:
            store: Store read for ``log:*`` keys when ``use_config`` is on
        """
        self._store = store
        self._settings = LoggerSettings()
        self._active = self._settings  # (settings the open channel uses)
        self._use_config = False
        self._is_open = False

    @property
    def store(self) -> Optional["ConfigStore"]:
        return self._store

    def attach_store(self, store: Optional["ConfigStore"]) -> None:
        self._store = store
        self.reset()

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def use_config(self) -> bool:
        return self._use_config

    @property
    def settings(self) -> LoggerSettings:
        """Settings the channel is (or will next be) opened with."""
        return self._active if self._is_open else self._settings

    # ---------- Setters ----------
    def _update(self, **changes: Any) -> None:
        self._use_config = False
        self._settings = replace(self._settings, **changes)
        self.reset()

    def set_ident(self, ident: str) -> None:
        self._update(ident=ident)

    def set_level(self, level: int) -> None:
        self._update(level=level)

    def set_facility(self, facility: int) -> None:
        self._update(facility=facility)

    def set_syslog(self, enabled: bool) -> None:
        self._update(syslog=bool(enabled))

    def set_stderr(self, enabled: bool) -> None:
        self._update(stderr=bool(enabled))

    def set_use_config(self, enabled: bool) -> None:
        """Read settings from the store on each (re)open instead of the setters."""
        enabled = bool(enabled)
        if enabled == self._use_config:
            return
        self._use_config = enabled
        self.reset()

    # ---------- Channel ----------
    def reset(self) -> None:
        """Close the channel; the next message reopens it."""
        if self._is_open and self._active.syslog:
            syslog.closelog()
        self._is_open = False

    def open(self) -> None:
        """(Re)open the channel with the current settings."""
        if self._is_open:
            self.reset()

        store = self._store
        if self._use_config and (store is None or not store.is_initialized):
            # Nothing to read yet: use the values the log:* keys default to
            settings = _CONFIG_DEFAULTS
        elif self._use_config:
            settings = LoggerSettings(
                stderr=store.get_bool("log:stderr", False),
                syslog=store.get_bool("log:syslog", True),
                level=parse_level(store.get("log:level", "notice") or ""),
                facility=parse_facility(store.get("log:facility", "user") or ""),
                ident=store.get("log:ident", "(none)") or "",
            )
        else:
            settings = self._settings

        if settings.syslog:
            option = syslog.LOG_NDELAY | syslog.LOG_PID
            if settings.stderr:
                option |= getattr(syslog, "LOG_PERROR", 0)
            syslog.openlog(settings.ident, option, settings.facility)
        self._active = settings
        self._is_open = True

    # ---------- Emission ----------
    def vlog(self, level: int, fmt: str, args: Sequence[Any] = ()) -> None:
        """Emit ``fmt % args`` at ``level`` unless the threshold filters it out.

        Args:
            level: Syslog severity; larger numbers are less severe
            fmt: printf-style format string
            args: Format arguments  # (prebuilt, e.g. forwarded from another call)
        """
        if not self._is_open:
            self.open()
        settings = self._active
        if level > settings.level:
            return
        message = fmt % tuple(args) if args else fmt
        if settings.syslog:
            syslog.syslog(level, message)
        else:
            if not message.endswith("\n"):
                message += "\n"
            sys.stderr.write(f"{settings.ident}: {message}")
            sys.stderr.flush()

    def log(self, level: int, fmt: str, *args: Any) -> None:
        self.vlog(level, fmt, args)

    def error(self, fmt: str, *args: Any) -> None:
        self.vlog(LOG_ERR, fmt, args)

    def warning(self, fmt: str, *args: Any) -> None:
        self.vlog(LOG_WARNING, fmt, args)

    def notice(self, fmt: str, *args: Any) -> None:
        self.vlog(LOG_NOTICE, fmt, args)

    def info(self, fmt: str, *args: Any) -> None:
        self.vlog(LOG_INFO, fmt, args)

    def debug(self, fmt: str, *args: Any) -> None:
        self.vlog(LOG_DEBUG, fmt, args)
