"""Three-tier configuration store: defaults, pending overrides, loaded file."""

from __future__ import annotations

from dataclasses import dataclass
from typing import IO, Any, Callable, Dict, Optional, Union

import yaml
from loguru import logger as loguru_logger

from .exceptions import ConfigLoadError, InitializationError, StoreStateError
from .inifile import IniDictionary, IniParser
from .locking import RWLock
from .log import LOG_DEBUG, LOG_ERR, Logger
from .utils import parse_bool, parse_int, split_key

CONFIG_FILE_KEY = "global:configFile"


@dataclass
class _Unloaded:
    """Initialized, no file loaded yet: ``set`` records pending overrides."""

    defaults: IniDictionary
    overrides: IniDictionary


@dataclass
class _Loaded:
    """File loaded: overrides have been applied to ``resolved`` and dropped."""

    defaults: IniDictionary
    resolved: IniDictionary


_State = Union[None, _Unloaded, _Loaded]


class ConfigStore:
    """Thread-safe key/value configuration store layered over an INI file.

    Keys have the form ``section:name``. A lookup resolves, in order, to the
    loaded file (with overrides applied) or, before loading, the pending
    overrides; then the defaults; then the caller's fallback.

    All mutations take the write lock and all lookups take the read lock of a
    single readers-writer lock shared by the three tiers.

    Example:
        store = ConfigStore()
        store.initialize(lambda s: s.set_default("log:level", "info"))
        store.set("db:host", "localhost")
        store.load("/etc/app.conf")
        host = store.get("db:host")
    """

    def __init__(self, logger: Optional[Logger] = None, parser: Optional[IniParser] = None):
        """Initialize an empty, uninitialized store.

        Args:
            logger: Logger receiving load diagnostics  # (loguru when None)
            parser: INI parser used by ``load``
        """
        self._lock = RWLock()
        self._state: _State = None
        self._logger = logger
        self._parser = parser or IniParser()
        self._parser.set_logger(self._report_parse_error)

    # ---------- Lifecycle ----------
    @property
    def logger(self) -> Optional[Logger]:
        return self._logger

    def attach_logger(self, logger: Optional[Logger]) -> None:
        """Route load diagnostics to ``logger`` (None restores loguru)."""
        self._logger = logger

    @property
    def is_initialized(self) -> bool:
        return self._state is not None

    @property
    def is_loaded(self) -> bool:
        return isinstance(self._state, _Loaded)

    def initialize(self, defaults_callback: Optional[Callable[["ConfigStore"], Any]] = None) -> None:
        """Create the defaults and overrides tiers.

        Args:
            defaults_callback: Called with the store after setup, outside the
                lock, to populate defaults via ``set_default``; it signals
                failure by raising or by returning a truthy value

        Raises:
            StoreStateError: If the store was already initialized
            InitializationError: If ``defaults_callback`` failed; the store
                keeps whatever defaults were set and should not be reused
        """
        with self._lock.write_locked():
            if self._state is not None:
                raise StoreStateError("Configuration store is already initialized", self._state_name())
            self._state = _Unloaded(defaults=IniDictionary(), overrides=IniDictionary())

        if defaults_callback is not None:
            try:
                result = defaults_callback(self)
            except Exception as e:
                raise InitializationError(f"Defaults callback failed: {e}") from e
            if result:
                raise InitializationError(f"Defaults callback reported failure: {result!r}")

    def load(self, default_path: str) -> None:
        """Load the configuration file and apply pending overrides on top.

        The path is taken from ``global:configFile`` when that key resolves,
        otherwise ``default_path``.

        Args:
            default_path: File to load when ``global:configFile`` is unset

        Raises:
            ConfigLoadError: If the file cannot be read or parsed; the store
                stays unloaded and keeps its overrides and defaults
            StoreStateError: If not initialized or a file was already loaded
        """
        with self._lock.write_locked():
            state = self._require_state()
            if isinstance(state, _Loaded):
                raise StoreStateError("Configuration file is already loaded", self._state_name())

            path = self._lookup(state, CONFIG_FILE_KEY, default_path)
            if path is None:
                # global:configFile present without a value
                path = default_path
            self._log_debug("loading configuration file '%s'", path)
            resolved = self._parser.load(path)
            if resolved is None:
                raise ConfigLoadError(path)

            # Overrides win over values read from the file
            for key, value in state.overrides.items():
                self._parser.set(resolved, key, value)
            self._state = _Loaded(defaults=state.defaults, resolved=resolved)

    # ---------- Mutation ----------
    def set(self, key: str, value: Optional[str]) -> None:
        """Set ``key``: a pending override before ``load``, a live edit after it."""
        with self._lock.write_locked():
            state = self._require_state()
            target = state.resolved if isinstance(state, _Loaded) else state.overrides
            self._parser.set(target, key, value)

    def set_default(self, key: str, value: Optional[str]) -> None:
        """Set the fallback value of ``key``, used when no other tier has it."""
        with self._lock.write_locked():
            state = self._require_state()
            self._parser.set(state.defaults, key, value)

    # ---------- Lookup ----------
    def get(self, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """Resolve ``key`` through the tiers.

        Args:
            key: ``section:name`` key
            fallback: Returned when no tier has the key

        Returns:
            The resolved value; None if the key is present with no value
        """
        with self._lock.read_locked():
            return self._lookup(self._require_state(), key, fallback)

    def get_into(self, key: str, fallback: Optional[str], buffer: Optional[bytearray]) -> int:
        """Copy the resolved value into ``buffer`` as a NUL-terminated UTF-8 string.

        The copy is truncated to ``len(buffer) - 1`` bytes. Passing None (or an
        empty buffer) only measures.

        Args:
            key: ``section:name`` key
            fallback: Used when no tier has the key
            buffer: Destination, or None to only measure

        Returns:
            Bytes needed to hold the full value including the terminator, or 0
            when the key resolved to no value
        """
        with self._lock.read_locked():
            value = self._lookup(self._require_state(), key, fallback)
        encoded = value.encode("utf-8") if value is not None else b""
        required = len(encoded) + 1 if value is not None else 0
        if buffer:
            n = min(len(encoded), len(buffer) - 1)
            buffer[:n] = encoded[:n]
            buffer[n] = 0
        return required

    def get_int(self, key: str, default: int = 0) -> int:
        """Resolve ``key`` as an integer; ``default`` when no tier has a value."""
        value = self.get(key)
        return default if value is None else parse_int(value)

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Resolve ``key`` as a flag; ``default`` when no tier has a value."""
        value = self.get(key)
        return bool(default) if value is None else parse_bool(value)

    def get_all(
        self,
        section: str,
        key: Optional[str],
        callback: Callable[[str, Optional[str]], Any],
    ) -> bool:
        """Call ``callback(key, value)`` for each entry of ``section``.

        Iterates the loaded dictionary, or the pending overrides before a file
        is loaded, in insertion order. Defaults are not visited. The read lock
        is held throughout, so ``callback`` may read the store but must not
        write to it.

        Args:
            section: Section name; entries must have the prefix ``section:``
            key: If given, only the entry named ``section:key`` is visited
            callback: Receives the stored key and value; returning a truthy
                value stops the iteration

        Returns:
            False if the callback stopped the iteration, True otherwise
        """
        prefix = f"{section.lower()}:"
        name = key.lower() if key is not None else None
        with self._lock.read_locked():
            state = self._require_state()
            dictionary = state.resolved if isinstance(state, _Loaded) else state.overrides
            for entry_key, entry_value in dictionary.items():
                if not entry_key.startswith(prefix):
                    continue
                if name is not None and entry_key[len(prefix) :] != name:
                    continue
                if callback(entry_key, entry_value):
                    return False
        return True

    def items(self) -> Dict[str, Optional[str]]:
        """Snapshot of every key visible through ``get`` and its value.

        Returns:
            Defaults overlaid with overrides (before load) or the loaded file  # (insertion order)
        """
        with self._lock.read_locked():
            state = self._require_state()
            result = state.defaults.to_dict()
            top = state.resolved if isinstance(state, _Loaded) else state.overrides
            result.update(top.to_dict())
        return result

    def dump(self, stream: Optional[IO[str]] = None) -> str:
        """Render the effective configuration as YAML, nested by section.

        Args:
            stream: Optional text stream to write to

        Returns:
            The YAML document
        """
        nested: Dict[str, Dict[str, Optional[str]]] = {}
        for full_key, value in self.items():
            section, name = split_key(full_key)
            nested.setdefault(section, {})[name] = value
        text = yaml.safe_dump(nested, default_flow_style=False, sort_keys=False)
        if stream is not None:
            stream.write(text)
        return text

    # ---------- Internals ----------
    def _require_state(self) -> Union[_Unloaded, _Loaded]:
        if self._state is None:
            raise StoreStateError("Configuration store is not initialized", self._state_name())
        return self._state

    def _state_name(self) -> str:
        if self._state is None:
            return "uninitialized"
        return "loaded" if isinstance(self._state, _Loaded) else "initialized"

    def _lookup(self, state: Union[_Unloaded, _Loaded], key: str, fallback: Optional[str]) -> Optional[str]:
        """Resolve ``key`` without locking; the caller holds the lock."""
        top = state.resolved if isinstance(state, _Loaded) else state.overrides
        return self._parser.get_string(top, key, self._parser.get_string(state.defaults, key, fallback))

    def _log_debug(self, fmt: str, *args: Any) -> None:
        if self._logger is not None:
            self._logger.vlog(LOG_DEBUG, fmt, args)
        else:
            loguru_logger.debug(fmt % args)

    def _report_parse_error(self, message: str) -> None:
        if self._logger is not None:
            self._logger.log(LOG_ERR, "%s", message)
        else:
            loguru_logger.error(message)
