"""INI file loading into flat ``section:name`` dictionaries."""

from __future__ import annotations

import configparser
from typing import Callable, Dict, Iterator, Optional, Tuple

from loguru import logger

LogSink = Callable[[str], None]

# configparser folds a [DEFAULT] section into every other section; INI files
# read here have no such section, so point it at a name no header can produce.
_NO_DEFAULT_SECTION = "\0"


def _normalize_key(key: str) -> str:
    return key.lower()


def _strip_quotes(value: Optional[str]) -> Optional[str]:
    """Remove one pair of surrounding double quotes, if present."""
    if value is not None and len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


class IniDictionary:
    """Ordered mapping of ``section:name`` keys to optional string values.

    Keys are case-insensitive: they are stored and looked up in lower case.
    A value of ``None`` means the key is present but has no value.
    """

    def __init__(self, data: Optional[Dict[str, Optional[str]]] = None):
        self._data: Dict[str, Optional[str]] = {}
        for key, value in (data or {}).items():
            self.set(key, value)

    def get(self, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """Return the value for ``key``, or ``fallback`` if the key is absent.

        A key that is present without a value yields None, not ``fallback``.
        """
        return self._data.get(_normalize_key(key), fallback)

    def set(self, key: str, value: Optional[str]) -> None:
        """Set ``key`` to ``value``, keeping the original insertion position."""
        self._data[_normalize_key(key)] = value

    def items(self) -> Iterator[Tuple[str, Optional[str]]]:
        return iter(list(self._data.items()))

    def to_dict(self) -> Dict[str, Optional[str]]:
        return dict(self._data)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and _normalize_key(key) in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"IniDictionary({self._data})"


class IniParser:
    """Reads INI files and exposes get/set primitives on the result.

    Diagnostics (unreadable file, syntax errors) are reported through a
    pluggable sink instead of being raised; ``load`` then returns ``None``.
    """

    def __init__(self, log: Optional[LogSink] = None):
        """Initialize INI parser.

        Args:
            log: Sink receiving one diagnostic message per call  # (defaults to loguru at ERROR)
        """
        self._log: LogSink = log or logger.error

    def set_logger(self, log: Optional[LogSink]) -> None:
        """Replace the diagnostic sink; ``None`` restores the default."""
        self._log = log or logger.error

    def load(self, path: str) -> Optional[IniDictionary]:
        """Parse the INI file at ``path``.

        Args:
            path: File to read

        Returns:
            Flat dictionary of the file's entries, or None on failure
        """
        parser = configparser.ConfigParser(
            allow_no_value=True,
            strict=False,
            interpolation=None,
            inline_comment_prefixes=("#", ";"),
            default_section=_NO_DEFAULT_SECTION,
        )
        try:
            with open(path, "r", encoding="utf-8") as f:
                parser.read_file(f, source=path)
        except OSError as e:
            self._log(f"iniparser: cannot open {path}: {e.strerror or e}")
            return None
        except UnicodeDecodeError as e:
            self._log(f"iniparser: cannot decode {path}: {e.reason}")
            return None
        except configparser.Error as e:
            self._log(f"iniparser: syntax error in {path}: {e}")
            return None

        result = IniDictionary()
        for section in parser.sections():
            # raw=True skips interpolation, items() would also merge defaults
            for name, value in parser.items(section, raw=True):
                result.set(f"{section}:{name}", _strip_quotes(value))
        return result

    @staticmethod
    def get_string(dictionary: Optional[IniDictionary], key: str, fallback: Optional[str] = None) -> Optional[str]:
        """Look up ``key`` in ``dictionary``; a missing dictionary yields ``fallback``."""
        if dictionary is None:
            return fallback
        return dictionary.get(key, fallback)

    @staticmethod
    def set(dictionary: IniDictionary, key: str, value: Optional[str]) -> None:
        """Store ``value`` under ``key`` in ``dictionary``."""
        dictionary.set(key, value)
