"""Process-wide store and logger for applications that want a single instance.

``shared_store()`` and ``shared_logger()`` create one ``ConfigStore`` and one
``Logger`` on first use, wired to each other. Creation is serialized by a
module lock, so concurrent first calls get the same objects. The store still
has to be initialized explicitly with ``initialize()``.
"""

import threading
from typing import Optional, Tuple

from .log import Logger
from .store import ConfigStore

_lock = threading.Lock()
_pair: Optional[Tuple[ConfigStore, Logger]] = None


def _shared_pair() -> Tuple[ConfigStore, Logger]:
    global _pair
    with _lock:
        if _pair is None:
            logger = Logger()
            store = ConfigStore(logger=logger)
            logger.attach_store(store)
            _pair = (store, logger)
        return _pair


def shared_store() -> ConfigStore:
    """Return the process-wide configuration store."""
    return _shared_pair()[0]


def shared_logger() -> Logger:
    """Return the process-wide logger, reading ``log:*`` keys from ``shared_store()``."""
    return _shared_pair()[1]


def reset_shared() -> None:
    """Close the shared logger and forget both instances."""
    global _pair
    with _lock:
        if _pair is not None:
            _pair[1].reset()
        _pair = None
