"""Custom exceptions for inisupport."""

from typing import Optional


class InisupportError(Exception):
    """Base exception for inisupport errors."""

    pass


class StoreStateError(InisupportError):
    """Raised when a store operation is invoked in the wrong lifecycle state."""

    def __init__(self, message: str, state: Optional[str] = None):
        self.state = state
        super().__init__(f"{message} (state: {state})" if state else message)


class InitializationError(InisupportError):
    """Raised when the defaults callback fails during store initialization."""

    pass


class ConfigLoadError(InisupportError):
    """Raised when the configuration file cannot be read or parsed."""

    def __init__(self, path: str):
        """Initialize configuration load error.

        Args:
            path: Path of the file that failed to load
        """
        self.path = path
        super().__init__(f"Cannot load configuration file '{path}'")
