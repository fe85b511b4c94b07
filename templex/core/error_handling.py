"""
Error handling utilities for templex.

This module provides the exception hierarchy used throughout templex and the
decorator that keeps a failing resolution step from aborting the rest of a
template site, file or batch. Unresolvable references are never errors: they
produce an empty literal value set.
"""
import functools
import logging
from typing import Any, Callable, Optional, Tuple

logger = logging.getLogger('templex')

class TemplexError(Exception):
    """Base class for all templex exceptions.

    All exceptions specific to templex should inherit from this class to allow
    for consistent error handling and identification.
    """
    def __init__(self, message: str, **kwargs):
        self.message = message
        self.context = kwargs.get('context', {})

        for key, value in kwargs.items():
            if key != 'context':
                self.context[key] = value

        super().__init__(message)

    def add_context(self, key: str, value: Any) -> None:
        """Add additional context information to the exception.

        Args:
            key: The context key
            value: The context value
        """
        self.context[key] = value

    def __str__(self) -> str:
        """Return a string representation of the exception.

        If context information is available, it will be included in the string.
        """
        if not self.context:
            return self.message

        context_str = ', '.join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} [Context: {context_str}]"

# ===== Configuration Errors =====

class ConfigurationError(TemplexError):
    """Exception raised for issues with configuration settings."""
    pass

class InvalidConfigurationError(ConfigurationError):
    """Exception raised when a configuration file or setting has an invalid value."""
    def __init__(self, setting: str, value: Any, reason: str, **kwargs):
        message = f"Invalid configuration setting '{setting}': {value}. Reason: {reason}"
        super().__init__(message, setting=setting, value=value, reason=reason, **kwargs)

# ===== Parsing Errors =====

class ParsingError(TemplexError):
    """Exception raised when a source file cannot be turned into a syntax tree.

    A file that raises this error is skipped as a whole; other files are
    unaffected.
    """
    def __init__(self, message: str, path: Optional[str] = None,
                 position: Optional[Tuple[int, int]] = None, **kwargs):
        super().__init__(message, path=path, position=position, **kwargs)
        self.path = path
        self.position = position

class UnsupportedLanguageError(TemplexError):
    """Exception raised when a file's extension has no parser."""
    def __init__(self, language: str, **kwargs):
        message = f"Unsupported language: '{language}'"
        super().__init__(message, language=language, **kwargs)
        self.language = language

# ===== Transient Host Errors =====

class TransientHostError(TemplexError):
    """Exception raised for host failures that may succeed when retried once."""
    pass

class OracleNotReadyError(TransientHostError):
    """Exception raised when the symbol oracle reports that it is still loading."""
    def __init__(self, query: str, **kwargs):
        message = f"Symbol oracle not ready for query '{query}'"
        super().__init__(message, query=query, **kwargs)
        self.query = query

class FileReadError(TransientHostError):
    """Exception raised when a file is momentarily unreadable."""
    def __init__(self, path: str, reason: str, **kwargs):
        message = f"Failed to read '{path}': {reason}"
        super().__init__(message, path=path, reason=reason, **kwargs)
        self.path = path
        self.reason = reason

# ===== Utility Decorators and Functions =====

def absorb_resolution_errors(func: Callable) -> Callable:
    """
    Decorator for async resolution steps that must never raise.

    Any ``Exception`` raised by the wrapped coroutine is logged and replaced by
    an empty list, so that one bad reference does not abort resolution of the
    rest of a template site. Task cancellation is not an ``Exception`` and
    still propagates.

    Args:
        func: The coroutine function to wrap

    Returns:
        Wrapped coroutine function with error handling
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except TemplexError as e:
            logger.debug(f"{func.__qualname__} gave up: {e}")
            return []
        except Exception as e:
            logger.warning(f"Unexpected error during {func.__qualname__}: {e}", exc_info=True)
            return []

    return wrapper
