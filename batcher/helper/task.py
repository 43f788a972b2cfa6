"""
Function helpers for the batcher.
Validation and naming of the work and sink functions handed to a batch.
"""

import inspect
from typing import Any, Callable

from .error import InvalidConfigurationError


def check_valid_function(function: Any, role: str = "function") -> None:
    """
    Check if the provided object can be used as a batch function.

    :param function: The function to validate.
    :param role: Name used in the error message ("work function", "sink function").
    :raises InvalidConfigurationError: If the function is missing or not callable.
    """
    if function is None:
        raise InvalidConfigurationError(f"{role} must not be None")

    if not callable(function):
        raise InvalidConfigurationError(
            f"{role} must be callable, got {type(function).__name__}"
        )


def check_single_argument(function: Callable[..., Any], role: str = "function") -> None:
    """
    Check that the function can be called with exactly one positional argument.
    Builtins without an inspectable signature are accepted as they are.

    :param function: The function to validate.
    :param role: Name used in the error message.
    :raises InvalidConfigurationError: If the signature cannot take one argument.
    """
    check_valid_function(function, role)

    try:
        sig = inspect.signature(function)
    except (TypeError, ValueError):
        return

    try:
        sig.bind(None)
    except TypeError as e:
        raise InvalidConfigurationError(
            f"{role} {get_function_name(function)} must accept exactly one argument: {e}"
        ) from e


def is_async_function(function: Callable[..., Any]) -> bool:
    """Return True if calling the function returns a coroutine."""
    if inspect.iscoroutinefunction(function):
        return True
    call = getattr(function, "__call__", None)
    return call is not None and inspect.iscoroutinefunction(call)


def get_function_name(function: Callable[..., Any]) -> str:
    """
    Get a readable name for the function.

    :param function: The function to inspect.
    :returns: The function name, or its class name for callable objects.
    """
    if hasattr(function, "__name__"):
        return function.__name__
    elif hasattr(function, "__class__"):
        return function.__class__.__name__
    else:
        return str(function)
