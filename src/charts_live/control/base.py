"""
Base classes and decorators for command handlers.

This module provides the foundation for command handling including:
- CommandResult: Standardized return type for commands
- Decorators for argument validation and error handling
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional
from functools import wraps
import logging

from ..errors import ChartsLiveError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """
    Standardized result from command handlers.

    Either carries a payload for the caller or an error message; never
    an exception.
    """
    success: bool
    payload: Dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None
    error_type: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, **payload) -> "CommandResult":
        """Create a successful result."""
        return cls(success=True, payload=payload)

    @classmethod
    def error(cls, error_message: str, error_type: str = "command_error", **metadata) -> "CommandResult":
        """Create an error result."""
        return cls(success=False, error_message=error_message, error_type=error_type, metadata=metadata)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable body returned to the caller."""
        if self.success:
            return dict(self.payload)
        body = {"error": self.error_message, "error_type": self.error_type}
        body.update(self.metadata)
        return body


def validate_args(*required_keys: str):
    """
    Decorator to validate that required arguments are present and non-empty.

    Usage:
        @validate_args('chart_lib_id')
        async def initialize_workspace(self, arguments):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(self, arguments: Dict[str, Any], *args, **kwargs):
            missing = [key for key in required_keys if not arguments.get(key)]

            if missing:
                error_msg = f"{', '.join(missing)} is required"
                logger.error(f"{func.__name__}: {error_msg}")
                return CommandResult.error(error_msg, error_type="validation_error")

            return await func(self, arguments, *args, **kwargs)

        return wrapper

    return decorator


def handle_exceptions(func: Callable) -> Callable:
    """
    Decorator to catch and convert exceptions into CommandResult errors.

    Known errors keep their type and attributes useful to the caller;
    anything else is logged with its traceback.
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except ChartsLiveError as e:
            logger.error(f"{func.__name__} failed: {e}")
            metadata = {}
            supported = getattr(e, "supported", None)
            if supported is not None:
                metadata["supported"] = supported
            return CommandResult.error(str(e), error_type=e.error_type, **metadata)
        except Exception as e:
            logger.exception(f"Exception in {func.__name__}: {e}")
            return CommandResult.error(
                str(e),
                error_type="exception",
                exception_type=type(e).__name__
            )

    return wrapper
