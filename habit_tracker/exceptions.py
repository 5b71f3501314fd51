"""
Standardized exception hierarchy for habit-tracker
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class HabitTrackerError(Exception):
    """
    Base exception for all habit-tracker errors

    Provides:
    - Automatic timestamping
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise HabitTrackerError(
            message="Failed to save tracker",
            operation="insert_or_replace_tracker",
            context={"tracker_id": "abc-123"}
        )
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for the presentation layer"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "operation": self.operation,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (User Input)
# ==========================================

class ValidationError(HabitTrackerError):
    """
    Raised when user input fails validation

    Examples:
    - Blank category title
    - Tracker assigned to the pinned pseudo-category
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class StorageError(HabitTrackerError):
    """
    Base class for storage collaborator failures
    """
    pass


class StorageReadError(StorageError):
    """Fetching trackers, records or statistics failed"""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault(
            "user_message",
            "We couldn't load your trackers. Please try again."
        )
        super().__init__(message=message, **kwargs)


class StorageWriteError(StorageError):
    """Saving or deleting trackers, records or statistics failed"""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault(
            "user_message",
            "We couldn't save your changes. Please try again."
        )
        super().__init__(message=message, **kwargs)


class NotFoundError(HabitTrackerError):
    """An update or delete referenced an unknown id"""

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs
    ):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(
            message=message,
            user_message=f"{record_type or 'Record'} not found.",
            context={"record_type": record_type, "record_id": record_id},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(HabitTrackerError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_storage_exception(
    error: Exception,
    operation: str,
    write: bool = False,
    context: Optional[Dict[str, Any]] = None
) -> HabitTrackerError:
    """
    Wrap backend exceptions into our exception hierarchy

    Args:
        error: Original exception
        operation: What storage operation was being performed
        write: True for mutations, False for fetches
        context: Additional context

    Returns:
        The original error if it already belongs to the hierarchy,
        otherwise StorageWriteError or StorageReadError

    Example:
        try:
            rows = backend.fetch_all_trackers()
        except Exception as e:
            raise wrap_storage_exception(e, operation="fetch_all_trackers")
    """
    if isinstance(error, HabitTrackerError):
        return error

    error_cls = StorageWriteError if write else StorageReadError
    return error_cls(
        message=f"{operation} failed: {str(error)}",
        operation=operation,
        context=context,
        cause=error
    )
