"""
Custom exceptions for the post model.

These exceptions are raised inside the host layer. The Post facade turns
write failures into None results and lets transport failures propagate.
"""

from typing import Any, Optional


class PostModelException(Exception):
    """Base exception for all wppost errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class PostNotFoundException(PostModelException):
    """Raised when a host is asked to write a record that does not exist."""

    def __init__(self, post_id: Any, post_type: Optional[str] = None):
        message = f"Post not found: {post_id}"
        if post_type:
            message = f"Post of type '{post_type}' not found: {post_id}"
        super().__init__(
            message=message, details={"post_id": post_id, "post_type": post_type}
        )


class PostWriteException(PostModelException):
    """Raised when the host rejects an insert, update or delete."""

    def __init__(self, operation: str, reason: Optional[str] = None):
        message = f"Post {operation} failed"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message, details={"operation": operation, "reason": reason}
        )


class HostUnavailableException(PostModelException):
    """Raised when the content host cannot be reached."""

    def __init__(self, host: str, reason: Optional[str] = None):
        message = f"Content host '{host}' unavailable"
        if reason:
            message += f": {reason}"
        super().__init__(message=message, details={"host": host, "reason": reason})


class HostConfigurationException(PostModelException):
    """Raised when a content host cannot be built from the settings."""

    def __init__(self, setting: str, reason: str):
        message = f"Invalid host configuration for {setting}: {reason}"
        super().__init__(message=message, details={"setting": setting, "reason": reason})


class PostTypeMismatchException(PostModelException):
    """Raised when a record is wrapped by a class for another post type."""

    def __init__(self, expected: str, actual: Optional[str]):
        message = f"Expected post type '{expected}', got '{actual}'"
        super().__init__(
            message=message, details={"expected": expected, "actual": actual}
        )
