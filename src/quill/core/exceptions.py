"""Custom exceptions for the application."""

from typing import Optional


class QuillException(Exception):
    """Base exception for all Quill errors."""
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


# Authentication Exceptions
class NotAuthenticatedError(QuillException):
    """No valid access token on the request."""
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status_code=401)


class InvalidCredentialsError(QuillException):
    """Invalid email or password. ``reason`` is for the audit log only."""
    def __init__(self, message: str = "Invalid credentials", reason: Optional[str] = None):
        self.reason = reason
        super().__init__(message, status_code=401)


class InvalidTokenError(QuillException):
    """Invalid, expired or revoked token."""
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, status_code=401)


class PermissionDeniedError(QuillException):
    """Authenticated but not allowed."""
    def __init__(self, message: str = "Access denied"):
        super().__init__(message, status_code=403)


class EmailAlreadyExistsError(QuillException):
    """Email already registered."""
    def __init__(self, message: str = "User already exists with this email"):
        super().__init__(message, status_code=409)


# Resource Exceptions
class ResourceNotFoundError(QuillException):
    """Resource not found."""
    def __init__(self, resource: str, id: Optional[str] = None):
        self.resource = resource
        self.resource_id = id
        if id is None:
            message = f"{resource} not found"
        else:
            message = f"{resource} with id {id} not found"
        super().__init__(message, status_code=404)


# Validation Exceptions
class ValidationError(QuillException):
    """Validation error."""
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


# Storage Exceptions
class StorageError(QuillException):
    """Object storage operation failed."""
    def __init__(self, operation: str, key: str, reason: str):
        self.operation = operation
        self.key = key
        super().__init__(f"Storage {operation} failed for {key}: {reason}", status_code=500)
