"""
Custom exceptions package.
"""
from restaurant_app.exceptions.custom_exceptions import (
    AppError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    DuplicateError,
    DatabaseError,
    ConfigurationError
)

__all__ = [
    "AppError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "DuplicateError",
    "DatabaseError",
    "ConfigurationError"
]
