#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the markextract library.

This module defines the exception classes raised at the library boundary.
Most failure modes inside the converter are deliberately *not* exceptions:
a missing or failing HTML parser degrades to plain-text extraction, and a
single rule raising while rendering a tag falls back to the tag's child
content. What remains is surfaced through the classes below.

Exception Hierarchy
-------------------
- MarkextractError (base exception)

  - ValidationError (empty or non-string input, invalid options)
    - ConfigurationError (unreadable or invalid configuration files)

  - ConversionError (any failure inside the conversion pipeline)

"""

from typing import Any


class MarkextractError(Exception):
    """Base exception class for all markextract-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(MarkextractError):
    """Exception raised for invalid input or options.

    Raised before any processing starts, e.g. when the HTML input is empty
    or not a string, or when an option has a value outside its allowed set.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class ConfigurationError(ValidationError):
    """Exception raised when a configuration file cannot be loaded.

    Parameters
    ----------
    message : str
        Description of the problem
    config_path : str, optional
        Path of the offending configuration file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, config_path: str | None = None, original_error: Exception | None = None):
        """Initialize the configuration error."""
        super().__init__(
            message, parameter_name="config", parameter_value=config_path, original_error=original_error
        )
        self.config_path = config_path


class ConversionError(MarkextractError):
    """Exception raised when the HTML to Markdown pipeline fails.

    The message always carries the original error's message so callers
    that only log ``str(error)`` still see the cause.

    Parameters
    ----------
    message : str
        Description of the conversion failure
    conversion_stage : str, optional
        Pipeline stage where the error occurred (``"preprocess"``,
        ``"parse"``, ``"convert"``, ``"postprocess"`` ...)
    original_error : Exception, optional
        The underlying exception

    Attributes
    ----------
    conversion_stage : str or None
        Where in the pipeline the error occurred

    """

    def __init__(self, message: str, conversion_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the conversion error."""
        super().__init__(message, original_error)
        self.conversion_stage = conversion_stage
