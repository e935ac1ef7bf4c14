"""
Templar exception hierarchy.

Storage, compile and render failures are all ``TemplateError`` subclasses so a
host can catch the family at once, or map each kind to its own response.
"""

import traceback
from typing import Any, Dict


class TemplarError(Exception):
    """Base exception for Templar"""
    pass


class ConfigurationError(TemplarError):
    """Raised when the configuration is invalid"""
    pass


class TemplateError(TemplarError):
    """Base exception for template errors"""

    def __init__(self, message: str, template_name: str = None, line_number: int = None):
        self.message = message
        self.template_name = template_name
        self.line_number = line_number
        super().__init__(f"{message}" + (f" in {template_name}:{line_number}" if template_name and line_number else ""))


class StorageError(TemplateError):
    """Template source could not be read from storage"""

    def __init__(self, message: str, path: str = None, template_name: str = None):
        self.path = path
        super().__init__(message, template_name=template_name)


class TemplateNotFoundError(StorageError):
    """Template source does not exist in storage"""
    pass


class CompileError(TemplateError):
    """Template source could not be turned into an executable form"""
    pass


class RenderError(TemplateError):
    """Failure while executing a compiled template"""
    pass


def error_model(exc: BaseException, title: str = None) -> Dict[str, Any]:
    """Build the model the bundled error page expects from an exception."""
    model: Dict[str, Any] = {
        "title": title or ("Template Not Found" if isinstance(exc, TemplateNotFoundError) else "Internal Error"),
        "message": getattr(exc, "message", None) or str(exc) or exc.__class__.__name__,
        "exception_type": f"{exc.__class__.__module__}.{exc.__class__.__qualname__}",
        "template_name": getattr(exc, "template_name", None),
        "line_number": getattr(exc, "line_number", None),
        "stacktrace": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    }
    return model


__all__ = [
    'TemplarError', 'ConfigurationError', 'TemplateError', 'StorageError',
    'TemplateNotFoundError', 'CompileError', 'RenderError', 'error_model'
]
