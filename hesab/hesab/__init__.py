"""hesab - request-field validation for the hesab accounting backend."""

__version__ = "0.1.0"
