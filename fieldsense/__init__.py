"""FieldSense - form field classification with runtime learning."""

__version__ = "0.1.0"
