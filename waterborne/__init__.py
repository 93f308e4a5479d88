"""Waterborne disease assistant: symptom scoring and chat intent resolution."""

__version__ = "0.1.0"
