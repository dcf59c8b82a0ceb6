"""Root of the binding error hierarchy."""

from __future__ import annotations


class BindingError(Exception):
    """Base class for every error raised by the binding engine."""
