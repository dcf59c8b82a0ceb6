"""Value extraction exports."""

from .form_context import FormContext, empty_form_context, generate_form_context
from .value_extractor import (
    ExtractionError,
    create_empty_values,
    create_values,
    render_columns,
    render_scalar,
)

__all__ = [
    "ExtractionError",
    "FormContext",
    "create_empty_values",
    "create_values",
    "empty_form_context",
    "generate_form_context",
    "render_columns",
    "render_scalar",
]
