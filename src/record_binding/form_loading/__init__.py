"""Form loading exports."""

from .field_walker import SchemaMismatchError, allocate_if_absent, apply
from .load_orchestrator import (
    LoadOutcome,
    LoadState,
    ValidationError,
    bind_form,
    load_form,
)

__all__ = [
    "LoadOutcome",
    "LoadState",
    "SchemaMismatchError",
    "ValidationError",
    "allocate_if_absent",
    "apply",
    "bind_form",
    "load_form",
]
