"""Load and validate orchestration for record forms."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from record_binding.binding_errors import BindingError
from record_binding.key_unflattening import unflatten
from record_binding.schema_management import (
    FlatForm,
    LoadErrors,
    TypeSchema,
    ValidationErrors,
    describe_record_type,
)

from .field_walker import apply

_LOGGER = logging.getLogger(__name__)


class ValidationError(BindingError):
    """Semantic error reported by a record's own validation."""


class LoadState(str, Enum):
    """Terminal states of a load that did not fail fatally."""

    FIELD_ERRORS = "field_errors"
    VALIDATED = "validated"


@dataclass(frozen=True)
class LoadOutcome:
    """Result of loading one form into one record."""

    state: LoadState
    load_errors: Mapping[str, Exception] = field(default_factory=dict)
    validation_errors: Mapping[str, Exception] = field(default_factory=dict)

    @property
    def is_clean(self) -> bool:
        """Return True when the record validated without errors."""
        return self.state is LoadState.VALIDATED and not self.validation_errors

    @property
    def errors(self) -> Mapping[str, Exception]:
        """Errors of whichever phase ended the load, for inline display."""
        if self.state is LoadState.FIELD_ERRORS:
            return self.load_errors
        return self.validation_errors


def bind_form(form: FlatForm, target: Any, schema: TypeSchema | None = None) -> LoadErrors:
    """Bind ``form`` into ``target`` without running validation.

    Loader types receive the raw form; every other type is unflattened and
    walked against its schema.
    """
    resolved = schema or describe_record_type(type(target))
    if resolved.is_loader:
        return dict(target.load_form(form) or {})
    return apply(resolved, unflatten(form), target)


def load_form(form: FlatForm, target: Any, schema: TypeSchema | None = None) -> LoadOutcome:
    """Bind ``form`` into ``target`` and validate it when binding was clean.

    Validation runs only when binding reported no field errors. Structural
    failures (``SchemaMismatchError``, ``KeyPathError`` or an exception raised
    by a Loader) propagate to the caller.
    """
    resolved = schema or describe_record_type(type(target))
    load_errors = bind_form(form, target, resolved)
    if load_errors:
        _LOGGER.debug("Load of %s stopped with %d field errors", resolved.name, len(load_errors))
        return LoadOutcome(state=LoadState.FIELD_ERRORS, load_errors=load_errors)

    validation_errors = _run_validation(target, resolved)
    _LOGGER.debug(
        "Load of %s validated with %d errors", resolved.name, len(validation_errors)
    )
    return LoadOutcome(state=LoadState.VALIDATED, validation_errors=validation_errors)


def _run_validation(target: Any, schema: TypeSchema) -> ValidationErrors:
    if not schema.is_validator:
        return {}
    reported = target.validate()
    if not reported:
        return {}
    return {path: _as_exception(error) for path, error in reported.items()}


def _as_exception(error: Exception | str) -> Exception:
    if isinstance(error, Exception):
        return error
    return ValidationError(str(error))
