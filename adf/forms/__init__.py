"""Form schemas, state loading and submission validation."""

from __future__ import annotations

from .schemas import ORGANIZATION, PARTICIPANT, PERSONAL, SCHEMAS, FieldSpec, FormSchema, get_schema
from .state import build_desired_state, form_state_from_dict, form_state_to_dict, load_form_state
from .validation import FieldError, ValidationError, ensure_valid, validate_submission

__all__ = [
    "FieldError",
    "FieldSpec",
    "FormSchema",
    "ORGANIZATION",
    "PARTICIPANT",
    "PERSONAL",
    "SCHEMAS",
    "ValidationError",
    "build_desired_state",
    "ensure_valid",
    "form_state_from_dict",
    "form_state_to_dict",
    "get_schema",
    "load_form_state",
    "validate_submission",
]
