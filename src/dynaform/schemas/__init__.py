"""Pydantic schemas for form definitions and results."""

from dynaform.schemas.field_kind import FieldKind
from dynaform.schemas.form_spec import (
    ActionSpec,
    FieldSpec,
    FormSpec,
    Option,
    OptionVisibilityRule,
    SizeSpec,
    ValidationRule,
    VisibilityRule,
)
from dynaform.schemas.form_result import FormResult

__all__ = [
    "FieldKind",
    "ActionSpec",
    "FieldSpec",
    "FormSpec",
    "Option",
    "OptionVisibilityRule",
    "SizeSpec",
    "ValidationRule",
    "VisibilityRule",
    "FormResult",
]
