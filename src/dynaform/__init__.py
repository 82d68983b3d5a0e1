"""
dynaform - a declarative form engine.

Given a form schema (fields, visibility rules, option filters and
validation constraints) the engine keeps the value model of one form
interaction, re-evaluates what is visible and selectable on every change,
validates on submit and produces a result snapshot. Rendering is left to
the caller through the FormRenderer hooks.
"""

__version__ = "0.1.0"

from dynaform.schemas import (
    ActionSpec,
    FieldKind,
    FieldSpec,
    FormResult,
    FormSpec,
    Option,
    OptionVisibilityRule,
    ValidationRule,
    VisibilityRule,
)
from dynaform.runtime import (
    FormRenderer,
    FormSession,
    ResultFormatter,
    SchemaLoadError,
    SessionState,
    SessionStateError,
    ValidationReport,
    open_session,
    parse_form_spec,
)

__all__ = [
    "ActionSpec",
    "FieldKind",
    "FieldSpec",
    "FormResult",
    "FormSpec",
    "Option",
    "OptionVisibilityRule",
    "ValidationRule",
    "VisibilityRule",
    "FormRenderer",
    "FormSession",
    "ResultFormatter",
    "SchemaLoadError",
    "SessionState",
    "SessionStateError",
    "ValidationReport",
    "open_session",
    "parse_form_spec",
]
