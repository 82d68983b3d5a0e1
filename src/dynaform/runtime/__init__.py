"""
Runtime components of the form engine.

1. Schema Loader - schema_loader
2. Visibility Evaluator - visibility
3. Option Filter Evaluator - option_filter
4. Validation Evaluator - validators
5. Form Session Controller - session (with action resolution in actions)
6. Result Formatter - result_formatter

The evaluators are pure functions of (rules, values). Only the session
holds mutable state.
"""

from dynaform.runtime.schema_loader import (
    SchemaLoadError,
    dump_form_spec,
    parse_form_spec,
)
from dynaform.runtime.visibility import VisibilityEvaluator, evaluate_visibility
from dynaform.runtime.option_filter import evaluate_option_filters, reselect
from dynaform.runtime.validators import ValidationReport, validate_all, validate_field
from dynaform.runtime.actions import ResolvedActions, resolve_actions
from dynaform.runtime.session import (
    FormRenderer,
    FormSession,
    SessionState,
    SessionStateError,
    open_session,
)
from dynaform.runtime.result_formatter import ResultFormatter

__all__ = [
    "SchemaLoadError",
    "dump_form_spec",
    "parse_form_spec",
    "VisibilityEvaluator",
    "evaluate_visibility",
    "evaluate_option_filters",
    "reselect",
    "ValidationReport",
    "validate_all",
    "validate_field",
    "ResolvedActions",
    "resolve_actions",
    "FormRenderer",
    "FormSession",
    "SessionState",
    "SessionStateError",
    "open_session",
    "ResultFormatter",
]
